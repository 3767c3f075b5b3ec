"""
Config loading and saving.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from kachina.config.schema import ClientConfig
from kachina.errors import ConfigurationError


DEFAULT_CONFIG_PATH = Path("~/.kachina/config.json").expanduser()


def load_config(path: Path | None = None) -> ClientConfig:
    """
    Load configuration from JSON file.

    Args:
        path: Config file path. Defaults to ~/.kachina/config.json

    Returns:
        Validated ClientConfig object.

    Raises:
        ConfigurationError: if the file is not valid JSON or fails validation.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    if not path.exists():
        return ClientConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return ClientConfig(**data)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path}: invalid JSON ({e})") from e
    except ValidationError as e:
        raise ConfigurationError(f"{path}: {e}") from e


def save_config(config: ClientConfig, path: Path | None = None) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: ClientConfig object to save
        path: Config file path. Defaults to ~/.kachina/config.json
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(mode="json"), f, indent=2)
