"""
Configuration schema using Pydantic v2.
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kachina.errors import ConfigurationError


class ReconnectConfig(BaseModel):
    """
    Reconnect policy for non-logout disconnects.

    max_attempts = 0 retries forever; delays grow exponentially from
    base_delay_s and are capped at max_delay_s.
    """

    max_attempts: int = Field(default=0, ge=0)
    base_delay_s: float = Field(default=1.0, ge=0)
    max_delay_s: float = Field(default=30.0, ge=0)

    def delay_for(self, attempt: int) -> float:
        """Backoff before the given (1-based) attempt."""
        return min(self.base_delay_s * 2 ** max(attempt - 1, 0), self.max_delay_s)

    def exhausted(self, attempt: int) -> bool:
        return self.max_attempts > 0 and attempt > self.max_attempts


class StickerConfig(BaseModel):
    """Default sticker pack metadata."""

    pack: str = "Sticker"
    author: str = "Kachina Bot"
    quality: int = Field(default=50, ge=1, le=100)


class ClientConfig(BaseSettings):
    """
    Root configuration.

    Loads from ~/.kachina/config.json and environment variables
    with KACHINA_ prefix.
    """

    session_id: str = "kachina-session"
    phone_number: str = ""
    login_method: Literal["qr", "pairing"] = "qr"
    browser: tuple[str, str, str] = ("Kachina-MD", "Chrome", "1.0.0")
    prefix: str = "!"
    owners: list[str] = Field(default_factory=list)
    plugins_dir: Path | None = None
    database_path: Path = Path("./database")
    pairing_delay_s: float = 3.0
    transport: str = ""  # module:attribute of a TransportFactory
    log_level: str = "INFO"
    reconnect: ReconnectConfig = Field(default_factory=ReconnectConfig)
    sticker: StickerConfig = Field(default_factory=StickerConfig)

    model_config = SettingsConfigDict(
        env_prefix="KACHINA_",
        env_nested_delimiter="__",
    )

    @field_validator("owners", mode="before")
    @classmethod
    def coerce_owners(cls, v):
        """Accept a single owner as a plain string."""
        if v is None:
            return []
        if isinstance(v, (str, int)):
            return [str(v)]
        return [str(owner) for owner in v]

    @field_validator("prefix")
    @classmethod
    def non_empty_prefix(cls, v: str) -> str:
        if not v:
            raise ValueError("prefix must not be empty")
        return v

    def pairing_number(self) -> str:
        """
        Phone number for pairing-code login, digits only.

        Raises:
            ConfigurationError: if the number is missing or too short.
        """
        if not self.phone_number:
            raise ConfigurationError(
                'Phone number is required for pairing method. Example: phone_number="628123456789"'
            )
        number = re.sub(r"[^0-9]", "", self.phone_number)
        if len(number) < 10:
            raise ConfigurationError(
                "Invalid phone number format. Use country code without +. Example: 628123456789"
            )
        return number
