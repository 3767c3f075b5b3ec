"""Configuration management."""

from kachina.config.schema import ClientConfig, ReconnectConfig, StickerConfig
from kachina.config.loader import load_config, save_config

__all__ = ["ClientConfig", "ReconnectConfig", "StickerConfig", "load_config", "save_config"]
