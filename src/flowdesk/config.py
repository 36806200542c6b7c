"""Configuration management for flowdesk.

This module provides typed configuration classes using pydantic-settings.
Configuration is loaded from environment variables with optional .env file support.
"""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "FlowdeskConfig",
    "MongoSettings",
    "RedisSettings",
]


class RedisSettings(BaseSettings):
    """Redis key/value store settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWDESK_REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = "redis://localhost:6379/0"
    key_prefix: str = ""


class MongoSettings(BaseSettings):
    """MongoDB connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWDESK_MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uri: SecretStr = SecretStr("mongodb://localhost:27017")
    database: str = "flowdesk"
    collection_prefix: str = ""


class FlowdeskConfig(BaseSettings):
    """Main configuration aggregating all settings.

    Example usage:
        config = FlowdeskConfig()
        backend = await open_backend(config)
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOWDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: Literal["memory", "redis", "mongo"] = "memory"

    redis: RedisSettings = RedisSettings()
    mongo: MongoSettings = MongoSettings()

    # Embed snippets point at {widget_base_url}/{widget_id}
    widget_base_url: str = "https://feedflow.app/widget"

    log_json: bool = False
    log_level: str = "INFO"
