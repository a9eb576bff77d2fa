import logging
import os
from pathlib import Path
from typing import Literal, Optional, Type

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # App Settings
    app_name: str = Field(default="tgbot", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Optional[Path] = Field(
        default=None, description="Optional path of a rotating log file"
    )

    # Telegram Settings
    telegram_bot_token: str = Field(
        ..., description="Telegram bot token from BotFather"
    )
    telegram_api_base_url: str = Field(
        default="https://api.telegram.org", description="Telegram Bot API base URL"
    )
    telegram_connect_timeout: float = Field(
        default=30, description="Connection timeout for Telegram API calls in seconds"
    )
    telegram_read_timeout: float = Field(
        default=30, description="Read timeout for Telegram API calls in seconds"
    )

    @field_validator("telegram_bot_token")
    @classmethod
    def validate_telegram_token(cls, v: str) -> str:
        if not v or len(v) < 10:
            raise ValueError("Telegram bot token must be provided and valid")
        return v

    @field_validator("telegram_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("telegram_connect_timeout", "telegram_read_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v

    def get_summary(self) -> dict:
        """Get a summary of configuration (excluding sensitive data)"""
        sensitive_fields = {"telegram_bot_token"}

        summary = {}
        for field_name, field_value in self.model_dump().items():
            if field_name in sensitive_fields:
                summary[field_name] = "***HIDDEN***" if field_value else "NOT SET"
            else:
                summary[field_name] = field_value

        return summary


class DevelopmentConfig(BaseConfig):
    """Development environment configuration"""

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "DEBUG"


class ProductionConfig(BaseConfig):
    """Production environment configuration"""

    model_config = SettingsConfigDict(
        env_file=".env.prod",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("telegram_api_base_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        if not v.startswith("https://"):
            raise ValueError("Telegram API base URL must use HTTPS in production")
        return v.rstrip("/")


class TestConfig(BaseConfig):
    """Test environment configuration"""

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "DEBUG"

    # Override required fields for testing
    telegram_bot_token: str = "123456789:ABCdefGHIjklMNOpqrsTUVwxyz"


# Configuration Error Class
class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails"""

    pass


# Configuration mapping
CONFIG_CLASSES = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "test": TestConfig,
}


def load_config(
    environment: Optional[str] = None, config_class: Optional[Type[BaseConfig]] = None
) -> BaseConfig:
    """Load configuration based on environment or explicit config class."""

    if config_class:
        selected_config_class = config_class
        source = f"explicit class {config_class.__name__}"
    elif environment:
        selected_config_class = CONFIG_CLASSES.get(environment)
        if not selected_config_class:
            raise ConfigurationError(f"Unknown environment: {environment}")
        source = f"environment parameter '{environment}'"
    else:
        env_name = os.getenv("ENVIRONMENT", "development").lower()
        selected_config_class = CONFIG_CLASSES.get(env_name, DevelopmentConfig)
        source = f"ENVIRONMENT variable '{env_name}'"

    try:
        config = selected_config_class()
        logging.info(f"Configuration loaded successfully from {source}")
        return config

    except ValidationError as e:
        error_msg = f"Configuration validation failed when loading from {source}"
        logging.error(f"{error_msg}: {e}")
        raise ConfigurationError(f"{error_msg}. Details: {e}")


# Global configuration instance
_config: Optional[BaseConfig] = None


def get_config() -> BaseConfig:
    """Get the global configuration instance, loading it if necessary"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config():
    """Reset the global configuration (useful for testing)"""
    global _config
    _config = None
