"""
Environment configuration loader with validation for the booking engine.
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from rich.logging import RichHandler

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class AppConfig(BaseModel):
    """Configuration model for the booking engine with validation."""

    # Database Configuration
    database_url: Optional[str] = Field(
        default=None, description="Database connection URL (built from DB_* variables when unset)"
    )
    db_lock_timeout: int = Field(
        default=30, ge=1, description="Seconds to wait for a flight lock before failing"
    )

    # Application Configuration
    app_debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    default_replacement_threshold: float = Field(
        default=50.0, ge=0.0, le=100.0,
        description="Free-seat percentage at which a flight becomes a replacement candidate",
    )

    # API Server
    api_host: str = Field(default="127.0.0.1", description="API bind address")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")
        return v.upper()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes", "on")


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        AppConfig: Validated configuration object

    Raises:
        ValueError: If configuration is invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    config_data: Dict[str, Any] = {
        "database_url": os.getenv("DATABASE_URL") or None,
        "db_lock_timeout": int(os.getenv("DB_LOCK_TIMEOUT", "30")),
        "app_debug": _env_flag("APP_DEBUG", "false"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "default_replacement_threshold": float(
            os.getenv("DEFAULT_REPLACEMENT_THRESHOLD", "50")
        ),
        "api_host": os.getenv("API_HOST", "127.0.0.1"),
        "api_port": int(os.getenv("API_PORT", "8000")),
    }

    try:
        return AppConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")


def configure_logging(level: str = "INFO", rich_output: bool = False) -> None:
    """
    Configure root logging once for the process.

    Args:
        level: Standard logging level name
        rich_output: Render through rich (used by the CLI)
    """
    handlers = [RichHandler(rich_tracebacks=True, show_path=False)] if rich_output else None
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s" if rich_output else "%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        AppConfig: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
        logger.debug(f"Configuration loaded (log level {_config.log_level})")
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next call reloads it."""
    global _config
    _config = None
