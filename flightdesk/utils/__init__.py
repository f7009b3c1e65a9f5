"""Configuration and logging helpers."""

from .config import AppConfig, configure_logging, get_config, load_config, reset_config

__all__ = ['AppConfig', 'configure_logging', 'get_config', 'load_config', 'reset_config']
