"""Core configuration and path modules."""

from .config import Config, ConfigError, ConfigManager, Configuration
from .global_paths import GlobalPath

__all__ = ["Config", "ConfigError", "ConfigManager", "Configuration", "GlobalPath"]
