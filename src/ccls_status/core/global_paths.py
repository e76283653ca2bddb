"""Platform directory paths for ccls-status.

Log files and the global config file live in the per-user directories
reported by platformdirs.
"""

from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "ccls-status"


class GlobalPath:
    """Global path management for ccls-status directories."""

    @classmethod
    def data(cls) -> str:
        """Application data directory."""
        return user_data_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        """Log file directory."""
        return str(Path(cls.data()) / "log")

    @classmethod
    def config(cls) -> str:
        """Configuration directory."""
        return user_config_dir(APP_NAME)
