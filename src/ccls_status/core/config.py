"""Configuration management.

Loads and merges configuration from multiple sources with proper precedence
and exposes editor-style section views (``get_configuration("ccls")``).
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

from pydantic import ValidationError

from .config_loader import deep_merge, expand_dotted, load_json_file, read_json_file
from .config_schema import CclsConfig, Config, LoggingConfig, MiscConfig
from .global_paths import GlobalPath
from ..util.log import Log

log = Log.create({"service": "config"})

__all__ = [
    "CclsConfig",
    "Config",
    "ConfigError",
    "ConfigManager",
    "Configuration",
    "LoggingConfig",
    "MiscConfig",
]

CONFIG_FILENAMES = ("ccls-status.json", "ccls-status.jsonc")
CONFIG_CONTENT_ENV = "CCLS_STATUS_CONFIG_CONTENT"


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Config error in {path}: {message}")


class Configuration:
    """Read-only view of one configuration section.

    Keys may be dotted to reach nested values, so
    ``get("misc.compilationDatabaseDirectory")`` reads
    ``section["misc"]["compilationDatabaseDirectory"]``.
    """

    def __init__(self, section: str, data: Dict[str, Any]):
        self.section = section
        self._data = data

    def get(self, key: str, default: Any = None) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def has(self, key: str) -> bool:
        marker = object()
        return self.get(key, marker) is not marker

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)


class ConfigManager:
    """Configuration for one workspace directory.

    Sources, lowest precedence first:
    1. Global config (``ccls-status.json`` in the user config dir)
    2. Workspace ``.vscode/settings.json`` (dotted editor keys)
    3. Workspace ``ccls-status.json``
    4. Extra files passed explicitly (``--config``)
    5. ``CCLS_STATUS_CONFIG_CONTENT`` environment variable
    6. Overrides given to the constructor (command line flags)
    """

    def __init__(
        self,
        directory: str = ".",
        files: Sequence[str] = (),
        overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.directory = str(Path(directory).resolve())
        self.files = list(files)
        self.overrides = overrides or {}
        self._cache: Optional[Config] = None
        self._sources: List[str] = []

    def reset(self) -> None:
        """Drop cached configuration; the next read reloads every source."""
        self._cache = None
        self._sources = []

    def get(self) -> Config:
        if self._cache is None:
            return self.load()
        return self._cache

    def sources(self) -> List[str]:
        """Files that contributed to the loaded configuration."""
        return self._sources.copy()

    def get_configuration(self, section: str, *, fresh: bool = False) -> Configuration:
        """Section view; ``fresh`` rereads every source instead of the cache."""
        config = self.load() if fresh else self.get()
        data = config.model_dump(by_alias=True, exclude_none=True)
        value = data.get(section)
        return Configuration(section, value if isinstance(value, dict) else {})

    def load(self) -> Config:
        result: Dict[str, Any] = {}
        sources: List[str] = []

        def merge(filepath: str, data: Dict[str, Any], kind: str) -> None:
            nonlocal result
            if not data:
                return
            result = deep_merge(result, expand_dotted(data))
            sources.append(filepath)
            log.debug(f"loaded {kind} config", {"path": filepath})

        for filename in CONFIG_FILENAMES:
            filepath = os.path.join(GlobalPath.config(), filename)
            merge(filepath, load_json_file(filepath), "global")

        settings = os.path.join(self.directory, ".vscode", "settings.json")
        merge(settings, _ccls_only(load_json_file(settings)), "editor")

        for filename in CONFIG_FILENAMES:
            filepath = os.path.join(self.directory, filename)
            merge(filepath, load_json_file(filepath), "workspace")

        for filepath in self.files:
            try:
                data = read_json_file(filepath)
            except (OSError, ValueError, UnicodeDecodeError) as e:
                raise ConfigError(filepath, str(e)) from e
            merge(filepath, data, "explicit")

        env_config = os.environ.get(CONFIG_CONTENT_ENV)
        if env_config:
            try:
                data = json.loads(env_config)
            except json.JSONDecodeError:
                log.error(f"failed to parse {CONFIG_CONTENT_ENV}")
            else:
                if isinstance(data, dict):
                    merge(CONFIG_CONTENT_ENV, data, "environment")

        merge("<overrides>", self.overrides, "override")

        try:
            config = Config.model_validate(result)
        except ValidationError as e:
            raise ConfigError(", ".join(sources) or "<defaults>", str(e)) from e

        self._sources = sources
        self._cache = config
        return config


def _ccls_only(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the ``ccls`` keys of an editor settings file."""
    return {
        key: value
        for key, value in settings.items()
        if key == "ccls" or key.startswith("ccls.")
    }
