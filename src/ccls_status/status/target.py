"""Target label resolution.

Build setups often keep one ``compile_commands_<target>.json`` per build
configuration and point ``compile_commands.json`` at the active one with a
symlink. The label is the ``<target>`` part of the symlink's destination.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

from ..core.config import ConfigError, Configuration
from ..project.workspace import Workspace
from ..util.log import Log

log = Log.create({"service": "status.target"})

CONFIG_SECTION = "ccls"
DATABASE_DIRECTORY_KEY = "misc.compilationDatabaseDirectory"
DATABASE_FILENAME = "compile_commands.json"
LABEL_PREFIX = "compile_commands_"


class ConfigSource(Protocol):
    def get_configuration(self, section: str, *, fresh: bool = False) -> Configuration: ...


def extract_label(path: str | Path) -> str:
    """Label embedded in a compilation database file name, or ""."""
    name = Path(path).stem
    if not name.startswith(LABEL_PREFIX):
        return ""
    return name[len(LABEL_PREFIX):].upper()


class TargetResolver:
    """Derives the active target label from config and workspace folders.

    Both sources are read on every call, so edits to either take effect on
    the next poll.
    """

    def __init__(self, config: ConfigSource, workspace: Workspace):
        self.config = config
        self.workspace = workspace

    def database_directory(self) -> Optional[Path]:
        """Directory expected to hold ``compile_commands.json``.

        A non-empty configured directory always wins over the workspace
        folder. Relative configured paths are taken from the workspace folder.
        """
        root = self.workspace.first
        configured = self.config.get_configuration(CONFIG_SECTION, fresh=True).get(DATABASE_DIRECTORY_KEY)
        if isinstance(configured, str) and configured:
            directory = Path(configured).expanduser()
            if not directory.is_absolute() and root:
                directory = Path(root) / directory
            return directory
        if root:
            return Path(root)
        return None

    def database_path(self) -> Optional[Path]:
        directory = self.database_directory()
        if directory is None:
            return None
        return directory / DATABASE_FILENAME

    def resolve_label(self) -> str:
        try:
            db_path = self.database_path()
        except ConfigError as e:
            log.warn("cannot read ccls configuration", {"error": e})
            return ""
        if db_path is None:
            return ""

        try:
            real_path = db_path.resolve(strict=True)
        except (OSError, RuntimeError, ValueError) as e:
            log.warn("cannot resolve compilation database", {"path": str(db_path), "error": e})
            return ""

        return extract_label(real_path)
