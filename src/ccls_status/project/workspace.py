"""Workspace folder discovery."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from ..util.log import Log

log = Log.create({"service": "workspace"})

ROOT_MARKERS = (".ccls", "compile_commands.json", ".git")


def _find_root(start: Path) -> Optional[Path]:
    """Walk up from start to the nearest directory holding a root marker."""
    for current in (start, *start.parents):
        if any((current / marker).exists() for marker in ROOT_MARKERS):
            return current
    return None


@dataclass
class Workspace:
    """Ordered workspace folders. Only the first one is ever consulted."""

    folders: List[str] = field(default_factory=list)

    @classmethod
    def from_paths(cls, paths: Sequence[str]) -> "Workspace":
        return cls(folders=[str(Path(p).expanduser().resolve()) for p in paths])

    @classmethod
    def discover(cls, directory: str = ".") -> "Workspace":
        """Use the project root above ``directory``, or the directory itself."""
        start = Path(directory).expanduser().resolve()
        root = _find_root(start) or start
        log.debug("discovered workspace", {"directory": str(start), "root": str(root)})
        return cls(folders=[str(root)])

    @property
    def first(self) -> Optional[str]:
        return self.folders[0] if self.folders else None
