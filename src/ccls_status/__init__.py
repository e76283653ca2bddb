"""ccls-status - status monitor for the ccls indexing backend.

Polls ``$ccls/info`` on a timer and publishes a one-line job summary
plus a detail tooltip to a status surface.
"""

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy import module components."""
    if name in ("StatusMonitor", "StatusSnapshot", "Severity", "InfoResponse", "TargetResolver"):
        from . import status
        return getattr(status, name)
    if name in ("Config", "ConfigManager", "Configuration", "GlobalPath"):
        from . import core
        return getattr(core, name)
    if name == "Workspace":
        from .project import Workspace
        return Workspace
    if name == "Log":
        from .util.log import Log
        return Log
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "StatusMonitor",
    "StatusSnapshot",
    "Severity",
    "InfoResponse",
    "TargetResolver",
    "Config",
    "ConfigManager",
    "Configuration",
    "GlobalPath",
    "Workspace",
    "Log",
]
