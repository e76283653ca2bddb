"""Status polling, rendering and target label resolution."""

from .models import InfoResponse, Severity, StatusSnapshot
from .monitor import INFO_METHOD, InfoClient, StatusMonitor
from .surface import ConsoleLogSurface, ConsoleStatusSurface, LogSurface, StatusSurface
from .target import TargetResolver, extract_label

__all__ = [
    "INFO_METHOD",
    "InfoClient",
    "InfoResponse",
    "Severity",
    "StatusSnapshot",
    "StatusMonitor",
    "StatusSurface",
    "LogSurface",
    "ConsoleStatusSurface",
    "ConsoleLogSurface",
    "TargetResolver",
    "extract_label",
]
