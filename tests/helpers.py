"""Shared test helpers."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from ccls_status.core.config import Configuration
from ccls_status.project import Workspace
from ccls_status.status.target import TargetResolver


class FakeSurface:
    """Status surface that records every call."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.text = ""
        self.tooltip = ""
        self.color = ""
        self.shown = False
        self.dispose_count = 0

    def set_text(self, text: str) -> None:
        self.calls.append(("text", text))
        self.text = text

    def set_tooltip(self, text: str) -> None:
        self.calls.append(("tooltip", text))
        self.tooltip = text

    def set_color(self, color: str) -> None:
        self.calls.append(("color", color))
        self.color = color

    def show(self) -> None:
        self.calls.append(("show",))
        self.shown = True

    def dispose(self) -> None:
        self.dispose_count += 1

    def texts(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == "text"]


class FakeLogSurface:
    def __init__(self) -> None:
        self.reveal_count = 0

    def reveal(self) -> None:
        self.reveal_count += 1


class FakeClient:
    """RPC client returning queued results; exceptions in the queue are raised."""

    def __init__(self, *results: Any) -> None:
        self.results = list(results)
        self.requests: List[tuple] = []
        self.gate: Optional[asyncio.Event] = None

    async def send_request(self, method: str, params: Any = None) -> Any:
        self.requests.append((method, params))
        if self.gate is not None:
            await self.gate.wait()
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, BaseException):
            raise result
        return result


class StaticConfig:
    def __init__(self, ccls: Optional[Dict[str, Any]] = None) -> None:
        self.ccls = ccls or {}

    def get_configuration(self, section: str, *, fresh: bool = False) -> Configuration:
        return Configuration(section, self.ccls if section == "ccls" else {})


def make_resolver(folders: Sequence[str] = (), db_dir: Optional[str] = None) -> TargetResolver:
    ccls: Dict[str, Any] = {}
    if db_dir is not None:
        ccls = {"misc": {"compilationDatabaseDirectory": db_dir}}
    return TargetResolver(StaticConfig(ccls), Workspace(folders=list(folders)))


INFO = {
    "db": {"files": 10, "funcs": 20, "types": 5, "vars": 3},
    "pipeline": {"lastIdle": 1, "completed": 4, "enqueued": 4},
    "project": {"entries": 2},
}
