"""Status and diagnostic-log surfaces.

A status surface is a generic status-indicator sink; the monitor only ever
sets its text, tooltip and color, shows it and disposes it. A log surface
is revealed once per error streak so the user can look at the details.
"""

from __future__ import annotations

from typing import Optional, Protocol

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..util.log import Log


class StatusSurface(Protocol):
    def set_text(self, text: str) -> None: ...

    def set_tooltip(self, text: str) -> None: ...

    def set_color(self, color: str) -> None: ...

    def show(self) -> None: ...

    def dispose(self) -> None: ...


class LogSurface(Protocol):
    def reveal(self) -> None: ...


class ConsoleStatusSurface:
    """Prints the status line to a rich console whenever it changes."""

    def __init__(self, console: Optional[Console] = None, *, verbose: bool = False) -> None:
        self.console = console or Console(stderr=True)
        self.verbose = verbose
        self.text = ""
        self.tooltip = ""
        self.color = ""
        self.visible = False
        self.disposed = False

    def set_text(self, text: str) -> None:
        self.text = text
        self._print()

    def set_tooltip(self, text: str) -> None:
        self.tooltip = text
        if self.verbose:
            self._print_detail()

    def set_color(self, color: str) -> None:
        self.color = color

    def show(self) -> None:
        self.visible = True
        self._print()

    def dispose(self) -> None:
        self.visible = False
        self.disposed = True

    def _print(self) -> None:
        if not self.visible or self.disposed:
            return
        self.console.print(Text(self.text, style=self.color or ""))

    def _print_detail(self) -> None:
        if not self.visible or self.disposed or not self.tooltip:
            return
        self.console.print(Text(self.tooltip, style="dim"))


class ConsoleLogSurface:
    """Shows the tail of the current log file in a panel."""

    def __init__(self, console: Optional[Console] = None, *, lines: int = 20) -> None:
        self.console = console or Console(stderr=True)
        self.lines = lines
        self.reveal_count = 0

    def reveal(self) -> None:
        self.reveal_count += 1
        path = Log.file()
        tail = Log.tail(self.lines)
        body = Text("\n".join(tail)) if tail else Text("(no log output)", style="dim")
        title = f"ccls-status log: {path}" if path else "ccls-status log"
        self.console.print(Panel(body, title=title, border_style="red"))
