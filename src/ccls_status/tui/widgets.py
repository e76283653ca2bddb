"""Textual status indicator for the ccls job summary."""

from rich.text import Text
from textual.widgets import Static

from ..status.models import StatusSnapshot


class StatusIndicator(Static):
    """One-line ccls status, docked to the bottom right of a screen.

    Implements the status surface interface so a ``StatusMonitor`` can drive
    it directly; the detail text becomes the widget tooltip.
    """

    DEFAULT_CSS = """
    StatusIndicator {
        height: 1;
        width: auto;
        dock: bottom;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.status_text = ""
        self.detail = ""
        self.color = ""
        self.visible_status = False
        self.disposed = False

    def set_text(self, text: str) -> None:
        self.status_text = text
        self._update()

    def set_tooltip(self, text: str) -> None:
        self.detail = text
        if not self.disposed:
            self.tooltip = text or None

    def set_color(self, color: str) -> None:
        self.color = color
        self._update()

    def show(self) -> None:
        self.visible_status = True
        self._update()

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self.visible_status = False
        if self.parent is not None:
            self.remove()

    def apply_snapshot(self, snapshot: StatusSnapshot) -> None:
        """Show a snapshot without going through a monitor."""
        self.set_color(snapshot.severity.color)
        self.set_tooltip(snapshot.detail)
        self.set_text(snapshot.title)

    def _update(self) -> None:
        if not self.disposed:
            self.refresh()

    def render(self) -> Text:
        if not self.visible_status:
            return Text()
        return Text(self.status_text, style=self.color, no_wrap=True, overflow="ellipsis")
