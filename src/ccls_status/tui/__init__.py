"""Textual surfaces for the status monitor."""

from .widgets import StatusIndicator

__all__ = ["StatusIndicator"]
