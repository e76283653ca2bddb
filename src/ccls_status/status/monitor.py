"""Periodic ``$ccls/info`` poller.

The monitor owns one timer task and one status surface. Each tick sends a
single info request; the outcome is rendered as a snapshot. A failure
streak is reported once: the first failure shows the error and reveals the
log surface, later failures are absorbed until a poll succeeds again.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Protocol

from ..core.config import ConfigManager
from ..project.workspace import Workspace
from ..util.error import format_error
from ..util.log import Log
from .models import InfoResponse, StatusSnapshot
from .render import error_snapshot, info_snapshot, loading_snapshot
from .surface import LogSurface, StatusSurface
from .target import TargetResolver

log = Log.create({"service": "status.monitor"})

INFO_METHOD = "$ccls/info"


class InfoClient(Protocol):
    """The part of the RPC client the monitor needs."""

    async def send_request(self, method: str, params: Any = None) -> Any: ...


class InvalidResponseError(Exception):
    """The backend answered with something that is not an info object."""


class StatusMonitor:
    """Polls the backend and keeps the status surface current.

    Ticks are fixed-rate. A tick that fires while the previous request is
    still pending is skipped, and a direct ``poll()`` call joins the pending
    request, so at most one request is in flight and snapshots are never
    written out of order.
    """

    def __init__(
        self,
        client: InfoClient,
        surface: StatusSurface,
        log_surface: LogSurface,
        resolver: TargetResolver,
        *,
        update_interval: float = 2.0,
        autostart: bool = True,
    ) -> None:
        self.client = client
        self.surface = surface
        self.log_surface = log_surface
        self.resolver = resolver
        self.update_interval = update_interval
        self.last_poll_was_error = False
        self._timer: Optional[asyncio.Task[None]] = None
        self._inflight: Optional[asyncio.Task[Optional[StatusSnapshot]]] = None
        self._disposed = False
        self._snapshot = loading_snapshot()

        self._apply(self._snapshot)
        self.surface.show()

        if autostart:
            self.start(update_interval)

    @classmethod
    def for_workspace(
        cls,
        client: InfoClient,
        surface: StatusSurface,
        log_surface: LogSurface,
        config: ConfigManager,
        workspace: Workspace,
        **kwargs: Any,
    ) -> "StatusMonitor":
        """Build a monitor polling at the configured ``ccls.statusUpdateInterval``."""
        interval_ms = config.get().ccls.status_update_interval
        return cls(
            client,
            surface,
            log_surface,
            TargetResolver(config, workspace),
            update_interval=interval_ms / 1000,
            **kwargs,
        )

    @property
    def snapshot(self) -> StatusSnapshot:
        """The snapshot currently on the surface."""
        return self._snapshot

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def start(self, interval: Optional[float] = None) -> None:
        """Begin polling every ``interval`` seconds, first poll after one interval."""
        if self._disposed:
            log.warn("start called on disposed monitor")
            return
        if self.running:
            log.debug("monitor already running")
            return
        if interval is not None:
            if interval <= 0:
                raise ValueError("update interval must be positive")
            self.update_interval = interval

        self._timer = asyncio.get_running_loop().create_task(self._run())
        log.info("status monitor started", {"interval": self.update_interval})

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.update_interval)
            if self._inflight is not None and not self._inflight.done():
                log.debug("info request still pending, skipping tick")
                continue
            self._spawn()

    def _spawn(self) -> asyncio.Task[Optional[StatusSnapshot]]:
        task = asyncio.get_running_loop().create_task(self._poll_once())
        task.add_done_callback(self._poll_done)
        self._inflight = task
        return task

    def _poll_done(self, task: asyncio.Task[Optional[StatusSnapshot]]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log.error("status poll crashed", {"error": error})

    async def poll(self) -> Optional[StatusSnapshot]:
        """Run one poll cycle, or join the one already in flight.

        Returns the snapshot that was published, or None when nothing was
        rendered (repeat failure, or the monitor was disposed meanwhile).
        Cancelling the caller does not cancel the shared request.
        """
        task = self._inflight
        if task is None or task.done():
            task = self._spawn()
        return await asyncio.shield(task)

    async def _poll_once(self) -> Optional[StatusSnapshot]:
        try:
            result = await self.client.send_request(INFO_METHOD)
            if not isinstance(result, dict):
                raise InvalidResponseError(f"invalid {INFO_METHOD} response")
            info = InfoResponse.model_validate(result)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return self._on_failure(e)
        return self._on_success(info)

    def _on_success(self, info: InfoResponse) -> Optional[StatusSnapshot]:
        if self._disposed:
            return None
        if self.last_poll_was_error:
            log.info("info request recovered")
        self.last_poll_was_error = False

        snapshot = info_snapshot(info, self.resolver.resolve_label())
        self._publish(snapshot)
        return snapshot

    def _on_failure(self, error: Exception) -> Optional[StatusSnapshot]:
        if self._disposed:
            return None
        if self.last_poll_was_error:
            log.debug("info request failed again", {"error": error})
            return None
        self.last_poll_was_error = True

        log.error("info request failed", {"error": error})
        snapshot = error_snapshot(format_error(error))
        self._publish(snapshot)
        self.log_surface.reveal()
        return snapshot

    def _publish(self, snapshot: StatusSnapshot) -> None:
        self._snapshot = snapshot
        self._apply(snapshot)

    def _apply(self, snapshot: StatusSnapshot) -> None:
        self.surface.set_color(snapshot.severity.color)
        self.surface.set_tooltip(snapshot.detail)
        self.surface.set_text(snapshot.title)

    def dispose(self) -> None:
        """Stop polling and release the surface. Safe to call repeatedly."""
        if self._disposed:
            return
        self._disposed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.surface.dispose()
        log.info("status monitor disposed")
