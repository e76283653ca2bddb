from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from ccls_status.status.models import Severity
from ccls_status.status.monitor import INFO_METHOD, StatusMonitor
from tests.helpers import INFO, FakeClient, FakeLogSurface, FakeSurface, make_resolver


def _monitor(client: FakeClient, surface: FakeSurface, log_surface: FakeLogSurface, resolver=None, **kwargs) -> StatusMonitor:
    return StatusMonitor(
        client,
        surface,
        log_surface,
        resolver or make_resolver(),
        autostart=kwargs.pop("autostart", False),
        **kwargs,
    )


def test_construction_shows_loading_placeholder() -> None:
    surface = FakeSurface()
    monitor = _monitor(FakeClient(INFO), surface, FakeLogSurface())

    assert surface.text == "ccls: loading"
    assert surface.tooltip == "ccls is starting / loading project metadata"
    assert surface.shown is True
    assert monitor.snapshot.severity is Severity.NORMAL
    assert monitor.running is False


@pytest.mark.anyio
async def test_successful_poll_renders_counts_and_target(tmp_path: Path) -> None:
    database = tmp_path / "compile_commands_clang.json"
    database.write_text("[]", encoding="utf-8")
    (tmp_path / "compile_commands.json").symlink_to(database)

    surface = FakeSurface()
    client = FakeClient(INFO)
    monitor = StatusMonitor(
        client,
        surface,
        FakeLogSurface(),
        make_resolver([str(tmp_path)]),
        update_interval=1.0,
    )
    try:
        snapshot = await monitor.poll()
    finally:
        monitor.dispose()

    assert client.requests == [(INFO_METHOD, None)]
    assert snapshot is not None
    assert snapshot.title == "ccls(CLANG): 4/4 jobs"
    assert snapshot.severity is Severity.NORMAL
    assert surface.text == "ccls(CLANG): 4/4 jobs"
    assert surface.color == ""
    assert surface.tooltip == (
        "10 files,\n"
        "20 functions,\n"
        "5 types,\n"
        "3 variables,\n"
        "2 entries in project.\n"
        "\n"
        "completed 4/4 index requests\n"
        "last idle: 1"
    )


@pytest.mark.anyio
async def test_missing_counters_render_as_zero() -> None:
    surface = FakeSurface()
    monitor = _monitor(FakeClient({"pipeline": {"completed": 7}}), surface, FakeLogSurface())

    snapshot = await monitor.poll()

    assert snapshot is not None
    assert snapshot.title == "ccls(): 7/0 jobs"
    assert "0 files," in snapshot.detail
    assert "last idle: 0" in snapshot.detail


@pytest.mark.anyio
async def test_first_failure_renders_error_and_reveals_log() -> None:
    surface = FakeSurface()
    log_surface = FakeLogSurface()
    monitor = _monitor(FakeClient(ConnectionRefusedError("connection refused")), surface, log_surface)

    snapshot = await monitor.poll()

    assert snapshot is not None
    assert surface.text == "ccls: error"
    assert surface.color == "red"
    assert "connection refused" in surface.tooltip
    assert monitor.snapshot.severity is Severity.ERROR
    assert monitor.last_poll_was_error is True
    assert log_surface.reveal_count == 1


@pytest.mark.anyio
async def test_repeated_failures_are_reported_once() -> None:
    surface = FakeSurface()
    log_surface = FakeLogSurface()
    monitor = _monitor(FakeClient(RuntimeError("connection refused")), surface, log_surface)

    await monitor.poll()
    calls_after_first = len(surface.calls)
    second = await monitor.poll()

    assert second is None
    assert len(surface.calls) == calls_after_first
    assert surface.texts() == ["ccls: loading", "ccls: error"]
    assert log_surface.reveal_count == 1


@pytest.mark.anyio
async def test_success_rearms_error_reporting() -> None:
    surface = FakeSurface()
    log_surface = FakeLogSurface()
    client = FakeClient(RuntimeError("down"), RuntimeError("down"), INFO, RuntimeError("down again"))
    monitor = _monitor(client, surface, log_surface)

    await monitor.poll()
    await monitor.poll()
    recovered = await monitor.poll()
    assert recovered is not None
    assert recovered.severity is Severity.NORMAL
    assert monitor.last_poll_was_error is False

    await monitor.poll()

    assert log_surface.reveal_count == 2
    assert surface.texts() == ["ccls: loading", "ccls: error", "ccls(): 4/4 jobs", "ccls: error"]
    assert "down again" in surface.tooltip


@pytest.mark.anyio
async def test_non_object_response_is_treated_as_failure() -> None:
    surface = FakeSurface()
    monitor = _monitor(FakeClient(None), surface, FakeLogSurface())

    await monitor.poll()

    assert surface.text == "ccls: error"
    assert "invalid $ccls/info response" in surface.tooltip


@pytest.mark.anyio
async def test_error_without_message_uses_exception_name() -> None:
    surface = FakeSurface()
    monitor = _monitor(FakeClient(TimeoutError()), surface, FakeLogSurface())

    await monitor.poll()

    assert surface.tooltip == "Failed to perform info request: TimeoutError"


@pytest.mark.anyio
async def test_unresolvable_database_keeps_the_status_update(tmp_path: Path) -> None:
    surface = FakeSurface()
    monitor = _monitor(FakeClient(INFO), surface, FakeLogSurface(), make_resolver([str(tmp_path)]))

    snapshot = await monitor.poll()

    assert snapshot is not None
    assert surface.text == "ccls(): 4/4 jobs"


@pytest.mark.anyio
async def test_timer_waits_one_interval_then_polls() -> None:
    client = FakeClient(INFO)
    surface = FakeSurface()
    monitor = _monitor(client, surface, FakeLogSurface(), autostart=True, update_interval=0.05)
    try:
        await asyncio.sleep(0)
        assert client.requests == []
        assert monitor.running is True

        await asyncio.sleep(0.2)
        assert len(client.requests) >= 1
        assert surface.text == "ccls(): 4/4 jobs"
    finally:
        monitor.dispose()


@pytest.mark.anyio
async def test_timer_skips_ticks_while_request_is_pending() -> None:
    client = FakeClient(INFO)
    client.gate = asyncio.Event()
    monitor = _monitor(client, FakeSurface(), FakeLogSurface(), autostart=True, update_interval=0.01)
    try:
        await asyncio.sleep(0.1)
        assert len(client.requests) == 1
    finally:
        client.gate.set()
        monitor.dispose()
        await asyncio.sleep(0.01)


@pytest.mark.anyio
async def test_dispose_is_idempotent_and_stops_polling() -> None:
    client = FakeClient(INFO)
    surface = FakeSurface()
    monitor = _monitor(client, surface, FakeLogSurface(), autostart=True, update_interval=0.01)
    await asyncio.sleep(0.05)

    monitor.dispose()
    monitor.dispose()
    for _ in range(3):
        await asyncio.sleep(0)
    polled = len(client.requests)
    await asyncio.sleep(0.05)

    assert surface.dispose_count == 1
    assert monitor.disposed is True
    assert monitor.running is False
    assert len(client.requests) == polled


@pytest.mark.anyio
async def test_poll_completing_after_dispose_writes_nothing() -> None:
    client = FakeClient(RuntimeError("late"))
    client.gate = asyncio.Event()
    surface = FakeSurface()
    log_surface = FakeLogSurface()
    monitor = _monitor(client, surface, log_surface)

    pending = asyncio.create_task(monitor.poll())
    await asyncio.sleep(0)
    monitor.dispose()
    client.gate.set()
    result = await pending

    assert result is None
    assert surface.texts() == ["ccls: loading"]
    assert log_surface.reveal_count == 0


@pytest.mark.anyio
async def test_start_after_dispose_does_nothing() -> None:
    monitor = _monitor(FakeClient(INFO), FakeSurface(), FakeLogSurface())
    monitor.dispose()

    monitor.start(0.01)

    assert monitor.running is False


@pytest.mark.anyio
async def test_start_rejects_non_positive_interval() -> None:
    monitor = _monitor(FakeClient(INFO), FakeSurface(), FakeLogSurface())

    with pytest.raises(ValueError):
        monitor.start(0)


@pytest.mark.anyio
async def test_for_workspace_uses_configured_interval(tmp_path: Path) -> None:
    from ccls_status.core.config import ConfigManager
    from ccls_status.project import Workspace

    (tmp_path / "ccls-status.json").write_text('{"ccls": {"statusUpdateInterval": 250}}', encoding="utf-8")
    monitor = StatusMonitor.for_workspace(
        FakeClient(INFO),
        FakeSurface(),
        FakeLogSurface(),
        ConfigManager(str(tmp_path)),
        Workspace(folders=[str(tmp_path)]),
        autostart=False,
    )

    assert monitor.update_interval == 0.25
    assert monitor.resolver.workspace.first == str(tmp_path)


@pytest.mark.anyio
async def test_invalid_database_directory_keeps_the_status_update() -> None:
    surface = FakeSurface()
    monitor = _monitor(FakeClient(INFO), surface, FakeLogSurface(), make_resolver(db_dir="bad\x00dir"))

    snapshot = await monitor.poll()

    assert snapshot is not None
    assert surface.text == "ccls(): 4/4 jobs"


@pytest.mark.anyio
async def test_concurrent_polls_share_one_request() -> None:
    client = FakeClient(INFO)
    client.gate = asyncio.Event()
    surface = FakeSurface()
    monitor = _monitor(client, surface, FakeLogSurface())

    first = asyncio.create_task(monitor.poll())
    second = asyncio.create_task(monitor.poll())
    await asyncio.sleep(0.01)
    client.gate.set()
    results = await asyncio.gather(first, second)

    assert len(client.requests) == 1
    assert results[0] is results[1]
    assert surface.texts() == ["ccls: loading", "ccls(): 4/4 jobs"]


class _BrokenResolver:
    def resolve_label(self) -> str:
        raise KeyError("broken")


@pytest.mark.anyio
async def test_timer_poll_errors_are_logged(capsys) -> None:  # type: ignore[no-untyped-def]
    from ccls_status.util.log import Log, LogLevel

    Log.configure(level=LogLevel.ERROR, console=True, file=False)
    monitor = _monitor(
        FakeClient(INFO),
        FakeSurface(),
        FakeLogSurface(),
        _BrokenResolver(),
        autostart=True,
        update_interval=0.01,
    )
    try:
        await asyncio.sleep(0.05)
    finally:
        monitor.dispose()

    assert monitor.running is False
    assert "status poll crashed" in capsys.readouterr().err
