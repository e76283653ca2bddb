"""Snapshot builders for the status surface."""

from __future__ import annotations

from .models import InfoResponse, Severity, StatusSnapshot

LOADING_TITLE = "ccls: loading"
LOADING_DETAIL = "ccls is starting / loading project metadata"
ERROR_TITLE = "ccls: error"


def loading_snapshot() -> StatusSnapshot:
    """Placeholder shown until the first poll completes."""
    return StatusSnapshot(title=LOADING_TITLE, detail=LOADING_DETAIL)


def error_snapshot(message: str) -> StatusSnapshot:
    return StatusSnapshot(
        title=ERROR_TITLE,
        detail=f"Failed to perform info request: {message}",
        severity=Severity.ERROR,
    )


def info_snapshot(info: InfoResponse, target: str = "") -> StatusSnapshot:
    """Render a successful ``$ccls/info`` response."""
    pipeline = info.pipeline
    jobs = f"{pipeline.completed}/{pipeline.enqueued}"
    detail = "\n".join(
        [
            f"{info.db.files} files,",
            f"{info.db.funcs} functions,",
            f"{info.db.types} types,",
            f"{info.db.vars} variables,",
            f"{info.project.entries} entries in project.",
            "",
            f"completed {jobs} index requests",
            f"last idle: {pipeline.last_idle}",
        ]
    )
    return StatusSnapshot(title=f"ccls({target}): {jobs} jobs", detail=detail)
