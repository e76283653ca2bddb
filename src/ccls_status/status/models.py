"""Data model for the ``$ccls/info`` response and the published snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


Count = Union[int, float]


def _as_count(value: Any) -> Count:
    """Numbers pass through unchanged; anything else (bool included) is 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


class _Counters(BaseModel):
    """Counter group where any missing or junk value reads as 0."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _default_zero(cls, value: Any) -> Count:
        return _as_count(value)


class DbInfo(_Counters):
    files: Count = 0
    funcs: Count = 0
    types: Count = 0
    vars: Count = 0


class PipelineInfo(_Counters):
    last_idle: Count = Field(default=0, alias="lastIdle")
    completed: Count = 0
    enqueued: Count = 0


class ProjectInfo(_Counters):
    entries: Count = 0


class InfoResponse(BaseModel):
    """Index statistics returned by ``$ccls/info``.

    The backend is not trusted to send every section; absent sections and
    counters default to 0.
    """

    db: DbInfo = Field(default_factory=DbInfo)
    pipeline: PipelineInfo = Field(default_factory=PipelineInfo)
    project: ProjectInfo = Field(default_factory=ProjectInfo)

    model_config = ConfigDict(extra="ignore")

    @field_validator("db", "pipeline", "project", mode="before")
    @classmethod
    def _section_or_empty(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value
        return {}


class Severity(str, Enum):
    NORMAL = "normal"
    ERROR = "error"

    @property
    def color(self) -> str:
        """Foreground color for status surfaces; "" keeps the theme default."""
        if self is Severity.ERROR:
            return "red"
        return ""


@dataclass(frozen=True)
class StatusSnapshot:
    """What a status surface shows: one title line, a tooltip, a severity."""

    title: str
    detail: str
    severity: Severity = Severity.NORMAL
