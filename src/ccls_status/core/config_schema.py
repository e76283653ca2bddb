"""Configuration schema - Pydantic models for ccls-status config files."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_STATUS_UPDATE_INTERVAL_MS = 2000


class MiscConfig(BaseModel):
    """``ccls.misc`` settings shared with the ccls editor extension."""
    compilation_database_directory: Optional[str] = Field(
        default=None, alias="compilationDatabaseDirectory"
    )

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class CclsConfig(BaseModel):
    """The ``ccls`` configuration section."""
    misc: MiscConfig = Field(default_factory=MiscConfig)
    status_update_interval: int = Field(
        default=DEFAULT_STATUS_UPDATE_INTERVAL_MS, alias="statusUpdateInterval"
    )

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator("status_update_interval")
    @classmethod
    def _positive_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("statusUpdateInterval must be a positive number of milliseconds")
        return value


class LoggingConfig(BaseModel):
    """Logging sink configuration."""
    level: Optional[str] = None
    format: Optional[str] = None
    console: Optional[bool] = None
    file: Optional[bool] = None
    dev_file: Optional[bool] = None


class Config(BaseModel):
    """Root configuration."""
    ccls: CclsConfig = Field(default_factory=CclsConfig)
    logging: Optional[LoggingConfig] = None
    log_level: Optional[str] = Field(default=None, alias="logLevel")

    model_config = ConfigDict(extra="allow", populate_by_name=True)
