"""Typed views over the dataset API's JSON responses."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    READY = "ready"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Any) -> "JobStatus":
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_success(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.READY)

    @property
    def is_failure(self) -> bool:
        return self is JobStatus.FAILED


def _as_text(value: Any) -> str | None:
    # Provider ids and statuses are not always JSON strings
    return None if value is None else str(value)


class TriggerResponse(BaseModel):
    """Body of POST /trigger. Only one of the two ids is normally present."""

    model_config = ConfigDict(extra="allow")

    request_id: str | None = None
    snapshot_id: str | None = None

    @field_validator("request_id", "snapshot_id", mode="before")
    @classmethod
    def coerce_ids(cls, value: Any) -> str | None:
        return _as_text(value)

    @property
    def job_id(self) -> str | None:
        # request_id wins when the provider sends both
        return self.request_id or self.snapshot_id or None


class ProgressResponse(BaseModel):
    """Body of GET /progress/{id}. Provider-specific fields are kept as extras."""

    model_config = ConfigDict(extra="allow")

    status: str | None = None
    snapshot_id: str | None = None

    @field_validator("status", "snapshot_id", mode="before")
    @classmethod
    def coerce_status(cls, value: Any) -> str | None:
        return _as_text(value)

    @property
    def job_status(self) -> JobStatus:
        return JobStatus.parse(self.status)
