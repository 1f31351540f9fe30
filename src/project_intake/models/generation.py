"""Scope of Work generation job models."""

from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, field_validator

from project_intake.models.base import WireModel, as_utc


class GenerationStatus(str, Enum):
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class GenerationStart(WireModel):
    """Response of POST /projects/{id}/sow/generate."""
    sow_id: str
    status: GenerationStatus = GenerationStatus.GENERATING


class GenerationJobStatus(WireModel):
    """One poll of GET /projects/{id}/sow/{sowId}/status."""
    status: GenerationStatus
    progress: float = 0.0
    estimated_completion: datetime | None = None

    @field_validator("progress")
    @classmethod
    def _clamp_progress(cls, value: float) -> float:
        return max(0.0, min(100.0, value))

    @field_validator("estimated_completion")
    @classmethod
    def _normalise_eta(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None


class ScopeOfWork(WireModel):
    """
    The generated artifact.

    Its content is produced by the generation service and treated as opaque
    here; everything beyond the id is kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    id: str
