"""Scope of Work generation: stage lookup and the polling tracker."""

from project_intake.generation.stages import (
    GENERATION_STAGES,
    GenerationStage,
    format_time_remaining,
    stage_for_progress,
)
from project_intake.generation.tracker import (
    FailureReason,
    GenerationTracker,
    PollingHandle,
    TrackerState,
    TrackingFailure,
    start_generation,
)

__all__ = [
    "GENERATION_STAGES",
    "FailureReason",
    "GenerationStage",
    "GenerationTracker",
    "PollingHandle",
    "TrackerState",
    "TrackingFailure",
    "format_time_remaining",
    "stage_for_progress",
    "start_generation",
]
