"""
Generation stages.

Display-only labels derived from numeric progress. Nothing here feeds back
into the tracker's state machine, and nothing here is persisted.
"""

import math
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class GenerationStage:
    threshold: float
    message: str
    icon: str


# Ordered by threshold
GENERATION_STAGES: tuple[GenerationStage, ...] = (
    GenerationStage(0, "Initializing project analysis...", "🔍"),
    GenerationStage(25, "Reviewing property details and documents...", "📋"),
    GenerationStage(50, "Generating detailed work breakdown...", "⚙️"),
    GenerationStage(75, "Calculating costs and materials...", "💰"),
    GenerationStage(100, "Finalizing Statement of Work...", "✅"),
)

LESS_THAN_A_MINUTE = "Less than a minute"


def stage_for_progress(
    progress: float,
    stages: tuple[GenerationStage, ...] = GENERATION_STAGES,
) -> GenerationStage:
    """Highest stage whose threshold is <= progress."""
    current = stages[0]
    for stage in stages:
        if progress >= stage.threshold:
            current = stage
        else:
            break
    return current


def format_time_remaining(estimated_completion: datetime | None, now: datetime) -> str:
    """
    Human-readable time left.

    Never shows zero or negative time: anything under a minute, including an
    ETA already in the past because of clock skew, reads "Less than a minute".
    """
    if estimated_completion is None:
        return ""
    seconds = (estimated_completion - now).total_seconds()
    minutes = math.ceil(seconds / 60) if seconds > 0 else 0
    if minutes <= 1:
        return LESS_THAN_A_MINUTE
    return f"~{minutes} minutes"
