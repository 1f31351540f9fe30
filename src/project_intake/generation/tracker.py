"""
Generation Job Tracker.

Follows a server-side Scope of Work generation job by polling its status
until it resolves:

    generating --(poll)--> generating
    generating --> completed   (then one fetch of the finished artifact)
    generating --> failed

Poll failures (network, not job failure) are absorbed up to max_retries
consecutive times while the caller shows a reconnecting indicator. The next
consecutive failure is terminal. One successful poll resets the count.

Polling runs as an asyncio task behind a PollingHandle. After
handle.cancel() no further poll is issued and no callback fires, even if a
response was already on its way back.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from pydantic import ValidationError

from project_intake.config import settings
from project_intake.errors import AuthExpiredError, IntakeError
from project_intake.generation.stages import (
    GENERATION_STAGES,
    GenerationStage,
    format_time_remaining,
    stage_for_progress,
)
from project_intake.models.base import utc_now
from project_intake.models.generation import (
    GenerationJobStatus,
    GenerationStart,
    GenerationStatus,
    ScopeOfWork,
)
from project_intake.services.sow import SowService

logger = logging.getLogger(__name__)

_RECOVERABLE = (IntakeError, ValidationError)


class TrackerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class FailureReason(str, Enum):
    GENERATION_FAILED = "generation_failed"          # job reported status=failed
    ARTIFACT_UNAVAILABLE = "artifact_unavailable"    # job completed, artifact fetch failed
    CONNECTION_LOST = "connection_lost"              # too many consecutive poll failures


@dataclass(frozen=True)
class TrackingFailure:
    reason: FailureReason
    message: str


GENERATION_FAILED_MESSAGE = "SoW generation failed. Please try again."
ARTIFACT_UNAVAILABLE_MESSAGE = "Failed to load completed Statement of Work"
CONNECTION_LOST_MESSAGE = "Unable to check progress. Please refresh the page."


class PollingHandle:
    """The only way to stop a running tracker."""

    def __init__(self, tracker: "GenerationTracker", task: asyncio.Task):
        self._tracker = tracker
        self._task = task

    def cancel(self) -> None:
        self._tracker._cancel()
        self._task.cancel()

    @property
    def cancelled(self) -> bool:
        return self._tracker._cancelled

    @property
    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> None:
        """Wait for the tracker to settle or be cancelled. Re-raises auth expiry."""
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._tracker._cancelled:
                raise


class GenerationTracker:
    def __init__(
        self,
        service: SowService,
        project_id: str,
        sow_id: str,
        on_complete: Callable[[ScopeOfWork], None] | None = None,
        on_error: Callable[[TrackingFailure], None] | None = None,
        on_update: Callable[["GenerationTracker"], None] | None = None,
        interval: float | None = None,
        max_retries: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._service = service
        self.project_id = project_id
        self.sow_id = sow_id
        self._on_complete = on_complete
        self._on_error = on_error
        self._on_update = on_update
        self.interval = interval if interval is not None else settings.poll_interval_seconds
        self.max_retries = max_retries if max_retries is not None else settings.max_poll_retries
        self._clock = clock

        self.state = TrackerState.IDLE
        self.status: GenerationJobStatus | None = None
        self.stage: GenerationStage = GENERATION_STAGES[0]
        self.time_remaining = ""
        self.consecutive_failures = 0
        self.poll_count = 0
        self.sow: ScopeOfWork | None = None
        self.failure: TrackingFailure | None = None

        self._cancelled = False
        self._settled = False
        self._handle: PollingHandle | None = None

    # -------------------------------------------------------------------------
    # Display helpers
    # -------------------------------------------------------------------------

    @property
    def progress(self) -> float:
        return self.status.progress if self.status else 0.0

    @property
    def reconnect_attempt(self) -> int:
        return self.consecutive_failures

    @property
    def reconnect_message(self) -> str:
        if not self.consecutive_failures:
            return ""
        return f"Reconnecting... (Attempt {self.consecutive_failures}/{self.max_retries})"

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> PollingHandle:
        """Start polling on the running event loop. Polls immediately."""
        if self._handle is not None:
            return self._handle
        self.state = TrackerState.POLLING
        task = asyncio.get_running_loop().create_task(
            self._run(), name=f"sow-status-{self.sow_id}"
        )
        self._handle = PollingHandle(self, task)
        return self._handle

    async def run(self) -> TrackerState:
        """Start and wait until the job resolves."""
        await self.start().wait()
        return self.state

    def _cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if not self._settled:
            self.state = TrackerState.CANCELLED
        logger.debug(f"Stopped tracking SoW {self.sow_id}")

    async def _run(self) -> None:
        while not self._cancelled:
            keep_polling = await self._poll_once()
            if not keep_polling or self._cancelled:
                return
            await asyncio.sleep(self.interval)

    async def _poll_once(self) -> bool:
        """One status fetch. Returns whether polling should continue."""
        self.poll_count += 1
        try:
            status = await self._service.get_status(self.project_id, self.sow_id)
        except AuthExpiredError:
            raise
        except _RECOVERABLE as e:
            if self._cancelled:
                return False
            return self._absorb_failure(e)

        if self._cancelled:
            return False

        self.consecutive_failures = 0
        self.status = status
        self.stage = stage_for_progress(status.progress)
        self.time_remaining = format_time_remaining(status.estimated_completion, self._clock())
        self._notify_update()

        if status.status == GenerationStatus.COMPLETED:
            await self._load_artifact()
            return False
        if status.status == GenerationStatus.FAILED:
            self._settle_failure(FailureReason.GENERATION_FAILED, GENERATION_FAILED_MESSAGE)
            return False
        return True

    def _absorb_failure(self, error: Exception) -> bool:
        self.consecutive_failures += 1
        if self.consecutive_failures > self.max_retries:
            logger.error(
                f"Giving up on SoW {self.sow_id} after {self.consecutive_failures} failed polls: {error}"
            )
            self._settle_failure(FailureReason.CONNECTION_LOST, CONNECTION_LOST_MESSAGE)
            return False
        logger.warning(
            f"Status poll for SoW {self.sow_id} failed "
            f"(attempt {self.consecutive_failures}/{self.max_retries}): {error}"
        )
        self._notify_update()
        return True

    async def _load_artifact(self) -> None:
        try:
            sow = await self._service.get_sow(self.project_id, self.sow_id)
        except AuthExpiredError:
            raise
        except _RECOVERABLE as e:
            if self._cancelled:
                return
            logger.error(f"SoW {self.sow_id} completed but could not be loaded: {e}")
            self._settle_failure(FailureReason.ARTIFACT_UNAVAILABLE, ARTIFACT_UNAVAILABLE_MESSAGE)
            return

        if self._cancelled or self._settled:
            return
        self._settled = True
        self.sow = sow
        self.state = TrackerState.COMPLETED
        logger.info(f"SoW {self.sow_id} ready for project {self.project_id}")
        if self._on_complete is not None:
            self._on_complete(sow)

    def _settle_failure(self, reason: FailureReason, message: str) -> None:
        if self._cancelled or self._settled:
            return
        self._settled = True
        self.failure = TrackingFailure(reason, message)
        self.state = TrackerState.FAILED
        if self._on_error is not None:
            self._on_error(self.failure)

    def _notify_update(self) -> None:
        if self._cancelled or self._on_update is None:
            return
        self._on_update(self)


async def start_generation(service: SowService, project_id: str) -> GenerationStart:
    """Kick off Scope of Work generation. The tracker takes over from the returned sow id."""
    started = await service.start_generation(project_id)
    logger.info(f"Started SoW generation {started.sow_id} for project {project_id}")
    return started
