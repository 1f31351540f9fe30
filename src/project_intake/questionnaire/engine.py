"""
Questionnaire Session Engine.

Drives a server-resident adaptive questionnaire:

    NOT_STARTED --initialize--> IN_PROGRESS --final answer / force complete--> COMPLETE
    IN_PROGRESS --answer, more to ask--> IN_PROGRESS

The server decides the next question from all prior answers and is
authoritative for completion_percentage and is_complete. The engine only
sequences calls, caches the session, and pre-fills answers.

Rules:
- Answers are matched to questions by question id only.
- current_question_index drives the progress display; the response list
  drives pre-fill. They may disagree (e.g. after an edit) without error.
- One submit/complete in flight per session id. A second call while one is
  running returns BUSY instead of racing the first.
- Every call remembers the epoch it was issued under. reset() and
  initialize() bump the epoch, so answers to superseded requests are dropped.
"""

import logging
from datetime import timedelta
from enum import Enum
from typing import Any, Callable

from pydantic import ValidationError

from project_intake.config import settings
from project_intake.errors import AuthExpiredError, IntakeError, describe_error
from project_intake.models.base import utc_now
from project_intake.models.questionnaire import (
    Answer,
    NextQuestion,
    QuestionnaireResponse,
    QuestionnaireSession,
)
from project_intake.services.questionnaire import QuestionnaireService

logger = logging.getLogger(__name__)

# Errors that put the engine into an error state instead of escaping
_RECOVERABLE = (IntakeError, ValidationError)


class EngineState(str, Enum):
    NOT_STARTED = "not_started"
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    ERROR = "error"


class SubmitOutcome(str, Enum):
    ACCEPTED = "accepted"      # stored, next question loaded
    COMPLETED = "completed"    # session is now complete
    REJECTED = "rejected"      # failed local validation, nothing sent
    BUSY = "busy"              # another submission for this session is in flight
    FAILED = "failed"          # network/server failure, see engine.error
    STALE = "stale"            # session was reset while the call was in flight
    NOT_READY = "not_ready"    # no session or no current question


def is_empty_answer(answer: Any) -> bool:
    if answer is None:
        return True
    if isinstance(answer, str):
        return not answer.strip()
    return False


class QuestionnaireEngine:
    def __init__(
        self,
        service: QuestionnaireService,
        on_complete: Callable[[list[QuestionnaireResponse]], None] | None = None,
        force_complete_threshold: float | None = None,
    ):
        self._service = service
        self._on_complete = on_complete
        self.force_complete_threshold = (
            force_complete_threshold
            if force_complete_threshold is not None
            else settings.force_complete_threshold
        )

        self.project_id: str | None = None
        self.session: QuestionnaireSession | None = None
        self.current: NextQuestion | None = None
        self.current_answer: Answer | None = None
        self.state = EngineState.NOT_STARTED
        self.error: str | None = None

        self._epoch = 0
        self._in_flight: set[str] = set()
        self._completion_reported = False

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def responses(self) -> list[QuestionnaireResponse]:
        return list(self.session.responses) if self.session else []

    @property
    def completion_percentage(self) -> float:
        return self.session.completion_percentage if self.session else 0.0

    @property
    def current_question_index(self) -> int:
        return self.session.current_question_index if self.session else 0

    @property
    def is_complete(self) -> bool:
        return self.state == EngineState.COMPLETE

    @property
    def can_force_complete(self) -> bool:
        return self.session is not None and self.completion_percentage >= self.force_complete_threshold

    @property
    def is_submitting(self) -> bool:
        return self.session is not None and self.session.id in self._in_flight

    def _is_stale(self, epoch: int, session_id: str | None = None) -> bool:
        if epoch != self._epoch:
            return True
        if session_id is not None and (self.session is None or self.session.id != session_id):
            return True
        return False

    def _fail(self, message: str) -> EngineState:
        logger.error(f"Questionnaire for project {self.project_id}: {message}")
        self.error = message
        self.state = EngineState.ERROR
        return self.state

    def _finish(self) -> None:
        self.state = EngineState.COMPLETE
        self.current = None
        self.current_answer = None
        if self._completion_reported:
            return
        self._completion_reported = True
        logger.info(f"Questionnaire complete for project {self.project_id}")
        if self._on_complete is not None:
            self._on_complete(self.responses)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Drop the cached session. In-flight results from before are discarded."""
        self._epoch += 1
        self.session = None
        self.current = None
        self.current_answer = None
        self.error = None
        self.state = EngineState.NOT_STARTED
        self._completion_reported = False

    async def initialize(self, project_id: str) -> EngineState:
        """Get or create the session, then load the next question if unfinished."""
        self.reset()
        self.project_id = project_id
        self.state = EngineState.LOADING
        epoch = self._epoch

        try:
            session = await self._service.get_session(project_id)
            if session is None:
                logger.info(f"No questionnaire session for project {project_id}, starting one")
                session = await self._service.start_session(project_id)
        except AuthExpiredError:
            raise
        except _RECOVERABLE as e:
            if self._is_stale(epoch):
                return self.state
            return self._fail(describe_error(e, "Failed to initialize questionnaire"))

        if self._is_stale(epoch):
            return self.state

        self.session = session
        if session.is_complete:
            self.state = EngineState.COMPLETE
            return self.state

        self.state = EngineState.IN_PROGRESS
        await self.request_next_question()
        return self.state

    async def retry(self) -> EngineState:
        """Restart initialize() for the same project after an error."""
        if self.project_id is None:
            raise RuntimeError("retry() called before initialize()")
        return await self.initialize(self.project_id)

    # -------------------------------------------------------------------------
    # Question flow
    # -------------------------------------------------------------------------

    async def request_next_question(self) -> NextQuestion | None:
        if self.session is None or self.project_id is None:
            return None
        epoch = self._epoch
        session_id = self.session.id

        try:
            next_question = await self._service.next_question(self.project_id, session_id)
        except AuthExpiredError:
            raise
        except _RECOVERABLE as e:
            if not self._is_stale(epoch, session_id):
                self._fail(describe_error(e, "Failed to load question"))
            return None

        if self._is_stale(epoch, session_id):
            logger.debug(f"Discarding stale next question for session {session_id}")
            return None

        self.current = next_question
        # Resume: show the answer already given to this question, if any
        previous = self.session.response_for(next_question.question.id)
        self.current_answer = previous.answer if previous else None
        return next_question

    async def submit_answer(self, answer: Answer | None = None) -> SubmitOutcome:
        """
        Submit an answer to the current question.

        With no argument the pre-filled/edited current_answer is submitted.
        A required question with an empty answer is rejected without any
        network call.
        """
        if self.session is None or self.current is None or self.state != EngineState.IN_PROGRESS:
            return SubmitOutcome.NOT_READY
        if answer is not None:
            self.current_answer = answer

        question = self.current.question
        if question.required and is_empty_answer(self.current_answer):
            return SubmitOutcome.REJECTED

        session_id = self.session.id
        if session_id in self._in_flight:
            return SubmitOutcome.BUSY

        self._in_flight.add(session_id)
        epoch = self._epoch
        self.error = None
        try:
            try:
                updated = await self._service.submit_response(
                    self.project_id,
                    session_id,
                    question.id,
                    self.current_answer if self.current_answer is not None else "",
                    question_text=question.text or None,
                    current_question_index=self.session.current_question_index,
                )
            except AuthExpiredError:
                raise
            except _RECOVERABLE as e:
                if self._is_stale(epoch, session_id):
                    return SubmitOutcome.STALE
                self.error = describe_error(e, "Failed to submit response")
                logger.warning(f"Submit for question {question.id} failed: {e}")
                return SubmitOutcome.FAILED

            if self._is_stale(epoch, session_id):
                return SubmitOutcome.STALE

            self.session = updated
            if updated.is_complete:
                self._finish()
                return SubmitOutcome.COMPLETED

            await self.request_next_question()
            if self.state == EngineState.ERROR:
                return SubmitOutcome.FAILED
            if self._is_stale(epoch, session_id):
                return SubmitOutcome.STALE
            return SubmitOutcome.ACCEPTED
        finally:
            self._in_flight.discard(session_id)

    async def force_complete(self) -> SubmitOutcome:
        """Stop answering early. Only offered at or above the threshold."""
        if self.session is None or self.project_id is None:
            return SubmitOutcome.NOT_READY
        if not self.can_force_complete:
            return SubmitOutcome.REJECTED

        session_id = self.session.id
        if session_id in self._in_flight:
            return SubmitOutcome.BUSY

        self._in_flight.add(session_id)
        epoch = self._epoch
        self.error = None
        try:
            try:
                completed = await self._service.complete(self.project_id, session_id)
            except AuthExpiredError:
                raise
            except _RECOVERABLE as e:
                if self._is_stale(epoch, session_id):
                    return SubmitOutcome.STALE
                self.error = describe_error(e, "Failed to complete questionnaire")
                return SubmitOutcome.FAILED

            if self._is_stale(epoch, session_id):
                return SubmitOutcome.STALE
            self.session = completed
            self._finish()
            return SubmitOutcome.COMPLETED
        finally:
            self._in_flight.discard(session_id)

    # -------------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------------

    async def edit_response(self, question_id: str, new_answer: Answer) -> bool:
        """
        Replace a past answer (review screen).

        Writes through to the server, then key-replaces the local entry. The
        stored timestamp always moves forward: an edit is never backdated.
        """
        if self.session is None or self.project_id is None:
            return False
        epoch = self._epoch
        session_id = self.session.id
        previous = self.session.response_for(question_id)

        self.error = None
        try:
            updated = await self._service.update_response(
                self.project_id, session_id, question_id, new_answer
            )
        except AuthExpiredError:
            raise
        except _RECOVERABLE as e:
            if not self._is_stale(epoch, session_id):
                self.error = describe_error(e, "Failed to update response")
            return False

        if self._is_stale(epoch, session_id):
            return False

        timestamp = utc_now()
        if updated is not None:
            server_entry = updated.response_for(question_id)
            if server_entry is not None and server_entry.answer == new_answer:
                timestamp = max(timestamp, server_entry.timestamp)
        if previous is not None and timestamp <= previous.timestamp:
            timestamp = previous.timestamp + timedelta(microseconds=1)

        edited = QuestionnaireResponse(
            question_id=question_id,
            question_text=previous.question_text if previous else None,
            answer=new_answer,
            timestamp=timestamp,
        )
        base = updated if updated is not None else self.session
        self.session = base.with_response(edited)

        if self.current is not None and self.current.question.id == question_id:
            self.current_answer = new_answer
        return True

    async def get_responses(self, project_id: str | None = None) -> list[QuestionnaireResponse]:
        """Fetch the server's response list for the review screen."""
        project_id = project_id or self.project_id
        if project_id is None:
            return []
        return await self._service.get_responses(project_id)
