"""
Questionnaire wire models.

The session is server-owned. The client keeps a cached copy and normalises
its response list on receipt: one entry per question id, latest timestamp
wins, order is the order questions were first answered.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator, model_validator

from project_intake.models.base import WireModel, as_utc, utc_now

Answer = bool | int | float | str


class QuestionType(str, Enum):
    TEXT = "text"
    MULTIPLE_CHOICE = "multiple_choice"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SCALE = "scale"


class QuestionnaireQuestion(WireModel):
    id: str
    text: str = ""
    type: QuestionType | str = QuestionType.TEXT
    options: list[str] = Field(default_factory=list)
    required: bool = False
    follow_up_questions: list[str] = Field(default_factory=list)
    is_ai_generated: bool | None = Field(default=None, alias="isAIGenerated")
    reasoning: str | None = None


class QuestionnaireResponse(WireModel):
    question_id: str
    question_text: str | None = None
    answer: Answer
    timestamp: datetime = Field(default_factory=utc_now)

    @field_validator("timestamp")
    @classmethod
    def _normalise_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)


class QuestionnaireSession(WireModel):
    id: str
    project_id: str = ""
    current_question_index: int = Field(default=0, ge=0)
    responses: list[QuestionnaireResponse] = Field(default_factory=list)
    is_complete: bool = False
    completion_percentage: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("completion_percentage")
    @classmethod
    def _clamp_percentage(cls, value: float) -> float:
        return max(0.0, min(100.0, value))

    @model_validator(mode="after")
    def _dedupe_responses(self) -> "QuestionnaireSession":
        # The backend appends on resubmission; collapse to one entry per question.
        latest: dict[str, QuestionnaireResponse] = {}
        order: list[str] = []
        for response in self.responses:
            existing = latest.get(response.question_id)
            if existing is None:
                order.append(response.question_id)
                latest[response.question_id] = response
            elif response.timestamp >= existing.timestamp:
                latest[response.question_id] = response
        if len(order) != len(self.responses):
            self.responses = [latest[qid] for qid in order]
        return self

    def response_for(self, question_id: str) -> QuestionnaireResponse | None:
        for response in self.responses:
            if response.question_id == question_id:
                return response
        return None

    def with_response(self, response: QuestionnaireResponse) -> "QuestionnaireSession":
        """Return a copy with `response` replacing any entry for the same question."""
        responses = list(self.responses)
        for i, existing in enumerate(responses):
            if existing.question_id == response.question_id:
                responses[i] = response
                break
        else:
            responses.append(response)
        return self.model_copy(update={"responses": responses})


class NextQuestion(WireModel):
    """Result of asking the server for the next adaptive question."""
    question: QuestionnaireQuestion
    is_complete: bool = False
    next_question_id: str | None = None
    reasoning: str | None = None

    @property
    def is_ai_generated(self) -> bool:
        return bool(self.question.is_ai_generated)
