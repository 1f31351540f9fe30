"""Adaptive questionnaire session engine."""

from project_intake.questionnaire.engine import (
    EngineState,
    QuestionnaireEngine,
    SubmitOutcome,
    is_empty_answer,
)

__all__ = ["EngineState", "QuestionnaireEngine", "SubmitOutcome", "is_empty_answer"]
