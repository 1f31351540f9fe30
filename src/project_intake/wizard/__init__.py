"""
Project creation wizard.

- draft_store: durable ProjectDraft persistence behind a repository interface
- steps: per-step validity predicates (pure)
- controller: step navigation and terminal submission
"""

from project_intake.wizard.controller import SubmissionResult, WizardController
from project_intake.wizard.draft_store import (
    DraftRepository,
    InMemoryDraftRepository,
    JsonFileDraftRepository,
)
from project_intake.wizard.steps import StepKind, WizardVariant, is_step_valid

__all__ = [
    "DraftRepository",
    "InMemoryDraftRepository",
    "JsonFileDraftRepository",
    "StepKind",
    "SubmissionResult",
    "WizardController",
    "WizardVariant",
    "is_step_valid",
]
