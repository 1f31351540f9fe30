"""
Step Gate.

Each wizard step has an independent validity predicate over the draft.
Predicates are pure: no I/O, no cross-step checks. Ordering is enforced by
the controller, not here, so a later step can be valid in isolation even if
an earlier one was never completed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from project_intake.models.draft import ProjectDraft


class WizardVariant(Enum):
    """Which flow is active."""
    STANDARD = "standard"                # address, type, vision, documents, review
    WITH_ASSESSMENT = "with_assessment"  # adds property assessment, requirements


class StepKind(Enum):
    ADDRESS = "address"
    ASSESSMENT = "assessment"
    PROJECT_TYPE = "project_type"
    VISION = "vision"
    REQUIREMENTS = "requirements"
    DOCUMENTS = "documents"
    REVIEW = "review"


@dataclass(frozen=True)
class WizardStep:
    kind: StepKind
    title: str


WIZARD_STEPS: dict[WizardVariant, tuple[WizardStep, ...]] = {
    WizardVariant.STANDARD: (
        WizardStep(StepKind.ADDRESS, "Property Address"),
        WizardStep(StepKind.PROJECT_TYPE, "Project Type"),
        WizardStep(StepKind.VISION, "Project Vision"),
        WizardStep(StepKind.DOCUMENTS, "Documents"),
        WizardStep(StepKind.REVIEW, "Review & Create"),
    ),
    WizardVariant.WITH_ASSESSMENT: (
        WizardStep(StepKind.ADDRESS, "Property Address"),
        WizardStep(StepKind.ASSESSMENT, "Property Assessment"),
        WizardStep(StepKind.PROJECT_TYPE, "Project Type"),
        WizardStep(StepKind.REQUIREMENTS, "Requirements"),
        WizardStep(StepKind.DOCUMENTS, "Documents"),
        WizardStep(StepKind.REVIEW, "Review & Create"),
    ),
}


def get_steps(variant: WizardVariant = WizardVariant.STANDARD) -> tuple[WizardStep, ...]:
    return WIZARD_STEPS[variant]


def step_titles(variant: WizardVariant = WizardVariant.STANDARD) -> list[str]:
    return [step.title for step in WIZARD_STEPS[variant]]


def _filled(value: str | None) -> bool:
    return bool(value and value.strip())


def _address_complete(draft: ProjectDraft) -> bool:
    address = draft.property_address
    return _filled(address.line1) and _filled(address.city) and _filled(address.postcode)


def _project_type_chosen(draft: ProjectDraft) -> bool:
    return _filled(draft.project_type)


def _description_given(draft: ProjectDraft) -> bool:
    return _filled(draft.requirements.description)


def _always(draft: ProjectDraft) -> bool:
    return True


STEP_PREDICATES: dict[StepKind, Callable[[ProjectDraft], bool]] = {
    StepKind.ADDRESS: _address_complete,
    StepKind.ASSESSMENT: _always,        # user may proceed even if the assessment failed
    StepKind.PROJECT_TYPE: _project_type_chosen,
    StepKind.VISION: _description_given,
    StepKind.REQUIREMENTS: _description_given,
    StepKind.DOCUMENTS: _always,         # optional, 0..n files
    StepKind.REVIEW: _always,            # gated by the submit result instead
}


def is_step_valid(
    step_index: int,
    draft: ProjectDraft,
    variant: WizardVariant = WizardVariant.STANDARD,
) -> bool:
    """Whether forward navigation from `step_index` is allowed."""
    steps = WIZARD_STEPS[variant]
    if not 0 <= step_index < len(steps):
        return False
    return STEP_PREDICATES[steps[step_index].kind](draft)
