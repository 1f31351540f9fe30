"""
Tests for the Step Gate.

Predicates are pure functions of the draft: same draft, same answer, and
no predicate looks at another step.
"""

from project_intake.models.draft import LocalDocument, ProjectDraft
from project_intake.models.project import PropertyAddress, Requirements
from project_intake.wizard.steps import (
    StepKind,
    WizardVariant,
    get_steps,
    is_step_valid,
    step_titles,
)


class TestStandardFlow:
    def test_step_titles(self):
        assert step_titles() == [
            "Property Address",
            "Project Type",
            "Project Vision",
            "Documents",
            "Review & Create",
        ]

    def test_complete_draft_passes_every_step(self, sample_draft):
        for index in range(len(get_steps())):
            assert is_step_valid(index, sample_draft), index

    def test_documents_step_valid_with_zero_files(self, sample_draft):
        assert sample_draft.documents == []
        assert is_step_valid(3, sample_draft)

    def test_empty_draft_blocks_data_steps(self):
        draft = ProjectDraft()
        assert not is_step_valid(0, draft)
        assert not is_step_valid(1, draft)
        assert not is_step_valid(2, draft)
        assert is_step_valid(3, draft)
        assert is_step_valid(4, draft)

    def test_address_needs_line1_city_postcode(self):
        draft = ProjectDraft(property_address=PropertyAddress(line1="1 High St", city="London"))
        assert not is_step_valid(0, draft)
        draft.property_address = draft.property_address.model_copy(update={"postcode": "E1 6AN"})
        assert is_step_valid(0, draft)

    def test_whitespace_counts_as_empty(self):
        draft = ProjectDraft(
            property_address=PropertyAddress(line1="   ", city="London", postcode="E1 6AN"),
            project_type="  ",
            requirements=Requirements(description="\n\t"),
        )
        assert not is_step_valid(0, draft)
        assert not is_step_valid(1, draft)
        assert not is_step_valid(2, draft)

    def test_line2_is_optional(self, sample_draft):
        assert sample_draft.property_address.line2 is None
        assert is_step_valid(0, sample_draft)

    def test_steps_are_independent(self):
        # Later steps validate in isolation; ordering is the controller's job
        draft = ProjectDraft(project_type="kitchen_extension")
        assert not is_step_valid(0, draft)
        assert is_step_valid(1, draft)

    def test_out_of_range_is_invalid(self, sample_draft):
        assert not is_step_valid(-1, sample_draft)
        assert not is_step_valid(5, sample_draft)

    def test_deterministic(self, sample_draft):
        results = [[is_step_valid(i, sample_draft) for i in range(5)] for _ in range(3)]
        assert results[0] == results[1] == results[2]

    def test_does_not_mutate_draft(self, sample_draft):
        before = sample_draft.to_dict()
        for index in range(5):
            is_step_valid(index, sample_draft)
        assert sample_draft.to_dict() == before

    def test_documents_do_not_affect_validity(self, sample_draft):
        sample_draft.documents.append(LocalDocument(file_name="plan.pdf", document_type="floor_plan"))
        assert is_step_valid(3, sample_draft)


class TestAssessmentFlow:
    def test_six_steps_with_assessment_second(self):
        kinds = [step.kind for step in get_steps(WizardVariant.WITH_ASSESSMENT)]
        assert kinds == [
            StepKind.ADDRESS,
            StepKind.ASSESSMENT,
            StepKind.PROJECT_TYPE,
            StepKind.REQUIREMENTS,
            StepKind.DOCUMENTS,
            StepKind.REVIEW,
        ]

    def test_assessment_step_always_valid(self):
        assert is_step_valid(1, ProjectDraft(), WizardVariant.WITH_ASSESSMENT)

    def test_requirements_step_needs_description(self, sample_draft):
        variant = WizardVariant.WITH_ASSESSMENT
        assert is_step_valid(3, sample_draft, variant)
        assert not is_step_valid(3, ProjectDraft(), variant)

    def test_review_index_shifts(self, sample_draft):
        assert is_step_valid(5, sample_draft, WizardVariant.WITH_ASSESSMENT)
        assert not is_step_valid(5, sample_draft, WizardVariant.STANDARD)
