"""
Pytest configuration and fixtures for Project Intake tests.
"""

import os

import pytest

# Set test environment before importing project_intake modules
os.environ["INTAKE_ENV"] = "development"
os.environ.setdefault("INTAKE_API_URL", "http://api.test")

from project_intake.models.draft import ProjectDraft
from project_intake.models.project import PropertyAddress, Requirements
from project_intake.models.questionnaire import QuestionnaireQuestion
from tests.fakes import FakeQuestionnaireServer


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_draft() -> ProjectDraft:
    """The loft conversion draft used across wizard tests."""
    return ProjectDraft(
        property_address=PropertyAddress(line1="123 Test Street", city="London", postcode="SW1A 1AA"),
        project_type="loft_conversion",
        requirements=Requirements(description="Test"),
    )


@pytest.fixture
def sample_questions() -> list[QuestionnaireQuestion]:
    return [
        QuestionnaireQuestion(id="Q1", text="What is the main goal?", type="text", required=True, isAIGenerated=True),
        QuestionnaireQuestion(id="Q2", text="Any material preferences?", type="text", required=False),
        QuestionnaireQuestion(id="Q3", text="How urgent is it?", type="scale", required=True),
    ]


@pytest.fixture
def questionnaire_server(sample_questions) -> FakeQuestionnaireServer:
    return FakeQuestionnaireServer(sample_questions)
