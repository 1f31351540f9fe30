"""
Endpoint wrappers, one class per API resource.

Each method maps to one HTTP call and returns parsed wire models. No retry,
no state: orchestration lives in the wizard, questionnaire and generation
packages.
"""

from dataclasses import dataclass

from project_intake.api.client import ApiClient
from project_intake.services.documents import DocumentService
from project_intake.services.projects import ProjectService
from project_intake.services.questionnaire import QuestionnaireService
from project_intake.services.sow import SowService


@dataclass
class Services:
    """All endpoint wrappers sharing one client."""
    projects: ProjectService
    questionnaire: QuestionnaireService
    sow: SowService
    documents: DocumentService

    @classmethod
    def from_client(cls, client: ApiClient) -> "Services":
        return cls(
            projects=ProjectService(client),
            questionnaire=QuestionnaireService(client),
            sow=SowService(client),
            documents=DocumentService(client),
        )


__all__ = [
    "DocumentService",
    "ProjectService",
    "QuestionnaireService",
    "Services",
    "SowService",
]
