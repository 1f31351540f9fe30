"""Wire models and client-side state shared across the intake pipeline."""

from project_intake.models.documents import DownloadLink, ProjectDocument, UploadSlot
from project_intake.models.draft import LocalDocument, ProjectDraft
from project_intake.models.generation import (
    GenerationJobStatus,
    GenerationStart,
    GenerationStatus,
    ScopeOfWork,
)
from project_intake.models.project import (
    Budget,
    CreateProjectRequest,
    Dimensions,
    Project,
    ProjectStatus,
    PropertyAddress,
    Requirements,
)
from project_intake.models.questionnaire import (
    NextQuestion,
    QuestionnaireQuestion,
    QuestionnaireResponse,
    QuestionnaireSession,
    QuestionType,
)

__all__ = [
    "Budget",
    "CreateProjectRequest",
    "Dimensions",
    "DownloadLink",
    "GenerationJobStatus",
    "GenerationStart",
    "GenerationStatus",
    "LocalDocument",
    "NextQuestion",
    "Project",
    "ProjectDocument",
    "ProjectDraft",
    "ProjectStatus",
    "PropertyAddress",
    "QuestionnaireQuestion",
    "QuestionnaireResponse",
    "QuestionnaireSession",
    "QuestionType",
    "Requirements",
    "ScopeOfWork",
    "UploadSlot",
]
