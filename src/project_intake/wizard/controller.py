"""
Wizard Controller.

Owns the current step index over [0, N-1] and the draft. Forward navigation
is gated by the Step Gate; going back is always allowed. The review step is
terminal: instead of advancing, the caller invokes submit().

Submission creates the project first and only then uploads staged
documents, one at a time. A failed upload never rolls back the project and
never blocks the remaining uploads; the failed document is dropped from the
local list. A failed project creation leaves the draft untouched so the
user can retry without re-entering anything.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any

from pydantic import ValidationError

from project_intake.documents.gateway import DocumentGateway
from project_intake.errors import AuthExpiredError, DraftStoreError, IntakeError, describe_error
from project_intake.models.documents import ProjectDocument
from project_intake.models.draft import LocalDocument, ProjectDraft
from project_intake.models.project import CreateProjectRequest, Project
from project_intake.services.projects import ProjectService
from project_intake.wizard.draft_store import DraftRepository
from project_intake.wizard.steps import StepKind, WizardStep, WizardVariant, get_steps, is_step_valid

logger = logging.getLogger(__name__)

# Top-level draft fields callers may set through update()
_EDITABLE_FIELDS = {f.name for f in fields(ProjectDraft)} - {"created_at", "updated_at"}


@dataclass
class SubmissionResult:
    success: bool
    project: Project | None = None
    documents: list[ProjectDocument] = field(default_factory=list)
    failed_documents: list[tuple[LocalDocument, str]] = field(default_factory=list)
    error: str | None = None


class WizardController:
    def __init__(
        self,
        repository: DraftRepository,
        projects: ProjectService,
        documents: DocumentGateway,
        variant: WizardVariant = WizardVariant.STANDARD,
    ):
        self._repository = repository
        self._projects = projects
        self._documents = documents
        self.variant = variant

        # Resume a draft left over from an earlier session
        self.draft = repository.load() or ProjectDraft()
        self.current_step = 0
        self.error: str | None = None
        self.submitting = False
        self.project: Project | None = None

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    @property
    def steps(self) -> tuple[WizardStep, ...]:
        return get_steps(self.variant)

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def current(self) -> WizardStep:
        return self.steps[self.current_step]

    @property
    def is_last_step(self) -> bool:
        return self.current_step == self.step_count - 1

    def can_go_next(self) -> bool:
        return not self.submitting and is_step_valid(self.current_step, self.draft, self.variant)

    def next(self) -> bool:
        """Advance one step. Returns False when blocked or already on review."""
        if self.is_last_step or not self.can_go_next():
            return False
        self.current_step += 1
        logger.debug(f"Wizard advanced to {self.current.kind.value}")
        return True

    def back(self) -> bool:
        if self.current_step == 0 or self.submitting:
            return False
        self.current_step -= 1
        return True

    # -------------------------------------------------------------------------
    # Draft edits (persisted on every change)
    # -------------------------------------------------------------------------

    def _persist(self) -> None:
        self.draft.touch()
        self._repository.save(self.draft)

    def update(self, **changes: Any) -> None:
        """Set top-level draft fields, e.g. update(project_type="loft_conversion")."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise TypeError(f"Unknown draft fields: {sorted(unknown)}")
        for name, value in changes.items():
            setattr(self.draft, name, value)
        self._persist()

    def update_address(self, **changes: Any) -> None:
        self.draft.property_address = self.draft.property_address.model_copy(update=changes)
        self._persist()

    def set_project_type(self, project_type: str) -> None:
        self.draft.project_type = project_type
        self._persist()

    def update_requirements(self, **changes: Any) -> None:
        self.draft.requirements = self.draft.requirements.model_copy(update=changes)
        self._persist()

    def set_property_assessment(self, assessment: dict[str, Any] | None) -> None:
        self.draft.property_assessment = assessment
        self._persist()

    def add_document(self, document: LocalDocument) -> None:
        self.draft.documents.append(document)
        self._persist()

    def remove_document(self, local_id: str) -> None:
        self.draft.documents = [d for d in self.draft.documents if d.local_id != local_id]
        self._persist()

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def build_request(self) -> CreateProjectRequest:
        assessment = None
        if any(step.kind == StepKind.ASSESSMENT for step in self.steps):
            assessment = self.draft.property_assessment
        return CreateProjectRequest(
            property_address=self.draft.property_address,
            project_type=self.draft.project_type,
            requirements=self.draft.requirements,
            property_assessment=assessment,
        )

    async def submit(self) -> SubmissionResult:
        """Create the project from the draft, then upload staged documents."""
        if self.submitting:
            return SubmissionResult(success=False, error="Submission already in progress")
        if not self.is_last_step:
            return SubmissionResult(success=False, error="Complete every step before creating the project")
        if self.project is not None:
            # Already created; never POST the same draft twice
            return SubmissionResult(success=True, project=self.project)

        self.submitting = True
        self.error = None
        try:
            try:
                project = await self._projects.create_project(self.build_request())
            except AuthExpiredError:
                raise
            except (IntakeError, ValidationError) as e:
                self.error = describe_error(e, "Failed to create project. Please try again.")
                logger.error(f"Project creation failed: {e}")
                return SubmissionResult(success=False, error=self.error)

            logger.info(f"Created project {project.id}")
            self.project = project

            uploadable = []
            failed: list[tuple[LocalDocument, str]] = []
            for document in self.draft.documents:
                if document.has_payload:
                    uploadable.append(document)
                else:
                    logger.warning(f"Skipping {document.file_name}: file no longer selected")
                    failed.append((document, f"{document.file_name} is no longer available"))

            batch = await self._documents.upload_all(project.id, uploadable)
            failed.extend(batch.failed)
            failed_ids = {document.local_id for document, _ in failed}
            self.draft.documents = [d for d in self.draft.documents if d.local_id not in failed_ids]

            try:
                self._repository.clear()
            except DraftStoreError as e:
                logger.error(f"Project {project.id} created but the draft could not be cleared: {e}")
            return SubmissionResult(
                success=True,
                project=project,
                documents=batch.uploaded,
                failed_documents=failed,
            )
        finally:
            self.submitting = False
