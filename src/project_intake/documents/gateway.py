"""
Document Transfer Gateway.

Two-phase upload:
1. request an upload slot (write-once URL + document id)
2. PUT the bytes directly to the URL
3. confirm the upload, which creates the ProjectDocument

The phases run strictly in order. If the transfer fails the upload is never
confirmed, so no half-uploaded document becomes visible to builders.
"""

import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from project_intake.errors import AuthExpiredError, IntakeError, NotFoundError, describe_error
from project_intake.models.documents import ProjectDocument
from project_intake.models.draft import LocalDocument
from project_intake.services.documents import DocumentService

logger = logging.getLogger(__name__)


@dataclass
class UploadBatchResult:
    uploaded: list[ProjectDocument] = field(default_factory=list)
    failed: list[tuple[LocalDocument, str]] = field(default_factory=list)


class DocumentGateway:
    def __init__(self, service: DocumentService):
        self._service = service

    async def upload(self, project_id: str, document: LocalDocument) -> ProjectDocument:
        """Upload one staged document. Raises on any phase failure."""
        content = document.read_bytes()
        slot = await self._service.get_upload_url(
            project_id,
            document.file_name,
            len(content),
            document.mime_type,
            document.document_type,
        )
        # Raises UploadError; confirm must not run after a failed transfer
        await self._service.put_file(slot.upload_url, content, document.mime_type)
        confirmed = await self._service.confirm_upload(slot.document_id)
        logger.info(f"Uploaded {document.file_name} as document {confirmed.id}")
        return confirmed

    async def upload_all(self, project_id: str, documents: list[LocalDocument]) -> UploadBatchResult:
        """
        Upload documents one after another.

        Failures are isolated per document: a failed upload is recorded and
        the rest still go through.
        """
        result = UploadBatchResult()
        for document in documents:
            try:
                result.uploaded.append(await self.upload(project_id, document))
            except AuthExpiredError:
                raise
            except (IntakeError, ValidationError) as e:
                message = describe_error(e, "Upload failed")
                logger.warning(f"Upload of {document.file_name} failed: {message}")
                result.failed.append((document, message))
        return result

    async def delete(self, document_id: str) -> None:
        """Idempotent: deleting an already-deleted document is a no-op."""
        try:
            await self._service.delete_document(document_id)
        except NotFoundError:
            logger.debug(f"Document {document_id} already deleted")

    async def set_builder_visibility(self, document_id: str, is_visible: bool) -> ProjectDocument:
        return await self._service.update_builder_visibility(document_id, is_visible)

    async def list_project_documents(self, project_id: str) -> list[ProjectDocument]:
        return await self._service.list_documents(project_id)

    async def get_download_url(self, document_id: str) -> str:
        return await self._service.get_download_url(document_id)


class DocumentManager:
    """
    Confirmed documents of one existing project.

    Keeps a local list in step with the server: a failed upload leaves the
    list untouched, a successful one appends.
    """

    def __init__(self, gateway: DocumentGateway, project_id: str):
        self._gateway = gateway
        self.project_id = project_id
        self.documents: list[ProjectDocument] = []
        self.error: str | None = None

    async def refresh(self) -> list[ProjectDocument]:
        self.documents = await self._gateway.list_project_documents(self.project_id)
        return self.documents

    async def upload(self, document: LocalDocument) -> ProjectDocument | None:
        self.error = None
        try:
            confirmed = await self._gateway.upload(self.project_id, document)
        except AuthExpiredError:
            raise
        except (IntakeError, ValidationError) as e:
            self.error = describe_error(e, "Failed to upload document")
            return None
        self.documents.append(confirmed)
        return confirmed

    async def delete(self, document_id: str) -> bool:
        self.error = None
        try:
            await self._gateway.delete(document_id)
        except AuthExpiredError:
            raise
        except (IntakeError, ValidationError) as e:
            self.error = describe_error(e, "Failed to delete document")
            return False
        self.documents = [d for d in self.documents if d.id != document_id]
        return True

    async def set_builder_visibility(self, document_id: str, is_visible: bool) -> bool:
        self.error = None
        try:
            updated = await self._gateway.set_builder_visibility(document_id, is_visible)
        except AuthExpiredError:
            raise
        except (IntakeError, ValidationError) as e:
            self.error = describe_error(e, "Failed to update document visibility")
            return False
        self.documents = [updated if d.id == document_id else d for d in self.documents]
        return True
