"""
Tests for the Document Transfer Gateway and DocumentManager.

The phase order matters: slot, transfer, confirm. A failed transfer must
never reach confirm.
"""

import asyncio
from unittest.mock import MagicMock, call

import pytest

from project_intake.documents.gateway import DocumentGateway, DocumentManager
from project_intake.errors import ApiError, AuthExpiredError, NotFoundError, UploadError
from project_intake.models.documents import ProjectDocument, UploadSlot
from project_intake.models.draft import LocalDocument
from project_intake.services.documents import DocumentService


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def _service() -> MagicMock:
    service = MagicMock(spec=DocumentService)
    service.get_upload_url.return_value = UploadSlot(
        upload_url="https://uploads.test/slot-1", document_id="doc-1", s3_key="projects/proj-1/doc-1"
    )
    service.confirm_upload.return_value = ProjectDocument(
        id="doc-1", project_id="proj-1", file_name="plan.pdf", mime_type="application/pdf"
    )
    return service


def _plan() -> LocalDocument:
    return LocalDocument.from_bytes("plan.pdf", b"%PDF-1.4 plan", "floor_plan", "application/pdf")


class TestUpload:
    def test_phases_run_in_order(self):
        service = _service()
        manager = MagicMock()
        manager.attach_mock(service.get_upload_url, "get_upload_url")
        manager.attach_mock(service.put_file, "put_file")
        manager.attach_mock(service.confirm_upload, "confirm_upload")

        document = _run(DocumentGateway(service).upload("proj-1", _plan()))

        assert document.id == "doc-1"
        assert manager.mock_calls == [
            call.get_upload_url("proj-1", "plan.pdf", 13, "application/pdf", "floor_plan"),
            call.put_file("https://uploads.test/slot-1", b"%PDF-1.4 plan", "application/pdf"),
            call.confirm_upload("doc-1"),
        ]

    def test_failed_transfer_never_confirms(self):
        service = _service()
        service.put_file.side_effect = UploadError("Failed to upload file (HTTP 403)")

        with pytest.raises(UploadError):
            _run(DocumentGateway(service).upload("proj-1", _plan()))
        service.confirm_upload.assert_not_awaited()

    def test_slot_failure_never_transfers(self):
        service = _service()
        service.get_upload_url.side_effect = ApiError(400, "File too large")

        with pytest.raises(ApiError):
            _run(DocumentGateway(service).upload("proj-1", _plan()))
        service.put_file.assert_not_awaited()
        service.confirm_upload.assert_not_awaited()

    def test_lost_file_fails_before_network(self):
        service = _service()
        document = LocalDocument(file_name="plan.pdf", document_type="floor_plan")

        with pytest.raises(UploadError):
            _run(DocumentGateway(service).upload("proj-1", document))
        service.get_upload_url.assert_not_awaited()

    def test_upload_from_path(self, tmp_path):
        path = tmp_path / "photo.jpg"
        path.write_bytes(b"jpeg-bytes")
        document = LocalDocument.from_path(path, "photo")
        service = _service()

        _run(DocumentGateway(service).upload("proj-1", document))
        assert service.get_upload_url.call_args.args == ("proj-1", "photo.jpg", 10, "image/jpeg", "photo")
        assert service.put_file.call_args.args[1] == b"jpeg-bytes"

    def test_batch_continues_after_failure(self):
        service = _service()
        service.put_file.side_effect = [UploadError("reset"), None]
        documents = [_plan(), LocalDocument.from_bytes("photo.jpg", b"jpg", "photo", "image/jpeg")]

        result = _run(DocumentGateway(service).upload_all("proj-1", documents))

        assert len(result.uploaded) == 1
        assert [(d.file_name, msg) for d, msg in result.failed] == [("plan.pdf", "reset")]
        assert service.confirm_upload.await_count == 1

    def test_batch_escalates_auth_expiry(self):
        service = _service()
        service.get_upload_url.side_effect = AuthExpiredError()

        with pytest.raises(AuthExpiredError):
            _run(DocumentGateway(service).upload_all("proj-1", [_plan()]))


class TestDocumentManager:
    def test_failed_upload_leaves_list_intact(self):
        service = _service()
        manager = DocumentManager(DocumentGateway(service), "proj-1")

        assert _run(manager.upload(_plan())) is not None
        service.put_file.side_effect = UploadError("Failed to upload file (HTTP 500)")
        assert _run(manager.upload(_plan())) is None

        assert [d.id for d in manager.documents] == ["doc-1"]
        assert manager.error == "Failed to upload file (HTTP 500)"
        assert service.confirm_upload.await_count == 1

    def test_refresh(self):
        service = _service()
        service.list_documents.return_value = [ProjectDocument(id="doc-9", project_id="proj-1")]
        manager = DocumentManager(DocumentGateway(service), "proj-1")

        _run(manager.refresh())
        assert [d.id for d in manager.documents] == ["doc-9"]
        service.list_documents.assert_awaited_once_with("proj-1")

    def test_delete_is_idempotent(self):
        service = _service()
        service.delete_document.side_effect = [None, NotFoundError()]
        manager = DocumentManager(DocumentGateway(service), "proj-1")
        manager.documents = [ProjectDocument(id="doc-1"), ProjectDocument(id="doc-2")]

        assert _run(manager.delete("doc-1"))
        assert _run(manager.delete("doc-1"))
        assert [d.id for d in manager.documents] == ["doc-2"]

    def test_visibility_toggle_replaces_entry(self):
        service = _service()
        service.update_builder_visibility.return_value = ProjectDocument(id="doc-1", is_visible_to_builders=True)
        manager = DocumentManager(DocumentGateway(service), "proj-1")
        manager.documents = [ProjectDocument(id="doc-1"), ProjectDocument(id="doc-2")]

        assert _run(manager.set_builder_visibility("doc-1", True))
        assert manager.documents[0].is_visible_to_builders
        assert not manager.documents[1].is_visible_to_builders
        service.update_builder_visibility.assert_awaited_once_with("doc-1", True)

    def test_visibility_failure_reports_error(self):
        service = _service()
        service.update_builder_visibility.side_effect = ApiError(403, "Not your document")
        manager = DocumentManager(DocumentGateway(service), "proj-1")

        assert not _run(manager.set_builder_visibility("doc-1", True))
        assert manager.error == "Not your document"
