"""
Tests for draft persistence.

Covers the durable JSON file store and the in-memory store, and the rule
that file bytes never survive a reload.
"""

import json

import pytest

from project_intake.errors import DraftStoreError
from project_intake.models.draft import LocalDocument, ProjectDraft
from project_intake.wizard.draft_store import InMemoryDraftRepository, JsonFileDraftRepository


class TestJsonFileDraftRepository:
    def test_load_without_saved_draft(self, tmp_path):
        assert JsonFileDraftRepository(tmp_path).load() is None

    def test_save_and_load(self, tmp_path, sample_draft):
        repo = JsonFileDraftRepository(tmp_path)
        repo.save(sample_draft)

        loaded = repo.load()
        assert loaded is not None
        assert loaded.property_address.line1 == "123 Test Street"
        assert loaded.property_address.city == "London"
        assert loaded.project_type == "loft_conversion"
        assert loaded.requirements.description == "Test"
        assert loaded.created_at == sample_draft.created_at

    def test_record_lives_under_fixed_key(self, tmp_path, sample_draft):
        repo = JsonFileDraftRepository(tmp_path)
        repo.save(sample_draft)
        assert (tmp_path / "projectCreationData.json").exists()

        record = json.loads((tmp_path / "projectCreationData.json").read_text())
        assert record["propertyAddress"]["postcode"] == "SW1A 1AA"
        assert record["projectType"] == "loft_conversion"

    def test_save_overwrites(self, tmp_path, sample_draft):
        repo = JsonFileDraftRepository(tmp_path)
        repo.save(sample_draft)
        sample_draft.project_type = "kitchen_extension"
        repo.save(sample_draft)
        assert repo.load().project_type == "kitchen_extension"
        assert not list(tmp_path.glob("*.tmp"))

    def test_creates_missing_directory(self, tmp_path, sample_draft):
        repo = JsonFileDraftRepository(tmp_path / "nested" / "drafts")
        repo.save(sample_draft)
        assert repo.load() is not None

    def test_clear(self, tmp_path, sample_draft):
        repo = JsonFileDraftRepository(tmp_path)
        repo.save(sample_draft)
        repo.clear()
        assert repo.load() is None
        # Clearing twice is fine
        repo.clear()

    def test_corrupt_record_starts_fresh(self, tmp_path):
        (tmp_path / "projectCreationData.json").write_text("{not json")
        assert JsonFileDraftRepository(tmp_path).load() is None

    def test_unwritable_location_raises(self, tmp_path, sample_draft):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        with pytest.raises(DraftStoreError):
            JsonFileDraftRepository(blocker / "drafts").save(sample_draft)

    def test_file_bytes_not_persisted(self, tmp_path, sample_draft):
        sample_draft.documents.append(
            LocalDocument.from_bytes("plan.pdf", b"%PDF-1.4", "floor_plan", "application/pdf")
        )
        repo = JsonFileDraftRepository(tmp_path)
        repo.save(sample_draft)

        assert "PDF-1.4" not in (tmp_path / "projectCreationData.json").read_text()
        document = repo.load().documents[0]
        assert document.file_name == "plan.pdf"
        assert document.file_size == 8
        assert document.mime_type == "application/pdf"
        assert not document.has_payload


class TestInMemoryDraftRepository:
    def test_roundtrip_loses_payload(self, sample_draft):
        sample_draft.documents.append(LocalDocument.from_bytes("photo.jpg", b"jpeg", "photo"))
        repo = InMemoryDraftRepository(sample_draft)

        loaded = repo.load()
        assert loaded is not sample_draft
        assert loaded.documents[0].local_id == sample_draft.documents[0].local_id
        assert not loaded.documents[0].has_payload

    def test_clear(self, sample_draft):
        repo = InMemoryDraftRepository(sample_draft)
        assert repo.has_draft
        repo.clear()
        assert not repo.has_draft
        assert repo.load() is None

    def test_draft_json_roundtrip(self, sample_draft):
        restored = ProjectDraft.from_json(sample_draft.to_json())
        assert restored.to_dict() == sample_draft.to_dict()
