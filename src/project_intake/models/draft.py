"""
Project Draft - the homeowner's not-yet-submitted intake data.

Persisted by a DraftRepository on every edit so the wizard survives reloads.
Only metadata is serialized: staged file bytes and file handles are never
written, so a reloaded draft lists its documents but cannot upload them
until they are selected again.
"""

import json
import mimetypes
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from project_intake.errors import UploadError
from project_intake.models.project import PropertyAddress, Requirements


@dataclass
class LocalDocument:
    """A document staged in the wizard, before the project exists."""
    file_name: str
    document_type: str
    mime_type: str = "application/octet-stream"
    file_size: int = 0
    local_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    # Not persisted
    path: Path | None = None
    content: bytes | None = None

    @classmethod
    def from_path(cls, path: Path | str, document_type: str) -> "LocalDocument":
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            file_name=path.name,
            document_type=document_type,
            mime_type=mime_type or "application/octet-stream",
            file_size=path.stat().st_size,
            path=path,
        )

    @classmethod
    def from_bytes(
        cls,
        file_name: str,
        content: bytes,
        document_type: str,
        mime_type: str = "application/octet-stream",
    ) -> "LocalDocument":
        return cls(
            file_name=file_name,
            document_type=document_type,
            mime_type=mime_type,
            file_size=len(content),
            content=content,
        )

    @property
    def has_payload(self) -> bool:
        """False once the file handle has been lost (e.g. after a reload)."""
        return self.content is not None or self.path is not None

    def read_bytes(self) -> bytes:
        if self.content is not None:
            return self.content
        if self.path is not None:
            try:
                return self.path.read_bytes()
            except OSError as e:
                raise UploadError(f"Could not read {self.file_name}: {e}") from e
        raise UploadError(f"{self.file_name} is no longer available, select it again")

    def to_dict(self) -> dict:
        """Metadata only."""
        return {
            "localId": self.local_id,
            "fileName": self.file_name,
            "documentType": self.document_type,
            "mimeType": self.mime_type,
            "fileSize": self.file_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LocalDocument":
        return cls(
            file_name=data.get("fileName", ""),
            document_type=data.get("documentType", ""),
            mime_type=data.get("mimeType", "application/octet-stream"),
            file_size=data.get("fileSize", 0),
            local_id=data.get("localId") or uuid.uuid4().hex,
        )


@dataclass
class ProjectDraft:
    """
    Wizard form state.

    Single-owner: the active session. Overwritten on every field edit,
    deleted once the project is created.
    """
    property_address: PropertyAddress = field(default_factory=PropertyAddress)
    project_type: str = ""
    requirements: Requirements = field(default_factory=Requirements)
    property_assessment: dict[str, Any] | None = None
    documents: list[LocalDocument] = field(default_factory=list)

    # Metadata
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        """Set timestamps if not provided."""
        now = datetime.now(UTC).isoformat()
        if not self.created_at:
            self.created_at = now
        if not self.updated_at:
            self.updated_at = now

    def touch(self) -> None:
        self.updated_at = datetime.now(UTC).isoformat()

    def to_dict(self) -> dict:
        """Serialize to the stored record shape (camelCase, like the API)."""
        return {
            "propertyAddress": self.property_address.model_dump(by_alias=True, exclude_none=True),
            "projectType": self.project_type,
            "requirements": self.requirements.model_dump(by_alias=True, exclude_none=True),
            "propertyAssessment": self.property_assessment,
            "documents": [d.to_dict() for d in self.documents],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProjectDraft":
        return cls(
            property_address=PropertyAddress.model_validate(data.get("propertyAddress") or {}),
            project_type=data.get("projectType") or "",
            requirements=Requirements.model_validate(data.get("requirements") or {}),
            property_assessment=data.get("propertyAssessment"),
            documents=[LocalDocument.from_dict(d) for d in data.get("documents") or []],
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "ProjectDraft":
        return cls.from_dict(json.loads(json_str))
