"""Document upload/download models."""

from datetime import datetime

from project_intake.models.base import WireModel


class UploadSlot(WireModel):
    """A write-once URL plus the document id to confirm afterwards."""
    upload_url: str
    document_id: str
    s3_key: str | None = None


class ProjectDocument(WireModel):
    """A confirmed, server-owned document. The only form builders can see."""
    id: str
    project_id: str = ""
    user_id: str | None = None
    file_name: str = ""
    original_name: str | None = None
    file_size: int = 0
    mime_type: str = ""
    document_type: str = ""
    s3_key: str | None = None
    uploaded_at: datetime | None = None
    is_visible_to_builders: bool = False


class DownloadLink(WireModel):
    download_url: str
