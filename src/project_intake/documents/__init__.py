"""Two-phase document upload and post-creation document management."""

from project_intake.documents.gateway import DocumentGateway, DocumentManager, UploadBatchResult

__all__ = ["DocumentGateway", "DocumentManager", "UploadBatchResult"]
