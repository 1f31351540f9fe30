"""Document endpoints, including the pre-signed binary transfer."""

from project_intake.api.client import ApiClient
from project_intake.models.documents import DownloadLink, ProjectDocument, UploadSlot


class DocumentService:
    def __init__(self, client: ApiClient):
        self._client = client

    async def get_upload_url(
        self,
        project_id: str,
        file_name: str,
        file_size: int,
        mime_type: str,
        document_type: str,
    ) -> UploadSlot:
        data = await self._client.post(
            "/documents/upload-url",
            {
                "projectId": project_id,
                "fileName": file_name,
                "fileSize": file_size,
                "mimeType": mime_type,
                "documentType": document_type,
            },
        )
        return UploadSlot.model_validate(data)

    async def put_file(self, upload_url: str, content: bytes, mime_type: str) -> None:
        await self._client.put_bytes(upload_url, content, mime_type)

    async def confirm_upload(self, document_id: str) -> ProjectDocument:
        data = await self._client.post(f"/documents/{document_id}/confirm", {})
        return ProjectDocument.model_validate(data)

    async def list_documents(self, project_id: str) -> list[ProjectDocument]:
        data = await self._client.get(f"/projects/{project_id}/documents")
        return [ProjectDocument.model_validate(d) for d in data or []]

    async def delete_document(self, document_id: str) -> None:
        await self._client.delete(f"/documents/{document_id}")

    async def get_download_url(self, document_id: str) -> str:
        data = await self._client.get(f"/documents/{document_id}/download")
        return DownloadLink.model_validate(data).download_url

    async def update_builder_visibility(self, document_id: str, is_visible: bool) -> ProjectDocument:
        data = await self._client.patch(
            f"/documents/{document_id}/builder-visibility",
            {"isVisibleToBuilders": is_visible},
        )
        return ProjectDocument.model_validate(data)
