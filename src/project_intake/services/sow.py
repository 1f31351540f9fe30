"""Scope of Work generation endpoints."""

from project_intake.api.client import ApiClient
from project_intake.models.generation import GenerationJobStatus, GenerationStart, ScopeOfWork


class SowService:
    def __init__(self, client: ApiClient):
        self._client = client

    async def start_generation(self, project_id: str) -> GenerationStart:
        data = await self._client.post(f"/projects/{project_id}/sow/generate", {})
        return GenerationStart.model_validate(data)

    async def get_status(self, project_id: str, sow_id: str) -> GenerationJobStatus:
        data = await self._client.get(f"/projects/{project_id}/sow/{sow_id}/status")
        return GenerationJobStatus.model_validate(data)

    async def get_sow(self, project_id: str, sow_id: str) -> ScopeOfWork:
        data = await self._client.get(f"/projects/{project_id}/sow/{sow_id}")
        return ScopeOfWork.model_validate(data)
