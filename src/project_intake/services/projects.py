"""Project endpoints."""

from project_intake.api.client import ApiClient
from project_intake.models.project import CreateProjectRequest, Project


class ProjectService:
    def __init__(self, client: ApiClient):
        self._client = client

    async def create_project(self, request: CreateProjectRequest) -> Project:
        data = await self._client.post("/projects", request.to_wire())
        return Project.model_validate(data)

    async def get_project(self, project_id: str) -> Project:
        data = await self._client.get(f"/projects/{project_id}")
        return Project.model_validate(data)
