"""Questionnaire session endpoints."""

from project_intake.api.client import ApiClient
from project_intake.errors import NotFoundError
from project_intake.models.questionnaire import (
    Answer,
    NextQuestion,
    QuestionnaireResponse,
    QuestionnaireSession,
)


class QuestionnaireService:
    def __init__(self, client: ApiClient):
        self._client = client

    def _base(self, project_id: str) -> str:
        return f"/projects/{project_id}/questionnaire"

    async def get_session(self, project_id: str) -> QuestionnaireSession | None:
        """Existing session for the project, or None on a first visit."""
        try:
            data = await self._client.get(self._base(project_id))
        except NotFoundError:
            return None
        return QuestionnaireSession.model_validate(data)

    async def start_session(self, project_id: str) -> QuestionnaireSession:
        data = await self._client.post(f"{self._base(project_id)}/start", {})
        return QuestionnaireSession.model_validate(data)

    async def next_question(self, project_id: str, session_id: str) -> NextQuestion:
        data = await self._client.post(f"{self._base(project_id)}/{session_id}/next", {})
        return NextQuestion.model_validate(data)

    async def submit_response(
        self,
        project_id: str,
        session_id: str,
        question_id: str,
        answer: Answer,
        question_text: str | None = None,
        current_question_index: int | None = None,
    ) -> QuestionnaireSession:
        body: dict = {"questionId": question_id, "answer": answer}
        if question_text:
            body["questionText"] = question_text
        if current_question_index is not None:
            body["currentQuestionIndex"] = current_question_index
        data = await self._client.post(f"{self._base(project_id)}/{session_id}/response", body)
        return QuestionnaireSession.model_validate(data)

    async def update_response(
        self,
        project_id: str,
        session_id: str,
        question_id: str,
        answer: Answer,
    ) -> QuestionnaireSession | None:
        """PUT a replacement answer. Some deployments answer with an empty body."""
        data = await self._client.put(
            f"{self._base(project_id)}/{session_id}/response/{question_id}",
            {"questionId": question_id, "answer": answer},
        )
        if not data:
            return None
        return QuestionnaireSession.model_validate(data)

    async def complete(self, project_id: str, session_id: str) -> QuestionnaireSession:
        data = await self._client.post(f"{self._base(project_id)}/{session_id}/complete", {})
        return QuestionnaireSession.model_validate(data)

    async def get_responses(self, project_id: str) -> list[QuestionnaireResponse]:
        data = await self._client.get(f"{self._base(project_id)}/responses")
        return [QuestionnaireResponse.model_validate(r) for r in data or []]
