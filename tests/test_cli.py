"""
Tests for the intake CLI commands that run without a server.
"""

import pytest
from typer.testing import CliRunner

from project_intake import __version__
from project_intake import main
from project_intake.models.questionnaire import QuestionType
from project_intake.wizard.draft_store import JsonFileDraftRepository

runner = CliRunner()


@pytest.fixture
def draft_repo(tmp_path, monkeypatch):
    repo = JsonFileDraftRepository(tmp_path)
    monkeypatch.setattr(main, "_draft_repository", lambda: repo)
    return repo


class TestCli:
    def test_version(self):
        result = runner.invoke(main.app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_draft_show_empty(self, draft_repo):
        result = runner.invoke(main.app, ["draft", "show"])
        assert result.exit_code == 0
        assert "No saved draft" in result.output

    def test_draft_show_and_clear(self, draft_repo, sample_draft):
        draft_repo.save(sample_draft)

        shown = runner.invoke(main.app, ["draft", "show"])
        assert shown.exit_code == 0
        assert "123 Test Street" in shown.output

        cleared = runner.invoke(main.app, ["draft", "clear"])
        assert cleared.exit_code == 0
        assert draft_repo.load() is None


class TestAnswerCoercion:
    def test_numbers(self):
        assert main._coerce_answer(QuestionType.NUMBER, " 3 ") == 3
        assert main._coerce_answer(QuestionType.NUMBER, "2.5") == 2.5
        assert main._coerce_answer(QuestionType.SCALE, "7") == 7

    def test_booleans(self):
        assert main._coerce_answer(QuestionType.BOOLEAN, "Yes") is True
        assert main._coerce_answer(QuestionType.BOOLEAN, "n") is False

    def test_text_and_unparseable_input_stay_strings(self):
        assert main._coerce_answer(QuestionType.TEXT, "42") == "42"
        assert main._coerce_answer(QuestionType.NUMBER, "about ten") == "about ten"
        assert main._coerce_answer(QuestionType.BOOLEAN, "maybe") == "maybe"
