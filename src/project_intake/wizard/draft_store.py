"""
Draft Store.

The wizard never touches storage directly; it gets a DraftRepository.
JsonFileDraftRepository is the durable one (a single record under a fixed
key, rewritten on every edit). InMemoryDraftRepository round-trips through
the same serialized form, so a "reload" loses file bytes exactly like the
durable store does.

No cross-process coordination: two writers race and the last write wins.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from project_intake.errors import DraftStoreError
from project_intake.models.draft import ProjectDraft

logger = logging.getLogger(__name__)


class DraftRepository(ABC):
    """Persistence for the single in-progress ProjectDraft."""

    @abstractmethod
    def load(self) -> ProjectDraft | None:
        """Return the saved draft, or None if there is none."""

    @abstractmethod
    def save(self, draft: ProjectDraft) -> None:
        """Overwrite the saved draft."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the saved draft. No-op when nothing is saved."""


class JsonFileDraftRepository(DraftRepository):
    def __init__(self, directory: Path | str, key: str = "projectCreationData"):
        self.directory = Path(directory)
        self.key = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def load(self) -> ProjectDraft | None:
        if not self.path.exists():
            return None
        try:
            return ProjectDraft.from_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, TypeError) as e:
            # Unreadable record: start fresh rather than block the wizard
            logger.error(f"Failed to parse saved draft {self.path}: {e}")
            return None

    def save(self, draft: ProjectDraft) -> None:
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(draft.to_json(), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise DraftStoreError(f"Failed to save draft: {e}") from e

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise DraftStoreError(f"Failed to clear draft: {e}") from e


class InMemoryDraftRepository(DraftRepository):
    def __init__(self, initial: ProjectDraft | None = None):
        self._record: str | None = None
        if initial is not None:
            self.save(initial)

    @property
    def has_draft(self) -> bool:
        return self._record is not None

    def load(self) -> ProjectDraft | None:
        if self._record is None:
            return None
        return ProjectDraft.from_dict(json.loads(self._record))

    def save(self, draft: ProjectDraft) -> None:
        self._record = draft.to_json()

    def clear(self) -> None:
        self._record = None
