"""Entity and submitter lookups used by verification checks."""

from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
import re
from typing import Protocol

_NORMALIZE_RE = re.compile(r"[^a-z0-9]+")

LEGITIMATE_STATUSES = frozenset({"verified_legit", "legitimate", "cleared"})
BAD_OUTCOMES = frozenset({"scam", "rug", "rugpull", "exploit"})


def normalize_name(value: str) -> str:
    return _NORMALIZE_RE.sub("", str(value or "").strip().lower())


@dataclass(frozen=True)
class EntityRecord:
    name: str
    entity_type: str = "project"
    status: str = "unverified"


@dataclass(frozen=True)
class EntityMatch:
    record: EntityRecord
    similarity: float


@dataclass(frozen=True)
class SubmitterHistory:
    total: int = 0
    approved: int = 0

    @property
    def approval_rate(self) -> float:
        return self.approved / self.total if self.total else 0.0


class EntityRepository(Protocol):
    def find_entity(self, name: str) -> EntityMatch | None: ...

    def project_outcome(self, project: str) -> str | None: ...

    def submitter_history(self, submitter_id: str) -> SubmitterHistory: ...


class InMemoryEntityRepository:
    """Process-local repository; callers own the instance."""

    def __init__(self, *, match_threshold: float = 0.85) -> None:
        self.match_threshold = match_threshold
        self._entities: dict[str, EntityRecord] = {}
        self._outcomes: dict[str, str] = {}
        self._history: dict[str, SubmitterHistory] = {}

    def add_entity(self, record: EntityRecord) -> EntityRecord:
        key = normalize_name(record.name)
        if not key:
            raise ValueError("Entity name must contain letters or digits.")
        self._entities[key] = record
        return record

    def set_project_outcome(self, project: str, outcome: str) -> None:
        self._outcomes[normalize_name(project)] = str(outcome).strip().lower()

    def record_submission(self, submitter_id: str, *, approved: bool) -> SubmitterHistory:
        key = str(submitter_id).strip()
        current = self._history.get(key, SubmitterHistory())
        updated = SubmitterHistory(total=current.total + 1, approved=current.approved + int(approved))
        self._history[key] = updated
        return updated

    def find_entity(self, name: str) -> EntityMatch | None:
        target = normalize_name(name)
        if not target:
            return None
        exact = self._entities.get(target)
        if exact is not None:
            return EntityMatch(record=exact, similarity=1.0)
        best: EntityMatch | None = None
        for key, record in self._entities.items():
            ratio = SequenceMatcher(None, target, key).ratio()
            if ratio >= self.match_threshold and (best is None or ratio > best.similarity):
                best = EntityMatch(record=record, similarity=ratio)
        return best

    def project_outcome(self, project: str) -> str | None:
        return self._outcomes.get(normalize_name(project))

    def submitter_history(self, submitter_id: str) -> SubmitterHistory:
        return self._history.get(str(submitter_id).strip(), SubmitterHistory())
