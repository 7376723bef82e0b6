from __future__ import annotations

import pytest

from sifter.config.settings import get_settings
from sifter.domain.verification import EvidenceItem, Submission
from sifter.store.entities import EntityRecord, InMemoryEntityRepository

REGRESSION_METRICS = {
    "team_identity": 80,
    "likely_agency": 90,
    "community_type": 70,
    "tweet_focus": 20,
}


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def regression_metrics() -> dict[str, int]:
    return dict(REGRESSION_METRICS)


@pytest.fixture
def repository() -> InMemoryEntityRepository:
    repo = InMemoryEntityRepository()
    repo.add_entity(EntityRecord(name="Rugged Labs", entity_type="agency", status="flagged"))
    repo.add_entity(EntityRecord(name="Honest Protocol", status="verified_legit"))
    repo.set_project_outcome("Moon Token", "rug")
    for approved in (True, True, True, False):
        repo.record_submission("trusted-analyst", approved=approved)
    repo.record_submission("new-user", approved=False)
    return repo


@pytest.fixture
def make_submission():
    def _make(**overrides) -> Submission:
        payload = {
            "id": "sub-1",
            "submitter_id": "trusted-analyst",
            "mode": "individual",
            "entity_name": "Rugged Labs",
            "project_name": "Moon Token",
            "allegation": "Ran paid shill campaign before the rug.",
            "evidence": [
                EvidenceItem(url="https://example.org/thread", type="twitter"),
                EvidenceItem(url="https://example.org/chain", type="onchain"),
            ],
        }
        payload.update(overrides)
        return Submission.model_validate(payload)

    return _make
