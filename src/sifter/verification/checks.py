"""Stage-one evidence checks run against every flag submission."""

from __future__ import annotations

from typing import Callable
from urllib.parse import urlparse

from sifter.domain.verification import Submission
from sifter.store.entities import BAD_OUTCOMES, LEGITIMATE_STATUSES, EntityRepository
from sifter.verification.outcomes import CheckOutcome, Failed, Passed, Warned
from sifter.verification.registry import CheckRegistry, CheckSpec
from sifter.verification.thresholds import ModeTable, thresholds_for

LinkChecker = Callable[[str], bool]

REPUTATION_MIN_APPROVAL_RATE = 0.7


def is_well_formed_url(url: str) -> bool:
    parsed = urlparse(str(url or "").strip())
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def check_entity_match(repository: EntityRepository, submission: Submission) -> CheckOutcome:
    match = repository.find_entity(submission.entity_name)
    if match is None:
        return Warned("New entity - not in database")
    return Passed(f"Entity found in database with {round(match.similarity * 100)}% match confidence")


def check_project_outcome(repository: EntityRepository, submission: Submission) -> CheckOutcome:
    project = submission.project_name or submission.entity_name
    outcome = repository.project_outcome(project)
    if outcome in BAD_OUTCOMES:
        return Passed(f"Project confirmed as {outcome} in database")
    return Warned("Project not in scam database")


def check_evidence_accessibility(
    submission: Submission,
    *,
    min_evidence: int,
    link_checker: LinkChecker = is_well_formed_url,
) -> CheckOutcome:
    links = [item.url.strip() for item in submission.evidence if item.url.strip()]
    if not links:
        return Failed("No evidence links supplied")
    broken = [link for link in links if not link_checker(link)]
    if broken:
        return Failed(f"Some links inaccessible ({round(len(broken) / len(links) * 100)}% failed)")
    if len(links) < min_evidence:
        return Failed(f"{len(links)} of {min_evidence} required evidence links supplied")
    return Passed("All evidence links verified and accessible")


def check_data_consistency(repository: EntityRepository, submission: Submission) -> CheckOutcome:
    match = repository.find_entity(submission.entity_name)
    if match is not None and match.record.status in LEGITIMATE_STATUSES:
        return Failed("Found contradictions with existing database entries")
    return Passed("No contradictions found with existing data")


def check_submitter_reputation(repository: EntityRepository, submission: Submission) -> CheckOutcome:
    history = repository.submitter_history(submission.submitter_id)
    if history.total and history.approval_rate >= REPUTATION_MIN_APPROVAL_RATE:
        return Passed(
            f"Submitter has good history with previous submissions ({history.approved}/{history.total} approved)"
        )
    return Warned("Submitter has limited or mixed history")


def default_check_registry(
    repository: EntityRepository,
    *,
    mode_table: ModeTable | None = None,
    link_checker: LinkChecker = is_well_formed_url,
) -> CheckRegistry:
    """The five automated checks, weighted 30/25/20/15/10 in run order."""

    def evidence(submission: Submission) -> CheckOutcome:
        minimum = thresholds_for(submission.mode, mode_table).min_evidence
        return check_evidence_accessibility(submission, min_evidence=minimum, link_checker=link_checker)

    registry = CheckRegistry()
    registry.register(
        CheckSpec(
            id="entity_match",
            name="Entity Database Match",
            description="Check if entity already exists in database",
            weight=30,
            run=lambda submission: check_entity_match(repository, submission),
        )
    )
    registry.register(
        CheckSpec(
            id="project_outcome",
            name="Project Outcome Verification",
            description="Check if project is known scam/rug",
            weight=25,
            run=lambda submission: check_project_outcome(repository, submission),
        )
    )
    registry.register(
        CheckSpec(
            id="evidence_accessibility",
            name="Evidence Link Verification",
            description="Verify evidence links are accessible and relevant",
            weight=20,
            run=evidence,
        )
    )
    registry.register(
        CheckSpec(
            id="data_consistency",
            name="Data Consistency Check",
            description="Cross-reference with existing data",
            weight=15,
            run=lambda submission: check_data_consistency(repository, submission),
        )
    )
    registry.register(
        CheckSpec(
            id="submitter_reputation",
            name="Submitter Reputation Check",
            description="Check submitter history and reputation",
            weight=10,
            run=lambda submission: check_submitter_reputation(repository, submission),
        )
    )
    return registry
