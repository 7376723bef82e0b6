"""Application service wiring settings, scoring and verification together."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sifter.config.settings import AppConfig, get_settings
from sifter.core.logging_config import apply_log_level, get_logger
from sifter.core.tracing import TraceSink
from sifter.domain.identifier import parse_identifier
from sifter.domain.verification import Submission, VerificationRun
from sifter.scoring.batch import BatchItem, BatchReport, parse_batch_csv, score_batch
from sifter.scoring.composite import classify_verdict, get_score_breakdown, score_project
from sifter.store.entities import EntityRepository, InMemoryEntityRepository
from sifter.verification.checks import LinkChecker, default_check_registry, is_well_formed_url
from sifter.verification.engine import run_verification_async
from sifter.verification.registry import CheckRegistry
from sifter.verification.thresholds import thresholds_for

log = get_logger(__name__)


@dataclass
class SifterService:
    settings: AppConfig
    repository: EntityRepository = field(default_factory=InMemoryEntityRepository)
    link_checker: LinkChecker = is_well_formed_url
    checks: CheckRegistry | None = None

    def __post_init__(self) -> None:
        if self.checks is None:
            self.checks = default_check_registry(
                self.repository,
                mode_table=self.settings.modes,
                link_checker=self.link_checker,
            )

    @classmethod
    def from_settings(cls, repository: EntityRepository | None = None) -> "SifterService":
        settings = get_settings()
        apply_log_level(settings.log_level)
        return cls(settings=settings, repository=repository or InMemoryEntityRepository())

    def analyze(self, text: str, metrics: Mapping[str, Any]) -> dict[str, Any]:
        cfg = self.settings
        identifier = parse_identifier(text)
        result = score_project(metrics, cfg.metric_weights, reject_threshold=cfg.reject_threshold)
        breakdown = get_score_breakdown(metrics, cfg.metric_weights)
        log.info("Scored %s (%s): %s %s", identifier.canonical_name, identifier.type, result.score, result.verdict)
        return {
            "identifier": identifier.model_dump(),
            "result": result.model_dump(),
            "display_verdict": classify_verdict(
                result.score,
                flag_threshold=cfg.flag_threshold,
                reject_threshold=cfg.display_reject_threshold,
            ),
            "breakdown": [entry.model_dump() for entry in breakdown],
        }

    def parse_batch(self, text: str) -> list[BatchItem]:
        return parse_batch_csv(
            text,
            max_projects=self.settings.batch_max_projects,
            weights=self.settings.metric_weights,
        )

    def batch(self, items: Sequence[BatchItem]) -> BatchReport:
        cfg = self.settings
        report = score_batch(
            items,
            cfg.metric_weights,
            reject_threshold=cfg.reject_threshold,
            flag_threshold=cfg.flag_threshold,
            display_reject_threshold=cfg.display_reject_threshold,
        )
        log.info(
            "Scored batch of %s projects (passed=%s flagged=%s rejected=%s)",
            report.summary.total,
            report.summary.passed,
            report.summary.flagged,
            report.summary.rejected,
        )
        return report

    async def verify(
        self,
        submission: Submission,
        mode: str | None = None,
        *,
        on_event: TraceSink | None = None,
    ) -> VerificationRun:
        active_mode = mode or submission.mode
        thresholds_for(active_mode, self.settings.modes)
        if active_mode != submission.mode:
            submission = submission.model_copy(update={"mode": active_mode})
        run = await run_verification_async(
            self.checks.specs(),
            active_mode,
            submission,
            mode_table=self.settings.modes,
            concurrent=self.settings.concurrent_checks,
            on_event=on_event,
        )
        log.info(
            "Verified submission %s for %s: confidence=%s decision=%s",
            submission.id or "<unsaved>",
            submission.entity_name,
            run.confidence,
            run.auto_decision,
        )
        return run
