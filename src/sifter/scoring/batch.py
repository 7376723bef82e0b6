"""Batch scoring for CSV uploads."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
import csv
import io
from typing import Any

from pydantic import BaseModel, Field

from sifter.core.errors import BatchInputError
from sifter.domain.identifier import ProjectIdentifier, parse_identifier
from sifter.domain.scoring import CompositeResult, DisplayVerdict, MetricWeight
from sifter.scoring.composite import (
    DISPLAY_FLAG_THRESHOLD,
    DISPLAY_REJECT_THRESHOLD,
    REJECT_THRESHOLD,
    classify_verdict,
    get_score_breakdown,
    round_half_up,
    score_project,
)
from sifter.scoring.weights import DEFAULT_METRIC_WEIGHTS

DEFAULT_MAX_PROJECTS = 100
CLEAN_METRICS = "Clean metrics"
_INPUT_COLUMNS = ("input", "project", "name")


class BatchItem(BaseModel):
    input: str = Field(min_length=1)
    metrics: dict[str, Any] = Field(default_factory=dict)


class BatchProjectResult(BaseModel):
    identifier: ProjectIdentifier
    result: CompositeResult
    display_verdict: DisplayVerdict
    top_red_flag: str


class BatchSummary(BaseModel):
    total: int = 0
    passed: int = 0
    flagged: int = 0
    rejected: int = 0
    average_risk_score: int = 0
    tier_distribution: dict[str, int] = Field(default_factory=dict)
    red_flag_distribution: dict[str, int] = Field(default_factory=dict)


class BatchReport(BaseModel):
    projects: list[BatchProjectResult] = Field(default_factory=list)
    summary: BatchSummary = Field(default_factory=BatchSummary)


def _parse_cell(raw: str | None) -> float | None:
    text = str(raw or "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return 0.0


def parse_batch_csv(
    text: str,
    *,
    max_projects: int = DEFAULT_MAX_PROJECTS,
    weights: Sequence[MetricWeight] | None = None,
) -> list[BatchItem]:
    """Read one project per row; metric columns are matched by key."""

    reader = csv.DictReader(io.StringIO(str(text or "").lstrip("\ufeff")))
    header = [str(name or "").strip().lower() for name in (reader.fieldnames or [])]
    if not header:
        raise BatchInputError("Batch CSV is empty.")
    input_column = next((name for name in _INPUT_COLUMNS if name in header), None)
    if input_column is None:
        raise BatchInputError("Batch CSV needs an 'input' column.")
    metric_keys = [item.key for item in (weights or DEFAULT_METRIC_WEIGHTS)]

    items: list[BatchItem] = []
    for row in reader:
        normalized = {str(k or "").strip().lower(): v for k, v in row.items()}
        project = str(normalized.get(input_column) or "").strip()
        if not project:
            continue
        metrics: dict[str, float] = {}
        for key in metric_keys:
            value = _parse_cell(normalized.get(key))
            if value is not None:
                metrics[key] = value
        items.append(BatchItem(input=project, metrics=metrics))
        if len(items) > max_projects:
            raise BatchInputError(f"Batch exceeds the limit of {max_projects} projects.")
    return items


def _top_red_flag(metrics: Mapping[str, Any], verdict: DisplayVerdict, weights: Sequence[MetricWeight]) -> str:
    if verdict == "PASS":
        return CLEAN_METRICS
    breakdown = get_score_breakdown(metrics, weights)
    if not breakdown or breakdown[0].contribution <= 0:
        return CLEAN_METRICS
    return breakdown[0].name


def score_batch(
    items: Sequence[BatchItem],
    weights: Sequence[MetricWeight] | None = None,
    *,
    reject_threshold: int = REJECT_THRESHOLD,
    flag_threshold: int = DISPLAY_FLAG_THRESHOLD,
    display_reject_threshold: int = DISPLAY_REJECT_THRESHOLD,
) -> BatchReport:
    active = weights or DEFAULT_METRIC_WEIGHTS
    projects: list[BatchProjectResult] = []
    for item in items:
        result = score_project(item.metrics, active, reject_threshold=reject_threshold)
        display = classify_verdict(
            result.score,
            flag_threshold=flag_threshold,
            reject_threshold=display_reject_threshold,
        )
        projects.append(
            BatchProjectResult(
                identifier=parse_identifier(item.input),
                result=result,
                display_verdict=display,
                top_red_flag=_top_red_flag(item.metrics, display, active),
            )
        )
    return BatchReport(projects=projects, summary=summarize_batch(projects))


def summarize_batch(projects: Sequence[BatchProjectResult]) -> BatchSummary:
    if not projects:
        return BatchSummary()
    verdicts = Counter(item.display_verdict for item in projects)
    tiers = Counter(item.result.tier.tier for item in projects)
    red_flags = Counter(item.top_red_flag for item in projects if item.display_verdict == "REJECT")
    average = sum(item.result.score for item in projects) / len(projects)
    return BatchSummary(
        total=len(projects),
        passed=verdicts.get("PASS", 0),
        flagged=verdicts.get("FLAG", 0),
        rejected=verdicts.get("REJECT", 0),
        average_risk_score=round_half_up(average),
        tier_distribution=dict(tiers),
        red_flag_distribution=dict(red_flags.most_common()),
    )
