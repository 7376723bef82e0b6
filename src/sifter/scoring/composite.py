"""Deterministic composite risk score, tiers and verdicts."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import math
from typing import Any

from sifter.domain.scoring import (
    BreakdownEntry,
    CompositeResult,
    DisplayVerdict,
    MetricWeight,
    RiskTier,
    Verdict,
)
from sifter.scoring.weights import DEFAULT_METRIC_WEIGHTS

REJECT_THRESHOLD = 75
DISPLAY_FLAG_THRESHOLD = 40
DISPLAY_REJECT_THRESHOLD = 70

_TIERS: tuple[tuple[int, RiskTier], ...] = (
    (30, RiskTier(tier="LOW", label="Low Risk", color="green")),
    (50, RiskTier(tier="MODERATE", label="Moderate Risk", color="yellow")),
    (74, RiskTier(tier="ELEVATED", label="Elevated Risk", color="orange")),
)
_HIGH_TIER = RiskTier(tier="HIGH", label="High Risk", color="red")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _coerce_score(raw: Any) -> float:
    if isinstance(raw, bool):
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value


def _present_scores(
    metric_scores: Mapping[str, Any],
    weights: Sequence[MetricWeight],
) -> list[tuple[MetricWeight, float]]:
    present: list[tuple[MetricWeight, float]] = []
    for metric in weights:
        raw = metric_scores.get(metric.key)
        if raw is None:
            continue
        present.append((metric, _coerce_score(raw)))
    return present


def weighted_sum(
    metric_scores: Mapping[str, Any],
    weights: Sequence[MetricWeight] | None = None,
) -> tuple[float, float]:
    """Return the (normalized weighted sum, used weight) before rounding."""

    active = weights or DEFAULT_METRIC_WEIGHTS
    total = 0.0
    used = 0.0
    for metric, score in _present_scores(metric_scores or {}, active):
        total += score * metric.weight
        used += metric.weight
    if 0 < used < 1.0:
        total = total / used
    return total, used


def calculate_composite_score(
    metric_scores: Mapping[str, Any],
    weights: Sequence[MetricWeight] | None = None,
) -> int:
    """Aggregate per-metric risk scores into one 0-100 composite score.

    Keys outside the weight table are ignored. When only part of the table is
    supplied the sum is renormalized over the weight actually used.
    """

    total, used = weighted_sum(metric_scores, weights)
    if used <= 0:
        return 0
    return round_half_up(total)


def get_risk_tier(score: int | float) -> RiskTier:
    for upper, tier in _TIERS:
        if score <= upper:
            return tier
    return _HIGH_TIER


def get_verdict(score: int | float, *, reject_threshold: int = REJECT_THRESHOLD) -> Verdict:
    return "REJECT" if score >= reject_threshold else "PROCEED"


def classify_verdict(
    score: int | float,
    *,
    flag_threshold: int = DISPLAY_FLAG_THRESHOLD,
    reject_threshold: int = DISPLAY_REJECT_THRESHOLD,
) -> DisplayVerdict:
    """Three-way PASS/FLAG/REJECT label used by dashboards and batch summaries."""

    if score >= reject_threshold:
        return "REJECT"
    if score >= flag_threshold:
        return "FLAG"
    return "PASS"


def score_project(
    metric_scores: Mapping[str, Any],
    weights: Sequence[MetricWeight] | None = None,
    *,
    reject_threshold: int = REJECT_THRESHOLD,
) -> CompositeResult:
    score = calculate_composite_score(metric_scores, weights)
    return CompositeResult(
        score=score,
        tier=get_risk_tier(score),
        verdict=get_verdict(score, reject_threshold=reject_threshold),
    )


def get_score_breakdown(
    metric_scores: Mapping[str, Any],
    weights: Sequence[MetricWeight] | None = None,
) -> list[BreakdownEntry]:
    """Per-metric contributions, sorted by contribution (largest first).

    Contributions are scaled by the same renormalization as the composite, so
    they add up to the unrounded composite score. Metrics absent from the input
    are listed with a zero score.
    """

    active = weights or DEFAULT_METRIC_WEIGHTS
    scores = metric_scores or {}
    total, used = weighted_sum(scores, active)
    scale = 1.0 / used if 0 < used < 1.0 else 1.0

    entries: list[BreakdownEntry] = []
    for metric in active:
        raw = scores.get(metric.key)
        present = raw is not None
        score = _coerce_score(raw) if present else 0.0
        contribution = score * metric.weight * scale if present else 0.0
        entries.append(
            BreakdownEntry(
                key=metric.key,
                name=metric.name,
                weight=metric.weight,
                score=score,
                contribution=contribution,
                percent_of_total=(contribution / total) * 100 if total > 0 else 0.0,
                present=present,
            )
        )
    entries.sort(key=lambda item: item.contribution, reverse=True)
    return entries
