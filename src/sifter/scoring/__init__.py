"""Composite risk scoring."""

from .batch import BatchItem, BatchReport, parse_batch_csv, score_batch
from .composite import (
    calculate_composite_score,
    classify_verdict,
    get_risk_tier,
    get_score_breakdown,
    get_verdict,
    score_project,
)
from .weights import DEFAULT_METRIC_WEIGHTS, validate_weights

__all__ = [
    "DEFAULT_METRIC_WEIGHTS",
    "BatchItem",
    "BatchReport",
    "calculate_composite_score",
    "classify_verdict",
    "get_risk_tier",
    "get_score_breakdown",
    "get_verdict",
    "parse_batch_csv",
    "score_batch",
    "score_project",
    "validate_weights",
]
