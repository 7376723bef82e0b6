import math

import pytest

from sifter.scoring.composite import (
    calculate_composite_score,
    classify_verdict,
    get_risk_tier,
    get_score_breakdown,
    get_verdict,
    round_half_up,
    score_project,
)
from sifter.scoring.weights import DEFAULT_METRIC_WEIGHTS


def test_empty_metrics_score_zero():
    assert calculate_composite_score({}) == 0
    assert calculate_composite_score({"unknown_metric": 95}) == 0


def test_single_metric_is_renormalized():
    assert calculate_composite_score({"team_identity": 100}) == 100
    assert calculate_composite_score({"likely_agency": 42}) == 42


def test_full_table_uses_plain_weighted_sum():
    metrics = {item.key: 50 for item in DEFAULT_METRIC_WEIGHTS}
    assert calculate_composite_score(metrics) == 50


def test_partial_metrics_regression(regression_metrics):
    assert calculate_composite_score(regression_metrics) == 73

    result = score_project(regression_metrics)
    assert result.score == 73
    assert result.tier.tier == "ELEVATED"
    assert result.verdict == "PROCEED"
    assert classify_verdict(result.score) == "REJECT"


def test_missing_and_invalid_values():
    assert calculate_composite_score({"team_identity": None, "likely_agency": 60}) == 60
    # Unparseable values count as present with a zero score.
    assert calculate_composite_score({"team_identity": "n/a", "likely_agency": 60}) == 33
    assert calculate_composite_score({"team_identity": math.nan}) == 0
    assert calculate_composite_score({"team_identity": True}) == 0


def test_score_is_monotonic_in_each_metric(regression_metrics):
    previous = -1
    for value in range(0, 101, 5):
        metrics = dict(regression_metrics, mercenary_ratio=value)
        score = calculate_composite_score(metrics)
        assert score >= previous
        previous = score


def test_round_half_up():
    assert round_half_up(72.5) == 73
    assert round_half_up(72.49) == 72
    assert round_half_up(0.5) == 1


@pytest.mark.parametrize(
    ("score", "tier"),
    [(0, "LOW"), (30, "LOW"), (31, "MODERATE"), (50, "MODERATE"), (51, "ELEVATED"), (74, "ELEVATED"), (75, "HIGH")],
)
def test_risk_tier_boundaries(score, tier):
    assert get_risk_tier(score).tier == tier


def test_high_tier_label():
    tier = get_risk_tier(100)
    assert tier.label == "High Risk"
    assert tier.color == "red"


def test_verdict_threshold():
    assert get_verdict(74) == "PROCEED"
    assert get_verdict(75) == "REJECT"
    assert get_verdict(60, reject_threshold=60) == "REJECT"


def test_classify_verdict_bands():
    assert classify_verdict(39) == "PASS"
    assert classify_verdict(40) == "FLAG"
    assert classify_verdict(69) == "FLAG"
    assert classify_verdict(70) == "REJECT"


def test_breakdown_sums_to_unrounded_composite(regression_metrics):
    breakdown = get_score_breakdown(regression_metrics)

    assert len(breakdown) == len(DEFAULT_METRIC_WEIGHTS)
    assert sum(entry.contribution for entry in breakdown) == pytest.approx(32.7 / 0.45)
    assert sum(entry.percent_of_total for entry in breakdown) == pytest.approx(100.0)
    assert breakdown[0].key == "likely_agency"
    assert breakdown[0].contribution == pytest.approx(30.0)
    contributions = [entry.contribution for entry in breakdown]
    assert contributions == sorted(contributions, reverse=True)


def test_breakdown_marks_missing_metrics(regression_metrics):
    breakdown = {entry.key: entry for entry in get_score_breakdown(regression_metrics)}
    assert breakdown["team_identity"].present is True
    assert breakdown["ghost_admins"].present is False
    assert breakdown["ghost_admins"].score == 0.0
    assert breakdown["ghost_admins"].contribution == 0.0


def test_breakdown_of_empty_input():
    breakdown = get_score_breakdown({})
    assert all(entry.contribution == 0.0 for entry in breakdown)
    assert all(entry.percent_of_total == 0.0 for entry in breakdown)
