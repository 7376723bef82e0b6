"""Static metric weight table for the composite risk score.

Each metric score is 0-100 where higher means riskier. Weights sum to 1.0.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sifter.core.errors import ConfigError
from sifter.core.logging_config import get_logger
from sifter.domain.scoring import MetricWeight

log = get_logger(__name__)

WEIGHT_SUM_TOLERANCE = 0.001

DEFAULT_METRIC_WEIGHTS: tuple[MetricWeight, ...] = (
    MetricWeight(
        key="team_identity",
        name="Team Identity",
        weight=0.12,
        description="Are team members doxxed with verifiable backgrounds?",
    ),
    MetricWeight(
        key="team_competence",
        name="Team Competence",
        weight=0.10,
        description="Do they have relevant experience and track record?",
    ),
    MetricWeight(
        key="likely_agency",
        name="Likely Agency",
        weight=0.15,
        description="Signs of paid marketing agency involvement",
    ),
    MetricWeight(
        key="mod_overlap",
        name="Mod overlap",
        weight=0.08,
        description="Moderators shared with known rugged/scam projects",
    ),
    MetricWeight(
        key="mercenary_ratio",
        name="Mercenary ratio",
        weight=0.10,
        description="Percentage of community that are paid promoters",
    ),
    MetricWeight(
        key="community_type",
        name="Community Type",
        weight=0.12,
        description="Organic vs botted/artificial community growth",
    ),
    MetricWeight(
        key="tweet_focus",
        name="Tweet focus (30d)",
        weight=0.06,
        description="Balance of product vs hype content",
    ),
    MetricWeight(
        key="ghost_admins",
        name="Ghost admins",
        weight=0.05,
        description="Hidden admin accounts with elevated permissions",
    ),
    MetricWeight(
        key="recycled_github",
        name="Recycled GitHub",
        weight=0.08,
        description="Code originality and contributor authenticity",
    ),
    MetricWeight(
        key="farming_velocity",
        name="Farming velocity spike",
        weight=0.04,
        description="Sudden spikes in airdrop farming activity",
    ),
    MetricWeight(
        key="bot_similarity",
        name="Bot-like similarity",
        weight=0.04,
        description="Pattern matching against known bot behaviors",
    ),
    MetricWeight(
        key="mutual_follow_deficit",
        name="Mutual-follow deficit",
        weight=0.06,
        description="Network reciprocity compared to organic baseline",
    ),
)


def total_weight(weights: Iterable[MetricWeight]) -> float:
    return sum(item.weight for item in weights)


def validate_weights(weights: Sequence[MetricWeight]) -> bool:
    """Return True when weights sum to 1.0; log a warning otherwise."""

    total = total_weight(weights)
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        log.warning("Metric weights sum to %s, expected 1.0", round(total, 6))
        return False
    return True


def build_weight_table(raw: Any) -> tuple[MetricWeight, ...]:
    """Build an immutable weight table from YAML-style rows."""

    if raw is None:
        return DEFAULT_METRIC_WEIGHTS
    if not isinstance(raw, list) or not raw:
        raise ConfigError("metric_weights must be a non-empty list.")

    table: list[MetricWeight] = []
    seen: set[str] = set()
    for row in raw:
        if not isinstance(row, dict):
            raise ConfigError(f"Invalid metric weight entry: {row!r}")
        try:
            item = MetricWeight.model_validate(
                {
                    "key": str(row.get("key", "")).strip(),
                    "name": str(row.get("name") or row.get("key", "")).strip(),
                    "weight": row.get("weight"),
                    "description": str(row.get("description") or "").strip(),
                }
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid metric weight entry {row!r}: {exc}") from exc
        if item.key in seen:
            raise ConfigError(f"Duplicate metric key: {item.key!r}")
        seen.add(item.key)
        table.append(item)
    return tuple(table)


validate_weights(DEFAULT_METRIC_WEIGHTS)
