"""Per-mode auto-decision thresholds and review routing."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sifter.core.errors import ConfigError, UnknownModeError
from sifter.domain.verification import MODES, AutoDecision, ModeThresholds, ReviewWorkflow

ModeTable = Mapping[str, ModeThresholds]

DEFAULT_MODE_THRESHOLDS: dict[str, ModeThresholds] = {
    "ea-vc": ModeThresholds(
        auto_approve=85,
        auto_reject=20,
        review_priority="high",
        sla="12-24h",
        min_evidence=4,
        workflow=ReviewWorkflow(
            stages=["auto_screening", "vc_peer_review", "compliance_check", "legal_clearance"],
            total_time="12-24h",
        ),
    ),
    "researcher": ModeThresholds(
        auto_approve=75,
        auto_reject=30,
        review_priority="medium",
        sla="24-48h",
        min_evidence=3,
        workflow=ReviewWorkflow(
            stages=["auto_validation", "methodology_review", "peer_verification", "impact_assessment"],
            total_time="24-48h",
        ),
    ),
    "individual": ModeThresholds(
        auto_approve=60,
        auto_reject=40,
        review_priority="standard",
        sla="48-72h",
        min_evidence=2,
        workflow=ReviewWorkflow(
            stages=["auto_verification", "admin_review", "quality_check", "final_decision"],
            total_time="48-72h",
        ),
    ),
}


def build_mode_table(raw: Any) -> dict[str, ModeThresholds]:
    """Validate a YAML `modes` mapping; missing modes keep their defaults."""

    if raw is None:
        return dict(DEFAULT_MODE_THRESHOLDS)
    if not isinstance(raw, dict):
        raise ConfigError("modes must be a mapping keyed by mode.")

    table = dict(DEFAULT_MODE_THRESHOLDS)
    for mode, payload in raw.items():
        if mode not in MODES:
            raise ConfigError(f"Unknown mode in configuration: {mode!r}")
        if not isinstance(payload, dict):
            raise ConfigError(f"Thresholds for mode {mode!r} must be a mapping.")
        merged = table[mode].model_dump()
        merged.update(payload)
        try:
            table[mode] = ModeThresholds.model_validate(merged)
        except ValueError as exc:
            raise ConfigError(f"Invalid thresholds for mode {mode!r}: {exc}") from exc
    return table


def thresholds_for(mode: str, table: ModeTable | None = None) -> ModeThresholds:
    active = table if table is not None else DEFAULT_MODE_THRESHOLDS
    entry = active.get(str(mode or "").strip())
    if entry is None:
        raise UnknownModeError(f"No verification thresholds for mode {mode!r}.")
    return entry


def decide(confidence: float, thresholds: ModeThresholds) -> AutoDecision:
    if confidence >= thresholds.auto_approve:
        return "auto_approved"
    if confidence <= thresholds.auto_reject:
        return "auto_rejected"
    return "needs_manual_review"
