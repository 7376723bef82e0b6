"""Verification confidence engine."""

from .checks import default_check_registry
from .engine import run_verification, run_verification_async
from .outcomes import CheckOutcome, Failed, Passed, Warned, apply_outcome, confidence_delta
from .registry import CheckRegistry, CheckSpec
from .thresholds import DEFAULT_MODE_THRESHOLDS, decide, thresholds_for

__all__ = [
    "DEFAULT_MODE_THRESHOLDS",
    "CheckOutcome",
    "CheckRegistry",
    "CheckSpec",
    "Failed",
    "Passed",
    "Warned",
    "apply_outcome",
    "confidence_delta",
    "decide",
    "default_check_registry",
    "run_verification",
    "run_verification_async",
    "thresholds_for",
]
