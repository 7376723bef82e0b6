"""Tagged check outcomes and the confidence aggregation rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from sifter.domain.verification import CheckStatus


@dataclass(frozen=True)
class Passed:
    details: str = ""
    status: CheckStatus = "passed"


@dataclass(frozen=True)
class Failed:
    details: str = ""
    status: CheckStatus = "failed"


@dataclass(frozen=True)
class Warned:
    details: str = ""
    status: CheckStatus = "warning"


CheckOutcome = Union[Passed, Failed, Warned]


def confidence_delta(outcome: CheckOutcome, weight: float) -> float:
    """Points a resolved check contributes: +weight, -weight/2 or nothing."""

    if isinstance(outcome, Passed):
        return float(weight)
    if isinstance(outcome, Failed):
        return -float(weight) / 2
    if isinstance(outcome, Warned):
        return 0.0
    raise TypeError(f"Unsupported check outcome: {type(outcome).__name__}")


def apply_outcome(confidence: float, outcome: CheckOutcome, weight: float) -> float:
    return max(0.0, confidence + confidence_delta(outcome, weight))
