"""Composite scoring result structures."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TierName = Literal["LOW", "MODERATE", "ELEVATED", "HIGH"]
Verdict = Literal["REJECT", "PROCEED"]
DisplayVerdict = Literal["PASS", "FLAG", "REJECT"]


class MetricWeight(BaseModel):
    """One entry of the static metric weight table."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    name: str
    weight: float = Field(ge=0.0, le=1.0)
    description: str = ""


class RiskTier(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier: TierName
    label: str
    color: str


class CompositeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int
    tier: RiskTier
    verdict: Verdict


class BreakdownEntry(BaseModel):
    key: str
    name: str
    weight: float
    score: float
    contribution: float
    percent_of_total: float
    present: bool = True
