"""Verification run records and submission inputs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

Mode = Literal["ea-vc", "researcher", "individual"]
CheckStatus = Literal["pending", "passed", "failed", "warning"]
AutoDecision = Literal["auto_approved", "auto_rejected", "needs_manual_review"]

MODES: tuple[str, ...] = ("ea-vc", "researcher", "individual")


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class ReviewWorkflow(BaseModel):
    stages: list[str] = Field(min_length=1)
    total_time: str = ""

    @property
    def manual_stage(self) -> str:
        return self.stages[1] if len(self.stages) > 1 else self.stages[0]


class ModeThresholds(BaseModel):
    auto_approve: float = Field(ge=0, le=100)
    auto_reject: float = Field(ge=0, le=100)
    review_priority: str = "standard"
    sla: str = ""
    min_evidence: int = Field(default=1, ge=0)
    workflow: ReviewWorkflow

    @model_validator(mode="after")
    def _approve_above_reject(self) -> "ModeThresholds":
        if self.auto_reject >= self.auto_approve:
            raise ValueError("auto_reject must be lower than auto_approve")
        return self


class EvidenceItem(BaseModel):
    url: str = ""
    type: str = "other"
    description: str = ""


class Submission(BaseModel):
    """A flag submitted against an entity through the data-donation flow."""

    id: str = ""
    submitter_id: str = ""
    mode: Mode = "individual"
    entity_name: str = Field(min_length=1)
    project_name: str = ""
    allegation: str = ""
    evidence: list[EvidenceItem] = Field(default_factory=list)


class VerificationCheck(BaseModel):
    id: str
    name: str
    description: str = ""
    weight: float = Field(ge=0, le=100)
    status: CheckStatus = "pending"
    details: str = ""
    points: float = 0.0
    timestamp: datetime = Field(default_factory=utc_now)


class VerificationRun(BaseModel):
    mode: Mode
    checks: list[VerificationCheck] = Field(default_factory=list)
    confidence: int = Field(ge=0, le=100, default=0)
    progress: list[float] = Field(default_factory=list)
    auto_decision: AutoDecision = "needs_manual_review"
    next_step: str | None = None
    estimated_review_time: str | None = None
    trace: list[dict[str, Any]] = Field(default_factory=list)
