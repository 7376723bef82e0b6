"""Confidence accumulation over ordered verification checks."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import inspect
from typing import Any

from sifter.core.logging_config import get_logger
from sifter.core.tracing import TraceEvent, TraceSink, make_event
from sifter.domain.verification import Submission, VerificationCheck, VerificationRun, utc_now
from sifter.scoring.composite import round_half_up
from sifter.verification.outcomes import CheckOutcome, confidence_delta
from sifter.verification.registry import CheckSpec
from sifter.verification.thresholds import ModeTable, decide, thresholds_for

log = get_logger(__name__)

_STAGE = "verification"


async def _invoke(spec: CheckSpec, submission: Submission | None) -> CheckOutcome:
    result = spec.run(submission)
    if inspect.isawaitable(result):
        result = await result
    return result


async def _prefetch(specs: Sequence[CheckSpec], submission: Submission | None) -> list[Any]:
    return list(await asyncio.gather(*(_invoke(spec, submission) for spec in specs), return_exceptions=True))


async def run_verification_async(
    checks: Sequence[CheckSpec],
    mode: str,
    submission: Submission | None = None,
    *,
    mode_table: ModeTable | None = None,
    concurrent: bool = False,
    on_event: TraceSink | None = None,
) -> VerificationRun:
    """Run checks and classify the accumulated confidence for `mode`.

    Confidence starts at 0; a passed check adds its weight, a failed check
    removes half of it (never below 0) and a warning leaves it unchanged. A
    check that raises is logged and left pending without touching confidence.
    With ``concurrent=True`` checks execute together but their results are
    still applied in the declared order, so ``progress`` is identical. The
    decision is taken on the reported confidence: capped at 100, rounded half-up.
    """

    thresholds = thresholds_for(mode, mode_table)
    specs = list(checks)
    trace: list[TraceEvent] = []

    def emit(event: TraceEvent) -> None:
        trace.append(event)
        if on_event is not None:
            on_event(event)

    emit(make_event(_STAGE, "started", f"Running {len(specs)} checks", {"mode": mode}))
    prefetched = await _prefetch(specs, submission) if concurrent else []

    confidence = 0.0
    progress: list[float] = []
    records: list[VerificationCheck] = []
    for index, spec in enumerate(specs):
        record = VerificationCheck(
            id=spec.id,
            name=spec.name,
            description=spec.description,
            weight=spec.weight,
        )
        try:
            if concurrent:
                outcome = prefetched[index]
                if isinstance(outcome, BaseException):
                    raise outcome
            else:
                outcome = await _invoke(spec, submission)
            delta = confidence_delta(outcome, spec.weight)
        except Exception as exc:
            log.warning("Check %s failed: %s", spec.id, exc, exc_info=True)
            records.append(record.model_copy(update={"details": f"Check raised {type(exc).__name__}: {exc}"}))
            progress.append(confidence)
            emit(make_event(_STAGE, "error", f"{spec.name} raised", {"check": spec.id, "confidence": confidence}))
            continue

        confidence = max(0.0, confidence + delta)
        progress.append(confidence)
        records.append(
            record.model_copy(
                update={
                    "status": outcome.status,
                    "details": outcome.details,
                    "points": delta,
                    "timestamp": utc_now(),
                }
            )
        )
        emit(
            make_event(
                _STAGE,
                outcome.status,
                spec.name,
                {"check": spec.id, "points": delta, "confidence": confidence},
            )
        )

    reported = round_half_up(min(100.0, confidence))
    decision = decide(reported, thresholds)
    manual = decision == "needs_manual_review"
    emit(make_event(_STAGE, "completed", decision, {"confidence": reported}))
    return VerificationRun(
        mode=mode,
        checks=records,
        confidence=reported,
        progress=progress,
        auto_decision=decision,
        next_step=thresholds.workflow.manual_stage if manual else None,
        estimated_review_time=thresholds.sla if manual else None,
        trace=trace,
    )


def run_verification(
    checks: Sequence[CheckSpec],
    mode: str,
    submission: Submission | None = None,
    *,
    mode_table: ModeTable | None = None,
    concurrent: bool = False,
    on_event: TraceSink | None = None,
) -> VerificationRun:
    """Blocking wrapper around :func:`run_verification_async`.

    Must not be called from inside a running event loop.
    """

    return asyncio.run(
        run_verification_async(
            checks,
            mode,
            submission,
            mode_table=mode_table,
            concurrent=concurrent,
            on_event=on_event,
        )
    )
