import asyncio

import pytest

from sifter.core.errors import UnknownModeError
from sifter.verification.engine import run_verification, run_verification_async
from sifter.verification.outcomes import Failed, Passed, Warned
from sifter.verification.registry import CheckSpec
from sifter.verification.thresholds import DEFAULT_MODE_THRESHOLDS, decide

WEIGHTS = [30, 25, 20, 15, 10]


def _specs(outcomes, weights=WEIGHTS):
    return [
        CheckSpec(id=f"check_{index}", name=f"Check {index}", weight=weight, run=lambda _s, o=outcome: o)
        for index, (weight, outcome) in enumerate(zip(weights, outcomes))
    ]


def test_all_checks_pass():
    run = run_verification(_specs([Passed()] * 5), "individual")
    assert run.confidence == 100
    assert run.progress == [30, 55, 75, 90, 100]
    assert run.auto_decision == "auto_approved"
    assert run.next_step is None
    assert [check.status for check in run.checks] == ["passed"] * 5


def test_all_checks_fail_floor_at_zero():
    run = run_verification(_specs([Failed()] * 5), "ea-vc")
    assert run.confidence == 0
    assert run.progress == [0, 0, 0, 0, 0]
    assert run.auto_decision == "auto_rejected"
    assert run.checks[0].points == -15


def test_mixed_outcomes_route_to_manual_review():
    outcomes = [Passed(), Passed(), Warned(), Failed(), Passed()]
    run = run_verification(_specs(outcomes), "individual")
    assert run.progress == [30, 55, 55, 47.5, 57.5]
    assert run.confidence == 58
    assert run.auto_decision == "needs_manual_review"
    assert run.next_step == "admin_review"
    assert run.estimated_review_time == "48-72h"


def test_individual_mode_thresholds():
    thresholds = DEFAULT_MODE_THRESHOLDS["individual"]
    assert decide(61, thresholds) == "auto_approved"
    assert decide(60, thresholds) == "auto_approved"
    assert decide(40, thresholds) == "auto_rejected"
    assert decide(50, thresholds) == "needs_manual_review"


def test_confidence_is_capped_at_one_hundred():
    run = run_verification(_specs([Passed(), Passed()], weights=[80, 80]), "researcher")
    assert run.progress == [80, 160]
    assert run.confidence == 100
    assert run.auto_decision == "auto_approved"


def test_raising_check_stays_pending():
    def boom(_submission):
        raise RuntimeError("lookup down")

    specs = _specs([Passed(), Passed()], weights=[30, 25])
    specs.insert(1, CheckSpec(id="flaky", name="Flaky", weight=20, run=boom))
    run = run_verification(specs, "individual")

    flaky = run.checks[1]
    assert flaky.status == "pending"
    assert "RuntimeError" in flaky.details
    assert flaky.points == 0
    assert run.progress == [30, 30, 55]
    assert run.confidence == 55
    assert [event["status"] for event in run.trace] == ["started", "passed", "error", "passed", "completed"]


def test_unknown_mode_raises():
    with pytest.raises(UnknownModeError):
        run_verification(_specs([Passed()]), "vip")


def test_concurrent_matches_sequential_order():
    async def slow_pass(_submission):
        await asyncio.sleep(0.01)
        return Passed("slow")

    specs = [
        CheckSpec(id="slow", name="Slow", weight=30, run=slow_pass),
        CheckSpec(id="fail", name="Fail", weight=40, run=lambda _s: Failed("bad")),
        CheckSpec(id="fast", name="Fast", weight=10, run=lambda _s: Passed("fast")),
    ]
    sequential = run_verification(specs, "researcher")
    concurrent = asyncio.run(run_verification_async(specs, "researcher", concurrent=True))

    assert concurrent.progress == sequential.progress == [30, 10, 20]
    assert [c.details for c in concurrent.checks] == ["slow", "bad", "fast"]
    assert concurrent.confidence == sequential.confidence == 20
    assert concurrent.auto_decision == "auto_rejected"


def test_events_are_forwarded_to_sink():
    events = []
    run = run_verification(_specs([Passed(), Warned()]), "individual", on_event=events.append)
    assert events == run.trace
    assert events[0]["stage"] == "verification"
    assert events[-1]["status"] == "completed"
    assert events[-1]["message"] == "auto_rejected"
    assert events[-1]["data"] == {"confidence": 30.0}


def test_decision_uses_reported_confidence():
    run = run_verification(_specs([Passed(), Failed()], weights=[60, 1]), "individual")
    assert run.progress == [60, 59.5]
    assert run.confidence == 60
    assert run.auto_decision == "auto_approved"
    assert run.next_step is None
