"""Ordered registry of verification checks."""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Callable, Union

from sifter.core.errors import CheckRegistrationError
from sifter.domain.verification import Submission
from sifter.verification.outcomes import CheckOutcome

CheckRunner = Callable[[Submission], Union[CheckOutcome, Awaitable[CheckOutcome]]]


@dataclass(frozen=True)
class CheckSpec:
    id: str
    name: str
    weight: float
    run: CheckRunner = field(repr=False, compare=False)
    description: str = ""


@dataclass
class CheckRegistry:
    """Checks run in registration order."""

    _entries: dict[str, CheckSpec] = field(default_factory=dict, init=False, repr=False)

    def register(self, spec: CheckSpec) -> None:
        check_id = str(spec.id).strip()
        if not check_id:
            raise CheckRegistrationError("Check id must be non-empty.")
        if spec.weight < 0 or spec.weight > 100:
            raise CheckRegistrationError(f"Check '{check_id}' weight must be within 0..100.")
        if check_id in self._entries:
            raise CheckRegistrationError(f"Check '{check_id}' already registered.")
        self._entries[check_id] = spec

    def spec(self, check_id: str) -> CheckSpec:
        entry = self._entries.get(str(check_id).strip())
        if entry is None:
            raise CheckRegistrationError(f"Check '{check_id}' is not registered.")
        return entry

    def specs(self) -> list[CheckSpec]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
