# momentdist/run.py - validate a payload, then run the relaxation loop
"""
One-call entry point for the UI layer: raw payload in, SolveOutcome out.

    outcome = solve_payload(RawPayload.from_dict(data))
    if outcome.success:
        outcome.history.final_total
    else:
        outcome.failure   # which joint / cell to highlight
"""

from dataclasses import dataclass
from typing import Optional

from .kernel.engine import solve
from .results import ResultHistory
from .validate import RawPayload, ValidationFailure, validate_payload


@dataclass(frozen=True)
class SolveOutcome:
    """History on success, the first validation failure otherwise."""
    success: bool
    history: Optional[ResultHistory] = None
    failure: Optional[ValidationFailure] = None

    @property
    def error(self) -> Optional[str]:
        return self.failure.message if self.failure is not None else None


def solve_payload(payload: RawPayload) -> SolveOutcome:
    """
    Validate and solve. Never raises for bad input: a validation failure
    comes back with success=False and no records.
    """
    result = validate_payload(payload)
    if not result.success:
        return SolveOutcome(success=False, failure=result.failure)

    history = solve(
        result.model,
        max_iterations=result.settings.max_iterations,
        min_error_percent=result.settings.min_error_percent,
    )
    return SolveOutcome(success=True, history=history)
