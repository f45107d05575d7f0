# momentdist/kernel/engine.py
"""Relaxation loop of the moment distribution method."""

import logging
from typing import List, Optional

import numpy as np

from ..config import CONFIG
from ..model import StructureModel
from ..results import IterationRecord, ResultHistory
from .convergence import is_converged, max_error_percent
from .pairs import column_sums, connected_mask, member_count

logger = logging.getLogger(__name__)


def run_pass(
    model: StructureModel,
    previous_total: np.ndarray,
    previous_carry_over: Optional[np.ndarray] = None,
) -> IterationRecord:
    """
    One balance + carry-over pass.

    Pass 0 is run with previous_total = initial moments; every later pass
    uses the total of the pass before it. The formulas are the same:

        unbalanced[j]  = applied[j] - Σ_i previous_total[i][j]
        balance[i][j]  = DF[i][j] * unbalanced[j]
        carry[i][j]    = COF[j][i] * balance[j][i]
        total[i][j]    = previous_total[i][j] + balance[i][j] + carry[i][j]

    Carry-over runs against the distribution direction: what was balanced
    at the far end j of member (i, j) comes back to i.

    Args:
        model: Validated structure
        previous_total: Running total carried in (N×N)
        previous_carry_over: Carry-over matrix of the previous pass. When
            given, the pass also records its max error percentage.

    Returns:
        IterationRecord for this pass (all non-live cells are 0.0)
    """
    mask = connected_mask(model.connections)
    carried = np.where(mask, previous_total, 0.0)

    unbalanced = model.applied_moment - column_sums(carried, model.connections)
    balance = np.where(mask, model.distribution_factor * unbalanced[np.newaxis, :], 0.0)
    carry_over = np.where(mask, model.carry_over_factor.T * balance.T, 0.0)
    total = np.where(mask, carried + balance + carry_over, 0.0)

    error = None
    if previous_carry_over is not None:
        error = max_error_percent(balance, total, previous_carry_over, model.connections)

    for arr in (balance, carry_over, total):
        arr.setflags(write=False)
    return IterationRecord(balance=balance, carry_over=carry_over, total=total,
                           max_error_percent=error)


def solve(
    model: StructureModel,
    max_iterations: int = CONFIG.default_max_iterations,
    min_error_percent: float = CONFIG.default_min_error_percent,
) -> ResultHistory:
    """
    Run passes until the error drops below min_error_percent or
    max_iterations passes have been run.

    Running out of passes is not an error: the full history comes back with
    converged=False and the caller decides how to report it.

    Raises:
        ValueError: If the settings are out of range (validate_payload
            catches these before they get here)
    """
    if not CONFIG.min_iterations <= max_iterations <= CONFIG.max_iterations:
        raise ValueError(
            f"max_iterations must be in [{CONFIG.min_iterations}, {CONFIG.max_iterations}], "
            f"got {max_iterations}"
        )
    if not np.isfinite(min_error_percent) or min_error_percent <= 0:
        raise ValueError(f"min_error_percent must be positive, got {min_error_percent}")

    records: List[IterationRecord] = [run_pass(model, model.initial_moment)]
    logger.debug("Pass 0 done for %d joints, %d members",
                 model.n_joints, member_count(model.connections))

    while len(records) < max_iterations:
        previous = records[-1]
        record = run_pass(model, previous.total, previous.carry_over)
        records.append(record)
        logger.debug("Pass %d: max error %.6g%%", len(records) - 1, record.max_error_percent)

        if is_converged(record.max_error_percent, min_error_percent):
            logger.info("Converged after %d passes (error %.6g%% < %g%%)",
                        len(records), record.max_error_percent, min_error_percent)
            break
    else:
        if max_iterations > 1:
            logger.warning(
                "No convergence after %d passes: error %.6g%% >= %g%%",
                max_iterations, records[-1].max_error_percent, min_error_percent,
            )

    return ResultHistory(
        model=model,
        records=tuple(records),
        max_iterations=max_iterations,
        min_error_percent=min_error_percent,
    )
