# momentdist/kernel/convergence.py
"""
Per-member-end error metric and the stop test for the relaxation loop.

For each live cell (i, j) at pass k >= 1 the error percentage is picked by
the first rule that applies:

    1. total != 0, balance != 0, |total| >= |balance|     balance / total * 100
    2. total != 0, prev_co != 0, |total| >= |prev_co|     prev_co / total * 100
    3. prev_co != 0                                       prev_co * 100
    4. balance != 0                                       balance * 100
    5. otherwise                                          0

where balance and total belong to pass k and prev_co is the carry-over of
pass k-1. Rules 3 and 4 are not error bounds: they inflate the value so the
loop keeps going when the ratio test cannot be applied. Division only
happens where the divisor is non-zero.
"""

import numpy as np

from .pairs import connected_mask


def edge_errors(
    balance: np.ndarray,
    total: np.ndarray,
    previous_carry_over: np.ndarray,
    connections: np.ndarray,
) -> np.ndarray:
    """
    Signed error percentage for every live cell (0.0 elsewhere).

    Args:
        balance: Balance matrix of the current pass
        total: Running total after the current pass
        previous_carry_over: Carry-over matrix of the previous pass
        connections: Connection flags

    Returns:
        N×N array of error percentages
    """
    mask = connected_mask(connections)
    bal = np.where(mask, balance, 0.0)
    tot = np.where(mask, total, 0.0)
    prev_co = np.where(mask, previous_carry_over, 0.0)

    bal_ratio = np.divide(bal, tot, out=np.zeros_like(tot), where=tot != 0)
    co_ratio = np.divide(prev_co, tot, out=np.zeros_like(tot), where=tot != 0)

    conditions = [
        (tot != 0) & (bal != 0) & (np.abs(tot) >= np.abs(bal)),
        (tot != 0) & (prev_co != 0) & (np.abs(tot) >= np.abs(prev_co)),
        prev_co != 0,
        bal != 0,
    ]
    choices = [
        bal_ratio * 100.0,
        co_ratio * 100.0,
        prev_co * 100.0,
        bal * 100.0,
    ]
    errors = np.select(conditions, choices, default=0.0)
    return np.where(mask, errors, 0.0)


def max_error_percent(
    balance: np.ndarray,
    total: np.ndarray,
    previous_carry_over: np.ndarray,
    connections: np.ndarray,
) -> float:
    """Largest absolute error percentage over all live cells."""
    errors = edge_errors(balance, total, previous_carry_over, connections)
    if errors.size == 0:
        return 0.0
    return float(np.max(np.abs(errors)))


def is_converged(error_percent: float, min_error_percent: float) -> bool:
    """Stop test: strictly below the requested tolerance."""
    return error_percent < min_error_percent
