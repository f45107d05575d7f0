# momentdist/kernel/pairs.py
"""
CONNECTED PAIRS: Which Matrix Cells Matter
==========================================

PURPOSE:
--------
Every per-member table in moment distribution (DF, COF, initial moments,
balances, carry-overs, totals) is stored as an N×N matrix, but only a few
cells carry meaning:

    - the diagonal is never used (a joint does not distribute into itself)
    - a cell (i, j) is only used when joints i and j are joined by a member

This module is the ONE place that decides which cells those are. The
validator, the relaxation engine and the convergence check all go through
it, so a cell is either "live" everywhere or nowhere.

USAGE:
------
    mask = connected_mask(connections)          # boolean N×N, False on diagonal
    for i, j in connected_pairs(connections):   # row-major (i, j) with i != j
        ...
    sums = column_sums(total, connections)      # Σ_i total[i][j] over live cells
"""

from typing import Iterator, Tuple

import numpy as np


def connected_mask(connections: np.ndarray) -> np.ndarray:
    """
    Boolean mask of live cells.

    Parameters:
    -----------
    connections : np.ndarray
        N×N array of connection flags (anything numpy can read as bool)

    Returns:
    --------
    np.ndarray
        N×N bool array, True where joints i and j are connected and i != j.
    """
    mask = np.array(connections, dtype=bool)
    np.fill_diagonal(mask, False)
    return mask


def connected_pairs(connections: np.ndarray) -> Iterator[Tuple[int, int]]:
    """
    Yield every live (row, col) pair in row-major order.

    Row-major order matters to the validator: the first bad cell it meets
    is the one reported.
    """
    for i, j in np.argwhere(connected_mask(connections)):
        yield int(i), int(j)


def column_sums(matrix: np.ndarray, connections: np.ndarray) -> np.ndarray:
    """
    Sum each column of `matrix` over live cells only.

    For moment distribution, column j of a moment matrix holds the member-end
    moments acting at joint j, so this is the moment already "used up" at
    each joint.
    """
    mask = connected_mask(connections)
    return np.where(mask, matrix, 0.0).sum(axis=0)


def member_count(connections: np.ndarray) -> int:
    """Number of members (unordered pairs) in the structure."""
    return int(connected_mask(connections).sum()) // 2
