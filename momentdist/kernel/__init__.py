# momentdist/kernel - Numerical core of the moment distribution method
"""
KERNEL: THE NUMERICAL CORE
==========================

    pairs.py        which matrix cells are live (one helper used everywhere)
    convergence.py  per-member-end error metric and the stop test
    engine.py       relaxation passes and the solve loop

engine.py depends on the model and result types, so it is imported as
`momentdist.kernel.engine` (or via `momentdist.run`) rather than
re-exported here; model.py itself depends on pairs.py.
"""

from .pairs import connected_mask, connected_pairs, column_sums, member_count
from .convergence import edge_errors, max_error_percent, is_converged

__all__ = [
    'connected_mask', 'connected_pairs', 'column_sums', 'member_count',
    'edge_errors', 'max_error_percent', 'is_converged',
]
