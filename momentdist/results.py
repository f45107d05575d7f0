# momentdist/results.py
"""
RESULT HISTORY: What the Solver Hands Back
==========================================

One IterationRecord per relaxation pass, in pass order, plus the final
moments. Nothing is computed here beyond bookkeeping and reshaping for
display:

    history.iteration_count      number of passes actually run
    history.final_total          total matrix of the last pass
    history.converged            tolerance met before running out of passes
    history.distribution_table() pandas table laid out like a hand calculation
    history.to_dict()            plain structure for JSON / the UI layer

READING THE MATRICES:
---------------------
Cell [i][j] is the moment at joint j in the member running from j to i.
So the final moment M_BA (at B, in member BA) is final_total[A][B].
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from .kernel.pairs import connected_pairs
from .model import StructureModel


@dataclass(frozen=True, eq=False)
class IterationRecord:
    """
    Matrices produced by a single pass.

    max_error_percent is None for pass 0 (no previous pass to compare with).
    """
    balance: np.ndarray
    carry_over: np.ndarray
    total: np.ndarray
    max_error_percent: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "balance": self.balance.tolist(),
            "carryOver": self.carry_over.tolist(),
            "total": self.total.tolist(),
        }
        if self.max_error_percent is not None:
            out["maxErrorPercent"] = self.max_error_percent
        return out


@dataclass(frozen=True, eq=False)
class ResultHistory:
    """Ordered pass records for one solve, with the settings that produced them."""
    model: StructureModel
    records: Tuple[IterationRecord, ...]
    max_iterations: int
    min_error_percent: float
    labels: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        if not self.records:
            raise ValueError("ResultHistory needs at least one record")
        if not self.labels:
            object.__setattr__(self, "labels", self.model.labels)

    @property
    def iteration_count(self) -> int:
        return len(self.records)

    @property
    def final_total(self) -> np.ndarray:
        return self.records[-1].total

    @property
    def final_error_percent(self) -> Optional[float]:
        return self.records[-1].max_error_percent

    @property
    def converged(self) -> bool:
        """
        True when the last pass met the tolerance.

        A single-pass run computes no error and so never reports convergence;
        callers decide how to present that.
        """
        error = self.final_error_percent
        return error is not None and error < self.min_error_percent

    def member_end_moments(self) -> Dict[Tuple[int, int], float]:
        """
        Final moment at every member end.

        Returns:
            {(joint, far_joint): moment}, e.g. (1, 0) is M_BA.
        """
        total = self.final_total
        return {
            (j, i): float(total[i, j])
            for i, j in connected_pairs(self.model.connections)
        }

    def _member_ends(self) -> List[Tuple[int, int]]:
        # Grouped by joint, far ends ascending, as in a hand-calculation table
        ends = [(j, i) for i, j in connected_pairs(self.model.connections)]
        return sorted(ends)

    def distribution_table(self) -> pd.DataFrame:
        """
        The classic moment distribution table.

        Columns are member ends grouped by joint: a MultiIndex of
        (joint label, "M_" + joint label + far label). Rows:

            DF, COF, Init M        inputs for that member end
            Balance k, Carry-over k    for each pass
            Total                  final moments
        """
        labels = self.labels
        model = self.model
        ends = self._member_ends()

        columns = pd.MultiIndex.from_tuples(
            [(labels[j], f"M_{labels[j]}{labels[i]}") for j, i in ends],
            names=["joint", "member_end"],
        )

        rows: Dict[str, List[float]] = {
            "DF": [float(model.distribution_factor[i, j]) for j, i in ends],
            "COF": [float(model.carry_over_factor[j, i]) for j, i in ends],
            "Init M": [float(model.initial_moment[i, j]) for j, i in ends],
        }
        for k, record in enumerate(self.records):
            rows[f"Balance {k}"] = [float(record.balance[i, j]) for j, i in ends]
            rows[f"Carry-over {k}"] = [float(record.carry_over[i, j]) for j, i in ends]
        rows["Total"] = [float(self.final_total[i, j]) for j, i in ends]

        return pd.DataFrame(list(rows.values()), index=list(rows.keys()), columns=columns)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view for the UI layer."""
        return {
            "iterationCount": self.iteration_count,
            "converged": self.converged,
            "labels": list(self.labels),
            "records": [record.to_dict() for record in self.records],
            "finalTotal": self.final_total.tolist(),
        }
