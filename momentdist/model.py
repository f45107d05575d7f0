# momentdist/model.py
"""
STRUCTURE MODEL: Validated Inputs for One Solve
===============================================

A StructureModel holds everything the relaxation engine needs, already
checked and converted to float arrays:

    connections        N×N bool    joint i is joined to joint j by a member
    distribution_factor N×N        DF[i][j]: share of the unbalanced moment at
                                   joint j sent into member (i, j)
    carry_over_factor  N×N         COF[i][j]: share of the balance at j carried
                                   to the far end i
    initial_moment     N×N         Init[i][j]: fixed-end moment before balancing
    applied_moment     N           external moment applied at each joint

MATRIX CONVENTION:
------------------
Rows are receivers, columns are sources. Column j of any moment matrix
collects the member-end moments acting at joint j, one per member.

Cells that are not live (diagonal, or no member between i and j) hold 0.0.
Nothing downstream reads them.
"""

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from .kernel.pairs import connected_mask


def default_labels(n_joints: int) -> Tuple[str, ...]:
    """
    Alphabetic joint labels: A, B, ..., Z, AA, AB, ...

    >>> default_labels(3)
    ('A', 'B', 'C')
    """
    labels = []
    for index in range(n_joints):
        label = ""
        n = index
        while True:
            n, rem = divmod(n, 26)
            label = chr(ord("A") + rem) + label
            if n == 0:
                break
            n -= 1
        labels.append(label)
    return tuple(labels)


def _frozen(values, dtype=float) -> np.ndarray:
    arr = np.array(values, dtype=dtype)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class Joint:
    """
    A joint of the structure.

    The label is for display only and never affects the solve.
    """
    id: int
    label: str


@dataclass(frozen=True, eq=False)
class StructureModel:
    """
    Immutable per-joint inputs for one moment distribution run.

    Arrays are copied on construction and made read-only, so a model can be
    shared between solves without anyone changing it underneath.

    Examples:
    ---------
    >>> model = StructureModel(
    ...     connections=[[0, 1], [1, 0]],
    ...     distribution_factor=[[0, 0.5], [0.5, 0]],
    ...     carry_over_factor=[[0, 0.5], [0.5, 0]],
    ...     initial_moment=[[0, -10.0], [10.0, 0]],
    ...     applied_moment=[0, 0],
    ... )
    >>> model.n_joints
    2
    """
    connections: np.ndarray
    distribution_factor: np.ndarray
    carry_over_factor: np.ndarray
    initial_moment: np.ndarray
    applied_moment: np.ndarray
    labels: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        mask = connected_mask(self.connections)
        mask = mask | mask.T
        n = mask.shape[0]

        object.__setattr__(self, "connections", _frozen(mask, dtype=bool))
        for name in ("distribution_factor", "carry_over_factor", "initial_moment"):
            matrix = np.array(getattr(self, name), dtype=float)
            if matrix.shape != (n, n):
                raise ValueError(f"{name} must be {n}x{n}, got {matrix.shape}")
            object.__setattr__(self, name, _frozen(np.where(mask, matrix, 0.0)))

        applied = np.array(self.applied_moment, dtype=float)
        if applied.shape != (n,):
            raise ValueError(f"applied_moment must have length {n}, got {applied.shape}")
        object.__setattr__(self, "applied_moment", _frozen(applied))

        labels = tuple(self.labels) if self.labels else default_labels(n)
        if len(labels) != n:
            raise ValueError(f"Expected {n} labels, got {len(labels)}")
        object.__setattr__(self, "labels", labels)

    @property
    def n_joints(self) -> int:
        return int(self.connections.shape[0])

    @property
    def joints(self) -> Tuple[Joint, ...]:
        return tuple(Joint(i, label) for i, label in enumerate(self.labels))

    def scaled(self, factor: float) -> "StructureModel":
        """Same structure with every initial and applied moment multiplied by `factor`."""
        return StructureModel(
            connections=self.connections,
            distribution_factor=self.distribution_factor,
            carry_over_factor=self.carry_over_factor,
            initial_moment=self.initial_moment * factor,
            applied_moment=self.applied_moment * factor,
            labels=self.labels,
        )


@dataclass(frozen=True)
class SolveSettings:
    """Stopping rules for one solve."""
    max_iterations: int
    min_error_percent: float
