# momentdist/validate.py
"""
INPUT VALIDATION: Raw Tables → StructureModel
=============================================

PURPOSE:
--------
The UI layer hands over whatever was typed into its tables: lists of lists
that may contain numbers, numeric strings, blanks or junk. This module
decides whether that payload can be solved and, if so, turns it into an
immutable StructureModel plus SolveSettings.

CHECK ORDER (first failure wins):
---------------------------------
    0. Shape and settings    MalformedPayload(field, reason)
       - numberOfJoints >= 2, every table N×N, appliedMoment length N
       - labels, if given: N non-empty strings of at most 3 characters
       - 1 <= maxIterations <= 50, minErrorPercent > 0
    1. Connectivity          DisconnectedJoint(joint)
       - every joint needs at least one member
    2. Numeric cells         NonNumericCell(table, row, col)
       - DF, COF, Init: only live cells (see kernel/pairs.py), row-major
       - appliedMoment: every entry (col is None)

Nothing else is checked. DF rows are NOT required to sum to 1: hand-entered
factors are usually rounded.

WHY A RESULT INSTEAD OF AN EXCEPTION?
-------------------------------------
The caller needs to know exactly which joint or cell to highlight, and a
bad cell is an expected outcome of typing into a form, not a crash. Callers
that do want an exception use ValidationResult.unwrap().
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from .config import CONFIG
from .kernel.pairs import connected_mask, connected_pairs
from .model import SolveSettings, StructureModel, default_labels

logger = logging.getLogger(__name__)


# Table identifiers, as used in payloads and failure reports
CONNECTIONS = "connections"
DISTRIBUTION_FACTOR = "distributionFactor"
CARRY_OVER_FACTOR = "carryOverFactor"
INITIAL_MOMENT = "initialMoment"
APPLIED_MOMENT = "appliedMoment"

TABLE_TITLES = {
    DISTRIBUTION_FACTOR: "Distribution Factor",
    CARRY_OVER_FACTOR: "Carry-over Factor",
    INITIAL_MOMENT: "Initial Moments",
    APPLIED_MOMENT: "Applied Moments",
}

# Order in which numeric tables are checked
MATRIX_TABLES = (DISTRIBUTION_FACTOR, CARRY_OVER_FACTOR, INITIAL_MOMENT)


# =============================================================================
# Payload
# =============================================================================

@dataclass
class RawPayload:
    """
    Unvalidated input, exactly as the UI layer collected it.

    Cell values may be anything; validation decides what they mean.
    """
    n_joints: Any
    connections: Sequence[Sequence[Any]]
    distribution_factor: Sequence[Sequence[Any]]
    carry_over_factor: Sequence[Sequence[Any]]
    initial_moment: Sequence[Sequence[Any]]
    applied_moment: Sequence[Any]
    max_iterations: Any = CONFIG.default_max_iterations
    min_error_percent: Any = CONFIG.default_min_error_percent
    labels: Optional[Sequence[str]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawPayload":
        """Build from the camelCase structure used at the UI boundary."""
        return cls(
            n_joints=data.get("numberOfJoints"),
            connections=data.get(CONNECTIONS),
            distribution_factor=data.get(DISTRIBUTION_FACTOR),
            carry_over_factor=data.get(CARRY_OVER_FACTOR),
            initial_moment=data.get(INITIAL_MOMENT),
            applied_moment=data.get(APPLIED_MOMENT),
            max_iterations=data.get("maxIterations", CONFIG.default_max_iterations),
            min_error_percent=data.get("minErrorPercent", CONFIG.default_min_error_percent),
            labels=data.get("labels"),
        )

    def table(self, name: str) -> Any:
        return {
            CONNECTIONS: self.connections,
            DISTRIBUTION_FACTOR: self.distribution_factor,
            CARRY_OVER_FACTOR: self.carry_over_factor,
            INITIAL_MOMENT: self.initial_moment,
            APPLIED_MOMENT: self.applied_moment,
        }[name]


# =============================================================================
# Failures
# =============================================================================

@dataclass(frozen=True)
class MalformedPayload:
    """A table has the wrong shape or a run setting is out of range."""
    kind: ClassVar[str] = "MalformedPayload"
    field: str
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid {self.field}: {self.reason}"


@dataclass(frozen=True)
class DisconnectedJoint:
    """A joint with no members cannot balance any moment."""
    kind: ClassVar[str] = "DisconnectedJoint"
    joint: int
    label: str = ""

    @property
    def message(self) -> str:
        name = self.label or str(self.joint)
        return f"Joint {name} is not connected to any other joint."


@dataclass(frozen=True)
class NonNumericCell:
    """A required cell does not hold a finite number (col is None for appliedMoment)."""
    kind: ClassVar[str] = "NonNumericCell"
    table: str
    row: int
    col: Optional[int] = None

    @property
    def message(self) -> str:
        title = TABLE_TITLES.get(self.table, self.table)
        return f"A value in the {title} table is not a valid number."


ValidationFailure = Union[MalformedPayload, DisconnectedJoint, NonNumericCell]


class InvalidPayloadError(ValueError):
    """Raised by ValidationResult.unwrap() when validation failed."""

    def __init__(self, failure: ValidationFailure):
        super().__init__(failure.message)
        self.failure = failure


@dataclass(frozen=True)
class ValidationResult:
    """Either a solvable model (success=True) or the first failure found."""
    success: bool
    model: Optional[StructureModel] = None
    settings: Optional[SolveSettings] = None
    failure: Optional[ValidationFailure] = field(default=None)

    def unwrap(self) -> Tuple[StructureModel, SolveSettings]:
        if not self.success:
            raise InvalidPayloadError(self.failure)
        return self.model, self.settings


# =============================================================================
# Cell parsing
# =============================================================================

def parse_number(value: Any) -> Optional[float]:
    """
    Finite float from a table cell, or None.

    Numbers and numeric strings parse. Booleans, None, blanks, NaN and
    infinities do not.
    """
    if isinstance(value, (bool, np.bool_)) or value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _is_int(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def _is_square(table: Any, n: int) -> bool:
    try:
        return len(table) == n and all(len(row) == n for row in table)
    except TypeError:
        return False


def _is_flag(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_)) or _is_int(value)


# =============================================================================
# Rules
# =============================================================================

def _check_shape(payload: RawPayload) -> Optional[MalformedPayload]:
    n = payload.n_joints
    if not _is_int(n) or n < CONFIG.min_joints:
        return MalformedPayload("numberOfJoints", f"must be an integer >= {CONFIG.min_joints}, got {n!r}")

    if not _is_square(payload.connections, n):
        return MalformedPayload(CONNECTIONS, f"must be {n}x{n}")
    for row in payload.connections:
        if not all(_is_flag(cell) for cell in row):
            return MalformedPayload(CONNECTIONS, "cells must be true/false")

    for name in MATRIX_TABLES:
        if not _is_square(payload.table(name), n):
            return MalformedPayload(name, f"must be {n}x{n}")

    try:
        applied_len = len(payload.applied_moment)
    except TypeError:
        applied_len = None
    if applied_len != n:
        return MalformedPayload(APPLIED_MOMENT, f"must have {n} entries")

    if payload.labels is not None:
        failure = _check_labels(payload.labels, n)
        if failure is not None:
            return failure

    iterations = payload.max_iterations
    if not _is_int(iterations) or not CONFIG.min_iterations <= iterations <= CONFIG.max_iterations:
        return MalformedPayload(
            "maxIterations",
            f"must be an integer in [{CONFIG.min_iterations}, {CONFIG.max_iterations}], got {iterations!r}",
        )

    error = parse_number(payload.min_error_percent)
    if error is None or error <= 0:
        return MalformedPayload("minErrorPercent", f"must be a positive number, got {payload.min_error_percent!r}")

    return None


def _check_labels(labels: Any, n: int) -> Optional[MalformedPayload]:
    # A bare string has a length but is not a list of labels
    if isinstance(labels, str):
        return MalformedPayload("labels", f"must be a list of {n} strings")
    try:
        count = len(labels)
    except TypeError:
        return MalformedPayload("labels", f"must be a list of {n} strings")
    if count != n:
        return MalformedPayload("labels", f"must have {n} entries")

    limit = CONFIG.label_max_length
    for label in labels:
        if not isinstance(label, str) or not label.strip():
            return MalformedPayload("labels", f"entries must be non-empty strings, got {label!r}")
        if len(label) > limit:
            return MalformedPayload("labels", f"{label!r} is longer than {limit} characters")
    return None


def _mirrored_connections(payload: RawPayload) -> np.ndarray:
    # A ticked (i, j) implies (j, i): members are unordered pairs
    mask = connected_mask([[bool(cell) for cell in row] for row in payload.connections])
    return mask | mask.T


def validate_payload(payload: RawPayload) -> ValidationResult:
    """
    Check a raw payload and build the model.

    Returns:
        ValidationResult with model and settings on success, or the first
        failure found (see module docstring for the order).
    """
    failure = _check_shape(payload)
    if failure is not None:
        return _failed(failure)

    n = payload.n_joints
    labels = tuple(payload.labels) if payload.labels is not None else default_labels(n)
    mask = _mirrored_connections(payload)

    for joint in range(n):
        if not mask[joint].any():
            return _failed(DisconnectedJoint(joint, labels[joint]))

    parsed: Dict[str, np.ndarray] = {}
    for name in MATRIX_TABLES:
        table = payload.table(name)
        values = np.zeros((n, n), dtype=float)
        for i, j in connected_pairs(mask):
            number = parse_number(table[i][j])
            if number is None:
                return _failed(NonNumericCell(name, i, j))
            values[i, j] = number
        parsed[name] = values

    applied = np.zeros(n, dtype=float)
    for i, cell in enumerate(payload.applied_moment):
        number = parse_number(cell)
        if number is None:
            return _failed(NonNumericCell(APPLIED_MOMENT, i))
        applied[i] = number

    model = StructureModel(
        connections=mask,
        distribution_factor=parsed[DISTRIBUTION_FACTOR],
        carry_over_factor=parsed[CARRY_OVER_FACTOR],
        initial_moment=parsed[INITIAL_MOMENT],
        applied_moment=applied,
        labels=labels,
    )
    settings = SolveSettings(
        max_iterations=int(payload.max_iterations),
        min_error_percent=parse_number(payload.min_error_percent),
    )
    if settings.min_error_percent < CONFIG.min_error_floor:
        logger.info("minErrorPercent %g is below the recommended floor %g",
                    settings.min_error_percent, CONFIG.min_error_floor)
    return ValidationResult(success=True, model=model, settings=settings)


def _failed(failure: ValidationFailure) -> ValidationResult:
    logger.info("Validation failed (%s): %s", failure.kind, failure.message)
    return ValidationResult(success=False, failure=failure)
