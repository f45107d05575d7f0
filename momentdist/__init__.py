# momentdist - Moment Distribution Method for continuous beams and rigid frames
"""
MOMENTDIST: Iterative Moment Distribution
=========================================

This package provides:
- Validation of hand-entered DF / COF / fixed-end moment tables
- The relaxation loop (balance, carry-over, running totals) with a
  per-member-end error metric as the stopping rule
- The full pass-by-pass history, as arrays or as a classic
  moment distribution table (pandas)

ARCHITECTURE:
-------------
    kernel/         Numerical core (live-cell helper, convergence, engine)
    model.py        StructureModel, Joint, SolveSettings
    validate.py     RawPayload → StructureModel, structured failures
    results.py      IterationRecord, ResultHistory
    run.py          validate + solve in one call
    export.py       CSV / JSON export
    config.py       Limits and defaults
    logging_config.py  Optional logging setup for scripts and the API

Element stiffness, DF and COF computation are NOT part of this package:
factors come in already computed.
"""

from .config import CONFIG, SolverConfig
from .model import Joint, StructureModel, SolveSettings, default_labels
from .results import IterationRecord, ResultHistory
from .kernel.engine import run_pass, solve
from .validate import (
    RawPayload,
    ValidationResult,
    MalformedPayload,
    DisconnectedJoint,
    NonNumericCell,
    InvalidPayloadError,
    validate_payload,
)
from .run import SolveOutcome, solve_payload

__version__ = "0.1.0"

__all__ = [
    'CONFIG', 'SolverConfig',
    'Joint', 'StructureModel', 'SolveSettings', 'default_labels',
    'IterationRecord', 'ResultHistory',
    'run_pass', 'solve',
    'RawPayload', 'ValidationResult', 'MalformedPayload', 'DisconnectedJoint',
    'NonNumericCell', 'InvalidPayloadError', 'validate_payload',
    'SolveOutcome', 'solve_payload',
]
