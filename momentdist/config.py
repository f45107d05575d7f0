# momentdist/config.py
"""
Solver configuration and defaults.
"""

from dataclasses import dataclass


@dataclass
class SolverConfig:
    """Global solver configuration."""

    # Structure size limits (max_joints is enforced by the REST layer only)
    min_joints: int = 2
    max_joints: int = 20

    # Iteration limits
    min_iterations: int = 1
    max_iterations: int = 50  # hard ceiling for a single solve
    default_max_iterations: int = 50

    # Stopping tolerance (percent)
    min_error_floor: float = 0.001
    default_min_error_percent: float = 0.001

    # Joint labels
    label_max_length: int = 3

    # Logging (used by setup_logging)
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_datefmt: str = "%H:%M:%S"


# Global config instance
CONFIG = SolverConfig()
