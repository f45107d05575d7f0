# momentdist/export.py
"""
Export: moment distribution results as CSV and JSON.
"""

import json
from typing import Any, Dict

from .kernel.pairs import member_count
from .results import ResultHistory

EXPORT_VERSION = "1.0"


def history_to_csv(history: ResultHistory, decimals: int = 3) -> str:
    """
    The distribution table as CSV.

    Two header rows (joint, member end), then one row per table line
    (DF, COF, Init M, Balance k, Carry-over k, ..., Total).
    """
    table = history.distribution_table().round(decimals)
    return table.to_csv(index_label="row")


def history_to_dict(history: ResultHistory) -> Dict[str, Any]:
    """Results plus the settings and inputs needed to reproduce them."""
    model = history.model
    return {
        "version": EXPORT_VERSION,
        "type": "moment_distribution",
        "settings": {
            "maxIterations": history.max_iterations,
            "minErrorPercent": history.min_error_percent,
        },
        "inputs": {
            "numberOfJoints": model.n_joints,
            "numberOfMembers": member_count(model.connections),
            "labels": list(model.labels),
            "connections": model.connections.tolist(),
            "distributionFactor": model.distribution_factor.tolist(),
            "carryOverFactor": model.carry_over_factor.tolist(),
            "initialMoment": model.initial_moment.tolist(),
            "appliedMoment": model.applied_moment.tolist(),
        },
        "results": history.to_dict(),
    }


def history_to_json(history: ResultHistory, indent: int = 2) -> str:
    """JSON document for interchange."""
    return json.dumps(history_to_dict(history), indent=indent)
