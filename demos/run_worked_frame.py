"""
SIX-JOINT FRAME: WORKED EXAMPLE
===============================
Joints A and D are fixed supports; B, C, E and F are rigid joints.
Members: AB, BC, BD, BE, CD, CF, EF. Span loads on AB (±26.25) and
BE (±18.75) only.

Distribution factors, carry-over factors and fixed-end moments are
entered the way they would be typed into the input tables: cell [i][j]
belongs to joint j, in the member running to joint i.

Exports the result as CSV and JSON next to this script.
"""

import logging
import sys
from pathlib import Path

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent))

from momentdist.export import history_to_csv, history_to_json
from momentdist.logging_config import setup_logging
from momentdist.run import solve_payload
from momentdist.validate import RawPayload

N = 6
MEMBERS = [(0, 1), (1, 2), (1, 3), (1, 4), (2, 3), (2, 5), (4, 5)]

DF = {
    (0, 1): 0.364,
    (1, 2): 0.273, (1, 4): 0.571,
    (2, 1): 0.273, (2, 5): 0.571,
    (3, 1): 0.364, (3, 2): 0.364,
    (4, 5): 0.429,
    (5, 2): 0.364, (5, 4): 0.429,
}

INIT = {
    (0, 1): 26.25, (1, 0): -26.25,
    (1, 4): 18.75, (4, 1): -18.75,
}


def frame_payload() -> dict:
    connections = [[False] * N for _ in range(N)]
    cof = [[0.0] * N for _ in range(N)]
    for i, j in MEMBERS:
        connections[i][j] = connections[j][i] = True
        cof[i][j] = cof[j][i] = 0.5

    df = [[DF.get((i, j), 0.0) for j in range(N)] for i in range(N)]
    init = [[INIT.get((i, j), 0.0) for j in range(N)] for i in range(N)]

    return {
        "numberOfJoints": N,
        "connections": connections,
        "distributionFactor": df,
        "carryOverFactor": cof,
        "initialMoment": init,
        "appliedMoment": [0.0] * N,
        "maxIterations": 50,
        "minErrorPercent": 0.001,
    }


def main():
    setup_logging(logging.INFO)

    outcome = solve_payload(RawPayload.from_dict(frame_payload()))
    if not outcome.success:
        print(f"Input error: {outcome.error}")
        return

    history = outcome.history
    with pd.option_context("display.width", 160, "display.max_columns", 20,
                           "display.precision", 3):
        print(history.distribution_table().loc[["DF", "COF", "Init M", "Total"]])

    print(f"\nPasses: {history.iteration_count}, converged: {history.converged}")

    out_dir = Path(__file__).parent
    (out_dir / "worked_frame.csv").write_text(history_to_csv(history))
    (out_dir / "worked_frame.json").write_text(history_to_json(history))
    print(f"✓ Exported to {out_dir / 'worked_frame.csv'} and .json")


if __name__ == "__main__":
    main()
