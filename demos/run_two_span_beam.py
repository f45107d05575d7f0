"""
TWO-SPAN CONTINUOUS BEAM
========================
Equal spans A-B-C, load on span AB only (fixed-end moments ∓26.25).

Runs the same beam twice:
- A and C fixed: B balances once, the far ends pick up carry-over
- A and C released (DF 0.5 at the ends): the moment over B tends to
  wL²/16 = 19.6875 while the end moments die away
"""

import logging
import sys
from pathlib import Path

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent))

from momentdist.logging_config import setup_logging
from momentdist.run import solve_payload
from momentdist.validate import RawPayload


def beam_payload(end_df: float) -> dict:
    return {
        "numberOfJoints": 3,
        "connections": [
            [False, True, False],
            [True, False, True],
            [False, True, False],
        ],
        "distributionFactor": [
            [0.0, 0.5, 0.0],
            [end_df, 0.0, end_df],
            [0.0, 0.5, 0.0],
        ],
        "carryOverFactor": [
            [0.0, 0.5, 0.0],
            [0.5, 0.0, 0.5],
            [0.0, 0.5, 0.0],
        ],
        "initialMoment": [
            [0.0, -26.25, 0.0],
            [26.25, 0.0, 0.0],
            [0.0, 0.0, 0.0],
        ],
        "appliedMoment": [0.0, 0.0, 0.0],
        "maxIterations": 30,
        "minErrorPercent": 0.001,
    }


def run_case(title: str, end_df: float) -> None:
    print("=" * 70)
    print(title)
    print("=" * 70)

    outcome = solve_payload(RawPayload.from_dict(beam_payload(end_df)))
    if not outcome.success:
        print(f"Input error: {outcome.error}")
        return

    history = outcome.history
    with pd.option_context("display.width", 120, "display.precision", 4):
        print(history.distribution_table().tail(7))

    status = "converged" if history.converged else "did NOT converge"
    print(f"\n{history.iteration_count} passes, {status} "
          f"(last error {history.final_error_percent:.4g}%)")
    for (joint, far), moment in sorted(history.member_end_moments().items()):
        print(f"  M_{history.labels[joint]}{history.labels[far]} = {moment:+.4f}")
    print()


def main():
    setup_logging(logging.INFO)
    run_case("FIXED ENDS", end_df=0.0)
    run_case("RELEASED ENDS", end_df=0.5)


if __name__ == "__main__":
    main()
