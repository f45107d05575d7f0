# Shared structures for the test suite
"""
Two-span continuous beam A-B-C, equal spans, load on span AB only:

    A ======== B ======== C
       FEM ±26.25

Joint B balances 50/50 into BA and BC; carry-over factor 0.5 everywhere.
"""

import copy

import pytest


def two_span_payload(end_df: float = 0.0) -> dict:
    """
    end_df is the distribution factor at A and C.

    0.0 means fixed ends (nothing is balanced there); 0.5 gives the released
    variant where A and C keep rotating until their moments vanish.
    """
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
        "maxIterations": 20,
        "minErrorPercent": 0.001,
    }


@pytest.fixture
def fixed_two_span():
    return two_span_payload(end_df=0.0)


@pytest.fixture
def released_two_span():
    return two_span_payload(end_df=0.5)


@pytest.fixture
def four_joint_payload():
    """A-B-C-D chain with numeric zeros everywhere; tests mutate a copy."""
    n = 4
    connections = [[abs(i - j) == 1 for j in range(n)] for i in range(n)]
    zeros = [[0.0] * n for _ in range(n)]
    return {
        "numberOfJoints": n,
        "connections": connections,
        "distributionFactor": copy.deepcopy(zeros),
        "carryOverFactor": copy.deepcopy(zeros),
        "initialMoment": copy.deepcopy(zeros),
        "appliedMoment": [0.0] * n,
        "maxIterations": 10,
        "minErrorPercent": 0.01,
    }
