# File: tests/test_validate.py
"""
Test the input validator (raw tables → StructureModel).

WHAT WE CHECK:
--------------
1. Good payloads become a model with the right arrays
2. Each failure kind is reported with the exact joint / cell
3. Check order: shape, then connectivity, then numeric cells
4. Cells that the solver never reads are never checked
"""

import math

import numpy as np
import pytest

from momentdist.validate import (
    RawPayload,
    MalformedPayload,
    DisconnectedJoint,
    NonNumericCell,
    InvalidPayloadError,
    validate_payload,
    parse_number,
)
from momentdist.run import solve_payload


def validate(data):
    return validate_payload(RawPayload.from_dict(data))


def test_valid_payload_builds_model(fixed_two_span):
    result = validate(fixed_two_span)

    assert result.success
    assert result.failure is None
    model = result.model
    assert model.n_joints == 3
    assert model.labels == ("A", "B", "C")
    assert model.distribution_factor[0, 1] == 0.5
    assert model.initial_moment[1, 0] == 26.25
    assert result.settings.max_iterations == 20
    assert result.settings.min_error_percent == pytest.approx(0.001)


def test_model_arrays_are_read_only(fixed_two_span):
    model = validate(fixed_two_span).model

    with pytest.raises(ValueError):
        model.distribution_factor[0, 1] = 1.0


def test_disconnected_joint_detected(four_joint_payload):
    """
    Joint 2 has an all-false connection row (and column): it cannot
    balance anything, so nothing is solved.
    """
    data = four_joint_payload
    data["connections"] = [
        [False, True, False, False],
        [True, False, False, True],
        [False, False, False, False],
        [False, True, False, False],
    ]

    result = validate(data)

    assert not result.success
    assert result.model is None
    assert result.failure == DisconnectedJoint(2, "C")
    assert "Joint C" in result.failure.message

    outcome = solve_payload(RawPayload.from_dict(data))
    assert not outcome.success
    assert outcome.history is None


def test_diagonal_does_not_count_as_connection(four_joint_payload):
    data = four_joint_payload
    data["connections"][0] = [True, False, False, False]
    data["connections"][1][0] = False

    result = validate(data)

    assert result.failure == DisconnectedJoint(0, "A")


def test_non_numeric_distribution_factor(fixed_two_span):
    data = fixed_two_span
    data["distributionFactor"][0][1] = "abc"

    result = validate(data)

    assert not result.success
    assert result.failure == NonNumericCell("distributionFactor", 0, 1)
    assert "Distribution Factor" in result.failure.message


@pytest.mark.parametrize("token", ["abc", "", "  ", None, True, float("nan"), float("inf"), "1e400"])
def test_non_numeric_tokens_rejected(fixed_two_span, token):
    data = fixed_two_span
    data["distributionFactor"][2][1] = token

    result = validate(data)

    assert result.failure == NonNumericCell("distributionFactor", 2, 1)


def test_numeric_strings_accepted(fixed_two_span):
    data = fixed_two_span
    data["distributionFactor"][0][1] = "0.5"
    data["initialMoment"][1][0] = " 26.25 "

    result = validate(data)

    assert result.success
    assert result.model.distribution_factor[0, 1] == 0.5
    assert result.model.initial_moment[1, 0] == 26.25


def test_first_bad_cell_is_row_major(fixed_two_span):
    data = fixed_two_span
    data["distributionFactor"][1][0] = "x"
    data["distributionFactor"][0][1] = "y"

    assert validate(data).failure == NonNumericCell("distributionFactor", 0, 1)


def test_tables_checked_in_order(fixed_two_span):
    """DF before COF before Init before applied moments."""
    data = fixed_two_span
    data["initialMoment"][0][1] = "bad"
    data["carryOverFactor"][2][1] = "bad"
    data["appliedMoment"][0] = "bad"

    assert validate(data).failure == NonNumericCell("carryOverFactor", 2, 1)


def test_non_numeric_applied_moment(fixed_two_span):
    data = fixed_two_span
    data["appliedMoment"][1] = "ten"

    result = validate(data)

    assert result.failure == NonNumericCell("appliedMoment", 1, None)
    assert result.failure.col is None
    assert "Applied Moments" in result.failure.message


def test_unused_cells_are_not_checked(fixed_two_span):
    """No member between A and C, and diagonals are never read."""
    data = fixed_two_span
    data["distributionFactor"][0][2] = "junk"
    data["carryOverFactor"][2][0] = None
    data["initialMoment"][1][1] = "n/a"

    result = validate(data)

    assert result.success
    # Unread cells are stored as 0.0
    assert result.model.distribution_factor[0, 2] == 0.0
    assert result.model.initial_moment[1, 1] == 0.0


def test_disconnection_reported_before_bad_cells(four_joint_payload):
    data = four_joint_payload
    data["connections"][2] = [False] * 4
    data["connections"][1][2] = False
    data["connections"][3][2] = False
    data["distributionFactor"][0][1] = "bad"

    assert validate(data).failure == DisconnectedJoint(2, "C")


def test_one_sided_connection_is_mirrored(fixed_two_span):
    """Ticking (i, j) is enough: members are unordered pairs."""
    data = fixed_two_span
    data["connections"][1][2] = False

    result = validate(data)

    assert result.success
    assert result.model.connections[1, 2]
    assert result.model.connections[2, 1]


def test_distribution_factors_need_not_sum_to_one(fixed_two_span):
    data = fixed_two_span
    data["distributionFactor"][0][1] = 0.9
    data["distributionFactor"][2][1] = 0.9

    assert validate(data).success


@pytest.mark.parametrize("field, value", [
    ("numberOfJoints", 1),
    ("numberOfJoints", "3"),
    ("maxIterations", 0),
    ("maxIterations", 51),
    ("maxIterations", 2.5),
    ("minErrorPercent", 0),
    ("minErrorPercent", -1.0),
    ("minErrorPercent", "abc"),
])
def test_out_of_range_settings(fixed_two_span, field, value):
    data = fixed_two_span
    data[field] = value

    result = validate(data)

    assert not result.success
    assert isinstance(result.failure, MalformedPayload)
    assert result.failure.field == field


def test_wrong_table_shape(fixed_two_span):
    data = fixed_two_span
    data["carryOverFactor"] = [[0.0, 0.5], [0.5, 0.0]]

    result = validate(data)

    assert result.failure.kind == "MalformedPayload"
    assert result.failure.field == "carryOverFactor"


def test_applied_moment_length(fixed_two_span):
    data = fixed_two_span
    data["appliedMoment"] = [0.0, 0.0]

    assert validate(data).failure.field == "appliedMoment"


def test_custom_labels(fixed_two_span):
    data = fixed_two_span
    data["labels"] = ["L", "M", "R"]

    assert validate(data).model.labels == ("L", "M", "R")

    data["labels"] = ["L", "M"]
    assert validate(data).failure.field == "labels"


@pytest.mark.parametrize("labels", [
    5,
    "LMR",
    ["L", "M", 3],
    ["L", "", "R"],
    ["L", "MID", "RIGHT"],
])
def test_bad_labels_reported_not_raised(fixed_two_span, labels):
    fixed_two_span["labels"] = labels

    outcome = solve_payload(RawPayload.from_dict(fixed_two_span))

    assert not outcome.success
    assert isinstance(outcome.failure, MalformedPayload)
    assert outcome.failure.field == "labels"


def test_label_at_length_limit_accepted(fixed_two_span):
    fixed_two_span["labels"] = ["L", "MID", "R"]

    assert validate(fixed_two_span).model.labels == ("L", "MID", "R")


def test_unwrap(fixed_two_span):
    model, settings = validate(fixed_two_span).unwrap()
    assert model.n_joints == 3
    assert settings.max_iterations == 20

    fixed_two_span["distributionFactor"][0][1] = "bad"
    with pytest.raises(InvalidPayloadError) as excinfo:
        validate(fixed_two_span).unwrap()
    assert excinfo.value.failure == NonNumericCell("distributionFactor", 0, 1)


def test_parse_number():
    assert parse_number(3) == 3.0
    assert parse_number("-1.5") == -1.5
    assert parse_number(np.float64(2.0)) == 2.0
    assert parse_number(False) is None
    assert parse_number("1,5") is None
    assert parse_number(-math.inf) is None
