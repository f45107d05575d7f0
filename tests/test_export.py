# File: tests/test_export.py
import json

import pytest

from momentdist.export import history_to_csv, history_to_json, EXPORT_VERSION
from momentdist.run import solve_payload
from momentdist.validate import RawPayload


@pytest.fixture
def history(fixed_two_span):
    return solve_payload(RawPayload.from_dict(fixed_two_span)).history


def test_csv_contains_table(history):
    text = history_to_csv(history)
    lines = text.strip().splitlines()

    assert "M_AB" in lines[1]
    assert lines[-1].startswith("Total")
    assert "32.812" in lines[-1] or "32.813" in lines[-1]


def test_json_round_trips_inputs_and_results(history):
    data = json.loads(history_to_json(history))

    assert data["version"] == EXPORT_VERSION
    assert data["settings"] == {"maxIterations": 20, "minErrorPercent": 0.001}
    assert data["inputs"]["numberOfJoints"] == 3
    assert data["inputs"]["numberOfMembers"] == 2
    assert data["inputs"]["initialMoment"][1][0] == 26.25
    assert data["results"]["iterationCount"] == 3
    assert data["results"]["finalTotal"][1][0] == pytest.approx(32.8125)
