import json

import pytest

from dfa_animator.analysis import run_test_cases, summarize_results
from dfa_animator.automata import AutomatonValidationError
from dfa_animator.config import (
    EXAMPLE_PAYLOAD,
    AnimatorSettings,
    build_session_from_payload,
    example_session,
    load_payload_from_file,
    load_payload_from_text,
)


def test_example_session_passes_its_own_cases():
    session = example_session()
    assert session.radius == 40.0
    results = run_test_cases(session.automaton, session.test_cases)
    assert summarize_results(results) == {"total": 6, "passed": 6, "failed": 0}
    assert results[0].case.label == "empty word"
    assert results[0].describe() == "[PASS] empty word: <empty> -> expected reject, got word rejected"


def test_nested_transitions_payload():
    session = build_session_from_payload(
        {
            "states": ["even", "odd"],
            "start_state": "even",
            "accept_states": ["even"],
            "transitions": {"even": {"1": "odd", "0": "even"}, "odd": {"1": "even", "0": "odd"}},
            "test_cases": {"cases": [{"input": "11", "expected": True}]},
        }
    )
    assert set(session.automaton.alphabet) == {"0", "1"}
    assert session.test_cases[0].label == "case 1"
    (result,) = run_test_cases(session.automaton, session.test_cases)
    assert result.passed


def test_load_from_file(tmp_path):
    path = tmp_path / "dfa.json"
    path.write_text(json.dumps(EXAMPLE_PAYLOAD), encoding="utf-8")
    payload = load_payload_from_file(path)
    assert payload["start_state"] == "q0"


@pytest.mark.parametrize("text", ["not json", "[1, 2]"])
def test_bad_text(text):
    with pytest.raises(ValueError):
        load_payload_from_text(text)


@pytest.mark.parametrize(
    "patch, message",
    [
        ({"states": "q0"}, "'states' must be a list"),
        ({"start_state": ""}, "'start_state'"),
        ({"transitions": 5}, "'transitions' must be a list or an object"),
        ({"transitions": [{"from": "q0", "to": "q1"}]}, "missing field"),
        ({"positions": {"q0": [1]}}, "pair of numbers"),
        ({"radius": 0}, "'radius'"),
        ({"test_cases": [{"input": 3}]}, "'input' must be a string"),
    ],
)
def test_payload_errors(patch, message):
    payload = dict(EXAMPLE_PAYLOAD)
    payload.update(patch)
    with pytest.raises(ValueError, match=message):
        build_session_from_payload(payload)


def test_structural_error_surfaces():
    payload = dict(EXAMPLE_PAYLOAD, accept_states=["q9"])
    with pytest.raises(AutomatonValidationError):
        build_session_from_payload(payload)


def test_radius_falls_back_to_settings():
    payload = {key: value for key, value in EXAMPLE_PAYLOAD.items() if key != "radius"}
    session = build_session_from_payload(payload)
    assert session.radius is None
    assert session.drawing_radius() == 40.0
    assert session.drawing_radius(AnimatorSettings(radius=25)) == 25


def test_config_radius_beats_settings():
    session = build_session_from_payload(dict(EXAMPLE_PAYLOAD, radius=30))
    assert session.drawing_radius(AnimatorSettings(radius=25)) == 30.0
