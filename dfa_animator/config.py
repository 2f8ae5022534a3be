from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .analysis import TestCase
from .automata import Automaton
from .engine import DEFAULT_STEP_DELAY
from .layout import STATE_RADIUS

EXAMPLE_PAYLOAD: Dict[str, Any] = {
    "states": ["q0", "q1", "q2", "q3", "q4", "q5"],
    "alphabet": ["0", "1"],
    "start_state": "q0",
    "accept_states": ["q3"],
    "transitions": [
        {"from": "q0", "to": "q0", "symbol": "1"},
        {"from": "q0", "to": "q1", "symbol": "0"},
        {"from": "q1", "to": "q0", "symbol": "1"},
        {"from": "q1", "to": "q2", "symbol": "0"},
        {"from": "q2", "to": "q4", "symbol": "0"},
        {"from": "q2", "to": "q3", "symbol": "1"},
        {"from": "q3", "to": "q4", "symbol": "0"},
        {"from": "q3", "to": "q5", "symbol": "1"},
        {"from": "q4", "to": "q3", "symbol": "1"},
        {"from": "q4", "to": "q4", "symbol": "0"},
        {"from": "q5", "to": "q5", "symbol": "1"},
        {"from": "q5", "to": "q4", "symbol": "0"},
    ],
    "positions": {
        "q0": [100, 100],
        "q1": [300, 100],
        "q2": [500, 100],
        "q3": [500, 300],
        "q4": [300, 250],
        "q5": [100, 300],
    },
    "radius": STATE_RADIUS,
    "test_cases": [
        {"input": "", "expected": False, "label": "empty word"},
        {"input": "001", "expected": True},
        {"input": "0010", "expected": False},
        {"input": "11111111111101010101", "expected": False},
        {"input": "11111111111101010101001", "expected": True},
        {"input": "11101010010100011111001", "expected": True},
    ],
}


@dataclass
class AnimatorSettings:
    step_delay: float = DEFAULT_STEP_DELAY
    radius: float = STATE_RADIUS
    canvas_width: int = 600
    canvas_height: int = 400
    log_level: str = "INFO"


@dataclass
class Session:
    automaton: Automaton
    test_cases: List[TestCase] = field(default_factory=list)
    # None when the config leaves the radius to the settings.
    radius: Optional[float] = None

    def drawing_radius(self, settings: Optional[AnimatorSettings] = None) -> float:
        if self.radius is not None:
            return self.radius
        return (settings or AnimatorSettings()).radius


def example_session() -> Session:
    return build_session_from_payload(EXAMPLE_PAYLOAD)


def load_payload_from_text(text: str) -> Dict[str, Any]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Config is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Config must define a JSON object.")
    return payload


def load_payload_from_file(path: Path | str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        return load_payload_from_text(handle.read())


def build_session_from_payload(payload: Mapping[str, Any]) -> Session:
    if not isinstance(payload, Mapping):
        raise ValueError("Config payload must be a mapping.")
    data = dict(payload)

    states = _require_string_sequence(data, "states")
    start_state = _require_string(data, "start_state")
    accept_states = _require_string_sequence(data, "accept_states")
    alphabet: Optional[List[str]] = None
    if data.get("alphabet") is not None:
        alphabet = _require_string_sequence(data, "alphabet")

    transitions = _normalize_transitions(data.get("transitions"))
    positions = _normalize_positions(data.get("positions"))
    radius = data.get("radius")
    if radius is not None and (
        isinstance(radius, bool) or not isinstance(radius, (int, float)) or radius <= 0
    ):
        raise ValueError("Config field 'radius' must be a positive number.")

    automaton = Automaton(states, alphabet, transitions, start_state, accept_states, positions)
    return Session(
        automaton=automaton,
        test_cases=_load_test_cases_from_payload(data.get("test_cases")),
        radius=None if radius is None else float(radius),
    )


def _require_string_sequence(payload: Mapping[str, Any], key: str) -> List[str]:
    value = payload.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Config field '{key}' must be a list of strings.")
    return list(value)


def _require_string(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"Config field '{key}' must be a non-empty string.")
    return value


def _normalize_transitions(transitions: Any) -> List[Tuple[str, str, str]]:
    if isinstance(transitions, dict):
        triples: List[Tuple[str, str, str]] = []
        for state, mapping in transitions.items():
            if not isinstance(mapping, dict):
                raise ValueError("Transition entries keyed by state must be objects.")
            for symbol, destination in mapping.items():
                if not isinstance(destination, str):
                    raise ValueError(
                        f"Transition for state '{state}' and symbol '{symbol}' must be a single destination string."
                    )
                triples.append((str(state), destination, str(symbol)))
        return triples
    if not isinstance(transitions, list):
        raise ValueError("Config field 'transitions' must be a list or an object.")
    triples = []
    for index, entry in enumerate(transitions, start=1):
        if not isinstance(entry, dict):
            raise ValueError(f"Transition #{index} must be an object with 'from', 'to' and 'symbol'.")
        try:
            source, target, symbol = entry["from"], entry["to"], entry["symbol"]
        except KeyError as exc:
            raise ValueError(f"Transition #{index} is missing field {exc}.") from exc
        if not all(isinstance(value, str) for value in (source, target, symbol)):
            raise ValueError(f"Transition #{index} fields must be strings.")
        triples.append((source, target, symbol))
    return triples


def _normalize_positions(positions: Any) -> Optional[Dict[str, Tuple[float, float]]]:
    if positions is None:
        return None
    if not isinstance(positions, dict):
        raise ValueError("Config field 'positions' must be an object.")
    normalized: Dict[str, Tuple[float, float]] = {}
    for state, coords in positions.items():
        if (
            not isinstance(coords, (list, tuple))
            or len(coords) != 2
            or not all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in coords)
        ):
            raise ValueError(f"Position for state '{state}' must be a pair of numbers.")
        normalized[str(state)] = (float(coords[0]), float(coords[1]))
    return normalized


def _load_test_cases_from_payload(data: Any) -> List[TestCase]:
    if data is None:
        return []
    if isinstance(data, dict):
        entries = data.get("cases", [])
    else:
        entries = data
    if not isinstance(entries, list):
        raise ValueError("Test cases must be provided as a list.")
    cases: List[TestCase] = []
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise ValueError("Each test case must be an object with 'input' and 'expected'.")
        word = entry.get("input", "")
        if not isinstance(word, str):
            raise ValueError("Test case 'input' must be a string.")
        expected = bool(entry.get("expected", False))
        label = entry.get("label") or f"case {index}"
        cases.append(TestCase(word=word, expected=expected, label=label))
    return cases
