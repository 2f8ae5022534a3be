from .automata import Automaton, AutomatonError, AutomatonValidationError, Transition
from .cli import run
from .config import build_session_from_payload, example_session
from .engine import ExecutionEngine, Outcome, Playback, RunState, StepEvent, Verdict, simulate
from .layout import layout_edges, layout_frame, layout_nodes

__all__ = [
    "Automaton",
    "AutomatonError",
    "AutomatonValidationError",
    "Transition",
    "ExecutionEngine",
    "Outcome",
    "Playback",
    "RunState",
    "StepEvent",
    "Verdict",
    "simulate",
    "layout_edges",
    "layout_frame",
    "layout_nodes",
    "run",
    "build_session_from_payload",
    "example_session",
]
