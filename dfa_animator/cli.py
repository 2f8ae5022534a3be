from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .analysis import TestResult, run_test_cases, summarize_results
from .automata import AutomatonError, AutomatonValidationError
from .config import (
    AnimatorSettings,
    Session,
    build_session_from_payload,
    example_session,
    load_payload_from_file,
)
from .engine import ExecutionEngine, Verdict
from .logging_config import setup_logging
from .svg import write_svg


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    defaults = AnimatorSettings()
    parser = argparse.ArgumentParser(
        description="Step a DFA over words, printing each transition taken."
    )
    parser.add_argument(
        "--config",
        help="Path to a JSON file that defines the automaton (defaults to the built-in example).",
    )
    parser.add_argument(
        "--word",
        dest="words",
        action="append",
        default=[],
        help="Word to run; repeat the flag to run several words in order.",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=defaults.step_delay,
        help="Seconds to wait between steps (0 runs instantly).",
    )
    parser.add_argument(
        "--radius",
        type=float,
        help="State circle radius used for the SVG export.",
    )
    parser.add_argument(
        "--export-svg",
        help="Write an SVG snapshot of the automaton, highlighting the last state reached.",
    )
    parser.add_argument(
        "--run-tests",
        action="store_true",
        help="Run the test cases declared in the config.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level for diagnostic output (default: WARNING).",
    )
    parser.add_argument("--log-file", help="Also write log records to this file.")
    args = parser.parse_args(argv)
    if args.delay < 0:
        parser.error("--delay cannot be negative")
    if args.radius is not None and args.radius <= 0:
        parser.error("--radius must be positive")
    return args


def run(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        setup_logging(args.log_level, args.log_file)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        session = _build_session(args)
    except KeyboardInterrupt:
        print("\nAborted by user.", file=sys.stderr)
        return 130
    except (
        AutomatonValidationError,
        AutomatonError,
        ValueError,
        OSError,
    ) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _display_summary(session)
    if args.run_tests:
        _run_tests(session)

    engine = ExecutionEngine(session.automaton, delay=args.delay)
    try:
        for word in args.words:
            animate_word(engine, word)
    except KeyboardInterrupt:
        engine.cancel()
        print("\nAborted by user.", file=sys.stderr)
        return 130

    if args.export_svg:
        radius = args.radius if args.radius is not None else session.drawing_radius()
        try:
            path = write_svg(
                session.automaton,
                str(Path(args.export_svg)),
                current=engine.current,
                radius=radius,
            )
        except OSError as exc:
            print(f"Error: could not write SVG: {exc}", file=sys.stderr)
            return 1
        print(f"\nSVG written: {Path(path).resolve()}")
    return 0


def _build_session(args: argparse.Namespace) -> Session:
    if args.config:
        return build_session_from_payload(load_payload_from_file(Path(args.config)))
    return example_session()


def animate_word(engine: ExecutionEngine, word: str, out=None) -> Optional[Verdict]:
    """Stream one run to `out`, one log line per tick, then the verdict."""
    out = out or sys.stdout
    shown = word or "<empty>"
    print(f"\nWord: {shown}", file=out)

    playback = engine.run(word)
    print(f"  Current state: {engine.current}", file=out)
    for event in playback:
        print(f"  {event.index + 1}. {event.log_line}", file=out)
        out.flush()
    verdict = playback.verdict
    if verdict is not None:
        print(f"  Final state: {verdict.state}", file=out)
        print(f"  Result: {verdict.message}", file=out)
    return verdict


def _display_summary(session: Session) -> None:
    automaton = session.automaton
    print("Automaton Summary")
    print(f"  States: {', '.join(automaton.states)}")
    alphabet_text = ", ".join(automaton.alphabet) if automaton.alphabet else "<empty>"
    print(f"  Alphabet: {alphabet_text}")
    print(f"  Start state: {automaton.start_state}")
    accept_text = ", ".join(sorted(automaton.accept_states)) if automaton.accept_states else "<none>"
    print(f"  Accept states: {accept_text}")
    print("  Transitions:")
    for transition in automaton.transitions:
        print(f"    {transition.describe()}")
    if automaton.shadowed_transitions:
        print("  Ignored (an earlier transition handles the same state and symbol):")
        for transition in automaton.shadowed_transitions:
            print(f"    {transition.describe()}")


def _run_tests(session: Session) -> List[TestResult]:
    if not session.test_cases:
        print("\nNo test cases were provided.")
        return []
    print("\nRunning test cases...")
    results = run_test_cases(session.automaton, session.test_cases)
    summary = summarize_results(results)
    print(f"  Passed {summary['passed']} of {summary['total']} test cases.")
    for result in results:
        print(f"    {result.describe()}")
    return results
