"""Launch the animation studio, or the terminal runner when asked for it.

    dfa-animator                      open the studio on the built-in example
    dfa-animator --gui --config a.json --delay 0.5
    dfa-animator --cli --word 001     step words in the terminal
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Sequence

from dfa_animator.automata import AutomatonError
from dfa_animator.cli import run as run_cli
from dfa_animator.config import AnimatorSettings, build_session_from_payload, load_payload_from_file


def _studio_parser() -> argparse.ArgumentParser:
    defaults = AnimatorSettings()
    parser = argparse.ArgumentParser(prog="dfa-animator --gui", description="Open the animation studio.")
    parser.add_argument("--config", help="JSON automaton to open instead of the built-in example.")
    parser.add_argument(
        "--delay",
        type=float,
        default=defaults.step_delay,
        help="Seconds each state stays highlighted.",
    )
    parser.add_argument("--log-level", default=defaults.log_level)
    parser.add_argument("--log-file")
    return parser


def launch_studio(argv: Sequence[str]) -> int:
    parser = _studio_parser()
    args = parser.parse_args(list(argv))
    if args.delay < 0:
        parser.error("--delay cannot be negative")
    settings = AnimatorSettings(step_delay=args.delay, log_level=args.log_level)

    session = None
    if args.config:
        try:
            session = build_session_from_payload(load_payload_from_file(args.config))
        except (AutomatonError, ValueError, OSError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    # tkinter only gets imported once a window is really wanted.
    from dfa_animator.gui import run_gui

    try:
        return run_gui(session, settings, log_file=args.log_file)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def main(argv: Sequence[str] | None = None) -> int:
    args: List[str] = list(sys.argv[1:] if argv is None else argv)
    if "--gui" in args:
        return launch_studio([arg for arg in args if arg != "--gui"])
    if not args:
        return launch_studio([])
    return run_cli([arg for arg in args if arg != "--cli"])


if __name__ == "__main__":
    raise SystemExit(main())
