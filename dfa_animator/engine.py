"""Deterministic, paced stepping of an automaton over a word.

The engine owns a single :class:`RunState`. Each tick replaces it as a whole
and then notifies observers, so nobody ever sees a half-applied step. Only one
run is live at a time: starting a new one cancels the previous playback, and a
cancelled playback never emits again.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple

from .automata import Automaton, AutomatonError, Transition

logger = logging.getLogger(__name__)

DEFAULT_STEP_DELAY = 1.0


class Outcome(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    STUCK = "stuck"


@dataclass(frozen=True)
class Verdict:
    outcome: Outcome
    state: str
    symbol: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is Outcome.ACCEPTED

    @property
    def message(self) -> str:
        if self.outcome is Outcome.ACCEPTED:
            return "word accepted"
        if self.outcome is Outcome.REJECTED:
            return "word rejected"
        return f"invalid transition for symbol `{self.symbol}`"


@dataclass(frozen=True)
class StepEvent:
    index: int
    symbol: str
    transition: Transition
    state: str

    @property
    def log_line(self) -> str:
        return self.transition.describe()


@dataclass(frozen=True)
class RunState:
    run_id: int
    word: str
    current: str
    index: int = 0
    log: Tuple[StepEvent, ...] = ()
    verdict: Optional[Verdict] = None
    cancelled: bool = False

    @property
    def finished(self) -> bool:
        return self.verdict is not None

    @property
    def log_lines(self) -> List[str]:
        return [event.log_line for event in self.log]


@dataclass(frozen=True)
class RunResult:
    events: Tuple[StepEvent, ...]
    verdict: Verdict

    @property
    def log_lines(self) -> List[str]:
        return [event.log_line for event in self.events]


Observer = Callable[[RunState], None]


class CancelToken:
    """Checked before every scheduled continuation of a playback."""

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to `timeout` seconds; True if cancelled meanwhile."""
        if timeout <= 0:
            return self._event.is_set()
        return self._event.wait(timeout)


class Playback:
    """One run of the engine, consumed tick by tick.

    Iterating yields a :class:`StepEvent` per consumed symbol and sleeps
    `delay` seconds between ticks. Event-loop shells that schedule their own
    timers call :meth:`step` instead.
    """

    def __init__(self, engine: "ExecutionEngine", run_id: int, word: str, delay: float) -> None:
        self._engine = engine
        self.run_id = run_id
        self.word = word
        self.delay = delay
        self.token = CancelToken()

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def verdict(self) -> Optional[Verdict]:
        state = self._engine.state
        if state.run_id != self.run_id:
            return None
        return state.verdict

    @property
    def finished(self) -> bool:
        return self.verdict is not None

    def step(self) -> Optional[StepEvent]:
        """Run one tick. Returns None once the run has a verdict or was cancelled."""
        return self._engine._advance(self)

    def cancel(self) -> None:
        self._engine._cancel(self)

    def __iter__(self) -> Iterator[StepEvent]:
        while True:
            event = self.step()
            if event is None:
                return
            yield event
            if self.token.wait(self.delay):
                return

    def run_to_completion(self) -> Optional[Verdict]:
        for _ in self:
            pass
        return self.verdict


class ExecutionEngine:
    def __init__(self, automaton: Automaton, delay: float = DEFAULT_STEP_DELAY) -> None:
        if delay < 0:
            raise ValueError("Step delay cannot be negative.")
        self._automaton = automaton
        self._delay = delay
        self._lock = threading.RLock()
        self._observers: List[Observer] = []
        self._run_counter = 0
        self._playback: Optional[Playback] = None
        self._state = RunState(run_id=0, word="", current=automaton.start_state)

    @property
    def automaton(self) -> Automaton:
        return self._automaton

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def current(self) -> str:
        return self._state.current

    # ---------------------------------------------------------------
    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register `observer` and hand it the current state right away.

        Returns a callable that removes the observer again.
        """
        with self._lock:
            self._observers.append(observer)
            observer(self._state)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def _publish(self, state: RunState) -> None:
        self._state = state
        for observer in list(self._observers):
            observer(state)

    # ---------------------------------------------------------------
    def run(self, word: str, delay: Optional[float] = None) -> Playback:
        """Start a new run over `word`, cancelling whatever was in flight."""
        if not isinstance(word, str):
            raise TypeError("The word to run must be a string.")
        pace = self._delay if delay is None else delay
        if pace < 0:
            raise ValueError("Step delay cannot be negative.")
        with self._lock:
            if self._playback is not None and not self._playback.cancelled:
                self._cancel(self._playback)
            self._run_counter += 1
            playback = Playback(self, self._run_counter, word, pace)
            self._playback = playback
            logger.info("Run %d started on %r.", playback.run_id, word)
            self._publish(
                RunState(run_id=playback.run_id, word=word, current=self._automaton.start_state)
            )
        return playback

    def cancel(self) -> None:
        with self._lock:
            if self._playback is not None:
                self._cancel(self._playback)

    def _cancel(self, playback: Playback) -> None:
        with self._lock:
            if playback.cancelled:
                return
            playback.token.cancel()
            state = self._state
            if state.run_id == playback.run_id and not state.finished:
                logger.info("Run %d cancelled at symbol %d.", playback.run_id, state.index)
                self._publish(replace(state, cancelled=True))

    def _advance(self, playback: Playback) -> Optional[StepEvent]:
        with self._lock:
            if playback.token.cancelled:
                return None
            state = self._state
            if state.run_id != playback.run_id or state.finished:
                return None

            word = playback.word
            if state.index >= len(word):
                outcome = Outcome.ACCEPTED if self._automaton.is_accepting(state.current) else Outcome.REJECTED
                self._finish(state, Verdict(outcome, state.current))
                return None

            symbol = word[state.index]
            transition = self._automaton.transition_from(state.current, symbol)
            if transition is None:
                self._finish(state, Verdict(Outcome.STUCK, state.current, symbol))
                return None

            event = StepEvent(
                index=state.index,
                symbol=symbol,
                transition=transition,
                state=transition.target,
            )
            logger.debug("Run %d: %s", playback.run_id, event.log_line)
            self._publish(
                replace(
                    state,
                    current=transition.target,
                    index=state.index + 1,
                    log=state.log + (event,),
                )
            )
            return event

    def _finish(self, state: RunState, verdict: Verdict) -> None:
        logger.info("Run %d finished: %s.", state.run_id, verdict.message)
        self._publish(replace(state, verdict=verdict))


def simulate(automaton: Automaton, word: str) -> RunResult:
    """Run `word` to completion with no pacing."""
    engine = ExecutionEngine(automaton, delay=0.0)
    playback = engine.run(word)
    events = tuple(playback)
    verdict = playback.verdict
    if verdict is None:
        raise AutomatonError(f"Run over {word!r} ended without a verdict.")
    return RunResult(events=events, verdict=verdict)
