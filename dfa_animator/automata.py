from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Set, Tuple, Union

logger = logging.getLogger(__name__)

Position = Tuple[float, float]

GRID_ORIGIN = (100.0, 100.0)
GRID_SPACING = 120.0
GRID_COLUMNS = 7


class AutomatonError(Exception):
    """Base meltdown for anything automaton-shaped."""


class AutomatonValidationError(AutomatonError):
    """The definition is cursed before a single symbol gets read."""


class Transition(NamedTuple):
    source: str
    target: str
    symbol: str

    @property
    def is_loop(self) -> bool:
        return self.source == self.target

    def describe(self) -> str:
        return f"{self.source} -> {self.target} on '{self.symbol}'"


TransitionSpec = Union[
    Iterable[Union[Transition, Tuple[str, str, str]]],
    Mapping[str, Mapping[str, str]],
]


def grid_positions(states: Sequence[str]) -> Dict[str, Position]:
    """Lay states out row by row when no coordinates were supplied."""
    x0, y0 = GRID_ORIGIN
    return {
        state: (x0 + (idx % GRID_COLUMNS) * GRID_SPACING, y0 + (idx // GRID_COLUMNS) * GRID_SPACING)
        for idx, state in enumerate(states)
    }


class Automaton:
    __slots__ = (
        "_states",
        "_alphabet",
        "_start_state",
        "_accept_states",
        "_transitions",
        "_delta",
        "_shadowed",
        "_positions",
    )

    def __init__(
        self,
        states: Sequence[str],
        alphabet: Optional[Sequence[str]],
        transitions: TransitionSpec,
        start_state: str,
        accept_states: Iterable[str],
        positions: Optional[Mapping[str, Sequence[float]]] = None,
    ) -> None:
        self._states = tuple(self._normalize_state(s) for s in states)
        if not self._states:
            raise AutomatonValidationError("Need at least one state, shocker.")
        if len(set(self._states)) != len(self._states):
            raise AutomatonValidationError("State names gotta be unique, man.")
        state_set = set(self._states)

        self._start_state = self._normalize_state(start_state)
        if self._start_state not in state_set:
            raise AutomatonValidationError(f"Start state '{self._start_state}' is playing hide-and-seek.")

        self._accept_states = frozenset(self._normalize_state(s) for s in accept_states)
        missing_accepts = [s for s in self._accept_states if s not in state_set]
        if missing_accepts:
            raise AutomatonValidationError(
                f"Accept states not declared: {', '.join(sorted(missing_accepts))}."
            )

        declared = self._coerce_transitions(transitions)
        if alphabet is None:
            symbols: List[str] = []
            for transition in declared:
                if transition.symbol not in symbols:
                    symbols.append(transition.symbol)
            self._alphabet = tuple(symbols)
        else:
            self._alphabet = tuple(self._normalize_symbol(sym) for sym in alphabet)
            if len(set(self._alphabet)) != len(self._alphabet):
                raise AutomatonValidationError("Duplicate alphabet symbols? nope.")

        self._transitions, self._delta, self._shadowed = self._build_delta(declared, state_set)
        self._positions = self._build_positions(positions)

    # ---------------------------------------------------------------
    @staticmethod
    def _normalize_state(state: str) -> str:
        if not isinstance(state, str) or not state.strip():
            raise AutomatonValidationError("States must be non-empty strings.")
        return state.strip()

    @staticmethod
    def _normalize_symbol(symbol: str) -> str:
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise AutomatonValidationError(
                f"Alphabet symbols must be single characters, {symbol!r} is not one."
            )
        return symbol

    def _coerce_transitions(self, transitions: TransitionSpec) -> List[Transition]:
        result: List[Transition] = []
        if isinstance(transitions, Mapping):
            for source, mapping in transitions.items():
                if not isinstance(mapping, Mapping):
                    raise AutomatonValidationError("Transitions per state must be mapping-like, bro.")
                for symbol, target in mapping.items():
                    if not isinstance(target, str):
                        raise AutomatonValidationError(
                            f"Transition for state '{source}' and symbol '{symbol}' must point to one state."
                        )
                    result.append(self._make_transition(source, target, symbol))
            return result
        for entry in transitions:
            if isinstance(entry, Transition):
                result.append(self._make_transition(entry.source, entry.target, entry.symbol))
                continue
            try:
                source, target, symbol = entry
            except (TypeError, ValueError) as exc:
                raise AutomatonValidationError(
                    "Transitions must be (source, target, symbol) triples."
                ) from exc
            result.append(self._make_transition(source, target, symbol))
        return result

    def _make_transition(self, source: str, target: str, symbol: str) -> Transition:
        return Transition(
            self._normalize_state(source),
            self._normalize_state(target),
            self._normalize_symbol(symbol),
        )

    def _build_delta(
        self, declared: Sequence[Transition], state_set: Set[str]
    ) -> Tuple[Tuple[Transition, ...], Dict[Tuple[str, str], Transition], Tuple[Transition, ...]]:
        alphabet = set(self._alphabet)
        delta: Dict[Tuple[str, str], Transition] = {}
        shadowed: List[Transition] = []
        for transition in declared:
            for endpoint in (transition.source, transition.target):
                if endpoint not in state_set:
                    raise AutomatonValidationError(
                        f"State '{endpoint}' shows up in transitions but not in the state list."
                    )
            if transition.symbol not in alphabet:
                raise AutomatonValidationError(
                    f"Symbol '{transition.symbol}' is not part of the alphabet."
                )
            key = (transition.source, transition.symbol)
            if key in delta:
                # first declaration wins
                logger.warning(
                    "Ignoring %s: %s already handles '%s'.",
                    transition.describe(),
                    delta[key].describe(),
                    transition.symbol,
                )
                shadowed.append(transition)
                continue
            delta[key] = transition
        return tuple(declared), delta, tuple(shadowed)

    def _build_positions(self, positions: Optional[Mapping[str, Sequence[float]]]) -> Dict[str, Position]:
        placed = grid_positions(self._states)
        if not positions:
            return placed
        for state, coords in positions.items():
            name = self._normalize_state(state)
            if name not in placed:
                raise AutomatonValidationError(f"Position given for unknown state '{name}'.")
            try:
                x, y = coords
                placed[name] = (float(x), float(y))
            except (TypeError, ValueError) as exc:
                raise AutomatonValidationError(
                    f"Position for state '{name}' must be an (x, y) pair."
                ) from exc
        return placed

    # ---------------------------------------------------------------
    @property
    def states(self) -> Sequence[str]:
        return self._states

    @property
    def alphabet(self) -> Sequence[str]:
        return self._alphabet

    @property
    def start_state(self) -> str:
        return self._start_state

    @property
    def accept_states(self) -> FrozenSet[str]:
        return self._accept_states

    @property
    def transitions(self) -> Tuple[Transition, ...]:
        """Every declared transition, in declaration order."""
        return self._transitions

    @property
    def shadowed_transitions(self) -> Tuple[Transition, ...]:
        """Transitions hidden by an earlier one with the same (source, symbol)."""
        return self._shadowed

    @property
    def positions(self) -> Mapping[str, Position]:
        return dict(self._positions)

    # ---------------------------------------------------------------
    def transition_from(self, state: str, symbol: str) -> Optional[Transition]:
        return self._delta.get((state, symbol))

    def is_accepting(self, state: str) -> bool:
        return state in self._accept_states

    def position_of(self, state: str) -> Position:
        try:
            return self._positions[state]
        except KeyError as exc:
            raise AutomatonError(f"Unknown state '{state}'.") from exc

    def __repr__(self) -> str:
        return (
            f"Automaton(states={list(self._states)!r}, start_state={self._start_state!r}, "
            f"accept_states={sorted(self._accept_states)!r}, transitions={len(self._transitions)})"
        )
