from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from .automata import Automaton
from .engine import Verdict, simulate

EMPTY_INPUT_LABEL = "<empty>"


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    word: str
    expected: bool
    label: str = ""

    @property
    def display_word(self) -> str:
        return self.word or EMPTY_INPUT_LABEL


@dataclass(frozen=True)
class TestResult:
    __test__ = False

    case: TestCase
    verdict: Verdict

    @property
    def actual(self) -> bool:
        return self.verdict.accepted

    @property
    def passed(self) -> bool:
        return self.actual == self.case.expected

    def describe(self) -> str:
        expected = "accept" if self.case.expected else "reject"
        status = "PASS" if self.passed else "FAIL"
        label = f"{self.case.label}: " if self.case.label else ""
        return f"[{status}] {label}{self.case.display_word} -> expected {expected}, got {self.verdict.message}"


def run_test_cases(automaton: Automaton, test_cases: Sequence[TestCase]) -> List[TestResult]:
    return [TestResult(case=case, verdict=simulate(automaton, case.word).verdict) for case in test_cases]


def summarize_results(results: Sequence[TestResult]) -> Dict[str, int]:
    summary = {"total": len(results), "passed": 0, "failed": 0}
    for result in results:
        if result.passed:
            summary["passed"] += 1
        else:
            summary["failed"] += 1
    return summary
