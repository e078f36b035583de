"""Reporter interfaces."""
from __future__ import annotations

from typing import Iterable, List, Sequence

from datatools_e2e.config import RunConfig
from datatools_e2e.core.models import TestCase
from datatools_e2e.core.results import CaseResult


class Reporter:
    """Receives run lifecycle events; subclasses override what they need."""

    def on_start(self, cases: Sequence[TestCase], config: RunConfig) -> None:
        pass

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        pass

    def on_complete(self, results: Sequence[CaseResult]) -> None:
        pass


class ReportManager(Reporter):
    """Fans every event out to a list of reporters, in order."""

    def __init__(self, reporters: Iterable[Reporter] = ()) -> None:
        self.reporters: List[Reporter] = list(reporters)

    def on_start(self, cases: Sequence[TestCase], config: RunConfig) -> None:
        for reporter in self.reporters:
            reporter.on_start(cases, config)

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        for reporter in self.reporters:
            reporter.on_case_result(result, index, total)

    def on_complete(self, results: Sequence[CaseResult]) -> None:
        for reporter in self.reporters:
            reporter.on_complete(results)
