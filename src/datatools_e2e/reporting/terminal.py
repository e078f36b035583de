"""Terminal reporter rendering progress and summaries."""
from __future__ import annotations

import time
from typing import Optional, Sequence

import click
from colorama import init as colorama_init

from datatools_e2e.config import RunConfig
from datatools_e2e.core.models import TestCase
from datatools_e2e.core.results import CaseResult

from .base import Reporter


STATUS_COLORS = {
    "passed": "green",
    "failed": "red",
    "error": "red",
    "blocked": "yellow",
}

STATUS_LABELS = {
    "passed": "PASS",
    "failed": "FAIL",
    "error": "ERROR",
    "blocked": "BLOCKED",
}


class TerminalReporter(Reporter):
    """Human-readable reporter that streams to stdout."""

    def __init__(self, *, use_color: bool = True) -> None:
        self._use_color = use_color
        self._start_time = 0.0
        self._failures: list[tuple[int, CaseResult]] = []
        if use_color:
            colorama_init()

    def on_start(self, cases: Sequence[TestCase], config: RunConfig) -> None:
        self._start_time = time.perf_counter()
        self._failures.clear()
        click.echo(
            self._styled(
                f"Starting run: {len(cases)} test(s) against {config.url()}"
                f" fail_fast={config.fail_fast} coverage={config.collect_coverage}"
                f" headless={config.headless}",
                color="cyan",
            )
        )

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        label = STATUS_LABELS.get(result.status, result.status.upper())
        status_text = self._styled(label, color=STATUS_COLORS.get(result.status))
        click.echo(f"[{index}/{total}] {result.name} -> {status_text} ({result.duration_s:.2f} s)")
        if not result.passed:
            self._failures.append((index, result))
            # blocked tests only repeat the reason of an earlier failure
            if result.status != "blocked":
                self._print_failure_details(result)

    def on_complete(self, results: Sequence[CaseResult]) -> None:
        duration = time.perf_counter() - self._start_time
        counts = {status: 0 for status in STATUS_LABELS}
        for result in results:
            counts[result.status] = counts.get(result.status, 0) + 1
        summary_color = "green" if counts["passed"] == len(results) else "red"
        click.echo(
            self._styled(
                f"Summary: total={len(results)} passed={counts['passed']} failed={counts['failed']} "
                f"errors={counts['error']} blocked={counts['blocked']} duration={duration:.2f}s",
                color=summary_color,
            )
        )
        if self._failures:
            click.echo(self._styled("Failure details:", color="red"))
            for index, result in self._failures:
                click.echo(f"  [{index}] {result.name} -> {result.status}")
                self._print_failure_details(result, indent="    ")

    def _styled(self, text: str, *, color: Optional[str] = None) -> str:
        if not self._use_color or not color:
            return text
        return click.style(text, fg=color)

    def _print_failure_details(self, result: CaseResult, *, indent: str = "    ") -> None:
        if result.error:
            click.echo(f"{indent}error: {result.error}")
        if result.screenshot is not None:
            click.echo(f"{indent}screenshot: {result.screenshot}")
