"""Dependency-gated sequential execution of registered tests."""
from __future__ import annotations

import asyncio
import logging
import re
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .errors import DependencyNotMetError, FailingFastError, PreconditionError
from .models import RunContext, TestCase
from .results import CaseResult
from .suite import Suite

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME = re.compile(r"[^\w.-]+")


def screenshot_name(test_name: str, run_stamp: str) -> str:
    slug = _UNSAFE_FILENAME.sub("_", test_name.strip())
    return f"e2e-error-{slug}-{run_stamp}.png"


class Orchestrator:
    """Wraps each test body with gating, timeout and failure side effects."""

    def __init__(self, ctx: RunContext) -> None:
        self._ctx = ctx

    async def execute(self, case: TestCase) -> None:
        """Run ``case`` or raise.

        Precondition errors are raised before the body and skip the failure
        pipeline. Body errors (including the timeout) take a screenshot,
        report coverage, arm fail-fast when configured and are re-raised
        unchanged.
        """
        ctx = self._ctx
        logger.info('Begin test: "%s"', case.name)
        if ctx.failing_fast:
            logger.error("Failing fast due to previous failed test")
            raise FailingFastError()
        for dependency in case.dependencies:
            if not ctx.passed(dependency):
                logger.error('Dependent test "%s" has not completed yet', dependency)
                raise DependencyNotMetError(dependency)

        try:
            await asyncio.wait_for(case.body(ctx), timeout=case.timeout_s)
        except Exception as exc:
            logger.error('test "%s" failed due to error: %s', case.name, _describe(exc))
            await self._take_screenshot(case)
            await self._report_coverage()
            if ctx.config.fail_fast:
                logger.info("Fail fast option enabled. Failing remaining tests.")
                ctx.failing_fast = True
            raise

        await self._report_coverage()
        ctx.results[case.name] = True
        logger.info('successful test: "%s"', case.name)

    async def _take_screenshot(self, case: TestCase) -> None:
        ctx = self._ctx
        if ctx.driver is None:
            return
        path = ctx.artifact_path(screenshot_name(case.name, ctx.run_stamp))
        try:
            await ctx.driver.screenshot(path)
        except Exception as exc:  # pragma: no cover - body error wins
            logger.error('could not capture screenshot for "%s": %s', case.name, exc)
            return
        ctx.screenshots[case.name] = path

    async def _report_coverage(self) -> None:
        if self._ctx.coverage is not None:
            await self._ctx.coverage.report()


class SuiteRunner:
    """Executes the selected tests of a suite strictly in declaration order."""

    def __init__(
        self,
        suite: Suite,
        ctx: RunContext,
        *,
        case_filters: Sequence[str] = (),
        on_result: Optional[Callable[[CaseResult, int, int], None]] = None,
    ) -> None:
        self._suite = suite
        self._ctx = ctx
        self._case_filters = tuple(case_filters)
        self._on_result = on_result
        self._orchestrator = Orchestrator(ctx)

    def selected(self) -> List[TestCase]:
        return self._suite.select(self._case_filters)

    async def run(self) -> List[CaseResult]:
        cases = self.selected()
        total = len(cases)
        results: List[CaseResult] = []
        for index, case in enumerate(cases, start=1):
            result = await self._execute_case(case)
            results.append(result)
            if self._on_result:
                self._on_result(result, index, total)
        return results

    async def _execute_case(self, case: TestCase) -> CaseResult:
        start = time.perf_counter()
        try:
            await self._orchestrator.execute(case)
        except PreconditionError as exc:
            return self._result(case, "blocked", start, exc)
        except AssertionError as exc:
            return self._result(case, "failed", start, exc)
        except Exception as exc:  # aggregated error path
            return self._result(case, "error", start, exc)
        return CaseResult(name=case.name, status="passed", duration_s=time.perf_counter() - start)

    def _result(self, case: TestCase, status: str, start: float, exc: BaseException) -> CaseResult:
        screenshot: Optional[Path] = self._ctx.screenshots.get(case.name)
        return CaseResult(
            name=case.name,
            status=status,
            duration_s=time.perf_counter() - start,
            error=_describe(exc),
            screenshot=screenshot,
        )


def _describe(exc: BaseException) -> str:
    text = str(exc)
    if not text:
        return type(exc).__name__
    return f"{type(exc).__name__}: {text}"
