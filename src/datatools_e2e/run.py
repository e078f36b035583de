"""Run loop: browser setup, suite execution, teardown and reporting."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence

import aiohttp
import click

from datatools_e2e.config import RunConfig
from datatools_e2e.core import CaseResult, RunContext, Suite, SuiteRunner
from datatools_e2e.logs import configure_logging, shutdown_logging
from datatools_e2e.reporting import JsonReporter, ReportManager, Reporter, TerminalReporter
from datatools_e2e.session import BrowserSession, CoverageReporter, JobPoller, SessionDriver
from datatools_e2e.workflows import build_suite, cleanup_test_project, ping_trip_planner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    cases: Sequence[str] = field(default_factory=tuple)
    list_only: bool = False
    report_format: str = "terminal"
    report_path: Optional[str] = None
    use_color: bool = True
    verbose: bool = False


def run(config: RunConfig, options: RunOptions, *, environ: Optional[Mapping[str, str]] = None) -> int:
    """Execute the suite; returns process exit code (0 all passed, 1 otherwise)."""

    suite = build_suite(config, environ=environ)
    cases = suite.select(options.cases)
    if options.list_only:
        for case in cases:
            click.echo(case.name)
        return 0
    if not cases:
        click.echo("No tests matched the provided filters.")
        return 1

    ctx = RunContext(config=config)
    run_log, browser_log = configure_logging(config.artifacts_dir, ctx.run_stamp, verbose=options.verbose)
    logger.info("run log: %s, browser events: %s", run_log, browser_log)
    reporter = ReportManager(_make_reporters(options, ctx.run_stamp))
    try:
        results = asyncio.run(run_suite(suite, ctx, case_filters=options.cases, reporter=reporter))
    finally:
        shutdown_logging()
    return 0 if results and all(result.passed for result in results) else 1


async def run_suite(
    suite: Suite,
    ctx: RunContext,
    *,
    case_filters: Sequence[str] = (),
    reporter: Optional[Reporter] = None,
) -> List[CaseResult]:
    config = ctx.config
    reporter = reporter or Reporter()
    runner = SuiteRunner(suite, ctx, case_filters=case_filters, on_result=reporter.on_case_result)
    reporter.on_start(runner.selected(), config)

    timeout = aiohttp.ClientTimeout(total=config.timeouts.setup_s)
    async with aiohttp.ClientSession(timeout=timeout) as http:
        ctx.http = http
        await _check_trip_planner(ctx)
        async with BrowserSession(config) as session:
            ctx.coverage = CoverageReporter(
                session.page, config.coverage_url, enabled=config.collect_coverage, http=http
            )
            ctx.driver = SessionDriver(session.page, ctx.coverage, config.timing)
            ctx.jobs = JobPoller(
                ctx.driver,
                job_timeout_s=config.timeouts.job_s,
                mount_delay_ms=config.timing.job_mount_delay_ms,
            )
            try:
                results = await runner.run()
            finally:
                await _teardown(ctx)

    reporter.on_complete(results)
    return results


async def _check_trip_planner(ctx: RunContext) -> None:
    assert ctx.http is not None
    if await ping_trip_planner(ctx.http, ctx.config.otp_root):
        return
    if ctx.config.fail_fast:
        logger.error(
            "OpenTripPlanner not accepting requests. Failing remaining tests due to fail fast option."
        )
        ctx.failing_fast = True
    else:
        logger.warning("OpenTripPlanner not accepting requests. Start it up for deployment tests!!")


async def _teardown(ctx: RunContext) -> None:
    try:
        await asyncio.wait_for(cleanup_test_project(ctx), timeout=ctx.config.timeouts.setup_s)
    except asyncio.TimeoutError:
        logger.error("timed out deleting test project with id %s", ctx.fixtures.project_id)
    logger.info("Closing Chromium...")


def _make_reporters(options: RunOptions, run_stamp: str) -> List[Reporter]:
    if options.report_format == "json":
        return [JsonReporter(path=options.report_path, run_stamp=run_stamp)]
    return [TerminalReporter(use_color=options.use_color)]
