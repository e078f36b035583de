from __future__ import annotations

import pytest

import datatools_e2e.run as run_module
from conftest import FakePage, make_config
from datatools_e2e.core import CaseResult, RunContext, Suite, SuiteRunner
from datatools_e2e.reporting import Reporter

STAMP = "2024-01-02T03-04-05"


def _build_suite() -> Suite:
    suite = Suite(default_timeout_s=1.0)
    test = suite.registrar()

    @test("a")
    async def a(_: RunContext) -> None:
        pass

    @test("b", depends_on="a")
    async def b(_: RunContext) -> None:
        raise AssertionError("b is broken")

    @test("c", depends_on="b")
    async def c(_: RunContext) -> None:  # pragma: no cover - blocked
        pass

    @test("d")
    async def d(_: RunContext) -> None:
        raise RuntimeError("unexpected")

    @test("e", depends_on="a")
    async def e(_: RunContext) -> None:
        pass

    return suite


@pytest.mark.asyncio
async def test_statuses_follow_outcome(tmp_path) -> None:
    ctx = RunContext(config=make_config(tmp_path), run_stamp=STAMP)
    seen = []
    runner = SuiteRunner(_build_suite(), ctx, on_result=lambda result, index, total: seen.append((index, total)))

    results = await runner.run()

    assert [(r.name, r.status) for r in results] == [
        ("a", "passed"),
        ("b", "failed"),
        ("c", "blocked"),
        ("d", "error"),
        ("e", "passed"),
    ]
    assert results[1].error == "AssertionError: b is broken"
    assert results[2].error == 'DependencyNotMetError: Dependent test "b" has not completed yet'
    assert results[3].error == "RuntimeError: unexpected"
    assert seen == [(1, 5), (2, 5), (3, 5), (4, 5), (5, 5)]
    assert ctx.results == {"a": True, "e": True}


@pytest.mark.asyncio
async def test_fail_fast_blocks_everything_after_first_failure(tmp_path) -> None:
    ctx = RunContext(config=make_config(tmp_path, fail_fast=True), run_stamp=STAMP)

    results = await SuiteRunner(_build_suite(), ctx).run()

    assert [r.status for r in results] == ["passed", "failed", "blocked", "blocked", "blocked"]
    assert all("Failing fast" in r.error for r in results[2:])


@pytest.mark.asyncio
async def test_case_filters_select_subset(tmp_path) -> None:
    ctx = RunContext(config=make_config(tmp_path), run_stamp=STAMP)
    runner = SuiteRunner(_build_suite(), ctx, case_filters=["e"])

    assert [case.name for case in runner.selected()] == ["e"]
    results = await runner.run()
    # "a" was not selected, so "e" cannot run
    assert results[0].status == "blocked"


class _RecordingReporter(Reporter):
    def __init__(self) -> None:
        self.events = []

    def on_start(self, cases, config) -> None:
        self.events.append(("start", [case.name for case in cases]))

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        self.events.append(("result", result.name, result.status))

    def on_complete(self, results) -> None:
        self.events.append(("complete", len(results)))


class _FakeBrowserSession:
    def __init__(self, config) -> None:
        self.page = FakePage()

    async def __aenter__(self) -> "_FakeBrowserSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None


@pytest.mark.asyncio
async def test_run_suite_wires_session_and_reports(tmp_path, monkeypatch) -> None:
    async def unreachable(http, otp_root) -> bool:
        return False

    monkeypatch.setattr(run_module, "BrowserSession", _FakeBrowserSession)
    monkeypatch.setattr(run_module, "ping_trip_planner", unreachable)

    suite = Suite(default_timeout_s=1.0)

    @suite.registrar()("uses the driver")
    async def uses_driver(ctx: RunContext) -> None:
        await ctx.ui.goto(ctx.url("/project"))

    reporter = _RecordingReporter()
    ctx = RunContext(config=make_config(tmp_path), run_stamp=STAMP)
    results = await run_module.run_suite(suite, ctx, reporter=reporter)

    assert [r.status for r in results] == ["passed"]
    assert reporter.events == [
        ("start", ["uses the driver"]),
        ("result", "uses the driver", "passed"),
        ("complete", 1),
    ]
    assert ctx.failing_fast is False


@pytest.mark.asyncio
async def test_unreachable_trip_planner_arms_fail_fast(tmp_path, monkeypatch) -> None:
    async def unreachable(http, otp_root) -> bool:
        return False

    monkeypatch.setattr(run_module, "BrowserSession", _FakeBrowserSession)
    monkeypatch.setattr(run_module, "ping_trip_planner", unreachable)

    suite = Suite(default_timeout_s=1.0)

    @suite.registrar()("first")
    async def first(_: RunContext) -> None:  # pragma: no cover - failing fast
        pass

    ctx = RunContext(config=make_config(tmp_path, fail_fast=True), run_stamp=STAMP)
    results = await run_module.run_suite(suite, ctx)

    assert ctx.failing_fast is True
    assert [r.status for r in results] == ["blocked"]
