from __future__ import annotations

import asyncio

import pytest

from conftest import FakeHttp, FakePage, attach_session, make_config
from datatools_e2e.core import (
    DependencyNotMetError,
    FailingFastError,
    Orchestrator,
    RunContext,
    TestCase,
    screenshot_name,
)

STAMP = "2024-01-02T03-04-05"


def _ctx(tmp_path, page, **overrides) -> tuple[RunContext, FakeHttp]:
    http = FakeHttp()
    config = make_config(tmp_path, collect_coverage=True, **overrides)
    return attach_session(RunContext(config=config, run_stamp=STAMP), page, http), http


def _case(name, body, *deps, timeout_s=1.0) -> TestCase:
    return TestCase(name=name, body=body, timeout_s=timeout_s, dependencies=tuple(deps))


def test_screenshot_name_is_deterministic() -> None:
    assert screenshot_name("should create route", STAMP) == f"e2e-error-should_create_route-{STAMP}.png"
    assert screenshot_name("a/b: c", STAMP) == f"e2e-error-a_b_c-{STAMP}.png"


@pytest.mark.asyncio
async def test_success_records_result_and_reports_coverage_once(tmp_path) -> None:
    page = FakePage()
    ctx, http = _ctx(tmp_path, page)
    calls = []

    async def body(run_ctx: RunContext) -> None:
        calls.append(run_ctx)

    await Orchestrator(ctx).execute(_case("t1", body))

    assert calls == [ctx]
    assert ctx.results == {"t1": True}
    assert len(http.requests) == 1
    assert http.requests[0][0] == "POST"
    assert page.of_kind("screenshot") == []


@pytest.mark.asyncio
async def test_body_failure_screenshots_reports_and_reraises(tmp_path) -> None:
    page = FakePage()
    ctx, http = _ctx(tmp_path, page)

    async def body(_: RunContext) -> None:
        raise AssertionError("expected h1 to contain 'Conveyal Data Tools'")

    with pytest.raises(AssertionError, match="Conveyal Data Tools"):
        await Orchestrator(ctx).execute(_case("should load the page", body))

    expected = tmp_path / f"e2e-error-should_load_the_page-{STAMP}.png"
    assert expected.exists()
    assert ctx.screenshots["should load the page"] == expected
    assert len(http.requests) == 1
    assert "should load the page" not in ctx.results
    assert ctx.failing_fast is False


@pytest.mark.asyncio
async def test_body_failure_arms_fail_fast_when_configured(tmp_path) -> None:
    page = FakePage()
    ctx, http = _ctx(tmp_path, page, fail_fast=True)

    async def failing(_: RunContext) -> None:
        raise RuntimeError("boom")

    async def never(_: RunContext) -> None:  # pragma: no cover - must not run
        raise AssertionError("body must not run while failing fast")

    orchestrator = Orchestrator(ctx)
    with pytest.raises(RuntimeError):
        await orchestrator.execute(_case("t1", failing))
    assert ctx.failing_fast is True

    with pytest.raises(FailingFastError, match="Failing fast due to previous failed test"):
        await orchestrator.execute(_case("t2", never))

    # only the first test produced a screenshot and a coverage report
    assert len(page.of_kind("screenshot")) == 1
    assert len(http.requests) == 1
    assert "t2" not in ctx.screenshots


@pytest.mark.asyncio
async def test_unmet_dependency_blocks_without_side_effects(tmp_path) -> None:
    page = FakePage()
    ctx, http = _ctx(tmp_path, page, fail_fast=True)
    ran = []

    async def body(_: RunContext) -> None:
        ran.append(True)

    with pytest.raises(DependencyNotMetError) as excinfo:
        await Orchestrator(ctx).execute(_case("t2", body, "t1"))

    assert excinfo.value.dependency == "t1"
    assert str(excinfo.value) == 'Dependent test "t1" has not completed yet'
    assert ran == []
    assert page.of_kind("screenshot") == []
    assert http.requests == []
    assert ctx.failing_fast is False


@pytest.mark.asyncio
async def test_dependency_recorded_false_still_blocks(tmp_path) -> None:
    ctx, _ = _ctx(tmp_path, FakePage())
    ctx.results["t1"] = False

    async def body(_: RunContext) -> None:  # pragma: no cover - must not run
        pass

    with pytest.raises(DependencyNotMetError):
        await Orchestrator(ctx).execute(_case("t2", body, "t1"))


@pytest.mark.asyncio
async def test_timeout_is_a_body_failure(tmp_path) -> None:
    page = FakePage()
    ctx, http = _ctx(tmp_path, page)

    async def slow(_: RunContext) -> None:
        await asyncio.sleep(5)

    with pytest.raises(asyncio.TimeoutError):
        await Orchestrator(ctx).execute(_case("slow", slow, timeout_s=0.01))

    assert len(page.of_kind("screenshot")) == 1
    assert len(http.requests) == 1


@pytest.mark.asyncio
async def test_coverage_disabled_sends_nothing(tmp_path) -> None:
    page = FakePage()
    http = FakeHttp()
    ctx = attach_session(RunContext(config=make_config(tmp_path), run_stamp=STAMP), page, http)

    async def body(_: RunContext) -> None:
        pass

    await Orchestrator(ctx).execute(_case("t1", body))
    assert http.requests == []
    assert page.of_kind("evaluate") == []
