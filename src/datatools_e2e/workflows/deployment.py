"""Deployment to the trip planner and a trip plan against the deployed router."""
from __future__ import annotations

import asyncio
import logging

import aiohttp

from datatools_e2e.config import RunConfig
from datatools_e2e.core.models import RunContext
from datatools_e2e.core.suite import Suite

from .fixtures import CREATE_FEED_SOURCE, CREATE_SNAPSHOT, DUMMY_STOP_1, EDIT_FROM_SCRATCH, LOGIN, TRIP_PLAN_QUERY
from .steps import by_test_id, save_delay

logger = logging.getLogger(__name__)

ROUTER_ID_PREFIX = "Router ID: "
JSON_HEADERS = {"Content-Type": "application/json; charset=utf-8"}


async def ping_trip_planner(http: aiohttp.ClientSession, otp_root: str) -> bool:
    """Return True when the trip planner root answers at all, whatever the status."""
    logger.info("Pinging OTP at %s", otp_root)
    try:
        async with http.get(otp_root) as response:
            await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.debug("OTP ping failed: %s", exc)
        return False
    logger.info("OTP is OK.")
    return True


def register(suite: Suite, config: RunConfig) -> None:
    post_feed_source = suite.registrar(LOGIN, CREATE_FEED_SOURCE)
    entity_test = post_feed_source.extend(EDIT_FROM_SCRATCH)
    timeouts = config.timeouts

    @post_feed_source("should create deployment", timeout_s=timeouts.test_s + timeouts.deployment_extra_s)
    async def create_deployment(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.wait_and_click(by_test_id("deploy-feed-version-button"))
        await ui.wait_for_selector("#deploy-server-dropdown")
        await save_delay(ctx, "for dropdown to fully render")
        await ui.click("#deploy-server-dropdown")
        await ui.wait_and_click(by_test_id("deploy-server-0-button"))
        await ui.wait_for_selector(by_test_id("confirm-deploy-server-button"))

        router_text = await ui.inner_html(by_test_id("deployment-router-id"))
        ctx.fixtures.router_id = router_text.replace(ROUTER_ID_PREFIX, "").strip()
        logger.info("deploying to router %s", ctx.fixtures.router_id)

        await ui.click(by_test_id("confirm-deploy-server-button"))
        await ctx.wait_for_jobs()

    @entity_test("should be able to do a trip plan on otp", depends_on=CREATE_SNAPSHOT)
    async def trip_plan(ctx: RunContext) -> None:
        if ctx.http is None:
            raise RuntimeError("No HTTP session is attached to this run")
        router_id = ctx.fixtures.require("router_id")
        url = f"{ctx.config.otp_root}{router_id}/plan"
        async with ctx.http.get(url, params=TRIP_PLAN_QUERY, headers=JSON_HEADERS) as response:
            assert response.status == 200, f"Trip plan request returned HTTP {response.status}"
            text = await response.text()
        assert DUMMY_STOP_1.name in text, f"Trip plan does not mention stop '{DUMMY_STOP_1.name}'"
