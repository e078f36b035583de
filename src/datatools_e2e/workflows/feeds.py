"""Feed source and feed version workflows."""
from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from datatools_e2e.config import RunConfig
from datatools_e2e.core.models import RunContext
from datatools_e2e.core.suite import Suite

from .discovery import FEED_SOURCE_LINKS, find_list_item, is_listed, resolve_entity_id
from .fixtures import (
    CREATE_FEED_SOURCE,
    CREATE_PROJECT,
    FETCHED_FEED_VALIDITY,
    LOGIN,
    UPLOADED_FEED_VALIDITY,
)
from .steps import (
    by_test_id,
    confirm_modal,
    create_feed_source_via_form,
    create_feed_source_via_project_header,
    save_delay,
    upload_gtfs,
)

logger = logging.getLogger(__name__)

VERSION_VALIDITY = by_test_id("feed-version-validity")


def md5_digest(path: Path) -> str:
    digest = hashlib.md5()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def register(suite: Suite, config: RunConfig) -> None:
    post_login = suite.registrar(LOGIN)
    post_feed_source = post_login.extend(CREATE_FEED_SOURCE)

    @post_login(CREATE_FEED_SOURCE, depends_on=CREATE_PROJECT)
    async def create_feed_source(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.goto(ctx.url(f"/project/{ctx.fixtures.require('project_id')}"), wait_until="networkidle")
        await ui.wait_and_click(by_test_id("create-first-feed-source-button"))
        await create_feed_source_via_form(ctx, ctx.feed_source_name)
        feed_source_id, link = await resolve_entity_id(ui, FEED_SOURCE_LINKS, ctx.feed_source_name, "feed")
        ctx.fixtures.feed_source_id = feed_source_id
        await ui.click_element(link)
        await ui.wait_for_selector("#feed-source-viewer-tabs")
        await ui.wait(4000, "for feed versions to load")
        await ui.expect_contains("#feed-source-viewer-tabs", "No versions exist for this feed source.")

    @post_feed_source("should process uploaded gtfs")
    async def process_uploaded_gtfs(ctx: RunContext) -> None:
        await upload_gtfs(ctx)
        await ctx.ui.wait_for_selector(VERSION_VALIDITY)
        await ctx.ui.expect_contains(VERSION_VALIDITY, UPLOADED_FEED_VALIDITY)

    # also makes the feed source deployable
    @post_feed_source("should process fetched gtfs")
    async def process_fetched_gtfs(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click("#feed-source-viewer-tabs-tab-settings")
        await ui.wait_and_click(by_test_id("make-feed-source-deployable-button"), visible=True)
        url_group = by_test_id("feed-source-url-input-group")
        await ui.type(f"{url_group} input", ctx.config.gtfs_fetch_url)
        await ui.click(f"{url_group} button")
        await save_delay(ctx, "for feed source to update")
        await ui.click("#feed-source-viewer-tabs-tab-")
        await ui.wait_and_click("#bg-nested-dropdown", visible=True)
        await ui.wait_and_click(by_test_id("fetch-feed-button"), visible=True)
        await ctx.wait_for_jobs()
        await ui.expect_contains(VERSION_VALIDITY, FETCHED_FEED_VALIDITY)

    if config.non_essential:

        @post_feed_source("should delete feed source")
        async def delete_feed_source(ctx: RunContext) -> None:
            ui = ctx.ui
            name = f"test-feed-source-to-delete-{ctx.run_stamp}"
            await create_feed_source_via_project_header(ctx, name)
            item, _ = await find_list_item(ui, name)
            await ui.hover_into(item)
            await ui.wait_and_click("#feed-source-action-button")
            await ui.wait_and_click(by_test_id("feed-source-dropdown-delete-feed-source-button"))
            await confirm_modal(ctx, "for data to refresh")
            assert not await is_listed(ui, FEED_SOURCE_LINKS, name), "Feed source did not get deleted!"

    @post_feed_source("should download a feed version")
    async def download_feed_version(ctx: RunContext) -> None:
        ui = ctx.ui
        feed_source_id = ctx.fixtures.require("feed_source_id")
        await ui.goto(ctx.url(f"/feed/{feed_source_id}"))
        await ui.wait_and_click(by_test_id("decrement-feed-version-button"))
        await save_delay(ctx, "for previous version to be active")
        downloaded = await ui.download(by_test_id("download-feed-version-button"), ctx.config.artifacts_dir)
        try:
            assert feed_source_id.replace(":", "") in downloaded.name, (
                f"Feed Version gtfs file {downloaded.name} does not match feed source {feed_source_id}"
            )
            assert md5_digest(downloaded) == md5_digest(ctx.config.gtfs_upload_file)
        finally:
            downloaded.unlink(missing_ok=True)

    if config.non_essential:

        # uploads again so that two versions remain afterwards
        @post_feed_source("should delete a feed version")
        async def delete_feed_version(ctx: RunContext) -> None:
            ui = ctx.ui
            await ui.goto(ctx.url(f"/feed/{ctx.fixtures.require('feed_source_id')}"))
            await ui.wait(5000, "additional time for page to load")
            await upload_gtfs(ctx)
            await ui.wait_and_click(by_test_id("delete-feed-version-button"))
            await confirm_modal(ctx, "for data to refresh")
            await ui.wait_for_selector("#feed-source-viewer-tabs")
            await ui.expect_contains(VERSION_VALIDITY, FETCHED_FEED_VALIDITY)
