"""UI steps shared by several workflow scripts."""
from __future__ import annotations

import logging

from datatools_e2e.core.models import RunContext

from .discovery import PROJECT_LINKS, resolve_entity_id
from .fixtures import DummyStop

logger = logging.getLogger(__name__)

SAVE_ENTITY = '[data-test-id="save-entity-button"]'
CONFIRM_MODAL = '[data-test-id="modal-confirm-ok-button"]'
ENTITY_LIST = ".entity-list"


def by_test_id(value: str) -> str:
    return f'[data-test-id="{value}"]'


def field(entity: str, name: str) -> str:
    """Container of an editor form field, e.g. ``field("stop", "stop_name")``."""
    return by_test_id(f"{entity}-{name}-input-container")


def field_input(entity: str, name: str) -> str:
    return f"{field(entity, name)} input"


def field_select(entity: str, name: str) -> str:
    return f"{field(entity, name)} select"


async def save_delay(ctx: RunContext, reason: str = "for save to happen") -> None:
    await ctx.ui.wait(ctx.config.timing.save_delay_ms, reason)


async def save_and_reload(ctx: RunContext, wait_selector: str, *, save_selector: str = SAVE_ENTITY) -> None:
    """Save the open form, reload, and wait for ``wait_selector`` to reappear."""
    ui = ctx.ui
    await ui.click(save_selector)
    await save_delay(ctx)
    await ui.reload()
    await ui.wait_for_selector(wait_selector)


async def confirm_modal(ctx: RunContext, reason: str = "for delete to happen") -> None:
    await ctx.ui.wait_and_click(CONFIRM_MODAL)
    await save_delay(ctx, reason)


async def react_select_option(
    ctx: RunContext,
    container: str,
    initial_text: str,
    option: int,
    *,
    virtualized: bool = False,
) -> None:
    ui = ctx.ui
    logger.info("selecting option from react-select container: %s", container)
    await ui.click(f"{container} .Select-control")
    await ui.type(f"{container} input", initial_text)
    option_class = "VirtualizedSelectOption" if virtualized else "Select-option"
    option_selector = f".{option_class}:nth-child({option})"
    await ui.wait_and_click(option_selector)
    logger.info("selected option")


async def pick_color(ctx: RunContext, container: str, color: str) -> None:
    ui = ctx.ui
    await ui.click(f"{container} button")
    await ui.wait_for_selector(f"{container} .sketch-picker")
    await ui.type(f"{container} input", color, clear=True)


async def append_and_verify(ctx: RunContext, entity: str, name: str, suffix: str, expected: str) -> None:
    """Append ``suffix`` to a form field, save, reload and check the stored value."""
    await ctx.ui.append_text(field_input(entity, name), suffix)
    await save_and_reload(ctx, field_input(entity, name))
    await ctx.ui.expect_contains(field(entity, name), expected)


async def delete_listed_entity(ctx: RunContext, delete_button: str, label: str, *, listing: str = ENTITY_LIST) -> None:
    """Delete the open entity after checking ``label`` is listed, then check it is gone."""
    ui = ctx.ui
    await ui.expect_contains(listing, label)
    await ui.click(delete_button)
    await confirm_modal(ctx)
    await ui.expect_not_contains(listing, label)


# -- projects ---------------------------------------------------------------


async def create_project(ctx: RunContext, name: str) -> None:
    """Create a project from the home page and check it is listed."""
    ui = ctx.ui
    logger.info("creating project with name: %s", name)
    await ui.click("#context-dropdown")
    await ui.wait_and_click('a[href="/project/new"]')
    await ui.wait_for_selector(by_test_id("project-name-input-container"))
    await ui.type(f'{by_test_id("project-name-input-container")} input', name)
    await ui.click(by_test_id("project-settings-form-save-button"))
    logger.info("saving new project")
    await save_delay(ctx, "for project to get saved")
    await ui.expect_contains(".project-header", name)
    await ui.goto(ctx.url("/project"), wait_until="networkidle")
    await ui.expect_contains(by_test_id("project-list-table"), name)
    logger.info("confirmed successful creation of project with name: %s", name)


async def find_project(ctx: RunContext, name: str):
    return await resolve_entity_id(ctx.ui, PROJECT_LINKS, name, "project")


async def delete_project(ctx: RunContext, project_id: str) -> None:
    ui = ctx.ui
    logger.info("deleting project with id: %s", project_id)
    await ui.goto(ctx.url(f"/project/{project_id}/settings"))
    await ui.wait_and_click(by_test_id("delete-project-button"))
    await ui.wait(500, "for modal to appear")
    await ui.wait_and_click(CONFIRM_MODAL)
    logger.info("deleted project")
    await ui.goto(ctx.url(f"/project/{project_id}"))
    await ui.wait_for_selector(".project-not-found")
    await ui.expect_contains(".project-not-found", project_id)
    logger.info("confirmed successful deletion of project with id %s", project_id)


async def cleanup_test_project(ctx: RunContext) -> None:
    """Delete the run's project; failures are logged and never fail the run."""
    if not ctx.fixtures.created_test_project or ctx.driver is None:
        return
    project_id = ctx.fixtures.project_id
    try:
        await delete_project(ctx, project_id or "")
        logger.info("Successfully deleted test project.")
    except Exception as exc:
        logger.error('could not delete project with id "%s" due to error: %s', project_id, exc)


# -- feed sources -----------------------------------------------------------


async def create_feed_source_via_form(ctx: RunContext, name: str) -> None:
    ui = ctx.ui
    container = by_test_id("feed-source-name-input-container")
    await ui.wait_for_selector(container)
    await ui.type(f"{container} input", name)
    await ui.click(by_test_id("create-feed-source-button"))
    await save_delay(ctx, "for feed source to be created and saved")
    await ui.wait_for_selector(".manager-header")
    await ui.expect_contains(".manager-header", name)
    await ui.click(by_test_id("feed-project-link"))
    await ui.wait_for_selector("#project-viewer-tabs")
    await ui.expect_contains("#project-viewer-tabs", name)
    logger.info("Successfully created Feed Source with name: %s", name)


async def create_feed_source_via_project_header(ctx: RunContext, name: str) -> None:
    ui = ctx.ui
    logger.info("create Feed Source with name: %s via project header button", name)
    project_id = ctx.fixtures.require("project_id")
    await ui.goto(ctx.url(f"/project/{project_id}"), wait_until="networkidle")
    await ui.wait_and_click(by_test_id("project-header-create-new-feed-source-button"))
    await create_feed_source_via_form(ctx, name)


async def upload_gtfs(ctx: RunContext) -> None:
    ui = ctx.ui
    logger.info("uploading gtfs")
    await ui.click("#bg-nested-dropdown")
    await ui.wait_and_click(by_test_id("upload-feed-button"))
    await ui.upload_file(".modal-body input", ctx.config.gtfs_upload_file)
    footer_buttons = await ui.all_elements(".modal-footer button")
    await ui.click_element(footer_buttons[0])
    await ctx.wait_for_jobs()
    logger.info("completed gtfs upload")


# -- editor -----------------------------------------------------------------


async def create_stop(ctx: RunContext, stop: DummyStop) -> None:
    """Create a stop by right clicking the map and filling out the form."""
    ui = ctx.ui
    logger.info("creating stop with name: %s", stop.name)
    await ui.mouse_click(700, 200, button="right")
    await ui.wait_for_selector(field("stop", "stop_id"))
    await save_delay(ctx, "for initial data to load")

    await ui.type(field_input("stop", "stop_id"), stop.id, clear=True)
    await ui.type(field_input("stop", "stop_code"), stop.code)
    await ui.type(field_input("stop", "stop_name"), stop.name, clear=True)
    await ui.type(field_input("stop", "stop_desc"), stop.description)
    await ui.type(field_input("stop", "stop_lat"), stop.lat, clear=True)
    await ui.type(field_input("stop", "stop_lon"), stop.lon, clear=True)

    zone = field("stop", "zone_id")
    await ui.click(f"{zone} .Select-control")
    await ui.type(f"{zone} input", stop.zone_id)
    await ui.press("Enter")

    await ui.type(field_input("stop", "stop_url"), stop.url)
    await ui.select(field_select("stop", "location_type"), stop.location_type)
    timezone_text, timezone_option = stop.timezone
    await react_select_option(ctx, field("stop", "stop_timezone"), timezone_text, timezone_option)
    await ui.select(field_select("stop", "wheelchair_boarding"), stop.wheelchair_boarding)

    await ui.click(SAVE_ENTITY)
    await save_delay(ctx)
    logger.info("created stop with name: %s", stop.name)
