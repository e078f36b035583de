"""GTFS editor workflows.

Everything after "should edit a feed from scratch" works on the scratch feed
source, so those tests implicitly depend on it as well as on login and the
primary feed source.
"""
from __future__ import annotations

from datatools_e2e.config import RunConfig
from datatools_e2e.core.models import RunContext
from datatools_e2e.core.suite import Suite

from .discovery import find_list_item, id_from_href
from .fixtures import (
    CREATE_AGENCY,
    CREATE_CALENDAR,
    CREATE_EXCEPTION,
    CREATE_FARE,
    CREATE_FEED_SOURCE,
    CREATE_PATTERN,
    CREATE_ROUTE,
    CREATE_SNAPSHOT,
    CREATE_STOP,
    CREATE_TRIP,
    DUMMY_STOP_1,
    DUMMY_STOP_2,
    EDIT_FROM_SCRATCH,
    LOGIN,
    SNAPSHOT_FEED_VALIDITY,
)
from .steps import (
    append_and_verify,
    by_test_id,
    confirm_modal,
    create_feed_source_via_project_header,
    create_stop,
    delete_listed_entity,
    field,
    field_input,
    field_select,
    pick_color,
    react_select_option,
    save_and_reload,
    save_delay,
)

PATTERN_LIST = ".trip-pattern-list"
TIMETABLE = by_test_id("timetable-area")
SAVE_TRIP = by_test_id("save-trip-button")


def register(suite: Suite, config: RunConfig) -> None:
    post_feed_source = suite.registrar(LOGIN, CREATE_FEED_SOURCE)
    entity_test = post_feed_source.extend(EDIT_FROM_SCRATCH)

    # -- entering the editor ---------------------------------------------

    @post_feed_source("should load a feed version into the editor")
    async def load_version_into_editor(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("edit-feed-version-button"))
        await ui.wait_and_click(by_test_id("import-latest-version-button"))
        await ctx.wait_for_jobs()
        await ui.wait_and_click(by_test_id("begin-editing-button"))
        await save_delay(ctx, "for dialog to close")

    @post_feed_source(EDIT_FROM_SCRATCH)
    async def edit_from_scratch(ctx: RunContext) -> None:
        ui = ctx.ui
        name = f"feed-source-to-edit-from-scratch-{ctx.run_stamp}"
        await create_feed_source_via_project_header(ctx, name)
        _, link = await find_list_item(ui, name)
        ctx.fixtures.scratch_feed_source_id = id_from_href(await ui.href(link), "feed")
        # the first click only loads the feed source dropdown
        await ui.click_element(link)
        await ui.click_element(link)
        await ui.wait_for_selector("#feed-source-viewer-tabs")
        await save_delay(ctx, "for feed versions to load")
        await ui.click(by_test_id("edit-feed-version-button"))
        await ui.wait_and_click(by_test_id("edit-from-scratch-button"))
        await ctx.wait_for_jobs()
        await ui.wait_and_click(by_test_id("begin-editing-button"))
        await save_delay(ctx, "for welcome dialog to close")

    # -- feed info -----------------------------------------------------

    @entity_test("should create feed info data")
    async def create_feed_info(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("editor-feedinfo-nav-button"))
        await ui.wait_for_selector("#feed_publisher_name")
        await ui.type("#feed_publisher_name", "end-to-end automated test")
        await ui.type("#feed_publisher_url", "example.test")
        await react_select_option(ctx, field("feedinfo", "feed_lang"), "eng", 2)
        await ui.type(field_input("feedinfo", "feed_start_date"), "05/29/18", clear=True)
        await ui.type(field_input("feedinfo", "feed_end_date"), "05/29/38", clear=True)
        await pick_color(ctx, field("feedinfo", "default_route_color"), "3D65E2")
        await ui.select(field_select("feedinfo", "default_route_type"), "6")
        await ui.type(field_input("feedinfo", "feed_version"), ctx.run_stamp)
        await save_and_reload(ctx, "#feed_publisher_name")
        await ui.expect_contains(field("feedinfo", "feed_publisher_name"), "end-to-end automated test")

    @entity_test("should update feed info data", depends_on="should create feed info data")
    async def update_feed_info(ctx: RunContext) -> None:
        await ctx.ui.append_text("#feed_publisher_name", " runner")
        await save_and_reload(ctx, "#feed_publisher_name")
        await ctx.ui.expect_contains(
            field("feedinfo", "feed_publisher_name"), "end-to-end automated test runner"
        )

    # -- agencies ------------------------------------------------------

    @entity_test(CREATE_AGENCY)
    async def create_agency(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("editor-agency-nav-button"))
        await ui.wait_and_click(by_test_id("create-first-agency-button"))
        await ui.wait_for_selector(field("agency", "agency_id"))
        await ui.type(field_input("agency", "agency_id"), "test-agency-id")
        await ui.type(field_input("agency", "agency_name"), "test agency name")
        await ui.type(field_input("agency", "agency_url"), "example.test")
        await react_select_option(ctx, field("agency", "agency_timezone"), "america/lo", 1)
        await react_select_option(ctx, field("agency", "agency_lang"), "eng", 2)
        await ui.type(field_input("agency", "agency_phone"), "555-555-5555")
        await ui.type(field_input("agency", "agency_fare_url"), "example.fare.test")
        await ui.type(field_input("agency", "agency_email"), "test@example.com")
        await ui.type(field_input("agency", "agency_branding_url"), "example.branding.url")
        await save_and_reload(ctx, field("agency", "agency_id"))
        await ui.expect_contains(field("agency", "agency_id"), "test-agency-id")

    @entity_test("should update agency data", depends_on=CREATE_AGENCY)
    async def update_agency(ctx: RunContext) -> None:
        await append_and_verify(ctx, "agency", "agency_name", " updated", "test agency name updated")

    @entity_test("should delete agency data")
    async def delete_agency(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("clone-agency-button"))
        await ui.append_text(field_input("agency", "agency_id"), "-copied")
        await ui.append_text(field_input("agency", "agency_name"), " to delete")
        await save_and_reload(ctx, field_input("agency", "agency_name"))
        await delete_listed_entity(ctx, by_test_id("delete-agency-button"), "test agency name updated to delete")

    # -- routes --------------------------------------------------------

    @entity_test(CREATE_ROUTE, depends_on=CREATE_AGENCY)
    async def create_route(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("editor-route-nav-button"))
        await ui.wait_and_click(by_test_id("create-first-route-button"))
        await ui.wait_for_selector(field("route", "route_id"))
        await ui.select(field_select("route", "status"), "2")
        await ui.select(field_select("route", "publicly_visible"), "1")
        await ui.type(field_input("route", "route_id"), "test-route-id", clear=True)
        await ui.type(field_input("route", "route_short_name"), "test1", clear=True)
        await ui.type(field_input("route", "route_long_name"), "test route 1")
        await ui.type(field_input("route", "route_desc"), "test route 1 description")
        await ui.select(field_select("route", "route_type"), "3")
        await pick_color(ctx, field("route", "route_color"), "1cff32")
        await ui.select(field_select("route", "route_text_color"), "000000")
        await ui.select(field_select("route", "wheelchair_accessible"), "1")
        await ui.type(field_input("route", "route_branding_url"), "example.branding.test")
        await save_and_reload(ctx, field("route", "route_id"))
        await ui.expect_contains(field("route", "route_id"), "test-route-id")

    @entity_test("should update route data", depends_on=[CREATE_AGENCY, CREATE_ROUTE])
    async def update_route(ctx: RunContext) -> None:
        await append_and_verify(ctx, "route", "route_long_name", " updated", "test route 1 updated")

    @entity_test("should delete route data", depends_on=CREATE_AGENCY)
    async def delete_route(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("clone-route-button"))
        await ui.append_text(field_input("route", "route_id"), "-copied")
        await ui.append_text(field_input("route", "route_long_name"), " to delete")
        await save_and_reload(ctx, field_input("route", "route_long_name"))
        await delete_listed_entity(ctx, by_test_id("delete-route-button"), "test route 1 updated to delete")

    # -- stops ---------------------------------------------------------

    @entity_test(CREATE_STOP)
    async def create_first_stop(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("editor-stop-nav-button"))
        await ui.wait_for_selector(by_test_id("create-stop-instructions"))
        await create_stop(ctx, DUMMY_STOP_1)
        await ui.reload()
        await ui.wait_for_selector(field("stop", "stop_id"))
        await ui.expect_contains(field("stop", "stop_id"), DUMMY_STOP_1.id)

    @entity_test("should update stop data")
    async def update_stop(ctx: RunContext) -> None:
        await create_stop(ctx, DUMMY_STOP_2)
        await append_and_verify(ctx, "stop", "stop_desc", " updated", f"{DUMMY_STOP_2.description} updated")

    @entity_test("should delete stop data", depends_on=CREATE_STOP)
    async def delete_stop(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("clone-stop-button"))
        await ui.append_text(field_input("stop", "stop_id"), "-copied")
        await ui.type(field_input("stop", "stop_code"), "3", clear=True)
        await ui.append_text(field_input("stop", "stop_name"), " to delete")
        await save_and_reload(ctx, field_input("stop", "stop_name"))
        await delete_listed_entity(
            ctx, by_test_id("delete-stop-button"), f"{DUMMY_STOP_2.name} to delete (3)"
        )

    # -- calendars -----------------------------------------------------

    @entity_test(CREATE_CALENDAR)
    async def create_calendar(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("editor-calendar-nav-button"))
        await ui.wait_and_click(by_test_id("create-first-calendar-button"))
        await ui.wait_for_selector(field("calendar", "service_id"))
        await ui.type(field_input("calendar", "service_id"), "test-service-id")
        await ui.type(field_input("calendar", "description"), "test calendar")
        await ui.click(field_input("calendar", "monday"))
        await ui.click(field_input("calendar", "tuesday"))
        await ui.type(field_input("calendar", "start_date"), "05/29/18", clear=True)
        await ui.type(field_input("calendar", "end_date"), "05/29/28", clear=True)
        await save_and_reload(ctx, field("calendar", "service_id"))
        await ui.expect_contains(field("calendar", "service_id"), "test-service-id")

    @entity_test("should update calendar data", depends_on=CREATE_CALENDAR)
    async def update_calendar(ctx: RunContext) -> None:
        await append_and_verify(ctx, "calendar", "description", " updated", "test calendar updated")

    @entity_test("should delete calendar data")
    async def delete_calendar(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("clone-calendar-button"))
        await ui.append_text(field_input("calendar", "service_id"), "-copied")
        await ui.append_text(field_input("calendar", "description"), " to delete")
        await save_and_reload(ctx, field_input("calendar", "description"))
        await delete_listed_entity(
            ctx,
            by_test_id("delete-calendar-button"),
            "test-service-id-copied (test calendar updated to delete)",
        )

    # -- schedule exceptions -------------------------------------------

    @entity_test(CREATE_EXCEPTION, depends_on=CREATE_CALENDAR)
    async def create_exception(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("exception-tab-button"))
        await ui.wait_and_click(by_test_id("create-first-scheduleexception-button"))
        await ui.wait_for_selector(field("exception", "name"))
        await ui.type(field_input("exception", "name"), "test exception")
        # 7 is "no service"
        await ui.select(field_select("exception", "type"), "7")
        await ui.click(by_test_id("exception-add-date-button"))
        dates = f'{by_test_id("exception-dates-container")} input'
        await ui.wait_for_selector(dates)
        await ui.type(dates, "07/04/18", clear=True)
        await save_and_reload(ctx, field("exception", "name"))
        await ui.expect_contains(field("exception", "name"), "test exception")

    @entity_test("should update exception data", depends_on=CREATE_EXCEPTION)
    async def update_exception(ctx: RunContext) -> None:
        await append_and_verify(ctx, "exception", "name", " updated", "test exception updated")

    @entity_test("should delete exception data", depends_on=CREATE_CALENDAR)
    async def delete_exception(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("clone-scheduleexception-button"))
        await ui.append_text(field_input("exception", "name"), " to delete")
        await ui.type(f'{by_test_id("exception-dates-container")} input', "07/05/18", clear=True)
        await save_and_reload(ctx, field_input("exception", "name"))
        await delete_listed_entity(
            ctx, by_test_id("delete-scheduleexception-button"), "test exception updated to delete"
        )

    # -- fares ---------------------------------------------------------

    @entity_test(CREATE_FARE, depends_on=CREATE_ROUTE)
    async def create_fare(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("editor-fare-nav-button"))
        await ui.wait_and_click(by_test_id("create-first-fare-button"))
        await ui.wait_for_selector(field("fare", "fare_id"))
        await ui.type(field_input("fare", "fare_id"), "test-fare-id")
        await ui.type(field_input("fare", "price"), "1")
        await ui.select(field_select("fare", "currency_type"), "USD")
        await ui.select(field_select("fare", "payment_method"), "0")
        await ui.select(field_select("fare", "transfers"), "2")
        await ui.type(field_input("fare", "transfer_duration"), "12345")
        await save_and_reload(ctx, field("fare", "fare_id"))
        await ui.expect_contains(field("fare", "fare_id"), "test-fare-id")

        # fare rule scoped to the route
        rule_selections = by_test_id("fare-rule-selections")
        await ui.click(by_test_id("fare-rules-tab-button"))
        await ui.wait_and_click(by_test_id("add-fare-rule-button"))
        await ui.wait_and_click('input[name="fareRuleType-0-route_id"]')
        await ui.wait_for_selector(f"{rule_selections} input")
        await react_select_option(ctx, rule_selections, "1", 1, virtualized=True)
        await save_and_reload(ctx, field("fare", "fare_id"))
        await ui.click(by_test_id("fare-rules-tab-button"))
        await ui.wait_for_selector(by_test_id("add-fare-rule-button"))
        await ui.expect_contains(rule_selections, "test route 1 updated")

    @entity_test("should update fare data", depends_on=CREATE_FARE)
    async def update_fare(ctx: RunContext) -> None:
        await ctx.ui.click(by_test_id("fare-attributes-tab-button"))
        await ctx.ui.wait_for_selector(field("fare", "fare_id"))
        await append_and_verify(ctx, "fare", "fare_id", "-updated", "test-fare-id-updated")

    @entity_test("should delete fare data", depends_on=CREATE_FARE)
    async def delete_fare(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("clone-fare-button"))
        await ui.append_text(field_input("fare", "fare_id"), "-copied")
        await save_and_reload(ctx, field_input("fare", "fare_id"))
        await delete_listed_entity(ctx, by_test_id("delete-fare-button"), "test-fare-id-updated-copied")

    # -- trip patterns -------------------------------------------------

    @entity_test(CREATE_PATTERN, depends_on=[CREATE_ROUTE, CREATE_STOP])
    async def create_pattern(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("editor-route-nav-button"))
        await ui.wait_and_click(".entity-list-row")
        await ui.wait_and_click(by_test_id("trippattern-tab-button"))
        await ui.wait_and_click(by_test_id("new-pattern-button"))
        await ui.wait_for_selector(by_test_id("pattern-title-New Pattern"))
        # the feed info panel can cover the pattern controls
        await ui.click(by_test_id("FeedInfoPanel-visibility-toggle"))
        await save_delay(ctx, "for page to catch up with itself")
        await ui.click(by_test_id("add-stop-by-name-button"))
        await ui.wait_for_selector(".pattern-stop-card .Select-control")
        await react_select_option(ctx, ".pattern-stop-card", "la", 1, virtualized=True)
        await save_delay(ctx, "for 1st stop to save")
        await react_select_option(ctx, ".pattern-stop-card", "ru", 1, virtualized=True)
        await save_delay(ctx, "for auto-save to happen")
        await ui.reload()
        await ui.wait_for_selector(by_test_id("pattern-title-New Pattern"))
        await ui.expect_contains(PATTERN_LIST, "Russell Av")

    @entity_test("should update pattern data", depends_on=CREATE_PATTERN)
    async def update_pattern(ctx: RunContext) -> None:
        ui = ctx.ui
        edit_container = by_test_id("editable-text-field-edit-container")
        await ui.click(by_test_id("editable-text-field-edit-button"))
        await ui.wait_for_selector(edit_container)
        await ui.append_text(f"{edit_container} input", " updated")
        await save_and_reload(
            ctx,
            by_test_id("pattern-title-New Pattern updated"),
            save_selector=f"{edit_container} button",
        )
        await ui.expect_contains(by_test_id("pattern-title-New Pattern updated"), "New Pattern updated")

    @entity_test("should delete pattern data", depends_on=CREATE_PATTERN)
    async def delete_pattern(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("duplicate-pattern-button"))
        await save_delay(ctx)
        await ui.expect_contains(PATTERN_LIST, "New Pattern updated copy")
        await ui.click(by_test_id("delete-pattern-button"))
        await ui.wait_for_selector(by_test_id("modal-confirm-ok-button"))
        await save_delay(ctx, "for page to catch up")
        await confirm_modal(ctx)
        await ui.expect_not_contains(PATTERN_LIST, "New Pattern updated copy")

    # -- timetables ----------------------------------------------------

    @entity_test(CREATE_TRIP, depends_on=[CREATE_CALENDAR, CREATE_PATTERN])
    async def create_trip(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("pattern-title-New Pattern updated"))
        await ui.wait_and_click(by_test_id("edit-schedules-button"))
        await ui.wait_for_selector(by_test_id("calendar-select-container"))
        await react_select_option(ctx, by_test_id("calendar-select-container"), "te", 1)
        await ui.wait_for_selector(by_test_id("add-new-trip-button"))
        await save_delay(ctx, "for page to catch up with itself")
        await ui.click(by_test_id("add-new-trip-button"))
        await ui.wait_for_selector(TIMETABLE)
        await ui.click(".editable-cell")
        # block id, trip id, headsign, then arrival/departure at both stops
        cells = ["test-block-id", "test-trip-id", "test-headsign", "1234", "1235", "1244"]
        for value in cells:
            await ui.type_keys(value)
            await ui.press("Tab")
            await ui.press("Enter")
        await ui.type_keys("1245")
        await ui.press("Enter")
        await save_and_reload(ctx, TIMETABLE, save_selector=SAVE_TRIP)
        await ui.expect_contains(TIMETABLE, "test-trip-id")

    @entity_test("should update trip data", depends_on=CREATE_TRIP)
    async def update_trip(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(".editable-cell")
        await ui.press("Tab")
        await ui.press("Enter")
        await ui.press("End")
        await ui.type_keys("-updated")
        await ui.press("Enter")
        await save_and_reload(ctx, TIMETABLE, save_selector=SAVE_TRIP)
        await ui.expect_contains(TIMETABLE, "test-trip-id-updated")

    @entity_test("should delete trip data", depends_on=CREATE_TRIP)
    async def delete_trip(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("duplicate-trip-button"))
        await save_delay(ctx, "for new trip to appear")
        await ui.click(".editable-cell")
        await ui.press("ArrowDown")
        await ui.press("ArrowRight")
        await ui.press("Enter")
        await ui.type_keys("test-trip-to-delete")
        await ui.press("Enter")
        await save_delay(ctx)
        await save_and_reload(ctx, TIMETABLE, save_selector=SAVE_TRIP)
        await ui.expect_contains(TIMETABLE, "test-trip-to-delete")
        await ui.click(".timetable-left-grid .text-center:nth-child(2)")
        await ui.click(by_test_id("delete-trip-button"))
        await confirm_modal(ctx)
        await ui.expect_not_contains(TIMETABLE, "test-trip-to-delete")

    # -- snapshots -----------------------------------------------------

    @entity_test(CREATE_SNAPSHOT, depends_on=CREATE_TRIP)
    async def create_snapshot(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.click(by_test_id("take-snapshot-button"))
        await ui.wait_for_selector(by_test_id("snapshot-dialog-name"))
        await ui.type(by_test_id("snapshot-dialog-name"), "test-snapshot")
        await ui.click(by_test_id("confirm-snapshot-create-button"))
        await ctx.wait_for_jobs()

    @entity_test("should make snapshot active version", depends_on=CREATE_SNAPSHOT)
    async def publish_snapshot(ctx: RunContext) -> None:
        ui = ctx.ui
        # the editor's home button does not navigate back reliably
        await ui.goto(ctx.url(f"/feed/{ctx.fixtures.require('scratch_feed_source_id')}"))
        await ui.wait_and_click("#feed-source-viewer-tabs-tab-snapshots")
        await save_delay(ctx, "for page to load")
        await ui.wait_and_click(by_test_id("publish-snapshot-button"))
        await ctx.wait_for_jobs()
        await ui.click("#feed-source-viewer-tabs-tab-")
        await ui.wait_for_selector(by_test_id("feed-version-validity"))
        await ui.expect_contains(by_test_id("feed-version-validity"), SNAPSHOT_FEED_VALIDITY)

