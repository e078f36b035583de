"""Landing page, login and project workflows."""
from __future__ import annotations

from datatools_e2e.config import RunConfig
from datatools_e2e.core.models import RunContext
from datatools_e2e.core.suite import Suite

from .fixtures import CREATE_PROJECT, LOAD_PAGE, LOGIN
from .steps import by_test_id, create_project, delete_project, find_project

LOGIN_SUBMIT = 'button[class="auth0-lock-submit"]'
LOGIN_EMAIL = 'input[class="auth0-lock-input"][name="email"]'
LOGIN_PASSWORD = 'input[class="auth0-lock-input"][name="password"]'


def register(suite: Suite, config: RunConfig) -> None:
    test = suite.registrar()
    post_login = test.extend(LOGIN)

    @test(LOAD_PAGE)
    async def load_page(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.goto(ctx.url())
        await ui.wait_for_selector("h1")
        await ui.expect_contains("h1", "Conveyal Data Tools")

    @test(LOGIN, depends_on=LOAD_PAGE)
    async def login(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.goto(ctx.url(), wait_until="networkidle")
        await ui.wait_and_click(by_test_id("header-log-in-button"))
        await ui.wait_for_selector(LOGIN_SUBMIT, visible=True)
        await ui.wait_for_selector(LOGIN_EMAIL)
        await ui.type(LOGIN_EMAIL, ctx.config.username)
        await ui.type(LOGIN_PASSWORD, ctx.config.password)
        await ui.click(LOGIN_SUBMIT)
        await ui.wait_for_selector("#context-dropdown")
        await ui.wait(ctx.config.timing.save_delay_ms, "for projects to load")

    @post_login(CREATE_PROJECT)
    async def create_a_project(ctx: RunContext) -> None:
        ui = ctx.ui
        await create_project(ctx, ctx.project_name)
        project_id, link = await find_project(ctx, ctx.project_name)
        ctx.fixtures.project_id = project_id
        await ui.click_element(link)
        await ui.wait_for_selector("#project-viewer-tabs")
        await ui.expect_contains("#project-viewer-tabs", "What is a feed source?")
        ctx.fixtures.created_test_project = True

    @post_login("should update a project by adding a otp server", depends_on=CREATE_PROJECT)
    async def add_otp_server(ctx: RunContext) -> None:
        ui = ctx.ui
        await ui.wait_and_click("#project-viewer-tabs-tab-settings")
        await ui.wait_and_click(by_test_id("deployment-settings-link"), visible=True)
        await ui.wait_and_click(by_test_id("add-server-button"))
        await ui.wait_for_selector('input[name="otpServers.$index.name"]')
        await ui.type('input[name="otpServers.$index.name"]', "test-otp-server")
        await ui.type('input[name="otpServers.$index.publicUrl"]', "http://localhost:8080")
        await ui.type('input[name="otpServers.$index.internalUrl"]', "http://localhost:8080/otp")
        await ui.click(by_test_id("save-settings-button"))
        await ui.reload()
        await ui.expect_contains("#project-viewer-tabs", "test-otp-server")

    if not config.non_essential:
        return

    @post_login("should delete a project", depends_on=CREATE_PROJECT)
    async def delete_a_project(ctx: RunContext) -> None:
        ui = ctx.ui
        name = f"test-project-that-will-get-deleted-{ctx.run_stamp}"
        await ui.goto(ctx.url(f"/home/{ctx.fixtures.require('project_id')}"), wait_until="networkidle")
        await ui.wait_for_selector("#context-dropdown")
        await create_project(ctx, name)
        project_id, _ = await find_project(ctx, name)
        await delete_project(ctx, project_id)
