"""Example plugin adding a test after the built-in suite.

Enable with ``DATATOOLS_E2E_PLUGINS=alerts_plugin`` and this directory on
``PYTHONPATH``.
"""
from datatools_e2e.workflows.fixtures import LOGIN


def register(suite, config) -> None:
    test = suite.registrar(LOGIN)

    @test("should open the alerts page")
    async def open_alerts(ctx) -> None:
        ui = ctx.ui
        await ui.goto(ctx.url("/alerts"), wait_until="networkidle")
        await ui.wait_for_selector("h2")
        await ui.expect_contains("h2", "Alerts")
