"""Browser lifetime for a run: launch once, log its events, close once."""
from __future__ import annotations

import logging
from typing import Any, Optional

from playwright.async_api import async_playwright

from datatools_e2e.config import RunConfig
from datatools_e2e.logs import BROWSER_LOGGER

logger = logging.getLogger(__name__)


def attach_event_logging(page: Any, events: logging.Logger) -> None:
    """Mirror console output, page errors and request outcomes into ``events``."""
    page.on("console", lambda msg: events.info(msg.text))
    page.on("pageerror", lambda error: events.error("Page Error: %s", error))
    page.on("crash", lambda _: events.error("Page crashed"))
    page.on("requestfailed", lambda req: events.error("Request failed: %s %s", req.method, req.url))
    page.on("requestfinished", lambda req: events.info("Request finished: %s %s", req.method, req.url))


class BrowserSession:
    """Async context manager owning the Chromium process and its single page."""

    def __init__(self, config: RunConfig, *, events: Optional[logging.Logger] = None) -> None:
        self._config = config
        self._events = events or logging.getLogger(BROWSER_LOGGER)
        self._playwright: Any = None
        self.browser: Any = None
        self.page: Any = None

    async def __aenter__(self) -> "BrowserSession":
        logger.info("Launching chromium for testing...")
        self._playwright = await async_playwright().start()
        args = ["--no-sandbox"] if self._config.no_sandbox else []
        try:
            self.browser = await self._playwright.chromium.launch(headless=self._config.headless, args=args)
            self.page = await self.browser.new_page(accept_downloads=True)
        except Exception:
            logger.error("Could not start chromium, stopping playwright")
            await self._close()
            raise
        attach_event_logging(self.page, self._events)
        logger.info("Setup complete.")
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self._close()
        logger.info("Chromium closed.")

    async def _close(self) -> None:
        if self.page is not None:
            await self.page.close()
        if self.browser is not None:
            await self.browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self.page = self.browser = self._playwright = None
