"""Session driver: the only surface workflow scripts use to touch the browser."""
from __future__ import annotations

import asyncio
import logging
import re
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from datatools_e2e.config import Timing
from datatools_e2e.core.errors import ElementNotFoundError, WaitTimeoutError

from .coverage import CoverageReporter

logger = logging.getLogger(__name__)

# React 15 leaves markers such as <!-- react-text: 12 --> and <!-- /react-text -->
_FRAMEWORK_COMMENT = re.compile(r"<!--[\s\w\-:/]*-->")

DEFAULT_WAIT_TIMEOUT_S = 30.0


def strip_framework_comments(html: str) -> str:
    return _FRAMEWORK_COMMENT.sub("", html)


def _seconds_since(start: float) -> str:
    return f"{time.perf_counter() - start:.3f} seconds"


class SessionDriver:
    """Thin wrapper over a Playwright page with logging and strict lookups."""

    def __init__(self, page: Any, coverage: CoverageReporter, timing: Optional[Timing] = None) -> None:
        self._page = page
        self._coverage = coverage
        self._timing = timing or Timing()

    @contextmanager
    def _timed(self, action: str) -> Iterator[None]:
        logger.info(action)
        start = time.perf_counter()
        yield
        logger.debug("%s took %s", action, _seconds_since(start))

    # -- input -----------------------------------------------------------

    async def click(self, selector: str) -> None:
        with self._timed(f"clicking selector: {selector}"):
            await self._page.click(selector)

    async def wait_and_click(self, selector: str, *, timeout_s: Optional[float] = None, visible: bool = False) -> None:
        await self.wait_for_selector(selector, timeout_s=timeout_s, visible=visible)
        await self.click(selector)

    async def type(self, selector: str, text: str, *, clear: bool = False) -> None:
        if clear:
            await self.clear(selector)
        with self._timed(f'typing text: "{text}" into selector: {selector}'):
            await self._page.locator(selector).first.press_sequentially(text)

    async def clear(self, selector: str) -> None:
        with self._timed(f"clearing input: {selector}"):
            if await self._page.query_selector(selector) is None:
                raise ElementNotFoundError(selector, "input to clear")
            await self._page.eval_on_selector(selector, "input => { input.value = '' }")

    async def append_text(self, selector: str, text: str) -> None:
        with self._timed(f'appending text: "{text}" to selector: {selector}'):
            await self._page.focus(selector)
            await self._page.keyboard.press("End")
            await self._page.keyboard.type(text)

    async def press(self, key: str) -> None:
        with self._timed(f"pressing key: {key}"):
            await self._page.keyboard.press(key)

    async def type_keys(self, text: str) -> None:
        with self._timed(f'typing keys: "{text}"'):
            await self._page.keyboard.type(text)

    async def select(self, selector: str, value: str) -> None:
        with self._timed(f'selecting value "{value}" in: {selector}'):
            await self._page.select_option(selector, value)

    async def mouse_click(self, x: float, y: float, *, button: str = "left") -> None:
        with self._timed(f"{button} clicking at ({x}, {y})"):
            await self._page.mouse.click(x, y, button=button)

    async def hover_into(self, element: Any) -> None:
        """Move the mouse from just outside ``element`` into its center.

        A plain hover does not fire ``mouseenter`` on the feed source list.
        """
        box = await element.bounding_box()
        if box is None:
            raise ElementNotFoundError("<element>", "element has no bounding box")
        with self._timed("moving mouse into element"):
            await self._page.mouse.move(box["x"] - 10, box["y"])
            await self._page.mouse.move(box["x"] + box["width"] / 2, box["y"] + box["height"] / 2)

    async def click_element(self, element: Any) -> None:
        with self._timed("clicking element"):
            await element.click()

    # -- waiting and navigation -------------------------------------------

    async def wait(self, milliseconds: int, reason: str = "") -> None:
        logger.info("waiting %s ms%s...", milliseconds, f" {reason}" if reason else "")
        await asyncio.sleep(milliseconds / 1000)

    async def wait_for_selector(
        self,
        selector: str,
        *,
        timeout_s: Optional[float] = None,
        visible: bool = False,
    ) -> Any:
        start = time.perf_counter()
        await self.wait(self._timing.selector_delay_ms, "delay before looking for selector...")
        limit = timeout_s if timeout_s is not None else DEFAULT_WAIT_TIMEOUT_S
        logger.info("waiting for selector: %s", selector)
        try:
            element = await self._page.wait_for_selector(
                selector,
                state="visible" if visible else "attached",
                timeout=limit * 1000,
            )
        except PlaywrightTimeoutError as exc:
            raise WaitTimeoutError(selector, limit) from exc
        logger.info("selector %s took %s", selector, _seconds_since(start))
        return element

    async def goto(self, url: str, *, wait_until: Optional[str] = None) -> None:
        # coverage for the page being left
        await self._coverage.report()
        with self._timed(f"navigating to: {url}"):
            await self._page.goto(url, wait_until=wait_until or "load")
        await self.wait(self._timing.settle_delay_ms, "for page to load")

    async def reload(self) -> None:
        with self._timed("reloading page"):
            await self._page.reload(wait_until="networkidle")

    # -- reading ----------------------------------------------------------

    async def inner_html(self, selector: str) -> str:
        logger.info("getting innerHTML for selector: %s", selector)
        element = await self._page.query_selector(selector)
        if element is None:
            raise ElementNotFoundError(selector)
        return strip_framework_comments(await element.inner_html())

    async def inner_html_of(self, element: Any) -> str:
        return strip_framework_comments(await element.inner_html())

    async def all_elements(self, selector: str) -> List[Any]:
        logger.info("getting all elements for selector: %s", selector)
        elements = await self._page.query_selector_all(selector)
        if not elements:
            raise ElementNotFoundError(selector)
        return list(elements)

    async def child(self, element: Any, selector: str) -> Any:
        found = await element.query_selector(selector)
        if found is None:
            raise ElementNotFoundError(selector, "inside parent element")
        return found

    async def href(self, element: Any) -> str:
        href = await element.evaluate("el => el.href")
        if not href:
            raise ElementNotFoundError("[href]", "element has no href")
        logger.info("got href: %s", href)
        return href

    async def evaluate(self, expression: str) -> Any:
        return await self._page.evaluate(expression)

    async def expect_contains(self, selector: str, text: str) -> None:
        html = await self.inner_html(selector)
        assert text in html, f"expected {selector} to contain {text!r}"

    async def expect_not_contains(self, selector: str, text: str) -> None:
        html = await self.inner_html(selector)
        assert text not in html, f"expected {selector} not to contain {text!r}"

    # -- files ------------------------------------------------------------

    async def upload_file(self, selector: str, path: Path) -> None:
        with self._timed(f"uploading {path} via: {selector}"):
            await self.wait_for_selector(selector)
            await self._page.set_input_files(selector, str(path))

    async def download(self, selector: str, dest_dir: Path) -> Path:
        """Click ``selector`` and save the file it triggers into ``dest_dir``."""
        with self._timed(f"downloading via: {selector}"):
            async with self._page.expect_download() as download_info:
                await self._page.click(selector)
            download = await download_info.value
            dest_dir.mkdir(parents=True, exist_ok=True)
            target = dest_dir / download.suggested_filename
            await download.save_as(str(target))
        return target

    async def screenshot(self, path: Path) -> Path:
        with self._timed(f"taking screenshot: {path}"):
            path.parent.mkdir(parents=True, exist_ok=True)
            await self._page.screenshot(path=str(path), full_page=True)
        return path
