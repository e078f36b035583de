from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from datatools_e2e.config import RunConfig, Timing
from datatools_e2e.core import RunContext
from datatools_e2e.session import CoverageReporter, JobPoller, SessionDriver


class FakeElement:
    def __init__(
        self,
        html: str = "",
        *,
        href: str = "",
        box: Optional[Dict[str, float]] = None,
        children: Optional[Dict[str, "FakeElement"]] = None,
    ) -> None:
        self.html = html
        self.href = href
        self.box = box
        self.children = children or {}
        self.clicks = 0

    async def inner_html(self) -> str:
        return self.html

    async def evaluate(self, expression: str) -> Any:
        return self.href

    async def bounding_box(self) -> Optional[Dict[str, float]]:
        return self.box

    async def query_selector(self, selector: str) -> Optional["FakeElement"]:
        return self.children.get(selector)

    async def click(self) -> None:
        self.clicks += 1


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self._page = page
        self._selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    async def press_sequentially(self, text: str) -> None:
        self._page.actions.append(("type", self._selector, text))


class FakeKeyboard:
    def __init__(self, page: "FakePage") -> None:
        self._page = page

    async def press(self, key: str) -> None:
        self._page.actions.append(("press", key))

    async def type(self, text: str) -> None:
        self._page.actions.append(("keys", text))


class FakeMouse:
    def __init__(self, page: "FakePage") -> None:
        self._page = page

    async def click(self, x: float, y: float, *, button: str = "left") -> None:
        self._page.actions.append(("mouse_click", x, y, button))

    async def move(self, x: float, y: float) -> None:
        self._page.actions.append(("mouse_move", x, y))


class FakeDownload:
    def __init__(self, filename: str, content: bytes) -> None:
        self.suggested_filename = filename
        self._content = content

    async def save_as(self, path: str) -> None:
        Path(path).write_bytes(self._content)


class FakeDownloadInfo:
    def __init__(self, download: FakeDownload) -> None:
        self._download = download

    @property
    def value(self):
        async def resolve() -> FakeDownload:
            return self._download

        return resolve()


class FakeExpectDownload:
    def __init__(self, download: FakeDownload) -> None:
        self._info = FakeDownloadInfo(download)

    async def __aenter__(self) -> FakeDownloadInfo:
        return self._info

    async def __aexit__(self, *exc_info: Any) -> None:
        return None


class FakePage:
    """Records every interaction; selectors resolve against ``elements``.

    ``pending`` maps a selector to the number of ``wait_for_selector`` calls
    that time out before it appears. ``on_click`` runs a callback after a
    selector is clicked, standing in for the app re-rendering.
    """

    def __init__(self) -> None:
        self.elements: Dict[str, List[FakeElement]] = {}
        self.pending: Dict[str, int] = {}
        self.actions: List[tuple] = []
        self.coverage: Any = {"file.js": {"s": {"0": 1}}}
        self.download: Optional[FakeDownload] = None
        self.fail_clicks: Dict[str, Exception] = {}
        self.on_click: Dict[str, Callable[[], None]] = {}
        self.keyboard = FakeKeyboard(self)
        self.mouse = FakeMouse(self)

    def add(self, selector: str, *elements: FakeElement) -> None:
        self.elements.setdefault(selector, []).extend(elements or [FakeElement()])

    def of_kind(self, kind: str) -> List[tuple]:
        return [action for action in self.actions if action[0] == kind]

    async def click(self, selector: str) -> None:
        self.actions.append(("click", selector))
        if selector in self.fail_clicks:
            raise self.fail_clicks[selector]
        if selector in self.on_click:
            self.on_click[selector]()

    async def wait_for_selector(self, selector: str, *, state: str, timeout: float) -> FakeElement:
        self.actions.append(("wait_for", selector, state, timeout))
        remaining = self.pending.get(selector, 0)
        if remaining:
            self.pending[selector] = remaining - 1
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        if selector not in self.elements:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        return self.elements[selector][0]

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def query_selector(self, selector: str) -> Optional[FakeElement]:
        found = self.elements.get(selector)
        return found[0] if found else None

    async def query_selector_all(self, selector: str) -> List[FakeElement]:
        return list(self.elements.get(selector, []))

    async def eval_on_selector(self, selector: str, expression: str) -> None:
        self.actions.append(("clear", selector))

    async def focus(self, selector: str) -> None:
        self.actions.append(("focus", selector))

    async def select_option(self, selector: str, value: str) -> None:
        self.actions.append(("select", selector, value))

    async def goto(self, url: str, *, wait_until: str) -> None:
        self.actions.append(("goto", url, wait_until))

    async def reload(self, *, wait_until: str) -> None:
        self.actions.append(("reload", wait_until))

    async def evaluate(self, expression: str) -> Any:
        self.actions.append(("evaluate", expression))
        return self.coverage

    async def set_input_files(self, selector: str, path: str) -> None:
        self.actions.append(("upload", selector, path))

    async def screenshot(self, *, path: str, full_page: bool) -> None:
        self.actions.append(("screenshot", path, full_page))
        Path(path).write_bytes(b"\x89PNG")

    def expect_download(self) -> FakeExpectDownload:
        assert self.download is not None, "no download staged"
        return FakeExpectDownload(self.download)


class FakeResponse:
    def __init__(self, status: int = 200, text: str = "") -> None:
        self.status = status
        self._text = text

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None

    async def text(self) -> str:
        return self._text

    async def read(self) -> bytes:
        return self._text.encode("utf-8")


class FakeHttp:
    """Stands in for ``aiohttp.ClientSession`` with canned responses."""

    def __init__(self, *, status: int = 200, text: str = "", error: Optional[Exception] = None) -> None:
        self.status = status
        self.text = text
        self.error = error
        self.requests: List[tuple] = []

    def _respond(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status, self.text)

    def post(self, url: str, *, json: Any = None) -> FakeResponse:
        self.requests.append(("POST", url, json))
        return self._respond()

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append(("GET", url, kwargs))
        return self._respond()


ZERO_TIMING = Timing(selector_delay_ms=0, settle_delay_ms=0, job_mount_delay_ms=0, save_delay_ms=0)


def make_config(tmp_path: Path, **overrides: Any) -> RunConfig:
    values: Dict[str, Any] = {
        "username": "e2e@example.com",
        "password": "secret",
        "gtfs_upload_file": tmp_path / "test-gtfs-to-upload.zip",
        "artifacts_dir": tmp_path,
        "timing": ZERO_TIMING,
    }
    values.update(overrides)
    return RunConfig(**values)


def attach_session(ctx: RunContext, page: FakePage, http: Optional[FakeHttp] = None) -> RunContext:
    config = ctx.config
    ctx.http = http  # type: ignore[assignment]
    ctx.coverage = CoverageReporter(page, config.coverage_url, enabled=config.collect_coverage, http=http)  # type: ignore[arg-type]
    ctx.driver = SessionDriver(page, ctx.coverage, config.timing)
    ctx.jobs = JobPoller(ctx.driver, job_timeout_s=config.timeouts.job_s, mount_delay_ms=0)
    return ctx


@pytest.fixture()
def page() -> FakePage:
    return FakePage()


@pytest.fixture()
def config(tmp_path: Path) -> RunConfig:
    return make_config(tmp_path)


@pytest.fixture()
def ctx(config: RunConfig, page: FakePage) -> RunContext:
    return attach_session(RunContext(config=config, run_stamp="2024-01-02T03-04-05"), page)
