"""Core dataclasses shared across the orchestrator and workflow scripts."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Optional, Tuple

from datatools_e2e.config import RunConfig

if TYPE_CHECKING:  # pragma: no cover
    import aiohttp

    from datatools_e2e.session.coverage import CoverageReporter
    from datatools_e2e.session.driver import SessionDriver
    from datatools_e2e.session.jobs import JobPoller

TestBody = Callable[["RunContext"], Awaitable[Any]]


@dataclass(frozen=True)
class TestCase:
    """A named workflow registered with its dependency list."""

    __test__ = False  # keep pytest from collecting this class

    name: str
    body: TestBody
    timeout_s: float
    dependencies: Tuple[str, ...] = tuple()


@dataclass
class Fixtures:
    """Identifiers discovered by one test and consumed by later ones."""

    project_id: Optional[str] = None
    feed_source_id: Optional[str] = None
    scratch_feed_source_id: Optional[str] = None
    router_id: Optional[str] = None
    created_test_project: bool = False

    def require(self, name: str) -> str:
        value = getattr(self, name)
        if not value:
            raise LookupError(f"Fixture '{name}' has not been discovered yet")
        return value


def make_run_stamp(now: Optional[dt.datetime] = None) -> str:
    moment = now or dt.datetime.now().astimezone()
    return moment.strftime("%Y-%m-%dT%H-%M-%S")


@dataclass
class RunContext:
    """Mutable state owned by a single run, passed to every test body."""

    config: RunConfig
    run_stamp: str = field(default_factory=make_run_stamp)
    results: Dict[str, bool] = field(default_factory=dict)
    failing_fast: bool = False
    fixtures: Fixtures = field(default_factory=Fixtures)
    screenshots: Dict[str, Path] = field(default_factory=dict)
    driver: Optional["SessionDriver"] = None
    jobs: Optional["JobPoller"] = None
    coverage: Optional["CoverageReporter"] = None
    http: Optional["aiohttp.ClientSession"] = None

    @property
    def project_name(self) -> str:
        return f"test-project-{self.run_stamp}"

    @property
    def feed_source_name(self) -> str:
        return f"test-feed-source-{self.run_stamp}"

    def artifact_path(self, filename: str) -> Path:
        return self.config.artifacts_dir / filename

    def url(self, path: str = "") -> str:
        return self.config.url(path)

    def passed(self, name: str) -> bool:
        return self.results.get(name) is True

    @property
    def ui(self) -> "SessionDriver":
        if self.driver is None:
            raise RuntimeError("No browser session is attached to this run")
        return self.driver

    async def wait_for_jobs(self) -> None:
        if self.jobs is None:
            raise RuntimeError("No job poller is attached to this run")
        await self.jobs.wait_and_clear()
