"""Forwarding of in-page coverage counters to the collector endpoint."""
from __future__ import annotations

import logging
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)

COVERAGE_EXPRESSION = "() => window.__coverage__"


class CoverageReporter:
    """POSTs ``window.__coverage__`` to the collector when collection is on.

    Collector errors are not caught here; they surface in whatever test or
    navigation asked for the report.
    """

    def __init__(self, page: Any, endpoint: str, *, enabled: bool, http: aiohttp.ClientSession | None) -> None:
        if enabled and http is None:
            raise ValueError("Coverage collection needs an HTTP session")
        self._page = page
        self._endpoint = endpoint
        self._http = http
        self.enabled = enabled
        self.reports_sent = 0

    async def report(self) -> None:
        if not self.enabled:
            return
        coverage = await self._page.evaluate(COVERAGE_EXPRESSION)
        async with self._http.post(self._endpoint, json=coverage) as response:
            logger.debug("coverage report sent to %s (status %s)", self._endpoint, response.status)
        self.reports_sent += 1
