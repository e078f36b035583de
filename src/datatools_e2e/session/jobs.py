"""Waiting for backend jobs surfaced through the job-monitor UI."""
from __future__ import annotations

import logging
import time

from .driver import SessionDriver

logger = logging.getLogger(__name__)

ACTIVE_JOBS = '[data-test-id="possibly-active-jobs"]'
ALL_JOBS_COMPLETED = '[data-test-id="all-jobs-completed"]'
CLEAR_COMPLETED_JOBS = '[data-test-id="clear-completed-jobs-button"]'


class JobPoller:
    """Blocks until every running job is complete, then clears the list."""

    def __init__(self, driver: SessionDriver, *, job_timeout_s: float, mount_delay_ms: int = 500) -> None:
        self._driver = driver
        self._job_timeout_s = job_timeout_s
        self._mount_delay_ms = mount_delay_ms

    async def wait_and_clear(self) -> None:
        """Raises ``WaitTimeoutError`` if the jobs do not finish within the job timeout."""
        start = time.perf_counter()
        await self._driver.wait(self._mount_delay_ms, "for job monitoring to begin")
        await self._driver.wait_for_selector(ACTIVE_JOBS)
        await self._driver.wait_for_selector(ALL_JOBS_COMPLETED, timeout_s=self._job_timeout_s)
        await self._driver.wait_and_click(CLEAR_COMPLETED_JOBS)
        logger.info("cleared completed jobs in %.3f seconds", time.perf_counter() - start)
