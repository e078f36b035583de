"""Browser session, job polling and coverage forwarding."""
from .browser import BrowserSession, attach_event_logging
from .coverage import CoverageReporter
from .driver import SessionDriver, strip_framework_comments
from .jobs import JobPoller

__all__ = [
    "BrowserSession",
    "CoverageReporter",
    "JobPoller",
    "SessionDriver",
    "attach_event_logging",
    "strip_framework_comments",
]
