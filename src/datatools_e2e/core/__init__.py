"""Core models and the orchestrator exposed at the package level."""
from .errors import (
    DependencyNotMetError,
    E2EError,
    ElementNotFoundError,
    FailingFastError,
    PreconditionError,
    WaitTimeoutError,
)
from .models import Fixtures, RunContext, TestBody, TestCase, make_run_stamp
from .results import CaseResult
from .runner import Orchestrator, SuiteRunner, screenshot_name
from .suite import Registrar, Suite

__all__ = [
    "CaseResult",
    "DependencyNotMetError",
    "E2EError",
    "ElementNotFoundError",
    "FailingFastError",
    "Fixtures",
    "Orchestrator",
    "PreconditionError",
    "Registrar",
    "RunContext",
    "Suite",
    "SuiteRunner",
    "TestBody",
    "TestCase",
    "WaitTimeoutError",
    "make_run_stamp",
    "screenshot_name",
]
