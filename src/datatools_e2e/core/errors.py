"""Error taxonomy raised by the orchestrator and the session driver."""
from __future__ import annotations


class E2EError(Exception):
    """Base class for harness errors."""


class PreconditionError(E2EError):
    """A test was refused before its body ran."""


class FailingFastError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("Failing fast due to previous failed test")


class DependencyNotMetError(PreconditionError):
    def __init__(self, dependency: str) -> None:
        super().__init__(f'Dependent test "{dependency}" has not completed yet')
        self.dependency = dependency


class ElementNotFoundError(E2EError):
    """Zero elements matched a selector that was expected to match."""

    def __init__(self, selector: str, detail: str = "") -> None:
        message = f"Could not find any elements for selector: {selector}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.selector = selector


class WaitTimeoutError(E2EError, TimeoutError):
    """A bounded wait was not satisfied in time."""

    def __init__(self, selector: str, timeout_s: float) -> None:
        super().__init__(f"Timed out after {timeout_s:g}s waiting for selector: {selector}")
        self.selector = selector
        self.timeout_s = timeout_s
