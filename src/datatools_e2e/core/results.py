"""Result data structures produced by the suite runner."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

STATUSES = ("passed", "failed", "error", "blocked")


@dataclass
class CaseResult:
    """Outcome of executing a single test case."""

    name: str
    status: str
    duration_s: float
    error: Optional[str] = None
    screenshot: Optional[Path] = None

    @property
    def passed(self) -> bool:
        return self.status == "passed"
