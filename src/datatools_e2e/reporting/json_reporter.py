"""JSON reporter writing a machine-readable run report."""
from __future__ import annotations

import datetime as dt
import json
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import click
from jsonschema import validate

from datatools_e2e.config import RunConfig
from datatools_e2e.core.models import TestCase
from datatools_e2e.core.results import CaseResult

from .base import Reporter
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION


class JsonReporter(Reporter):
    """Collects results and writes one validated JSON document at the end.

    Without ``path`` the document is echoed to stdout.
    """

    def __init__(self, path: Optional[str] = None, *, run_stamp: str = "") -> None:
        self._path = Path(path) if path else None
        self._run_stamp = run_stamp
        self._config: Optional[RunConfig] = None
        self._dependencies: Dict[str, List[str]] = {}
        self._start_time = 0.0

    def on_start(self, cases: Sequence[TestCase], config: RunConfig) -> None:
        self._config = config
        self._dependencies = {case.name: list(case.dependencies) for case in cases}
        self._start_time = time.perf_counter()

    def on_complete(self, results: Sequence[CaseResult]) -> None:
        payload = self.build_payload(results)
        validate(instance=payload, schema=JSON_SCHEMA_V1)
        text = json.dumps(payload, indent=2)
        if self._path is None:
            click.echo(text)
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(text, encoding="utf-8")

    def build_payload(self, results: Sequence[CaseResult]) -> Dict[str, Any]:
        config = self._config
        generated_at = dt.datetime.now(dt.timezone.utc).replace(microsecond=0)
        return {
            "schema_version": SCHEMA_VERSION,
            "generated_at": generated_at.isoformat().replace("+00:00", "Z"),
            "run_stamp": self._run_stamp,
            "summary": {
                "total": len(results),
                "passed": _count(results, "passed"),
                "failed": _count(results, "failed"),
                "errors": _count(results, "error"),
                "blocked": _count(results, "blocked"),
                "app_url": config.app_url if config else "",
                "fail_fast": bool(config and config.fail_fast),
                "coverage": bool(config and config.collect_coverage),
                "duration_s": time.perf_counter() - self._start_time,
            },
            "cases": [self._serialize(result) for result in results],
        }

    def _serialize(self, result: CaseResult) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "name": result.name,
            "status": result.status,
            "duration_ms": result.duration_s * 1000,
            "dependencies": self._dependencies.get(result.name, []),
        }
        if result.error:
            entry["error"] = result.error
        if result.screenshot is not None:
            entry["screenshot"] = str(result.screenshot)
        return entry


def _count(results: Sequence[CaseResult], status: str) -> int:
    return sum(1 for result in results if result.status == status)
