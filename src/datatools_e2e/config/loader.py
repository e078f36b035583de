"""YAML loader and validation for run configuration files."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from .models import RunConfig, Timeouts, Timing

_TRUTHY = {"1", "true", "yes", "on"}


def load_config(path: str, *, environ: Optional[Mapping[str, str]] = None) -> RunConfig:
    """Load and validate a run configuration file.

    Relative paths inside the file resolve against the file's directory. The
    ``CI`` and ``COLLECT_COVERAGE`` environment variables switch on headless
    sandbox-less browsing and coverage collection respectively.
    """
    config_path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError("Config file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ValueError(f"Config schema validation failed: {messages}")
    env = os.environ if environ is None else environ
    base = config_path.parent
    defaults = RunConfig(username="", password="")
    is_ci = _env_flag(env, "CI")
    return RunConfig(
        username=_require_str(raw, "username"),
        password=_require_str(raw, "password"),
        app_url=str(raw.get("app_url", defaults.app_url)),
        otp_root=_with_trailing_slash(str(raw.get("otp_root", defaults.otp_root))),
        coverage_url=str(raw.get("coverage_url", defaults.coverage_url)),
        gtfs_upload_file=_resolve_path(raw.get("gtfs_upload_file"), base, defaults.gtfs_upload_file),
        gtfs_fetch_url=str(raw.get("gtfs_fetch_url", defaults.gtfs_fetch_url)),
        fail_fast=bool(raw.get("fail_fast", defaults.fail_fast)),
        collect_coverage=bool(raw.get("collect_coverage", False)) or _env_flag(env, "COLLECT_COVERAGE"),
        headless=bool(raw.get("headless", defaults.headless)) or is_ci,
        no_sandbox=bool(raw.get("no_sandbox", False)) or is_ci,
        non_essential=bool(raw.get("non_essential", defaults.non_essential)),
        artifacts_dir=_resolve_path(raw.get("artifacts_dir"), base, base),
        timeouts=_parse_timeouts(raw.get("timeouts")),
        timing=_parse_timing(raw.get("timing")),
    )


def _require_str(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Missing required string field '{key}'")
    text = value.strip()
    if not text:
        raise ValueError(f"Field '{key}' cannot be empty")
    return text


def _resolve_path(raw: Any, base: Path, default: Path) -> Path:
    path = Path(raw) if raw else default
    if not path.is_absolute():
        path = base / path
    return path


def _with_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


def _parse_timeouts(raw: Any) -> Timeouts:
    if not raw:
        return Timeouts()
    defaults = Timeouts()
    return Timeouts(
        test_s=float(raw.get("test_s", defaults.test_s)),
        job_s=float(raw.get("job_s", defaults.job_s)),
        deployment_extra_s=float(raw.get("deployment_extra_s", defaults.deployment_extra_s)),
        setup_s=float(raw.get("setup_s", defaults.setup_s)),
    )


def _parse_timing(raw: Any) -> Timing:
    if not raw:
        return Timing()
    defaults = Timing()
    return Timing(
        selector_delay_ms=int(raw.get("selector_delay_ms", defaults.selector_delay_ms)),
        settle_delay_ms=int(raw.get("settle_delay_ms", defaults.settle_delay_ms)),
        job_mount_delay_ms=int(raw.get("job_mount_delay_ms", defaults.job_mount_delay_ms)),
        save_delay_ms=int(raw.get("save_delay_ms", defaults.save_delay_ms)),
    )


def _env_flag(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, "").strip().lower() in _TRUTHY


_NUMBER = {"type": "number", "minimum": 0}

CONFIG_SCHEMA = {
    "type": "object",
    "required": ["username", "password"],
    "properties": {
        "username": {"type": "string", "minLength": 1},
        "password": {"type": "string", "minLength": 1},
        "app_url": {"type": "string", "minLength": 1},
        "otp_root": {"type": "string", "minLength": 1},
        "coverage_url": {"type": "string", "minLength": 1},
        "gtfs_upload_file": {"type": "string"},
        "gtfs_fetch_url": {"type": "string"},
        "fail_fast": {"type": "boolean"},
        "collect_coverage": {"type": "boolean"},
        "headless": {"type": "boolean"},
        "no_sandbox": {"type": "boolean"},
        "non_essential": {"type": "boolean"},
        "artifacts_dir": {"type": "string"},
        "timeouts": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "test_s": _NUMBER,
                "job_s": _NUMBER,
                "deployment_extra_s": _NUMBER,
                "setup_s": _NUMBER,
            },
        },
        "timing": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "selector_delay_ms": {"type": "integer", "minimum": 0},
                "settle_delay_ms": {"type": "integer", "minimum": 0},
                "job_mount_delay_ms": {"type": "integer", "minimum": 0},
                "save_delay_ms": {"type": "integer", "minimum": 0},
            },
        },
    },
}
_validator = Draft7Validator(CONFIG_SCHEMA)
