"""Data models for run configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Timeouts:
    test_s: float = 100.0
    job_s: float = 100.0
    deployment_extra_s: float = 30.0
    setup_s: float = 120.0


@dataclass(frozen=True)
class Timing:
    """Fixed delays used to let the UI settle between steps."""

    selector_delay_ms: int = 100
    settle_delay_ms: int = 1000
    job_mount_delay_ms: int = 500
    save_delay_ms: int = 2000


@dataclass(frozen=True)
class RunConfig:
    username: str
    password: str = field(repr=False)
    app_url: str = "http://localhost:9966"
    otp_root: str = "http://localhost:8080/otp/routers/"
    coverage_url: str = "http://localhost:9999/coverage/client"
    gtfs_upload_file: Path = Path("configurations/end-to-end/test-gtfs-to-upload.zip")
    gtfs_fetch_url: str = (
        "https://github.com/catalogueglobal/datatools-ui/raw/dev/"
        "configurations/end-to-end/test-gtfs-to-fetch.zip"
    )
    fail_fast: bool = False
    collect_coverage: bool = False
    headless: bool = True
    no_sandbox: bool = False
    non_essential: bool = True
    artifacts_dir: Path = Path(".")
    timeouts: Timeouts = field(default_factory=Timeouts)
    timing: Timing = field(default_factory=Timing)

    def url(self, path: str = "") -> str:
        return self.app_url.rstrip("/") + path
