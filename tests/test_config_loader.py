from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from datatools_e2e.config import Timeouts, Timing, load_config


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "env.yml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_minimal_config_uses_defaults(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        username: e2e@example.com
        password: hunter2
        """,
    )
    config = load_config(str(path), environ={})

    assert config.username == "e2e@example.com"
    assert config.app_url == "http://localhost:9966"
    assert config.otp_root == "http://localhost:8080/otp/routers/"
    assert config.fail_fast is False
    assert config.collect_coverage is False
    assert config.headless is True
    assert config.no_sandbox is False
    assert config.non_essential is True
    assert config.artifacts_dir == tmp_path.resolve()
    assert config.gtfs_upload_file == tmp_path.resolve() / "configurations/end-to-end/test-gtfs-to-upload.zip"
    assert config.timeouts == Timeouts()
    assert config.timing == Timing()
    assert "hunter2" not in repr(config)


def test_full_config_and_relative_paths(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        username: e2e@example.com
        password: hunter2
        app_url: http://datatools.test
        otp_root: http://otp.test/otp/routers
        gtfs_upload_file: fixtures/feed.zip
        artifacts_dir: out
        fail_fast: true
        non_essential: false
        timeouts:
          test_s: 50
          job_s: 200
        timing:
          save_delay_ms: 0
        """,
    )
    config = load_config(str(path), environ={})

    assert config.url("/project") == "http://datatools.test/project"
    assert config.otp_root == "http://otp.test/otp/routers/"
    assert config.gtfs_upload_file == tmp_path.resolve() / "fixtures" / "feed.zip"
    assert config.artifacts_dir == tmp_path.resolve() / "out"
    assert config.fail_fast is True
    assert config.non_essential is False
    assert config.timeouts == Timeouts(test_s=50.0, job_s=200.0)
    assert config.timing.save_delay_ms == 0
    assert config.timing.selector_delay_ms == 100


def test_environment_switches(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        username: e2e@example.com
        password: hunter2
        headless: false
        """,
    )
    config = load_config(str(path), environ={"CI": "true", "COLLECT_COVERAGE": "1"})

    assert config.headless is True
    assert config.no_sandbox is True
    assert config.collect_coverage is True

    config = load_config(str(path), environ={"CI": "false"})
    assert config.headless is False
    assert config.no_sandbox is False


def test_schema_missing_credentials(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        username: e2e@example.com
        """,
    )
    with pytest.raises(ValueError) as exc:
        load_config(str(path), environ={})
    assert "Config schema validation failed" in str(exc.value)
    assert "password" in str(exc.value)


def test_schema_rejects_unknown_timeout_and_bad_types(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        username: e2e@example.com
        password: hunter2
        fail_fast: "yes"
        timeouts:
          test_ms: 5
        """,
    )
    with pytest.raises(ValueError) as exc:
        load_config(str(path), environ={})
    message = str(exc.value)
    assert "fail_fast" in message
    assert "timeouts" in message


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    path = _write(tmp_path, "- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(str(path), environ={})
