"""Run log and browser-event log setup."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

ROOT_LOGGER = "datatools_e2e"
BROWSER_LOGGER = "datatools_e2e.browser"

_FORMAT = "%(asctime)s %(levelname)-7s %(message)s"
_HANDLER_TAG = "_datatools_e2e_handler"


def log_paths(artifacts_dir: Path, run_stamp: str) -> Tuple[Path, Path]:
    return (
        artifacts_dir / f"e2e-run-{run_stamp}.log",
        artifacts_dir / f"e2e-run-{run_stamp}-browser-events.log",
    )


def configure_logging(artifacts_dir: Path, run_stamp: str, *, verbose: bool = False) -> Tuple[Path, Path]:
    """Attach the run log and browser-event log file handlers (idempotent).

    Browser events go only to their own file; everything else under the
    ``datatools_e2e`` logger lands in the run log, and on stderr with
    ``verbose``.
    """
    run_log, browser_log = log_paths(artifacts_dir, run_stamp)
    artifacts_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger(ROOT_LOGGER)
    browser = logging.getLogger(BROWSER_LOGGER)
    _reset(root)
    _reset(browser)

    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.addHandler(_tagged(logging.FileHandler(run_log, encoding="utf-8")))
    if verbose:
        root.addHandler(_tagged(logging.StreamHandler()))

    browser.setLevel(logging.INFO)
    browser.propagate = False
    browser.addHandler(_tagged(logging.FileHandler(browser_log, encoding="utf-8")))
    return run_log, browser_log


def shutdown_logging() -> None:
    for name in (ROOT_LOGGER, BROWSER_LOGGER):
        _reset(logging.getLogger(name))


def _tagged(handler: logging.Handler, fmt: Optional[str] = None) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt or _FORMAT))
    setattr(handler, _HANDLER_TAG, True)
    return handler


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()
