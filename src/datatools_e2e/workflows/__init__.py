"""End-to-end workflow scripts and suite assembly."""
from __future__ import annotations

import importlib
import logging
import os

from datatools_e2e.config import RunConfig
from datatools_e2e.core.suite import Suite

from . import deployment, editor, feeds, projects
from .deployment import ping_trip_planner
from .steps import cleanup_test_project

__all__ = [
    "PLUGINS_ENV",
    "build_suite",
    "cleanup_test_project",
    "ping_trip_planner",
]

PLUGINS_ENV = "DATATOOLS_E2E_PLUGINS"

logger = logging.getLogger(__name__)

# Registration order is execution order.
_REGISTRATIONS = (projects, feeds, editor, deployment)


def build_suite(config: RunConfig, *, environ=None) -> Suite:
    """Register every workflow, then any plugin workflows, into a new suite."""

    suite = Suite(default_timeout_s=config.timeouts.test_s)
    for module in _REGISTRATIONS:
        module.register(suite, config)
    _load_plugins(suite, config, os.environ if environ is None else environ)
    return suite


def _load_plugins(suite: Suite, config: RunConfig, environ) -> None:
    plugin_env = environ.get(PLUGINS_ENV)
    if not plugin_env:
        return
    for item in plugin_env.split(","):
        module_name = item.strip()
        if not module_name:
            continue
        module = importlib.import_module(module_name)
        register = getattr(module, "register", None)
        if callable(register):
            logger.info("registering plugin workflows from %s", module_name)
            register(suite, config)
