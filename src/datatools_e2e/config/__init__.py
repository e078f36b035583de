"""Run configuration loading."""

from .loader import load_config
from .models import RunConfig, Timeouts, Timing

__all__ = [
    "RunConfig",
    "Timeouts",
    "Timing",
    "load_config",
]
