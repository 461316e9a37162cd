"""
Configuration models for the plan runtime.
"""

from dataclasses import dataclass
import os
import re

from ..observability.logging_utils import env_bool

_STEP_LOGGING_LEVELS = {"debug", "info", "quiet"}

_SEPARATOR_ESCAPES = {"\\n": "\n", "\\t": "\t", "\\r": "\r", "\\\\": "\\"}
_SEPARATOR_ESCAPE_RE = re.compile(r"\\[ntr\\]")


def normalize_step_logging(value: str | None) -> str:
    if not value:
        return "info"
    lowered = str(value).strip().lower()
    return lowered if lowered in _STEP_LOGGING_LEVELS else "info"


def unescape_separator(value: str) -> str:
    """Turn ``\\n``, ``\\t``, ``\\r`` and ``\\\\`` into their characters; leave everything else as typed."""
    return _SEPARATOR_ESCAPE_RE.sub(lambda match: _SEPARATOR_ESCAPES[match.group(0)], value)


@dataclass
class PlanRuntimeConfig:
    """Knobs for how step results are recorded and reported."""

    trim_results: bool = True
    result_separator: str = "\n"
    step_logging: str = "info"


def get_runtime_config() -> PlanRuntimeConfig:
    """
    Resolve the runtime configuration from the environment.
    """
    separator = os.getenv("PLANWEAVE_RESULT_SEPARATOR")
    return PlanRuntimeConfig(
        trim_results=env_bool("PLANWEAVE_TRIM_RESULTS", True),
        result_separator=unescape_separator(separator) if separator else "\n",
        step_logging=normalize_step_logging(os.getenv("PLANWEAVE_STEP_LOGGING")),
    )
