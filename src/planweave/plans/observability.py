"""
Lightweight step observability hooks and logging helpers.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List

from ..observability.logging_utils import redact_value, redact_variables
from ..runtime.config import normalize_step_logging
from ..variables import VariableSet

logger = logging.getLogger("planweave.plans")

StepInterceptor = Callable[[Any, dict[str, Any]], None]

_before_interceptors: List[StepInterceptor] = []
_after_interceptors: List[StepInterceptor] = []


def register_before_step(func: StepInterceptor) -> None:
    _before_interceptors.append(func)


def register_after_step(func: StepInterceptor) -> None:
    _after_interceptors.append(func)


def clear_step_interceptors() -> None:
    _before_interceptors.clear()
    _after_interceptors.clear()


def _run_interceptors(interceptors: List[StepInterceptor], step: Any, payload: dict[str, Any]) -> None:
    for func in list(interceptors):
        try:
            func(step, payload)
        except Exception:  # pragma: no cover - interceptors never break a run
            logger.debug("Step interceptor raised", exc_info=True)


def before_step(step: Any, variables: VariableSet, *, path: tuple[int, ...], step_logging: str = "info") -> None:
    level = normalize_step_logging(step_logging)
    name = f"{step.plugin_name}.{step.name}" if step.plugin_name else step.name
    if level in ("debug", "info"):
        logger.debug("Step %s at %s variables=%s", name, list(path), redact_variables(variables))
    _run_interceptors(_before_interceptors, step, {"path": path, "variables": variables})


def after_step(step: Any, value: str, *, path: tuple[int, ...], step_logging: str = "info") -> None:
    level = normalize_step_logging(step_logging)
    name = f"{step.plugin_name}.{step.name}" if step.plugin_name else step.name
    if level == "debug":
        logger.debug("Step %s completed result=%s", name, redact_value("result", value))
    elif level == "info":
        logger.info("Step %s completed", name)
    _run_interceptors(_after_interceptors, step, {"path": path, "value": value})


def step_failed(step: Any, error: BaseException, *, path: tuple[int, ...]) -> None:
    # failures are reported at every step logging level
    name = f"{step.plugin_name}.{step.name}" if step.plugin_name else step.name
    logger.warning("Step %s failed at %s: %s", name, list(path), error)
