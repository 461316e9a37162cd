"""
Runtime configuration for plan execution.
"""

from .config import PlanRuntimeConfig, get_runtime_config, normalize_step_logging, unescape_separator

__all__ = ["PlanRuntimeConfig", "get_runtime_config", "normalize_step_logging", "unescape_separator"]
