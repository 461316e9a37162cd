"""
Logging helpers for planweave.
"""

from .logging_utils import env_bool, redact_value, redact_variables

__all__ = ["env_bool", "redact_value", "redact_variables"]
