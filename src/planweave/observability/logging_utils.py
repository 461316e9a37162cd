from __future__ import annotations

import os
from typing import Any, Dict, Mapping

_SENSITIVE_KEYS = {"email", "phone", "authorization", "access_token", "api_key", "password", "secret", "token"}
_MAX_LOGGED_CHARS = 200


def env_bool(name: str, default: bool = True) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def redact_value(key: str, value: Any) -> Any:
    if key.lower() in _SENSITIVE_KEYS:
        return "[REDACTED]"
    if isinstance(value, str) and len(value) > _MAX_LOGGED_CHARS:
        return value[:_MAX_LOGGED_CHARS] + "..."
    return value


def redact_variables(variables: Mapping[str, Any] | Any) -> Dict[str, Any]:
    """
    Prepare a variable mapping for logging.

    Sensitive keys are masked and long values truncated unless
    PLANWEAVE_LOG_REDACT is switched off.
    """

    items = variables.items() if hasattr(variables, "items") else []
    if not env_bool("PLANWEAVE_LOG_REDACT", True):
        return dict(items)
    return {key: redact_value(key, value) for key, value in items}
