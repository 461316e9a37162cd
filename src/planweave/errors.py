"""
Custom error types for planweave.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class PlanweaveError(Exception):
    """Base error carrying a stable code and diagnostics payload."""

    message: str
    code: str = "PW-000"
    diagnostics: list[dict[str, Any]] | None = None

    def __post_init__(self) -> None:
        if self.diagnostics is None:
            self.diagnostics = [{"code": self.code, "message": self.message, "severity": "error"}]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass
class InvalidPlanError(PlanweaveError):
    """Raised when a plan tree is built in a way that breaks the leaf/composite split."""

    code: str = "PW-001"


@dataclass
class FunctionNotFoundError(PlanweaveError):
    """Raised when a plan references a function the registry does not know."""

    plugin_name: Optional[str] = None
    function_name: Optional[str] = None
    code: str = "PW-101"


@dataclass
class FunctionImportError(PlanweaveError):
    """Raised when a local function path cannot be imported."""

    path: Optional[str] = None
    code: str = "PW-102"


@dataclass
class PlanSerializationError(PlanweaveError):
    """Raised when a persisted plan cannot be read back."""

    code: str = "PW-201"


@dataclass
class PlanCancelledError(PlanweaveError):
    """Raised by functions that honour a cancellation request."""

    code: str = "PW-301"
