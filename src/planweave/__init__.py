"""
planweave: stepwise execution of hierarchical function plans.
"""

from .version import __version__, PLAN_SCHEMA_VERSION  # noqa: F401
from .errors import (
    FunctionImportError,
    FunctionNotFoundError,
    InvalidPlanError,
    PlanCancelledError,
    PlanSerializationError,
    PlanweaveError,
)
from .functions import (
    CancellationToken,
    FunctionRegistry,
    FunctionResult,
    FunctionView,
    LocalFunction,
    ParameterView,
    PlanFunction,
)
from .plans import Plan, PlanExecutor, PlanResult
from .variables import MAIN_KEY, VariableSet

__all__ = [
    "CancellationToken",
    "FunctionImportError",
    "FunctionNotFoundError",
    "FunctionRegistry",
    "FunctionResult",
    "FunctionView",
    "InvalidPlanError",
    "LocalFunction",
    "MAIN_KEY",
    "ParameterView",
    "Plan",
    "PlanCancelledError",
    "PlanExecutor",
    "PlanFunction",
    "PlanResult",
    "PlanSerializationError",
    "PlanweaveError",
    "VariableSet",
    "__version__",
    "PLAN_SCHEMA_VERSION",
]
