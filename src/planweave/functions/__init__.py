"""
Function contract and registry for plan leaves.
"""

from .local import LocalFunction, resolve_callable
from .models import CancellationToken, FunctionResult, FunctionView, ParameterView, PlanFunction
from .registry import FunctionRegistry

__all__ = [
    "CancellationToken",
    "FunctionRegistry",
    "FunctionResult",
    "FunctionView",
    "LocalFunction",
    "ParameterView",
    "PlanFunction",
    "resolve_callable",
]
