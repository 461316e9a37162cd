"""
Plan trees and their stepwise executor.
"""

from .executor import PlanExecutor, default_executor
from .inspection import describe_plan
from .models import Plan
from .observability import clear_step_interceptors, register_after_step, register_before_step
from .resolver import expand_variables, resolve_step_variables
from .results import RESULT_KEY, PlanResult
from .serialization import UnboundFunction, plan_from_json, plan_to_json

__all__ = [
    "Plan",
    "PlanExecutor",
    "PlanResult",
    "RESULT_KEY",
    "UnboundFunction",
    "clear_step_interceptors",
    "default_executor",
    "describe_plan",
    "expand_variables",
    "plan_from_json",
    "plan_to_json",
    "register_after_step",
    "register_before_step",
    "resolve_step_variables",
]
