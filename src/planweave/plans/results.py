"""
Terminal results of plan invocations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

from ..variables import VariableSet
from .models import Plan

T = TypeVar("T")

RESULT_KEY = "PLAN.RESULT"


@dataclass(frozen=True)
class PlanResult:
    plan_name: str
    variables: VariableSet
    value: Any | None = None
    metadata: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def get_value(self, expected_type: Optional[Type[T]] = None) -> Optional[T]:
        """Return the primary value, or None when no function ever ran."""
        if self.value is None:
            return None
        if expected_type is not None and not isinstance(self.value, expected_type):
            raise TypeError(f"Plan result is {type(self.value).__name__}, not {expected_type.__name__}")
        return self.value

    def try_get_metadata_value(self, name: str) -> Tuple[bool, Optional[str]]:
        if name in self.metadata:
            return True, self.metadata[name]
        return False, None


def final_value(plan: Plan) -> str:
    joined = plan.state.get(RESULT_KEY)
    return joined if joined else plan.state.input


def build_plan_result(plan: Plan, overrides: Optional[VariableSet] = None) -> PlanResult:
    value = final_value(plan)
    variables = plan.state.clone()
    if overrides is not None:
        for name, item in overrides.items():
            if item and not variables.has_value(name):
                variables.set(name, item)
    variables.update(value)
    metadata = {name: plan.state[name] for name in plan.outputs if name in plan.state}
    return PlanResult(
        plan_name=plan.name,
        variables=variables,
        value=value,
        metadata=MappingProxyType(metadata),
    )


def build_passthrough_result(plan: Plan, overrides: Optional[VariableSet] = None) -> PlanResult:
    """Result for a plan with no leaves: the caller's variables come back untouched."""
    variables = overrides.clone() if overrides is not None else VariableSet()
    for name, item in plan.state.items():
        if item and not variables.has_value(name):
            variables.set(name, item)
    return PlanResult(plan_name=plan.name, variables=variables, value=None)
