"""
JSON persistence for plan trees.

Leaves are stored as references (plugin name + function name) and rebound
through a ``FunctionRegistry`` when read back. Cursor positions, state,
parameters and outputs round-trip exactly, so a partially executed plan can be
saved between steps and resumed later.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import FunctionNotFoundError, PlanSerializationError
from ..functions.models import FunctionResult, FunctionView
from ..functions.registry import FunctionRegistry
from ..variables import VariableSet
from ..version import PLAN_SCHEMA_VERSION
from .models import Plan


class FunctionReference(BaseModel):
    plugin_name: str = ""
    name: str


class SerializedPlan(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    plugin_name: str = ""
    description: str = ""
    function: Optional[FunctionReference] = None
    parameters: Dict[str, str] = Field(default_factory=dict)
    outputs: List[str] = Field(default_factory=list)
    state: Dict[str, str] = Field(default_factory=dict)
    next_step_index: int = Field(default=0, ge=0)
    steps: List["SerializedPlan"] = Field(default_factory=list)


SerializedPlan.model_rebuild()


class PlanDocument(BaseModel):
    schema_version: str = PLAN_SCHEMA_VERSION
    plan: SerializedPlan


class UnboundFunction:
    """Stands in for a stored function reference with no registered implementation."""

    def __init__(self, plugin_name: str, name: str, description: str = "") -> None:
        self.plugin_name = plugin_name
        self.name = name
        self.description = description

    @property
    def qualified_name(self) -> str:
        return f"{self.plugin_name}.{self.name}" if self.plugin_name else self.name

    def describe(self) -> FunctionView:
        return FunctionView(name=self.name, plugin_name=self.plugin_name, description=self.description)

    async def invoke(self, variables: VariableSet, settings: Any = None, cancellation: Any = None) -> FunctionResult:
        raise FunctionNotFoundError(
            f"Function '{self.qualified_name}' is not registered.",
            plugin_name=self.plugin_name,
            function_name=self.name,
        )


def _dump(plan: Plan) -> SerializedPlan:
    function = None
    if plan.function is not None:
        function = FunctionReference(plugin_name=plan.function.plugin_name, name=plan.function.name)
    return SerializedPlan(
        name=plan.name,
        plugin_name=plan.plugin_name,
        description=plan.description,
        function=function,
        parameters=plan.parameters.to_dict(),
        outputs=list(plan.outputs),
        state=plan.state.to_dict(),
        next_step_index=plan.next_step_index,
        steps=[_dump(step) for step in plan.steps],
    )


def _load(model: SerializedPlan, registry: Optional[FunctionRegistry], require_functions: bool) -> Plan:
    if model.function is not None and model.steps:
        raise PlanSerializationError(f"Plan '{model.name}' cannot have both a function and steps.")
    plan = Plan(model.description, name=model.name, plugin_name=model.plugin_name)
    if model.function is not None:
        ref = model.function
        function = registry.get(ref.plugin_name, ref.name) if registry is not None else None
        if function is None:
            if require_functions:
                label = f"{ref.plugin_name}.{ref.name}" if ref.plugin_name else ref.name
                raise FunctionNotFoundError(
                    f"Function '{label}' required by plan step '{model.name}' is not registered.",
                    plugin_name=ref.plugin_name,
                    function_name=ref.name,
                )
            function = UnboundFunction(ref.plugin_name, ref.name, model.description)
        plan.set_function(function, name=model.name)
        plan.plugin_name = model.plugin_name
        plan.description = model.description
    for key, value in model.parameters.items():
        plan.parameters.set(key, value)
    for key, value in model.state.items():
        plan.state.set(key, value)
    plan.outputs = list(model.outputs)
    plan.steps = [_load(step, registry, require_functions) for step in model.steps]
    plan.next_step_index = model.next_step_index
    return plan


def plan_to_json(plan: Plan, indent: Optional[int] = None) -> str:
    return PlanDocument(plan=_dump(plan)).model_dump_json(indent=indent)


def plan_from_json(
    text: str,
    registry: Optional[FunctionRegistry] = None,
    *,
    require_functions: bool = True,
) -> Plan:
    try:
        document = PlanDocument.model_validate_json(text)
    except ValidationError as exc:
        raise PlanSerializationError(f"Invalid plan document: {exc.error_count()} validation error(s).") from exc
    return _load(document.plan, registry, require_functions)
