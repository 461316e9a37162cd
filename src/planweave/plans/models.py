"""
Plan tree model: leaves bound to functions, composites holding ordered steps.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from ..errors import InvalidPlanError
from ..functions.models import FunctionView, ParameterView, PlanFunction
from ..variables import VariableSet

if TYPE_CHECKING:  # pragma: no cover
    from ..functions.models import CancellationToken
    from ..functions.registry import FunctionRegistry
    from .results import PlanResult


def _is_function(value: Any) -> bool:
    return not isinstance(value, (str, Plan)) and callable(getattr(value, "invoke", None)) and hasattr(value, "describe")


class Plan:
    """
    A node of a plan tree.

    ``Plan("goal")`` builds a composite (or, with no steps, a no-op goal node);
    ``Plan(function)`` builds a leaf bound to that function. The cursor
    ``next_step_index`` is only moved by the executor.
    """

    def __init__(
        self,
        goal: str | PlanFunction | None = None,
        *steps: "Plan | PlanFunction",
        name: Optional[str] = None,
        plugin_name: str = "",
    ) -> None:
        self.function: Optional[PlanFunction] = None
        self.steps: List[Plan] = []
        self.parameters = VariableSet()
        self.outputs: List[str] = []
        self.state = VariableSet()
        self.next_step_index = 0
        self.settings: Any = None
        self.description = ""
        self.plugin_name = plugin_name
        self.name = name or f"plan_{uuid.uuid4().hex[:12]}"

        if goal is not None and not isinstance(goal, str):
            if not _is_function(goal):
                raise InvalidPlanError(f"Cannot build a plan step from {type(goal).__name__}.")
            self.set_function(goal, name=name)
        else:
            self.description = goal or ""
        if steps:
            self.add_steps(*steps)

    def set_function(self, function: PlanFunction, *, name: Optional[str] = None) -> None:
        if self.steps:
            raise InvalidPlanError(f"Plan '{self.name}' already has steps and cannot be bound to a function.")
        view = function.describe()
        self.function = function
        self.name = name or view.name or function.name
        self.plugin_name = view.plugin_name or function.plugin_name
        self.description = view.description or ""

    def add_steps(self, *steps: "Plan | PlanFunction") -> None:
        if self.function is not None:
            raise InvalidPlanError(f"Plan '{self.name}' is bound to a function and cannot hold steps.")
        for step in steps:
            if isinstance(step, Plan):
                if step is self:
                    raise InvalidPlanError("A plan cannot be added as its own step.")
                self.steps.append(step)
            elif _is_function(step):
                self.steps.append(Plan(step))
            else:
                raise InvalidPlanError(f"Cannot add {type(step).__name__} as a plan step.")

    def add_outputs(self, *names: str) -> None:
        for output in names:
            if output not in self.outputs:
                self.outputs.append(output)

    @property
    def is_leaf(self) -> bool:
        return self.function is not None and not self.steps

    @property
    def is_composite(self) -> bool:
        return bool(self.steps)

    @property
    def is_complete(self) -> bool:
        return not self.has_next_step

    @property
    def has_next_step(self) -> bool:
        if self.steps:
            return any(step.has_next_step for step in self.steps[self.next_step_index :])
        return self.function is not None and self.next_step_index == 0

    def has_leaves(self) -> bool:
        if self.steps:
            return any(step.has_leaves() for step in self.steps)
        return self.function is not None

    def lineage(self, path: Sequence[int]) -> List["Plan"]:
        """Return the nodes from this plan down to the node addressed by ``path``."""
        nodes = [self]
        node = self
        for index in path:
            node = node.steps[index]
            nodes.append(node)
        return nodes

    def next_step_path(self) -> Optional[Tuple[int, ...]]:
        if self.steps:
            for index in range(self.next_step_index, len(self.steps)):
                sub_path = self.steps[index].next_step_path()
                if sub_path is not None:
                    return (index,) + sub_path
            return None
        if self.function is not None and self.next_step_index == 0:
            return ()
        return None

    def describe(self) -> FunctionView:
        if self.function is not None:
            return self.function.describe()
        return FunctionView(
            name=self.name,
            plugin_name=self.plugin_name,
            description=self.description,
            parameters=[ParameterView(name=key, default_value=value) for key, value in self.parameters.items()],
        )

    async def invoke_async(
        self,
        overrides: Any = None,
        *,
        settings: Any = None,
        cancellation: "CancellationToken | None" = None,
    ) -> "PlanResult":
        from .executor import default_executor

        return await default_executor().invoke_async(self, overrides, settings=settings, cancellation=cancellation)

    def invoke(self, overrides: Any = None, *, settings: Any = None, cancellation: "CancellationToken | None" = None) -> "PlanResult":
        from .executor import default_executor

        return default_executor().invoke(self, overrides, settings=settings, cancellation=cancellation)

    async def step_async(
        self,
        overrides: Any = None,
        *,
        settings: Any = None,
        cancellation: "CancellationToken | None" = None,
    ) -> "Plan":
        from .executor import default_executor

        return await default_executor().step_async(self, overrides, settings=settings, cancellation=cancellation)

    def step(self, overrides: Any = None, *, settings: Any = None, cancellation: "CancellationToken | None" = None) -> "Plan":
        from .executor import default_executor

        return default_executor().step(self, overrides, settings=settings, cancellation=cancellation)

    def to_json(self, indent: Optional[int] = None) -> str:
        from .serialization import plan_to_json

        return plan_to_json(self, indent=indent)

    @classmethod
    def from_json(
        cls,
        text: str,
        registry: "FunctionRegistry | None" = None,
        *,
        require_functions: bool = True,
    ) -> "Plan":
        from .serialization import plan_from_json

        return plan_from_json(text, registry, require_functions=require_functions)

    def __repr__(self) -> str:
        kind = "leaf" if self.is_leaf else ("composite" if self.is_composite else "goal")
        return f"Plan(name={self.name!r}, kind={kind}, steps={len(self.steps)}, next_step_index={self.next_step_index})"
