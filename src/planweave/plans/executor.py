"""
Depth-first stepwise execution of plan trees.

``step`` runs exactly one leaf and advances its parent's cursor; ``invoke``
loops ``step`` until no leaf remains and builds a ``PlanResult``. Function
failures propagate unchanged and leave the tree exactly as it was before the
failing call, so a later ``step``/``invoke`` retries the same leaf.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Sequence, Set, Tuple

from ..functions.models import CancellationToken, FunctionResult
from ..runtime.config import PlanRuntimeConfig, get_runtime_config
from ..variables import MAIN_KEY, VariableSet
from .models import Plan
from .observability import after_step, before_step, step_failed
from .resolver import resolve_step_variables, scope_overrides
from .results import RESULT_KEY, PlanResult, build_passthrough_result, build_plan_result, final_value

logger = logging.getLogger("planweave.plans")

__all__ = ["PlanExecutor", "default_executor"]


class PlanExecutor:
    def __init__(self, config: Optional[PlanRuntimeConfig] = None) -> None:
        self._config = config

    @property
    def config(self) -> PlanRuntimeConfig:
        """The fixed config, or one read from the environment on each access."""
        return self._config if self._config is not None else get_runtime_config()

    def has_next_step(self, plan: Plan) -> bool:
        return plan.has_next_step

    def next_step_path(self, plan: Plan) -> Optional[Tuple[int, ...]]:
        return plan.next_step_path()

    def step(
        self,
        plan: Plan,
        overrides: Any = None,
        *,
        settings: Any = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> Plan:
        return asyncio.run(self.step_async(plan, overrides, settings=settings, cancellation=cancellation))

    async def step_async(
        self,
        plan: Plan,
        overrides: Any = None,
        *,
        settings: Any = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> Plan:
        path = plan.next_step_path()
        if path is None:
            logger.debug("Plan %s has no remaining steps", plan.name)
            return plan

        lineage = plan.lineage(path)
        target = lineage[-1]
        scoped = scope_overrides(VariableSet.coerce(overrides) if overrides is not None else None, len(path))
        variables = resolve_step_variables(lineage, plan.state, scoped)
        step_settings = settings if settings is not None else target.settings
        config = self.config

        before_step(target, variables, path=path, step_logging=config.step_logging)
        try:
            result = await target.function.invoke(variables, step_settings, cancellation)
        except Exception as exc:
            step_failed(target, exc, path=path)
            raise

        value = self._result_text(result, config)
        self._commit(lineage, path, value, self._returned_outputs(target, variables, result), config)
        after_step(target, value, path=path, step_logging=config.step_logging)
        return plan

    def invoke(
        self,
        plan: Plan,
        overrides: Any = None,
        *,
        settings: Any = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> PlanResult:
        return asyncio.run(self.invoke_async(plan, overrides, settings=settings, cancellation=cancellation))

    async def invoke_async(
        self,
        plan: Plan,
        overrides: Any = None,
        *,
        settings: Any = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> PlanResult:
        variables = VariableSet.coerce(overrides) if overrides is not None else None
        if not plan.has_leaves():
            return build_passthrough_result(plan, variables)
        while plan.has_next_step:
            await self.step_async(plan, variables, settings=settings, cancellation=cancellation)
        return build_plan_result(plan, variables)

    def _result_text(self, result: FunctionResult, config: PlanRuntimeConfig) -> str:
        value = result.value if result.value is not None else result.variables.input
        text = "" if value is None else str(value)
        return text.strip() if config.trim_results else text

    @staticmethod
    def _returned_outputs(target: Plan, sent: VariableSet, result: FunctionResult) -> Dict[str, str]:
        """Outputs the function set explicitly in its returned variables."""
        returned: Dict[str, str] = {}
        for name in target.outputs:
            if name.lower() == MAIN_KEY or not result.variables.has_value(name):
                continue
            if result.variables.get(name) != sent.get(name):
                returned[name] = result.variables[name]
        return returned

    def _commit(
        self,
        lineage: Sequence[Plan],
        path: Tuple[int, ...],
        value: str,
        returned: Dict[str, str],
        config: PlanRuntimeConfig,
    ) -> None:
        root = lineage[0]
        target = lineage[-1]
        root.state.update(value)
        self._capture_outputs(root, target, value, returned, config)
        target.next_step_index = 1
        if len(lineage) == 1:
            return
        # only the immediate parent's cursor moves; ancestors see completion through has_next_step
        parent = lineage[-2]
        parent.next_step_index = max(parent.next_step_index, path[-1] + 1)
        for node in reversed(lineage[1:-1]):
            if node.has_next_step:
                return
            self._capture_outputs(root, node, value, {}, config)
        if not root.has_next_step:
            self._capture_root_outputs(root)

    def _capture_outputs(
        self,
        root: Plan,
        node: Plan,
        value: str,
        returned: Dict[str, str],
        config: PlanRuntimeConfig,
    ) -> None:
        if not node.outputs:
            return
        if node is not root and any(name in root.outputs for name in node.outputs):
            joined = root.state.get(RESULT_KEY)
            root.state.set(RESULT_KEY, f"{joined}{config.result_separator}{value}" if joined else value)
        for name in node.outputs:
            root.state.set(name, returned.get(name, value))

    @staticmethod
    def _capture_root_outputs(root: Plan) -> None:
        """Record the final value under root outputs that no step declares."""
        declared = _declared_outputs(root.steps)
        value = final_value(root)
        for name in root.outputs:
            if name not in declared:
                root.state.set(name, value)


def _declared_outputs(steps: Sequence[Plan]) -> Set[str]:
    names: Set[str] = set()
    for step in steps:
        names.update(step.outputs)
        names.update(_declared_outputs(step.steps))
    return names


_default_executor: Optional[PlanExecutor] = None


def default_executor() -> PlanExecutor:
    global _default_executor
    if _default_executor is None:
        _default_executor = PlanExecutor()
    return _default_executor
