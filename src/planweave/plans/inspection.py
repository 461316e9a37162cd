"""
Read-only views of plan progress.
"""

from __future__ import annotations

from typing import Any, Dict

from .models import Plan


def _kind(plan: Plan) -> str:
    if plan.is_leaf:
        return "leaf"
    if plan.is_composite:
        return "composite"
    return "goal"


def _describe_node(plan: Plan) -> Dict[str, Any]:
    node: Dict[str, Any] = {
        "name": plan.name,
        "kind": _kind(plan),
        "description": plan.description,
        "next_step_index": plan.next_step_index,
        "complete": not plan.has_next_step,
    }
    if plan.plugin_name:
        node["plugin_name"] = plan.plugin_name
    if len(plan.parameters) > 1 or plan.parameters.input:
        node["parameters"] = plan.parameters.to_dict()
    if plan.outputs:
        node["outputs"] = list(plan.outputs)
    if plan.steps:
        node["steps"] = [_describe_node(step) for step in plan.steps]
    return node


def describe_plan(plan: Plan) -> Dict[str, Any]:
    """Summarise a plan tree: node kinds, cursors, and the next leaf to run."""
    path = plan.next_step_path()
    next_step = None
    if path is not None:
        target = plan.lineage(path)[-1]
        next_step = {"path": list(path), "name": target.name, "plugin_name": target.plugin_name}
    return {
        "plan": _describe_node(plan),
        "has_next_step": path is not None,
        "next_step": next_step,
        "state": plan.state.to_dict(),
    }
