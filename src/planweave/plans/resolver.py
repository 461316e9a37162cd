"""
Variable resolution for a single leaf invocation.

Precedence per name, highest first:

1. the leaf's own parameters
2. ancestor parameters, nearest ancestor first
3. the root state (ambient variables, captured outputs, running input)
4. the caller-supplied override set

Empty values are gaps at every layer. Parameter values are expanded against
the root state before they take part in the merge.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional, Sequence

from ..variables import MAIN_KEY, VariableSet
from .models import Plan

_VARIABLE_RE = re.compile(r"\$(\w+)")


def expand_variables(text: str, variables: VariableSet) -> str:
    """
    Replace ``$name`` tokens with values from ``variables``.

    Unknown names keep their token verbatim, so payloads with literal
    ``$identifier`` text pass through. Replacement text is not rescanned.
    """
    if not text or "$" not in text:
        return text

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return variables[name]
        return match.group(0)

    return _VARIABLE_RE.sub(_replace, text)


def _parameter_layers(lineage: Sequence[Plan], state: VariableSet) -> List[Mapping[str, str]]:
    layers: List[Mapping[str, str]] = []
    for node in reversed(lineage):
        layers.append({name: expand_variables(value, state) for name, value in node.parameters.items()})
    return layers


def _fallback_input(lineage: Sequence[Plan]) -> str:
    for node in reversed(lineage[:-1]):
        if node.description:
            return node.description
    return ""


def _merge(resolved: VariableSet, layers: Iterable[Mapping[str, str]]) -> None:
    for layer in layers:
        for name, value in layer.items():
            if value and not resolved.has_value(name):
                resolved.set(name, value)


def resolve_step_variables(
    lineage: Sequence[Plan],
    state: VariableSet,
    overrides: Optional[VariableSet] = None,
) -> VariableSet:
    """Build the variable set a leaf at the end of ``lineage`` is invoked with."""
    resolved = VariableSet()
    parameter_layers = _parameter_layers(lineage, state)
    layers: List[Mapping[str, str]] = list(parameter_layers)
    layers.append(state.to_dict())
    if overrides is not None:
        layers.append(overrides.to_dict())
    _merge(resolved, layers)

    # Declared parameters stay visible to the function even when unresolved.
    for layer in parameter_layers:
        for name in layer:
            if name not in resolved:
                resolved.set(name, "")

    if not resolved.input:
        resolved.update(_fallback_input(lineage))
    return resolved


def scope_overrides(overrides: Optional[VariableSet], depth: int) -> Optional[VariableSet]:
    """
    Limit an override set to what a leaf at ``depth`` may see.

    The root (depth 0) and its direct children (depth 1) see every override;
    deeper leaves only receive the override's running input.
    """
    if overrides is None or depth <= 1:
        return overrides
    return VariableSet(overrides.get(MAIN_KEY))
