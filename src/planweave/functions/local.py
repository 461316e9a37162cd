"""
Adapter that exposes plain Python callables as plan functions.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Any, Callable, List, Optional

from ..errors import FunctionImportError
from ..variables import MAIN_KEY, VariableSet
from .models import CancellationToken, FunctionResult, FunctionView, ParameterView

logger = logging.getLogger("planweave.functions")

VARIABLES_PARAMETER = "variables"
SETTINGS_PARAMETER = "settings"


def resolve_callable(path: str) -> Callable[..., Any]:
    if "." not in path:
        raise FunctionImportError(f"Function path '{path}' must include module and attribute.", path=path)
    module_name, _, attr = path.rpartition(".")
    try:
        module = importlib.import_module(module_name)
        fn = getattr(module, attr)
    except Exception as exc:
        raise FunctionImportError(f"Failed to import local function '{path}': {exc}", path=path) from exc
    if not callable(fn):
        raise FunctionImportError(f"'{path}' is not callable.", path=path)
    return fn


class LocalFunction:
    """
    Wrap a sync or async Python callable in the plan function contract.

    Arguments are bound by parameter name from the resolved variable set:
    ``input`` gets the running input, ``variables`` gets the whole set and
    ``settings`` gets the request settings. Parameters without a matching
    variable fall back to their declared default, or to an empty string.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        *,
        name: Optional[str] = None,
        plugin_name: str = "",
        description: Optional[str] = None,
    ) -> None:
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "function")
        self.plugin_name = plugin_name
        self.description = description if description is not None else (inspect.getdoc(fn) or "").strip()
        self._signature = inspect.signature(fn)

    @classmethod
    def from_path(cls, path: str, *, name: Optional[str] = None, plugin_name: str = "") -> "LocalFunction":
        fn = resolve_callable(path)
        if not plugin_name:
            plugin_name = path.rpartition(".")[0].rpartition(".")[2]
        return cls(fn, name=name, plugin_name=plugin_name)

    def describe(self) -> FunctionView:
        parameters: List[ParameterView] = []
        for param in self._signature.parameters.values():
            if param.name in (VARIABLES_PARAMETER, SETTINGS_PARAMETER):
                continue
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            default = None if param.default is param.empty else str(param.default)
            parameters.append(ParameterView(name=param.name, default_value=default))
        return FunctionView(
            name=self.name,
            plugin_name=self.plugin_name,
            description=self.description,
            parameters=parameters,
        )

    def _bind_arguments(self, variables: VariableSet, settings: Any) -> dict[str, Any]:
        arguments: dict[str, Any] = {}
        for param in self._signature.parameters.values():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if param.name == VARIABLES_PARAMETER:
                arguments[param.name] = variables
            elif param.name == SETTINGS_PARAMETER:
                arguments[param.name] = settings
            elif param.name == MAIN_KEY:
                arguments[param.name] = variables.input
            elif param.name in variables:
                arguments[param.name] = variables[param.name]
            elif param.default is not param.empty:
                continue
            else:
                arguments[param.name] = ""
        return arguments

    async def invoke(
        self,
        variables: VariableSet,
        settings: Any = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> FunctionResult:
        if cancellation is not None:
            cancellation.raise_if_cancelled()
        arguments = self._bind_arguments(variables, settings)
        logger.debug("Calling local function %s.%s", self.plugin_name, self.name)
        value = self.fn(**arguments)
        if inspect.isawaitable(value):
            value = await value
        if isinstance(value, FunctionResult):
            return value
        returned = variables.clone()
        if value is not None:
            returned.update(value)
        return FunctionResult(
            function_name=self.name,
            plugin_name=self.plugin_name,
            variables=returned,
            value=value,
        )

    def __repr__(self) -> str:
        return f"LocalFunction({self.plugin_name}.{self.name})"
