"""
Registry of functions that plan leaves can be bound to.
"""

from __future__ import annotations

import importlib
import inspect
from types import ModuleType
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import FunctionImportError, FunctionNotFoundError
from .local import LocalFunction
from .models import PlanFunction


def _key(plugin_name: str, name: str) -> Tuple[str, str]:
    return (plugin_name or "", name)


class FunctionRegistry:
    def __init__(self) -> None:
        self._functions: Dict[Tuple[str, str], PlanFunction] = {}

    def register(self, function: PlanFunction) -> PlanFunction:
        self._functions[_key(function.plugin_name, function.name)] = function
        return function

    def register_local(
        self,
        fn: Callable[..., Any],
        *,
        name: Optional[str] = None,
        plugin_name: str = "",
        description: Optional[str] = None,
    ) -> LocalFunction:
        function = LocalFunction(fn, name=name, plugin_name=plugin_name, description=description)
        self.register(function)
        return function

    def register_module(self, module: ModuleType | str, plugin_name: Optional[str] = None) -> List[LocalFunction]:
        """
        Register every public function defined in a module.

        The plugin name defaults to the last segment of the module name.
        """
        if isinstance(module, str):
            try:
                module = importlib.import_module(module)
            except Exception as exc:
                raise FunctionImportError(f"Failed to import function module '{module}': {exc}", path=module) from exc
        plugin = plugin_name if plugin_name is not None else module.__name__.rpartition(".")[2]
        registered: List[LocalFunction] = []
        for attr, value in vars(module).items():
            if attr.startswith("_") or not inspect.isfunction(value):
                continue
            if value.__module__ != module.__name__:
                continue
            registered.append(self.register_local(value, plugin_name=plugin))
        return registered

    def get(self, plugin_name: str, name: str) -> Optional[PlanFunction]:
        return self._functions.get(_key(plugin_name, name))

    def get_qualified(self, qualified_name: str) -> Optional[PlanFunction]:
        plugin_name, _, name = qualified_name.rpartition(".")
        return self.get(plugin_name, name)

    def resolve(self, plugin_name: str, name: str) -> PlanFunction:
        function = self.get(plugin_name, name)
        if function is None:
            label = f"{plugin_name}.{name}" if plugin_name else name
            raise FunctionNotFoundError(
                f"Function '{label}' is not registered.",
                plugin_name=plugin_name,
                function_name=name,
            )
        return function

    @property
    def functions(self) -> Dict[Tuple[str, str], PlanFunction]:
        """Expose registered functions for inspection/testing."""
        return self._functions

    def list_names(self) -> List[str]:
        return [f"{plugin}.{name}" if plugin else name for plugin, name in self._functions]

    def unregister(self, plugin_name: str, name: str) -> None:
        self._functions.pop(_key(plugin_name, name), None)
