"""
Callable contract shared by plan leaves and the function registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Type, TypeVar, runtime_checkable

from ..errors import PlanCancelledError
from ..variables import VariableSet

T = TypeVar("T")


@dataclass
class ParameterView:
    name: str
    description: str = ""
    default_value: Optional[str] = None


@dataclass
class FunctionView:
    """Static descriptor of a function, used for introspection only."""

    name: str
    plugin_name: str = ""
    description: str = ""
    parameters: List[ParameterView] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.plugin_name}.{self.name}" if self.plugin_name else self.name


@dataclass
class FunctionResult:
    function_name: str
    plugin_name: str
    variables: VariableSet
    value: Any | None = None

    def get_value(self, expected_type: Optional[Type[T]] = None) -> Optional[T]:
        if self.value is None:
            return None
        if expected_type is not None and not isinstance(self.value, expected_type):
            raise TypeError(
                f"Result of {self.plugin_name}.{self.function_name} is {type(self.value).__name__}, "
                f"not {expected_type.__name__}"
            )
        return self.value


class CancellationToken:
    """Advisory cancellation flag handed through to functions."""

    def __init__(self) -> None:
        self._cancelled = False
        self.reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        self._cancelled = True
        self.reason = reason

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise PlanCancelledError(self.reason or "Operation was cancelled.")


@runtime_checkable
class PlanFunction(Protocol):
    name: str
    plugin_name: str

    def describe(self) -> FunctionView:
        ...

    async def invoke(
        self,
        variables: VariableSet,
        settings: Any = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> FunctionResult:
        ...
