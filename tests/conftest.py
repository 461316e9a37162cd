from typing import Any, Callable, List, Optional

import pytest

from planweave import FunctionResult, FunctionView, ParameterView, VariableSet
from planweave.plans.observability import clear_step_interceptors


class RecordingFunction:
    """Plan function double that records every variable set it is invoked with."""

    def __init__(
        self,
        name: str,
        callback: Callable[[VariableSet], Any],
        plugin_name: str = "pluginName",
        parameters: Optional[List[str]] = None,
    ) -> None:
        self.name = name
        self.plugin_name = plugin_name
        self.callback = callback
        self.parameters = parameters or []
        self.calls: List[VariableSet] = []
        self.settings_seen: List[Any] = []
        self.tokens_seen: List[Any] = []

    def describe(self) -> FunctionView:
        return FunctionView(
            name=self.name,
            plugin_name=self.plugin_name,
            parameters=[ParameterView(name=p) for p in self.parameters],
        )

    async def invoke(self, variables, settings=None, cancellation=None):
        self.calls.append(variables.clone())
        self.settings_seen.append(settings)
        self.tokens_seen.append(cancellation)
        value = self.callback(variables)
        return FunctionResult(self.name, self.plugin_name, VariableSet(value), value)

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture(autouse=True)
def _clean_interceptors():
    clear_step_interceptors()
    yield
    clear_step_interceptors()


@pytest.fixture(autouse=True)
def _default_runtime_env(monkeypatch):
    for name in ("PLANWEAVE_TRIM_RESULTS", "PLANWEAVE_RESULT_SEPARATOR", "PLANWEAVE_STEP_LOGGING", "PLANWEAVE_LOG_REDACT"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def make_function():
    def _make(name: str, callback: Callable[[VariableSet], Any], **kwargs: Any) -> RecordingFunction:
        return RecordingFunction(name, callback, **kwargs)

    return _make
