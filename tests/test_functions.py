import asyncio

import pytest

from planweave import (
    CancellationToken,
    FunctionImportError,
    FunctionNotFoundError,
    FunctionRegistry,
    FunctionResult,
    LocalFunction,
    PlanCancelledError,
    PlanFunction,
    VariableSet,
)
from planweave.functions import resolve_callable


def compose(input, topic, style="plain"):
    """Compose a line about a topic."""
    return f"{style}:{topic}:{input}"


async def compose_async(input):
    await asyncio.sleep(0)
    return input[::-1]


def inspect_context(variables, settings):
    return f"{len(variables)}|{settings}"


def returns_nothing(input):
    return None


def test_local_function_binds_parameters_by_name():
    fn = LocalFunction(compose, plugin_name="writer")
    result = asyncio.run(fn.invoke(VariableSet("hi", {"topic": "cats"})))
    assert result.value == "plain:cats:hi"
    assert result.variables.input == "plain:cats:hi"
    assert result.variables["topic"] == "cats"
    assert result.function_name == "compose"
    assert result.plugin_name == "writer"


def test_local_function_missing_required_parameter_is_empty():
    fn = LocalFunction(compose)
    result = asyncio.run(fn.invoke(VariableSet("hi", {"style": "bold"})))
    assert result.value == "bold::hi"


def test_local_function_awaits_coroutines():
    fn = LocalFunction(compose_async)
    result = asyncio.run(fn.invoke(VariableSet("abc")))
    assert result.get_value(str) == "cba"


def test_local_function_receives_variables_and_settings():
    fn = LocalFunction(inspect_context)
    result = asyncio.run(fn.invoke(VariableSet("x", {"a": "1"}), {"temperature": 0}))
    assert result.value == "2|{'temperature': 0}"


def test_local_function_none_keeps_running_input():
    fn = LocalFunction(returns_nothing)
    result = asyncio.run(fn.invoke(VariableSet("kept")))
    assert result.value is None
    assert result.variables.input == "kept"


def test_local_function_passes_function_result_through():
    def custom(variables):
        returned = variables.clone()
        returned["SUMMARY"] = "short"
        return FunctionResult("custom", "", returned.update("long"), "long")

    fn = LocalFunction(custom)
    result = asyncio.run(fn.invoke(VariableSet("x")))
    assert result.value == "long"
    assert result.variables["SUMMARY"] == "short"


def test_local_function_describe_lists_bindable_parameters():
    view = LocalFunction(compose, plugin_name="writer").describe()
    assert view.qualified_name == "writer.compose"
    assert view.description == "Compose a line about a topic."
    assert [(p.name, p.default_value) for p in view.parameters] == [
        ("input", None),
        ("topic", None),
        ("style", "plain"),
    ]
    assert LocalFunction(inspect_context).describe().parameters == []


def test_local_function_honours_cancellation():
    token = CancellationToken()
    token.cancel("user stopped")
    fn = LocalFunction(compose)
    with pytest.raises(PlanCancelledError) as excinfo:
        asyncio.run(fn.invoke(VariableSet("x"), cancellation=token))
    assert excinfo.value.code == "PW-301"
    assert str(excinfo.value) == "user stopped"


def test_local_function_satisfies_protocol():
    assert isinstance(LocalFunction(compose), PlanFunction)


def test_function_result_get_value_type_mismatch():
    result = FunctionResult("f", "p", VariableSet("1"), 1)
    assert result.get_value(int) == 1
    with pytest.raises(TypeError):
        result.get_value(str)
    assert FunctionResult("f", "p", VariableSet()).get_value(str) is None


def test_resolve_callable_from_path():
    fn = resolve_callable("sample_functions.shout")
    assert fn("hey") == "HEY!"


def test_resolve_callable_errors():
    with pytest.raises(FunctionImportError):
        resolve_callable("shout")
    with pytest.raises(FunctionImportError) as excinfo:
        resolve_callable("sample_functions.missing")
    assert excinfo.value.path == "sample_functions.missing"
    assert excinfo.value.code == "PW-102"


def test_local_function_from_path_defaults_plugin_to_module():
    fn = LocalFunction.from_path("sample_functions.greet")
    assert fn.plugin_name == "sample_functions"
    assert fn.name == "greet"
    result = asyncio.run(fn.invoke(VariableSet("Ada")))
    assert result.value == "Hello, Ada"


def test_registry_register_module_skips_private_functions():
    registry = FunctionRegistry()
    registered = registry.register_module("sample_functions")
    assert sorted(fn.name for fn in registered) == ["greet", "shout"]
    assert sorted(registry.list_names()) == ["sample_functions.greet", "sample_functions.shout"]
    assert registry.get("sample_functions", "_hidden") is None


def test_registry_lookup_and_resolve():
    registry = FunctionRegistry()
    fn = registry.register_local(compose, plugin_name="writer")
    assert registry.get("writer", "compose") is fn
    assert registry.get_qualified("writer.compose") is fn
    assert registry.resolve("writer", "compose") is fn
    assert registry.functions[("writer", "compose")] is fn
    with pytest.raises(FunctionNotFoundError) as excinfo:
        registry.resolve("writer", "missing")
    assert excinfo.value.plugin_name == "writer"
    assert excinfo.value.function_name == "missing"
    assert excinfo.value.diagnostics[0]["code"] == "PW-101"
    registry.unregister("writer", "compose")
    assert registry.get("writer", "compose") is None


def test_registry_unknown_module_raises_import_error():
    with pytest.raises(FunctionImportError):
        FunctionRegistry().register_module("planweave_no_such_module")
