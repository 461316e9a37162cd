import json

import pytest

from planweave import (
    FunctionNotFoundError,
    FunctionRegistry,
    PLAN_SCHEMA_VERSION,
    Plan,
    PlanSerializationError,
)
from planweave.plans import UnboundFunction, plan_from_json, plan_to_json


def _registry():
    registry = FunctionRegistry()
    registry.register_local(lambda input: input + " one", name="one", plugin_name="steps")
    registry.register_local(lambda input: input + " two", name="two", plugin_name="steps")
    registry.register_local(lambda input: input + " three", name="three", plugin_name="steps")
    return registry


def _build(registry):
    inner = Plan("inner", registry.resolve("steps", "two"), name="inner")
    root = Plan("count up", registry.resolve("steps", "one"), inner, registry.resolve("steps", "three"), name="root")
    root.steps[0].parameters.set("mood", "$MOOD")
    root.steps[0].add_outputs("FIRST")
    root.add_outputs("FIRST")
    root.state.set("MOOD", "calm")
    return root


def test_document_shape():
    registry = _registry()
    data = json.loads(plan_to_json(_build(registry)))
    assert data["schema_version"] == PLAN_SCHEMA_VERSION
    root = data["plan"]
    assert root["name"] == "root"
    assert root["function"] is None
    assert root["state"] == {"input": "", "MOOD": "calm"}
    assert root["steps"][0]["function"] == {"plugin_name": "steps", "name": "one"}
    assert root["steps"][0]["outputs"] == ["FIRST"]
    assert root["steps"][1]["steps"][0]["function"]["name"] == "two"


def test_round_trip_resumes_mid_execution():
    registry = _registry()
    reference = _build(registry).invoke("go")

    plan = _build(registry)
    plan.step("go")
    plan.step("go")
    text = plan.to_json(indent=2)

    restored = Plan.from_json(text, registry)
    assert restored.next_step_path() == (2,)
    assert restored.next_step_index == 1
    assert restored.steps[1].next_step_index == 1
    assert restored.state.input == "go one two"
    assert restored.steps[0].parameters["mood"] == "$MOOD"
    assert restored.steps[0].function is registry.resolve("steps", "one")

    result = restored.invoke("go")
    assert result.value == reference.value == "go one"
    assert restored.state.input == "go one two three"
    assert result.metadata["FIRST"] == "go one"


def test_round_trip_is_stable():
    registry = _registry()
    text = plan_to_json(_build(registry))
    assert plan_to_json(plan_from_json(text, registry)) == text


def test_missing_function_raises_by_default():
    text = plan_to_json(_build(_registry()))
    with pytest.raises(FunctionNotFoundError) as excinfo:
        plan_from_json(text, FunctionRegistry())
    assert excinfo.value.plugin_name == "steps"
    assert excinfo.value.function_name == "one"


def test_missing_function_binds_placeholder_when_allowed():
    text = plan_to_json(_build(_registry()))
    plan = plan_from_json(text, require_functions=False)

    assert isinstance(plan.steps[0].function, UnboundFunction)
    assert plan.steps[0].is_leaf
    assert plan.next_step_path() == (0,)
    assert plan_to_json(plan) == text

    with pytest.raises(FunctionNotFoundError):
        plan.step()
    assert plan.next_step_path() == (0,)


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        json.dumps({"plan": {"name": "x", "next_step_index": -1}}),
        json.dumps({"plan": {"name": "x", "unexpected": True}}),
        json.dumps({"schema_version": "1.0"}),
    ],
)
def test_invalid_documents(text):
    with pytest.raises(PlanSerializationError) as excinfo:
        plan_from_json(text)
    assert excinfo.value.code == "PW-201"


def test_function_and_steps_together_are_rejected():
    document = {
        "plan": {
            "name": "broken",
            "function": {"plugin_name": "steps", "name": "one"},
            "steps": [{"name": "child"}],
        }
    }
    with pytest.raises(PlanSerializationError):
        plan_from_json(json.dumps(document), _registry())
