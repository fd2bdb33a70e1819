"""Unit tests for tool descriptors.

Tests cover:
- Parameter extraction and type inference
- Hiding of the shared-context parameter
- Description fallback
- Explicitly declared schemas
- SchemaError for callables without a readable signature
"""

import json

import pytest

from swarm.domain.exceptions import SchemaError
from swarm.domain.tool import ToolParameter, agent_function, describe, function_to_json, prepare_tools


def get_weather(location, time="now"):
    """Get the current weather in a given location.

    Location MUST be a city.
    """
    return json.dumps({"location": location, "temperature": "65", "time": time})


def transfer(amount: int, ratio: float, confirm: bool, tags: list, meta: dict, note: str, context_variables):
    return "ok"


def no_doc():
    return "x"


class TestDescribe:
    """Test descriptor building from introspected callables."""

    def test_basic_descriptor(self):
        """Test the descriptor for a simple two-parameter function."""
        assert describe(get_weather) == {
            "type": "function",
            "function": {
                "name": "get_weather",
                "description": "Get the current weather in a given location.",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "location": {"type": "string"},
                        "time": {"type": "string"},
                    },
                    "required": ["location", "time"],
                },
            },
        }

    def test_type_inference(self):
        """Test annotated parameters map to JSON schema primitives."""
        properties = describe(transfer)["function"]["parameters"]["properties"]

        assert properties["amount"] == {"type": "integer"}
        assert properties["ratio"] == {"type": "number"}
        assert properties["confirm"] == {"type": "boolean"}
        assert properties["tags"] == {"type": "array"}
        assert properties["meta"] == {"type": "object"}
        assert properties["note"] == {"type": "string"}

    def test_context_parameter_hidden(self):
        """Test the context parameter is removed from properties and required."""
        parameters = describe(transfer)["function"]["parameters"]

        assert "context_variables" not in parameters["properties"]
        assert "context_variables" not in parameters["required"]

    def test_description_falls_back_to_name(self):
        """Test functions without a docstring are described by their name."""
        assert describe(no_doc)["function"]["description"] == "no_doc"

    def test_describe_is_idempotent(self):
        """Test two calls produce byte-identical descriptors."""
        first = json.dumps(describe(get_weather), sort_keys=False)
        second = json.dumps(describe(get_weather), sort_keys=False)

        assert first == second

    def test_function_to_json_alias(self):
        """Test the alias produces the same descriptor."""
        assert function_to_json(get_weather) == describe(get_weather)

    def test_uninspectable_callable_raises_schema_error(self):
        """Test callables whose signature cannot be read are rejected."""
        def broken():
            pass

        broken.__signature__ = "not a signature"

        with pytest.raises(SchemaError) as exc_info:
            describe(broken)

        assert exc_info.value.function_name == "broken"


class TestDeclaredSchema:
    """Test capabilities registered with an explicit schema."""

    def test_declared_parameters_and_descriptions(self):
        """Test declared parameter descriptions reach the descriptor."""

        @agent_function(
            name="lookup",
            description="Look up an order",
            parameters=[
                ToolParameter(name="order_id", type="integer", description="Order number"),
                ToolParameter(name="verbose", type="boolean", required=False),
            ],
        )
        def lookup_order(order_id, verbose=False, context_variables=None):
            return str(order_id)

        descriptor = describe(lookup_order)

        assert descriptor["function"]["name"] == "lookup"
        assert descriptor["function"]["description"] == "Look up an order"
        assert descriptor["function"]["parameters"] == {
            "type": "object",
            "properties": {
                "order_id": {"type": "integer", "description": "Order number"},
                "verbose": {"type": "boolean"},
            },
            "required": ["order_id"],
        }
        # context parameter is still registered for injection
        assert any(p.is_context for p in lookup_order.parameters)


class TestPrepareTools:
    """Test tool list preparation."""

    def test_no_functions_gives_none(self):
        """Test an agent without capabilities advertises no tools."""
        assert prepare_tools([]) is None

    def test_functions_in_order(self):
        """Test descriptors keep the agent's function order."""
        tools = prepare_tools([no_doc, get_weather])

        assert [t["function"]["name"] for t in tools] == ["no_doc", "get_weather"]
