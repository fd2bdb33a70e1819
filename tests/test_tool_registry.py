"""Unit tests for capability registration."""

from typing import List, Optional

import pytest

from swarm.domain.tool import (
    AgentFunction,
    FunctionRegistry,
    as_agent_function,
    get_formal_parameters,
    missing_required,
)
from swarm.domain.tool import tool_registry
from swarm.domain.tool.tool_registry import json_type_for


def greet(name, greeting="Hello", *args, **kwargs):
    """Greet someone."""
    return f"{greeting}, {name}"


def whoami(context_variables):
    return context_variables.get("user", "")


class TestFormalParameters:
    """Test parameter extraction at registration time."""

    def test_variadic_parameters_skipped(self):
        """Test *args and **kwargs are not advertised."""
        names = [p.name for p in get_formal_parameters(greet)]

        assert names == ["name", "greeting"]

    def test_defaults_recorded(self):
        """Test parameters remember whether they have a default."""
        name, greeting = get_formal_parameters(greet)

        assert name.required and not name.has_default
        assert greeting.required and greeting.has_default
        assert greeting.default == "Hello"

    def test_context_flagged(self):
        """Test the context parameter is flagged."""
        (param,) = get_formal_parameters(whoami)

        assert param.is_context

    def test_missing_required_ignores_context(self):
        """Test the context parameter is never reported missing."""
        params = get_formal_parameters(whoami) + get_formal_parameters(greet)

        assert missing_required(params, {"greeting": "Hi"}) == ["name"]


class TestJsonTypeFor:
    """Test annotation to JSON type mapping."""

    @pytest.mark.parametrize("annotation,expected", [
        (int, "integer"),
        (List[int], "array"),
        ("float", "number"),
        ("dict[str, int]", "object"),
        (Optional[int], "string"),
    ])
    def test_mapping(self, annotation, expected):
        """Test known annotations and the string fallback."""
        assert json_type_for(annotation) == expected


class TestAgentFunction:
    """Test the registered capability wrapper."""

    def test_wraps_and_calls(self):
        """Test the wrapper is callable and keeps its metadata."""
        func = AgentFunction(greet)

        assert func.name == "greet"
        assert func.description == "Greet someone."
        assert func("Ada") == "Hello, Ada"
        assert not func.is_coroutine

    def test_takes_only_context(self):
        """Test detection of context-only capabilities."""
        assert AgentFunction(whoami).takes_only_context
        assert not AgentFunction(greet).takes_only_context

    def test_as_agent_function_reuses_instances(self):
        """Test an already registered capability is returned unchanged."""
        func = AgentFunction(greet)

        assert as_agent_function(func) is func


class TestFunctionRegistry:
    """Test the name to capability table."""

    def test_register_and_lookup(self):
        """Test functions are found by name."""
        registry = FunctionRegistry([greet, whoami])

        assert len(registry) == 2
        assert "greet" in registry
        assert registry.get_function("whoami").func is whoami
        assert registry.get_function("missing") is None
        assert registry.list_functions() == ["greet", "whoami"]

    def test_later_registration_wins(self):
        """Test re-registering a name overwrites the earlier function."""
        def first():
            return "1"

        def second():
            return "2"

        second.__name__ = "first"
        registry = FunctionRegistry([first, second])

        assert len(registry) == 1
        assert registry.get_function("first")() == "2"


class TestRegistrationCache:
    """Test plain callables are introspected once."""

    def test_signature_read_once(self, monkeypatch):
        """Test repeated registration reuses the captured schema."""
        reads = []
        original = tool_registry.get_formal_parameters

        def counting(func):
            reads.append(func)
            return original(func)

        monkeypatch.setattr(tool_registry, "get_formal_parameters", counting)

        def lookup(order_id, verbose=False):
            """Look up an order."""
            return order_id

        first = as_agent_function(lookup)
        second = as_agent_function(lookup)
        FunctionRegistry([lookup])

        assert reads == [lookup]
        assert second.parameters == first.parameters
        assert second.description == "Look up an order."
        assert second("A1") == "A1"

    def test_distinct_callables_registered_separately(self):
        """Test two functions never share a schema."""
        def a(x):
            return x

        def b(y, z):
            return y

        assert [p.name for p in as_agent_function(a).parameters] == ["x"]
        assert [p.name for p in as_agent_function(b).parameters] == ["y", "z"]
