from .tool_registry import (
    AgentFunction,
    FunctionRegistry,
    ToolParameter,
    agent_function,
    as_agent_function,
    get_formal_parameters,
    missing_required,
)
from .tool_schema import describe, function_to_json, prepare_tools
from .tool_validator import ToolArgumentValidator
from .tool_executor import ToolExecutor

__all__ = [
    "AgentFunction",
    "FunctionRegistry",
    "ToolArgumentValidator",
    "ToolExecutor",
    "ToolParameter",
    "agent_function",
    "as_agent_function",
    "describe",
    "function_to_json",
    "get_formal_parameters",
    "missing_required",
    "prepare_tools",
]
