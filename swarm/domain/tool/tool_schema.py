from typing import Any, Callable, Dict, List, Optional

from swarm.domain.context import CONTEXT_VARIABLES_NAME
from swarm.domain.tool.tool_registry import as_agent_function


def describe(func: Callable[..., Any]) -> Dict[str, Any]:
    """Build the tool descriptor advertised to the completion service.

    The shared-context parameter is removed from both ``properties`` and
    ``required``: the model never supplies it, the dispatcher injects it.

    Raises:
        SchemaError: the callable cannot be introspected.
    """
    agent_func = as_agent_function(func)

    properties: Dict[str, Dict[str, Any]] = {}
    required: List[str] = []
    for param in agent_func.parameters:
        prop: Dict[str, Any] = {"type": param.type}
        if param.description:
            prop["description"] = param.description
        properties[param.name] = prop
        if param.required:
            required.append(param.name)

    properties.pop(CONTEXT_VARIABLES_NAME, None)
    if CONTEXT_VARIABLES_NAME in required:
        required.remove(CONTEXT_VARIABLES_NAME)

    return {
        "type": "function",
        "function": {
            "name": agent_func.name,
            "description": agent_func.description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        },
    }


# Name used by callers coming from the OpenAI swarm API
function_to_json = describe


def prepare_tools(functions: List[Callable[..., Any]]) -> Optional[List[Dict[str, Any]]]:
    """Descriptors for an agent's capabilities, or None when there are none"""

    tools = [describe(f) for f in functions]
    return tools or None
