from typing import Any, Optional


class SwarmError(Exception):
    """Base class for all swarm runtime errors"""


class UpstreamError(SwarmError):
    """The completion service failed or returned malformed data"""


class SchemaError(SwarmError):
    """A capability could not be introspected into a tool descriptor"""

    def __init__(self, function_name: str, reason: str):
        self.function_name = function_name
        self.reason = reason
        super().__init__(f"Unable to build tool schema for '{function_name}': {reason}")


class ArgumentParseError(SwarmError):
    """Model-supplied tool arguments are not a JSON object"""

    def __init__(self, tool_name: str, raw_arguments: Optional[str], reason: str):
        self.tool_name = tool_name
        self.raw_arguments = raw_arguments
        self.reason = reason
        super().__init__(f"Failed to parse arguments for tool {tool_name}: {reason}")


class ToolNotFoundError(SwarmError):
    """The model requested a tool the active agent does not have"""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool {tool_name} not found.")


class ResultCoercionError(SwarmError, TypeError):
    """A capability returned a value that cannot become a Result"""

    def __init__(self, function_name: str, raw_value: Any, reason: Optional[str] = None):
        self.function_name = function_name
        self.raw_value = raw_value
        message = (
            f"Failed to cast response of '{function_name}' to string: {raw_value!r}. "
            "Make sure agent functions return a string, a mapping, an Agent or a Result object."
        )
        if reason:
            message = f"{message} Error: {reason}"
        super().__init__(message)
