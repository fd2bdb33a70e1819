from typing import Any, Dict, Optional
import json

from swarm.domain.exceptions import ArgumentParseError


class ToolArgumentValidator:
    """Parses the argument payload the model supplied for a tool call"""

    @staticmethod
    def parse_arguments(tool_name: str, raw_arguments: Optional[str]) -> Dict[str, Any]:
        """Decode model-supplied JSON arguments into a mapping.

        An empty payload means "no arguments".

        Raises:
            ArgumentParseError: the payload is not valid JSON or not an object.
        """
        if isinstance(raw_arguments, dict):
            return dict(raw_arguments)
        if raw_arguments is None or not str(raw_arguments).strip():
            return {}

        try:
            parsed = json.loads(raw_arguments)
        except (json.JSONDecodeError, TypeError) as e:
            raise ArgumentParseError(tool_name, raw_arguments, str(e)) from e

        if not isinstance(parsed, dict):
            raise ArgumentParseError(
                tool_name, raw_arguments, f"expected a JSON object, got {type(parsed).__name__}"
            )
        return parsed
