from .agent import DEFAULT_MODEL, Agent, DynamicInstructions, FixedInstructions, Instructions
from .response import Response, Result

__all__ = [
    "DEFAULT_MODEL",
    "Agent",
    "DynamicInstructions",
    "FixedInstructions",
    "Instructions",
    "Response",
    "Result",
]
