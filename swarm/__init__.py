"""Lightweight multi-agent orchestration over chat-completion models."""

from swarm.domain.exceptions import (
    ArgumentParseError,
    ResultCoercionError,
    SchemaError,
    SwarmError,
    ToolNotFoundError,
    UpstreamError,
)
from swarm.domain.models import Agent, Response, Result
from swarm.domain.tool import ToolParameter, agent_function, describe, function_to_json
from swarm.domain.streaming import STREAM_END, STREAM_START, StreamingHandler, merge_chunk
from swarm.domain.orchestration import Swarm
from swarm.infrastructure.config import Settings
from swarm.infrastructure.observability import setup_logging

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "ArgumentParseError",
    "Response",
    "Result",
    "ResultCoercionError",
    "STREAM_END",
    "STREAM_START",
    "SchemaError",
    "Settings",
    "StreamingHandler",
    "Swarm",
    "SwarmError",
    "ToolNotFoundError",
    "ToolParameter",
    "UpstreamError",
    "agent_function",
    "describe",
    "function_to_json",
    "merge_chunk",
    "setup_logging",
]
