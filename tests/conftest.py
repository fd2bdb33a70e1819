"""Shared fixtures for swarm tests.

The scripted completion client replays canned assistant messages (buffered
runs) or canned delta lists (streaming runs) and records every request so
tests can assert on what would have been sent to the service.
"""

from typing import Any, AsyncIterator, Dict, List, Optional
import json

import pytest

from swarm.domain.completion import CompletionRequest
from swarm.infrastructure.config import Settings


class ScriptedCompletionClient:
    """Completion client returning pre-recorded turns in order"""

    def __init__(self, turns: Optional[List[Any]] = None):
        self.turns = list(turns or [])
        self.requests: List[CompletionRequest] = []

    async def create(self, request: CompletionRequest):
        self.requests.append(request)
        if not self.turns:
            raise AssertionError("completion requested but no scripted turn is left")
        turn = self.turns.pop(0)
        if isinstance(turn, Exception):
            raise turn
        if request.stream:
            return _replay(turn)
        return turn


async def _replay(deltas: List[Dict[str, Any]]) -> AsyncIterator[Dict[str, Any]]:
    for delta in deltas:
        yield delta


def assistant(content: Optional[str] = None, tool_calls: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Build an assistant message as the service would return it"""
    message: Dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls:
        message["tool_calls"] = tool_calls
    return message


def tool_call(call_id: str, name: str, arguments: Any = None) -> Dict[str, Any]:
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    return {"id": call_id, "type": "function", "function": {"name": name, "arguments": arguments}}


@pytest.fixture
def settings():
    """Settings independent of the process environment."""
    return Settings()


@pytest.fixture
def scripted_client():
    """Factory for scripted clients."""
    def factory(*turns):
        return ScriptedCompletionClient(list(turns))
    return factory
