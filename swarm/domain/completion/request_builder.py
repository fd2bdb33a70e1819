from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING
from pydantic import BaseModel, Field

from swarm.domain.models import DEFAULT_MODEL, Agent
from swarm.domain.tool import prepare_tools

if TYPE_CHECKING:
    from swarm.domain.completion.client import CompletionClient


class CompletionRequest(BaseModel):
    """Everything sent to the completion service for one turn"""
    model: str
    messages: List[Dict[str, Any]]
    tools: Optional[List[Dict[str, Any]]] = Field(None, description="Omitted entirely when the agent has no tools")
    tool_choice: Optional[Union[str, Dict[str, Any]]] = None
    parallel_tool_calls: Optional[bool] = None
    stream: bool = False

    @property
    def tool_names(self) -> List[str]:
        return [t["function"]["name"] for t in self.tools or []]

    def to_params(self) -> Dict[str, Any]:
        """Keyword arguments for the service call, without unset fields"""
        params: Dict[str, Any] = {"model": self.model, "messages": self.messages, "stream": self.stream}
        for key in ("tools", "tool_choice", "parallel_tool_calls"):
            value = getattr(self, key)
            if value is not None:
                params[key] = value
        return params


def build_completion_request(
    agent: Agent,
    history: List[Dict[str, Any]],
    context_variables: Dict[str, Any],
    model_override: Optional[str] = None,
    stream: bool = False,
    default_model: str = DEFAULT_MODEL
) -> CompletionRequest:
    """Assemble the request for the active agent.

    Raises:
        SchemaError: one of the agent's functions cannot be described. This
            happens before any network call.
    """
    instructions = agent.get_instructions(context_variables)
    messages = [{"role": "system", "content": instructions}, *history]
    tools = prepare_tools(agent.functions)

    return CompletionRequest(
        model=model_override or agent.model or default_model,
        messages=messages,
        tools=tools,
        tool_choice=agent.tool_choice if tools else None,
        parallel_tool_calls=agent.parallel_tool_calls if tools else None,
        stream=stream
    )


async def get_chat_completion(client: "CompletionClient", request: CompletionRequest) -> Any:
    """Issue the request. No retries; UpstreamError propagates unchanged."""

    return await client.create(request)
