from typing import TypedDict, Any, AsyncIterator, Dict, List, Literal, Optional, Union
import copy
import math
import sys
import uuid
from pydantic import BaseModel
from langgraph.graph import StateGraph, START, END
from langgraph.types import StreamWriter

from swarm.domain.completion import CompletionClient, build_completion_request, get_chat_completion
from swarm.domain.context import merge_context
from swarm.domain.exceptions import UpstreamError
from swarm.domain.models import Agent, Response
from swarm.domain.streaming import StreamingHandler
from swarm.domain.tool import ToolExecutor
from swarm.infrastructure.config import Settings
from swarm.infrastructure.observability.logging import AgentLogger, setup_logging


class RunOptions(BaseModel):
    """Per-run switches, resolved against Settings before the run starts"""
    model_override: Optional[str] = None
    stream: bool = False
    debug: bool = False
    max_turns: Optional[int] = None
    execute_tools: bool = True


class RunState(TypedDict):
    """State threaded through the turn graph. Owned by exactly one run."""
    run_id: str
    active_agent: Agent
    history: List[Dict[str, Any]]
    context_variables: Dict[str, Any]
    options: RunOptions
    turns: int


class Swarm:
    """Drives the conversation between a user, agents and the completion service.

    Each turn requests one completion for the active agent, appends the
    assistant message, and, when the message asks for tools, dispatches them,
    merges context updates and applies any handoff before the next turn.
    """

    def __init__(
        self,
        client: Optional[CompletionClient] = None,
        settings: Optional[Settings] = None,
        configure_logging: bool = False
    ):
        self.settings = settings or Settings.from_env()
        if configure_logging:
            setup_logging(self.settings.log_level, self.settings.log_format)
        if client is None:
            from swarm.infrastructure.llm import OpenAICompletionClient
            client = OpenAICompletionClient(settings=self.settings)
        self.client = client
        self.workflow = self._create_workflow()

    def _create_workflow(self):
        """Create the turn graph"""

        workflow = StateGraph(RunState)

        workflow.add_node("get_completion", self.completion_node)
        workflow.add_node("execute_tools", self.tool_execution_node)

        # A run with no turn budget left never calls the model
        workflow.add_conditional_edges(
            START,
            self.check_turn_budget,
            {
                "continue": "get_completion",
                "end": END
            }
        )

        workflow.add_conditional_edges(
            "get_completion",
            self.check_tool_calls,
            {
                "execute_tools": "execute_tools",
                "end": END
            }
        )

        workflow.add_conditional_edges(
            "execute_tools",
            self.check_turn_budget,
            {
                "continue": "get_completion",
                "end": END
            }
        )

        return workflow.compile()

    # ------------------------------------------------------------------ #
    #  Nodes
    # ------------------------------------------------------------------ #

    async def completion_node(self, state: RunState, writer: StreamWriter) -> Dict[str, Any]:
        """Request one completion and append the assistant message"""

        agent = state["active_agent"]
        options = state["options"]
        agent_logger = self._run_logger(state)

        request = build_completion_request(
            agent,
            state["history"],
            state["context_variables"],
            options.model_override,
            options.stream,
            default_model=self.settings.default_model
        )
        agent_logger.log_completion_request(
            agent.name, request.model, len(request.messages), request.tool_names
        )

        completion = await get_chat_completion(self.client, request)

        if options.stream:
            handler = StreamingHandler(sender=agent.name)
            async for event in handler.consume(self._as_stream(completion)):
                writer(event)
            message = handler.message
        else:
            message = self._as_message(completion)
            message["sender"] = agent.name

        agent_logger.log_completion_received(agent.name, message)

        return {
            "history": state["history"] + [message],
            "turns": state["turns"] + 1,
        }

    async def tool_execution_node(self, state: RunState) -> Dict[str, Any]:
        """Run the requested tools and apply context updates and handoff"""

        agent = state["active_agent"]
        agent_logger = self._run_logger(state)
        message = state["history"][-1]

        executor = ToolExecutor(agent_logger.bind(turn=state["turns"]))
        partial_response = await executor.handle_tool_calls(
            message["tool_calls"],
            agent.functions,
            state["context_variables"]
        )

        agent_logger.log_context_update(list(partial_response.context_variables))
        update: Dict[str, Any] = {
            "history": state["history"] + partial_response.messages,
            "context_variables": merge_context(
                state["context_variables"], partial_response.context_variables
            ),
        }
        if partial_response.agent is not None:
            agent_logger.log_handoff(agent.name, partial_response.agent.name)
            update["active_agent"] = partial_response.agent

        return update

    # ------------------------------------------------------------------ #
    #  Routing
    # ------------------------------------------------------------------ #

    def check_tool_calls(self, state: RunState) -> Literal["execute_tools", "end"]:
        """End the run when the last message requests no tools"""

        message = state["history"][-1]
        if not message.get("tool_calls"):
            self._run_logger(state).log_turn_end(state["active_agent"].name, state["turns"], "no_tool_calls")
            return "end"
        if not state["options"].execute_tools:
            self._run_logger(state).log_turn_end(state["active_agent"].name, state["turns"], "tools_disabled")
            return "end"
        return "execute_tools"

    def check_turn_budget(self, state: RunState) -> Literal["continue", "end"]:
        """Stop gracefully once max_turns completions have been made"""

        max_turns = state["options"].max_turns
        if max_turns is not None and state["turns"] >= max_turns:
            self._run_logger(state).log_turn_end(state["active_agent"].name, state["turns"], "max_turns")
            return "end"
        return "continue"

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    async def run(
        self,
        agent: Agent,
        messages: List[Dict[str, Any]],
        context_variables: Optional[Dict[str, Any]] = None,
        model_override: Optional[str] = None,
        stream: bool = False,
        debug: Optional[bool] = None,
        max_turns: Optional[Union[int, float]] = None,
        execute_tools: Optional[bool] = None
    ) -> Union[Response, AsyncIterator[Dict[str, Any]]]:
        """Run the conversation until no tools are requested or max_turns is hit.

        With ``stream=True`` this returns the async iterator of
        ``run_and_stream`` instead of a Response.
        """
        if stream:
            return self.run_and_stream(
                agent,
                messages,
                context_variables=context_variables,
                model_override=model_override,
                debug=debug,
                max_turns=max_turns,
                execute_tools=execute_tools
            )

        state = self._initial_state(
            agent, messages, context_variables, model_override, False, debug, max_turns, execute_tools
        )
        final_state = await self.workflow.ainvoke(state, config=self._graph_config(state))
        return self._build_response(final_state, len(messages))

    async def run_and_stream(
        self,
        agent: Agent,
        messages: List[Dict[str, Any]],
        context_variables: Optional[Dict[str, Any]] = None,
        model_override: Optional[str] = None,
        debug: Optional[bool] = None,
        max_turns: Optional[Union[int, float]] = None,
        execute_tools: Optional[bool] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        """Yield stream markers and raw deltas, then ``{"response": Response}``"""

        state = self._initial_state(
            agent, messages, context_variables, model_override, True, debug, max_turns, execute_tools
        )
        final_state: Dict[str, Any] = dict(state)

        async for mode, chunk in self.workflow.astream(
            state,
            config=self._graph_config(state),
            stream_mode=["custom", "values"]
        ):
            if mode == "custom":
                yield chunk
            elif mode == "values":
                final_state = chunk

        yield {"response": self._build_response(final_state, len(messages))}

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    def _initial_state(
        self,
        agent: Agent,
        messages: List[Dict[str, Any]],
        context_variables: Optional[Dict[str, Any]],
        model_override: Optional[str],
        stream: bool,
        debug: Optional[bool],
        max_turns: Optional[Union[int, float]],
        execute_tools: Optional[bool]
    ) -> RunState:
        options = RunOptions(
            model_override=model_override,
            stream=stream,
            debug=self.settings.debug if debug is None else debug,
            max_turns=self._resolve_max_turns(max_turns),
            execute_tools=self.settings.execute_tools if execute_tools is None else execute_tools
        )
        return {
            "run_id": uuid.uuid4().hex,
            "active_agent": agent,
            # The caller keeps ownership of its history and context
            "history": copy.deepcopy(list(messages)),
            "context_variables": copy.deepcopy(dict(context_variables or {})),
            "options": options,
            "turns": 0,
        }

    def _resolve_max_turns(self, max_turns: Optional[Union[int, float]]) -> Optional[int]:
        if max_turns is None:
            return self.settings.max_turns
        if isinstance(max_turns, float) and math.isinf(max_turns):
            return None
        if max_turns < 0:
            raise ValueError(f"max_turns must be >= 0, got {max_turns}")
        return int(max_turns)

    @staticmethod
    def _graph_config(state: RunState) -> Dict[str, Any]:
        max_turns = state["options"].max_turns
        # Each turn is at most two graph steps
        limit = sys.maxsize if max_turns is None else 2 * max_turns + 5
        return {"recursion_limit": limit, "run_name": "swarm_run"}

    @staticmethod
    def _run_logger(state: RunState) -> AgentLogger:
        return AgentLogger(
            __name__,
            debug=state["options"].debug,
            run_id=state["run_id"],
            agent=state["active_agent"].name
        )

    @staticmethod
    def _as_message(completion: Any) -> Dict[str, Any]:
        if isinstance(completion, dict) and "choices" in completion:
            try:
                completion = completion["choices"][0]["message"]
            except (IndexError, KeyError, TypeError) as e:
                raise UpstreamError(f"Malformed completion payload: {e}") from e
        if not isinstance(completion, dict) or "role" not in completion:
            raise UpstreamError(f"Malformed completion message: {completion!r}")
        return copy.deepcopy(completion)

    @staticmethod
    def _as_stream(completion: Any) -> AsyncIterator[Dict[str, Any]]:
        if not hasattr(completion, "__aiter__"):
            raise UpstreamError(f"Expected a delta stream, got {type(completion).__name__}")
        return completion

    def _build_response(self, final_state: Dict[str, Any], initial_length: int) -> Response:
        history = final_state["history"]
        agent = final_state["active_agent"]
        self._run_logger(final_state).log_run_end(
            agent.name, final_state["turns"], len(history) - initial_length
        )
        return Response(
            messages=history[initial_length:],
            agent=agent,
            context_variables=final_state["context_variables"]
        )
