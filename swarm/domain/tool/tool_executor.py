from typing import Any, Callable, Dict, List, Optional
import inspect
import time

from swarm.domain.exceptions import ArgumentParseError, ToolNotFoundError
from swarm.domain.models import Response, Result
from swarm.domain.tool.tool_registry import AgentFunction, FunctionRegistry, missing_required
from swarm.domain.tool.tool_validator import ToolArgumentValidator
from swarm.infrastructure.observability.logging import AgentLogger


class ToolExecutor:
    """Executes the tool calls requested in one assistant turn.

    Calls run sequentially in request order. Unknown tools and malformed
    arguments are reported back to the model as tool messages and do not stop
    the turn; a capability returning something that cannot become a Result is
    fatal.
    """

    def __init__(self, agent_logger: Optional[AgentLogger] = None):
        self.agent_logger = agent_logger or AgentLogger(__name__)
        self.validator = ToolArgumentValidator()

    async def handle_tool_calls(
        self,
        tool_calls: List[Dict[str, Any]],
        functions: List[Callable[..., Any]],
        context_variables: Dict[str, Any]
    ) -> Response:
        """Dispatch every tool call and collect the partial turn result"""

        registry = FunctionRegistry(functions)
        partial_response = Response(messages=[], agent=None, context_variables={})

        for tool_call in tool_calls:
            function = tool_call.get("function") or {}
            name = function.get("name", "")
            call_id = tool_call.get("id")

            try:
                agent_func = self._resolve(registry, name)
                args = self.validator.parse_arguments(name, function.get("arguments"))
            except (ToolNotFoundError, ArgumentParseError) as e:
                self.agent_logger.log_tool_error(name, str(e))
                partial_response.messages.append(self._tool_message(call_id, name, f"Error: {e}"))
                continue

            missing = missing_required(agent_func.parameters, args)
            if missing:
                self.agent_logger.log_tool_error(name, f"missing arguments: {', '.join(missing)}")

            start = time.perf_counter()
            raw_result = await self.invoke(agent_func, args, context_variables)
            result = self.handle_function_result(raw_result, name)
            duration_ms = (time.perf_counter() - start) * 1000

            self.agent_logger.log_tool_execution(
                tool_name=name,
                input_data=args,
                output_data=result.value,
                duration_ms=round(duration_ms, 2)
            )

            partial_response.messages.append(self._tool_message(call_id, name, result.value))
            partial_response.context_variables.update(result.context_variables)
            if result.agent is not None:
                # Last handoff in the turn wins
                partial_response.agent = result.agent

        return partial_response

    def handle_function_result(self, raw_result: Any, function_name: str) -> Result:
        """Normalize a capability's return value into a Result"""

        return Result.from_raw(raw_result, function_name=function_name)

    async def invoke(
        self,
        agent_func: AgentFunction,
        args: Dict[str, Any],
        context_variables: Dict[str, Any]
    ) -> Any:
        """Call a capability with arguments matched to its declared parameters"""

        if agent_func.takes_only_context:
            call_args: Dict[str, Any] = {agent_func.parameters[0].name: context_variables}
        else:
            call_args = self.prepare_arguments(agent_func, args, context_variables)

        result = agent_func(**call_args)
        if inspect.isawaitable(result):
            result = await result
        return result

    @staticmethod
    def prepare_arguments(
        agent_func: AgentFunction,
        args: Dict[str, Any],
        context_variables: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Match model arguments to parameter names.

        Absent parameters with a default are left out so the default applies;
        absent parameters without one receive None. Unknown names are dropped.
        """
        call_args: Dict[str, Any] = {}
        for param in agent_func.parameters:
            if param.is_context:
                call_args[param.name] = context_variables
            elif param.name in args:
                call_args[param.name] = args[param.name]
            elif not param.has_default:
                call_args[param.name] = None
        return call_args

    @staticmethod
    def _resolve(registry: FunctionRegistry, name: str) -> AgentFunction:
        agent_func = registry.get_function(name)
        if agent_func is None:
            raise ToolNotFoundError(name)
        return agent_func

    @staticmethod
    def _tool_message(call_id: Optional[str], name: str, content: str) -> Dict[str, Any]:
        return {
            "role": "tool",
            "tool_call_id": call_id,
            "tool_name": name,
            "content": content,
        }
