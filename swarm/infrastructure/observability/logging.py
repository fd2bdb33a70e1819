import structlog
import logging
import sys
from typing import Dict, Any, Optional, List
import os


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    service_name: str = "swarm"
) -> None:
    """Setup structured logging configuration"""

    # Configure Python logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO)
    )

    # Processors for structlog
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Add appropriate renderer based on format
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # Configure structlog
    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Set service name in context
    structlog.contextvars.bind_contextvars(
        service=service_name,
        environment=os.getenv("ENVIRONMENT", "development")
    )


class AgentLogger:
    """Specialized logger for run events.

    With ``debug=True`` every event is emitted at INFO, otherwise at DEBUG, so
    a run's debug flag controls visibility without reconfiguring logging.
    """

    def __init__(self, name: str, debug: bool = False, **context: Any):
        self.logger = structlog.get_logger(name).bind(**context)
        self.debug = debug

    def bind(self, **context: Any) -> "AgentLogger":
        """Return a logger carrying extra context"""
        bound = AgentLogger.__new__(AgentLogger)
        bound.logger = self.logger.bind(**context)
        bound.debug = self.debug
        return bound

    def _emit(self, event: str, **kwargs: Any) -> None:
        if self.debug:
            self.logger.info(event, **kwargs)
        else:
            self.logger.debug(event, **kwargs)

    def log_completion_request(self, agent_name: str, model: str, message_count: int, tool_names: List[str]):
        """Log an outgoing completion request"""

        self._emit(
            "completion_request",
            agent_name=agent_name,
            model=model,
            message_count=message_count,
            tools=tool_names
        )

    def log_completion_received(self, agent_name: str, message: Dict[str, Any]):
        """Log the assistant message a turn produced"""

        tool_calls = message.get("tool_calls") or []
        self._emit(
            "completion_received",
            agent_name=agent_name,
            content=message.get("content"),
            tool_calls=[tc.get("function", {}).get("name") for tc in tool_calls]
        )

    def log_tool_execution(
        self,
        tool_name: str,
        input_data: Dict[str, Any],
        output_data: Optional[str] = None,
        duration_ms: Optional[float] = None,
        success: bool = True,
        error: Optional[str] = None
    ):
        """Log tool execution events"""

        self._emit(
            "tool_execution",
            tool_name=tool_name,
            input_data=input_data,
            output_data=output_data,
            duration_ms=duration_ms,
            success=success,
            error=error
        )

    def log_tool_error(self, tool_name: str, error: str):
        """Log a per-call error that was recovered into the transcript"""

        self.logger.warning("tool_call_failed", tool_name=tool_name, error=error)

    def log_handoff(self, from_agent: str, to_agent: str):
        """Log an agent handoff"""

        self._emit("handoff", from_agent=from_agent, to_agent=to_agent)

    def log_context_update(self, keys: List[str]):
        """Log context updates"""

        if keys:
            self._emit("context_update", keys=sorted(keys))

    def log_turn_end(self, agent_name: str, turn: int, reason: str):
        """Log why the loop stopped"""

        self._emit("turn_end", agent_name=agent_name, turn=turn, reason=reason)

    def log_run_end(self, agent_name: str, turns: int, new_messages: int):
        """Log the end of a run"""

        self._emit("run_end", agent_name=agent_name, turns=turns, new_messages=new_messages)
