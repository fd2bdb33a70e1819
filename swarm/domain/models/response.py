from typing import Any, Dict, List, Literal, Mapping, Optional
import json
from pydantic import BaseModel, ConfigDict, Field

from swarm.domain.exceptions import ResultCoercionError
from swarm.domain.models.agent import Agent


class Result(BaseModel):
    """Normalized output of a capability call.

    ``value`` is surfaced to the model as the tool output, ``agent`` (when set)
    hands the conversation to another agent, and ``context_variables`` is merged
    into the shared context after the turn.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    value: str = ""
    agent: Optional[Agent] = None
    context_variables: Dict[str, Any] = Field(default_factory=dict)

    @property
    def kind(self) -> Literal["text", "handoff"]:
        return "handoff" if self.agent is not None else "text"

    @classmethod
    def text(cls, value: str, context_variables: Optional[Dict[str, Any]] = None) -> "Result":
        return cls(value=value, context_variables=context_variables or {})

    @classmethod
    def handoff(
        cls,
        agent: Agent,
        value: Optional[str] = None,
        context_variables: Optional[Dict[str, Any]] = None
    ) -> "Result":
        if value is None:
            value = json.dumps({"assistant": agent.name})
        return cls(value=value, agent=agent, context_variables=context_variables or {})

    @classmethod
    def from_raw(cls, raw: Any, function_name: str = "<anonymous>") -> "Result":
        """Normalize whatever a capability returned.

        Raises:
            ResultCoercionError: the value is none of str, scalar, mapping,
                list/tuple, Agent or Result, or cannot be serialized.
        """
        if isinstance(raw, Result):
            return raw
        if isinstance(raw, Agent):
            return cls.handoff(raw)
        if isinstance(raw, str):
            return cls.text(raw)
        if raw is None or isinstance(raw, (bool, int, float)):
            return cls.text(str(raw))
        if isinstance(raw, (Mapping, list, tuple)):
            try:
                return cls.text(json.dumps(raw))
            except (TypeError, ValueError) as exc:
                raise ResultCoercionError(function_name, raw, str(exc)) from exc
        raise ResultCoercionError(function_name, raw, f"unsupported type {type(raw).__name__}")


class Response(BaseModel):
    """Outcome of a run, or of a single dispatch step within a turn"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    messages: List[Dict[str, Any]] = Field(default_factory=list)
    agent: Optional[Agent] = None
    context_variables: Dict[str, Any] = Field(default_factory=dict)
