from collections import defaultdict
from typing import Any, Callable, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_INSTRUCTIONS = "You are a helpful agent."


class FixedInstructions(BaseModel):
    """Instructions that never change between turns"""
    kind: Literal["fixed"] = "fixed"
    text: str

    def resolve(self, context_variables: Dict[str, Any]) -> str:
        return self.text


class DynamicInstructions(BaseModel):
    """Instructions computed from the shared context at every turn"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["dynamic"] = "dynamic"
    func: Callable[[Dict[str, Any]], str]

    def resolve(self, context_variables: Dict[str, Any]) -> str:
        # A copy, so instructions cannot mutate the run context; missing keys read as ""
        return self.func(defaultdict(str, context_variables))


Instructions = Union[FixedInstructions, DynamicInstructions]


class Agent(BaseModel):
    """A named persona with its own instructions and capabilities"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(default="Agent", description="Display name, used as message sender")
    model: Optional[str] = Field(default=None, description="Model identifier; None uses the configured default model")
    instructions: Instructions = Field(
        default_factory=lambda: FixedInstructions(text=DEFAULT_INSTRUCTIONS),
        description="Fixed text or a function of the shared context"
    )
    functions: List[Callable[..., Any]] = Field(default_factory=list, description="Capabilities callable by the model")
    tool_choice: Optional[Union[str, Dict[str, Any]]] = Field(None, description="Tool selection policy passed through")
    parallel_tool_calls: bool = Field(
        default=True,
        description="Passed to the completion service only; tool calls always execute sequentially"
    )

    @field_validator("instructions", mode="before")
    @classmethod
    def _coerce_instructions(cls, value: Any) -> Any:
        if isinstance(value, (FixedInstructions, DynamicInstructions)):
            return value
        if isinstance(value, str):
            return FixedInstructions(text=value)
        if callable(value):
            return DynamicInstructions(func=value)
        return value

    def get_instructions(self, context_variables: Optional[Dict[str, Any]] = None) -> str:
        """Resolve the instructions for the current turn"""
        return self.instructions.resolve(context_variables or {})

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, model={self.model!r}, functions={len(self.functions)})"
