from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
import inspect
import weakref
import structlog
from pydantic import BaseModel, ConfigDict, Field

from swarm.domain.context import CONTEXT_VARIABLES_NAME
from swarm.domain.exceptions import SchemaError

logger = structlog.get_logger(__name__)

_MISSING = inspect.Parameter.empty

# Plain callable -> its registration, so signatures are read once
_registered: "weakref.WeakKeyDictionary[Callable[..., Any], Tuple[str, str, List[ToolParameter]]]" = weakref.WeakKeyDictionary()

# Python annotation -> JSON schema primitive
TYPE_MAP: Dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    tuple: "array",
    dict: "object",
    type(None): "null",
}

# Same mapping for annotations left as strings by postponed evaluation
_TYPE_NAME_MAP: Dict[str, str] = {
    "str": "string",
    "int": "integer",
    "float": "number",
    "bool": "boolean",
    "list": "array",
    "tuple": "array",
    "dict": "object",
    "None": "null",
}


def json_type_for(annotation: Any) -> str:
    """Infer a JSON schema primitive for a parameter annotation (default: string)"""

    if annotation is _MISSING:
        return "string"
    if isinstance(annotation, str):
        base = annotation.split("[", 1)[0].strip()
        return _TYPE_NAME_MAP.get(base, "string")
    origin = getattr(annotation, "__origin__", None)
    if origin is not None and origin in TYPE_MAP:
        return TYPE_MAP[origin]
    try:
        return TYPE_MAP.get(annotation, "string")
    except TypeError:
        # unhashable annotation objects
        return "string"


class ToolParameter(BaseModel):
    """Statically declared parameter of a capability"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    type: str = Field(default="string", description="JSON schema primitive type")
    required: bool = True
    description: Optional[str] = None
    default: Any = Field(default=_MISSING, exclude=True)
    is_context: bool = Field(default=False, description="Receives the shared context instead of a model argument")

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING


def get_formal_parameters(func: Callable[..., Any]) -> List[ToolParameter]:
    """Read a callable's parameters once, at registration time.

    Every parameter is marked required; the context parameter is flagged so the
    descriptor builder can hide it and the dispatcher can inject it.

    Raises:
        SchemaError: the callable's signature cannot be determined.
    """
    name = getattr(func, "__name__", repr(func))
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as exc:
        raise SchemaError(name, str(exc)) from exc

    parameters = []
    for param in signature.parameters.values():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        parameters.append(ToolParameter(
            name=param.name,
            type=json_type_for(param.annotation),
            required=True,
            default=param.default,
            is_context=param.name == CONTEXT_VARIABLES_NAME
        ))
    return parameters


def missing_required(parameters: Iterable[ToolParameter], provided: Dict[str, Any]) -> List[str]:
    """Names of required, non-context parameters absent from the provided arguments"""

    return [
        p.name for p in parameters
        if p.required and not p.is_context and p.name not in provided
    ]


def _first_doc_line(func: Callable[..., Any]) -> Optional[str]:
    doc = inspect.getdoc(func)
    if not doc:
        return None
    for line in doc.splitlines():
        if line.strip():
            return line.strip()
    return None


class AgentFunction:
    """A capability together with the parameter schema it was registered with"""

    def __init__(
        self,
        func: Callable[..., Any],
        name: Optional[str] = None,
        description: Optional[str] = None,
        parameters: Optional[List[ToolParameter]] = None
    ):
        self.func = func
        self.name = name or getattr(func, "__name__", None)
        if not self.name:
            raise SchemaError(repr(func), "capability has no name")
        self.description = description or _first_doc_line(func) or self.name
        self.parameters = parameters if parameters is not None else get_formal_parameters(func)
        # Keep the wrapped function's metadata reachable
        self.__name__ = self.name
        self.__doc__ = getattr(func, "__doc__", None)

    @property
    def is_coroutine(self) -> bool:
        return inspect.iscoroutinefunction(self.func)

    @property
    def takes_only_context(self) -> bool:
        return len(self.parameters) == 1 and self.parameters[0].is_context

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)

    def __repr__(self) -> str:
        names = ", ".join(p.name for p in self.parameters)
        return f"AgentFunction({self.name}({names}))"


def as_agent_function(func: Callable[..., Any]) -> AgentFunction:
    """Register a plain callable, or return an already registered one unchanged.

    The signature of a plain callable is read once; later lookups rebuild the
    wrapper from the schema captured then, while the callable is alive.
    """

    if isinstance(func, AgentFunction):
        return func
    try:
        name, description, parameters = _registered[func]
    except KeyError:
        pass
    except TypeError:
        # unhashable or not weak-referenceable callables are never cached
        return AgentFunction(func)
    else:
        return AgentFunction(func, name=name, description=description, parameters=parameters)

    agent_func = AgentFunction(func)
    try:
        _registered[func] = (agent_func.name, agent_func.description, agent_func.parameters)
    except TypeError:
        pass
    return agent_func


def agent_function(
    name: Optional[str] = None,
    description: Optional[str] = None,
    parameters: Optional[List[ToolParameter]] = None
) -> Callable[[Callable[..., Any]], AgentFunction]:
    """Decorator declaring a capability's schema explicitly.

    Usage:
        @agent_function(parameters=[ToolParameter(name="city", description="City name")])
        def get_weather(city, context_variables): ...
    """

    def decorator(func: Callable[..., Any]) -> AgentFunction:
        declared = parameters
        if declared is not None and not any(p.name == CONTEXT_VARIABLES_NAME for p in declared):
            # Declared schemas still get the context injected if the callable asks for it
            introspected = {p.name: p for p in get_formal_parameters(func)}
            if CONTEXT_VARIABLES_NAME in introspected:
                declared = list(declared) + [introspected[CONTEXT_VARIABLES_NAME]]
        return AgentFunction(func, name=name, description=description, parameters=declared)

    return decorator


class FunctionRegistry:
    """Name -> capability table for one agent's function list"""

    def __init__(self, functions: Optional[Iterable[Callable[..., Any]]] = None):
        self.functions: Dict[str, AgentFunction] = {}
        for func in functions or []:
            self.register_function(func)

    def register_function(self, func: Callable[..., Any]) -> AgentFunction:
        """Register a capability; a later function with the same name wins"""

        agent_func = as_agent_function(func)
        if agent_func.name in self.functions:
            logger.warning("Function already registered, overwriting", function=agent_func.name)
        self.functions[agent_func.name] = agent_func
        return agent_func

    def get_function(self, name: str) -> Optional[AgentFunction]:
        return self.functions.get(name)

    def list_functions(self) -> List[str]:
        return list(self.functions.keys())

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def __len__(self) -> int:
        return len(self.functions)
