from typing import Any, Dict, Mapping, Optional

# Reserved parameter name through which capabilities receive the shared context
CONTEXT_VARIABLES_NAME = "context_variables"


def get_context_value(context_variables: Optional[Mapping[str, Any]], key: str, default: Any = "") -> Any:
    """Read a key from the shared context, returning an empty value when missing"""

    if not context_variables:
        return default
    return context_variables.get(key, default)


def merge_context(base: Optional[Mapping[str, Any]], update: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Shallow merge where later keys overwrite earlier ones. Never drops keys."""

    merged = dict(base or {})
    if update:
        merged.update(update)
    return merged
