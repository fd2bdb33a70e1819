from .request_builder import CompletionRequest, build_completion_request, get_chat_completion
from .client import CompletionClient

__all__ = [
    "CompletionClient",
    "CompletionRequest",
    "build_completion_request",
    "get_chat_completion",
]
