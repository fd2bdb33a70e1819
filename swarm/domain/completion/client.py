from typing import Any, AsyncIterator, Dict, Protocol, Union, runtime_checkable

from swarm.domain.completion.request_builder import CompletionRequest


@runtime_checkable
class CompletionClient(Protocol):
    """Port to the external chat-completion service.

    ``create`` returns the assistant message as a dict for a buffered request,
    or an async iterator of delta dicts when ``request.stream`` is set.
    Failures are raised as ``UpstreamError``.
    """

    async def create(
        self, request: CompletionRequest
    ) -> Union[Dict[str, Any], AsyncIterator[Dict[str, Any]]]:
        ...
