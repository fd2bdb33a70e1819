"""OpenAI adapter for the completion-client port.

Buffered requests return the assistant message as a plain dict; streaming
requests return an async iterator of delta dicts. SDK failures surface as
``UpstreamError``.
"""

from typing import Any, AsyncIterator, Dict, Optional, Union
import structlog
from openai import AsyncOpenAI, OpenAIError

from swarm.domain.completion import CompletionRequest
from swarm.domain.exceptions import UpstreamError
from swarm.infrastructure.config.settings import Settings

logger = structlog.get_logger(__name__)

_MESSAGE_FIELDS = ("role", "content", "tool_calls", "refusal")


class OpenAICompletionClient:
    """Completion client backed by ``openai.AsyncOpenAI``"""

    def __init__(self, client: Optional[AsyncOpenAI] = None, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        # Created lazily so constructing the adapter never needs credentials
        if self._client is None:
            kwargs: Dict[str, Any] = {}
            if self.settings.api_key:
                kwargs["api_key"] = self.settings.api_key
            if self.settings.base_url:
                kwargs["base_url"] = self.settings.base_url
            if self.settings.timeout is not None:
                kwargs["timeout"] = self.settings.timeout
            try:
                self._client = AsyncOpenAI(**kwargs)
            except OpenAIError as e:
                raise UpstreamError(f"Unable to create OpenAI client: {e}") from e
        return self._client

    async def create(
        self, request: CompletionRequest
    ) -> Union[Dict[str, Any], AsyncIterator[Dict[str, Any]]]:
        params = request.to_params()
        logger.debug("Calling chat completions", model=request.model, stream=request.stream)

        try:
            completion = await self.client.chat.completions.create(**params)
        except OpenAIError as e:
            logger.error("Chat completion failed", model=request.model, error=str(e))
            raise UpstreamError(f"Chat completion request failed: {e}") from e

        if request.stream:
            return self._iter_deltas(completion)
        return self._extract_message(completion)

    @staticmethod
    def _extract_message(completion: Any) -> Dict[str, Any]:
        choices = getattr(completion, "choices", None)
        if not choices:
            raise UpstreamError("Chat completion returned no choices")
        message = choices[0].message
        if message is None:
            raise UpstreamError("Chat completion returned no message")
        data = message.model_dump(exclude_none=True)
        # Only fields the chat API accepts back in an assistant message
        return {key: data[key] for key in _MESSAGE_FIELDS if key in data}

    @staticmethod
    async def _iter_deltas(stream: Any) -> AsyncIterator[Dict[str, Any]]:
        try:
            async for chunk in stream:
                if not chunk.choices:
                    # usage-only chunks carry no delta
                    continue
                yield chunk.choices[0].delta.model_dump(exclude_none=True)
        except OpenAIError as e:
            raise UpstreamError(f"Chat completion stream failed: {e}") from e
