from typing import Any, AsyncIterator, Dict, List
import structlog

from swarm.domain.exceptions import UpstreamError

logger = structlog.get_logger(__name__)

# Markers bracketing the deltas of one assistant turn
STREAM_START: Dict[str, str] = {"delim": "start"}
STREAM_END: Dict[str, str] = {"delim": "end"}


def new_stream_message(sender: str) -> Dict[str, Any]:
    """Empty accumulator for one streamed assistant turn"""

    return {
        "content": "",
        "sender": sender,
        "role": "assistant",
        "tool_calls": {},
    }


def _new_tool_call() -> Dict[str, Any]:
    return {"id": "", "type": "function", "function": {"name": "", "arguments": ""}}


def merge_chunk(message: Dict[str, Any], delta: Dict[str, Any]) -> None:
    """Fold one delta into the accumulating message, in place.

    Role overwrites, content appends, and tool-call fragments accumulate per
    ``index`` with name and argument text concatenated in arrival order.
    """
    if delta.get("role"):
        message["role"] = delta["role"]

    if delta.get("content"):
        message["content"] = (message.get("content") or "") + delta["content"]

    for fragment in delta.get("tool_calls") or []:
        index = fragment.get("index", 0)
        call = message["tool_calls"].setdefault(index, _new_tool_call())
        if fragment.get("id"):
            call["id"] = fragment["id"]
        if fragment.get("type"):
            call["type"] = fragment["type"]
        function = fragment.get("function") or {}
        if function.get("name"):
            call["function"]["name"] += function["name"]
        if function.get("arguments"):
            call["function"]["arguments"] += function["arguments"]


def finalize_message(message: Dict[str, Any]) -> Dict[str, Any]:
    """Turn the index-keyed tool-call accumulator into an ordered list, or None"""

    accumulated = message.get("tool_calls") or {}
    tool_calls: List[Dict[str, Any]] = [accumulated[i] for i in sorted(accumulated)]
    message["tool_calls"] = tool_calls or None
    return message


class StreamingHandler:
    """Reconstructs one assistant message from a stream of deltas.

    ``consume`` forwards every delta unmodified, between the start and end
    markers, while folding it into ``message``. The stream is consumed once.
    """

    def __init__(self, sender: str):
        self.sender = sender
        self._message = new_stream_message(sender)
        self.delta_count = 0
        self.completed = False

    async def consume(self, stream: AsyncIterator[Dict[str, Any]]) -> AsyncIterator[Dict[str, Any]]:
        if self.completed:
            raise RuntimeError("stream already consumed")

        yield dict(STREAM_START)
        async for delta in stream:
            if not isinstance(delta, dict):
                raise UpstreamError(f"Malformed stream delta: {delta!r}")
            self.delta_count += 1
            yield delta
            merge_chunk(self._message, delta)
        yield dict(STREAM_END)

        finalize_message(self._message)
        self.completed = True
        logger.debug("Stream reconstructed", sender=self.sender, deltas=self.delta_count)

    @property
    def message(self) -> Dict[str, Any]:
        if not self.completed:
            raise RuntimeError("stream has not been fully consumed")
        return self._message
