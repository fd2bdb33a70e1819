from .streaming_handler import (
    STREAM_END,
    STREAM_START,
    StreamingHandler,
    finalize_message,
    merge_chunk,
    new_stream_message,
)

__all__ = [
    "STREAM_END",
    "STREAM_START",
    "StreamingHandler",
    "finalize_message",
    "merge_chunk",
    "new_stream_message",
]
