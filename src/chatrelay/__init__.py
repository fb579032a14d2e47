"""Normalize LangChain chain results into OpenAI-style event streams.

A chain may answer with an async stream of message chunks, a single message
or a plain string. :class:`LangChainAdapter` turns each of those into the same
pull-driven sequence of ``data:`` frames terminated by ``data: [DONE]``.
"""

from __future__ import annotations

from .core.adapters import (
    DONE_FRAME,
    IncrementalStream,
    LangChainAdapter,
    OutputStream,
    PlainText,
    ServiceAdapter,
    SingleMessage,
    StreamState,
    adapt,
    replay_content,
    replay_stream,
)
from .core.errors import (
    AdapterError,
    FrameEncodingError,
    InvalidGenerationRequest,
    InvalidUpstreamResult,
    UpstreamInvocationFailed,
    UpstreamReadFailed,
)
from .core.message import FunctionCall
from .io.schema import GenerationRequest, Turn

__all__ = [
    "AdapterError",
    "DONE_FRAME",
    "FrameEncodingError",
    "FunctionCall",
    "GenerationRequest",
    "IncrementalStream",
    "InvalidGenerationRequest",
    "InvalidUpstreamResult",
    "LangChainAdapter",
    "OutputStream",
    "PlainText",
    "ServiceAdapter",
    "SingleMessage",
    "StreamState",
    "Turn",
    "UpstreamInvocationFailed",
    "UpstreamReadFailed",
    "adapt",
    "replay_content",
    "replay_stream",
]

__version__ = "0.1.0"
