"""Core data structures and error types for chatrelay."""

from __future__ import annotations

from .errors import (
    AdapterError,
    FrameEncodingError,
    InvalidGenerationRequest,
    InvalidUpstreamResult,
    UpstreamInvocationFailed,
    UpstreamReadFailed,
)
from .message import FunctionCall, MessageFragment, MessageRole

__all__ = [
    "AdapterError",
    "FrameEncodingError",
    "FunctionCall",
    "InvalidGenerationRequest",
    "InvalidUpstreamResult",
    "MessageFragment",
    "MessageRole",
    "UpstreamInvocationFailed",
    "UpstreamReadFailed",
]
