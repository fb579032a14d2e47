"""Adapter interfaces, result classification and output streams."""

from __future__ import annotations

from .base import ServiceAdapter
from .frames import DONE_FRAME, decode_frame, encode_delta
from .langchain import LangChainAdapter, adapt
from .results import (
    IncrementalStream,
    PlainText,
    SingleMessage,
    UpstreamResult,
    classify_result,
)
from .stream import (
    OutputStream,
    SingleShotStream,
    StreamState,
    UpstreamPullStream,
    replay_content,
    replay_stream,
)
from .utils import to_fragment, turns_to_langchain

__all__ = [
    "DONE_FRAME",
    "IncrementalStream",
    "LangChainAdapter",
    "OutputStream",
    "PlainText",
    "ServiceAdapter",
    "SingleMessage",
    "SingleShotStream",
    "StreamState",
    "UpstreamPullStream",
    "UpstreamResult",
    "adapt",
    "classify_result",
    "decode_frame",
    "encode_delta",
    "replay_content",
    "replay_stream",
    "to_fragment",
    "turns_to_langchain",
]
