"""Server-sent event framing for OpenAI-style chat completion chunks."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from ..errors import FrameEncodingError

DATA_PREFIX = b"data: "
FRAME_TERMINATOR = b"\n\n"
DONE_FRAME = DATA_PREFIX + b"[DONE]" + FRAME_TERMINATOR

ASSISTANT_ROLE = "assistant"


def build_chunk(content: str | None, function_call: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Return the chat completion chunk carrying a single assistant delta.

    ``content`` is omitted from the delta when it is ``None``; ``function_call``
    is omitted when absent.
    """

    delta: dict[str, Any] = {"role": ASSISTANT_ROLE}
    if content is not None:
        delta["content"] = content
    if function_call is not None:
        delta["function_call"] = dict(function_call)
    return {"choices": [{"delta": delta}]}


def encode_delta(content: str | None, function_call: Mapping[str, Any] | None = None) -> bytes:
    """Encode one assistant delta as a ``data:`` frame."""

    chunk = build_chunk(content, function_call)
    try:
        body = json.dumps(chunk, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        msg = "chunk payload is not JSON serializable"
        raise FrameEncodingError(msg) from exc
    return DATA_PREFIX + body.encode("utf-8") + FRAME_TERMINATOR


def is_done_frame(frame: bytes | str) -> bool:
    """Return True when ``frame`` is the terminal sentinel."""

    raw = frame.encode("utf-8") if isinstance(frame, str) else frame
    return raw == DONE_FRAME


def decode_frame(frame: bytes | str) -> dict[str, Any] | None:
    """Parse a frame produced by :func:`encode_delta`.

    Returns ``None`` for the terminal sentinel.
    """

    raw = frame.encode("utf-8") if isinstance(frame, str) else bytes(frame)
    if not raw.startswith(DATA_PREFIX) or not raw.endswith(FRAME_TERMINATOR):
        msg = "frame must be a single 'data:' record terminated by a blank line"
        raise FrameEncodingError(msg)
    if is_done_frame(raw):
        return None

    body = raw[len(DATA_PREFIX) : -len(FRAME_TERMINATOR)]
    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = "frame body is not valid JSON"
        raise FrameEncodingError(msg) from exc
    if not isinstance(payload, dict):
        msg = "frame body must decode to an object"
        raise FrameEncodingError(msg)
    return payload


__all__ = [
    "ASSISTANT_ROLE",
    "DONE_FRAME",
    "build_chunk",
    "decode_frame",
    "encode_delta",
    "is_done_frame",
]
