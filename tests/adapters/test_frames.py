from __future__ import annotations

import pytest

from chatrelay.core.adapters.frames import (
    DONE_FRAME,
    build_chunk,
    decode_frame,
    encode_delta,
    is_done_frame,
)
from chatrelay.core.errors import FrameEncodingError


def test_encode_delta_uses_compact_json_framing() -> None:
    frame = encode_delta("hi")

    assert frame == b'data: {"choices":[{"delta":{"role":"assistant","content":"hi"}}]}\n\n'


def test_encode_delta_appends_function_call_after_content() -> None:
    frame = encode_delta("", {"name": "f", "arguments": "{}"})

    assert frame == (
        b'data: {"choices":[{"delta":{"role":"assistant","content":"",'
        b'"function_call":{"name":"f","arguments":"{}"}}}]}\n\n'
    )


def test_encode_delta_omits_absent_content() -> None:
    assert build_chunk(None) == {"choices": [{"delta": {"role": "assistant"}}]}


def test_encode_delta_keeps_non_ascii_text_as_utf8() -> None:
    frame = encode_delta("héllo ✓")

    assert "héllo ✓".encode("utf-8") in frame


def test_encode_delta_rejects_unserializable_payloads() -> None:
    with pytest.raises(FrameEncodingError):
        encode_delta("x", {"name": "f", "arguments": {1, 2}})

    with pytest.raises(FrameEncodingError):
        encode_delta("x", {"name": "f", "arguments": float("nan")})


def test_done_frame_is_literal_sentinel() -> None:
    assert DONE_FRAME == b"data: [DONE]\n\n"
    assert is_done_frame("data: [DONE]\n\n")
    assert not is_done_frame(encode_delta("[DONE]"))


def test_decode_frame_inverts_encoding() -> None:
    payload = decode_frame(encode_delta("abc", {"name": "f", "arguments": "{}"}))

    assert payload == {
        "choices": [
            {
                "delta": {
                    "role": "assistant",
                    "content": "abc",
                    "function_call": {"name": "f", "arguments": "{}"},
                }
            }
        ]
    }
    assert decode_frame(DONE_FRAME) is None


@pytest.mark.parametrize(
    "frame",
    [
        b'{"choices":[]}\n\n',
        b"data: {}",
        b"data: not-json\n\n",
        b"data: [1, 2]\n\n",
    ],
)
def test_decode_frame_rejects_malformed_frames(frame: bytes) -> None:
    with pytest.raises(FrameEncodingError):
        decode_frame(frame)


def test_decode_frame_accepts_text_sentinel() -> None:
    assert decode_frame("data: [DONE]\n\n") is None
