"""Tagged union describing what an upstream generation function returned."""

from __future__ import annotations

from collections.abc import AsyncIterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from langchain_core.messages import BaseMessage

from ..errors import AdapterError, InvalidUpstreamResult
from ..message import FunctionCall, function_call_payload
from .utils import flatten_content


@dataclass(frozen=True, slots=True)
class IncrementalStream:
    """Async iterable of message fragments, consumed once."""

    source: AsyncIterable[Any]


@dataclass(frozen=True, slots=True)
class SingleMessage:
    """One complete message, optionally carrying a function call."""

    content: str | None = ""
    function_call: FunctionCall | Mapping[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class PlainText:
    """A bare string result."""

    text: str


UpstreamResult = Union[IncrementalStream, SingleMessage, PlainText]


def classify_result(value: Any) -> UpstreamResult:
    """Tag a raw upstream return value with its :data:`UpstreamResult` variant.

    Values that are already tagged are returned unchanged.
    """

    if isinstance(value, (IncrementalStream, SingleMessage, PlainText)):
        return value

    if isinstance(value, BaseMessage):
        return SingleMessage(
            content=_message_content(value.content),
            function_call=value.additional_kwargs.get("function_call"),
        )

    if isinstance(value, str):
        return PlainText(value)

    if isinstance(value, Mapping):
        if "content" not in value and "function_call" not in value:
            msg = "mapping results must carry 'content' or 'function_call'"
            raise InvalidUpstreamResult(msg)
        return SingleMessage(
            content=_message_content(value.get("content")),
            function_call=value.get("function_call"),
        )

    if callable(getattr(value, "__aiter__", None)):
        return IncrementalStream(value)

    msg = f"invalid return type from upstream function: {type(value).__name__}"
    raise InvalidUpstreamResult(msg)


def single_message_parts(result: SingleMessage) -> tuple[str, dict[str, Any] | None]:
    """Return the content and JSON-ready function call of a single message."""

    try:
        function_call = function_call_payload(result.function_call)
    except TypeError as exc:
        raise InvalidUpstreamResult(str(exc)) from exc
    return result.content or "", function_call


def _message_content(content: Any) -> str | None:
    try:
        return flatten_content(content)
    except AdapterError as exc:
        raise InvalidUpstreamResult(str(exc)) from exc


__all__ = [
    "IncrementalStream",
    "PlainText",
    "SingleMessage",
    "UpstreamResult",
    "classify_result",
    "single_message_parts",
]
