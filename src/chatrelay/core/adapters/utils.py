"""Pure conversion helpers shared by the dispatcher and the stream normalizer."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from ...io.schema import Turn
from ..errors import AdapterError
from ..message import MessageFragment, MessageRole, function_call_payload

_ROLE_TO_MESSAGE: dict[str, type[BaseMessage]] = {
    MessageRole.USER.value: HumanMessage,
    MessageRole.ASSISTANT.value: AIMessage,
    MessageRole.SYSTEM.value: SystemMessage,
}


def turns_to_langchain(turns: Sequence[Turn]) -> list[BaseMessage]:
    """Convert client turns into LangChain messages.

    Turns whose role is not user, assistant or system are dropped.
    """

    converted: list[BaseMessage] = []
    for turn in turns:
        message_cls = _ROLE_TO_MESSAGE.get(turn.role)
        if message_cls is None:
            continue
        converted.append(message_cls(content=turn.content))
    return converted


def flatten_content(content: Any) -> str | None:
    """Collapse LangChain message content into a plain string.

    Multimodal content lists keep only their text parts.
    """

    if content is None or isinstance(content, str):
        return content

    if isinstance(content, Sequence) and not isinstance(content, (bytes, bytearray)):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, Mapping) and block.get("type") == "text":
                text = block.get("text")
                if isinstance(text, str):
                    parts.append(text)
        return "".join(parts)

    msg = f"message content must be a string, got {type(content).__name__}"
    raise AdapterError(msg)


def to_fragment(value: Any) -> MessageFragment:
    """Normalize one upstream item into a :class:`MessageFragment`."""

    if isinstance(value, str):
        return MessageFragment(content=value)

    if isinstance(value, BaseMessage):
        content = value.content
        function_call = value.additional_kwargs.get("function_call")
    elif isinstance(value, Mapping):
        content = value.get("content")
        function_call = value.get("function_call")
        if function_call is None:
            function_call = _nested_function_call(value.get("additional_kwargs"))
    elif hasattr(value, "content"):
        content = getattr(value, "content")
        function_call = getattr(value, "function_call", None)
        if function_call is None:
            function_call = _nested_function_call(getattr(value, "additional_kwargs", None))
    else:
        msg = f"unsupported upstream fragment type {type(value).__name__}"
        raise AdapterError(msg)

    try:
        payload = function_call_payload(function_call)
    except TypeError as exc:
        raise AdapterError(str(exc)) from exc

    return MessageFragment(content=flatten_content(content), function_call=payload)


def _nested_function_call(additional_kwargs: Any) -> Any:
    if isinstance(additional_kwargs, Mapping):
        return additional_kwargs.get("function_call")
    return None


__all__ = ["flatten_content", "to_fragment", "turns_to_langchain"]
