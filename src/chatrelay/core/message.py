"""Message primitives shared by the dispatcher and the stream normalizer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MessageRole(str, Enum):
    """Conversation roles understood by the LangChain translation layer."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True, slots=True)
class FunctionCall:
    """A legacy OpenAI-style function call attached to an assistant message.

    ``arguments`` is the raw JSON blob produced by the model. It is forwarded
    untouched because streaming fragments routinely carry partial JSON.
    """

    name: str
    arguments: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            msg = "function call name must be a string"
            raise TypeError(msg)
        if not isinstance(self.arguments, str):
            msg = "function call arguments must be a string"
            raise TypeError(msg)

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass(frozen=True, slots=True)
class MessageFragment:
    """Normalized view over one unit read from an upstream source."""

    content: str | None = None
    function_call: Mapping[str, Any] | None = None


def function_call_payload(value: FunctionCall | Mapping[str, Any] | Any) -> dict[str, Any] | None:
    """Return a JSON-ready mapping for a function call descriptor.

    ``None`` and the empty string both mean no function call.
    """

    if value is None or value == "":
        return None
    if isinstance(value, FunctionCall):
        return value.to_payload()
    if isinstance(value, Mapping):
        return dict(value)
    if hasattr(value, "model_dump"):
        dumped = value.model_dump()
        if isinstance(dumped, Mapping):
            return dict(dumped)

    msg = f"unsupported function call descriptor type {type(value).__name__}"
    raise TypeError(msg)


__all__ = ["FunctionCall", "MessageFragment", "MessageRole", "function_call_payload"]
