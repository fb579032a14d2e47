"""Request schemas accepted by chatrelay adapters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..core.errors import InvalidGenerationRequest
from ..core.message import MessageRole

_FORWARDED_ROLES = frozenset(role.value for role in MessageRole)


class Turn(BaseModel):
    """One entry of the conversational history supplied by the client.

    Only user, assistant and system turns are forwarded upstream, so content
    is checked for those roles alone; other turns are dropped unread.
    """

    model_config = ConfigDict(frozen=True)

    role: str = Field(..., description="Role tag; only user, assistant and system are forwarded upstream.")
    content: Any = Field("", description="Text content of the turn.")

    @property
    def forwarded(self) -> bool:
        return self.role in _FORWARDED_ROLES

    @model_validator(mode="after")
    def check_forwarded_content(self) -> "Turn":
        if self.forwarded and not isinstance(self.content, str):
            msg = f"content of a {self.role} turn must be a string"
            raise ValueError(msg)
        return self


class GenerationRequest(BaseModel):
    """Client payload forwarded to the upstream generation function.

    Fields other than ``turns`` are kept verbatim as pydantic extras and passed
    through to the upstream function untouched.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    turns: Tuple[Turn, ...] = Field(default=(), description="Ordered conversational history.")

    @property
    def has_turns(self) -> bool:
        """Whether the caller supplied a ``turns`` field at all."""

        return "turns" in self.model_fields_set

    def passthrough_fields(self) -> dict[str, Any]:
        """Return a fresh dict of every field other than ``turns``."""

        return dict(self.model_extra or {})


def coerce_request(request: GenerationRequest | Mapping[str, Any]) -> GenerationRequest:
    """Validate a mapping into a :class:`GenerationRequest`."""

    if isinstance(request, GenerationRequest):
        return request
    if not isinstance(request, Mapping):
        msg = f"request must be a mapping, got {type(request).__name__}"
        raise InvalidGenerationRequest(msg)

    try:
        return GenerationRequest.model_validate(dict(request))
    except ValidationError as exc:
        msg = f"invalid generation request: {exc.error_count()} validation error(s)"
        raise InvalidGenerationRequest(msg) from exc


__all__ = ["GenerationRequest", "Turn", "coerce_request"]
