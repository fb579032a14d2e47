"""Request schemas for chatrelay."""

from .schema import GenerationRequest, Turn, coerce_request

__all__ = [
    "GenerationRequest",
    "Turn",
    "coerce_request",
]
