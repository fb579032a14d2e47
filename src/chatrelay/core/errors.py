"""Custom exception types raised by the chatrelay adapter layer."""

from __future__ import annotations


class AdapterError(RuntimeError):
    """Raised when an adapter cannot fulfil a request."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidGenerationRequest(AdapterError):
    """The caller-supplied request payload failed validation."""


class UpstreamInvocationFailed(AdapterError):
    """The upstream generation function raised before producing a result."""


class InvalidUpstreamResult(AdapterError):
    """The upstream generation function returned a value of unknown shape."""


class UpstreamReadFailed(AdapterError):
    """Reading the next fragment from an open upstream stream failed."""


class FrameEncodingError(AdapterError):
    """A wire frame could not be encoded or decoded."""
