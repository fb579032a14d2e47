"""Adapter interface shared by service adapter implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ...io.schema import GenerationRequest
from .stream import OutputStream


class ServiceAdapter(ABC):
    """Abstract interface for adapters that serve chat completion streams."""

    @abstractmethod
    async def stream(self, request: GenerationRequest | Mapping[str, Any], /) -> OutputStream:
        """Run the upstream backend for ``request`` and return its output stream."""
