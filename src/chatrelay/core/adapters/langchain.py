"""LangChain service adapter dispatching chain results onto output streams."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from ...io.schema import GenerationRequest, coerce_request
from ..errors import UpstreamInvocationFailed
from .base import ServiceAdapter
from .results import (
    IncrementalStream,
    PlainText,
    SingleMessage,
    UpstreamResult,
    classify_result,
    single_message_parts,
)
from .stream import OutputStream, SingleShotStream, UpstreamPullStream
from .utils import turns_to_langchain

LOGGER = logging.getLogger(__name__)

ChainFunction = Callable[[dict[str, Any]], Any]

_RESERVED_KEYS = frozenset({"turns"})


class LangChainAdapter(ServiceAdapter):
    """Serve the output of a LangChain function as a chat completion stream.

    ``chain_fn`` receives the forwarded request with its ``turns`` translated
    into LangChain messages. It may return (or resolve to) an async stream of
    message chunks, a single message, a plain string, or one of the
    :data:`~chatrelay.core.adapters.results.UpstreamResult` variants.
    """

    def __init__(
        self,
        chain_fn: ChainFunction,
        *,
        default_params: Mapping[str, Any] | None = None,
    ) -> None:
        if not callable(chain_fn):
            msg = "chain_fn must be callable"
            raise TypeError(msg)
        self._chain_fn = chain_fn
        self._default_params = dict(default_params or {})

        conflict = _RESERVED_KEYS.intersection(self._default_params)
        if conflict:
            joined = ", ".join(sorted(conflict))
            msg = f"default parameters cannot include reserved keys: {joined}"
            raise ValueError(msg)

    async def stream(self, request: GenerationRequest | Mapping[str, Any], /) -> OutputStream:
        forwarded = self.transform_request(request)
        result = await self._invoke(forwarded)
        return self._dispatch(classify_result(result))

    def transform_request(self, request: GenerationRequest | Mapping[str, Any]) -> dict[str, Any]:
        """Return the payload forwarded to ``chain_fn``.

        The caller's request is never mutated; a new dict is built with the
        adapter defaults underneath the request's own fields.
        """

        validated = coerce_request(request)
        payload: dict[str, Any] = {**self._default_params, **validated.passthrough_fields()}
        if validated.has_turns:
            payload["turns"] = turns_to_langchain(validated.turns)
        return payload

    async def _invoke(self, payload: dict[str, Any]) -> Any:
        try:
            result = self._chain_fn(payload)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            msg = "upstream generation function failed"
            raise UpstreamInvocationFailed(msg) from exc
        return result

    def _dispatch(self, result: UpstreamResult) -> OutputStream:
        match result:
            case IncrementalStream(source=source):
                LOGGER.debug("dispatching incremental upstream stream")
                return UpstreamPullStream(source)
            case SingleMessage():
                content, function_call = single_message_parts(result)
                LOGGER.debug("dispatching single message (function_call=%s)", function_call is not None)
                return SingleShotStream(content, function_call)
            case PlainText(text=text):
                LOGGER.debug("dispatching plain text result of length %s", len(text))
                return SingleShotStream(text)
        raise AssertionError(f"unhandled upstream result {result!r}")  # pragma: no cover


async def adapt(
    chain_fn: ChainFunction,
    request: GenerationRequest | Mapping[str, Any],
    /,
    **kwargs: Any,
) -> OutputStream:
    """Build a :class:`LangChainAdapter` for ``chain_fn`` and stream ``request``."""

    return await LangChainAdapter(chain_fn, **kwargs).stream(request)


__all__ = ["ChainFunction", "LangChainAdapter", "adapt"]
