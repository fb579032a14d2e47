"""Pull-driven output streams that turn upstream results into wire frames."""

from __future__ import annotations

import abc
import inspect
import logging
from asyncio import CancelledError
from collections import deque
from collections.abc import AsyncIterable, Mapping
from enum import Enum
from typing import Any, AsyncIterator, Deque, List

from ..errors import AdapterError, FrameEncodingError, InvalidUpstreamResult, UpstreamReadFailed
from .frames import DONE_FRAME, decode_frame, encode_delta
from .utils import to_fragment

LOGGER = logging.getLogger(__name__)


class StreamState(str, Enum):
    """Lifecycle states of an :class:`OutputStream`."""

    IDLE = "idle"
    AWAITING_UPSTREAM = "awaiting_upstream"
    EMITTING = "emitting"
    DRAINING = "draining"
    CLOSED = "closed"
    ERRORED = "errored"


class OutputStream(AsyncIterator[bytes], metaclass=abc.ABCMeta):
    """Async iterator of ``data:`` frames driven entirely by the consumer.

    Each ``__anext__`` call is one pull. Subclasses implement :meth:`_pull`,
    which queues frames into the sink and closes it once the terminal
    ``[DONE]`` frame is queued. The stream ends once the queue is drained
    after the sink closed. Errors raised by :meth:`_pull` reach the consumer
    through ``__anext__``; :meth:`aclose` cancels the stream and never raises.
    """

    def __init__(self) -> None:
        self._buffer: Deque[bytes] = deque()
        self._state = StreamState.IDLE
        self._sink_closed = False

    def __aiter__(self) -> OutputStream:
        return self

    async def __anext__(self) -> bytes:
        frame = self._pop_frame()
        if frame is not None:
            return frame

        if self._sink_closed:
            raise StopAsyncIteration

        await self._pull()

        frame = self._pop_frame()
        if frame is None:
            # The consumer cancelled the stream while the pull was suspended.
            raise StopAsyncIteration
        return frame

    @property
    def state(self) -> StreamState:
        """Current lifecycle state."""

        return self._state

    @property
    def closed(self) -> bool:
        """Whether no further frames can be pulled."""

        return self._sink_closed and not self._buffer

    async def aclose(self) -> None:
        """Cancel the stream from the consumer side and release resources."""

        if not self.closed:
            LOGGER.debug("%s cancelled by consumer in state %s", type(self).__name__, self._state.value)
        self._buffer.clear()
        if self._state is not StreamState.ERRORED:
            self._state = StreamState.CLOSED
        await self._cleanup()

    @abc.abstractmethod
    async def _pull(self) -> None:
        """Queue the frames answering one downstream pull."""

    async def _release_upstream(self) -> None:
        """Allow subclasses to release upstream resources. Must not raise."""

    async def _cleanup(self) -> None:
        self._close_sink()
        await self._release_upstream()

    def _close_sink(self) -> None:
        self._sink_closed = True

    def _enqueue(self, frame: bytes) -> None:
        if self._sink_closed:
            LOGGER.debug("dropping frame queued after the sink closed")
            return
        self._buffer.append(frame)

    async def _finish(self) -> None:
        self._enqueue(DONE_FRAME)
        self._state = StreamState.DRAINING
        await self._cleanup()

    def _pop_frame(self) -> bytes | None:
        if not self._buffer:
            return None
        frame = self._buffer.popleft()
        if not self._buffer and self._state is StreamState.DRAINING:
            self._state = StreamState.CLOSED
        return frame


class SingleShotStream(OutputStream):
    """Stream wrapping one complete message: a content frame, then ``[DONE]``."""

    def __init__(self, content: str | None = "", function_call: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._frame = encode_delta(content if content is not None else "", function_call)

    async def _pull(self) -> None:
        self._state = StreamState.EMITTING
        self._enqueue(self._frame)
        await self._finish()


class UpstreamPullStream(OutputStream):
    """Stream proxying an async iterable of upstream fragments.

    The read cursor is opened once, at construction, and exactly one upstream
    item is read per pull. Reaching the end of the upstream queues ``[DONE]``
    and releases the cursor before the frame is handed out.
    """

    def __init__(self, source: AsyncIterable[Any]) -> None:
        super().__init__()
        self._source = source
        self._cursor = self._open_cursor(source)
        self._cursor_released = False
        self._reading = False

    async def _pull(self) -> None:
        self._state = StreamState.AWAITING_UPSTREAM
        try:
            item = await self._read()
        except StopAsyncIteration:
            if await self._abandoned():
                return
            await self._finish()
            LOGGER.debug("upstream stream exhausted")
            return
        except CancelledError:
            await self.aclose()
            raise
        except Exception as exc:
            if await self._abandoned():
                return
            await self._fail()
            msg = "reading from the upstream stream failed"
            raise UpstreamReadFailed(msg) from exc

        if await self._abandoned():
            return

        try:
            fragment = to_fragment(item)
            frame = encode_delta(fragment.content, fragment.function_call)
        except FrameEncodingError:
            await self._fail()
            raise
        except AdapterError as exc:
            await self._fail()
            raise FrameEncodingError(str(exc)) from exc

        self._enqueue(frame)
        self._state = StreamState.EMITTING

    async def _read(self) -> Any:
        self._reading = True
        try:
            return await self._cursor.__anext__()
        finally:
            self._reading = False

    async def _abandoned(self) -> bool:
        # The consumer cancelled while the read was pending; the cursor
        # release was deferred until the read returned.
        if not self._sink_closed:
            return False
        await self._release_upstream()
        return True

    async def _fail(self) -> None:
        self._state = StreamState.ERRORED
        self._buffer.clear()
        await self._cleanup()
        LOGGER.info("upstream stream failed; resources released")

    async def _release_upstream(self) -> None:
        if self._cursor_released:
            return
        if self._reading:
            LOGGER.debug("deferring upstream release until the pending read returns")
            return
        self._cursor_released = True

        for target in (self._cursor, self._source):
            closer = getattr(target, "aclose", None) or getattr(target, "close", None)
            if closer is None or not callable(closer):
                continue
            try:
                result = closer()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                LOGGER.debug("ignoring error while releasing upstream cursor", exc_info=True)
            return

    @staticmethod
    def _open_cursor(source: AsyncIterable[Any]) -> Any:
        iterator_factory = getattr(source, "__aiter__", None)
        if iterator_factory is None or not callable(iterator_factory):
            msg = "upstream stream must support async iteration"
            raise InvalidUpstreamResult(msg)
        try:
            cursor = iterator_factory()
        except Exception as exc:
            msg = "upstream stream could not be opened"
            raise InvalidUpstreamResult(msg) from exc

        if not hasattr(cursor, "__anext__"):
            msg = "upstream stream iterator must define '__anext__'"
            raise InvalidUpstreamResult(msg)
        return cursor


async def replay_stream(stream: OutputStream) -> List[bytes]:
    """Collect every frame emitted by a stream, closing it afterwards."""

    frames: List[bytes] = []
    try:
        async for frame in stream:
            frames.append(frame)
    finally:
        await stream.aclose()
    return frames


async def replay_content(stream: OutputStream) -> str:
    """Concatenate the ``content`` deltas carried by a stream."""

    fragments: List[str] = []
    for frame in await replay_stream(stream):
        payload = decode_frame(frame)
        if payload is None:
            continue
        for choice in payload.get("choices", []):
            content = choice.get("delta", {}).get("content")
            if isinstance(content, str):
                fragments.append(content)
    return "".join(fragments)


__all__ = [
    "OutputStream",
    "SingleShotStream",
    "StreamState",
    "UpstreamPullStream",
    "replay_content",
    "replay_stream",
]
