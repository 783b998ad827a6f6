"""Watch stream decoding.

A watch response body is a sequence of newline-delimited JSON objects of the
form ``{"type": "ADDED", "object": {...}}``. The decoders here turn such a line
stream into a lazy sequence of typed :class:`WatchEvent` values.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import threading
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from kubeclient.integrations.kubernetes.exceptions import MalformedWatchEventError
from kubeclient.integrations.kubernetes.models.base import KubeModel, Status

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=KubeModel)

# Errors that mean the server (or the network) dropped the stream.
_SEVERED = (httpx.TransportError, httpx.StreamError, ConnectionError)

_CANCELLED = object()
_EXHAUSTED = object()


class WatchEventType(StrEnum):
    """Watch event types sent by the API server."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class WatchEvent(Generic[ModelT]):
    """One decoded watch event.

    Exactly one of ``resource``, ``status`` or ``error`` is set: ``resource``
    for ADDED/MODIFIED/DELETED, ``status`` for a server-sent ERROR, ``error``
    for a line that could not be decoded.
    """

    event_type: WatchEventType
    resource: ModelT | None = None
    status: Status | None = None
    error: MalformedWatchEventError | None = None

    @property
    def is_error(self) -> bool:
        return self.event_type is WatchEventType.ERROR


def decode_watch_line(line: str | bytes, resource_type: type[ModelT]) -> WatchEvent[ModelT] | None:
    """Decode one line of a watch stream.

    Returns:
        The decoded event, or None for a blank keep-alive line. Lines that
        cannot be decoded produce an ERROR event carrying
        MalformedWatchEventError instead of raising.
    """
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    if not line.strip():
        return None

    try:
        payload = json.loads(line)
    except json.JSONDecodeError as e:
        return _malformed(f"Invalid JSON in watch event: {e.msg}", line)

    if not isinstance(payload, dict):
        return _malformed("Watch event is not a JSON object", line)

    try:
        event_type = WatchEventType(payload.get("type"))
    except ValueError:
        return _malformed(f"Unknown watch event type: {payload.get('type')!r}", line)

    obj: Any = payload.get("object")
    if not isinstance(obj, dict):
        return _malformed("Watch event has no object", line)

    try:
        if event_type is WatchEventType.ERROR:
            return WatchEvent(event_type=event_type, status=Status.model_validate(obj))
        return WatchEvent(event_type=event_type, resource=resource_type.model_validate(obj))
    except ValidationError as e:
        return _malformed(f"Watch event object failed validation: {e.error_count()} error(s)", line)


def _malformed(message: str, line: str) -> WatchEvent[Any]:
    logger.warning("malformed_watch_event", reason=message)
    return WatchEvent(
        event_type=WatchEventType.ERROR,
        error=MalformedWatchEventError(message, line=line),
    )


def decode_watch_stream(
    lines: Iterable[str | bytes],
    resource_type: type[ModelT],
    *,
    cancel: threading.Event | None = None,
) -> Iterator[WatchEvent[ModelT]]:
    """Lazily decode a line stream into watch events.

    The sequence ends when the line stream is exhausted, when the stream is
    severed by a transport error, or when ``cancel`` is set (checked before
    each line). On exit the underlying iterator is closed if it supports it.

    A read already blocked on ``lines`` ends only when the owner of the
    stream closes it; :meth:`KubernetesClient.watch` closes the response as
    soon as ``cancel`` is set, which surfaces here as a severed stream.

    Args:
        lines: Line source, typically ``response.iter_lines()``.
        resource_type: Model to validate event objects against.
        cancel: Optional event that stops consumption when set.

    Yields:
        Decoded events, in stream order.
    """
    source = iter(lines)
    try:
        while cancel is None or not cancel.is_set():
            try:
                line = next(source)
            except StopIteration:
                break
            except _SEVERED as e:
                if cancel is not None and cancel.is_set():
                    logger.debug("watch_stream_cancelled")
                else:
                    logger.info("watch_stream_severed", error=str(e))
                break
            event = decode_watch_line(line, resource_type)
            if event is not None:
                yield event
        else:
            logger.debug("watch_stream_cancelled")
    finally:
        close = getattr(source, "close", None)
        if close is not None:
            close()


async def adecode_watch_stream(
    lines: AsyncIterable[str | bytes],
    resource_type: type[ModelT],
    *,
    cancel: asyncio.Event | None = None,
) -> AsyncIterator[WatchEvent[ModelT]]:
    """Async counterpart of :func:`decode_watch_stream`.

    Setting ``cancel`` also interrupts a read that is waiting for the next
    line; the pending read is cancelled and the source closed.

    Args:
        lines: Async line source, typically ``response.aiter_lines()``.
        resource_type: Model to validate event objects against.
        cancel: Optional event that stops consumption when set.

    Yields:
        Decoded events, in stream order.
    """
    source = aiter(lines)
    try:
        while cancel is None or not cancel.is_set():
            try:
                line = await _next_line(source, cancel)
            except StopAsyncIteration:
                break
            except _SEVERED as e:
                logger.info("watch_stream_severed", error=str(e))
                break
            if line is _CANCELLED:
                break
            event = decode_watch_line(line, resource_type)
            if event is not None:
                yield event
        if cancel is not None and cancel.is_set():
            logger.debug("watch_stream_cancelled")
    finally:
        aclose = getattr(source, "aclose", None)
        if aclose is not None:
            await aclose()


async def _next_line(source: AsyncIterator[Any], cancel: asyncio.Event | None) -> Any:
    """Read the next line, or return ``_CANCELLED`` if ``cancel`` is set first."""
    if cancel is None:
        return await anext(source)

    read = asyncio.ensure_future(_read(source))
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({read, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not read.done():
            read.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await read

    if read.cancelled():
        return _CANCELLED

    line = read.result()
    if line is _EXHAUSTED:
        raise StopAsyncIteration
    return line


async def _read(source: AsyncIterator[Any]) -> Any:
    # StopAsyncIteration must not escape a task.
    try:
        return await anext(source)
    except StopAsyncIteration:
        return _EXHAUSTED
