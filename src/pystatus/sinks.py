"""Publish sinks receiving span snapshots."""

from collections.abc import Callable
from queue import Queue
from typing import Protocol

from pystatus.models import SpanSnapshot


class PublishSink(Protocol):
    """Fire-and-forget receiver of finalized span snapshots."""

    def publish(self, span_id: int, snapshot: SpanSnapshot) -> None:
        """Receive the snapshot published for ``span_id``."""
        ...


class QueueSink:
    """Sink that pushes snapshots to a thread-safe Queue."""

    def __init__(self, queue: Queue[SpanSnapshot]) -> None:
        """Initialize the QueueSink."""
        self._queue = queue

    def publish(self, span_id: int, snapshot: SpanSnapshot) -> None:
        """Queue the snapshot for the consumer."""
        self._queue.put(snapshot)


class CallbackSink:
    """Sink that forwards snapshots to a plain callable."""

    def __init__(self, callback: Callable[[int, SpanSnapshot], None]) -> None:
        """Initialize the CallbackSink."""
        self._callback = callback

    def publish(self, span_id: int, snapshot: SpanSnapshot) -> None:
        """Pass the snapshot to the callback."""
        self._callback(span_id, snapshot)
