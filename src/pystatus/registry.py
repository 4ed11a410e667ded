"""Span registry: periodic sampling and request accounting."""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from pystatus.errors import ConfigError
from pystatus.models import Category
from pystatus.monitor import SampleSource
from pystatus.sinks import PublishSink
from pystatus.span import Span, SpanConfig

logger = logging.getLogger(__name__)


class SpanRegistry:
    """
    Owner of every span's history.

    Span state changes only through two entry points: ``tick`` (driven by one
    sampler task per span) and ``record`` (called once per finished request).
    Both run on the event loop thread. ``tick`` suspends only while awaiting
    the sample source and reads the clock after resuming, so requests
    recorded in the meantime are seen by the bucket boundary check.
    """

    def __init__(
        self,
        spans: Sequence[SpanConfig],
        source: SampleSource,
        sink: PublishSink,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the SpanRegistry.

        Args:
            spans: Span configurations, in span id order. Must not be empty.
            source: Provider of OS samples.
            sink: Receiver of the snapshot published after each tick.
            clock: Returns the current time in epoch seconds.

        Raises:
            ConfigError: If no spans are configured.
        """
        if not spans:
            raise ConfigError("at least one span must be configured")
        self._spans = tuple(Span(config) for config in spans)
        self._source = source
        self._sink = sink
        self._clock = clock
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def spans(self) -> tuple[Span, ...]:
        """Get the configured spans, indexed by span id."""
        return self._spans

    @property
    def is_running(self) -> bool:
        """Check if the sampler tasks are running."""
        return any(not task.done() for task in self._tasks)

    async def tick(self, span_id: int) -> None:
        """
        Sample the process for one span and publish its latest closed bucket.

        A failing sample source leaves the span untouched; the failure is
        logged and the next tick tries again.
        """
        span = self._spans[span_id]
        try:
            sample = await self._source.sample()
        except Exception:
            logger.warning("Sampling failed for span %d, skipping tick", span_id, exc_info=True)
            return

        span.observe_sample(sample, self._clock())
        snapshot = span.snapshot(span_id)
        if snapshot is None:
            return
        try:
            self._sink.publish(span_id, snapshot)
        except Exception:
            logger.exception("Publishing snapshot for span %d failed", span_id)

    def record(
        self,
        started_at: float,
        ended_at: float,
        status_code: int,
        timed_out: bool = False,
    ) -> None:
        """
        Account one finished request in every span.

        Args:
            started_at: When the request started (epoch seconds).
            ended_at: When it completed or timed out (epoch seconds).
            status_code: HTTP status of the response.
            timed_out: Whether the request hit the timeout; forces 5xx.
        """
        category = Category.from_outcome(status_code, timed_out)
        if category is None:
            logger.warning("Dropping request with unsupported status code %s", status_code)
            return
        if ended_at < started_at:
            logger.warning(
                "Request ended %.3fs before it started, recording 0 ms",
                started_at - ended_at,
            )
        response_ms = max(0.0, ended_at - started_at) * 1000
        for span in self._spans:
            span.record(ended_at, response_ms, category)

    def history(self) -> list[dict[str, Any]]:
        """Return the retained history of every span."""
        return [span.history() for span in self._spans]

    def start(self) -> None:
        """Start one sampler task per span on the running event loop."""
        if self.is_running:
            return
        self._tasks = [
            asyncio.create_task(self._sample_loop(span_id), name=f"pystatus-span-{span_id}")
            for span_id in range(len(self._spans))
        ]
        logger.debug("Started %d span samplers", len(self._tasks))

    async def stop(self) -> None:
        """Cancel every sampler task and wait for them to finish."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug("Stopped %d span samplers", len(tasks))

    async def _sample_loop(self, span_id: int) -> None:
        """Tick one span every ``interval`` seconds until cancelled."""
        interval = self._spans[span_id].interval
        while True:
            await asyncio.sleep(interval)
            await self.tick(span_id)
