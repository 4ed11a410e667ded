"""Spans: per-resolution history of samples and response buckets."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pystatus.models import Category, OsSample, ResponseBucket, SpanSnapshot
from pystatus.window import RingWindow


class SpanConfig(BaseModel):
    """Sampling interval and history length of one span."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    interval: int = Field(ge=1, strict=True)  # Seconds
    retention: int = Field(ge=1, strict=True)


class Span:
    """
    One time resolution of the monitor.

    Pairs a sampling interval with a window of OS samples and a window of
    response buckets. Only the newest bucket is open; the bucket boundary is
    decided from the window contents at the moment of each call, so the
    sampler and request completions can both create the next bucket and
    whichever observes the stale bucket first wins.
    """

    def __init__(self, config: SpanConfig) -> None:
        """
        Initialize the Span.

        Args:
            config: Interval and retention of the span.
        """
        self._config = config
        self.os_window: RingWindow[OsSample] = RingWindow(config.retention)
        self.response_window: RingWindow[ResponseBucket] = RingWindow(config.retention)

    @property
    def config(self) -> SpanConfig:
        """Get the span configuration."""
        return self._config

    @property
    def interval(self) -> int:
        """Get the sampling interval in seconds."""
        return self._config.interval

    @property
    def retention(self) -> int:
        """Get the maximum number of samples and buckets kept."""
        return self._config.retention

    def observe_sample(self, sample: OsSample, now: float) -> None:
        """
        Store a fresh OS sample and close the current bucket if it is stale.

        A placeholder bucket is appended when the window is empty or the last
        bucket's interval ended before ``now``, so silent intervals still get
        a bucket.
        """
        self.os_window.append(sample)
        last = self.response_window.last()
        if last is None or last.bucket_start + self.interval < now:
            self.response_window.append(ResponseBucket.placeholder(now))

    def record(self, now: float, response_ms: float, category: Category) -> None:
        """Fold one request outcome into the bucket open at ``now``."""
        last = self.response_window.last()
        if last is not None and last.is_open(now, self.interval):
            last.fold(response_ms, category)
        else:
            self.response_window.append(ResponseBucket.open(now, response_ms, category))

    def snapshot(self, span_id: int) -> SpanSnapshot | None:
        """
        Build the publishable snapshot of this span.

        Uses the second-to-last sample and bucket: the last bucket may still
        receive folds. Returns None until both windows hold two entries.
        """
        sample = self.os_window.second_to_last()
        bucket = self.response_window.second_to_last()
        if sample is None or bucket is None:
            return None
        return SpanSnapshot(
            span_id=span_id,
            interval=self.interval,
            retention=self.retention,
            os=sample,
            responses=bucket.copy(),
        )

    def history(self) -> dict[str, Any]:
        """Return the full retained history as plain data."""
        return {
            "interval": self.interval,
            "retention": self.retention,
            "os": [sample.as_dict() for sample in self.os_window],
            "responses": [bucket.as_dict() for bucket in self.response_window],
        }
