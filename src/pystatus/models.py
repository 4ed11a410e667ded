"""Data models for pystatus."""

from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any


@dataclass(slots=True, frozen=True)
class OsSample:
    """Immutable snapshot of the monitored process and host load."""

    cpu_percent: float  # 0.0 - 100.0 * core_count
    memory_mb: float  # RSS
    load_avg: tuple[float, float, float]
    pid: int
    ppid: int
    ctime_ms: float  # CPU time consumed (user + system)
    elapsed_ms: float  # Since process creation
    timestamp: float  # Epoch seconds

    def as_dict(self) -> dict[str, Any]:
        """Return the sample as a JSON-ready dict."""
        data = asdict(self)
        data["load_avg"] = list(self.load_avg)
        return data


class Category(IntEnum):
    """Response status category (the hundreds digit of the status code)."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5

    @classmethod
    def from_outcome(cls, status_code: int, timed_out: bool = False) -> "Category | None":
        """
        Map a request outcome to a category.

        A timed-out request is always FIVE regardless of its status code.
        Returns None for status codes outside 2xx-5xx.
        """
        if timed_out:
            return cls.FIVE
        try:
            return cls(status_code // 100)
        except ValueError:
            return None


def _empty_counts() -> list[int]:
    """Return zeroed per-category counters."""
    return [0] * len(Category)


@dataclass(slots=True)
class ResponseBucket:
    """
    Aggregate of request outcomes for one interval of a span.

    The bucket is mutable only while it is the newest bucket of its span and
    its interval has not elapsed. ``mean`` is maintained incrementally so it
    always equals the arithmetic mean of every response time folded in.
    """

    bucket_start: float  # Epoch seconds
    total_count: int = 0
    mean: float = 0.0  # Milliseconds
    counts: list[int] = field(default_factory=_empty_counts)

    @classmethod
    def open(cls, started_at: float, response_ms: float, category: Category) -> "ResponseBucket":
        """Create a bucket holding a single observation."""
        bucket = cls(bucket_start=started_at, total_count=1, mean=response_ms)
        bucket.counts[category - Category.TWO] = 1
        return bucket

    @classmethod
    def placeholder(cls, started_at: float) -> "ResponseBucket":
        """Create an empty bucket marking an interval boundary."""
        return cls(bucket_start=started_at)

    def fold(self, response_ms: float, category: Category) -> None:
        """Fold one observation into the bucket."""
        self.total_count += 1
        self.counts[category - Category.TWO] += 1
        self.mean += (response_ms - self.mean) / self.total_count

    def count(self, category: Category) -> int:
        """Number of observations recorded under ``category``."""
        return self.counts[category - Category.TWO]

    def is_open(self, now: float, interval: int) -> bool:
        """Whether ``now`` still falls inside this bucket's interval."""
        return self.bucket_start + interval > now

    def copy(self) -> "ResponseBucket":
        """Return a copy that shares no mutable state with this bucket."""
        return ResponseBucket(
            bucket_start=self.bucket_start,
            total_count=self.total_count,
            mean=self.mean,
            counts=list(self.counts),
        )

    def as_dict(self) -> dict[str, Any]:
        """Return the bucket in the dashboard wire format."""
        data: dict[str, Any] = {str(int(cat)): self.count(cat) for cat in Category}
        data["count"] = self.total_count
        data["mean"] = self.mean
        data["timestamp"] = self.bucket_start
        return data


@dataclass(slots=True, frozen=True)
class SpanSnapshot:
    """The most recently closed sample and bucket of a span, as published."""

    span_id: int
    interval: int
    retention: int
    os: OsSample
    responses: ResponseBucket

    @property
    def requests_per_second(self) -> float:
        """Average request rate over the bucket's interval."""
        return self.responses.total_count / self.interval

    def as_dict(self) -> dict[str, Any]:
        """Return the snapshot in the dashboard wire format."""
        return {
            "os": self.os.as_dict(),
            "responses": self.responses.as_dict(),
            "interval": self.interval,
            "retention": self.retention,
        }
