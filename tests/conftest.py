"""Shared fixtures for pystatus tests."""

import pytest

from pystatus.errors import SampleError
from pystatus.models import OsSample


def make_sample(timestamp: float = 0.0, cpu_percent: float = 1.0) -> OsSample:
    """Build an OsSample with fixed values."""
    return OsSample(
        cpu_percent=cpu_percent,
        memory_mb=42.0,
        load_avg=(1.0, 0.5, 0.25),
        pid=100,
        ppid=1,
        ctime_ms=10.0,
        elapsed_ms=1000.0,
        timestamp=timestamp,
    )


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """Sample source returning canned samples, or failing on demand."""

    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self.fail = False
        self.calls = 0

    async def sample(self) -> OsSample:
        self.calls += 1
        if self.fail:
            raise SampleError("boom")
        return make_sample(timestamp=self._clock())


class ListSink:
    """Sink collecting every published snapshot."""

    def __init__(self) -> None:
        self.published = []

    def publish(self, span_id, snapshot) -> None:
        self.published.append((span_id, snapshot))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source(clock: FakeClock) -> FakeSource:
    return FakeSource(clock)


@pytest.fixture
def sink() -> ListSink:
    return ListSink()
