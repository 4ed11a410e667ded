"""Tests for pystatus data models."""

import pytest

from pystatus.models import Category, OsSample, ResponseBucket, SpanSnapshot

from conftest import make_sample


def test_os_sample_is_frozen():
    """Test that OsSample is immutable (frozen)."""
    sample = make_sample()

    try:
        sample.cpu_percent = 99.0
        raise AssertionError("Should have raised FrozenInstanceError")
    except AttributeError:
        pass  # Expected behavior for frozen dataclass


def test_os_sample_uses_slots():
    """Test that OsSample uses __slots__ for memory efficiency."""
    assert not hasattr(make_sample(), "__dict__")


def test_os_sample_as_dict():
    data = make_sample(timestamp=5.0).as_dict()
    assert data["load_avg"] == [1.0, 0.5, 0.25]
    assert data["timestamp"] == 5.0
    assert data["memory_mb"] == 42.0


class TestCategory:
    """Tests for status category mapping."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [(200, Category.TWO), (204, Category.TWO), (302, Category.THREE), (404, Category.FOUR), (503, Category.FIVE)],
    )
    def test_from_status(self, status, expected):
        assert Category.from_outcome(status) is expected

    def test_timeout_forces_five(self):
        assert Category.from_outcome(200, timed_out=True) is Category.FIVE

    @pytest.mark.parametrize("status", [101, 0, 600, 999])
    def test_out_of_range_is_none(self, status):
        assert Category.from_outcome(status) is None


class TestResponseBucket:
    """Tests for the response bucket accumulator."""

    def test_open(self):
        bucket = ResponseBucket.open(10.0, 12.5, Category.FOUR)
        assert bucket.total_count == 1
        assert bucket.mean == 12.5
        assert bucket.bucket_start == 10.0
        assert bucket.counts == [0, 0, 1, 0]

    def test_placeholder_is_empty(self):
        bucket = ResponseBucket.placeholder(10.0)
        assert bucket.total_count == 0
        assert bucket.mean == 0.0
        assert bucket.counts == [0, 0, 0, 0]

    def test_mean_matches_arithmetic_mean(self):
        times = [3.0, 10.5, 7.25, 100.0, 0.5, 42.0]
        bucket = ResponseBucket.open(0.0, times[0], Category.TWO)
        for value in times[1:]:
            bucket.fold(value, Category.TWO)

        assert bucket.total_count == len(times)
        assert bucket.mean == pytest.approx(sum(times) / len(times))

    def test_fold_into_placeholder(self):
        bucket = ResponseBucket.placeholder(0.0)
        bucket.fold(8.0, Category.FIVE)
        bucket.fold(4.0, Category.TWO)

        assert bucket.total_count == 2
        assert bucket.mean == pytest.approx(6.0)
        assert bucket.count(Category.FIVE) == 1
        assert bucket.count(Category.TWO) == 1

    def test_counts_sum_to_total(self):
        bucket = ResponseBucket.open(0.0, 1.0, Category.TWO)
        for category in (Category.THREE, Category.FOUR, Category.FIVE, Category.FIVE):
            bucket.fold(1.0, category)
        assert sum(bucket.counts) == bucket.total_count == 5

    def test_is_open(self):
        bucket = ResponseBucket.placeholder(10.0)
        assert bucket.is_open(10.9, 1)
        assert not bucket.is_open(11.0, 1)

    def test_copy_is_independent(self):
        bucket = ResponseBucket.open(0.0, 5.0, Category.TWO)
        copy = bucket.copy()
        bucket.fold(15.0, Category.FOUR)

        assert copy.total_count == 1
        assert copy.counts == [1, 0, 0, 0]
        assert copy.mean == 5.0

    def test_as_dict(self):
        bucket = ResponseBucket.open(7.0, 5.0, Category.THREE)
        assert bucket.as_dict() == {"2": 0, "3": 1, "4": 0, "5": 0, "count": 1, "mean": 5.0, "timestamp": 7.0}


def test_span_snapshot_requests_per_second():
    bucket = ResponseBucket.open(0.0, 1.0, Category.TWO)
    for _ in range(9):
        bucket.fold(1.0, Category.TWO)
    snapshot = SpanSnapshot(span_id=0, interval=5, retention=60, os=make_sample(), responses=bucket)

    assert snapshot.requests_per_second == 2.0
    assert snapshot.as_dict()["interval"] == 5
    assert snapshot.as_dict()["responses"]["count"] == 10
    assert isinstance(snapshot.os, OsSample)
