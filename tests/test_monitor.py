"""Tests for the psutil-backed sample source."""

import os
from contextlib import contextmanager

import psutil
import pytest

from pystatus.errors import SampleError
from pystatus.models import OsSample
from pystatus.monitor import ProcessSampleSource


class TestProcessSampleSource:
    """Tests for ProcessSampleSource."""

    def test_defaults_to_current_process(self):
        source = ProcessSampleSource()
        assert source.pid == os.getpid()

    @pytest.mark.asyncio
    async def test_sample_fields(self):
        source = ProcessSampleSource()
        sample = await source.sample()

        assert isinstance(sample, OsSample)
        assert sample.pid == os.getpid()
        assert sample.ppid == os.getppid()
        assert sample.memory_mb > 0
        assert sample.cpu_percent >= 0.0
        assert sample.elapsed_ms >= 0.0
        assert sample.ctime_ms >= 0.0
        assert len(sample.load_avg) == 3
        assert sample.timestamp > 0

    @pytest.mark.asyncio
    async def test_consecutive_samples(self):
        source = ProcessSampleSource()
        first = await source.sample()
        second = await source.sample()
        assert second.timestamp >= first.timestamp

    def test_missing_process(self):
        with pytest.raises(SampleError):
            ProcessSampleSource(pid=2**22 + 12345)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess],
    )
    async def test_psutil_errors_become_sample_errors(self, error):
        """Test that a process lost mid-sample surfaces as SampleError."""
        source = ProcessSampleSource()
        source._process = FailingProcess(error(source.pid))

        with pytest.raises(SampleError):
            await source.sample()


class FailingProcess:
    """Stand-in for psutil.Process whose reads raise a psutil error."""

    def __init__(self, error: psutil.Error) -> None:
        self._error = error

    @contextmanager
    def oneshot(self):
        yield

    def cpu_percent(self, interval=None):
        raise self._error

    def memory_info(self):
        raise self._error
