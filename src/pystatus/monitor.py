"""Process sampling for pystatus."""

import asyncio
import os
import time
from typing import Protocol

import psutil

from pystatus.errors import SampleError
from pystatus.models import OsSample


class SampleSource(Protocol):
    """Asynchronous provider of OS samples."""

    async def sample(self) -> OsSample:
        """Take a snapshot, raising on failure."""
        ...


class ProcessSampleSource:
    """
    Sample source that reads a single process through psutil.

    The blocking psutil calls run in a worker thread so the event loop keeps
    serving requests while a sample is taken. AccessDenied, NoSuchProcess and
    ZombieProcess errors surface as SampleError.
    """

    def __init__(self, pid: int | None = None) -> None:
        """
        Initialize the ProcessSampleSource.

        Args:
            pid: Process to watch. Defaults to the current process.
        """
        self._pid = pid if pid is not None else os.getpid()
        try:
            self._process = psutil.Process(self._pid)
            # Initialize CPU percent (first call returns 0.0)
            self._process.cpu_percent(interval=None)
        except psutil.Error as exc:
            raise SampleError(f"cannot watch process {self._pid}: {exc}") from exc

    @property
    def pid(self) -> int:
        """Get the watched process id."""
        return self._pid

    async def sample(self) -> OsSample:
        """Take a snapshot of the watched process."""
        return await asyncio.to_thread(self._collect_sample)

    def _collect_sample(self) -> OsSample:
        """Collect a sample synchronously."""
        try:
            # Use oneshot() context manager for efficient attribute access
            with self._process.oneshot():
                cpu_percent = self._process.cpu_percent(interval=None)
                mem_info = self._process.memory_info()
                cpu_times = self._process.cpu_times()
                ppid = self._process.ppid()
                create_time = self._process.create_time()
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as exc:
            raise SampleError(f"cannot sample process {self._pid}: {exc}") from exc

        now = time.time()
        return OsSample(
            cpu_percent=cpu_percent,
            memory_mb=mem_info.rss / 1024 / 1024,
            load_avg=psutil.getloadavg(),
            pid=self._pid,
            ppid=ppid,
            ctime_ms=(cpu_times.user + cpu_times.system) * 1000,
            elapsed_ms=max(0.0, now - create_time) * 1000,
            timestamp=now,
        )
