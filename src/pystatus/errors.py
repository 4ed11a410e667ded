"""Exceptions raised by pystatus."""


class MonitorError(Exception):
    """Base class for pystatus errors."""


class ConfigError(MonitorError):
    """Raised when the monitor configuration is unusable."""


class SampleError(MonitorError):
    """Raised by a sample source when a process snapshot cannot be taken."""
