"""pystatus - request and resource monitoring for Python servers."""

from pystatus.config import MonitorConfig, load_config
from pystatus.errors import ConfigError, MonitorError, SampleError
from pystatus.middleware import StatusMiddleware
from pystatus.models import Category, OsSample, ResponseBucket, SpanSnapshot
from pystatus.monitor import ProcessSampleSource
from pystatus.registry import SpanRegistry
from pystatus.sinks import CallbackSink, QueueSink
from pystatus.span import Span, SpanConfig

__all__ = [
    "CallbackSink",
    "Category",
    "ConfigError",
    "MonitorConfig",
    "MonitorError",
    "OsSample",
    "ProcessSampleSource",
    "QueueSink",
    "ResponseBucket",
    "SampleError",
    "Span",
    "SpanConfig",
    "SpanRegistry",
    "SpanSnapshot",
    "StatusMiddleware",
    "load_config",
]
