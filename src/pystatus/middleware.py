"""ASGI middleware feeding request outcomes into a SpanRegistry."""

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

from pystatus.config import MonitorConfig
from pystatus.registry import SpanRegistry

logger = logging.getLogger(__name__)

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

TIMEOUT_STATUS = 504


class RequestRecorder:
    """
    Records one request exactly once.

    The first of ``complete`` and ``time_out`` reaches the registry; the
    other becomes a no-op. The duration is measured with a monotonic timer;
    only the completion instant comes from the wall clock.
    """

    def __init__(
        self,
        registry: SpanRegistry,
        clock: Callable[[], float] = time.time,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        """
        Initialize the RequestRecorder and start timing.

        Args:
            registry: Registry receiving the outcome.
            clock: Returns the current time in epoch seconds.
            timer: Monotonic clock used for the request duration.
        """
        self._registry = registry
        self._clock = clock
        self._timer = timer
        self._started = timer()
        self._recorded = False

    @property
    def recorded(self) -> bool:
        """Check if the request has already been recorded."""
        return self._recorded

    def complete(self, status_code: int) -> bool:
        """Record a normal completion. Returns False if already recorded."""
        if self._recorded:
            return False
        self._recorded = True
        self._record(status_code, timed_out=False)
        return True

    def time_out(self) -> bool:
        """Record a timeout as a 5xx outcome. Returns False if already recorded."""
        if self._recorded:
            return False
        self._recorded = True
        self._record(TIMEOUT_STATUS, timed_out=True)
        return True

    def _record(self, status_code: int, timed_out: bool) -> None:
        """Send the outcome to the registry with the measured duration."""
        duration = self._timer() - self._started
        ended_at = self._clock()
        self._registry.record(ended_at - duration, ended_at, status_code, timed_out=timed_out)


class StatusMiddleware:
    """
    ASGI middleware timing every HTTP request.

    Requests to ``config.path`` are answered with the JSON history of every
    span and are not recorded. Other requests are recorded with the status
    code of their response; a request that never starts a response counts
    as 500. With ``config.request_timeout`` set, a still-running request is
    recorded as a timeout once the limit passes and its eventual completion
    is ignored.
    """

    def __init__(
        self,
        app: ASGIApp,
        registry: SpanRegistry,
        config: MonitorConfig | None = None,
        clock: Callable[[], float] = time.time,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        """
        Initialize the StatusMiddleware.

        Args:
            app: The wrapped ASGI application.
            registry: Registry receiving every request outcome.
            config: Status path and request timeout. Defaults to MonitorConfig().
            clock: Returns the current time in epoch seconds.
            timer: Monotonic clock used for request durations.
        """
        self.app = app
        self.registry = registry
        self.config = config or MonitorConfig()
        self._clock = clock
        self._timer = timer

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Serve the status path or time the request and record its outcome."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope.get("path") == self.config.path:
            await self._send_status(send)
            return

        recorder = RequestRecorder(self.registry, self._clock, self._timer)
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        timeout_handle: asyncio.TimerHandle | None = None
        if self.config.request_timeout is not None:
            loop = asyncio.get_running_loop()
            timeout_handle = loop.call_later(self.config.request_timeout, self._on_timeout, recorder, scope)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            if timeout_handle is not None:
                timeout_handle.cancel()
            recorder.complete(status_code)

    def _on_timeout(self, recorder: RequestRecorder, scope: Scope) -> None:
        """Record a still-running request as timed out."""
        if recorder.time_out():
            logger.warning("Request %s %s timed out", scope.get("method"), scope.get("path"))

    async def _send_status(self, send: Send) -> None:
        """Answer with the title and full history of every span."""
        body = json.dumps(
            {"title": self.config.title, "spans": self.registry.history()}
        ).encode("utf-8")
        await send(
            {
                "type": "http.response.start",
                "status": 200,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(body)).encode("ascii")),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})
