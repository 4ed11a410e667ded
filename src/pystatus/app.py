"""pystatus - Terminal dashboard for span snapshots."""

from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Footer, Static

from pystatus.config import MonitorConfig
from pystatus.models import Category, OsSample, SpanSnapshot
from pystatus.monitor import ProcessSampleSource, SampleSource
from pystatus.registry import SpanRegistry
from pystatus.sinks import QueueSink
from pystatus.span import SpanConfig


def format_span(config: SpanConfig) -> str:
    """Format a span as the time range its history covers."""
    seconds = config.interval * config.retention
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    if seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


class HeaderStats(Static):
    """Header widget showing the latest process sample of the selected span."""

    DEFAULT_CSS = """
    HeaderStats {
        height: auto;
        min-height: 4;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize HeaderStats."""
        super().__init__(*args, **kwargs)
        self._sample: OsSample | None = None
        self._span_label: str = ""

    def update_sample(self, sample: OsSample, span_label: str) -> None:
        """Update the statistics from an OS sample."""
        self._sample = sample
        self._span_label = span_label
        self.update(self._get_info())

    def on_mount(self) -> None:
        """Render the initial header once mounted."""
        self.update(self._get_info())

    def _get_info(self) -> str:
        """Get the header display."""
        sample = self._sample
        if sample is None:
            return "Waiting for samples..."

        cpu_bar_len = min(int(sample.cpu_percent / 5), 20)
        cpu_bar = "[green]█[/green]" * cpu_bar_len + "[dim]░[/dim]" * (20 - cpu_bar_len)
        load = sample.load_avg
        uptime = int(sample.elapsed_ms // 1000)
        hours, rest = divmod(uptime, 3600)
        minutes, seconds = divmod(rest, 60)

        # Use escaped brackets for the bar container
        return (
            f"Span {self._span_label}  PID {sample.pid} (parent {sample.ppid})  "
            f"up {hours:02d}:{minutes:02d}:{seconds:02d}\n"
            f"CPU \\[{cpu_bar}] {sample.cpu_percent:5.1f}%   Mem {sample.memory_mb:.1f}M\n"
            f"Load average: {load[0]:.2f} {load[1]:.2f} {load[2]:.2f}"
        )


class SpanTable(Container):
    """Container for the per-span response table."""

    DEFAULT_CSS = """
    SpanTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, spans: list[SpanConfig], *args, **kwargs) -> None:
        """Initialize SpanTable."""
        super().__init__(*args, **kwargs)
        self._spans = spans
        self.last_snapshots: dict[int, SpanSnapshot] = {}

    def compose(self) -> ComposeResult:
        """Compose the span table."""
        yield DataTable(id="span-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#span-table", DataTable)
        table.cursor_type = "row"

        table.add_column("SPAN", key="span", width=6)
        table.add_column("INT", key="interval", width=5)
        table.add_column("REQ/S", key="rps", width=8)
        for category in Category:
            table.add_column(f"{int(category)}xx", key=f"c{int(category)}", width=6)
        table.add_column("MEAN ms", key="mean", width=10)

        for span_id, config in enumerate(self._spans):
            table.add_row(
                format_span(config),
                f"{config.interval}s",
                "-",
                *("-" for _ in Category),
                "-",
                key=str(span_id),
            )

    def update_snapshot(self, snapshot: SpanSnapshot) -> None:
        """Update the row of the snapshot's span using update_cell."""
        table = self.query_one("#span-table", DataTable)
        row_key = str(snapshot.span_id)
        responses = snapshot.responses
        table.update_cell(row_key, "rps", f"{snapshot.requests_per_second:7.2f}")
        for category in Category:
            table.update_cell(row_key, f"c{int(category)}", str(responses.count(category)))
        table.update_cell(row_key, "mean", f"{responses.mean:9.2f}")
        self.last_snapshots[snapshot.span_id] = snapshot


class StatusApp(App):
    """Dashboard for a SpanRegistry sampling one process."""

    TITLE = "pystatus"
    SUB_TITLE = "Process and Response Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #header-stats {
        dock: top;
        height: auto;
        min-height: 5;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("s", "cycle_span", "Span"),
    ]

    def __init__(
        self,
        config: MonitorConfig | None = None,
        source: SampleSource | None = None,
    ) -> None:
        """Initialize the StatusApp."""
        super().__init__()
        self._config = config or MonitorConfig()
        self.title = self._config.title
        self._update_queue: Queue[SpanSnapshot] = Queue()
        self._span_registry = SpanRegistry(
            self._config.spans,
            source or ProcessSampleSource(),
            QueueSink(self._update_queue),
        )
        self._selected_span = 0

    @property
    def registry(self) -> SpanRegistry:
        """Get the registry feeding the dashboard."""
        return self._span_registry

    @property
    def selected_span(self) -> int:
        """Get the span id shown in the header."""
        return self._selected_span

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield HeaderStats(id="header-stats")
        yield SpanTable(list(self._config.spans))
        yield Footer()

    def on_mount(self) -> None:
        """Start the span samplers when the app is mounted."""
        self._span_registry.start()
        self.set_interval(0.5, self._check_for_updates)

    async def on_unmount(self) -> None:
        """Stop the span samplers when the app is torn down."""
        await self._span_registry.stop()

    def _check_for_updates(self) -> None:
        """Drain the snapshot queue and refresh the UI."""
        while True:
            try:
                snapshot = self._update_queue.get_nowait()
            except Empty:
                break
            self.update_ui(snapshot)

    def update_ui(self, snapshot: SpanSnapshot) -> None:
        """Update the UI with a published snapshot."""
        self.query_one(SpanTable).update_snapshot(snapshot)
        if snapshot.span_id == self._selected_span:
            self._refresh_header(snapshot)

    def _refresh_header(self, snapshot: SpanSnapshot) -> None:
        """Show the snapshot's OS sample in the header."""
        label = format_span(self._config.spans[snapshot.span_id])
        self.query_one("#header-stats", HeaderStats).update_sample(snapshot.os, label)

    def action_cycle_span(self) -> None:
        """Select the next span for the header."""
        self._selected_span = (self._selected_span + 1) % len(self._config.spans)
        span_table = self.query_one(SpanTable)
        snapshot = span_table.last_snapshots.get(self._selected_span)
        if snapshot is not None:
            self._refresh_header(snapshot)
        self.notify(f"Span: {format_span(self._config.spans[self._selected_span])}")

    async def action_quit(self) -> None:
        """Stop the samplers and exit."""
        await self._span_registry.stop()
        self.exit()


def main() -> None:
    """Entry point for the pystatus dashboard."""
    app = StatusApp()
    app.run()


if __name__ == "__main__":
    main()
