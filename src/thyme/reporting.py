"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from typing import Optional

from .aggregation import BarChart, aggregate
from .config import ReportSettings
from .models import Stream
from .timeline import build_timeline


class SummaryPrinter:
    """Render human-readable summaries of a stream in the console."""

    def __init__(self, stream: Stream, settings: Optional[ReportSettings] = None) -> None:
        self.stream = stream
        self.settings = settings or ReportSettings()

    def print_window_list(self) -> None:
        if not self.stream.snapshots:
            print("No snapshots recorded.")
            return

        for snap in self.stream.snapshots:
            print(snap.time.strftime("%Y-%m-%d %H:%M:%S"))
            visible = set(snap.visible)
            for window in snap.windows:
                marker = "*" if window.id == snap.active else ("+" if window.id in visible else " ")
                info = window.info()
                print(
                    f"  {marker} {info.app or '-':<20} {info.sub_app or '-':<20} {info.title[:45]}"
                )

    def print_stats(self) -> None:
        if not self.stream.snapshots:
            print("No snapshots recorded.")
            return

        start, end = self.stream.start, self.stream.end
        print(f"Stats for {start:%Y-%m-%d %H:%M:%S} to {end:%Y-%m-%d %H:%M:%S}")
        print("-" * 40)
        print(f"Snapshots: {len(self.stream)}")

        agg = aggregate(self.stream, self.settings.label_func, self.settings.max_bars)
        for chart in agg.charts:
            print()
            self._print_chart(chart)

        timeline = build_timeline(self.stream, self.settings.label_func)
        if timeline and timeline.active:
            print()
            print("Active timeline:")
            for rng in timeline.active:
                label = rng.label or "(none)"
                print(
                    f"  {rng.start:%H:%M:%S}-{rng.end:%H:%M:%S} "
                    f"{label[:45]:<45} {format_duration(rng.duration_seconds)}"
                )

    def _print_chart(self, chart: BarChart) -> None:
        print(f"{chart.title}:")
        bars = chart.ordered_bars()
        if not bars:
            print("  (no samples)")
            return
        sample_seconds = self.settings.sample_interval.total_seconds()
        for bar in bars:
            label = bar.label or "(untitled)"
            print(
                f"  {label[:45]:<45} {bar.count:>6} {format_duration(bar.count * sample_seconds)}"
            )


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
