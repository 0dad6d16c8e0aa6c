"""Sample-count aggregation of window labels."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from .models import TRACK_ACTIVE, TRACK_ALL, TRACK_VISIBLE, Bar, LabelFunc, Stream
from .timeline import MISSING_LABEL

logger = logging.getLogger(__name__)

DEFAULT_MAX_BARS = 30


def top_n(counter: Mapping[str, int], n: int) -> list[Bar]:
    """Return the ``n`` highest counts; equal counts keep first-seen order."""
    bars = [Bar(label=label, count=count) for label, count in counter.items()]
    # sorted() is stable, so ties stay in the counter's insertion order.
    bars = sorted(bars, key=lambda bar: bar.count, reverse=True)
    return bars[: max(n, 0)]


@dataclass(slots=True)
class BarChart:
    """Label to sample count series for one track."""

    id: str
    x_label: str
    y_label: str
    title: str
    max_bars: int = DEFAULT_MAX_BARS
    series: dict[str, int] = field(default_factory=dict)

    def plus(self, label: str, n: int = 1) -> None:
        self.series[label] = self.series.get(label, 0) + n

    def top(self, n: int) -> list[Bar]:
        return top_n(self.series, n)

    def ordered_bars(self) -> list[Bar]:
        return self.top(self.max_bars)

    @property
    def total(self) -> int:
        return sum(self.series.values())


@dataclass(slots=True)
class AggTime:
    charts: list[BarChart]

    def chart(self, chart_id: str) -> BarChart:
        for chart in self.charts:
            if chart.id == chart_id:
                return chart
        raise KeyError(chart_id)

    @property
    def active(self) -> BarChart:
        return self.chart(TRACK_ACTIVE)

    @property
    def visible(self) -> BarChart:
        return self.chart(TRACK_VISIBLE)

    @property
    def all(self) -> BarChart:
        return self.chart(TRACK_ALL)


def aggregate(
    stream: Stream, label_of: LabelFunc, max_bars: int = DEFAULT_MAX_BARS
) -> AggTime:
    """Count, per track, how many samples each label appeared in.

    Active ids that match no window are skipped. Visible ids that match no
    window are counted under the empty label.
    """
    top = f"Top {max_bars}"
    active = BarChart(
        TRACK_ACTIVE,
        "App",
        "Samples",
        f"{top} active applications by time (multiplied by window count)",
        max_bars=max_bars,
    )
    visible = BarChart(
        TRACK_VISIBLE,
        "App",
        "Samples",
        f"{top} visible applications by time (multiplied by window count)",
        max_bars=max_bars,
    )
    every = BarChart(
        TRACK_ALL,
        "App",
        "Samples",
        f"{top} open applications by time (multiplied by window count)",
        max_bars=max_bars,
    )

    skipped = 0
    for snap in stream.snapshots:
        index = snap.window_index()

        window = index.get(snap.active) if snap.active is not None else None
        if window is not None:
            active.plus(label_of(window))
        else:
            skipped += 1

        for window_id in snap.visible:
            win = index.get(window_id)
            visible.plus(label_of(win) if win is not None else MISSING_LABEL)

        for win in snap.windows:
            every.plus(label_of(win))

    if skipped:
        logger.debug("Skipped %d samples without a resolvable active window.", skipped)
    return AggTime(charts=[active, visible, every])
