"""Reconstruct application usage timelines from sampled window snapshots."""

from .aggregation import AggTime, BarChart, aggregate, top_n
from .models import Bar, Range, Snapshot, SnapshotSource, Stream, Timeline, Window, Winfo
from .normalization import app_label, parse_window_title, window_label
from .timeline import StreamOrderError, build_timeline

__all__ = [
    "AggTime",
    "Bar",
    "BarChart",
    "Range",
    "Snapshot",
    "SnapshotSource",
    "Stream",
    "StreamOrderError",
    "Timeline",
    "Window",
    "Winfo",
    "aggregate",
    "app_label",
    "build_timeline",
    "parse_window_title",
    "top_n",
    "window_label",
]
