"""Reconstruct continuous usage ranges from discrete window snapshots."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from .models import (
    TRACK_ACTIVE,
    TRACK_ALL,
    TRACK_VISIBLE,
    LabelFunc,
    Range,
    Stream,
    Timeline,
)

logger = logging.getLogger(__name__)

# Label for an id that no window in the snapshot answers to.
MISSING_LABEL = ""


class StreamOrderError(ValueError):
    """Raised when snapshots are not sorted by time."""


def build_timeline(stream: Stream, label_of: LabelFunc) -> Optional[Timeline]:
    """Build the Active, Visible and All tracks for ``stream``.

    Returns ``None`` when the stream holds no snapshots. Consecutive samples
    sharing a label collapse into one ``Range``; at a label change the old
    range ends and the new one starts at the same snapshot time.
    """
    if not stream.snapshots:
        return None
    try:
        ordered = stream.is_ordered()
    except TypeError as exc:
        raise StreamOrderError(f"Snapshot times cannot be compared: {exc}") from exc
    if not ordered:
        raise StreamOrderError("Snapshots are not sorted by time")

    active = _ActiveTrack()
    visible = _LabelSetTrack()
    other = _LabelSetTrack()
    for snap in stream.snapshots:
        index = snap.window_index()

        window = index.get(snap.active) if snap.active is not None else None
        active.observe(snap.time, label_of(window) if window is not None else MISSING_LABEL)

        visible.observe(
            snap.time,
            (
                label_of(index[window_id]) if window_id in index else MISSING_LABEL
                for window_id in snap.visible
            ),
        )
        other.observe(snap.time, (label_of(win) for win in snap.windows))

    timeline = Timeline(
        start=stream.snapshots[0].time,
        end=stream.snapshots[-1].time,
        rows={
            TRACK_ACTIVE: active.ranges,
            TRACK_VISIBLE: visible.ranges,
            TRACK_ALL: other.ranges,
        },
    )
    logger.debug(
        "Built timeline over %d snapshots: %d active, %d visible, %d open ranges.",
        len(stream),
        len(active.ranges),
        len(visible.ranges),
        len(other.ranges),
    )
    return timeline


class _ActiveTrack:
    """Single-label track: at most one range is open at a time."""

    def __init__(self) -> None:
        self.ranges: list[Range] = []
        self._current: Optional[Range] = None

    def observe(self, timestamp: datetime, label: str) -> None:
        current = self._current
        if current and current.label == label:
            current.end = timestamp
            return

        if current:
            current.end = timestamp
        new_range = Range(label=label, start=timestamp, end=timestamp)
        self.ranges.append(new_range)
        self._current = new_range


class _LabelSetTrack:
    """Multi-label track keyed by label, so same-label windows coalesce."""

    def __init__(self) -> None:
        self.ranges: list[Range] = []
        self._open: dict[str, Range] = {}

    def observe(self, timestamp: datetime, labels: Iterable[str]) -> None:
        # Ranges that vanish this snapshot still last until now.
        for open_range in self._open.values():
            open_range.end = timestamp

        next_open: dict[str, Range] = {}
        for label in labels:
            if label in next_open:
                continue
            existing = self._open.get(label)
            if existing is None:
                existing = Range(label=label, start=timestamp, end=timestamp)
                self.ranges.append(existing)
            next_open[label] = existing
        self._open = next_open
