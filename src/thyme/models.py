"""Domain models for sampled window activity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterator, Optional, Protocol

TRACK_ACTIVE = "Active"
TRACK_VISIBLE = "Visible"
TRACK_ALL = "All"
TRACKS = (TRACK_ACTIVE, TRACK_VISIBLE, TRACK_ALL)

STICKY_DESKTOP = -1


@dataclass(frozen=True, slots=True)
class Winfo:
    """Application identity parsed out of a window title."""

    app: str = ""
    sub_app: str = ""
    title: str = ""


@dataclass(frozen=True, slots=True)
class Window:
    id: int
    name: str
    desktop: Optional[int] = None

    @property
    def is_sticky(self) -> bool:
        return self.desktop == STICKY_DESKTOP

    def info(self) -> Winfo:
        from .normalization import parse_window_title

        return parse_window_title(self.name)


LabelFunc = Callable[[Window], str]


@dataclass(slots=True)
class Snapshot:
    """All windows, the active one and the visible ones at a single instant."""

    time: datetime
    windows: list[Window] = field(default_factory=list)
    active: Optional[int] = None
    visible: list[int] = field(default_factory=list)

    def window_index(self) -> dict[int, Window]:
        return {window.id: window for window in self.windows}


@dataclass(slots=True)
class Stream:
    snapshots: list[Snapshot] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.snapshots)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self.snapshots)

    @property
    def start(self) -> Optional[datetime]:
        return self.snapshots[0].time if self.snapshots else None

    @property
    def end(self) -> Optional[datetime]:
        return self.snapshots[-1].time if self.snapshots else None

    def is_ordered(self) -> bool:
        return all(
            earlier.time <= later.time
            for earlier, later in zip(self.snapshots, self.snapshots[1:])
        )


@dataclass(slots=True)
class Range:
    """A labeled, contiguous span of time within one track."""

    label: str
    start: datetime
    end: datetime

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()


@dataclass(slots=True)
class Timeline:
    start: datetime
    end: datetime
    rows: dict[str, list[Range]]

    @property
    def active(self) -> list[Range]:
        return self.rows[TRACK_ACTIVE]

    @property
    def visible(self) -> list[Range]:
        return self.rows[TRACK_VISIBLE]

    @property
    def all(self) -> list[Range]:
        return self.rows[TRACK_ALL]


@dataclass(frozen=True, slots=True)
class Bar:
    label: str
    count: int


class SnapshotSource(Protocol):
    """Anything able to capture the current window state."""

    def snap(self) -> Snapshot:
        ...
