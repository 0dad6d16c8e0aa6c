"""JSON persistence for snapshot streams."""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .models import Snapshot, Stream, Window

logger = logging.getLogger(__name__)

_ID_MASK = (1 << 63) - 1


class StreamFormatError(ValueError):
    """Raised when a stream file or snapshot payload cannot be decoded."""


def window_id_for(name: str) -> int:
    """Derive a stable window id from its title for sources without native ids."""
    digest = hashlib.blake2b(name.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big") & _ID_MASK


class WindowPayload(BaseModel):
    id: Optional[int] = Field(default=None, alias="ID")
    name: str = Field(default="", alias="Name")
    desktop: Optional[int] = Field(default=None, alias="Desktop")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_window(self) -> Window:
        window_id = self.id if self.id is not None else window_id_for(self.name)
        return Window(id=window_id, name=self.name, desktop=self.desktop)

    @classmethod
    def from_window(cls, window: Window) -> "WindowPayload":
        return cls(id=window.id, name=window.name, desktop=window.desktop)


class SnapshotPayload(BaseModel):
    time: datetime = Field(alias="Time")
    windows: list[WindowPayload] = Field(default_factory=list, alias="Windows")
    active: Optional[int] = Field(default=None, alias="Active")
    visible: list[int] = Field(default_factory=list, alias="Visible")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("windows", "visible", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_snapshot(self) -> Snapshot:
        return Snapshot(
            time=self.time,
            windows=[window.to_window() for window in self.windows],
            active=self.active,
            visible=list(self.visible),
        )

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotPayload":
        return cls(
            time=snapshot.time,
            windows=[WindowPayload.from_window(window) for window in snapshot.windows],
            active=snapshot.active,
            visible=list(snapshot.visible),
        )


class StreamPayload(BaseModel):
    snapshots: list[SnapshotPayload] = Field(default_factory=list, alias="Snapshots")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("snapshots", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def _consistent_timezones(self) -> "StreamPayload":
        aware = {snap.time.utcoffset() is not None for snap in self.snapshots}
        if len(aware) > 1:
            raise ValueError("snapshot times mix naive and timezone-aware values")
        return self

    def to_stream(self) -> Stream:
        return Stream(snapshots=[snap.to_snapshot() for snap in self.snapshots])

    @classmethod
    def from_stream(cls, stream: Stream) -> "StreamPayload":
        return cls(
            snapshots=[SnapshotPayload.from_snapshot(snap) for snap in stream.snapshots]
        )


def parse_snapshot(payload: Union[str, bytes, dict[str, Any]]) -> Snapshot:
    """Decode one snapshot as emitted by a capture source."""
    try:
        if isinstance(payload, dict):
            model = SnapshotPayload.model_validate(payload)
        else:
            model = SnapshotPayload.model_validate_json(payload)
    except ValidationError as exc:
        raise StreamFormatError(f"Invalid snapshot: {exc}") from exc
    return model.to_snapshot()


def snapshot_to_payload(snapshot: Snapshot) -> dict[str, Any]:
    return SnapshotPayload.from_snapshot(snapshot).model_dump(mode="json", by_alias=True)


def load_stream(path: Path) -> Stream:
    """Read a stream file; an empty file is an empty stream."""
    path = Path(path)
    data = path.read_bytes()
    if not data.strip():
        return Stream()
    try:
        model = StreamPayload.model_validate_json(data)
    except ValidationError as exc:
        raise StreamFormatError(f"Invalid stream file {path}: {exc}") from exc
    stream = model.to_stream()
    logger.debug("Loaded %d snapshots from %s", len(stream), path)
    return stream


def dump_stream(stream: Stream, path: Path) -> None:
    path = Path(path)
    try:
        payload = StreamPayload.from_stream(stream)
    except ValidationError as exc:
        raise StreamFormatError(f"Cannot write stream to {path}: {exc}") from exc
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload.model_dump_json(by_alias=True), encoding="utf-8")


def append_snapshot(path: Path, snapshot: Snapshot) -> Stream:
    """Append ``snapshot`` to the stream stored at ``path``, creating it if needed."""
    path = Path(path)
    stream = load_stream(path) if path.exists() else Stream()
    stream.snapshots.append(snapshot)
    dump_stream(stream, path)
    logger.info("Recorded snapshot %d to %s", len(stream), path)
    return stream
