"""FastAPI application that exposes timelines and sample counts over HTTP."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from .aggregation import aggregate
from .config import ReportSettings
from .models import Range, Stream, Window
from .normalization import LABEL_FUNCS
from .paths import get_stream_path
from .storage import SnapshotPayload, StreamFormatError, append_snapshot, load_stream
from .timeline import StreamOrderError, build_timeline

logger = logging.getLogger(__name__)


def create_app(
    *,
    stream_path: Optional[Path] = None,
    settings: Optional[ReportSettings] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_path = Path(stream_path or get_stream_path())
    resolved_settings = settings or ReportSettings()

    app = FastAPI(title="thyme", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.stream_path = resolved_path
    app.state.settings = resolved_settings

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        stream = _read_stream(request.app.state.stream_path)
        return {
            "stream_path": str(request.app.state.stream_path),
            "snapshots": len(stream),
            "start": stream.start.isoformat() if stream.start else None,
            "end": stream.end.isoformat() if stream.end else None,
            "label_mode": request.app.state.settings.label_mode,
        }

    @app.get("/api/timeline")
    def timeline(
        request: Request,
        by: Optional[str] = Query(
            default=None,
            description="Label granularity: 'app' or 'window'.",
        ),
    ) -> Dict[str, Any]:
        label_of = _resolve_label_func(by, request.app.state.settings)
        stream = _read_stream(request.app.state.stream_path)
        try:
            built = build_timeline(stream, label_of)
        except StreamOrderError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if built is None:
            return {"start": None, "end": None, "rows": {}}
        return {
            "start": built.start.isoformat(),
            "end": built.end.isoformat(),
            "rows": {
                track: [_range_to_payload(rng) for rng in ranges]
                for track, ranges in built.rows.items()
            },
        }

    @app.get("/api/aggregate")
    def aggregate_endpoint(
        request: Request,
        by: Optional[str] = Query(
            default=None,
            description="Label granularity: 'app' or 'window'.",
        ),
        limit: Optional[int] = Query(
            default=None,
            ge=1,
            description="Number of bars per chart.",
        ),
    ) -> Dict[str, Any]:
        label_of = _resolve_label_func(by, request.app.state.settings)
        max_bars = limit or request.app.state.settings.max_bars
        agg = aggregate(_read_stream(request.app.state.stream_path), label_of, max_bars)
        return {
            "charts": [
                {
                    "id": chart.id,
                    "title": chart.title,
                    "x_label": chart.x_label,
                    "y_label": chart.y_label,
                    "total": chart.total,
                    "bars": [
                        {"label": bar.label, "count": bar.count}
                        for bar in chart.ordered_bars()
                    ],
                }
                for chart in agg.charts
            ]
        }

    @app.get("/api/snapshots")
    def snapshots(request: Request) -> Dict[str, Any]:
        stream = _read_stream(request.app.state.stream_path)
        return {
            "snapshots": [
                {
                    "time": snap.time.isoformat(),
                    "active": snap.active,
                    "visible": list(snap.visible),
                    "windows": [_window_to_payload(window) for window in snap.windows],
                }
                for snap in stream.snapshots
            ]
        }

    @app.post("/api/snapshots", status_code=201)
    def record_snapshot(payload: SnapshotPayload, request: Request) -> Dict[str, Any]:
        path: Path = request.app.state.stream_path
        try:
            stream = append_snapshot(path, payload.to_snapshot())
        except StreamFormatError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"snapshots": len(stream)}

    return app


def _read_stream(path: Path) -> Stream:
    if not path.exists():
        raise HTTPException(status_code=404, detail=f"Stream file not found: {path}")
    try:
        return load_stream(path)
    except StreamFormatError as exc:
        logger.warning("Could not read stream %s: %s", path, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _resolve_label_func(
    value: Optional[str], settings: ReportSettings
) -> Callable[[Window], str]:
    if not value:
        return settings.label_func
    try:
        return LABEL_FUNCS[value]
    except KeyError as exc:
        raise HTTPException(status_code=400, detail="by must be 'app' or 'window'") from exc


def _range_to_payload(rng: Range) -> Dict[str, Any]:
    return {
        "label": rng.label,
        "start": rng.start.isoformat(),
        "end": rng.end.isoformat(),
        "duration_seconds": rng.duration_seconds,
    }


def _window_to_payload(window: Window) -> Dict[str, Any]:
    info = window.info()
    return {
        "id": window.id,
        "name": window.name,
        "desktop": window.desktop,
        "app": info.app,
        "sub_app": info.sub_app,
        "title": info.title,
    }
