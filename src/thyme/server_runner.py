"""Helpers to launch the local web dashboard."""

from __future__ import annotations

import logging
import threading
import time
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .config import ReportSettings
from .paths import get_stream_path
from .webapp import create_app

logger = logging.getLogger(__name__)


def dashboard_url(host: str, port: int) -> str:
    # Wildcard binds are still reachable from the loopback address.
    browse_host = "127.0.0.1" if host in ("0.0.0.0", "::") else host
    return f"http://{browse_host}:{port}/api/status"


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 6090,
    stream_path: Optional[Path] = None,
    settings: Optional[ReportSettings] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Serve ``stream_path`` over HTTP until interrupted."""
    path = Path(stream_path or get_stream_path())
    if not path.exists():
        logger.warning("Stream file %s does not exist yet; API calls return 404.", path)
    app = create_app(stream_path=path, settings=settings or ReportSettings())

    if open_browser:
        threading.Thread(
            target=_launch_browser_after_delay,
            args=(dashboard_url(host, port),),
            daemon=True,
        ).start()

    logger.info("Serving %s on %s:%d", path, host, port)
    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)


def _launch_browser_after_delay(url: str) -> None:
    time.sleep(1.0)
    try:
        webbrowser.open(url)
    except Exception:
        logger.exception("Failed to launch browser for %s", url)
