from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LATEST_LOG_NAME = "latest.log"
ARCHIVED_LOGS_KEPT = 5


@dataclass(slots=True)
class TrackerLoggerBundle:
    app: logging.Logger
    latest_log_path: Path | None


def _archive_previous_session(logs_dir: Path, keep: int = ARCHIVED_LOGS_KEPT) -> Path:
    """Move the last session's log aside and prune old archives; returns the fresh log path."""
    logs_dir.mkdir(parents=True, exist_ok=True)
    latest = logs_dir / LATEST_LOG_NAME
    if latest.exists():
        latest.replace(logs_dir / f"latest_{datetime.now():%Y%m%d_%H%M%S_%f}.log")

    archived = sorted(logs_dir.glob("latest_*.log"), key=lambda path: path.stat().st_mtime, reverse=True)
    for stale_log in archived[keep:]:
        stale_log.unlink(missing_ok=True)
    return latest


def configure_logging(logs_dir: Path | None = None, level: int = logging.INFO) -> TrackerLoggerBundle:
    formatter = logging.Formatter(LOG_FORMAT)

    app_logger = logging.getLogger("logic_tracker")
    app_logger.setLevel(level)
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    app_logger.propagate = False

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    app_logger.addHandler(stream_handler)

    latest: Path | None = None
    if logs_dir is not None:
        latest = _archive_previous_session(logs_dir)
        file_handler = logging.FileHandler(latest, mode="w", encoding="utf-8")
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)

    return TrackerLoggerBundle(app=app_logger, latest_log_path=latest)
