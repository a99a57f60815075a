"""Log file setup and the JSON trace log.

PUBLIC API:
  - DEFAULT_LOG_FILE: Log path used when none is configured
  - resolve_log_path: Validate a log path, creating its directory
  - configure_logging: Send package logging to the log file
  - TraceLog: Append-only JSON-lines trace writer
"""

import json
import logging
import os
import sys
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "tmux-popup-control.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_path(path: Optional[str]) -> str:
    """Return a usable log path. Missing directories are created; failures fall back to the default."""
    path = (path or "").strip()
    if not path:
        return DEFAULT_LOG_FILE
    directory = os.path.dirname(path)
    if directory:
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            print(f"unable to create log directory: {e}", file=sys.stderr)
            return DEFAULT_LOG_FILE
    return path


def configure_logging(path: str, level: int = logging.INFO) -> logging.Handler:
    """Attach an append-mode file handler to the package logger.

    The terminal belongs to the TUI, so nothing is logged to stderr.
    """
    handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    package_logger = logging.getLogger("tmux_popup_control")
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return handler


class TraceLog:
    """Structured trace writer.

    Each entry is one JSON line {"time", "event", "payload"}. The file is
    opened per write and closed straight away so several popups can share
    one log.

    Args:
        path: Log file path.
        enabled: Emit trace entries. Errors are always logged.
    """

    def __init__(self, path: str = DEFAULT_LOG_FILE, enabled: bool = False):
        self.path = path
        self._enabled = enabled
        self._lock = threading.Lock()
        self._closed = False

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled and not self._closed

    def set_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._enabled = enabled

    def emit(self, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        """Append one trace entry when tracing is enabled."""
        if not self.enabled:
            return
        entry: Dict[str, Any] = {
            "time": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "event": event,
        }
        if payload:
            entry["payload"] = payload
        line = json.dumps(entry, default=str, ensure_ascii=False)
        with self._lock:
            try:
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError as e:
                print(f"trace logging failed: {e}", file=sys.stderr)

    def error(self, err: BaseException) -> None:
        """Record an error in the log file."""
        logger.error(str(err))

    def close(self) -> None:
        """Stop tracing. Safe to call more than once."""
        with self._lock:
            self._closed = True
