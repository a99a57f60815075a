"""Background pollers feeding tmux snapshots to the UI.

Three threads (sessions, windows, panes) each poll once immediately and
then on a fixed interval. Every poll produces one Event on a shared
bounded queue; producers block while the queue is full, so the UI sets
the pace. When all pollers have exited the stream reports done.

PUBLIC API:
  - Kind: Which snapshot an event carries
  - Event: One poll outcome (data or error)
  - Watcher: Starts the pollers and exposes the event stream
"""

import logging
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .. import tmux
from ..tmux import TmuxError
from .throttle import Throttle

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.5
THROTTLE_INTERVAL = 0.25
QUEUE_SIZE = 16
_PUT_SLICE = 0.1


class Kind(str, Enum):
    SESSIONS = "sessions"
    WINDOWS = "windows"
    PANES = "panes"


@dataclass
class Event:
    kind: Kind
    data: Any = None
    err: Optional[BaseException] = None


Fetcher = Callable[[Optional[str]], Any]

_DONE = object()


def default_fetchers() -> Dict[Kind, Fetcher]:
    return {
        Kind.SESSIONS: tmux.fetch_sessions,
        Kind.WINDOWS: tmux.fetch_windows,
        Kind.PANES: tmux.fetch_panes,
    }


class Watcher:
    """Poll tmux snapshots on background threads.

    Args:
        socket: tmux socket path passed to each fetcher.
        interval: Seconds between polls of the same kind.
        fetchers: Override the snapshot functions, keyed by Kind.
        throttle_interval: Minimum seconds between calls of one poller.
    """

    def __init__(
        self,
        socket: Optional[str],
        interval: float = DEFAULT_INTERVAL,
        fetchers: Optional[Dict[Kind, Fetcher]] = None,
        throttle_interval: float = THROTTLE_INTERVAL,
    ):
        self.socket = socket
        self.interval = interval
        self.fetchers = fetchers if fetchers is not None else default_fetchers()
        self.throttle_interval = throttle_interval
        self._events: "queue.Queue[Any]" = queue.Queue(maxsize=QUEUE_SIZE)
        self._cancel = threading.Event()
        self._done = threading.Event()
        self._threads: List[threading.Thread] = []
        self._started = False

    def start(self) -> "Watcher":
        if self._started:
            return self
        self._started = True
        for kind, fetch in self.fetchers.items():
            thread = threading.Thread(
                target=self._poll, args=(kind, fetch, Throttle(self.throttle_interval)), name=f"poll-{kind.value}", daemon=True
            )
            self._threads.append(thread)
            thread.start()
        closer = threading.Thread(target=self._close_when_idle, name="poll-closer", daemon=True)
        closer.start()
        logger.debug(f"Watcher started with {len(self._threads)} pollers, interval {self.interval}s")
        return self

    @property
    def stopped(self) -> bool:
        return self._cancel.is_set()

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Cancel all pollers and wait briefly for them. Safe to call repeatedly."""
        if not self._cancel.is_set():
            logger.debug("Stopping watcher")
        self._cancel.set()
        for thread in self._threads:
            if thread is not threading.current_thread():
                thread.join(timeout)

    def next_event(self, timeout: Optional[float] = None) -> Optional[Event]:
        """Block for the next event.

        Returns:
            The next Event, or None once the stream is closed (or the
            timeout expired with nothing to deliver).
        """
        waited = 0.0
        while True:
            try:
                item = self._events.get(timeout=_PUT_SLICE)
            except queue.Empty:
                if self._done.is_set():
                    return None
                waited += _PUT_SLICE
                if timeout is not None and waited >= timeout:
                    return None
                continue
            if item is _DONE:
                return None
            return item

    def _put(self, event: Event) -> bool:
        while not self._cancel.is_set():
            try:
                self._events.put(event, timeout=_PUT_SLICE)
                return True
            except queue.Full:
                continue
        return False

    def _fetch(self, kind: Kind, fetch: Fetcher, throttle: Throttle) -> Optional[Event]:
        if not throttle.wait(self._cancel):
            return None
        try:
            return Event(kind, data=fetch(self.socket))
        except (TmuxError, OSError, ValueError) as e:
            logger.warning(f"{kind.value} poll failed: {e}")
            return Event(kind, err=e)

    def _poll(self, kind: Kind, fetch: Fetcher, throttle: Throttle) -> None:
        while not self._cancel.is_set():
            event = self._fetch(kind, fetch, throttle)
            if event is None or not self._put(event):
                return
            if self._cancel.wait(self.interval):
                return

    def _close_when_idle(self) -> None:
        for thread in self._threads:
            thread.join()
        self._done.set()
        try:
            self._events.put_nowait(_DONE)
        except queue.Full:
            # next_event notices _done once the queue drains
            pass
