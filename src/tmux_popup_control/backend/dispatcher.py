"""Apply backend events to the snapshot stores.

PUBLIC API:
  - Result: Which stores an event changed
  - Dispatcher: Routes each event to its store
"""

import logging
from dataclasses import dataclass

from ..state import PaneStore, SessionStore, WindowStore
from ..tmux.types import PaneSnapshot, SessionSnapshot, WindowSnapshot
from .watcher import Event, Kind

logger = logging.getLogger(__name__)


@dataclass
class Result:
    sessions_updated: bool = False
    windows_updated: bool = False
    panes_updated: bool = False

    @property
    def any(self) -> bool:
        return self.sessions_updated or self.windows_updated or self.panes_updated


class Dispatcher:
    def __init__(self, sessions: SessionStore, windows: WindowStore, panes: PaneStore):
        self.sessions = sessions
        self.windows = windows
        self.panes = panes

    def handle(self, event: Event) -> Result:
        """Write the event's snapshot into its store. Error events change nothing."""
        result = Result()
        if event.err is not None:
            return result
        if event.kind == Kind.SESSIONS and isinstance(event.data, SessionSnapshot):
            self.sessions.apply(event.data)
            result.sessions_updated = True
        elif event.kind == Kind.WINDOWS and isinstance(event.data, WindowSnapshot):
            self.windows.apply(event.data)
            result.windows_updated = True
        elif event.kind == Kind.PANES and isinstance(event.data, PaneSnapshot):
            self.panes.apply(event.data)
            result.panes_updated = True
        else:
            logger.debug(f"Ignoring {event.kind} event carrying {type(event.data).__name__}")
        return result
