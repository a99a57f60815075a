"""Snapshot stores for sessions, windows and panes.

Entries handed out are copies; callers may mutate them freely without
touching the stored snapshot.

PUBLIC API:
  - SessionStore: Latest sessions plus current session and client
  - WindowStore: Latest windows plus current window pointers
  - PaneStore: Latest panes plus current pane pointers
"""

import copy
from typing import List, Optional

from ..tmux.types import Pane, PaneSnapshot, Session, SessionSnapshot, Window, WindowSnapshot


def _clone(entries):
    return [copy.deepcopy(entry) for entry in entries or []]


class SessionStore:
    def __init__(self):
        self._entries: List[Session] = []
        self.current = ""
        self.client_id = ""
        self.include_current = True

    def entries(self) -> List[Session]:
        return _clone(self._entries)

    def set_entries(self, entries: Optional[List[Session]]) -> None:
        self._entries = _clone(entries)

    def apply(self, snapshot: SessionSnapshot) -> None:
        self.set_entries(snapshot.sessions)
        self.current = snapshot.current
        self.include_current = snapshot.include_current
        if snapshot.client_id:
            self.client_id = snapshot.client_id


class WindowStore:
    def __init__(self):
        self._entries: List[Window] = []
        self.current_id = ""
        self.current_label = ""
        self.current_session = ""
        self.include_current = True

    def entries(self) -> List[Window]:
        return _clone(self._entries)

    def set_entries(self, entries: Optional[List[Window]]) -> None:
        self._entries = _clone(entries)

    def set_current(self, id: str, label: str, session: str) -> None:
        self.current_id = id
        self.current_label = label
        self.current_session = session

    def apply(self, snapshot: WindowSnapshot) -> None:
        self.set_entries(snapshot.windows)
        self.set_current(snapshot.current_id, snapshot.current_label, snapshot.current_session)
        self.include_current = snapshot.include_current


class PaneStore:
    def __init__(self):
        self._entries: List[Pane] = []
        self.current_id = ""
        self.current_label = ""
        self.include_current = True

    def entries(self) -> List[Pane]:
        return _clone(self._entries)

    def set_entries(self, entries: Optional[List[Pane]]) -> None:
        self._entries = _clone(entries)

    def set_current(self, id: str, label: str) -> None:
        self.current_id = id
        self.current_label = label

    def apply(self, snapshot: PaneSnapshot) -> None:
        self.set_entries(snapshot.panes)
        self.set_current(snapshot.current_id, snapshot.current_label)
        self.include_current = snapshot.include_current
