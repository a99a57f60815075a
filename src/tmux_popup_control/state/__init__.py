"""In-memory snapshot stores, written by the dispatcher and read by the UI.

PUBLIC API:
  - SessionStore: Latest sessions plus current session and client
  - WindowStore: Latest windows plus current window pointers
  - PaneStore: Latest panes plus current pane pointers
"""

from .stores import PaneStore, SessionStore, WindowStore

__all__ = ["SessionStore", "WindowStore", "PaneStore"]
