"""Typed snapshot records returned by the tmux adapter.

PUBLIC API:
  - Session: One tmux session
  - Window: One tmux window, keyed by "session:index"
  - Pane: One tmux pane, keyed by "session:window.pane"
  - Client: One attached tmux client
  - SessionSnapshot: Sessions plus current-session pointers
  - WindowSnapshot: Windows plus current-window pointers
  - PaneSnapshot: Panes plus current-pane pointers
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Session:
    """Session information.

    Attributes:
        name: Session name, also its menu id.
        label: Display label rendered from the session format.
        attached: True when at least one non-control client is attached.
        clients: Names of the attached (non-control) clients.
        current: True for the session of the launching client.
        windows: Number of windows.
    """

    name: str
    label: str = ""
    attached: bool = False
    clients: List[str] = field(default_factory=list)
    current: bool = False
    windows: int = 0


@dataclass
class Window:
    """Window information.

    Attributes:
        id: Display id "session:index".
        session: Owning session name.
        index: Window index.
        name: Window name.
        active: Active window of its session.
        label: Display label rendered from the window format.
        current: Active window of the current session.
        internal_id: tmux window id such as "@3".
    """

    id: str
    session: str = ""
    index: int = 0
    name: str = ""
    active: bool = False
    label: str = ""
    current: bool = False
    internal_id: str = ""


@dataclass
class Pane:
    """Pane information.

    Attributes:
        id: Display id "session:window.pane".
        pane_id: tmux pane id such as "%4".
        session: Owning session name.
        window: Window name.
        window_index: Window index.
        index: Pane index.
        title: Pane title.
        command: Foreground command name.
        width: Width in cells.
        height: Height in cells.
        active: Active pane of its window.
        label: Display label rendered from the pane format.
        current: Active pane of the active window of an attached session.
        pid: PID of the pane's shell.
    """

    id: str
    pane_id: str = ""
    session: str = ""
    window: str = ""
    window_index: int = 0
    index: int = 0
    title: str = ""
    command: str = ""
    width: int = 0
    height: int = 0
    active: bool = False
    label: str = ""
    current: bool = False
    pid: int = 0


@dataclass
class Client:
    """Attached client. Control-mode clients are flagged so callers can skip them."""

    name: str
    session: str = ""
    control_mode: bool = False


@dataclass
class SessionSnapshot:
    sessions: List[Session] = field(default_factory=list)
    current: str = ""
    include_current: bool = False
    client_id: str = ""


@dataclass
class WindowSnapshot:
    windows: List[Window] = field(default_factory=list)
    current_id: str = ""
    current_label: str = ""
    current_session: str = ""
    include_current: bool = False


@dataclass
class PaneSnapshot:
    panes: List[Pane] = field(default_factory=list)
    current_id: str = ""
    current_label: str = ""
    include_current: bool = False
    current_window: str = ""
