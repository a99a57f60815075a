"""tmux adapter - every call the popup makes against the tmux server.

PUBLIC API:
  - run_tmux: Run tmux command and return result
  - check_tmux: Run tmux command, raise on failure
  - install_transport: Route calls through a control-mode client
  - ControlClient: Cached control-mode connection
  - resolve_socket_path: Work out the socket to talk to
  - fetch_sessions / fetch_windows / fetch_panes: Snapshots for the backend
  - session, window and pane actions
  - pane_preview: Capture pane content for previews
  - TmuxError and subclasses
"""

from .core import check_tmux, current_client_id, install_transport, resolve_socket_path, run_tmux
from .control import ControlClient
from .exceptions import (
    PaneNotFoundError,
    SessionNotFoundError,
    TargetError,
    TmuxCommandError,
    TmuxError,
    WindowNotFoundError,
)
from .types import Client, Pane, PaneSnapshot, Session, SessionSnapshot, Window, WindowSnapshot
from .sessions import (
    detach_sessions,
    fetch_sessions,
    kill_sessions,
    list_clients,
    new_session,
    rename_session,
    switch_client,
)
from .windows import fetch_windows, link_window, move_window, rename_window, select_window, swap_windows, unlink_windows
from .panes import (
    break_pane,
    fetch_panes,
    kill_panes,
    move_pane,
    rename_pane,
    resize_pane,
    select_layout,
    send_keys,
    swap_panes,
    switch_pane,
)
from .preview import pane_preview
from .commands import command_prompt, list_buffers, list_commands, list_keys, paste_buffer, run_command

__all__ = [
    "run_tmux",
    "check_tmux",
    "current_client_id",
    "install_transport",
    "resolve_socket_path",
    "ControlClient",
    "TmuxError",
    "TmuxCommandError",
    "TargetError",
    "SessionNotFoundError",
    "WindowNotFoundError",
    "PaneNotFoundError",
    "Client",
    "Session",
    "Window",
    "Pane",
    "SessionSnapshot",
    "WindowSnapshot",
    "PaneSnapshot",
    "fetch_sessions",
    "fetch_windows",
    "fetch_panes",
    "list_clients",
    "new_session",
    "rename_session",
    "switch_client",
    "detach_sessions",
    "kill_sessions",
    "select_window",
    "unlink_windows",
    "rename_window",
    "link_window",
    "move_window",
    "swap_windows",
    "switch_pane",
    "kill_panes",
    "rename_pane",
    "swap_panes",
    "move_pane",
    "break_pane",
    "select_layout",
    "resize_pane",
    "send_keys",
    "pane_preview",
    "list_keys",
    "list_commands",
    "list_buffers",
    "paste_buffer",
    "run_command",
    "command_prompt",
]
