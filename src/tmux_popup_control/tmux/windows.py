"""Window operations.

PUBLIC API:
  - fetch_windows: Build a WindowSnapshot
  - select_window: Make a window active
  - unlink_windows: Unlink (and kill when last link) windows
  - rename_window: Rename a window
  - link_window: Link a window into another session
  - move_window: Move a window into another session
  - swap_windows: Swap two windows
"""

import logging
import os
from typing import Iterable, List, Mapping, Optional

from .core import check_tmux, output_lines, split_format_line
from .exceptions import TargetError, TmuxCommandError, TmuxError
from .sessions import ENV_PREFIX, current_session_name, include_current_from_env, list_clients
from .types import Window, WindowSnapshot

logger = logging.getLogger(__name__)

_FIELDS = "#{window_id}\t#{session_name}:#{window_index}\t#{session_name}\t#{window_index}\t#{window_name}\t#{window_active}"


def _list_args(fmt: str, filter_expr: str) -> List[str]:
    args = ["list-windows", "-a"]
    if filter_expr:
        args.extend(["-f", filter_expr])
    args.extend(["-F", fmt])
    return args


def _parse_windows(out: str, with_label: bool) -> List[Window]:
    windows = []
    for line in output_lines(out):
        parts = split_format_line(line, 7 if with_label else 6)
        if parts is None:
            continue
        internal_id, display_id, session, index, name, active = parts[:6]
        try:
            index_num = int(index)
        except ValueError:
            index_num = 0
        if not display_id:
            display_id = f"{session}:{index_num}"
        label = parts[6] if with_label else ""
        windows.append(
            Window(
                id=display_id,
                session=session,
                index=index_num,
                name=name,
                active=active == "1",
                label=label or f"{display_id} {name}",
                internal_id=internal_id,
            )
        )
    return windows


def fetch_windows(socket: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> WindowSnapshot:
    """Build a snapshot of all windows across sessions.

    A failing custom filter or format falls back to the plain listing.

    Raises:
        TmuxCommandError: Both listings failed.
    """
    environ = os.environ if environ is None else environ
    filter_expr = environ.get(ENV_PREFIX + "WINDOW_FILTER", "").strip()
    label_expr = environ.get(ENV_PREFIX + "WINDOW_FORMAT", "").strip() or "#{window_name}"
    fmt = f"{_FIELDS}\t#S:#{{window_index}}: {label_expr}"
    try:
        windows = _parse_windows(check_tmux(_list_args(fmt, filter_expr), socket), with_label=True)
    except TmuxCommandError as e:
        logger.warning(f"list-windows with custom format failed, using fallback: {e}")
        windows = _parse_windows(check_tmux(_list_args(_FIELDS, ""), socket), with_label=False)

    try:
        clients = list_clients(socket)
    except TmuxCommandError:
        clients = []
    current_session = current_session_name(socket, clients, environ)

    snapshot = WindowSnapshot(current_session=current_session, include_current=include_current_from_env(environ))
    for window in windows:
        window.current = window.session == current_session and window.active
        if window.current and not snapshot.current_id:
            snapshot.current_id = window.id
            snapshot.current_label = window.label
    snapshot.windows = windows
    return snapshot


def select_window(socket: Optional[str], target: str) -> None:
    """Make `target` the active window of its session."""
    if not target.strip():
        raise TargetError("window target required")
    check_tmux(["select-window", "-t", target.strip()], socket)


def unlink_windows(socket: Optional[str], targets: Iterable[str]) -> None:
    """Unlink each window, killing it when no other session links it."""
    for target in targets:
        target = target.strip()
        if not target:
            continue
        check_tmux(["unlink-window", "-k", "-t", target], socket)
        logger.info(f"Unlinked window {target}")


def rename_window(socket: Optional[str], target: str, name: str) -> None:
    """Rename a window."""
    if not target.strip():
        raise TargetError("window target required")
    if not name.strip():
        raise TargetError("window name required")
    check_tmux(["rename-window", "-t", target.strip(), name.strip()], socket)


def _session_transfer(socket: Optional[str], verb: str, source: str, session: str, message: str) -> None:
    args = [verb, "-a", "-s", source, "-t", session]
    try:
        check_tmux(args, socket)
    except TmuxError as e:
        raise TmuxError(f"{message}: {e}") from e


def link_window(socket: Optional[str], source: str, session: str) -> None:
    """Link `source` into `session` after its current window."""
    _session_transfer(socket, "link-window", source, session, f"failed to link window {source} to {session}")


def move_window(socket: Optional[str], source: str, session: str) -> None:
    """Move `source` into `session` after its current window."""
    _session_transfer(socket, "move-window", source, session, f"failed to move window {source} to {session}")


def swap_windows(socket: Optional[str], first: str, second: str) -> None:
    """Swap two windows."""
    if not first.strip() or not second.strip():
        raise TargetError("window ids required")
    try:
        check_tmux(["swap-window", "-s", first, "-t", second], socket)
    except TmuxError as e:
        raise TmuxError(f"failed to swap windows {first} and {second}: {e}") from e
