"""Pane operations.

PUBLIC API:
  - fetch_panes: Build a PaneSnapshot
  - parse_pane_target: Split "session:window.pane"
  - switch_pane: Switch client, window and pane in one go
  - kill_panes: Kill panes
  - rename_pane: Set a pane title
  - swap_panes: Swap two panes
  - move_pane: Move (join) a pane into another window
  - break_pane: Break a pane out into its own window
  - select_layout: Apply a layout to the current window
  - resize_pane: Resize the current pane
  - send_keys: Send keys to a pane
"""

import logging
import os
from typing import Iterable, List, Mapping, Optional, Tuple

from .core import check_tmux, output_lines, split_format_line
from .exceptions import TargetError, TmuxCommandError
from .sessions import ENV_PREFIX, current_session_name, include_current_from_env, list_clients, switch_client
from .types import Pane, PaneSnapshot
from .windows import select_window

logger = logging.getLogger(__name__)

DEFAULT_PANE_FORMAT = (
    "[#{window_name}:#{pane_title}] #{pane_current_command}  [#{pane_width}x#{pane_height}] "
    "[history #{history_size}/#{history_limit}, #{history_bytes} bytes] #{?pane_active,[active],[inactive]}"
)

_FIELDS = "\t".join(
    [
        "#{pane_id}",
        "#S:#{window_index}.#{pane_index}",
        "#{session_name}",
        "#{window_name}",
        "#{window_index}",
        "#{pane_index}",
        "#{pane_active}",
        "#{window_active}",
        "#{pane_title}",
        "#{pane_current_command}",
        "#{pane_width}",
        "#{pane_height}",
        "#{pane_pid}",
    ]
)
_FIELD_COUNT = 13

RESIZE_FLAGS = {"left": "-L", "right": "-R", "up": "-U", "down": "-D"}


def _int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def _parse_panes(out: str, with_label: bool) -> List[Pane]:
    panes = []
    for line in output_lines(out):
        parts = split_format_line(line, _FIELD_COUNT + 1 if with_label else _FIELD_COUNT)
        if parts is None:
            continue
        display_id = parts[1]
        label = parts[_FIELD_COUNT] if with_label else ""
        panes.append(
            Pane(
                id=display_id,
                pane_id=parts[0],
                session=parts[2],
                window=parts[3],
                window_index=_int(parts[4]),
                index=_int(parts[5]),
                active=parts[6] == "1",
                title=parts[8],
                command=parts[9],
                width=_int(parts[10]),
                height=_int(parts[11]),
                pid=_int(parts[12]),
                label=label or display_id,
            )
        )
        # window_active is only needed for the current-pane marker
        panes[-1].current = parts[6] == "1" and parts[7] == "1"
    return panes


def fetch_panes(socket: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> PaneSnapshot:
    """Build a snapshot of all panes across sessions.

    The current pane is the active pane of the active window in the current
    session; when that cannot be found the first active pane is used.

    Raises:
        TmuxCommandError: Both listings failed.
    """
    environ = os.environ if environ is None else environ
    filter_expr = environ.get(ENV_PREFIX + "PANE_FILTER", "").strip()
    label_expr = environ.get(ENV_PREFIX + "PANE_FORMAT", "").strip() or DEFAULT_PANE_FORMAT
    fmt = f"{_FIELDS}\t#S:#{{window_index}}.#{{pane_index}}: {label_expr}"

    args = ["list-panes", "-a"]
    if filter_expr:
        args.extend(["-f", filter_expr])
    try:
        panes = _parse_panes(check_tmux(args + ["-F", fmt], socket), with_label=True)
    except TmuxCommandError as e:
        logger.warning(f"list-panes with custom format failed, using fallback: {e}")
        panes = _parse_panes(check_tmux(["list-panes", "-a", "-F", _FIELDS], socket), with_label=False)

    try:
        clients = list_clients(socket)
    except TmuxCommandError:
        clients = []
    current_session = current_session_name(socket, clients, environ)

    snapshot = PaneSnapshot(include_current=include_current_from_env(environ))
    for pane in panes:
        if current_session:
            pane.current = pane.current and pane.session == current_session
        if pane.current and snapshot.current_id:
            pane.current = False
        if pane.current:
            snapshot.current_id = pane.id
            snapshot.current_label = pane.label
            snapshot.current_window = f"{pane.session}:{pane.window_index}"
    if not snapshot.current_id:
        for pane in panes:
            if pane.active:
                snapshot.current_id = pane.id
                snapshot.current_label = pane.label
                snapshot.current_window = f"{pane.session}:{pane.window_index}"
                break
    snapshot.panes = panes
    return snapshot


def parse_pane_target(target: str) -> Tuple[str, str, str]:
    """Split "session:window.pane" into its three parts.

    Raises:
        TargetError: Target is not in that shape.
    """
    session, sep, rest = target.partition(":")
    window, dot, pane = rest.partition(".")
    if not sep or not dot:
        raise TargetError(f'invalid pane target "{target}"')
    return session, window, pane


def switch_pane(socket: Optional[str], client: str, target: str) -> None:
    """Switch client to the pane's session, then select its window and the pane."""
    session, window, _ = parse_pane_target(target)
    switch_client(socket, client, session)
    select_window(socket, f"{session}:{window}")
    check_tmux(["select-pane", "-t", target], socket)


def kill_panes(socket: Optional[str], targets: Iterable[str]) -> None:
    """Kill each pane in order."""
    for target in targets:
        target = target.strip()
        if not target:
            continue
        check_tmux(["kill-pane", "-t", target], socket)
        logger.info(f"Killed pane {target}")


def rename_pane(socket: Optional[str], target: str, title: str) -> None:
    """Set a pane title."""
    target = target.strip()
    if not target:
        raise TargetError("pane target required")
    title = title.strip()
    if not title:
        raise TargetError("pane title required")
    check_tmux(["select-pane", "-t", target, "-T", title], socket)


def swap_panes(socket: Optional[str], first: str, second: str) -> None:
    """Swap two panes."""
    if not first.strip() or not second.strip():
        raise TargetError("pane ids required")
    check_tmux(["swap-pane", "-s", first, "-t", second], socket)


def move_pane(socket: Optional[str], source: str, target: str = "") -> None:
    """Move `source` next to `target` (the current pane when empty)."""
    if not source.strip():
        raise TargetError("pane source required")
    args = ["move-pane", "-s", source]
    if target.strip():
        args.extend(["-t", target])
    check_tmux(args, socket)


def break_pane(socket: Optional[str], source: str, destination: str = "") -> None:
    """Break `source` into a new window at `destination`."""
    if not source.strip():
        raise TargetError("pane source required")
    args = ["break-pane", "-s", source]
    if destination.strip():
        args.extend(["-t", destination])
    check_tmux(args, socket)


def select_layout(socket: Optional[str], layout: str) -> None:
    """Apply a layout to the current window."""
    if not layout.strip():
        raise TargetError("layout required")
    check_tmux(["select-layout", layout], socket)


def resize_pane(socket: Optional[str], direction: str, amount: int) -> None:
    """Resize the current pane by `amount` cells towards `direction`."""
    if amount <= 0:
        raise TargetError("amount must be positive")
    flag = RESIZE_FLAGS.get(direction)
    if flag is None:
        raise TargetError(f'unknown direction "{direction}"')
    check_tmux(["resize-pane", flag, str(amount)], socket)


def send_keys(socket: Optional[str], target: str, *keys: str) -> None:
    """Send key names to a pane."""
    check_tmux(["send-keys", "-t", target] + list(keys), socket)
