"""Session and client operations.

PUBLIC API:
  - list_clients: Attached clients, control-mode ones flagged
  - fetch_sessions: Build a SessionSnapshot
  - current_session_name: Session of the launching client
  - current_client_name: Client that launched the popup
  - default_session_label: "name: N window[s] (attached)"
  - has_session: Check if session exists
  - new_session: Create a detached session
  - rename_session: Rename a session
  - switch_client: Point a client at a session
  - detach_sessions: Detach the real clients of sessions
  - kill_sessions: Kill sessions and wait for them to disappear
"""

import logging
import os
import time
from typing import Iterable, List, Mapping, Optional

from .core import check_tmux, current_client_id, is_valid_client_name, output_lines, run_tmux, split_format_line
from .exceptions import TargetError, TmuxCommandError, TmuxError
from .types import Client, Session, SessionSnapshot

logger = logging.getLogger(__name__)

ENV_PREFIX = "TMUX_POPUP_CONTROL_"
KILL_WAIT_SECONDS = 2.0


def include_current_from_env(environ: Mapping[str, str]) -> bool:
    return environ.get(ENV_PREFIX + "SWITCH_CURRENT", "") != ""


def list_clients(socket: Optional[str] = None) -> List[Client]:
    """Get all attached clients.

    Raises:
        TmuxCommandError: list-clients failed.
    """
    out = check_tmux(
        ["list-clients", "-F", "#{client_name}\t#{client_session}\t#{client_control_mode}"],
        socket,
    )
    clients = []
    for line in output_lines(out):
        parts = split_format_line(line, 3)
        if parts is None:
            continue
        clients.append(Client(name=parts[0], session=parts[1], control_mode=parts[2] == "1"))
    return clients


def _display(socket: Optional[str], target: str, fmt: str) -> str:
    try:
        code, stdout, _ = run_tmux(["display-message", "-p", "-t", target, fmt], socket)
    except TmuxError:
        return ""
    if code != 0:
        return ""
    return stdout.strip()


def current_session_name(
    socket: Optional[str], clients: List[Client], environ: Optional[Mapping[str, str]] = None
) -> str:
    """Resolve the session of the client that launched the popup.

    Tries $TMUX_PANE first, then the session id in the third field of $TMUX
    (popups have no pane of their own), then the first real client.
    """
    environ = os.environ if environ is None else environ
    pane = environ.get("TMUX_PANE", "").strip()
    if pane:
        name = _display(socket, pane, "#{session_name}")
        if name:
            return name
    fields = environ.get("TMUX", "").split(",")
    if len(fields) >= 3 and fields[2].strip():
        session_id = fields[2].strip()
        if not session_id.startswith("$"):
            session_id = "$" + session_id
        name = _display(socket, session_id, "#{session_name}")
        if name:
            return name
    for client in clients:
        if not client.control_mode and client.session:
            return client.session
    return ""


def current_client_name(socket: Optional[str], clients: List[Client], session: str) -> str:
    """Pick the real client bound to `session`, else ask tmux directly."""
    for client in clients:
        if client.control_mode or client.session != session:
            continue
        if is_valid_client_name(client.name):
            return client.name
    name = current_client_id(socket)
    return name if is_valid_client_name(name) else ""


def default_session_label(name: str, windows: int, attached: bool) -> str:
    """Render the default session label."""
    label = f"{name}: {windows} window"
    if windows != 1:
        label += "s"
    if attached:
        label += " (attached)"
    return label


def fetch_sessions(socket: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> SessionSnapshot:
    """Build a snapshot of all sessions.

    Attachment is derived from the client list so that control-mode clients
    (including our own) never count as attached.

    Raises:
        TmuxCommandError: list-sessions failed.
    """
    environ = os.environ if environ is None else environ
    fmt = "#{session_name}\t#{session_windows}"
    custom = environ.get(ENV_PREFIX + "SESSION_FORMAT", "").strip()
    if custom:
        fmt += f"\t#S: {custom}"
    out = check_tmux(["list-sessions", "-F", fmt], socket)

    try:
        clients = list_clients(socket)
    except TmuxCommandError as e:
        logger.warning(f"list-clients failed: {e}")
        clients = []
    current = current_session_name(socket, clients, environ)

    by_session: dict = {}
    for client in clients:
        if client.control_mode or not client.session:
            continue
        by_session.setdefault(client.session, []).append(client.name)

    sessions = []
    for line in output_lines(out):
        parts = line.split("\t")
        name = parts[0].strip()
        if not name:
            continue
        try:
            windows = int(parts[1]) if len(parts) > 1 else 0
        except ValueError:
            windows = 0
        attached_clients = by_session.get(name, [])
        label = parts[2].strip() if len(parts) > 2 else ""
        if not label:
            label = default_session_label(name, windows, bool(attached_clients))
        sessions.append(
            Session(
                name=name,
                label=label,
                attached=bool(attached_clients),
                clients=list(attached_clients),
                current=name == current,
                windows=windows,
            )
        )
    return SessionSnapshot(
        sessions=sessions,
        current=current,
        include_current=include_current_from_env(environ),
        client_id=current_client_name(socket, clients, current),
    )


def has_session(socket: Optional[str], name: str) -> bool:
    """Check if session exists."""
    code, _, _ = run_tmux(["has-session", "-t", name], socket)
    return code == 0


def _session_name(target: str) -> str:
    name = target.split(":", 1)[0]
    return name or target


def new_session(socket: Optional[str], name: str) -> None:
    """Create a new detached session."""
    name = name.strip()
    if not name:
        raise TargetError("session name required")
    check_tmux(["new-session", "-d", "-s", name], socket)
    logger.info(f"Created session {name}")


def rename_session(socket: Optional[str], target: str, new_name: str) -> None:
    """Rename a session."""
    target = target.strip()
    if not target:
        raise TargetError("session target required")
    new_name = new_name.strip()
    if not new_name:
        raise TargetError("session name required")
    check_tmux(["rename-session", "-t", _session_name(target), new_name], socket)


def switch_client(socket: Optional[str], client: str, target: str) -> None:
    """Switch `client` (or the most recent client when empty) to `target`."""
    if not target.strip():
        raise TargetError("session target required")
    args = ["switch-client"]
    if client.strip():
        args.extend(["-c", client.strip()])
    args.extend(["-t", target.strip()])
    check_tmux(args, socket)


def _tolerate_missing(args: List[str], socket: Optional[str], what: str) -> None:
    code, _, stderr = run_tmux(args, socket)
    # exit status 1 means the target is already gone
    if code in (0, 1):
        return
    raise TmuxCommandError(args, code, stderr or f"failed to {what}")


def detach_sessions(socket: Optional[str], targets: Iterable[str]) -> None:
    """Detach every real client from each session. Sessions with no client are skipped."""
    targets = [t.strip() for t in targets if t.strip()]
    if not targets:
        return
    clients = list_clients(socket)
    for target in targets:
        name = _session_name(target)
        if not any(c.session == name and not c.control_mode for c in clients):
            continue
        _tolerate_missing(["detach-client", "-s", name], socket, f"detach session {name}")


def wait_for_session_removal(socket: Optional[str], name: str, timeout: float = KILL_WAIT_SECONDS) -> bool:
    """Poll has-session until the session is gone or the timeout passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not has_session(socket, name):
            return True
        time.sleep(0.02)
    return not has_session(socket, name)


def kill_sessions(socket: Optional[str], targets: Iterable[str]) -> None:
    """Kill sessions, waiting up to two seconds for each to disappear."""
    for target in targets:
        target = target.strip()
        if not target:
            continue
        name = _session_name(target)
        _tolerate_missing(["kill-session", "-t", name], socket, f"kill session {name}")
        if not wait_for_session_removal(socket, name):
            raise TmuxError(f"session {name} still exists after kill")
        logger.info(f"Killed session {name}")
