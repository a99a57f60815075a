"""Core tmux operations - shared utilities for all tmux modules.

PUBLIC API:
  - run_tmux: Execute tmux command and return result
  - run_process: Execute tmux as a subprocess, bypassing any control client
  - check_tmux: Execute tmux command and raise on failure
  - install_transport: Route run_tmux through a control-mode client
  - base_args: Socket selection arguments
  - split_format_line: Split tab-separated tmux format output
  - resolve_socket_path: Work out which tmux server to talk to
  - current_client_id: Name of the client that launched the popup
"""

import logging
import os
import subprocess
from typing import List, Optional, Tuple

from .exceptions import TmuxCommandError, TmuxError

logger = logging.getLogger(__name__)

_transport = None


def base_args(socket: Optional[str]) -> List[str]:
    """Return ["-S", socket] when a socket path is set."""
    socket = (socket or "").strip()
    if not socket:
        return []
    return ["-S", socket]


def _socket_env(socket: Optional[str]) -> Optional[dict]:
    socket = (socket or "").strip()
    if not socket:
        return None
    env = dict(os.environ)
    env["TMUX_TMPDIR"] = os.path.dirname(socket)
    return env


def install_transport(client) -> None:
    """Route subsequent run_tmux calls through a control-mode client.

    Args:
        client: A started ControlClient, or None to go back to subprocesses.
    """
    global _transport
    _transport = client


def run_process(args: List[str], socket: Optional[str] = None) -> Tuple[int, str, str]:
    """Run tmux as a subprocess, return (returncode, stdout, stderr)."""
    cmd = ["tmux"] + base_args(socket) + list(args)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, errors="replace", env=_socket_env(socket))
    except FileNotFoundError as e:
        raise TmuxError("tmux executable not found") from e
    return result.returncode, result.stdout, result.stderr


def run_tmux(args: List[str], socket: Optional[str] = None) -> Tuple[int, str, str]:
    """Run tmux command, return (returncode, stdout, stderr).

    Prefers the installed control-mode client and falls back to a subprocess
    when the client is missing or has died.
    """
    client = _transport
    if client is not None and client.alive:
        try:
            return client.run(args)
        except TmuxError as e:
            logger.warning(f"control-mode transport failed, falling back: {e}")
    return run_process(args, socket)


def check_tmux(args: List[str], socket: Optional[str] = None) -> str:
    """Run tmux command and return stdout.

    Raises:
        TmuxCommandError: tmux exited non-zero.
    """
    code, stdout, stderr = run_tmux(args, socket)
    if code != 0:
        raise TmuxCommandError(args, code, stderr)
    return stdout


def split_format_line(line: str, fields: int) -> Optional[List[str]]:
    """Split a tab-separated format line into exactly `fields` stripped parts.

    The last field keeps any embedded tabs. Returns None for short lines.
    """
    parts = line.split("\t", fields - 1)
    if len(parts) < fields:
        return None
    return [part.strip() for part in parts]


def output_lines(stdout: str) -> List[str]:
    """Non-empty, stripped lines of tmux output."""
    return [line.strip() for line in stdout.strip().splitlines() if line.strip()]


def resolve_socket_path(flag_value: str = "") -> str:
    """Resolve the tmux socket path.

    Order: flag, TMUX_POPUP_CONTROL_SOCKET / TMUX_POPUP_SOCKET env, first
    field of $TMUX, then <TMUX_TMPDIR or /tmp>/tmux-<uid>/default.
    """
    if flag_value:
        return flag_value
    for name in ("TMUX_POPUP_CONTROL_SOCKET", "TMUX_POPUP_SOCKET"):
        env_socket = os.environ.get(name, "")
        if env_socket:
            return env_socket
    tmux_env = os.environ.get("TMUX", "")
    if tmux_env:
        first = tmux_env.split(",")[0]
        if first:
            return first
    base_dir = os.environ.get("TMUX_TMPDIR") or "/tmp"
    return os.path.join(base_dir, f"tmux-{os.getuid()}", "default")


def current_client_id(socket: Optional[str] = None) -> str:
    """Name of the client that launched the popup, or "" when unknown."""
    args = ["display-message", "-p", "#{client_name}"]
    pane = os.environ.get("TMUX_PANE", "").strip()
    if pane:
        args.extend(["-t", pane])
    try:
        code, stdout, _ = run_process(args, socket)
    except TmuxError:
        return ""
    if code != 0:
        return ""
    return stdout.strip()


def is_valid_client_name(name: str) -> bool:
    """Client names are non-empty and contain no whitespace."""
    return bool(name) and not any(ch.isspace() for ch in name)
