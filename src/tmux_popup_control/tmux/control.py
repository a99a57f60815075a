"""Cached tmux control-mode connection.

PUBLIC API:
  - ControlClient: One `tmux -C` client shared by every adapter call
  - quote_argument: Quote a single argument for the tmux command parser
"""

import logging
import string
import subprocess
import threading
from typing import List, Optional, Tuple

from .core import _socket_env, base_args
from .exceptions import TmuxError

logger = logging.getLogger(__name__)

_SAFE_CHARS = frozenset(string.ascii_letters + string.digits + "-_./:%@=,+")


def quote_argument(arg: str) -> str:
    """Quote an argument so tmux parses it back as a single word."""
    if arg and all(ch in _SAFE_CHARS for ch in arg):
        return arg
    return "'" + arg.replace("'", "'\\''") + "'"


class ControlClient:
    """A persistent control-mode client.

    Commands are written one per line and their output is read back from the
    matching %begin/%end (or %error) block. Notifications outside a block are
    skipped. Access is serialised with a lock; shutdown is idempotent.

    Args:
        socket: Socket path of the tmux server, or None for the default.
    """

    def __init__(self, socket: Optional[str] = None):
        self.socket = socket
        self._proc: Optional[subprocess.Popen] = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def alive(self) -> bool:
        proc = self._proc
        return not self._closed and proc is not None and proc.poll() is None

    def start(self) -> bool:
        """Attach the control client. Returns False when tmux refuses."""
        cmd = ["tmux"] + base_args(self.socket) + ["-C", "attach-session"]
        with self._lock:
            if self._closed:
                return False
            try:
                self._proc = subprocess.Popen(
                    cmd,
                    stdin=subprocess.PIPE,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.DEVNULL,
                    text=True,
                    errors="replace",
                    bufsize=1,
                    env=_socket_env(self.socket),
                )
                # attach-session answers with its own block first
                self._read_block()
            except (OSError, TmuxError) as e:
                logger.warning(f"control-mode client unavailable: {e}")
                self._terminate()
                return False
        logger.info("control-mode client attached")
        return True

    def run(self, args: List[str]) -> Tuple[int, str, str]:
        """Run one command over the control connection.

        Returns:
            (returncode, stdout, stderr) shaped like a subprocess result.

        Raises:
            TmuxError: The connection is not running or closed mid-command.
        """
        line = " ".join(quote_argument(arg) for arg in args)
        with self._lock:
            if not self.alive:
                raise TmuxError("control-mode client is not running")
            try:
                self._proc.stdin.write(line + "\n")
                self._proc.stdin.flush()
            except OSError as e:
                self._terminate()
                raise TmuxError(f"control-mode write failed: {e}") from e
            ok, lines = self._read_block()
        text = "\n".join(lines)
        if ok:
            return 0, text + "\n" if lines else "", ""
        return 1, "", text

    def _read_block(self) -> Tuple[bool, List[str]]:
        lines: List[str] = []
        in_block = False
        while True:
            raw = self._proc.stdout.readline()
            if raw == "":
                self._terminate()
                raise TmuxError("control-mode connection closed")
            line = raw.rstrip("\n")
            if not in_block:
                if line.startswith("%begin"):
                    in_block = True
                    lines = []
                continue
            if line.startswith("%end"):
                return True, lines
            if line.startswith("%error"):
                return False, lines
            lines.append(line)

    def _terminate(self) -> None:
        proc = self._proc
        self._proc = None
        if proc is None:
            return
        try:
            if proc.stdin:
                proc.stdin.close()
        except OSError as e:
            logger.debug(f"closing control-mode stdin failed: {e}")
        try:
            proc.wait(timeout=1)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()

    def shutdown(self) -> None:
        """Detach the control client. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._terminate()
        logger.info("control-mode client closed")
