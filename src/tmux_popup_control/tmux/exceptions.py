"""Exceptions raised by the tmux adapter.

PUBLIC API:
  - TmuxError: Base exception for tmux operations
  - TmuxCommandError: tmux exited with a non-zero status
  - TargetError: Invalid or missing command argument
  - SessionNotFoundError: Session lookup failed
  - WindowNotFoundError: Window lookup failed
  - PaneNotFoundError: Pane lookup failed
"""

from typing import List


class TmuxError(Exception):
    """Base exception for tmux operations."""

    pass


class TmuxCommandError(TmuxError):
    """tmux exited with a non-zero status.

    Attributes:
        args_list: Arguments passed to tmux (without the binary name).
        returncode: Exit status.
        stderr: Captured error output.
    """

    def __init__(self, args_list: List[str], returncode: int, stderr: str = ""):
        self.args_list = list(args_list)
        self.returncode = returncode
        self.stderr = stderr.strip()
        command = args_list[0] if args_list else "tmux"
        detail = self.stderr or f"exit status {returncode}"
        super().__init__(f"{command}: {detail}")


class TargetError(TmuxError):
    """Command argument missing or malformed."""

    pass


class SessionNotFoundError(TmuxError):
    """Session does not exist."""

    pass


class WindowNotFoundError(TmuxError):
    """Window does not exist."""

    pass


class PaneNotFoundError(TmuxError):
    """Pane does not exist."""

    pass
