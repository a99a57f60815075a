"""Pane capture for the preview panel.

PUBLIC API:
  - pane_preview: Capture the tail of a pane as plain text lines
  - split_preview_lines: Normalise captured text into lines
"""

import re
from typing import List, Optional

from .core import run_process
from .exceptions import TargetError, TmuxCommandError

PREVIEW_LINES = 40

_ANSI_ESCAPE = re.compile(r"\x1b(?:\[[0-9;?]*[A-Za-z]|[A-Za-z=><\\])")


def split_preview_lines(text: str, keep_empty: bool = True) -> List[str]:
    """Normalise line endings, drop trailing blank lines and right-strip each line."""
    if not text:
        return []
    normalised = text.replace("\r\n", "\n").replace("\r", "\n").rstrip("\n")
    if not normalised:
        return []
    lines = []
    for line in normalised.split("\n"):
        trimmed = line.rstrip(" \t")
        if not trimmed and not keep_empty:
            continue
        lines.append(trimmed)
    return lines


def pane_preview(socket: Optional[str], pane: str) -> List[str]:
    """Capture the last lines of a pane.

    Always uses a subprocess so the capture does not depend on the
    control-mode connection.

    Returns:
        Up to 40 lines, or ["(pane is empty)"] for a blank pane.
    """
    target = pane.strip()
    if not target:
        raise TargetError("pane target required")
    args = ["capture-pane", "-p", "-t", target, "-S", f"-{PREVIEW_LINES}"]
    code, stdout, stderr = run_process(args, socket)
    if code != 0:
        raise TmuxCommandError(args, code, stderr)
    lines = split_preview_lines(_ANSI_ESCAPE.sub("", stdout))
    if not lines:
        return ["(pane is empty)"]
    return lines[-PREVIEW_LINES:]
