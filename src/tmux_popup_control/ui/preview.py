"""Preview of the row under the cursor on switch and join menus.

Captures run as commands; each request carries a sequence number and
the target id, and a reply is applied only when both still match the
level's current request.

PUBLIC API:
  - PreviewKind: What a level previews
  - PreviewData: Current preview state of one level
  - preview_kind_for_level: Level id -> PreviewKind
  - ensure_preview: Request a preview for the level's cursor row if needed
  - refresh_preview: Re-request the preview after a store change
  - handle_preview_loaded: Apply a capture result
  - scroll_preview: Scroll the side preview panel
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from .. import tmux
from ..menu.types import Cmd
from ..tmux import TmuxError
from .level import Level
from .messages import PreviewLoadedMsg

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger(__name__)

SCROLL_STEP = 3


class PreviewKind(str, Enum):
    NONE = "none"
    SESSION = "session"
    WINDOW = "window"
    PANE = "pane"


@dataclass
class PreviewData:
    kind: PreviewKind
    target: str
    label: str = ""
    lines: List[str] = field(default_factory=list)
    raw_ansi: bool = False
    err: str = ""
    loading: bool = True
    seq: int = 0
    scroll_offset: int = 0


def preview_kind_for_level(level_id: str) -> PreviewKind:
    if level_id == "session:switch":
        return PreviewKind.SESSION
    if level_id == "window:switch":
        return PreviewKind.WINDOW
    if level_id in ("pane:switch", "pane:join"):
        return PreviewKind.PANE
    return PreviewKind.NONE


def _window_matches(pane: tmux.Pane, target: str) -> bool:
    return f"{pane.session.strip()}:{pane.window_index}" == target or pane.window.strip() == target


def active_pane_for_session(m: "Model", session: str) -> str:
    """The session's current pane, else its first pane, else ""."""
    target = session.strip()
    fallback = ""
    for pane in m.panes.entries():
        if pane.session.strip() != target:
            continue
        if pane.current:
            return pane.id
        fallback = fallback or pane.id
    return fallback


def active_pane_for_window(m: "Model", window: str) -> str:
    target = window.strip()
    fallback = ""
    for pane in m.panes.entries():
        if not _window_matches(pane, target):
            continue
        if pane.current:
            return pane.id
        fallback = fallback or pane.id
    return fallback


def session_preview_lines(m: "Model", session: str) -> List[str]:
    target = session.strip()
    lines = []
    for window in m.windows.entries():
        if window.session.strip() != target:
            continue
        marker = "*" if window.current else " "
        lines.append(f"{marker} {window.index}: {window.name.strip() or window.label.strip()}")
    return lines or ["(no windows)"]


def window_preview_lines(m: "Model", window: str) -> List[str]:
    target = window.strip()
    lines = []
    for pane in m.panes.entries():
        if not _window_matches(pane, target):
            continue
        marker = "*" if pane.current else " "
        lines.append(f"{marker} {pane.index}: {pane.title.strip() or pane.label.strip()}")
    return lines or ["(no panes)"]


def _capture_cmd(m: "Model", level_id: str, kind: PreviewKind, target: str, pane: str, seq: int) -> Cmd:
    socket = m.socket
    capture = m.pane_preview

    def run() -> PreviewLoadedMsg:
        try:
            lines = capture(socket, pane)
        except (TmuxError, OSError, ValueError) as e:
            logger.debug(f"Preview of {pane} failed: {e}")
            return PreviewLoadedMsg(level_id, target, seq, err=e, kind=kind.value)
        return PreviewLoadedMsg(level_id, target, seq, lines=lines, kind=kind.value, raw_ansi=True)

    return run


def _static_cmd(level_id: str, kind: PreviewKind, target: str, seq: int, lines: List[str]) -> Cmd:
    return lambda: PreviewLoadedMsg(level_id, target, seq, lines=lines, kind=kind.value)


def ensure_preview(m: "Model", level: Optional[Level]) -> Optional[Cmd]:
    """Start a preview request for the level's cursor row.

    Nothing is requested when the level has no preview, or when the
    latest request already targets the row under the cursor.
    """
    if level is None:
        return None
    kind = preview_kind_for_level(level.id)
    item = level.current_item()
    if kind == PreviewKind.NONE or item is None or not item.id:
        m.preview.pop(level.id, None)
        return None
    existing = m.preview.get(level.id)
    if existing is not None and existing.target == item.id:
        return None

    m.preview_seq += 1
    seq = m.preview_seq
    m.preview[level.id] = PreviewData(kind=kind, target=item.id, label=item.label, loading=True, seq=seq)

    if kind == PreviewKind.PANE:
        return _capture_cmd(m, level.id, kind, item.id, item.id, seq)
    if kind == PreviewKind.SESSION:
        pane = active_pane_for_session(m, item.id)
        if not pane:
            return _static_cmd(level.id, kind, item.id, seq, session_preview_lines(m, item.id))
        return _capture_cmd(m, level.id, kind, item.id, pane, seq)
    pane = active_pane_for_window(m, item.id)
    if not pane:
        return _static_cmd(level.id, kind, item.id, seq, window_preview_lines(m, item.id))
    return _capture_cmd(m, level.id, kind, item.id, pane, seq)


def refresh_preview(m: "Model", level: Optional[Level]) -> Optional[Cmd]:
    if level is None:
        return None
    m.preview.pop(level.id, None)
    return ensure_preview(m, level)


def active_preview(m: "Model") -> Optional[PreviewData]:
    level = m.current_level()
    if level is None:
        return None
    return m.preview.get(level.id)


def handle_preview_loaded(m: "Model", msg: PreviewLoadedMsg) -> List[Cmd]:
    data = m.preview.get(msg.level_id)
    if data is None or data.seq != msg.seq or data.target != msg.target:
        logger.debug(f"Dropping stale preview seq={msg.seq} for {msg.target}")
        return []
    data.loading = False
    if msg.err is not None:
        data.err = str(msg.err)
        data.lines = []
        data.raw_ansi = False
        data.scroll_offset = 0
    else:
        data.err = ""
        data.lines = list(msg.lines)
        data.raw_ansi = msg.raw_ansi
        # pane captures open at the newest output; the renderer clamps
        data.scroll_offset = len(data.lines) if msg.kind == PreviewKind.PANE.value else 0
    m.sync_viewport(m.current_level())
    return []


def scroll_preview(m: "Model", delta: int) -> bool:
    """Scroll the side preview by `delta` steps (negative is up)."""
    if not m.has_side_preview():
        return False
    data = active_preview(m)
    if data is None or data.loading:
        return False
    inner = max(m.height - 4, 1)
    max_offset = max(len(data.lines) - inner, 0)
    before = min(data.scroll_offset, max_offset)
    data.scroll_offset = min(max(before + delta * SCROLL_STEP, 0), max_offset)
    return before != data.scroll_offset
