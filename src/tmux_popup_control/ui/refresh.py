"""Live refresh of open levels from backend snapshots.

PUBLIC API:
  - SESSION_LEVELS / WINDOW_LEVELS / PANE_LEVELS: Levels rebuilt per store
  - wait_for_backend: Command blocking on the watcher's next event
  - handle_backend_event: Record the poll outcome and refresh open levels
  - handle_backend_done: Forget the watcher once its stream closes
  - backend_issue: The degraded-backend message, if any
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from ..backend import Watcher
from ..menu.types import Cmd, Context
from .forms import PaneRenameForm, SessionForm
from .messages import BackendDoneMsg, BackendEventMsg
from .navigation import PANE_SWAP_TARGET, WINDOW_SWAP_TARGET
from .preview import refresh_preview

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger(__name__)

SESSION_LEVELS = ["session:switch", "session:rename", "session:detach", "session:kill"]
WINDOW_LEVELS = ["window:switch", "window:link", "window:move", "window:swap", "window:kill", "window:rename"]
PANE_LEVELS = ["pane:switch", "pane:break", "pane:join", "pane:swap", "pane:kill", "pane:rename"]

_PANE_PREVIEW_LEVELS = ("pane:switch", "pane:join", "session:switch", "window:switch")


def wait_for_backend(watcher: Watcher) -> Cmd:
    def run():
        event = watcher.next_event()
        if event is None:
            return BackendDoneMsg()
        return BackendEventMsg(event)

    return run


def _rebuild(m: "Model", ids: List[str], ctx: Context) -> None:
    for id in ids:
        level = m.find_level(id)
        if level is None:
            continue
        node = m.registry.find(id)
        if node is None or node.loader is None:
            continue
        level.update_items(node.loader(ctx))
        m.apply_node_settings(level)
        m.sync_viewport(level)


def _close_swap_target(m: "Model", level_id: str) -> None:
    """Drop a swap's target level; a refresh invalidates its pending side."""
    remaining = [level for level in m.stack if level.id != level_id]
    if len(remaining) != len(m.stack) and remaining:
        m.stack = remaining
        m.sync_viewport(m.current_level())


def apply_backend_event(m: "Model", event) -> Optional[Cmd]:
    m.backend_state[event.kind] = event.err
    if event.err is not None:
        m.backend_last_err = str(event.err)
        return None

    result = m.dispatcher.handle(event)
    ctx = m.menu_context()
    current = m.current_level()
    preview_cmd: Optional[Cmd] = None

    if result.sessions_updated:
        _rebuild(m, SESSION_LEVELS, ctx)
        switch = m.find_level("session:switch")
        if switch is not None and switch.items:
            m.clear_info()
        if isinstance(m.form, SessionForm):
            m.form.set_sessions(ctx.sessions)
        if current is not None and current.id == "session:switch":
            preview_cmd = refresh_preview(m, current)

    if result.windows_updated:
        _rebuild(m, WINDOW_LEVELS, ctx)
        m.pending_window_swap = None
        _close_swap_target(m, WINDOW_SWAP_TARGET)
        if current is not None and current.id == "window:switch":
            preview_cmd = refresh_preview(m, current)

    if result.panes_updated:
        _rebuild(m, PANE_LEVELS, ctx)
        m.pending_pane_swap = None
        _close_swap_target(m, PANE_SWAP_TARGET)
        if isinstance(m.form, PaneRenameForm):
            m.form.sync_context(ctx)
        if current is not None and preview_cmd is None and current.id in _PANE_PREVIEW_LEVELS:
            preview_cmd = refresh_preview(m, current)

    if not backend_issue(m):
        m.backend_last_err = ""
    return preview_cmd


def handle_backend_event(m: "Model", msg: BackendEventMsg) -> List[Cmd]:
    cmds: List[Cmd] = []
    preview_cmd = apply_backend_event(m, msg.event)
    if preview_cmd is not None:
        cmds.append(preview_cmd)
    if m.backend is not None:
        cmds.append(wait_for_backend(m.backend))
    return cmds


def handle_backend_done(m: "Model", msg: BackendDoneMsg) -> List[Cmd]:
    logger.debug("Backend stream closed")
    m.backend = None
    return []


def backend_issue(m: "Model") -> str:
    """Last backend error while any store's latest poll failed, else ""."""
    for err in m.backend_state.values():
        if err is not None:
            return m.backend_last_err or str(err)
    return ""
