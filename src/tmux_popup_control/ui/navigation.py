"""Menu navigation: the level stack, enter/escape and cursor keys.

PUBLIC API:
  - handle_key: KeyMsg handler for menu mode
  - handle_escape: Pop a level, or quit at the root
  - handle_enter: Descend, run an action or finish a swap
  - handle_category_loaded: Push the level a loader produced
  - apply_root_menu_override: Open a registry node as the root level
  - start_window_swap / start_pane_swap: Push the second step of a swap
  - load_menu_cmd: Command running a loader against a fresh context
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from ..menu.pane import pane_swap_command
from ..menu.registry import Node
from ..menu.types import Cmd, Item, Loader, PaneSwapPrompt, WindowSwapPrompt
from ..menu.window import window_swap_command
from ..tmux import TmuxError
from .bus import Request
from .forms import Mode
from .input import handle_text_input
from .level import Level
from .messages import CategoryLoadedMsg, KeyMsg

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger(__name__)

WINDOW_SWAP_TARGET = "window:swap-target"
PANE_SWAP_TARGET = "pane:swap-target"
DEFAULT_ROOT_TITLE = "Main Menu"


def clean_segment(text: str) -> str:
    return " ".join(text.replace("_", " ").replace("-", " ").split())


def load_menu_cmd(m: "Model", id: str, title: str, loader: Loader) -> Cmd:
    ctx = m.menu_context()

    def run() -> CategoryLoadedMsg:
        try:
            items = loader(ctx)
        except (TmuxError, ValueError, OSError) as e:
            logger.error(f"Loading {id} failed: {e}")
            return CategoryLoadedMsg(id, title, err=e)
        return CategoryLoadedMsg(id, title, items=list(items))

    return run


def handle_key(m: "Model", msg: KeyMsg) -> List[Cmd]:
    if m.mode != Mode.MENU:
        return []
    level = m.current_level()
    if msg.key == "tab":
        if level is not None and level.multi_select:
            level.toggle_current_selection()
        return []
    handled, cmds = handle_text_input(m, msg)
    if handled:
        return cmds
    key = msg.key
    if key in ("ctrl+c", "q"):
        return [m.quit()]
    if key == "escape":
        return handle_escape(m)
    if key == "enter":
        return handle_enter(m)
    if level is None:
        return []
    if key in ("up", "down"):
        moved = level.move_cursor_up() if key == "up" else level.move_cursor_down()
        if moved:
            m.tracer.ui.menu_cursor(level.id, level.cursor)
        m.sync_viewport(level)
        return []
    moves = {
        "pageup": lambda: level.move_cursor_page_up(m.max_visible_items()),
        "pagedown": lambda: level.move_cursor_page_down(m.max_visible_items()),
        "home": level.move_cursor_home,
        "end": level.move_cursor_end,
    }
    if key in moves:
        if moves[key]():
            m.tracer.ui.menu_cursor(level.id, level.cursor)
        m.sync_viewport(level)
    return []


def handle_escape(m: "Model") -> List[Cmd]:
    current = m.current_level()
    if current is None or len(m.stack) <= 1:
        return [m.quit()]
    if current.id == WINDOW_SWAP_TARGET:
        m.pending_window_swap = None
    if current.id == PANE_SWAP_TARGET:
        m.pending_pane_swap = None
    m.stack.pop()
    parent = m.stack[-1]
    if 0 <= parent.last_cursor < len(parent.items):
        parent.cursor = parent.last_cursor
    else:
        idx = parent.index_of(current.id)
        if idx >= 0:
            parent.cursor = idx
        elif parent.items:
            parent.cursor = len(parent.items) - 1
    parent.last_cursor = -1
    m.sync_viewport(parent)
    m.err_msg = ""
    m.force_clear_info()
    return []


def _begin_pending(m: "Model", id: str, label: str) -> None:
    m.loading = True
    m.pending_id = id
    m.pending_label = label
    m.err_msg = ""
    m.force_clear_info()


def handle_enter(m: "Model") -> List[Cmd]:
    if m.loading:
        return []
    current = m.current_level()
    if current is None:
        return []
    item = current.current_item()
    if item is None:
        return []
    ctx = m.menu_context()
    m.tracer.ui.menu_enter(current.id, item.id, item.label, current.filter)
    current.set_filter("", 0)

    if current.id == WINDOW_SWAP_TARGET and m.pending_window_swap is not None:
        first, m.pending_window_swap = m.pending_window_swap, None
        m.stack.pop()
        _begin_pending(m, "window:swap", f"{first.label} ↔ {item.label}")
        return [window_swap_command(ctx, first, item)]
    if current.id == PANE_SWAP_TARGET and m.pending_pane_swap is not None:
        first, m.pending_pane_swap = m.pending_pane_swap, None
        m.stack.pop()
        _begin_pending(m, "pane:swap", f"{first.label} ↔ {item.label}")
        return [pane_swap_command(ctx, first, item)]

    node: Optional[Node] = current.node or m.registry.find(current.id)
    if current.multi_select:
        selected = current.selected_items()
        if selected:
            item = Item("\n".join(s.id for s in selected), ", ".join(s.label for s in selected))
            current.clear_selection()

    if node is not None:
        child = node.children.get(item.id)
        if child is not None and child.loader is not None:
            current.last_cursor = current.cursor
            _begin_pending(m, child.id, item.label)
            return [load_menu_cmd(m, child.id, item.label, child.loader)]
        if child is not None and child.action is not None:
            _begin_pending(m, child.id, item.label)
            return [m.bus.execute(ctx, Request(child.id, item.label, child.action, item))]
        if node.action is not None:
            _begin_pending(m, node.id, item.label)
            return [m.bus.execute(ctx, Request(node.id, item.label, node.action, item))]
    m.set_info(f"Selected {item.label} (no action defined yet)")
    return []


def handle_category_loaded(m: "Model", msg: CategoryLoadedMsg) -> List[Cmd]:
    if msg.id != m.pending_id:
        logger.debug(f"Dropping stale load of {msg.id}")
        return []
    m.loading = False
    m.pending_id = ""
    m.pending_label = ""
    if msg.err is not None:
        m.err_msg = str(msg.err)
        return []
    m.err_msg = ""
    level = Level(msg.id, msg.title, msg.items, m.registry.find(msg.id))
    m.apply_node_settings(level)
    m.sync_viewport(level)
    m.stack.append(level)
    if not level.items:
        m.set_info("No entries found.")
    else:
        m.clear_info()
    return []


def apply_root_menu_override(m: "Model", requested: str) -> None:
    """Replace the root level with the named node's menu.

    Unknown ids and loader failures leave an error message; a failing
    loader still opens the node with no rows.
    """
    trimmed = requested.strip()
    if not trimmed:
        m.root_menu_id = ""
        m.root_title = DEFAULT_ROOT_TITLE
        return
    id = trimmed.lower()
    node = m.registry.find(id)
    if node is None:
        m.err_msg = f'Unknown root menu "{trimmed}"'
        m.root_menu_id = ""
        m.root_title = DEFAULT_ROOT_TITLE
        return

    items: List[Item] = []
    m.err_msg = ""
    if node.loader is not None:
        try:
            items = list(node.loader(m.menu_context()))
        except (TmuxError, ValueError, OSError) as e:
            logger.error(f"Loading root menu {id} failed: {e}")
            m.err_msg = f"Failed to load {id} menu: {e}"

    title = clean_segment(node.id)
    root = Level(node.id, title, items, node)
    m.apply_node_settings(root)
    m.sync_viewport(root)
    m.stack = [root]
    m.root_menu_id = node.id
    m.root_title = header_segment(root) or title or node.id


def header_segment(level: Level) -> str:
    """Last ':' part of the level id, lowercased with '-' and '_' as spaces."""
    candidate = level.id.strip() or level.title.strip()
    if not candidate:
        return ""
    candidate = candidate.rsplit(":", 1)[-1]
    return clean_segment(candidate).lower()


def _start_swap(m: "Model", level_id: str, first: Item, entries, empty_info: str) -> Optional[Item]:
    label = first.label
    for entry in entries:
        if entry.id == first.id:
            label = entry.label
            break
    items = [Item(entry.id, entry.label) for entry in entries if entry.id != first.id]
    if not items:
        m.set_info(empty_info)
        return None
    parent = m.current_level()
    if parent is not None:
        parent.last_cursor = parent.cursor
    m.stack.append(Level(level_id, f"Swap {label} with…", items))
    return Item(first.id, label)


def start_window_swap(m: "Model", prompt: WindowSwapPrompt) -> None:
    m.pending_window_swap = _start_swap(
        m, WINDOW_SWAP_TARGET, prompt.first, m.windows.entries(), "No windows available to swap with."
    )


def start_pane_swap(m: "Model", prompt: PaneSwapPrompt) -> None:
    m.pending_pane_swap = _start_swap(
        m, PANE_SWAP_TARGET, prompt.first, m.panes.entries(), "No panes available to swap with."
    )
