"""The popup's message-driven state machine.

Model.update(msg) mutates state and returns commands: zero-argument
callables that the runtime runs off the UI thread, feeding each result
message back into update(). Handlers are looked up by message type; an
open form sees key presses before anything else.

PUBLIC API:
  - Model: Level stack, forms, previews, pending action and backend state
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from .. import tmux
from ..backend import Dispatcher, Kind, Watcher
from ..events import Tracer
from ..menu.catalog import default_registry, root_items
from ..menu.registry import Registry
from ..menu.types import (
    ActionResult,
    Cmd,
    CommandPromptMsg,
    Context,
    Item,
    PanePrompt,
    PaneSwapPrompt,
    SessionPrompt,
    WindowPrompt,
    WindowSwapPrompt,
)
from ..state import PaneStore, SessionStore, WindowStore
from . import navigation, preview, prompts, refresh
from .bus import ActionBus
from .forms import Mode
from .level import Level
from .messages import (
    BackendDoneMsg,
    BackendEventMsg,
    CategoryLoadedMsg,
    KeyMsg,
    MouseScrollMsg,
    PreviewLoadedMsg,
    QuitMsg,
    ResizeMsg,
)

logger = logging.getLogger(__name__)

INFO_TTL = 5.0
PREVIEW_PANEL_FRACTION = 0.6
PREVIEW_PANEL_MIN_WIDTH = 40
PREVIEW_MAX_LINES = 20


class Model:
    """Popup state.

    Args:
        socket: tmux socket path used by actions and previews.
        width: Fixed width in cells, 0 to follow the terminal.
        height: Fixed height in rows, 0 to follow the terminal.
        show_footer: Render the key-hint footer.
        verbose: Keep success messages so they can be printed on exit.
        watcher: Backend watcher, or None to run without live snapshots.
        root_menu: Registry id to open as the root level.
        tracer: Trace emitters; a silent tracer when omitted.
        registry: Menu registry; the stock one when omitted.
    """

    def __init__(
        self,
        socket: Optional[str] = None,
        width: int = 0,
        height: int = 0,
        show_footer: bool = False,
        verbose: bool = False,
        watcher: Optional[Watcher] = None,
        root_menu: str = "",
        tracer: Optional[Tracer] = None,
        registry: Optional[Registry] = None,
    ):
        self.socket = socket
        self.tracer = tracer or Tracer(None)
        self.registry = registry or default_registry()
        self.bus = ActionBus(self.tracer)

        self.sessions = SessionStore()
        self.windows = WindowStore()
        self.panes = PaneStore()
        self.dispatcher = Dispatcher(self.sessions, self.windows, self.panes)
        self.backend = watcher
        self.backend_state: Dict[Kind, Optional[BaseException]] = {}
        self.backend_last_err = ""

        self.width = max(width, 0)
        self.height = max(height, 0)
        self.fixed_width = width > 0
        self.fixed_height = height > 0
        self.show_footer = show_footer
        self.verbose = verbose

        self.loading = False
        self.pending_id = ""
        self.pending_label = ""
        self.err_msg = ""
        self.info_msg = ""
        self.info_expire = 0.0
        self.clock: Callable[[], float] = time.monotonic

        self.mode = Mode.MENU
        self.form: Any = None
        self.pending_window_swap: Optional[Item] = None
        self.pending_pane_swap: Optional[Item] = None

        self.preview: Dict[str, preview.PreviewData] = {}
        self.preview_seq = 0
        self.pane_preview = tmux.pane_preview

        self.root_menu_id = ""
        self.root_title = navigation.DEFAULT_ROOT_TITLE
        root = Level("root", navigation.DEFAULT_ROOT_TITLE, root_items(), self.registry.root())
        self.stack: List[Level] = [root]
        self.apply_node_settings(root)
        self.sync_viewport(root)
        if root_menu:
            navigation.apply_root_menu_override(self, root_menu)

        self._handlers: Dict[type, Callable[["Model", Any], List[Cmd]]] = {
            KeyMsg: navigation.handle_key,
            ResizeMsg: Model._handle_resize,
            MouseScrollMsg: Model._handle_mouse_scroll,
            CategoryLoadedMsg: navigation.handle_category_loaded,
            ActionResult: prompts.handle_action_result,
            SessionPrompt: prompts.handle_session_prompt,
            WindowPrompt: prompts.handle_window_prompt,
            PanePrompt: prompts.handle_pane_prompt,
            WindowSwapPrompt: prompts.handle_window_swap_prompt,
            PaneSwapPrompt: prompts.handle_pane_swap_prompt,
            CommandPromptMsg: prompts.handle_command_prompt,
            BackendEventMsg: refresh.handle_backend_event,
            BackendDoneMsg: refresh.handle_backend_done,
            PreviewLoadedMsg: preview.handle_preview_loaded,
        }

    def init(self) -> List[Cmd]:
        """Commands to start with: the first wait on the backend stream."""
        if self.backend is None:
            return []
        return [refresh.wait_for_backend(self.backend)]

    def update(self, msg: Any) -> List[Cmd]:
        if msg is None:
            return []
        if self.form is not None and isinstance(msg, KeyMsg):
            cmds = prompts.handle_form_key(self, msg)
        else:
            handler = self._handlers.get(type(msg))
            if handler is None:
                logger.debug(f"No handler for {type(msg).__name__}")
                return []
            cmds = handler(self, msg)
        return self._finish(cmds)

    def _finish(self, cmds: List[Cmd]) -> List[Cmd]:
        cmds = [cmd for cmd in cmds if cmd is not None]
        if self.mode == Mode.MENU:
            preview_cmd = preview.ensure_preview(self, self.current_level())
            if preview_cmd is not None:
                cmds.append(preview_cmd)
        return cmds

    def _handle_resize(self, msg: ResizeMsg) -> List[Cmd]:
        if not self.fixed_width:
            self.width = msg.width
        if not self.fixed_height:
            self.height = msg.height
        self.sync_viewport(self.current_level())
        return []

    def _handle_mouse_scroll(self, msg: MouseScrollMsg) -> List[Cmd]:
        preview.scroll_preview(self, msg.delta)
        return []

    def quit(self, info: str = "") -> Cmd:
        return lambda: QuitMsg(info)

    # ---- levels ----

    def current_level(self) -> Optional[Level]:
        return self.stack[-1] if self.stack else None

    def find_level(self, id: str) -> Optional[Level]:
        for level in self.stack:
            if level.id == id:
                self.apply_node_settings(level)
                return level
        return None

    def apply_node_settings(self, level: Level) -> None:
        if level.node is None:
            level.node = self.registry.find(level.id)
        if level.node is not None:
            level.multi_select = level.node.multi_select

    def sync_viewport(self, level: Optional[Level]) -> None:
        if level is not None:
            level.ensure_cursor_visible(self.max_visible_items())

    def menu_context(self) -> Context:
        return Context(
            socket=self.socket,
            client_id=self.sessions.client_id,
            sessions=self.sessions.entries(),
            current=self.sessions.current,
            include_current=self.sessions.include_current,
            windows=self.windows.entries(),
            current_window_id=self.windows.current_id,
            current_window_label=self.windows.current_label,
            current_window_session=self.windows.current_session,
            window_include_current=self.windows.include_current,
            panes=self.panes.entries(),
            current_pane_id=self.panes.current_id,
            current_pane_label=self.panes.current_label,
            pane_include_current=self.panes.include_current,
            tracer=self.tracer,
        )

    # ---- info line ----

    def set_info(self, message: str) -> None:
        self.info_msg = message
        self.info_expire = self.clock() + INFO_TTL

    def clear_info(self) -> None:
        """Clear the info line unless it is still within its display time."""
        if not self.info_msg:
            return
        if self.info_expire and self.clock() < self.info_expire:
            return
        self.force_clear_info()

    def force_clear_info(self) -> None:
        self.info_msg = ""
        self.info_expire = 0.0

    def current_info(self) -> str:
        if self.info_msg and self.info_expire and self.clock() > self.info_expire:
            self.force_clear_info()
        return self.info_msg

    def backend_issue(self) -> str:
        return refresh.backend_issue(self)

    # ---- layout ----

    def header_segments(self) -> List[str]:
        root = self.root_title.strip() or navigation.DEFAULT_ROOT_TITLE
        if len(self.stack) <= 1:
            return [root]
        segments = [root] if self.root_menu_id else []
        for level in self.stack[1:]:
            segment = navigation.header_segment(level)
            if segment:
                segments.append(segment)
        return segments or [root]

    def header(self) -> str:
        return " → ".join(self.header_segments())

    def preview_panel_width(self) -> int:
        if self.width <= 0:
            return 0
        width = int(self.width * PREVIEW_PANEL_FRACTION)
        return width if width >= PREVIEW_PANEL_MIN_WIDTH else 0

    def has_side_preview(self) -> bool:
        level = self.current_level()
        if level is None or preview.preview_kind_for_level(level.id) == preview.PreviewKind.NONE:
            return False
        return self.preview_panel_width() > 0

    def max_visible_items(self) -> int:
        """Rows left for list items, or -1 while the height is unknown."""
        if self.height <= 0:
            return -1
        used = 2
        if self.header():
            used += 1
        if self.current_info():
            used += 2
        if self.show_footer:
            used += 2
        level = self.current_level()
        if level is not None and not self.has_side_preview():
            data = preview.active_preview(self)
            if should_render_preview(data):
                used += 2
                used += 1 if data.err else len(preview_display_lines(data))
            elif preview.preview_kind_for_level(level.id) != preview.PreviewKind.NONE:
                # first request not issued yet
                used += 3
        return max(self.height - used, 1)


def should_render_preview(data: Optional[preview.PreviewData]) -> bool:
    if data is None:
        return False
    return bool(data.err) or bool(data.lines) or data.loading


def preview_display_lines(data: preview.PreviewData) -> List[str]:
    """Lines shown by the inline preview: the newest ones, at most 20."""
    if not data.lines:
        return ["Loading preview…"] if data.loading else []
    return data.lines[-PREVIEW_MAX_LINES:]
