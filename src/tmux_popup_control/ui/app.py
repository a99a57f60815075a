"""Textual runtime for the popup model.

PUBLIC API:
  - PopupApp: Textual App driving one Model
"""

import logging
from functools import partial
from typing import Any, List

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from ..menu.types import Cmd
from .messages import KeyMsg, MouseScrollMsg, QuitMsg, ResizeMsg
from .model import Model
from .view import render

logger = logging.getLogger(__name__)

__all__ = ["PopupApp"]


class MenuView(Static):
    """Single widget holding the rendered model."""

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        event.stop()
        self.app.deliver(MouseScrollMsg(-1))

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        event.stop()
        self.app.deliver(MouseScrollMsg(1))


class PopupApp(App[str]):
    """Popup menu application.

    Every command the model returns runs in a thread worker; its result
    comes back on the app thread through call_from_thread. The app exits
    with the info message of the QuitMsg that ended it.

    Args:
        model: The popup model to drive.
    """

    CSS = """
    Screen {
        overflow: hidden;
    }
    MenuView {
        width: 100%;
        height: 100%;
    }
    """

    # priority so textual's own quit and focus bindings never see these keys
    BINDINGS = [
        Binding("ctrl+c", "forward_key('ctrl+c')", show=False, priority=True),
        Binding("tab", "forward_key('tab')", show=False, priority=True),
        Binding("shift+tab", "forward_key('shift+tab')", show=False, priority=True),
    ]

    def __init__(self, model: Model):
        super().__init__()
        self.model = model
        self.info = ""

    def compose(self) -> ComposeResult:
        yield MenuView(id="view")

    def on_mount(self) -> None:
        self._dispatch(self.model.init())
        self._refresh_view()

    def on_resize(self, event: events.Resize) -> None:
        self.deliver(ResizeMsg(event.size.width, event.size.height))

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.deliver(KeyMsg(event.key, event.character or ""))

    def action_forward_key(self, key: str) -> None:
        self.deliver(KeyMsg(key))

    def deliver(self, msg: Any) -> None:
        """Feed one message to the model and schedule what it returns."""
        if isinstance(msg, QuitMsg):
            self.info = msg.info
            self.exit(msg.info)
            return
        self._dispatch(self.model.update(msg))
        self._refresh_view()

    def _dispatch(self, cmds: List[Cmd]) -> None:
        for cmd in cmds:
            self.run_worker(partial(self._run_command, cmd), thread=True, group="commands")

    def _run_command(self, cmd: Cmd) -> None:
        msg = cmd()
        if msg is None:
            return
        if not self.is_running:
            logger.debug(f"Dropping {type(msg).__name__} after exit")
            return
        self.call_from_thread(self.deliver, msg)

    def _refresh_view(self) -> None:
        self.query_one(MenuView).update(render(self.model))
