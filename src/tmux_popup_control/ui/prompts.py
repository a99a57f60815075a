"""Follow-up messages from actions: results, forms and tmux's command prompt.

PUBLIC API:
  - handle_action_result: Quit on success, show the error otherwise
  - handle_session_prompt / handle_window_prompt / handle_pane_prompt: Open a form
  - handle_window_swap_prompt / handle_pane_swap_prompt: Open the swap target level
  - handle_command_prompt: Hand over to tmux's command prompt
  - handle_form_key: Route a key to the open form
"""

import logging
from typing import TYPE_CHECKING, Callable, List

from .. import tmux
from ..menu.types import (
    ActionResult,
    Cmd,
    CommandPromptMsg,
    PanePrompt,
    PaneSwapPrompt,
    SessionPrompt,
    WindowPrompt,
    WindowSwapPrompt,
)
from ..tmux import TmuxError
from .forms import Mode, PaneRenameForm, SessionForm, WindowRenameForm
from .messages import KeyMsg
from .navigation import start_pane_swap, start_window_swap

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger(__name__)


def _reset_pending(m: "Model") -> None:
    m.loading = False
    m.pending_id = ""
    m.pending_label = ""
    m.force_clear_info()


def handle_action_result(m: "Model", msg: ActionResult) -> List[Cmd]:
    _reset_pending(m)
    if msg.err is not None:
        m.err_msg = str(msg.err)
        m.tracer.action.error(msg.err)
        return []
    if msg.info and m.verbose:
        m.set_info(msg.info)
    m.tracer.action.success(msg.info)
    return [m.quit(msg.info)]


def _with_prompt(m: "Model", start: Callable[[], None]) -> List[Cmd]:
    _reset_pending(m)
    m.err_msg = ""
    start()
    return []


def handle_session_prompt(m: "Model", msg: SessionPrompt) -> List[Cmd]:
    def start() -> None:
        m.form = SessionForm(msg)
        m.mode = Mode.SESSION_FORM

    return _with_prompt(m, start)


def handle_window_prompt(m: "Model", msg: WindowPrompt) -> List[Cmd]:
    def start() -> None:
        m.form = WindowRenameForm(msg)
        m.mode = Mode.WINDOW_FORM

    return _with_prompt(m, start)


def handle_pane_prompt(m: "Model", msg: PanePrompt) -> List[Cmd]:
    def start() -> None:
        m.form = PaneRenameForm(msg)
        m.mode = Mode.PANE_FORM

    return _with_prompt(m, start)


def handle_window_swap_prompt(m: "Model", msg: WindowSwapPrompt) -> List[Cmd]:
    return _with_prompt(m, lambda: start_window_swap(m, msg))


def handle_pane_swap_prompt(m: "Model", msg: PaneSwapPrompt) -> List[Cmd]:
    return _with_prompt(m, lambda: start_pane_swap(m, msg))


def handle_command_prompt(m: "Model", msg: CommandPromptMsg) -> List[Cmd]:
    _reset_pending(m)
    m.err_msg = ""
    try:
        tmux.command_prompt(m.socket, msg.command)
    except (TmuxError, OSError) as e:
        logger.error(f"Command prompt failed: {e}")
        m.tracer.action.error(e)
        m.err_msg = str(e)
        return []
    info = f"Prompted command {msg.command.strip()}"
    m.tracer.action.success(info)
    if m.verbose:
        m.set_info(info)
    return [m.quit(info)]


def close_form(m: "Model") -> None:
    m.form = None
    m.mode = Mode.MENU


def handle_form_key(m: "Model", msg: KeyMsg) -> List[Cmd]:
    """Give the key to the open form; a finished form becomes the pending action."""
    form = m.form
    cmd, done, cancelled = form.update(msg)
    if cancelled:
        close_form(m)
        return [cmd] if cmd else []
    if done:
        close_form(m)
        m.loading = True
        m.pending_id = form.action_id
        m.pending_label = form.pending_label()
        return [cmd] if cmd else []
    return [cmd] if cmd else []
