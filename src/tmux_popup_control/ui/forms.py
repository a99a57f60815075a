"""Modal text-entry forms for create and rename flows.

Each form's update() takes a KeyMsg and returns (cmd, done, cancelled):
`done` means the returned command should run as the pending action,
`cancelled` means the form closes without side effects.

PUBLIC API:
  - Mode: Which form, if any, owns the keyboard
  - TextField: Single-line input with caret and character limit
  - SessionForm: Create or rename a session
  - WindowRenameForm: Rename a window
  - PaneRenameForm: Set a pane title
"""

from enum import Enum
from typing import Iterable, Optional, Tuple

from ..events import REASON_EMPTY, REASON_ESCAPE
from ..menu.common import tracer_of
from ..menu.pane import pane_rename_command
from ..menu.session import session_command
from ..menu.types import Cmd, Context, PanePrompt, SessionPrompt, WindowPrompt
from ..menu.window import window_rename_command
from ..tmux.types import Session
from .messages import KeyMsg

FormResult = Tuple[Optional[Cmd], bool, bool]

_IDLE: FormResult = (None, False, False)
_CANCEL: FormResult = (None, False, True)


class Mode(str, Enum):
    MENU = "menu"
    SESSION_FORM = "session-form"
    WINDOW_FORM = "window-form"
    PANE_FORM = "pane-form"


class TextField:
    """Single-line text input.

    Args:
        placeholder: Shown while the value is empty.
        char_limit: Maximum length in characters (0 for unlimited).
    """

    def __init__(self, placeholder: str = "", char_limit: int = 0, value: str = ""):
        self.placeholder = placeholder
        self.char_limit = char_limit
        self.value = ""
        self.cursor = 0
        self.set_value(value)

    def set_value(self, value: str) -> None:
        if self.char_limit > 0:
            value = value[: self.char_limit]
        self.value = value
        self.cursor = len(value)

    def insert(self, text: str) -> bool:
        if self.char_limit > 0:
            text = text[: max(self.char_limit - len(self.value), 0)]
        if not text:
            return False
        self.value = self.value[: self.cursor] + text + self.value[self.cursor :]
        self.cursor += len(text)
        return True

    def backspace(self) -> bool:
        if self.cursor == 0:
            return False
        self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
        self.cursor -= 1
        return True

    def delete(self) -> bool:
        if self.cursor >= len(self.value):
            return False
        self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
        return True

    def delete_word_backward(self) -> bool:
        i = self.cursor
        while i > 0 and self.value[i - 1].isspace():
            i -= 1
        while i > 0 and not self.value[i - 1].isspace():
            i -= 1
        if i == self.cursor:
            return False
        self.value = self.value[:i] + self.value[self.cursor :]
        self.cursor = i
        return True

    def update(self, msg: KeyMsg) -> bool:
        """Apply an editing key. Returns True when the value or caret changed."""
        key = msg.key
        if key in ("backspace", "ctrl+h"):
            return self.backspace()
        if key == "delete":
            return self.delete()
        if key == "ctrl+w":
            return self.delete_word_backward()
        if key == "left":
            moved = self.cursor > 0
            self.cursor = max(self.cursor - 1, 0)
            return moved
        if key == "right":
            moved = self.cursor < len(self.value)
            self.cursor = min(self.cursor + 1, len(self.value))
            return moved
        if key in ("home", "ctrl+a"):
            moved = self.cursor != 0
            self.cursor = 0
            return moved
        if key in ("end", "ctrl+e"):
            moved = self.cursor != len(self.value)
            self.cursor = len(self.value)
            return moved
        if msg.printable:
            return self.insert(msg.text)
        return False


class _RenameForm:
    """Shared behaviour of the window and pane rename forms."""

    action_id = ""

    def __init__(self, ctx: Context, target: str, initial: str, placeholder: str, char_limit: int):
        self.ctx = ctx
        self.target = target
        self.field = TextField(placeholder, char_limit, initial)
        self.title = f"Rename {initial or target}"
        self.help = "Press Enter to rename. Esc to cancel."
        self.err = ""

    @property
    def value(self) -> str:
        return self.field.value.strip()

    def pending_label(self) -> str:
        if not self.value:
            return self.action_id
        return f"{self.target} → {self.value}"

    def sync_context(self, ctx: Context) -> None:
        self.ctx = ctx

    def _events(self):
        raise NotImplementedError

    def _command(self, value: str) -> Cmd:
        raise NotImplementedError

    def update(self, msg: KeyMsg) -> FormResult:
        if msg.key == "ctrl+u":
            if self.field.value:
                self.field.set_value("")
            return _IDLE
        if msg.key == "escape":
            self._events().cancel_rename(self.target, REASON_ESCAPE)
            return _CANCEL
        if msg.key == "enter":
            value = self.value
            if not value:
                self._events().cancel_rename(self.target, REASON_EMPTY)
                return _CANCEL
            self._events().submit_rename(self.target, value)
            return self._command(value), True, False
        self.field.update(msg)
        return _IDLE


class WindowRenameForm(_RenameForm):
    action_id = "window:rename"

    def __init__(self, prompt: WindowPrompt):
        super().__init__(prompt.context, prompt.target, prompt.initial, "window-name", 64)

    def _events(self):
        return tracer_of(self.ctx).window

    def _command(self, value: str) -> Cmd:
        return window_rename_command(self.ctx, self.target, value)


class PaneRenameForm(_RenameForm):
    action_id = "pane:rename"

    def __init__(self, prompt: PanePrompt):
        super().__init__(prompt.context, prompt.target, prompt.initial, "pane-title", 128)

    def _events(self):
        return tracer_of(self.ctx).pane

    def _command(self, value: str) -> Cmd:
        return pane_rename_command(self.ctx, self.target, value)


class SessionForm:
    """Create a session, or rename one.

    Validation runs after every edit against the latest session names.
    Renaming excludes the target's own name from the duplicate check.
    """

    def __init__(self, prompt: SessionPrompt):
        self.ctx = prompt.context
        self.action = prompt.action or "session:new"
        self.target = prompt.target.strip()
        self.field = TextField("session-name", 64, prompt.initial)
        self.existing: set = set()
        self.err = ""
        if self.is_rename:
            self.title = f"Rename {self.target}" if self.target else "Rename Session"
            self.help = "Press Enter to rename. Esc to cancel."
        else:
            self.title = "Create Session"
            self.help = "Press Enter to create. Esc to cancel."
        self.set_sessions(self.ctx.sessions)

    @property
    def is_rename(self) -> bool:
        return self.action == "session:rename"

    @property
    def action_id(self) -> str:
        return self.action

    @property
    def value(self) -> str:
        return self.field.value.strip()

    def pending_label(self) -> str:
        if not self.value:
            return self.action_id
        if self.is_rename and self.target:
            return f"{self.target} → {self.value}"
        return self.value

    def set_sessions(self, sessions: Iterable[Session]) -> None:
        target = self.target.lower()
        self.existing = set()
        for session in sessions:
            name = session.name.strip().lower()
            if not name or (self.is_rename and name == target):
                continue
            self.existing.add(name)
        self.err = self.validate(self.value)

    def validate(self, name: str) -> str:
        trimmed = name.strip()
        if not trimmed:
            return "" if self.is_rename else "Session name required"
        if trimmed.lower() in self.existing:
            return "Session already exists"
        return ""

    def update(self, msg: KeyMsg) -> FormResult:
        events = tracer_of(self.ctx).session
        if msg.key == "ctrl+u":
            if self.field.value:
                self.field.set_value("")
                self.err = self.validate(self.value)
            return _IDLE
        if msg.key == "escape":
            if self.is_rename:
                events.cancel_rename(self.target, REASON_ESCAPE)
            else:
                events.cancel_new(REASON_ESCAPE)
            return _CANCEL
        if msg.key == "enter":
            value = self.value
            if self.is_rename and not value:
                events.cancel_rename(self.target, REASON_EMPTY)
                return _CANCEL
            self.err = self.validate(value)
            if self.err:
                return _IDLE
            if self.is_rename:
                events.submit_rename(self.target, value)
            else:
                events.submit_new(value)
            return session_command(self.action, self.ctx, self.target, value), True, False
        self.field.update(msg)
        self.err = self.validate(self.value)
        return _IDLE
