"""Filter editing keys for the active level.

PUBLIC API:
  - handle_text_input: Apply a filter editing key; returns (handled, cmds)
"""

from typing import TYPE_CHECKING, List, Tuple

from ..menu.types import Cmd
from .level import Level
from .messages import KeyMsg

if TYPE_CHECKING:
    from .model import Model


def _edited(m: "Model", level: Level) -> List[Cmd]:
    m.force_clear_info()
    m.err_msg = ""
    m.sync_viewport(level)
    return []


def _append(m: "Model", level: Level, text: str) -> bool:
    if not text or not level.insert_filter_text(text):
        return False
    m.tracer.filter.append(level.id, level.filter)
    _edited(m, level)
    return True


def _is_filter_text(text: str) -> bool:
    return bool(text) and all(ch.isprintable() and not ch.isspace() for ch in text)


def handle_text_input(m: "Model", msg: KeyMsg) -> Tuple[bool, List[Cmd]]:
    """Route editing keys to the active level's filter.

    Returns (False, []) for keys that did not change the filter or its
    caret, so navigation can still see them.
    """
    if m.loading:
        return False, []
    level = m.current_level()
    if level is None:
        return False, []
    key = msg.key

    if key == "ctrl+u":
        if not level.filter:
            return False, []
        level.set_filter("", 0)
        m.tracer.filter.cleared(level.id)
        return True, _edited(m, level)
    if key == "ctrl+w":
        if not level.delete_filter_word_backward():
            return False, []
        m.tracer.filter.word_backspace(level.id, level.filter)
        return True, _edited(m, level)
    if key in ("backspace", "ctrl+h"):
        if not level.delete_filter_rune_backward():
            return False, []
        m.tracer.filter.backspace(level.id, level.filter)
        return True, _edited(m, level)

    caret_moves = {
        "ctrl+a": level.move_filter_cursor_start,
        "ctrl+e": level.move_filter_cursor_end,
        "left": level.move_filter_cursor_rune_backward,
        "right": level.move_filter_cursor_rune_forward,
    }
    if key in caret_moves:
        if not caret_moves[key]():
            return False, []
        m.tracer.filter.cursor(level.id, level.filter_cursor)
        return True, []
    word_moves = {
        "alt+b": level.move_filter_cursor_word_backward,
        "alt+f": level.move_filter_cursor_word_forward,
    }
    if key in word_moves:
        if not word_moves[key]():
            return False, []
        m.tracer.filter.cursor_word(level.id, level.filter_cursor)
        return True, []

    if key == "space":
        return _append(m, level, " "), []
    if key.startswith(("alt+", "ctrl+")):
        return False, []
    if _is_filter_text(msg.text):
        return _append(m, level, msg.text), []
    return False, []
