"""Clipboard menu: tmux paste buffers, plus copyq when installed.

PUBLIC API:
  - load_clipboard_menu: Clipboard sources
  - load_buffer_menu: Paste buffers, most recent first
  - buffer_paste_action: Paste the chosen buffer into the current pane
"""

import shutil
from typing import List

from .. import tmux
from .common import fail, run_action
from .types import Cmd, Context, Item


def load_clipboard_menu(ctx: Context) -> List[Item]:
    items = [Item("buffer", "Tmux Buffers")]
    if shutil.which("copyq"):
        items.insert(0, Item("system", "System Clipboard (copyq)"))
    return items


def load_buffer_menu(ctx: Context) -> List[Item]:
    return [Item(name, label) for name, label in tmux.list_buffers(ctx.socket)]


def buffer_paste_action(ctx: Context, item: Item) -> Cmd:
    name = item.id.strip()
    if not name:
        return fail("invalid buffer selection")
    target = ctx.current_pane_id.strip()

    def work() -> str:
        tmux.paste_buffer(ctx.socket, name, target)
        return f"Pasted {name}"

    return lambda: run_action(work)
