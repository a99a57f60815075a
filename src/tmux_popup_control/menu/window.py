"""Window menu: switch, link, move, swap, rename and kill.

PUBLIC API:
  - WINDOW_ACTIONS: Sub-menu ids in display order
  - window_switch_items / window_rename_items / window_items: Row builders
  - sort_windows: Order windows by session then index
  - load_* / *_action: Loaders and action handlers for the registry
  - window_rename_command / window_swap_command: Commands for the second step
"""

from typing import List, Optional

from .. import tmux
from ..table import LEFT, format_table
from ..tmux.types import Window
from .common import fail, items_from_ids, run_action, split_ids, tracer_of
from .types import Cmd, Context, Item, WindowPrompt, WindowSwapPrompt

WINDOW_ACTIONS = ["kill", "rename", "swap", "move", "link", "switch"]

CURRENT_PREFIX = "[current] "


def _order_key(window: Window):
    session = window.session.strip()
    head, sep, tail = window.id.strip().partition(":")
    if not session:
        session = head or window.id
    try:
        index = int(tail.strip()) if sep else window.index
    except ValueError:
        index = window.index
    return (session, index, window.id)


def sort_windows(windows: List[Window]) -> List[Window]:
    return sorted(windows, key=_order_key)


def _current_first(windows: List[Window]) -> List[Window]:
    current = [w for w in windows if w.current][:1]
    rest = sort_windows([w for w in windows if not w.current])
    return current + rest


def window_table_items(windows: List[Window]) -> List[Item]:
    """Aligned rows: name, "session:index", tmux window id, current marker."""
    rows = []
    for w in windows:
        label = w.label.strip()
        if label.startswith(CURRENT_PREFIX):
            label = label[len(CURRENT_PREFIX) :]
        rows.append(
            [
                w.name.strip() or label,
                w.id.strip() or f"#{w.index}",
                w.internal_id.strip() or "-",
                "current" if w.current else "",
            ]
        )
    labels = format_table(rows, [LEFT, LEFT, LEFT, LEFT])
    return [Item(w.id, label) for w, label in zip(windows, labels)]


def window_switch_items(ctx: Context) -> List[Item]:
    visible = [w for w in ctx.windows if ctx.window_include_current or not w.current]
    return window_table_items(_current_first(visible))


def window_rename_items(ctx: Context) -> List[Item]:
    return window_table_items(_current_first(ctx.windows))


def window_items(windows: List[Window]) -> List[Item]:
    return [Item(w.id, w.label or f"{w.session}:{w.index} {w.name}") for w in windows]


def current_window_item(ctx: Context) -> Optional[Item]:
    id = ctx.current_window_id.strip()
    if not id:
        return None
    return Item(id, CURRENT_PREFIX + (ctx.current_window_label.strip() or id))


def _with_current(ctx: Context) -> List[Item]:
    items = window_items(ctx.windows)
    current = current_window_item(ctx)
    if current is not None:
        items.insert(0, current)
    return items


def window_other_session_items(ctx: Context) -> List[Item]:
    return window_items([w for w in ctx.windows if w.session != ctx.current_window_session])


def window_move_items(ctx: Context) -> List[Item]:
    return window_other_session_items(ctx)


def window_swap_items(ctx: Context) -> List[Item]:
    return _with_current(ctx)


def window_kill_items(ctx: Context) -> List[Item]:
    return _with_current(ctx)


def load_window_menu(ctx: Context) -> List[Item]:
    return items_from_ids(WINDOW_ACTIONS)


def load_window_switch(ctx: Context) -> List[Item]:
    return window_switch_items(ctx)


def load_window_rename(ctx: Context) -> List[Item]:
    return window_rename_items(ctx)


def load_window_link(ctx: Context) -> List[Item]:
    return window_other_session_items(ctx)


def load_window_move(ctx: Context) -> List[Item]:
    return window_move_items(ctx)


def load_window_swap(ctx: Context) -> List[Item]:
    return window_swap_items(ctx)


def load_window_kill(ctx: Context) -> List[Item]:
    return window_kill_items(ctx)


def window_switch_action(ctx: Context, item: Item) -> Cmd:
    window_id = item.id.strip()
    session, sep, _ = window_id.partition(":")
    if not sep:
        return fail(f"invalid window id: {window_id}")

    def work() -> str:
        tracer_of(ctx).window.switch(window_id)
        tmux.switch_client(ctx.socket, ctx.client_id, session)
        tmux.select_window(ctx.socket, window_id)
        return f"Switched to {item.label}"

    return lambda: run_action(work)


def window_kill_action(ctx: Context, item: Item) -> Cmd:
    # reverse order so higher indexes go first and lower ones keep their ids
    targets = sorted(split_ids(item.id), reverse=True)

    def work() -> str:
        tracer_of(ctx).window.kill(targets)
        tmux.unlink_windows(ctx.socket, targets)
        if len(targets) == 1:
            return f"Removed {item.label}"
        return f"Removed {len(targets)} windows"

    return lambda: run_action(work)


def _strip_current(text: str) -> str:
    if text.startswith("[current]"):
        _, _, rest = text.partition(" ")
        return rest.strip() if rest else text
    return text


def window_rename_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    if not target:
        return fail("invalid window target")
    initial = item.label.strip()
    for window in ctx.windows:
        if window.id == target:
            if window.name:
                initial = window.name
            break
    initial = _strip_current(initial)

    def prompt():
        tracer_of(ctx).window.rename_prompt(target)
        return WindowPrompt(context=ctx, target=target, initial=initial)

    return prompt


def window_rename_command(ctx: Context, target: str, name: str) -> Cmd:
    def work() -> str:
        if not target:
            raise ValueError("window target required")
        trimmed = name.strip()
        if not trimmed:
            raise ValueError("window name required")
        tracer_of(ctx).window.rename(target, trimmed)
        tmux.rename_window(ctx.socket, target, trimmed)
        return f"Renamed {target} to {trimmed}"

    return lambda: run_action(work)


def _transfer_action(ctx: Context, item: Item, verb: str) -> Cmd:
    source = item.id.strip()
    session = ctx.current_window_session.strip()
    if not source:
        return fail("invalid window target")
    if not session:
        return fail("no active session detected")

    def work() -> str:
        tracer = tracer_of(ctx).window
        if verb == "link":
            tracer.link(source, session)
            tmux.link_window(ctx.socket, source, session)
            return f"Linked {item.label} to {session}"
        tracer.move(source, session)
        tmux.move_window(ctx.socket, source, session)
        return f"Moved {item.label} to {session}"

    return lambda: run_action(work)


def window_link_action(ctx: Context, item: Item) -> Cmd:
    return _transfer_action(ctx, item, "link")


def window_move_action(ctx: Context, item: Item) -> Cmd:
    return _transfer_action(ctx, item, "move")


def window_swap_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    if not target:
        return fail("invalid window target")

    def prompt():
        tracer_of(ctx).window.swap_select(target)
        return WindowSwapPrompt(context=ctx, first=item)

    return prompt


def window_swap_command(ctx: Context, first: Item, second: Item) -> Cmd:
    def work() -> str:
        tracer_of(ctx).window.swap(first.id, second.id)
        tmux.swap_windows(ctx.socket, first.id, second.id)
        return f"Swapped {first.label or first.id} ↔ {second.label or second.id}"

    return lambda: run_action(work)
