"""Pane menu: switch, break, join, swap, kill, rename, layout and resize.

PUBLIC API:
  - PANE_ACTIONS: Sub-menu ids in display order
  - LAYOUTS / RESIZE_DIRECTIONS / resize_amounts: Static choices
  - pane_items / pane_switch_items / pane_join_items / pane_with_current_items: Row builders
  - break_destination: Window slot a broken-out pane lands in
  - load_* / *_action: Loaders and action handlers for the registry
  - pane_rename_command / pane_swap_command: Commands for the second step
"""

from typing import List, Optional

from .. import tmux
from ..tmux.types import Pane
from .common import fail, items_from_ids, run_action, split_ids, tracer_of
from .types import Cmd, Context, Item, PanePrompt, PaneSwapPrompt

PANE_ACTIONS = ["rename", "resize", "kill", "layout", "swap", "join", "break", "switch"]

LAYOUTS = ["even-horizontal", "even-vertical", "main-horizontal", "main-vertical", "tiled"]

RESIZE_DIRECTIONS = ["left", "right", "up", "down"]

CURRENT_PREFIX = "[current] "


def resize_amounts(direction: str) -> List[str]:
    if direction in ("left", "right"):
        return ["1", "2", "3", "5", "10", "20", "30"]
    if direction in ("up", "down"):
        return ["1", "2", "3", "5", "10", "15", "20"]
    return ["1", "2", "3"]


def pane_items(panes: List[Pane]) -> List[Item]:
    return [Item(p.id, p.label) for p in panes]


def current_pane_item(ctx: Context) -> Optional[Item]:
    id = ctx.current_pane_id.strip()
    if not id:
        return None
    return Item(id, CURRENT_PREFIX + (ctx.current_pane_label.strip() or id))


def pane_with_current_items(ctx: Context) -> List[Item]:
    """All panes, led by a "[current]" row for the launching pane."""
    items = pane_items(ctx.panes)
    current = current_pane_item(ctx)
    if current is not None:
        items.insert(0, current)
    return items


def pane_switch_items(ctx: Context) -> List[Item]:
    return pane_items([p for p in ctx.panes if ctx.pane_include_current or not p.current])


def pane_join_items(ctx: Context) -> List[Item]:
    return pane_items([p for p in ctx.panes if not p.current])


def break_destination(ctx: Context, target: str) -> str:
    """One past the highest window index of the pane's session, e.g. "sess:3"."""
    session = ctx.current_window_session or target.partition(":")[0]
    if not session:
        return ""
    next_index = 0
    for window in ctx.windows:
        if window.session == session and window.index >= next_index:
            next_index = window.index + 1
    return f"{session}:{next_index}"


def load_pane_menu(ctx: Context) -> List[Item]:
    return items_from_ids(PANE_ACTIONS)


def load_pane_switch(ctx: Context) -> List[Item]:
    return pane_switch_items(ctx)


def load_pane_break(ctx: Context) -> List[Item]:
    return pane_with_current_items(ctx)


def load_pane_join(ctx: Context) -> List[Item]:
    return pane_join_items(ctx)


def load_pane_swap(ctx: Context) -> List[Item]:
    return pane_with_current_items(ctx)


def load_pane_kill(ctx: Context) -> List[Item]:
    return pane_with_current_items(ctx)


def load_pane_rename(ctx: Context) -> List[Item]:
    return pane_with_current_items(ctx)


def load_pane_layout(ctx: Context) -> List[Item]:
    return items_from_ids(LAYOUTS)


def load_pane_resize(ctx: Context) -> List[Item]:
    return items_from_ids(RESIZE_DIRECTIONS)


def resize_loader(direction: str):
    def load(ctx: Context) -> List[Item]:
        return items_from_ids(resize_amounts(direction))

    return load


def pane_switch_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    if not target:
        return fail("invalid pane target")

    def work() -> str:
        tracer_of(ctx).pane.switch(target)
        tmux.switch_pane(ctx.socket, ctx.client_id, target)
        return f"Switched to {item.label}"

    return lambda: run_action(work)


def pane_kill_action(ctx: Context, item: Item) -> Cmd:
    targets = sorted(split_ids(item.id, "\n, "), reverse=True)

    def work() -> str:
        tracer_of(ctx).pane.kill(targets)
        tmux.kill_panes(ctx.socket, targets)
        if len(targets) == 1:
            return f"Killed {item.label}"
        return f"Killed {len(targets)} panes"

    return lambda: run_action(work)


def pane_join_action(ctx: Context, item: Item) -> Cmd:
    sources = sorted(split_ids(item.id, "\n, "), reverse=True)
    target = ctx.current_pane_id.strip()

    def work() -> str:
        tracer_of(ctx).pane.join(sources, target)
        for source in sources:
            tmux.move_pane(ctx.socket, source, "")
        return f"Joined {len(sources)} pane(s)"

    return lambda: run_action(work)


def pane_break_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    destination = break_destination(ctx, target)

    def work() -> str:
        tracer_of(ctx).pane.break_(target, destination)
        tmux.break_pane(ctx.socket, target, destination)
        return f"Broke {item.label} into new window"

    return lambda: run_action(work)


def pane_swap_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    if not target:
        return fail("invalid pane target")

    def prompt():
        tracer_of(ctx).pane.swap_select(target)
        return PaneSwapPrompt(context=ctx, first=item)

    return prompt


def pane_swap_command(ctx: Context, first: Item, second: Item) -> Cmd:
    def work() -> str:
        tracer_of(ctx).pane.swap(first.id, second.id)
        tmux.swap_panes(ctx.socket, first.id, second.id)
        return f"Swapped {first.label} ↔ {second.label}"

    return lambda: run_action(work)


def pane_layout_action(ctx: Context, item: Item) -> Cmd:
    layout = item.id.strip()
    if not layout:
        return fail("invalid layout")

    def work() -> str:
        tracer_of(ctx).pane.layout(layout)
        tmux.select_layout(ctx.socket, layout)
        return f"Applied layout {layout}"

    return lambda: run_action(work)


def resize_action(direction: str):
    def action(ctx: Context, item: Item) -> Cmd:
        try:
            amount = int(item.id)
        except ValueError:
            return fail("invalid amount")

        def work() -> str:
            tracer_of(ctx).pane.resize(direction, amount)
            tmux.resize_pane(ctx.socket, direction, amount)
            return f"Resized {direction} by {amount}"

        return lambda: run_action(work)

    return action


def pane_rename_action(ctx: Context, item: Item) -> Cmd:
    target = item.id.strip()
    if not target:
        return fail("invalid pane target")
    initial = item.label.strip()
    for pane in ctx.panes:
        if pane.id == target:
            if pane.title:
                initial = pane.title
            break
    if initial.startswith("[current]"):
        _, _, rest = initial.partition(" ")
        initial = rest.strip() or initial

    def prompt():
        tracer_of(ctx).pane.rename_prompt(target)
        return PanePrompt(context=ctx, target=target, initial=initial)

    return prompt


def pane_rename_command(ctx: Context, target: str, title: str) -> Cmd:
    def work() -> str:
        trimmed_target = target.strip()
        if not trimmed_target:
            raise ValueError("pane target required")
        trimmed_title = title.strip()
        if not trimmed_title:
            raise ValueError("pane title required")
        # rename through the stable %id when the snapshot has it
        pane_target = trimmed_target
        pane_label = trimmed_target
        for pane in ctx.panes:
            if pane.id.strip() == trimmed_target:
                pane_label = pane.label
                pane_target = pane.pane_id.strip() or pane_target
                break
        tracer_of(ctx).pane.rename(pane_target, trimmed_title)
        tmux.rename_pane(ctx.socket, pane_target, trimmed_title)
        return f"Renamed {pane_label} to {trimmed_title}"

    return lambda: run_action(work)
