"""tmux command browser: lists `list-commands` and pre-fills tmux's prompt.

PUBLIC API:
  - load_command_menu: One item per command, keyed by command name
  - command_action: Ask the UI to open tmux's command prompt
"""

from typing import List

from .. import tmux
from ..tmux import TmuxError
from .common import fail
from .types import Cmd, CommandPromptMsg, Context, Item


def load_command_menu(ctx: Context) -> List[Item]:
    try:
        output = tmux.list_commands(ctx.socket)
    except TmuxError as e:
        raise TmuxError(f"tmux list-commands failed: {e}") from e
    items = []
    for line in output.strip().splitlines():
        fields = line.split()
        if fields:
            items.append(Item(fields[0], line))
    return items


def command_action(ctx: Context, item: Item) -> Cmd:
    command = item.id.strip()
    if not command:
        return fail("invalid command selection")
    initial = command + " "
    return lambda: CommandPromptMsg(command=initial, label=item.label)
