"""Key binding browser: lists `list-keys` and runs the chosen binding.

PUBLIC API:
  - load_keybinding_menu: One item per binding line
  - keybinding_command_args: Extract the command from a binding line
  - keybinding_action: Run the binding's command
"""

from typing import List

from .. import tmux
from ..tmux import TmuxError
from .common import fail, run_action
from .types import Cmd, Context, Item

_TWO_ARG_FLAGS = ("-T", "-t", "-R")


def load_keybinding_menu(ctx: Context) -> List[Item]:
    try:
        output = tmux.list_keys(ctx.socket)
    except TmuxError as e:
        raise TmuxError(f"tmux list-keys failed: {e}") from e
    return [Item(line, line) for line in output.strip().splitlines() if line]


def keybinding_command_args(binding: str) -> List[str]:
    """Skip "bind-key", its flags and the key itself; return what is left.

    Raises:
        ValueError: The line is not a binding or has no command.
    """
    tokens = binding.split()
    if not tokens:
        raise ValueError("empty key binding")
    if tokens[0] not in ("bind-key", "bind"):
        raise ValueError("unsupported key binding format")
    idx = 1
    while idx < len(tokens) and tokens[idx].startswith("-"):
        idx += 2 if tokens[idx] in _TWO_ARG_FLAGS else 1
    # the key
    if idx < len(tokens):
        idx += 1
    if idx >= len(tokens):
        raise ValueError("unable to parse command from binding")
    return tokens[idx:]


def keybinding_action(ctx: Context, item: Item) -> Cmd:
    binding = item.id.strip()
    if not binding:
        return fail("invalid key binding selection")

    def work() -> str:
        if "copy-mode" in binding and "prefix" not in binding:
            try:
                tmux.run_command(ctx.socket, ["copy-mode"])
            except TmuxError as e:
                raise TmuxError(f"tmux copy-mode failed: {e}") from e
        args = keybinding_command_args(binding)
        joined = " ".join(args)
        try:
            tmux.run_command(ctx.socket, args)
        except TmuxError as e:
            raise TmuxError(f"tmux {joined} failed: {e}") from e
        return f"Executed {joined}"

    return lambda: run_action(work)
