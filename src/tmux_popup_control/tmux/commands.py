"""Raw tmux command listings and one-off commands.

PUBLIC API:
  - list_keys: Raw `list-keys` output
  - list_commands: Raw `list-commands` output
  - list_buffers: Paste buffers as (name, sample) pairs
  - paste_buffer: Paste a buffer into a pane
  - run_command: Run an arbitrary tmux command
  - command_prompt: Open tmux's own command prompt after the popup closes
"""

from typing import List, Optional, Tuple

from .core import check_tmux, output_lines, split_format_line


def list_keys(socket: Optional[str] = None) -> str:
    return check_tmux(["list-keys"], socket)


def list_commands(socket: Optional[str] = None) -> str:
    return check_tmux(["list-commands"], socket)


def list_buffers(socket: Optional[str] = None) -> List[Tuple[str, str]]:
    """Get paste buffers, most recent first."""
    out = check_tmux(["list-buffers", "-F", "#{buffer_name}\t#{buffer_size}\t#{buffer_sample}"], socket)
    buffers = []
    for line in output_lines(out):
        parts = split_format_line(line, 3)
        if parts is None:
            continue
        name, size, sample = parts
        buffers.append((name, f"{name}: {size} bytes: {sample}"))
    return buffers


def paste_buffer(socket: Optional[str], name: str, target: str = "") -> None:
    args = ["paste-buffer", "-b", name]
    if target:
        args.extend(["-t", target])
    check_tmux(args, socket)


def run_command(socket: Optional[str], args: List[str]) -> str:
    """Run a tmux command given as an argument list."""
    return check_tmux(list(args), socket)


def command_prompt(socket: Optional[str], initial: str) -> None:
    """Open tmux's command prompt pre-filled with `initial`.

    Runs in the background after a short sleep so the popup has closed by
    the time the prompt appears.
    """
    escaped = initial
    for ch in ("\\", '"', "$", "`"):
        escaped = escaped.replace(ch, "\\" + ch)
    script = f'sleep 0.03; tmux command-prompt -I "{escaped}"'
    check_tmux(["run-shell", "-b", script], socket)
