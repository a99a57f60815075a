"""Fuzzy popup menu for tmux sessions, windows and panes.

Runs inside `tmux display-popup`, lists live tmux state and turns a
selection into tmux commands.

PUBLIC API:
  - Config: Popup settings from flags and environment
  - parse_config: Build a Config from argv
  - Model: Menu state machine
  - PopupApp: Textual application around a Model
"""

from .config import Config, parse_config
from .ui import Model, PopupApp

__version__ = "0.1.0"
__all__ = ["Config", "parse_config", "Model", "PopupApp"]
