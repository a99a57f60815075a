"""Interactive popup: model, view and the textual runtime.

PUBLIC API:
  - Model: Message-driven popup state machine
  - Harness: Synchronous driver for tests
  - PopupApp: Textual App running a Model
  - render / render_text: View of a Model
  - Level: One open menu
"""

from .level import Level
from .model import Model
from .view import render, render_text
from .harness import Harness
from .app import PopupApp

__all__ = ["Model", "Harness", "PopupApp", "render", "render_text", "Level"]
