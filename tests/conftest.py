"""Shared fixtures: a fake tmux binary and a ready-to-drive popup model."""

import pytest

from tmux_popup_control.tmux import core
from tmux_popup_control.tmux import preview as tmux_preview
from tmux_popup_control.ui import Harness, Model


class FakeTmux:
    """Stands in for the tmux executable.

    Records every argument list and answers from canned responses, matched
    by argument prefix with the most recent registration winning.
    """

    def __init__(self):
        self.calls = []
        self._responses = []

    def respond(self, *prefix, stdout="", stderr="", code=0):
        self._responses.append((list(prefix), (code, stdout, stderr)))

    def __call__(self, args, socket=None):
        args = list(args)
        self.calls.append(args)
        for prefix, result in reversed(self._responses):
            if args[: len(prefix)] == prefix:
                return result
        return 0, "", ""

    def commands(self, name):
        return [call for call in self.calls if call and call[0] == name]


@pytest.fixture
def fake_tmux(monkeypatch):
    fake = FakeTmux()
    monkeypatch.setattr(core, "run_process", fake)
    monkeypatch.setattr(tmux_preview, "run_process", fake)
    monkeypatch.setattr(core, "_transport", None)
    return fake


@pytest.fixture
def model(fake_tmux):
    return Model(socket="/tmp/tmux-test/default", width=60, height=24)


@pytest.fixture
def harness(model):
    return Harness(model)
