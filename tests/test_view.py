"""Rendering and layout of the popup view."""

from builders import open_path, pane, panes_event
from tmux_popup_control.ui import Harness, Model, render_text
from tmux_popup_control.ui.messages import MouseScrollMsg
from tmux_popup_control.ui.view import FOOTER_TEXT


def _pane_model(width, height, lines):
    model = Model(width=width, height=height)
    model.pane_preview = lambda socket, target: list(lines)
    harness = Harness(model)
    harness.send(panes_event([pane("s:0.0", current=True), pane("s:0.1")]))
    open_path(harness, "pane", "switch")
    return model, harness


class TestMenuView:
    def test_root_menu(self, model):
        text = render_text(model)
        lines = text.splitlines()
        assert lines[0] == "Main Menu"
        assert "▌ session" in text
        assert "▌ keybinding" in text
        assert "» (type to search)" in text

    def test_no_matches(self, harness):
        harness.type("zzz")
        assert 'No matches for "zzz"' in render_text(harness.model)
        assert "» zzz" in render_text(harness.model)

    def test_multi_select_markers(self, harness):
        harness.send(panes_event([pane("s:1.0", current=True), pane("s:1.1")]))
        level = open_path(harness, "pane", "kill")
        level.cursor = level.index_of("s:1.1")
        harness.press("tab")
        text = render_text(harness.model)
        assert "[✓] s:1.1" in text
        assert "[ ] [current] s:1.0" in text

    def test_footer(self, fake_tmux):
        model = Model(width=90, height=20, show_footer=True)
        assert FOOTER_TEXT in render_text(model)

    def test_info_line(self, model):
        model.set_info("Selected system (no action defined yet)")
        assert "Selected system (no action defined yet)" in render_text(model)

    def test_height_limits_rows(self, fake_tmux):
        model = Model(width=60, height=6)
        text = render_text(model)
        assert len([line for line in text.splitlines() if line.startswith("▌")]) == model.max_visible_items()
        # cursor starts on the last entry, so the viewport ends there
        assert "▌ session" in text
        assert "▌ process" not in text


class TestLayout:
    def test_unknown_height(self, fake_tmux):
        assert Model().max_visible_items() == -1

    def test_reserved_rows(self, fake_tmux):
        assert Model(height=10).max_visible_items() == 7
        assert Model(height=10, show_footer=True).max_visible_items() == 5
        assert Model(height=2).max_visible_items() == 1

    def test_inline_preview_reserves_body(self, fake_tmux):
        model, _ = _pane_model(60, 30, ["one", "two"])
        assert not model.has_side_preview()
        # bottom bar, header, preview title + gap, two body lines
        assert model.max_visible_items() == 30 - 2 - 1 - 2 - 2

    def test_side_preview_threshold(self, fake_tmux):
        narrow, _ = _pane_model(66, 20, ["x"])
        wide, _ = _pane_model(67, 20, ["x"])
        assert not narrow.has_side_preview()
        assert wide.has_side_preview()


class TestPreviewPanel:
    def test_side_panel(self, fake_tmux):
        model, _ = _pane_model(100, 20, ["$ make test", "ok"])
        text = render_text(model)
        assert "Preview: s:0.1" in text
        assert "$ make test" in text
        assert "2/2" in text

    def test_inline_preview_keeps_newest_lines(self, fake_tmux):
        lines = [f"line {i}" for i in range(30)]
        model, _ = _pane_model(60, 40, lines)
        text = render_text(model)
        assert "line 29" in text
        assert "line 10" in text
        assert "line 9\n" not in text + "\n"

    def test_mouse_scroll(self, fake_tmux):
        lines = [f"line {i}" for i in range(30)]
        model, harness = _pane_model(100, 20, lines)
        data = model.preview["pane:switch"]
        assert data.scroll_offset == 30

        harness.send(MouseScrollMsg(-1))
        # 16 visible rows leave a maximum offset of 14
        assert data.scroll_offset == 11
        assert "27/30" in render_text(model)

        for _ in range(10):
            harness.send(MouseScrollMsg(-1))
        assert data.scroll_offset == 0
        harness.send(MouseScrollMsg(1))
        assert data.scroll_offset == 3

    def test_scroll_ignored_without_side_panel(self, fake_tmux):
        model, harness = _pane_model(60, 20, ["a", "b"])
        harness.send(MouseScrollMsg(-1))
        assert model.preview["pane:switch"].scroll_offset == 2


class TestFormView:
    def test_session_form(self, harness):
        open_path(harness, "session", "new")
        text = render_text(harness.model)
        assert "Create Session" in text
        assert "Session name required" in text
        assert "Press Enter to create. Esc to cancel." in text
