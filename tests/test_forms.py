"""Text fields and the create/rename forms."""

from builders import context, pane, session
from tmux_popup_control.menu.types import PanePrompt, SessionPrompt, WindowPrompt
from tmux_popup_control.ui.forms import PaneRenameForm, SessionForm, TextField, WindowRenameForm
from tmux_popup_control.ui.messages import KeyMsg


def _type(form, text):
    for ch in text:
        form.update(KeyMsg(ch, ch))


class TestTextField:
    def test_insert_and_caret(self):
        field = TextField(value="ac")
        field.update(KeyMsg("left"))
        field.update(KeyMsg("b", "b"))
        assert field.value == "abc"
        assert field.cursor == 2

    def test_char_limit(self):
        field = TextField(char_limit=3, value="abcdef")
        assert field.value == "abc"
        assert not field.insert("x")

    def test_delete_keys(self):
        field = TextField(value="foo bar")
        assert field.update(KeyMsg("ctrl+w"))
        assert field.value == "foo "
        field.update(KeyMsg("home"))
        assert not field.update(KeyMsg("backspace"))
        assert field.update(KeyMsg("delete"))
        assert field.value == "oo "

    def test_non_printable_ignored(self):
        field = TextField()
        assert not field.update(KeyMsg("ctrl+x", "\x18"))
        assert field.value == ""


class TestSessionForm:
    def _form(self, **kwargs):
        ctx = context(sessions=[session("dev"), session("Prod")])
        return SessionForm(SessionPrompt(context=ctx, **kwargs))

    def test_create_requires_name(self):
        form = self._form()
        assert form.title == "Create Session"
        assert form.err == "Session name required"
        cmd, done, cancelled = form.update(KeyMsg("enter"))
        assert (cmd, done, cancelled) == (None, False, False)

    def test_duplicate_is_case_insensitive(self):
        form = self._form()
        _type(form, "prod")
        assert form.err == "Session already exists"
        form.update(KeyMsg("backspace"))
        assert form.err == ""

    def test_submit_create(self, fake_tmux):
        form = self._form()
        _type(form, "scratch")
        assert form.pending_label() == "scratch"
        cmd, done, cancelled = form.update(KeyMsg("enter"))
        assert done and not cancelled
        assert cmd().info == "Created session scratch"

    def test_rename_allows_own_name(self):
        form = self._form(action="session:rename", target="dev", initial="dev")
        assert form.title == "Rename dev"
        assert form.err == ""
        assert form.pending_label() == "dev → dev"

    def test_rename_blank_cancels(self):
        form = self._form(action="session:rename", target="dev", initial="dev")
        form.update(KeyMsg("ctrl+u"))
        assert form.value == ""
        assert form.update(KeyMsg("enter")) == (None, False, True)

    def test_new_sessions_revalidate(self):
        form = self._form()
        _type(form, "work")
        assert form.err == ""
        form.set_sessions([session("work")])
        assert form.err == "Session already exists"

    def test_escape_cancels(self):
        assert self._form().update(KeyMsg("escape")) == (None, False, True)


class TestRenameForms:
    def test_window_form(self, fake_tmux):
        form = WindowRenameForm(WindowPrompt(context=context(), target="dev:1", initial="editor"))
        assert form.title == "Rename editor"
        assert form.field.value == "editor"
        form.update(KeyMsg("ctrl+u"))
        _type(form, "logs")
        assert form.pending_label() == "dev:1 → logs"
        cmd, done, _ = form.update(KeyMsg("enter"))
        assert done
        assert cmd().info == "Renamed dev:1 to logs"
        assert fake_tmux.calls == [["rename-window", "-t", "dev:1", "logs"]]

    def test_window_form_blank_cancels(self):
        form = WindowRenameForm(WindowPrompt(context=context(), target="dev:1", initial=""))
        assert form.update(KeyMsg("enter")) == (None, False, True)

    def test_pane_form_limit(self):
        ctx = context(panes=[pane("s:0.1")])
        form = PaneRenameForm(PanePrompt(context=ctx, target="s:0.1", initial=""))
        _type(form, "x" * 200)
        assert len(form.field.value) == 128
        assert form.pending_label().startswith("s:0.1 → x")
