"""Level state: filter editing, cursor movement, viewport and selection."""

from tmux_popup_control.menu.types import Item
from tmux_popup_control.ui.level import Level


def _level(*ids, multi=False):
    level = Level("test", "Test", [Item(id, id) for id in ids])
    level.multi_select = multi
    return level


class TestItems:
    def test_cursor_starts_on_last_item(self):
        assert _level("a", "b", "c").cursor == 2

    def test_empty_level(self):
        level = _level()
        assert level.cursor == 0
        assert level.current_item() is None

    def test_index_of_suffix_fallback(self):
        level = _level("kill", "rename")
        assert level.index_of("session:kill") == 0
        assert level.index_of("missing") == -1
        assert level.index_of("") == -1

    def test_update_keeps_cursor_on_same_id(self):
        level = _level("a", "b", "c")
        level.cursor = 1
        level.update_items([Item("x", "x"), Item("a", "a"), Item("b", "b")])
        assert level.current_item().id == "b"

    def test_update_clamps_when_item_vanishes(self):
        level = _level("a", "b", "c")
        level.update_items([Item("a", "a")])
        assert level.cursor == 0


class TestFilter:
    def test_filter_and_restore_cursor(self):
        level = _level("alpha", "beta", "gamma")
        level.cursor = 1
        level.insert_filter_text("gam")
        assert [item.id for item in level.items] == ["gamma"]
        assert level.cursor == 0
        level.clear_filter()
        assert len(level.items) == 3
        assert level.cursor == 1

    def test_caret_editing(self):
        level = _level("a")
        level.insert_filter_text("ac")
        level.move_filter_cursor_rune_backward()
        level.insert_filter_text("b")
        assert level.filter == "abc"
        assert level.filter_cursor == 2

    def test_delete_rune_at_start(self):
        level = _level("a")
        level.insert_filter_text("ab")
        level.move_filter_cursor_start()
        assert not level.delete_filter_rune_backward()
        assert level.filter == "ab"

    def test_delete_word(self):
        level = _level("a")
        level.insert_filter_text("foo bar  ")
        assert level.delete_filter_word_backward()
        assert level.filter == "foo "
        assert level.filter_cursor == 4

    def test_word_movement(self):
        level = _level("a")
        level.insert_filter_text("one two three")
        level.move_filter_cursor_word_backward()
        assert level.filter_cursor == 8
        level.move_filter_cursor_start()
        level.move_filter_cursor_word_forward()
        assert level.filter_cursor == 4
        assert level.move_filter_cursor_end()
        assert not level.move_filter_cursor_end()
        assert not level.move_filter_cursor_rune_forward()

    def test_clear_empty_filter(self):
        assert not _level("a").clear_filter()

    def test_whitespace_only_filter_shows_all(self):
        level = _level("a", "b")
        level.insert_filter_text("  ")
        assert len(level.items) == 2


class TestCursor:
    def test_wraps(self):
        level = _level("a", "b", "c")
        assert level.move_cursor_down()
        assert level.cursor == 0
        assert level.move_cursor_up()
        assert level.cursor == 2

    def test_single_item_does_not_move(self):
        level = _level("a")
        assert not level.move_cursor_down()
        assert not level.move_cursor_up()

    def test_home_end(self):
        level = _level("a", "b", "c")
        assert level.move_cursor_home()
        assert not level.move_cursor_home()
        assert level.move_cursor_end()
        assert level.cursor == 2

    def test_paging_clamps(self):
        level = _level(*[str(i) for i in range(10)])
        level.cursor = 0
        assert level.move_cursor_page_down(4)
        assert level.cursor == 4
        level.move_cursor_page_down(4)
        level.move_cursor_page_down(4)
        assert level.cursor == 9
        assert not level.move_cursor_page_down(4)
        level.move_cursor_page_up(0)
        assert level.cursor == 0

    def test_ensure_cursor_visible(self):
        level = _level(*[str(i) for i in range(10)])
        level.cursor = 7
        level.viewport_offset = 0
        level.ensure_cursor_visible(3)
        assert level.viewport_offset == 5
        level.cursor = 2
        level.ensure_cursor_visible(3)
        assert level.viewport_offset == 2
        level.ensure_cursor_visible(-1)
        assert level.viewport_offset == 0


class TestSelection:
    def test_single_select_ignores_toggle(self):
        level = _level("a", "b")
        assert not level.toggle_current_selection()
        assert level.selected == set()

    def test_selected_items_in_display_order(self):
        level = _level("a", "b", "c", multi=True)
        for idx in (2, 0):
            level.cursor = idx
            level.toggle_current_selection()
        assert [item.id for item in level.selected_items()] == ["a", "c"]
        level.toggle_current_selection()
        assert [item.id for item in level.selected_items()] == ["c"]

    def test_vanished_selection_is_dropped(self):
        level = _level("a", "b", multi=True)
        level.cursor = 0
        level.toggle_current_selection()
        level.update_items([Item("b", "b")])
        assert level.selected == set()
