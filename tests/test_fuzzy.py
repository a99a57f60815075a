"""Fuzzy filtering and best-match selection."""

from tmux_popup_control.fuzzy import best_match_index, filter_items, fold, fuzzy_match
from tmux_popup_control.menu.types import Item


def _items(*labels):
    return [Item(label.split(":")[0], label) for label in labels]


class TestFold:
    def test_case_and_accents(self):
        assert fold("Café") == "cafe"
        assert fold("ÄPFEL") == "apfel"

    def test_subsequence(self):
        assert fuzzy_match("wnd", "window")
        assert not fuzzy_match("dw", "window")
        assert fuzzy_match("", "anything")


class TestFilterItems:
    def test_empty_query_keeps_everything(self):
        items = _items("alpha", "beta")
        assert filter_items(items, "   ") == items

    def test_keeps_input_order(self):
        items = _items("dev", "devops", "prod")
        assert [item.id for item in filter_items(items, "dv")] == ["dev", "devops"]

    def test_accent_insensitive(self):
        items = [Item("cafe", "Café"), Item("tea", "Tea")]
        assert filter_items(items, "cafe") == [Item("cafe", "Café")]

    def test_substring_fallback_on_id(self):
        # no label contains "%3" as a subsequence, but an id does
        items = [Item("%3", "pane three"), Item("%4", "pane four")]
        assert filter_items(items, "%3") == [Item("%3", "pane three")]

    def test_no_match(self):
        assert filter_items(_items("alpha"), "zzz") == []


class TestBestMatchIndex:
    def test_empty_items(self):
        assert best_match_index([], "a") == -1

    def test_blank_query(self):
        assert best_match_index(_items("a", "b"), "") == 0

    def test_exact_beats_prefix(self):
        items = _items("devops", "dev")
        assert best_match_index(items, "dev") == 1

    def test_prefix_beats_substring(self):
        items = _items("my-dev", "dev-box")
        assert best_match_index(items, "dev") == 1

    def test_closest_fuzzy_match(self):
        items = _items("window-long-name", "wnd")
        assert best_match_index(items, "wd") == 1
