"""Per-menu level state: items, filter, cursor, viewport and selection.

PUBLIC API:
  - Level: One entry on the menu stack
"""

from typing import Any, List, Optional, Sequence, Set

from ..fuzzy import best_match_index, filter_items
from ..menu.types import Item


def _is_space(ch: str) -> bool:
    return ch.isspace()


class Level:
    """State of one open menu.

    `full` holds every item, `items` the filtered view. `cursor` indexes
    `items`. `last_cursor` remembers the unfiltered cursor while a filter is
    active, and the parent cursor while a child level is loading.
    """

    def __init__(self, id: str, title: str, items: Sequence[Item], node: Any = None):
        self.id = id
        self.title = title
        self.items: List[Item] = []
        self.full: List[Item] = []
        self.filter = ""
        self.filter_cursor = 0
        # -1 lands the cursor on the last item once the items are applied
        self.cursor = -1
        self.last_cursor = -1
        self.multi_select = False
        self.selected: Set[str] = set()
        self.data: Any = None
        self.node = node
        self.viewport_offset = 0
        self.update_items(items)

    def __repr__(self) -> str:
        return f"Level({self.id!r}, items={len(self.items)}, cursor={self.cursor})"

    # ---- items ----

    def current_item(self) -> Optional[Item]:
        if 0 <= self.cursor < len(self.items):
            return self.items[self.cursor]
        return None

    def index_of(self, id: str) -> int:
        """Index of `id` in the filtered items, matching the part after the last ':' as a fallback."""
        if not id:
            return -1
        for i, item in enumerate(self.items):
            if item.id == id:
                return i
        if ":" in id:
            suffix = id.rsplit(":", 1)[1]
            for i, item in enumerate(self.items):
                if item.id == suffix:
                    return i
        return -1

    def update_items(self, items: Sequence[Item]) -> None:
        """Replace the full item list, keeping selection, cursor and offset where still valid."""
        prev_offset = self.viewport_offset
        current = self.current_item()
        self.full = list(items)
        self.cleanup_selections()
        self._apply_filter()
        if not self.items:
            self.viewport_offset = 0
            return
        if current is not None:
            idx = self.index_of(current.id)
            if idx >= 0:
                self.cursor = idx
        prev_offset = max(prev_offset, 0)
        self.viewport_offset = prev_offset if prev_offset <= len(self.items) - 1 else 0

    def _apply_filter(self) -> None:
        self.items = filter_items(self.full, self.filter)
        if not self.items:
            self.cursor = 0
            self.viewport_offset = 0
            return
        if self.cursor < 0:
            self.cursor = len(self.items) - 1
            return
        if self.cursor >= len(self.items):
            self.cursor = len(self.items) - 1
        if self.viewport_offset > len(self.items) - 1:
            self.viewport_offset = 0

    # ---- filter ----

    def set_filter(self, query: str, cursor: int) -> None:
        """Set filter text and caret, then re-filter and re-position the list cursor."""
        trimmed = query.strip()
        prev_trimmed = self.filter.strip()
        restore = -1
        self.filter = query
        self.filter_cursor = min(max(cursor, 0), len(query))
        if trimmed:
            if not prev_trimmed:
                self.last_cursor = self.cursor
            self.cursor = 0
        elif prev_trimmed:
            restore = self.last_cursor
        self._apply_filter()
        if trimmed and self.items:
            idx = best_match_index(self.items, trimmed)
            if idx >= 0:
                self.cursor = idx
        if not trimmed and prev_trimmed:
            if 0 <= restore < len(self.items):
                self.cursor = restore
            elif self.items:
                self.cursor = len(self.items) - 1
            self.last_cursor = -1

    def filter_cursor_pos(self) -> int:
        return min(max(self.filter_cursor, 0), len(self.filter))

    def insert_filter_text(self, text: str) -> bool:
        if not text:
            return False
        pos = self.filter_cursor_pos()
        self.set_filter(self.filter[:pos] + text + self.filter[pos:], pos + len(text))
        return True

    def delete_filter_rune_backward(self) -> bool:
        pos = self.filter_cursor_pos()
        if pos == 0 or not self.filter:
            return False
        self.set_filter(self.filter[: pos - 1] + self.filter[pos:], pos - 1)
        return True

    def _word_start_before(self, pos: int) -> int:
        i = pos
        while i > 0 and _is_space(self.filter[i - 1]):
            i -= 1
        while i > 0 and not _is_space(self.filter[i - 1]):
            i -= 1
        return i

    def delete_filter_word_backward(self) -> bool:
        pos = self.filter_cursor_pos()
        if pos == 0 or not self.filter:
            return False
        i = self._word_start_before(pos)
        self.set_filter(self.filter[:i] + self.filter[pos:], i)
        return True

    def clear_filter(self) -> bool:
        if not self.filter:
            return False
        self.set_filter("", 0)
        return True

    def move_filter_cursor_start(self) -> bool:
        if self.filter_cursor_pos() == 0:
            return False
        self.filter_cursor = 0
        return True

    def move_filter_cursor_end(self) -> bool:
        end = len(self.filter)
        if self.filter_cursor_pos() == end:
            return False
        self.filter_cursor = end
        return True

    def move_filter_cursor_word_backward(self) -> bool:
        pos = self.filter_cursor_pos()
        if pos == 0 or not self.filter:
            return False
        i = self._word_start_before(pos)
        if i == pos:
            return False
        self.filter_cursor = i
        return True

    def move_filter_cursor_word_forward(self) -> bool:
        pos = self.filter_cursor_pos()
        n = len(self.filter)
        if pos >= n:
            return False
        i = pos
        while i < n and not _is_space(self.filter[i]):
            i += 1
        while i < n and _is_space(self.filter[i]):
            i += 1
        if i == pos:
            return False
        self.filter_cursor = i
        return True

    def move_filter_cursor_rune_backward(self) -> bool:
        pos = self.filter_cursor_pos()
        if pos == 0:
            return False
        self.filter_cursor = pos - 1
        return True

    def move_filter_cursor_rune_forward(self) -> bool:
        pos = self.filter_cursor_pos()
        if pos >= len(self.filter):
            return False
        self.filter_cursor = pos + 1
        return True

    # ---- cursor ----

    def move_cursor_up(self) -> bool:
        """Move up one row, wrapping to the last item."""
        n = len(self.items)
        if n == 0:
            self.cursor = 0
            return False
        old = self.cursor
        self.cursor = n - 1 if self.cursor <= 0 else self.cursor - 1
        return old != self.cursor

    def move_cursor_down(self) -> bool:
        """Move down one row, wrapping to the first item."""
        n = len(self.items)
        if n == 0:
            self.cursor = 0
            return False
        old = self.cursor
        self.cursor = 0 if self.cursor >= n - 1 else self.cursor + 1
        return old != self.cursor

    def move_cursor_home(self) -> bool:
        if not self.items:
            self.cursor = 0
            return False
        old = self.cursor
        self.cursor = 0
        return old != self.cursor

    def move_cursor_end(self) -> bool:
        if not self.items:
            self.cursor = 0
            return False
        old = self.cursor
        self.cursor = len(self.items) - 1
        return old != self.cursor

    def move_cursor_page_up(self, max_visible: int) -> bool:
        return self._move_cursor_by(-self._page_size(max_visible))

    def move_cursor_page_down(self, max_visible: int) -> bool:
        return self._move_cursor_by(self._page_size(max_visible))

    def _move_cursor_by(self, delta: int) -> bool:
        if not self.items:
            self.cursor = 0
            return False
        old = self.cursor
        target = max(self.cursor, 0) + delta
        self.cursor = min(max(target, 0), len(self.items) - 1)
        return old != self.cursor

    def _page_size(self, max_visible: int) -> int:
        total = len(self.items)
        if total == 0:
            return 0
        if max_visible <= 0 or max_visible > total:
            return total
        return max_visible

    def ensure_cursor_visible(self, max_visible: int) -> None:
        """Scroll the viewport the minimum needed to show the cursor."""
        n = len(self.items)
        if n == 0:
            self.cursor = 0
            self.viewport_offset = 0
            return
        self.cursor = min(max(self.cursor, 0), n - 1)
        if max_visible <= 0:
            self.viewport_offset = 0
            return
        max_offset = max(n - max_visible, 0)
        self.viewport_offset = min(max(self.viewport_offset, 0), max_offset)
        if self.cursor < self.viewport_offset:
            self.viewport_offset = self.cursor
        if self.cursor > self.viewport_offset + max_visible - 1:
            self.viewport_offset = min(max(self.cursor - max_visible + 1, 0), max_offset)

    # ---- selection ----

    def cleanup_selections(self) -> None:
        if not self.selected:
            return
        valid = {item.id for item in self.full}
        self.selected &= valid

    def is_selected(self, id: str) -> bool:
        return id in self.selected

    def toggle_selection(self, id: str) -> None:
        if id in self.selected:
            self.selected.discard(id)
        else:
            self.selected.add(id)

    def toggle_current_selection(self) -> bool:
        """Toggle the item under the cursor. Only multi-select levels react."""
        item = self.current_item()
        if not self.multi_select or item is None:
            return False
        self.toggle_selection(item.id)
        return True

    def clear_selection(self) -> None:
        self.selected.clear()

    def selected_items(self) -> List[Item]:
        """Selected items in display order."""
        return [item for item in self.items if item.id in self.selected]
