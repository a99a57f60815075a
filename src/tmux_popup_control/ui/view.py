"""Rendering of the popup model into rich renderables.

PUBLIC API:
  - render: Model -> rich renderable for the current mode
  - render_text: Plain-text rendering, used by tests and headless runs
  - FOOTER_TEXT: Key hints shown with the footer enabled
"""

import io
from typing import TYPE_CHECKING, List, Optional

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from .forms import SessionForm, TextField
from .level import Level
from .model import preview_display_lines, should_render_preview
from .preview import PreviewData, active_preview
from .theme import DEFAULT_STYLES, Styles

if TYPE_CHECKING:
    from .model import Model

__all__ = ["render", "render_text", "FOOTER_TEXT"]

FOOTER_TEXT = "↑/↓ move  enter select  tab mark  backspace clear  esc back  ctrl+c quit"
PLACEHOLDER = "(type to search)"
INDICATOR = "▌"

_PANEL_BORDER = Style(color="color(240)")


def _text_line(text: str, style: Style, width: int) -> Text:
    line = Text(text, style=style, no_wrap=True, overflow="ellipsis")
    if width > 0:
        line.truncate(width, overflow="ellipsis")
    return line


def _body_text(text: str, data: PreviewData, styles: Styles) -> Text:
    """Pane captures keep their own colours; synthetic listings get the body style."""
    if data.raw_ansi:
        return Text.from_ansi(text, no_wrap=True, overflow="ellipsis")
    return Text(text, style=styles.preview_body, no_wrap=True, overflow="ellipsis")


def _item_lines(m: "Model", level: Level, width: int, styles: Styles) -> List[Text]:
    if not level.items:
        if level.filter:
            return [_text_line(f'No matches for "{level.filter}"', styles.info, width)]
        return [_text_line("(no entries)", styles.info, width)]

    start = 0
    end = len(level.items)
    max_visible = m.max_visible_items()
    if max_visible > 0:
        start = min(max(level.viewport_offset, 0), max(len(level.items) - max_visible, 0))
        end = min(start + max_visible, len(level.items))

    lines = []
    for i in range(start, end):
        item = level.items[i]
        active = i == level.cursor
        line_style = styles.selected_item if active else styles.item
        indicator_style = styles.selected_item_indicator if active else styles.item_indicator
        label = item.label
        if level.multi_select:
            label = ("[✓] " if level.is_selected(item.id) else "[ ] ") + label
        line = Text(no_wrap=True, overflow="ellipsis")
        line.append(INDICATOR, style=indicator_style)
        line.append(" " + label, style=line_style)
        if width > 0:
            line.truncate(width, overflow="ellipsis", pad=active)
            if active:
                line.stylize(line_style, 1)
        lines.append(line)
    return lines


def _inline_preview(data: Optional[PreviewData], width: int, styles: Styles) -> List[Text]:
    if not should_render_preview(data):
        return []
    lines = [Text(""), _text_line(f"Preview: {data.label or data.target}", styles.preview_title, width)]
    if data.err:
        lines.append(_text_line(f"Preview error: {data.err}", styles.preview_error, width))
        return lines
    for body in preview_display_lines(data):
        line = _body_text(body, data, styles)
        if width > 0:
            line.truncate(width, overflow="ellipsis")
        lines.append(line)
    return lines


def _side_panel(data: Optional[PreviewData], width: int, height: int, styles: Styles) -> Panel:
    inner = max(height - 2, 1)
    title = "Preview"
    subtitle = None
    if data is None:
        body = Text("Loading preview…", style=styles.loading)
    elif data.err:
        title = f"Preview: {data.label or data.target}"
        body = Text(f"Preview error: {data.err}", style=styles.preview_error)
    elif data.loading and not data.lines:
        title = f"Preview: {data.label or data.target}"
        body = Text("Loading preview…", style=styles.loading)
    else:
        title = f"Preview: {data.label or data.target}"
        total = len(data.lines)
        max_offset = max(total - inner, 0)
        offset = min(max(data.scroll_offset, 0), max_offset)
        shown = data.lines[offset : offset + inner]
        body = _body_text("\n".join(shown), data, styles)
        if total:
            subtitle = f"{offset + len(shown)}/{total}"
    return Panel(
        body,
        title=title,
        title_align="left",
        subtitle=subtitle,
        subtitle_align="right",
        border_style=_PANEL_BORDER,
        width=width,
        height=height,
    )


def _filter_line(level: Optional[Level], styles: Styles) -> Text:
    line = Text(no_wrap=True, overflow="ellipsis")
    line.append("» ", style=styles.filter_prompt)
    if level is None or not level.filter:
        line.append(PLACEHOLDER[0], style=styles.cursor)
        line.append(PLACEHOLDER[1:], style=styles.filter_placeholder)
        return line
    pos = level.filter_cursor_pos()
    before, after = level.filter[:pos], level.filter[pos:]
    line.append(before, style=styles.filter)
    if after:
        line.append(after[0], style=styles.cursor)
        line.append(after[1:], style=styles.filter)
    else:
        line.append(" ", style=styles.cursor)
    return line


def _bottom_lines(m: "Model", width: int, styles: Styles) -> List[Text]:
    if m.err_msg:
        status = _text_line(f"Error: {m.err_msg}", styles.error, width)
    elif m.backend_issue():
        status = _text_line(f"Backend: {m.backend_issue()}", styles.error, width)
    elif m.loading:
        status = _text_line(f"Loading {m.pending_label or m.pending_id}…", styles.loading, width)
    else:
        status = Text("")
    return [status, _filter_line(m.current_level(), styles)]


def _menu_lines(m: "Model", width: int, styles: Styles, inline_preview: bool) -> List[Text]:
    lines: List[Text] = []
    header = m.header()
    if header:
        lines.append(_text_line(header, styles.header, width))
    level = m.current_level()
    if level is not None:
        lines.extend(_item_lines(m, level, width, styles))
    if inline_preview:
        lines.extend(_inline_preview(active_preview(m), width, styles))
    info = m.current_info()
    if info:
        lines.extend([Text(""), _text_line(info, styles.info, width)])
    if m.show_footer:
        lines.extend([Text(""), _text_line(FOOTER_TEXT, styles.footer, width)])
    return lines


def _limit(lines: List[Text], height: int) -> List[Text]:
    if height <= 0 or len(lines) <= height:
        return lines
    return lines[:height]


def _field_line(field: TextField, styles: Styles) -> Text:
    line = Text(no_wrap=True, overflow="ellipsis")
    line.append("> ", style=styles.filter_prompt)
    if not field.value:
        text = field.placeholder or " "
        line.append(text[0], style=styles.cursor)
        line.append(text[1:], style=styles.filter_placeholder)
        return line
    before, after = field.value[: field.cursor], field.value[field.cursor :]
    line.append(before, style=styles.filter)
    line.append(after[:1] or " ", style=styles.cursor)
    line.append(after[1:], style=styles.filter)
    return line


def _form_view(m: "Model", styles: Styles) -> RenderableType:
    form = m.form
    width = m.width
    lines = [
        _text_line(m.header(), styles.header, width),
        _text_line(form.title, styles.header, width),
        Text(""),
        _field_line(form.field, styles),
    ]
    err = form.err if isinstance(form, SessionForm) else ""
    if err:
        lines.extend([Text(""), _text_line(err, styles.error, width)])
    lines.extend([Text(""), _text_line(form.help, styles.footer, width)])
    return Group(*_limit(lines, m.height))


def render(m: "Model", styles: Styles = DEFAULT_STYLES) -> RenderableType:
    """Build the renderable for the model's current state."""
    if m.form is not None:
        return _form_view(m, styles)

    bottom = _bottom_lines(m, m.width, styles)
    body_height = m.height - len(bottom) if m.height > 0 else 0

    if not m.has_side_preview():
        lines = _limit(_menu_lines(m, m.width, styles, inline_preview=True), body_height)
        return Group(*lines, *bottom)

    panel_width = m.preview_panel_width()
    menu_width = max(m.width - panel_width - 1, 1)
    lines = _menu_lines(m, menu_width, styles, inline_preview=False)
    panel_height = max(body_height, 3) if body_height else max(len(lines), 3)
    lines = _limit(lines, panel_height)

    grid = Table.grid(padding=(0, 1, 0, 0))
    grid.add_column(width=menu_width, no_wrap=True)
    grid.add_column(width=panel_width)
    grid.add_row(Group(*lines), _side_panel(active_preview(m), panel_width, panel_height, styles))
    return Group(grid, *bottom)


def render_text(m: "Model", width: Optional[int] = None) -> str:
    """Render to plain text, one string with newline-separated rows."""
    console = Console(
        width=width or m.width or 80,
        file=io.StringIO(),
        color_system=None,
        force_terminal=False,
        legacy_windows=False,
    )
    with console.capture() as capture:
        console.print(render(m))
    return "\n".join(line.rstrip() for line in capture.get().splitlines())
