"""Rich styles used by the popup view.

PUBLIC API:
  - Styles: Named style set
  - DEFAULT_STYLES: The stock palette
"""

from dataclasses import dataclass

from rich.style import Style


@dataclass(frozen=True)
class Styles:
    loading: Style = Style(color="color(33)", italic=True)
    item: Style = Style(color="color(249)")
    item_indicator: Style = Style(color="color(238)")
    selected_item_indicator: Style = Style(color="color(33)", bgcolor="color(238)")
    selected_item: Style = Style(color="color(255)", bgcolor="color(238)", bold=True)
    error: Style = Style(color="color(196)", bold=True)
    info: Style = Style(color="color(249)")
    header: Style = Style(color="color(245)", bold=True)
    footer: Style = Style(color="color(249)")
    filter: Style = Style(color="color(249)")
    filter_prompt: Style = Style(color="color(34)", bold=True)
    filter_placeholder: Style = Style(color="color(241)")
    cursor: Style = Style(color="color(0)", bgcolor="color(33)", blink=True)
    preview_title: Style = Style(color="color(245)", bold=True)
    preview_body: Style = Style(color="color(250)")
    preview_error: Style = Style(color="color(196)", bold=True)


DEFAULT_STYLES = Styles()
