"""Column alignment for tabular menu labels.

PUBLIC API:
  - LEFT / RIGHT: Column alignments
  - format_table: Pad rows into aligned strings
"""

from typing import List, Sequence

from rich.cells import cell_len

LEFT = "left"
RIGHT = "right"


def format_table(rows: Sequence[Sequence[str]], alignments: Sequence[str] = ()) -> List[str]:
    """Pad every cell to its column width and join cells with two spaces.

    Widths are measured in terminal cells, so wide characters line up.
    """
    if not rows:
        return []
    widths = [0] * len(rows[0])
    for row in rows:
        for c, cell in enumerate(row):
            widths[c] = max(widths[c], cell_len(cell))
    out = []
    for row in rows:
        cells = []
        for c, cell in enumerate(row):
            pad = " " * max(widths[c] - cell_len(cell), 0)
            if c < len(alignments) and alignments[c] == RIGHT:
                cells.append(pad + cell)
            else:
                cells.append(cell + pad)
        out.append("  ".join(cells))
    return out
