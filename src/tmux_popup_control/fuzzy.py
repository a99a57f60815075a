"""Fuzzy filtering for menu items.

PUBLIC API:
  - fold: Case- and accent-folded form of a string
  - fuzzy_match: Subsequence test on folded strings
  - rank_matches: Matching indexes with their edit distance
  - filter_items: Items matching a query, input order kept
  - best_match_index: Index the cursor should jump to for a query
"""

import unicodedata
from typing import List, NamedTuple, Sequence

from rapidfuzz.distance import Levenshtein


class Rank(NamedTuple):
    index: int
    distance: int


def fold(text: str) -> str:
    """Lowercase and strip combining marks ("Café" -> "cafe")."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def fuzzy_match(query: str, target: str) -> bool:
    """True when every character of `query` appears in `target` in order."""
    pos = 0
    for ch in query:
        pos = target.find(ch, pos)
        if pos < 0:
            return False
        pos += 1
    return True


def rank_matches(query: str, labels: Sequence[str]) -> List[Rank]:
    folded = fold(query)
    ranks = []
    for i, label in enumerate(labels):
        target = fold(label)
        if fuzzy_match(folded, target):
            ranks.append(Rank(i, Levenshtein.distance(folded, target)))
    return ranks


def filter_items(items: Sequence, query: str) -> list:
    """Return the items matching `query`.

    Fuzzy matching runs on labels first. When nothing matches, a plain
    case-insensitive substring test on label or id is used instead.
    """
    trimmed = query.strip()
    if not trimmed:
        return list(items)
    ranks = rank_matches(trimmed, [item.label for item in items])
    if ranks:
        matched = {rank.index for rank in ranks}
        return [item for i, item in enumerate(items) if i in matched]
    lower = trimmed.lower()
    return [item for item in items if lower in item.label.lower() or lower in item.id.lower()]


def best_match_index(items: Sequence, query: str) -> int:
    """Pick the item the cursor should land on after filtering.

    Exact label/id wins, then label prefix, id prefix, id substring, label
    substring and finally the closest fuzzy match.

    Returns:
        The index, or -1 for an empty item list.
    """
    if not items:
        return -1
    trimmed = query.strip()
    if not trimmed:
        return 0
    lower = trimmed.lower()
    checks = (
        lambda item: item.label.lower() == lower or item.id.lower() == lower,
        lambda item: item.label.lower().startswith(lower),
        lambda item: item.id.lower().startswith(lower),
        lambda item: lower in item.id.lower(),
        lambda item: lower in item.label.lower(),
    )
    for check in checks:
        for i, item in enumerate(items):
            if check(item):
                return i
    ranks = rank_matches(trimmed, [item.label for item in items])
    if not ranks:
        return 0
    return min(ranks, key=lambda rank: (rank.distance, rank.index)).index
