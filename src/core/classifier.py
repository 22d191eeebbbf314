"""Release-note classification and message composition (core domain)."""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

# Ordered (category, marker, singular, plural). The order is also the order
# categories appear in the composed message.
CATEGORIES: Tuple[Tuple[str, str, str, str], ...] = (
    ("feature", ">feature<", "feature", "features"),
    ("changed", ">changed<", "change", "changes"),
    ("fixed", ">fixed<", "fix", "fixes"),
)

CategoryCounts = Dict[str, int]


def classify(content_body: Optional[str]) -> CategoryCounts:
    """Count category markers in an entry body.

    Markers are the lowercased tag text the vendor wraps around each note
    type (``<h3>Feature</h3>``). This is a substring heuristic, not a markup
    parse, so unknown or malformed content just yields zero counts.
    """

    lowered = (content_body or "").lower()
    return {name: lowered.count(marker) for name, marker, _, _ in CATEGORIES}


def _noun(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def compose(counts: Mapping[str, int], product_name: str) -> str:
    """Build the summary sentence; empty when no category is present."""

    parts = []
    for name, _, singular, plural in CATEGORIES:
        count = counts.get(name, 0)
        if count <= 0:
            continue
        parts.append(f"{count} new {_noun(count, singular, plural)}")

    if not parts:
        return ""
    return f"{product_name} has " + " and ".join(parts)
