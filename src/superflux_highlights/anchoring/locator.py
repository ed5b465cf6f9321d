"""Relocate a recorded quote inside the current plain text.

A highlight is anchored by ``(prefix, text, suffix)``. Content may be
re-fetched or edited between sessions, so the locator first looks for the
exact anchor and then falls back to scoring every occurrence of the quote
by how well its surroundings match the recorded context.

Matching is on raw text identity: no case folding and no whitespace
collapsing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from superflux_highlights.models import ResolvedSpan

if TYPE_CHECKING:
    from collections.abc import Iterable

    from superflux_highlights.models import Highlight

logger = logging.getLogger(__name__)


def context_similarity(actual: str, recorded: str) -> float:
    """Score two context strings by position-wise character agreement.

    Counts positions where the characters are equal (over the shorter
    length) and divides by the longer length. Either string being empty
    scores ``0.0``.

    This is intentionally not an edit distance: swapping it for one would
    change which occurrence wins in ambiguous documents.
    """
    if not actual or not recorded:
        return 0.0
    matches = sum(1 for a, b in zip(actual, recorded) if a == b)
    return matches / max(len(actual), len(recorded))


def find_occurrences(full_text: str, text: str) -> list[int]:
    """Return every offset where *text* occurs, overlapping ones included."""
    occurrences: list[int] = []
    idx = full_text.find(text)
    while idx != -1:
        occurrences.append(idx)
        idx = full_text.find(text, idx + 1)
    return occurrences


def locate(
    full_text: str, text: str, prefix: str = "", suffix: str = ""
) -> int | None:
    """Find the best offset for *text* in *full_text*.

    Args:
        full_text: Plain-text projection of the current document.
        text: The recorded quote. Must not be empty.
        prefix: Context recorded immediately before the quote.
        suffix: Context recorded immediately after the quote.

    Returns:
        Offset of the quote's first character, or ``None`` if the quote no
        longer occurs anywhere.

    Raises:
        ValueError: If *text* is empty.
    """
    if not text:
        msg = "Cannot locate an empty quote"
        raise ValueError(msg)

    # Exact anchor: unambiguous in all but pathological documents
    if prefix or suffix:
        idx = full_text.find(prefix + text + suffix)
        if idx != -1:
            return idx + len(prefix)

    occurrences = find_occurrences(full_text, text)
    if not occurrences:
        return None
    if len(occurrences) == 1:
        return occurrences[0]

    # Several candidates: best context agreement wins, ties keep the first
    best_idx = occurrences[0]
    best_score = -1.0
    for idx in occurrences:
        score = 0.0
        if prefix:
            actual_prefix = full_text[max(0, idx - len(prefix)) : idx]
            score += context_similarity(actual_prefix, prefix)
        if suffix:
            after = idx + len(text)
            actual_suffix = full_text[after : after + len(suffix)]
            score += context_similarity(actual_suffix, suffix)
        if score > best_score:
            best_score = score
            best_idx = idx

    logger.debug(
        "Chose offset %d among %d occurrences (score %.3f)",
        best_idx,
        len(occurrences),
        best_score,
    )
    return best_idx


def resolve_spans(
    full_text: str, highlights: Iterable[Highlight]
) -> list[ResolvedSpan]:
    """Locate each highlight in *full_text*, in input order.

    Highlights with an empty quote or whose quote no longer occurs are
    left out; both are expected after content changes.
    """
    spans: list[ResolvedSpan] = []
    for hl in highlights:
        if not hl.text:
            logger.debug("Skipping highlight %s: empty quote", hl.id)
            continue
        start = locate(full_text, hl.text, hl.prefix, hl.suffix)
        if start is None:
            logger.debug("Highlight %s not found in current content", hl.id)
            continue
        end = start + len(hl.text)
        spans.append(ResolvedSpan(start=start, end=end, highlight=hl))
    return spans
