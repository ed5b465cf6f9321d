"""Data models for highlights, resolved spans, and reader selections."""

from superflux_highlights.models.highlight import (
    HIGHLIGHT_COLORS,
    Highlight,
    HighlightColor,
    HighlightDraft,
    ResolvedSpan,
    SelectionPoint,
    SelectionRange,
)

__all__ = [
    "HIGHLIGHT_COLORS",
    "Highlight",
    "HighlightColor",
    "HighlightDraft",
    "ResolvedSpan",
    "SelectionPoint",
    "SelectionRange",
]
