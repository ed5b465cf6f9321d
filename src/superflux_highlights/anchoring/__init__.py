"""Text-anchor relocation and highlight overlay for article HTML."""

from superflux_highlights.anchoring.locator import (
    context_similarity,
    find_occurrences,
    locate,
    resolve_spans,
)
from superflux_highlights.anchoring.overlay import (
    apply_highlights,
    capture_selection,
    record_selection,
)
from superflux_highlights.anchoring.projector import (
    marker_selector,
    project_spans,
    prune_overlaps,
    strip_highlight_markers,
)
from superflux_highlights.anchoring.text_projection import (
    DocumentParseError,
    extract_plain_text,
)

__all__ = [
    "DocumentParseError",
    "apply_highlights",
    "capture_selection",
    "context_similarity",
    "extract_plain_text",
    "find_occurrences",
    "locate",
    "marker_selector",
    "project_spans",
    "prune_overlaps",
    "record_selection",
    "resolve_spans",
    "strip_highlight_markers",
]
