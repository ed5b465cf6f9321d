"""Project resolved spans back onto HTML as ``<mark>`` elements.

Transforms HTML + resolved spans into HTML where each span's text is
wrapped in ``<mark class="highlight highlight-{category}"
data-highlight-id="...">`` elements.

Architecture:
    Parses with selectolax, snapshots every body text node with its
    offsets in the plain-text projection (``collect_text_nodes``), then
    splits each overlapped text node into plain and marked fragments.
    A span crossing element boundaries yields one marker per text node,
    all carrying the same highlight identifier.
"""

from __future__ import annotations

import html as html_module
import logging
from typing import TYPE_CHECKING, Any

from selectolax.lexbor import LexborHTMLParser

from superflux_highlights.anchoring.marker_constants import (
    CATEGORY_UNSAFE_PATTERN,
    MARKER_ID_ATTR,
    MARKER_SELECTOR,
    MARKER_TAG,
    MARKER_TEMPLATE,
)
from superflux_highlights.anchoring.text_projection import (
    TextNodeInfo,
    collect_text_nodes,
    parse_body,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from superflux_highlights.models import Highlight, ResolvedSpan

logger = logging.getLogger(__name__)

# A fragment is either plain text or (text, highlight) for a marked run
_Fragment = str | tuple[str, "Highlight"]


# ---------------------------------------------------------------------------
# Overlap resolution
# ---------------------------------------------------------------------------


def prune_overlaps(spans: Iterable[ResolvedSpan]) -> list[ResolvedSpan]:
    """Drop spans that overlap an earlier-starting span.

    Spans are stably sorted by ``start`` (input order breaks ties) and a
    span is kept only if it starts at or after the end of the last kept
    span. This is a tie-break policy, not a quality judgment: a later
    span that would have been the better match is discarded all the same.
    """
    kept: list[ResolvedSpan] = []
    last_end = -1
    for span in sorted(spans, key=lambda s: s.start):
        if span.start >= last_end:
            kept.append(span)
            last_end = span.end
        else:
            logger.debug(
                "Dropping highlight %s at [%d, %d): overlaps span ending at %d",
                span.highlight.id,
                span.start,
                span.end,
                last_end,
            )
    return kept


# ---------------------------------------------------------------------------
# Marker construction and lookup
# ---------------------------------------------------------------------------


def marker_category(color: str) -> str:
    """CSS-safe category token derived from a highlight colour."""
    return CATEGORY_UNSAFE_PATTERN.sub("-", color)


def _escape_css_string(value: str) -> str:
    """Escape *value* for a double-quoted CSS string, as ``CSS.escape`` does.

    Control characters become hex escapes; a trailing space terminates
    each escape so a following hex digit is not absorbed.
    """
    parts: list[str] = []
    for ch in value:
        code = ord(ch)
        if code == 0:
            parts.append("\ufffd")
        elif code < 0x20 or code == 0x7F:
            parts.append(f"\\{code:x} ")
        elif ch in ('"', "\\"):
            parts.append(f"\\{ch}")
        else:
            parts.append(ch)
    return "".join(parts)


def marker_selector(highlight_id: str) -> str:
    """CSS selector matching every marker of one highlight."""
    return f'{MARKER_TAG}[{MARKER_ID_ATTR}="{_escape_css_string(highlight_id)}"]'


def _build_marker(highlight: Highlight, text: str) -> Any:
    """Build a detached ``<mark>`` node wrapping *text*."""
    markup = MARKER_TEMPLATE.format(
        category=html_module.escape(marker_category(highlight.color)),
        highlight_id=html_module.escape(highlight.id),
        text=html_module.escape(text, quote=False),
    )
    return LexborHTMLParser(markup).css_first(MARKER_TAG)


# ---------------------------------------------------------------------------
# Text node splitting
# ---------------------------------------------------------------------------


def _split_fragments(
    info: TextNodeInfo, overlapping: list[ResolvedSpan]
) -> list[_Fragment]:
    """Split a text node's text at the clipped boundaries of *overlapping*."""
    node_text = info.text
    fragments: list[_Fragment] = []
    cursor = 0

    for span in overlapping:
        rel_start = max(0, span.start - info.char_start)
        rel_end = min(len(node_text), span.end - info.char_start)

        if rel_start > cursor:
            fragments.append(node_text[cursor:rel_start])
        fragments.append((node_text[rel_start:rel_end], span.highlight))
        cursor = rel_end

    if cursor < len(node_text):
        fragments.append(node_text[cursor:])

    return fragments


def _replace_text_node(info: TextNodeInfo, fragments: list[_Fragment]) -> None:
    """Insert *fragments* in place of the text node and remove it."""
    for frag in fragments:
        if isinstance(frag, str):
            info.node.insert_before(frag)
        else:
            text, highlight = frag
            info.node.insert_before(_build_marker(highlight, text))
    info.node.decompose()


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def project_spans(html: str, spans: Iterable[ResolvedSpan]) -> str:
    """Wrap each span's text in *html* with a marker element.

    Args:
        html: Article HTML whose plain-text projection the spans index.
        spans: Resolved spans in any order; overlaps are pruned here.

    Returns:
        The body's serialised HTML with markers inserted. If there are no
        spans, returns *html* unchanged.

    Raises:
        DocumentParseError: If *html* cannot be parsed into a body.
    """
    kept = prune_overlaps(spans)
    if not kept or not html:
        return html

    _tree, body = parse_body(html)
    text_nodes = collect_text_nodes(body)

    span_idx = 0
    for info in text_nodes:
        if span_idx >= len(kept):
            break

        # Existing markers and raw-text elements still occupy offsets
        if info.wrappable and info.char_end > info.char_start:
            overlapping: list[ResolvedSpan] = []
            for span in kept[span_idx:]:
                if span.start >= info.char_end:
                    break
                if span.end > info.char_start:
                    overlapping.append(span)

            if overlapping:
                _replace_text_node(info, _split_fragments(info, overlapping))

        # Advance past spans fully consumed by this node
        while span_idx < len(kept) and kept[span_idx].end <= info.char_end:
            span_idx += 1

    return body.inner_html


def strip_highlight_markers(html: str, highlight_id: str | None = None) -> str:
    """Unwrap highlight markers, leaving their text in place.

    Args:
        html: HTML previously produced by ``project_spans``.
        highlight_id: Only unwrap this highlight's markers. ``None``
            unwraps every marker.

    Returns:
        HTML without the selected markers, or *html* unchanged when no
        marker matches.
    """
    if not html:
        return html

    _tree, body = parse_body(html)
    # Ids are compared here rather than in a selector: any string is a
    # valid id but not every escaped form parses as CSS
    markers = [
        marker
        for marker in body.css(MARKER_SELECTOR)
        if highlight_id is None
        or marker.attributes.get(MARKER_ID_ATTR) == highlight_id
    ]
    if not markers:
        return html

    for marker in markers:
        marker.unwrap()

    return body.inner_html
