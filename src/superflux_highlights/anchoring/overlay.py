"""Per-document entry points: render highlights and capture selections.

``apply_highlights`` re-derives every marker from scratch on each render;
nothing is cached between calls. ``capture_selection`` turns a reader's
selection into a draft carrying enough context to be relocated later.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from superflux_highlights.anchoring.locator import resolve_spans
from superflux_highlights.anchoring.projector import project_spans
from superflux_highlights.anchoring.text_projection import (
    collect_text_nodes,
    extract_plain_text,
    parse_body,
)
from superflux_highlights.config import get_settings
from superflux_highlights.models import HighlightDraft

if TYPE_CHECKING:
    from collections.abc import Sequence

    from superflux_highlights.models import (
        Highlight,
        SelectionPoint,
        SelectionRange,
    )
    from superflux_highlights.store import HighlightStoreProtocol

logger = logging.getLogger(__name__)


def apply_highlights(html: str, highlights: Sequence[Highlight]) -> str:
    """Render *highlights* onto *html* as marker elements.

    Args:
        html: Article or document HTML.
        highlights: Stored highlights in priority order; when two overlap,
            the one starting first wins and input order breaks ties.

    Returns:
        Annotated HTML. Returns *html* unchanged when there is nothing to
        mark, including when no highlight can be relocated.

    Raises:
        DocumentParseError: If *html* cannot be parsed into a body.
    """
    if not highlights or not html:
        return html

    full_text = extract_plain_text(html)
    spans = resolve_spans(full_text, highlights)

    logger.debug(
        "Located %d of %d highlights in %d chars of text",
        len(spans),
        len(highlights),
        len(full_text),
    )

    if not spans:
        return html

    return project_spans(html, spans)


def _absolute_offset(node_texts: list[str], point: SelectionPoint) -> int | None:
    """Map a (text node, offset) point to an offset in the projection."""
    if not 0 <= point.node_index < len(node_texts):
        return None
    if not 0 <= point.offset <= len(node_texts[point.node_index]):
        return None
    preceding = sum(len(text) for text in node_texts[: point.node_index])
    return preceding + point.offset


def capture_selection(
    html: str,
    selection: SelectionRange,
    color: str,
    *,
    context_window: int | None = None,
) -> HighlightDraft | None:
    """Build a highlight draft from a selection in rendered content.

    Args:
        html: The content container's current HTML (markers included).
        selection: Selection boundaries relative to the container's text
            nodes.
        color: Colour picked by the reader.
        context_window: Maximum prefix/suffix length. Defaults to
            ``Settings.anchor.context_window``.

    Returns:
        The draft, or ``None`` for selections that cannot become a
        highlight (outside the container, collapsed, out of range, or
        whitespace only).
    """
    if not selection.within_container:
        logger.debug("Ignoring selection outside the content container")
        return None
    if not html:
        return None

    _tree, body = parse_body(html)
    node_texts = [info.text for info in collect_text_nodes(body)]

    start = _absolute_offset(node_texts, selection.start)
    end = _absolute_offset(node_texts, selection.end)
    if start is None or end is None:
        logger.debug("Ignoring selection with out-of-range boundary: %r", selection)
        return None
    if end <= start:
        return None

    full_text = "".join(node_texts)
    raw = full_text[start:end]
    text = raw.strip()
    if not text:
        return None

    # Keep the context adjacent to the trimmed quote
    start += len(raw) - len(raw.lstrip())
    end = start + len(text)

    window = context_window
    if window is None:
        window = get_settings().anchor.context_window

    return HighlightDraft(
        text=text,
        prefix=full_text[max(0, start - window) : start],
        suffix=full_text[end : end + window],
        color=color,
    )


def record_selection(
    store: HighlightStoreProtocol,
    document_id: str,
    html: str,
    selection: SelectionRange,
    color: str,
) -> Highlight | None:
    """Capture a selection and emit it to *store* as a new highlight."""
    draft = capture_selection(html, selection, color)
    if draft is None:
        return None
    return store.add_highlight(document_id, draft)
