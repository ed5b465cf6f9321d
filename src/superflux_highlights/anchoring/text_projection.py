"""Plain-text projection of HTML content.

The projection is the concatenation of every text node under ``<body>``
in document order, with entities decoded and nothing inserted or
collapsed, so it agrees with the browser's ``body.textContent``. Captured
prefix/suffix context and resolved span offsets both live in this
coordinate space.
"""

# Pattern: Functional Core (pure functions over a freshly parsed tree)

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from selectolax.lexbor import LexborHTMLParser

from superflux_highlights.anchoring.marker_constants import MARKER_CLASS, MARKER_TAG

logger = logging.getLogger(__name__)

# Raw-text elements: their text counts toward offsets (it is part of
# textContent) but wrapping it in markup would corrupt the element.
_RAW_TEXT_TAGS = frozenset(("script", "style", "textarea", "title", "noscript", "xmp"))

# Template contents live in a separate fragment and are not textContent.
_SKIP_TAGS = frozenset(("template",))


class DocumentParseError(Exception):
    """Raised when HTML cannot be parsed into a document with a body."""


@dataclass
class TextNodeInfo:
    """A text node's contribution to the plain-text projection."""

    node: Any  # selectolax LexborNode with tag "-text"
    text: str
    char_start: int  # Starting char index in the projection
    char_end: int  # Ending char index (exclusive)
    wrappable: bool  # False inside raw-text elements and existing markers


def parse_body(html: str) -> tuple[LexborHTMLParser, Any]:
    """Parse *html* and return the tree together with its ``<body>`` node.

    The tree is returned so callers keep it alive while mutating nodes.

    Raises:
        DocumentParseError: If the parser produced no body element.
    """
    tree = LexborHTMLParser(html)
    body = tree.body
    if body is None:
        msg = f"Could not build a document body from HTML ({len(html)} chars)"
        raise DocumentParseError(msg)
    return tree, body


def _is_marker(node: Any) -> bool:
    if node.tag != MARKER_TAG:
        return False
    classes = (node.attributes.get("class") or "").split()
    return MARKER_CLASS in classes


def collect_text_nodes(root: Any) -> list[TextNodeInfo]:
    """Snapshot every text node under *root* in document order.

    The full list is built before anything is mutated, so callers can
    replace nodes without invalidating the traversal.
    """
    text_nodes: list[TextNodeInfo] = []
    position = 0

    def _walk(node: Any, wrappable: bool) -> None:
        nonlocal position
        tag = node.tag

        # Text node: selectolax uses "-text" as the tag
        if tag == "-text":
            text = node.text_content or ""
            start = position
            position += len(text)
            text_nodes.append(
                TextNodeInfo(
                    node=node,
                    text=text,
                    char_start=start,
                    char_end=position,
                    wrappable=wrappable,
                )
            )
            return

        if tag in _SKIP_TAGS:
            return

        child_wrappable = (
            wrappable and tag not in _RAW_TEXT_TAGS and not _is_marker(node)
        )

        child = node.child
        while child is not None:
            _walk(child, child_wrappable)
            child = child.next

    # Start from root's children (skip the root element itself)
    child = root.child
    while child is not None:
        _walk(child, True)
        child = child.next

    return text_nodes


def extract_plain_text(html: str) -> str:
    """Return the plain-text projection of *html*.

    Args:
        html: HTML fragment or document.

    Returns:
        Concatenated text of all body text nodes; empty for empty input.
    """
    if not html:
        return ""

    _tree, body = parse_body(html)
    return "".join(info.text for info in collect_text_nodes(body))
