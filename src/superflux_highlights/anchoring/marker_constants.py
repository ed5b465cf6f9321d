"""Marker element format for rendered highlights.

The reader UI locates markers by ``data-highlight-id`` (scroll-into-view,
pulse, removal) and styles them by ``highlight-{category}``, so these
names must stay stable.

Shared between:
- anchoring/text_projection.py (skipping already-marked text)
- anchoring/projector.py (marker construction, lookup and removal)
"""

from __future__ import annotations

import re

MARKER_TAG = "mark"
MARKER_CLASS = "highlight"
MARKER_ID_ATTR = "data-highlight-id"

# Format: <mark class="highlight highlight-{category}" data-highlight-id="{id}">
MARKER_TEMPLATE = (
    '<mark class="highlight highlight-{category}" data-highlight-id="{highlight_id}">'
    "{text}</mark>"
)
MARKER_SELECTOR = f"{MARKER_TAG}.{MARKER_CLASS}"

# Characters that cannot appear in a CSS class token unescaped
CATEGORY_UNSAFE_PATTERN = re.compile(r"[^A-Za-z0-9_-]+")
