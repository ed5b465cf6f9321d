"""Data models for text highlights and reader selections.

These are plain dataclasses for in-memory use. Durable storage of
highlight records belongs to the host application's store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class HighlightColor(StrEnum):
    """The visual categories offered by the reader's colour picker."""

    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PINK = "pink"
    ORANGE = "orange"


# Picker order. The anchoring code treats colours as opaque tags and
# accepts any string.
HIGHLIGHT_COLORS: tuple[HighlightColor, ...] = tuple(HighlightColor)


@dataclass(frozen=True)
class HighlightDraft:
    """A captured selection that has not been given an identifier yet.

    Attributes:
        text: The selected quote.
        prefix: Context immediately before the quote.
        suffix: Context immediately after the quote.
        color: Visual category chosen by the reader.
    """

    text: str
    prefix: str
    suffix: str
    color: str


@dataclass(frozen=True)
class Highlight:
    """A stored highlight record.

    Attributes:
        id: Stable unique identifier, never reused.
        text: The exact quoted substring to mark.
        prefix: Context captured before ``text`` at creation time.
        suffix: Context captured after ``text`` at creation time.
        color: Visual category, rendered as a CSS class on markers.
        note: Free-text annotation owned by the host application.
        created_at: Creation timestamp, if the store records one.
    """

    id: str
    text: str
    prefix: str = ""
    suffix: str = ""
    color: str = HighlightColor.YELLOW
    note: str = ""
    created_at: datetime | None = None


@dataclass(frozen=True)
class ResolvedSpan:
    """A highlight located at ``[start, end)`` in a document's plain text.

    Recomputed on every render and never persisted.
    """

    start: int
    end: int
    highlight: Highlight

    def __post_init__(self) -> None:
        if self.start < 0 or self.end <= self.start:
            msg = f"Invalid span [{self.start}, {self.end}) for {self.highlight.id!r}"
            raise ValueError(msg)


@dataclass(frozen=True)
class SelectionPoint:
    """One boundary of a selection, relative to the container's text nodes.

    Attributes:
        node_index: Index of the text node in document order.
        offset: Character offset inside that text node.
    """

    node_index: int
    offset: int


@dataclass(frozen=True)
class SelectionRange:
    """A reader selection as reported by the rendering surface.

    Platform adapters convert the native selection API into this shape.

    Attributes:
        start: Where the selection begins.
        end: Where the selection ends.
        within_container: False when the selection started outside the
            article container.
    """

    start: SelectionPoint
    end: SelectionPoint
    within_container: bool = True
