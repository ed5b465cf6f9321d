"""Highlight store interface and an in-memory implementation.

Durable storage (local cache, cloud tables) lives in the host
application. The anchoring code only needs somewhere to emit new drafts
and a way to read a document's highlights back in priority order.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol
from uuid import uuid4

from superflux_highlights.models import Highlight

if TYPE_CHECKING:
    from superflux_highlights.models import HighlightDraft

logger = logging.getLogger(__name__)


class HighlightStoreProtocol(Protocol):
    """Protocol for highlight stores keyed by document identifier."""

    def get_highlights(self, document_id: str) -> list[Highlight]:
        """Return the document's highlights, oldest first."""
        ...

    def add_highlight(self, document_id: str, draft: HighlightDraft) -> Highlight:
        """Persist a draft, assigning it a new identifier.

        Args:
            document_id: The article or note the highlight belongs to.
            draft: Captured quote, context, and colour.

        Returns:
            The stored Highlight.
        """
        ...

    def remove_highlight(self, document_id: str, highlight_id: str) -> bool:
        """Delete a highlight. Returns False if it did not exist."""
        ...

    def update_note(
        self, document_id: str, highlight_id: str, note: str
    ) -> Highlight | None:
        """Replace a highlight's note. Returns None if it did not exist."""
        ...


class InMemoryHighlightStore:
    """Process-local implementation of HighlightStoreProtocol.

    Highlights are kept in insertion order, which is also the overlap
    priority order when passed straight to ``apply_highlights``. A
    document's entry is dropped once its last highlight is removed.
    """

    def __init__(self) -> None:
        self._data: dict[str, list[Highlight]] = {}

    def __len__(self) -> int:
        return sum(len(items) for items in self._data.values())

    def document_ids(self) -> list[str]:
        """Documents that currently have at least one highlight."""
        return list(self._data)

    def get_highlights(self, document_id: str) -> list[Highlight]:
        return list(self._data.get(document_id, []))

    def add_highlight(self, document_id: str, draft: HighlightDraft) -> Highlight:
        highlight = Highlight(
            id=str(uuid4()),
            text=draft.text,
            prefix=draft.prefix,
            suffix=draft.suffix,
            color=draft.color,
            created_at=datetime.now(UTC),
        )
        self._data.setdefault(document_id, []).append(highlight)
        logger.debug("Added highlight %s to %s", highlight.id, document_id)
        return highlight

    def remove_highlight(self, document_id: str, highlight_id: str) -> bool:
        items = self._data.get(document_id)
        if not items:
            return False

        remaining = [h for h in items if h.id != highlight_id]
        if len(remaining) == len(items):
            return False

        if remaining:
            self._data[document_id] = remaining
        else:
            del self._data[document_id]
        logger.debug("Removed highlight %s from %s", highlight_id, document_id)
        return True

    def update_note(
        self, document_id: str, highlight_id: str, note: str
    ) -> Highlight | None:
        items = self._data.get(document_id, [])
        for i, existing in enumerate(items):
            if existing.id == highlight_id:
                updated = dataclasses.replace(existing, note=note)
                items[i] = updated
                return updated
        return None
