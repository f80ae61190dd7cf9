from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from app.modules.notebook.schema.chat import ChatAnswer, ChatQuery, KnowledgeEntry
from app.modules.notebook.services.knowledge import FALLBACK_ANSWER, KNOWLEDGE_TABLE

logger = logging.getLogger(__name__)


class ResponseResolver:
    """
    Maps a chat query to a canned answer by keyword substring matching.

    The first entry (table order) with a keyword contained in the lowercased
    query wins; within an entry keywords are tried in order. Nothing is
    ranked. A query that matches nothing gets the fallback answer.
    """

    def __init__(
        self,
        entries: Iterable[KnowledgeEntry] = KNOWLEDGE_TABLE,
        fallback: ChatAnswer = FALLBACK_ANSWER,
    ):
        self._entries: Tuple[KnowledgeEntry, ...] = tuple(entries)
        self._fallback = fallback

    @property
    def entries(self) -> Tuple[KnowledgeEntry, ...]:
        return self._entries

    @property
    def fallback(self) -> ChatAnswer:
        return self._fallback.model_copy(deep=True)

    def match(self, text: str) -> Optional[Tuple[KnowledgeEntry, str]]:
        """Return the winning entry and the keyword that selected it, if any."""
        lowered = text.lower()
        for entry in self._entries:
            for keyword in entry.keywords:
                if keyword in lowered:
                    return entry, keyword
        return None

    def resolve(self, query: ChatQuery) -> ChatAnswer:
        hit = self.match(query.text)
        if hit is None:
            logger.debug("No keyword match, returning fallback answer")
            return self.fallback

        entry, keyword = hit
        logger.debug(f"Matched keyword {keyword!r}")
        return ChatAnswer(response=entry.response, sources=list(entry.sources))
