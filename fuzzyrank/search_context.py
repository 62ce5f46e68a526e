"""Session personalization: recent queries and selection preferences."""

import threading
from collections import Counter, deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from loguru import logger

from config.settings import config

from .models import IndexedDocument

DOCUMENT_BOOST_STEP = 0.1
DOCUMENT_BOOST_CAP = 0.3
CATEGORY_BOOST_STEP = 0.05
CATEGORY_BOOST_CAP = 0.2
HISTORY_BOOST_STEP = 0.02
HISTORY_BOOST_CAP = 0.1


def _contextual_boost(history: Tuple[str, ...],
                      document_counts: Mapping[str, int],
                      category_counts: Mapping[str, int],
                      document: IndexedDocument,
                      query: str) -> float:
    boost = min(DOCUMENT_BOOST_CAP, document_counts.get(document.id, 0) * DOCUMENT_BOOST_STEP)

    if document.category:
        category_uses = category_counts.get(document.category, 0)
        boost += min(CATEGORY_BOOST_CAP, category_uses * CATEGORY_BOOST_STEP)

    lower_query = query.lower()
    related = sum(1 for past in history if lower_query in past or past in lower_query)
    boost += min(HISTORY_BOOST_CAP, related * HISTORY_BOOST_STEP)

    return boost


@dataclass(frozen=True)
class ContextSnapshot:
    """Immutable view of a SearchContext, safe to read while scoring."""
    history: Tuple[str, ...] = ()
    document_counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    category_counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    def boost(self, document: IndexedDocument, query: str) -> float:
        return _contextual_boost(self.history, self.document_counts,
                                 self.category_counts, document, query)

    @property
    def is_empty(self) -> bool:
        return not (self.history or self.document_counts or self.category_counts)


class SearchContext:
    """Tracks recent queries and selected documents to personalize ranking."""

    def __init__(self, history_size: Optional[int] = None):
        self.history_size = history_size or config.CONTEXT_HISTORY_SIZE
        self._history: deque = deque(maxlen=self.history_size)
        self._document_counts: Counter = Counter()
        self._category_counts: Counter = Counter()
        self._lock = threading.RLock()

    def record_selection(self, query: str, document: Optional[IndexedDocument] = None) -> None:
        """Remember a query and, when given, the document picked for it."""
        with self._lock:
            self._history.appendleft(query.lower())
            if document is not None:
                self._document_counts[document.id] += 1
                if document.category:
                    self._category_counts[document.category] += 1
        logger.debug(f"Context recorded selection for '{query}'")

    def boost(self, document: IndexedDocument, query: str) -> float:
        """Personalization boost in [0, 0.6] for a document and query."""
        with self._lock:
            return _contextual_boost(tuple(self._history), self._document_counts,
                                     self._category_counts, document, query)

    def snapshot(self) -> ContextSnapshot:
        with self._lock:
            return ContextSnapshot(
                history=tuple(self._history),
                document_counts=MappingProxyType(dict(self._document_counts)),
                category_counts=MappingProxyType(dict(self._category_counts)),
            )

    def suggestions(self) -> List[str]:
        """Ten most recent queries followed by the five most selected categories."""
        with self._lock:
            recent = list(self._history)[:10]
            categories = sorted(self._category_counts.items(), key=lambda x: (-x[1], x[0]))[:5]
        return recent + [category for category, _ in categories]

    def clear(self) -> None:
        with self._lock:
            self._history.clear()
            self._document_counts.clear()
            self._category_counts.clear()

    @property
    def history(self) -> List[str]:
        with self._lock:
            return list(self._history)
