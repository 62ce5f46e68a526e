"""Typo correction candidates drawn from the indexed vocabulary."""

from typing import Dict, Iterable, List, Sequence

from loguru import logger

from .models import IndexedDocument
from .string_metrics import edit_distance, similarity, tokenize

MAX_SUGGESTIONS = 3


class TypoSuggester:
    """Proposes corrections for a query that matched nothing."""

    def __init__(self, max_suggestions: int = MAX_SUGGESTIONS):
        self.max_suggestions = max_suggestions

    def vocabulary(self, documents: Iterable[IndexedDocument]) -> List[str]:
        """Unique lowercase tokens of titles, tags, categories and searchable text."""
        seen: Dict[str, None] = {}
        for document in documents:
            sources = [document.title, *document.tags, document.category or "", document.searchable_text or ""]
            for text in sources:
                for token in tokenize(text):
                    seen.setdefault(token, None)
        return list(seen)

    def suggest(self,
                query: str,
                documents: Sequence[IndexedDocument],
                max_distance: int = 2) -> List[str]:
        """
        Correction candidates for a query, best first.

        Args:
            query: The query that produced no results
            documents: Documents whose vocabulary is searched
            max_distance: Largest edit distance accepted

        Returns:
            Up to three distinct tokens ordered by score, then vocabulary order
        """
        q = query.strip().lower()
        if not q or max_distance <= 0:
            return []

        candidates = []
        for position, token in enumerate(self.vocabulary(documents)):
            if abs(len(token) - len(q)) > max_distance or len(token) < len(q) - 1:
                continue
            distance = edit_distance(q, token)
            if 0 < distance <= max_distance:
                score = 1 - distance / max(len(q), len(token))
                candidates.append((-score, position, token))

        candidates.sort()
        suggestions = [token for _, _, token in candidates[:self.max_suggestions]]
        if suggestions:
            logger.debug(f"Typo suggestions for '{q}': {suggestions}")
        return suggestions

    def did_you_mean(self,
                     query: str,
                     documents: Sequence[IndexedDocument],
                     threshold: float = 0.6) -> List[str]:
        """Suggestions close enough to the query to offer as a correction."""
        q = query.strip().lower()
        if not q:
            return []
        return [
            suggestion for suggestion in self.suggest(q, documents, 2)
            if suggestion != q and similarity(q, suggestion) >= threshold
        ][:self.max_suggestions]
