"""
Data model shared by every fuzzyrank component.

Documents, results and options are frozen dataclasses so they can be shared
between the cache, the analytics trail and callers without defensive copies.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple

from loguru import logger


class FuzzyRankError(Exception):
    """Base class for fuzzyrank errors."""
    pass


class DocumentValidationError(FuzzyRankError):
    """Raised when a domain record cannot be turned into an IndexedDocument."""
    pass


class MatchKind(Enum):
    """How a result matched the query."""
    EXACT = "exact"
    PARTIAL = "partial"
    FUZZY = "fuzzy"
    SUGGESTED = "suggested"
    SEMANTIC = "semantic"
    PHONETIC = "phonetic"
    CONTEXTUAL = "contextual"

    @property
    def priority(self) -> int:
        """Tie-break rank used when two results score the same (lower wins)."""
        return _KIND_PRIORITY[self]


_KIND_PRIORITY = {
    MatchKind.EXACT: 0,
    MatchKind.PARTIAL: 1,
    MatchKind.FUZZY: 2,
    MatchKind.SEMANTIC: 3,
    MatchKind.SUGGESTED: 4,
    MatchKind.PHONETIC: 5,
    MatchKind.CONTEXTUAL: 6,
}


@dataclass(frozen=True)
class IndexedDocument:
    """Search-ready representation of a domain record."""
    id: str
    title: str
    category: Optional[str] = None
    tags: Tuple[str, ...] = ()
    summary: Optional[str] = None
    searchable_text: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags or ()))


@dataclass(frozen=True)
class SearchResult:
    """A ranked match for a query."""
    document: IndexedDocument
    score: float
    kind: MatchKind
    highlighted_title: Optional[str] = None
    matched_fields: FrozenSet[str] = frozenset()
    explanation: Optional[str] = None

    def sort_key(self) -> Tuple[float, int, str, str]:
        """Deterministic ordering: score desc, then kind priority, title and id for equal scores."""
        return (
            -self.score,
            self.kind.priority,
            self.document.title.lower(),
            self.document.id,
        )

    def to_dict(self) -> dict:
        """Convert to a plain dictionary."""
        return {
            "id": self.document.id,
            "title": self.document.title,
            "score": self.score,
            "kind": self.kind.value,
            "highlighted_title": self.highlighted_title,
            "matched_fields": sorted(self.matched_fields),
            "explanation": self.explanation,
        }


def sort_results(results: Iterable[SearchResult]) -> list:
    """Sort results into their canonical ranking order."""
    return sorted(results, key=SearchResult.sort_key)


@dataclass(frozen=True)
class SearchOptions:
    """Options recognised by a query call."""
    fuzzy_threshold: float = 0.6
    max_results: int = 10
    min_score: float = 0.1
    highlight_matches: bool = True
    suggest_typos: bool = True
    max_suggestion_distance: int = 2
    enable_semantic_search: bool = True
    enable_phonetic_search: bool = True
    enable_contextual_search: bool = True
    enable_abbreviation_search: bool = True
    enable_synonym_search: bool = True

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]] = None) -> "SearchOptions":
        """Build options from a partial mapping; omitted keys take defaults."""
        if not values:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning(f"Ignoring unknown search options: {unknown}")
        return cls(**{k: v for k, v in values.items() if k in known})

    def with_changes(self, **changes) -> "SearchOptions":
        return replace(self, **changes)

    def normalized(self) -> "SearchOptions":
        """Clamp out-of-range values instead of rejecting them."""
        return replace(
            self,
            fuzzy_threshold=min(1.0, max(0.0, float(self.fuzzy_threshold))),
            max_results=max(1, int(self.max_results)),
            min_score=min(1.0, max(0.0, float(self.min_score))),
            max_suggestion_distance=max(0, int(self.max_suggestion_distance)),
        )


@dataclass(frozen=True)
class ScoreBreakdown:
    """A relevance score together with the strategies that produced it."""
    score: float
    signals: Tuple[Tuple[str, float], ...] = field(default_factory=tuple)

    @property
    def strategies(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.signals)
