"""
Search engine orchestrating scoring, caching, typo fallback and analytics.

A query call moves through these phases:

    CacheLookup -> CacheHit -> Return
                -> CacheMiss -> ScorePhase -> SortPhase
                   -> [ZeroResults -> SuggestPhase] -> SideEffectsPhase -> Return

The engine owns its cache, analytics, context and monitor; documents belong
to the caller and are never modified.
"""

import math
import re
import threading
import time
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from loguru import logger

from config.settings import config

from .ingestion import AlgorithmRecord, ingest
from .lexicon import LexiconTables, ScoringWeights
from .models import (
    IndexedDocument,
    MatchKind,
    ScoreBreakdown,
    SearchOptions,
    SearchResult,
    sort_results,
)
from .relevance_scorer import RelevanceScorer, classify_score, explain_signals
from .result_cache import CacheStats, ResultCache
from .search_analytics import AnalyticsInsights, SearchAnalytics
from .search_context import ContextSnapshot, SearchContext
from .search_monitor import PerformanceReport, SearchMonitor, SuccessMetrics
from .typo_suggester import TypoSuggester

OptionsLike = Union[SearchOptions, Mapping[str, Any], None]

SHORT_QUERY_LENGTH = 2
EARLY_EXIT_FACTOR = 1.5
HIGH_QUALITY_SCORE = 0.7
CATEGORY_FAST_PATH_SCORE = 0.7

BROAD_OPTIONS = {
    "enable_semantic_search": True,
    "enable_phonetic_search": True,
    "enable_contextual_search": True,
    "enable_abbreviation_search": True,
    "enable_synonym_search": True,
    "max_results": 15,
    "min_score": 0.05,
}

_DIGIT_RE = re.compile(r"\d")
_PUNCTUATION_RE = re.compile(r"[^a-zA-Z0-9\s]")

_KIND_DESCRIPTIONS = {
    MatchKind.EXACT: "Exact match found in title or content",
    MatchKind.PARTIAL: "Partial match found",
    MatchKind.FUZZY: "Similar match found using fuzzy matching",
    MatchKind.SEMANTIC: "Found through advanced semantic analysis",
    MatchKind.SUGGESTED: "Found by correcting a likely typo",
    MatchKind.PHONETIC: "Found through phonetic matching (sounds similar)",
    MatchKind.CONTEXTUAL: "Suggested based on your search history and preferences",
}


def select_strategies(text: str, options: SearchOptions) -> SearchOptions:
    """Adapt options to the shape of the query; the first matching rule wins."""
    query = text.strip()
    if len(query) <= 3:
        return replace(options, fuzzy_threshold=0.9,
                       enable_semantic_search=False, enable_phonetic_search=False)
    if len(query) <= 5 and query.isupper():
        return replace(options, enable_abbreviation_search=True, enable_phonetic_search=False)
    if _DIGIT_RE.search(query) or _PUNCTUATION_RE.search(query):
        return replace(options, enable_semantic_search=True,
                       enable_abbreviation_search=True, enable_synonym_search=False)
    return replace(options, enable_semantic_search=True,
                   enable_synonym_search=True, enable_phonetic_search=True)


def highlight_matches(text: str, query: str) -> str:
    """Wrap case-insensitive occurrences of the query in <mark> tags."""
    query = query.strip()
    if not query:
        return text
    return re.sub(f"({re.escape(query)})", r"<mark>\1</mark>", text, flags=re.IGNORECASE)


def describe_result(result: SearchResult) -> str:
    """Explanation attached to a result, or a generic one for its kind."""
    if result.explanation:
        return result.explanation
    return _KIND_DESCRIPTIONS.get(result.kind, "Match found")


def _matched_fields(lower_query: str, document: IndexedDocument) -> frozenset:
    fields = []
    if lower_query in document.title.lower():
        fields.append("title")
    if document.category and lower_query in document.category.lower():
        fields.append("category")
    if document.summary and lower_query in document.summary.lower():
        fields.append("summary")
    if any(lower_query in tag.lower() for tag in document.tags):
        fields.append("tags")
    if document.searchable_text and lower_query in document.searchable_text.lower():
        fields.append("searchable_text")
    return frozenset(fields)


class SearchEngine:
    """
    Multi-strategy fuzzy search engine.

    Every engine owns independent cache, analytics, context and monitor state,
    so several engines can live in one process.
    """

    def __init__(self,
                 lexicon: Optional[LexiconTables] = None,
                 weights: Optional[ScoringWeights] = None,
                 cache: Optional[ResultCache] = None,
                 analytics: Optional[SearchAnalytics] = None,
                 context: Optional[SearchContext] = None,
                 monitor: Optional[SearchMonitor] = None,
                 batch_size: Optional[int] = None,
                 smart_mode: bool = True):
        self.lexicon = lexicon or LexiconTables.default()
        self.scorer = RelevanceScorer(self.lexicon, weights)
        self.weights = self.scorer.weights
        self.suggester = TypoSuggester()
        self.cache = cache or ResultCache()
        self.analytics = analytics or SearchAnalytics()
        self.context = context or SearchContext()
        self.monitor = monitor or SearchMonitor()
        self.batch_size = batch_size or config.SCORING_BATCH_SIZE
        self.smart_mode = smart_mode

        self._signature: Optional[int] = None
        self._lock = threading.RLock()

        logger.debug(f"SearchEngine initialized with {self.lexicon!r}, batch size {self.batch_size}")

    # Public API

    def query(self,
              text: str,
              documents: Iterable[IndexedDocument],
              options: OptionsLike = None) -> List[SearchResult]:
        """
        Rank documents against a free-text query.

        Args:
            text: The query as typed
            documents: Candidate documents
            options: SearchOptions or a partial mapping of option values

        Returns:
            Results sorted by score, best first; empty for a blank query
        """
        if not text or not text.strip():
            return []

        started = time.perf_counter()
        docs = tuple(documents)
        options = self._coerce_options(options)
        self._invalidate_if_changed(docs, options)

        cached = self.cache.get(text)
        if cached is not None:
            self._record_search(text, cached, started, cache_hit=True)
            return cached

        effective = select_strategies(text, options) if self.smart_mode else options
        results = self._search(text, docs, effective.normalized())

        self.cache.put(text, results)
        self._record_search(text, results, started, cache_hit=False)
        return results

    def broad_query(self,
                    text: str,
                    documents: Iterable[IndexedDocument],
                    options: OptionsLike = None) -> List[SearchResult]:
        """Query with every strategy on and a lower score floor; bypasses the cache."""
        if not text or not text.strip():
            return []

        started = time.perf_counter()
        if isinstance(options, SearchOptions):
            effective = options
        else:
            effective = SearchOptions.from_mapping({**BROAD_OPTIONS, **dict(options or {})})

        results = self._search(text, tuple(documents), effective.normalized())
        self._record_search(text, results, started, cache_hit=False)
        return results

    def record_selection(self, text: str, document: IndexedDocument) -> None:
        """Notify the engine that a result was picked for a query."""
        self.context.record_selection(text, document)
        self.analytics.record_selection(text, document)
        self.monitor.record_selection(text, document)
        # Personalization changed, cached rankings are stale
        self.cache.clear()

    def suggestions(self, partial: str = "") -> List[str]:
        """Popular, trending and category-based suggestions for autocomplete."""
        return self.analytics.suggestions(partial, self.lexicon.suggestion_seeds)

    def did_you_mean(self,
                     text: str,
                     documents: Sequence[IndexedDocument],
                     threshold: float = 0.6) -> List[str]:
        return self.suggester.did_you_mean(text, documents, threshold)

    def smart_suggestions(self, current: str = "") -> List[str]:
        return self.monitor.smart_suggestions(current)

    def context_suggestions(self) -> List[str]:
        return self.context.suggestions()

    def analytics_snapshot(self) -> AnalyticsInsights:
        return self.analytics.insights()

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()

    def new_session(self) -> str:
        return self.analytics.new_session()

    def performance_report(self, hours_back: float = 24) -> PerformanceReport:
        return self.monitor.performance_report(hours_back)

    def success_metrics(self) -> SuccessMetrics:
        return self.monitor.success_metrics()

    def metrics_text(self) -> str:
        return self.monitor.metrics_text()

    def ingest(self, records: Iterable[Union[AlgorithmRecord, Mapping[str, Any]]]) -> List[IndexedDocument]:
        return ingest(records)

    # Internals

    @staticmethod
    def _coerce_options(options: OptionsLike) -> SearchOptions:
        if isinstance(options, SearchOptions):
            return options
        return SearchOptions.from_mapping(options)

    def _invalidate_if_changed(self, documents: Tuple[IndexedDocument, ...], options: SearchOptions) -> None:
        signature = hash((documents, options))
        with self._lock:
            if self._signature is not None and signature != self._signature:
                logger.debug("Document collection or options changed, clearing result cache")
                self.cache.clear()
            self._signature = signature

    def _record_search(self, text: str, results: List[SearchResult], started: float, cache_hit: bool) -> None:
        elapsed_ms = (time.perf_counter() - started) * 1000
        self.analytics.record_query(text, len(results))
        self.monitor.record_search(text, results, elapsed_ms, cache_hit=cache_hit)

    def _search(self,
                text: str,
                documents: Tuple[IndexedDocument, ...],
                options: SearchOptions) -> List[SearchResult]:
        snapshot = self.context.snapshot() if options.enable_contextual_search else None
        results = self._primary_search(text, documents, options, snapshot)

        if not results and options.suggest_typos and len(text.strip()) > SHORT_QUERY_LENGTH:
            results = self._typo_fallback(text, documents, options, snapshot)
        return results

    def _primary_search(self,
                        text: str,
                        documents: Tuple[IndexedDocument, ...],
                        options: SearchOptions,
                        snapshot: Optional[ContextSnapshot]) -> List[SearchResult]:
        query = text.strip()
        if len(query) <= SHORT_QUERY_LENGTH:
            return self._short_query_search(query, documents, options)

        results: List[SearchResult] = []
        for start in range(0, len(documents), self.batch_size):
            batch = documents[start:start + self.batch_size]
            results.extend(self._score_batch(query, batch, options, snapshot))

            if len(results) > options.max_results * EARLY_EXIT_FACTOR:
                high_quality = sum(1 for r in results if r.score >= HIGH_QUALITY_SCORE)
                if high_quality >= options.max_results:
                    logger.debug(
                        f"Early exit for '{query}' after {start + len(batch)} of {len(documents)} documents"
                    )
                    break

        return sort_results(results)[:options.max_results]

    def _score_batch(self,
                     query: str,
                     batch: Sequence[IndexedDocument],
                     options: SearchOptions,
                     snapshot: Optional[ContextSnapshot]) -> List[SearchResult]:
        results = []
        for document in batch:
            breakdown = self.scorer.evaluate(query, document, options, snapshot)
            if breakdown.score >= options.min_score:
                results.append(self._build_result(query, document, breakdown, options))
        return results

    def _build_result(self,
                      query: str,
                      document: IndexedDocument,
                      breakdown: ScoreBreakdown,
                      options: SearchOptions,
                      kind: Optional[MatchKind] = None) -> SearchResult:
        return SearchResult(
            document=document,
            score=breakdown.score,
            kind=kind or classify_score(breakdown.score, self.weights),
            highlighted_title=highlight_matches(document.title, query) if options.highlight_matches else None,
            matched_fields=_matched_fields(query.lower(), document),
            explanation=explain_signals(breakdown.signals),
        )

    def _short_query_search(self,
                            query: str,
                            documents: Tuple[IndexedDocument, ...],
                            options: SearchOptions) -> List[SearchResult]:
        """Title equality, title prefix and category substring only."""
        lower = query.lower()
        results = []
        for document in documents:
            title = document.title.lower()
            if title == lower:
                breakdown = ScoreBreakdown(self.weights.exact_title, (("exact", self.weights.exact_title),))
                kind = MatchKind.EXACT
            elif title.startswith(lower):
                breakdown = ScoreBreakdown(self.weights.prefix_title, (("prefix", self.weights.prefix_title),))
                kind = MatchKind.EXACT
            elif document.category and lower in document.category.lower():
                breakdown = ScoreBreakdown(CATEGORY_FAST_PATH_SCORE, (("category", CATEGORY_FAST_PATH_SCORE),))
                kind = MatchKind.PARTIAL
            else:
                continue

            results.append(self._build_result(query, document, breakdown, options, kind))
            if len(results) >= options.max_results:
                break

        return sort_results(results)

    def _typo_fallback(self,
                       text: str,
                       documents: Tuple[IndexedDocument, ...],
                       options: SearchOptions,
                       snapshot: Optional[ContextSnapshot]) -> List[SearchResult]:
        """Re-run the primary search once per typo correction, without further fallback."""
        suggestions = self.suggester.suggest(text, documents, options.max_suggestion_distance)
        if not suggestions:
            return []

        logger.debug(f"No results for '{text.strip()}', trying corrections {suggestions}")
        sub_options = replace(options, suggest_typos=False,
                              max_results=math.ceil(options.max_results / 2))

        best: Dict[str, SearchResult] = {}
        for suggestion in suggestions:
            for result in self._primary_search(suggestion, documents, sub_options, snapshot):
                discounted = replace(
                    result,
                    score=result.score * self.weights.typo_discount,
                    kind=MatchKind.SUGGESTED,
                    explanation=f"Showing results for '{suggestion}'",
                )
                current = best.get(discounted.document.id)
                if current is None or discounted.score > current.score:
                    best[discounted.document.id] = discounted

        return sort_results(best.values())[:options.max_results]
