"""
fuzzyrank - multi-strategy fuzzy search and relevance ranking.

Modules:
- string_metrics: edit distance, similarity, n-grams, phonetic codes
- lexicon: abbreviation, synonym and jargon tables plus scoring weights
- relevance_scorer: layered (query, document) scoring
- typo_suggester: corrections drawn from the indexed vocabulary
- result_cache: bounded query -> results cache
- search_context: personalization from recorded selections
- search_analytics: popular, failed and trending queries
- search_monitor: per-search performance metrics and Prometheus export
- ingestion: algorithm records -> IndexedDocument
- search_engine: the query orchestrator
"""

from loguru import logger

from config.lexicon_loader import LexiconError

from .ingestion import AlgorithmRecord, ingest
from .lexicon import LexiconTables, ScoringWeights
from .models import (
    DocumentValidationError,
    FuzzyRankError,
    IndexedDocument,
    MatchKind,
    ScoreBreakdown,
    SearchOptions,
    SearchResult,
)
from .relevance_scorer import RelevanceScorer, classify_score
from .result_cache import CacheStats, ResultCache
from .search_analytics import AnalyticsInsights, QueryCount, SearchAnalytics, SessionTrace
from .search_context import ContextSnapshot, SearchContext
from .search_engine import SearchEngine, describe_result, highlight_matches, select_strategies
from .search_monitor import PerformanceReport, SearchMetric, SearchMonitor, SuccessMetrics
from .string_metrics import (
    PhoneticCodes,
    double_metaphone,
    edit_distance,
    is_fuzzy_match,
    ngram_similarity,
    phonetic_code,
    similarity,
    soundex,
)
from .typo_suggester import TypoSuggester

__version__ = "0.1.0"

# Library code stays silent until the application calls config.setup_logging()
logger.disable("fuzzyrank")
logger.disable("config")

__all__ = [
    "AlgorithmRecord",
    "AnalyticsInsights",
    "CacheStats",
    "ContextSnapshot",
    "DocumentValidationError",
    "FuzzyRankError",
    "IndexedDocument",
    "LexiconError",
    "LexiconTables",
    "MatchKind",
    "PerformanceReport",
    "PhoneticCodes",
    "QueryCount",
    "RelevanceScorer",
    "ResultCache",
    "ScoreBreakdown",
    "ScoringWeights",
    "SearchAnalytics",
    "SearchContext",
    "SearchEngine",
    "SearchMetric",
    "SearchMonitor",
    "SearchOptions",
    "SearchResult",
    "SessionTrace",
    "SuccessMetrics",
    "TypoSuggester",
    "classify_score",
    "describe_result",
    "double_metaphone",
    "edit_distance",
    "highlight_matches",
    "ingest",
    "is_fuzzy_match",
    "ngram_similarity",
    "phonetic_code",
    "select_strategies",
    "similarity",
    "soundex",
]
