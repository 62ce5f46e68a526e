"""Shared fixtures for the fuzzyrank test suite."""

from datetime import datetime, timedelta

import pytest

from fuzzyrank import (
    IndexedDocument,
    LexiconTables,
    MatchKind,
    RelevanceScorer,
    ResultCache,
    SearchAnalytics,
    SearchContext,
    SearchEngine,
    SearchMonitor,
    SearchResult,
)


class FakeClock:
    """Controllable replacement for datetime.now."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(scope="session")
def lexicon():
    return LexiconTables.default()


@pytest.fixture
def scorer(lexicon):
    return RelevanceScorer(lexicon)


@pytest.fixture
def binary_search():
    return IndexedDocument(id="searching-binary-search", title="Binary Search")


@pytest.fixture
def documents():
    return [
        IndexedDocument(
            id="searching-binary-search",
            title="Binary Search",
            category="searching",
            tags=("fast", "logarithmic", "stable"),
            summary="Find an item in a sorted array by halving the search interval.",
            searchable_text="Divide and conquer search on sorted data O(log n)",
        ),
        IndexedDocument(
            id="searching-linear-search",
            title="Linear Search",
            category="searching",
            tags=("simple", "unstable"),
            summary="Check every element in order until the target is found.",
            searchable_text="Sequential scan O(n)",
        ),
        IndexedDocument(
            id="sorting-merge-sort",
            title="Merge Sort",
            category="sorting",
            tags=("stable", "predictable", "not-in-place"),
            summary="Stable divide and conquer sort that merges sorted halves.",
            searchable_text="Extra memory O(n log n)",
        ),
        IndexedDocument(
            id="sorting-quick-sort",
            title="Quick Sort",
            category="sorting",
            tags=("fast", "unstable", "in-place"),
            summary="Partition around a pivot and recursively sort the parts.",
            searchable_text="Average O(n log n) worst O(n^2)",
        ),
        IndexedDocument(
            id="trees-binary-search-tree",
            title="Binary Search Tree",
            category="trees",
            tags=("ordered",),
            summary="Node based tree keeping smaller keys on the left.",
        ),
    ]


@pytest.fixture
def make_result():
    def _make(doc_id: str = "doc", title: str = "Doc", score: float = 0.5,
              kind: MatchKind = MatchKind.FUZZY) -> SearchResult:
        return SearchResult(document=IndexedDocument(id=doc_id, title=title), score=score, kind=kind)
    return _make


@pytest.fixture
def engine(lexicon, clock):
    return SearchEngine(
        lexicon=lexicon,
        cache=ResultCache(capacity=100, eviction_batch=20),
        analytics=SearchAnalytics(log_size=1000, clock=clock),
        context=SearchContext(history_size=50),
        monitor=SearchMonitor(max_metrics=1000, enable_prometheus=True, clock=clock),
        batch_size=50,
    )
