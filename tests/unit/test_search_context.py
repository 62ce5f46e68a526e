"""Tests for session personalization."""

import pytest

from fuzzyrank.models import IndexedDocument
from fuzzyrank.search_context import SearchContext


@pytest.fixture
def context():
    return SearchContext(history_size=5)


@pytest.fixture
def merge_sort():
    return IndexedDocument(id="sorting-merge-sort", title="Merge Sort", category="sorting")


class TestSearchContext:
    def test_fresh_context_has_no_boost(self, context, merge_sort):
        assert context.boost(merge_sort, "sort") == 0.0
        assert context.snapshot().is_empty

    def test_document_boost_capped(self, context):
        document = IndexedDocument(id="d", title="Doc")
        for _ in range(5):
            context.record_selection("zzz", document)
        # History matches "zzz" five times too: 0.3 + 0.1
        assert context.boost(document, "zzz") == pytest.approx(0.4)
        assert context.boost(document, "other") == pytest.approx(0.3)

    def test_category_boost(self, context, merge_sort):
        context.record_selection("merge", merge_sort)
        quick_sort = IndexedDocument(id="q", title="Quick Sort", category="sorting")
        assert context.boost(quick_sort, "quick") == pytest.approx(0.05)

    def test_history_boost_matches_substrings(self, context, merge_sort):
        context.record_selection("merge sort")
        other = IndexedDocument(id="o", title="Other")
        assert context.boost(other, "merge") == pytest.approx(0.02)
        assert context.boost(other, "Merge Sort Stable") == pytest.approx(0.02)
        assert context.boost(other, "heap") == 0.0

    def test_boost_bounded(self, context, merge_sort):
        for _ in range(20):
            context.record_selection("sort", merge_sort)
        assert context.boost(merge_sort, "sort") == pytest.approx(0.6)

    def test_history_is_bounded_newest_first(self, context):
        for i in range(7):
            context.record_selection(f"Query {i}")
        assert context.history == ["query 6", "query 5", "query 4", "query 3", "query 2"]

    def test_suggestions(self, context, merge_sort):
        graph = IndexedDocument(id="g", title="Dijkstra", category="graphs")
        context.record_selection("merge", merge_sort)
        context.record_selection("dijkstra", graph)
        context.record_selection("quick", merge_sort)
        assert context.suggestions() == ["quick", "dijkstra", "merge", "sorting", "graphs"]

    def test_snapshot_matches_live_boost(self, context, merge_sort):
        context.record_selection("sort", merge_sort)
        snapshot = context.snapshot()
        assert snapshot.boost(merge_sort, "sort") == context.boost(merge_sort, "sort")

        context.record_selection("sort", merge_sort)
        assert snapshot.boost(merge_sort, "sort") < context.boost(merge_sort, "sort")

    def test_clear(self, context, merge_sort):
        context.record_selection("sort", merge_sort)
        context.clear()
        assert context.history == []
        assert context.boost(merge_sort, "sort") == 0.0
