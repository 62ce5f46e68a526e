"""Tests for the relevance scorer."""

import pytest

from fuzzyrank.models import IndexedDocument, MatchKind, SearchOptions
from fuzzyrank.relevance_scorer import classify_score, explain_signals
from fuzzyrank.search_context import ContextSnapshot

ONLY_CONTEXT = SearchOptions(
    enable_semantic_search=False,
    enable_phonetic_search=False,
    enable_abbreviation_search=False,
    enable_synonym_search=False,
)


@pytest.fixture
def bst():
    return IndexedDocument(id="trees-bst", title="Binary Search Tree", category="trees")


@pytest.fixture
def merge_sort():
    return IndexedDocument(
        id="sorting-merge-sort",
        title="Merge Sort",
        category="sorting",
        tags=("stable",),
        summary="Stable divide and conquer sort.",
    )


class TestBaseScore:
    def test_exact_title(self, scorer, binary_search):
        breakdown = scorer.evaluate("binary search", binary_search)
        assert breakdown.score == 1.0
        assert breakdown.strategies == ("exact",)

    def test_prefix(self, scorer, bst):
        assert scorer.score("Bin", bst) == pytest.approx(0.9)

    def test_title_substring_with_length_boost(self, scorer, binary_search):
        expected = 0.7 * (1 + len("search") / len("binary search") * 0.2)
        assert scorer.score("search", binary_search) == pytest.approx(expected)

    def test_category_bonus(self, scorer):
        document = IndexedDocument(id="d", title="Bitonic Sorting", category="sorting")
        assert scorer.score("sorting", document) == 1.0

    def test_blank_query(self, scorer, binary_search):
        assert scorer.score("   ", binary_search) == 0.0

    def test_unrelated_query_scores_zero_without_advanced(self, scorer, binary_search):
        assert scorer.score("zzzz", binary_search, ONLY_CONTEXT) == 0.0

    def test_word_order_flexible(self, scorer):
        document = IndexedDocument(id="d", title="Linear Search")
        assert scorer._flexible_score("search linear", document) == pytest.approx(1.0)
        assert scorer._flexible_score("search", document) == 0.0
        assert scorer._flexible_score("a of", document) == 0.0

    def test_jargon(self, scorer, merge_sort):
        assert scorer._jargon_score("stable sort", merge_sort) == pytest.approx(0.8)
        assert scorer._jargon_score("zzz", merge_sort) == 0.0


class TestAdvancedScore:
    def test_abbreviation_expansion(self, scorer, bst):
        options = SearchOptions(enable_semantic_search=False)
        breakdown = scorer.evaluate("bst", bst, options)
        assert breakdown.score == pytest.approx(0.6)
        assert "abbreviation" in breakdown.strategies

    def test_abbreviation_reverse_lookup_needs_whole_word(self, scorer):
        with_abbrev = IndexedDocument(id="a", title="BST Rotations")
        inside_word = IndexedDocument(id="b", title="Obstacle Course")
        assert scorer._abbreviation_score("binary search tree", with_abbrev) == pytest.approx(0.5)
        assert scorer._abbreviation_score("binary search tree", inside_word) == 0.0

    def test_abbreviation_disabled(self, scorer, bst):
        options = SearchOptions(enable_abbreviation_search=False, enable_semantic_search=False)
        assert scorer.score("bst", bst, options) == 0.0

    def test_synonyms(self, scorer):
        document = IndexedDocument(id="q", title="Quick Sort")
        assert scorer._synonym_score("fast order", document) == pytest.approx(0.6)
        assert scorer._synonym_score("zzz", document) == 0.0

    def test_phonetic_requires_both_codes(self, scorer, binary_search):
        smith = IndexedDocument(id="s", title="Smith Waterman")
        assert scorer._phonetic_score("smyth", smith) == pytest.approx(0.7)
        assert scorer._phonetic_score("sercah", binary_search) == 0.0

    def test_semantic_concept_pairs(self, scorer, merge_sort):
        with_pair = scorer._semantic_score("order", merge_sort)
        without_pair = scorer._semantic_score("order", IndexedDocument(id="x", title="Merge Step"))
        assert with_pair > without_pair
        assert with_pair <= 0.8

    def test_contextual_boost_is_additive(self, scorer, binary_search):
        snapshot = ContextSnapshot(document_counts={binary_search.id: 2})
        assert scorer.score("zzzz", binary_search, ONLY_CONTEXT, snapshot) == pytest.approx(0.2)

    def test_contextual_disabled(self, scorer, binary_search):
        snapshot = ContextSnapshot(document_counts={binary_search.id: 2})
        options = ONLY_CONTEXT.with_changes(enable_contextual_search=False)
        assert scorer.score("zzzz", binary_search, options, snapshot) == 0.0

    def test_score_is_clamped(self, scorer, binary_search):
        snapshot = ContextSnapshot(document_counts={binary_search.id: 5})
        assert scorer.score("binary search", binary_search, context=snapshot) == 1.0

    def test_failures_score_zero(self, scorer):
        broken = IndexedDocument(id="broken", title=None)
        assert scorer.score("binary", broken) == 0.0


class TestClassification:
    @pytest.mark.parametrize("score, kind", [
        (1.0, MatchKind.EXACT),
        (0.9, MatchKind.EXACT),
        (0.6, MatchKind.PARTIAL),
        (0.45, MatchKind.FUZZY),
        (0.1, MatchKind.SEMANTIC),
    ])
    def test_thresholds(self, score, kind):
        assert classify_score(score) == kind

    def test_explanation_names_strategies(self):
        assert explain_signals([("title", 0.7), ("category", 0.4)]) == "Matched by title substring, category"
        assert explain_signals([]) is None
