"""Tests for the shared data model."""

import dataclasses

import pytest

from fuzzyrank.models import IndexedDocument, MatchKind, SearchOptions, sort_results


class TestIndexedDocument:
    def test_tags_coerced_to_tuple(self):
        document = IndexedDocument(id="d", title="Doc", tags=["a", "b"])
        assert document.tags == ("a", "b")

    def test_frozen(self):
        document = IndexedDocument(id="d", title="Doc")
        with pytest.raises(dataclasses.FrozenInstanceError):
            document.title = "Other"

    def test_hashable(self):
        assert hash(IndexedDocument(id="d", title="Doc", tags=["a"])) == hash(
            IndexedDocument(id="d", title="Doc", tags=("a",))
        )


class TestSearchResultOrdering:
    def test_score_descending(self, make_result):
        low = make_result("a", "A", 0.4)
        high = make_result("b", "B", 0.8)
        assert sort_results([low, high]) == [high, low]

    def test_kind_priority_breaks_ties(self, make_result):
        fuzzy = make_result("a", "A", 0.5, MatchKind.FUZZY)
        exact = make_result("b", "B", 0.5, MatchKind.EXACT)
        suggested = make_result("c", "C", 0.5, MatchKind.SUGGESTED)
        assert sort_results([suggested, fuzzy, exact]) == [exact, fuzzy, suggested]

    def test_close_scores_never_reordered_by_title(self, make_result):
        beta = make_result("b", "Beta", 0.8054)
        alpha = make_result("a", "Alpha", 0.8051)
        assert sort_results([alpha, beta]) == [beta, alpha]

    def test_close_scores_never_reordered_by_kind(self, make_result):
        fuzzy = make_result("a", "A", 0.50004, MatchKind.FUZZY)
        exact = make_result("b", "B", 0.5, MatchKind.EXACT)
        assert sort_results([exact, fuzzy]) == [fuzzy, exact]

    def test_title_then_id(self, make_result):
        first = make_result("b", "Same", 0.5)
        second = make_result("a", "same", 0.5)
        assert sort_results([first, second]) == [second, first]

    def test_kind_priorities(self):
        assert [kind.priority for kind in (
            MatchKind.EXACT, MatchKind.PARTIAL, MatchKind.FUZZY, MatchKind.SEMANTIC,
            MatchKind.SUGGESTED, MatchKind.PHONETIC, MatchKind.CONTEXTUAL,
        )] == list(range(7))

    def test_to_dict(self, make_result):
        result = dataclasses.replace(make_result("a", "A", 0.5), matched_fields=frozenset({"title", "tags"}))
        assert result.to_dict() == {
            "id": "a",
            "title": "A",
            "score": 0.5,
            "kind": "fuzzy",
            "highlighted_title": None,
            "matched_fields": ["tags", "title"],
            "explanation": None,
        }


class TestSearchOptions:
    def test_defaults(self):
        options = SearchOptions()
        assert options.fuzzy_threshold == 0.6
        assert options.max_results == 10
        assert options.min_score == 0.1
        assert options.suggest_typos is True

    def test_from_mapping_ignores_unknown_keys(self):
        options = SearchOptions.from_mapping({"max_results": 3, "colour": "blue"})
        assert options == SearchOptions(max_results=3)

    def test_from_empty_mapping(self):
        assert SearchOptions.from_mapping(None) == SearchOptions()

    def test_normalized_clamps(self):
        options = SearchOptions(fuzzy_threshold=1.5, max_results=0, min_score=-1,
                                max_suggestion_distance=-2).normalized()
        assert options.fuzzy_threshold == 1.0
        assert options.max_results == 1
        assert options.min_score == 0.0
        assert options.max_suggestion_distance == 0

    def test_with_changes(self):
        assert SearchOptions().with_changes(max_results=5).max_results == 5


def test_search_result_is_frozen(make_result):
    with pytest.raises(dataclasses.FrozenInstanceError):
        make_result().score = 1.0
