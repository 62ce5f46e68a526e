"""Tests for converting algorithm records into documents."""

import pytest

from fuzzyrank.ingestion import AlgorithmRecord, ingest
from fuzzyrank.models import DocumentValidationError

MERGE_SORT = {
    "slug": "merge-sort",
    "title": "Merge Sort",
    "topic": "sorting",
    "summary": "Stable divide and conquer sort.",
    "about": "Splits the input and merges sorted halves.",
    "pros": ["stable", "predictable"],
    "cons": ["extra memory", " "],
    "complexity": {
        "time": {"best": "O(n log n)", "worst": "O(n log n)"},
        "space": "O(n)",
        "stable": True,
        "inPlace": False,
    },
    "pseudocode": ["split", "merge"],
}


class TestAlgorithmRecord:
    def test_from_mapping(self):
        record = AlgorithmRecord.from_mapping(MERGE_SORT)
        assert record.document_id == "sorting-merge-sort"
        assert record.stable is True
        assert record.in_place is False
        assert record.time_complexity == {"best": "O(n log n)", "worst": "O(n log n)"}

    def test_accepts_snake_case_in_place(self):
        record = AlgorithmRecord.from_mapping(
            {"slug": "quick-sort", "title": "Quick Sort", "complexity": {"in_place": True}}
        )
        assert record.in_place is True

    def test_id_without_topic(self):
        record = AlgorithmRecord(slug="bfs", title="Breadth First Search")
        assert record.document_id == "bfs"

    @pytest.mark.parametrize("data", [
        {"title": "No Slug"},
        {"slug": "no-title"},
        {"slug": "  ", "title": "Blank Slug"},
    ])
    def test_requires_slug_and_title(self, data):
        with pytest.raises(DocumentValidationError):
            AlgorithmRecord.from_mapping(data)

    def test_to_document(self):
        document = AlgorithmRecord.from_mapping(MERGE_SORT).to_document()

        assert document.id == "sorting-merge-sort"
        assert document.category == "sorting"
        assert document.summary == "Stable divide and conquer sort."
        assert document.tags == (
            "stable", "predictable", "extra memory", "stable", "not-in-place", "split", "merge",
        )
        assert document.searchable_text == (
            "Splits the input and merges sorted halves. stable predictable extra memory "
            "O(n log n) O(n log n) O(n)"
        )

    def test_minimal_document(self):
        document = AlgorithmRecord(slug="bfs", title="Breadth First Search").to_document()
        assert document.tags == ("unstable", "not-in-place")
        assert document.searchable_text == ""
        assert document.category is None


class TestIngest:
    def test_mixed_inputs_keep_order(self):
        documents = ingest([MERGE_SORT, AlgorithmRecord(slug="bfs", title="Breadth First Search")])
        assert [d.id for d in documents] == ["sorting-merge-sort", "bfs"]

    def test_duplicate_ids_rejected(self):
        with pytest.raises(DocumentValidationError):
            ingest([MERGE_SORT, dict(MERGE_SORT)])

    def test_empty(self):
        assert ingest([]) == []
