"""Tests for the lexicon tables, loader and scoring weights."""

import pytest

from config.lexicon_loader import LexiconError, LexiconLoader
from fuzzyrank.lexicon import LexiconTables, ScoringWeights


VALID_LEXICON = """
abbreviations:
  BST: ["Binary Search Tree"]
synonyms:
  fast: ["quick"]
jargon:
  stable: ["merge"]
concept_pairs:
  - ["sort", "order"]
suggestion_seeds:
  - "sorting algorithms"
weights:
  fuzzy_weight: 0.5
  short_query_length: 4
"""


class TestDefaultLexicon:
    def test_loads_bundled_tables(self, lexicon):
        assert lexicon.expansions("BST") == ("binary search tree",)
        assert "quick" in lexicon.synonyms_for("fast")
        assert "merge" in lexicon.jargon["stable"]

    def test_concept_pairs_and_seeds(self, lexicon):
        assert ("sort", "order") in lexicon.concept_pairs
        assert "graph algorithms" in lexicon.suggestion_seeds
        assert len(lexicon.suggestion_seeds) == 9

    def test_default_is_shared(self):
        assert LexiconTables.default() is LexiconTables.default()

    def test_tables_are_read_only(self, lexicon):
        with pytest.raises(TypeError):
            lexicon.abbreviations["new"] = ("term",)

    def test_default_weights(self, lexicon):
        assert lexicon.weights == ScoringWeights()


class TestLexiconFile:
    def test_keys_lowercased_and_weights_applied(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text(VALID_LEXICON, encoding="utf-8")

        tables = LexiconTables.from_file(path)

        assert tables.expansions("bst") == ("binary search tree",)
        assert tables.weights.fuzzy_weight == 0.5
        assert tables.weights.short_query_length == 4
        assert isinstance(tables.weights.short_query_length, int)
        assert tables.stats()["concept_pairs"] == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(LexiconError):
            LexiconTables.from_file(tmp_path / "missing.yaml")

    def test_schema_violation(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text("abbreviations: oops\nsynonyms: {}\njargon: {}\n", encoding="utf-8")
        with pytest.raises(LexiconError):
            LexiconTables.from_file(path)

    def test_missing_required_table(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text("abbreviations: {}\nsynonyms: {}\n", encoding="utf-8")
        with pytest.raises(LexiconError):
            LexiconLoader(path).load_lexicon()

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text("abbreviations: [unclosed\n", encoding="utf-8")
        with pytest.raises(LexiconError):
            LexiconLoader(path).load_lexicon()

    def test_loader_tables(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text(VALID_LEXICON, encoding="utf-8")
        loader = LexiconLoader(path)

        assert loader.get_table("synonyms") == {"fast": ["quick"]}
        assert loader.get_weights() == {"fuzzy_weight": 0.5, "short_query_length": 4}
        with pytest.raises(ValueError):
            loader.get_table("weights")


class TestScoringWeights:
    def test_unknown_keys_ignored(self):
        assert ScoringWeights.from_mapping({"not_a_weight": 3}) == ScoringWeights()

    def test_override(self):
        weights = ScoringWeights.from_mapping({"typo_discount": 0.5})
        assert weights.typo_discount == 0.5
        assert weights.exact_title == 1.0
