"""
Lexicon tables and scoring weights.

The abbreviation, synonym and jargon tables are data, loaded from the YAML
lexicon resource, so new terms never require touching scoring code. The
numeric constants of the scorer live in ScoringWeights; the lexicon's
``weights`` section may override any of them.
"""

import threading
from dataclasses import dataclass, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from loguru import logger

from config.lexicon_loader import LexiconLoader


@dataclass(frozen=True)
class ScoringWeights:
    """Tunable constants of the relevance scorer."""
    # Base score
    exact_title: float = 1.0
    prefix_title: float = 0.9
    substring_title: float = 0.7
    fuzzy_weight: float = 0.6
    flexible_cutoff: float = 0.3
    flexible_word_ratio: float = 0.5
    flexible_title_ratio: float = 0.3
    flexible_exact_ratio: float = 0.2
    flexible_min_word_length: int = 3
    jargon_hit: float = 0.4
    jargon_cap: float = 0.8
    category_bonus: float = 0.4
    detail_gate: float = 0.3
    short_query_length: int = 3
    summary_bonus: float = 0.2
    tag_bonus: float = 0.3
    tag_gate: float = 0.8
    searchable_bonus: float = 0.1
    searchable_gate: float = 0.5
    length_boost_cap: float = 0.2
    length_boost_factor: float = 0.2

    # Advanced strategies
    abbreviation_gate: float = 0.8
    abbreviation_expansion_hit: float = 0.6
    abbreviation_reverse_hit: float = 0.5
    abbreviation_cap: float = 0.8
    synonym_gate: float = 0.7
    synonym_hit: float = 0.3
    synonym_cap: float = 0.6
    synonym_weight: float = 0.5
    phonetic_gate: float = 0.6
    phonetic_min_word_length: int = 3
    phonetic_soundex_hit: float = 0.4
    phonetic_metaphone_hit: float = 0.5
    phonetic_cap: float = 0.7
    phonetic_weight: float = 0.8
    semantic_gate: float = 0.7
    semantic_title_ngram: float = 0.4
    semantic_summary_ngram: float = 0.2
    semantic_concept_hit: float = 0.2
    semantic_cap: float = 0.8
    semantic_weight: float = 0.6

    # Classification and fallback
    exact_threshold: float = 0.9
    partial_threshold: float = 0.6
    fuzzy_threshold: float = 0.4
    typo_discount: float = 0.8

    @classmethod
    def from_mapping(cls, overrides: Optional[Mapping[str, Any]] = None) -> "ScoringWeights":
        """Build weights from defaults plus overrides; unknown keys are ignored."""
        weights = cls()
        if not overrides:
            return weights
        known = {f.name: f.type for f in fields(cls)}
        accepted = {}
        for key, value in overrides.items():
            if key not in known:
                logger.warning(f"Ignoring unknown scoring weight '{key}'")
                continue
            accepted[key] = int(value) if known[key] in (int, "int") else float(value)
        return replace(weights, **accepted)


def _freeze_table(table: Optional[Mapping[str, Iterable[str]]]) -> Mapping[str, Tuple[str, ...]]:
    frozen = {}
    for key, terms in (table or {}).items():
        frozen[str(key).lower()] = tuple(str(term).lower() for term in terms)
    return MappingProxyType(frozen)


class LexiconTables:
    """Read-only term tables consulted by the relevance scorer."""

    _default: Optional["LexiconTables"] = None
    _default_lock = threading.Lock()

    def __init__(self,
                 abbreviations: Optional[Mapping[str, Iterable[str]]] = None,
                 synonyms: Optional[Mapping[str, Iterable[str]]] = None,
                 jargon: Optional[Mapping[str, Iterable[str]]] = None,
                 concept_pairs: Iterable[Iterable[str]] = (),
                 suggestion_seeds: Iterable[str] = (),
                 weights: Optional[ScoringWeights] = None):
        self.abbreviations = _freeze_table(abbreviations)
        self.synonyms = _freeze_table(synonyms)
        self.jargon = _freeze_table(jargon)
        self.concept_pairs: Tuple[Tuple[str, str], ...] = tuple(
            (a.lower(), b.lower()) for a, b in (tuple(pair) for pair in concept_pairs)
        )
        self.suggestion_seeds: Tuple[str, ...] = tuple(suggestion_seeds)
        self.weights = weights or ScoringWeights()

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "LexiconTables":
        """Build tables from already-validated lexicon data."""
        return cls(
            abbreviations=data.get("abbreviations"),
            synonyms=data.get("synonyms"),
            jargon=data.get("jargon"),
            concept_pairs=data.get("concept_pairs") or (),
            suggestion_seeds=data.get("suggestion_seeds") or (),
            weights=ScoringWeights.from_mapping(data.get("weights")),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "LexiconTables":
        """Load and validate a lexicon YAML file.

        Raises:
            LexiconError: If the file is missing, unreadable or invalid.
        """
        return cls.from_data(LexiconLoader(Path(path)).load_lexicon())

    @classmethod
    def default(cls) -> "LexiconTables":
        """Shared tables loaded lazily from the configured lexicon path."""
        with cls._default_lock:
            if cls._default is None:
                cls._default = cls.from_data(LexiconLoader().load_lexicon())
            return cls._default

    def expansions(self, abbreviation: str) -> Tuple[str, ...]:
        return self.abbreviations.get(abbreviation.lower(), ())

    def synonyms_for(self, word: str) -> Tuple[str, ...]:
        return self.synonyms.get(word.lower(), ())

    def stats(self) -> Dict[str, int]:
        return {
            "abbreviations": len(self.abbreviations),
            "synonyms": len(self.synonyms),
            "jargon": len(self.jargon),
            "concept_pairs": len(self.concept_pairs),
            "suggestion_seeds": len(self.suggestion_seeds),
        }

    def __repr__(self) -> str:
        return f"LexiconTables({', '.join(f'{k}={v}' for k, v in self.stats().items())})"
