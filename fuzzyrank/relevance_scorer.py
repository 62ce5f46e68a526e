"""
Relevance scoring for a (query, document) pair.

Scoring runs in two layers. The base score walks an ordered list of
strategies (exact title, title prefix, title substring, fuzzy title
similarity, word-order-flexible matching, jargon lookup) and adds bonuses for
category, summary, tag and searchable-text hits. The advanced layer wraps the
base score with abbreviation, synonym, phonetic, semantic and contextual
strategies, each gated by its option and by the score reached so far.

Every constant comes from ScoringWeights. The scorer holds no mutable state;
personalization arrives as a ContextSnapshot, so scoring is safe to run on
many documents at once.
"""

import re
from typing import Dict, List, Optional, Pattern, Tuple

from loguru import logger

from .lexicon import LexiconTables, ScoringWeights
from .models import IndexedDocument, MatchKind, ScoreBreakdown, SearchOptions
from .search_context import ContextSnapshot
from .string_metrics import ngram_similarity, phonetic_code, similarity

Signals = List[Tuple[str, float]]

STRATEGY_LABELS = {
    "exact": "exact title match",
    "prefix": "title prefix",
    "title": "title substring",
    "fuzzy": "fuzzy title similarity",
    "word_order": "word-order-flexible match",
    "jargon": "technical jargon",
    "category": "category",
    "summary": "summary",
    "tags": "tags",
    "searchable_text": "searchable text",
    "abbreviation": "abbreviation",
    "synonym": "synonym",
    "phonetic": "phonetic (sounds similar)",
    "semantic": "semantic similarity",
    "contextual": "search history",
}


def classify_score(score: float, weights: Optional[ScoringWeights] = None) -> MatchKind:
    """Map a score to its result kind."""
    weights = weights or ScoringWeights()
    if score >= weights.exact_threshold:
        return MatchKind.EXACT
    if score >= weights.partial_threshold:
        return MatchKind.PARTIAL
    if score >= weights.fuzzy_threshold:
        return MatchKind.FUZZY
    return MatchKind.SEMANTIC


def explain_signals(signals) -> Optional[str]:
    """Human-readable list of the strategies that produced a score."""
    names = []
    for name, _ in signals:
        label = STRATEGY_LABELS.get(name, name)
        if label not in names:
            names.append(label)
    if not names:
        return None
    return "Matched by " + ", ".join(names)


class RelevanceScorer:
    """Scores documents against a query using the lexicon tables."""

    def __init__(self,
                 lexicon: Optional[LexiconTables] = None,
                 weights: Optional[ScoringWeights] = None):
        self.lexicon = lexicon or LexiconTables.default()
        self.weights = weights or self.lexicon.weights
        self._abbreviation_patterns: Dict[str, Pattern] = {
            abbrev: re.compile(rf"(?<!\w){re.escape(abbrev)}(?!\w)")
            for abbrev in self.lexicon.abbreviations
        }

    def score(self,
              query: str,
              document: IndexedDocument,
              options: Optional[SearchOptions] = None,
              context: Optional[ContextSnapshot] = None) -> float:
        """Relevance of a document in [0, 1]; never raises."""
        return self.evaluate(query, document, options, context).score

    def evaluate(self,
                 query: str,
                 document: IndexedDocument,
                 options: Optional[SearchOptions] = None,
                 context: Optional[ContextSnapshot] = None) -> ScoreBreakdown:
        """Score a document and report which strategies contributed."""
        try:
            return self._evaluate(query, document, options or SearchOptions(), context)
        except Exception as e:
            logger.error(f"Scoring failed for document '{getattr(document, 'id', '?')}': {e}")
            return ScoreBreakdown(0.0)

    def _evaluate(self,
                  query: str,
                  document: IndexedDocument,
                  options: SearchOptions,
                  context: Optional[ContextSnapshot]) -> ScoreBreakdown:
        q = query.strip().lower()
        if not q:
            return ScoreBreakdown(0.0)

        w = self.weights
        signals: Signals = []
        score = self.base_score(q, document, options, signals)

        if options.enable_abbreviation_search and score < w.abbreviation_gate:
            abbr = self._abbreviation_score(q, document)
            if abbr > score:
                signals.append(("abbreviation", abbr - score))
                score = abbr

        if options.enable_synonym_search and score < w.synonym_gate:
            syn = self._synonym_score(q, document) * w.synonym_weight
            if syn > 0:
                signals.append(("synonym", syn))
                score += syn

        if options.enable_phonetic_search and score < w.phonetic_gate:
            phon = self._phonetic_score(q, document) * w.phonetic_weight
            if phon > score:
                signals.append(("phonetic", phon - score))
                score = phon

        if options.enable_semantic_search and score < w.semantic_gate:
            sem = self._semantic_score(q, document) * w.semantic_weight
            if sem > 0:
                signals.append(("semantic", sem))
                score += sem

        if options.enable_contextual_search and context is not None:
            boost = context.boost(document, q)
            if boost > 0:
                signals.append(("contextual", boost))
                score += boost

        return ScoreBreakdown(min(1.0, max(0.0, score)), tuple(signals))

    def base_score(self,
                   q: str,
                   document: IndexedDocument,
                   options: SearchOptions,
                   signals: Optional[Signals] = None) -> float:
        """Layered title/field score for a normalized (lowercase, stripped) query."""
        w = self.weights
        signals = signals if signals is not None else []
        title = document.title.lower()

        if title == q:
            signals.append(("exact", w.exact_title))
            return w.exact_title
        if title.startswith(q):
            signals.append(("prefix", w.prefix_title))
            return w.prefix_title

        score = 0.0
        if q in title:
            score += w.substring_title
            signals.append(("title", w.substring_title))
        else:
            title_similarity = similarity(q, title)
            if title_similarity >= options.fuzzy_threshold:
                score += title_similarity * w.fuzzy_weight
                signals.append(("fuzzy", title_similarity * w.fuzzy_weight))
            elif title_similarity < w.flexible_cutoff:
                flexible = self._flexible_score(q, document)
                if flexible > 0:
                    score += flexible
                    signals.append(("word_order", flexible))
                else:
                    jargon = self._jargon_score(q, document)
                    if jargon > 0:
                        score += jargon
                        signals.append(("jargon", jargon))
                    else:
                        return 0.0

        if document.category and q in document.category.lower():
            score += w.category_bonus
            signals.append(("category", w.category_bonus))

        if score > w.detail_gate or len(q) <= w.short_query_length:
            if document.summary and q in document.summary.lower():
                score += w.summary_bonus
                signals.append(("summary", w.summary_bonus))

            if score < w.tag_gate:
                tag_words = " ".join(document.tags).lower().split()
                if any(q in tag for tag in tag_words):
                    score += w.tag_bonus
                    signals.append(("tags", w.tag_bonus))

            if score < w.searchable_gate:
                if document.searchable_text and q in document.searchable_text.lower():
                    score += w.searchable_bonus
                    signals.append(("searchable_text", w.searchable_bonus))

        if score > 0 and title:
            score *= 1 + min(w.length_boost_cap, len(q) / len(title) * w.length_boost_factor)

        return min(1.0, score)

    def _flexible_score(self, q: str, document: IndexedDocument) -> float:
        """Match query words against document words ignoring their order."""
        w = self.weights
        query_words = q.split()
        if len(query_words) <= 1:
            return 0.0

        title_words = document.title.lower().split()
        all_words = (
            title_words
            + (document.category or "").lower().split()
            + (document.summary or "").lower().split()
        )

        meaningful = [word for word in query_words if len(word) >= w.flexible_min_word_length]
        if not meaningful:
            return 0.0

        matched = title_matches = exact_matches = 0
        for word in meaningful:
            if word in title_words:
                matched += 1
                title_matches += 1
                exact_matches += 1
            elif any(word in tw and len(tw) > len(word) for tw in title_words):
                matched += 1
                title_matches += 1
            elif any(word in iw for iw in all_words):
                matched += 1

        if matched == 0:
            return 0.0

        total = len(meaningful)
        return (
            matched / total * w.flexible_word_ratio
            + title_matches / total * w.flexible_title_ratio
            + exact_matches / total * w.flexible_exact_ratio
        )

    def _jargon_score(self, q: str, document: IndexedDocument) -> float:
        """Technical terms in the query that point at related algorithms."""
        w = self.weights
        fields = (
            document.title.lower(),
            (document.category or "").lower(),
            (document.summary or "").lower(),
        )
        score = 0.0
        for jargon, related_terms in self.lexicon.jargon.items():
            if jargon not in q:
                continue
            if any(term in field for term in related_terms for field in fields):
                score += w.jargon_hit
        return min(score, w.jargon_cap)

    def _abbreviation_score(self, q: str, document: IndexedDocument) -> float:
        """Abbreviation lookup in both directions."""
        w = self.weights
        score = 0.0

        fields = (
            document.title.lower(),
            (document.summary or "").lower(),
            (document.category or "").lower(),
        )
        if any(term in field for term in self.lexicon.expansions(q) for field in fields):
            score += w.abbreviation_expansion_hit

        document_text = " ".join(fields)
        for abbrev, expansions in self.lexicon.abbreviations.items():
            if any(exp in q for exp in expansions) and self._abbreviation_patterns[abbrev].search(document_text):
                score += w.abbreviation_reverse_hit
                break

        return min(score, w.abbreviation_cap)

    def _synonym_score(self, q: str, document: IndexedDocument) -> float:
        w = self.weights
        document_text = f"{document.title} {document.summary or ''} {document.category or ''}".lower()
        score = 0.0
        for word in q.split():
            if any(synonym in document_text for synonym in self.lexicon.synonyms_for(word)):
                score += w.synonym_hit
        return min(score, w.synonym_cap)

    def _phonetic_score(self, q: str, document: IndexedDocument) -> float:
        """Query/title word pairs whose Soundex and metaphone codes both agree."""
        w = self.weights
        title_codes = [phonetic_code(word) for word in document.title.lower().split()]
        score = 0.0
        for word in q.split():
            if len(word) < w.phonetic_min_word_length:
                continue
            codes = phonetic_code(word)
            for other in title_codes:
                if codes.sounds_like(other):
                    score += w.phonetic_soundex_hit + w.phonetic_metaphone_hit
        return min(score, w.phonetic_cap)

    def _semantic_score(self, q: str, document: IndexedDocument) -> float:
        """Character n-gram overlap plus associated concept pairs."""
        w = self.weights
        score = ngram_similarity(q, document.title) * w.semantic_title_ngram
        if document.summary:
            score += ngram_similarity(q, document.summary) * w.semantic_summary_ngram

        query_words = q.split()
        concepts = f"{document.title} {document.summary or ''} {' '.join(document.tags)}".lower()
        for first, second in self.lexicon.concept_pairs:
            if ((any(first in word for word in query_words) and second in concepts)
                    or (any(second in word for word in query_words) and first in concepts)):
                score += w.semantic_concept_hit

        return min(score, w.semantic_cap)
