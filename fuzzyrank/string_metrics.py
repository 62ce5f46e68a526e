"""
String metrics used by the relevance scorer and the typo suggester.

All functions are pure. Degenerate input has defined limits: the distance to
an empty string is the other string's length, two empty strings are identical,
and n-gram similarity with an empty side is 0.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Set, Tuple

_WORD_RE = re.compile(r"[\w][\w-]*")

_SOUNDEX_CODES = {
    **dict.fromkeys("BFPV", "1"),
    **dict.fromkeys("CGJKQSXZ", "2"),
    **dict.fromkeys("DT", "3"),
    "L": "4",
    **dict.fromkeys("MN", "5"),
    "R": "6",
}

_METAPHONE_DIGRAPHS = {"CH": "X", "SH": "X", "TH": "0", "PH": "F"}

_METAPHONE_CODES = {
    "B": "B", "C": "K", "D": "T", "F": "F", "V": "F", "G": "J", "J": "J",
    "K": "K", "Q": "K", "L": "L", "M": "M", "N": "M", "P": "P", "R": "R",
    "S": "S", "T": "T", "X": "KS", "Z": "S",
}

_VOWELS = "AEIOUY"


@dataclass(frozen=True)
class PhoneticCodes:
    """Soundex code plus the (primary, secondary) metaphone pair of a word."""
    soundex: str
    metaphone: Tuple[str, str]

    def sounds_like(self, other: "PhoneticCodes") -> bool:
        """Both encodings must agree for two words to count as homophones."""
        if not self.soundex or self.soundex != other.soundex:
            return False
        primary, secondary = self.metaphone
        other_primary, other_secondary = other.metaphone
        return bool(
            (primary and primary == other_primary)
            or (secondary and secondary == other_secondary)
        )


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert/delete/substitute costs."""
    if len(a) < len(b):
        return edit_distance(b, a)

    if len(b) == 0:
        return len(a)

    previous_row = list(range(len(b) + 1))
    for i, c1 in enumerate(a):
        current_row = [i + 1]
        for j, c2 in enumerate(b):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1]; case-insensitive."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1.0 - edit_distance(a.lower(), b.lower()) / max_len


def is_fuzzy_match(query: str, target: str, threshold: float = 0.6) -> bool:
    return similarity(query, target) >= threshold


def _ngrams(text: str, n: int) -> Set[str]:
    padded = f" {text.lower()} "
    return {padded[i:i + n] for i in range(len(padded) - n + 1)}


def ngram_similarity(a: str, b: str, n: int = 2) -> float:
    """Jaccard index over the space-padded character n-grams of both strings."""
    if not a or not b:
        return 0.0
    grams_a = _ngrams(a, n)
    grams_b = _ngrams(b, n)
    union = grams_a | grams_b
    if not union:
        return 0.0
    return len(grams_a & grams_b) / len(union)


def soundex(word: str) -> str:
    """Four character Soundex code; empty input gives an empty code."""
    if not word:
        return ""

    word = word.upper()
    code = word[0]
    for char in word[1:]:
        digit = _SOUNDEX_CODES.get(char, "")
        if digit and digit != code[-1]:
            code += digit

    return (code + "000")[:4]


def double_metaphone(word: str) -> Tuple[str, str]:
    """Simplified single-pass metaphone; the secondary code equals the primary."""
    if not word:
        return "", ""

    word = word.upper()
    primary = ""
    pos = 0
    while pos < len(word) and len(primary) < 4:
        char = word[pos]
        prev = word[pos - 1] if pos > 0 else ""
        nxt = word[pos + 1] if pos + 1 < len(word) else ""

        digraph = _METAPHONE_DIGRAPHS.get(char + nxt)
        if digraph:
            primary += digraph
            pos += 2
            continue

        if char in _METAPHONE_CODES:
            primary += _METAPHONE_CODES[char]
        elif char == "H":
            if prev and nxt and prev in _VOWELS and nxt in _VOWELS:
                primary += "H"
        elif char == "W":
            if nxt and nxt in _VOWELS:
                primary += "W"
        elif char in _VOWELS and pos == 0:
            primary += "A"
        pos += 1

    primary = primary[:4]
    return primary, primary


@lru_cache(maxsize=4096)
def phonetic_code(word: str) -> PhoneticCodes:
    """Both phonetic encodings of a word (memoized)."""
    return PhoneticCodes(soundex=soundex(word), metaphone=double_metaphone(word))


def tokenize(text: str) -> List[str]:
    """Lowercase word tokens; hyphenated words are kept whole."""
    if not text:
        return []
    return _WORD_RE.findall(text.lower())
