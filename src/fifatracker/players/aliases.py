"""
Player name normalization and comparison utilities.

Player names reach us in many shapes:
- Ratings dataset: "Kylian Mbappé"
- Club roster typed by hand: "kylian mbape"
- Live profile pages: "K. Mbappé"

This module provides the two primitives the matcher is built on: a
normalizer that makes names comparable regardless of case, accents and
punctuation, and a similarity score based on Levenshtein edit distance.
"""

import re
import unicodedata

from rapidfuzz.distance import Levenshtein

# Combining diacritical marks block (U+0300 - U+036F)
_COMBINING_MARKS = re.compile("[\u0300-\u036f]")

# Anything that is not a word character or whitespace
_PUNCTUATION = re.compile(r"[^\w\s]")


def normalize_name(name: str) -> str:
    """
    Normalize a player name for comparison.

    Normalization steps:
    1. Convert to lowercase
    2. Decompose accented characters (é → e + combining acute)
    3. Drop the combining marks
    4. Drop punctuation (anything that is not a word character or whitespace)

    Whitespace is left untouched so callers can split the result into terms.
    The function is idempotent.

    Args:
        name: Raw player name from any source

    Returns:
        Normalized name

    Examples:
        >>> normalize_name("Kylian Mbappé")
        'kylian mbappe'
        >>> normalize_name("N'Golo Kanté")
        'ngolo kante'
    """
    normalized = name.lower()
    normalized = unicodedata.normalize("NFD", normalized)
    normalized = _COMBINING_MARKS.sub("", normalized)
    return _PUNCTUATION.sub("", normalized)


def levenshtein_distance(a: str, b: str) -> int:
    """
    Classic Levenshtein edit distance.

    Insertions, deletions and substitutions each cost 1.
    """
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """
    Compare two strings and return a similarity score.

    The score is ``1 - distance / len(longer)``, so identical strings score
    1.0 and completely different strings of equal length score 0.0. Two
    empty strings are considered identical.

    Args:
        a: First string (callers normally pass normalized names)
        b: Second string

    Returns:
        Similarity score from 0.0 to 1.0

    Examples:
        >>> similarity("mbappe", "mbappe")
        1.0
        >>> round(similarity("mbape", "mbappe"), 3)
        0.833
    """
    longer, shorter = (a, b) if len(a) > len(b) else (b, a)

    if len(longer) == 0:
        return 1.0

    return 1.0 - levenshtein_distance(longer, shorter) / len(longer)
