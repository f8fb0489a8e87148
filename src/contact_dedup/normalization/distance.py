from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance; insertion, deletion and substitution cost 1."""
    return Levenshtein.distance(a or "", b or "")


def name_similarity(a: str, b: str) -> float:
    """1 - distance / longer length; two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / longest


__all__ = ["levenshtein_distance", "name_similarity"]
