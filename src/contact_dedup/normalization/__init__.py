"""
contact_dedup.normalization package

Contains the leaf matching helpers:

- contact_normalization: string / name / phone normalization
- phonetics: simplified Cologne phonetics
- distance: Levenshtein distance and name similarity
"""

from .contact_normalization import (
    clean_phone_number,
    email_local_part,
    normalize_name,
    normalize_string,
)
from .distance import levenshtein_distance, name_similarity
from .phonetics import cologne_phonetics

__all__ = [
    "clean_phone_number",
    "email_local_part",
    "normalize_name",
    "normalize_string",
    "levenshtein_distance",
    "name_similarity",
    "cologne_phonetics",
]
