"""
contact_dedup.resolution package

Candidate indexing, disambiguation and duplicate group assembly.
"""

from .disambiguation import are_different_people, is_name_in_email
from .grouping import assemble_groups
from .indexer import DedupIndexer
from .options import MatchOptions

__all__ = [
    "DedupIndexer",
    "MatchOptions",
    "assemble_groups",
    "are_different_people",
    "is_name_in_email",
]
