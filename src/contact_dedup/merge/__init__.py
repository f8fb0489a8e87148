"""
contact_dedup.merge package

- engine: field-level merge of duplicates into a master record
- draft: interactive two-sided reconciliation with dirty-field tracking
"""

from .draft import MasterSide, MergeDraft
from .engine import merge_contacts, merge_group, merge_records, merge_vcards

__all__ = [
    "MasterSide",
    "MergeDraft",
    "merge_contacts",
    "merge_group",
    "merge_records",
    "merge_vcards",
]
