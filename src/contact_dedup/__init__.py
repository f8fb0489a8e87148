"""
contact_dedup: duplicate detection and merging for vCard-backed contact records.
"""

__version__ = "0.1.0"
