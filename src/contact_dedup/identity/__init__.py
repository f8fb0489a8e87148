"""
Identifiers for duplicate groups.
"""
