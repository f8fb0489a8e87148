"""
vCard parse/generate helpers used by the merge engine.
"""

from .codec import (
    ContactFields,
    NameParts,
    PostalAddress,
    TypedAddress,
    TypedValue,
    generate_contact_text,
    parse_contact_text,
)

__all__ = [
    "ContactFields",
    "NameParts",
    "PostalAddress",
    "TypedAddress",
    "TypedValue",
    "generate_contact_text",
    "parse_contact_text",
]
