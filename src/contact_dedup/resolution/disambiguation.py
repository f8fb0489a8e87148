"""
Disambiguation between candidates that look alike on the surface.

Two records sharing a name (or a phonetic code) are only grouped when nothing
says they are different people. Absence of data in a category is never a
conflict; only present-but-mismatching data is.
"""

from __future__ import annotations

from contact_dedup.models import LightContact
from contact_dedup.normalization.contact_normalization import (
    email_local_part,
    normalize_name,
    normalize_string,
)


def is_name_in_email(name: str, email: str) -> bool:
    """True when a name token longer than two characters occurs in the email local part."""
    if not name or not email:
        return False
    parts = [p for p in normalize_name(name).split(" ") if len(p) > 2]
    user = email_local_part(email)
    return any(part in user for part in parts)


def _org_conflict(c1: LightContact, c2: LightContact) -> bool:
    if c1.org and c2.org:
        return normalize_string(c1.org) != normalize_string(c2.org)
    return False


def _email_conflict(c1: LightContact, c2: LightContact) -> bool:
    if not c1.emails or not c2.emails:
        return False
    if set(c1.emails) & set(c2.emails):
        return False
    # Different addresses of the same person usually carry the name: jane.doe@ vs j.doe@
    name1_in_emails2 = any(is_name_in_email(c1.name, e) for e in c2.emails)
    name2_in_emails1 = any(is_name_in_email(c2.name, e) for e in c1.emails)
    return not name1_in_emails2 and not name2_in_emails1


def _phone_conflict(c1: LightContact, c2: LightContact) -> bool:
    if not c1.phones or not c2.phones:
        return False
    return not (set(c1.phones) & set(c2.phones))


def are_different_people(c1: LightContact, c2: LightContact) -> bool:
    """
    True ("do not merge") if the organizations differ, the emails are disjoint
    and no name shows up in the other's addresses, or the phones are disjoint.
    """
    return _org_conflict(c1, c2) or _email_conflict(c1, c2) or _phone_conflict(c1, c2)


__all__ = ["is_name_in_email", "are_different_people"]
