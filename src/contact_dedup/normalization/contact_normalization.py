"""
contact_normalization.py
String, name and phone normalization shared by indexing, disambiguation and merge.

All helpers are total: ``None`` or empty input yields ``""``.
"""

from __future__ import annotations

import re
from typing import Optional

_WS_RE = re.compile(r"\s+")
_PHONE_NOISE_RE = re.compile(r"[^0-9+]")

# Leading salutations/titles; German "Hr."/"Fr." included.
NAME_TITLES = ("dr.", "prof.", "mr.", "mrs.", "hr.", "fr.")
_TITLE_RE = re.compile(
    r"^(?:" + "|".join(re.escape(t) for t in NAME_TITLES) + r")\s+",
    re.IGNORECASE,
)


def normalize_string(s: Optional[str]) -> str:
    """Lower-case, trim and collapse internal whitespace runs to one space."""
    if not s:
        return ""
    return _WS_RE.sub(" ", str(s).lower().strip())


def normalize_name(s: Optional[str]) -> str:
    """
    normalize_string plus stripping leading titles.

    Stacked titles ("Prof. Dr. Anna Weber") are stripped one after another.
    """
    name = normalize_string(s)
    while True:
        stripped = _TITLE_RE.sub("", name, count=1)
        if stripped == name:
            return name.strip()
        name = stripped


def clean_phone_number(s: Optional[str]) -> str:
    """Keep digits and '+' only. No country-code normalization."""
    if not s:
        return ""
    return _PHONE_NOISE_RE.sub("", str(s))


def email_local_part(email: Optional[str]) -> str:
    return normalize_string(email).split("@", 1)[0]


__all__ = [
    "NAME_TITLES",
    "normalize_string",
    "normalize_name",
    "clean_phone_number",
    "email_local_part",
]
