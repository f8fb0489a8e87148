"""
Candidate indexing for duplicate detection.

One pass over the record set fills four parallel indexes:

- email_index:       normalized email      -> [record ids]
- phone_index:       cleaned phone number  -> [record ids]
- exact_name_index:  normalized name       -> [record ids]
- phonetic_index:    Cologne code of name  -> [record ids]

Buckets keep insertion order so group assembly is reproducible for a given
record order.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterable, List, Optional

from contact_dedup.logging import get_logger
from contact_dedup.models import ContactRecord, DuplicateGroup, LightContact
from contact_dedup.normalization.contact_normalization import (
    clean_phone_number,
    normalize_name,
    normalize_string,
)
from contact_dedup.normalization.phonetics import cologne_phonetics
from contact_dedup.resolution.grouping import assemble_groups
from contact_dedup.resolution.options import MatchOptions

log = get_logger("indexer")

# Folded vCard lines continue with a single leading space or tab.
_FOLD_RE = re.compile(r"\r?\n[ \t]")

# EMAIL/TEL lines with any parameters and an optional "itemN." group prefix.
_EMAIL_LINE_RE = re.compile(r"^(?:[\w-]+\.)?EMAIL(?:;[^:\r\n]*)?:(.*)$", re.IGNORECASE | re.MULTILINE)
_TEL_LINE_RE = re.compile(r"^(?:[\w-]+\.)?TEL(?:;[^:\r\n]*)?:(.*)$", re.IGNORECASE | re.MULTILINE)

_MAILTO_RE = re.compile(r"^mailto:", re.IGNORECASE)
_TEL_URI_RE = re.compile(r"^tel:", re.IGNORECASE)


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for v in values:
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return out


def extract_emails(raw_text: str) -> List[str]:
    text = _FOLD_RE.sub("", raw_text or "")
    return _unique(
        normalize_string(_MAILTO_RE.sub("", m.group(1).strip()))
        for m in _EMAIL_LINE_RE.finditer(text)
    )


def extract_phones(raw_text: str, min_digits: int = 6) -> List[str]:
    """Cleaned phone numbers; shorter numbers (extensions, fragments) are dropped."""
    text = _FOLD_RE.sub("", raw_text or "")
    phones = (
        clean_phone_number(_TEL_URI_RE.sub("", m.group(1).strip()))
        for m in _TEL_LINE_RE.finditer(text)
    )
    return _unique(p for p in phones if len(p) >= min_digits)


def build_light_contact(record: ContactRecord, min_phone_digits: int = 6) -> LightContact:
    return LightContact(
        id=record.id,
        name=record.display_name or "",
        org=record.organization or None,
        emails=extract_emails(record.raw_contact_text),
        phones=extract_phones(record.raw_contact_text, min_phone_digits),
    )


class DedupIndexer:
    """
    Builds the candidate indexes from records fed one at a time.

    Usage:
        indexer = DedupIndexer()
        for record in records:
            indexer.add(record)
        groups = indexer.get_results()
    """

    def __init__(self, options: Optional[MatchOptions] = None):
        self.options = options or MatchOptions()
        self.contacts: Dict[str, LightContact] = {}
        self.email_index: Dict[str, List[str]] = {}
        self.phone_index: Dict[str, List[str]] = {}
        self.exact_name_index: Dict[str, List[str]] = {}
        self.phonetic_index: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return len(self.contacts)

    def add(self, record: ContactRecord) -> LightContact:
        if record.id in self.contacts:
            log.warning("Record %s already indexed; ignoring repeated add", record.id)
            return self.contacts[record.id]

        contact = build_light_contact(record, self.options.min_phone_digits)
        self.contacts[contact.id] = contact

        for email in contact.emails:
            self.email_index.setdefault(email, []).append(contact.id)

        for phone in contact.phones:
            self.phone_index.setdefault(phone, []).append(contact.id)

        name = normalize_name(contact.name)
        if name:
            self.exact_name_index.setdefault(name, []).append(contact.id)

        if len(name) >= self.options.min_phonetic_name_length:
            code = cologne_phonetics(name)
            if code:
                self.phonetic_index.setdefault(code, []).append(contact.id)

        return contact

    def add_all(
        self,
        records: Iterable[ContactRecord],
        checkpoint: Optional[Callable[[], None]] = None,
    ) -> int:
        count = 0
        for record in records:
            self.add(record)
            count += 1
            if checkpoint is not None and count % 1000 == 0:
                checkpoint()
        log.info(
            "Indexed %d records: emails=%d phones=%d names=%d phonetic=%d",
            count,
            len(self.email_index),
            len(self.phone_index),
            len(self.exact_name_index),
            len(self.phonetic_index),
        )
        return count

    def get_contact(self, contact_id: str) -> LightContact:
        return self.contacts[contact_id]

    def get_results(
        self,
        checkpoint: Optional[Callable[[], None]] = None,
    ) -> List[DuplicateGroup]:
        return assemble_groups(self, checkpoint=checkpoint)


__all__ = [
    "DedupIndexer",
    "build_light_contact",
    "extract_emails",
    "extract_phones",
]
