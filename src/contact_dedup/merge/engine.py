"""
Field-level merge of duplicate contacts into a chosen master.

Rules (applied per duplicate, in order):
  - multi-valued fields (emails, phones, urls, addresses): union, master's
    values first, duplicates appended only if their normalized form is new
  - single-valued fields (organization, title, role, birthday): filled from
    the duplicate only when the master's value is empty
  - name: filled from the duplicate only when the master has none
  - note: concatenated with a visible separator unless already contained

The master's identity (id, images) always survives; nothing is dropped.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from contact_dedup.core.exceptions import MasterNotFoundError
from contact_dedup.logging import get_logger
from contact_dedup.models import ContactRecord, DuplicateGroup
from contact_dedup.vcard.codec import (
    FIELD_KEYS,
    MULTI_VALUED_KEYS,
    SINGLE_VALUED_KEYS,
    ContactFields,
    generate_contact_text,
    parse_contact_text,
    value_key,
)

log = get_logger("merge_engine")

NOTE_SEPARATOR = "\n\n-- Merged Note --\n"


# -----------------------------------------------------------------------------
# Field-set merge
# -----------------------------------------------------------------------------

def merge_field_sets(
    master: ContactFields,
    duplicates: Iterable[ContactFields],
    *,
    protected: Iterable[str] = (),
    note_separator: str = NOTE_SEPARATOR,
) -> ContactFields:
    """
    Merge structured field sets; returns a new ContactFields.

    Keys in ``protected`` keep the master's value untouched (manual edits).
    """
    merged = master.copy()
    keep = set(protected)

    for dup in duplicates:
        for key in MULTI_VALUED_KEYS:
            if key in keep:
                continue
            target: List[Any] = getattr(merged, key)
            seen = {value_key(key, item) for item in target}
            for item in getattr(dup, key):
                k = value_key(key, item)
                if k and k not in seen:
                    target.append(copy.deepcopy(item))
                    seen.add(k)

        for key in SINGLE_VALUED_KEYS:
            if key in keep:
                continue
            if not getattr(merged, key) and getattr(dup, key):
                setattr(merged, key, getattr(dup, key))

        if "full_name" not in keep and not merged.full_name and dup.full_name:
            merged.full_name = dup.full_name
        if "name" not in keep and merged.name.is_empty() and not dup.name.is_empty():
            merged.name = copy.deepcopy(dup.name)

        if "note" not in keep and dup.note:
            if not merged.note:
                merged.note = dup.note
            elif dup.note not in merged.note:
                merged.note = f"{merged.note}{note_separator}{dup.note}"

    return merged


def merge_vcards(
    master_text: str,
    duplicate_texts: Sequence[str],
    *,
    note_separator: str = NOTE_SEPARATOR,
) -> str:
    """Merge duplicate vCards into the master vCard; returns regenerated text."""
    master = parse_contact_text(master_text)
    dups = [parse_contact_text(t) for t in duplicate_texts]
    merged = merge_field_sets(master, dups, note_separator=note_separator)
    return generate_contact_text(merged)


# -----------------------------------------------------------------------------
# Record-level merge
# -----------------------------------------------------------------------------

def apply_overrides(fields: ContactFields, overrides: Optional[Mapping[str, Any]]) -> ContactFields:
    """Set manually chosen values on the field set; unknown keys are rejected."""
    if not overrides:
        return fields
    for key, value in overrides.items():
        if key not in FIELD_KEYS:
            raise KeyError(f"Unknown contact field: {key!r}")
        setattr(fields, key, value)
    return fields


def fields_for_record(record: ContactRecord) -> ContactFields:
    """
    Parse the record's text; name and organization fall back to the record
    attributes when the card lacks them.
    """
    fields = parse_contact_text(record.raw_contact_text)
    if not fields.full_name and record.display_name:
        fields.full_name = record.display_name
    if not fields.organization and record.organization:
        fields.organization = record.organization
    return fields


def record_from_fields(master: ContactRecord, fields: ContactFields) -> ContactRecord:
    """
    Build the reconciled record: master identity + regenerated text.

    display_name/organization are re-derived from the merged text so they
    never diverge from the content.
    """
    text = generate_contact_text(fields)
    reparsed = parse_contact_text(text)
    return ContactRecord(
        id=master.id,
        display_name=reparsed.full_name or master.display_name,
        organization=reparsed.organization or master.organization,
        raw_contact_text=text,
        images=list(master.images),
    )


def merge_contacts(
    master: ContactRecord,
    duplicates: Sequence[ContactRecord],
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    note_separator: str = NOTE_SEPARATOR,
) -> ContactRecord:
    """
    Merge ``duplicates`` into ``master``. The caller's records are not mutated.

    ``overrides`` map field keys to manually chosen values; they win over the
    automatic union and back-fill.
    """
    master_fields = fields_for_record(master)
    dup_fields = [parse_contact_text(d.raw_contact_text) for d in duplicates]

    merged = merge_field_sets(
        master_fields,
        dup_fields,
        protected=(overrides or {}).keys(),
        note_separator=note_separator,
    )
    apply_overrides(merged, overrides)

    result = record_from_fields(master, merged)
    log.info(
        "Merged %d duplicate(s) into %s: emails=%d phones=%d",
        len(duplicates),
        master.id,
        len(merged.emails),
        len(merged.phones),
    )
    return result


def merge_records(
    records: Iterable[ContactRecord],
    master_id: str,
    duplicate_ids: Iterable[str],
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    note_separator: str = NOTE_SEPARATOR,
) -> ContactRecord:
    """
    Merge the records named by ``duplicate_ids`` into the one named ``master_id``.

    Raises MasterNotFoundError when the master is not among ``records``.
    Duplicates missing from ``records`` are skipped with a warning.
    """
    by_id: Dict[str, ContactRecord] = {r.id: r for r in records}
    master = by_id.get(master_id)
    if master is None:
        raise MasterNotFoundError(f"Master record {master_id!r} not found in provided records")

    duplicates: List[ContactRecord] = []
    for cid in duplicate_ids:
        if cid == master_id:
            continue
        rec = by_id.get(cid)
        if rec is None:
            log.warning("Duplicate %s not in provided records; skipped", cid)
            continue
        duplicates.append(rec)

    return merge_contacts(master, duplicates, overrides, note_separator=note_separator)


def merge_group(
    records: Iterable[ContactRecord],
    group: DuplicateGroup,
    master_id: str,
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    note_separator: str = NOTE_SEPARATOR,
) -> ContactRecord:
    """Merge every other member of ``group`` into ``master_id``."""
    return merge_records(
        records,
        master_id,
        group.contact_ids,
        overrides,
        note_separator=note_separator,
    )


__all__ = [
    "NOTE_SEPARATOR",
    "merge_field_sets",
    "merge_vcards",
    "apply_overrides",
    "fields_for_record",
    "record_from_fields",
    "merge_contacts",
    "merge_records",
    "merge_group",
]
