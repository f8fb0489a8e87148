"""
Interactive reconciliation of one duplicate pair.

The draft is a two-state machine (master is A / master is B). Switching the
master re-derives every field from the new master except the ones the
reviewer edited (dirty fields), which are kept verbatim. Committing runs the
automatic merge seeded with the draft's values; dirty fields are never
touched by the union or back-fill.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Set

from contact_dedup.merge.engine import (
    NOTE_SEPARATOR,
    fields_for_record,
    merge_field_sets,
    record_from_fields,
)
from contact_dedup.models import ContactRecord
from contact_dedup.vcard.codec import FIELD_KEYS, ContactFields


class MasterSide(str, Enum):
    A = "A"
    B = "B"

    def other(self) -> "MasterSide":
        return MasterSide.B if self is MasterSide.A else MasterSide.A


@dataclass
class MergeDraft:
    record_a: ContactRecord
    record_b: ContactRecord
    fields_a: ContactFields
    fields_b: ContactFields
    master_side: MasterSide = MasterSide.A
    fields: ContactFields = field(default_factory=ContactFields)
    dirty_fields: Set[str] = field(default_factory=set)

    @classmethod
    def from_records(
        cls,
        record_a: ContactRecord,
        record_b: ContactRecord,
        master_side: MasterSide = MasterSide.A,
    ) -> "MergeDraft":
        fields_a = fields_for_record(record_a)
        fields_b = fields_for_record(record_b)
        draft = cls(
            record_a=record_a,
            record_b=record_b,
            fields_a=fields_a,
            fields_b=fields_b,
            master_side=master_side,
        )
        draft.fields = draft.master_fields.copy()
        return draft

    # ------------------------------------------------------------------
    # Sides
    # ------------------------------------------------------------------

    @property
    def master_record(self) -> ContactRecord:
        return self.record_a if self.master_side is MasterSide.A else self.record_b

    @property
    def duplicate_record(self) -> ContactRecord:
        return self.record_b if self.master_side is MasterSide.A else self.record_a

    @property
    def master_fields(self) -> ContactFields:
        return self.fields_a if self.master_side is MasterSide.A else self.fields_b

    @property
    def duplicate_fields(self) -> ContactFields:
        return self.fields_b if self.master_side is MasterSide.A else self.fields_a

    def set_master(self, side: MasterSide) -> None:
        side = MasterSide(side)
        if side is self.master_side:
            return
        self.master_side = side
        source = self.master_fields
        for key in FIELD_KEYS:
            if key not in self.dirty_fields:
                setattr(self.fields, key, copy.deepcopy(getattr(source, key)))
        self.fields.extra_lines = copy.deepcopy(source.extra_lines)
        self.fields.valid = source.valid

    def swap_master(self) -> None:
        self.set_master(self.master_side.other())

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def edit(self, key: str, value: Any) -> None:
        if key not in FIELD_KEYS:
            raise KeyError(f"Unknown contact field: {key!r}")
        setattr(self.fields, key, value)
        self.dirty_fields.add(key)

    def take_from_duplicate(self, key: str) -> None:
        """Arrow-style pick: use the other side's value for one field."""
        self.edit(key, copy.deepcopy(getattr(self.duplicate_fields, key)))

    def reset(self, key: str) -> None:
        if key not in FIELD_KEYS:
            raise KeyError(f"Unknown contact field: {key!r}")
        self.dirty_fields.discard(key)
        setattr(self.fields, key, copy.deepcopy(getattr(self.master_fields, key)))

    def is_dirty(self, key: str) -> bool:
        return key in self.dirty_fields

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def commit(self, note_separator: str = NOTE_SEPARATOR) -> ContactRecord:
        """Reconciled record carrying the current master's id and images."""
        merged = merge_field_sets(
            self.fields,
            [self.duplicate_fields],
            protected=self.dirty_fields,
            note_separator=note_separator,
        )
        return record_from_fields(self.master_record, merged)


__all__ = ["MasterSide", "MergeDraft"]
