# tests/test_merge_engine.py

import pytest

from contact_dedup.core.exceptions import MasterNotFoundError
from contact_dedup.merge.engine import (
    NOTE_SEPARATOR,
    merge_contacts,
    merge_group,
    merge_records,
    merge_vcards,
)
from contact_dedup.models import Confidence, DuplicateGroup
from contact_dedup.vcard.codec import parse_contact_text


@pytest.fixture
def master(make_record):
    return make_record(
        "m",
        "Jane Doe",
        emails=["jane@example.com"],
        phones=["+491701234567"],
        note="Met at the fair",
        images=["img-1"],
    )


@pytest.fixture
def duplicate(make_record):
    return make_record(
        "d",
        "Jane Doe",
        emails=["JANE@example.com", "j.doe@acme.de"],
        phones=["+49 170 1234567"],
        org="Acme GmbH",
        note="Prefers email",
    )


def test_multi_valued_fields_are_unioned(master, duplicate):
    merged = merge_contacts(master, [duplicate])
    fields = parse_contact_text(merged.raw_contact_text)

    assert [e.value for e in fields.emails] == ["jane@example.com", "j.doe@acme.de"]
    assert len(fields.phones) == 1


def test_empty_single_valued_fields_are_back_filled(master, duplicate):
    merged = merge_contacts(master, [duplicate])
    assert merged.organization == "Acme GmbH"
    assert parse_contact_text(merged.raw_contact_text).organization == "Acme GmbH"


def test_notes_are_concatenated(master, duplicate):
    merged = merge_contacts(master, [duplicate])
    note = parse_contact_text(merged.raw_contact_text).note
    assert note == f"Met at the fair{NOTE_SEPARATOR}Prefers email"


def test_master_identity_survives(master, duplicate):
    merged = merge_contacts(master, [duplicate])
    assert merged.id == "m"
    assert merged.images == ["img-1"]
    assert merged.display_name == "Jane Doe"


def test_inputs_are_not_mutated(master, duplicate):
    before = master.raw_contact_text
    merge_contacts(master, [duplicate])
    assert master.raw_contact_text == before


def test_merge_is_idempotent(master, duplicate):
    once = merge_contacts(master, [duplicate])
    twice = merge_contacts(once, [duplicate])

    f1 = parse_contact_text(once.raw_contact_text)
    f2 = parse_contact_text(twice.raw_contact_text)
    assert [e.value for e in f2.emails] == [e.value for e in f1.emails]
    assert [p.value for p in f2.phones] == [p.value for p in f1.phones]
    assert f2.note == f1.note


def test_master_values_win(make_record):
    master = make_record("m", "Jane Doe", org="Acme GmbH")
    dup = make_record("d", "Jane Doe", org="Globex AG")
    assert merge_contacts(master, [dup]).organization == "Acme GmbH"


def test_overrides_win_over_automatic_merge(master, duplicate):
    merged = merge_contacts(master, [duplicate], overrides={"organization": "Doe Consulting"})
    assert merged.organization == "Doe Consulting"


def test_unknown_override_is_rejected(master, duplicate):
    with pytest.raises(KeyError):
        merge_contacts(master, [duplicate], overrides={"shoe_size": "42"})


def test_custom_note_separator(master, duplicate):
    merged = merge_contacts(master, [duplicate], note_separator=" | ")
    assert parse_contact_text(merged.raw_contact_text).note == "Met at the fair | Prefers email"


def test_merge_records_requires_master(master, duplicate):
    with pytest.raises(MasterNotFoundError):
        merge_records([master, duplicate], "missing", ["d"])


def test_master_not_found_is_a_lookup_error(master):
    with pytest.raises(LookupError):
        merge_records([master], "missing", [])


def test_merge_records_skips_unknown_duplicates(master, duplicate):
    merged = merge_records([master, duplicate], "m", ["d", "ghost", "m"])
    assert merged.organization == "Acme GmbH"


def test_merge_group_uses_every_other_member(master, duplicate):
    group = DuplicateGroup(
        id="g1",
        contact_ids=("m", "d"),
        confidence=Confidence.HIGH,
        reason="Same email (jane@example.com)",
    )
    merged = merge_group([master, duplicate], group, "d")
    assert merged.id == "d"
    assert merged.organization == "Acme GmbH"
    fields = parse_contact_text(merged.raw_contact_text)
    assert fields.note == f"Prefers email{NOTE_SEPARATOR}Met at the fair"


def test_merge_vcards_on_text(master, duplicate):
    text = merge_vcards(master.raw_contact_text, [duplicate.raw_contact_text])
    fields = parse_contact_text(text)
    assert fields.organization == "Acme GmbH"
    assert len(fields.emails) == 2


def test_merging_record_with_itself_adds_nothing(master):
    merged = merge_contacts(master, [master])
    before = parse_contact_text(master.raw_contact_text)
    after = parse_contact_text(merged.raw_contact_text)

    assert [e.value for e in after.emails] == [e.value for e in before.emails]
    assert [p.value for p in after.phones] == [p.value for p in before.phones]
    assert after.note == before.note


def test_unreadable_master_line_does_not_drop_master_values(make_record):
    master = make_record(
        "m",
        "Jane Doe",
        emails=["jane@x.com"],
        phones=["+49 170 1234567"],
        extra=["OCR noise line"],
    )
    dup = make_record("d", "Jane Doe", emails=["j.doe@acme.com"], org="Acme")

    merged = merge_contacts(master, [dup])
    fields = parse_contact_text(merged.raw_contact_text)

    assert [e.value for e in fields.emails] == ["jane@x.com", "j.doe@acme.com"]
    assert [p.value for p in fields.phones] == ["+49 170 1234567"]
    assert fields.organization == "Acme"
