# tests/test_vcard_codec.py

from contact_dedup.vcard.codec import (
    ContactFields,
    NameParts,
    PostalAddress,
    TypedAddress,
    TypedValue,
    generate_contact_text,
    parse_contact_text,
    value_key,
)

SAMPLE = (
    "BEGIN:VCARD\r\n"
    "VERSION:3.0\r\n"
    "N:Doe;Jane;;;\r\n"
    "FN:Jane Doe\r\n"
    "ORG:Acme GmbH\r\n"
    "TITLE:Engineer\r\n"
    "EMAIL;TYPE=WORK:jane@acme.de\r\n"
    "TEL;TYPE=CELL:+49 170 1234567\r\n"
    "ADR;TYPE=WORK:;;Hauptstr. 1;Berlin;;10115;Germany\r\n"
    "NOTE:Met at the fair\r\n"
    "X-SKYPE:jane.doe.acme\r\n"
    "END:VCARD\r\n"
)


def test_parse_sample_card():
    fields = parse_contact_text(SAMPLE)

    assert fields.valid is True
    assert fields.full_name == "Jane Doe"
    assert fields.name.family == "Doe"
    assert fields.name.given == "Jane"
    assert fields.organization == "Acme GmbH"
    assert fields.title == "Engineer"
    assert [e.value for e in fields.emails] == ["jane@acme.de"]
    assert "WORK" in fields.emails[0].types
    assert [p.value for p in fields.phones] == ["+49 170 1234567"]
    assert fields.note == "Met at the fair"

    assert len(fields.addresses) == 1
    addr = fields.addresses[0].value
    assert addr.street == "Hauptstr. 1"
    assert addr.city == "Berlin"
    assert addr.postal_code == "10115"
    assert addr.country == "Germany"


def test_unmodeled_properties_survive_regeneration():
    fields = parse_contact_text(SAMPLE)
    assert len(fields.extra_lines) == 1

    text = generate_contact_text(fields)
    assert "X-SKYPE:jane.doe.acme" in text

    again = parse_contact_text(text)
    assert again.full_name == "Jane Doe"
    assert again.organization == "Acme GmbH"
    assert any(line.name == "X-SKYPE" for line in again.extra_lines)


def test_malformed_text_is_invalid_not_an_error():
    assert parse_contact_text("this is not a vcard").valid is False
    assert parse_contact_text("").valid is False
    assert parse_contact_text(None).valid is False


def test_generate_derives_structured_name():
    text = generate_contact_text(ContactFields(full_name="Jane Doe"))
    assert text.startswith("BEGIN:VCARD")

    fields = parse_contact_text(text)
    assert fields.full_name == "Jane Doe"
    assert fields.name.family == "Doe"
    assert fields.name.given == "Jane"


def test_generate_writes_types_and_addresses():
    fields = ContactFields(
        full_name="Jane Doe",
        emails=[TypedValue("jane@acme.de", ["WORK"])],
        phones=[TypedValue("+491701234567", ["CELL"])],
        addresses=[TypedAddress(PostalAddress(street="Hauptstr. 1", city="Berlin"), ["HOME"])],
    )
    parsed = parse_contact_text(generate_contact_text(fields))

    assert parsed.emails[0].value == "jane@acme.de"
    assert "WORK" in parsed.emails[0].types
    assert "CELL" in parsed.phones[0].types
    assert parsed.addresses[0].value.city == "Berlin"
    assert "HOME" in parsed.addresses[0].types


def test_name_parts_from_full_name():
    assert NameParts.from_full_name("Jane Mary Doe") == NameParts(family="Doe", given="Jane Mary")
    assert NameParts.from_full_name("Cher") == NameParts(family="Cher")
    assert NameParts.from_full_name("").is_empty()


def test_value_key_normalizes_per_field():
    assert value_key("phones", TypedValue("+49 170 1234567")) == "+491701234567"
    assert value_key("emails", TypedValue(" Jane@Acme.de ")) == "jane@acme.de"
    a = TypedAddress(PostalAddress(city="BERLIN"))
    b = TypedAddress(PostalAddress(city="berlin"))
    assert value_key("addresses", a) == value_key("addresses", b)


def test_unreadable_line_is_skipped():
    text = SAMPLE.replace("X-SKYPE:jane.doe.acme\r\n", "OCR noise line\r\n")
    fields = parse_contact_text(text)

    assert fields.valid is True
    assert fields.full_name == "Jane Doe"
    assert [e.value for e in fields.emails] == ["jane@acme.de"]
    assert [p.value for p in fields.phones] == ["+49 170 1234567"]
