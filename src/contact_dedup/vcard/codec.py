"""
codec.py
vCard text <-> structured field set, built on vobject.

Defines:
- TypedValue:     one value of a multi-valued property plus its TYPE parameters
- PostalAddress:  ADR components
- NameParts:      N components
- ContactFields:  the structured field set the merge engine works on

Properties the field set does not model (PHOTO, CATEGORIES, X-..., NICKNAME)
are kept as opaque vobject lines in ``extra_lines`` and written back unchanged,
so regenerating a card never drops data.

Malformed lines are skipped; text that holds no vCard at all never raises,
the result is an empty ContactFields with ``valid=False`` and a logged warning.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields as dc_fields
from typing import Any, Iterable, List, Optional, Tuple

import vobject
from vobject.base import ContentLine, ParseError
from vobject.vcard import Address, Name

from contact_dedup.logging import get_logger
from contact_dedup.normalization.contact_normalization import clean_phone_number, normalize_string

log = get_logger("vcard_codec")

# Properties mapped onto ContactFields; everything else goes to extra_lines.
_MODELED = {
    "version", "fn", "n", "org", "title", "role", "bday", "note", "uid",
    "email", "tel", "url", "adr",
}


# -----------------------------------------------------------------------------
# Data models
# -----------------------------------------------------------------------------

@dataclass
class TypedValue:
    value: str
    types: List[str] = field(default_factory=list)


@dataclass
class PostalAddress:
    street: str = ""
    city: str = ""
    postal_code: str = ""
    region: str = ""
    country: str = ""
    po_box: str = ""
    extended: str = ""

    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in dc_fields(self))

    def key(self) -> Tuple[str, ...]:
        """Comparison key: every component normalized."""
        return tuple(normalize_string(getattr(self, f.name)) for f in dc_fields(self))


@dataclass
class TypedAddress:
    value: PostalAddress
    types: List[str] = field(default_factory=list)


@dataclass
class NameParts:
    family: str = ""
    given: str = ""
    additional: str = ""
    prefix: str = ""
    suffix: str = ""

    def is_empty(self) -> bool:
        return not any((self.family, self.given, self.additional, self.prefix, self.suffix))

    @classmethod
    def from_full_name(cls, full_name: str) -> "NameParts":
        tokens = (full_name or "").split()
        if not tokens:
            return cls()
        if len(tokens) == 1:
            return cls(family=tokens[0])
        return cls(family=tokens[-1], given=" ".join(tokens[:-1]))

    def display(self) -> str:
        return " ".join(p for p in (self.prefix, self.given, self.additional, self.family, self.suffix) if p)


@dataclass
class ContactFields:
    full_name: str = ""
    name: NameParts = field(default_factory=NameParts)
    organization: str = ""
    title: str = ""
    role: str = ""
    birthday: str = ""
    note: str = ""
    uid: str = ""
    emails: List[TypedValue] = field(default_factory=list)
    phones: List[TypedValue] = field(default_factory=list)
    urls: List[TypedValue] = field(default_factory=list)
    addresses: List[TypedAddress] = field(default_factory=list)
    extra_lines: List[Any] = field(default_factory=list)
    valid: bool = True

    def copy(self) -> "ContactFields":
        return copy.deepcopy(self)


# Keys a reviewer can edit; extra_lines and valid are not fields of the contact.
FIELD_KEYS: Tuple[str, ...] = (
    "full_name", "name", "organization", "title", "role", "birthday", "note",
    "uid", "emails", "phones", "urls", "addresses",
)
SINGLE_VALUED_KEYS: Tuple[str, ...] = ("organization", "title", "role", "birthday")
MULTI_VALUED_KEYS: Tuple[str, ...] = ("emails", "phones", "urls", "addresses")


# -----------------------------------------------------------------------------
# Normalized comparison keys for multi-valued fields
# -----------------------------------------------------------------------------

def value_key(field_key: str, item: Any) -> Any:
    if field_key == "phones":
        return clean_phone_number(item.value)
    if field_key == "addresses":
        return item.value.key()
    return normalize_string(item.value)


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------

def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v).strip() for v in value if v and str(v).strip())
    return str(value).strip()


def _types_of(line: ContentLine) -> List[str]:
    raw: List[str] = list(line.params.get("TYPE", [])) + list(getattr(line, "singletonparams", []))
    types: List[str] = []
    for t in raw:
        for part in str(t).split(","):
            part = part.strip().upper()
            if part and part not in types:
                types.append(part)
    return types


def _lines(card: Any, name: str) -> List[ContentLine]:
    return list(card.contents.get(name, []))


def _first_text(card: Any, name: str) -> str:
    for line in _lines(card, name):
        text = _text(line.value)
        if text:
            return text
    return ""


def _parse_card(card: Any) -> ContactFields:
    out = ContactFields()
    out.full_name = _first_text(card, "fn")

    for line in _lines(card, "n"):
        n = line.value
        out.name = NameParts(
            family=_text(getattr(n, "family", "")),
            given=_text(getattr(n, "given", "")),
            additional=_text(getattr(n, "additional", "")),
            prefix=_text(getattr(n, "prefix", "")),
            suffix=_text(getattr(n, "suffix", "")),
        )
        break

    for line in _lines(card, "org"):
        units = line.value if isinstance(line.value, (list, tuple)) else [line.value]
        org = ", ".join(str(u).strip() for u in units if u and str(u).strip())
        if org:
            out.organization = org
            break

    out.title = _first_text(card, "title")
    out.role = _first_text(card, "role")
    out.birthday = _first_text(card, "bday")
    out.uid = _first_text(card, "uid")
    out.note = "\n\n".join(_text(line.value) for line in _lines(card, "note") if _text(line.value))

    for prop, target in (("email", out.emails), ("tel", out.phones), ("url", out.urls)):
        for line in _lines(card, prop):
            text = _text(line.value)
            if text:
                target.append(TypedValue(value=text, types=_types_of(line)))

    for line in _lines(card, "adr"):
        a = line.value
        addr = PostalAddress(
            street=_text(getattr(a, "street", "")),
            city=_text(getattr(a, "city", "")),
            postal_code=_text(getattr(a, "code", "")),
            region=_text(getattr(a, "region", "")),
            country=_text(getattr(a, "country", "")),
            po_box=_text(getattr(a, "box", "")),
            extended=_text(getattr(a, "extended", "")),
        )
        if not addr.is_empty():
            out.addresses.append(TypedAddress(value=addr, types=_types_of(line)))

    for name, lines in card.contents.items():
        if name in _MODELED:
            continue
        out.extra_lines.extend(ContentLine.duplicate(line) for line in lines)

    return out


def parse_contact_text(text: Optional[str]) -> ContactFields:
    """Parse one vCard; unparseable input yields ``ContactFields(valid=False)``."""
    if not text or not text.strip():
        return ContactFields(valid=False)

    try:
        # Unreadable lines (OCR noise) are dropped; the rest of the card survives.
        card = vobject.readOne(text, ignoreUnreadable=True)
    except (ParseError, ValueError, StopIteration) as exc:
        log.warning("Unparseable contact text (%s); treating as empty", exc)
        return ContactFields(valid=False)

    if (getattr(card, "name", "") or "").upper() != "VCARD":
        log.warning("Contact text holds a %s component, not a VCARD", getattr(card, "name", "?"))
        return ContactFields(valid=False)

    return _parse_card(card)


# -----------------------------------------------------------------------------
# Generation
# -----------------------------------------------------------------------------

def _add_text(card: Any, name: str, value: str) -> None:
    if value:
        card.add(name).value = value


def _add_typed(card: Any, name: str, items: Iterable[TypedValue]) -> None:
    for item in items:
        if not item.value:
            continue
        line = card.add(name)
        line.value = item.value
        if item.types:
            line.params["TYPE"] = list(item.types)


def generate_contact_text(fields: ContactFields) -> str:
    """Serialize the field set as vCard 3.0 text."""
    card = vobject.vCard()

    name = fields.name if not fields.name.is_empty() else NameParts.from_full_name(fields.full_name)
    full_name = fields.full_name or name.display()

    card.add("n").value = Name(
        family=name.family,
        given=name.given,
        additional=name.additional,
        prefix=name.prefix,
        suffix=name.suffix,
    )
    card.add("fn").value = full_name

    if fields.organization:
        card.add("org").value = [fields.organization]
    _add_text(card, "title", fields.title)
    _add_text(card, "role", fields.role)

    _add_typed(card, "email", fields.emails)
    _add_typed(card, "tel", fields.phones)

    for item in fields.addresses:
        if item.value.is_empty():
            continue
        a = item.value
        line = card.add("adr")
        line.value = Address(
            street=a.street,
            city=a.city,
            region=a.region,
            code=a.postal_code,
            country=a.country,
            box=a.po_box,
            extended=a.extended,
        )
        if item.types:
            line.params["TYPE"] = list(item.types)

    _add_typed(card, "url", fields.urls)
    _add_text(card, "bday", fields.birthday)
    _add_text(card, "note", fields.note)
    _add_text(card, "uid", fields.uid)

    for line in fields.extra_lines:
        card.add(ContentLine.duplicate(line))

    return card.serialize()


__all__ = [
    "ContactFields",
    "NameParts",
    "PostalAddress",
    "TypedAddress",
    "TypedValue",
    "FIELD_KEYS",
    "SINGLE_VALUED_KEYS",
    "MULTI_VALUED_KEYS",
    "value_key",
    "parse_contact_text",
    "generate_contact_text",
]
