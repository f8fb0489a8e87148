from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


@dataclass
class ContactRecord:
    """
    A stored contact as handed over by the contact store.

    Attributes:
        id: Opaque, stable record identifier.
        display_name: Name shown in lists; usually the vCard FN.
        organization: Optional organization shown next to the name.
        raw_contact_text: The vCard text holding EMAIL/TEL/... lines.
        images: Stored card images; part of the record identity, never merged.
    """
    id: str
    display_name: str = ""
    organization: Optional[str] = None
    raw_contact_text: str = ""
    images: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContactRecord":
        """
        Build a record from the store's JSON shape.

        Accepts both the short keys used by the store (name/org/vcard) and
        the long attribute names.
        """
        if "id" not in data:
            raise ValueError(f"Contact record without id: {data!r}")
        return cls(
            id=str(data["id"]),
            display_name=data.get("display_name", data.get("name")) or "",
            organization=data.get("organization", data.get("org")) or None,
            raw_contact_text=data.get("raw_contact_text", data.get("vcard")) or "",
            images=list(data.get("images") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "organization": self.organization,
            "raw_contact_text": self.raw_contact_text,
            "images": list(self.images),
        }


@dataclass
class LightContact:
    """Matching view of a record; built once per record during indexing."""
    id: str
    name: str
    org: Optional[str] = None
    emails: List[str] = field(default_factory=list)
    phones: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class DuplicateGroup:
    id: str
    contact_ids: Tuple[str, ...]
    confidence: Confidence
    reason: str

    def __post_init__(self) -> None:
        if len(self.contact_ids) < 2:
            raise ValueError("A duplicate group needs at least two contact ids")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "contact_ids": list(self.contact_ids),
            "confidence": self.confidence.value,
            "reason": self.reason,
        }


__all__ = [
    "Confidence",
    "ContactRecord",
    "LightContact",
    "DuplicateGroup",
]
