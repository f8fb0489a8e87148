# src/contact_dedup/identity/uuid_factory.py
from __future__ import annotations

import hashlib
import uuid
from typing import Iterable


def _stable_hash(key: str) -> str:
    # SHA1 is only a fingerprint here, not a security boundary.
    return hashlib.sha1(key.encode("utf-8")).hexdigest()


def _uuid_from_key(key: str) -> str:
    """Canonical 8-4-4-4-12 form of the key's SHA1; same key, same value."""
    return str(uuid.UUID(hex=_stable_hash(key)[:32]))


def new_group_id() -> str:
    """Fresh opaque identifier for one duplicate group of one scan."""
    return str(uuid.uuid4())


def uuid_for_group(contact_ids: Iterable[str], reason: str) -> str:
    """
    Deterministic identity for a duplicate group.
    Same members + same reason -> same id across scans (used for reproducible exports).
    """
    members = ",".join(contact_ids)
    return _uuid_from_key(f"GRP|{members}|{(reason or '').strip()}")


__all__ = [
    "new_group_id",
    "uuid_for_group",
]
