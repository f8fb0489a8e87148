from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet

# ---------------------------------------------------------------------------
# Global thresholds / defaults (config can override)
# ---------------------------------------------------------------------------

DEFAULT_SIMILARITY_THRESHOLD = 0.8
DEFAULT_MIN_PHONE_DIGITS = 6
DEFAULT_MIN_PHONETIC_NAME_LENGTH = 3

GENERIC_EMAIL_PREFIXES: FrozenSet[str] = frozenset({
    "info", "contact", "kontakt", "office", "admin", "sales", "support",
    "hello", "mail", "team", "service", "buchhaltung", "invoice",
})


@dataclass(frozen=True)
class MatchOptions:
    """Tunables for indexing and group assembly."""

    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    min_phone_digits: int = DEFAULT_MIN_PHONE_DIGITS
    min_phonetic_name_length: int = DEFAULT_MIN_PHONETIC_NAME_LENGTH
    generic_email_prefixes: FrozenSet[str] = field(default=GENERIC_EMAIL_PREFIXES)
    deterministic_group_ids: bool = False

    @classmethod
    def from_config(cls, cfg: Any) -> "MatchOptions":
        """Map the ``matching`` section of the YAML config; missing keys keep defaults."""
        section = getattr(cfg, "matching", None) or {}
        prefixes = section.get("generic_email_prefixes")
        return cls(
            similarity_threshold=float(
                section.get("similarity_threshold", DEFAULT_SIMILARITY_THRESHOLD)
            ),
            min_phone_digits=int(section.get("min_phone_digits", DEFAULT_MIN_PHONE_DIGITS)),
            min_phonetic_name_length=int(
                section.get("min_phonetic_name_length", DEFAULT_MIN_PHONETIC_NAME_LENGTH)
            ),
            generic_email_prefixes=(
                frozenset(str(p).strip().lower() for p in prefixes)
                if prefixes
                else GENERIC_EMAIL_PREFIXES
            ),
            deterministic_group_ids=bool(section.get("deterministic_group_ids", False)),
        )
