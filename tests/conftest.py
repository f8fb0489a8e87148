import sys
from pathlib import Path

import pytest

# Ensure the project src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from contact_dedup.models import ContactRecord  # noqa: E402


def build_vcard(name, emails=(), phones=(), org=None, note=None, extra=()):
    lines = ["BEGIN:VCARD", "VERSION:3.0", f"FN:{name}"]
    if org:
        lines.append(f"ORG:{org}")
    lines.extend(f"EMAIL;TYPE=INTERNET:{e}" for e in emails)
    lines.extend(f"TEL;TYPE=CELL:{p}" for p in phones)
    if note:
        lines.append(f"NOTE:{note}")
    lines.extend(extra)
    lines.append("END:VCARD")
    return "\r\n".join(lines) + "\r\n"


@pytest.fixture
def make_record():
    """Factory for ContactRecord objects backed by a minimal vCard."""

    def _make(record_id, name, emails=(), phones=(), org=None, note=None, extra=(), images=()):
        return ContactRecord(
            id=record_id,
            display_name=name,
            organization=org,
            raw_contact_text=build_vcard(name, emails, phones, org, note, extra),
            images=list(images),
        )

    return _make
