from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Dict, List

from rich.console import Console

from contact_dedup.config import get_config
from contact_dedup.core.context import ScanContext
from contact_dedup.logging import get_logger
from contact_dedup.models import ContactRecord

console = Console()
log = get_logger("cli")


def load_records(path: Path, *, verbose: bool = False) -> List[ContactRecord]:
    """
    Load contact records from a JSON export.

    Accepts either a list of record dicts or an object with a "records" list.
    """
    if not path.exists():
        raise FileNotFoundError(path)

    t0 = time.perf_counter()

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("records", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of contact records")

    records = [ContactRecord.from_dict(item) for item in data]

    elapsed = time.perf_counter() - t0

    if verbose:
        console.log(f"Loaded {len(records)} records in {elapsed:.2f}s")

    return records


def build_context(*, input_path: Path | None, output_path: Path | None, verbose: bool) -> ScanContext:
    cfg = get_config()
    return ScanContext(
        config=cfg,
        logger=log,
        input_path=str(input_path) if input_path else None,
        output_path=str(output_path) if output_path else None,
        debug=bool(cfg.debug) or verbose,
    )


def write_json(
    data: Dict[str, Any],
    *,
    out: Path | None,
    pretty: bool,
):
    """
    Write JSON to stdout or file.
    """
    if pretty:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
    else:
        payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    if out:
        out.write_text(payload, encoding="utf-8")
    else:
        print(payload)
