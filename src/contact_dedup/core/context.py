from __future__ import annotations

from dataclasses import dataclass, field
from logging import Logger
from typing import Any, Dict, List, Optional


@dataclass
class ScanContext:
    """
    State carried through one duplicate scan: where the records came from,
    where results go, and what the run counted or hit.
    """

    config: Any
    logger: Logger

    input_path: Optional[str] = None
    output_path: Optional[str] = None

    stats: Dict[str, int] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    debug: bool = False

    def record_error(self, message: str) -> None:
        self.errors.append(message)
        self.logger.debug("Scan error recorded: %s", message)

    @property
    def failed(self) -> bool:
        return bool(self.errors)
