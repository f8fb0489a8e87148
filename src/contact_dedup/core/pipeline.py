from __future__ import annotations

import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional

from contact_dedup.core.context import ScanContext
from contact_dedup.core.exceptions import ScanCancelledError, ScanExecutionError
from contact_dedup.models import ContactRecord, DuplicateGroup
from contact_dedup.resolution.indexer import DedupIndexer
from contact_dedup.resolution.options import MatchOptions


def _checkpoint_for(cancel_event: Optional[threading.Event]) -> Callable[[], None]:
    def checkpoint() -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ScanCancelledError("Duplicate scan cancelled")

    return checkpoint


def find_duplicates(
    records: Iterable[ContactRecord],
    options: Optional[MatchOptions] = None,
) -> List[DuplicateGroup]:
    """Synchronous one-shot scan: index every record, then assemble groups."""
    indexer = DedupIndexer(options)
    indexer.add_all(records)
    return indexer.get_results()


class ScanHandle:
    """Caller-side view of a scan running on the worker thread."""

    def __init__(self, future: Future, cancel_event: threading.Event):
        self._future = future
        self._cancel_event = cancel_event

    def cancel(self) -> None:
        """Request cancellation; a running scan stops at its next checkpoint."""
        self._cancel_event.set()
        self._future.cancel()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> List[DuplicateGroup]:
        """
        Block for the groups.

        Raises ScanExecutionError on failure and ScanCancelledError when cancelled.
        """
        try:
            return self._future.result(timeout)
        except CancelledError:
            raise ScanCancelledError("Duplicate scan cancelled before it started") from None


class DuplicateScanPipeline:
    """
    Orchestrates the duplicate scan: indexing, then group assembly.
    No matching logic lives here.
    """

    def __init__(self, context: ScanContext, options: Optional[MatchOptions] = None):
        self.ctx = context
        self.log = context.logger
        self.options = options or MatchOptions.from_config(context.config)

    def run(
        self,
        records: Iterable[ContactRecord],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[DuplicateGroup]:
        self.log.info("Duplicate scan starting")
        checkpoint = _checkpoint_for(cancel_event)

        try:
            indexer = DedupIndexer(self.options)
            count = indexer.add_all(records, checkpoint=checkpoint)
            checkpoint()
            groups = indexer.get_results(checkpoint=checkpoint)

            self.ctx.stats["records"] = count
            self.ctx.stats["groups"] = len(groups)
            self.log.info("Duplicate scan completed: records=%d groups=%d", count, len(groups))

            return groups

        except ScanCancelledError:
            self.log.warning("Duplicate scan cancelled")
            raise

        except Exception as exc:
            self.log.exception("Duplicate scan failed")
            self.ctx.record_error(str(exc))
            raise ScanExecutionError(str(exc)) from exc

    def submit(self, records: Iterable[ContactRecord]) -> ScanHandle:
        """
        Run the scan on a worker thread.

        The full record set is snapshotted up front: one message in, one
        result (or one terminal error) out.
        """
        snapshot = list(records)
        cancel_event = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dedup-scan")
        try:
            future = executor.submit(self.run, snapshot, cancel_event)
        finally:
            executor.shutdown(wait=False)
        return ScanHandle(future, cancel_event)


__all__ = [
    "DuplicateScanPipeline",
    "ScanHandle",
    "find_duplicates",
]
