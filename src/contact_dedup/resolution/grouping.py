"""
Group assembly over the candidate indexes.

Stages run in a fixed order and are not reorderable without changing output:

  1) email buckets      HIGH (generic addresses: MEDIUM, only with identical names)
  2) phone buckets      HIGH
  3) exact-name buckets MEDIUM, only if no pair looks like different people
  4) phonetic buckets   MEDIUM, pairwise, name similarity above threshold

Claiming is greedy: an id placed in a group is claimed, and later stages only
group ids that are still unclaimed. A record therefore appears in at most one
group, and a strong later link (e.g. a shared phone) is not revisited once an
earlier stage absorbed the record.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Set

from contact_dedup.identity.uuid_factory import new_group_id, uuid_for_group
from contact_dedup.logging import get_logger
from contact_dedup.models import Confidence, DuplicateGroup
from contact_dedup.normalization.contact_normalization import email_local_part, normalize_name
from contact_dedup.normalization.distance import name_similarity
from contact_dedup.resolution.disambiguation import are_different_people
from contact_dedup.resolution.options import MatchOptions

if TYPE_CHECKING:
    from contact_dedup.resolution.indexer import DedupIndexer

log = get_logger("grouping")

Checkpoint = Optional[Callable[[], None]]


class _GroupCollector:
    """Accumulates groups and tracks claimed ids during one assembly run."""

    def __init__(self, options: MatchOptions):
        self.options = options
        self.groups: List[DuplicateGroup] = []
        self.claimed: Set[str] = set()

    def unclaimed(self, ids: Sequence[str]) -> List[str]:
        return [i for i in ids if i not in self.claimed]

    def add(self, ids: Sequence[str], confidence: Confidence, reason: str) -> bool:
        members = self.unclaimed(ids)
        if len(members) < 2:
            return False

        if self.options.deterministic_group_ids:
            gid = uuid_for_group(members, reason)
        else:
            gid = new_group_id()

        self.claimed.update(members)
        self.groups.append(
            DuplicateGroup(
                id=gid,
                contact_ids=tuple(members),
                confidence=confidence,
                reason=reason,
            )
        )
        return True


def _check(checkpoint: Checkpoint) -> None:
    if checkpoint is not None:
        checkpoint()


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def _email_stage(indexer: "DedupIndexer", collector: _GroupCollector, checkpoint: Checkpoint) -> int:
    emitted = 0
    for email, ids in indexer.email_index.items():
        _check(checkpoint)
        members = collector.unclaimed(ids)
        if len(members) < 2:
            continue

        if email_local_part(email) in collector.options.generic_email_prefixes:
            # info@, office@ ... are shared by colleagues; every holder must carry the same name.
            names = {normalize_name(indexer.get_contact(i).name) for i in ids}
            if len(names) == 1:
                emitted += collector.add(
                    members,
                    Confidence.MEDIUM,
                    f"Same generic email ({email}) and same name",
                )
            else:
                log.debug("Generic email %s shared by different names; skipped", email)
        else:
            emitted += collector.add(members, Confidence.HIGH, f"Same email ({email})")
    return emitted


def _phone_stage(indexer: "DedupIndexer", collector: _GroupCollector, checkpoint: Checkpoint) -> int:
    emitted = 0
    for phone, ids in indexer.phone_index.items():
        _check(checkpoint)
        if len(ids) < 2:
            continue
        emitted += collector.add(ids, Confidence.HIGH, f"Same phone number ({phone})")
    return emitted


def _has_conflicting_pair(indexer: "DedupIndexer", ids: Sequence[str]) -> bool:
    for i in range(len(ids)):
        for j in range(i + 1, len(ids)):
            if are_different_people(indexer.get_contact(ids[i]), indexer.get_contact(ids[j])):
                return True
    return False


def _exact_name_stage(indexer: "DedupIndexer", collector: _GroupCollector, checkpoint: Checkpoint) -> int:
    emitted = 0
    for name, ids in indexer.exact_name_index.items():
        _check(checkpoint)
        members = collector.unclaimed(ids)
        if len(members) < 2:
            continue
        if _has_conflicting_pair(indexer, members):
            log.debug("Same name %r but conflicting details; skipped", name)
            continue
        emitted += collector.add(members, Confidence.MEDIUM, f"Same name ({name})")
    return emitted


def _phonetic_stage(indexer: "DedupIndexer", collector: _GroupCollector, checkpoint: Checkpoint) -> int:
    emitted = 0
    threshold = collector.options.similarity_threshold
    for code, ids in indexer.phonetic_index.items():
        _check(checkpoint)
        if len(ids) < 2:
            continue
        for i in range(len(ids)):
            for j in range(i + 1, len(ids)):
                id1, id2 = ids[i], ids[j]
                if id1 in collector.claimed or id2 in collector.claimed:
                    continue
                c1 = indexer.get_contact(id1)
                c2 = indexer.get_contact(id2)
                if are_different_people(c1, c2):
                    continue
                similarity = name_similarity(normalize_name(c1.name), normalize_name(c2.name))
                if similarity > threshold:
                    emitted += collector.add(
                        [id1, id2],
                        Confidence.MEDIUM,
                        f"Similar name ({c1.name} / {c2.name})",
                    )
    return emitted


_STAGES = (
    ("email", _email_stage),
    ("phone", _phone_stage),
    ("exact_name", _exact_name_stage),
    ("phonetic", _phonetic_stage),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def assemble_groups(
    indexer: "DedupIndexer",
    checkpoint: Checkpoint = None,
) -> List[DuplicateGroup]:
    """
    Run all stages over the indexer's buckets and return groups in stage order.

    ``checkpoint`` is called between stages and buckets; it raises to cancel.
    """
    collector = _GroupCollector(indexer.options)
    counts: Dict[str, int] = {}

    for stage_name, stage in _STAGES:
        _check(checkpoint)
        counts[stage_name] = stage(indexer, collector, checkpoint)

    log.info(
        "Group assembly complete: contacts=%d groups=%d email=%d phone=%d exact_name=%d phonetic=%d",
        len(indexer),
        len(collector.groups),
        counts["email"],
        counts["phone"],
        counts["exact_name"],
        counts["phonetic"],
    )
    return collector.groups


__all__ = ["assemble_groups"]
