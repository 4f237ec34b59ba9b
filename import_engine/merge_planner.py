"""
import_engine.merge_planner - Decide create / update / skip, then apply.

plan_merge() is a pure partition; apply_plan() performs the writes
through the store and records the outcome on the report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from import_engine.dedup import identity_key
from import_engine.records import PodcastRecord
from import_engine.report import ImportReport

logger = logging.getLogger(__name__)


class PodcastWriter(Protocol):
    def bulk_create(self, records: Sequence[PodcastRecord]) -> list: ...
    def update(self, podcast_id: str, record: PodcastRecord) -> Optional[object]: ...


@dataclass
class Candidate:
    row: int                 # 1-based data row number
    record: PodcastRecord
    key: str = ""

    def __post_init__(self):
        if not self.key:
            self.key = identity_key(self.record.title, self.record.host)


@dataclass
class MergePlan:
    to_create: list[Candidate] = field(default_factory=list)
    to_update: list[tuple[Candidate, str]] = field(default_factory=list)   # (candidate, existing id)
    to_skip: list[Candidate] = field(default_factory=list)


def plan_merge(
    candidates: Sequence[Candidate],
    existing: dict[str, str],
    overwrite: bool,
) -> MergePlan:
    """
    Partition candidates against stored identity keys.

    Stored match + overwrite → update, stored match otherwise → skip,
    no match → create.  Within one file the first row of a key wins;
    later rows with the same key are skipped.
    """
    plan = MergePlan()
    seen: set[str] = set()

    for cand in candidates:
        if cand.key in seen:
            plan.to_skip.append(cand)
            continue
        seen.add(cand.key)

        existing_id = existing.get(cand.key)
        if existing_id is None:
            plan.to_create.append(cand)
        elif overwrite:
            plan.to_update.append((cand, existing_id))
        else:
            plan.to_skip.append(cand)
    return plan


def apply_plan(plan: MergePlan, store: PodcastWriter, report: ImportReport) -> None:
    """
    Create in one batch, then update one record at a time.

    A failing bulk create propagates (the batch is all-or-nothing); a
    failing update is recorded against its row and the rest continue.
    """
    report.duplicates_skipped += len(plan.to_skip)

    if plan.to_create:
        created = store.bulk_create([c.record for c in plan.to_create])
        report.created.extend(created)
        report.imported += len(created)

    for cand, existing_id in plan.to_update:
        try:
            updated = store.update(existing_id, cand.record)
        except Exception as exc:
            logger.warning("Update of podcast %s failed: %s", existing_id, exc)
            report.add_error(cand.row, f"Update failed: {exc}")
            continue
        if updated is None:
            report.add_error(cand.row, f"Update failed: podcast {existing_id} not found")
            continue
        report.updated_records.append(updated)
        report.updated += 1
