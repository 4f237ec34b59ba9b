"""
import_engine.importer - Top-level orchestrator.

Coordinates csv_parser → row_processor → dedup → merge_planner and
produces a structured ImportReport.
"""

from __future__ import annotations

import csv
import logging
from typing import BinaryIO, Optional

from sqlalchemy.exc import SQLAlchemyError

from db.engine import get_session
from import_engine.csv_parser import prepare_reader
from import_engine.dedup import find_existing
from import_engine.merge_planner import Candidate, apply_plan, plan_merge
from import_engine.report import ImportReport
from import_engine.row_processor import RowError, RowProcessor

logger = logging.getLogger(__name__)


class ImportFailed(Exception):
    """The upload could not be read or the batch could not be stored."""
    pass


def run_import(
    file_content: str | bytes | BinaryIO,
    *,
    overwrite: bool = False,
    store=None,
) -> ImportReport:
    """
    Import a CSV blob or binary stream into the podcast directory.

    Parameters
    ----------
    file_content : raw CSV (bytes, str or binary file object)
    overwrite : if True, rows matching a stored podcast replace it;
                otherwise they are counted as duplicates and skipped
    store : persistence collaborator; defaults to a PodcastStore on a
            fresh session, committed on success and rolled back on failure

    Returns
    -------
    ImportReport with counts and the first error messages

    Raises
    ------
    ImportFailed when the stream is unreadable or the create batch fails
    """
    if store is not None:
        return _import(file_content, overwrite, store)

    from services.podcast_store import PodcastStore

    session = get_session()
    try:
        report = _import(file_content, overwrite, PodcastStore(session))
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise ImportFailed(f"Database error: {exc}") from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
    return report


def _import(file_content, overwrite: bool, store) -> ImportReport:
    report = ImportReport(overwrite_mode=overwrite)
    candidates: list[Candidate] = []

    try:
        reader = prepare_reader(file_content)
        if reader is None:
            logger.warning("CSV has no header row or is empty")
            return report

        report.headers = list(reader.fieldnames)
        logger.info("CSV headers found: %s", ", ".join(report.headers))
        processor = RowProcessor(report.headers)

        for row_number, row in enumerate(reader, start=1):
            report.total_rows += 1
            try:
                record = processor.process(row)
            except RowError as exc:
                logger.debug("Row %d rejected: %s", row_number, exc)
                report.add_error(row_number, str(exc))
                continue
            candidates.append(Candidate(row_number, record))
    except (csv.Error, OSError) as exc:
        raise ImportFailed(f"Unreadable CSV: {exc}") from exc

    logger.info("Processing complete. Valid podcasts: %d, Errors: %d",
                len(candidates), report.error_count)

    existing = find_existing(store, (c.key for c in candidates))
    plan = plan_merge(candidates, existing, overwrite)

    try:
        apply_plan(plan, store, report)
    except Exception as exc:
        raise ImportFailed(f"Could not create podcasts: {exc}") from exc

    logger.info(
        "Import finished: %d imported, %d updated, %d duplicates skipped, "
        "%d errors / %d rows",
        report.imported, report.updated, report.duplicates_skipped,
        report.error_count, report.total_rows,
    )
    return report
