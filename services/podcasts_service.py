"""
services.podcasts_service - CRUD operations on Podcast records.

All session management is the caller's responsibility (open before,
close/commit after).  This keeps the service testable and allows
the caller to batch multiple operations in one transaction.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import Podcast
from import_engine.records import PodcastRecord
from import_engine.row_processor import RowError, build_record


class ValidationError(ValueError):
    """Payload rejected before it reaches the database."""
    pass


def record_from_payload(data: dict) -> PodcastRecord:
    """Validate a JSON payload with the same rules as a CSV row."""
    if not isinstance(data, dict):
        raise ValidationError("JSON object expected")
    try:
        return build_record(data)
    except RowError as exc:
        raise ValidationError(str(exc)) from exc


class PodcastsService:

    # ── Create ─────────────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, data: dict) -> Podcast:
        """
        Create a new Podcast from a dict of field values.
        Required keys: title, host.  Other fields fall back to defaults.
        """
        record = record_from_payload(data)
        podcast = Podcast(**record.to_model_kwargs())
        session.add(podcast)
        session.flush()
        return podcast

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get(session: Session, podcast_id: str) -> Podcast | None:
        return session.get(Podcast, podcast_id)

    @staticmethod
    def count(session: Session) -> int:
        return session.query(Podcast).count()

    # ── Update ─────────────────────────────────────────────────────────

    @staticmethod
    def update(session: Session, podcast: Podcast, data: dict, *, partial: bool = False) -> Podcast:
        """
        Replace a podcast's fields.  With ``partial`` only the keys present
        in ``data`` change; the merged result is validated as a whole.
        """
        if partial:
            merged = podcast.to_dict()
            merged.update(data)
            data = merged
        record = record_from_payload(data)
        for attr, value in record.to_model_kwargs().items():
            setattr(podcast, attr, value)
        session.flush()
        return podcast

    # ── Delete ─────────────────────────────────────────────────────────

    @staticmethod
    def delete(session: Session, podcast: Podcast) -> None:
        session.delete(podcast)
        session.flush()
