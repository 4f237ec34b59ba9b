"""
services.podcast_store - Persistence collaborator for the CSV importer.

Wraps a caller-owned Session.  Nothing here commits: the importer
decides whether the whole run is committed or rolled back.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy.orm import Session

import config
from db.models import Podcast
from import_engine.records import PodcastRecord

logger = logging.getLogger(__name__)


class PodcastStore:

    def __init__(self, session: Session):
        self.session = session

    def bulk_create(self, records: Sequence[PodcastRecord]) -> list[Podcast]:
        """Insert all records in one flush; any failure fails the batch."""
        if not records:
            return []
        podcasts = [Podcast(**r.to_model_kwargs()) for r in records]
        self.session.add_all(podcasts)
        self.session.flush()
        return podcasts

    def find_by_identity_keys(self, keys: Sequence[str]) -> list[Podcast]:
        """Stored podcasts whose identity key is in ``keys``, oldest first."""
        found: list[Podcast] = []
        chunk = config.IDENTITY_QUERY_CHUNK
        for start in range(0, len(keys), chunk):
            batch = list(keys[start:start + chunk])
            found.extend(
                self.session.query(Podcast)
                .filter(Podcast.identity_key.in_(batch))
                .order_by(Podcast.created_at, Podcast.id)
                .all()
            )
        return found

    def update(self, podcast_id: str, record: PodcastRecord) -> Optional[Podcast]:
        """
        Overwrite one podcast inside a SAVEPOINT.
        Returns None when the podcast is gone.  A failed write rolls back
        only the SAVEPOINT and re-raises, leaving the session usable.
        """
        with self.session.begin_nested():
            podcast = self.session.get(Podcast, podcast_id)
            if podcast is None:
                return None
            for attr, value in record.to_model_kwargs().items():
                setattr(podcast, attr, value)
            self.session.flush()
        logger.debug("Updated podcast %s", podcast_id)
        return podcast
