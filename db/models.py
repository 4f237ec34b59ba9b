"""
db.models - SQLAlchemy ORM declarations.

Tables
------
podcasts        - one row per directory entry.  ``identity_key`` holds the
                  normalized (title, host) pair used by the CSV importer to
                  detect duplicates; it is maintained by mapper events.
users           - directory members (profile only, no credentials).
user_favorites  - user ↔ podcast bookmarks, unique per pair.
user_notes      - free-text personal notes a user keeps on a podcast.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String,
    Text, UniqueConstraint, event,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Podcast(Base):
    __tablename__ = "podcasts"

    id = Column(String(36), primary_key=True, default=_uuid)

    # ── Required directory fields ──────────────────────────────────────
    title    = Column(Text, nullable=False)
    host     = Column(Text, nullable=False)
    country  = Column(String(200), nullable=False, index=True)
    language = Column(String(200), nullable=False)     # may be "Italian, English"
    year     = Column(Integer, nullable=False, index=True)
    status   = Column(String(100), nullable=False, index=True)   # Active / On Hiatus / Ended

    # ── Optional listing details ───────────────────────────────────────
    categories     = Column(JSON, nullable=False, default=list)
    episode_length = Column(String(100), index=True)   # "Under 10min", "40min+" …
    episode_count  = Column(String(100))               # "200+ episodes"
    description    = Column(Text)
    image_url      = Column(Text)
    social_links   = Column(JSON, nullable=False, default=dict)

    # ── Deduplication ──────────────────────────────────────────────────
    identity_key = Column(Text, nullable=False, index=True, default="")

    # ── Timestamps ─────────────────────────────────────────────────────
    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)

    favorites = relationship(
        "UserFavorite", back_populates="podcast",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    notes = relationship(
        "UserNote", back_populates="podcast",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    # ── Serialisation ──────────────────────────────────────────────────
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "host": self.host,
            "country": self.country,
            "language": self.language,
            "year": self.year,
            "status": self.status,
            "categories": list(self.categories or []),
            "episode_length": self.episode_length or "",
            "episode_count": self.episode_count or "",
            "description": self.description or "",
            "image_url": self.image_url or "",
            "social_links": dict(self.social_links or {}),
            "created_at": self.created_at.isoformat() if self.created_at else "",
            "updated_at": self.updated_at.isoformat() if self.updated_at else "",
        }


@event.listens_for(Podcast, "before_insert")
@event.listens_for(Podcast, "before_update")
def _sync_identity_key(_mapper, _conn, target: Podcast) -> None:
    from import_engine.dedup import identity_key
    target.identity_key = identity_key(target.title or "", target.host or "")


class User(Base):
    __tablename__ = "users"

    id         = Column(String(36), primary_key=True, default=_uuid)
    username   = Column(String(100), unique=True, nullable=False, index=True)
    email      = Column(String(254), unique=True, nullable=True)
    first_name = Column(String(100), default="")
    last_name  = Column(String(100), default="")
    is_admin   = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)

    favorites = relationship(
        "UserFavorite", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    notes = relationship(
        "UserNote", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email or "",
            "first_name": self.first_name or "",
            "last_name": self.last_name or "",
            "is_admin": bool(self.is_admin),
            "created_at": self.created_at.isoformat() if self.created_at else "",
        }


class UserFavorite(Base):
    __tablename__ = "user_favorites"

    id         = Column(String(36), primary_key=True, default=_uuid)
    user_id    = Column(String(36),
                        ForeignKey("users.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    podcast_id = Column(String(36),
                        ForeignKey("podcasts.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    created_at = Column(DateTime, default=_now)

    user    = relationship("User", back_populates="favorites")
    podcast = relationship("Podcast", back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("user_id", "podcast_id", name="uq_favorite_pair"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "podcast_id": self.podcast_id,
            "created_at": self.created_at.isoformat() if self.created_at else "",
        }


class UserNote(Base):
    __tablename__ = "user_notes"

    id         = Column(String(36), primary_key=True, default=_uuid)
    user_id    = Column(String(36),
                        ForeignKey("users.id", ondelete="CASCADE"),
                        nullable=False)
    podcast_id = Column(String(36),
                        ForeignKey("podcasts.id", ondelete="CASCADE"),
                        nullable=False)
    note       = Column(Text, nullable=False)

    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)

    user    = relationship("User", back_populates="notes")
    podcast = relationship("Podcast", back_populates="notes")

    __table_args__ = (
        Index("ix_note_lookup", "user_id", "podcast_id"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "podcast_id": self.podcast_id,
            "note": self.note,
            "created_at": self.created_at.isoformat() if self.created_at else "",
            "updated_at": self.updated_at.isoformat() if self.updated_at else "",
        }
