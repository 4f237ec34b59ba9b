"""
services.users_service - Directory members, their favorites and notes.

Same session contract as PodcastsService: the caller commits.
Lookups return None when a referenced row does not exist.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import Podcast, User, UserFavorite, UserNote
from services.podcasts_service import ValidationError


class UsersService:

    # ── Users ──────────────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, data: dict) -> User:
        """Register a profile.  Username (≥3 chars) must be unique, email too."""
        username = str(data.get("username") or "").strip()
        email = str(data.get("email") or "").strip() or None
        if len(username) < 3:
            raise ValidationError("Username must be at least 3 characters long")
        if session.query(User).filter(User.username == username).first():
            raise ValidationError("Username already exists")
        if email:
            if "@" not in email:
                raise ValidationError("Please enter a valid email address")
            if session.query(User).filter(User.email == email).first():
                raise ValidationError("Email already registered")

        user = User(
            username=username,
            email=email,
            first_name=str(data.get("first_name") or "").strip(),
            last_name=str(data.get("last_name") or "").strip(),
        )
        session.add(user)
        session.flush()
        return user

    @staticmethod
    def get(session: Session, user_id: str) -> User | None:
        return session.get(User, user_id)

    # ── Favorites ──────────────────────────────────────────────────────

    @staticmethod
    def favorites(session: Session, user: User) -> list[UserFavorite]:
        return (session.query(UserFavorite)
                .filter(UserFavorite.user_id == user.id)
                .order_by(UserFavorite.created_at)
                .all())

    @staticmethod
    def add_favorite(session: Session, user: User, podcast_id: str) -> UserFavorite | None:
        """Bookmark a podcast.  Adding an existing favorite returns it unchanged."""
        if session.get(Podcast, podcast_id) is None:
            return None
        existing = (session.query(UserFavorite)
                    .filter(UserFavorite.user_id == user.id,
                            UserFavorite.podcast_id == podcast_id)
                    .first())
        if existing:
            return existing
        fav = UserFavorite(user_id=user.id, podcast_id=podcast_id)
        session.add(fav)
        session.flush()
        return fav

    @staticmethod
    def remove_favorite(session: Session, user: User, podcast_id: str) -> bool:
        deleted = (session.query(UserFavorite)
                   .filter(UserFavorite.user_id == user.id,
                           UserFavorite.podcast_id == podcast_id)
                   .delete(synchronize_session="fetch"))
        return deleted > 0

    # ── Notes ──────────────────────────────────────────────────────────

    @staticmethod
    def notes(session: Session, user: User) -> list[UserNote]:
        return (session.query(UserNote)
                .filter(UserNote.user_id == user.id)
                .order_by(UserNote.created_at)
                .all())

    @staticmethod
    def note_for_podcast(session: Session, user: User, podcast_id: str) -> UserNote | None:
        """Most recent note the user wrote on ``podcast_id``."""
        return (session.query(UserNote)
                .filter(UserNote.user_id == user.id,
                        UserNote.podcast_id == podcast_id)
                .order_by(UserNote.updated_at.desc())
                .first())

    @staticmethod
    def add_note(session: Session, user: User, podcast_id: str, text: str) -> UserNote | None:
        text = _note_text(text)
        if session.get(Podcast, podcast_id) is None:
            return None
        note = UserNote(user_id=user.id, podcast_id=podcast_id, note=text)
        session.add(note)
        session.flush()
        return note

    @staticmethod
    def get_note(session: Session, user: User, note_id: str) -> UserNote | None:
        note = session.get(UserNote, note_id)
        if note is None or note.user_id != user.id:
            return None
        return note

    @staticmethod
    def update_note(session: Session, note: UserNote, text: str) -> UserNote:
        note.note = _note_text(text)
        session.flush()
        return note

    @staticmethod
    def delete_note(session: Session, note: UserNote) -> None:
        session.delete(note)
        session.flush()


def _note_text(text) -> str:
    text = str(text or "").strip()
    if not text:
        raise ValidationError("Note text is required")
    return text
