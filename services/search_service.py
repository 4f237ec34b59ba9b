"""
services.search_service - Text search and filtered listing.

Builds SQLAlchemy queries with optional filters and ILIKE matching
across the directory's text columns.  Categories live in a JSON column,
so category matching (for the text query and the "any of these
categories" filter) and episode-count sorting run in Python on the
already narrowed result.
"""

from __future__ import annotations
import re

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from db.models import Podcast


SORT_OPTIONS = (
    "title", "title-desc", "year", "year-desc",
    "episodes", "episodes-desc", "country",
)

_LIKE_ESCAPE = "\\"


def parse_episode_sortkey(value_str: str | None) -> float:
    """
    Numeric sort key for free-text episode counts.
    Handles: "45", "200+ episodes", "1,200 episodes", "~80".
    """
    if not value_str:
        return float('inf')  # Empty values sort last

    match = re.search(r'\d[\d,]*', value_str)
    if not match:
        return float('inf')
    return float(match.group(0).replace(",", ""))


def _episode_order(podcast: Podcast, descending: bool) -> tuple[bool, float]:
    # Unknown counts stay at the end in both directions
    value = parse_episode_sortkey(podcast.episode_count)
    unknown = value == float('inf')
    if unknown:
        return (True, 0.0)
    return (False, -value if descending else value)


def _like_pattern(text: str) -> str:
    """Literal substring pattern: % and _ in user input match themselves."""
    escaped = (text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
                   .replace("%", _LIKE_ESCAPE + "%")
                   .replace("_", _LIKE_ESCAPE + "_"))
    return f"%{escaped}%"


class SearchService:

    # SQL-sortable options → (column, descending)
    SORTABLE_COLUMNS = {
        "title": (Podcast.title, False),
        "title-desc": (Podcast.title, True),
        "year": (Podcast.year, False),
        "year-desc": (Podcast.year, True),
        "country": (Podcast.country, False),
    }

    # Text columns are ordered ignoring case
    CASE_FOLDED = {"title", "title-desc", "country"}

    @staticmethod
    def search(
        session: Session,
        *,
        query: str = "",
        episode_length: str = "",
        categories: list[str] | None = None,
        status: str = "",
        country: str = "",
        sort: str = "",
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Podcast], int]:
        """
        Search podcasts.  Returns (podcasts_list, total_count).
        """
        q = session.query(Podcast)
        q = SearchService._apply_filters(
            q, episode_length=episode_length, status=status, country=country,
        )

        column_hits: set[str] = set()
        if query:
            column_hits = {
                pid for (pid,) in
                SearchService._apply_text_filter(q.with_entities(Podcast.id), query)
            }

        if sort in SearchService.SORTABLE_COLUMNS:
            col, desc = SearchService.SORTABLE_COLUMNS[sort]
            if sort in SearchService.CASE_FOLDED:
                col = func.lower(col)
            q = q.order_by(col.desc() if desc else col.asc(), Podcast.id)
        else:
            q = q.order_by(Podcast.created_at, Podcast.id)

        podcasts = q.all()

        if query:
            needle = query.lower()
            podcasts = [
                p for p in podcasts
                if p.id in column_hits
                or any(needle in c.lower() for c in (p.categories or []))
            ]

        if categories:
            wanted = set(categories)
            podcasts = [p for p in podcasts
                        if wanted.intersection(p.categories or [])]

        # Special handling for episode counts - free text, numeric order
        if sort in ("episodes", "episodes-desc"):
            descending = (sort == "episodes-desc")
            podcasts.sort(key=lambda p: _episode_order(p, descending))

        total = len(podcasts)
        return podcasts[offset:offset + limit], total

    @staticmethod
    def facets(session: Session) -> dict:
        """Distinct values for the filter dropdowns."""
        def distinct(col) -> list[str]:
            rows = session.query(col).filter(col.isnot(None), col != "").distinct()
            return sorted(v for (v,) in rows)

        categories: set[str] = set()
        for (cats,) in session.query(Podcast.categories):
            categories.update(c for c in (cats or []) if c)

        return {
            "countries": distinct(Podcast.country),
            "statuses": distinct(Podcast.status),
            "episode_lengths": distinct(Podcast.episode_length),
            "categories": sorted(categories),
        }

    # ── Internal ───────────────────────────────────────────────────────

    @staticmethod
    def _apply_filters(q: Query, *, episode_length: str,
                       status: str, country: str) -> Query:
        if episode_length:
            q = q.filter(Podcast.episode_length == episode_length)
        if status:
            q = q.filter(Podcast.status == status)
        if country:
            q = q.filter(Podcast.country == country)
        return q

    @staticmethod
    def _apply_text_filter(q: Query, text: str) -> Query:
        like = _like_pattern(text)
        return q.filter(
            Podcast.title.ilike(like, escape=_LIKE_ESCAPE)
            | Podcast.host.ilike(like, escape=_LIKE_ESCAPE)
            | Podcast.country.ilike(like, escape=_LIKE_ESCAPE)
            | Podcast.description.ilike(like, escape=_LIKE_ESCAPE)
        )
