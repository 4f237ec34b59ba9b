"""
import_engine.row_processor - Validate and transform one CSV row into a PodcastRecord.

Single-responsibility: given a dict-row, either return a record ready
for deduplication, or raise RowError.  The same field rules back the
JSON create/update endpoints through build_record().
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Mapping, Optional

from import_engine.field_map import (
    FIELD_SYNONYMS, REQUIRED_FIELDS, ColumnResolver,
)
from import_engine.records import PodcastRecord

DEFAULT_COUNTRY  = "Unknown"
DEFAULT_LANGUAGE = "English"
DEFAULT_STATUS   = "Active"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class RowError(Exception):
    """Raised when a row cannot be imported."""
    pass


class RowProcessor:
    """
    Per-import processor.  Holds the column resolver built from the
    file's header row so synonyms are indexed once, not per row.
    """

    def __init__(self, headers: list[str]):
        self.headers = list(headers)
        self.resolver = ColumnResolver(self.headers)

    def process(self, row: dict) -> PodcastRecord:
        """
        Resolve and validate one row.
        Raises RowError when a required field is missing.
        """
        values: dict[str, Any] = {
            name: self.resolver.resolve_field(row, name)
            for name in FIELD_SYNONYMS
        }
        values["social_links"] = self.resolver.resolve_social_links(row)

        for name in REQUIRED_FIELDS:
            if not values[name]:
                raise RowError(
                    f"Missing {name}. Available columns: {', '.join(self.headers)}"
                )
        return build_record(values)


# ── Field rules ───────────────────────────────────────────────────────

def build_record(values: Mapping[str, Any]) -> PodcastRecord:
    """
    Apply required-field checks and soft defaults to resolved values.

    Accepts CSV strings as well as JSON-native values (int year, list
    categories, dict social_links).  Raises RowError on missing title/host.
    """
    title = _text(values.get("title"))
    host = _text(values.get("host"))
    if not title:
        raise RowError("Missing title")
    if not host:
        raise RowError("Missing host")

    return PodcastRecord(
        title=title,
        host=host,
        country=_text(values.get("country")) or DEFAULT_COUNTRY,
        language=_text(values.get("language")) or DEFAULT_LANGUAGE,
        year=parse_year(values.get("year")),
        status=_text(values.get("status")) or DEFAULT_STATUS,
        categories=split_categories(values.get("categories")),
        episode_length=_text(values.get("episode_length")) or None,
        episode_count=_text(values.get("episode_count")) or None,
        description=_text(values.get("description")) or None,
        image_url=_text(values.get("image_url")) or None,
        social_links=_links(values.get("social_links")),
    )


def parse_year(value: Any, *, today: Optional[date] = None) -> int:
    """
    Leading integer of ``value`` ("2019", " 2019 (relaunch)").
    Falls back to the current calendar year when absent or unparseable.
    """
    if isinstance(value, bool):
        value = None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        if m:
            return int(m.group(1))
    return (today or date.today()).year


def split_categories(value: Any) -> list[str]:
    """Comma-split, trim, drop empty segments.  Order and repeats are kept."""
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    else:
        parts = [p for p in value if isinstance(p, str)]
    return [p.strip() for p in parts if p.strip()]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _links(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {
        str(k): v.strip()
        for k, v in value.items()
        if isinstance(v, str) and v.strip()
    }
