"""
import_engine.field_map - CSV header synonyms ↔ record attributes.

Directory exports come from different spreadsheet tools and languages, so
every logical field accepts an ordered list of header spellings, most
canonical first.  Lookup is exact, then case-insensitive; never fuzzy.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

# record attribute  →  accepted CSV headers (order matters)
FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "title": (
        "Podcast Title", "title", "Title", "TITLE", "podcast_title",
        "name", "Name",
    ),
    "host": (
        "Podcast Host(s)", "host", "Host", "HOST", "hosts", "Hosts",
        "podcast_host",
    ),
    "country": (
        "Country of Production", "country", "Country", "COUNTRY",
        "nation", "location",
    ),
    "language": (
        "Primary Language(s) of the Podcast", "Primary Language(s)",
        "language", "Language", "LANGUAGE", "lang", "languages",
        "Lingua", "lingua", "LINGUA", "linguaggio", "Linguaggio",
        "idioma", "idiomas", "Primary Language", "primary_language",
        "main_language", "podcast_language", "spoken_language",
        "audio_language",
    ),
    "year": (
        "Year Launched", "year", "Year", "YEAR", "launch_year", "start_year",
    ),
    "status": (
        "Is the podcast currently active?", "Is currently active?",
        "status", "Status", "STATUS", "active", "Active",
    ),
    "categories": (
        "Categories", "categories", "Category", "category", "CATEGORIES",
        "genre", "genres",
    ),
    "episode_length": (
        "Typical Episode Length", "Episode Length", "episodeLength",
        "episode_length", "length", "duration",
    ),
    "episode_count": (
        "Number of episodes of your podcast published to date", "Episodes",
        "episodes", "episode_count", "total_episodes",
    ),
    "description": (
        "One-sentence description for the directory listing", "Description",
        "description", "desc", "about", "summary",
    ),
    "image_url": (
        "Logo", "logo", "LOGO", "image", "Image", "imageUrl", "image_url",
        "podcast_logo",
    ),
}

# social platform  →  accepted CSV headers
SOCIAL_LINK_SYNONYMS: dict[str, tuple[str, ...]] = {
    "spotify":   ("Spotify Link", "Spotify URL", "spotify", "Spotify", "spotify_url"),
    "instagram": ("Instagram @", "Instagram URL", "instagram", "Instagram", "instagram_url"),
    "youtube":   ("YouTube Link", "YouTube URL", "youtube", "Youtube", "youtube_url"),
    "website":   ("Website", "Website URL", "website", "site", "url"),
    "apple":     ("Apple Pods Link", "Apple URL", "apple", "Apple", "apple_url"),
}

REQUIRED_FIELDS = ("title", "host")


class ColumnResolver:
    """
    Resolve logical fields against one CSV's header row.

    The case-folded header index is built once per file; each row lookup is
    then a handful of dict probes.
    """

    def __init__(self, headers: Iterable[str]):
        self.headers = [h for h in headers if h is not None]
        self._by_lower: dict[str, list[str]] = {}
        for h in self.headers:
            self._by_lower.setdefault(h.lower(), []).append(h)

    def resolve(self, row: dict, candidates: Sequence[str]) -> Optional[str]:
        """
        Return the first non-empty, trimmed value for ``candidates``.

        Each candidate is tried by exact header first, then against every
        header equal to it ignoring case.  None means no column had a value.
        """
        for name in candidates:
            value = _clean(row.get(name))
            if value:
                return value
            for header in self._by_lower.get(name.lower(), ()):
                if header == name:
                    continue
                value = _clean(row.get(header))
                if value:
                    return value
        return None

    def resolve_field(self, row: dict, field: str) -> Optional[str]:
        return self.resolve(row, FIELD_SYNONYMS[field])

    def resolve_social_links(self, row: dict) -> dict[str, str]:
        links: dict[str, str] = {}
        for platform, names in SOCIAL_LINK_SYNONYMS.items():
            value = self.resolve(row, names)
            if value:
                links[platform] = value
        return links


def _clean(value) -> str:
    # DictReader yields None for short rows and a list under the None key
    # for long ones; only plain strings are column values.
    if not isinstance(value, str):
        return ""
    return value.strip()
