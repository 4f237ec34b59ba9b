"""
import_engine.records - The typed podcast record flowing through an import.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass
class PodcastRecord:
    """A validated row, ready to be created or written over an existing podcast."""

    title: str
    host: str
    country: str
    language: str
    year: int
    status: str
    categories: list[str] = field(default_factory=list)
    episode_length: Optional[str] = None
    episode_count: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    social_links: dict[str, str] = field(default_factory=dict)

    def to_model_kwargs(self) -> dict:
        """Column values for db.models.Podcast."""
        data = asdict(self)
        data["categories"] = list(self.categories)
        data["social_links"] = dict(self.social_links)
        return data
