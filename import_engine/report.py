"""
import_engine.report - Structured result of a CSV import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import config


@dataclass
class ImportReport:
    total_rows: int = 0
    imported: int = 0
    updated: int = 0
    duplicates_skipped: int = 0
    error_count: int = 0
    error_messages: list[str] = field(default_factory=list)   # first N only
    headers: list[str] = field(default_factory=list)
    overwrite_mode: bool = False
    created: list = field(default_factory=list)
    updated_records: list = field(default_factory=list)
    error_sample_size: int = config.IMPORT_ERROR_SAMPLE

    def add_error(self, row: int, reason: str):
        self.error_count += 1
        if len(self.error_messages) < self.error_sample_size:
            self.error_messages.append(f"Row {row}: {reason}")

    @property
    def classified_rows(self) -> int:
        return self.imported + self.updated + self.duplicates_skipped + self.error_count

    def to_dict(self) -> dict:
        return {
            "success": True,
            "imported": self.imported,
            "updated": self.updated,
            "duplicates_skipped": self.duplicates_skipped,
            "errors": self.error_count,
            "error_messages": list(self.error_messages),
            "total_rows": self.total_rows,
            "headers": list(self.headers),
            "overwrite_mode": self.overwrite_mode,
            "podcasts": [_serialise(p) for p in self.created],
            "updated_podcasts": [_serialise(p) for p in self.updated_records],
        }


def _serialise(item):
    to_dict = getattr(item, "to_dict", None)
    return to_dict() if callable(to_dict) else item
