"""
import_engine.csv_parser - Low-level CSV reading and cleaning.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG)
  • Incremental decoding, so an upload stream is consumed row by row
  • Header whitespace stripping
  • Returns a csv.DictReader ready for iteration
"""

from __future__ import annotations

import csv
import io
from typing import BinaryIO, Optional


def prepare_reader(raw: str | bytes | BinaryIO) -> Optional[csv.DictReader]:
    """
    Accept raw file content (bytes, str or a binary file object), wrap it
    for incremental reading and return a DictReader.  Returns None if the
    content has no header row.

    Malformed quoting surfaces as csv.Error while iterating.
    """
    reader = csv.DictReader(_open_text(raw), strict=True)
    if reader.fieldnames is None:
        return None

    # Strip whitespace from every header
    reader.fieldnames = [h.strip() for h in reader.fieldnames]
    if not any(reader.fieldnames):
        return None
    return reader


def _open_text(raw: str | bytes | BinaryIO) -> io.TextIOBase:
    if isinstance(raw, str):
        if raw.startswith("\ufeff"):
            raw = raw[1:]
        return io.StringIO(raw, newline="")
    if isinstance(raw, (bytes, bytearray)):
        raw = io.BytesIO(raw)
    # utf-8-sig drops a leading BOM and is plain UTF-8 otherwise
    return io.TextIOWrapper(raw, encoding="utf-8-sig", errors="replace", newline="")
