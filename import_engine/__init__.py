"""
import_engine - CSV import pipeline.

Public API:
    run_import(file_content, overwrite=False) → ImportReport
    identity_key(title, host)                 → dedup key
"""

from import_engine.importer import run_import, ImportFailed     # noqa: F401
from import_engine.report import ImportReport                   # noqa: F401
from import_engine.dedup import identity_key, normalize         # noqa: F401
from import_engine.row_processor import RowError                # noqa: F401
