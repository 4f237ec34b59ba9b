"""
PODDB - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path

import dotenv


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR        = Path(__file__).resolve().parent

# Values already present in the environment win over the .env file
dotenv.load_dotenv(BASE_DIR / ".env")

CSV_SEED_PATH   = Path(os.environ.get("PODDB_CSV_SEED", BASE_DIR / "podcasts.csv"))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("PODDB_DB", f"sqlite:///{BASE_DIR / 'poddb.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("PODDB_HOST", "0.0.0.0")
PORT   = int(os.environ.get("PODDB_PORT", "5000"))
DEBUG  = os.environ.get("PODDB_DEBUG", "0") == "1"
SECRET = os.environ.get("PODDB_SECRET", "poddb-dev-key-change-in-prod")
MAX_UPLOAD_MB = int(os.environ.get("PODDB_MAX_UPLOAD_MB", "16"))

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL  = os.environ.get("PODDB_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

# ── Import pipeline ────────────────────────────────────────────────────
IMPORT_ERROR_SAMPLE  = 20      # error messages kept in an ImportReport
IDENTITY_QUERY_CHUNK = 500     # keys per IN (...) lookup

# ── Pagination ─────────────────────────────────────────────────────────
API_MAX_LIMIT     = 1000
API_DEFAULT_LIMIT = 100
