"""
db.engine - One engine per process, sessions handed out on demand.

init_db() is called once by the app factory or the CLI; tests call it
per temporary database and dispose_db() afterwards.
"""

from __future__ import annotations

import json

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None

_SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA foreign_keys=ON",
    "PRAGMA synchronous=NORMAL",
)


def _dump_json(obj) -> str:
    # Keep podcast titles and categories readable in the JSON columns
    return json.dumps(obj, ensure_ascii=False)


def _configure_sqlite(engine: Engine) -> None:
    """Pragmas on every connection; BEGIN issued by SQLAlchemy so SAVEPOINTs work."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _rec):
        dbapi_conn.isolation_level = None
        cur = dbapi_conn.cursor()
        for pragma in _SQLITE_PRAGMAS:
            cur.execute(pragma)
        cur.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def init_db(db_url: str) -> None:
    """Bind the session factory to ``db_url`` and create missing tables."""
    global _engine, _SessionLocal

    _engine = create_engine(db_url, future=True, json_serializer=_dump_json)
    if _engine.dialect.name == "sqlite":
        _configure_sqlite(_engine)

    Base.metadata.create_all(_engine)
    # Imported rows are serialised after commit, so keep attributes loaded
    _SessionLocal = sessionmaker(bind=_engine, expire_on_commit=False)


def get_session() -> Session:
    """New Session on the current engine.  The caller closes it."""
    if _SessionLocal is None:
        raise RuntimeError("init_db() has not been called")
    return _SessionLocal()


def dispose_db() -> None:
    """Drop pooled connections and forget the engine."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
