import itertools
from types import SimpleNamespace

import pytest

from db import dispose_db, get_session, init_db
from import_engine.dedup import identity_key


@pytest.fixture
def db_url(tmp_path):
    """A throwaway SQLite file per test."""
    return f"sqlite:///{tmp_path / 'poddb-test.sqlite'}"


@pytest.fixture
def database(db_url):
    init_db(db_url)
    yield
    dispose_db()


@pytest.fixture
def session(database):
    s = get_session()
    yield s
    s.close()


@pytest.fixture
def app(db_url):
    from main import create_app

    app = create_app(db_url)
    app.config["TESTING"] = True
    yield app
    dispose_db()


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


class FakeStore:
    """In-memory stand-in for services.podcast_store.PodcastStore."""

    def __init__(self, existing=()):
        self._ids = itertools.count(1)
        self.rows: dict[str, SimpleNamespace] = {}
        self.bulk_calls = 0
        self.update_calls: list[str] = []
        self.fail_create = False
        self.fail_updates: set[str] = set()
        for title, host in existing:
            self._add(title=title, host=host)

    def _add(self, **fields):
        pid = f"p{next(self._ids)}"
        row = SimpleNamespace(id=pid, **fields)
        self.rows[pid] = row
        return row

    def id_of(self, title, host):
        for row in self.rows.values():
            if (row.title, row.host) == (title, host):
                return row.id
        raise KeyError((title, host))

    def bulk_create(self, records):
        self.bulk_calls += 1
        if self.fail_create:
            raise RuntimeError("insert rejected")
        return [self._add(**r.to_model_kwargs()) for r in records]

    def find_by_identity_keys(self, keys):
        wanted = set(keys)
        return [r for r in self.rows.values()
                if identity_key(r.title, r.host) in wanted]

    def update(self, podcast_id, record):
        self.update_calls.append(podcast_id)
        if podcast_id in self.fail_updates:
            raise RuntimeError("row locked")
        row = self.rows.get(podcast_id)
        if row is None:
            return None
        for attr, value in record.to_model_kwargs().items():
            setattr(row, attr, value)
        return row


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def make_store():
    return FakeStore
