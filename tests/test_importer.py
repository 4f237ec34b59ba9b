"""Tests for import_engine.importer.run_import."""

import io

import pytest

from db import get_session
from db.models import Podcast
from import_engine import ImportFailed, run_import


def _csv(*lines: str) -> bytes:
    return ("\n".join(lines) + "\n").encode("utf-8")


# ---------------------------------------------------------------------------
# Against the in-memory store
# ---------------------------------------------------------------------------

class TestWithFakeStore:
    def test_missing_host_example(self, fake_store):
        report = run_import(_csv("Podcast Title,host", "Wine Talk,"), store=fake_store)

        assert report.total_rows == 1
        assert report.error_count == 1
        assert report.error_messages[0].startswith("Row 1: Missing host")
        assert report.imported == 0
        assert fake_store.rows == {}

    def test_categories_example(self, fake_store):
        report = run_import(
            _csv('title,host,Categories', 'Wine Talk,Jane Doe,"Education, Culture, "'),
            store=fake_store,
        )
        assert report.imported == 1
        (row,) = fake_store.rows.values()
        assert row.categories == ["Education", "Culture"]

    def test_counts_add_up(self, make_store):
        store = make_store(existing=[("The Wine Hour", "Jane Doe")])
        data = _csv(
            "title,host,year",
            "Fresh Pour,Ann,2020",       # create
            "wine hour,jane doe,2019",   # stored duplicate
            ",Nobody,2018",              # missing title
            "Fresh Pour!,ann,2021",      # same file duplicate
            "Cellar Notes,,2017",        # missing host
            "Cellar Notes,Bo,nope",      # create, default year
        )
        report = run_import(data, store=store)

        assert report.total_rows == 6
        assert report.imported == 2
        assert report.updated == 0
        assert report.duplicates_skipped == 2
        assert report.error_count == 2
        assert report.classified_rows == report.total_rows
        assert report.headers == ["title", "host", "year"]

    def test_overwrite_false_skips_stored_match(self, make_store):
        store = make_store(existing=[("The Wine Hour", "Jane Doe")])
        report = run_import(_csv("title,host", "wine hour,Jane Doe"), store=store)

        assert report.duplicates_skipped == 1
        assert report.imported == 0
        assert store.update_calls == []
        assert store.bulk_calls == 0

    def test_overwrite_true_updates_stored_match(self, make_store):
        store = make_store(existing=[("The Wine Hour", "Jane Doe")])
        pid = store.id_of("The Wine Hour", "Jane Doe")
        report = run_import(_csv("title,host,country", "wine hour,Jane Doe,France"),
                            store=store, overwrite=True)

        assert report.updated == 1
        assert report.imported == 0
        assert report.duplicates_skipped == 0
        assert report.overwrite_mode is True
        assert store.update_calls == [pid]
        assert store.rows[pid].country == "France"

    def test_more_than_twenty_errors(self, fake_store):
        lines = ["title,host"] + [f"Show {i}," for i in range(30)]
        report = run_import(_csv(*lines), store=fake_store)

        assert report.error_count == 30
        assert len(report.error_messages) == 20
        assert report.error_messages[-1].startswith("Row 20:")

    def test_malformed_csv_aborts(self, fake_store):
        data = _csv("title,host", "Wine Talk,Jane", 'Bad Row,"Jane"x')
        with pytest.raises(ImportFailed, match="Unreadable CSV"):
            run_import(data, store=fake_store)
        assert fake_store.bulk_calls == 0

    def test_bulk_create_failure_aborts(self, fake_store):
        fake_store.fail_create = True
        with pytest.raises(ImportFailed, match="insert rejected"):
            run_import(_csv("title,host", "Wine Talk,Jane"), store=fake_store)

    def test_empty_upload_gives_empty_report(self, fake_store):
        report = run_import(b"", store=fake_store)
        assert report.total_rows == 0
        assert report.headers == []

    def test_header_only(self, fake_store):
        report = run_import(_csv("title,host"), store=fake_store)
        assert report.total_rows == 0
        assert report.headers == ["title", "host"]

    def test_binary_stream_with_bom(self, fake_store):
        stream = io.BytesIO(b"\xef\xbb\xbftitle,host\r\nWine Talk,Jane\r\n")
        report = run_import(stream, store=fake_store)
        assert report.headers == ["title", "host"]
        assert report.imported == 1


# ---------------------------------------------------------------------------
# Against SQLite through the default PodcastStore
# ---------------------------------------------------------------------------

class TestWithDatabase:
    def _titles(self):
        session = get_session()
        try:
            return sorted(p.title for p in session.query(Podcast))
        finally:
            session.close()

    def test_import_then_reimport_is_idempotent(self, database):
        data = _csv("Podcast Title,Podcast Host(s),Country of Production",
                    "The Wine Hour,Jane Doe,Italy",
                    "Cellar Notes,Bo,France")
        first = run_import(data)
        second = run_import(data)

        assert first.imported == 2
        assert second.imported == 0
        assert second.duplicates_skipped == 2
        assert self._titles() == ["Cellar Notes", "The Wine Hour"]

    def test_overwrite_updates_row_in_place(self, database):
        run_import(_csv("title,host,country", "The Wine Hour,Jane Doe,Italy"))
        report = run_import(_csv("title,host,country", "wine hour,jane doe,France"),
                            overwrite=True)

        assert report.updated == 1
        session = get_session()
        try:
            (podcast,) = session.query(Podcast).all()
            assert podcast.country == "France"
            assert podcast.title == "wine hour"
            assert podcast.identity_key == "wine hour|||jane doe"
        finally:
            session.close()

    def test_failed_stream_rolls_back(self, database):
        data = _csv("title,host", "Wine Talk,Jane", 'Bad Row,"Jane"x')
        with pytest.raises(ImportFailed):
            run_import(data)
        assert self._titles() == []
