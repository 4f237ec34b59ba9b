#!/usr/bin/env python3
"""
PODDB - Podcast Directory Web Application
=========================================

Run the server:      python main.py
Import a CSV:        python main.py import podcasts.csv [--overwrite]

See config.py for all environment-variable tunables.
"""

import argparse
import logging
import sys
import time

from flask import Flask, g, jsonify, request

import config
from db import init_db, get_session, Podcast
from api import api_bp

logger = logging.getLogger("poddb")


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(level=level, format=config.LOG_FORMAT)


def create_app(db_url: str | None = None) -> Flask:
    """Flask application factory."""

    app = Flask(__name__)
    app.secret_key = config.SECRET
    app.config["MAX_CONTENT_LENGTH"] = config.MAX_UPLOAD_MB * 1024 * 1024

    # ── Initialise database ─────────────────────────────────────────
    db_url = db_url or config.DB_URL
    init_db(db_url)
    logger.info("Database: %s", db_url)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    # ── Request log (API only) ──────────────────────────────────────
    @app.before_request
    def _start_timer():
        g.started = time.perf_counter()

    @app.after_request
    def _log_api_request(response):
        if request.path.startswith("/api/"):
            elapsed_ms = (time.perf_counter() - g.get("started", time.perf_counter())) * 1000
            line = f"{request.method} {request.path} {response.status_code} in {elapsed_ms:.0f}ms"
            if len(line) > 80:
                line = line[:79] + "…"
            logger.info(line)
        return response

    # ── Error handlers ──────────────────────────────────────────────
    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def _500(e):
        return jsonify({"error": "internal server error"}), 500

    return app


def _print_report(report) -> None:
    print(f"  Done: {report.imported} imported, {report.updated} updated, "
          f"{report.duplicates_skipped} duplicates skipped, "
          f"{report.error_count} errors / {report.total_rows} rows")
    if report.error_messages:
        print(f"  First errors (max {len(report.error_messages)}):")
        for err in report.error_messages:
            print(f"    {err}")


def _seed_if_empty():
    """Auto-import seed CSV when the database is empty."""
    session = get_session()
    count = session.query(Podcast).count()
    session.close()

    if count > 0:
        print(f"\n  Database has {count} podcasts.")
        return

    if not config.CSV_SEED_PATH.exists():
        print(f"\n  No seed CSV at {config.CSV_SEED_PATH} - starting empty.")
        return

    print(f"\n  Database empty → auto-importing {config.CSV_SEED_PATH.name} …")
    from import_engine import run_import, ImportFailed

    try:
        with open(config.CSV_SEED_PATH, "rb") as fh:
            report = run_import(fh)
    except (OSError, ImportFailed) as exc:
        logger.error("Seed import failed: %s", exc)
        print(f"  Seed import failed: {exc} - starting empty.")
        return
    _print_report(report)


def import_file(path: str, overwrite: bool = False) -> int:
    """CLI import; returns a process exit code."""
    from import_engine import run_import, ImportFailed

    init_db(config.DB_URL)
    try:
        with open(path, "rb") as fh:
            report = run_import(fh, overwrite=overwrite)
    except (OSError, ImportFailed) as exc:
        print(f"  Import failed: {exc}")
        return 1
    _print_report(report)
    return 0


def serve():
    print("=" * 56)
    print("  PODDB - Podcast Directory")
    print("=" * 56)

    app = create_app()
    _seed_if_empty()

    print(f"\n  http://{config.HOST}:{config.PORT}")
    print(f"  API: http://{config.HOST}:{config.PORT}/api/v1/podcasts")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="poddb", description="Podcast directory")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="run the web server (default)")
    imp = sub.add_parser("import", help="import podcasts from a CSV file")
    imp.add_argument("file_path", help="Path to the CSV file")
    imp.add_argument("--overwrite", action="store_true",
                     help="Replace podcasts that already exist instead of skipping them")
    args = parser.parse_args(argv)

    configure_logging()
    if args.command == "import":
        return import_file(args.file_path, overwrite=args.overwrite)
    serve()
    return 0


if __name__ == "__main__":
    sys.exit(main())
