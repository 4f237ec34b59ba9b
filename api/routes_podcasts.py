"""
api.routes_podcasts - /api/v1/podcasts CRUD and search endpoints.
"""

from flask import request, jsonify

from api import api_bp
from db import get_session
from services import PodcastsService, SearchService, ValidationError
from services.search_service import SORT_OPTIONS
import config


def _int_arg(name: str, default: int) -> int:
    try:
        return int(request.args.get(name, default))
    except (TypeError, ValueError):
        return default


@api_bp.route("/health")
def health():
    return jsonify({"ok": True})


@api_bp.route("/podcasts")
def list_podcasts():
    """
    GET /api/v1/podcasts?query=&episode_length=&categories=a,b&status=&country=
                        &sort=&limit=100&offset=0

    Search / list podcasts.  Categories match if any of them is present.
    """
    query          = request.args.get("query", "").strip()
    episode_length = request.args.get("episode_length", "").strip()
    status         = request.args.get("status", "").strip()
    country        = request.args.get("country", "").strip()
    sort           = request.args.get("sort", "").strip()
    categories = [c.strip() for c in request.args.get("categories", "").split(",")
                  if c.strip()]
    limit  = max(min(_int_arg("limit", config.API_DEFAULT_LIMIT),
                     config.API_MAX_LIMIT), 0)
    offset = max(_int_arg("offset", 0), 0)

    if sort and sort not in SORT_OPTIONS:
        return jsonify({"error": f"unknown sort '{sort}'",
                        "allowed": list(SORT_OPTIONS)}), 400

    session = get_session()
    try:
        podcasts, total = SearchService.search(
            session, query=query, episode_length=episode_length,
            categories=categories, status=status, country=country,
            sort=sort, limit=limit, offset=offset,
        )
        return jsonify({
            "total": total,
            "offset": offset,
            "limit": limit,
            "podcasts": [p.to_dict() for p in podcasts],
        })
    finally:
        session.close()


@api_bp.route("/podcasts/facets")
def podcast_facets():
    """GET /api/v1/podcasts/facets - distinct filter values."""
    session = get_session()
    try:
        return jsonify(SearchService.facets(session))
    finally:
        session.close()


@api_bp.route("/podcasts/<podcast_id>")
def get_podcast(podcast_id: str):
    """GET /api/v1/podcasts/{id}"""
    session = get_session()
    try:
        podcast = PodcastsService.get(session, podcast_id)
        if not podcast:
            return jsonify({"error": "not found"}), 404
        return jsonify(podcast.to_dict())
    finally:
        session.close()


@api_bp.route("/podcasts", methods=["POST"])
def create_podcast():
    """
    POST /api/v1/podcasts

    JSON body: {title, host, …fields}.
    """
    data = request.get_json(silent=True)
    session = get_session()
    try:
        podcast = PodcastsService.create(session, data)
        session.commit()
        return jsonify(podcast.to_dict()), 201
    except ValidationError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    finally:
        session.close()


@api_bp.route("/podcasts/<podcast_id>", methods=["PUT", "PATCH"])
def update_podcast(podcast_id: str):
    """PUT replaces all fields, PATCH only the ones sent."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object expected"}), 400
    session = get_session()
    try:
        podcast = PodcastsService.get(session, podcast_id)
        if not podcast:
            return jsonify({"error": "not found"}), 404
        PodcastsService.update(session, podcast, data,
                               partial=request.method == "PATCH")
        session.commit()
        return jsonify(podcast.to_dict())
    except ValidationError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    finally:
        session.close()


@api_bp.route("/podcasts/<podcast_id>", methods=["DELETE"])
def delete_podcast(podcast_id: str):
    """DELETE /api/v1/podcasts/{id}"""
    session = get_session()
    try:
        podcast = PodcastsService.get(session, podcast_id)
        if not podcast:
            return jsonify({"error": "not found"}), 404
        PodcastsService.delete(session, podcast)
        session.commit()
        return jsonify({"deleted": podcast_id})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
