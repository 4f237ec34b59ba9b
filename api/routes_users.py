"""
api.routes_users - /api/v1/users profiles, favorites and notes.

The caller identifies the member by id in the URL; authenticating that
the caller *is* that member happens in front of this API.
"""

from flask import request, jsonify

from api import api_bp
from db import get_session
from services import UsersService, ValidationError


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@api_bp.route("/users", methods=["POST"])
def create_user():
    """POST /api/v1/users  {username, email?, first_name?, last_name?}"""
    session = get_session()
    try:
        user = UsersService.create(session, _json_body())
        session.commit()
        return jsonify(user.to_dict()), 201
    except ValidationError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    finally:
        session.close()


@api_bp.route("/users/<user_id>")
def get_user(user_id: str):
    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        if not user:
            return jsonify({"error": "not found"}), 404
        return jsonify(user.to_dict())
    finally:
        session.close()


# ── Favorites ──────────────────────────────────────────────────────────

@api_bp.route("/users/<user_id>/favorites")
def list_favorites(user_id: str):
    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        if not user:
            return jsonify({"error": "not found"}), 404
        return jsonify([f.to_dict() for f in UsersService.favorites(session, user)])
    finally:
        session.close()


@api_bp.route("/users/<user_id>/favorites", methods=["POST"])
def add_favorite(user_id: str):
    """POST /api/v1/users/{id}/favorites  {podcast_id}"""
    podcast_id = str(_json_body().get("podcast_id") or "").strip()
    if not podcast_id:
        return jsonify({"error": "podcast_id is required"}), 400

    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        if not user:
            return jsonify({"error": "not found"}), 404
        fav = UsersService.add_favorite(session, user, podcast_id)
        if fav is None:
            return jsonify({"error": "podcast not found"}), 404
        session.commit()
        return jsonify(fav.to_dict()), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/users/<user_id>/favorites/<podcast_id>", methods=["DELETE"])
def remove_favorite(user_id: str, podcast_id: str):
    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        if not user:
            return jsonify({"error": "not found"}), 404
        UsersService.remove_favorite(session, user, podcast_id)
        session.commit()
        return "", 204
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ── Notes ──────────────────────────────────────────────────────────────

@api_bp.route("/users/<user_id>/notes")
def list_notes(user_id: str):
    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        if not user:
            return jsonify({"error": "not found"}), 404
        return jsonify([n.to_dict() for n in UsersService.notes(session, user)])
    finally:
        session.close()


@api_bp.route("/users/<user_id>/notes/<podcast_id>")
def get_note_for_podcast(user_id: str, podcast_id: str):
    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        if not user:
            return jsonify({"error": "not found"}), 404
        note = UsersService.note_for_podcast(session, user, podcast_id)
        if not note:
            return jsonify({"error": "note not found"}), 404
        return jsonify(note.to_dict())
    finally:
        session.close()


@api_bp.route("/users/<user_id>/notes", methods=["POST"])
def add_note(user_id: str):
    """POST /api/v1/users/{id}/notes  {podcast_id, note}"""
    data = _json_body()
    podcast_id = str(data.get("podcast_id") or "").strip()
    if not podcast_id:
        return jsonify({"error": "podcast_id is required"}), 400

    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        if not user:
            return jsonify({"error": "not found"}), 404
        note = UsersService.add_note(session, user, podcast_id, data.get("note"))
        if note is None:
            return jsonify({"error": "podcast not found"}), 404
        session.commit()
        return jsonify(note.to_dict()), 201
    except ValidationError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    finally:
        session.close()


@api_bp.route("/users/<user_id>/notes/by-id/<note_id>", methods=["PUT"])
def update_note(user_id: str, note_id: str):
    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        note = UsersService.get_note(session, user, note_id) if user else None
        if not note:
            return jsonify({"error": "not found"}), 404
        UsersService.update_note(session, note, _json_body().get("note"))
        session.commit()
        return jsonify(note.to_dict())
    except ValidationError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    finally:
        session.close()


@api_bp.route("/users/<user_id>/notes/by-id/<note_id>", methods=["DELETE"])
def delete_note(user_id: str, note_id: str):
    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        note = UsersService.get_note(session, user, note_id) if user else None
        if not note:
            return jsonify({"error": "not found"}), 404
        UsersService.delete_note(session, note)
        session.commit()
        return "", 204
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
