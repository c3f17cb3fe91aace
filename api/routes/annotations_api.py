# routes/annotations_api.py
"""
API endpoints for per-user annotations.

Provides access to:
- Markings (highlights, comments, bookmarks) on verses
- Reading history
- Last reading position
"""

from flask import Blueprint, jsonify, request, session

from services.annotations_service import MARKING_TYPES, HISTORY_TYPES, POSITION_SESSION_KEY
from utils.app_services import get_annotation_service, get_store
from utils.auth import get_current_user_id, require_login
from utils.errors import invalid_field, missing_field, not_found

annotations_bp = Blueprint("annotations_api", __name__, url_prefix="/api")


# =============================================================================
# Markings
# =============================================================================

@annotations_bp.get("/markings")
@require_login
def list_markings():
    """
    The user's markings, newest first.

    Query params:
        type: highlight | comment | bookmark (optional)
        limit: Maximum results (optional)
    """
    marking_type = request.args.get("type")
    if marking_type and marking_type not in MARKING_TYPES:
        return invalid_field("type", f"Expected one of {', '.join(MARKING_TYPES)}")

    markings = get_annotation_service().list_markings(
        get_current_user_id(),
        marking_type=marking_type,
        limit=request.args.get("limit", type=int),
    )
    return jsonify({"markings": [m.to_dict() for m in markings]})


@annotations_bp.post("/markings")
@require_login
def create_marking():
    """
    Mark a verse.

    Body:
        {"verse_id": 12, "type": "highlight", "color": "yellow"}
        {"verse_id": 12, "type": "comment", "content": "..."}
        {"verse_id": 12, "type": "bookmark"}
    """
    data = request.get_json(silent=True) or {}
    verse_id = data.get("verse_id")
    marking_type = data.get("type")
    if not verse_id:
        return missing_field("verse_id")
    if not marking_type:
        return missing_field("type")

    try:
        marking = get_annotation_service().add_marking(
            get_current_user_id(),
            int(verse_id),
            marking_type,
            color=data.get("color"),
            content=data.get("content"),
        )
    except (TypeError, ValueError) as e:
        return invalid_field("marking", str(e))

    if marking is None:
        return not_found("verse")
    return jsonify(marking.to_dict()), 201


@annotations_bp.patch("/markings/<int:marking_id>")
@require_login
def update_marking(marking_id):
    """Change color and/or content of one of the user's markings."""
    data = request.get_json(silent=True) or {}
    marking = get_annotation_service().update_marking(
        get_current_user_id(),
        marking_id,
        color=data.get("color"),
        content=data.get("content"),
    )
    if marking is None:
        return not_found("marking")
    return jsonify(marking.to_dict())


@annotations_bp.delete("/markings/<int:marking_id>")
@require_login
def delete_marking(marking_id):
    if not get_annotation_service().delete_marking(get_current_user_id(), marking_id):
        return not_found("marking")
    return jsonify({"success": True})


@annotations_bp.get("/markings/summary")
@require_login
def markings_summary():
    """Counts per marking type: {"highlight": 3, "comment": 1, "bookmark": 0}"""
    return jsonify(get_annotation_service().marking_counts(get_current_user_id()))


# =============================================================================
# Reading history and position
# =============================================================================

@annotations_bp.get("/reading/history")
@require_login
def get_reading_history():
    """
    Recently read or listened chapters, newest first.

    Query params:
        type: read | listen (optional)
        limit: Maximum results, capped by READING_HISTORY_LIMIT (optional)
    """
    history_type = request.args.get("type")
    if history_type and history_type not in HISTORY_TYPES:
        return invalid_field("type", f"Expected one of {', '.join(HISTORY_TYPES)}")

    entries = get_annotation_service().reading_history(
        get_current_user_id(),
        history_type=history_type,
        limit=request.args.get("limit", type=int),
    )
    return jsonify({"history": [e.to_dict() for e in entries]})


@annotations_bp.post("/reading/history")
@require_login
def record_reading():
    """
    Record a read or listened chapter.

    Body:
        {"book": "Joh", "chapter": 3, "version": "KJV", "verse": 16, "type": "listen"}
    """
    data = request.get_json(silent=True) or {}
    book = (data.get("book") or "").strip()
    chapter = data.get("chapter")
    if not book:
        return missing_field("book")
    if not chapter:
        return missing_field("chapter")

    version_id = None
    if data.get("version"):
        version = get_store().get_version(data["version"])
        if version is None:
            return not_found("version")
        version_id = version.id

    verse = data.get("verse")
    try:
        entry = get_annotation_service().record_reading(
            get_current_user_id(),
            book,
            int(chapter),
            version_id=version_id,
            verse_number=int(verse) if verse is not None else None,
            history_type=data.get("type") or "read",
        )
    except (TypeError, ValueError) as e:
        return invalid_field("reading", str(e))

    if entry is None:
        return not_found("book")
    return jsonify(entry.to_dict()), 201


@annotations_bp.get("/reading/position")
def get_reading_position():
    """Last chapter viewed in this session, or {"position": null}."""
    return jsonify({"position": session.get(POSITION_SESSION_KEY)})
