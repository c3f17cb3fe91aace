# routes/bible_api.py
"""
API endpoints for reading scripture.

Provides access to:
- Bible versions and the canonical book list
- Chapter reading (records the last reading position in the session)
- Single verses by OSIS key, with their Strong's-tagged text
- The same passage in several versions
"""

from flask import Blueprint, jsonify, request, session

from services.annotations_service import POSITION_SESSION_KEY, position_payload
from utils.app_services import get_scripture_service
from utils.errors import invalid_field, missing_field, not_found

bible_bp = Blueprint("bible_api", __name__, url_prefix="/api/bible")


@bible_bp.get("/versions")
def list_versions():
    """
    Active Bible versions, ordered by code.

    Returns:
        {"versions": [{"id": 1, "code": "KJV", "name": "...", "language": "en"}]}
    """
    versions = get_scripture_service().versions()
    return jsonify({"versions": [v.to_dict() for v in versions]})


@bible_bp.get("/books")
def list_books():
    """
    Books in canonical order.

    Query params:
        locale: "en" or "fi" for display names (optional)
    """
    books = get_scripture_service().books(request.args.get("locale"))
    return jsonify({"books": [b.to_dict() for b in books]})


@bible_bp.get("/chapter/<book>/<int:chapter>")
def get_chapter(book, chapter):
    """
    All verses of a chapter.

    The book may be any recognized form ("Joh", "I John", "1. Moos").

    Query params:
        version: Version code or id (optional, configured default otherwise)

    Returns:
        {"book": "John", "chapter": 3, "version": "KJV", "verses": [...]}
    """
    result = get_scripture_service().get_chapter(book, chapter, request.args.get("version"))
    if result is None:
        return not_found("chapter")

    session[POSITION_SESSION_KEY] = position_payload(result.book, result.chapter, result.version_code)
    return jsonify(result.to_dict())


@bible_bp.get("/verse/<osis>")
def get_verse(osis):
    """
    A verse by key (e.g. "John.3.16") with its tagged text and words.

    Query params:
        version: Reading version (optional)
    """
    study = get_scripture_service().study_verse(osis, request.args.get("version"))
    if study is None:
        return not_found("verse")
    return jsonify(study)


@bible_bp.get("/compare")
def compare_versions():
    """
    Compare a passage across versions.

    Query params:
        ref: Reference string (required) e.g., "Joh 3:16-17"
        versions: Comma-separated version codes (required) e.g., "KJV,fin2017"

    Returns:
        {
            "reference": {"book": "John", "chapter": 3, ...},
            "versions": {"KJV": [...], "fin2017": [...]},
            "missing": []
        }
    """
    ref = request.args.get("ref")
    versions = request.args.get("versions")
    if not ref:
        return missing_field("ref")
    if not versions:
        return missing_field("versions")

    codes = [v.strip() for v in versions.split(",") if v.strip()]
    result = get_scripture_service().compare(ref, codes)
    if result is None:
        return invalid_field("ref", f"Not a Bible reference: {ref}")
    return jsonify(result)
