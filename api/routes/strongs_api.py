# routes/strongs_api.py
"""
API endpoints for Strong's numbers.

Provides access to:
- Lexicon entries with embedded cross-references resolved to lemmas
- Verses carrying a Strong's number, optionally mapped into another version
- Tagged text of a verse key
- Mapping a verse into another version through its verse key
- Lexicon navigation history (kept in the user's session)
"""

import logging

from flask import Blueprint, current_app, jsonify, request, session

from services.scripture import LexiconHistory, StoreError, StrongsResolver
from services.scripture.search import SEARCH_FAILED_NOTICE
from services.scripture.tagged_text import parse_tagged_text
from utils.app_services import get_store
from utils.errors import error_response, missing_field, not_found

logger = logging.getLogger(__name__)

strongs_bp = Blueprint("strongs_api", __name__, url_prefix="/api/strongs")

HISTORY_SESSION_KEY = "lexicon_history"


def get_resolver() -> StrongsResolver:
    return StrongsResolver(get_store(), current_app.config["STRONGS_VERSION_CODE"])


def _load_history() -> LexiconHistory:
    return LexiconHistory.from_dict(
        session.get(HISTORY_SESSION_KEY),
        limit=current_app.config["LEXICON_HISTORY_LIMIT"],
    )


def _save_history(history: LexiconHistory):
    session[HISTORY_SESSION_KEY] = {"entries": history.entries, "index": history.index}
    return jsonify(history.to_dict())


# =============================================================================
# Lexicon
# =============================================================================

@strongs_bp.get("/lexicon/<number>")
def get_lexicon_entry(number):
    """
    Lexicon entry for a Strong's number ("G25", "H0085", "h85").

    Returns:
        {
            "strongs_number": "H85",
            "found": true,
            "label": "...",
            "entry": {..., "links": {...}, "compare": [...], "see_also": [...]}
        }
    """
    resolved = get_resolver().resolve(number)
    if not resolved["found"]:
        # Unknown entries still carry their identifier as the display label
        return error_response(
            "not_found",
            404,
            f"No lexicon entry for {resolved['strongs_number']}",
            **resolved,
        )
    return jsonify(resolved)


@strongs_bp.get("/verses/<number>")
def get_strongs_verses(number):
    """
    Verses whose tagged text carries a Strong's number.

    Query params:
        version: Map each hit into this version (optional)
        limit: Maximum verses (optional)
    """
    resolver = get_resolver()
    try:
        result = resolver.verses_for(
            number,
            version=request.args.get("version") or None,
            limit=request.args.get("limit", type=int),
        )
    except StoreError as e:
        logger.error(f"Strong's verse search failed for {number}: {e}")
        return jsonify({
            "search_term": number,
            "verses": [],
            "total_count": 0,
            "notice": SEARCH_FAILED_NOTICE,
        })
    return jsonify(result.to_dict())


@strongs_bp.get("/tagged/<osis>")
def get_tagged_verse(osis):
    """Tagged text of a verse key in the Strong's version, split into words."""
    verse = get_resolver().tagged_verse(osis)
    if verse is None:
        return not_found("verse")
    data = verse.to_dict()
    data["words"] = [w.to_dict() for w in parse_tagged_text(verse.tagged_text)]
    return jsonify(data)


@strongs_bp.get("/map/<int:verse_id>")
def map_verse(verse_id):
    """
    The verse in another version with the same verse key.

    Query params:
        version: Target version code or id (required)
    """
    version = request.args.get("version")
    if not version:
        return missing_field("version")
    verse = get_resolver().map_verse(verse_id, version)
    if verse is None:
        return not_found("verse")
    return jsonify(verse.to_dict())


# =============================================================================
# History
# =============================================================================

@strongs_bp.get("/history")
def get_history():
    return jsonify(_load_history().to_dict())


@strongs_bp.post("/history")
def push_history():
    """
    Open a lexicon entry: push it onto the history.

    Body:
        {"strongs_number": "G25"}
    """
    data = request.get_json(silent=True) or {}
    number = (data.get("strongs_number") or "").strip()
    if not number:
        return missing_field("strongs_number")

    history = _load_history()
    history.push(number)
    return _save_history(history)


@strongs_bp.post("/history/back")
def history_back():
    history = _load_history()
    history.back()
    return _save_history(history)


@strongs_bp.post("/history/forward")
def history_forward():
    history = _load_history()
    history.forward()
    return _save_history(history)
