# routes/search_api.py
from flask import Blueprint, current_app, jsonify, request

from services.scripture import perform_search
from utils.app_services import get_store

search_bp = Blueprint("search_api", __name__, url_prefix="/api")


@search_bp.get("/search")
def search():
    """
    Scripture search.

    "q" is tried as a reference first ("1.Joh.1:2-5", "Matt 5:14"); anything
    else is a full-text search. Backend failures come back as an empty
    result with a "notice", still HTTP 200.

    Query params:
        q: Query (empty gives an empty text result)
        version: Version code or id (optional, all versions otherwise)

    Returns:
    {
      "type": "reference" | "text",
      "verses": [...],
      "reference": {...} | null,
      "notice": null | "..."
    }
    """
    query = (request.args.get("q") or "").strip()
    result = perform_search(
        get_store(),
        query,
        version=request.args.get("version"),
        limit=current_app.config["TEXT_SEARCH_LIMIT"],
    )
    return jsonify(result.to_dict())
