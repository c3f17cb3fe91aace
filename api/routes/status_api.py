from flask import Blueprint, current_app, jsonify
from datetime import datetime, timezone

from services.scripture import StoreError
from utils.app_services import get_store

status_bp = Blueprint("status_api", __name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _check_database() -> tuple[bool, str]:
    """Check if the Bible database answers queries."""
    try:
        get_store().ping()
        return True, "ok"
    except StoreError as e:
        return False, str(e)


def _check_versions() -> tuple[bool, str]:
    """Check that the default and Strong's versions are installed."""
    store = get_store()
    wanted = [
        current_app.config["DEFAULT_VERSION_CODE"],
        current_app.config["STRONGS_VERSION_CODE"],
    ]
    try:
        missing = [code for code in wanted if store.get_version(code) is None]
    except StoreError as e:
        return False, str(e)
    if missing:
        return False, f"missing: {', '.join(missing)}"
    return True, "ok"


@status_bp.get("/status")
def status():
    """Basic status check."""
    return jsonify({"status": "ok", "time_utc": _utc_now()})


@status_bp.get("/health")
def health():
    """
    Component health check.

    HTTP 200 if the database is reachable, 503 otherwise. Missing versions
    are reported but do not fail the check.
    """
    db_ok, db_detail = _check_database()
    versions_ok, versions_detail = _check_versions() if db_ok else (False, "database down")

    response = {
        "status": "healthy" if db_ok else "unhealthy",
        "time_utc": _utc_now(),
        "components": {
            "database": {"ok": db_ok, "detail": db_detail},
            "versions": {"ok": versions_ok, "detail": versions_detail},
        },
    }

    return jsonify(response), 200 if db_ok else 503
