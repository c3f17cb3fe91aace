import logging
import sqlite3

from flask import Blueprint, request, jsonify
from werkzeug.security import generate_password_hash, check_password_hash

from services.scripture import StoreError
from utils.app_services import get_store
from utils.auth import get_current_user_id, login_user, logout_user
from utils.errors import conflict, invalid_credentials, missing_field

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api")

USERNAME_TAKEN = "Username already exists"

# --- Helper functions --------------------------------------------------------


def _fetch_user(sql, params):
    try:
        with get_store().connect() as conn:
            return conn.execute(sql, params).fetchone()
    except sqlite3.Error as e:
        logger.error(f"User query failed: {e}")
        raise StoreError(str(e)) from e


def get_user_by_username(username):
    return _fetch_user("SELECT * FROM users WHERE username = ?", (username,))


def get_user_by_id(user_id):
    return _fetch_user("SELECT * FROM users WHERE id = ?", (user_id,))


def create_user(username, display_name, password):
    if get_user_by_username(username):
        return None, USERNAME_TAKEN

    pw_hash = generate_password_hash(password)

    try:
        with get_store().connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO users (username, display_name, password_hash)
                VALUES (?, ?, ?)
                """,
                (username, display_name, pw_hash),
            )
            conn.commit()
            return cur.lastrowid, None
    except sqlite3.IntegrityError:
        # Registered between the lookup and the insert
        return None, USERNAME_TAKEN
    except sqlite3.Error as e:
        logger.error(f"User insert failed: {e}")
        raise StoreError(str(e)) from e


def _public(user) -> dict:
    return {
        "id": user["id"],
        "username": user["username"],
        "display_name": user["display_name"],
    }


# --- Routes ------------------------------------------------------------------


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    display_name = data.get("display_name") or username

    if not username:
        return missing_field("username")
    if not password:
        return missing_field("password")

    user_id, err = create_user(username, display_name, password)
    if err:
        return conflict("username_taken", err)

    login_user(user_id)

    return jsonify(
        {
            "id": user_id,
            "username": username,
            "display_name": display_name,
        }
    ), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""

    if not username:
        return missing_field("username")

    user = get_user_by_username(username)
    if not user or not check_password_hash(user["password_hash"], password):
        return invalid_credentials()

    login_user(user["id"])
    return jsonify(_public(user))


@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"success": True})


@auth_bp.route("/me", methods=["GET"])
def me():
    user_id = get_current_user_id()
    if not user_id:
        return jsonify({"user": None})

    user = get_user_by_id(user_id)
    if not user:
        logout_user()
        return jsonify({"user": None})

    return jsonify({"user": _public(user)})
