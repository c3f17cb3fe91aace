# api/utils/auth.py
"""
Session authentication helpers for API routes.

Usage:

    @require_login
    def list_markings():
        user_id = get_current_user_id()
        ...
"""

from functools import wraps
from flask import session

from utils.errors import not_authenticated


def require_login(fn):
    """
    Decorator that requires an authenticated session.

    Returns 401 with {"error": "not_authenticated"} if not logged in.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not session.get("user_id"):
            return not_authenticated()
        return fn(*args, **kwargs)
    return wrapper


def get_current_user_id():
    """User id from the session, None when anonymous."""
    return session.get("user_id")


def login_user(user_id: int):
    session["user_id"] = user_id


def logout_user():
    """Forget the user and everything kept for them in the session."""
    session.clear()
