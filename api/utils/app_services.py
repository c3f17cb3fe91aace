# api/utils/app_services.py
"""
Service accessors for route handlers.

create_app() builds one BibleStore and keeps it in
app.extensions["bible_store"]; services are thin wrappers around it and
are created per call from the app config.
"""

from flask import current_app

from services.annotations_service import AnnotationService
from services.scripture import BibleStore, ScriptureService

STORE_KEY = "bible_store"


def get_store() -> BibleStore:
    return current_app.extensions[STORE_KEY]


def get_scripture_service() -> ScriptureService:
    config = current_app.config
    return ScriptureService(
        get_store(),
        default_version_code=config["DEFAULT_VERSION_CODE"],
        strongs_version_code=config["STRONGS_VERSION_CODE"],
        locale=config["BOOK_DISPLAY_LOCALE"],
    )


def get_annotation_service() -> AnnotationService:
    config = current_app.config
    return AnnotationService(
        get_store(),
        history_limit=config["READING_HISTORY_LIMIT"],
        locale=config["BOOK_DISPLAY_LOCALE"],
    )
