# core/config.py
import os

from dotenv import load_dotenv

# Load .env
load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# ---- ENV VALUES ----
BIBLE_DB_PATH = os.getenv("BIBLE_DB_PATH", os.path.join(BASE_DIR, "bible.db"))
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Version read when the client does not name one
DEFAULT_VERSION_CODE = os.getenv("DEFAULT_VERSION_CODE", "fin2017")

# Version whose text carries Strong's tags
STRONGS_VERSION_CODE = os.getenv("STRONGS_VERSION_CODE", "KJV")

TEXT_SEARCH_LIMIT = int(os.getenv("TEXT_SEARCH_LIMIT", "50"))
READING_HISTORY_LIMIT = int(os.getenv("READING_HISTORY_LIMIT", "50"))
LEXICON_HISTORY_LIMIT = int(os.getenv("LEXICON_HISTORY_LIMIT", "50"))

# "en" shows canonical book names, "fi" Finnish display names
BOOK_DISPLAY_LOCALE = os.getenv("BOOK_DISPLAY_LOCALE", "en")

# Source for scripts/import_lexicon.py
LEXICON_SOURCE_URL = os.getenv(
    "LEXICON_SOURCE_URL",
    "https://raw.githubusercontent.com/openscriptures/strongs/master/greek/strongs-greek-dictionary.js",
)

# CORS origins, comma separated ("*" allows all)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


def as_flask_config() -> dict:
    """Settings copied into app.config by create_app()."""
    return {
        "SECRET_KEY": SECRET_KEY,
        "BIBLE_DB_PATH": BIBLE_DB_PATH,
        "DEFAULT_VERSION_CODE": DEFAULT_VERSION_CODE,
        "STRONGS_VERSION_CODE": STRONGS_VERSION_CODE,
        "TEXT_SEARCH_LIMIT": TEXT_SEARCH_LIMIT,
        "READING_HISTORY_LIMIT": READING_HISTORY_LIMIT,
        "LEXICON_HISTORY_LIMIT": LEXICON_HISTORY_LIMIT,
        "BOOK_DISPLAY_LOCALE": BOOK_DISPLAY_LOCALE,
    }
