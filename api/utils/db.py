import sqlite3

from core.config import BIBLE_DB_PATH


def get_db(path: str = None):
    """
    Return a sqlite3 connection to the Bible DB.

    Rows come back as sqlite3.Row and foreign keys are enforced.
    """
    conn = sqlite3.connect(path or BIBLE_DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn
