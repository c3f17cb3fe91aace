#!/usr/bin/env python3
"""
Import a Bible version from a JSON file.

File format:
    {
      "version": {"code": "KJV", "name": "King James Version", "language": "en"},
      "verses": [
        {"book": "John", "chapter": 3, "verse": 16, "text": "For God so loved..."},
        {"book": "Gen", "chapter": 1, "verse": 1, "tagged_text": "In the beginning<H7225> ..."},
        {"book": "Mal", "chapter": 3, "verse": 19, "text": "...", "osis": "Mal.4.1"}
      ]
    }

"book" may be any recognized name or abbreviation. "osis" is only needed
where this version numbers a verse differently from the shared verse key.
When only "tagged_text" is given the plain text is derived from it.
Run from the api directory.

Usage:
    python -m scripts.import_bible kjv.json
    python -m scripts.import_bible fin2017.json --db bible.db
"""

import argparse
import json
import logging
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import BIBLE_DB_PATH
from services.scripture.ingest import add_verse, add_version, ensure_books
from utils.db import get_db

logger = logging.getLogger(__name__)


def import_version(conn, data: dict) -> int:
    """
    Import one version document; returns the number of verses written.

    Raises:
        ValueError: Missing version header or unknown book
    """
    version = data.get("version") or {}
    if not version.get("code"):
        raise ValueError("version.code is required")

    ensure_books(conn)
    version_id = add_version(
        conn,
        version["code"],
        version.get("name") or version["code"],
        version.get("language") or "en",
        version.get("is_active", True),
    )

    count = 0
    for verse in data.get("verses", []):
        add_verse(
            conn,
            version_id,
            verse["book"],
            int(verse["chapter"]),
            int(verse["verse"]),
            text=verse.get("text"),
            osis=verse.get("osis"),
            tagged_text=verse.get("tagged_text"),
            audio_url=verse.get("audio_url"),
        )
        count += 1

    logger.info(f"Imported {count} verses for {version['code']}")
    return count


def main():
    parser = argparse.ArgumentParser(description="Import a Bible version")
    parser.add_argument("file", help="Version JSON file")
    parser.add_argument("--db", default=BIBLE_DB_PATH, help="Database path")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    with open(args.file, encoding="utf-8") as f:
        data = json.load(f)

    conn = get_db(args.db)
    try:
        count = import_version(conn, data)
        conn.commit()
    except (KeyError, ValueError) as e:
        conn.rollback()
        print(f"  ✗ Import failed: {e}")
        return 1
    finally:
        conn.close()

    print(f"  ✓ Imported {count} verses into {args.db}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
