#!/usr/bin/env python3
"""
Import a Strong's lexicon into the Bible database.

Reads the Open Scriptures Strong's dictionaries (Greek or Hebrew), either
downloaded from LEXICON_SOURCE_URL or from a local file. Those files are
JavaScript assigning one JSON object keyed by Strong's number; the object
is cut out of the surrounding code and parsed as JSON.

Identifiers are normalized on import ("H0085" -> "H85").
Run from the api directory.

Usage:
    python -m scripts.import_lexicon
    python -m scripts.import_lexicon --url https://.../strongs-hebrew-dictionary.js
    python -m scripts.import_lexicon --file strongs-greek-dictionary.js
    python -m scripts.import_lexicon --file lexicon.json --db bible.db
"""

import argparse
import json
import logging
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import BIBLE_DB_PATH, LEXICON_SOURCE_URL
from services.scripture.ingest import entry_from_openscriptures, import_lexicon
from utils.db import get_db
from utils.http_retry import get_with_retry

logger = logging.getLogger(__name__)


def parse_dictionary_source(text: str) -> dict:
    """
    Extract the dictionary object from a .js or .json source.

    Raises:
        ValueError: If no JSON object can be found
    """
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        raise ValueError("No dictionary object found in source")
    return json.loads(text[start:end + 1])


def load_entries(text: str) -> list:
    """Lexicon entries ready for import from dictionary source text."""
    data = parse_dictionary_source(text)
    return [entry_from_openscriptures(number, record) for number, record in data.items()]


def main():
    parser = argparse.ArgumentParser(
        description="Import a Strong's lexicon",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scripts.import_lexicon                       # Download default source
  python -m scripts.import_lexicon --file greek.js       # Local file
        """,
    )
    parser.add_argument("--url", default=LEXICON_SOURCE_URL, help="Source URL")
    parser.add_argument("--file", help="Read a local file instead of downloading")
    parser.add_argument("--db", default=BIBLE_DB_PATH, help="Database path")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    if args.file:
        print(f"Reading {args.file}")
        with open(args.file, encoding="utf-8") as f:
            text = f.read()
    else:
        print(f"Downloading {args.url}")
        try:
            text = get_with_retry(args.url, timeout=120).text
        except RuntimeError as e:
            print(f"  ✗ Download failed: {e}")
            return 1

    try:
        entries = load_entries(text)
    except ValueError as e:
        print(f"  ✗ Could not parse source: {e}")
        return 1

    conn = get_db(args.db)
    try:
        count = import_lexicon(conn, entries)
        conn.commit()
    finally:
        conn.close()

    print(f"  ✓ Imported {count} entries into {args.db}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
