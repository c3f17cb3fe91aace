# api/services/scripture/ingest.py
"""
Import helpers for scripture text and the Strong's lexicon.

Strong's identifiers arrive from sources with mixed conventions
("H0085", "h85", "85"). They are normalized here, once, so the lookup
side never has to try variants.

All functions take an open connection and leave committing to the caller.
"""

import json
import logging
import sqlite3
from typing import Iterable, Optional

from .books import BOOKS, get_book
from .reference_parser import osis_key
from .tagged_text import normalize_strongs, parse_tagged_text, strip_tags

logger = logging.getLogger(__name__)


def ensure_books(conn: sqlite3.Connection) -> int:
    """Insert the canonical book table; returns number of new rows."""
    cur = conn.executemany(
        """
        INSERT OR IGNORE INTO books (name, osis_code, testament, book_order, chapters_count)
        VALUES (?, ?, ?, ?, 0)
        """,
        [(b.name, b.osis, b.testament, b.order) for b in BOOKS],
    )
    return cur.rowcount


def add_version(
    conn: sqlite3.Connection,
    code: str,
    name: str,
    language: str,
    is_active: bool = True,
) -> int:
    """Create a version if missing and return its id."""
    conn.execute(
        "INSERT OR IGNORE INTO bible_versions (code, name, language, is_active) VALUES (?, ?, ?, ?)",
        (code, name, language, int(is_active)),
    )
    return conn.execute("SELECT id FROM bible_versions WHERE code = ?", (code,)).fetchone()[0]


def _book_id(conn: sqlite3.Connection, book_name: str) -> int:
    book = get_book(book_name)
    if book is None:
        raise ValueError(f"Unknown book: {book_name}")
    row = conn.execute("SELECT id FROM books WHERE name = ?", (book.name,)).fetchone()
    if row is None:
        ensure_books(conn)
        row = conn.execute("SELECT id FROM books WHERE name = ?", (book.name,)).fetchone()
    return row[0]


def ensure_chapter(conn: sqlite3.Connection, book_id: int, chapter_number: int) -> int:
    """Create a chapter if missing, keep the book's chapter count current."""
    conn.execute(
        "INSERT OR IGNORE INTO chapters (book_id, chapter_number) VALUES (?, ?)",
        (book_id, chapter_number),
    )
    conn.execute(
        "UPDATE books SET chapters_count = MAX(chapters_count, ?) WHERE id = ?",
        (chapter_number, book_id),
    )
    return conn.execute(
        "SELECT id FROM chapters WHERE book_id = ? AND chapter_number = ?",
        (book_id, chapter_number),
    ).fetchone()[0]


def ensure_verse_key(conn: sqlite3.Connection, osis: str) -> int:
    conn.execute("INSERT OR IGNORE INTO verse_keys (osis) VALUES (?)", (osis,))
    return conn.execute("SELECT id FROM verse_keys WHERE osis = ?", (osis,)).fetchone()[0]


def add_verse(
    conn: sqlite3.Connection,
    version_id: int,
    book: str,
    chapter: int,
    verse: int,
    text: Optional[str] = None,
    osis: Optional[str] = None,
    tagged_text: Optional[str] = None,
    audio_url: Optional[str] = None,
) -> int:
    """
    Insert (or replace) one verse.

    Args:
        version_id: Owning version
        book: Any recognized book token
        chapter: Chapter number within this version
        verse: Verse number within this version
        text: Plain text; derived from tagged_text when omitted
        osis: Verse key; defaults to the key built from book/chapter/verse.
              Pass it explicitly when this version numbers the verse
              differently from the key.
        tagged_text: Strong's-tagged text, also split into tagged words
        audio_url: Optional audio link

    Returns:
        Verse id
    """
    book_info = get_book(book)
    if book_info is None:
        raise ValueError(f"Unknown book: {book}")
    if text is None:
        if tagged_text is None:
            raise ValueError("text or tagged_text is required")
        text = strip_tags(tagged_text)

    chapter_id = ensure_chapter(conn, _book_id(conn, book_info.name), chapter)
    key_id = ensure_verse_key(conn, osis or osis_key(book_info.osis, chapter, verse))

    existing = conn.execute(
        "SELECT id FROM verses WHERE version_id = ? AND chapter_id = ? AND verse_number = ?",
        (version_id, chapter_id, verse),
    ).fetchone()
    if existing:
        verse_id = existing[0]
        conn.execute(
            """
            UPDATE verses SET text = ?, tagged_text = ?, audio_url = ?, verse_key_id = ?
            WHERE id = ?
            """,
            (text, tagged_text, audio_url, key_id, verse_id),
        )
    else:
        cur = conn.execute(
            """
            INSERT INTO verses (chapter_id, version_id, verse_number, text, tagged_text, audio_url, verse_key_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (chapter_id, version_id, verse, text, tagged_text, audio_url, key_id),
        )
        verse_id = cur.lastrowid

    conn.execute(
        "UPDATE chapters SET verses_count = MAX(verses_count, ?) WHERE id = ?",
        (verse, chapter_id),
    )

    if tagged_text:
        import_tagged_words(conn, verse_id, tagged_text)
    return verse_id


def import_tagged_words(conn: sqlite3.Connection, verse_id: int, tagged_text: str) -> int:
    """
    Replace a verse's tagged words with those parsed from tagged_text.

    Returns:
        Number of rows written
    """
    conn.execute("DELETE FROM strongs_words WHERE verse_id = ?", (verse_id,))
    rows = []
    for order, unit in enumerate(parse_tagged_text(tagged_text), start=1):
        if not unit.strongs_numbers:
            rows.append((verse_id, order, unit.text, None))
            continue
        for number in dict.fromkeys(unit.strongs_numbers):
            rows.append((verse_id, order, unit.text, number))
    conn.executemany(
        "INSERT INTO strongs_words (verse_id, word_order, word_text, strongs_number) VALUES (?, ?, ?, ?)",
        rows,
    )
    return len(rows)


def _as_list(value) -> list:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return list(value)


def import_lexicon_entry(conn: sqlite3.Connection, entry: dict) -> str:
    """
    Insert or replace one lexicon entry.

    The identifier and the compare/see_also references are normalized.

    Returns:
        Normalized Strong's number
    """
    number = normalize_strongs(str(entry["strongs_number"]))
    language = entry.get("language")
    if not language and number[:1] in ("G", "H"):
        language = "greek" if number.startswith("G") else "hebrew"

    conn.execute(
        """
        INSERT OR REPLACE INTO strongs_lexicon (
            strongs_number, language, lemma, transliterations, pronunciations,
            derivation, part_of_speech, definition_short, definition_lit,
            definition_long, notes, compare, see_also
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            number,
            language,
            entry.get("lemma"),
            json.dumps(_as_list(entry.get("transliterations")), ensure_ascii=False),
            json.dumps(_as_list(entry.get("pronunciations")), ensure_ascii=False),
            entry.get("derivation"),
            entry.get("part_of_speech"),
            entry.get("definition_short"),
            entry.get("definition_lit"),
            entry.get("definition_long"),
            entry.get("notes"),
            json.dumps([normalize_strongs(n) for n in _as_list(entry.get("compare"))]),
            json.dumps([normalize_strongs(n) for n in _as_list(entry.get("see_also"))]),
        ),
    )
    return number


def import_lexicon(conn: sqlite3.Connection, entries: Iterable[dict]) -> int:
    """Import many lexicon entries; returns the count."""
    count = 0
    for entry in entries:
        import_lexicon_entry(conn, entry)
        count += 1
    logger.info(f"Imported {count} lexicon entries")
    return count


def entry_from_openscriptures(number: str, data: dict) -> dict:
    """
    Map one record of the Open Scriptures Strong's dictionaries.

    Those files are keyed by identifier ("G25", "H85") with fields
    lemma, translit/xlit, pron, derivation, strongs_def, kjv_def.
    """
    return {
        "strongs_number": number,
        "lemma": data.get("lemma"),
        "transliterations": [t for t in (data.get("translit") or data.get("xlit"),) if t],
        "pronunciations": [p for p in (data.get("pron"),) if p],
        "derivation": data.get("derivation"),
        "definition_short": (data.get("strongs_def") or "").strip() or None,
        "definition_long": (data.get("kjv_def") or "").strip() or None,
    }
