# api/services/scripture/store.py
"""
Data access for scripture text and the Strong's lexicon.

BibleStore is the single client handle for the Bible database. create_app()
builds one and every service receives it explicitly. Each method opens its
own short-lived connection and returns the dataclasses from models.py.

sqlite3 errors are re-raised as StoreError so callers can degrade to an
empty result without catching driver-specific exceptions.
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Union

from utils.db import get_db

from .models import (
    BibleVersion,
    Book,
    LexiconEntry,
    StrongsWord,
    TaggedVerse,
    Verse,
)

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when a database query fails."""
    pass


_VERSE_SELECT = """
    SELECT
        v.id, v.text, v.verse_number, v.audio_url,
        c.chapter_number, c.id AS chapter_id,
        b.name AS book_name, b.id AS book_id,
        bv.code AS version_code,
        k.osis
    FROM verses v
    JOIN chapters c ON c.id = v.chapter_id
    JOIN books b ON b.id = c.book_id
    JOIN bible_versions bv ON bv.id = v.version_id
    LEFT JOIN verse_keys k ON k.id = v.verse_key_id
"""

_CANONICAL_ORDER = "ORDER BY b.book_order, c.chapter_number, v.verse_number, bv.code"


def _verse(row) -> Verse:
    return Verse(
        id=row["id"],
        text=row["text"],
        verse_number=row["verse_number"],
        chapter_number=row["chapter_number"],
        book_name=row["book_name"],
        book_id=row["book_id"],
        chapter_id=row["chapter_id"],
        version_code=row["version_code"],
        osis=row["osis"],
        audio_url=row["audio_url"],
    )


def _version(row) -> BibleVersion:
    return BibleVersion(
        id=row["id"],
        code=row["code"],
        name=row["name"],
        language=row["language"],
        is_active=bool(row["is_active"]),
    )


def _book(row) -> Book:
    return Book(
        id=row["id"],
        name=row["name"],
        osis_code=row["osis_code"],
        testament=row["testament"],
        book_order=row["book_order"],
        chapters_count=row["chapters_count"],
    )


class BibleStore:
    """
    Read access to versions, books, verses and the lexicon.

    Usage:
        store = BibleStore("/path/to/bible.db")
        version = store.get_version("KJV")
        verses = store.chapter_verses("John", 3, version.id)
    """

    def __init__(self, db_path: str = None):
        self.db_path = db_path

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that is closed afterwards."""
        conn = get_db(self.db_path)
        try:
            yield conn
        finally:
            conn.close()

    def _fetch(self, sql: str, params: Iterable = ()) -> List[sqlite3.Row]:
        try:
            with self.connect() as conn:
                return conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Query failed: {e}")
            raise StoreError(str(e)) from e

    def _fetch_one(self, sql: str, params: Iterable = ()) -> Optional[sqlite3.Row]:
        rows = self._fetch(sql, params)
        return rows[0] if rows else None

    def ping(self) -> bool:
        """Run a trivial query; raises StoreError if the DB is unusable."""
        self._fetch("SELECT 1")
        return True

    # -------------------------------------------------------------------------
    # Versions and books
    # -------------------------------------------------------------------------

    def list_versions(self, active_only: bool = True) -> List[BibleVersion]:
        sql = "SELECT * FROM bible_versions"
        if active_only:
            sql += " WHERE is_active = 1"
        sql += " ORDER BY code"
        return [_version(r) for r in self._fetch(sql)]

    def get_version(self, code_or_id: Union[str, int]) -> Optional[BibleVersion]:
        """
        Look up a version by code ("KJV") or by numeric id (7 or "7").
        """
        if code_or_id is None or code_or_id == "":
            return None
        if isinstance(code_or_id, int) or str(code_or_id).isdigit():
            row = self._fetch_one(
                "SELECT * FROM bible_versions WHERE id = ?", (int(code_or_id),)
            )
            if row:
                return _version(row)
        row = self._fetch_one(
            "SELECT * FROM bible_versions WHERE code = ? COLLATE NOCASE",
            (str(code_or_id),),
        )
        return _version(row) if row else None

    def list_books(self) -> List[Book]:
        return [_book(r) for r in self._fetch("SELECT * FROM books ORDER BY book_order")]

    def get_book(self, name: str) -> Optional[Book]:
        row = self._fetch_one("SELECT * FROM books WHERE name = ?", (name,))
        return _book(row) if row else None

    # -------------------------------------------------------------------------
    # Verses
    # -------------------------------------------------------------------------

    def chapter_verses(self, book: str, chapter: int, version_id: int) -> List[Verse]:
        """All verses of one chapter in one version, in verse order."""
        rows = self._fetch(
            _VERSE_SELECT
            + " WHERE b.name = ? AND c.chapter_number = ? AND v.version_id = ? "
            + _CANONICAL_ORDER,
            (book, chapter, version_id),
        )
        return [_verse(r) for r in rows]

    def verses_for_reference(
        self,
        book: str,
        chapter_start: int,
        chapter_end: int,
        verses: Optional[List[int]] = None,
        version_id: Optional[int] = None,
    ) -> List[Verse]:
        """
        Equality/range lookup for a parsed reference.

        Args:
            book: Canonical book name
            chapter_start: First chapter
            chapter_end: Last chapter (same as chapter_start for one chapter)
            verses: Contiguous verse numbers, or None for whole chapters
            version_id: Restrict to one version, or None for all
        """
        sql = _VERSE_SELECT + " WHERE b.name = ? AND c.chapter_number BETWEEN ? AND ?"
        params: list = [book, chapter_start, chapter_end]
        if verses:
            sql += " AND v.verse_number BETWEEN ? AND ?"
            params.extend([min(verses), max(verses)])
        if version_id is not None:
            sql += " AND v.version_id = ?"
            params.append(version_id)
        sql += " " + _CANONICAL_ORDER
        return [_verse(r) for r in self._fetch(sql, params)]

    def text_search(
        self,
        fts_query: str,
        version_id: Optional[int] = None,
        limit: int = 50,
    ) -> List[Verse]:
        """Full-text search over verse text using an FTS5 MATCH expression."""
        sql = (
            _VERSE_SELECT
            + " JOIN verses_fts ON verses_fts.rowid = v.id WHERE verses_fts MATCH ?"
        )
        params: list = [fts_query]
        if version_id is not None:
            sql += " AND v.version_id = ?"
            params.append(version_id)
        sql += f" {_CANONICAL_ORDER} LIMIT ?"
        params.append(limit)
        return [_verse(r) for r in self._fetch(sql, params)]

    def verse_by_id(self, verse_id: int) -> Optional[Verse]:
        row = self._fetch_one(_VERSE_SELECT + " WHERE v.id = ?", (verse_id,))
        return _verse(row) if row else None

    def verse_by_osis(self, osis: str, version_id: int) -> Optional[Verse]:
        row = self._fetch_one(
            _VERSE_SELECT + " WHERE k.osis = ? AND v.version_id = ?",
            (osis, version_id),
        )
        return _verse(row) if row else None

    def verse_in_version(self, verse_id: int, version_id: int) -> Optional[Verse]:
        """
        The verse in another version that shares this verse's key.

        Chapter and verse numbers are not compared: versions may segment
        verses differently, the key is the only stable identity.
        """
        row = self._fetch_one(
            _VERSE_SELECT
            + """
            JOIN verses src ON src.verse_key_id = v.verse_key_id
            WHERE src.id = ? AND v.version_id = ?
            """,
            (verse_id, version_id),
        )
        return _verse(row) if row else None

    # -------------------------------------------------------------------------
    # Strong's tagging and lexicon
    # -------------------------------------------------------------------------

    def tagged_verse(self, osis: str, version_id: int) -> Optional[TaggedVerse]:
        row = self._fetch_one(
            """
            SELECT v.id, v.text, v.tagged_text, k.osis
            FROM verses v
            JOIN verse_keys k ON k.id = v.verse_key_id
            WHERE k.osis = ? AND v.version_id = ?
            """,
            (osis, version_id),
        )
        if not row:
            return None
        return TaggedVerse(
            osis=row["osis"],
            verse_id=row["id"],
            plain_text=row["text"],
            tagged_text=row["tagged_text"] or "",
        )

    def strongs_words(self, verse_id: int) -> List[StrongsWord]:
        rows = self._fetch(
            """
            SELECT verse_id, word_order, word_text, strongs_number
            FROM strongs_words
            WHERE verse_id = ?
            ORDER BY word_order, id
            """,
            (verse_id,),
        )
        return [
            StrongsWord(
                verse_id=r["verse_id"],
                word_order=r["word_order"],
                word_text=r["word_text"],
                strongs_number=r["strongs_number"],
            )
            for r in rows
        ]

    def verses_with_strongs(
        self,
        strongs_number: str,
        target_version_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Verse]:
        """
        Distinct verses whose tagged words carry a Strong's number.

        With target_version_id, each hit is mapped to the verse with the
        same key in that version; hits with no counterpart are dropped.
        """
        if target_version_id is None:
            sql = (
                _VERSE_SELECT
                + " WHERE v.id IN (SELECT verse_id FROM strongs_words WHERE strongs_number = ?) "
                + _CANONICAL_ORDER
            )
            params: list = [strongs_number]
        else:
            sql = (
                _VERSE_SELECT
                + """
                WHERE v.version_id = ?
                  AND v.verse_key_id IN (
                      SELECT src.verse_key_id
                      FROM strongs_words w
                      JOIN verses src ON src.id = w.verse_id
                      WHERE w.strongs_number = ?
                  )
                """
                + _CANONICAL_ORDER
            )
            params = [target_version_id, strongs_number]
        if limit:
            sql += " LIMIT ?"
            params.append(limit)
        return [_verse(r) for r in self._fetch(sql, params)]

    def lexicon_entry(self, strongs_number: str) -> Optional[LexiconEntry]:
        row = self._fetch_one(
            """
            SELECT strongs_number, language, lemma, transliterations, pronunciations,
                   derivation, part_of_speech, definition_short, definition_lit,
                   definition_long, notes, compare, see_also
            FROM strongs_lexicon
            WHERE strongs_number = ?
            """,
            (strongs_number,),
        )
        return LexiconEntry.from_row(row) if row else None

    def lexicon_lemmas(self, strongs_numbers: List[str]) -> dict:
        """Map each known Strong's number to its lemma in one query."""
        if not strongs_numbers:
            return {}
        unique = list(dict.fromkeys(strongs_numbers))
        rows = self._fetch(
            f"SELECT strongs_number, lemma FROM strongs_lexicon "
            f"WHERE strongs_number IN ({','.join('?' * len(unique))})",
            unique,
        )
        return {r["strongs_number"]: r["lemma"] for r in rows if r["lemma"]}
