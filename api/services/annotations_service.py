"""
Annotations Service

Per-user data kept next to the Bible text:
- Markings on single verses: highlights (with color), comments, bookmarks
- Reading history of chapters read or listened to
- Last reading position (kept in the user's session, see position_payload)

Every operation takes the owning user_id; markings can only be changed or
removed by their owner.
"""

import logging
import sqlite3
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from services.scripture.books import display_name, normalize_book_name
from services.scripture.store import BibleStore, StoreError

logger = logging.getLogger(__name__)

MARKING_TYPES = ("highlight", "comment", "bookmark")
HISTORY_TYPES = ("read", "listen")


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class Marking:
    """A marking with the verse it is attached to."""
    id: int
    user_id: int
    verse_id: int
    marking_type: str  # 'highlight', 'comment', 'bookmark'
    color: Optional[str]
    content: Optional[str]
    created_at: str
    updated_at: str
    # Verse context
    verse_text: Optional[str] = None
    verse_number: Optional[int] = None
    chapter_number: Optional[int] = None
    book_name: Optional[str] = None
    version_code: Optional[str] = None
    osis: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ReadingHistoryEntry:
    id: int
    user_id: int
    book_name: str
    chapter_number: int
    verse_number: Optional[int]
    version_code: Optional[str]
    history_type: str  # 'read', 'listen'
    last_read_at: str
    book_display_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_MARKING_SELECT = """
    SELECT
        m.id, m.user_id, m.verse_id, m.marking_type, m.color, m.content,
        m.created_at, m.updated_at,
        v.text AS verse_text, v.verse_number,
        c.chapter_number, b.name AS book_name, bv.code AS version_code,
        k.osis
    FROM user_markings m
    JOIN verses v ON v.id = m.verse_id
    JOIN chapters c ON c.id = v.chapter_id
    JOIN books b ON b.id = c.book_id
    JOIN bible_versions bv ON bv.id = v.version_id
    LEFT JOIN verse_keys k ON k.id = v.verse_key_id
"""

_HISTORY_SELECT = """
    SELECT
        h.id, h.user_id, b.name AS book_name, h.chapter_number, h.verse_number,
        bv.code AS version_code, h.history_type, h.last_read_at
    FROM user_reading_history h
    JOIN books b ON b.id = h.book_id
    LEFT JOIN bible_versions bv ON bv.id = h.version_id
"""


def _now() -> str:
    return datetime.now().isoformat()


def _row_to_marking(row) -> Marking:
    return Marking(**dict(row))


class AnnotationService:
    """
    Markings and reading history for one store.

    Usage:
        annotations = AnnotationService(store)
        marking = annotations.add_marking(user_id, verse_id, "highlight", color="yellow")
        annotations.record_reading(user_id, "Joh", 3, version_id=kjv.id)
    """

    def __init__(self, store: BibleStore, history_limit: int = 50, locale: str = "en"):
        self.store = store
        self.history_limit = history_limit
        self.locale = locale

    def _query(self, sql: str, params=()) -> List[sqlite3.Row]:
        try:
            with self.store.connect() as conn:
                return conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Annotation query failed: {e}")
            raise StoreError(str(e)) from e

    def _write(self, sql: str, params=()) -> sqlite3.Cursor:
        try:
            with self.store.connect() as conn:
                cur = conn.execute(sql, tuple(params))
                conn.commit()
                return cur
        except sqlite3.Error as e:
            logger.error(f"Annotation write failed: {e}")
            raise StoreError(str(e)) from e

    # =========================================================================
    # Markings
    # =========================================================================

    def get_marking(self, user_id: int, marking_id: int) -> Optional[Marking]:
        rows = self._query(
            _MARKING_SELECT + " WHERE m.id = ? AND m.user_id = ?",
            (marking_id, user_id),
        )
        return _row_to_marking(rows[0]) if rows else None

    def add_marking(
        self,
        user_id: int,
        verse_id: int,
        marking_type: str,
        color: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Optional[Marking]:
        """
        Attach a marking to a verse.

        Args:
            user_id: Owner
            verse_id: Marked verse
            marking_type: 'highlight', 'comment' or 'bookmark'
            color: Highlight color
            content: Comment text

        Returns:
            The new Marking, or None if the verse does not exist

        Raises:
            ValueError: Unknown marking type, or a comment without content
        """
        if marking_type not in MARKING_TYPES:
            raise ValueError(f"Unknown marking type: {marking_type}")
        if marking_type == "comment" and not (content or "").strip():
            raise ValueError("A comment needs content")

        if self.store.verse_by_id(verse_id) is None:
            return None

        now = _now()
        cur = self._write(
            """
            INSERT INTO user_markings (user_id, verse_id, marking_type, color, content, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, verse_id, marking_type, color, content, now, now),
        )
        logger.info(f"User {user_id} added {marking_type} on verse {verse_id}")
        return self.get_marking(user_id, cur.lastrowid)

    def list_markings(
        self,
        user_id: int,
        marking_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Marking]:
        """A user's markings, newest first, optionally of one type."""
        sql = _MARKING_SELECT + " WHERE m.user_id = ?"
        params: list = [user_id]
        if marking_type:
            sql += " AND m.marking_type = ?"
            params.append(marking_type)
        sql += " ORDER BY m.created_at DESC, m.id DESC"
        if limit:
            sql += " LIMIT ?"
            params.append(limit)
        return [_row_to_marking(r) for r in self._query(sql, params)]

    def update_marking(
        self,
        user_id: int,
        marking_id: int,
        color: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Optional[Marking]:
        """
        Change a marking's color and/or content.

        Returns None if the marking does not exist or belongs to someone else.
        """
        existing = self.get_marking(user_id, marking_id)
        if existing is None:
            return None

        self._write(
            """
            UPDATE user_markings
            SET color = ?, content = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (
                color if color is not None else existing.color,
                content if content is not None else existing.content,
                _now(),
                marking_id,
                user_id,
            ),
        )
        return self.get_marking(user_id, marking_id)

    def delete_marking(self, user_id: int, marking_id: int) -> bool:
        """Delete a marking; False if it is missing or not the user's."""
        cur = self._write(
            "DELETE FROM user_markings WHERE id = ? AND user_id = ?",
            (marking_id, user_id),
        )
        return cur.rowcount > 0

    def marking_counts(self, user_id: int) -> Dict[str, int]:
        """Number of markings per type, every type present."""
        counts = {t: 0 for t in MARKING_TYPES}
        rows = self._query(
            """
            SELECT marking_type, COUNT(*) AS n
            FROM user_markings
            WHERE user_id = ?
            GROUP BY marking_type
            """,
            (user_id,),
        )
        for row in rows:
            counts[row["marking_type"]] = row["n"]
        return counts

    # =========================================================================
    # Reading history
    # =========================================================================

    def record_reading(
        self,
        user_id: int,
        book: str,
        chapter: int,
        version_id: Optional[int] = None,
        verse_number: Optional[int] = None,
        history_type: str = "read",
    ) -> Optional[ReadingHistoryEntry]:
        """
        Record that a chapter was read or listened to.

        Reading the same chapter again refreshes the existing entry.

        Returns:
            The entry, or None if the book is unknown

        Raises:
            ValueError: Unknown history type, or a chapter or verse out of range
        """
        if history_type not in HISTORY_TYPES:
            raise ValueError(f"Unknown history type: {history_type}")
        if chapter < 1:
            raise ValueError(f"Chapter must be positive: {chapter}")
        if verse_number is not None and verse_number < 1:
            raise ValueError(f"Verse must be positive: {verse_number}")

        book_row = self.store.get_book(normalize_book_name(book))
        if book_row is None:
            return None
        # chapters_count stays 0 until a version of the book is imported
        if book_row.chapters_count and chapter > book_row.chapters_count:
            raise ValueError(
                f"{book_row.name} has {book_row.chapters_count} chapters, not {chapter}"
            )

        self._write(
            """
            INSERT INTO user_reading_history (
                user_id, book_id, version_id, chapter_number, verse_number,
                history_type, last_read_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (user_id, book_id, chapter_number, history_type) DO UPDATE SET
                version_id = excluded.version_id,
                verse_number = excluded.verse_number,
                last_read_at = excluded.last_read_at
            """,
            (user_id, book_row.id, version_id, chapter, verse_number, history_type, _now()),
        )

        rows = self._query(
            _HISTORY_SELECT
            + " WHERE h.user_id = ? AND h.book_id = ? AND h.chapter_number = ? AND h.history_type = ?",
            (user_id, book_row.id, chapter, history_type),
        )
        return self._row_to_history(rows[0]) if rows else None

    def reading_history(
        self,
        user_id: int,
        history_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ReadingHistoryEntry]:
        """Most recent entries first, at most history_limit."""
        sql = _HISTORY_SELECT + " WHERE h.user_id = ?"
        params: list = [user_id]
        if history_type:
            sql += " AND h.history_type = ?"
            params.append(history_type)
        sql += " ORDER BY h.last_read_at DESC, h.id DESC LIMIT ?"
        params.append(min(limit or self.history_limit, self.history_limit))
        return [self._row_to_history(r) for r in self._query(sql, params)]

    def _row_to_history(self, row) -> ReadingHistoryEntry:
        entry = ReadingHistoryEntry(**dict(row))
        entry.book_display_name = display_name(entry.book_name, self.locale)
        return entry


# =============================================================================
# Last reading position
# =============================================================================

POSITION_SESSION_KEY = "last_position"


def position_payload(book: str, chapter: int, version: Optional[str]) -> Dict[str, Any]:
    """Value stored under POSITION_SESSION_KEY on every chapter view."""
    return {
        "book": book,
        "chapter": chapter,
        "version": version,
        "timestamp": _now(),
    }
