# api/services/scripture/reference_parser.py
"""
Bible reference parser.

Turns a free-text query into a structured Reference, or None when the
query does not look like a reference (the caller then runs a text search).

Handles:
- Full names and abbreviations: "Matthew 5:14", "Matt 5:14", "Matt. 5:14"
- Numbered books: "1.Joh.1:2-5", "1 Joh 1:2", "I John 1:2", "1John 1:2"
- Finnish abbreviations: "1. Moos 1:1", "Room 8:28", "Ilm 22"
- Verse ranges: "John 3:16-18"
- Whole chapters and chapter ranges: "Psalm 23", "Joh 2-5"
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from .books import normalize_book_name, osis_code


@dataclass
class Reference:
    """
    A parsed scripture reference.

    Attributes:
        book: Canonical book name (e.g., "I John")
        chapter: Chapter number
        verses: Ascending verse numbers, or None for the whole chapter
        chapter_end: Last chapter of a chapter range, or None
        original: Query string as received
    """
    book: str
    chapter: int
    verses: Optional[list[int]] = None
    chapter_end: Optional[int] = None
    original: str = field(default="", compare=False)

    @property
    def is_chapter(self) -> bool:
        """True if no verses were given."""
        return not self.verses

    @property
    def last_chapter(self) -> int:
        """Last chapter covered, equal to chapter unless this is a range."""
        return self.chapter if self.chapter_end is None else self.chapter_end

    @property
    def chapters(self) -> list[int]:
        """Every chapter this reference covers."""
        if self.chapter_end is None:
            return [self.chapter]
        return expand_range(self.chapter, self.chapter_end)

    @property
    def normalized(self) -> str:
        """Return normalized reference string."""
        if self.chapter_end is not None and self.chapter_end != self.chapter:
            return f"{self.book} {self.chapter}-{self.chapter_end}"
        if self.is_chapter:
            return f"{self.book} {self.chapter}"
        if len(self.verses) > 1:
            return f"{self.book} {self.chapter}:{self.verses[0]}-{self.verses[-1]}"
        return f"{self.book} {self.chapter}:{self.verses[0]}"

    def osis_keys(self) -> list[str]:
        """
        Verse keys for each listed verse (e.g., ["1John.1.2", "1John.1.3"]).

        Empty for whole-chapter references and for unrecognized books.
        """
        code = osis_code(self.book)
        if not code or self.is_chapter:
            return []
        return [osis_key(code, self.chapter, v) for v in self.verses]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "book": self.book,
            "chapter": self.chapter,
            "chapter_end": self.chapter_end,
            "verses": self.verses,
            "ref": self.normalized,
        }


class ReferenceParseError(ValueError):
    """Raised by require_reference() when a query is not a reference."""
    pass


# Optional leading number ("1", "1.", "1 "), then one or more letter words.
# Periods may follow any word ("1.Joh.", "Matt.").
_BOOK = r"((?:\d+\.?\s*)?[^\W\d_]+(?:[\s.]+[^\W\d_]+)*\.?)"
_DASH = r"\s*[-–—]\s*"

# Colon form must be tried first so "John 3:16" is never a chapter range
_VERSE_PATTERN = re.compile(rf"^{_BOOK}\s*(\d+)\s*:\s*(\d+)(?:{_DASH}(\d+))?$")
_CHAPTER_PATTERN = re.compile(rf"^{_BOOK}\s*(\d+)(?:{_DASH}(\d+))?$")


def osis_key(osis_book: str, chapter: int, verse: int) -> str:
    """Build a verse key: "<OsisBook>.<Chapter>.<Verse>"."""
    return f"{osis_book}.{chapter}.{verse}"


def expand_range(start: int, end: int) -> list[int]:
    """
    Expand an inclusive numeric range.

    A reversed range is read with its bounds swapped, so 5-2 gives
    [2, 3, 4, 5].
    """
    low, high = sorted((start, end))
    return list(range(low, high + 1))


def clean_book_token(token: str) -> str:
    """Strip periods and surrounding whitespace from a book token."""
    return token.replace(".", "").strip()


def parse_bible_reference(query: str) -> Optional[Reference]:
    """
    Parse a Bible reference.

    Args:
        query: Free-text query, e.g. "1.Joh.1:2-5" or "Matt 5:14"

    Returns:
        Reference, or None if the query is not a reference
    """
    if not query:
        return None

    cleaned = re.sub(r"\s+", " ", query.strip())

    match = _VERSE_PATTERN.match(cleaned)
    if match:
        book_token, chapter, verse_start, verse_end = match.groups()
        chapter = int(chapter)
        start = int(verse_start)
        if verse_end:
            verses = expand_range(start, int(verse_end))
        else:
            verses = [start]
        if chapter < 1 or verses[0] < 1:
            return None
        return Reference(
            book=normalize_book_name(clean_book_token(book_token)),
            chapter=chapter,
            verses=verses,
            original=query,
        )

    match = _CHAPTER_PATTERN.match(cleaned)
    if match:
        book_token, chapter, chapter_end = match.groups()
        first = int(chapter)
        last = None
        if chapter_end:
            second = int(chapter_end)
            first, last = min(first, second), max(first, second)
        if first < 1:
            return None
        return Reference(
            book=normalize_book_name(clean_book_token(book_token)),
            chapter=first,
            chapter_end=last,
            original=query,
        )

    return None


def require_reference(query: str) -> Reference:
    """
    Parse a reference or raise.

    Raises:
        ReferenceParseError: If the query is not a reference
    """
    parsed = parse_bible_reference(query)
    if parsed is None:
        raise ReferenceParseError(f"Could not parse reference: {query}")
    return parsed


def is_valid_reference(query: str) -> bool:
    """True if the query parses as a reference."""
    return parse_bible_reference(query) is not None
