# api/services/scripture/models.py
"""
Response types for every query shape the scripture services use.

The store adapts sqlite rows into these at the boundary, so services and
routes never index raw rows by column name.
"""

import json
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


@dataclass
class BibleVersion:
    id: int
    code: str
    name: str
    language: str
    is_active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Book:
    id: int
    name: str
    osis_code: str
    testament: str
    book_order: int
    chapters_count: int
    display_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Verse:
    """A verse with its book/chapter/version context."""
    id: int
    text: str
    verse_number: int
    chapter_number: int
    book_name: str
    book_id: int
    chapter_id: int
    version_code: str
    osis: Optional[str] = None
    audio_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChapterWithVerses:
    book: str
    chapter: int
    version_code: str
    verses: List[Verse] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "book": self.book,
            "chapter": self.chapter,
            "version": self.version_code,
            "verses": [v.to_dict() for v in self.verses],
        }


@dataclass
class StrongsWord:
    """One tagged word of a verse in the Strong's-tagged version."""
    verse_id: int
    word_order: int
    word_text: str
    strongs_number: Optional[str]


@dataclass
class TaggedVerse:
    """A verse key with plain and tagged text from the tagged version."""
    osis: str
    verse_id: int
    plain_text: str
    tagged_text: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LexiconEntry:
    strongs_number: str
    language: Optional[str] = None
    lemma: Optional[str] = None
    transliterations: List[str] = field(default_factory=list)
    pronunciations: List[str] = field(default_factory=list)
    derivation: Optional[str] = None
    part_of_speech: Optional[str] = None
    definition_short: Optional[str] = None
    definition_lit: Optional[str] = None
    definition_long: Optional[str] = None
    notes: Optional[str] = None
    compare: List[str] = field(default_factory=list)
    see_also: List[str] = field(default_factory=list)

    # Columns holding JSON-encoded lists
    LIST_FIELDS = ("transliterations", "pronunciations", "compare", "see_also")

    @classmethod
    def from_row(cls, row) -> "LexiconEntry":
        data = dict(row)
        for name in cls.LIST_FIELDS:
            raw = data.get(name)
            data[name] = json.loads(raw) if raw else []
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
