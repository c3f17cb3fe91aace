# api/services/scripture/scripture_service.py
"""
Reading facade over the Bible store.

Combines the store, book table and Strong's resolver into the operations
the routes need: version and book lists, chapter reading, single verses,
comparing a passage across versions, and verse study.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from .books import display_name, get_book, normalize_book_name
from .models import BibleVersion, Book, ChapterWithVerses, Verse
from .reference_parser import parse_bible_reference
from .store import BibleStore
from .strongs import StrongsResolver
from .tagged_text import collect_strongs_numbers

logger = logging.getLogger(__name__)


class ScriptureService:
    """
    Scripture reading operations.

    Usage:
        service = ScriptureService(store, default_version_code="fin2017")

        chapter = service.get_chapter("Joh", 3)
        passages = service.compare("Joh 3:16", ["KJV", "fin2017"])
        study = service.study_verse("John.3.16")
    """

    def __init__(
        self,
        store: BibleStore,
        default_version_code: str = "fin2017",
        strongs_version_code: str = "KJV",
        locale: str = "en",
    ):
        self.store = store
        self.default_version_code = default_version_code
        self.locale = locale
        self.strongs = StrongsResolver(store, tagged_version_code=strongs_version_code)

    def versions(self) -> List[BibleVersion]:
        return self.store.list_versions(active_only=True)

    def resolve_version(self, version: Union[str, int, None] = None) -> Optional[BibleVersion]:
        """Version by code or id; the configured default when none is given."""
        if version in (None, ""):
            version = self.default_version_code
        return self.store.get_version(version)

    def books(self, locale: Optional[str] = None) -> List[Book]:
        """Books in canonical order with display names for the locale."""
        locale = locale or self.locale
        books = self.store.list_books()
        for book in books:
            book.display_name = display_name(book.name, locale)
        return books

    def get_chapter(
        self,
        book: str,
        chapter: int,
        version: Union[str, int, None] = None,
    ) -> Optional[ChapterWithVerses]:
        """
        All verses of a chapter.

        Args:
            book: Any recognized book token ("Joh", "I John", "1.Joh")
            chapter: Chapter number
            version: Version code or id, default version when None

        Returns:
            ChapterWithVerses, or None if the version or chapter is unknown
        """
        target = self.resolve_version(version)
        if target is None:
            logger.info(f"Unknown version {version}")
            return None

        name = normalize_book_name(book)
        verses = self.store.chapter_verses(name, chapter, target.id)
        if not verses:
            return None
        return ChapterWithVerses(
            book=name,
            chapter=chapter,
            version_code=target.code,
            verses=verses,
        )

    def get_verse(self, osis: str, version: Union[str, int, None] = None) -> Optional[Verse]:
        target = self.resolve_version(version)
        if target is None:
            return None
        return self.store.verse_by_osis(osis, target.id)

    def compare(self, ref: str, versions: List[str]) -> Optional[Dict[str, Any]]:
        """
        The same passage in several versions.

        Unknown versions are reported in "missing" rather than failing
        the whole comparison.

        Returns:
            {"reference": {...}, "versions": {code: [verse dicts]},
             "missing": [codes]}, or None if ref is not a reference
        """
        reference = parse_bible_reference(ref)
        if reference is None:
            return None

        results: Dict[str, list] = {}
        missing = []
        for code in versions:
            target = self.store.get_version(code)
            if target is None:
                missing.append(code)
                continue
            verses = self.store.verses_for_reference(
                reference.book,
                reference.chapter,
                reference.last_chapter,
                verses=reference.verses,
                version_id=target.id,
            )
            results[target.code] = [v.to_dict() for v in verses]

        return {
            "reference": reference.to_dict(),
            "versions": results,
            "missing": missing,
        }

    def study_verse(self, osis: str, version: Union[str, int, None] = None) -> Optional[Dict[str, Any]]:
        """
        A verse in the reading version next to its Strong's-tagged text.

        The tagged side may be None when the tagged version lacks the key.
        "labels" maps each distinct Strong's number in the verse to its lemma.
        """
        verse = self.get_verse(osis, version)
        if verse is None:
            return None

        tagged = self.strongs.tagged_verse(osis)
        words = self.strongs.study_words(osis) if tagged else []
        numbers = collect_strongs_numbers(tagged.tagged_text) if tagged else []
        book = get_book(verse.book_name)
        return {
            "verse": verse.to_dict(),
            "book_display_name": display_name(book.name, self.locale) if book else verse.book_name,
            "tagged": tagged.to_dict() if tagged else None,
            "words": [w.to_dict() for w in words],
            "labels": self.strongs.labels(numbers),
        }
