"""
Scripture services.

This package provides:
- BibleStore: Data access for versions, books, verses and the lexicon
- ScriptureService: Chapter reading, version comparison, verse study
- perform_search: Reference lookup with full-text fallback
- StrongsResolver: Lexicon lookup and cross-version verse mapping
- LexiconHistory: Back/forward navigation between lexicon entries
- parse_bible_reference: Parse human-readable references
- normalize_book_name: Map book tokens to canonical names
"""

from .books import (
    BOOKS,
    BOOK_NAMES,
    BookInfo,
    book_from_osis,
    canonical_from_display,
    display_name,
    get_book,
    is_known_book,
    normalize_book_name,
    osis_code,
)
from .models import (
    BibleVersion,
    Book,
    ChapterWithVerses,
    LexiconEntry,
    StrongsWord,
    TaggedVerse,
    Verse,
)
from .reference_parser import (
    Reference,
    ReferenceParseError,
    is_valid_reference,
    osis_key,
    parse_bible_reference,
    require_reference,
)
from .store import BibleStore, StoreError
from .tagged_text import (
    TaggedWord,
    normalize_strongs,
    parse_tagged_text,
    split_lexicon_links,
    strip_tags,
)
from .search import SearchResult, perform_search, to_fts_query
from .strongs import LexiconHistory, StrongsResolver, StrongsSearchResult
from .scripture_service import ScriptureService

__all__ = [
    # Services (primary interface)
    "BibleStore",
    "StoreError",
    "ScriptureService",
    "StrongsResolver",
    "StrongsSearchResult",
    "LexiconHistory",
    "SearchResult",
    "perform_search",
    "to_fts_query",
    # Reference parsing
    "Reference",
    "ReferenceParseError",
    "parse_bible_reference",
    "require_reference",
    "is_valid_reference",
    "osis_key",
    # Books
    "BOOKS",
    "BOOK_NAMES",
    "BookInfo",
    "normalize_book_name",
    "is_known_book",
    "get_book",
    "osis_code",
    "book_from_osis",
    "display_name",
    "canonical_from_display",
    # Tagged text
    "TaggedWord",
    "normalize_strongs",
    "parse_tagged_text",
    "split_lexicon_links",
    "strip_tags",
    # Models
    "BibleVersion",
    "Book",
    "ChapterWithVerses",
    "LexiconEntry",
    "StrongsWord",
    "TaggedVerse",
    "Verse",
]
