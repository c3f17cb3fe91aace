# api/services/scripture/search.py
"""
Search dispatcher.

A query is tried as a Bible reference first ("1.Joh.1:2-5"); if it does
not parse, it runs as a full-text search. Each search issues one verse
query. A failed query gives an empty result with a notice for the user,
never an exception.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .models import Verse
from .reference_parser import Reference, parse_bible_reference
from .store import BibleStore, StoreError

logger = logging.getLogger(__name__)

SEARCH_FAILED_NOTICE = "Search failed, please try again"
UNKNOWN_VERSION_NOTICE = "Unknown Bible version"

# Quoted phrase (optionally negated) or a bare word
_TERM = re.compile(r'(-?)"([^"]*)"|(\S+)')


@dataclass
class SearchResult:
    """
    Verses found for a query.

    Attributes:
        type: "reference" or "text"
        verses: Matching verses, canonical order
        reference: The parsed reference for reference searches
        notice: User-visible message when the search could not run
    """
    type: str
    verses: List[Verse] = field(default_factory=list)
    reference: Optional[Reference] = None
    notice: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "verses": [v.to_dict() for v in self.verses],
            "reference": self.reference.to_dict() if self.reference else None,
            "notice": self.notice,
        }


def _quote(term: str) -> str:
    return '"' + term.replace('"', '""') + '"'


def to_fts_query(text: str) -> Optional[str]:
    """
    Translate web-search style input into an FTS5 MATCH expression.

    Words are ANDed, "quoted phrases" stay phrases, a bare "or" joins its
    neighbours with OR and a leading "-" excludes a word or phrase. Every
    term is quoted, so user punctuation cannot break the expression.

    Returns:
        MATCH expression, or None if nothing searchable remains
    """
    parts: List[str] = []
    negatives: List[str] = []
    pending_or = False

    for match in _TERM.finditer(text or ""):
        negated, phrase, word = match.groups()
        if word is not None:
            if word.lower() == "or":
                pending_or = bool(parts)
                continue
            if word.startswith("-") and len(word) > 1:
                negatives.append(_quote(word[1:]))
                continue
            term = _quote(word)
        else:
            if not phrase.strip():
                continue
            if negated:
                negatives.append(_quote(phrase))
                continue
            term = _quote(phrase)

        if parts:
            parts.append("OR" if pending_or else "AND")
        parts.append(term)
        pending_or = False

    if not parts:
        return None

    query = " ".join(parts)
    if negatives:
        query = f"({query})" + "".join(f" NOT {n}" for n in negatives)
    return query


def search_reference(
    store: BibleStore,
    reference: Reference,
    version_id: Optional[int] = None,
) -> SearchResult:
    """Verses for a parsed reference, optionally within one version."""
    try:
        verses = store.verses_for_reference(
            reference.book,
            reference.chapter,
            reference.last_chapter,
            verses=reference.verses,
            version_id=version_id,
        )
    except StoreError as e:
        logger.error(f"Reference search error for {reference.normalized}: {e}")
        return SearchResult(type="reference", reference=reference, notice=SEARCH_FAILED_NOTICE)

    return SearchResult(type="reference", verses=verses, reference=reference)


def search_text(
    store: BibleStore,
    search_term: str,
    version_id: Optional[int] = None,
    limit: int = 50,
) -> SearchResult:
    """Full-text search, capped at limit results."""
    fts_query = to_fts_query(search_term)
    if not fts_query:
        return SearchResult(type="text")

    try:
        verses = store.text_search(fts_query, version_id=version_id, limit=limit)
    except StoreError as e:
        logger.error(f"Text search error for {search_term!r}: {e}")
        return SearchResult(type="text", notice=SEARCH_FAILED_NOTICE)

    return SearchResult(type="text", verses=verses)


def perform_search(
    store: BibleStore,
    query: str,
    version: Union[str, int, None] = None,
    limit: int = 50,
) -> SearchResult:
    """
    Main search entry point: reference lookup or text search.

    Args:
        store: Bible store
        query: User query
        version: Version code or id to restrict to, or None for all
        limit: Result cap for text search

    Returns:
        SearchResult (never raises for backend errors)
    """
    if not query or not query.strip():
        return SearchResult(type="text")

    reference = parse_bible_reference(query)
    search_type = "reference" if reference else "text"

    version_id = None
    if version not in (None, ""):
        try:
            found = store.get_version(version)
        except StoreError as e:
            logger.error(f"Version lookup failed for {version}: {e}")
            return SearchResult(type=search_type, reference=reference, notice=SEARCH_FAILED_NOTICE)
        if found is None:
            return SearchResult(type=search_type, reference=reference, notice=UNKNOWN_VERSION_NOTICE)
        version_id = found.id

    if reference:
        return search_reference(store, reference, version_id)
    return search_text(store, query, version_id, limit)
