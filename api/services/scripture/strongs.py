# api/services/scripture/strongs.py
"""
Strong's number resolution.

Resolves lexical tags found in tagged verse text to lexicon entries, finds
the verses that carry a tag, and maps verses between Bible versions through
their shared OSIS verse key.

Identifiers are normalized once when data is imported (see ingest.py) and
once per lookup here, so every lookup is a single query.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .models import LexiconEntry, TaggedVerse, Verse
from .store import BibleStore, StoreError
from .tagged_text import (
    TaggedWord,
    normalize_strongs,
    parse_tagged_text,
    split_lexicon_links,
    tagged_text_from_words,
)

logger = logging.getLogger(__name__)

# Lexicon fields that may embed links to other entries
LINKED_FIELDS = ("derivation", "definition_long", "notes")


@dataclass
class StrongsSearchResult:
    verses: List[Verse]
    search_term: str
    strongs_number: str
    version_code: Optional[str] = None

    @property
    def total_count(self) -> int:
        return len(self.verses)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "search_term": self.search_term,
            "strongs_number": self.strongs_number,
            "version": self.version_code,
            "total_count": self.total_count,
            "verses": [v.to_dict() for v in self.verses],
        }


class StrongsResolver:
    """
    Strong's lookups against the injected store.

    Usage:
        resolver = StrongsResolver(store, tagged_version_code="KJV")

        entry = resolver.lookup("H0085")           # same as "H85"
        words = resolver.study_words("John.3.16")  # tagged units of KJV text
        hits = resolver.verses_for("G25", version="fin2017")
    """

    def __init__(self, store: BibleStore, tagged_version_code: str = "KJV"):
        self.store = store
        self.tagged_version_code = tagged_version_code

    # -------------------------------------------------------------------------
    # Lexicon
    # -------------------------------------------------------------------------

    def lookup(self, tag: str) -> Optional[LexiconEntry]:
        """Lexicon entry for a tag, or None if there is none."""
        number = normalize_strongs(tag)
        if not number:
            return None
        entry = self.store.lexicon_entry(number)
        if entry is None:
            logger.debug(f"No lexicon entry for {tag} (normalized {number})")
        return entry

    def labels(self, tags: List[str]) -> Dict[str, str]:
        """
        Display label for each tag: its lemma, or the identifier itself.

        A failed lemma query falls back to identifiers instead of raising.
        """
        numbers = [normalize_strongs(t) for t in tags]
        try:
            lemmas = self.store.lexicon_lemmas(numbers)
        except StoreError as e:
            logger.warning(f"Lemma lookup failed, showing identifiers: {e}")
            lemmas = {}
        return {n: lemmas.get(n, n) for n in numbers}

    def render_entry(self, entry: LexiconEntry) -> Dict[str, Any]:
        """
        Lexicon entry with its embedded cross-references resolved.

        Adds "links": {field: [spans]} for fields that reference other
        entries, and turns compare/see_also into labelled link lists.
        """
        split = {name: split_lexicon_links(getattr(entry, name) or "") for name in LINKED_FIELDS}
        linked = [
            span.strongs_number
            for spans in split.values()
            for span in spans
            if span.strongs_number
        ]
        compare = [normalize_strongs(n) for n in entry.compare]
        see_also = [normalize_strongs(n) for n in entry.see_also]
        labels = self.labels(linked + compare + see_also)

        links = {}
        for name, spans in split.items():
            if not any(s.strongs_number for s in spans):
                continue
            for span in spans:
                if span.strongs_number:
                    span.text = labels.get(span.strongs_number, span.strongs_number)
            links[name] = [s.to_dict() for s in spans]

        data = entry.to_dict()
        data["links"] = links
        data["compare"] = [{"strongs_number": n, "label": labels.get(n, n)} for n in compare]
        data["see_also"] = [{"strongs_number": n, "label": labels.get(n, n)} for n in see_also]
        return data

    def resolve(self, tag: str) -> Dict[str, Any]:
        """
        Resolve one tag for display.

        Unknown tags still resolve: "found" is False and the label is the
        raw identifier.
        """
        number = normalize_strongs(tag)
        entry = self.lookup(number)
        if entry is None:
            return {"strongs_number": number, "found": False, "label": number, "entry": None}
        return {
            "strongs_number": number,
            "found": True,
            "label": entry.lemma or number,
            "entry": self.render_entry(entry),
        }

    # -------------------------------------------------------------------------
    # Verses
    # -------------------------------------------------------------------------

    def verses_for(
        self,
        tag: str,
        version: Union[str, int, None] = None,
        limit: Optional[int] = None,
    ) -> StrongsSearchResult:
        """
        Verses carrying a Strong's number.

        Args:
            tag: Strong's identifier in any normalization
            version: Version code or id to map hits into; None keeps the
                     tagged version's own verses
            limit: Maximum verses to return
        """
        number = normalize_strongs(tag)
        target_id = None
        version_code = None
        if version is not None:
            target = self.store.get_version(version)
            if target is None:
                logger.info(f"Unknown version {version} for Strong's search")
                return StrongsSearchResult(verses=[], search_term=tag, strongs_number=number)
            target_id, version_code = target.id, target.code

        verses = self.store.verses_with_strongs(number, target_id, limit)
        logger.debug(f"Found {len(verses)} verses with Strong's {number}")
        return StrongsSearchResult(
            verses=verses,
            search_term=tag,
            strongs_number=number,
            version_code=version_code,
        )

    def map_verse(self, verse_id: int, version: Union[str, int]) -> Optional[Verse]:
        """The verse in another version sharing this verse's OSIS key."""
        target = self.store.get_version(version)
        if target is None:
            return None
        return self.store.verse_in_version(verse_id, target.id)

    def tagged_verse(self, osis: str) -> Optional[TaggedVerse]:
        """
        Tagged text of a verse key in the tagged version.

        Uses the stored tagged text when present, otherwise rebuilds it
        from the verse's stored tagged words.
        """
        version = self.store.get_version(self.tagged_version_code)
        if version is None:
            logger.warning(f"Tagged version {self.tagged_version_code} not installed")
            return None

        verse = self.store.tagged_verse(osis, version.id)
        if verse is None:
            return None
        if not verse.tagged_text:
            words = self.store.strongs_words(verse.verse_id)
            verse.tagged_text = tagged_text_from_words(words) or verse.plain_text
        return verse

    def study_words(self, osis: str) -> List[TaggedWord]:
        """Parsed tagged units for a verse key, empty if the key is unknown."""
        verse = self.tagged_verse(osis)
        if verse is None:
            return []
        return parse_tagged_text(verse.tagged_text)


class LexiconHistory:
    """
    Linear navigation history between lexicon entries.

    push() drops anything ahead of the current position, like a browser.
    The list is bounded; the oldest entries fall off first.
    """

    def __init__(self, entries: List[str] = None, index: int = -1, limit: int = 50):
        self.limit = max(1, limit)
        entries = list(entries or [])
        dropped = max(0, len(entries) - self.limit)
        self.entries: List[str] = entries[dropped:]
        if self.entries:
            self.index = min(max(index - dropped, 0), len(self.entries) - 1)
        else:
            self.index = -1

    @property
    def current(self) -> Optional[str]:
        if self.index < 0:
            return None
        return self.entries[self.index]

    @property
    def can_go_back(self) -> bool:
        return self.index > 0

    @property
    def can_go_forward(self) -> bool:
        return 0 <= self.index < len(self.entries) - 1

    def push(self, tag: str) -> str:
        number = normalize_strongs(tag)
        if number == self.current:
            return number
        self.entries = self.entries[: self.index + 1]
        self.entries.append(number)
        if len(self.entries) > self.limit:
            self.entries = self.entries[-self.limit:]
        self.index = len(self.entries) - 1
        return number

    def back(self) -> Optional[str]:
        if self.can_go_back:
            self.index -= 1
        return self.current

    def forward(self) -> Optional[str]:
        if self.can_go_forward:
            self.index += 1
        return self.current

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entries": list(self.entries),
            "index": self.index,
            "current": self.current,
            "can_go_back": self.can_go_back,
            "can_go_forward": self.can_go_forward,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict], limit: int = 50) -> "LexiconHistory":
        data = data or {}
        return cls(entries=data.get("entries"), index=data.get("index", -1), limit=limit)
