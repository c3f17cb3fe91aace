# api/services/scripture/tagged_text.py
"""
Parsing of Strong's-tagged text.

Verse text in the tagged version marks words with trailing Strong's
numbers, in either of two forms:

    love<G25> thy<G4675> neighbour      (bracket form, one or more tags)
    love(G25) thy(G4675) neighbour      (legacy parenthetical form)

Lexicon notes link to other entries with [[H8130]] (and sometimes the two
forms above). Every identifier is normalized on the way out: uppercase
prefix, leading zeros dropped ("H0085" -> "H85").
"""

import re
from dataclasses import dataclass, field
from itertools import groupby
from typing import List, Optional

_TAG_BODY = r"[A-Za-z]\d+"
_TAG_MARKER = rf"(?:<{_TAG_BODY}>|\({_TAG_BODY}\))"

# Whitespace between a word and the tag markers that follow it
_SPACE_BEFORE_TAG = re.compile(rf"\s+(?={_TAG_MARKER})")

# word + run of tag markers + optional trailing punctuation
_TAGGED_TOKEN = re.compile(rf"^(.*?)((?:{_TAG_MARKER})+)([^\w<>()]*)$")
_TAG_IN_RUN = re.compile(rf"[<(]({_TAG_BODY})[>)]")

_LEXICON_LINK = re.compile(
    rf"\[\[({_TAG_BODY})\]\]|<({_TAG_BODY})>|\(({_TAG_BODY})\)"
)

_STRONGS = re.compile(r"\s*([A-Za-z]?)0*(\d+)\s*")


def normalize_strongs(tag: str) -> str:
    """
    Normalize a Strong's identifier.

    "H0085", "h85" and "H85" all become "H85". Bare numbers keep no
    prefix ("0085" -> "85"). Anything else is returned stripped. Applying
    this twice gives the same result as applying it once.
    """
    if tag is None:
        return tag
    match = _STRONGS.fullmatch(tag)
    if not match:
        return tag.strip()
    prefix, digits = match.groups()
    return f"{prefix.upper()}{digits}"


def is_strongs_number(tag: str) -> bool:
    """True for identifiers like "G25" or "H0085"."""
    return bool(tag) and re.fullmatch(rf"\s*{_TAG_BODY}\s*", tag) is not None


@dataclass
class TaggedWord:
    """
    One renderable unit of tagged text.

    Plain words have an empty strongs_numbers list.
    """
    text: str
    strongs_numbers: List[str] = field(default_factory=list)

    @property
    def is_tagged(self) -> bool:
        return bool(self.strongs_numbers)

    def to_dict(self) -> dict:
        return {"text": self.text, "strongs_numbers": list(self.strongs_numbers)}


def parse_tagged_text(text: str) -> List[TaggedWord]:
    """
    Split tagged text into plain and tagged units, in original order.

    "word <G25>" parses the same as "word<G25>". Punctuation after the
    markers stays with the visible word ("love<G25>," -> "love,").

    Args:
        text: Verse text with inline Strong's markers

    Returns:
        List of TaggedWord
    """
    if not text:
        return []

    compact = _SPACE_BEFORE_TAG.sub("", text)
    units = []
    for token in compact.split():
        match = _TAGGED_TOKEN.match(token)
        if not match:
            units.append(TaggedWord(text=token))
            continue
        word, markers, trailing = match.groups()
        numbers = [normalize_strongs(t) for t in _TAG_IN_RUN.findall(markers)]
        units.append(TaggedWord(text=word + trailing, strongs_numbers=numbers))
    return units


def strip_tags(text: str) -> str:
    """Visible text of tagged text, markers removed."""
    return " ".join(unit.text for unit in parse_tagged_text(text) if unit.text)


def collect_strongs_numbers(text: str) -> List[str]:
    """Distinct normalized Strong's numbers in tagged text, first-seen order."""
    seen = []
    for unit in parse_tagged_text(text):
        for number in unit.strongs_numbers:
            if number not in seen:
                seen.append(number)
    return seen


@dataclass
class LinkSpan:
    """A run of lexicon text, or a link to another entry."""
    text: str
    strongs_number: Optional[str] = None

    def to_dict(self) -> dict:
        return {"text": self.text, "strongs_number": self.strongs_number}


def split_lexicon_links(text: str) -> List[LinkSpan]:
    """
    Split lexicon definition/notes text into plain runs and links.

    Link spans carry the normalized identifier; their text is the
    identifier until the resolver replaces it with a lemma.
    """
    if not text:
        return []

    spans = []
    pos = 0
    for match in _LEXICON_LINK.finditer(text):
        if match.start() > pos:
            spans.append(LinkSpan(text=text[pos:match.start()]))
        raw = next(g for g in match.groups() if g)
        number = normalize_strongs(raw)
        spans.append(LinkSpan(text=number, strongs_number=number))
        pos = match.end()
    if pos < len(text):
        spans.append(LinkSpan(text=text[pos:]))
    return spans


def tagged_text_from_words(words) -> str:
    """
    Rebuild bracket-form tagged text from stored tagged words.

    Words sharing a word_order are one word with several tags.

    Args:
        words: StrongsWord rows ordered by word_order
    """
    parts = []
    for _, group in groupby(words, key=lambda w: w.word_order):
        group = list(group)
        markers = "".join(
            f"<{w.strongs_number}>" for w in group if w.strongs_number
        )
        parts.append(f"{group[0].word_text}{markers}")
    return " ".join(parts)
