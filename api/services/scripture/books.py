# api/services/scripture/books.py
"""
Canonical Bible book table and book-name normalization.

The backend stores books under canonical English names ("Genesis",
"I Samuel", "I John", "Revelation of John"). Users type abbreviations in
English or Finnish ("Gen", "1Joh", "1. Moos", "Room", "Ilm"), so every
lookup goes through normalize_book_name() first.

Lookup keys are lowercase with periods and all whitespace removed, which
makes "1. Joh", "1 Joh" and "1Joh" the same key.
"""

import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BookInfo:
    """
    One canonical book.

    Attributes:
        name: Canonical backend name (e.g., "I John")
        osis: OSIS book code used in verse keys (e.g., "1John")
        testament: "old" or "new"
        order: Canonical position, 1-based
        finnish: Finnish display name
    """
    name: str
    osis: str
    testament: str
    order: int
    finnish: str


_BOOK_ROWS = [
    # Old Testament
    ("Genesis", "Gen", "1. Mooseksen kirja"),
    ("Exodus", "Exod", "2. Mooseksen kirja"),
    ("Leviticus", "Lev", "3. Mooseksen kirja"),
    ("Numbers", "Num", "4. Mooseksen kirja"),
    ("Deuteronomy", "Deut", "5. Mooseksen kirja"),
    ("Joshua", "Josh", "Joosuan kirja"),
    ("Judges", "Judg", "Tuomarien kirja"),
    ("Ruth", "Ruth", "Ruutin kirja"),
    ("I Samuel", "1Sam", "1. Samuelin kirja"),
    ("II Samuel", "2Sam", "2. Samuelin kirja"),
    ("I Kings", "1Kgs", "1. Kuningasten kirja"),
    ("II Kings", "2Kgs", "2. Kuningasten kirja"),
    ("I Chronicles", "1Chr", "1. Aikakirja"),
    ("II Chronicles", "2Chr", "2. Aikakirja"),
    ("Ezra", "Ezra", "Esran kirja"),
    ("Nehemiah", "Neh", "Nehemian kirja"),
    ("Esther", "Esth", "Esterin kirja"),
    ("Job", "Job", "Jobin kirja"),
    ("Psalms", "Ps", "Psalmien kirja"),
    ("Proverbs", "Prov", "Sananlaskujen kirja"),
    ("Ecclesiastes", "Eccl", "Saarnaajan kirja"),
    ("Song of Solomon", "Song", "Laulujen laulu"),
    ("Isaiah", "Isa", "Jesajan kirja"),
    ("Jeremiah", "Jer", "Jeremian kirja"),
    ("Lamentations", "Lam", "Valitusvirret"),
    ("Ezekiel", "Ezek", "Hesekielin kirja"),
    ("Daniel", "Dan", "Danielin kirja"),
    ("Hosea", "Hos", "Hoosean kirja"),
    ("Joel", "Joel", "Joelin kirja"),
    ("Amos", "Amos", "Aamoksen kirja"),
    ("Obadiah", "Obad", "Obadjan kirja"),
    ("Jonah", "Jonah", "Jonan kirja"),
    ("Micah", "Mic", "Miikan kirja"),
    ("Nahum", "Nah", "Nahumin kirja"),
    ("Habakkuk", "Hab", "Habakukin kirja"),
    ("Zephaniah", "Zeph", "Sefanjan kirja"),
    ("Haggai", "Hag", "Haggain kirja"),
    ("Zechariah", "Zech", "Sakarian kirja"),
    ("Malachi", "Mal", "Malakian kirja"),
    # New Testament
    ("Matthew", "Matt", "Matteus"),
    ("Mark", "Mark", "Markus"),
    ("Luke", "Luke", "Luukas"),
    ("John", "John", "Johannes"),
    ("Acts", "Acts", "Apostolien teot"),
    ("Romans", "Rom", "Kirje roomalaisille"),
    ("I Corinthians", "1Cor", "1. Kor"),
    ("II Corinthians", "2Cor", "2. Kor"),
    ("Galatians", "Gal", "Kirje galatalaisille"),
    ("Ephesians", "Eph", "Kirje efesolaisille"),
    ("Philippians", "Phil", "Kirje filippiläisille"),
    ("Colossians", "Col", "Kirje kolossalaisille"),
    ("I Thessalonians", "1Thess", "1. Tess"),
    ("II Thessalonians", "2Thess", "2. Tess"),
    ("I Timothy", "1Tim", "1. Tim"),
    ("II Timothy", "2Tim", "2. Tim"),
    ("Titus", "Titus", "Kirje Titukselle"),
    ("Philemon", "Phlm", "Kirje Filemonille"),
    ("Hebrews", "Heb", "Kirje heprealaisille"),
    ("James", "Jas", "Jaakobin kirje"),
    ("I Peter", "1Pet", "1. Pietarin kirje"),
    ("II Peter", "2Pet", "2. Pietarin kirje"),
    ("I John", "1John", "1. Johanneksen kirje"),
    ("II John", "2John", "2. Johanneksen kirje"),
    ("III John", "3John", "3. Johanneksen kirje"),
    ("Jude", "Jude", "Juudaan kirje"),
    ("Revelation of John", "Rev", "Johanneksen ilmestys"),
]

BOOKS: list[BookInfo] = [
    BookInfo(
        name=name,
        osis=osis,
        testament="old" if order <= 39 else "new",
        order=order,
        finnish=finnish,
    )
    for order, (name, osis, finnish) in enumerate(_BOOK_ROWS, start=1)
]

BOOKS_BY_NAME = {book.name: book for book in BOOKS}
BOOKS_BY_OSIS = {book.osis.lower(): book for book in BOOKS}


# Abbreviations for single books, English then Finnish
_SINGLE_ALIASES = {
    "Genesis": ["gen", "gn", "ge", "1moos", "1mooses", "1mos"],
    "Exodus": ["exod", "exo", "ex", "2moos", "2mooses", "2mos"],
    "Leviticus": ["lev", "lv", "le", "3moos", "3mooses", "3mos"],
    "Numbers": ["num", "nu", "nm", "4moos", "4mooses", "4mos"],
    "Deuteronomy": ["deut", "deu", "dt", "5moos", "5mooses", "5mos"],
    "Joshua": ["josh", "jos", "joos", "joosua"],
    "Judges": ["judg", "jdg", "jg", "tuom", "tuomarit"],
    "Ruth": ["ru", "rth", "ruut"],
    "Ezra": ["ezr", "esra"],
    "Nehemiah": ["neh", "ne", "nehemia"],
    "Esther": ["esth", "est", "es", "ester"],
    "Job": ["jb"],
    "Psalms": ["ps", "psa", "psalm", "pss", "psalmi", "psalmit"],
    "Proverbs": ["prov", "pr", "prv", "snl", "sananl", "sananlaskut"],
    "Ecclesiastes": ["eccl", "ecc", "ec", "qoh", "saarn", "saarnaaja"],
    "Song of Solomon": ["song", "songofsongs", "sos", "cant", "ll", "laul"],
    "Isaiah": ["isa", "is", "jes", "jesaja"],
    "Jeremiah": ["jer", "je", "jeremia"],
    "Lamentations": ["lam", "la", "val", "valit"],
    "Ezekiel": ["ezek", "eze", "ez", "hes", "hesekiel"],
    "Daniel": ["dan", "dn", "da"],
    "Hosea": ["hos", "ho", "hoos", "hoosea"],
    "Joel": ["jl"],
    "Amos": ["am", "aam", "aamos"],
    "Obadiah": ["obad", "ob", "obadja"],
    "Jonah": ["jon", "jnh", "joona", "joon"],
    "Micah": ["mic", "mi", "miika", "miik"],
    "Nahum": ["nah", "na"],
    "Habakkuk": ["hab", "hb", "habakuk"],
    "Zephaniah": ["zeph", "zep", "sef", "sefanja"],
    "Haggai": ["hag", "hg", "hagg"],
    "Zechariah": ["zech", "zec", "sak", "sakarja"],
    "Malachi": ["mal", "ml", "malakia"],
    "Matthew": ["matt", "mat", "mt", "matteus"],
    "Mark": ["mk", "mr", "mark", "markus"],
    "Luke": ["lk", "lu", "luuk", "luukas"],
    "John": ["jn", "joh", "johannes"],
    "Acts": ["ac", "act", "apt", "apostolienteot"],
    "Romans": ["rom", "ro", "rm", "room", "roomalaiset"],
    "Galatians": ["gal", "ga", "galatalaiset"],
    "Ephesians": ["eph", "ef", "efesolaiset"],
    "Philippians": ["phil", "php", "fil", "filippiläiset"],
    "Colossians": ["col", "kol", "kolossalaiset"],
    "Titus": ["tit", "titus"],
    "Philemon": ["philem", "phlm", "phm", "filem", "filemon"],
    "Hebrews": ["heb", "hebr", "heprealaiset"],
    "James": ["jas", "jm", "jaak", "jaakob"],
    "Jude": ["jd", "jud", "juud", "juuda"],
    "Revelation of John": ["rev", "revelation", "re", "rv", "apoc", "ilm", "ilmestys"],
}

# Stems for numbered books, keyed by canonical name
_NUMBERED_STEMS = {
    "I Samuel": (1, ["samuel", "sam", "sa"]),
    "II Samuel": (2, ["samuel", "sam", "sa"]),
    "I Kings": (1, ["kings", "kgs", "ki", "kun", "kuningasten"]),
    "II Kings": (2, ["kings", "kgs", "ki", "kun", "kuningasten"]),
    "I Chronicles": (1, ["chronicles", "chron", "chr", "ch", "aik", "aikakirja"]),
    "II Chronicles": (2, ["chronicles", "chron", "chr", "ch", "aik", "aikakirja"]),
    "I Corinthians": (1, ["corinthians", "cor", "co", "kor", "korinttilaiset"]),
    "II Corinthians": (2, ["corinthians", "cor", "co", "kor", "korinttilaiset"]),
    "I Thessalonians": (1, ["thessalonians", "thess", "th", "tess", "tessalonikalaiset"]),
    "II Thessalonians": (2, ["thessalonians", "thess", "th", "tess", "tessalonikalaiset"]),
    "I Timothy": (1, ["timothy", "tim", "ti", "timoteus"]),
    "II Timothy": (2, ["timothy", "tim", "ti", "timoteus"]),
    "I Peter": (1, ["peter", "pet", "pe", "pt", "piet", "pietari"]),
    "II Peter": (2, ["peter", "pet", "pe", "pt", "piet", "pietari"]),
    "I John": (1, ["john", "jn", "jo", "joh", "johannes"]),
    "II John": (2, ["john", "jn", "jo", "joh", "johannes"]),
    "III John": (3, ["john", "jn", "jo", "joh", "johannes"]),
}

_ROMAN = {1: "i", 2: "ii", 3: "iii"}


def _key(name: str) -> str:
    """Lookup key: lowercase, no periods, no whitespace."""
    return re.sub(r"\s+", "", name.lower().replace(".", ""))


def _build_lookup() -> dict[str, str]:
    lookup: dict[str, str] = {}

    # Canonical and display names go first so they can never be shadowed
    for book in BOOKS:
        lookup.setdefault(_key(book.name), book.name)
        lookup.setdefault(_key(book.osis), book.name)
    for book in BOOKS:
        lookup.setdefault(_key(book.finnish), book.name)

    for name, aliases in _SINGLE_ALIASES.items():
        for alias in aliases:
            lookup.setdefault(_key(alias), name)

    for name, (number, stems) in _NUMBERED_STEMS.items():
        for stem in stems:
            lookup.setdefault(f"{number}{stem}", name)
            # "isa" would collide with Isaiah, so short stems get no Roman form
            if len(stem) >= 3:
                lookup.setdefault(f"{_ROMAN[number]}{stem}", name)

    return lookup


# Lowercase, whitespace/period-free keys -> canonical names
BOOK_NAMES = _build_lookup()


def normalize_book_name(name: str) -> str:
    """
    Map a book token to its canonical backend name.

    Matching is case-insensitive and ignores periods and whitespace, so
    "1.Joh", "1 joh" and "I John" all give "I John". Tokens that are not
    in the table come back unchanged.

    Args:
        name: Book token as typed by the user

    Returns:
        Canonical book name, or the input if unrecognized
    """
    if not name:
        return name
    return BOOK_NAMES.get(_key(name), name)


def is_known_book(name: str) -> bool:
    """True if the token resolves to a canonical book."""
    return bool(name) and _key(name) in BOOK_NAMES


def get_book(name: str) -> Optional[BookInfo]:
    """Return BookInfo for any recognized token, or None."""
    return BOOKS_BY_NAME.get(normalize_book_name(name))


def osis_code(name: str) -> Optional[str]:
    """OSIS book code for a book token ("I John" -> "1John")."""
    book = get_book(name)
    return book.osis if book else None


def book_from_osis(code: str) -> Optional[str]:
    """Canonical name for an OSIS book code ("1John" -> "I John")."""
    book = BOOKS_BY_OSIS.get(code.lower()) if code else None
    return book.name if book else None


def display_name(name: str, locale: str = "en") -> str:
    """
    Localized display name for a canonical book.

    Only "fi" has its own names; any other locale gets the canonical name.
    Unknown books are returned as given.
    """
    book = BOOKS_BY_NAME.get(name)
    if not book:
        return name
    if locale == "fi":
        return book.finnish
    return book.name


def canonical_from_display(display: str, locale: str = "en") -> str:
    """Reverse of display_name(); unknown names are returned as given."""
    if locale == "fi":
        for book in BOOKS:
            if book.finnish == display:
                return book.name
    return display
