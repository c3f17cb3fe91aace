# api/tests/test_search.py
"""
Tests for search.py - reference lookup with full-text fallback.
"""

import os
import sys

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sample_bible import sample_database
from services.scripture.search import (
    SEARCH_FAILED_NOTICE,
    UNKNOWN_VERSION_NOTICE,
    perform_search,
    to_fts_query,
)
from services.scripture.store import BibleStore, StoreError


class CountingStore(BibleStore):
    """Store that records which query methods ran."""

    def __init__(self, db_path):
        super().__init__(db_path)
        self.calls = []

    def verses_for_reference(self, *args, **kwargs):
        self.calls.append("reference")
        return super().verses_for_reference(*args, **kwargs)

    def text_search(self, *args, **kwargs):
        self.calls.append("text")
        return super().text_search(*args, **kwargs)


class FailingStore(BibleStore):
    """Store whose verse queries always fail."""

    def verses_for_reference(self, *args, **kwargs):
        raise StoreError("no such table: verses")

    def text_search(self, *args, **kwargs):
        raise StoreError("no such table: verses")


def test_fts_query_translation():
    """Test web-search syntax -> FTS5 MATCH."""
    print("\n=== Testing to_fts_query ===")

    assert to_fts_query("love world") == '"love" AND "world"'
    assert to_fts_query('"only begotten" Son') == '"only begotten" AND "Son"'
    assert to_fts_query("light or darkness") == '"light" OR "darkness"'
    assert to_fts_query("world -light") == '("world") NOT "light"'
    assert to_fts_query('world -"only begotten"') == '("world") NOT "only begotten"'
    print("✓ AND, phrases, OR, exclusions")

    assert to_fts_query('say "hi') == '"say" AND """hi"'
    assert to_fts_query("") is None
    assert to_fts_query("or") is None
    assert to_fts_query("-light") is None
    assert to_fts_query('""') is None
    print("✓ nothing searchable -> None")

    print("to_fts_query: All tests passed!")


def test_reference_search():
    """Test queries that parse as references."""
    print("\n=== Testing reference search ===")

    with sample_database() as (path, versions):
        store = CountingStore(path)

        result = perform_search(store, "Joh 3:16")
        assert result.type == "reference"
        assert result.reference.book == "John"
        assert [v.version_code for v in result.verses] == ["KJV", "fin2017"]
        assert store.calls == ["reference"]
        print("✓ one reference query, every version")

        result = perform_search(store, "1.Joh.1:2-5", version="fin2017")
        assert result.type == "reference"
        assert result.reference.verses == [2, 3, 4, 5]
        assert [v.text for v in result.verses] == ["ja elämä ilmestyi, ja me olemme nähneet sen"]
        print("✓ version filter by code")

        result = perform_search(store, "Joh 3", version=versions["KJV"])
        assert [v.verse_number for v in result.verses] == [16, 17]
        print("✓ whole chapter, version by id")

        result = perform_search(store, "Joh 3:99")
        assert result.type == "reference" and result.verses == []
        assert result.notice is None
        print("✓ missing verse is an empty result, not an error")

        result = perform_search(store, "Joh 3:16-1000000", version="KJV")
        assert result.notice is None
        assert [v.verse_number for v in result.verses] == [16, 17]
        print("✓ wide verse range queried by bounds")

        result = perform_search(store, "Joh 3:16", version="NOPE")
        assert result.verses == [] and result.notice == UNKNOWN_VERSION_NOTICE
        print("✓ unknown version notice")

    print("reference search: All tests passed!")


def test_text_search():
    """Test queries that fall back to full-text search."""
    print("\n=== Testing text search ===")

    with sample_database() as (path, _):
        store = CountingStore(path)

        result = perform_search(store, "loved world")
        assert result.type == "text"
        assert result.reference is None
        assert [v.osis for v in result.verses] == ["John.3.16"]
        assert store.calls == ["text"]
        print("✓ words ANDed, one text query")

        result = perform_search(store, "world", version="KJV")
        assert [v.osis for v in result.verses] == ["Matt.5.14", "John.3.16", "John.3.17"]
        print("✓ canonical order")

        result = perform_search(store, "world -condemn", version="KJV")
        assert [v.osis for v in result.verses] == ["Matt.5.14", "John.3.16"]
        print("✓ exclusion")

        result = perform_search(store, '"only begotten"')
        assert [v.osis for v in result.verses] == ["John.3.16"]
        print("✓ phrase")

        result = perform_search(store, "maailmaa")
        assert [v.version_code for v in result.verses] == ["fin2017"]
        print("✓ Finnish text")

        assert len(perform_search(store, "world", limit=1).verses) == 1
        print("✓ limit")

        assert perform_search(store, "zebra").verses == []
        print("✓ no match")

    print("text search: All tests passed!")


def test_empty_query():
    """Test that an empty query never reaches the store."""
    print("\n=== Testing empty query ===")

    store = CountingStore("unused.db")
    for query in ["", "   ", None]:
        result = perform_search(store, query)
        assert result.type == "text" and result.verses == []
    assert store.calls == []
    print("✓ empty text result without queries")

    print("empty query: All tests passed!")


def test_backend_failure_gives_notice():
    """Test that a failing backend degrades to an empty result."""
    print("\n=== Testing backend failure ===")

    with sample_database() as (path, _):
        store = FailingStore(path)

        result = perform_search(store, "Joh 3:16")
        assert result.type == "reference"
        assert result.verses == [] and result.notice == SEARCH_FAILED_NOTICE
        print("✓ reference search notice")

        result = perform_search(store, "grace")
        assert result.type == "text"
        assert result.verses == [] and result.notice == SEARCH_FAILED_NOTICE
        print("✓ text search notice")

        data = result.to_dict()
        assert data == {"type": "text", "verses": [], "reference": None, "notice": SEARCH_FAILED_NOTICE}
        print("✓ serializable")

    print("backend failure: All tests passed!")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Search Dispatcher Test Suite")
    print("=" * 60)

    test_fts_query_translation()
    test_reference_search()
    test_text_search()
    test_empty_query()
    test_backend_failure_gives_notice()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
