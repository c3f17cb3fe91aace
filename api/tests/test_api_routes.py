# api/tests/test_api_routes.py
"""
Tests for the HTTP API through the Flask test client.
"""

import os
import sys
from contextlib import contextmanager
from unittest.mock import patch

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sample_bible import sample_database, verse_id
from server import create_app


@contextmanager
def api_client(**overrides):
    """Yield (client, db_path) for an app over a fresh sample database."""
    with sample_database() as (path, _):
        config = {"BIBLE_DB_PATH": path, "SECRET_KEY": "test", "TESTING": True}
        config.update(overrides)
        app = create_app(config)
        yield app.test_client(), path


def _login(client, username="alice", password="secret"):
    resp = client.post("/api/register", json={"username": username, "password": password})
    assert resp.status_code == 201, resp.get_json()


def test_status_and_health():
    """Test status endpoints."""
    print("\n=== Testing /status and /health ===")

    with api_client() as (client, _):
        assert client.get("/status").get_json()["status"] == "ok"
        data = client.get("/health").get_json()
        assert data["status"] == "healthy"
        assert data["components"]["versions"]["ok"]
        print("✓ healthy with both versions installed")

    with api_client(STRONGS_VERSION_CODE="ESV") as (client, _):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["components"]["versions"]["detail"] == "missing: ESV"
        print("✓ missing version reported")

    print("status: All tests passed!")


def test_bible_endpoints():
    """Test versions, books, chapters, verses and comparison."""
    print("\n=== Testing /api/bible ===")

    with api_client() as (client, _):
        codes = [v["code"] for v in client.get("/api/bible/versions").get_json()["versions"]]
        assert codes == ["KJV", "fin2017"]
        print("✓ active versions only, ordered by code")

        books = client.get("/api/bible/books?locale=fi").get_json()["books"]
        assert len(books) == 66
        assert books[0]["name"] == "Genesis"
        assert books[0]["display_name"] == "1. Mooseksen kirja"
        john = [b for b in books if b["name"] == "John"][0]
        assert john["chapters_count"] == 3
        print("✓ books with display names and chapter counts")

        data = client.get("/api/bible/chapter/Joh/3?version=KJV").get_json()
        assert data["book"] == "John" and data["version"] == "KJV"
        assert [v["verse_number"] for v in data["verses"]] == [16, 17]
        print("✓ chapter by abbreviation")

        data = client.get("/api/bible/chapter/John/3").get_json()
        assert data["version"] == "fin2017"
        print("✓ default version")

        resp = client.get("/api/bible/chapter/John/99")
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "not_found"
        assert client.get("/api/bible/chapter/John/3?version=NOPE").status_code == 404
        print("✓ missing chapter / version -> 404")

        data = client.get("/api/bible/verse/John.3.16?version=fin2017").get_json()
        assert data["verse"]["version_code"] == "fin2017"
        assert "loved<G25>" in data["tagged"]["tagged_text"]
        assert any(w["strongs_numbers"] == ["G25"] for w in data["words"])
        assert set(data["labels"]) == {"G1063", "G2316", "G3779", "G25", "G3588", "G2889"}
        assert data["labels"]["G25"] == "ἀγαπάω" and data["labels"]["G1063"] == "G1063"
        print("✓ verse study")

        assert client.get("/api/bible/verse/John.99.1").status_code == 404

        data = client.get("/api/bible/compare?ref=Mal+3:19&versions=fin2017,KJV,ESV").get_json()
        assert len(data["versions"]["fin2017"]) == 1
        assert data["versions"]["KJV"] == []
        assert data["missing"] == ["ESV"]
        print("✓ compare reports missing versions")

        assert client.get("/api/bible/compare?ref=grace&versions=KJV").status_code == 400
        assert client.get("/api/bible/compare?versions=KJV").status_code == 400
        print("✓ compare validation")

    print("bible endpoints: All tests passed!")


def test_search_endpoint():
    """Test /api/search."""
    print("\n=== Testing /api/search ===")

    with api_client() as (client, _):
        data = client.get("/api/search?q=1.Joh.1:2-5").get_json()
        assert data["type"] == "reference"
        assert data["reference"]["book"] == "I John"
        assert len(data["verses"]) == 2
        print("✓ reference search")

        data = client.get("/api/search?q=loved+world").get_json()
        assert data["type"] == "text"
        assert [v["osis"] for v in data["verses"]] == ["John.3.16"]
        print("✓ text search")

        data = client.get("/api/search?q=").get_json()
        assert data == {"type": "text", "verses": [], "reference": None, "notice": None}
        print("✓ empty query")

    with api_client(TEXT_SEARCH_LIMIT=1) as (client, _):
        assert len(client.get("/api/search?q=world").get_json()["verses"]) == 1
        print("✓ configured limit")

    print("search endpoint: All tests passed!")


def test_strongs_endpoints():
    """Test lexicon, verse search, tagged text and mapping."""
    print("\n=== Testing /api/strongs ===")

    with api_client() as (client, path):
        data = client.get("/api/strongs/lexicon/h0085").get_json()
        assert data["found"] and data["strongs_number"] == "H85"
        print("✓ lexicon entry")

        resp = client.get("/api/strongs/lexicon/G9999")
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "not_found"
        data = resp.get_json()
        assert data["found"] is False and data["entry"] is None
        assert data["strongs_number"] == "G9999" and data["label"] == "G9999"
        print("✓ unknown entry -> 404")

        data = client.get("/api/strongs/verses/G2889?version=fin2017").get_json()
        assert data["total_count"] == 2
        assert data["version"] == "fin2017"
        print("✓ verses mapped into fin2017")

        data = client.get("/api/strongs/tagged/Mal.4.1").get_json()
        assert data["words"][3]["strongs_numbers"] == ["H3117"]
        print("✓ tagged verse words")

        kjv_mal = verse_id(path, "KJV", "Mal.4.1")
        data = client.get(f"/api/strongs/map/{kjv_mal}?version=fin2017").get_json()
        assert (data["chapter_number"], data["verse_number"]) == (3, 19)
        assert client.get(f"/api/strongs/map/{kjv_mal}").status_code == 400
        print("✓ verse mapping")

    print("strongs endpoints: All tests passed!")


def test_lexicon_history_in_session():
    """Test lexicon history kept across requests."""
    print("\n=== Testing /api/strongs/history ===")

    with api_client(LEXICON_HISTORY_LIMIT=2) as (client, _):
        assert client.get("/api/strongs/history").get_json()["current"] is None

        client.post("/api/strongs/history", json={"strongs_number": "G25"})
        client.post("/api/strongs/history", json={"strongs_number": "G26"})
        data = client.post("/api/strongs/history", json={"strongs_number": "g5368"}).get_json()
        assert data["entries"] == ["G26", "G5368"]
        print("✓ pushes normalized and bounded")

        data = client.post("/api/strongs/history/back").get_json()
        assert data["current"] == "G26" and data["can_go_forward"]
        data = client.post("/api/strongs/history/forward").get_json()
        assert data["current"] == "G5368"
        assert client.get("/api/strongs/history").get_json()["current"] == "G5368"
        print("✓ back / forward persisted")

        assert client.post("/api/strongs/history", json={}).status_code == 400

    print("lexicon history: All tests passed!")


def test_auth():
    """Test register, login, logout and /me."""
    print("\n=== Testing auth ===")

    with api_client() as (client, _):
        assert client.get("/api/me").get_json() == {"user": None}

        _login(client)
        assert client.get("/api/me").get_json()["user"]["username"] == "alice"
        print("✓ register logs in")

        resp = client.post("/api/register", json={"username": "alice", "password": "x"})
        assert resp.status_code == 409
        print("✓ duplicate username")

        # Lookup misses, insert hits the unique constraint
        with patch("routes.auth_api.get_user_by_username", return_value=None):
            resp = client.post("/api/register", json={"username": "alice", "password": "x"})
        assert resp.status_code == 409
        assert resp.get_json()["error"] == "username_taken"
        print("✓ concurrent duplicate registration")

        client.post("/api/logout")
        assert client.get("/api/me").get_json() == {"user": None}

        resp = client.post("/api/login", json={"username": "alice", "password": "wrong"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "invalid_credentials"
        print("✓ wrong password rejected")

        resp = client.post("/api/login", json={"username": "alice", "password": "secret"})
        assert resp.status_code == 200
        assert client.get("/api/me").get_json()["user"]["username"] == "alice"
        print("✓ login")

        assert client.post("/api/register", json={"username": "bob"}).status_code == 400

    print("auth: All tests passed!")


def test_markings_endpoints():
    """Test markings through the API."""
    print("\n=== Testing /api/markings ===")

    with api_client() as (client, path):
        assert client.get("/api/markings").status_code == 401
        print("✓ login required")

        _login(client)
        verse = verse_id(path, "KJV", "John.3.16")

        resp = client.post("/api/markings", json={"verse_id": verse, "type": "highlight", "color": "yellow"})
        assert resp.status_code == 201
        marking = resp.get_json()
        assert marking["book_name"] == "John"

        client.post("/api/markings", json={"verse_id": verse, "type": "comment", "content": "note"})
        data = client.get("/api/markings").get_json()
        assert [m["marking_type"] for m in data["markings"]] == ["comment", "highlight"]
        print("✓ create and list")

        resp = client.patch(f"/api/markings/{marking['id']}", json={"color": "green"})
        assert resp.get_json()["color"] == "green"
        assert client.get("/api/markings/summary").get_json() == {
            "highlight": 1, "comment": 1, "bookmark": 0,
        }
        print("✓ update and summary")

        assert client.post("/api/markings", json={"verse_id": verse, "type": "underline"}).status_code == 400
        assert client.post("/api/markings", json={"verse_id": 999999, "type": "bookmark"}).status_code == 404
        assert client.get("/api/markings?type=underline").status_code == 400
        print("✓ validation")

        client.post("/api/logout")
        _login(client, "bob")
        assert client.delete(f"/api/markings/{marking['id']}").status_code == 404
        assert client.get("/api/markings").get_json() == {"markings": []}
        print("✓ other users cannot delete")

    print("markings endpoints: All tests passed!")


def test_reading_endpoints():
    """Test reading history and last position."""
    print("\n=== Testing /api/reading ===")

    with api_client() as (client, _):
        assert client.get("/api/reading/position").get_json() == {"position": None}
        client.get("/api/bible/chapter/Matt/5?version=KJV")
        position = client.get("/api/reading/position").get_json()["position"]
        assert position["book"] == "Matthew" and position["chapter"] == 5
        assert position["version"] == "KJV"
        print("✓ chapter view sets last position")

        assert client.post("/api/reading/history", json={"book": "Joh", "chapter": 3}).status_code == 401

        _login(client)
        resp = client.post("/api/reading/history", json={"book": "Joh", "chapter": 3, "version": "KJV"})
        assert resp.status_code == 201
        client.post("/api/reading/history", json={"book": "Ilm", "chapter": 22, "type": "listen"})
        history = client.get("/api/reading/history").get_json()["history"]
        assert [h["book_name"] for h in history] == ["Revelation of John", "John"]
        listened = client.get("/api/reading/history?type=listen").get_json()["history"]
        assert [h["history_type"] for h in listened] == ["listen"]
        print("✓ history recorded and listed")

        assert client.post("/api/reading/history", json={"book": "Hezekiah", "chapter": 1}).status_code == 404
        assert client.post("/api/reading/history", json={"book": "Joh", "chapter": 1, "version": "NOPE"}).status_code == 404
        assert client.post("/api/reading/history", json={"book": "Joh"}).status_code == 400
        for body in (
            {"book": "Joh", "chapter": -3},
            {"book": "Joh", "chapter": 9999},
            {"book": "Joh", "chapter": 3, "verse": [16]},
            {"book": "Joh", "chapter": 3, "verse": "x"},
        ):
            assert client.post("/api/reading/history", json=body).status_code == 400
        print("✓ validation")

    print("reading endpoints: All tests passed!")


def test_backend_failure():
    """Test that a broken database gives 503 with a notice, search stays 200."""
    print("\n=== Testing backend failure ===")

    with api_client() as (client, path):
        app_path = path

    # Database directory removed: every query fails
    app = create_app({"BIBLE_DB_PATH": app_path, "SECRET_KEY": "test", "TESTING": True})
    client = app.test_client()

    resp = client.get("/api/bible/versions")
    assert resp.status_code == 503
    assert resp.get_json()["notice"]
    print("✓ 503 with notice")

    data = client.get("/api/search?q=Joh+3:16").get_json()
    assert data["verses"] == [] and data["notice"]
    print("✓ search degrades to notice")

    assert client.get("/health").status_code == 503
    print("✓ health reports database down")

    for resp in (
        client.post("/api/login", json={"username": "alice", "password": "secret"}),
        client.post("/api/register", json={"username": "alice", "password": "secret"}),
    ):
        assert resp.status_code == 503
        assert resp.get_json()["error"] == "backend_unavailable"
    with client.session_transaction() as sess:
        sess["user_id"] = 1
    resp = client.get("/api/me")
    assert resp.status_code == 503 and resp.get_json()["notice"]
    print("✓ auth endpoints answer 503 JSON")

    print("backend failure: All tests passed!")


def main():
    """Run all tests."""
    print("=" * 60)
    print("API Routes Test Suite")
    print("=" * 60)

    test_status_and_health()
    test_bible_endpoints()
    test_search_endpoint()
    test_strongs_endpoints()
    test_lexicon_history_in_session()
    test_auth()
    test_markings_endpoints()
    test_reading_endpoints()
    test_backend_failure()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
