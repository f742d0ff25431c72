"""Tests for the HTTP surface."""

import logging
import sqlite3

import pytest
from fastapi.testclient import TestClient

from wtype import router
from wtype.app import create_app
from wtype.config import settings
from wtype.database import get_db_connection, init_db
from wtype.globals import vocab_manager
from wtype.log_handler import SQLiteHandler


@pytest.fixture
def client(tmp_path, monkeypatch):
    vocab_dir = tmp_path / "vocabulary"
    vocab_dir.mkdir()
    (vocab_dir / "jp_1.csv").write_text(
        "id,word,pron,romaji,gram\n1,猫,ねこ,neko,\n", encoding="utf-8"
    )
    (vocab_dir / "de_1.csv").write_text(
        "id,word,pron,romaji,gram\n1,dog,Hund,,1\n", encoding="utf-8"
    )
    monkeypatch.setattr(settings, "DB_DIR", str(tmp_path / "db"))
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "log"))
    monkeypatch.setattr(settings, "LOG_TO_DB", False)
    monkeypatch.setattr(vocab_manager, "directory", str(vocab_dir))
    router.sessions.clear()
    with TestClient(create_app()) as test_client:
        yield test_client
    router.sessions.clear()


class TestVocabularyRoutes:
    def test_languages(self, client):
        body = client.get("/api/languages").json()
        languages = {lang["code"]: lang for lang in body["languages"]}
        assert languages["jp"]["levels"] == [1]
        assert body["levels"] == [1, 2]

    def test_words(self, client):
        words = client.get("/api/words", params={"lang": "de", "level": 1}).json()
        assert words == [
            {"id": 1, "display": "dog", "pron": "Hund", "hint": "", "gram": "1"}
        ]

    def test_unknown_language(self, client):
        response = client.get("/api/words", params={"lang": "xx", "level": 1})
        assert response.status_code == 400


class TestResultRoutes:
    def test_store_and_list(self, client):
        result = {"wpm": 42, "accuracy": 97, "timestamp": 1700000000000}
        response = client.post("/api/results", json=result)
        assert response.status_code == 200
        assert client.get("/api/results").json() == [result]

    def test_rejects_out_of_range_accuracy(self, client):
        response = client.post(
            "/api/results", json={"wpm": 1, "accuracy": 101, "timestamp": 1}
        )
        assert response.status_code == 422


class TestSessionRoutes:
    def test_requires_session(self, client):
        assert client.get("/api/session").status_code == 401
        assert client.post("/api/session/skip").status_code == 401

    def test_start_and_type(self, client):
        view = client.post("/api/session", data={"lang": "jp", "level": 1}).json()
        assert view["phase"] == "loaded"
        assert len(view["entries"]) == settings.PAGE_SIZE
        assert settings.SESSION_COOKIE_NAME in client.cookies

        view = client.post("/api/session/input", data={"buffer": "nek"}).json()
        assert view["phase"] == "running"
        assert (view["confirmed"], view["pending"]) == ("ね", "k")

        view = client.post("/api/session/input", data={"buffer": "neko"}).json()
        assert view["current_index"] == 1
        assert view["raw_input"] == ""

        view = client.post("/api/session/backspace").json()
        assert view["current_index"] == 0
        assert view["raw_input"] == "ねこ"

    def test_skip_and_finish_store_result(self, client):
        client.post("/api/session", data={"lang": "de", "level": 1})
        client.post("/api/session/input", data={"buffer": "Hu"})
        view = client.post("/api/session/skip").json()
        assert view["current_index"] == 1
        assert view["accuracy"] == 33

        view = client.post("/api/session/finish").json()
        assert view["phase"] == "finished"
        assert view["stats"]["accuracy"] == 33
        results = client.get("/api/results").json()
        assert len(results) == 1
        assert results[0]["accuracy"] == 33

    def test_finish_before_typing_does_nothing(self, client):
        client.post("/api/session", data={"lang": "de", "level": 1})
        view = client.post("/api/session/finish").json()
        assert view["phase"] == "loaded"
        assert client.get("/api/results").json() == []

    def test_switch_language_and_level(self, client):
        client.post("/api/session", data={"lang": "jp", "level": 1})
        view = client.post("/api/session/language", data={"lang": "de"}).json()
        assert view["language"] == "de"
        assert view["entries"][0]["display"] == "dog"

        view = client.post("/api/session/level", data={"level": 2}).json()
        assert view["level"] == 2
        assert view["phase"] == "empty"

        response = client.post("/api/session/language", data={"lang": "xx"})
        assert response.status_code == 400

    def test_restart(self, client):
        client.post("/api/session", data={"lang": "de", "level": 1})
        client.post("/api/session/input", data={"buffer": "H"})
        view = client.post("/api/session/restart").json()
        assert view["phase"] == "loaded"
        assert view["raw_input"] == ""
        assert view["accuracy"] == 100

    def test_reset(self, client):
        client.post("/api/session", data={"lang": "de", "level": 1})
        assert client.post("/api/reset").json() == {"status": "success"}
        assert client.get("/api/session").status_code == 401


class TestSQLiteHandler:
    def test_writes_warnings(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "DB_DIR", str(tmp_path / "db"))
        init_db()
        logger = logging.getLogger("wtype.tests.sqlite")
        handler = SQLiteHandler()
        logger.addHandler(handler)
        try:
            logger.warning("word list unavailable")
            logger.info("not stored")
        finally:
            logger.removeHandler(handler)

        conn = get_db_connection()
        rows = conn.execute("SELECT level, message FROM logs").fetchall()
        conn.close()
        assert [(row["level"], row["message"]) for row in rows] == [
            ("WARNING", "wtype.tests.sqlite: word list unavailable")
        ]
        assert isinstance(rows[0], sqlite3.Row)
