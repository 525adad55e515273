from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from wordquest import globals as wq_globals
from wordquest.app import create_app
from wordquest.config import settings
from wordquest.session import ExerciseSession

CSV = (
    "id,source_word,target_word,example_source,example_target\n"
    "a1,dog,perro,The dog barks.,El perro ladra.\n"
    "a2,cat,gato,My cat sleeps.,Mi gato duerme.\n"
    "a3,bird,pájaro,A bird sings.,Un pájaro canta.\n"
    "a4,fish,pez,The fish swims.,El pez nada.\n"
    "a5,horse,caballo,,\n"
)


@pytest.fixture
def client(tmp_path, monkeypatch):
    vocab_dir = tmp_path / "vocabulary"
    vocab_dir.mkdir()
    (vocab_dir / "animals.csv").write_text(CSV, encoding="utf-8")
    (vocab_dir / "tiny.csv").write_text("source_word,target_word\nsun,sol\n", encoding="utf-8")

    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "log"))
    monkeypatch.setattr(wq_globals.vocab_manager, "directory", str(vocab_dir))

    with TestClient(create_app()) as c:
        yield c

    wq_globals.sessions.clear()
    wq_globals.progress_store.clear()


def start(client, **body):
    response = client.post("/api/sessions", json=body)
    assert response.status_code == 200
    return response.json()


def correct_answer(data, question_id):
    return wq_globals.sessions[data["session_id"]].get_question(question_id).correct_answer


class TestTopics:

    def test_lists_loaded_topics(self, client):
        assert client.get("/api/topics").json() == [
            {"id": "animals", "name": "Animals", "count": 5},
            {"id": "tiny", "name": "Tiny", "count": 1},
        ]


class TestSessions:

    def test_start_hides_answers(self, client):
        data = start(client, topic="animals", mode="multiple_choice", count=3)

        assert data["topic"] == "animals"
        assert data["total_questions"] == 3
        for q in data["questions"]:
            assert "correct_answer" not in q
            assert len(q["options"]) == 4
        assert settings.SESSION_COOKIE_NAME in client.cookies

    def test_unknown_topic_falls_back(self, client):
        data = start(client, topic="nope", count=2)
        assert data["topic"] == "animals"

    def test_insufficient_vocabulary(self, client):
        response = client.post("/api/sessions", json={"topic": "tiny", "mode": "mixed"})
        assert response.status_code == 422
        assert "at least 4" in response.json()["error"]

    def test_answer_flow_updates_mastery(self, client):
        data = start(client, topic="animals", mode="translate_to_source", count=2)
        q1, q2 = data["questions"]

        right = client.post(
            "/api/sessions/current/answers",
            json={"question_id": q1["id"], "answer": correct_answer(data, q1["id"]), "user_id": "u1"},
        ).json()
        assert right["answer"]["is_correct"] is True
        assert right["mastery"]["mastery_level"] == 1
        assert right["mastery"]["total_attempts"] == 1

        wrong = client.post(
            "/api/sessions/current/answers",
            json={"question_id": q2["id"], "answer": "zzz", "time_spent": 4},
        ).json()
        assert wrong["answer"]["is_correct"] is False
        assert wrong["mastery"] is None

        summary = client.get("/api/sessions/current/summary").json()
        assert summary["questions_answered"] == 2
        assert summary["correct_answers"] == 1
        assert summary["points_earned"] == 20

        current = client.get("/api/sessions/current").json()
        assert len(current["answers"]) == 2

    def test_double_submit(self, client):
        data = start(client, topic="animals", count=1)
        body = {"question_id": data["questions"][0]["id"], "answer": "x"}
        assert client.post("/api/sessions/current/answers", json=body).status_code == 200
        assert client.post("/api/sessions/current/answers", json=body).status_code == 400

    def test_unknown_question(self, client):
        start(client, topic="animals", count=1)
        response = client.post("/api/sessions/current/answers", json={"question_id": "nope", "answer": "x"})
        assert response.status_code == 404

    def test_no_session(self, client):
        assert client.get("/api/sessions/current").status_code == 401
        assert client.get("/api/sessions/current/summary").status_code == 401

    def test_unknown_mode_rejected(self, client):
        response = client.post("/api/sessions", json={"topic": "animals", "mode": "bogus"})
        assert response.status_code == 422
        assert "bogus" in response.json()["error"]
        assert wq_globals.sessions == {}

    def test_expired_sessions_swept_on_start(self, client):
        stale = ExerciseSession(
            [], started_at=datetime.now() - timedelta(minutes=settings.SESSION_TIMEOUT_MINUTES + 1)
        )
        wq_globals.sessions["stale"] = stale

        data = start(client, topic="animals", count=1)
        assert "stale" not in wq_globals.sessions
        assert list(wq_globals.sessions) == [data["session_id"]]

    def test_reset(self, client):
        start(client, topic="animals", count=1)
        assert client.post("/api/reset").json() == {"status": "success"}
        assert wq_globals.sessions == {}


class TestSimilarityAndReview:

    def test_similarity(self, client):
        response = client.post("/api/similarity", json={"user_answer": "kitten", "correct_answer": "sitting"})
        assert response.json()["similarity"] == pytest.approx(4 / 7)

    def test_review_queue_lists_learned_words(self, client):
        wq_globals.progress_store.record_outcome("u1", "a1", True)

        assert client.get("/api/review/u1").json() == []
        queue = client.get("/api/review/u1", params={"include_upcoming": True}).json()
        assert [item["vocabulary_id"] for item in queue] == ["a1"]
        assert queue[0]["priority"] == "upcoming"
        assert queue[0]["vocabulary"]["source_word"] == "dog"
