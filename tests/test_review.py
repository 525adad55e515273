from datetime import datetime, timedelta

from conftest import make_entry
from wordquest.mastery import LinearReviewPolicy
from wordquest.models import MasteryRecord, ReviewPriority
from wordquest.progress import ProgressStore
from wordquest.review import build_review_queue, classify

NOW = datetime(2024, 3, 10, 9, 0, 0)


def due_in(days, level=2):
    return MasteryRecord(
        total_attempts=5,
        correct_answers=4,
        mastery_level=level,
        last_reviewed_at=NOW - timedelta(days=5),
        next_review_at=NOW + timedelta(days=days),
    )


class TestClassify:

    def test_future_is_upcoming(self):
        assert classify(due_in(1), NOW) == ReviewPriority.UPCOMING

    def test_today_is_due(self):
        assert classify(due_in(0), NOW) == ReviewPriority.DUE
        assert classify(due_in(-1), NOW) == ReviewPriority.DUE

    def test_more_than_a_day_late_is_overdue(self):
        assert classify(due_in(-3), NOW) == ReviewPriority.OVERDUE


class TestBuildReviewQueue:

    def test_orders_by_due_date_and_skips_unlearned(self):
        records = {
            "a": due_in(-1),
            "b": due_in(-5),
            "c": due_in(2),
            "d": due_in(-10, level=0),
        }
        queue = build_review_queue(records, now=NOW)

        assert [item.vocabulary_id for item in queue] == ["b", "a"]
        assert queue[0].priority == ReviewPriority.OVERDUE
        assert queue[0].days_overdue == 5
        assert queue[1].priority == ReviewPriority.DUE
        assert queue[1].days_overdue is None

    def test_include_upcoming(self):
        queue = build_review_queue({"a": due_in(-1), "c": due_in(2)}, now=NOW, include_upcoming=True)
        assert [item.priority for item in queue] == [ReviewPriority.DUE, ReviewPriority.UPCOMING]

    def test_attaches_vocabulary(self):
        entry = make_entry(1, "dog", "perro")
        queue = build_review_queue({"v1": due_in(0)}, {entry.id: entry}, now=NOW)
        assert queue[0].vocabulary == entry

    def test_empty(self):
        assert build_review_queue({}, now=NOW) == []


class TestProgressStore:

    def test_records_outcomes_per_user(self):
        store = ProgressStore(LinearReviewPolicy())
        for _ in range(3):
            store.record_outcome("alice", "v1", True, NOW)
        store.record_outcome("bob", "v1", False, NOW)

        assert store.get("alice", "v1").mastery_level == 2
        assert store.get("bob", "v1").mastery_level == 0
        assert store.get("alice", "v2") is None
        assert list(store.records_for("alice")) == ["v1"]

    def test_learned_words_reach_the_queue(self):
        store = ProgressStore(LinearReviewPolicy())
        store.record_outcome("alice", "v1", True, NOW - timedelta(days=3))
        store.record_outcome("alice", "v2", False, NOW - timedelta(days=3))

        queue = build_review_queue(store.records_for("alice"), now=NOW)
        assert [item.vocabulary_id for item in queue] == ["v1"]
        assert queue[0].priority == ReviewPriority.OVERDUE

    def test_clear(self):
        store = ProgressStore(LinearReviewPolicy())
        store.record_outcome("alice", "v1", True, NOW)
        store.clear()
        assert store.records_for("alice") == {}
