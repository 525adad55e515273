import logging
import threading
from datetime import datetime
from typing import Dict, Optional, Tuple

from .mastery import SpacedRepetitionPolicy, update_mastery
from .models import MasteryRecord

logger = logging.getLogger(__name__)


class ProgressStore:
    """In-memory mastery records keyed by (user id, vocabulary id)."""

    def __init__(self, policy: SpacedRepetitionPolicy):
        self.policy = policy
        self._records: Dict[Tuple[str, str], MasteryRecord] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str, vocabulary_id: str) -> Optional[MasteryRecord]:
        return self._records.get((user_id, vocabulary_id))

    def record_outcome(
        self,
        user_id: str,
        vocabulary_id: str,
        is_correct: bool,
        now: Optional[datetime] = None,
    ) -> MasteryRecord:
        key = (user_id, vocabulary_id)
        with self._lock:
            record = update_mastery(
                self._records.get(key), is_correct, self.policy, now
            )
            self._records[key] = record
        logger.info(
            f"Progress {user_id}/{vocabulary_id}: level {record.mastery_level}, "
            f"next review {record.next_review_at:%Y-%m-%d %H:%M}"
        )
        return record

    def records_for(self, user_id: str) -> Dict[str, MasteryRecord]:
        with self._lock:
            return {
                vocab_id: record
                for (uid, vocab_id), record in self._records.items()
                if uid == user_id
            }

    def clear(self):
        with self._lock:
            self._records.clear()
