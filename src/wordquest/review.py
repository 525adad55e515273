from datetime import datetime, timedelta
from typing import List, Mapping, Optional

from .models import MasteryRecord, ReviewPriority, ReviewQueueItem, VocabularyEntry


def classify(record: MasteryRecord, now: datetime) -> ReviewPriority:
    if record.next_review_at > now:
        return ReviewPriority.UPCOMING
    if now - record.next_review_at > timedelta(days=1):
        return ReviewPriority.OVERDUE
    return ReviewPriority.DUE


def build_review_queue(
    records: Mapping[str, MasteryRecord],
    vocabulary: Optional[Mapping[str, VocabularyEntry]] = None,
    now: Optional[datetime] = None,
    include_upcoming: bool = False,
) -> List[ReviewQueueItem]:
    """
    Builds the review queue for one user from their records keyed by
    vocabulary id. Words never learned (level 0) are left out; the rest are
    ordered by when they were due.
    """
    now = now or datetime.now()
    vocabulary = vocabulary or {}

    queue: List[ReviewQueueItem] = []
    for vocabulary_id, record in records.items():
        if record.mastery_level <= 0:
            continue
        priority = classify(record, now)
        if priority == ReviewPriority.UPCOMING and not include_upcoming:
            continue
        queue.append(
            ReviewQueueItem(
                vocabulary_id=vocabulary_id,
                vocabulary=vocabulary.get(vocabulary_id),
                record=record,
                priority=priority,
                days_overdue=(
                    (now - record.next_review_at).days
                    if priority == ReviewPriority.OVERDUE
                    else None
                ),
            )
        )

    queue.sort(key=lambda item: item.record.next_review_at)
    return queue
