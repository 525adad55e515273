"""
Spaced-repetition policies.

Every policy shares the same counter and mastery-level rules and differs
only in how far ahead the next review is scheduled:

* ``linear``: ``level + 1`` days after the answer (1 day for a new record).
* ``exponential``: ``2 ** level`` days after a correct answer, using the
  level held before the answer (1 when unknown or zero), and 1 day after an
  incorrect one.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple, Type

from .models import MasteryRecord

logger = logging.getLogger(__name__)

MIN_LEVEL = 0
MAX_LEVEL = 5
PROMOTION_ACCURACY = 0.8
PROMOTION_MIN_ATTEMPTS = 3


def next_counters(
    prior: Optional[MasteryRecord], is_correct: bool
) -> Tuple[int, int, int]:
    """Returns ``(total_attempts, correct_answers, mastery_level)`` after one answer."""
    if prior is None:
        return 1, int(is_correct), 1 if is_correct else 0

    total = prior.total_attempts + 1
    correct = prior.correct_answers + (1 if is_correct else 0)
    accuracy = correct / total

    level = prior.mastery_level
    if is_correct and accuracy >= PROMOTION_ACCURACY and total >= PROMOTION_MIN_ATTEMPTS:
        level = min(MAX_LEVEL, level + 1)
    elif not is_correct and level > MIN_LEVEL:
        level = max(MIN_LEVEL, level - 1)

    return total, correct, level


class SpacedRepetitionPolicy(ABC):
    name: str = ""

    def compute_next(
        self, prior: Optional[MasteryRecord], is_correct: bool, now: datetime
    ) -> MasteryRecord:
        total, correct, level = next_counters(prior, is_correct)
        return MasteryRecord(
            total_attempts=total,
            correct_answers=correct,
            mastery_level=level,
            last_reviewed_at=now,
            next_review_at=now + self.review_interval(prior, is_correct, level),
        )

    @abstractmethod
    def review_interval(
        self, prior: Optional[MasteryRecord], is_correct: bool, new_level: int
    ) -> timedelta:
        pass


class LinearReviewPolicy(SpacedRepetitionPolicy):
    name = "linear"

    def review_interval(
        self, prior: Optional[MasteryRecord], is_correct: bool, new_level: int
    ) -> timedelta:
        if prior is None:
            return timedelta(days=1)
        return timedelta(days=new_level + 1)


class ExponentialReviewPolicy(SpacedRepetitionPolicy):
    name = "exponential"

    def review_interval(
        self, prior: Optional[MasteryRecord], is_correct: bool, new_level: int
    ) -> timedelta:
        if not is_correct:
            return timedelta(days=1)
        exponent = prior.mastery_level if prior is not None and prior.mastery_level else 1
        return timedelta(days=2**exponent)


POLICIES: Dict[str, Type[SpacedRepetitionPolicy]] = {
    LinearReviewPolicy.name: LinearReviewPolicy,
    ExponentialReviewPolicy.name: ExponentialReviewPolicy,
}


def get_policy(name: str) -> SpacedRepetitionPolicy:
    try:
        return POLICIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown review policy {name!r}, expected one of {sorted(POLICIES)}"
        ) from None


def update_mastery(
    prior: Optional[MasteryRecord],
    is_correct: bool,
    policy: SpacedRepetitionPolicy,
    now: Optional[datetime] = None,
) -> MasteryRecord:
    record = policy.compute_next(prior, is_correct, now or datetime.now())
    logger.debug(
        f"[{policy.name}] correct={is_correct} level "
        f"{prior.mastery_level if prior else '-'} -> {record.mastery_level}"
    )
    return record
