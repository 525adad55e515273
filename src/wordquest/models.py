from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    FILL_IN_BLANK = "fill_in_blank"
    TRANSLATE_TO_SOURCE = "translate_to_source"
    TRANSLATE_FROM_SOURCE = "translate_from_source"


class TranslationDirection(str, Enum):
    TO_SOURCE = "to_source"
    FROM_SOURCE = "from_source"


CHOICE_QUESTION_TYPES = frozenset(
    {
        QuestionType.MULTIPLE_CHOICE,
        QuestionType.TRANSLATE_TO_SOURCE,
        QuestionType.TRANSLATE_FROM_SOURCE,
    }
)


class VocabularyEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    source_word: str
    target_word: str
    pronunciation: Optional[str] = None
    word_type: Optional[str] = None
    example_source: Optional[str] = None
    example_target: Optional[str] = None
    audio_url: Optional[str] = None

    @property
    def has_examples(self) -> bool:
        return bool(self.example_source and self.example_target)


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: QuestionType
    vocabulary: VocabularyEntry
    prompt: str
    correct_answer: str
    options: Optional[List[str]] = None
    hint: Optional[str] = None
    explanation: Optional[str] = None

    @property
    def is_choice(self) -> bool:
        return self.type in CHOICE_QUESTION_TYPES


class PublicQuestion(BaseModel):
    """A question as sent to a client, without its answer."""

    id: str
    type: QuestionType
    prompt: str
    options: Optional[List[str]] = None
    hint: Optional[str] = None
    pronunciation: Optional[str] = None
    audio_url: Optional[str] = None

    @classmethod
    def from_question(cls, question: Question) -> "PublicQuestion":
        return cls(
            id=question.id,
            type=question.type,
            prompt=question.prompt,
            options=question.options,
            hint=question.hint,
            pronunciation=question.vocabulary.pronunciation,
            audio_url=question.vocabulary.audio_url,
        )


class Answer(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    user_answer: str
    correct_answer: str
    is_correct: bool
    time_spent: float = 0.0
    attempts: int = 1


class MasteryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_attempts: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    mastery_level: int = Field(ge=0, le=5)
    last_reviewed_at: datetime
    next_review_at: datetime


class SessionSummary(BaseModel):
    questions_answered: int
    correct_answers: int
    accuracy: int
    points_earned: int
    duration_minutes: int
    words_reviewed: List[str]


class ReviewPriority(str, Enum):
    OVERDUE = "overdue"
    DUE = "due"
    UPCOMING = "upcoming"


class ReviewQueueItem(BaseModel):
    vocabulary_id: str
    vocabulary: Optional[VocabularyEntry] = None
    record: MasteryRecord
    priority: ReviewPriority
    days_overdue: Optional[int] = None
