import math
from datetime import datetime
from typing import Dict, List, Optional

from .errors import AnswerAlreadyRecordedError, EmptyOptionsError, UnknownQuestionError
from .exercises import validate_answer
from .models import Answer, Question, SessionSummary

BASE_POINTS = 10
MAX_BONUS_POINTS = 20


def check_question_options(question: Question) -> Question:
    """Raises EmptyOptionsError for a choice question with nothing to choose from."""
    if question.is_choice and not question.options:
        raise EmptyOptionsError(f"Question {question.id} has no answer options")
    return question


class ExerciseSession:
    """One run through a list of generated questions."""

    def __init__(
        self,
        questions: List[Question],
        topic: str = "",
        mode: str = "mixed",
        started_at: Optional[datetime] = None,
    ):
        self.questions = questions
        self.topic = topic
        self.mode = mode
        self.started_at = started_at or datetime.now()
        self.ended_at: Optional[datetime] = None
        self.answers: List[Answer] = []
        self._by_id: Dict[str, Question] = {q.id: q for q in questions}

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)

    @property
    def is_complete(self) -> bool:
        return len(self.answers) >= self.total_questions

    def get_question(self, question_id: str) -> Question:
        try:
            return self._by_id[question_id]
        except KeyError:
            raise UnknownQuestionError(question_id) from None

    def submit_answer(
        self, question_id: str, user_answer: str, time_spent: float = 0.0
    ) -> Answer:
        question = self.get_question(question_id)
        if any(a.question_id == question_id for a in self.answers):
            raise AnswerAlreadyRecordedError(question_id)

        answer = Answer(
            question_id=question_id,
            user_answer=user_answer,
            correct_answer=question.correct_answer,
            is_correct=validate_answer(user_answer, question.correct_answer),
            time_spent=time_spent,
        )
        self.answers.append(answer)
        if self.is_complete and self.ended_at is None:
            self.ended_at = datetime.now()
        return answer

    def summary(self) -> SessionSummary:
        answered = len(self.answers)
        correct = self.correct_count
        accuracy = correct / answered if answered else 0.0

        end = self.ended_at or datetime.now()
        minutes = math.ceil((end - self.started_at).total_seconds() / 60)

        return SessionSummary(
            questions_answered=answered,
            correct_answers=correct,
            accuracy=round(accuracy * 100),
            points_earned=BASE_POINTS + math.floor(accuracy * MAX_BONUS_POINTS),
            duration_minutes=max(1, minutes),
            words_reviewed=[
                self._by_id[a.question_id].vocabulary.source_word for a in self.answers
            ],
        )
