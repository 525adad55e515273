import logging
import math
import random
import re
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .errors import ExerciseError, InsufficientDataError
from .models import Question, QuestionType, TranslationDirection, VocabularyEntry
from .text import levenshtein_distance, normalize_answer, normalize_for_similarity

logger = logging.getLogger(__name__)

MIN_CHOICE_POOL = 4
NUM_DISTRACTORS = 3
BLANK = "______"


# --- Strategy Pattern: Exercise Generators ---
class ExerciseGenerator(ABC):
    """Abstract Base Class for the different exercise generation strategies."""

    prefix: str = "ex"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @abstractmethod
    def generate(
        self, vocabulary: Sequence[VocabularyEntry], count: int
    ) -> List[Question]:
        pass

    def _shuffled(self, items: Sequence) -> list:
        shuffled = list(items)
        self.rng.shuffle(shuffled)
        return shuffled

    def _question_id(self, entry: VocabularyEntry, index: int) -> str:
        return f"{self.prefix}_{entry.id}_{int(time.time() * 1000)}_{index}"

    def _require_choice_pool(self, vocabulary: Sequence[VocabularyEntry]):
        if len(vocabulary) < MIN_CHOICE_POOL:
            raise InsufficientDataError(
                f"Need at least {MIN_CHOICE_POOL} vocabulary words, got {len(vocabulary)}"
            )

    def _generate_options(
        self, correct: str, candidates: Sequence[str]
    ) -> Optional[List[str]]:
        """Helper to draw distractors and mix in the correct answer.

        Candidates are compared the way answers are graded, so no distractor
        can be accepted as correct. Returns None when fewer than three such
        distractors exist.
        """
        distractors = []
        seen = {normalize_answer(correct)}
        for candidate in candidates:
            key = normalize_answer(candidate)
            if key not in seen:
                seen.add(key)
                distractors.append(candidate)

        if len(distractors) < NUM_DISTRACTORS:
            logger.warning(
                f"Only {len(distractors)} distinct distractors available for {correct!r}, skipping"
            )
            return None

        options = [correct] + self.rng.sample(distractors, NUM_DISTRACTORS)
        self.rng.shuffle(options)
        return options

    def _require_questions(self, questions: List[Question], count: int) -> List[Question]:
        if count > 0 and not questions:
            raise InsufficientDataError(
                f"{type(self).__name__} could not build any question from the pool"
            )
        return questions


class MultipleChoiceGenerator(ExerciseGenerator):
    """Pick the target-language word for a source-language prompt."""

    prefix = "mc"

    def generate(
        self, vocabulary: Sequence[VocabularyEntry], count: int
    ) -> List[Question]:
        self._require_choice_pool(vocabulary)
        selected = self._shuffled(vocabulary)[: min(count, len(vocabulary))]

        questions = []
        for i, entry in enumerate(selected):
            others = [v.target_word for v in vocabulary if v.id != entry.id]
            options = self._generate_options(entry.target_word, others)
            if options is None:
                continue
            questions.append(
                Question(
                    id=self._question_id(entry, i),
                    type=QuestionType.MULTIPLE_CHOICE,
                    vocabulary=entry,
                    prompt=f'What is the translation of "{entry.source_word}"?',
                    correct_answer=entry.target_word,
                    options=options,
                    hint=(
                        f'Hint: "{entry.example_source}"'
                        if entry.example_source
                        else None
                    ),
                    explanation=(
                        f'Example: "{entry.example_target}"'
                        if entry.example_target
                        else None
                    ),
                )
            )
        return self._require_questions(questions, count)


class FillInBlankGenerator(ExerciseGenerator):
    """Blank the source word out of its example sentence.

    When the word does not occur as a whole word in the sentence (inflected
    forms, for instance) the sentence is kept as is, unless
    ``skip_unblankable`` is set, in which case the entry is dropped.
    """

    prefix = "fib"

    def __init__(
        self, rng: Optional[random.Random] = None, skip_unblankable: bool = False
    ):
        super().__init__(rng)
        self.skip_unblankable = skip_unblankable

    @staticmethod
    def blank_out(sentence: str, word: str) -> str:
        pattern = re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)
        return pattern.sub(BLANK, sentence)

    def generate(
        self, vocabulary: Sequence[VocabularyEntry], count: int
    ) -> List[Question]:
        with_examples = [v for v in vocabulary if v.has_examples]
        if not with_examples:
            raise InsufficientDataError(
                "No vocabulary with example sentences found for fill-in-the-blank"
            )

        selected = self._shuffled(with_examples)[: min(count, len(with_examples))]

        questions = []
        for i, entry in enumerate(selected):
            sentence = self.blank_out(entry.example_source, entry.source_word)
            if BLANK not in sentence:
                if self.skip_unblankable:
                    logger.info(f"Skipping {entry.id}: word not found in example")
                    continue
                logger.warning(
                    f"'{entry.source_word}' not found as a whole word in example for {entry.id}"
                )

            questions.append(
                Question(
                    id=self._question_id(entry, i),
                    type=QuestionType.FILL_IN_BLANK,
                    vocabulary=entry,
                    prompt=f'Fill in the blank: "{sentence}"',
                    correct_answer=entry.source_word,
                    hint=f'Translation: "{entry.target_word}"',
                    explanation=f'Full sentence: "{entry.example_target}"',
                )
            )
        return self._require_questions(questions, count)


class TranslationGenerator(ExerciseGenerator):
    """Choice translation in either direction between the two languages."""

    prefix = "trans"

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        direction: TranslationDirection = TranslationDirection.FROM_SOURCE,
    ):
        super().__init__(rng)
        self.direction = TranslationDirection(direction)

    def generate(
        self, vocabulary: Sequence[VocabularyEntry], count: int
    ) -> List[Question]:
        self._require_choice_pool(vocabulary)
        to_source = self.direction == TranslationDirection.TO_SOURCE
        question_type = (
            QuestionType.TRANSLATE_TO_SOURCE
            if to_source
            else QuestionType.TRANSLATE_FROM_SOURCE
        )

        def answer_side(v: VocabularyEntry) -> str:
            return v.source_word if to_source else v.target_word

        selected = self._shuffled(vocabulary)[: min(count, len(vocabulary))]

        questions = []
        for i, entry in enumerate(selected):
            shown = entry.target_word if to_source else entry.source_word
            correct = answer_side(entry)
            others = [answer_side(v) for v in vocabulary if v.id != entry.id]
            options = self._generate_options(correct, others)
            if options is None:
                continue
            questions.append(
                Question(
                    id=self._question_id(entry, i),
                    type=question_type,
                    vocabulary=entry,
                    prompt=f'Translate: "{shown}"',
                    correct_answer=correct,
                    options=options,
                    hint=(
                        f'Example: "{entry.example_source}"'
                        if entry.example_source
                        else None
                    ),
                    explanation=(
                        f'In context: "{entry.example_target}"'
                        if entry.example_target
                        else None
                    ),
                )
            )
        return self._require_questions(questions, count)


class MixedExerciseGenerator(ExerciseGenerator):
    """Splits the count across the other generators and shuffles the result.

    A generator that cannot run on the pool is logged and skipped, so the
    batch can come back shorter than requested.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__(rng)
        self.generators: List[ExerciseGenerator] = [
            MultipleChoiceGenerator(self.rng),
            FillInBlankGenerator(self.rng),
            TranslationGenerator(self.rng),
        ]

    def generate(
        self, vocabulary: Sequence[VocabularyEntry], count: int
    ) -> List[Question]:
        self._require_choice_pool(vocabulary)
        per_type = math.ceil(count / len(self.generators))

        questions: List[Question] = []
        for generator in self.generators:
            try:
                questions.extend(generator.generate(vocabulary, per_type))
            except ExerciseError as e:
                logger.warning(f"{type(generator).__name__} skipped: {e}")

        return self._shuffled(questions)[:count]


class ExerciseFactory:
    """Factory to select the appropriate generator."""

    MODES = (
        "mixed",
        "multiple_choice",
        "fill_in_blank",
        "translate_to_source",
        "translate_from_source",
    )

    @staticmethod
    def create(mode: str, rng: Optional[random.Random] = None) -> ExerciseGenerator:
        if mode == "multiple_choice":
            return MultipleChoiceGenerator(rng)
        if mode == "fill_in_blank":
            return FillInBlankGenerator(rng)
        if mode == "translate_to_source":
            return TranslationGenerator(rng, TranslationDirection.TO_SOURCE)
        if mode == "translate_from_source":
            return TranslationGenerator(rng, TranslationDirection.FROM_SOURCE)
        if mode not in ExerciseFactory.MODES:
            logger.warning(f"Unknown exercise mode {mode!r}, using mixed")
        return MixedExerciseGenerator(rng)


# --- Functional API ---


def generate_multiple_choice(
    vocabulary: Sequence[VocabularyEntry],
    count: int = 5,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    return MultipleChoiceGenerator(rng).generate(vocabulary, count)


def generate_fill_in_blank(
    vocabulary: Sequence[VocabularyEntry],
    count: int = 5,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    return FillInBlankGenerator(rng).generate(vocabulary, count)


def generate_translation(
    vocabulary: Sequence[VocabularyEntry],
    count: int = 5,
    direction: TranslationDirection = TranslationDirection.FROM_SOURCE,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    return TranslationGenerator(rng, direction).generate(vocabulary, count)


def generate_mixed_exercises(
    vocabulary: Sequence[VocabularyEntry],
    total_count: int = 10,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    return MixedExerciseGenerator(rng).generate(vocabulary, total_count)


def validate_answer(user_answer: str, correct_answer: str) -> bool:
    """Exact match after case, surrounding whitespace and punctuation are ignored."""
    return normalize_answer(user_answer) == normalize_answer(correct_answer)


def calculate_similarity(user_answer: str, correct_answer: str) -> float:
    """Edit-distance similarity in [0, 1]; 1.0 means identical."""
    user = normalize_for_similarity(user_answer)
    correct = normalize_for_similarity(correct_answer)

    if user == correct:
        return 1.0

    max_length = max(len(user), len(correct))
    distance = levenshtein_distance(user, correct)
    return max(0.0, (max_length - distance) / max_length)
