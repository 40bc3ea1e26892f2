import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Type

from .config import settings
from .models import Question, TestVariant, Word


# --- Strategy Pattern: Question Generators ---
class QuizGenerator(ABC):
    """Abstract Base Class for the per-variant question strategies."""

    def __init__(
        self,
        distractor_count: int = settings.DISTRACTOR_COUNT,
        rng: Optional[random.Random] = None,
    ):
        self.distractor_count = distractor_count
        self.rng = rng or random

    @abstractmethod
    def build_question(self, word: Word, words: Sequence[Word]) -> Question:
        pass

    def generate(self, words: Sequence[Word]) -> List[Question]:
        return [self.build_question(word, words) for word in words]


class ChoiceQuizGenerator(QuizGenerator):
    """Shared algorithm of the choice-style variants.

    Distractors are drawn from the other words of the session whose English
    text differs from the target's.
    """

    answer_field: str = "chinese"

    def _generate_options(self, target: Word, words: Sequence[Word]) -> List[str]:
        correct = getattr(target, self.answer_field)
        others = [w for w in words if w.english != target.english]
        picked = self.rng.sample(others, min(self.distractor_count, len(others)))

        options = [correct] + [getattr(w, self.answer_field) for w in picked]
        self.rng.shuffle(options)
        return options

    def build_question(self, word: Word, words: Sequence[Word]) -> Question:
        return Question(
            word=word,
            options=self._generate_options(word, words),
            correct_answer=getattr(word, self.answer_field),
        )


class MultipleChoiceGenerator(ChoiceQuizGenerator):
    """Shows the English word, asks for its Chinese meaning."""

    answer_field = "chinese"


class ListeningGenerator(ChoiceQuizGenerator):
    """Plays the English word, asks the learner to pick it."""

    answer_field = "english"


class FillInBlankGenerator(QuizGenerator):
    """Shows the Chinese meaning, the learner types the English word."""

    def build_question(self, word: Word, words: Sequence[Word]) -> Question:
        return Question(word=word, options=[], correct_answer=word.english.lower())


class QuizFactory:
    """Factory to select the generator for a test variant."""

    _generators: Dict[TestVariant, Type[QuizGenerator]] = {
        TestVariant.MULTIPLE_CHOICE: MultipleChoiceGenerator,
        TestVariant.FILL_IN_BLANK: FillInBlankGenerator,
        TestVariant.LISTENING: ListeningGenerator,
    }

    @classmethod
    def create(
        cls,
        variant: TestVariant,
        distractor_count: int = settings.DISTRACTOR_COUNT,
        rng: Optional[random.Random] = None,
    ) -> QuizGenerator:
        return cls._generators[TestVariant(variant)](distractor_count, rng)


def generate(
    words: Sequence[Word],
    variant: TestVariant,
    distractor_count: int = settings.DISTRACTOR_COUNT,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """One Question per word, in the order of ``words``."""
    return QuizFactory.create(variant, distractor_count, rng).generate(words)
