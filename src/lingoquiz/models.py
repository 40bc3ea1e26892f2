import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WordCategory(str, Enum):
    CET4 = "CET-4"
    CET6 = "CET-6"


class CategoryFilter(str, Enum):
    ALL = "all"
    CET4 = "CET-4"
    CET6 = "CET-6"


class TestVariant(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    FILL_IN_BLANK = "fill_in_blank"
    LISTENING = "listening"


class SessionPhase(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    ANSWERED = "answered"
    COMPLETED = "completed"
    NO_QUESTIONS = "no_questions"


# --- Vocabulary ---
class Word(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    english: str
    chinese: str
    phonetic: str = ""
    part_of_speech: str = ""
    category: WordCategory = WordCategory.CET4
    difficulty: int = 1
    example_sentence: str = ""
    example_translation: str = ""


# --- Questions & answers ---
class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    word: Word
    options: List[str] = Field(default_factory=list)
    correct_answer: str


class WrongAnswerRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    word: Word
    user_answer: str
    correct_answer: str


class AnswerResolution(BaseModel):
    """Outcome of the most recently resolved question."""

    index: int
    correct: bool
    user_answer: str
    correct_answer: str
    timed_out: bool = False


class QuestionView(BaseModel):
    """Read-only projection of the question currently on screen."""

    word: Word
    options: List[str]
    index: int
    total: int


# --- Session ---
class SessionState(BaseModel):
    questions: List[Question] = Field(default_factory=list)
    variant: TestVariant = TestVariant.MULTIPLE_CHOICE
    phase: SessionPhase = SessionPhase.IDLE
    current_index: int = 0
    correct_count: int = 0
    wrong_answers: List[WrongAnswerRecord] = Field(default_factory=list)
    time_remaining: float = 0.0
    time_limit_per_question: float = 0.0
    session_started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    completed: bool = False
    last_resolution: Optional[AnswerResolution] = None

    @property
    def total_questions(self) -> int:
        return len(self.questions)


class SessionSummary(BaseModel):
    total_questions: int
    correct_count: int
    wrong_answers: List[WrongAnswerRecord]
    duration_seconds: float
    accuracy: float


class SessionRecord(BaseModel):
    """What gets handed to the session store once a session completes."""

    variant: TestVariant
    total_questions: int
    correct_count: int
    wrong_count: int
    wrong_answers: List[WrongAnswerRecord] = Field(default_factory=list)
    duration_seconds: float
    accuracy: float
    completed_at: datetime = Field(default_factory=datetime.now)
    id: Optional[int] = None
