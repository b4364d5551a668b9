from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from src.config import GameConfig

T = TypeVar("T")


# --- Enums ---
class Difficulty(str, Enum):
    ANY = "any"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Outcome(str, Enum):
    CORRECT = "correct"
    WRONG = "wrong"
    TIMEOUT = "timeout"


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


# --- Entities (immutable once fetched) ---
class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class Question(BaseModel):
    """A multiple-choice question exactly as delivered (entity-encoded)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(alias="question")
    correct_answer: str
    incorrect_answers: list[str]
    category: str | None = None
    difficulty: str | None = None


# --- Value Objects ---
class AnswerFeedback(BaseModel):
    outcome: Outcome
    selected: str | None = None
    correct_answer: str
    message: str

    @property
    def is_correct(self) -> bool:
        return self.outcome == Outcome.CORRECT


class Notice(BaseModel):
    level: NoticeLevel
    message: str


class RunSummary(BaseModel):
    score: int
    total: int
    high_score: int
    is_new_high_score: bool = False

    @property
    def message(self) -> str:
        return f"You scored {self.score} out of {self.total}!"


class FetchResult(BaseModel, Generic[T]):
    """Boundary result: either items, or nothing plus a readable reason."""

    items: list[T] = []
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.items)


# --- Run State ---
class QuizRun(BaseModel):
    """
    Encapsulates the state of one run through a fixed question list.
    Mutated only by the QuizEngine.
    """

    questions: list[Question] = []
    current_index: int = 0
    score: int = 0
    time_remaining: int = GameConfig.TIME_LIMIT
    options: list[str] = []
    feedback: AnswerFeedback | None = None

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def is_complete(self) -> bool:
        return self.current_index == len(self.questions)

    @property
    def current_question(self) -> Question | None:
        if 0 <= self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    @property
    def has_next(self) -> bool:
        return self.current_index + 1 < len(self.questions)

    def record_correct_answer(self) -> None:
        self.score += 1

    def next_question(self) -> None:
        self.current_index += 1

    def reset_countdown(self, limit: int) -> None:
        self.time_remaining = limit

    def tick(self) -> int:
        self.time_remaining = max(0, self.time_remaining - 1)
        return self.time_remaining

    def debug_view(self) -> dict[str, Any]:
        return {
            "index": self.current_index,
            "total": self.total,
            "score": self.score,
            "time_remaining": self.time_remaining,
        }
