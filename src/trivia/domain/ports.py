from abc import ABC, abstractmethod

from src.trivia.domain.models import Category, Difficulty, Question


class IQuestionSource(ABC):
    @abstractmethod
    def fetch_categories(self) -> list[Category]:
        """Raises NetworkError or ParseError."""
        pass

    @abstractmethod
    def fetch_questions(
        self, difficulty: Difficulty, category_id: int | None, amount: int = 5
    ) -> list[Question]:
        """Raises a FetchError subclass; never returns a partial batch."""
        pass


class IScoreStore(ABC):
    @abstractmethod
    def load(self) -> int:
        """Returns the persisted high score, 0 when absent. Raises StorageError."""
        pass

    @abstractmethod
    def save(self, value: int) -> None:
        """Raises StorageError."""
        pass
