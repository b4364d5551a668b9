from src.config import GameConfig
from src.shared.telemetry import Telemetry, measure_time
from src.trivia.domain.errors import FetchError, StorageError
from src.trivia.domain.models import Category, Difficulty, FetchResult, Question
from src.trivia.domain.ports import IQuestionSource, IScoreStore


class TriviaService:
    """
    Boundary between the engine and its two collaborators.
    Fetch failures never escape as exceptions: callers get an empty result
    plus a message they can show as-is.
    """

    def __init__(self, source: IQuestionSource, store: IScoreStore):
        self.source = source
        self.store = store
        self.telemetry = Telemetry("TriviaService")

    @measure_time("load_categories")
    def load_categories(self) -> FetchResult[Category]:
        try:
            categories = self.source.fetch_categories()
        except FetchError as e:
            self.telemetry.log_error("Category fetch failed", e)
            return FetchResult[Category](error=f"Error fetching categories: {e}")

        return FetchResult[Category](items=categories)

    @measure_time("load_questions")
    def load_questions(
        self,
        difficulty: Difficulty,
        category_id: int | None,
        amount: int = GameConfig.QUESTION_AMOUNT,
    ) -> FetchResult[Question]:
        try:
            questions = self.source.fetch_questions(difficulty, category_id, amount)
        except FetchError as e:
            self.telemetry.log_error(
                "Question fetch failed", e, difficulty=difficulty.value, category_id=category_id
            )
            return FetchResult[Question](error=f"Error fetching questions: {e}")

        if not questions:
            return FetchResult[Question](error="No questions available. Please try again later.")

        return FetchResult[Question](items=questions)

    def load_high_score(self) -> int:
        """Raises StorageError; the engine decides how to surface it."""
        return self.store.load()

    def save_high_score(self, value: int) -> None:
        try:
            self.store.save(value)
        except StorageError as e:
            self.telemetry.log_error("High score save failed", e, value=value)
            raise
