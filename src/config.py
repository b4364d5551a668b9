import os
from enum import Enum
from typing import Final


class DifficultyLevel(Enum):
    # Enum Member = ("API value", "Label")
    ANY = ("any", "Any Difficulty")
    EASY = ("easy", "Easy")
    MEDIUM = ("medium", "Medium")
    HARD = ("hard", "Hard")

    def __init__(self, api_value: str, label: str):
        self.api_value = api_value
        self.label = label

    @classmethod
    def get_label(cls, api_value: str) -> str:
        """Returns the display label for an API value, or the value itself."""
        for level in cls:
            if level.api_value == api_value:
                return level.label
        return api_value

    @classmethod
    def all_values(cls) -> list[str]:
        """Returns the API values in display order (for the selector)."""
        return [d.api_value for d in cls]


class GameConfig:
    # --- Upstream Service ---
    API_BASE_URL: Final[str] = "https://opentdb.com/api.php"
    CATEGORY_API_URL: Final[str] = "https://opentdb.com/api_category.php"
    QUESTION_TYPE: Final[str] = "multiple"
    REQUEST_TIMEOUT: float = float(os.getenv("TRIVIA_REQUEST_TIMEOUT", "10"))

    # --- App Identity ---
    APP_TITLE = "Trivia Countdown"
    ANY_CATEGORY_LABEL = "Any Category"

    # --- Game Rules ---
    QUESTION_AMOUNT: Final[int] = 5
    TIME_LIMIT: Final[int] = 30
    TICK_INTERVAL: float = 1.0
    OPTIONS_PER_QUESTION: Final[int] = 4

    # --- Persistence ---
    DB_PATH: str = os.getenv("TRIVIA_DB_PATH", "data/quiz.db")
    HIGH_SCORE_KEY: Final[str] = "highScore"

    # --- Difficulties ---
    DIFFICULTIES = DifficultyLevel.all_values()
