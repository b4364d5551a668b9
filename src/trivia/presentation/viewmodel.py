from typing import Optional

from src.config import DifficultyLevel, GameConfig
from src.fsm import QuizState
from src.shared.telemetry import Telemetry
from src.trivia.application.engine import QuizEngine
from src.trivia.application.service import TriviaService
from src.trivia.domain.entities import decode_entities
from src.trivia.domain.models import AnswerFeedback, Difficulty, Notice, RunSummary
from src.trivia.presentation.state_provider import IStateProvider

ENGINE_KEY = "quiz_engine"


class QuizViewModel:
    """
    Read-only view data plus user actions for the Streamlit views.
    The engine lives in the state provider so it survives reruns.
    """

    def __init__(self, service: TriviaService, state_provider: IStateProvider):
        self.service = service
        self.state = state_provider
        self.telemetry = Telemetry("ViewModel")

        engine = self.state.get(ENGINE_KEY)
        if engine is None:
            engine = QuizEngine(service)
            self.state.set(ENGINE_KEY, engine)
        self.engine: QuizEngine = engine

    # --- Properties ---
    @property
    def current_state(self) -> QuizState:
        return self.engine.current_state

    @property
    def high_score(self) -> int:
        return self.engine.high_score

    @property
    def score(self) -> int:
        return self.engine.run.score

    @property
    def time_remaining(self) -> int:
        return self.engine.run.time_remaining

    @property
    def options(self) -> list[str]:
        return list(self.engine.run.options)

    @property
    def feedback(self) -> Optional[AnswerFeedback]:
        return self.engine.run.feedback

    @property
    def summary(self) -> Optional[RunSummary]:
        return self.engine.summary

    @property
    def question_text(self) -> str:
        q = self.engine.current_question
        return decode_entities(q.text) if q else ""

    @property
    def progress_text(self) -> str:
        run = self.engine.run
        return f"Question {run.current_index + 1} of {run.total}"

    @property
    def progress_value(self) -> float:
        run = self.engine.run
        if not run.total:
            return 0.0
        return run.current_index / run.total

    @property
    def question_meta(self) -> str:
        q = self.engine.current_question
        if not q:
            return ""
        parts = []
        if q.category:
            parts.append(decode_entities(q.category))
        if q.difficulty:
            parts.append(DifficultyLevel.get_label(q.difficulty))
        return " • ".join(parts)

    # --- Start surface ---
    def difficulty_options(self) -> list[str]:
        return GameConfig.DIFFICULTIES

    @staticmethod
    def difficulty_label(value: str) -> str:
        return DifficultyLevel.get_label(value)

    def category_options(self) -> list[Optional[int]]:
        """None stands for 'any category'."""
        return [None] + [c.id for c in self.engine.categories]

    def category_label(self, category_id: Optional[int]) -> str:
        if category_id is None:
            return GameConfig.ANY_CATEGORY_LABEL
        for c in self.engine.categories:
            if c.id == category_id:
                return c.name
        return str(category_id)

    def option_states(self) -> list[str]:
        """
        Per-option render state: 'neutral' while presenting; after an answer
        'correct' for the right option, 'wrong' for a wrong pick.
        """
        fb = self.feedback
        states = []
        for option in self.options:
            if fb is None:
                states.append("neutral")
            elif option == fb.correct_answer:
                states.append("correct" if fb.is_correct else "missed")
            elif option == fb.selected:
                states.append("wrong")
            else:
                states.append("neutral")
        return states

    @property
    def answers_enabled(self) -> bool:
        return self.current_state == QuizState.PRESENTING

    # --- Actions ---
    def ensure_categories(self) -> None:
        self.engine.load_categories()

    def start_quiz(self, difficulty: str, category_id: Optional[int]) -> None:
        self.state.set("difficulty", difficulty)
        self.state.set("category_id", category_id)
        self.engine.start(Difficulty(difficulty), category_id)

    def submit_answer(self, option_index: int) -> bool:
        options = self.engine.run.options
        if not 0 <= option_index < len(options):
            self.telemetry.log_warning("Option index out of range", index=option_index)
            return False
        return self.engine.select_answer(options[option_index])

    def poll_timer(self) -> bool:
        """Returns True when the poll moved the quiz out of the question view."""
        before = self.current_state
        self.engine.poll()
        return self.current_state != before

    def next_step(self) -> None:
        Telemetry.start_trace()
        self.engine.advance()

    def restart(self) -> None:
        self.engine.restart()

    def pop_notices(self) -> list[Notice]:
        return self.engine.pop_notices()
