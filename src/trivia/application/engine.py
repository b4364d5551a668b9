import random
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.config import GameConfig
from src.fsm import QuizAction, QuizState, QuizStateMachine
from src.shared.telemetry import Telemetry
from src.trivia.application.service import TriviaService
from src.trivia.domain.countdown import Countdown
from src.trivia.domain.entities import decode_entities
from src.trivia.domain.errors import StorageError
from src.trivia.domain.models import (
    AnswerFeedback,
    Category,
    Difficulty,
    Notice,
    NoticeLevel,
    Outcome,
    Question,
    QuizRun,
    RunSummary,
)
from src.trivia.domain.shuffler import shuffle

# Events that belong to a running countdown; dropped whenever it is cancelled.
COUNTDOWN_ACTIONS = frozenset({QuizAction.TICK, QuizAction.TIMEOUT_FIRED})


@dataclass(frozen=True)
class QuizEvent:
    action: QuizAction
    payload: Any = None


def build_options(question: Question, rng: random.Random | None = None) -> list[str]:
    """Decoded correct answer plus decoded distractors, in shuffled order."""
    options = [decode_entities(question.correct_answer)]
    options.extend(decode_entities(a) for a in question.incorrect_answers)
    shuffle(options, rng)
    return options


class QuizEngine:
    """
    Controller for one player's game.

    Owns the current run, the high score, the single countdown and a
    single-consumer event queue. Every public action becomes a QuizEvent;
    events raised while another one is being handled are queued and
    processed in order, never nested.
    """

    def __init__(
        self,
        service: TriviaService,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        time_limit: int = GameConfig.TIME_LIMIT,
        amount: int = GameConfig.QUESTION_AMOUNT,
    ) -> None:
        self.service = service
        self.telemetry = Telemetry("QuizEngine")
        self.fsm = QuizStateMachine()
        self.run = QuizRun(time_remaining=time_limit)
        self.summary: RunSummary | None = None
        self.categories: list[Category] = []
        self.time_limit = time_limit
        self.amount = amount
        self.countdown = Countdown(time_limit, GameConfig.TICK_INTERVAL, clock)

        self._rng = rng
        self._queue: deque[QuizEvent] = deque()
        self._draining = False
        self._notices: list[Notice] = []
        self._categories_loaded = False

        self.high_score = self._load_high_score()

    # --- Properties ---
    @property
    def current_state(self) -> QuizState:
        return self.fsm.current_state

    @property
    def current_question(self) -> Question | None:
        return self.run.current_question

    # --- Actions ---
    def load_categories(self) -> None:
        """Populates the category catalogue once per engine."""
        if self._categories_loaded:
            return
        self._categories_loaded = True

        result = self.service.load_categories()
        if result.error:
            self._notify(NoticeLevel.ERROR, result.error)
        self.categories = result.items

    def start(self, difficulty: Difficulty = Difficulty.ANY, category_id: int | None = None) -> None:
        Telemetry.start_trace()
        self.dispatch(QuizEvent(QuizAction.START, (difficulty, category_id)))

    def select_answer(self, choice: str) -> bool:
        """Returns False when the choice was refused (wrong state or unknown option)."""
        if self.current_state != QuizState.PRESENTING:
            self.telemetry.log_warning("Answer ignored", state=self.current_state.name)
            return False
        if choice not in self.run.options:
            self.telemetry.log_warning("Unknown option ignored", choice=choice)
            return False

        # The countdown stops before the selection is looked at.
        self._cancel_countdown()
        self.dispatch(QuizEvent(QuizAction.ANSWER_SELECTED, choice))
        return True

    def tick(self) -> None:
        self.dispatch(QuizEvent(QuizAction.TICK))

    def poll(self) -> int:
        """Turns countdown time elapsed since the last poll into TICK events."""
        due = self.countdown.due_ticks()
        for _ in range(due):
            self._queue.append(QuizEvent(QuizAction.TICK))
        self._drain()
        return due

    def advance(self) -> None:
        if self.current_state != QuizState.ANSWERED:
            self.telemetry.log_warning("Advance ignored", state=self.current_state.name)
            return
        action = QuizAction.ADVANCE if self.run.has_next else QuizAction.FINISH
        self.dispatch(QuizEvent(action))

    def restart(self) -> None:
        Telemetry.start_trace()
        self.dispatch(QuizEvent(QuizAction.RESTART))

    def pop_notices(self) -> list[Notice]:
        notices, self._notices = self._notices, []
        return notices

    # --- Event Queue ---
    def dispatch(self, event: QuizEvent) -> None:
        self._queue.append(event)
        self._drain()

    def _drain(self) -> None:
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue:
                self._handle(self._queue.popleft())
        finally:
            self._draining = False

    def _handle(self, event: QuizEvent) -> None:
        if not self.fsm.transition(event.action):
            return

        match event.action:
            case QuizAction.START:
                difficulty, category_id = event.payload
                self._load_questions(difficulty, category_id)
            case QuizAction.LOAD_SUCCESS:
                self._begin_run(event.payload)
            case QuizAction.LOAD_FAILED:
                self.run = QuizRun(time_remaining=self.time_limit)
                self._notify(NoticeLevel.ERROR, event.payload)
                Telemetry.count("load_failed")
            case QuizAction.TICK:
                self._on_tick()
            case QuizAction.TIMEOUT_FIRED:
                self._on_timeout()
            case QuizAction.ANSWER_SELECTED:
                self._on_answer(event.payload)
            case QuizAction.ADVANCE:
                self.run.next_question()
                self._present_current()
            case QuizAction.FINISH:
                self.run.next_question()
                self._finalize()
            case QuizAction.RESTART:
                self._cancel_countdown()
                self.run = QuizRun(time_remaining=self.time_limit)
                self.summary = None

    # --- Transitions' effects ---
    def _load_questions(self, difficulty: Difficulty, category_id: int | None) -> None:
        self.telemetry.log_info(
            "Action: Start Quiz", difficulty=difficulty.value, category_id=category_id
        )
        result = self.service.load_questions(difficulty, category_id, self.amount)
        if result.ok:
            self._queue.append(QuizEvent(QuizAction.LOAD_SUCCESS, result.items))
        else:
            message = result.error or "No questions available. Please try again later."
            self._queue.append(QuizEvent(QuizAction.LOAD_FAILED, message))

    def _begin_run(self, questions: list[Question]) -> None:
        self.run = QuizRun(questions=questions, time_remaining=self.time_limit)
        self.summary = None
        Telemetry.count("quiz_started")
        self._present_current()

    def _present_current(self) -> None:
        question = self.run.current_question
        if question is None:
            self.telemetry.log_warning("No question to present", **self.run.debug_view())
            return

        self.run.options = build_options(question, self._rng)
        self.run.feedback = None
        self.run.reset_countdown(self.time_limit)

        self._cancel_countdown()
        self.countdown.start()

    def _on_tick(self) -> None:
        if self.run.tick() == 0:
            self._cancel_countdown()
            self._queue.append(QuizEvent(QuizAction.TIMEOUT_FIRED))

    def _on_timeout(self) -> None:
        self._cancel_countdown()
        correct = decode_entities(self.run.current_question.correct_answer)
        self.run.feedback = AnswerFeedback(
            outcome=Outcome.TIMEOUT, correct_answer=correct, message="Time's up!"
        )
        Telemetry.count("timeout")
        self.telemetry.log_info("Question timed out", **self.run.debug_view())

    def _on_answer(self, choice: str) -> None:
        self._cancel_countdown()
        correct = decode_entities(self.run.current_question.correct_answer)

        if choice == correct:
            self.run.record_correct_answer()
            feedback = AnswerFeedback(
                outcome=Outcome.CORRECT, selected=choice, correct_answer=correct, message="Correct!"
            )
        else:
            feedback = AnswerFeedback(
                outcome=Outcome.WRONG,
                selected=choice,
                correct_answer=correct,
                message=f"Wrong! Correct answer: {correct}",
            )

        self.run.feedback = feedback
        Telemetry.count(f"answer_{feedback.outcome.value}")
        self.telemetry.log_info("Answer Submitted", correct=feedback.is_correct, **self.run.debug_view())

    def _finalize(self) -> None:
        score = self.run.score
        # Other sessions write to the same store.
        self.high_score = max(self.high_score, self._load_high_score())
        is_new = score > self.high_score

        if is_new:
            self.high_score = score
            self._notify(NoticeLevel.SUCCESS, "Congratulations! You set a new high score!")
            Telemetry.count("new_high_score")
            try:
                self.service.save_high_score(score)
            except StorageError as e:
                self._notify(NoticeLevel.ERROR, f"Could not save high score: {e}")

        self.summary = RunSummary(
            score=score, total=self.run.total, high_score=self.high_score, is_new_high_score=is_new
        )
        Telemetry.count("quiz_finished")
        self.telemetry.log_info("Quiz Finished", score=score, total=self.run.total, high_score=self.high_score)

    # --- Helpers ---
    def _cancel_countdown(self) -> None:
        self.countdown.cancel()
        if any(e.action in COUNTDOWN_ACTIONS for e in self._queue):
            self._queue = deque(e for e in self._queue if e.action not in COUNTDOWN_ACTIONS)

    def _load_high_score(self) -> int:
        try:
            return self.service.load_high_score()
        except StorageError as e:
            self.telemetry.log_error("High score load failed", e)
            self._notify(NoticeLevel.ERROR, f"Error loading high score: {e}")
            return 0

    def _notify(self, level: NoticeLevel, message: str) -> None:
        self._notices.append(Notice(level=level, message=message))
