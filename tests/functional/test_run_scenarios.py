# ==============================================================================
# FUNCTIONAL TESTS: whole runs through the real service and a real SQLite slot.
# Only the network is mocked (IQuestionSource).
# ==============================================================================
import random
from unittest.mock import Mock

import pytest

from src.fsm import QuizState
from src.trivia.application.engine import QuizEngine
from src.trivia.application.service import TriviaService
from src.trivia.domain.errors import SemanticFetchError
from src.trivia.domain.models import Difficulty, Outcome
from src.trivia.domain.ports import IQuestionSource
from tests.drivers.quiz_driver import FakeClock, QuizDriver, make_question


@pytest.fixture
def source(five_questions):
    source = Mock(spec=IQuestionSource)
    source.fetch_questions.return_value = five_questions
    source.fetch_categories.return_value = []
    return source


@pytest.fixture
def service(source, in_memory_store):
    return TriviaService(source, in_memory_store)


def new_driver(service, seed=0):
    clock = FakeClock()
    engine = QuizEngine(service, rng=random.Random(seed), clock=clock)
    return QuizDriver(engine, clock)


def test_three_right_one_wrong_one_timeout(service, in_memory_store):
    """Scenario: 5 questions, 3 correct, 1 wrong, 1 timed out."""
    driver = new_driver(service)

    driver.start(Difficulty.MEDIUM, 9).assert_state(QuizState.PRESENTING)
    driver.answer_correctly().assert_outcome(Outcome.CORRECT).next()
    driver.answer_wrong().assert_outcome(Outcome.WRONG).next()
    driver.let_time_run_out().assert_outcome(Outcome.TIMEOUT).next()
    driver.answer_correctly().next()
    driver.answer_correctly().next()

    driver.assert_state(QuizState.FINISHED).assert_score(3)
    assert driver.engine.summary.message == "You scored 3 out of 5!"
    assert driver.engine.high_score == 3
    assert in_memory_store.load() == 3


def test_timeout_scenario(service):
    """Limit reaches 0 with no answer: timeout, correct answer revealed, score unchanged."""
    driver = new_driver(service)
    driver.start()

    driver.let_time_run_out()

    driver.assert_state(QuizState.ANSWERED).assert_outcome(Outcome.TIMEOUT).assert_score(0)
    assert driver.engine.run.feedback.correct_answer == "Right 1"
    assert driver.engine.run.feedback.selected is None


def test_response_code_one_returns_to_idle(service, source):
    """Scenario: fetch reports response_code 1."""
    source.fetch_questions.side_effect = SemanticFetchError(
        "No questions match the selected difficulty and category.", response_code=1
    )
    driver = new_driver(service)

    driver.start(Difficulty.HARD, 25).assert_state(QuizState.IDLE)

    assert driver.engine.run.questions == []
    notices = driver.engine.pop_notices()
    assert notices and "No questions match" in notices[0].message


def test_high_score_is_monotonic_across_runs(service, in_memory_store):
    patterns = ["ccwww", "ccccw", "cwwww", "ccccw", "wwwww"]
    expected = [2, 4, 4, 4, 4]

    driver = new_driver(service)
    seen = []
    for pattern, high in zip(patterns, expected):
        driver.start()
        for step in pattern:
            if step == "c":
                driver.answer_correctly()
            else:
                driver.answer_wrong()
            driver.next()
        seen.append(driver.engine.high_score)
        driver.engine.restart()

    assert seen == expected
    assert in_memory_store.load() == 4


def test_high_score_survives_a_new_session(service, in_memory_store):
    first = new_driver(service)
    first.start()
    for _ in range(5):
        first.answer_correctly().next()

    second = new_driver(service)
    assert second.engine.high_score == 5


def test_restart_without_new_start_keeps_high_score(service):
    driver = new_driver(service)
    driver.start()
    for _ in range(5):
        driver.answer_wrong().next()
    high_at_finish = driver.engine.high_score

    driver.engine.restart()
    driver.engine.restart()  # refused from IDLE

    assert driver.engine.high_score == high_at_finish
    driver.assert_state(QuizState.IDLE)


@pytest.mark.parametrize("seed", range(10))
def test_score_equals_number_of_correct_selections(source, service, seed):
    rng = random.Random(seed)
    source.fetch_questions.return_value = [make_question(n) for n in range(1, 8)]
    driver = new_driver(service, seed)
    driver.start()

    correct = 0
    while driver.state != QuizState.FINISHED:
        options = driver.engine.run.options
        assert options.count(f"Right {driver.engine.run.current_index + 1}") == 1

        roll = rng.random()
        if roll < 0.5:
            driver.answer_correctly()
            correct += 1
        elif roll < 0.8:
            driver.answer_wrong()
        else:
            driver.let_time_run_out()
        assert driver.engine.run.score <= driver.engine.run.current_index + 1
        driver.next()

    assert driver.engine.run.score == correct
    assert driver.engine.summary.score <= driver.engine.summary.total


def test_older_session_cannot_lower_record_of_newer_one(service, in_memory_store):
    """Two browser sessions share one store; the record only ever goes up."""
    older = new_driver(service)
    newer = new_driver(service, seed=1)
    assert older.engine.high_score == 0

    newer.start()
    for _ in range(5):
        newer.answer_correctly().next()
    assert in_memory_store.load() == 5

    older.start()
    for step in "cccww":
        if step == "c":
            older.answer_correctly()
        else:
            older.answer_wrong()
        older.next()

    older.assert_state(QuizState.FINISHED).assert_score(3)
    assert older.engine.summary.is_new_high_score is False
    assert older.engine.high_score == 5
    assert in_memory_store.load() == 5
