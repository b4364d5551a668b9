import pytest
import streamlit as st

from src.trivia.adapters.db_manager import DatabaseManager
from src.trivia.adapters.sqlite_score_store import SQLiteScoreStore
from src.trivia.domain.models import Question
from tests.drivers.quiz_driver import make_question


class MockSessionState(dict):
    """
    Mock for st.session_state that behaves like both a dict and an object.
    """

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        try:
            del self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err


@pytest.fixture(autouse=True)
def mock_streamlit_session():
    """Every test gets a fresh, dict-backed st.session_state."""
    original_session_state = getattr(st, "session_state", None)
    st.session_state = MockSessionState()

    yield st.session_state

    st.session_state.clear()
    if original_session_state is not None:
        st.session_state = original_session_state


@pytest.fixture
def sample_question():
    return Question.model_validate(
        {
            "question": "Who wrote &quot;Romeo &amp; Juliet&quot;?",
            "correct_answer": "William Shakespeare",
            "incorrect_answers": ["Charles Dickens", "Jane Austen", "Mark Twain"],
            "category": "Entertainment: Books",
            "difficulty": "easy",
        }
    )


@pytest.fixture
def five_questions():
    return [make_question(n) for n in range(1, 6)]


@pytest.fixture
def in_memory_db():
    db_manager = DatabaseManager(db_path=":memory:")
    yield db_manager
    db_manager.close()


@pytest.fixture
def in_memory_store(in_memory_db):
    """A clean, empty high score slot."""
    return SQLiteScoreStore(in_memory_db)
