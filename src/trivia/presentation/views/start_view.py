import streamlit as st

from src.config import GameConfig
from src.trivia.presentation.viewmodel import QuizViewModel


def render(vm: QuizViewModel) -> None:
    st.title(f"🧠 {GameConfig.APP_TITLE}")
    st.metric("🏆 High Score", vm.high_score)

    difficulties = vm.difficulty_options()
    difficulty = st.selectbox(
        "Difficulty",
        difficulties,
        index=_index_of(difficulties, vm.state.get("difficulty")),
        format_func=vm.difficulty_label,
        key="difficulty_select",
    )

    categories = vm.category_options()
    category_id = st.selectbox(
        "Category",
        categories,
        index=_index_of(categories, vm.state.get("category_id")),
        format_func=vm.category_label,
        key="category_select",
    )

    st.caption(f"{GameConfig.QUESTION_AMOUNT} questions • {GameConfig.TIME_LIMIT} seconds each")

    if st.button("🚀 Start Quiz", type="primary", use_container_width=True):
        with st.spinner("Loading questions..."):
            vm.start_quiz(difficulty, category_id)
        st.rerun()


def _index_of(options: list, value) -> int:
    return options.index(value) if value in options else 0
