import streamlit as st

from src.config import GameConfig
from src.trivia.presentation.viewmodel import QuizViewModel
from src.trivia.presentation.views.components import (
    escape_markdown,
    option_label,
    render_scoreboard,
)


def _render_header(vm: QuizViewModel) -> None:
    render_scoreboard(vm.score, vm.high_score)
    context = vm.progress_text
    if vm.question_meta:
        context = f"{context} • {vm.question_meta}"
    st.caption(escape_markdown(context))
    st.progress(vm.progress_value)


@st.fragment(run_every=GameConfig.TICK_INTERVAL)
def render_countdown(vm: QuizViewModel) -> None:
    """The only countdown on the page; it polls the engine once per interval."""
    if vm.poll_timer():
        st.rerun()
    st.metric("⏱️ Time left", f"{vm.time_remaining}s")


def render_active(vm: QuizViewModel) -> None:
    _render_header(vm)
    render_countdown(vm)

    st.markdown(f"### {escape_markdown(vm.question_text)}")

    index = vm.engine.run.current_index
    for i, text in enumerate(vm.options):
        if st.button(escape_markdown(text), key=f"opt_{index}_{i}", use_container_width=True):
            vm.submit_answer(i)
            st.rerun()


def render_feedback(vm: QuizViewModel) -> None:
    _render_header(vm)
    st.metric("⏱️ Time left", f"{vm.time_remaining}s")

    st.markdown(f"### {escape_markdown(vm.question_text)}")

    index = vm.engine.run.current_index
    for i, (text, state) in enumerate(zip(vm.options, vm.option_states())):
        st.button(
            option_label(escape_markdown(text), state),
            key=f"res_{index}_{i}",
            disabled=True,
            use_container_width=True,
        )

    fb = vm.feedback
    if fb is not None:
        correct = escape_markdown(fb.correct_answer)
        if fb.is_correct:
            st.success(fb.message)
        elif fb.selected is None:
            st.warning(f"{fb.message} Correct answer: {correct}")
        else:
            st.error(f"Wrong! Correct answer: {correct}")

    if st.button("Next ➡️", type="primary", use_container_width=True):
        vm.next_step()
        st.rerun()
