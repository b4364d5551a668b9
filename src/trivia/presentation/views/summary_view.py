import streamlit as st

from src.trivia.presentation.viewmodel import QuizViewModel


def render(vm: QuizViewModel) -> None:
    summary = vm.summary
    if summary is None:
        st.warning("No finished run to show.")
        if st.button("🔄 Restart"):
            vm.restart()
            st.rerun()
        return

    if summary.is_new_high_score:
        st.balloons()

    st.title("🏁 Results")
    st.subheader(summary.message)

    col1, col2, col3 = st.columns(3)
    col1.metric("Score", f"{summary.score} / {summary.total}")

    percent = (summary.score / summary.total * 100) if summary.total > 0 else 0
    col2.metric("Accuracy", f"{int(percent)}%")
    col3.metric("High Score", summary.high_score)

    st.markdown("---")

    if st.button("🔄 Restart", type="primary", use_container_width=True):
        vm.restart()
        st.rerun()
