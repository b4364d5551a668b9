import re

import streamlit as st

from src.trivia.domain.models import Notice, NoticeLevel

_MARKDOWN_SPECIALS = re.compile(r"([\\`*_{}\[\]()#+\-.!|<>~$])")

OPTION_ICONS = {
    "neutral": "",
    "correct": "✅ ",
    "missed": "✅ ",
    "wrong": "❌ ",
}


def apply_styles() -> None:
    st.markdown("""
        <style>
            .block-container { padding-top: 2rem !important; }
            .stat-box { padding: 10px; background-color: #f0f2f6; border-radius: 5px; text-align: center; font-weight: bold; }
        </style>
    """, unsafe_allow_html=True)


def escape_markdown(text: str) -> str:
    """Decoded trivia text is shown literally, never interpreted as markup."""
    return _MARKDOWN_SPECIALS.sub(r"\\\1", text)


def render_notices(notices: list[Notice]) -> None:
    for notice in notices:
        if notice.level == NoticeLevel.ERROR:
            st.error(notice.message, icon="🚨")
        elif notice.level == NoticeLevel.SUCCESS:
            st.success(notice.message, icon="🏆")
        else:
            st.info(notice.message, icon="ℹ️")


def render_scoreboard(score: int, high_score: int) -> None:
    col1, col2 = st.columns(2)
    col1.markdown(f'<div class="stat-box">⭐ Score: {score}</div>', unsafe_allow_html=True)
    col2.markdown(f'<div class="stat-box">🏆 High Score: {high_score}</div>', unsafe_allow_html=True)


def option_label(text: str, state: str) -> str:
    return f"{OPTION_ICONS.get(state, '')}{text}"
