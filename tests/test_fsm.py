import pytest

from src.fsm import QuizAction, QuizState, QuizStateMachine


@pytest.mark.parametrize(
    "start, action, expected",
    [
        (QuizState.IDLE, QuizAction.START, QuizState.LOADING),
        (QuizState.LOADING, QuizAction.LOAD_SUCCESS, QuizState.PRESENTING),
        (QuizState.LOADING, QuizAction.LOAD_FAILED, QuizState.IDLE),
        (QuizState.PRESENTING, QuizAction.TICK, QuizState.PRESENTING),
        (QuizState.PRESENTING, QuizAction.ANSWER_SELECTED, QuizState.ANSWERED),
        (QuizState.PRESENTING, QuizAction.TIMEOUT_FIRED, QuizState.ANSWERED),
        (QuizState.ANSWERED, QuizAction.ADVANCE, QuizState.PRESENTING),
        (QuizState.ANSWERED, QuizAction.FINISH, QuizState.FINISHED),
        (QuizState.FINISHED, QuizAction.RESTART, QuizState.IDLE),
        (QuizState.PRESENTING, QuizAction.RESTART, QuizState.IDLE),
        (QuizState.ANSWERED, QuizAction.RESTART, QuizState.IDLE),
    ],
)
def test_allowed_transitions(start, action, expected):
    fsm = QuizStateMachine(initial_state=start)
    assert fsm.transition(action) is True
    assert fsm.current_state == expected


@pytest.mark.parametrize(
    "start, action",
    [
        (QuizState.IDLE, QuizAction.ANSWER_SELECTED),
        (QuizState.IDLE, QuizAction.RESTART),
        (QuizState.LOADING, QuizAction.START),
        (QuizState.PRESENTING, QuizAction.ADVANCE),
        (QuizState.ANSWERED, QuizAction.ANSWER_SELECTED),
        (QuizState.ANSWERED, QuizAction.TIMEOUT_FIRED),
        (QuizState.ANSWERED, QuizAction.TICK),
        (QuizState.FINISHED, QuizAction.START),
    ],
)
def test_refused_transitions_keep_state(start, action):
    fsm = QuizStateMachine(initial_state=start)
    assert fsm.can(action) is False
    assert fsm.transition(action) is False
    assert fsm.current_state == start


def test_refused_transition_is_logged(caplog):
    fsm = QuizStateMachine(initial_state=QuizState.ANSWERED)
    with caplog.at_level("ERROR"):
        fsm.transition(QuizAction.TIMEOUT_FIRED)
    assert "INVALID TRANSITION: ANSWERED + TIMEOUT_FIRED" in caplog.text


def test_full_run_path():
    fsm = QuizStateMachine()
    path = [
        QuizAction.START,
        QuizAction.LOAD_SUCCESS,
        QuizAction.ANSWER_SELECTED,
        QuizAction.ADVANCE,
        QuizAction.TIMEOUT_FIRED,
        QuizAction.FINISH,
        QuizAction.RESTART,
    ]
    for action in path:
        assert fsm.transition(action), action
    assert fsm.current_state == QuizState.IDLE
