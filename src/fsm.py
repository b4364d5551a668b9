from enum import Enum, auto
import logging

logger = logging.getLogger(__name__)


class QuizState(Enum):
    IDLE = auto()  # No run in progress, start surface visible
    LOADING = auto()  # Fetching questions
    PRESENTING = auto()  # Question shown, countdown running
    ANSWERED = auto()  # Answer registered or timed out, waiting for Next
    FINISHED = auto()  # Run complete, summary visible


class QuizAction(Enum):
    START = auto()
    LOAD_SUCCESS = auto()
    LOAD_FAILED = auto()
    TICK = auto()
    ANSWER_SELECTED = auto()
    TIMEOUT_FIRED = auto()
    ADVANCE = auto()
    FINISH = auto()
    RESTART = auto()


class QuizStateMachine:
    """
    Pure FSM Logic.
    Only knows which transitions are legal, not what they do to the run.
    """

    def __init__(self, initial_state=QuizState.IDLE):
        self._state = initial_state

    @property
    def current_state(self) -> QuizState:
        return self._state

    def can(self, action: QuizAction) -> bool:
        return self._next_state(action) is not None

    def transition(self, action: QuizAction) -> bool:
        """
        Applies the action. Returns False (and keeps the state) when the
        action is not allowed from the current state.
        """
        previous = self._state
        target = self._next_state(action)

        if target is None:
            logger.error(f"⛔ INVALID TRANSITION: {previous.name} + {action.name}")
            return False

        self._state = target
        if action is not QuizAction.TICK:
            logger.info(f"🔄 FSM: {previous.name} --[{action.name}]--> {target.name}")
        return True

    def _next_state(self, action: QuizAction) -> QuizState | None:
        """The Transition Table."""
        match (self._state, action):
            # IDLE -> LOADING
            case (QuizState.IDLE, QuizAction.START):
                return QuizState.LOADING

            # LOADING -> PRESENTING or back to IDLE
            case (QuizState.LOADING, QuizAction.LOAD_SUCCESS):
                return QuizState.PRESENTING
            case (QuizState.LOADING, QuizAction.LOAD_FAILED):
                return QuizState.IDLE

            # PRESENTING -> PRESENTING (countdown) or ANSWERED
            case (QuizState.PRESENTING, QuizAction.TICK):
                return QuizState.PRESENTING
            case (QuizState.PRESENTING, QuizAction.ANSWER_SELECTED | QuizAction.TIMEOUT_FIRED):
                return QuizState.ANSWERED

            # ANSWERED -> PRESENTING (Next) or FINISHED
            case (QuizState.ANSWERED, QuizAction.ADVANCE):
                return QuizState.PRESENTING
            case (QuizState.ANSWERED, QuizAction.FINISH):
                return QuizState.FINISHED

            # RESTART: normal exit from FINISHED, forced reset from anywhere else
            case (QuizState.IDLE, QuizAction.RESTART):
                return None
            case (_, QuizAction.RESTART):
                return QuizState.IDLE

            case _:
                return None
