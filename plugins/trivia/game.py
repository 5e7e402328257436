"""
Trivia Game State Machine

Phase transitions, answer grading and score tracking for a
single-player trivia conversation.

TriviaGame never keeps session state between calls: each transition
takes the current SessionState and returns a Transition holding the
next state and the turns to append to the transcript.
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .classifier import ClassifiedInput, Command, InputKind
from .errors import ErrorKind
from .providers.base import FetchResult, QuestionSource
from .question import Question
from .transcript import TurnEntry


class Phase(Enum):
    """Game phase enumeration."""

    AWAITING_FIRST_QUESTION = "awaiting_first_question"
    AWAITING_ANSWER = "awaiting_answer"
    AWAITING_CONTINUE_DECISION = "awaiting_continue_decision"
    ENDED = "ended"


@dataclass(frozen=True)
class SessionState:
    """
    Authoritative state of one quiz session.

    Attributes:
        correct_answers: Number of correctly graded answers
        questions_answered: Number of graded answers
        questions_asked: Number of questions issued this game
        current_question: Question awaiting resolution, if any
        phase: Current game phase
    """

    correct_answers: int = 0
    questions_answered: int = 0
    questions_asked: int = 0
    current_question: Optional[Question] = None
    phase: Phase = Phase.AWAITING_FIRST_QUESTION

    def __post_init__(self) -> None:
        if self.correct_answers < 0 or self.questions_answered < 0:
            raise ValueError("Score counters cannot be negative")
        if self.correct_answers > self.questions_answered:
            raise ValueError("correct_answers cannot exceed questions_answered")
        if self.phase == Phase.AWAITING_ANSWER and self.current_question is None:
            raise ValueError("AWAITING_ANSWER requires a current question")
        if self.phase == Phase.ENDED and self.current_question is not None:
            raise ValueError("An ended game cannot hold a question")

    def replace(self, **changes: Any) -> "SessionState":
        return dataclasses.replace(self, **changes)

    @property
    def score_text(self) -> str:
        return f"{self.correct_answers}/{self.questions_answered}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for NATS replies (the answer is never included)."""
        return {
            "phase": self.phase.value,
            "correct_answers": self.correct_answers,
            "questions_answered": self.questions_answered,
            "questions_asked": self.questions_asked,
            "has_question": self.current_question is not None,
        }


@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for a trivia game.

    Attributes:
        first_directive: Directive requesting the opening question
        next_directive: Directive requesting a follow-up question
        greeting: Seeded first turn of a fresh transcript
        restart_banner: Turn shown when a finished game restarts
        loading_message: Notice shown while a next question loads
    """

    first_directive: str = "All things Newport"
    next_directive: str = "next"
    greeting: str = (
        "Welcome to Newport Trivia! Let's test your knowledge about our "
        "beautiful city. Loading your first question..."
    )
    restart_banner: str = "Welcome back to Newport Trivia! Loading a new question..."
    loading_message: str = "🎲 Here comes another Newport brain teaser..."

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]] = None) -> "GameConfig":
        """Build from the ``trivia`` config section."""
        config = config or {}
        directives = config.get("directives", {})
        defaults = cls()
        return cls(
            first_directive=directives.get("first", defaults.first_directive),
            next_directive=directives.get("next", defaults.next_directive),
            greeting=config.get("greeting", defaults.greeting),
            restart_banner=config.get("restart_banner", defaults.restart_banner),
            loading_message=config.get("loading_message", defaults.loading_message),
        )


CONTINUE_HINT = 'Type "next" for another question or "stop" to end the game.'
ANSWER_PROMPT = "Please enter A, B, C, or D to answer the question."
CONTINUE_REMINDER = "Please type 'next' for another question or 'stop' to end the game."
NOT_STARTED_HINT = "No question is loaded yet. Type 'start' to try again."


@dataclass
class Transition:
    """
    Result of applying one input to a SessionState.

    Attributes:
        state: The next state
        turns: System turns to append, in order
        fetch: Outcome of the question request, if one was made
        correct: Grading outcome, if an answer was graded
    """

    state: SessionState
    turns: List[TurnEntry] = field(default_factory=list)
    fetch: Optional[FetchResult] = None
    correct: Optional[bool] = None

    @property
    def question_asked(self) -> bool:
        return self.fetch is not None and self.fetch.ok


def placeholder_for(state: SessionState) -> str:
    """Input hint for the current phase."""
    if state.phase == Phase.AWAITING_ANSWER:
        return "Type A, B, C, or D to answer..."
    if state.phase == Phase.AWAITING_CONTINUE_DECISION:
        return "Type 'next' for another question or 'stop' to end..."
    if state.phase == Phase.ENDED:
        return "Type 'start' to play again..."
    return "Waiting for the first question..."


def grade_answer(state: SessionState, letter: str) -> Transition:
    """
    Grade an answer letter against the current question.

    Both counters are reported after the increment, so the
    player sees the score including this question. The question
    is resolved and dropped from the state.
    """
    question = state.current_question
    if question is None:
        raise ValueError("Cannot grade an answer without a current question")

    correct = question.check_answer(letter)
    new_state = state.replace(
        correct_answers=state.correct_answers + (1 if correct else 0),
        questions_answered=state.questions_answered + 1,
        current_question=None,
        phase=Phase.AWAITING_CONTINUE_DECISION,
    )

    if correct:
        text = f"✅ Correct! Your score: {new_state.score_text}\n{CONTINUE_HINT}"
    else:
        text = (
            f"❌ Sorry, that's incorrect. The correct answer was "
            f"{question.correct_answer}. Score: {new_state.score_text}\n{CONTINUE_HINT}"
        )

    return Transition(state=new_state, turns=[TurnEntry.system(text)], correct=correct)


def end_game(state: SessionState) -> Transition:
    """Finish the game with a final score summary."""
    new_state = state.replace(current_question=None, phase=Phase.ENDED)
    summary = f"🏁 Game Over! Final Score: {state.score_text}"
    return Transition(state=new_state, turns=[TurnEntry.system(summary)])


class TriviaGame:
    """
    Trivia conversation state machine.

    Responsible for:
    - Phase transitions
    - Requesting questions from the source
    - Grading answers and tracking score

    Holds only configuration and the question source; session state
    is passed in and returned on every call.
    """

    def __init__(self, source: QuestionSource, config: Optional[GameConfig] = None):
        """
        Initialize the game rules.

        Args:
            source: Where questions come from
            config: Directives and fixed messages
        """
        self.source = source
        self.config = config or GameConfig()

    def needs_question(self, state: SessionState, classified: ClassifiedInput) -> bool:
        """Whether handling this input will request a question."""
        if state.phase == Phase.AWAITING_CONTINUE_DECISION:
            return classified.is_command(Command.NEXT)
        if state.phase in (Phase.AWAITING_FIRST_QUESTION, Phase.ENDED):
            return classified.is_command(Command.START)
        return False

    async def start(self, state: SessionState) -> Transition:
        """
        Ask the opening question.

        On failure the state stays in AWAITING_FIRST_QUESTION and the
        only way forward is an explicit restart.
        """
        return await self._ask(
            state,
            self.config.first_directive,
            failure_phase=Phase.AWAITING_FIRST_QUESTION,
        )

    async def restart(self) -> Transition:
        """Start a new game from zeroed counters with a restart banner."""
        transition = await self.start(SessionState())
        transition.turns.insert(0, TurnEntry.system(self.config.restart_banner))
        return transition

    async def handle(self, state: SessionState, classified: ClassifiedInput) -> Transition:
        """
        Apply one classified input to the state.

        Args:
            state: Current session state
            classified: Classified user input

        Returns:
            Transition with the next state and turns to append
        """
        if state.phase == Phase.AWAITING_FIRST_QUESTION:
            if classified.is_command(Command.START):
                return await self.start(state)
            return Transition(state=state, turns=[TurnEntry.system(NOT_STARTED_HINT)])

        if state.phase == Phase.AWAITING_ANSWER:
            if classified.kind == InputKind.ANSWER:
                return grade_answer(state, classified.letter)
            return Transition(state=state, turns=[TurnEntry.system(ANSWER_PROMPT)])

        if state.phase == Phase.AWAITING_CONTINUE_DECISION:
            if classified.is_command(Command.NEXT):
                return await self._ask(
                    state,
                    self.config.next_directive,
                    failure_phase=Phase.AWAITING_CONTINUE_DECISION,
                )
            if classified.is_command(Command.STOP):
                return end_game(state)
            return Transition(state=state, turns=[TurnEntry.system(CONTINUE_REMINDER)])

        # Ended: only "start" reopens the session
        if classified.is_command(Command.START):
            return await self.restart()
        return Transition(state=state)

    async def _ask(
        self,
        state: SessionState,
        directive: str,
        failure_phase: Phase,
    ) -> Transition:
        """Request a question and fold the outcome into the state."""
        result = await self.source.request_question(directive)

        if not result.ok:
            failed = state.replace(phase=failure_phase)
            turn = TurnEntry.error(result.user_message, result.error_kind or ErrorKind.UNKNOWN)
            return Transition(state=failed, turns=[turn], fetch=result)

        new_state = state.replace(
            current_question=result.question,
            questions_asked=state.questions_asked + 1,
            phase=Phase.AWAITING_ANSWER,
        )
        return Transition(
            state=new_state,
            turns=[TurnEntry.system(result.question.prompt)],
            fetch=result,
        )
