"""
Trivia Session Controller

Owns one conversation: its SessionState, its transcript, and the
busy flag that serializes user input while a question loads.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .classifier import classify
from .errors import ErrorKind, error_message
from .game import GameConfig, Phase, SessionState, Transition, TriviaGame, placeholder_for
from .providers.base import QuestionSource
from .sanitize import render_turn
from .transcript import ConversationLog, TurnEntry

logger = logging.getLogger(__name__)


# Callbacks may be sync or async
TurnCallback = Optional[Callable[[TurnEntry], Any]]
TransitionCallback = Optional[Callable[["TriviaSession", Transition], Any]]


class TriviaSession:
    """
    A single trivia conversation.

    Input flows through submit(): the text is classified, echoed as a
    user turn, and handed to the game together with the current
    state. The resulting state replaces the old one and the game's
    turns are appended to the transcript.

    Only one submission is processed at a time. Results that arrive
    after close() or reset() are discarded.
    """

    def __init__(
        self,
        source: QuestionSource,
        config: Optional[GameConfig] = None,
        on_turn: TurnCallback = None,
        on_transition: TransitionCallback = None,
    ):
        """
        Initialize a session.

        Args:
            source: Question source used by the game
            config: Game configuration
            on_turn: Called for every turn appended to the transcript
            on_transition: Called after each applied transition
        """
        self.game = TriviaGame(source, config)
        self.config = self.game.config
        self.on_turn = on_turn
        self.on_transition = on_transition

        self._state = SessionState()
        self._log = ConversationLog(self.config.greeting)
        self._busy = False
        self._loading = False
        self._closed = False
        # Bumped on reset/close so in-flight results can be recognized as stale
        self._epoch = 0

    # =========================================================================
    # Presentation interface
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def transcript(self) -> Tuple[TurnEntry, ...]:
        return self._log.entries

    @property
    def last_turn(self) -> TurnEntry:
        return self._log.last

    @property
    def is_busy(self) -> bool:
        """True while a submission (and any question request) is outstanding."""
        return self._busy

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def placeholder(self) -> str:
        return placeholder_for(self._state)

    @property
    def score_text(self) -> str:
        return f"Score: {self._state.score_text}"

    @property
    def loading_text(self) -> Optional[str]:
        """Notice to show while a follow-up question is loading."""
        if self._loading and self._state.phase == Phase.AWAITING_CONTINUE_DECISION:
            return self.config.loading_message
        return None

    def render(self) -> List[Dict[str, Any]]:
        """Transcript prepared for display, system turns sanitized."""
        return [render_turn(entry) for entry in self._log]

    # =========================================================================
    # Commands
    # =========================================================================

    async def start(self) -> bool:
        """
        Request the opening question.

        Returns:
            True if the request ran, False if busy, closed, or the
            session is already past its first question
        """
        if not self._can_accept() or self._state.phase != Phase.AWAITING_FIRST_QUESTION:
            return False

        return await self._run(lambda: self.game.start(self._state), loading=True)

    async def submit(self, raw_text: str) -> bool:
        """
        Process one line of user input.

        Returns:
            True if the input was accepted, False if it was blank or
            the session was busy or closed
        """
        if not raw_text or not raw_text.strip():
            return False
        if not self._can_accept():
            return False

        classified = classify(raw_text)

        # A finished session ignores everything except "start"
        if self._state.phase == Phase.ENDED and not self.game.needs_question(
            self._state, classified
        ):
            return True

        state = self._state
        return await self._run(
            lambda: self.game.handle(state, classified),
            loading=self.game.needs_question(state, classified),
            echo=TurnEntry.user(classified.text),
        )

    def reset(self) -> None:
        """
        Return to a fresh session: zeroed state and a single greeting.

        Any request still in flight is discarded when it completes.
        """
        self._epoch += 1
        self._state = SessionState()
        self._log.reset(self.config.greeting)
        self._busy = False
        self._loading = False

    async def restart(self) -> bool:
        """Reset, then request a new opening question."""
        self.reset()
        return await self.start()

    def close(self) -> None:
        """Dispose of the session; pending results will be dropped."""
        self._closed = True
        self._epoch += 1
        self._busy = False
        self._loading = False

    # =========================================================================
    # Internals
    # =========================================================================

    def _can_accept(self) -> bool:
        if self._closed:
            logger.debug("Ignoring input for closed session")
            return False
        if self._busy:
            logger.debug("Ignoring input while a request is outstanding")
            return False
        return True

    async def _run(
        self,
        step: Callable[[], Any],
        loading: bool,
        echo: Optional[TurnEntry] = None,
    ) -> bool:
        """
        Run one transition, applying it only if the session is unchanged.

        The busy flag is raised before ``echo`` is appended, so callbacks
        that yield cannot let a second submission in.
        """
        epoch = self._epoch
        self._busy = True
        self._loading = loading
        try:
            if echo is not None:
                await self._append(echo)
                if epoch != self._epoch:
                    return False

            try:
                transition = await step()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Unexpected error during trivia turn: {e}", exc_info=True)
                transition = Transition(
                    state=self._state,
                    turns=[TurnEntry.error(error_message(ErrorKind.UNKNOWN), ErrorKind.UNKNOWN)],
                )

            if epoch != self._epoch:
                logger.debug("Discarding result for a reset or closed session")
                return False

            await self._apply(transition)
            return True
        finally:
            if epoch == self._epoch:
                self._busy = False
                self._loading = False

    async def _apply(self, transition: Transition) -> None:
        self._state = transition.state
        for turn in transition.turns:
            await self._append(turn)

        if self.on_transition:
            await self._invoke(self.on_transition, self, transition)

    async def _append(self, entry: TurnEntry) -> None:
        self._log.append(entry)
        if self.on_turn:
            await self._invoke(self.on_turn, entry)

    async def _invoke(self, callback: Callable[..., Any], *args: Any) -> None:
        try:
            result = callback(*args)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            logger.error(f"Error in session callback: {e}")
