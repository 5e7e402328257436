"""
Trivia Plugin

Conversational Newport trivia over NATS. Each channel gets its own
independent quiz session; chat text is passed straight through and
the game decides whether it is an answer or a command.

Commands:
    !trivia <text> - Start a session, answer (A-D), or type next/stop/start
    !trivia reset - Clear the conversation and load a new question
    !trivia close - Dismiss the session

NATS Subjects:
    Subscribe:
        rosey.command.trivia.play - Handle !trivia <text>
        rosey.command.trivia.reset - Handle !trivia reset
        rosey.command.trivia.close - Handle !trivia close
    Publish:
        rosey.channel.{channel}.message - System turns for the channel
        trivia.question.asked - Event when a question is posed
        trivia.question.failed - Event when a question request fails
        trivia.answer.correct - Event when an answer is correct
        trivia.answer.incorrect - Event when an answer is wrong
        trivia.game.ended - Event when the player stops
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from nats.aio.client import Client as NATS

from .game import GameConfig, Phase, Transition
from .providers.base import QuestionSource
from .providers.mindstudio import MindStudioProvider
from .sanitize import render_turn
from .session import TriviaSession
from .transcript import TurnEntry

logger = logging.getLogger(__name__)


class TriviaPlugin:
    """
    Trivia game plugin.

    Manages one TriviaSession per channel. Sessions share the
    question provider but no game state.

    Configuration (the ``trivia`` config section):
        api_url, api_key, app_id, workflow, timeout - provider settings
        directives.first / directives.next - question directives
        emit_events: Whether to publish game events (default: true)
    """

    # Plugin metadata
    NAMESPACE = "trivia"
    VERSION = "2.0.0"
    DESCRIPTION = "Conversational Newport trivia"

    # NATS subjects - Commands
    SUBJECT_PLAY = "rosey.command.trivia.play"
    SUBJECT_RESET = "rosey.command.trivia.reset"
    SUBJECT_CLOSE = "rosey.command.trivia.close"

    # NATS subjects - Events
    EVENT_QUESTION_ASKED = "trivia.question.asked"
    EVENT_QUESTION_FAILED = "trivia.question.failed"
    EVENT_ANSWER_CORRECT = "trivia.answer.correct"
    EVENT_ANSWER_INCORRECT = "trivia.answer.incorrect"
    EVENT_GAME_ENDED = "trivia.game.ended"

    BUSY_MESSAGE = "Hang on, still loading the question..."
    CLOSED_MESSAGE = "This trivia session was closed."

    def __init__(
        self,
        nats_client: NATS,
        config: Optional[Dict[str, Any]] = None,
        provider: Optional[QuestionSource] = None,
    ):
        """
        Initialize trivia plugin.

        Args:
            nats_client: Connected NATS client
            config: Plugin configuration dict
            provider: Question source (defaults to MindStudio)
        """
        self.nats = nats_client
        self.config = config or {}
        self.logger = logging.getLogger(f"{__name__}.{self.NAMESPACE}")
        self._initialized = False
        self._subscriptions: List[Any] = []

        self.provider = provider or MindStudioProvider(self.config)
        self.game_config = GameConfig.from_dict(self.config)
        self.emit_events = self.config.get("emit_events", True)

        # Active sessions by channel
        self.sessions: Dict[str, TriviaSession] = {}

    async def initialize(self) -> None:
        """Subscribe to NATS subjects."""
        self.logger.info(f"Initializing {self.NAMESPACE} plugin v{self.VERSION}")

        for subject, handler in (
            (self.SUBJECT_PLAY, self._handle_play),
            (self.SUBJECT_RESET, self._handle_reset),
            (self.SUBJECT_CLOSE, self._handle_close),
        ):
            sub = await self.nats.subscribe(subject, cb=handler)
            self._subscriptions.append(sub)

        self._initialized = True
        self.logger.info(
            f"Plugin initialized. Subscribed to: "
            f"{self.SUBJECT_PLAY}, {self.SUBJECT_RESET}, {self.SUBJECT_CLOSE}"
        )

    async def shutdown(self) -> None:
        """Close sessions, unsubscribe and release the provider."""
        self.logger.info(f"Shutting down {self.NAMESPACE} plugin")

        for session in self.sessions.values():
            session.close()
        self.sessions.clear()

        for sub in self._subscriptions:
            try:
                await sub.unsubscribe()
            except Exception as e:
                self.logger.warning(f"Error unsubscribing: {e}")
        self._subscriptions.clear()

        await self.provider.close()

        self._initialized = False
        self.logger.info("Plugin shutdown complete")

    # =========================================================================
    # NATS Command Handlers
    # =========================================================================

    async def _handle_play(self, msg) -> None:
        """
        Handle !trivia <text>.

        Expected message format:
            {
                "channel": "string",
                "user": "string",
                "args": "B"
            }
        """
        data = await self._decode(msg)
        if data is None:
            return

        channel = data.get("channel", "unknown")
        text = data.get("args", "").strip()

        session = self.sessions.get(channel)
        if session is None:
            session = self._create_session(channel)
            accepted = await session.start()
            await self._respond_state(msg, session, accepted)
            return

        if session.is_busy:
            if msg.reply:
                await self._respond(msg, {"success": False, "error": self.BUSY_MESSAGE})
            return

        if not text:
            if msg.reply:
                await self._respond(msg, {
                    "success": False,
                    "error": f"Usage: !trivia <answer>. {session.placeholder}",
                })
            return

        accepted = await session.submit(text)
        await self._respond_state(msg, session, accepted)

    async def _handle_reset(self, msg) -> None:
        """Handle !trivia reset: clear the conversation and start over."""
        data = await self._decode(msg)
        if data is None:
            return

        channel = data.get("channel", "unknown")
        session = self.sessions.get(channel) or self._create_session(channel)

        accepted = await session.restart()
        await self._respond_state(msg, session, accepted)

    async def _handle_close(self, msg) -> None:
        """Handle !trivia close: dismiss the channel's session."""
        data = await self._decode(msg)
        if data is None:
            return

        channel = data.get("channel", "unknown")
        session = self.sessions.pop(channel, None)
        if session is None:
            if msg.reply:
                await self._respond(msg, {
                    "success": False,
                    "error": "No trivia session to close.",
                })
            return

        session.close()
        if msg.reply:
            await self._respond(msg, {
                "success": True,
                "result": {"message": "Trivia closed.", "score": session.score_text},
            })

    # =========================================================================
    # Session Callbacks
    # =========================================================================

    def _create_session(self, channel: str) -> TriviaSession:
        session = TriviaSession(
            self.provider,
            self.game_config,
            on_turn=lambda entry: self._on_turn(channel, entry),
            on_transition=lambda s, t: self._on_transition(channel, s, t),
        )
        self.sessions[channel] = session
        self.logger.debug(f"Created trivia session for {channel}")
        return session

    async def _on_turn(self, channel: str, entry: TurnEntry) -> None:
        """Relay system turns to the channel; user turns are already there."""
        if entry.is_user:
            return
        await self._send_to_channel(channel, entry)

    async def _on_transition(
        self,
        channel: str,
        session: TriviaSession,
        transition: Transition,
    ) -> None:
        """Emit game events for a transition."""
        if not self.emit_events:
            return

        state = transition.state
        base = {"channel": channel, "score": state.score_text}

        if transition.fetch is not None:
            if transition.question_asked:
                await self._emit_event(self.EVENT_QUESTION_ASKED, {
                    **base,
                    "question_number": state.questions_asked,
                })
            else:
                await self._emit_event(self.EVENT_QUESTION_FAILED, {
                    **base,
                    "error_kind": transition.fetch.error_kind.value,
                    "status_code": transition.fetch.status_code,
                })

        if transition.correct is not None:
            event = self.EVENT_ANSWER_CORRECT if transition.correct else self.EVENT_ANSWER_INCORRECT
            await self._emit_event(event, base)

        if state.phase == Phase.ENDED and transition.turns:
            await self._emit_event(self.EVENT_GAME_ENDED, {
                **base,
                "correct_answers": state.correct_answers,
                "questions_answered": state.questions_answered,
            })

    # =========================================================================
    # Helper Methods
    # =========================================================================

    async def _decode(self, msg) -> Optional[Dict[str, Any]]:
        """Decode a JSON command payload, replying with an error if invalid."""
        try:
            return json.loads(msg.data.decode())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self.logger.error(f"Invalid message format: {e}")
            if msg.reply:
                await self._respond(msg, {"success": False, "error": "Invalid message"})
            return None

    async def _respond_state(self, msg, session: TriviaSession, accepted: bool = True) -> None:
        """Reply with the session state, or an error if the turn was dropped."""
        if not msg.reply:
            return
        if not accepted:
            error = self.CLOSED_MESSAGE if session.is_closed else self.BUSY_MESSAGE
            await self._respond(msg, {"success": False, "error": error})
            return
        await self._respond(msg, {
            "success": True,
            "result": {
                **session.state.to_dict(),
                "score": session.score_text,
                "placeholder": session.placeholder,
                "message": session.last_turn.text,
            },
        })

    async def _respond(self, msg, data: Dict[str, Any]) -> None:
        """Send JSON response to NATS message."""
        try:
            await msg.respond(json.dumps(data).encode())
        except Exception as e:
            self.logger.error(f"Error sending response: {e}")

    async def _send_to_channel(self, channel: str, entry: TurnEntry) -> None:
        """
        Publish a turn to the channel's message subject for the
        router/connector to pick up.
        """
        rendered = render_turn(entry)
        payload = {
            "channel": channel,
            "message": entry.text,
            "html": rendered["html"],
            "is_error": entry.is_error,
            "error_kind": rendered["error_kind"],
        }
        try:
            await self.nats.publish(
                f"rosey.channel.{channel}.message",
                json.dumps(payload).encode(),
            )
        except Exception as e:
            self.logger.error(f"Error sending to channel {channel}: {e}")

    async def _emit_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Emit a NATS event."""
        event_data = {
            "event": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **data,
        }
        try:
            await self.nats.publish(event_type, json.dumps(event_data).encode())
        except Exception as e:
            self.logger.debug(f"Could not publish event {event_type}: {e}")
