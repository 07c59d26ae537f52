"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. A front end starts a session -> a new deal (in-memory only)
2. During the game:
   - Player clicks are applied through the session's GameLoop
   - The AI timer ticks the same GameLoop
3. Game ends -> the session is marked finished; no soft reset
4. To play again the front end starts a new session

PERSISTENCE RULES:
- Game state is ephemeral (session-scoped only)
- The only persistence is the difficulty setting, read once at start
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import uuid
import time

from ..engine_core.state import GameState, Side
from ..engine_core.setup import setup_game
from ..bots import BotPolicy, GreedyPolicy
from ..settings import SettingsStore, tick_interval_ms, DEFAULT_DIFFICULTY
from .game_loop import GameLoop

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - Current canonical game state
    - The AI policy and its tick interval
    - The game loop that drives both
    - The running timer, if any
    """
    session_id: str
    game_state: GameState
    created_at: float

    state: SessionState = SessionState.ACTIVE
    difficulty: int = DEFAULT_DIFFICULTY
    bot: BotPolicy = field(default_factory=GreedyPolicy)
    ai_side: Side = Side.AI

    last_activity: float = 0.0

    # AITimer when ticking automatically
    timer: Any | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    _loop: GameLoop | None = field(default=None, repr=False)

    @property
    def loop(self) -> GameLoop:
        if self._loop is None:
            self._loop = GameLoop(self)
        return self._loop

    @property
    def interval_ms(self) -> int:
        return tick_interval_ms(self.difficulty)

    def is_active(self) -> bool:
        """Check if session is still in play."""
        return self.state == SessionState.ACTIVE

    def touch(self):
        self.last_activity = time.time()

    def finish(self):
        """Mark the game as over and stop the timer."""
        self.state = SessionState.GAME_OVER
        if self.timer is not None:
            self.timer.stop()
        logger.info(
            "Session %s finished: %s",
            self.session_id, self.game_state.outcome_message,
        )


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Deal new games
    - Track sessions
    - Clean up finished sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, settings_store: SettingsStore | None = None):
        self.settings_store = settings_store or SettingsStore()
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        difficulty: int | None = None,
        random_seed: int | None = None,
        bot: BotPolicy | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            difficulty: AI speed override; read from settings if omitted
            random_seed: Seed for a reproducible deal
            bot: AI policy (GreedyPolicy if not provided)

        Returns:
            New Session with a freshly dealt game
        """
        session_id = str(uuid.uuid4())
        if difficulty is None:
            difficulty = self.settings_store.load_difficulty()

        now = time.time()
        session = Session(
            session_id=session_id,
            game_state=setup_game(random_seed=random_seed, game_id=session_id),
            created_at=now,
            difficulty=difficulty,
            bot=bot or GreedyPolicy(),
            last_activity=now,
        )

        self._sessions[session_id] = session
        logger.info(
            "Started session %s (difficulty=%d, interval=%dms)",
            session_id, difficulty, session.interval_ms,
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        The session is removed from memory and its timer stopped.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False

        if session.timer is not None:
            session.timer.stop()
        if session.state == SessionState.ACTIVE:
            session.state = (
                SessionState.GAME_OVER if reason == "completed"
                else SessionState.ABANDONED
            )
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions still in play."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove finished sessions and sessions idle longer than max_age.

        Returns how many were removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if not session.is_active()
            or current_time - session.last_activity > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
