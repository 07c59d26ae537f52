"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through:
- Created when the player starts a game
- Holds the current game state
- Applies player clicks and AI ticks
- Finished when either layout is cleared

Sessions are EPHEMERAL: no persistence, restart means a new session.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult
from .timer import AITimer

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
    "AITimer",
]
