"""
Pytest fixtures for Spit tests.
"""

import pytest

from ..engine_core.state import GameState, GamePhase, SideState, Side
from ..engine_core.setup import setup_game
from ..session import SessionManager
from ..settings import SettingsStore


def make_state(
    player_stacks=None,
    ai_stacks=None,
    center=(None, None),
    player_spit=None,
    ai_spit=None,
    phase=GamePhase.PLAYING,
) -> GameState:
    """Build a playing state from raw rank lists."""
    empty = [[], [], [], [], []]
    return GameState(
        game_id="test_game",
        phase=phase,
        player=SideState.from_stacks(Side.PLAYER, player_stacks or empty, player_spit),
        ai=SideState.from_stacks(Side.AI, ai_stacks or empty, ai_spit),
        center_piles=list(center),
    )


@pytest.fixture
def build_state():
    """Factory for hand-built states."""
    return make_state


@pytest.fixture
def dealt_state() -> GameState:
    """A freshly dealt, seeded game."""
    return setup_game(random_seed=42)


@pytest.fixture
def midgame_state() -> GameState:
    """
    Player: 3 on stack 0, 9 on stack 1 (over a face-down 4), stack 2 empty.
    AI: every stack holds cards. Center piles show 4 and 12.
    """
    return make_state(
        player_stacks=[[3], [4, 9], [], [2, 6], [5]],
        ai_stacks=[[8], [2, 10], [7], [6, 6], [9]],
        center=(4, 12),
        player_spit=[1, 2, 3],
        ai_spit=[4, 5, 6],
    )


@pytest.fixture
def settings_store(tmp_path) -> SettingsStore:
    """Settings store backed by a temp file."""
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def session_manager(settings_store) -> SessionManager:
    return SessionManager(settings_store=settings_store)
