"""
Tests for move legality and terminal conditions.

Tests:
- Adjacent ranks and Ace-King wrap
- Empty center piles
- Win detection
- Deadlock reporting
"""

import pytest

from ..engine_core.rules import (
    is_valid_move,
    check_winner,
    is_deadlocked,
    playable_piles,
    has_relocation,
)
from ..engine_core.state import Side, rank_symbol


class TestIsValidMove:
    """Tests for the legality oracle."""

    def test_full_rank_grid(self):
        """Legal exactly when adjacent or an Ace-King pair."""
        for a in range(1, 14):
            for b in range(1, 14):
                expected = abs(a - b) == 1 or {a, b} == {1, 13}
                assert is_valid_move(a, b) is expected, (a, b)

    @pytest.mark.parametrize("rank", range(1, 14))
    def test_empty_pile_accepts_anything(self, rank):
        assert is_valid_move(rank, None)

    def test_ace_king_wraps_both_ways(self):
        assert is_valid_move(13, 1)
        assert is_valid_move(1, 13)

    def test_same_rank_never_stacks(self):
        assert not is_valid_move(7, 7)
        assert not is_valid_move(1, 1)

    def test_queen_does_not_wrap_to_ace(self):
        assert not is_valid_move(12, 1)
        assert not is_valid_move(2, 13)


class TestPlayablePiles:
    """Tests for which center piles accept a card."""

    def test_pile_order_preserved(self, build_state):
        state = build_state(center=(6, 8))
        assert playable_piles(state, 7) == [0, 1]

    def test_no_pile_fits(self, build_state):
        state = build_state(center=(4, 12))
        assert playable_piles(state, 9) == []


class TestCheckWinner:
    """Tests for the terminal check."""

    def test_player_cleared_layout_wins(self, build_state):
        state = build_state(ai_stacks=[[1], [], [], [], []])
        assert check_winner(state) == Side.PLAYER

    def test_ai_cleared_layout_wins(self, build_state):
        state = build_state(player_stacks=[[], [], [4], [], []])
        assert check_winner(state) == Side.AI

    def test_any_card_suppresses_win(self, midgame_state):
        assert check_winner(midgame_state) is None

    def test_spit_pile_does_not_block_win(self, build_state):
        """Only layout cards count; spit-pile cards are ignored."""
        state = build_state(
            ai_stacks=[[5], [], [], [], []],
            player_spit=[1, 2, 3, 4],
        )
        assert check_winner(state) == Side.PLAYER

    def test_player_checked_first(self, build_state):
        state = build_state()
        assert check_winner(state) == Side.PLAYER


class TestDeadlock:
    """Tests for stalemate reporting."""

    def test_stuck_table_without_spit_is_deadlocked(self, build_state):
        state = build_state(
            player_stacks=[[9], [9], [9], [9], [9]],
            ai_stacks=[[5], [5], [5], [5], [5]],
            center=(1, 1),
            player_spit=[],
            ai_spit=[3],
        )
        assert is_deadlocked(state)

    def test_spit_available_is_not_deadlocked(self, build_state):
        state = build_state(
            player_stacks=[[9], [9], [9], [9], [9]],
            ai_stacks=[[5], [5], [5], [5], [5]],
            center=(1, 1),
            player_spit=[2],
            ai_spit=[3],
        )
        assert not is_deadlocked(state)

    def test_pending_relocation_is_not_deadlocked(self, build_state):
        state = build_state(
            player_stacks=[[9], [9], [9], [9], [9]],
            ai_stacks=[[5, 5], [], [5], [5], [5]],
            center=(1, 1),
        )
        assert has_relocation(state, Side.AI)
        assert not is_deadlocked(state)

    def test_player_relocation_is_not_deadlocked(self, build_state):
        """Moving the 9 off stack 0 uncovers a 2 that fits center 0."""
        state = build_state(
            player_stacks=[[2, 9], [], [9], [9], [9]],
            ai_stacks=[[5], [5], [5], [5], [5]],
            center=(1, 1),
            player_spit=[],
        )
        assert has_relocation(state, Side.PLAYER)
        assert not has_relocation(state, Side.AI)
        assert not is_deadlocked(state)

    def test_midgame_has_plays(self, midgame_state):
        assert not is_deadlocked(midgame_state)


class TestRankSymbol:
    """Tests for display symbols."""

    @pytest.mark.parametrize("rank,symbol", [
        (1, "A"), (2, "2"), (10, "10"), (11, "J"), (12, "Q"), (13, "K"), (None, ""),
    ])
    def test_symbols(self, rank, symbol):
        assert rank_symbol(rank) == symbol
