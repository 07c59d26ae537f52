"""
Tests for deck building and the deal.
"""

import random
from collections import Counter

from ..engine_core.setup import (
    build_deck,
    shuffle_deck,
    split_deck,
    deal_layout,
    setup_game,
)
from ..engine_core.state import GamePhase, Side, HALF_DECK


class TestDeck:
    """Tests for deck construction."""

    def test_four_of_each_rank(self):
        deck = build_deck()
        assert len(deck) == 52
        assert Counter(deck) == {rank: 4 for rank in range(1, 14)}

    def test_shuffle_is_a_permutation(self):
        deck = build_deck()
        shuffled = shuffle_deck(deck, random.Random(7))
        assert sorted(shuffled) == sorted(deck)
        assert deck == build_deck()  # input untouched

    def test_shuffle_is_seeded(self):
        a = shuffle_deck(build_deck(), random.Random(123))
        b = shuffle_deck(build_deck(), random.Random(123))
        assert a == b

    def test_split_halves(self):
        player, ai = split_deck(list(range(52)))
        assert player == list(range(26))
        assert ai == list(range(26, 52))


class TestDealLayout:
    """Tests for the triangular deal."""

    def test_stack_sizes(self):
        layout, remaining = deal_layout(list(range(26)))
        assert [s.count for s in layout] == [1, 2, 3, 4, 5]
        assert len(remaining) == 26 - 15

    def test_cards_dealt_in_order(self):
        layout, remaining = deal_layout(list(range(20)))
        assert layout[0].cards == [0]
        assert layout[1].cards == [1, 2]
        assert layout[4].cards == [10, 11, 12, 13, 14]
        assert remaining == [15, 16, 17, 18, 19]

    def test_exactly_fifteen(self):
        layout, remaining = deal_layout(list(range(15)))
        assert sum(s.count for s in layout) == 15
        assert remaining == []

    def test_short_source_leaves_stacks_short(self):
        layout, remaining = deal_layout([1, 2, 3, 4])
        assert [s.count for s in layout] == [1, 2, 1, 0, 0]
        assert remaining == []


class TestSetupGame:
    """Tests for the full game setup."""

    def test_game_is_playing(self, dealt_state):
        assert dealt_state.phase == GamePhase.PLAYING
        assert dealt_state.winner is None
        assert dealt_state.selection is None

    def test_opening_spit_seeds_both_piles(self, dealt_state):
        assert None not in dealt_state.center_piles
        assert len(dealt_state.player.spit_pile) == HALF_DECK - 15 - 1
        assert len(dealt_state.ai.spit_pile) == HALF_DECK - 15 - 1

    def test_each_side_holds_twenty_six(self, dealt_state):
        """Layout + spit pile + the card spat to the center."""
        for side in (Side.PLAYER, Side.AI):
            assert dealt_state.card_total(side) + 1 == HALF_DECK

    def test_deck_integrity(self, dealt_state):
        cards = list(dealt_state.center_piles)
        for owner in (dealt_state.player, dealt_state.ai):
            cards.extend(owner.spit_pile)
            for stack in owner.layout:
                cards.extend(stack.cards)
        assert Counter(cards) == {rank: 4 for rank in range(1, 14)}

    def test_same_seed_same_deal(self):
        a = setup_game(random_seed=99)
        b = setup_game(random_seed=99)
        assert a.player == b.player
        assert a.ai == b.ai
        assert a.center_piles == b.center_piles

    def test_game_id_is_kept(self):
        state = setup_game(random_seed=1, game_id="table-1")
        assert state.game_id == "table-1"
