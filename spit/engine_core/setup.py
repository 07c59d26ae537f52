"""
Game Setup - Creates the initial game state.

This module handles:
- Building the 52-card deck (4 of each rank, no suits)
- Shuffling with a seed for determinism
- Splitting the deck between the two sides
- Dealing each half into a 1-2-3-4-5 layout
- The opening spit that seeds both center piles
"""

from __future__ import annotations
import logging
import random
import uuid

from .state import (
    GameState,
    GamePhase,
    SideState,
    Side,
    Stack,
    ACE,
    KING,
    HALF_DECK,
    NUM_STACKS,
)
from .reducer import spit_both

logger = logging.getLogger(__name__)

COPIES_PER_RANK = 4


def build_deck() -> list[int]:
    """A fresh, ordered 52-card deck."""
    return [rank for rank in range(ACE, KING + 1) for _ in range(COPIES_PER_RANK)]


def shuffle_deck(deck: list[int], rng: random.Random) -> list[int]:
    """Return a uniformly shuffled copy of the deck."""
    shuffled = list(deck)
    rng.shuffle(shuffled)
    return shuffled


def split_deck(deck: list[int]) -> tuple[list[int], list[int]]:
    """First half goes to the player, second half to the AI."""
    return deck[:HALF_DECK], deck[HALF_DECK:2 * HALF_DECK]


def deal_layout(source: list[int]) -> tuple[list[Stack], list[int]]:
    """
    Deal cards from the front of source into five stacks of 1..5 cards.

    Stack i is filled with i+1 cards before moving on. A short source
    leaves the later stacks short. Returns the layout and the cards left
    over, in their original order.
    """
    remaining = list(source)
    layout = []
    for i in range(NUM_STACKS):
        take = remaining[:i + 1]
        remaining = remaining[i + 1:]
        layout.append(Stack(cards=take))
    return layout, remaining


def setup_game(random_seed: int | None = None, game_id: str | None = None) -> GameState:
    """
    Set up a new game, ready for play.

    Args:
        random_seed: Seed for deterministic shuffling
        game_id: Identifier (generated if not provided)

    Returns:
        GameState in the PLAYING phase with both center piles seeded
    """
    rng = random.Random(random_seed)
    deck = shuffle_deck(build_deck(), rng)
    player_half, ai_half = split_deck(deck)

    player_layout, player_spit = deal_layout(player_half)
    ai_layout, ai_spit = deal_layout(ai_half)

    state = GameState(
        game_id=game_id or str(uuid.uuid4()),
        phase=GamePhase.SETUP,
        player=SideState(side=Side.PLAYER, layout=player_layout, spit_pile=player_spit),
        ai=SideState(side=Side.AI, layout=ai_layout, spit_pile=ai_spit),
        random_seed=random_seed,
    )

    state = spit_both(state)
    state.phase = GamePhase.PLAYING

    logger.debug(
        "Dealt game %s (seed=%s), center piles %s",
        state.game_id, random_seed, state.center_piles,
    )
    return state
