"""
Action Generator - Enumerates the moves a side can make.

Used by:
1. Bots to pick a move
2. The API to flag playable cards
3. Deadlock reporting

Ordering is significant: center plays come first, all stacks against
center pile 0 before any stack against pile 1, lower stack indexes first.
Relocations follow, then PASS.
"""

from __future__ import annotations

from .state import GameState, Side, NUM_CENTER_PILES
from .action import Action
from .rules import is_valid_move


def center_plays(state: GameState, side: Side) -> list[Action]:
    """Legal center plays, pile-major then stack order."""
    top_cards = state.side_state(side).top_cards
    actions = []
    for center_index in range(NUM_CENTER_PILES):
        target = state.center_piles[center_index]
        for stack_index, card in enumerate(top_cards):
            if card is not None and is_valid_move(card, target):
                actions.append(Action.play_card(side, stack_index, center_index))
    return actions


def safe_relocation(state: GameState, side: Side) -> Action | None:
    """
    First empty stack paired with the first stack holding more than one card.

    Single-card stacks are never donors, so every relocation uncovers a
    face-down card.
    """
    layout = state.side_state(side).layout
    target = next((i for i, s in enumerate(layout) if s.is_empty), None)
    if target is None:
        return None
    source = next((i for i, s in enumerate(layout) if s.count > 1), None)
    if source is None:
        return None
    return Action.relocate(side, source, target)


def legal_actions(state: GameState, side: Side) -> list[Action]:
    """
    All moves available to a side, in preference order.

    PASS is always last; a finished game has no moves at all.
    """
    if state.is_over:
        return []

    actions = center_plays(state, side)
    relocation = safe_relocation(state, side)
    if relocation is not None:
        actions.append(relocation)
    actions.append(Action.pass_turn(side))
    return actions
