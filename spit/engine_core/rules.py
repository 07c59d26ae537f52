"""
Rules - Move legality and terminal conditions.

Everything here is a read-only query over ranks or a GameState.
"""

from __future__ import annotations

from .state import ACE, KING, GameState, Side


def is_valid_move(card_rank: int, target_top_rank: int | None) -> bool:
    """
    Can a card be placed on a center pile whose top is target_top_rank?

    Ranks must be adjacent, with Ace and King wrapping in both directions.
    An empty pile accepts anything. Equal ranks never stack.
    """
    if target_top_rank is None:
        return True
    if abs(card_rank - target_top_rank) == 1:
        return True
    return {card_rank, target_top_rank} == {ACE, KING}


def playable_piles(state: GameState, card_rank: int) -> list[int]:
    """Center pile indexes the card may be played on, in preference order."""
    return [
        idx for idx, top in enumerate(state.center_piles)
        if is_valid_move(card_rank, top)
    ]


def check_winner(state: GameState) -> Side | None:
    """
    The side whose layout is fully cleared, if any.

    The player is checked first. Spit-pile cards are not part of the
    win condition.
    """
    if state.player.layout_cleared:
        return Side.PLAYER
    if state.ai.layout_cleared:
        return Side.AI
    return None


def can_spit(state: GameState) -> bool:
    return bool(state.player.spit_pile) and bool(state.ai.spit_pile)


def has_center_play(state: GameState, side: Side) -> bool:
    for top in state.side_state(side).top_cards:
        if top is not None and playable_piles(state, top):
            return True
    return False


def has_relocation(state: GameState, side: Side) -> bool:
    """An empty stack plus a donor stack holding more than one card."""
    layout = state.side_state(side).layout
    return any(s.is_empty for s in layout) and any(s.count > 1 for s in layout)


def is_deadlocked(state: GameState) -> bool:
    """
    Nobody can make progress: no center play for either side, no
    relocation that uncovers a card for either side, and no spit
    transfer possible.

    Spit piles are never replenished, so this state is final; it is
    reported rather than resolved.
    """
    if state.is_over:
        return False
    if can_spit(state):
        return False
    if has_center_play(state, Side.PLAYER) or has_center_play(state, Side.AI):
        return False
    if has_relocation(state, Side.PLAYER) or has_relocation(state, Side.AI):
        return False
    return True
