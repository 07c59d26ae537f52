"""
Engine Core - Deterministic game state management.

The engine is the runtime that:
1. Deals a new GameState
2. Answers legality questions
3. Generates a side's available moves
4. Applies actions via the reducer
5. Detects the end of the game
"""

from .state import (
    GameState,
    GamePhase,
    Side,
    SideState,
    Stack,
    Selection,
    rank_symbol,
    NUM_STACKS,
    NUM_CENTER_PILES,
)
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .rules import is_valid_move, check_winner, is_deadlocked
from .reducer import (
    Reducer,
    apply_action,
    play_card,
    relocate_card,
    spit_both,
    handle_player_card_click,
    handle_empty_slot_click,
)
from .action_generator import legal_actions, center_plays, safe_relocation
from .setup import setup_game, build_deck, shuffle_deck, split_deck, deal_layout

__all__ = [
    "GameState",
    "GamePhase",
    "Side",
    "SideState",
    "Stack",
    "Selection",
    "rank_symbol",
    "NUM_STACKS",
    "NUM_CENTER_PILES",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "is_valid_move",
    "check_winner",
    "is_deadlocked",
    "Reducer",
    "apply_action",
    "play_card",
    "relocate_card",
    "spit_both",
    "handle_player_card_click",
    "handle_empty_slot_click",
    "legal_actions",
    "center_plays",
    "safe_relocation",
    "setup_game",
    "build_deck",
    "shuffle_deck",
    "split_deck",
    "deal_layout",
]
