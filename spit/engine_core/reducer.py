"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action() or the transition
functions below, each of which returns a new GameState.

Design principles:
- (state, action) -> new_state; the input state is never modified
- Validates phase and indexes before applying
- Move legality is the caller's job (click handling and bots check it
  with is_valid_move first); play_card trusts its caller
- Every mutation ends with the terminal check
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass

from .state import (
    GameState,
    GamePhase,
    Selection,
    Side,
    NUM_STACKS,
    NUM_CENTER_PILES,
)
from .action import Action, ActionType, ActionResult, ErrorCode
from .rules import check_winner, playable_piles

logger = logging.getLogger(__name__)

SPIT_EMPTY_STATUS = "Spit piles empty! (Reload to reset)"


# =============================================================================
# Transition functions
# =============================================================================

def resolve_terminal(state: GameState) -> GameState:
    """End the game in place if either layout has been cleared."""
    if state.is_over:
        return state
    winner = check_winner(state)
    if winner is not None:
        state.phase = GamePhase.GAME_OVER
        state.winner = winner
        state.selection = None
        state.status = state.outcome_message or ""
        logger.info("Game %s over: %s", state.game_id, state.status)
    return state


def play_card(state: GameState, side: Side, stack_index: int, center_index: int) -> GameState:
    """
    Move the top card of a stack onto a center pile.

    The previous pile resident is discarded for good. A player play
    abandons any pending selection. The stack must be non-empty.
    """
    new_state = state.clone()
    stack = new_state.side_state(side).stack(stack_index)
    card = stack.cards.pop()
    new_state.center_piles[center_index] = card
    new_state.move_count += 1

    if side is Side.PLAYER:
        new_state.selection = None

    return resolve_terminal(new_state)


def relocate_card(state: GameState, side: Side, stack_index: int, target_index: int) -> GameState:
    """Move the top card of one stack onto another (empty) stack."""
    new_state = state.clone()
    owner = new_state.side_state(side)
    card = owner.stack(stack_index).cards.pop()
    owner.stack(target_index).cards.append(card)
    new_state.move_count += 1

    if side is Side.PLAYER:
        new_state.selection = None

    return resolve_terminal(new_state)


def spit_both(state: GameState) -> GameState:
    """
    Reveal the front card of both spit piles onto the center piles.

    The player's spit feeds center pile 0, the AI's feeds pile 1. If
    either pile is empty nothing moves and only the status changes.
    """
    new_state = state.clone()
    if new_state.player.spit_pile and new_state.ai.spit_pile:
        new_state.center_piles[0] = new_state.player.spit_pile.pop(0)
        new_state.center_piles[1] = new_state.ai.spit_pile.pop(0)
        new_state.status = ""
    else:
        new_state.status = SPIT_EMPTY_STATUS
    return new_state


def handle_player_card_click(state: GameState, stack_index: int) -> GameState:
    """
    The player clicked the face-up card of a stack.

    Play it on the first center pile that accepts it; otherwise toggle
    the selection on that stack.
    """
    stack = state.player.stack(stack_index)
    card = stack.top_card
    if card is None:
        raise ValueError(f"Stack {stack_index} is empty")

    piles = playable_piles(state, card)
    if piles:
        return play_card(state, Side.PLAYER, stack_index, piles[0])

    new_state = state.clone()
    current = new_state.selection
    if current is not None and current.stack_index == stack_index:
        new_state.selection = None
    else:
        new_state.selection = Selection(stack_index=stack_index, rank=card)
    return new_state


def handle_empty_slot_click(state: GameState, target_index: int) -> GameState:
    """
    The player clicked an empty stack slot.

    With a selection active the selected card moves there; without one,
    or when the slot is occupied, nothing happens.
    """
    selection = state.selection
    if selection is None:
        return state
    if not state.player.stack(target_index).is_empty:
        return state

    if state.player.stack(selection.stack_index).is_empty:
        new_state = state.clone()
        new_state.selection = None
        return new_state

    return relocate_card(state, Side.PLAYER, selection.stack_index, target_index)


# =============================================================================
# Reducer
# =============================================================================

@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """
    record_history: bool = True

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            message, code = validation_error
            logger.warning("Rejected %s: %s", action.describe(), message)
            return ActionResult.failure(message, error_code=code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.NO_HANDLER,
            )

        try:
            result = handler(state, action)
        except (IndexError, ValueError) as e:
            logger.warning("Handler failed for %s: %s", action.describe(), e)
            return ActionResult.failure(str(e), error_code=ErrorCode.HANDLER_ERROR)

        if result.success and result.new_state is not None:
            if action.timestamp is None:
                action.timestamp = time.time()
            if self.record_history and result.new_state is not state:
                result.new_state.action_history.append(action)
            logger.debug("Applied %s", action.describe())
        return result

    def _validate_action(self, state: GameState, action: Action) -> tuple[str, ErrorCode] | None:
        """
        Validate phase and indexes.

        Returns (message, code) if invalid, None if valid.
        """
        if state.phase == GamePhase.GAME_OVER:
            return "Game is over - start a new game", ErrorCode.GAME_OVER

        if state.phase == GamePhase.SETUP and action.action_type != ActionType.SPIT:
            return "Game not started - only the opening spit is allowed", ErrorCode.GAME_NOT_STARTED

        payload = action.payload
        needs_side = {ActionType.PLAY_CARD, ActionType.RELOCATE, ActionType.PASS}
        if action.action_type in needs_side and payload.side is None:
            return f"{action.action_type.value} requires a side", ErrorCode.INVALID_STACK

        for name in ("stack_index", "target_index"):
            value = getattr(payload, name)
            if value is not None and not 0 <= value < NUM_STACKS:
                return f"{name} {value} out of range", ErrorCode.INVALID_STACK

        if payload.center_index is not None and not 0 <= payload.center_index < NUM_CENTER_PILES:
            return f"center_index {payload.center_index} out of range", ErrorCode.INVALID_STACK

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PLAY_CARD: self._handle_play_card,
            ActionType.RELOCATE: self._handle_relocate,
            ActionType.CARD_CLICK: self._handle_card_click,
            ActionType.SLOT_CLICK: self._handle_slot_click,
            ActionType.SPIT: self._handle_spit,
            ActionType.PASS: self._handle_pass,
        }
        return handlers.get(action_type)

    def _handle_play_card(self, state: GameState, action: Action) -> ActionResult:
        p = action.payload
        card = state.side_state(p.side).stack(p.stack_index).top_card
        new_state = play_card(state, p.side, p.stack_index, p.center_index)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{p.side.value} played {card} onto center {p.center_index}"],
        )

    def _handle_relocate(self, state: GameState, action: Action) -> ActionResult:
        p = action.payload
        if p.stack_index is None or p.target_index is None:
            return ActionResult.failure("Relocation needs source and target", ErrorCode.INVALID_STACK)
        owner = state.side_state(p.side)
        if owner.stack(p.stack_index).is_empty:
            return ActionResult.failure(f"Stack {p.stack_index} is empty", ErrorCode.EMPTY_STACK)
        if not owner.stack(p.target_index).is_empty:
            return ActionResult.failure(
                f"Stack {p.target_index} is not empty", ErrorCode.INVALID_STACK,
            )

        new_state = relocate_card(state, p.side, p.stack_index, p.target_index)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{p.side.value} moved a card from stack {p.stack_index} to {p.target_index}"],
        )

    def _handle_card_click(self, state: GameState, action: Action) -> ActionResult:
        index = action.payload.stack_index
        if index is None:
            return ActionResult.failure("Card click needs a stack", ErrorCode.INVALID_STACK)
        if state.player.stack(index).is_empty:
            return ActionResult.failure(f"Stack {index} is empty", ErrorCode.EMPTY_STACK)

        card = state.player.stack(index).top_card
        new_state = handle_player_card_click(state, index)
        if new_state.move_count > state.move_count:
            change = f"player played {card} from stack {index}"
        elif new_state.selection is None:
            change = f"player deselected stack {index}"
        else:
            change = f"player selected stack {index}"
        return ActionResult.success_with_state(new_state, changes=[change])

    def _handle_slot_click(self, state: GameState, action: Action) -> ActionResult:
        index = action.payload.target_index
        if index is None:
            return ActionResult.failure("Slot click needs a target", ErrorCode.INVALID_STACK)

        new_state = handle_empty_slot_click(state, index)
        changes = []
        if new_state.move_count > state.move_count:
            changes.append(f"player moved a card to stack {index}")
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_spit(self, state: GameState, action: Action) -> ActionResult:
        new_state = spit_both(state)
        changes = []
        if state.phase == GamePhase.SETUP:
            new_state.phase = GamePhase.PLAYING
            changes.append("opening spit started the game")
        if new_state.status != SPIT_EMPTY_STATUS:
            changes.append(f"spit revealed {new_state.center_piles[0]} and {new_state.center_piles[1]}")
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_pass(self, state: GameState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(state)


# Convenience function
def apply_action(state: GameState, action: Action) -> ActionResult:
    """Apply an action using a default reducer."""
    return Reducer().apply(state, action)
