"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player gestures (click a top card, click an empty slot)
2. Resolved moves (play a card, relocate a card)
3. System actions (spit transfer, AI pass)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Side


class ActionType(Enum):
    """Types of actions in the system."""
    # Resolved moves
    PLAY_CARD = "play_card"
    RELOCATE = "relocate"

    # Player gestures
    CARD_CLICK = "card_click"
    SLOT_CLICK = "slot_click"

    # System actions
    SPIT = "spit"
    PASS = "pass"


class ErrorCode(str, Enum):
    """Reasons an action was rejected."""
    GAME_OVER = "GAME_OVER"
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    INVALID_STACK = "INVALID_STACK"
    EMPTY_STACK = "EMPTY_STACK"
    NO_HANDLER = "NO_HANDLER"
    HANDLER_ERROR = "HANDLER_ERROR"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; validation
    happens in the reducer.
    """
    side: Side | None = None
    stack_index: int | None = None
    target_index: int | None = None  # destination stack for relocations
    center_index: int | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are logged for replay and applied atomically by the reducer.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None

    @classmethod
    def play_card(cls, side: Side, stack_index: int, center_index: int) -> Action:
        """Factory for a resolved center play."""
        return cls(
            action_type=ActionType.PLAY_CARD,
            payload=ActionPayload(
                side=side, stack_index=stack_index, center_index=center_index,
            ),
        )

    @classmethod
    def relocate(cls, side: Side, stack_index: int, target_index: int) -> Action:
        """Factory for moving a top card onto an empty stack."""
        return cls(
            action_type=ActionType.RELOCATE,
            payload=ActionPayload(
                side=side, stack_index=stack_index, target_index=target_index,
            ),
        )

    @classmethod
    def card_click(cls, stack_index: int) -> Action:
        """Factory for a player click on a face-up card."""
        return cls(
            action_type=ActionType.CARD_CLICK,
            payload=ActionPayload(side=Side.PLAYER, stack_index=stack_index),
        )

    @classmethod
    def slot_click(cls, target_index: int) -> Action:
        """Factory for a player click on an empty stack slot."""
        return cls(
            action_type=ActionType.SLOT_CLICK,
            payload=ActionPayload(side=Side.PLAYER, target_index=target_index),
        )

    @classmethod
    def spit(cls) -> Action:
        return cls(action_type=ActionType.SPIT)

    @classmethod
    def pass_turn(cls, side: Side) -> Action:
        return cls(action_type=ActionType.PASS, payload=ActionPayload(side=side))

    def describe(self) -> str:
        """Short human-readable form for logs and the API."""
        p = self.payload
        side = p.side.value if p.side else "table"
        if self.action_type == ActionType.PLAY_CARD:
            return f"{side}: stack {p.stack_index} -> center {p.center_index}"
        if self.action_type == ActionType.RELOCATE:
            return f"{side}: stack {p.stack_index} -> stack {p.target_index}"
        if self.action_type == ActionType.CARD_CLICK:
            return f"{side}: click stack {p.stack_index}"
        if self.action_type == ActionType.SLOT_CLICK:
            return f"{side}: click slot {p.target_index}"
        return f"{side}: {self.action_type.value}"


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if failed)
    - Human-readable changes (for UI updates)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None

    state_changes: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.state_changes)

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
