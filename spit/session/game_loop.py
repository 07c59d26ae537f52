"""
Game Loop - The engine entry points a front end drives.

The loop:
1. The player clicks a face-up card or an empty slot
2. The engine plays, selects, or relocates
3. Independently, a scheduler calls tick() on the AI's interval
4. After every change the game may end; the loop reports the winner

tick() knows nothing about clocks: a real timer (AITimer), the /tick
endpoint, or a test calling it N times are all valid schedulers.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core.action import Action, ErrorCode
from ..engine_core.action_generator import legal_actions
from ..engine_core.reducer import Reducer
from ..engine_core.rules import is_deadlocked
from ..engine_core.state import Side

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    PLAYING = "playing"
    DEADLOCKED = "deadlocked"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of one entry-point call (click, spit, or tick).
    """
    success: bool
    loop_state: LoopState

    # Human-readable changes applied
    changes: list[str] = field(default_factory=list)

    # AI move taken on a tick
    ai_action: str | None = None

    errors: list[str] = field(default_factory=list)
    error_code: ErrorCode | None = None

    status: str = ""

    # Game over info
    winner: Side | None = None
    outcome: str | None = None


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)

        # Player gestures
        result = loop.click_card(2)
        result = loop.click_slot(0)

        # Scheduler
        result = loop.tick()

        if result.winner:
            show_outcome(result.outcome)
    """

    def __init__(self, session: Session, reducer: Reducer | None = None):
        self.session = session
        self.reducer = reducer or Reducer()

    @property
    def loop_state(self) -> LoopState:
        state = self.session.game_state
        if state.is_over:
            return LoopState.GAME_OVER
        if is_deadlocked(state):
            return LoopState.DEADLOCKED
        return LoopState.PLAYING

    def click_card(self, stack_index: int) -> TurnResult:
        """handlePlayerCardClick: play the card or toggle its selection."""
        return self._apply(Action.card_click(stack_index))

    def click_slot(self, target_index: int) -> TurnResult:
        """handleEmptySlotClick: move the selected card to an empty slot."""
        return self._apply(Action.slot_click(target_index))

    def spit(self) -> TurnResult:
        """Reveal fresh center cards from both spit piles."""
        return self._apply(Action.spit())

    def tick(self) -> TurnResult:
        """
        One AI step: play, relocate, or pass.

        A finished game ticks as a no-op.
        """
        state = self.session.game_state
        if state.is_over:
            return self._result(success=True)

        side = self.session.ai_side
        decision = self.session.bot.select_action(
            state, side, legal_actions(state, side),
        )
        if decision.is_pass:
            return self._result(success=True, ai_action=decision.action.describe())

        result = self._apply(decision.action)
        result.ai_action = decision.action.describe()
        return result

    def _apply(self, action: Action) -> TurnResult:
        was_over = self.session.game_state.is_over
        outcome = self.reducer.apply(self.session.game_state, action)

        if not outcome.success:
            return self._result(
                success=False,
                errors=[outcome.error] if outcome.error else [],
                error_code=outcome.error_code,
            )

        self.session.game_state = outcome.new_state
        self.session.touch()

        if self.session.game_state.is_over and not was_over:
            self.session.finish()

        return self._result(success=True, changes=outcome.state_changes)

    def _result(self, success: bool, **kwargs) -> TurnResult:
        state = self.session.game_state
        return TurnResult(
            success=success,
            loop_state=self.loop_state,
            status=state.status,
            winner=state.winner,
            outcome=state.outcome_message,
            **kwargs,
        )
