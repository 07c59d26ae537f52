"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a game state and the legal actions for its side and
returns a decision. The session's tick applies the decision through
the reducer.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.action import ActionType

if TYPE_CHECKING:
    from ..engine_core.state import GameState, Side
    from ..engine_core.action import Action

logger = logging.getLogger(__name__)


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for UI/debugging)
    - How many candidate actions were looked at
    """
    action: Action
    explanation: str = ""
    evaluated_actions: int = 0

    @property
    def is_pass(self) -> bool:
        return self.action.action_type == ActionType.PASS


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects actions.
    """

    @abstractmethod
    def select_action(
        self,
        state: GameState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current game state
            side: The side the bot plays
            legal_actions: Moves available to that side, in preference order

        Returns:
            BotDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class GreedyPolicy(BotPolicy):
    """
    The Spit opponent: play anything that fits, else free a face-down card.

    1. The first center play in scan order (pile 0 across all stacks,
       then pile 1; lower stacks first).
    2. Otherwise a relocation onto an empty stack, only ever from a
       stack with more than one card.
    3. Otherwise pass.
    """

    def select_action(
        self,
        state: GameState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        for preferred, why in (
            (ActionType.PLAY_CARD, "Played the first card that fits a center pile"),
            (ActionType.RELOCATE, "Moved a card to an empty stack to uncover another"),
        ):
            for index, action in enumerate(legal_actions):
                if action.action_type == preferred:
                    logger.debug("%s chose %s", self.get_name(), action.describe())
                    return BotDecision(
                        action=action,
                        explanation=why,
                        evaluated_actions=index + 1,
                    )

        pass_action = next(
            (a for a in legal_actions if a.action_type == ActionType.PASS),
            None,
        )
        if pass_action is None:
            raise ValueError("No playable, movable or pass action offered")
        return BotDecision(
            action=pass_action,
            explanation="Nothing to play or move",
            evaluated_actions=len(legal_actions),
        )
