"""
Game State - The single explicit value the engine operates on.

Design principles:
- One value per game: layouts, spit piles, center piles and selection
- Copy-on-write: the reducer clones, mutates the clone, returns it
- Serializable: plain ints and lists, suitable for replays and the API
- Only the top card of a stack is ever inspected or moved
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from copy import deepcopy
from enum import Enum


NUM_STACKS = 5
NUM_CENTER_PILES = 2
HALF_DECK = 26

ACE = 1
KING = 13

RANK_SYMBOLS = {1: "A", 11: "J", 12: "Q", 13: "K"}


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "setup"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class Side(Enum):
    """The two participants."""
    PLAYER = "player"
    AI = "ai"


OUTCOME_MESSAGES = {
    Side.PLAYER: "YOU WIN",
    Side.AI: "AI WINS",
}


def rank_symbol(rank: int | None) -> str:
    """Display symbol for a rank; empty piles render as an empty string."""
    if not rank:
        return ""
    return RANK_SYMBOLS.get(rank, str(rank))


@dataclass
class Stack:
    """
    One layout stack. The last card is face up, the rest are face down.
    """
    cards: list[int] = field(default_factory=list)

    @property
    def top_card(self) -> int | None:
        """Get the face-up card of the stack."""
        return self.cards[-1] if self.cards else None

    @property
    def is_empty(self) -> bool:
        return len(self.cards) == 0

    @property
    def count(self) -> int:
        return len(self.cards)

    @property
    def face_down_count(self) -> int:
        return max(len(self.cards) - 1, 0)


def empty_layout() -> list[Stack]:
    return [Stack() for _ in range(NUM_STACKS)]


@dataclass
class SideState:
    """
    Cards owned by one side: the five-stack layout and the spit pile.

    The spit pile is drawn from the front.
    """
    side: Side
    layout: list[Stack] = field(default_factory=empty_layout)
    spit_pile: list[int] = field(default_factory=list)

    def stack(self, index: int) -> Stack:
        return self.layout[index]

    @property
    def top_cards(self) -> list[int | None]:
        return [s.top_card for s in self.layout]

    @property
    def layout_count(self) -> int:
        return sum(s.count for s in self.layout)

    @property
    def layout_cleared(self) -> bool:
        return all(s.is_empty for s in self.layout)

    @classmethod
    def from_stacks(
        cls,
        side: Side,
        stacks: list[list[int]],
        spit_pile: list[int] | None = None,
    ) -> SideState:
        """Build a side from raw rank lists (tests, replays)."""
        if len(stacks) != NUM_STACKS:
            raise ValueError(f"A layout has exactly {NUM_STACKS} stacks")
        return cls(
            side=side,
            layout=[Stack(cards=list(s)) for s in stacks],
            spit_pile=list(spit_pile or []),
        )


@dataclass
class Selection:
    """A player card with no legal center placement, awaiting an empty stack."""
    stack_index: int
    rank: int


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    game_id: str

    phase: GamePhase = GamePhase.SETUP

    player: SideState = field(default_factory=lambda: SideState(side=Side.PLAYER))
    ai: SideState = field(default_factory=lambda: SideState(side=Side.AI))

    # Each slot holds only the current top of that discard pile
    center_piles: list[int | None] = field(
        default_factory=lambda: [None] * NUM_CENTER_PILES
    )

    selection: Selection | None = None

    winner: Side | None = None
    status: str = ""
    move_count: int = 0

    # History (for replay and logging)
    action_history: list[Any] = field(default_factory=list)

    random_seed: int | None = None

    def side_state(self, side: Side) -> SideState:
        return self.player if side is Side.PLAYER else self.ai

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def outcome_message(self) -> str | None:
        if self.winner is None:
            return None
        return OUTCOME_MESSAGES[self.winner]

    def card_total(self, side: Side) -> int:
        """Cards still held by a side (layout plus spit pile)."""
        owner = self.side_state(side)
        return owner.layout_count + len(owner.spit_pile)

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
