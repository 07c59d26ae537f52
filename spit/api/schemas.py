"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a browser front end and the
engine. The front end renders the board projection and posts clicks;
it never sees face-down cards, only their counts.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- INVALID_MOVE: The engine rejected the click or action
- GAME_OVER: The game has finished; start a new session
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from ..engine_core.state import NUM_STACKS
from ..settings import MIN_DIFFICULTY, MAX_DIFFICULTY


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_MOVE = "INVALID_MOVE"
    GAME_OVER = "GAME_OVER"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Board Projection
# =============================================================================

class StackInfo(BaseModel):
    """One layout stack as the front end draws it."""
    index: int
    card_count: int = 0
    face_down_count: int = 0
    top_rank: Optional[int] = None
    top_symbol: str = ""
    selected: bool = False
    playable: bool = Field(False, description="Top card fits a center pile")


class SideInfo(BaseModel):
    """A side's layout and spit pile size."""
    side: str
    stacks: list[StackInfo] = Field(default_factory=list)
    spit_count: int = 0
    layout_count: int = 0


class CenterPileInfo(BaseModel):
    """Top of one center pile."""
    index: int
    rank: Optional[int] = None
    symbol: str = ""


class SelectionInfo(BaseModel):
    """The player's pending card awaiting an empty slot."""
    stack_index: int
    rank: int
    symbol: str


class GameStateResponse(BaseModel):
    """Complete board projection for rendering."""
    session_id: str
    phase: str
    player: SideInfo
    ai: SideInfo
    center_piles: list[CenterPileInfo] = Field(default_factory=list)
    selection: Optional[SelectionInfo] = None
    winner: Optional[str] = None
    outcome: Optional[str] = Field(None, description="YOU WIN or AI WINS")
    status: str = ""
    move_count: int = 0
    deadlocked: bool = False
    tick_interval_ms: int


# =============================================================================
# Requests
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Start a new game."""
    difficulty: Optional[int] = Field(
        None,
        ge=MIN_DIFFICULTY,
        le=MAX_DIFFICULTY,
        description="Override the saved difficulty for this game",
    )
    random_seed: Optional[int] = Field(None, description="Seed for a reproducible deal")
    auto_tick: bool = Field(True, description="Run the AI on a server-side timer")


class StackClickRequest(BaseModel):
    """A click on a layout stack (face-up card or empty slot)."""
    stack_index: int = Field(..., ge=0, lt=NUM_STACKS)


class SettingsRequest(BaseModel):
    """Persist a new difficulty."""
    difficulty: int = Field(..., ge=MIN_DIFFICULTY, le=MAX_DIFFICULTY)


# =============================================================================
# Responses
# =============================================================================

class SessionResponse(BaseModel):
    """Session status and its current board."""
    session_id: str
    status: SessionStatus
    difficulty: int
    tick_interval_ms: int
    auto_tick: bool = False
    created_at: float
    game_state: Optional[GameStateResponse] = None


class MoveResponse(BaseModel):
    """Result of a click, spit, or AI tick."""
    session_id: str
    success: bool
    changes: list[str] = Field(default_factory=list)
    ai_action: Optional[str] = None
    status: str = ""
    winner: Optional[str] = None
    outcome: Optional[str] = None
    game_state: GameStateResponse


class SettingsResponse(BaseModel):
    """Saved settings."""
    difficulty: int
    tick_interval_ms: int


class ErrorResponse(BaseModel):
    """Error payload."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class SessionListResponse(BaseModel):
    sessions: list[str] = Field(default_factory=list)
    count: int = 0


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
