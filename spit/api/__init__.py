"""
API Module - Browser front-end interface.

Exposes the engine via REST API. The front end:
1. Starts a session (a fresh deal)
2. Renders the board projection
3. Posts card and slot clicks
4. Polls state while the AI timer runs, or drives /tick itself

All state is session-scoped. The only persisted value is the difficulty.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    StackClickRequest,
    SettingsRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    MoveResponse,
    SettingsResponse,
    ErrorResponse,
    # Shared
    SideInfo,
    StackInfo,
    CenterPileInfo,
    SelectionInfo,
    # Enums
    SessionStatus,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "StackClickRequest",
    "SettingsRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "MoveResponse",
    "SettingsResponse",
    "ErrorResponse",
    # Shared
    "SideInfo",
    "StackInfo",
    "CenterPileInfo",
    "SelectionInfo",
    # Enums
    "SessionStatus",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
