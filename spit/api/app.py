"""
FastAPI Application - REST API for a browser front end.

Endpoints:
    POST   /api/v1/sessions                        Start a game
    GET    /api/v1/sessions                        List active sessions
    GET    /api/v1/sessions/{id}                   Get session status
    DELETE /api/v1/sessions/{id}                   End session
    GET    /api/v1/sessions/{id}/state             Get board projection
    POST   /api/v1/sessions/{id}/card-click        Click a face-up card
    POST   /api/v1/sessions/{id}/slot-click        Click an empty slot
    POST   /api/v1/sessions/{id}/spit              Spit from both piles
    POST   /api/v1/sessions/{id}/tick              Run one AI tick
    GET    /api/v1/settings                        Saved difficulty
    PUT    /api/v1/settings                        Save difficulty

AI Execution:
    With auto_tick=true (default) the AI runs on a server-side timer at
    the session's interval and the front end polls /state. With
    auto_tick=false the front end drives the AI through /tick.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Union
import logging
import os

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from .service import APIService
from .schemas import (
    # Request models
    CreateSessionRequest,
    StackClickRequest,
    SettingsRequest,
    # Response models
    SessionResponse,
    GameStateResponse,
    MoveResponse,
    SettingsResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)
from ..settings import SettingsStore

logger = logging.getLogger(__name__)

# Environment configuration
SPIT_ENV = os.getenv("SPIT_ENV", "development")
SPIT_SETTINGS_PATH = os.getenv("SPIT_SETTINGS_PATH", None)
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service: APIService | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Spit API",
        description="""
Spit card game - one human against a timer-driven AI.

## Playing

1. `POST /api/v1/sessions` deals a game and seeds both center piles.
2. Render `game_state`; poll `GET /state` while the AI timer runs.
3. Send clicks on face-up cards to `/card-click` and on empty slots to
   `/slot-click`.
4. When `outcome` is set (`YOU WIN` / `AI WINS`) the game is over; start a
   new session to play again.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_MOVE` | The engine rejected the action |
| `GAME_OVER` | The game has finished |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(settings_store=SettingsStore(SPIT_SETTINGS_PATH))

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        status_code = {
            ErrorCode.SESSION_NOT_FOUND: 404,
            ErrorCode.GAME_OVER: 409,
        }.get(error.error_code, 400)
        return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))

    def respond(result):
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Start a new game",
    )
    async def create_session(body: CreateSessionRequest) -> SessionResponse:
        """
        Deal a new game.

        The difficulty comes from saved settings unless overridden; it is
        fixed for the life of the session.
        """
        response = api_service.create_session(body)
        if body.auto_tick:
            api_service.start_timer(response.session_id)
        return response

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a session, stop its AI timer and release it."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the board projection",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.get_game_state(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/card-click",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
        tags=["Game"],
        summary="Click a face-up card",
    )
    async def card_click(
        session_id: str,
        body: StackClickRequest,
    ) -> Union[MoveResponse, JSONResponse]:
        """
        Play the card on the first center pile that accepts it, or toggle
        its selection when neither does.
        """
        return respond(api_service.click_card(session_id, body.stack_index))

    @app.post(
        "/api/v1/sessions/{session_id}/slot-click",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
        tags=["Game"],
        summary="Click an empty stack slot",
    )
    async def slot_click(
        session_id: str,
        body: StackClickRequest,
    ) -> Union[MoveResponse, JSONResponse]:
        """Move the selected card here; no-op without a selection."""
        return respond(api_service.click_slot(session_id, body.stack_index))

    @app.post(
        "/api/v1/sessions/{session_id}/spit",
        response_model=MoveResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Spit from both spit piles",
    )
    async def spit(session_id: str) -> Union[MoveResponse, JSONResponse]:
        return respond(api_service.spit(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/tick",
        response_model=MoveResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Run one AI tick",
    )
    async def tick(session_id: str) -> Union[MoveResponse, JSONResponse]:
        return respond(api_service.tick(session_id))

    # =========================================================================
    # Settings
    # =========================================================================

    @app.get(
        "/api/v1/settings",
        response_model=SettingsResponse,
        tags=["Settings"],
        summary="Get saved settings",
    )
    async def get_settings() -> SettingsResponse:
        return api_service.get_settings()

    @app.put(
        "/api/v1/settings",
        response_model=SettingsResponse,
        tags=["Settings"],
        summary="Save settings",
    )
    async def update_settings(body: SettingsRequest) -> SettingsResponse:
        """Takes effect for the next session."""
        return api_service.update_settings(body)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="spit-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Spit API",
            "version": __version__,
            "env": SPIT_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn spit.api.app:app
app = create_app()
