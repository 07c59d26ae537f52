"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions and their AI timers
3. Projects GameState into render-ready schemas
4. Maps engine failures to API error codes

This layer is framework-agnostic; only create_app knows about FastAPI.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
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
from ..engine_core.action import ErrorCode as EngineErrorCode
from ..engine_core.rules import is_deadlocked, playable_piles
from ..engine_core.state import GameState, SideState, rank_symbol
from ..session import SessionManager, Session, AITimer, TurnResult
from ..settings import SettingsStore, SpitSettings, tick_interval_ms

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service for browser front ends.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest(auto_tick=False))
        move = service.click_card(session.session_id, 2)
        move = service.tick(session.session_id)
    """
    settings_store: SettingsStore = field(default_factory=SettingsStore)
    session_manager: SessionManager | None = None

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(settings_store=self.settings_store)

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """Deal a new game."""
        session = self.session_manager.create_session(
            difficulty=request.difficulty,
            random_seed=request.random_seed,
        )
        session.metadata["auto_tick"] = request.auto_tick
        return self._session_response(session)

    def start_timer(self, session_id: str) -> AITimer | None:
        """
        Start the AI timer for a session.

        Must be called from a running event loop.
        """
        session = self.session_manager.get_session(session_id)
        if not session or not session.is_active():
            return None
        if session.timer is None:
            session.timer = AITimer(session.loop, session.interval_ms)
        session.timer.start()
        return session.timer

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self.build_game_state(session)

    # =========================================================================
    # Gestures
    # =========================================================================

    def click_card(self, session_id: str, stack_index: int) -> MoveResponse | ErrorResponse:
        return self._run(session_id, lambda s: s.loop.click_card(stack_index))

    def click_slot(self, session_id: str, stack_index: int) -> MoveResponse | ErrorResponse:
        return self._run(session_id, lambda s: s.loop.click_slot(stack_index))

    def spit(self, session_id: str) -> MoveResponse | ErrorResponse:
        return self._run(session_id, lambda s: s.loop.spit())

    def tick(self, session_id: str) -> MoveResponse | ErrorResponse:
        return self._run(session_id, lambda s: s.loop.tick())

    def _run(self, session_id: str, step) -> MoveResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        result: TurnResult = step(session)
        if not result.success:
            code = (
                ErrorCode.GAME_OVER
                if result.error_code == EngineErrorCode.GAME_OVER
                else ErrorCode.INVALID_MOVE
            )
            return ErrorResponse(
                error="; ".join(result.errors) or "Action rejected",
                error_code=code,
                details={"engine_code": result.error_code.value} if result.error_code else None,
            )

        return MoveResponse(
            session_id=session_id,
            success=True,
            changes=result.changes,
            ai_action=result.ai_action,
            status=result.status,
            winner=result.winner.value if result.winner else None,
            outcome=result.outcome,
            game_state=self.build_game_state(session),
        )

    # =========================================================================
    # Settings
    # =========================================================================

    def get_settings(self) -> SettingsResponse:
        settings = self.settings_store.load()
        return SettingsResponse(
            difficulty=settings.difficulty,
            tick_interval_ms=settings.tick_interval_ms,
        )

    def update_settings(self, request: SettingsRequest) -> SettingsResponse:
        """Persist difficulty; running sessions keep the value they started with."""
        saved = self.settings_store.save(SpitSettings(difficulty=request.difficulty))
        return SettingsResponse(
            difficulty=saved.difficulty,
            tick_interval_ms=saved.tick_interval_ms,
        )

    # =========================================================================
    # Projection
    # =========================================================================

    def build_game_state(self, session: Session) -> GameStateResponse:
        state = session.game_state
        return GameStateResponse(
            session_id=session.session_id,
            phase=state.phase.value,
            player=self._side_info(state, state.player, show_selection=True),
            ai=self._side_info(state, state.ai, show_selection=False),
            center_piles=[
                CenterPileInfo(index=i, rank=rank, symbol=rank_symbol(rank))
                for i, rank in enumerate(state.center_piles)
            ],
            selection=SelectionInfo(
                stack_index=state.selection.stack_index,
                rank=state.selection.rank,
                symbol=rank_symbol(state.selection.rank),
            ) if state.selection else None,
            winner=state.winner.value if state.winner else None,
            outcome=state.outcome_message,
            status=state.status,
            move_count=state.move_count,
            deadlocked=is_deadlocked(state),
            tick_interval_ms=tick_interval_ms(session.difficulty),
        )

    def _side_info(self, state: GameState, owner: SideState, show_selection: bool) -> SideInfo:
        selected = state.selection.stack_index if show_selection and state.selection else None
        return SideInfo(
            side=owner.side.value,
            stacks=[
                StackInfo(
                    index=i,
                    card_count=stack.count,
                    face_down_count=stack.face_down_count,
                    top_rank=stack.top_card,
                    top_symbol=rank_symbol(stack.top_card),
                    selected=selected == i,
                    playable=(
                        stack.top_card is not None
                        and bool(playable_piles(state, stack.top_card))
                    ),
                )
                for i, stack in enumerate(owner.layout)
            ],
            spit_count=len(owner.spit_pile),
            layout_count=owner.layout_count,
        )

    def _session_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            difficulty=session.difficulty,
            tick_interval_ms=session.interval_ms,
            auto_tick=session.metadata.get("auto_tick", False),
            created_at=session.created_at,
            game_state=self.build_game_state(session),
        )

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )
