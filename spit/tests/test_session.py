"""
Tests for sessions, the game loop and the AI timer.

Tests:
- Session lifecycle
- Clicks and ticks through GameLoop
- Terminal notification
- Timer-driven ticking
"""

import asyncio
import logging

from ..bots import BotPolicy
from ..engine_core.state import GamePhase, Side
from ..engine_core.action import ErrorCode
from ..session import AITimer, LoopState, SessionState
from ..settings import SpitSettings


class TestSessionManager:
    """Tests for session lifecycle."""

    def test_create_session_deals_a_game(self, session_manager):
        session = session_manager.create_session(random_seed=1)

        assert session.is_active()
        assert session.game_state.phase == GamePhase.PLAYING
        assert session.game_state.game_id == session.session_id

    def test_difficulty_read_from_settings(self, session_manager, settings_store):
        settings_store.save(SpitSettings(difficulty=9))
        session = session_manager.create_session()

        assert session.difficulty == 9
        assert session.interval_ms == 620

    def test_difficulty_defaults_to_five(self, session_manager):
        session = session_manager.create_session()
        assert session.interval_ms == 1500

    def test_explicit_difficulty_wins(self, session_manager, settings_store):
        settings_store.save(SpitSettings(difficulty=9))
        assert session_manager.create_session(difficulty=2).difficulty == 2

    def test_end_session(self, session_manager):
        session = session_manager.create_session()

        assert session_manager.end_session(session.session_id)
        assert session_manager.get_session(session.session_id) is None
        assert session.state == SessionState.GAME_OVER
        assert not session_manager.end_session(session.session_id)

    def test_abandoned_session(self, session_manager):
        session = session_manager.create_session()
        session_manager.end_session(session.session_id, reason="user_ended")
        assert session.state == SessionState.ABANDONED

    def test_list_active_sessions(self, session_manager):
        a = session_manager.create_session()
        b = session_manager.create_session()
        session_manager.end_session(a.session_id)

        assert session_manager.list_active_sessions() == [b.session_id]

    def test_cleanup_removes_idle_sessions(self, session_manager):
        session = session_manager.create_session()
        session.last_activity -= 7200

        assert session_manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
        assert session_manager.get_session(session.session_id) is None


class TestGameLoop:
    """Tests for the engine entry points."""

    def test_click_plays_card(self, session_manager, midgame_state):
        session = session_manager.create_session()
        session.game_state = midgame_state

        result = session.loop.click_card(0)

        assert result.success
        assert result.loop_state == LoopState.PLAYING
        assert session.game_state.center_piles == [3, 12]

    def test_select_then_move_to_empty_slot(self, session_manager, midgame_state):
        session = session_manager.create_session()
        session.game_state = midgame_state

        session.loop.click_card(1)
        assert session.game_state.selection is not None

        session.loop.click_slot(2)
        assert session.game_state.player.stack(2).cards == [9]
        assert session.game_state.selection is None

    def test_rejected_click_reports_error(self, session_manager, midgame_state):
        session = session_manager.create_session()
        session.game_state = midgame_state

        result = session.loop.click_card(2)

        assert not result.success
        assert result.error_code == ErrorCode.EMPTY_STACK
        assert session.game_state is midgame_state

    def test_tick_plays_for_ai(self, session_manager, build_state):
        session = session_manager.create_session()
        session.game_state = build_state(
            player_stacks=[[2], [2], [2], [2], [2]],
            ai_stacks=[[], [], [5], [6], [1]],
            center=(7, 99),
        )

        result = session.loop.tick()

        assert result.success
        assert result.ai_action == "ai: stack 3 -> center 0"
        assert session.game_state.center_piles == [6, 99]
        assert session.game_state.ai.stack(3).is_empty

    def test_tick_passes_when_stuck(self, session_manager, midgame_state):
        session = session_manager.create_session()
        session.game_state = midgame_state

        result = session.loop.tick()

        assert result.success
        assert result.ai_action == "ai: pass"
        assert session.game_state is midgame_state

    def test_ai_win_finishes_session(self, session_manager, build_state):
        session = session_manager.create_session()
        session.game_state = build_state(
            player_stacks=[[9], [], [], [], []],
            ai_stacks=[[], [], [], [], [11]],
            center=(4, 12),
        )

        result = session.loop.tick()

        assert result.winner == Side.AI
        assert result.outcome == "AI WINS"
        assert result.loop_state == LoopState.GAME_OVER
        assert session.state == SessionState.GAME_OVER

        # Further ticks are no-ops, further clicks are refused
        assert session.loop.tick().success
        click = session.loop.click_card(0)
        assert not click.success
        assert click.error_code == ErrorCode.GAME_OVER

    def test_deadlock_is_reported(self, session_manager, build_state):
        session = session_manager.create_session()
        session.game_state = build_state(
            player_stacks=[[9], [9], [9], [9], [9]],
            ai_stacks=[[5], [5], [5], [5], [5]],
            center=(1, 1),
        )

        result = session.loop.spit()

        assert result.success
        assert result.loop_state == LoopState.DEADLOCKED
        assert "Spit piles empty" in result.status

    def test_player_relocation_keeps_game_playing(self, session_manager, build_state):
        session = session_manager.create_session()
        session.game_state = build_state(
            player_stacks=[[2, 9], [], [9], [9], [9]],
            ai_stacks=[[5], [5], [5], [5], [5]],
            center=(1, 1),
        )

        result = session.loop.spit()
        assert result.loop_state == LoopState.PLAYING

        session.loop.click_card(0)
        moved = session.loop.click_slot(1)
        assert moved.success
        assert session.game_state.player.stack(0).top_card == 2

        played = session.loop.click_card(0)
        assert played.success
        assert session.game_state.center_piles[0] == 2

    def test_simulated_game_keeps_cards(self, session_manager):
        """Ticking a dealt game never creates or destroys layout cards."""
        session = session_manager.create_session(random_seed=5)
        start_total = session.game_state.card_total(Side.AI)

        plays = 0
        for _ in range(40):
            result = session.loop.tick()
            if result.ai_action and "center" in result.ai_action:
                plays += 1
            if result.winner:
                break

        assert session.game_state.card_total(Side.AI) == start_total - plays
        assert session.game_state.card_total(Side.PLAYER) == start_total


class BrokenPolicy(BotPolicy):
    """A bot whose every decision fails."""

    def select_action(self, state, side, legal_actions):
        raise ValueError("no decision")


class TestAITimer:
    """Tests for the asyncio scheduler."""

    def test_timer_ticks_until_limit(self, session_manager, midgame_state):
        session = session_manager.create_session()
        session.game_state = midgame_state
        timer = AITimer(session.loop, interval_ms=1, max_ticks=3)

        asyncio.run(timer.run())

        assert timer.ticks == 3

    def test_timer_stops_when_game_ends(self, session_manager, build_state):
        session = session_manager.create_session()
        session.game_state = build_state(
            player_stacks=[[9], [], [], [], []],
            ai_stacks=[[3, 10], [], [], [], []],
            center=(9, 2),
        )
        timer = AITimer(session.loop, interval_ms=1, max_ticks=50)

        asyncio.run(timer.run())

        assert session.game_state.winner == Side.AI
        assert timer.ticks == 2

    def test_start_and_stop_inside_event_loop(self, session_manager, midgame_state):
        session = session_manager.create_session()
        session.game_state = midgame_state
        timer = AITimer(session.loop, interval_ms=1)

        async def scenario():
            task = timer.start()
            assert timer.running
            await asyncio.sleep(0.02)
            timer.stop()
            await asyncio.gather(task, return_exceptions=True)
            return task

        task = asyncio.run(scenario())

        assert task.cancelled()
        assert not timer.running
        assert timer.ticks > 0

    def test_failed_tick_is_logged_and_stops_timer(self, session_manager, midgame_state, caplog):
        session = session_manager.create_session()
        session.game_state = midgame_state
        session.bot = BrokenPolicy()
        timer = AITimer(session.loop, interval_ms=1, max_ticks=5)

        with caplog.at_level(logging.ERROR, logger="spit.session.timer"):
            asyncio.run(timer.run())

        assert timer.ticks == 0
        assert not timer.running
        assert "AI tick failed" in caplog.text
        assert session.session_id in caplog.text
