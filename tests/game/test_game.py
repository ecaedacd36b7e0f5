"""
Tests for the Game facade: manager wiring, inbound commands and time.
"""

from unittest.mock import Mock

import pytest

from darkportal.core.data import ActionId, RunPhase, Screen
from darkportal.core.events import DamageDealt, ScreenChanged
from darkportal.game.game import Game

from conftest import collect_events, events_of


class TestInitialization:
    """Test manager creation and fail-fast access."""

    @pytest.mark.parametrize("manager_name", [
        "log_manager", "timeline_manager", "combat_manager", "encounter_manager",
    ])
    def test_managers_require_initialize(self, small_campaign, manager_name):
        game = Game(small_campaign, seed=1)

        with pytest.raises(RuntimeError, match="initialize"):
            getattr(game, manager_name)

    def test_initialize_is_idempotent(self, small_campaign):
        game = Game(small_campaign, seed=1)
        game.initialize()
        timeline_manager = game.timeline_manager

        game.initialize()

        assert game.timeline_manager is timeline_manager
        assert game.initialized

    def test_start_shows_welcome(self, small_campaign):
        game = Game(small_campaign, seed=1)
        sink = Mock()
        game.add_sink(sink)

        game.start()

        screens = [call.args[0] for call in sink.call_args_list if isinstance(call.args[0], ScreenChanged)]
        assert [event.screen for event in screens] == [Screen.WELCOME]
        assert game.screen == Screen.WELCOME
        assert game.phase == RunPhase.IDLE
        assert game.timeline_time == 0

    def test_bundled_campaign_by_default(self):
        game = Game(seed=3)
        assert "human-knight" in game.campaign.character_classes


class TestCommands:
    """Test inbound commands."""

    def test_commands_without_run(self, small_game):
        assert small_game.player_attack() is False
        assert small_game.player_use_skill(0) is False
        assert small_game.cooldown_remaining(ActionId.ATTACK) == 0

    def test_cooldown_remaining(self, small_game):
        small_game.open_character_select()
        small_game.select_character("tester")

        small_game.player_attack()
        assert small_game.cooldown_remaining(ActionId.ATTACK) == 2500

        small_game.update(1000)
        assert small_game.cooldown_remaining(ActionId.ATTACK) == 1500
        assert small_game.cooldown_remaining(ActionId.SKILL1) == 0

    def test_update_returns_fired_count(self, small_game):
        small_game.open_character_select()
        small_game.select_character("tester")
        small_game.player_use_skill(0)

        assert small_game.update(600) == 1
        assert small_game.update(300) == 1
        assert small_game.timeline_time == 900

    def test_toggle_debug(self, small_game):
        assert not small_game.log_manager.is_debug_enabled()
        small_game.toggle_debug()
        assert small_game.log_manager.is_debug_enabled()

    def test_sink_receives_events_in_order(self, small_game):
        events = collect_events(small_game.event_manager)
        small_game.open_character_select()
        small_game.select_character("tester")
        small_game.player_use_skill(0)
        small_game.update(1000)

        times = [event.timeline_time for event in events]
        assert times == sorted(times)

    def test_shutdown_drops_subscribers(self, small_game):
        sink = Mock()
        small_game.add_sink(sink)
        small_game.shutdown()
        sink.reset_mock()

        small_game.event_manager.publish(ScreenChanged(timeline_time=0, screen=Screen.GAME))
        small_game.event_manager.process_events()

        sink.assert_not_called()


class TestIndependentGames:
    """Test games never share state."""

    def test_two_games_side_by_side(self, small_campaign):
        first = Game(small_campaign, seed=5)
        second = Game(small_campaign, seed=5)
        first.start()
        second.start()

        first.open_character_select()
        first.select_character("tester")
        first.player_attack()
        first.update(500)

        assert second.run is None
        assert second.timeline_time == 0
        assert first.run.encounter_index == 1

    def test_same_seed_same_rolls(self, campaign):
        def play(seed):
            game = Game(campaign, seed=seed)
            game.start()
            events = collect_events(game.event_manager)
            game.open_character_select()
            game.select_character("human-knight")
            for _ in range(4):
                game.player_attack()
                game.update(2500)
            return [(event.source, event.amount) for event in events_of(events, DamageDealt)]

        assert play(11) == play(11)
