"""
Unit tests for the TimelineManager.
"""

from unittest.mock import Mock

import pytest

from darkportal.core.data import CombatSettings, EffectKind
from darkportal.core.engine import RunState
from darkportal.core.events import LogMessage, TimelineProcessed
from darkportal.game.entities import Enemy, create_player
from darkportal.game.managers import LogLevel, TimelineManager

from conftest import collect_events, events_of


@pytest.fixture
def timeline_manager(game_state, event_manager):
    return TimelineManager(game_state, event_manager, CombatSettings())


@pytest.fixture
def run(campaign, game_state):
    run = RunState(player=create_player(campaign.get_class("human-knight")))
    game_state.run = run
    return run


@pytest.fixture
def enemy():
    return Enemy("goblin", "Goblin Scout", 50, 15)


class TestEffects:
    """Test one-shot effects owned by a run."""

    def test_effect_fires_at_its_time(self, timeline_manager, run):
        callback = Mock()
        timeline_manager.schedule_effect(run, 500, callback, EffectKind.ATTACK_RESOLUTION)

        timeline_manager.advance(499)
        callback.assert_not_called()

        assert timeline_manager.advance(1) == 1
        callback.assert_called_once()
        assert timeline_manager.current_time == 500

    def test_entry_tagged_with_run_and_kind(self, timeline_manager, run):
        entry = timeline_manager.schedule_effect(run, 600, Mock(), EffectKind.SKILL_HIT, "Dual Strike hit 1/2")

        assert entry.entity_id == run.run_id
        assert entry.entity_type == EffectKind.SKILL_HIT.value
        assert entry.action_description == "Dual Strike hit 1/2"

    def test_cancel_handle(self, timeline_manager, run):
        callback = Mock()
        entry = timeline_manager.schedule_effect(run, 100, callback, EffectKind.SHIELD_EXPIRY)

        assert timeline_manager.cancel(entry) is True
        assert timeline_manager.cancel(entry) is False
        assert timeline_manager.cancel(None) is False

        timeline_manager.advance(1000)
        callback.assert_not_called()

    def test_cancel_run_sweeps_everything(self, timeline_manager, run, enemy, game_state, campaign):
        other = RunState(player=create_player(campaign.get_class("fire-mage")))
        survivor = Mock()
        swept = Mock()

        timeline_manager.schedule_effect(run, 100, swept, EffectKind.ATTACK_RESOLUTION)
        timeline_manager.schedule_effect(run, 200, swept, EffectKind.TRANSITION)
        timeline_manager.start_attack_loop(run, enemy, swept)
        timeline_manager.schedule_effect(other, 100, survivor, EffectKind.ATTACK_RESOLUTION)

        assert timeline_manager.cancel_run(run) == 3
        assert timeline_manager.cancel_run(run) == 0

        timeline_manager.advance(10_000)
        swept.assert_not_called()
        survivor.assert_called_once()

    def test_events_flushed_after_each_entry(self, timeline_manager, run, event_manager):
        """Test sinks see an effect's events before the next effect fires."""
        seen = collect_events(event_manager)
        snapshots = []

        def emit(text):
            event_manager.publish(LogMessage(timeline_time=timeline_manager.now(), message=text,
                                             category="SYSTEM", level=LogLevel.INFO, source="test"))
            snapshots.append([event.message for event in events_of(seen, LogMessage)])

        timeline_manager.schedule_effect(run, 100, lambda: emit("first"), EffectKind.TRANSITION)
        timeline_manager.schedule_effect(run, 200, lambda: emit("second"), EffectKind.TRANSITION)
        timeline_manager.advance(300)

        # When the second effect ran, the first effect's event had already been delivered
        assert snapshots[1] == ["first"]

    def test_timeline_processed_published(self, timeline_manager, run, event_manager):
        seen = collect_events(event_manager)
        timeline_manager.schedule_effect(run, 100, Mock(), EffectKind.TRANSITION)
        timeline_manager.schedule_effect(run, 100, Mock(), EffectKind.TRANSITION)

        timeline_manager.advance(50)
        event_manager.process_events()
        assert events_of(seen, TimelineProcessed) == []

        timeline_manager.advance(50)
        event_manager.process_events()
        processed = events_of(seen, TimelineProcessed)
        assert len(processed) == 1
        assert processed[0].entries_processed == 2
        assert timeline_manager.get_stats()["total_entries_fired"] == 2

    def test_callback_error_propagates(self, timeline_manager, run):
        def explode():
            raise RuntimeError("boom")

        timeline_manager.schedule_effect(run, 10, explode, EffectKind.TRANSITION)

        with pytest.raises(RuntimeError, match="boom"):
            timeline_manager.advance(10)


class TestAttackLoops:
    """Test repeating enemy attack loops."""

    def test_loop_fires_every_interval(self, timeline_manager, run, enemy):
        tick = Mock()
        entry = timeline_manager.start_attack_loop(run, enemy, tick)

        assert enemy.attack_loop is entry
        assert entry.interval == 4000

        timeline_manager.advance(3999)
        assert tick.call_count == 0
        timeline_manager.advance(1)
        assert tick.call_count == 1
        timeline_manager.advance(8000)
        assert tick.call_count == 3

    def test_custom_interval(self, timeline_manager, run, enemy):
        tick = Mock()
        timeline_manager.start_attack_loop(run, enemy, tick, interval=1000)

        timeline_manager.advance(5000)
        assert tick.call_count == 5

    def test_restarting_replaces_old_loop(self, timeline_manager, run, enemy):
        """Test an enemy never owns two attack loops."""
        old_tick = Mock()
        new_tick = Mock()

        timeline_manager.start_attack_loop(run, enemy, old_tick)
        timeline_manager.start_attack_loop(run, enemy, new_tick)
        timeline_manager.advance(4000)

        old_tick.assert_not_called()
        new_tick.assert_called_once()
        assert timeline_manager.timeline.pending_count == 1

    def test_stop_loop(self, timeline_manager, run, enemy):
        tick = Mock()
        timeline_manager.start_attack_loop(run, enemy, tick)

        assert timeline_manager.stop_attack_loop(enemy) is True
        assert enemy.attack_loop is None
        assert timeline_manager.stop_attack_loop(enemy) is False
        assert timeline_manager.stop_attack_loop(None) is False

        timeline_manager.advance(20_000)
        tick.assert_not_called()

        stats = timeline_manager.get_stats()
        assert stats["attack_loops_started"] == 1
        assert stats["attack_loops_stopped"] == 1

    def test_loop_stopped_from_inside_its_tick(self, timeline_manager, run, enemy):
        calls = []

        def tick():
            calls.append(timeline_manager.now())
            timeline_manager.stop_attack_loop(enemy)

        timeline_manager.start_attack_loop(run, enemy, tick)
        timeline_manager.advance(20_000)

        assert calls == [4000]
        assert timeline_manager.timeline.is_empty
