"""
Unit tests for the Timeline system.

Tests scheduling, ordering, cancellation and repeating entries of the
timeline that drives every delayed combat effect.
"""

from unittest.mock import Mock

import pytest

from darkportal.core.engine.timeline import Timeline, TimelineEntry


class TestTimelineEntry:
    """Test TimelineEntry functionality."""

    def test_entry_creation(self):
        """Test basic timeline entry creation."""
        entry = TimelineEntry(
            execution_time=500,
            entity_id="run-1",
            entity_type="attack_resolution",
            sequence_id=1
        )

        assert entry.execution_time == 500
        assert entry.entity_id == "run-1"
        assert entry.entity_type == "attack_resolution"
        assert not entry.is_repeating

    def test_entry_ordering_by_time(self):
        entry1 = TimelineEntry(execution_time=5, entity_id="a", sequence_id=2)
        entry2 = TimelineEntry(execution_time=10, entity_id="b", sequence_id=1)

        assert entry1 < entry2
        assert not entry2 < entry1

    def test_entry_ordering_by_sequence_id(self):
        """Test that entries with same time are ordered by sequence ID."""
        entry1 = TimelineEntry(execution_time=10, entity_id="a", sequence_id=1)
        entry2 = TimelineEntry(execution_time=10, entity_id="b", sequence_id=2)

        assert entry1 < entry2
        assert not entry2 < entry1

    def test_entry_equality(self):
        entry1 = TimelineEntry(execution_time=10, entity_id="a", sequence_id=1)
        entry2 = TimelineEntry(execution_time=10, entity_id="a", sequence_id=1)
        entry3 = TimelineEntry(execution_time=10, entity_id="a", sequence_id=2)

        assert entry1 == entry2
        assert entry1 != entry3


class TestTimeline:
    """Test Timeline functionality."""

    def test_timeline_creation(self, timeline):
        assert timeline.current_time == 0
        assert timeline.is_empty
        assert timeline.pending_count == 0

    def test_schedule_fires_after_delay(self, timeline):
        """Test a one-shot entry fires exactly when its delay has elapsed."""
        callback = Mock()
        timeline.schedule(500, callback, entity_id="run-1")

        assert timeline.advance(499) == 0
        callback.assert_not_called()

        assert timeline.advance(1) == 1
        callback.assert_called_once()
        assert timeline.is_empty

    def test_negative_delay_rejected(self, timeline):
        with pytest.raises(ValueError):
            timeline.schedule(-1, Mock(), entity_id="run-1")

    def test_advance_backwards_rejected(self, timeline):
        with pytest.raises(ValueError):
            timeline.advance(-10)

    def test_entries_fire_in_time_order(self, timeline):
        fired = []
        timeline.schedule(300, lambda: fired.append("late"), entity_id="x")
        timeline.schedule(100, lambda: fired.append("early"), entity_id="x")
        timeline.schedule(200, lambda: fired.append("middle"), entity_id="x")

        timeline.advance(1000)

        assert fired == ["early", "middle", "late"]

    def test_simultaneous_entries_fire_in_scheduling_order(self, timeline):
        fired = []
        for name in ("first", "second", "third"):
            timeline.schedule(100, lambda name=name: fired.append(name), entity_id="x")

        timeline.advance(100)

        assert fired == ["first", "second", "third"]

    def test_callback_sees_its_own_execution_time(self, timeline):
        """Test current_time equals the entry's time while it fires."""
        seen = []
        timeline.schedule(250, lambda: seen.append(timeline.current_time), entity_id="x")

        timeline.advance(1000)

        assert seen == [250]
        assert timeline.current_time == 1000

    def test_follow_up_inside_window_fires_same_advance(self, timeline):
        """Test effects scheduled by a callback fire if they fall inside the window."""
        fired = []

        def first():
            fired.append(("first", timeline.current_time))
            timeline.schedule(300, lambda: fired.append(("second", timeline.current_time)), entity_id="x")

        timeline.schedule(600, first, entity_id="x")
        timeline.advance(1000)

        assert fired == [("first", 600), ("second", 900)]

    def test_cancel_returns_true_exactly_once(self, timeline):
        callback = Mock()
        entry = timeline.schedule(100, callback, entity_id="x")

        assert timeline.cancel(entry) is True
        assert timeline.cancel(entry) is False

        timeline.advance(200)
        callback.assert_not_called()

    def test_cancel_after_firing_returns_false(self, timeline):
        entry = timeline.schedule(100, Mock(), entity_id="x")
        timeline.advance(100)

        assert timeline.cancel(entry) is False
        assert not timeline.is_pending(entry)

    def test_remove_entry_counts_only_matching_owner(self, timeline):
        timeline.schedule(100, Mock(), entity_id="run-a")
        timeline.schedule(200, Mock(), entity_id="run-a")
        timeline.schedule_repeating(1000, Mock(), entity_id="run-a")
        keep = timeline.schedule(100, Mock(), entity_id="run-b")

        assert timeline.remove_entry("run-a") == 3
        assert timeline.remove_entry("run-a") == 0
        assert timeline.pending_count == 1
        assert timeline.is_pending(keep)

    def test_add_entry_at_absolute_time(self, timeline):
        callback = Mock()
        timeline.add_entry(time=50, entity_id="x", callback=callback)

        timeline.advance(50)
        callback.assert_called_once()

    def test_advance_to(self, timeline):
        callback = Mock()
        timeline.schedule(700, callback, entity_id="x")

        timeline.advance_to(700)
        assert timeline.current_time == 700
        callback.assert_called_once()

        # Already past, nothing happens
        assert timeline.advance_to(100) == 0
        assert timeline.current_time == 700


class TestRepeatingEntries:
    """Test repeating entries used by enemy attack loops."""

    def test_repeating_fires_once_per_interval(self, timeline):
        callback = Mock()
        timeline.schedule_repeating(4000, callback, entity_id="run-1")

        timeline.advance(3999)
        assert callback.call_count == 0

        timeline.advance(1)
        assert callback.call_count == 1

        timeline.advance(4000 * 5)
        assert callback.call_count == 6

    def test_first_delay(self, timeline):
        callback = Mock()
        timeline.schedule_repeating(1000, callback, entity_id="x", first_delay=0)

        timeline.advance(0)
        assert callback.call_count == 1

    def test_invalid_interval(self, timeline):
        with pytest.raises(ValueError):
            timeline.schedule_repeating(0, Mock(), entity_id="x")

    def test_cancelled_loop_never_fires_again(self, timeline):
        callback = Mock()
        entry = timeline.schedule_repeating(1000, callback, entity_id="x")
        timeline.advance(2500)
        assert callback.call_count == 2

        assert timeline.cancel(entry)
        timeline.advance(10_000)

        assert callback.call_count == 2
        assert timeline.is_empty

    def test_loop_cancelled_from_its_own_callback(self, timeline):
        """Test a repeating entry that cancels itself is not rescheduled."""
        calls = []
        holder = {}

        def tick():
            calls.append(timeline.current_time)
            assert timeline.cancel(holder["entry"])

        holder["entry"] = timeline.schedule_repeating(1000, tick, entity_id="x")
        timeline.advance(10_000)

        assert calls == [1000]
        assert timeline.is_empty
        assert timeline.get_stats()["removed_entries"] == 0

    def test_remove_entry_from_inside_firing_loop(self, timeline):
        """Test bulk removal counts the loop entry that is currently firing."""
        removed = []

        def tick():
            removed.append(timeline.remove_entry("run-1"))

        timeline.schedule_repeating(1000, tick, entity_id="run-1")
        timeline.schedule(5000, Mock(), entity_id="run-1")
        timeline.advance(3000)

        assert removed == [2]
        assert timeline.is_empty


class TestTimelineMaintenance:
    """Test previews, statistics and cleanup."""

    def test_get_preview_skips_cancelled(self, timeline):
        first = timeline.schedule(100, Mock(), entity_id="x", action_description="first")
        timeline.schedule(200, Mock(), entity_id="x", action_description="second")
        timeline.schedule(300, Mock(), entity_id="x", action_description="third")
        timeline.cancel(first)

        preview = timeline.get_preview(5)

        assert [entry.action_description for entry in preview] == ["second", "third"]

    def test_peek_and_pop_next(self, timeline):
        timeline.schedule(300, Mock(), entity_id="a")
        timeline.schedule(100, Mock(), entity_id="b")

        assert timeline.peek_next().entity_id == "b"
        entry = timeline.pop_next()
        assert entry.entity_id == "b"
        assert timeline.current_time == 100
        assert timeline.pending_count == 1

    def test_cleanup_removed_entries(self, timeline):
        entries = [timeline.schedule(100 * i, Mock(), entity_id="x") for i in range(1, 5)]
        timeline.cancel(entries[0])
        timeline.cancel(entries[2])

        assert timeline.cleanup_removed_entries() == 2
        assert timeline.get_stats()["total_entries"] == 2

    def test_clear_keeps_old_handles_stale(self):
        """Test a handle from before clear() cannot cancel a newer entry."""
        timeline = Timeline()
        old = timeline.schedule(100, Mock(), entity_id="x")
        timeline.clear()

        callback = Mock()
        timeline.schedule(100, callback, entity_id="x")

        assert timeline.cancel(old) is False
        timeline.advance(100)
        callback.assert_called_once()
