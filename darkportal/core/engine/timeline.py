"""Timeline of scheduled combat effects.

This module implements the scheduler behind every delayed or repeating logical
effect in a fight: attack and skill resolution delays, multi-hit sequences,
shield expiry, the enemy attack loop and the pauses between encounters.

Core Concepts:
- Time is an integer number of milliseconds on a simulated clock
- Entries fire in (execution_time, sequence_id) order, so two effects due at
  the same instant fire in the order they were scheduled
- Every entry is its own cancelable handle; cancellation is lazy (entries are
  marked and skipped when they reach the head of the queue)
- Repeating entries are pushed back after each firing unless they were
  cancelled, possibly from inside their own callback
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Any, Callable, Optional


EffectCallback = Callable[[], None]


@dataclass
class TimelineEntry:
    """A scheduled effect on the timeline.

    The entry doubles as the handle returned to callers; pass it back to
    :meth:`Timeline.cancel` to cancel it.
    """

    # When this entry should fire (ms)
    execution_time: int

    # Owner used for bulk cancellation (run id, enemy id, ...)
    entity_id: str
    entity_type: str = "effect"

    # Unique ID for stable sorting when times are equal
    sequence_id: int = 0

    # What to run when the entry fires
    callback: Optional[EffectCallback] = None

    # Set for repeating entries
    interval: Optional[int] = None

    # Description for debugging and previews
    action_description: str = ""

    @property
    def is_repeating(self) -> bool:
        return self.interval is not None

    def __lt__(self, other: "TimelineEntry") -> bool:
        """Define ordering for heap queue.

        Primary: execution_time (earlier times first)
        Secondary: sequence_id (stable ordering for simultaneous events)
        """
        if self.execution_time != other.execution_time:
            return self.execution_time < other.execution_time
        return self.sequence_id < other.sequence_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimelineEntry):
            return NotImplemented
        return (self.execution_time == other.execution_time and
                self.sequence_id == other.sequence_id)


class Timeline:
    """Priority queue of delayed and repeating effects on a simulated clock.

    Nothing here ever blocks: callers move the clock forward with
    :meth:`advance` and every entry due inside that window fires in order.
    Callbacks may schedule or cancel entries while the timeline is advancing.
    """

    def __init__(self):
        self._queue: list[TimelineEntry] = []
        self._current_time: int = 0
        self._sequence_counter: int = 0
        self._removed_entries: set[int] = set()  # Track removed sequence IDs
        self._active_entries: set[int] = set()   # Scheduled and not yet fired/cancelled
        self._firing: Optional[TimelineEntry] = None

    @property
    def current_time(self) -> int:
        """Get the current timeline time in ms."""
        return self._current_time

    @property
    def is_empty(self) -> bool:
        """Check if the timeline has any pending entries."""
        return not self._active_entries

    @property
    def pending_count(self) -> int:
        return len(self._active_entries)

    def now(self) -> int:
        """Clock reading, usable as a callable for cooldown tracking."""
        return self._current_time

    def schedule(self,
                 delay: int,
                 callback: EffectCallback,
                 entity_id: str,
                 entity_type: str = "effect",
                 action_description: str = "") -> TimelineEntry:
        """Schedule a one-shot callback ``delay`` ms from now.

        Returns:
            The created timeline entry (its cancel handle)
        """
        if delay < 0:
            raise ValueError("Delay cannot be negative")

        return self._push(TimelineEntry(
            execution_time=self._current_time + delay,
            entity_id=entity_id,
            entity_type=entity_type,
            sequence_id=self._get_next_sequence_id(),
            callback=callback,
            action_description=action_description,
        ))

    def schedule_repeating(self,
                           interval: int,
                           callback: EffectCallback,
                           entity_id: str,
                           entity_type: str = "effect",
                           action_description: str = "",
                           first_delay: Optional[int] = None) -> TimelineEntry:
        """Schedule a callback every ``interval`` ms until cancelled.

        Args:
            interval: Time between firings
            callback: What to run on each firing
            entity_id: Owner used for bulk cancellation
            entity_type: Kind of entry, for debugging
            action_description: Description of what will happen
            first_delay: Delay before the first firing (defaults to interval)

        Returns:
            The created timeline entry (its cancel handle)
        """
        if interval <= 0:
            raise ValueError("Interval must be positive")
        delay = interval if first_delay is None else first_delay
        if delay < 0:
            raise ValueError("Delay cannot be negative")

        return self._push(TimelineEntry(
            execution_time=self._current_time + delay,
            entity_id=entity_id,
            entity_type=entity_type,
            sequence_id=self._get_next_sequence_id(),
            callback=callback,
            interval=interval,
            action_description=action_description,
        ))

    def add_entry(self,
                  time: int,
                  entity_id: str,
                  entity_type: str = "event",
                  action_description: str = "",
                  callback: Optional[EffectCallback] = None) -> TimelineEntry:
        """Add an entry at an absolute time.

        Entries in the past fire on the next advance.
        """
        return self._push(TimelineEntry(
            execution_time=time,
            entity_id=entity_id,
            entity_type=entity_type,
            sequence_id=self._get_next_sequence_id(),
            callback=callback,
            action_description=action_description,
        ))

    def cancel(self, entry: TimelineEntry) -> bool:
        """Cancel a scheduled entry.

        Returns:
            True if the entry was pending and is now cancelled, False if it had
            already fired or been cancelled
        """
        if entry.sequence_id not in self._active_entries:
            return False

        self._active_entries.discard(entry.sequence_id)
        self._removed_entries.add(entry.sequence_id)
        return True

    def is_pending(self, entry: TimelineEntry) -> bool:
        return entry.sequence_id in self._active_entries

    def remove_entry(self, entity_id: str) -> int:
        """Cancel all pending entries owned by an entity.

        Returns:
            Number of entries removed
        """
        candidates = list(self._queue)
        if self._firing is not None:
            candidates.append(self._firing)

        removed_count = 0
        for entry in candidates:
            if entry.entity_id == entity_id and self.cancel(entry):
                removed_count += 1

        return removed_count

    def peek_next(self) -> Optional[TimelineEntry]:
        """Get the next pending entry without removing it."""
        while self._queue:
            entry = self._queue[0]
            if entry.sequence_id in self._removed_entries:
                heapq.heappop(self._queue)
                self._removed_entries.discard(entry.sequence_id)
                continue
            return entry
        return None

    def pop_next(self) -> Optional[TimelineEntry]:
        """Remove and return the next pending entry without firing it.

        Updates current_time to the entry's execution_time.
        """
        entry = self.peek_next()
        if entry is None:
            return None

        heapq.heappop(self._queue)
        self._active_entries.discard(entry.sequence_id)
        self._current_time = max(self._current_time, entry.execution_time)
        return entry

    def advance(self, elapsed: int) -> int:
        """Move the clock forward, firing every entry that becomes due.

        Each entry fires with current_time set to its own execution_time, so
        callbacks scheduling follow-up effects get correct absolute times.
        Follow-ups that fall inside the window fire in the same call.

        Args:
            elapsed: Milliseconds to advance

        Returns:
            Number of entries fired
        """
        if elapsed < 0:
            raise ValueError("Cannot advance the timeline backwards")

        target_time = self._current_time + elapsed
        fired = 0

        while True:
            entry = self.peek_next()
            if entry is None or entry.execution_time > target_time:
                break

            heapq.heappop(self._queue)
            self._current_time = max(self._current_time, entry.execution_time)
            self._fire(entry)
            fired += 1

        self._current_time = target_time
        return fired

    def advance_to(self, time: int) -> int:
        """Advance the clock to an absolute time (no-op if already past it)."""
        return self.advance(max(0, time - self._current_time))

    def _fire(self, entry: TimelineEntry) -> None:
        if not entry.is_repeating:
            self._active_entries.discard(entry.sequence_id)
            if entry.callback is not None:
                entry.callback()
            return

        self._firing = entry
        try:
            if entry.callback is not None:
                entry.callback()
        finally:
            self._firing = None
            if entry.sequence_id in self._active_entries:
                entry.execution_time += entry.interval or 0
                heapq.heappush(self._queue, entry)
            else:
                # Cancelled from inside its own callback; nothing left to skip
                self._removed_entries.discard(entry.sequence_id)

    def get_preview(self, count: int) -> list[TimelineEntry]:
        """Get the next N pending entries in firing order."""
        preview = []
        temp_queue = self._queue.copy()

        while temp_queue and len(preview) < count:
            entry = heapq.heappop(temp_queue)
            if entry.sequence_id not in self._removed_entries:
                preview.append(entry)

        return preview

    def clear(self) -> None:
        """Clear all entries from the timeline and rewind the clock."""
        self._queue.clear()
        self._removed_entries.clear()
        self._active_entries.clear()
        self._current_time = 0

    def _push(self, entry: TimelineEntry) -> TimelineEntry:
        heapq.heappush(self._queue, entry)
        self._active_entries.add(entry.sequence_id)
        return entry

    def _get_next_sequence_id(self) -> int:
        """Get the next unique sequence ID for stable sorting."""
        self._sequence_counter += 1
        return self._sequence_counter

    def cleanup_removed_entries(self) -> int:
        """Rebuild the queue without removed entries.

        Returns:
            Number of entries actually removed from the queue
        """
        old_size = len(self._queue)

        self._queue = [entry for entry in self._queue
                       if entry.sequence_id not in self._removed_entries]
        heapq.heapify(self._queue)

        self._removed_entries.clear()

        return old_size - len(self._queue)

    def get_stats(self) -> dict[str, Any]:
        """Get timeline statistics for debugging/monitoring."""
        return {
            "current_time": self._current_time,
            "total_entries": len(self._queue),
            "active_entries": len(self._active_entries),
            "removed_entries": len(self._removed_entries),
            "sequence_counter": self._sequence_counter,
        }
