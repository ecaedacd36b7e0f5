"""Timeline-based effect scheduling.

This module binds the raw :class:`Timeline` to the game: every scheduled effect
belongs either to a run (so a reset can sweep it away in one call) or to an
enemy's attack loop (so it can be cancelled by handle when the enemy dies).
Queued events are flushed after each fired entry so sinks observe them in the
order the effects happened.
"""

from typing import TYPE_CHECKING, Optional

from ...core.data import CombatSettings, EffectKind
from ...core.engine import EffectCallback, Timeline, TimelineEntry
from ...core.events import LogMessage, ManagerInitialized, TimelineProcessed
from .log_manager import LogLevel

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager
    from ...core.engine.game_state import GameState, RunState
    from ..entities.combatant import Enemy


class TimelineManager:
    """Owns the timeline and every delayed or repeating combat effect.

    Attack resolutions, skill hits, shield expiry, enemy attack loops and the
    pauses between encounters all go through here. Nothing blocks: the game
    loop calls :meth:`advance` with the elapsed time.
    """

    def __init__(
        self,
        game_state: "GameState",
        event_manager: "EventManager",
        settings: Optional[CombatSettings] = None,
        timeline: Optional[Timeline] = None,
    ):
        self.state = game_state
        self.event_manager = event_manager
        self.settings = settings or CombatSettings()
        self.timeline = timeline if timeline is not None else Timeline()

        # Timeline statistics
        self.total_entries_fired = 0
        self.attack_loops_started = 0
        self.attack_loops_stopped = 0

        self.event_manager.publish(
            ManagerInitialized(timeline_time=self.timeline.current_time,
                               manager_name="TimelineManager"),
            source="TimelineManager",
        )

    @property
    def current_time(self) -> int:
        return self.timeline.current_time

    def now(self) -> int:
        """Clock reading in ms, handed to the cooldown tracker."""
        return self.timeline.current_time

    def _emit_log(self, message: str, category: str = "TIMELINE",
                  level: LogLevel = LogLevel.DEBUG) -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                timeline_time=self.timeline.current_time,
                message=message,
                category=category,
                level=level,
                source="TimelineManager",
            ),
            source="TimelineManager",
        )

    def _bind(self, callback: EffectCallback) -> EffectCallback:
        """Wrap a callback so queued events are delivered right after it runs."""
        def fire() -> None:
            try:
                callback()
            finally:
                self.event_manager.process_events()
        return fire

    # ============== Scheduling ==============

    def schedule_effect(self, run: "RunState", delay: int, callback: EffectCallback,
                        kind: EffectKind, description: str = "") -> TimelineEntry:
        """Schedule a one-shot effect owned by a run.

        Args:
            run: Run the effect belongs to; resetting the run cancels it
            delay: Milliseconds from now
            callback: Effect to apply; it must re-check the run when it fires
            kind: What sort of effect this is, for previews and debugging
            description: Human readable description

        Returns:
            The cancel handle
        """
        return self.timeline.schedule(
            delay,
            self._bind(callback),
            entity_id=run.run_id,
            entity_type=kind.value,
            action_description=description or kind.value,
        )

    def start_attack_loop(self, run: "RunState", enemy: "Enemy", callback: EffectCallback,
                          interval: Optional[int] = None) -> TimelineEntry:
        """Start an enemy's repeating attack loop.

        Any loop the enemy already had is cancelled first, so an enemy never
        owns more than one.
        """
        self.stop_attack_loop(enemy)

        entry = self.timeline.schedule_repeating(
            interval or self.settings.enemy_attack_interval_ms,
            self._bind(callback),
            entity_id=run.run_id,
            entity_type=EffectKind.ENEMY_ATTACK_LOOP.value,
            action_description=f"{enemy.name} attack loop",
        )
        enemy.attack_loop = entry
        self.attack_loops_started += 1
        self._emit_log(f"Attack loop started for {enemy.name} every {entry.interval}ms")
        return entry

    def stop_attack_loop(self, enemy: Optional["Enemy"]) -> bool:
        """Cancel an enemy's attack loop and clear its handle.

        Returns:
            True if a live loop was cancelled, False if there was none
        """
        if enemy is None or enemy.attack_loop is None:
            return False

        handle = enemy.attack_loop
        enemy.attack_loop = None
        cancelled = self.timeline.cancel(handle)
        if cancelled:
            self.attack_loops_stopped += 1
            self._emit_log(f"Attack loop stopped for {enemy.name}")
        return cancelled

    def cancel(self, entry: Optional[TimelineEntry]) -> bool:
        if entry is None:
            return False
        return self.timeline.cancel(entry)

    def cancel_run(self, run: "RunState") -> int:
        """Cancel every pending effect owned by a run.

        Returns:
            Number of entries cancelled
        """
        removed_count = self.timeline.remove_entry(run.run_id)
        if removed_count:
            self._emit_log(f"Cancelled {removed_count} pending effects for {run.run_id}")
        return removed_count

    # ============== Processing ==============

    def advance(self, elapsed_ms: int) -> int:
        """Move the clock forward and fire everything that becomes due.

        Args:
            elapsed_ms: Milliseconds of game time that passed

        Returns:
            Number of entries fired
        """
        fired = self.timeline.advance(elapsed_ms)
        if fired:
            self.total_entries_fired += fired
            self.event_manager.publish(
                TimelineProcessed(timeline_time=self.timeline.current_time,
                                  entries_processed=fired),
                source="TimelineManager",
            )
            self._emit_log(f"Processed {fired} timeline entries")
        return fired

    def get_preview(self, count: int = 5) -> list[TimelineEntry]:
        return self.timeline.get_preview(count)

    def get_stats(self) -> dict:
        stats = self.timeline.get_stats()
        stats.update({
            "total_entries_fired": self.total_entries_fired,
            "attack_loops_started": self.attack_loops_started,
            "attack_loops_stopped": self.attack_loops_stopped,
        })
        return stats
