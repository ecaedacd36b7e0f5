"""Game state management.

This module defines the explicit :class:`RunState` owned by the encounter
sequencer and the top-level :class:`GameState` that presentation code reads
from. Nothing here is global; each game instance has its own state, so several
simulated runs can live side by side.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from ..data.game_enums import RunPhase, Screen

if TYPE_CHECKING:
    from .timeline import TimelineEntry
    from ...game.entities.combatant import Enemy, Player


def _new_run_id() -> str:
    return f"run-{uuid.uuid4().hex[:8]}"


@dataclass
class RunState:
    """State of one attempt at the campaign, from character selection to its end."""

    player: "Player"
    run_id: str = field(default_factory=_new_run_id)
    current_enemy: Optional["Enemy"] = None
    encounter_index: int = 0
    shield_points: int = 0
    shield_expiry: Optional["TimelineEntry"] = None
    phase: RunPhase = RunPhase.SELECTING

    @property
    def in_combat(self) -> bool:
        return self.phase == RunPhase.IN_COMBAT

    @property
    def has_shield(self) -> bool:
        return self.shield_points > 0

    def is_current_enemy(self, enemy: Optional["Enemy"]) -> bool:
        return enemy is not None and self.current_enemy is enemy

    def fight_is_live(self, enemy: Optional["Enemy"] = None) -> bool:
        """Both sides alive, combat running, and (if given) enemy still current."""
        if not self.in_combat or self.current_enemy is None:
            return False
        if enemy is not None and not self.is_current_enemy(enemy):
            return False
        return self.player.is_alive and self.current_enemy.is_alive


@dataclass
class GameState:
    """Top level state: the active run plus what the presentation layer shows."""

    screen: Screen = Screen.WELCOME
    run: Optional[RunState] = None

    # Outcome counters across runs of this game instance
    runs_started: int = 0
    victories: int = 0
    defeats: int = 0

    # Written by the LogManager for display
    log_data: dict[str, Any] = field(default_factory=dict)

    @property
    def phase(self) -> RunPhase:
        return self.run.phase if self.run is not None else RunPhase.IDLE

    def is_current_run(self, run: Optional[RunState]) -> bool:
        return run is not None and self.run is run
