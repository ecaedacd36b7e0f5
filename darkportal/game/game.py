"""
Main game orchestration class.

This module wires the event system and the managers together and exposes the
inbound commands a presentation layer issues (select a character, attack, use
a skill, reset). Time only moves when :meth:`Game.update` is called, either
from a wall-clock loop or with synthetic elapsed time in simulations.
"""

from typing import Callable, Optional, TypeVar

import numpy as np

from ..core.data import ActionId, Campaign, RunPhase, Screen, load_campaign
from ..core.engine import GameState, RunState
from ..core.events import EventManager, GameEvent, LogMessage
from .battle_calculator import BattleCalculator
from .managers.combat_manager import CombatManager
from .managers.encounter_manager import EncounterManager
from .managers.log_manager import LogLevel, LogManager
from .managers.timeline_manager import TimelineManager


TManager = TypeVar("TManager")


class Game:
    """Combat core facade: one independent game per instance."""

    def __init__(
        self,
        campaign: Optional[Campaign] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        enable_debug_logging: bool = False,
    ):
        self.campaign = campaign if campaign is not None else load_campaign()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.state = GameState()

        # Event system
        self.event_manager = EventManager(enable_debug_logging=enable_debug_logging)

        # Managers - will be initialized in initialize()
        self._log_manager: Optional[LogManager] = None
        self._timeline_manager: Optional[TimelineManager] = None
        self._combat_manager: Optional[CombatManager] = None
        self._encounter_manager: Optional[EncounterManager] = None

        self.initialized = False

    # Properties for managers with fail-fast validation
    def _require_manager(self, manager: Optional[TManager], name: str) -> TManager:
        """Return the manager if initialized, otherwise raise a helpful error."""

        if manager is None:
            raise RuntimeError(f"{name} not initialized. Call initialize() first.")
        return manager

    @property
    def log_manager(self) -> LogManager:
        return self._require_manager(self._log_manager, "LogManager")

    @property
    def timeline_manager(self) -> TimelineManager:
        return self._require_manager(self._timeline_manager, "TimelineManager")

    @property
    def combat_manager(self) -> CombatManager:
        return self._require_manager(self._combat_manager, "CombatManager")

    @property
    def encounter_manager(self) -> EncounterManager:
        return self._require_manager(self._encounter_manager, "EncounterManager")

    def initialize(self) -> None:
        """Create every manager. Calling it again does nothing."""
        if self.initialized:
            return

        self._log_manager = LogManager(event_manager=self.event_manager, game_state=self.state)
        self.event_manager.set_debug_callback(self.log_manager.debug)

        settings = self.campaign.settings
        self._timeline_manager = TimelineManager(
            game_state=self.state,
            event_manager=self.event_manager,
            settings=settings,
        )
        self._combat_manager = CombatManager(
            game_state=self.state,
            event_manager=self.event_manager,
            timeline_manager=self.timeline_manager,
            settings=settings,
            calculator=BattleCalculator(settings, self.rng),
        )
        self._encounter_manager = EncounterManager(
            game_state=self.state,
            event_manager=self.event_manager,
            timeline_manager=self.timeline_manager,
            combat_manager=self.combat_manager,
            campaign=self.campaign,
        )

        self.initialized = True
        self._emit_log("Combat core initialized", "DEBUG", LogLevel.DEBUG)
        self.event_manager.process_events()

    def _emit_log(self, message: str, category: str = "SYSTEM",
                  level: LogLevel = LogLevel.INFO) -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                timeline_time=self.timeline_time,
                message=message,
                category=category,
                level=level,
                source="Game",
            ),
            source="Game",
        )

    def add_sink(self, sink: Callable[[GameEvent], None]) -> None:
        """Register a presentation sink that receives every event."""
        self.event_manager.subscribe_all(sink, subscriber_name=getattr(sink, "__name__", "sink"))

    def _flush(self) -> None:
        self.event_manager.process_events()

    # ============== Read-only accessors ==============

    @property
    def run(self) -> Optional[RunState]:
        return self.state.run

    @property
    def screen(self) -> Screen:
        return self.state.screen

    @property
    def phase(self) -> RunPhase:
        return self.state.phase

    @property
    def timeline_time(self) -> int:
        if self._timeline_manager is None:
            return 0
        return self._timeline_manager.current_time

    def cooldown_remaining(self, action: ActionId) -> int:
        """Milliseconds before a player action is ready (0 with no run)."""
        run = self.state.run
        if run is None:
            return 0
        return self.combat_manager.cooldowns.remaining(run.player, action)

    # ============== Inbound commands ==============

    def start(self) -> None:
        """Initialize if needed and show the welcome screen."""
        self.initialize()
        self.encounter_manager.show_welcome()
        self._flush()

    def open_character_select(self) -> bool:
        accepted = self.encounter_manager.open_character_select()
        self._flush()
        return accepted

    def select_character(self, class_id: str) -> bool:
        accepted = self.encounter_manager.select_character(class_id)
        self._flush()
        return accepted

    def player_attack(self) -> bool:
        run = self.state.run
        if run is None:
            return False
        accepted = self.combat_manager.basic_attack(run)
        self._flush()
        return accepted

    def player_use_skill(self, skill_index: int) -> bool:
        run = self.state.run
        if run is None:
            return False
        accepted = self.combat_manager.use_skill(run, skill_index)
        self._flush()
        return accepted

    def reset_game(self) -> None:
        self.encounter_manager.reset()
        self._flush()

    def toggle_debug(self) -> None:
        self.log_manager.toggle_debug()

    # ============== Time ==============

    def update(self, elapsed_ms: int) -> int:
        """Advance game time, firing every effect that becomes due.

        Args:
            elapsed_ms: Milliseconds that passed since the last update

        Returns:
            Number of timeline entries fired
        """
        self._flush()
        fired = self.timeline_manager.advance(elapsed_ms)
        self._flush()
        return fired

    def shutdown(self) -> None:
        self._flush()
        self.event_manager.shutdown()
