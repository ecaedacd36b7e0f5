"""Encounter sequencing.

The EncounterManager owns the run state machine:

    IDLE --select_character--> SELECTING --> IN_COMBAT
    IN_COMBAT --enemy dies--> ENEMY_DEFEATED --(delay)--> IN_COMBAT | VICTORY
    IN_COMBAT --player dies--> DEFEATED --(delay)--> IDLE
    any --reset--> IDLE

It alone creates and tears down the current enemy and its attack loop. Deaths
arrive as immediately delivered ``CombatantDefeated`` events, so a transition
always happens before any other scheduled effect can fire.
"""

from typing import TYPE_CHECKING, Optional

from ...core.data import Campaign, EffectKind, RunPhase, Screen, RUN_PHASE_NAMES
from ...core.engine import RunState
from ...core.events import (
    CharacterSelected,
    CombatantDefeated,
    EncounterStarted,
    EnemyDefeated,
    EventType,
    GameOver,
    HealApplied,
    LogMessage,
    ManagerInitialized,
    RunPhaseChanged,
    RunReset,
    ScreenChanged,
    Victory,
)
from ..entities import create_encounter_enemy, create_player_for_class
from .log_manager import LogLevel

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager
    from ...core.events.events import GameEvent
    from ...core.engine.game_state import GameState
    from ..entities.combatant import Enemy
    from .combat_manager import CombatManager
    from .timeline_manager import TimelineManager


class EncounterManager:
    """Drives a run from character selection through the encounter list."""

    def __init__(
        self,
        game_state: "GameState",
        event_manager: "EventManager",
        timeline_manager: "TimelineManager",
        combat_manager: "CombatManager",
        campaign: Campaign,
    ):
        self.state = game_state
        self.event_manager = event_manager
        self.timeline_manager = timeline_manager
        self.combat_manager = combat_manager
        self.campaign = campaign
        self.settings = campaign.settings

        self._setup_event_subscriptions()

        self.event_manager.publish(
            ManagerInitialized(timeline_time=self._now(), manager_name="EncounterManager"),
            source="EncounterManager",
        )

    def _setup_event_subscriptions(self) -> None:
        self.event_manager.subscribe(
            EventType.COMBATANT_DEFEATED,
            self._handle_combatant_defeated,
            subscriber_name="EncounterManager.combatant_defeated",
        )

    def _now(self) -> int:
        return self.timeline_manager.now()

    def _emit_log(self, message: str, category: str = "SYSTEM",
                  level: LogLevel = LogLevel.INFO) -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                timeline_time=self._now(),
                message=message,
                category=category,
                level=level,
                source="EncounterManager",
            ),
            source="EncounterManager",
        )

    @property
    def run(self) -> Optional[RunState]:
        return self.state.run

    @property
    def phase(self) -> RunPhase:
        return self.state.phase

    # ============== Screens and Phases ==============

    def _show_screen(self, screen: Screen, force: bool = False) -> None:
        if self.state.screen == screen and not force:
            return
        self.state.screen = screen
        self.event_manager.publish(
            ScreenChanged(timeline_time=self._now(), screen=screen),
            source="EncounterManager",
        )

    def _set_phase(self, run: RunState, new_phase: RunPhase) -> None:
        old_phase = run.phase
        if old_phase == new_phase:
            return
        run.phase = new_phase
        self.event_manager.publish(
            RunPhaseChanged(timeline_time=self._now(), old_phase=old_phase, new_phase=new_phase),
            source="EncounterManager",
        )
        self._emit_log(
            f"Phase: {RUN_PHASE_NAMES[old_phase]} -> {RUN_PHASE_NAMES[new_phase]}",
            "DEBUG",
            LogLevel.DEBUG,
        )

    def show_welcome(self) -> None:
        self._show_screen(Screen.WELCOME, force=True)

    def open_character_select(self) -> bool:
        """Show the character selection screen. Only valid with no run active."""
        if self.state.run is not None:
            return False
        self._show_screen(Screen.CHARACTER_SELECT)
        return True

    # ============== Run Lifecycle ==============

    def select_character(self, class_id: str) -> bool:
        """Start a new run with a fresh player of the given class.

        Returns:
            True if the run started, False for an unknown class or when a run
            is already in progress
        """
        if self.state.run is not None:
            return False

        player = create_player_for_class(self.campaign, class_id)
        if player is None:
            return False

        run = RunState(player=player)
        self.state.run = run
        self.state.runs_started += 1
        self.event_manager.publish(
            RunPhaseChanged(timeline_time=self._now(), old_phase=RunPhase.IDLE,
                            new_phase=RunPhase.SELECTING),
            source="EncounterManager",
        )
        self.event_manager.publish(
            CharacterSelected(timeline_time=self._now(), player=player),
            source="EncounterManager",
        )

        self._start_encounter(run)
        return True

    def _start_encounter(self, run: RunState) -> None:
        """Bring in the enemy of the run's current encounter, or win the run."""
        if run.encounter_index >= len(self.campaign.encounters):
            self._victory(run)
            return

        encounter = self.campaign.encounters[run.encounter_index]
        enemy = create_encounter_enemy(encounter)
        run.current_enemy = enemy

        self.event_manager.publish(
            EncounterStarted(timeline_time=self._now(), encounter=encounter, enemy=enemy,
                             encounter_index=run.encounter_index),
            source="EncounterManager",
        )
        self._show_screen(Screen.GAME)
        self._set_phase(run, RunPhase.IN_COMBAT)
        self._emit_log(f"{enemy.name} appears!")

        self.timeline_manager.start_attack_loop(
            run, enemy, lambda: self.combat_manager.enemy_attack(run, enemy)
        )

    def _handle_combatant_defeated(self, event: "GameEvent") -> None:
        if not isinstance(event, CombatantDefeated):
            return

        run = self.state.run
        # Only the first death of a live fight counts
        if run is None or run.phase != RunPhase.IN_COMBAT:
            return

        enemy = run.current_enemy
        if event.combatant is run.player:
            self._player_defeated(run)
        elif enemy is not None and event.combatant is enemy:
            self._enemy_defeated(run, enemy)

    def _enemy_defeated(self, run: RunState, enemy: "Enemy") -> None:
        self.timeline_manager.stop_attack_loop(enemy)

        restored = run.player.heal(self.settings.victory_heal)
        if restored > 0:
            self.event_manager.publish(
                HealApplied(timeline_time=self._now(), target=run.player, amount=restored),
                source="EncounterManager",
            )

        self._emit_log(f"{enemy.name} defeated!")
        self._emit_log("You recover some health.")

        self.event_manager.publish(
            EnemyDefeated(timeline_time=self._now(), enemy=enemy,
                          encounter_index=run.encounter_index),
            source="EncounterManager",
        )

        run.encounter_index += 1
        self._set_phase(run, RunPhase.ENEMY_DEFEATED)

        self.timeline_manager.schedule_effect(
            run,
            self.settings.next_encounter_delay_ms,
            lambda: self._advance_encounter(run),
            EffectKind.TRANSITION,
            "Next encounter",
        )

    def _advance_encounter(self, run: RunState) -> None:
        if not self.state.is_current_run(run) or run.phase != RunPhase.ENEMY_DEFEATED:
            return
        self._start_encounter(run)

    def _victory(self, run: RunState) -> None:
        run.current_enemy = None
        self._set_phase(run, RunPhase.VICTORY)
        self.state.victories += 1

        self._emit_log("The dark portal has been sealed! Victory!")
        self.event_manager.publish(Victory(timeline_time=self._now()), source="EncounterManager")

        self.timeline_manager.schedule_effect(
            run,
            self.settings.victory_screen_delay_ms,
            lambda: self._show_victory_screen(run),
            EffectKind.TRANSITION,
            "Victory screen",
        )

    def _show_victory_screen(self, run: RunState) -> None:
        if self.state.is_current_run(run) and run.phase == RunPhase.VICTORY:
            self._show_screen(Screen.VICTORY)

    def _player_defeated(self, run: RunState) -> None:
        self.timeline_manager.stop_attack_loop(run.current_enemy)
        self._emit_log("You have been defeated!")
        self._set_phase(run, RunPhase.DEFEATED)
        self.state.defeats += 1

        self.timeline_manager.schedule_effect(
            run,
            self.settings.game_over_delay_ms,
            lambda: self._game_over(run),
            EffectKind.TRANSITION,
            "Game over",
        )

    def _game_over(self, run: RunState) -> None:
        if not self.state.is_current_run(run) or run.phase != RunPhase.DEFEATED:
            return
        self.event_manager.publish(GameOver(timeline_time=self._now()), source="EncounterManager")
        self.reset()

    def reset(self) -> None:
        """Tear down the current run, from any state, and return to IDLE."""
        run = self.state.run
        if run is not None:
            self.timeline_manager.stop_attack_loop(run.current_enemy)
            self.timeline_manager.cancel_run(run)
            old_phase = run.phase

            run.current_enemy = None
            run.shield_points = 0
            run.shield_expiry = None
            run.encounter_index = 0
            self.state.run = None

            self.event_manager.publish(
                RunPhaseChanged(timeline_time=self._now(), old_phase=old_phase,
                                new_phase=RunPhase.IDLE),
                source="EncounterManager",
            )

        self.event_manager.publish(RunReset(timeline_time=self._now()), source="EncounterManager")
        self._show_screen(Screen.WELCOME)
