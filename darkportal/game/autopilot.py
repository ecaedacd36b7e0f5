"""Autopilot strategy classes.

This module implements the Strategy design pattern for scripted players, used
by the simulation mode of the CLI and by integration tests. A strategy looks
at the current run and decides which command to issue next; the
:class:`Autopilot` drives a :class:`Game` with it on synthetic time.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from ..core.data import ActionId, EffectType, RunPhase

if TYPE_CHECKING:
    from ..core.engine.game_state import RunState
    from ..core.engine.cooldowns import CooldownTracker
    from .game import Game


class AutopilotType(Enum):
    """Available autopilot strategies."""
    AGGRESSIVE = auto()
    CAUTIOUS = auto()
    INACTIVE = auto()


class Command(Enum):
    WAIT = auto()
    ATTACK = auto()
    SKILL = auto()


@dataclass
class AutopilotDecision:
    """A command chosen by a strategy."""
    command: Command
    skill_index: Optional[int] = None
    reasoning: str = ""


class AutopilotStrategy(ABC):
    """Abstract base class for scripted player strategies."""

    @abstractmethod
    def choose_command(self, run: "RunState", cooldowns: "CooldownTracker") -> AutopilotDecision:
        """Choose the next command for the player.

        Args:
            run: The run being played
            cooldowns: Cooldown tracker to ask which actions are ready

        Returns:
            AutopilotDecision naming the command to issue
        """

    @abstractmethod
    def get_strategy_name(self) -> str:
        """Get the name of this strategy."""


def _ready_skills(run: "RunState", cooldowns: "CooldownTracker") -> list[int]:
    return [
        index for index in (0, 1)
        if not cooldowns.is_on_cooldown(run.player, ActionId.for_skill(index))
    ]


class AggressiveStrategy(AutopilotStrategy):
    """Uses damage skills whenever ready, otherwise attacks. Never defends."""

    def choose_command(self, run: "RunState", cooldowns: "CooldownTracker") -> AutopilotDecision:
        for index in _ready_skills(run, cooldowns):
            if run.player.skills[index].effect_type == EffectType.DAMAGE:
                return AutopilotDecision(Command.SKILL, index, "Damage skill ready")

        if not cooldowns.is_on_cooldown(run.player, ActionId.ATTACK):
            return AutopilotDecision(Command.ATTACK, reasoning="Attack ready")

        return AutopilotDecision(Command.WAIT, reasoning="Everything on cooldown")

    def get_strategy_name(self) -> str:
        return "Aggressive"


class CautiousStrategy(AutopilotStrategy):
    """Heals or shields when hurt, otherwise fights like the aggressive strategy."""

    def __init__(self, low_health: float = 0.5):
        self.low_health = low_health
        self._fallback = AggressiveStrategy()

    def choose_command(self, run: "RunState", cooldowns: "CooldownTracker") -> AutopilotDecision:
        hurt = run.player.health.get_hp_percent() <= self.low_health

        for index in _ready_skills(run, cooldowns):
            effect_type = run.player.skills[index].effect_type
            if effect_type == EffectType.HEAL and hurt:
                return AutopilotDecision(Command.SKILL, index, "Healing while hurt")
            if effect_type == EffectType.SHIELD and not run.has_shield:
                return AutopilotDecision(Command.SKILL, index, "Raising a shield")

        return self._fallback.choose_command(run, cooldowns)

    def get_strategy_name(self) -> str:
        return "Cautious"


class InactiveStrategy(AutopilotStrategy):
    """Never acts. Useful to watch the enemy win."""

    def choose_command(self, run: "RunState", cooldowns: "CooldownTracker") -> AutopilotDecision:
        return AutopilotDecision(Command.WAIT, reasoning="Inactive")

    def get_strategy_name(self) -> str:
        return "Inactive"


def create_strategy(autopilot_type: AutopilotType) -> AutopilotStrategy:
    """Create a strategy instance for the given type."""
    if autopilot_type == AutopilotType.AGGRESSIVE:
        return AggressiveStrategy()
    if autopilot_type == AutopilotType.CAUTIOUS:
        return CautiousStrategy()
    if autopilot_type == AutopilotType.INACTIVE:
        return InactiveStrategy()
    raise ValueError(f"Unknown autopilot type: {autopilot_type}")


@dataclass
class AutopilotResult:
    """How a simulated run ended."""
    outcome: str  # "victory", "defeat" or "timeout"
    elapsed_ms: int
    encounters_won: int
    commands_issued: int
    player_hp: int = 0


class Autopilot:
    """Plays one run of a game with a strategy on synthetic time."""

    def __init__(self, game: "Game", strategy: AutopilotStrategy, tick_ms: int = 100):
        if tick_ms <= 0:
            raise ValueError("Tick must be positive")
        self.game = game
        self.strategy = strategy
        self.tick_ms = tick_ms
        self.commands_issued = 0

    def _act(self) -> None:
        run = self.game.run
        if run is None or run.phase != RunPhase.IN_COMBAT:
            return

        decision = self.strategy.choose_command(run, self.game.combat_manager.cooldowns)
        if decision.command == Command.ATTACK:
            accepted = self.game.player_attack()
        elif decision.command == Command.SKILL and decision.skill_index is not None:
            accepted = self.game.player_use_skill(decision.skill_index)
        else:
            return

        if accepted:
            self.commands_issued += 1

    def play(self, class_id: str, max_time_ms: int = 600_000) -> AutopilotResult:
        """Select a character and play until the run ends or time runs out.

        Raises:
            ValueError: If the class id is unknown or a run is already active
        """
        game = self.game
        game.start()
        game.open_character_select()
        if not game.select_character(class_id):
            raise ValueError(f"Cannot start a run as '{class_id}'")

        run = game.run
        assert run is not None
        defeats_before = game.state.defeats
        elapsed = 0
        outcome = "timeout"

        while elapsed < max_time_ms:
            if game.phase == RunPhase.VICTORY:
                outcome = "victory"
                break
            if game.state.defeats > defeats_before:
                outcome = "defeat"
                break

            self._act()
            game.update(self.tick_ms)
            elapsed += self.tick_ms

        return AutopilotResult(
            outcome=outcome,
            elapsed_ms=elapsed,
            encounters_won=run.encounter_index,
            commands_issued=self.commands_issued,
            player_hp=run.player.hp,
        )
