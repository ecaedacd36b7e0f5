"""Event-driven system events.

This module defines every event the combat core emits, both for its own
managers and for presentation sinks (rendering, audio, menus).

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- All events include the timeline_time (ms) at which they were emitted
- Events use proper enums instead of magic strings
- Sinks only read events; they never feed state back except through commands
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING
from abc import ABC
from enum import Enum, auto

from ..data.game_enums import ActionId, RunPhase, Screen

if TYPE_CHECKING:
    from ..data.game_info import EncounterInfo, SkillInfo
    from ...game.entities.combatant import Combatant, Enemy, Player
    from ...game.managers.log_manager import LogLevel


class EventType(Enum):
    """Types of game events that managers and sinks can subscribe to."""
    # Timeline Events
    TIMELINE_PROCESSED = auto()

    # Run Lifecycle Events
    RUN_PHASE_CHANGED = auto()
    SCREEN_CHANGED = auto()
    CHARACTER_SELECTED = auto()
    ENCOUNTER_STARTED = auto()
    RUN_RESET = auto()

    # Combat Events
    DAMAGE_DEALT = auto()
    HEAL_APPLIED = auto()
    SHIELD_BLOCKED = auto()
    SHIELD_CHANGED = auto()
    COOLDOWN_STARTED = auto()
    SKILL_USED = auto()
    COMBATANT_DEFEATED = auto()  # Internal, delivered immediately to the sequencer
    ENEMY_DEFEATED = auto()

    # Outcome Events
    GAME_OVER = auto()
    VICTORY = auto()

    # Logging Events
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()

    # System Events
    MANAGER_INITIALIZED = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all game events."""
    timeline_time: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class TimelineProcessed(GameEvent):
    """Event emitted when the timeline fires one or more scheduled effects."""
    entries_processed: int

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.TIMELINE_PROCESSED)


@dataclass(frozen=True)
class RunPhaseChanged(GameEvent):
    """Event emitted when the encounter sequencer changes state."""
    old_phase: RunPhase
    new_phase: RunPhase

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.RUN_PHASE_CHANGED)


@dataclass(frozen=True)
class ScreenChanged(GameEvent):
    """Event asking the presentation layer to show another screen."""
    screen: Screen

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SCREEN_CHANGED)


@dataclass(frozen=True)
class CharacterSelected(GameEvent):
    """Event emitted when a run starts with a freshly created player."""
    player: "Player"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.CHARACTER_SELECTED)


@dataclass(frozen=True)
class EncounterStarted(GameEvent):
    """Event emitted when a new enemy enters the fight."""
    encounter: "EncounterInfo"
    enemy: "Enemy"
    encounter_index: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ENCOUNTER_STARTED)


@dataclass(frozen=True)
class RunReset(GameEvent):
    """Event emitted when the run state has been cleared."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.RUN_RESET)


@dataclass(frozen=True)
class DamageDealt(GameEvent):
    """Event emitted whenever hit points are removed from a combatant."""
    target: "Combatant"
    amount: int
    source: str  # "attack", "skill", "enemy", "self"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DAMAGE_DEALT)


@dataclass(frozen=True)
class HealApplied(GameEvent):
    """Event emitted when a combatant recovers hit points."""
    target: "Combatant"
    amount: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.HEAL_APPLIED)


@dataclass(frozen=True)
class ShieldBlocked(GameEvent):
    """Event emitted when the shield absorbs incoming damage."""
    amount: int
    remaining: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SHIELD_BLOCKED)


@dataclass(frozen=True)
class ShieldChanged(GameEvent):
    """Event emitted when shield points are granted or expire."""
    shield_points: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SHIELD_CHANGED)


@dataclass(frozen=True)
class CooldownStarted(GameEvent):
    """Event emitted when a player action goes on cooldown."""
    action: ActionId
    duration_ms: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COOLDOWN_STARTED)


@dataclass(frozen=True)
class SkillUsed(GameEvent):
    """Event emitted when a skill is cast (sound and animation cue)."""
    skill: "SkillInfo"
    skill_index: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SKILL_USED)


@dataclass(frozen=True)
class CombatantDefeated(GameEvent):
    """Event emitted the moment a combatant's hit points reach zero."""
    combatant: "Combatant"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANT_DEFEATED)


@dataclass(frozen=True)
class EnemyDefeated(GameEvent):
    """Event emitted after the sequencer has processed an enemy's death."""
    enemy: "Enemy"
    encounter_index: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ENEMY_DEFEATED)


@dataclass(frozen=True)
class GameOver(GameEvent):
    """Event emitted when the defeat delay has elapsed."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.GAME_OVER)


@dataclass(frozen=True)
class Victory(GameEvent):
    """Event emitted when the final encounter has been won."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.VICTORY)


# Logging Events
@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: "LogLevel"
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(GameEvent):
    """Event emitted for debug-specific messages."""
    message: str
    source: str
    context: Optional[dict] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)


# System Events
@dataclass(frozen=True)
class ManagerInitialized(GameEvent):
    """Event emitted when a manager is initialized."""
    manager_name: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.MANAGER_INITIALIZED)
