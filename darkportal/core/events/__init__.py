"""Event system for publisher-subscriber communication.

This package contains the complete event-driven architecture:
- event_manager.py: Publisher-subscriber event routing and coordination
- events.py: Event definitions for managers and presentation sinks
"""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .events import (
    GameEvent,
    EventType,
    TimelineProcessed,
    RunPhaseChanged,
    ScreenChanged,
    CharacterSelected,
    EncounterStarted,
    RunReset,
    DamageDealt,
    HealApplied,
    ShieldBlocked,
    ShieldChanged,
    CooldownStarted,
    SkillUsed,
    CombatantDefeated,
    EnemyDefeated,
    GameOver,
    Victory,
    LogMessage,
    DebugMessage,
    ManagerInitialized,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "GameEvent",
    "EventType",
    "TimelineProcessed",
    "RunPhaseChanged",
    "ScreenChanged",
    "CharacterSelected",
    "EncounterStarted",
    "RunReset",
    "DamageDealt",
    "HealApplied",
    "ShieldBlocked",
    "ShieldChanged",
    "CooldownStarted",
    "SkillUsed",
    "CombatantDefeated",
    "EnemyDefeated",
    "GameOver",
    "Victory",
    "LogMessage",
    "DebugMessage",
    "ManagerInitialized",
]
