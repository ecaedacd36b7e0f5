"""Game managers.

- log_manager.py: Event-driven combat log with categories and filtering
- timeline_manager.py: Delayed and repeating effects, enemy attack loops
- combat_manager.py: Attacks, skills, shields and enemy attacks
- encounter_manager.py: Run state machine and encounter sequencing
"""

from .log_manager import LogManager, LogCategory, LogLevel, LogEntry
from .timeline_manager import TimelineManager
from .combat_manager import CombatManager
from .encounter_manager import EncounterManager

__all__ = [
    "LogManager",
    "LogCategory",
    "LogLevel",
    "LogEntry",
    "TimelineManager",
    "CombatManager",
    "EncounterManager",
]
