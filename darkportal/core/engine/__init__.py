"""Core game engine components.

This package contains the fundamental engine systems:
- timeline.py: Scheduler for delayed and repeating effects on a simulated clock
- cooldowns.py: Timestamp-based cooldown gating for player actions
- game_state.py: Explicit run state and top-level game state
"""

from .timeline import Timeline, TimelineEntry, EffectCallback
from .cooldowns import CooldownTracker, Clock
from .game_state import GameState, RunState

__all__ = [
    "Timeline",
    "TimelineEntry",
    "EffectCallback",
    "CooldownTracker",
    "Clock",
    "GameState",
    "RunState",
]
