"""Core data structures and definitions.

This package contains fundamental data types and game definitions:
- game_enums.py: Centralized enums for teams, actions, phases and screens
- game_info.py: Static campaign data (classes, skills, encounters) and its loader
"""

from .game_enums import (
    Team,
    EffectType,
    ActionId,
    RunPhase,
    Screen,
    ComponentType,
    EffectKind,
    RUN_PHASE_NAMES,
)
from .game_info import (
    CombatSettings,
    SkillInfo,
    CharacterClassInfo,
    EnemyInfo,
    EncounterInfo,
    Campaign,
    DEFAULT_CAMPAIGN_PATH,
    load_campaign,
    parse_campaign,
)

__all__ = [
    "Team",
    "EffectType",
    "ActionId",
    "RunPhase",
    "Screen",
    "ComponentType",
    "EffectKind",
    "RUN_PHASE_NAMES",
    "CombatSettings",
    "SkillInfo",
    "CharacterClassInfo",
    "EnemyInfo",
    "EncounterInfo",
    "Campaign",
    "DEFAULT_CAMPAIGN_PATH",
    "load_campaign",
    "parse_campaign",
]
