"""Centralized game enums and constants.

This module contains all core game enums that are used across multiple modules,
eliminating duplication and providing a single source of truth.
"""

from enum import Enum, auto


class Team(Enum):
    """Sides of a fight."""
    PLAYER = 0
    ENEMY = 1


class EffectType(Enum):
    """What a skill does when it is used."""
    DAMAGE = "damage"
    HEAL = "heal"
    SHIELD = "shield"


class ActionId(Enum):
    """Player actions gated by their own cooldown."""
    ATTACK = "attack"
    SKILL1 = "skill1"
    SKILL2 = "skill2"

    @classmethod
    def for_skill(cls, skill_index: int) -> "ActionId":
        """Map a skill slot (0 or 1) to its cooldown action.

        Raises:
            ValueError: If the slot does not exist
        """
        if skill_index == 0:
            return cls.SKILL1
        if skill_index == 1:
            return cls.SKILL2
        raise ValueError(f"No skill slot {skill_index}")


class RunPhase(Enum):
    """States of the encounter sequencer."""
    IDLE = auto()
    SELECTING = auto()
    IN_COMBAT = auto()
    ENEMY_DEFEATED = auto()  # Transient, between two encounters
    DEFEATED = auto()        # Terminal for the run, resets after a delay
    VICTORY = auto()         # Terminal until an explicit reset


class Screen(Enum):
    """Screens the presentation layer is asked to show."""
    WELCOME = "welcome-screen"
    CHARACTER_SELECT = "character-select"
    GAME = "game-screen"
    VICTORY = "victory-screen"


class ComponentType(Enum):
    """Component types for the entity system."""
    ACTOR = auto()
    HEALTH = auto()
    COOLDOWN = auto()


class EffectKind(Enum):
    """Kinds of scheduled effects kept on the timeline."""
    ATTACK_RESOLUTION = "attack_resolution"
    SKILL_HIT = "skill_hit"
    SHIELD_EXPIRY = "shield_expiry"
    ENEMY_ATTACK_LOOP = "enemy_attack_loop"
    ENEMY_ATTACK_RESOLUTION = "enemy_attack_resolution"
    TRANSITION = "transition"


# Convenience mappings for display
RUN_PHASE_NAMES = {
    RunPhase.IDLE: "Idle",
    RunPhase.SELECTING: "Selecting",
    RunPhase.IN_COMBAT: "In Combat",
    RunPhase.ENEMY_DEFEATED: "Enemy Defeated",
    RunPhase.DEFEATED: "Defeated",
    RunPhase.VICTORY: "Victory",
}
