"""
Battle calculation system for damage rolls and shield absorption.

All randomness in a fight flows through one injected numpy Generator, so a
seeded game replays identically. The range helpers give the UI the same
numbers without rolling anything.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..core.data import CombatSettings, SkillInfo


@dataclass(frozen=True)
class ShieldAbsorption:
    """Outcome of pushing incoming damage through the shield."""
    blocked: int
    damage_through: int
    shield_left: int


class BattleCalculator:
    """Rolls damage for every attack type and resolves shield absorption."""

    def __init__(self, settings: CombatSettings, rng: Optional[np.random.Generator] = None):
        self.settings = settings
        self.rng = rng if rng is not None else np.random.default_rng()

    def roll_basic_attack(self) -> int:
        """Player basic attack: base minimum plus 0..spread-1 (10-29 by default)."""
        spread = self.settings.basic_attack_spread
        bonus = int(self.rng.integers(0, spread)) if spread > 0 else 0
        return self.settings.basic_attack_min + bonus

    def roll_skill_hits(self, skill: SkillInfo) -> list[int]:
        """Per-hit damage for a damage skill, one value per hit in order."""
        spread = self.settings.skill_damage_spread
        if spread > 0:
            bonuses = self.rng.integers(0, spread, size=skill.hit_count)
        else:
            bonuses = np.zeros(skill.hit_count, dtype=np.int64)
        return [int(skill.damage_per_hit + bonus) for bonus in bonuses]

    def roll_enemy_attack(self, base_damage: int) -> int:
        """Enemy attack: floor(r * base) + floor(base / 2) with r in [0, 1)."""
        return int(np.floor(self.rng.random() * base_damage)) + base_damage // 2

    @staticmethod
    def absorb(damage: int, shield: int) -> ShieldAbsorption:
        """Let the shield soak up to its value of incoming damage.

        Args:
            damage: Raw incoming damage
            shield: Current shield points

        Returns:
            How much was blocked, what passes through and what shield remains
        """
        blocked = min(damage, shield) if shield > 0 else 0
        return ShieldAbsorption(
            blocked=blocked,
            damage_through=damage - blocked,
            shield_left=shield - blocked,
        )
