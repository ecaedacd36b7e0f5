"""Component-based combatants.

A combatant is anything with hit points that can attack and take damage. The
class wraps an :class:`Entity` and exposes its component data as properties:

    combatant.hp, combatant.max_hp, combatant.is_alive   # frequent reads
    combatant.health.get_hp_percent()                    # component access

``Player`` adds two skills and per-action cooldowns; ``Enemy`` adds its base
damage, elite flag and the handle of its attack loop.
"""

from typing import TYPE_CHECKING, Optional, cast

from ...core.data import ComponentType, SkillInfo, Team
from ...core.entities import Entity
from .components import ActorComponent, CooldownComponent, HealthComponent

if TYPE_CHECKING:
    from ...core.engine.timeline import TimelineEntry


class Combatant:
    """Shared behaviour of the player and enemies."""

    def __init__(self, name: str, kind: str, team: Team, hp_max: int,
                 entity_id: Optional[str] = None):
        self.entity = Entity(entity_id)
        self.entity.add_component(ActorComponent(self.entity, name, kind, team))
        self.entity.add_component(HealthComponent(self.entity, hp_max))

    # ============== Component Access ==============

    @property
    def actor(self) -> ActorComponent:
        return cast(ActorComponent, self.entity.require_component(ComponentType.ACTOR))

    @property
    def health(self) -> HealthComponent:
        return cast(HealthComponent, self.entity.require_component(ComponentType.HEALTH))

    # ============== Core Properties ==============

    @property
    def combatant_id(self) -> str:
        return self.entity.entity_id

    @property
    def name(self) -> str:
        return self.actor.name

    @property
    def kind(self) -> str:
        return self.actor.kind

    @property
    def team(self) -> Team:
        return self.actor.team

    @property
    def hp(self) -> int:
        return self.health.hp_current

    @property
    def max_hp(self) -> int:
        return self.health.hp_max

    @property
    def is_alive(self) -> bool:
        return self.health.is_alive()

    # ============== Mutators ==============

    def take_damage(self, amount: int) -> bool:
        """Apply damage, clamped at 0.

        Returns:
            True if this hit left the combatant dead
        """
        self.health.take_damage(amount)
        return not self.is_alive

    def heal(self, amount: int) -> int:
        """Restore hit points, clamped at max_hp.

        Returns:
            Hit points actually restored
        """
        return self.health.heal(amount)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r}, {self.hp}/{self.max_hp})"


class Player(Combatant):
    """The player-controlled character."""

    def __init__(self, class_id: str, name: str, hp_max: int,
                 skills: tuple[SkillInfo, SkillInfo]):
        super().__init__(name, class_id, Team.PLAYER, hp_max)
        if len(skills) != 2:
            raise ValueError("A player needs exactly 2 skills")
        self.skills = tuple(skills)
        self.entity.add_component(CooldownComponent(self.entity))

    @property
    def class_id(self) -> str:
        return self.kind

    @property
    def cooldowns(self) -> CooldownComponent:
        return cast(CooldownComponent, self.entity.require_component(ComponentType.COOLDOWN))

    def skill(self, skill_index: int) -> Optional[SkillInfo]:
        """Skill in a slot, or None if there is no such slot."""
        if skill_index not in (0, 1):
            return None
        return self.skills[skill_index]


class Enemy(Combatant):
    """An encounter's opponent. Attacks on a fixed interval via its attack loop."""

    def __init__(self, kind: str, name: str, hp_max: int, base_damage: int,
                 is_elite: bool = False):
        super().__init__(name, kind, Team.ENEMY, hp_max)
        if base_damage <= 0:
            raise ValueError("Base damage must be positive")
        self.base_damage = base_damage
        self.is_elite = is_elite
        self.attack_loop: Optional["TimelineEntry"] = None

    @property
    def has_attack_loop(self) -> bool:
        return self.attack_loop is not None
