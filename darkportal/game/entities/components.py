"""Concrete components for combatants.

This module contains the component implementations every combatant is built
from: Actor (identity), Health (hit points) and, for the player, Cooldown.
"""

from typing import TYPE_CHECKING

from ...core.entities import Component
from ...core.data import ActionId, ComponentType, Team

if TYPE_CHECKING:
    from ...core.entities.components import Entity


class ActorComponent(Component):
    """Component for identity and classification.

    Handles who the combatant is: display name, kind (character class id or
    enemy kind) and which side it fights for.
    """

    def __init__(self, entity: "Entity", name: str, kind: str, team: Team):
        """Initialize actor component.

        Args:
            entity: The entity this component belongs to
            name: Display name
            kind: Character class id (``fire-mage``) or enemy kind (``goblin``)
            team: Team affiliation enum
        """
        super().__init__(entity)
        self.name = name
        self.kind = kind
        self.team = team

    def get_component_type(self) -> ComponentType:
        return ComponentType.ACTOR


class HealthComponent(Component):
    """Component for life and death management.

    Holds current and maximum hit points. ``take_damage`` and ``heal`` are the
    only mutators and both keep ``0 <= hp_current <= hp_max``.
    """

    def __init__(self, entity: "Entity", hp_max: int):
        """Initialize health component.

        Args:
            entity: The entity this component belongs to
            hp_max: Maximum hit points
        """
        super().__init__(entity)
        if hp_max <= 0:
            raise ValueError("Maximum HP must be positive")
        self.hp_max = hp_max
        self.hp_current = hp_max  # Start at full health

    def get_component_type(self) -> ComponentType:
        return ComponentType.HEALTH

    def is_alive(self) -> bool:
        """Check if hp_current > 0."""
        return self.hp_current > 0

    def get_hp_percent(self) -> float:
        """Get current health as a fraction of maximum (0.0 to 1.0)."""
        return self.hp_current / self.hp_max

    def take_damage(self, amount: int) -> int:
        """Apply damage.

        Args:
            amount: Amount of damage to apply

        Returns:
            Actual damage dealt (less than amount on overkill)
        """
        if amount < 0:
            raise ValueError("Damage amount cannot be negative")

        old_hp = self.hp_current
        self.hp_current = max(0, self.hp_current - amount)
        return old_hp - self.hp_current

    def heal(self, amount: int) -> int:
        """Apply healing.

        Args:
            amount: Amount of healing to apply

        Returns:
            Actual healing done (may be less due to max hp cap)
        """
        if amount < 0:
            raise ValueError("Healing amount cannot be negative")

        old_hp = self.hp_current
        self.hp_current = min(self.hp_max, self.hp_current + amount)
        return self.hp_current - old_hp


class CooldownComponent(Component):
    """Absolute expiry instants (ms) for each player action.

    Unused actions default to 0, i.e. never on cooldown.
    """

    def __init__(self, entity: "Entity"):
        super().__init__(entity)
        self.expiries: dict[ActionId, int] = {action: 0 for action in ActionId}

    def get_component_type(self) -> ComponentType:
        return ComponentType.COOLDOWN

    def get_expiry(self, action: ActionId) -> int:
        return self.expiries.get(action, 0)

    def set_expiry(self, action: ActionId, expiry: int) -> None:
        self.expiries[action] = expiry

    def reset(self) -> None:
        for action in self.expiries:
            self.expiries[action] = 0
