"""Combatant entities.

- components.py: Actor, Health and Cooldown components
- combatant.py: Combatant base plus Player and Enemy variants
- templates.py: Creation of fresh combatants from campaign templates
"""

from .components import ActorComponent, HealthComponent, CooldownComponent
from .combatant import Combatant, Player, Enemy
from .templates import create_player, create_player_for_class, create_enemy, create_encounter_enemy

__all__ = [
    "ActorComponent",
    "HealthComponent",
    "CooldownComponent",
    "Combatant",
    "Player",
    "Enemy",
    "create_player",
    "create_player_for_class",
    "create_enemy",
    "create_encounter_enemy",
]
