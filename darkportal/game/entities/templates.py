"""Combatant creation from campaign templates.

Character classes and encounter enemies are defined in the campaign YAML (see
:mod:`darkportal.core.data.game_info`). This module turns those immutable
records into fresh, mutable combatants. Enemies are instantiated anew every
time their encounter starts so no state carries over between fights.
"""

from typing import Optional

from ...core.data import Campaign, CharacterClassInfo, EncounterInfo, EnemyInfo
from .combatant import Enemy, Player


def create_player(class_info: CharacterClassInfo) -> Player:
    """Create a full-health player for a character class."""
    return Player(
        class_id=class_info.class_id,
        name=class_info.name,
        hp_max=class_info.hp,
        skills=class_info.skills,
    )


def create_player_for_class(campaign: Campaign, class_id: str) -> Optional[Player]:
    """Create a player by class id.

    Returns:
        The player, or None if the class id is unknown
    """
    class_info = campaign.get_class(class_id)
    if class_info is None:
        return None
    return create_player(class_info)


def create_enemy(enemy_info: EnemyInfo) -> Enemy:
    """Create a full-health enemy from its template (elite flag included)."""
    return Enemy(
        kind=enemy_info.kind,
        name=enemy_info.name,
        hp_max=enemy_info.hp,
        base_damage=enemy_info.damage,
        is_elite=enemy_info.is_elite,
    )


def create_encounter_enemy(encounter: EncounterInfo) -> Enemy:
    return create_enemy(encounter.enemy)
