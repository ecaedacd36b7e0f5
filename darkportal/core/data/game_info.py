"""Static campaign data and its YAML loader.

The character-class catalog, the ordered encounter list and the combat timing
settings live in ``assets/data/campaign.yaml``. They are loaded once at startup
and turned into frozen dataclasses so nothing downstream can mutate them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from typing import Any, Optional

import yaml

from .game_enums import EffectType


DEFAULT_CAMPAIGN_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
    "assets", "data", "campaign.yaml",
)


@dataclass(frozen=True)
class CombatSettings:
    """Timing and tuning constants for the combat core (milliseconds)."""

    attack_cooldown_ms: int = 2500
    attack_delay_ms: int = 500
    skill_delay_ms: int = 600
    hit_interval_ms: int = 300
    enemy_attack_interval_ms: int = 4000
    enemy_attack_delay_ms: int = 600
    basic_attack_min: int = 10
    basic_attack_spread: int = 20
    skill_damage_spread: int = 10
    victory_heal: int = 20
    next_encounter_delay_ms: int = 2000
    game_over_delay_ms: int = 1000
    victory_screen_delay_ms: int = 2000


@dataclass(frozen=True)
class SkillInfo:
    """Immutable skill definition copied onto a player at selection time."""

    name: str
    cooldown_ms: int
    effect_type: EffectType
    damage_per_hit: int = 0
    hit_count: int = 1
    self_damage: Optional[int] = None
    heal_amount: int = 0
    shield_amount: int = 0
    duration_seconds: float = 0
    sound: Optional[str] = None


@dataclass(frozen=True)
class CharacterClassInfo:
    """A selectable character class."""

    class_id: str
    name: str
    hp: int
    skills: tuple[SkillInfo, SkillInfo]


@dataclass(frozen=True)
class EnemyInfo:
    """Template an Enemy is instantiated from each time its encounter starts."""

    kind: str
    name: str
    hp: int
    damage: int
    is_elite: bool = False


@dataclass(frozen=True)
class EncounterInfo:
    """One scripted fight of the campaign."""

    title: str
    description: str
    enemy: EnemyInfo


@dataclass(frozen=True)
class Campaign:
    """Everything loaded from the campaign file."""

    character_classes: dict[str, CharacterClassInfo]
    encounters: tuple[EncounterInfo, ...]
    settings: CombatSettings = field(default_factory=CombatSettings)

    def get_class(self, class_id: str) -> Optional[CharacterClassInfo]:
        return self.character_classes.get(class_id)


# Settings where zero would stall or break the fight
POSITIVE_SETTINGS = frozenset({"enemy_attack_interval_ms"})


def _require_mapping(data: Any, where: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{where}: expected a mapping, got {type(data).__name__}")
    return data


def _require_positive_int(data: dict[str, Any], key: str, where: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{where}: '{key}' must be a positive integer, got {value!r}")
    return value


def _parse_skill(data: dict[str, Any], where: str) -> SkillInfo:
    data = _require_mapping(data, where)
    try:
        effect_type = EffectType(data["type"])
        name = str(data["name"])
    except KeyError as e:
        raise ValueError(f"{where}: missing key {e}")
    except ValueError:
        raise ValueError(f"{where}: unknown skill type {data.get('type')!r}")

    cooldown = _require_positive_int(data, "cooldown", where)
    sound = data.get("sound")

    if effect_type == EffectType.DAMAGE:
        hits = data.get("hits", 1)
        if isinstance(hits, bool) or not isinstance(hits, int) or hits < 1:
            raise ValueError(f"{where}: 'hits' must be >= 1, got {hits!r}")
        self_damage = data.get("self_damage")
        if self_damage is not None:
            self_damage = _require_positive_int(data, "self_damage", where)
        return SkillInfo(
            name=name,
            cooldown_ms=cooldown,
            effect_type=effect_type,
            damage_per_hit=_require_positive_int(data, "damage", where),
            hit_count=hits,
            self_damage=self_damage,
            sound=sound,
        )

    if effect_type == EffectType.HEAL:
        return SkillInfo(
            name=name,
            cooldown_ms=cooldown,
            effect_type=effect_type,
            heal_amount=_require_positive_int(data, "healing", where),
            sound=sound,
        )

    duration = data.get("duration")
    if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration <= 0:
        raise ValueError(f"{where}: 'duration' must be a positive number, got {duration!r}")
    return SkillInfo(
        name=name,
        cooldown_ms=cooldown,
        effect_type=effect_type,
        shield_amount=_require_positive_int(data, "shield", where),
        duration_seconds=duration,
        sound=sound,
    )


def _parse_class(class_id: str, data: dict[str, Any]) -> CharacterClassInfo:
    where = f"character_classes.{class_id}"
    data = _require_mapping(data, where)
    skills_data = data.get("skills") or []
    if not isinstance(skills_data, list) or len(skills_data) != 2:
        raise ValueError(f"{where}: exactly 2 skills required, got {skills_data!r}")

    skills = tuple(
        _parse_skill(skill, f"{where}.skills[{index}]")
        for index, skill in enumerate(skills_data)
    )
    return CharacterClassInfo(
        class_id=class_id,
        name=str(data.get("name", class_id)),
        hp=_require_positive_int(data, "hp", where),
        skills=skills,  # type: ignore[arg-type]
    )


def _parse_encounter(index: int, data: dict[str, Any]) -> EncounterInfo:
    where = f"encounters[{index}]"
    data = _require_mapping(data, where)
    enemy = data.get("enemy")
    if not isinstance(enemy, dict):
        raise ValueError(f"{where}: missing 'enemy' section")

    return EncounterInfo(
        title=str(data.get("title", f"Encounter {index + 1}")),
        description=str(data.get("description", "")),
        enemy=EnemyInfo(
            kind=str(enemy.get("kind", "enemy")),
            name=str(enemy.get("name", "Enemy")),
            hp=_require_positive_int(enemy, "hp", f"{where}.enemy"),
            damage=_require_positive_int(enemy, "damage", f"{where}.enemy"),
            is_elite=bool(enemy.get("elite", False)),
        ),
    )


def _parse_settings(data: dict[str, Any]) -> CombatSettings:
    data = _require_mapping(data, "combat")
    known = {f.name for f in fields(CombatSettings)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"combat: unknown settings {sorted(unknown)}")

    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"combat: '{key}' must be a non-negative integer, got {value!r}")
        if key in POSITIVE_SETTINGS and value == 0:
            raise ValueError(f"combat: '{key}' must be positive, got 0")
    return CombatSettings(**data)


def parse_campaign(data: dict[str, Any]) -> Campaign:
    """Build a Campaign from already-parsed YAML data.

    Raises:
        ValueError: If a section is missing or malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Campaign data must be a mapping")

    classes_data = data.get("character_classes")
    if not isinstance(classes_data, dict) or not classes_data:
        raise ValueError("Campaign needs a non-empty 'character_classes' section")

    encounters_data = data.get("encounters")
    if not isinstance(encounters_data, list) or not encounters_data:
        raise ValueError("Campaign needs a non-empty 'encounters' list")

    return Campaign(
        character_classes={
            class_id: _parse_class(class_id, class_data)
            for class_id, class_data in classes_data.items()
        },
        encounters=tuple(
            _parse_encounter(index, encounter)
            for index, encounter in enumerate(encounters_data)
        ),
        settings=_parse_settings(data.get("combat") or {}),
    )


def load_campaign(path: Optional[str] = None) -> Campaign:
    """Load the campaign from a YAML file.

    Args:
        path: Campaign file, defaults to the bundled ``campaign.yaml``

    Returns:
        The parsed Campaign

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML cannot be parsed or is malformed
    """
    file_path = path or DEFAULT_CAMPAIGN_PATH

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Campaign file not found: {file_path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML campaign: {e}")

    return parse_campaign(data)
