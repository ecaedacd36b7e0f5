"""Combat management system.

This module contains the CombatManager which resolves every player and enemy
action: cooldown gating, delayed resolution through the timeline, damage and
healing, the run's shield, and death signalling.

Every command is guarded and rejected silently (it returns False) when the
fight is not live or the action is on cooldown. Every delayed effect
re-checks the fight when it fires, since cancellation alone cannot rule out an
effect that was already in flight.
"""

from typing import TYPE_CHECKING, Optional

from ...core.data import ActionId, CombatSettings, EffectKind, EffectType, SkillInfo
from ...core.engine import CooldownTracker
from ...core.events import (
    CombatantDefeated,
    CooldownStarted,
    DamageDealt,
    HealApplied,
    LogMessage,
    ManagerInitialized,
    ShieldBlocked,
    ShieldChanged,
    SkillUsed,
)
from ..battle_calculator import BattleCalculator
from .log_manager import LogLevel

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager
    from ...core.engine.game_state import GameState, RunState
    from ..entities.combatant import Combatant, Enemy
    from .timeline_manager import TimelineManager


class CombatManager:
    """Resolves attacks, skills and enemy attacks for the current run."""

    def __init__(
        self,
        game_state: "GameState",
        event_manager: "EventManager",
        timeline_manager: "TimelineManager",
        settings: Optional[CombatSettings] = None,
        calculator: Optional[BattleCalculator] = None,
    ):
        self.state = game_state
        self.event_manager = event_manager
        self.timeline_manager = timeline_manager
        self.settings = settings or CombatSettings()
        self.calculator = calculator or BattleCalculator(self.settings)
        self.cooldowns = CooldownTracker(timeline_manager.now)

        self.event_manager.publish(
            ManagerInitialized(timeline_time=self._now(), manager_name="CombatManager"),
            source="CombatManager",
        )

    def _now(self) -> int:
        return self.timeline_manager.now()

    def _emit_log(self, message: str, category: str = "BATTLE",
                  level: LogLevel = LogLevel.INFO) -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                timeline_time=self._now(),
                message=message,
                category=category,
                level=level,
                source="CombatManager",
            ),
            source="CombatManager",
        )

    def _is_live(self, run: "RunState", enemy: Optional["Enemy"] = None) -> bool:
        """The run is current, in combat, both sides alive and the enemy unchanged."""
        return self.state.is_current_run(run) and run.fight_is_live(enemy)

    # ============== Player Commands ==============

    def basic_attack(self, run: "RunState") -> bool:
        """Start a basic attack on the current enemy.

        Returns:
            True if the attack was accepted, False if it was ignored
        """
        if not self._is_live(run):
            return False

        player = run.player
        if self.cooldowns.is_on_cooldown(player, ActionId.ATTACK):
            return False

        enemy = run.current_enemy
        assert enemy is not None
        self._start_cooldown(run, ActionId.ATTACK, self.settings.attack_cooldown_ms)

        self.timeline_manager.schedule_effect(
            run,
            self.settings.attack_delay_ms,
            lambda: self._resolve_basic_attack(run, enemy),
            EffectKind.ATTACK_RESOLUTION,
            f"{player.name} attacks {enemy.name}",
        )
        return True

    def use_skill(self, run: "RunState", skill_index: int) -> bool:
        """Use one of the player's two skills.

        Args:
            run: The run issuing the command
            skill_index: Skill slot, 0 or 1

        Returns:
            True if the skill was used, False if it was ignored
        """
        if not self._is_live(run):
            return False

        player = run.player
        skill = player.skill(skill_index)
        if skill is None:
            return False

        action = ActionId.for_skill(skill_index)
        if self.cooldowns.is_on_cooldown(player, action):
            return False

        self._start_cooldown(run, action, skill.cooldown_ms)
        self.event_manager.publish(
            SkillUsed(timeline_time=self._now(), skill=skill, skill_index=skill_index),
            source="CombatManager",
        )

        if skill.effect_type == EffectType.DAMAGE:
            self._cast_damage_skill(run, skill)
        elif skill.effect_type == EffectType.HEAL:
            self._cast_heal_skill(run, skill)
        elif skill.effect_type == EffectType.SHIELD:
            self._grant_shield(run, skill)
        return True

    def _start_cooldown(self, run: "RunState", action: ActionId, duration_ms: int) -> None:
        self.cooldowns.set_cooldown(run.player, action, duration_ms)
        self.event_manager.publish(
            CooldownStarted(timeline_time=self._now(), action=action, duration_ms=duration_ms),
            source="CombatManager",
        )

    # ============== Skill Effects ==============

    def _cast_damage_skill(self, run: "RunState", skill: SkillInfo) -> None:
        """Roll every hit now, log their sum, and schedule the hits."""
        enemy = run.current_enemy
        assert enemy is not None
        hits = self.calculator.roll_skill_hits(skill)

        for hit_number, damage in enumerate(hits):
            delay = self.settings.skill_delay_ms + hit_number * self.settings.hit_interval_ms
            self.timeline_manager.schedule_effect(
                run,
                delay,
                lambda damage=damage: self._resolve_skill_hit(run, enemy, damage),
                EffectKind.SKILL_HIT,
                f"{skill.name} hit {hit_number + 1}/{len(hits)}",
            )

        self._emit_log(f"You use {skill.name} for {sum(hits)} damage!", "PLAYER")

        if skill.self_damage:
            self._damage_player(run, skill.self_damage, "self")
            self._emit_log(f"You take {skill.self_damage} damage from the rage!", "SYSTEM")
            self._check_defeated(run.player)

    def _cast_heal_skill(self, run: "RunState", skill: SkillInfo) -> None:
        restored = run.player.heal(skill.heal_amount)
        self.event_manager.publish(
            HealApplied(timeline_time=self._now(), target=run.player, amount=restored),
            source="CombatManager",
        )
        self._emit_log(f"You heal for {skill.heal_amount} HP!", "PLAYER")

    def _grant_shield(self, run: "RunState", skill: SkillInfo) -> None:
        """Set the run's shield and replace any pending expiry with a new one."""
        self.timeline_manager.cancel(run.shield_expiry)
        run.shield_points = skill.shield_amount
        self.event_manager.publish(
            ShieldChanged(timeline_time=self._now(), shield_points=run.shield_points),
            source="CombatManager",
        )
        self._emit_log(f"You gain {skill.shield_amount} shield points!", "PLAYER")

        run.shield_expiry = self.timeline_manager.schedule_effect(
            run,
            int(skill.duration_seconds * 1000),
            lambda: self._expire_shield(run),
            EffectKind.SHIELD_EXPIRY,
            f"{skill.name} expires",
        )

    def _expire_shield(self, run: "RunState") -> None:
        run.shield_expiry = None
        if not self.state.is_current_run(run):
            return

        run.shield_points = 0
        self.event_manager.publish(
            ShieldChanged(timeline_time=self._now(), shield_points=0),
            source="CombatManager",
        )
        self._emit_log("Shield effect wears off.", "SYSTEM")

    # ============== Enemy Attacks ==============

    def enemy_attack(self, run: "RunState", enemy: "Enemy") -> bool:
        """Wind up an enemy attack; called on each tick of its attack loop.

        Returns:
            True if an attack was scheduled
        """
        if not self._is_live(run, enemy):
            return False

        self.timeline_manager.schedule_effect(
            run,
            self.settings.enemy_attack_delay_ms,
            lambda: self._resolve_enemy_attack(run, enemy),
            EffectKind.ENEMY_ATTACK_RESOLUTION,
            f"{enemy.name} attacks",
        )
        return True

    def _resolve_enemy_attack(self, run: "RunState", enemy: "Enemy") -> None:
        if not self._is_live(run, enemy):
            return

        damage = self.calculator.roll_enemy_attack(enemy.base_damage)

        if run.shield_points > 0:
            absorption = self.calculator.absorb(damage, run.shield_points)
            run.shield_points = absorption.shield_left
            damage = absorption.damage_through
            self.event_manager.publish(
                ShieldBlocked(timeline_time=self._now(), amount=absorption.blocked,
                              remaining=absorption.shield_left),
                source="CombatManager",
            )
            self._emit_log(f"Shield blocks {absorption.blocked} damage!", "SYSTEM")

        if damage > 0:
            self._damage_player(run, damage, "enemy")
            self._emit_log(f"{enemy.name} attacks for {damage} damage!", "ENEMY")
            self._check_defeated(run.player)

    # ============== Player Resolutions ==============

    def _resolve_basic_attack(self, run: "RunState", enemy: "Enemy") -> None:
        if not self._is_live(run, enemy):
            return

        damage = self.calculator.roll_basic_attack()
        self._damage_enemy(enemy, damage, "attack")
        self._emit_log(f"You attack for {damage} damage!", "PLAYER")
        self._check_defeated(enemy)

    def _resolve_skill_hit(self, run: "RunState", enemy: "Enemy", damage: int) -> None:
        # A later hit finds the enemy already dead and does nothing
        if not self._is_live(run, enemy):
            return

        self._damage_enemy(enemy, damage, "skill")
        self._check_defeated(enemy)

    # ============== Damage Helpers ==============

    def _damage_enemy(self, enemy: "Enemy", damage: int, source: str) -> None:
        enemy.take_damage(damage)
        self.event_manager.publish(
            DamageDealt(timeline_time=self._now(), target=enemy, amount=damage, source=source),
            source="CombatManager",
        )

    def _damage_player(self, run: "RunState", damage: int, source: str) -> None:
        run.player.take_damage(damage)
        self.event_manager.publish(
            DamageDealt(timeline_time=self._now(), target=run.player, amount=damage, source=source),
            source="CombatManager",
        )

    def _check_defeated(self, combatant: "Combatant") -> None:
        """Tell the encounter manager about a death before anything else can fire."""
        if combatant.is_alive:
            return

        self._emit_log(f"{combatant.name} has fallen", "BATTLE", LogLevel.DEBUG)
        self.event_manager.publish_immediate(
            CombatantDefeated(timeline_time=self._now(), combatant=combatant),
            source="CombatManager",
        )
