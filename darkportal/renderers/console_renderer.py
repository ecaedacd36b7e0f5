import sys
from typing import TYPE_CHECKING, Optional, TextIO

from ..core.data import ActionId, Screen
from ..core.events import (
    DamageDealt,
    EncounterStarted,
    GameEvent,
    GameOver,
    HealApplied,
    LogMessage,
    ScreenChanged,
    SkillUsed,
    Victory,
)
from ..game.managers.log_manager import CATEGORY_TAGS, LogCategory, LogLevel

if TYPE_CHECKING:
    from ..game.game import Game


class ConsoleRenderer:
    """Prints outbound events as text lines. Reads state, never changes it."""

    def __init__(self, stream: Optional[TextIO] = None, show_debug: bool = False,
                 show_timestamps: bool = True):
        self.stream = stream or sys.stdout
        self.show_debug = show_debug
        self.show_timestamps = show_timestamps
        self.lines_written = 0

        # Banner text per screen
        self.screen_banners = {
            Screen.WELCOME: "=== THE DARK PORTAL ===",
            Screen.CHARACTER_SELECT: "--- Choose your hero ---",
            Screen.GAME: "--- Battle ---",
            Screen.VICTORY: "*** The portal is sealed. You are victorious! ***",
        }

    def _write(self, text: str, timeline_time: Optional[int] = None) -> None:
        if self.show_timestamps and timeline_time is not None:
            text = f"{timeline_time / 1000:7.1f}s  {text}"
        print(text, file=self.stream)
        self.lines_written += 1

    def __call__(self, event: GameEvent) -> None:
        self.handle_event(event)

    def handle_event(self, event: GameEvent) -> None:
        if isinstance(event, LogMessage):
            self._render_log(event)
        elif isinstance(event, ScreenChanged):
            self._write(self.screen_banners.get(event.screen, event.screen.value))
        elif isinstance(event, EncounterStarted):
            self._write(f"## {event.encounter.title}: {event.encounter.description}",
                        event.timeline_time)
            elite = " (elite)" if event.enemy.is_elite else ""
            self._write(f"   {event.enemy.name}{elite} - {event.enemy.hp} HP", event.timeline_time)
        elif isinstance(event, DamageDealt) and self.show_debug:
            self._write(f"   -{event.amount} {event.target.name} ({event.target.hp}/{event.target.max_hp})",
                        event.timeline_time)
        elif isinstance(event, HealApplied) and self.show_debug:
            self._write(f"   +{event.amount} {event.target.name}", event.timeline_time)
        elif isinstance(event, SkillUsed) and event.skill.sound and self.show_debug:
            self._write(f"   ({event.skill.sound} sound)", event.timeline_time)
        elif isinstance(event, GameOver):
            self._write("GAME OVER! You have been defeated.", event.timeline_time)
        elif isinstance(event, Victory):
            self._write("VICTORY!", event.timeline_time)

    def _render_log(self, event: LogMessage) -> None:
        if event.level == LogLevel.DEBUG and not self.show_debug:
            return
        try:
            tag = CATEGORY_TAGS[LogCategory[event.category.upper()]]
        except KeyError:
            tag = CATEGORY_TAGS[LogCategory.SYSTEM]
        self._write(f"[{tag}] {event.message}", event.timeline_time)

    def render_status(self, game: "Game") -> str:
        """One-line summary of the fight for the interactive prompt."""
        run = game.run
        if run is None:
            return f"[{game.screen.value}]"

        parts = [f"{run.player.name} {run.player.hp}/{run.player.max_hp}"]
        if run.shield_points:
            parts.append(f"shield {run.shield_points}")
        if run.current_enemy is not None:
            enemy = run.current_enemy
            parts.append(f"vs {enemy.name} {enemy.hp}/{enemy.max_hp}")

        ready = []
        for action, label in ((ActionId.ATTACK, "a"), (ActionId.SKILL1, "1"), (ActionId.SKILL2, "2")):
            remaining = game.cooldown_remaining(action)
            ready.append(label if remaining == 0 else f"{label}:{remaining / 1000:.1f}s")
        parts.append(" ".join(ready))
        return " | ".join(parts)
