"""Cooldown gating for player actions.

Cooldowns are stored as absolute expiry instants on the actor's cooldown
component. Expiry is not an event: the gate is simply re-checked the next time
an action is attempted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from ..data.game_enums import ActionId

if TYPE_CHECKING:
    from ...game.entities.combatant import Player


Clock = Callable[[], int]


class CooldownTracker:
    """Reads and writes per-actor, per-action cooldown expiries.

    Args:
        clock: Returns the current time in ms (the timeline clock in a game)
    """

    def __init__(self, clock: Clock):
        self._clock = clock

    def now(self) -> int:
        return self._clock()

    def is_on_cooldown(self, actor: "Player", action: ActionId) -> bool:
        """True iff the stored expiry is strictly in the future.

        Actions that were never used have expiry 0 and are always ready.
        """
        return actor.cooldowns.get_expiry(action) > self._clock()

    def set_cooldown(self, actor: "Player", action: ActionId, duration_ms: int) -> None:
        """Put an action on cooldown, overwriting any earlier expiry."""
        actor.cooldowns.set_expiry(action, self._clock() + duration_ms)

    def remaining(self, actor: "Player", action: ActionId) -> int:
        """Milliseconds until the action is ready again (0 when ready)."""
        return max(0, actor.cooldowns.get_expiry(action) - self._clock())

    def snapshot(self, actor: "Player") -> dict[ActionId, int]:
        """Remaining time for every action, for display."""
        return {action: self.remaining(actor, action) for action in ActionId}

    def reset(self, actor: "Player") -> None:
        """Make every action ready again."""
        actor.cooldowns.reset()
