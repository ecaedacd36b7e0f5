"""Unit tests for cooldown gating."""

import pytest

from darkportal.core.data import ActionId
from darkportal.core.engine import CooldownTracker
from darkportal.game.entities import create_player


class FakeClock:
    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(clock):
    return CooldownTracker(clock)


@pytest.fixture
def player(campaign):
    return create_player(campaign.get_class("human-knight"))


class TestCooldownTracker:
    """Test cooldown expiry bookkeeping."""

    def test_unused_actions_are_ready(self, tracker, player):
        for action in ActionId:
            assert not tracker.is_on_cooldown(player, action)
            assert tracker.remaining(player, action) == 0

    @pytest.mark.parametrize("duration", [1, 500, 2500, 6000])
    def test_on_cooldown_until_duration_passes(self, tracker, clock, player, duration):
        tracker.set_cooldown(player, ActionId.ATTACK, duration)
        assert tracker.is_on_cooldown(player, ActionId.ATTACK)

        clock.now = duration - 1
        assert tracker.is_on_cooldown(player, ActionId.ATTACK)

        # Expiry is exclusive: ready again at exactly now + duration
        clock.now = duration
        assert not tracker.is_on_cooldown(player, ActionId.ATTACK)

    def test_set_cooldown_overwrites(self, tracker, clock, player):
        tracker.set_cooldown(player, ActionId.SKILL1, 5000)
        clock.now = 1000
        tracker.set_cooldown(player, ActionId.SKILL1, 1000)

        clock.now = 2000
        assert not tracker.is_on_cooldown(player, ActionId.SKILL1)

    def test_actions_are_independent(self, tracker, player):
        tracker.set_cooldown(player, ActionId.SKILL1, 4000)

        assert tracker.is_on_cooldown(player, ActionId.SKILL1)
        assert not tracker.is_on_cooldown(player, ActionId.SKILL2)
        assert not tracker.is_on_cooldown(player, ActionId.ATTACK)

    def test_remaining_and_snapshot(self, tracker, clock, player):
        tracker.set_cooldown(player, ActionId.ATTACK, 2500)
        clock.now = 1000

        assert tracker.remaining(player, ActionId.ATTACK) == 1500
        assert tracker.snapshot(player) == {
            ActionId.ATTACK: 1500,
            ActionId.SKILL1: 0,
            ActionId.SKILL2: 0,
        }

    def test_reset(self, tracker, player):
        tracker.set_cooldown(player, ActionId.ATTACK, 2500)
        tracker.set_cooldown(player, ActionId.SKILL2, 6000)

        tracker.reset(player)

        assert tracker.snapshot(player) == {action: 0 for action in ActionId}


class TestActionId:
    def test_for_skill(self):
        assert ActionId.for_skill(0) == ActionId.SKILL1
        assert ActionId.for_skill(1) == ActionId.SKILL2

    @pytest.mark.parametrize("index", [-1, 2, 5])
    def test_for_skill_rejects_missing_slot(self, index):
        with pytest.raises(ValueError):
            ActionId.for_skill(index)
