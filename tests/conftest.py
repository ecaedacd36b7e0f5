"""
Basic test fixtures for the Dark Portal test suite.

Provides fixtures for the event system, the timeline, campaign data and fully
wired games, plus a builder for small custom campaigns whose numbers make
fights deterministic.
"""

import copy
import sys
import os

import numpy as np
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from darkportal.core.data import CombatSettings, load_campaign, parse_campaign
from darkportal.core.engine import GameState, Timeline
from darkportal.core.events import EventManager
from darkportal.game.game import Game


BASE_CAMPAIGN_DATA = {
    "combat": {},
    "character_classes": {
        "tester": {
            "name": "Tester",
            "hp": 500,
            "skills": [
                {"name": "Double Tap", "type": "damage", "damage": 25, "hits": 2, "cooldown": 1000},
                {"name": "Mend", "type": "heal", "healing": 35, "cooldown": 1000},
            ],
        },
        "guardian": {
            "name": "Guardian",
            "hp": 500,
            "skills": [
                {"name": "Berserk", "type": "damage", "damage": 20, "self_damage": 5, "cooldown": 1000},
                {"name": "Barrier", "type": "shield", "shield": 20, "duration": 4, "cooldown": 1000},
            ],
        },
        "glass": {
            "name": "Glass Cannon",
            "hp": 1,
            "skills": [
                {"name": "Spark", "type": "damage", "damage": 5, "cooldown": 1000},
                {"name": "Patch", "type": "heal", "healing": 5, "cooldown": 1000},
            ],
        },
    },
    "encounters": [
        {"title": "One", "description": "First", "enemy": {"kind": "goblin", "name": "Goblin", "hp": 5, "damage": 10}},
        {"title": "Two", "description": "Second", "enemy": {"kind": "skeleton", "name": "Skeleton", "hp": 5, "damage": 10}},
        {"title": "Three", "description": "Third",
         "enemy": {"kind": "goblin", "name": "Chieftain", "hp": 5, "damage": 10, "elite": True}},
        {"title": "Four", "description": "Fourth",
         "enemy": {"kind": "skeleton", "name": "Lord", "hp": 5, "damage": 10, "elite": True}},
    ],
}


def build_campaign(combat=None, enemy_hp=None, enemy_damage=None):
    """Build a small campaign, overriding combat settings or enemy stats."""
    data = copy.deepcopy(BASE_CAMPAIGN_DATA)
    data["combat"].update(combat or {})
    for encounter in data["encounters"]:
        if enemy_hp is not None:
            encounter["enemy"]["hp"] = enemy_hp
        if enemy_damage is not None:
            encounter["enemy"]["damage"] = enemy_damage
    return parse_campaign(data)


def collect_events(event_manager):
    """Subscribe a list to every event and return it."""
    events = []
    event_manager.subscribe_all(events.append, subscriber_name="test_collector")
    return events


def events_of(events, event_class):
    return [event for event in events if isinstance(event, event_class)]


@pytest.fixture
def game_state():
    """Create a fresh game state for testing."""
    return GameState()


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def timeline():
    """Create a fresh timeline for testing."""
    return Timeline()


@pytest.fixture
def settings():
    return CombatSettings()


@pytest.fixture
def rng():
    """Seeded generator so random rolls repeat between runs."""
    return np.random.default_rng(1234)


@pytest.fixture(scope="session")
def campaign():
    """The bundled campaign file."""
    return load_campaign()


@pytest.fixture
def small_campaign():
    """Four 5 HP enemies and sturdy test classes."""
    return build_campaign()


@pytest.fixture
def game(campaign):
    """A started game on the bundled campaign with a fixed seed."""
    game = Game(campaign, seed=42)
    game.start()
    return game


@pytest.fixture
def small_game(small_campaign):
    """A started game on the small campaign with a fixed seed."""
    game = Game(small_campaign, seed=42)
    game.start()
    return game
