"""Entity system foundation.

- components.py: Base Component and Entity classes for the ECS system
"""

from .components import (
    Component,
    Entity,
    ComponentError,
    MissingComponentError,
    DuplicateComponentError,
)

__all__ = [
    "Component",
    "Entity",
    "ComponentError",
    "MissingComponentError",
    "DuplicateComponentError",
]
