"""
Enumerations shared across the recycler core.

These enums define directions, trash categories, item lifecycle states,
scenes and sound cues.
"""

from enum import Enum


class Direction(str, Enum):
    """Directional input tokens that make up a combo."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Category(str, Enum):
    """Closed set of trash categories.

    NON_RECYCLABLE doubles as the fallback category whose combo is used
    when another category has no configured combo.
    """
    GLASS = "glass"
    METAL_AND_PLASTIC = "metal_and_plastic"
    ORGANIC = "organic"
    PAPER = "paper"
    NON_RECYCLABLE = "non_recyclable"


class TrashState(str, Enum):
    """States a trash item moves through during its lifecycle.

    Attributes:
        SPAWNING: Spawn-in scale animation still running
        IDLE: Fully spawned, waiting in the queue
        ACTIVE: Queue head, eligible for disposal
        DISPOSED: Removed by a matching combo
        EXPIRED: Removed unclaimed (lifespan reached or forced teardown)
    """
    SPAWNING = "spawning"
    IDLE = "idle"
    ACTIVE = "active"
    DISPOSED = "disposed"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        """True once the item has left play."""
        return self in (TrashState.DISPOSED, TrashState.EXPIRED)


class Scene(str, Enum):
    """Top-level scenes of a play session.

    Transitions:
        MAIN_MENU -> GAME           (start command)
        GAME -> SCORE_SCREEN        (countdown reached zero or end trigger)
        SCORE_SCREEN -> MAIN_MENU   (restart command)

    Reset returns to MAIN_MENU from any scene.
    """
    MAIN_MENU = "MAIN_MENU"
    GAME = "GAME"
    SCORE_SCREEN = "SCORE_SCREEN"


class SoundName(str, Enum):
    """Sound cues the core asks the presentation layer to play."""
    SPAWN = "spawn"
    GOOD = "goodSound"
    BAD = "badSound"
    MUSIC = "music"
