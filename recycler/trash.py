"""
Trash item entity.

A TrashItem is created by the Spawner, travels along a fixed direction,
scales in with an easeOutBack curve, glows while it is the active item and
leaves play either disposed (matching combo) or expired (lifespan reached).
"""
import math
from typing import Optional, Tuple

from recycler.config import GameSettings
from recycler.enums import Category, Direction, TrashState
from recycler.logging import get_logger
from recycler.models import TrashView

log = get_logger('trash')

Vec3 = Tuple[float, float, float]

# easeOutBack overshoot constants
_C1 = 1.70158
_C3 = _C1 + 1.0


def ease_out_back(t: float) -> float:
    """easeOutBack easing, overshooting slightly before settling at 1.

    Examples:
        >>> ease_out_back(0.8) > 1.0
        True
        >>> round(ease_out_back(1.0), 6)
        1.0
    """
    t = max(0.0, min(1.0, t))
    return 1.0 + _C3 * (t - 1.0) ** 3 + _C1 * (t - 1.0) ** 2


class TrashItem:
    """A single disposable entity.

    Args:
        item_id: Unique id
        category: Trash category
        required_combo: The 4 direction tokens that dispose of this item
        created_at: Spawner clock time at creation
        settings: Lifespan, animation, speed and glow tunables
        model_key: Resource key the presentation layer draws
        speed: Travel speed, defaults to ``settings.item_speed``
    """

    def __init__(
        self,
        item_id: str,
        category: Category,
        required_combo: Tuple[Direction, ...],
        created_at: float,
        settings: GameSettings,
        model_key: str,
        speed: Optional[float] = None,
    ):
        self.id = item_id
        self.category = category
        self.required_combo = tuple(required_combo)
        self.created_at = created_at
        self.lifespan = settings.item_lifespan
        self.model_key = model_key
        self.speed = settings.item_speed if speed is None else speed

        self._settings = settings
        self.state = TrashState.SPAWNING
        self.age = 0.0
        self.scale = settings.spawn_scale
        self.position: Vec3 = tuple(settings.spawn_position)
        self.glow_intensity = 0.0
        self._spawned = False
        self._destroyed = False

    # -- Lifecycle ----------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.state == TrashState.ACTIVE

    @property
    def is_spawned(self) -> bool:
        """True once the spawn-in animation has finished."""
        return self._spawned

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def is_expired(self) -> bool:
        """True once the item's age has reached its lifespan."""
        return self.age >= self.lifespan

    def update(self, dt: float) -> None:
        """Advance age, spawn animation, travel and glow by ``dt`` seconds."""
        if self._destroyed:
            return
        self.age += dt
        self._update_scale()
        self._update_position(dt)
        self._update_glow()

    def _update_scale(self) -> None:
        s = self._settings
        if self._spawned:
            return
        progress = 1.0 if s.spawn_duration <= 0 else min(1.0, self.age / s.spawn_duration)
        self.scale = s.spawn_scale + (s.target_scale - s.spawn_scale) * ease_out_back(progress)
        if progress >= 1.0:
            self.scale = s.target_scale
            self._spawned = True
            if self.state == TrashState.SPAWNING:
                self.state = TrashState.IDLE

    def _update_position(self, dt: float) -> None:
        dx, dy, dz = self._settings.travel_direction
        step = self.speed * dt
        x, y, z = self.position
        self.position = (x + dx * step, y + dy * step, z + dz * step)

    def _update_glow(self) -> None:
        s = self._settings
        if self.state == TrashState.ACTIVE:
            pulse = math.sin(self.age * s.glow_pulse_speed) * 0.5 + 0.8
            self.glow_intensity = pulse * s.max_glow_intensity

    def activate(self) -> bool:
        """Mark this item ACTIVE.

        Returns:
            True only on the first activation of a live item
        """
        if self._destroyed or self.state == TrashState.ACTIVE:
            return False
        self.state = TrashState.ACTIVE
        return True

    def destroy(self, state: TrashState = TrashState.EXPIRED) -> bool:
        """Take the item out of play.

        Args:
            state: Terminal state to record (DISPOSED or EXPIRED)

        Returns:
            False if the item was already destroyed
        """
        if self._destroyed:
            log.trace("Item %s already destroyed", self.id)
            return False
        if not state.is_terminal:
            raise ValueError(f"{state.value} is not a terminal state")
        self._destroyed = True
        self.state = state
        self.glow_intensity = 0.0
        return True

    # -- Presentation -------------------------------------------------------

    def view(self) -> TrashView:
        """Render-facing snapshot of this item."""
        return TrashView(
            item_id=self.id,
            category=self.category,
            state=self.state,
            position=self.position,
            scale=self.scale,
            glow_intensity=self.glow_intensity,
            model_key=self.model_key,
            is_active=self.is_active,
        )

    def __repr__(self) -> str:
        return (f"TrashItem(id={self.id!r}, category={self.category.value}, "
                f"state={self.state.value}, age={self.age:.2f})")
