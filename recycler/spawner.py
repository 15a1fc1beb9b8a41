"""
Spawner - owns the FIFO queue of trash items.

Each update advances the spawner clock, spawns on the pacing schedule,
ages and expires queued items, then makes the queue head the single
ACTIVE item. Side effects (sound, notifications, glow) are reported
through callbacks; the Spawner itself never talks to presentation code.
"""
import random
from collections import deque
from itertools import count
from typing import Callable, Deque, List, Optional

from recycler.config import CATEGORY_MODELS, FALLBACK_MODELS, GameSettings, get_required_combo
from recycler.enums import Category, TrashState
from recycler.logging import get_logger
from recycler.resources import ResourceProvider
from recycler.timers import GameTimer
from recycler.trash import TrashItem

log = get_logger('spawner')

ItemCallback = Callable[[TrashItem], None]


class Spawner:
    """Creates, ages and arbitrates trash items.

    Args:
        settings: Game tunables (pacing, lifespan, speed, combos)
        rng: Random source for categories and model keys
        resources: Provider consulted for model keys
        on_spawn: Called after an item joins the queue
        on_activate: Called once when an item becomes ACTIVE
        on_expire: Called after an item leaves play unclaimed
    """

    def __init__(
        self,
        settings: GameSettings,
        rng: Optional[random.Random] = None,
        resources: Optional[ResourceProvider] = None,
        on_spawn: Optional[ItemCallback] = None,
        on_activate: Optional[ItemCallback] = None,
        on_expire: Optional[ItemCallback] = None,
    ):
        self.settings = settings
        self.rng = rng or random.Random()
        self.resources = resources
        self.on_spawn = on_spawn
        self.on_activate = on_activate
        self.on_expire = on_expire

        self._queue: Deque[TrashItem] = deque()
        self._ids = count(1)
        self._clock = 0.0
        self._item_speed = settings.item_speed
        self._spawn_timer = GameTimer()
        self._cadence_timer = GameTimer()
        self._hold_activation = False
        self._destroyed = False
        self._start_timers()

    def _start_timers(self) -> None:
        self._spawn_timer.reset()
        self._cadence_timer.reset()
        self._spawn_timer.start()
        self._cadence_timer.start()

    # -- Accessors ----------------------------------------------------------

    @property
    def clock(self) -> float:
        """Spawner game time in seconds."""
        return self._clock

    @property
    def items(self) -> List[TrashItem]:
        """Queued items, oldest first."""
        return list(self._queue)

    @property
    def item_speed(self) -> float:
        return self._item_speed

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def __len__(self) -> int:
        return len(self._queue)

    def current_interval(self) -> float:
        """Spawn interval at the current point of the pacing schedule."""
        return self.settings.pacing.interval_at(self._cadence_timer.elapsed)

    def get_active_item(self) -> Optional[TrashItem]:
        """The queue head if it is ACTIVE, otherwise None."""
        if self._queue and self._queue[0].is_active:
            return self._queue[0]
        return None

    # -- Mutation -----------------------------------------------------------

    def set_item_speed(self, speed: float) -> None:
        """Set the travel speed used for items spawned from now on."""
        self._item_speed = speed

    def spawn(self, category: Optional[Category] = None) -> Optional[TrashItem]:
        """Create an item and append it to the queue tail.

        Args:
            category: Category to spawn, uniformly random if None

        Returns:
            The new item, or None after destroy()
        """
        if self._destroyed:
            log.warning("spawn() after destroy ignored")
            return None
        if category is None:
            category = self.rng.choice(list(Category))
        item = TrashItem(
            item_id=f"trash-{next(self._ids)}",
            category=category,
            required_combo=get_required_combo(category, self.settings.combos),
            created_at=self._clock,
            settings=self.settings,
            model_key=self._pick_model(category),
            speed=self._item_speed,
        )
        self._queue.append(item)
        self._spawn_timer.restart()
        log.debug("Spawned %s (%s), queue=%d", item.id, category.value, len(self._queue))
        if self.on_spawn is not None:
            self.on_spawn(item)
        return item

    def _pick_model(self, category: Category) -> str:
        provider = self.resources
        if provider is not None and provider.is_ready():
            available = [key for key in CATEGORY_MODELS.get(category, ()) if provider.has(key)]
            if available:
                return self.rng.choice(available)
        return FALLBACK_MODELS[category]

    def update(self, dt: float) -> None:
        """Advance the spawner by ``dt`` seconds.

        Order: spawn check, per-item update and expiry, activation.
        """
        if self._destroyed:
            return
        self._clock += dt
        self._spawn_timer.advance(dt)
        self._cadence_timer.advance(dt)

        if self._spawn_timer.elapsed >= self.current_interval():
            self.spawn()

        for item in list(self._queue):
            item.update(dt)
            if item.is_expired:
                self._expire(item)

        if self._hold_activation:
            # Next head is evaluated on the following tick
            self._hold_activation = False
            return
        self._activate_head()

    def _expire(self, item: TrashItem) -> None:
        was_active = item.is_active
        self._queue.remove(item)
        item.destroy(TrashState.EXPIRED)
        if was_active:
            self._hold_activation = True
        log.debug("Expired %s (%s) after %.2fs", item.id, item.category.value, item.age)
        if self.on_expire is not None:
            self.on_expire(item)

    def _activate_head(self) -> None:
        if not self._queue:
            return
        head = self._queue[0]
        if head.activate():
            log.debug("Active item %s (%s)", head.id, head.category.value)
            if self.on_activate is not None:
                self.on_activate(head)

    def remove_active_item(self) -> Optional[TrashItem]:
        """Dispose of and remove the queue head.

        Returns:
            The removed item, or None if the queue was empty
        """
        if not self._queue:
            log.warning("remove_active_item() on empty queue ignored")
            return None
        item = self._queue.popleft()
        item.destroy(TrashState.DISPOSED)
        return item

    def clear(self) -> int:
        """Destroy every queued item.

        Returns:
            Number of items destroyed
        """
        removed = 0
        while self._queue:
            if self._queue.popleft().destroy(TrashState.EXPIRED):
                removed += 1
        self._hold_activation = False
        return removed

    def reset(self) -> None:
        """Destroy all items and restore the initial cadence and speed."""
        removed = self.clear()
        self._clock = 0.0
        self._item_speed = self.settings.item_speed
        self._start_timers()
        log.debug("Spawner reset, %d items destroyed", removed)

    def destroy(self) -> None:
        """Force-destroy all queued items and stop spawning. Idempotent."""
        if self._destroyed:
            return
        self.clear()
        self._spawn_timer.cancel()
        self._cadence_timer.cancel()
        self._destroyed = True
        log.debug("Spawner destroyed")
