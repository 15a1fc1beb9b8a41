"""
Cancellable game-time timers.

Timers are advanced explicitly by tick deltas instead of reading a wall
clock, so pausing the tick loop freezes them and reset can never leave a
stale timer firing.
"""
from typing import Callable, Optional


class GameTimer:
    """Accumulates elapsed game time while running.

    ``start()`` and ``cancel()`` are idempotent; a cancelled timer keeps its
    elapsed value and continues from it on the next ``start()``.

    Examples:
        >>> t = GameTimer()
        >>> t.start()
        True
        >>> t.advance(0.5); t.elapsed
        0.5
        >>> t.cancel()
        True
        >>> t.advance(1.0); t.elapsed
        0.5
    """

    def __init__(self) -> None:
        self._elapsed = 0.0
        self._running = False

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> bool:
        """Start the timer. Returns False if it was already running."""
        if self._running:
            return False
        self._running = True
        return True

    def cancel(self) -> bool:
        """Stop the timer. Returns False if it was not running."""
        if not self._running:
            return False
        self._running = False
        return True

    def restart(self) -> None:
        """Zero the elapsed time without touching the running flag."""
        self._elapsed = 0.0

    def reset(self) -> None:
        """Zero the elapsed time and stop."""
        self._elapsed = 0.0
        self._running = False

    def advance(self, dt: float) -> None:
        """Add ``dt`` seconds if running."""
        if self._running and dt > 0:
            self._elapsed += dt


class Countdown(GameTimer):
    """A GameTimer with a fixed budget that fires once when it runs out.

    Args:
        duration: Budget in seconds
        on_expire: Called once, the first time remaining reaches zero
    """

    def __init__(self, duration: float, on_expire: Optional[Callable[[], None]] = None):
        super().__init__()
        self.duration = float(duration)
        self._on_expire = on_expire
        self._fired = False

    @property
    def remaining(self) -> float:
        return max(0.0, self.duration - self.elapsed)

    @property
    def expired(self) -> bool:
        return self._fired

    def reset(self) -> None:
        super().reset()
        self._fired = False

    def advance(self, dt: float) -> None:
        if self._fired:
            return
        super().advance(dt)
        if self.running and self.remaining <= 0.0:
            self._fired = True
            self.cancel()
            if self._on_expire is not None:
                self._on_expire()
