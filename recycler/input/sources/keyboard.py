"""
Keyboard Direction Source - arrow keys and WASD.
"""
import time
from typing import Callable, Dict, List, Optional

import pygame

from recycler.enums import Direction
from recycler.input.direction_event import DirectionEvent
from recycler.input.sources.base import DirectionSource

KEY_DIRECTIONS: Dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}


class KeyboardDirectionSource(DirectionSource):
    """Converts pygame KEYDOWN events into DirectionEvent models.

    ESC is recorded as a pause toggle request instead of a direction.
    Events this source does not consume are re-posted to the pygame event
    queue for the main loop.

    Args:
        clock: Timestamp source, defaults to ``time.monotonic``
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        self._event_queue: List[DirectionEvent] = []
        self._pause_requested = False

    def poll_events(self) -> List[DirectionEvent]:
        """Get new direction events since last poll."""
        events = self._event_queue.copy()
        self._event_queue.clear()
        return events

    def update(self, dt: float) -> None:
        """Process pygame events and collect direction presses."""
        passthrough = []
        for event in pygame.event.get():
            if not self.handle_event(event):
                passthrough.append(event)
        # Re-post after draining so the loop above terminates
        for event in passthrough:
            pygame.event.post(event)

    def handle_event(self, event) -> bool:
        """Consume one pygame event.

        Returns:
            True if the event was a direction key or ESC
        """
        if event.type != pygame.KEYDOWN:
            return False
        if event.key == pygame.K_ESCAPE:
            self._pause_requested = True
            return True
        direction = KEY_DIRECTIONS.get(event.key)
        if direction is None:
            return False
        self._event_queue.append(
            DirectionEvent(direction=direction, timestamp=self._clock())
        )
        return True

    def consume_pause_request(self) -> bool:
        """Return and clear the pending pause toggle request."""
        requested = self._pause_requested
        self._pause_requested = False
        return requested

    def clear(self) -> None:
        """Clear the event queue."""
        self._event_queue.clear()
        self._pause_requested = False
