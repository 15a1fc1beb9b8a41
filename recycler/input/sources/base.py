"""
Direction Source - abstract base for anything that produces direction tokens.
"""
from abc import ABC, abstractmethod
from typing import List

from recycler.input.direction_event import DirectionEvent


class DirectionSource(ABC):
    """Abstract source of DirectionEvents.

    The host calls ``update()`` once per frame, then drains the collected
    events with ``poll_events()``.
    """

    @abstractmethod
    def poll_events(self) -> List[DirectionEvent]:
        """Get new direction events since last poll."""
        pass

    @abstractmethod
    def update(self, dt: float) -> None:
        """Collect pending platform events."""
        pass

    def clear(self) -> None:
        """Discard queued events."""
        pass
