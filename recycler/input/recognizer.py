"""
Input Recognizer - rolling, time-windowed combo buffer.

Keeps the most recent direction tokens (at most COMBO_LENGTH). A token
arriving more than ``timeout`` seconds after the previous one starts a
fresh buffer. Every change is pushed to subscribers; the recognizer knows
nothing about scenes or items, callers decide when input counts.
"""
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

from recycler.config import COMBO_LENGTH
from recycler.enums import Direction
from recycler.logging import get_logger

log = get_logger('input')

Buffer = Tuple[Direction, ...]
BufferListener = Callable[[Buffer], None]


class InputRecognizer:
    """Converts direction tokens into a rolling buffer.

    Args:
        timeout: Seconds allowed between tokens before the buffer clears
        length: Maximum buffer length

    Examples:
        >>> r = InputRecognizer(timeout=1.0)
        >>> r.on_direction('up', now=0.0)
        (<Direction.UP: 'up'>,)
        >>> r.on_direction('down', now=2.5)
        (<Direction.DOWN: 'down'>,)
    """

    def __init__(self, timeout: float = 1.0, length: int = COMBO_LENGTH):
        self.timeout = timeout
        self.length = length
        self._buffer: Deque[Direction] = deque(maxlen=length)
        self._last_token_time: Optional[float] = None
        self._listeners: List[BufferListener] = []

    @property
    def last_token_time(self) -> Optional[float]:
        return self._last_token_time

    @property
    def is_full(self) -> bool:
        return len(self._buffer) == self.length

    def get_buffer(self) -> Buffer:
        """Current buffer, oldest token first."""
        return tuple(self._buffer)

    def subscribe(self, listener: BufferListener) -> Callable[[], None]:
        """Register a buffer listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_direction(self, token, now: float) -> Buffer:
        """Accept one direction token pressed at ``now``.

        Args:
            token: Direction member or its string value
            now: Press time in seconds

        Raises:
            ValueError: If the token is not a direction.

        Returns:
            The buffer after the token was added
        """
        direction = Direction(token)
        if (self._last_token_time is not None
                and now - self._last_token_time > self.timeout):
            log.trace("Input window elapsed (%.3fs), clearing buffer",
                      now - self._last_token_time)
            self._buffer.clear()
        self._buffer.append(direction)
        self._last_token_time = now
        buffer = self.get_buffer()
        log.trace("Buffer: %s", [d.value for d in buffer])
        self._notify(buffer)
        return buffer

    def reset(self) -> None:
        """Clear the buffer and notify listeners of the empty buffer."""
        self._buffer.clear()
        self._last_token_time = None
        self._notify(())

    def _notify(self, buffer: Buffer) -> None:
        for listener in list(self._listeners):
            listener(buffer)
