"""
Frame scheduling between the core and its host.

The core never loops on its own. Each tick asks the host for the next
frame through ``FrameScheduler.request_frame`` and receives a
``FrameRequest`` handle it can cancel, mirroring a browser's
requestAnimationFrame / cancelAnimationFrame pair.
"""
from abc import ABC, abstractmethod
from itertools import count
from typing import Callable, Dict, List

FrameCallback = Callable[[float], None]


class FrameRequest:
    """Handle for one pending frame callback."""

    def __init__(self, request_id: int, scheduler: 'FrameScheduler'):
        self.request_id = request_id
        self._scheduler = scheduler
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Withdraw the callback. Safe to call more than once."""
        if self._cancelled:
            return
        self._cancelled = True
        self._scheduler._cancel(self.request_id)

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "pending"
        return f"FrameRequest(id={self.request_id}, {state})"


class FrameScheduler(ABC):
    """Host-provided "call me on the next frame" service."""

    def __init__(self) -> None:
        self._pending: Dict[int, FrameCallback] = {}
        self._ids = count(1)

    def request_frame(self, callback: FrameCallback) -> FrameRequest:
        """Queue ``callback(now)`` for the next frame."""
        request_id = next(self._ids)
        self._pending[request_id] = callback
        return FrameRequest(request_id, self)

    def _cancel(self, request_id: int) -> None:
        self._pending.pop(request_id, None)

    @property
    def pending_count(self) -> int:
        """Number of callbacks waiting for the next frame."""
        return len(self._pending)

    def run_frame(self, now: float) -> int:
        """Invoke every callback queued before this frame.

        Callbacks requested while the frame runs wait for the following
        frame.

        Returns:
            Number of callbacks invoked
        """
        callbacks: List[FrameCallback] = list(self._pending.values())
        self._pending.clear()
        for callback in callbacks:
            callback(now)
        return len(callbacks)

    @abstractmethod
    def now(self) -> float:
        """Current host time in seconds."""
        pass


class ManualFrameScheduler(FrameScheduler):
    """Scheduler driven by explicit ``step()`` calls.

    Used by tests and headless simulations: time only moves when the
    caller says so.

    Examples:
        >>> s = ManualFrameScheduler(start=10.0)
        >>> seen = []
        >>> _ = s.request_frame(seen.append)
        >>> s.step(0.5)
        1
        >>> seen
        [10.5]
    """

    def __init__(self, start: float = 0.0):
        super().__init__()
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, dt: float) -> None:
        """Move time forward without running a frame."""
        self._now += dt

    def step(self, dt: float = 1.0 / 60.0) -> int:
        """Advance time by ``dt`` and run one frame."""
        self._now += dt
        return self.run_frame(self._now)

    def run_for(self, seconds: float, dt: float = 1.0 / 60.0) -> int:
        """Run frames of ``dt`` until ``seconds`` have elapsed.

        Returns:
            Number of frames stepped
        """
        frames = 0
        elapsed = 0.0
        while elapsed + 1e-9 < seconds:
            self.step(dt)
            elapsed += dt
            frames += 1
        return frames
