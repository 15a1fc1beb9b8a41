"""
Player reaction.

After every disposal the player does a short hop: a half sine arc of
``jump_height`` over ``jump_duration`` seconds. Purely cosmetic; the
offset is passed to the presentation layer in each RenderFrame.
"""
import math


class Player:
    """Tracks the jump arc.

    Examples:
        >>> p = Player(duration=0.4, height=0.6)
        >>> p.jump()
        True
        >>> p.update(0.2); round(p.offset, 3)
        0.6
        >>> p.update(0.2); p.offset
        0.0
    """

    def __init__(self, duration: float = 0.4, height: float = 0.6):
        self.duration = duration
        self.height = height
        self._elapsed = 0.0
        self._jumping = False

    @property
    def is_jumping(self) -> bool:
        return self._jumping

    @property
    def offset(self) -> float:
        """Vertical offset above the resting position."""
        if not self._jumping or self.duration <= 0:
            return 0.0
        progress = min(1.0, self._elapsed / self.duration)
        return math.sin(progress * math.pi) * self.height

    def jump(self) -> bool:
        """Start a jump. Ignored while already in the air."""
        if self._jumping:
            return False
        self._jumping = True
        self._elapsed = 0.0
        return True

    def update(self, dt: float) -> None:
        if not self._jumping:
            return
        self._elapsed += dt
        if self._elapsed >= self.duration:
            self._jumping = False
            self._elapsed = 0.0

    def reset(self) -> None:
        self._jumping = False
        self._elapsed = 0.0
