"""
Session state machine.

Tracks score, scene, the playing flag, the session countdown, the current
level and per-session statistics.

Scenes:
    MAIN_MENU -> GAME -> SCORE_SCREEN -> MAIN_MENU

GAME carries an orthogonal playing/paused flag. The countdown only runs
while the scene is GAME and the session is playing.
"""
from typing import Callable, FrozenSet, Optional, Tuple

from recycler.config import GameSettings
from recycler.enums import Category, Scene
from recycler.logging import get_logger
from recycler.models import SessionSnapshot
from recycler.timers import Countdown

log = get_logger('session')

ALLOWED_TRANSITIONS: FrozenSet[Tuple[Scene, Scene]] = frozenset({
    (Scene.MAIN_MENU, Scene.GAME),
    (Scene.GAME, Scene.SCORE_SCREEN),
    (Scene.SCORE_SCREEN, Scene.MAIN_MENU),
})


class SessionState:
    """Score, scene and countdown for one play session.

    Args:
        settings: Scoring and session tunables
        on_expire: Called once when the countdown reaches zero
    """

    def __init__(self, settings: GameSettings, on_expire: Optional[Callable[[], None]] = None):
        self.settings = settings
        self.countdown = Countdown(settings.session_duration, on_expire)
        self._init_values()

    def _init_values(self) -> None:
        self.score = 0
        self.scene = Scene.MAIN_MENU
        self.is_playing = False
        self.level = 1
        self.disposed = 0
        self.penalties = 0
        self.expired = 0
        self.activations = 0

    @property
    def session_remaining(self) -> float:
        return self.countdown.remaining

    # -- Scene / playing ----------------------------------------------------

    def can_transition(self, scene: Scene) -> bool:
        return (self.scene, scene) in ALLOWED_TRANSITIONS

    def set_scene(self, scene) -> bool:
        """Transition to ``scene``.

        Disallowed transitions are logged and ignored.

        Returns:
            True if the scene changed
        """
        scene = Scene(scene)
        if scene == self.scene:
            return False
        if not self.can_transition(scene):
            log.warning("Invalid scene transition %s -> %s ignored",
                        self.scene.value, scene.value)
            return False
        log.info("Scene %s -> %s", self.scene.value, scene.value)
        self.scene = scene
        if scene == Scene.GAME:
            self.countdown.reset()
        self._sync_countdown()
        return True

    def set_playing(self, playing: bool) -> bool:
        """Set the playing flag.

        Returns:
            True if the flag changed
        """
        if self.is_playing == playing:
            return False
        self.is_playing = playing
        self._sync_countdown()
        return True

    def _sync_countdown(self) -> None:
        if self.scene == Scene.GAME and self.is_playing and not self.countdown.expired:
            self.countdown.start()
        else:
            self.countdown.cancel()

    def advance(self, dt: float) -> None:
        """Advance the session countdown by ``dt`` seconds."""
        self.countdown.advance(dt)

    # -- Scoring ------------------------------------------------------------

    def apply_disposal(self, category: Category) -> int:
        """Add the category's score delta.

        Returns:
            The delta applied
        """
        delta = self.settings.score_deltas.get(category, 0)
        self.score += delta
        self.disposed += 1
        return delta

    def apply_penalty(self) -> int:
        """Subtract the penalty, clamped at the score floor.

        A score already below the floor is never raised.

        Returns:
            Points actually removed
        """
        floor = self.settings.score_floor
        new_score = self.score - self.settings.penalty
        if floor is not None and new_score < floor:
            new_score = min(self.score, floor)
        removed = self.score - new_score
        self.score = new_score
        self.penalties += 1
        return removed

    def record_expired(self) -> None:
        self.expired += 1

    def record_activation(self) -> None:
        self.activations += 1

    # -- Lifecycle ----------------------------------------------------------

    def reset(self) -> None:
        """Back to MAIN_MENU, not playing, score 0, level 1."""
        self.countdown.reset()
        self._init_values()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            score=self.score,
            scene=self.scene,
            is_playing=self.is_playing,
            session_remaining=self.session_remaining,
            level=self.level,
            disposed=self.disposed,
            penalties=self.penalties,
            expired=self.expired,
            activations=self.activations,
        )

    def stats(self) -> dict:
        """Session statistics as a plain dict (for structured log records)."""
        return {
            'score': self.score,
            'level': self.level,
            'disposed': self.disposed,
            'penalties': self.penalties,
            'expired': self.expired,
            'activations': self.activations,
            'session_remaining': round(self.session_remaining, 3),
        }
