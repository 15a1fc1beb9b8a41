"""
Recycler Engine - the game orchestrator.

Owns the tick loop and wires the pieces together:

    key event -> InputRecognizer -> buffer vs. active item -> dispose / penalty
    frame     -> Spawner.update -> session countdown -> Presentation.render

The loop is cooperative: every tick requests the next frame from the
host's FrameScheduler, and pause() cancels that request. Presentation
code observes the game through the EventBus and the RenderFrame passed to
``Presentation.render``.

Usage:
    engine = Engine(scheduler, presentation)
    engine.add_event_listener('trashDisposed', on_disposed)
    engine.init()
    engine.start_game()
"""
import random
from typing import Dict, Optional

from recycler.config import COMBO_LENGTH, GameSettings
from recycler.enums import Direction, Scene, SoundName
from recycler.events import EventBus, EventKind, Handler, Subscription
from recycler.input.recognizer import Buffer, InputRecognizer
from recycler.levels import LevelLadder
from recycler.logging import emit_record, get_logger
from recycler.models import (
    GamePausedPayload,
    GameResetPayload,
    GameResumedPayload,
    KeyComboPayload,
    LevelUpPayload,
    LoadingAssetsPayload,
    NotifyActiveTrashPayload,
    RenderFrame,
    SessionSnapshot,
    TrashDisposedPayload,
    TrashExpiredPayload,
)
from recycler.player import Player
from recycler.presentation import NullPresentation, Presentation
from recycler.resources import ResourceProvider
from recycler.scheduler import FrameRequest, FrameScheduler
from recycler.session import SessionState
from recycler.spawner import Spawner
from recycler.trash import TrashItem

log = get_logger('engine')


class Engine:
    """Runtime core of the game.

    Args:
        scheduler: Host frame scheduler driving the tick loop
        presentation: Receives render, sound, reaction and glow calls
        resources: Read-only asset provider (model key lookup)
        settings: Game tunables, defaults to ``GameSettings()``
        ladder: Level ladder, defaults to the built-in ladder
        rng: Random source for the spawner
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        presentation: Optional[Presentation] = None,
        resources: Optional[ResourceProvider] = None,
        settings: Optional[GameSettings] = None,
        ladder: Optional[LevelLadder] = None,
        rng: Optional[random.Random] = None,
    ):
        self.scheduler = scheduler
        self.presentation = presentation or NullPresentation()
        self.resources = resources
        self.settings = settings or GameSettings()
        self.ladder = ladder or LevelLadder()
        self.rng = rng or random.Random()
        self.bus = EventBus()

        self.spawner: Optional[Spawner] = None
        self.recognizer: Optional[InputRecognizer] = None
        self.session: Optional[SessionState] = None
        self.player: Optional[Player] = None

        self._initialized = False
        self._running = False
        self._frame_request: Optional[FrameRequest] = None
        self._last_time: Optional[float] = None
        self._frame = 0
        self._glow_sent: Dict[str, float] = {}
        self._unsubscribe_input = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def is_running(self) -> bool:
        """True while the tick loop is scheduled."""
        return self._running

    @property
    def frame_count(self) -> int:
        return self._frame

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def init(self) -> bool:
        """Create the components and start the tick loop.

        Returns:
            False if already initialized
        """
        if self._initialized:
            log.debug("init() ignored, already initialized")
            return False

        self.spawner = Spawner(
            self.settings,
            rng=self.rng,
            resources=self.resources,
            on_spawn=self._on_spawn,
            on_activate=self._on_activate,
            on_expire=self._on_expire,
        )
        self.recognizer = InputRecognizer(timeout=self.settings.input_timeout)
        self._unsubscribe_input = self.recognizer.subscribe(self._on_buffer)
        self.session = SessionState(self.settings, on_expire=self._on_countdown_expired)
        self.player = Player(self.settings.jump_duration, self.settings.jump_height)
        self.ladder.reset()
        self.spawner.set_item_speed(self.ladder.speed)
        self._frame = 0
        self._glow_sent = {}
        self._initialized = True
        log.info("Engine initialized (pacing=%s, session=%.0fs)",
                 self.settings.pacing.name, self.settings.session_duration)

        if self.resources is not None:
            self.set_assets_loading(not self.resources.is_ready(), self.resources.error)
        self.presentation.play_sound(SoundName.MUSIC)
        self.resume()
        return True

    def destroy(self) -> None:
        """Stop the loop and tear everything down. Idempotent."""
        if not self._initialized:
            return
        self._stop_loop()
        self.spawner.destroy()
        if self._unsubscribe_input is not None:
            self._unsubscribe_input()
            self._unsubscribe_input = None
        self.session.countdown.cancel()
        self.bus.clear()
        self._initialized = False
        log.info("Engine destroyed")

    def pause(self) -> bool:
        """Halt the tick loop and the session countdown.

        Returns:
            True if the engine was running
        """
        if not self._initialized:
            log.warning("pause() before init() ignored")
            return False
        if not self._running:
            return False
        self._stop_loop()
        self.session.set_playing(False)
        log.info("Paused")
        self.bus.emit(EventKind.GAME_PAUSED, GamePausedPayload())
        self._emit_state()
        return True

    def resume(self) -> bool:
        """Restart the tick loop from a fresh timing reference.

        Returns:
            True if the engine was paused
        """
        if not self._initialized:
            log.warning("resume() before init() ignored")
            return False
        if self._running:
            return False
        self._running = True
        self._last_time = None
        # The playing flag only applies inside GAME
        self.session.set_playing(self.session.scene == Scene.GAME)
        self._schedule_frame()
        log.info("Resumed")
        self.bus.emit(EventKind.GAME_RESUMED, GameResumedPayload())
        self._emit_state()
        return True

    def reset_game(self) -> bool:
        """Clear items, score and input; return to a paused MAIN_MENU."""
        if not self._initialized:
            log.warning("reset_game() before init() ignored")
            return False
        self._stop_loop()
        self.spawner.reset()
        self.session.reset()
        self.ladder.reset()
        self.spawner.set_item_speed(self.ladder.speed)
        self.player.reset()
        self._clear_glow()
        self.recognizer.reset()
        log.info("Game reset")
        self.bus.emit(EventKind.GAME_RESET, GameResetPayload(state=self.session.snapshot()))
        self._emit_state()
        return True

    def set_current_scene(self, scene) -> bool:
        """Change scene; disallowed transitions are logged no-ops.

        Returns:
            True if the scene changed
        """
        if not self._initialized:
            log.warning("set_current_scene() before init() ignored")
            return False
        try:
            scene = Scene(scene)
        except ValueError:
            log.warning("Unknown scene %r ignored", scene)
            return False
        previous = self.session.scene
        if not self.session.set_scene(scene):
            return False
        if previous == Scene.GAME or scene == Scene.GAME:
            # Combo input only counts inside GAME
            self.recognizer.reset()
            self.session.set_playing(scene == Scene.GAME and self._running)
        if scene == Scene.SCORE_SCREEN:
            self._record_session()
        self._emit_state()
        return True

    def start_game(self) -> bool:
        """Start command: reset, resume and enter GAME."""
        if not self._initialized:
            log.warning("start_game() before init() ignored")
            return False
        self.reset_game()
        self.resume()
        return self.set_current_scene(Scene.GAME)

    def end_session(self) -> bool:
        """End trigger: pause and move GAME -> SCORE_SCREEN."""
        if not self._initialized or self.session.scene != Scene.GAME:
            log.warning("end_session() outside GAME ignored")
            return False
        self.pause()
        return self.set_current_scene(Scene.SCORE_SCREEN)

    # =========================================================================
    # Tick loop
    # =========================================================================

    def _schedule_frame(self) -> None:
        self._frame_request = self.scheduler.request_frame(self._tick)

    def _stop_loop(self) -> None:
        self._running = False
        if self._frame_request is not None:
            self._frame_request.cancel()
            self._frame_request = None

    def _tick(self, now: float) -> None:
        if not self._running:
            return
        self._schedule_frame()

        if self._last_time is None:
            dt = 0.0
        else:
            dt = min(max(0.0, now - self._last_time), self.settings.max_frame_dt)
        self._last_time = now
        self._frame += 1

        if self.session.scene == Scene.GAME:
            self.spawner.update(dt)
            self._push_glow()
            self.session.advance(dt)
        self.player.update(dt)

        self.presentation.render(self._build_frame(dt))

    def _build_frame(self, dt: float) -> RenderFrame:
        return RenderFrame(
            frame=self._frame,
            dt=dt,
            items=[item.view() for item in self.spawner.items],
            buffer=self.recognizer.get_buffer(),
            player_offset=self.player.offset,
            session=self.session.snapshot(),
        )

    def _push_glow(self) -> None:
        for item in self.spawner.items:
            intensity = round(item.glow_intensity, 4)
            if self._glow_sent.get(item.id) != intensity:
                self._glow_sent[item.id] = intensity
                self.presentation.apply_glow(item.id, intensity)

    def _drop_glow(self, item: TrashItem) -> None:
        if self._glow_sent.pop(item.id, 0.0):
            self.presentation.apply_glow(item.id, 0.0)

    def _clear_glow(self) -> None:
        for item_id, intensity in list(self._glow_sent.items()):
            if intensity:
                self.presentation.apply_glow(item_id, 0.0)
        self._glow_sent = {}

    def _on_countdown_expired(self) -> None:
        log.info("Session countdown reached zero")
        self.end_session()

    # =========================================================================
    # Input and arbitration
    # =========================================================================

    def handle_direction(self, token, now: Optional[float] = None) -> Optional[Buffer]:
        """Deliver one direction key press.

        Ignored unless initialized, playing and in GAME.

        Returns:
            The buffer after the press, or None if the press was ignored
        """
        if not self._initialized or not self._running:
            log.trace("Direction %r ignored, not playing", token)
            return None
        if self.session.scene != Scene.GAME:
            log.trace("Direction %r ignored outside GAME", token)
            return None
        try:
            direction = Direction(token)
        except ValueError:
            log.warning("Unknown direction %r ignored", token)
            return None
        if now is None:
            now = self.scheduler.now()
        return self.recognizer.on_direction(direction, now)

    def _on_buffer(self, buffer: Buffer) -> None:
        self.bus.emit(EventKind.KEY_COMBO, KeyComboPayload(buffer=buffer))
        if len(buffer) < COMBO_LENGTH:
            return
        # Always re-read the head; earlier references may be stale
        active = self.spawner.get_active_item()
        if active is None:
            return
        if buffer == active.required_combo:
            self._dispose(active)
        else:
            self._penalize(active)

    def _dispose(self, item: TrashItem) -> None:
        self.spawner.remove_active_item()
        delta = self.session.apply_disposal(item.category)
        log.info("Disposed %s (%s) %+d -> %d",
                 item.id, item.category.value, delta, self.session.score)
        self.bus.emit(EventKind.TRASH_DISPOSED, TrashDisposedPayload(
            category=item.category,
            score=self.session.score,
            delta=delta,
        ))
        self.recognizer.reset()
        self.presentation.play_sound(SoundName.GOOD)
        self.player.jump()
        self.presentation.player_react()
        self._drop_glow(item)
        self._check_level()
        self._emit_state()

    def _penalize(self, item: TrashItem) -> None:
        removed = self.session.apply_penalty()
        log.info("Wrong combo for %s (%s) -%d -> %d",
                 item.id, item.category.value, removed, self.session.score)
        self.presentation.play_sound(SoundName.BAD)
        self.recognizer.reset()
        self._emit_state()

    def _check_level(self) -> None:
        for level in self.ladder.check(self.session.score):
            self.session.level = level.number
            self.spawner.set_item_speed(level.speed)
            self.bus.emit(EventKind.LEVEL_UP, LevelUpPayload(level=level.number, speed=level.speed))

    # =========================================================================
    # Spawner callbacks
    # =========================================================================

    def _on_spawn(self, item: TrashItem) -> None:
        self.presentation.play_sound(SoundName.SPAWN)

    def _on_activate(self, item: TrashItem) -> None:
        self.session.record_activation()
        self.bus.emit(EventKind.NOTIFY_ACTIVE_TRASH, NotifyActiveTrashPayload(
            item_id=item.id,
            category=item.category,
            required_combo=item.required_combo,
        ))

    def _on_expire(self, item: TrashItem) -> None:
        self.session.record_expired()
        self._drop_glow(item)
        self.bus.emit(EventKind.TRASH_EXPIRED, TrashExpiredPayload(
            item_id=item.id,
            category=item.category,
        ))

    # =========================================================================
    # Events and state
    # =========================================================================

    def set_assets_loading(self, loading: bool, error: Optional[str] = None) -> None:
        """Pass asset loading progress through to listeners."""
        if error:
            log.error("Asset loading failed: %s", error)
        self.bus.emit(EventKind.LOADING_ASSETS, LoadingAssetsPayload(loading=loading, error=error))

    def add_event_listener(self, name, handler: Handler) -> Subscription:
        return self.bus.subscribe(name, handler)

    def remove_event_listener(self, name, handler: Handler) -> bool:
        return self.bus.unsubscribe(name, handler)

    def get_game_state(self) -> SessionSnapshot:
        if self.session is None:
            return SessionSnapshot()
        return self.session.snapshot()

    def _emit_state(self) -> None:
        self.bus.emit(EventKind.STATE_CHANGE, self.session.snapshot())

    def _record_session(self) -> None:
        record = {'type': 'summary', 'pacing': self.settings.pacing.name}
        record.update(self.session.stats())
        if emit_record('session', record):
            log.debug("Session record written")
