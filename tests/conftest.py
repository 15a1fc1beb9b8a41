"""Pytest fixtures for recycler tests."""
import random
from typing import Any, List, Tuple

import pytest

from recycler.config import GameSettings
from recycler.engine import Engine
from recycler.events import EventKind
from recycler.logging import close_all_sinks
from recycler.models import RenderFrame
from recycler.pacing import PacingPreset
from recycler.presentation import Presentation
from recycler.scheduler import ManualFrameScheduler

# Long enough that nothing spawns unless a test asks for it
NO_AUTO_SPAWN = PacingPreset(name='test', initial_interval=1000.0, floor=1000.0, step=0.0, epoch=60.0)


class RecordingPresentation(Presentation):
    """Presentation that records every call."""

    def __init__(self):
        self.frames: List[RenderFrame] = []
        self.sounds: List[str] = []
        self.reactions = 0
        self.glows: List[Tuple[str, float]] = []

    def render(self, frame: RenderFrame) -> None:
        self.frames.append(frame)

    def play_sound(self, name) -> None:
        self.sounds.append(name.value)

    def player_react(self) -> None:
        self.reactions += 1

    def apply_glow(self, item_id: str, intensity: float) -> None:
        self.glows.append((item_id, intensity))


class EventRecorder:
    """Collects (kind, payload) pairs for every EventKind."""

    def __init__(self, engine: Engine):
        self.events: List[Tuple[EventKind, Any]] = []
        for kind in EventKind:
            engine.add_event_listener(kind, lambda payload, kind=kind: self.events.append((kind, payload)))

    def of(self, kind: EventKind) -> List[Any]:
        return [payload for k, payload in self.events if k == kind]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def settings():
    """Default settings with automatic spawning switched off."""
    return GameSettings(pacing=NO_AUTO_SPAWN)


@pytest.fixture
def scheduler():
    return ManualFrameScheduler(start=100.0)


@pytest.fixture
def presentation():
    return RecordingPresentation()


@pytest.fixture
def engine(scheduler, presentation, settings):
    """Uninitialized engine with a seeded RNG."""
    eng = Engine(scheduler, presentation=presentation, settings=settings, rng=random.Random(42))
    yield eng
    eng.destroy()


@pytest.fixture
def recorder(engine):
    return EventRecorder(engine)


@pytest.fixture
def playing(engine, scheduler, recorder):
    """Engine in GAME, playing, after one (zero-length) frame."""
    engine.init()
    engine.start_game()
    scheduler.step()
    recorder.clear()
    return engine


@pytest.fixture
def make_engine(scheduler, presentation):
    """Factory for initialized engines in GAME with custom settings.

    Returns (engine, recorder). Automatic spawning is off unless a
    pacing preset is passed.
    """
    created = []

    def factory(**overrides):
        overrides.setdefault('pacing', NO_AUTO_SPAWN)
        eng = Engine(scheduler, presentation=presentation,
                     settings=GameSettings(**overrides), rng=random.Random(7))
        rec = EventRecorder(eng)
        eng.init()
        eng.start_game()
        scheduler.step()
        created.append(eng)
        return eng, rec

    yield factory
    for eng in created:
        eng.destroy()


@pytest.fixture(autouse=True)
def _close_sinks():
    yield
    close_all_sinks()


def enter(engine: Engine, combo, now=None) -> None:
    """Feed every token of ``combo`` at the same instant."""
    for token in combo:
        engine.handle_direction(token, now=now)


@pytest.fixture
def feed():
    """The ``enter`` helper as a fixture."""
    return enter
