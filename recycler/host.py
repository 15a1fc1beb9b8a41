#!/usr/bin/env python3
"""
Recycler Rush - pygame host.

Runs the core in a pygame window with keyboard input. The host owns the
platform pieces the core only sees through interfaces: the frame
scheduler, the presentation layer and the resource provider.

Usage:
    recycler
    recycler --pacing frantic --session 60
    recycler --ladder marathon --seed 7
    recycler --list-ladders

Controls:
    Arrows / WASD   enter combo tokens
    ENTER           start (menu) / back to menu (score screen)
    ESC             pause / resume
    Q               quit
"""
import argparse
import random
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pygame

from recycler import config
from recycler.config import CATEGORY_COLORS, CATEGORY_MODELS, GameSettings
from recycler.engine import Engine
from recycler.enums import Direction, Scene, SoundName
from recycler.events import EventKind
from recycler.input.sources.keyboard import KeyboardDirectionSource
from recycler.levels import LevelLadder, LevelLoader
from recycler.logging import close_all_sinks, create_sink_for_module, get_logger, register_sink
from recycler.models import NotifyActiveTrashPayload, RenderFrame, SessionSnapshot
from recycler.pacing import get_pacing_names
from recycler.presentation import Presentation
from recycler.resources import ResourceProvider
from recycler.scheduler import FrameScheduler

log = get_logger('host')

ASSETS_DIR = Path(__file__).parent / 'assets'

ARROWS = {
    Direction.UP: "^",
    Direction.DOWN: "v",
    Direction.LEFT: "<",
    Direction.RIGHT: ">",
}

ARGUMENTS = [
    {
        'name': '--pacing',
        'type': str,
        'default': None,
        'choices': get_pacing_names(),
        'help': 'Spawn cadence preset (defaults to RECYCLER_PACING or normal)'
    },
    {
        'name': '--session',
        'type': float,
        'default': None,
        'help': 'Session length in seconds'
    },
    {
        'name': '--ladder',
        'type': str,
        'default': 'default',
        'help': 'Level ladder slug or YAML path'
    },
    {
        'name': '--list-ladders',
        'action': 'store_true',
        'default': False,
        'help': 'List available level ladders and exit'
    },
    {
        'name': '--seed',
        'type': int,
        'default': None,
        'help': 'Random seed for item categories'
    },
    {
        'name': '--fps',
        'type': int,
        'default': None,
        'help': 'Frame rate cap'
    },
    {
        'name': '--assets',
        'type': str,
        'default': None,
        'help': 'Directory with sounds/ and models/ subdirectories'
    },
    {
        'name': '--fullscreen',
        'action': 'store_true',
        'default': False,
        'help': 'Run fullscreen'
    },
]


# =============================================================================
# Platform adapters
# =============================================================================

class PygameFrameScheduler(FrameScheduler):
    """Frame scheduler pumped once per pygame loop iteration."""

    def now(self) -> float:
        return time.monotonic()


class PygameResourceProvider(ResourceProvider):
    """Loads sounds and model sprites from an assets directory.

    Sounds are looked up as ``sound:<name>``; model sprites by their model
    key (``sodaCan``, ``pizzaBox``...). Missing files are not an error: the
    core falls back to primitive shapes and silent cues.
    """

    def __init__(self, assets_dir: Path = ASSETS_DIR, audio: bool = True):
        self._assets_dir = Path(assets_dir)
        self._audio = audio
        self._resources: Dict[str, Any] = {}
        self._ready = False
        self._error: Optional[str] = None

    def is_ready(self) -> bool:
        return self._ready

    def get(self, key: str) -> Optional[Any]:
        return self._resources.get(key)

    @property
    def error(self) -> Optional[str]:
        return self._error

    def load(self) -> bool:
        """Load everything found under the assets directory.

        Returns:
            True if loading finished without errors
        """
        self._ready = False
        self._error = None
        try:
            if self._audio:
                self._load_sounds(self._assets_dir / 'sounds')
            self._load_models(self._assets_dir / 'models')
        except pygame.error as e:
            self._error = str(e)
            log.error("Asset loading failed: %s", e)
            return False
        self._ready = True
        log.info("Loaded %d assets from %s", len(self._resources), self._assets_dir)
        return True

    def _load_sounds(self, sounds_dir: Path) -> None:
        if not sounds_dir.exists():
            log.debug("No sounds directory at %s", sounds_dir)
            return
        for name in SoundName:
            for ext in ('.ogg', '.wav', '.mp3'):
                path = sounds_dir / f"{name.value}{ext}"
                if path.exists():
                    self._resources[f"sound:{name.value}"] = pygame.mixer.Sound(str(path))
                    break

    def _load_models(self, models_dir: Path) -> None:
        if not models_dir.exists():
            log.debug("No models directory at %s", models_dir)
            return
        for keys in CATEGORY_MODELS.values():
            for key in keys:
                path = models_dir / f"{key}.png"
                if path.exists():
                    self._resources[key] = pygame.image.load(str(path)).convert_alpha()


class PygamePresentation(Presentation):
    """Draws frames, HUD and menus; plays sounds through the provider."""

    def __init__(self, screen: pygame.Surface, resources: ResourceProvider):
        self.screen = screen
        self.resources = resources
        self._font: Optional[pygame.font.Font] = None
        self._font_large: Optional[pygame.font.Font] = None
        self._last_frame: Optional[RenderFrame] = None
        self._active: Optional[NotifyActiveTrashPayload] = None
        self._glow: Dict[str, float] = {}
        self._flash = 0.0

    def attach(self, engine: Engine) -> None:
        """Subscribe to the engine events the HUD shows."""
        engine.add_event_listener(EventKind.NOTIFY_ACTIVE_TRASH, self._on_active)
        engine.add_event_listener(EventKind.TRASH_DISPOSED, lambda _: self._clear_active())
        engine.add_event_listener(EventKind.TRASH_EXPIRED, self._on_expired)
        engine.add_event_listener(EventKind.GAME_RESET, lambda _: self._clear_active())

    def _on_active(self, payload: NotifyActiveTrashPayload) -> None:
        self._active = payload

    def _on_expired(self, payload) -> None:
        if self._active is not None and self._active.item_id == payload.item_id:
            self._active = None

    def _clear_active(self) -> None:
        self._active = None

    def _get_font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.Font(None, 36)
        return self._font

    def _get_font_large(self) -> pygame.font.Font:
        if self._font_large is None:
            self._font_large = pygame.font.Font(None, 72)
        return self._font_large

    # -- Presentation interface ---------------------------------------------

    def render(self, frame: RenderFrame) -> None:
        self._last_frame = frame
        if self._flash > 0:
            self._flash = max(0.0, self._flash - frame.dt)
        self.draw(frame.session)

    def play_sound(self, name: SoundName) -> None:
        sound = self.resources.get(f"sound:{name.value}")
        if sound is None:
            return
        sound.play(loops=-1 if name == SoundName.MUSIC else 0)

    def player_react(self) -> None:
        self._flash = 0.25

    def apply_glow(self, item_id: str, intensity: float) -> None:
        if intensity > 0:
            self._glow[item_id] = intensity
        else:
            self._glow.pop(item_id, None)

    # -- Drawing ------------------------------------------------------------

    def draw(self, state: SessionSnapshot) -> None:
        """Draw the current scene for ``state``."""
        self.screen.fill(config.BACKGROUND_COLOR)
        if state.scene == Scene.MAIN_MENU:
            self._draw_menu()
        elif state.scene == Scene.SCORE_SCREEN:
            self._draw_score_screen(state)
        else:
            self._draw_game(state)

    def _project(self, position: Tuple[float, float, float]) -> Tuple[int, int]:
        width, height = self.screen.get_size()
        x, y, _ = position
        # World x runs from the spawn point (-20) to the player (0)
        sx = int((x + 20.0) / 22.0 * width)
        sy = int(height * 0.55 - y * 40.0)
        return sx, sy

    def _draw_game(self, state: SessionSnapshot) -> None:
        width, height = self.screen.get_size()
        frame = self._last_frame

        player_y = int(height * 0.6)
        if frame is not None:
            player_y -= int(frame.player_offset * 100)
        player_color = (120, 255, 120) if self._flash > 0 else (200, 200, 200)
        pygame.draw.rect(self.screen, player_color,
                         pygame.Rect(width - 120, player_y, 50, 80))

        if frame is not None:
            for item in frame.items:
                self._draw_item(item)

        font = self._get_font()
        hud = [
            f"Score: {state.score}",
            f"Level: {state.level}",
            f"Time: {int(state.session_remaining)}s",
        ]
        for i, line in enumerate(hud):
            text = font.render(line, True, (255, 255, 255))
            self.screen.blit(text, (10, 10 + i * 30))

        if self._active is not None:
            combo = " ".join(ARROWS[d] for d in self._active.required_combo)
            text = font.render(f"{self._active.category.value}: {combo}", True,
                               CATEGORY_COLORS[self._active.category])
            self.screen.blit(text, (width // 2 - text.get_width() // 2, 20))

        if frame is not None and frame.buffer:
            entered = " ".join(ARROWS[d] for d in frame.buffer)
            text = font.render(entered, True, (255, 255, 0))
            self.screen.blit(text, (width // 2 - text.get_width() // 2, 60))

        if not state.is_playing:
            paused = self._get_font_large().render("PAUSED", True, (255, 200, 0))
            self.screen.blit(paused, (width // 2 - paused.get_width() // 2, height // 2 - 36))

    def _draw_item(self, item) -> None:
        center = self._project(item.position)
        radius = max(2, int(item.scale * 1000))
        glow = self._glow.get(item.item_id, 0.0)
        if glow > 0:
            glow_radius = radius + int(10 * glow)
            pygame.draw.circle(self.screen, (255, 255, 200), center, glow_radius, width=3)
        sprite = self.resources.get(item.model_key)
        if sprite is not None:
            scaled = pygame.transform.smoothscale(sprite, (radius * 2, radius * 2))
            self.screen.blit(scaled, (center[0] - radius, center[1] - radius))
        else:
            pygame.draw.circle(self.screen, CATEGORY_COLORS[item.category], center, radius)

    def _draw_menu(self) -> None:
        width, height = self.screen.get_size()
        title = self._get_font_large().render("RECYCLER RUSH", True, (120, 255, 120))
        self.screen.blit(title, (width // 2 - title.get_width() // 2, height // 3))
        hint = self._get_font().render("Press ENTER to start", True, (255, 255, 255))
        self.screen.blit(hint, (width // 2 - hint.get_width() // 2, height // 2))

    def _draw_score_screen(self, state: SessionSnapshot) -> None:
        width, height = self.screen.get_size()
        title = self._get_font_large().render("TIME'S UP", True, (255, 200, 0))
        self.screen.blit(title, (width // 2 - title.get_width() // 2, height // 3))
        lines = [
            f"Final Score: {state.score}",
            f"Level reached: {state.level}",
            f"Disposed: {state.disposed}   Penalties: {state.penalties}   Missed: {state.expired}",
            "Press ENTER for the menu",
        ]
        font = self._get_font()
        for i, line in enumerate(lines):
            text = font.render(line, True, (255, 255, 255))
            self.screen.blit(text, (width // 2 - text.get_width() // 2, height // 2 + i * 36))


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recycler Rush")
    for arg in ARGUMENTS:
        kwargs = {k: v for k, v in arg.items() if k != 'name'}
        parser.add_argument(arg['name'], **kwargs)
    return parser


def build_settings(args: argparse.Namespace) -> GameSettings:
    """GameSettings from the environment with CLI overrides applied."""
    settings = GameSettings.from_env(pacing=args.pacing)
    if args.session is not None:
        settings.session_duration = args.session
    return settings


def _print_ladders(loader: LevelLoader) -> None:
    print("\nAvailable ladders:")
    print("-" * 40)
    for slug in loader.list_ladders():
        ladder = loader.load_ladder(slug)
        thresholds = "/".join(str(level.score_to_beat) for level in ladder.levels)
        print(f"  {slug:16} {ladder.name} ({thresholds})")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    """Run the game in a pygame window."""
    args = build_parser().parse_args(argv)

    loader = LevelLoader()
    if args.list_ladders:
        _print_ladders(loader)
        return 0

    try:
        ladder = LevelLadder(loader.load_ladder(args.ladder))
    except (FileNotFoundError, ValueError) as e:
        print(f"Failed to load ladder '{args.ladder}': {e}")
        return 1

    settings = build_settings(args)
    register_sink('session', create_sink_for_module('session'))

    pygame.init()
    if config.AUDIO_ENABLED:
        pygame.mixer.init()

    if args.fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    else:
        screen = pygame.display.set_mode((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
    pygame.display.set_caption("Recycler Rush")

    assets_dir = Path(args.assets) if args.assets else ASSETS_DIR
    resources = PygameResourceProvider(assets_dir, audio=config.AUDIO_ENABLED)
    scheduler = PygameFrameScheduler()
    presentation = PygamePresentation(screen, resources)
    engine = Engine(
        scheduler,
        presentation=presentation,
        resources=resources,
        settings=settings,
        ladder=ladder,
        rng=random.Random(args.seed),
    )
    presentation.attach(engine)
    engine.set_assets_loading(True)
    resources.load()
    engine.init()

    source = KeyboardDirectionSource()
    clock = pygame.time.Clock()
    fps = args.fps or config.FPS
    running = True

    print("=" * 50)
    print("RECYCLER RUSH")
    print("=" * 50)
    print("\nSort the trash before it reaches you!")
    print("\nControls:")
    print("  - Arrows / WASD to enter combos")
    print("  - ENTER to start")
    print("  - ESC to pause")
    print("  - Q to quit")
    print("=" * 50)

    while running:
        clock.tick(fps)
        source.update(0.0)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_q:
                    running = False
                elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                    state = engine.get_game_state()
                    if state.scene == Scene.MAIN_MENU:
                        engine.start_game()
                    elif state.scene == Scene.SCORE_SCREEN:
                        print(f"\nFinal score: {state.score}")
                        engine.reset_game()

        if source.consume_pause_request() and engine.get_game_state().scene == Scene.GAME:
            if engine.is_running:
                engine.pause()
            else:
                engine.resume()

        for direction_event in source.poll_events():
            engine.handle_direction(direction_event.direction, direction_event.timestamp)

        if scheduler.run_frame(scheduler.now()) == 0:
            # Loop paused: keep showing the current scene
            presentation.draw(engine.get_game_state())
        pygame.display.flip()

    engine.destroy()
    close_all_sinks()
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
