"""
Recycler - Configuration loader.

Static tables (categories, combos, score deltas, model keys) live here as
module constants. Tunables are read from the environment, optionally
seeded from a ``.env`` file next to the package, and bundled into
``GameSettings``.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple

from dotenv import load_dotenv

from recycler.enums import Category, Direction
from recycler.logging import get_logger
from recycler.pacing import PACING_PRESETS, PacingPreset, get_pacing_preset

log = get_logger('config')

# Load .env from package directory
_env_path = Path(__file__).parent / '.env'
load_dotenv(_env_path)

COMBO_LENGTH = 4

Combo = Tuple[Direction, ...]


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment."""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 'yes')


def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.getenv(key, str(default)))


def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.getenv(key, str(default)))


def _get_optional_int(key: str, default: Optional[int]) -> Optional[int]:
    """Get integer from environment; 'none' or empty disables the value."""
    raw = os.getenv(key)
    if raw is None:
        return default
    if raw.strip().lower() in ('', 'none', 'off'):
        return None
    return int(raw)


# Category -> required combo
TRASH_COMBINATIONS: Dict[Category, Combo] = {
    Category.GLASS: (Direction.UP, Direction.DOWN, Direction.UP, Direction.DOWN),
    Category.METAL_AND_PLASTIC: (Direction.LEFT, Direction.RIGHT, Direction.LEFT, Direction.RIGHT),
    Category.ORGANIC: (Direction.DOWN, Direction.DOWN, Direction.UP, Direction.UP),
    Category.PAPER: (Direction.RIGHT, Direction.RIGHT, Direction.LEFT, Direction.LEFT),
    Category.NON_RECYCLABLE: (Direction.UP, Direction.UP, Direction.UP, Direction.UP),
}

# Points awarded per disposal; non-recyclables cost points when binned
SCORE_DELTAS: Dict[Category, int] = {
    Category.GLASS: 30,
    Category.METAL_AND_PLASTIC: 20,
    Category.ORGANIC: 10,
    Category.PAPER: 15,
    Category.NON_RECYCLABLE: -10,
}

# Model keys the presentation layer may resolve through the resource provider
CATEGORY_MODELS: Dict[Category, Tuple[str, ...]] = {
    Category.GLASS: ("botellaVino", "botellin", "copaRota", "botellaLicor"),
    Category.METAL_AND_PLASTIC: ("botellaPlastico", "bolsa", "sodaCan", "lataAtun"),
    Category.ORGANIC: ("bananaPeel", "manzana", "musloPollo", "pizzaSlice", "eggShell"),
    Category.PAPER: ("pizzaBox", "paper", "paperRoll"),
    Category.NON_RECYCLABLE: ("jeringuilla", "bateria", "movil"),
}

FALLBACK_MODELS: Dict[Category, str] = {
    Category.GLASS: "primitive:cone",
    Category.METAL_AND_PLASTIC: "primitive:sphere",
    Category.ORGANIC: "primitive:torus",
    Category.PAPER: "primitive:box",
    Category.NON_RECYCLABLE: "primitive:cylinder",
}

# Display colors per category (RGB), used by the pygame host
CATEGORY_COLORS: Dict[Category, Tuple[int, int, int]] = {
    Category.GLASS: (152, 178, 83),
    Category.METAL_AND_PLASTIC: (255, 255, 0),
    Category.ORGANIC: (139, 69, 19),
    Category.PAPER: (0, 0, 255),
    Category.NON_RECYCLABLE: (255, 0, 0),
}


def validate_combo_table(table: Mapping[Category, Sequence]) -> Dict[Category, Combo]:
    """Validate and normalise a category -> combo table.

    Tokens may be Direction members or their string values.

    Raises:
        ValueError: If a combo is not exactly COMBO_LENGTH tokens or a
            token is not a known direction.
    """
    normalised: Dict[Category, Combo] = {}
    for category, combo in table.items():
        tokens = tuple(Direction(token) for token in combo)
        if len(tokens) != COMBO_LENGTH:
            raise ValueError(
                f"Combo for {Category(category).value} must have {COMBO_LENGTH} tokens, got {len(tokens)}"
            )
        normalised[Category(category)] = tokens
    return normalised


def get_required_combo(category: Category, table: Mapping[Category, Combo]) -> Combo:
    """Look up the combo for a category, falling back to non-recyclable.

    A category missing from the table is a configuration gap, not a fatal
    error: the non-recyclable combo is used instead.
    """
    combo = table.get(category)
    if combo is None:
        log.warning("No combo configured for %s, using %s combo",
                    category.value, Category.NON_RECYCLABLE.value)
        combo = table.get(Category.NON_RECYCLABLE, TRASH_COMBINATIONS[Category.NON_RECYCLABLE])
    return tuple(combo)


@dataclass
class GameSettings:
    """Every tunable the core consumes, in one place.

    Build with ``GameSettings.from_env()`` for environment-driven values or
    construct directly (tests do) to pin exact numbers.
    """
    # Input
    input_timeout: float = 1.0            # Seconds between tokens before the buffer clears

    # Trash items
    item_lifespan: float = 23.0           # Seconds before an unclaimed item expires
    spawn_duration: float = 1.0           # Seconds of spawn-in scale animation
    spawn_scale: float = 0.01
    target_scale: float = 0.04
    item_speed: float = 0.5               # Travel units per second
    spawn_position: Tuple[float, float, float] = (-20.0, 2.0, 0.0)
    travel_direction: Tuple[float, float, float] = (1.0, 0.0, 0.0)

    # Glow feedback
    max_glow_intensity: float = 1.0
    glow_pulse_speed: float = 5.0         # Radians per second of the active pulse

    # Spawn cadence
    pacing: PacingPreset = field(default_factory=lambda: PACING_PRESETS['normal'])

    # Scoring
    combos: Dict[Category, Combo] = field(default_factory=lambda: dict(TRASH_COMBINATIONS))
    score_deltas: Dict[Category, int] = field(default_factory=lambda: dict(SCORE_DELTAS))
    penalty: int = 5
    score_floor: Optional[int] = 0        # None allows negative scores

    # Session
    session_duration: float = 180.0
    max_frame_dt: float = 0.25            # Clamp for a single tick delta

    # Player reaction
    jump_duration: float = 0.4
    jump_height: float = 0.6

    def __post_init__(self) -> None:
        self.combos = validate_combo_table(self.combos)

    @classmethod
    def from_env(cls, pacing: Optional[str] = None) -> 'GameSettings':
        """Build settings from RECYCLER_* environment variables."""
        preset_name = pacing or os.getenv('RECYCLER_PACING', 'normal')
        preset = get_pacing_preset(PACING_PRESETS, preset_name)

        overrides = {
            'initial_interval': os.getenv('RECYCLER_SPAWN_INTERVAL'),
            'floor': os.getenv('RECYCLER_SPAWN_FLOOR'),
            'step': os.getenv('RECYCLER_SPAWN_STEP'),
            'epoch': os.getenv('RECYCLER_SPAWN_EPOCH'),
        }
        if any(v is not None for v in overrides.values()):
            preset = PacingPreset(
                name=f"{preset.name}+env",
                initial_interval=float(overrides['initial_interval'] or preset.initial_interval),
                floor=float(overrides['floor'] or preset.floor),
                step=float(overrides['step'] or preset.step),
                epoch=float(overrides['epoch'] or preset.epoch),
            )

        return cls(
            input_timeout=_get_float('RECYCLER_INPUT_TIMEOUT', 1.0),
            item_lifespan=_get_float('RECYCLER_ITEM_LIFESPAN', 23.0),
            spawn_duration=_get_float('RECYCLER_SPAWN_DURATION', 1.0),
            item_speed=_get_float('RECYCLER_ITEM_SPEED', 0.5),
            pacing=preset,
            penalty=_get_int('RECYCLER_PENALTY', 5),
            score_floor=_get_optional_int('RECYCLER_SCORE_FLOOR', 0),
            session_duration=_get_float('RECYCLER_SESSION_DURATION', 180.0),
            max_frame_dt=_get_float('RECYCLER_MAX_FRAME_DT', 0.25),
        )


# Host display
SCREEN_WIDTH = _get_int('RECYCLER_SCREEN_WIDTH', 1280)
SCREEN_HEIGHT = _get_int('RECYCLER_SCREEN_HEIGHT', 720)
FPS = _get_int('RECYCLER_FPS', 60)
AUDIO_ENABLED = _get_bool('RECYCLER_AUDIO_ENABLED', True)
BACKGROUND_COLOR = (17, 17, 34)
