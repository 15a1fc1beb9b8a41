"""
Level ladder support.

A ladder is an ordered list of levels loaded from YAML. Each level has a
score threshold and the item travel speed used while it is current; when
the session score reaches the current threshold the ladder advances.

Example ladder (ladders/default.yaml):
    name: "Default"
    description: "Three levels, speeding up as the score grows"
    levels:
      - score_to_beat: 20
        speed: 0.5
      - score_to_beat: 50
        speed: 2
      - score_to_beat: 70
        speed: 4
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from recycler.logging import get_logger

log = get_logger('levels')

LADDERS_DIR = Path(__file__).parent / 'ladders'


# =============================================================================
# Level Data Classes
# =============================================================================

@dataclass(frozen=True)
class LevelSpec:
    """One rung of the ladder."""
    number: int            # 1-based
    score_to_beat: int
    speed: float
    name: str = ""


@dataclass
class LadderData:
    """A parsed ladder file."""
    name: str
    slug: str
    levels: List[LevelSpec]
    description: str = ""
    author: str = "unknown"
    file_path: Optional[Path] = None


DEFAULT_LADDER = LadderData(
    name="Default",
    slug="default",
    levels=[
        LevelSpec(number=1, score_to_beat=20, speed=0.5),
        LevelSpec(number=2, score_to_beat=50, speed=2.0),
        LevelSpec(number=3, score_to_beat=70, speed=4.0),
    ],
)


def _load_data_file(path: Path) -> Dict[str, Any]:
    """Load a YAML ladder file."""
    if not path.exists():
        raise FileNotFoundError(f"No data file found: {path}")
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


# =============================================================================
# Loader
# =============================================================================

class LevelLoader:
    """Loads ladder YAML files from a directory.

    Usage:
        loader = LevelLoader()
        print(loader.list_ladders())
        ladder = LevelLadder(loader.load_ladder('default'))
    """

    def __init__(self, levels_dir: Path = LADDERS_DIR):
        """Initialize the loader.

        Args:
            levels_dir: Directory containing ladder YAML files
        """
        self._levels_dir = Path(levels_dir)
        self._cache: Dict[str, LadderData] = {}

    @property
    def levels_dir(self) -> Path:
        return self._levels_dir

    def list_ladders(self) -> List[str]:
        """List available ladder slugs (sorted)."""
        if not self._levels_dir.exists():
            return []
        slugs = set()
        for ext in ['*.yaml', '*.yml']:
            for path in self._levels_dir.glob(ext):
                if path.name.startswith("_") or path.name.startswith("."):
                    continue
                slugs.add(path.stem)
        return sorted(slugs)

    def load_ladder(self, slug_or_path: str) -> LadderData:
        """Load a ladder by slug or by file path.

        Raises:
            FileNotFoundError: If the ladder file doesn't exist
            ValueError: If the ladder file is invalid
        """
        if slug_or_path in self._cache:
            return self._cache[slug_or_path]

        path = self._find_ladder_file(slug_or_path)
        if not path:
            raise FileNotFoundError(f"Ladder not found: {slug_or_path}")

        data = _load_data_file(path)
        if not data:
            raise ValueError(f"Empty ladder file: {path}")

        ladder = self._parse_ladder_data(data, path)
        self._cache[slug_or_path] = ladder
        log.debug("Loaded ladder '%s' with %d levels", ladder.name, len(ladder.levels))
        return ladder

    def _find_ladder_file(self, slug_or_path: str) -> Optional[Path]:
        candidate = Path(slug_or_path)
        if candidate.suffix in ('.yaml', '.yml') and candidate.exists():
            return candidate
        for ext in ['.yaml', '.yml']:
            direct = self._levels_dir / f"{slug_or_path}{ext}"
            if direct.exists():
                return direct
        return None

    def _parse_ladder_data(self, data: Dict[str, Any], file_path: Path) -> LadderData:
        raw_levels = data.get('levels')
        if not isinstance(raw_levels, list) or not raw_levels:
            raise ValueError(f"{file_path}: 'levels' must be a non-empty list")

        levels: List[LevelSpec] = []
        previous = None
        for index, entry in enumerate(raw_levels, start=1):
            if not isinstance(entry, dict):
                raise ValueError(f"{file_path}: level {index} must be a mapping")
            try:
                score_to_beat = int(entry['score_to_beat'])
                speed = float(entry['speed'])
            except KeyError as e:
                raise ValueError(f"{file_path}: level {index} is missing {e.args[0]!r}") from e
            except (TypeError, ValueError) as e:
                raise ValueError(f"{file_path}: level {index} has a non-numeric value") from e

            if score_to_beat < 0:
                raise ValueError(f"{file_path}: level {index} score_to_beat must be >= 0")
            if speed <= 0:
                raise ValueError(f"{file_path}: level {index} speed must be > 0")
            if previous is not None and score_to_beat <= previous:
                raise ValueError(f"{file_path}: score_to_beat must increase (level {index})")
            previous = score_to_beat

            levels.append(LevelSpec(
                number=index,
                score_to_beat=score_to_beat,
                speed=speed,
                name=str(entry.get('name', f"Level {index}")),
            ))

        return LadderData(
            name=data.get('name', file_path.stem),
            slug=file_path.stem,
            levels=levels,
            description=data.get('description', ''),
            author=data.get('author', 'unknown'),
            file_path=file_path,
        )


# =============================================================================
# Runtime ladder
# =============================================================================

@dataclass
class LevelLadder:
    """Tracks progress through a ladder during one session.

    Examples:
        >>> ladder = LevelLadder(DEFAULT_LADDER)
        >>> [lvl.number for lvl in ladder.check(20)]
        [2]
        >>> ladder.speed
        2.0
    """
    data: LadderData = field(default_factory=lambda: DEFAULT_LADDER)
    current_index: int = 0

    @property
    def current(self) -> LevelSpec:
        return self.data.levels[self.current_index]

    @property
    def level(self) -> int:
        """Current 1-based level number."""
        return self.current_index + 1

    @property
    def speed(self) -> float:
        return self.current.speed

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.data.levels) - 1

    def check(self, score: int) -> List[LevelSpec]:
        """Advance past every threshold ``score`` has reached.

        The last level never advances.

        Returns:
            Levels entered, in order (empty if none)
        """
        entered: List[LevelSpec] = []
        while not self.is_last and score >= self.current.score_to_beat:
            self.current_index += 1
            entered.append(self.current)
            log.info("Level up: %d (speed %.2f)", self.level, self.speed)
        return entered

    def reset(self) -> None:
        """Back to level 1."""
        self.current_index = 0
