"""
Spawn cadence presets.

A preset bundles the spawn-interval schedule: the interval starts at
``initial_interval`` and shrinks by ``step`` every ``epoch`` seconds of
play, never dropping below ``floor``.
"""

from dataclasses import dataclass
from typing import Dict, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class PacingPreset:
    """Timing parameters for one difficulty curve."""
    name: str
    initial_interval: float    # Seconds between spawns at session start
    floor: float               # Shortest interval the schedule reaches
    step: float                # Seconds removed from the interval per epoch
    epoch: float               # Seconds of play per difficulty epoch

    def interval_at(self, elapsed: float) -> float:
        """Spawn interval after ``elapsed`` seconds of play.

        Examples:
            >>> p = PacingPreset('x', initial_interval=2.0, floor=1.0, step=0.25, epoch=10.0)
            >>> p.interval_at(0.0)
            2.0
            >>> p.interval_at(25.0)
            1.5
            >>> p.interval_at(1000.0)
            1.0
        """
        epochs = int(elapsed / self.epoch) if self.epoch > 0 else 0
        return max(self.floor, self.initial_interval - epochs * self.step)


PACING_PRESETS: Dict[str, PacingPreset] = {
    'relaxed': PacingPreset(
        name='relaxed',
        initial_interval=3.0,
        floor=1.5,
        step=0.25,
        epoch=30.0,
    ),
    'normal': PacingPreset(
        name='normal',
        initial_interval=2.0,
        floor=0.8,
        step=0.2,
        epoch=20.0,
    ),
    'frantic': PacingPreset(
        name='frantic',
        initial_interval=1.2,
        floor=0.4,
        step=0.1,
        epoch=10.0,
    ),
}


def get_pacing_preset(
    presets: Dict[str, T],
    name: str,
    default: str = 'normal'
) -> T:
    """
    Get a pacing preset by name with fallback.

    Args:
        presets: Dict mapping preset names to preset objects
        name: Requested preset name
        default: Fallback preset name if requested not found

    Returns:
        The preset object
    """
    if name in presets:
        return presets[name]
    if default in presets:
        return presets[default]
    return next(iter(presets.values()))


def get_pacing_names() -> list:
    """Get list of pacing preset names."""
    return list(PACING_PRESETS.keys())
