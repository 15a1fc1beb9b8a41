"""
Recycler Rush

Runtime core of a timed arcade recycling game: trash items arrive on an
accelerating schedule and are disposed of by entering a category's
4-token directional combo. Presentation and platform code plug in through
FrameScheduler, Presentation and ResourceProvider; ``recycler.host`` is
the pygame front end.
"""

from recycler.engine import Engine
from recycler.enums import Category, Direction, Scene, SoundName, TrashState
from recycler.events import EventKind

__version__ = "0.1.0"

__all__ = [
    'Category',
    'Direction',
    'Engine',
    'EventKind',
    'Scene',
    'SoundName',
    'TrashState',
]
