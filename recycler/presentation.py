"""
Presentation interface.

The only calls the core makes outward besides events: draw a frame, play
a named sound cue, run the player's reaction, and apply an item's glow.
"""
from abc import ABC, abstractmethod

from recycler.enums import SoundName
from recycler.models import RenderFrame


class Presentation(ABC):
    """Abstract presentation layer driven by the Engine."""

    @abstractmethod
    def render(self, frame: RenderFrame) -> None:
        """Draw one frame."""
        pass

    @abstractmethod
    def play_sound(self, name: SoundName) -> None:
        """Play a named sound cue."""
        pass

    def player_react(self) -> None:
        """Run the cosmetic player reaction after a disposal."""
        pass

    def apply_glow(self, item_id: str, intensity: float) -> None:
        """Set the glow intensity of one item's visual."""
        pass


class NullPresentation(Presentation):
    """Presentation that draws and plays nothing (headless runs)."""

    def render(self, frame: RenderFrame) -> None:
        pass

    def play_sound(self, name: SoundName) -> None:
        pass
