"""
Direction Event - a single accepted direction key press.
"""
from pydantic import BaseModel, ConfigDict, Field

from recycler.enums import Direction


class DirectionEvent(BaseModel):
    """Immutable direction input from any source.

    Attributes:
        direction: The direction token
        timestamp: Time of the press (seconds, monotonic clock)
    """
    direction: Direction
    timestamp: float = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"DirectionEvent({self.direction.value}, t={self.timestamp:.3f})"
