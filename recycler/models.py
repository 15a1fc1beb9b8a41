"""
Pydantic data models for the recycler core.

These models are the contract between the core and presentation code:
every outbound event carries one of the payloads below, and every render
request carries a RenderFrame. All models are immutable once created.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from recycler.config import COMBO_LENGTH
from recycler.enums import Category, Direction, Scene, TrashState


class SessionSnapshot(BaseModel):
    """Immutable view of the session state.

    Used as the ``stateChange`` payload and embedded in ``gameReset`` and
    every RenderFrame.

    Examples:
        >>> snap = SessionSnapshot(score=40, scene=Scene.GAME, is_playing=True,
        ...                        session_remaining=90.0)
        >>> snap.level
        1
    """
    score: int = 0
    scene: Scene = Scene.MAIN_MENU
    is_playing: bool = False
    session_remaining: float = Field(default=0.0, ge=0)
    level: int = Field(default=1, ge=1)
    disposed: int = Field(default=0, ge=0)
    penalties: int = Field(default=0, ge=0)
    expired: int = Field(default=0, ge=0)
    activations: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class LoadingAssetsPayload(BaseModel):
    """Asset loading progress passed through from the resource provider."""
    loading: bool
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class NotifyActiveTrashPayload(BaseModel):
    """Sent once when an item becomes the active (disposable) item."""
    item_id: str
    category: Category
    required_combo: Tuple[Direction, ...]

    @field_validator('required_combo')
    @classmethod
    def validate_combo_length(cls, v: Tuple[Direction, ...]) -> Tuple[Direction, ...]:
        """Validate the combo has exactly COMBO_LENGTH tokens."""
        if len(v) != COMBO_LENGTH:
            raise ValueError(f'Combo must have {COMBO_LENGTH} tokens, got {len(v)}')
        return v

    model_config = ConfigDict(frozen=True)


class KeyComboPayload(BaseModel):
    """Current input buffer, sent on every change including resets."""
    buffer: Tuple[Direction, ...] = ()

    @field_validator('buffer')
    @classmethod
    def validate_buffer_length(cls, v: Tuple[Direction, ...]) -> Tuple[Direction, ...]:
        """Validate the buffer never exceeds COMBO_LENGTH tokens."""
        if len(v) > COMBO_LENGTH:
            raise ValueError(f'Buffer holds at most {COMBO_LENGTH} tokens, got {len(v)}')
        return v

    model_config = ConfigDict(frozen=True)


class TrashDisposedPayload(BaseModel):
    """A matching combo removed the active item."""
    category: Category
    score: int
    delta: int = 0

    model_config = ConfigDict(frozen=True)


class TrashExpiredPayload(BaseModel):
    """An item left play unclaimed."""
    item_id: str
    category: Category

    model_config = ConfigDict(frozen=True)


class GamePausedPayload(BaseModel):
    model_config = ConfigDict(frozen=True)


class GameResumedPayload(BaseModel):
    model_config = ConfigDict(frozen=True)


class GameResetPayload(BaseModel):
    """Session state right after a reset."""
    state: SessionSnapshot

    model_config = ConfigDict(frozen=True)


class LevelUpPayload(BaseModel):
    """The level ladder advanced."""
    level: int = Field(..., ge=1)
    speed: float = Field(..., gt=0)

    model_config = ConfigDict(frozen=True)


class TrashView(BaseModel):
    """Render-facing snapshot of one queued item."""
    item_id: str
    category: Category
    state: TrashState
    position: Tuple[float, float, float]
    scale: float
    glow_intensity: float = Field(default=0.0, ge=0)
    model_key: str
    is_active: bool = False

    model_config = ConfigDict(frozen=True)


class RenderFrame(BaseModel):
    """Everything the presentation layer needs to draw one frame."""
    frame: int = Field(..., ge=0)
    dt: float = Field(..., ge=0)
    items: List[TrashView] = Field(default_factory=list)
    buffer: Tuple[Direction, ...] = ()
    player_offset: float = 0.0
    session: SessionSnapshot

    model_config = ConfigDict(frozen=True)

    @property
    def active_item(self) -> Optional[TrashView]:
        """The active item in this frame, if any."""
        for item in self.items:
            if item.is_active:
                return item
        return None
