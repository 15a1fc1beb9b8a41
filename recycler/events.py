"""
Recycler Event Bus

Typed publish/subscribe channel between the core and presentation code.
Every event is keyed by an ``EventKind`` and carries one of the frozen
payload models from ``recycler.models``.

Usage:
    bus = EventBus()
    sub = bus.subscribe(EventKind.TRASH_DISPOSED, on_disposed)
    bus.emit(EventKind.TRASH_DISPOSED, TrashDisposedPayload(...))
    sub.dispose()
"""
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from recycler.logging import get_logger
from recycler.models import (
    GamePausedPayload,
    GameResetPayload,
    GameResumedPayload,
    KeyComboPayload,
    LevelUpPayload,
    LoadingAssetsPayload,
    NotifyActiveTrashPayload,
    SessionSnapshot,
    TrashDisposedPayload,
    TrashExpiredPayload,
)

log = get_logger('events')

Handler = Callable[[Any], None]


class EventKind(str, Enum):
    """Outbound event names."""
    STATE_CHANGE = "stateChange"
    LOADING_ASSETS = "loadingAssets"
    NOTIFY_ACTIVE_TRASH = "notifyActiveTrash"
    KEY_COMBO = "keyCombo"
    TRASH_DISPOSED = "trashDisposed"
    TRASH_EXPIRED = "trashExpired"
    GAME_PAUSED = "gamePaused"
    GAME_RESUMED = "gameResumed"
    GAME_RESET = "gameReset"
    LEVEL_UP = "levelUp"


# Payload model each event kind must carry
PAYLOAD_TYPES: Dict[EventKind, Type[BaseModel]] = {
    EventKind.STATE_CHANGE: SessionSnapshot,
    EventKind.LOADING_ASSETS: LoadingAssetsPayload,
    EventKind.NOTIFY_ACTIVE_TRASH: NotifyActiveTrashPayload,
    EventKind.KEY_COMBO: KeyComboPayload,
    EventKind.TRASH_DISPOSED: TrashDisposedPayload,
    EventKind.TRASH_EXPIRED: TrashExpiredPayload,
    EventKind.GAME_PAUSED: GamePausedPayload,
    EventKind.GAME_RESUMED: GameResumedPayload,
    EventKind.GAME_RESET: GameResetPayload,
    EventKind.LEVEL_UP: LevelUpPayload,
}


class Subscription:
    """Token returned by ``EventBus.subscribe``; ``dispose()`` unsubscribes."""

    def __init__(self, bus: 'EventBus', kind: Optional[EventKind], handler: Handler):
        self._bus = bus
        self.kind = kind
        self.handler = handler
        # No kind means nothing was registered
        self._disposed = kind is None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._bus.unsubscribe(self.kind, self.handler)

    def __enter__(self) -> 'Subscription':
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()


class EventBus:
    """Synchronous in-process event bus.

    Handlers run in subscription order on the emitting call stack. A
    handler that raises is logged with its traceback; the remaining
    handlers still receive the event.
    """

    def __init__(self) -> None:
        self._handlers: Dict[EventKind, List[Handler]] = {}

    def subscribe(self, kind, handler: Handler) -> Subscription:
        """Register ``handler`` for ``kind`` (an EventKind or its name).

        An unknown name is logged and returns an already-disposed
        Subscription.
        """
        try:
            kind = EventKind(kind)
        except ValueError:
            log.warning("Unknown event %r, handler not registered", kind)
            return Subscription(self, None, handler)
        self._handlers.setdefault(kind, []).append(handler)
        return Subscription(self, kind, handler)

    def unsubscribe(self, kind, handler: Handler) -> bool:
        """Remove one registration of ``handler``.

        Returns:
            True if the handler was registered
        """
        try:
            kind = EventKind(kind)
        except ValueError:
            log.warning("Unknown event %r, nothing to unsubscribe", kind)
            return False
        handlers = self._handlers.get(kind, [])
        try:
            handlers.remove(handler)
        except ValueError:
            return False
        return True

    def emit(self, kind: EventKind, payload: BaseModel) -> int:
        """Deliver ``payload`` to every handler of ``kind``.

        Raises:
            TypeError: If the payload is not the model registered for kind.

        Returns:
            Number of handlers invoked
        """
        expected = PAYLOAD_TYPES[kind]
        if not isinstance(payload, expected):
            raise TypeError(
                f"{kind.value} expects {expected.__name__}, got {type(payload).__name__}"
            )
        handlers = list(self._handlers.get(kind, ()))
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                log.exception("Handler %r failed for %s", handler, kind.value)
        return len(handlers)

    def handler_count(self, kind: EventKind) -> int:
        return len(self._handlers.get(kind, ()))

    def clear(self) -> None:
        """Drop every registration."""
        self._handlers.clear()
