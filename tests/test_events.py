"""
Event Bus Tests

Run with: pytest tests/test_events.py -v
"""
import pytest

from recycler.enums import Category, Direction
from recycler.events import EventBus, EventKind, PAYLOAD_TYPES
from recycler.models import (
    GamePausedPayload,
    KeyComboPayload,
    NotifyActiveTrashPayload,
    TrashDisposedPayload,
)


@pytest.fixture
def bus():
    return EventBus()


class TestEventBus:

    def test_every_kind_has_payload_type(self):
        assert set(PAYLOAD_TYPES) == set(EventKind)

    def test_event_names(self):
        assert EventKind('stateChange') == EventKind.STATE_CHANGE
        assert EventKind.NOTIFY_ACTIVE_TRASH.value == 'notifyActiveTrash'

    def test_emit_in_subscription_order(self, bus):
        calls = []
        bus.subscribe(EventKind.GAME_PAUSED, lambda p: calls.append('a'))
        bus.subscribe('gamePaused', lambda p: calls.append('b'))
        assert bus.emit(EventKind.GAME_PAUSED, GamePausedPayload()) == 2
        assert calls == ['a', 'b']

    def test_only_matching_kind(self, bus):
        calls = []
        bus.subscribe(EventKind.GAME_RESUMED, calls.append)
        bus.emit(EventKind.GAME_PAUSED, GamePausedPayload())
        assert calls == []

    def test_subscription_dispose(self, bus):
        calls = []
        sub = bus.subscribe(EventKind.KEY_COMBO, calls.append)
        sub.dispose()
        sub.dispose()
        assert sub.disposed
        bus.emit(EventKind.KEY_COMBO, KeyComboPayload())
        assert calls == []
        assert bus.handler_count(EventKind.KEY_COMBO) == 0

    def test_subscription_context_manager(self, bus):
        calls = []
        with bus.subscribe(EventKind.KEY_COMBO, calls.append):
            bus.emit(EventKind.KEY_COMBO, KeyComboPayload(buffer=(Direction.UP,)))
        bus.emit(EventKind.KEY_COMBO, KeyComboPayload())
        assert len(calls) == 1

    def test_unsubscribe_unknown_handler(self, bus):
        assert bus.unsubscribe(EventKind.KEY_COMBO, print) is False

    def test_handler_error_is_logged_and_delivery_continues(self, bus, capsys):
        calls = []

        def broken(payload):
            raise RuntimeError("handler exploded")

        bus.subscribe(EventKind.GAME_PAUSED, broken)
        bus.subscribe(EventKind.GAME_PAUSED, calls.append)
        bus.emit(EventKind.GAME_PAUSED, GamePausedPayload())

        assert len(calls) == 1
        out = capsys.readouterr().out
        assert "[events] ERROR" in out
        assert "handler exploded" in out

    def test_wrong_payload_type_rejected(self, bus):
        with pytest.raises(TypeError):
            bus.emit(EventKind.TRASH_DISPOSED, GamePausedPayload())

    def test_unknown_event_name(self, bus, capsys):
        """An unknown event name is a logged no-op, not an error."""
        subscription = bus.subscribe('explode', print)
        assert subscription.disposed
        subscription.dispose()
        assert bus.unsubscribe('explode', print) is False
        assert "Unknown event 'explode'" in capsys.readouterr().out

    def test_clear(self, bus):
        bus.subscribe(EventKind.GAME_PAUSED, print)
        bus.clear()
        assert bus.handler_count(EventKind.GAME_PAUSED) == 0


class TestPayloads:

    def test_notify_requires_four_tokens(self):
        with pytest.raises(ValueError):
            NotifyActiveTrashPayload(item_id='x', category=Category.GLASS,
                                     required_combo=(Direction.UP,))

    def test_key_combo_buffer_limit(self):
        with pytest.raises(ValueError):
            KeyComboPayload(buffer=(Direction.UP,) * 5)

    def test_payloads_frozen(self):
        payload = TrashDisposedPayload(category=Category.PAPER, score=15, delta=15)
        with pytest.raises(Exception):
            payload.score = 99

    def test_payload_serializes(self):
        payload = TrashDisposedPayload(category=Category.PAPER, score=15, delta=15)
        assert payload.model_dump(mode='json') == {'category': 'paper', 'score': 15, 'delta': 15}
