"""
Keyboard Direction Source Tests

Events are built directly with pygame.event.Event, so no display is needed.

Run with: pytest tests/test_keyboard_source.py -v
"""
import pygame
import pytest

from recycler.enums import Direction
from recycler.input.sources import KeyboardDirectionSource


def keydown(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


class TestKeyboardDirectionSource:

    @pytest.fixture
    def source(self):
        ticks = iter([1.0, 2.0, 3.0, 4.0])
        return KeyboardDirectionSource(clock=lambda: next(ticks))

    @pytest.mark.parametrize("key, direction", [
        (pygame.K_UP, Direction.UP),
        (pygame.K_w, Direction.UP),
        (pygame.K_DOWN, Direction.DOWN),
        (pygame.K_s, Direction.DOWN),
        (pygame.K_LEFT, Direction.LEFT),
        (pygame.K_a, Direction.LEFT),
        (pygame.K_RIGHT, Direction.RIGHT),
        (pygame.K_d, Direction.RIGHT),
    ])
    def test_key_mapping(self, source, key, direction):
        assert source.handle_event(keydown(key)) is True
        events = source.poll_events()
        assert [e.direction for e in events] == [direction]
        assert events[0].timestamp == 1.0

    def test_poll_drains_queue(self, source):
        source.handle_event(keydown(pygame.K_UP))
        source.handle_event(keydown(pygame.K_LEFT))
        assert len(source.poll_events()) == 2
        assert source.poll_events() == []

    def test_other_keys_not_consumed(self, source):
        assert source.handle_event(keydown(pygame.K_RETURN)) is False
        assert source.handle_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_UP)) is False
        assert source.poll_events() == []

    def test_escape_requests_pause(self, source):
        assert source.handle_event(keydown(pygame.K_ESCAPE)) is True
        assert source.consume_pause_request() is True
        assert source.consume_pause_request() is False

    def test_clear(self, source):
        source.handle_event(keydown(pygame.K_DOWN))
        source.handle_event(keydown(pygame.K_ESCAPE))
        source.clear()
        assert source.poll_events() == []
        assert source.consume_pause_request() is False
