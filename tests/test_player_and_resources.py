"""
Player reaction, resource provider and render model tests.

Run with: pytest tests/test_player_and_resources.py -v
"""
import pytest

from recycler.enums import Category, Scene, TrashState
from recycler.models import RenderFrame, SessionSnapshot, TrashView
from recycler.player import Player
from recycler.resources import StaticResourceProvider


class TestPlayer:

    def test_jump_arc(self):
        player = Player(duration=0.4, height=0.6)
        assert player.offset == 0.0
        player.jump()
        player.update(0.1)
        quarter = player.offset
        player.update(0.1)
        assert player.offset == pytest.approx(0.6)
        assert 0 < quarter < player.offset

    def test_no_double_jump(self):
        player = Player()
        assert player.jump() is True
        assert player.jump() is False

    def test_lands(self):
        player = Player(duration=0.4)
        player.jump()
        player.update(0.5)
        assert not player.is_jumping
        assert player.offset == 0.0

    def test_reset(self):
        player = Player()
        player.jump()
        player.update(0.1)
        player.reset()
        assert player.offset == 0.0


class TestStaticResourceProvider:

    def test_lookup(self):
        provider = StaticResourceProvider({'bolsa': 'mesh'})
        assert provider.is_ready()
        assert provider.get('bolsa') == 'mesh'
        assert provider.get('movil') is None
        assert provider.has('bolsa')

    def test_readiness(self):
        provider = StaticResourceProvider(ready=False)
        assert not provider.is_ready()
        provider.mark_failed("disk on fire")
        assert provider.error == "disk on fire"
        provider.add('paper', 'mesh')
        provider.mark_ready()
        assert provider.is_ready()
        assert provider.error is None
        assert list(provider.keys()) == ['paper']


class TestRenderFrame:

    def _view(self, item_id, active):
        return TrashView(
            item_id=item_id,
            category=Category.GLASS,
            state=TrashState.ACTIVE if active else TrashState.IDLE,
            position=(0.0, 2.0, 0.0),
            scale=0.04,
            model_key='botellin',
            is_active=active,
        )

    def test_active_item(self):
        frame = RenderFrame(
            frame=3,
            dt=0.016,
            items=[self._view('a', True), self._view('b', False)],
            session=SessionSnapshot(scene=Scene.GAME, is_playing=True),
        )
        assert frame.active_item.item_id == 'a'

    def test_no_active_item(self):
        frame = RenderFrame(frame=0, dt=0.0, session=SessionSnapshot())
        assert frame.active_item is None
