"""
Frame Scheduler and Timer Tests

Run with: pytest tests/test_scheduler.py -v
"""
import pytest

from recycler.scheduler import ManualFrameScheduler
from recycler.timers import Countdown, GameTimer


class TestManualFrameScheduler:

    @pytest.fixture
    def scheduler(self):
        return ManualFrameScheduler(start=1.0)

    def test_callback_runs_on_next_frame(self, scheduler):
        seen = []
        scheduler.request_frame(seen.append)
        assert seen == []
        assert scheduler.step(0.5) == 1
        assert seen == [1.5]
        assert scheduler.pending_count == 0

    def test_cancel(self, scheduler):
        seen = []
        request = scheduler.request_frame(seen.append)
        request.cancel()
        request.cancel()
        assert request.cancelled
        assert scheduler.step() == 0
        assert seen == []

    def test_request_during_frame_waits(self, scheduler):
        """A callback requested while a frame runs goes to the next frame."""
        seen = []

        def again(now):
            seen.append(now)
            scheduler.request_frame(again)

        scheduler.request_frame(again)
        scheduler.step(1.0)
        assert len(seen) == 1
        assert scheduler.pending_count == 1
        scheduler.step(1.0)
        assert seen == [2.0, 3.0]

    def test_run_for(self, scheduler):
        assert scheduler.run_for(1.0, dt=0.25) == 4
        assert scheduler.now() == pytest.approx(2.0)

    def test_advance_runs_nothing(self, scheduler):
        seen = []
        scheduler.request_frame(seen.append)
        scheduler.advance(3.0)
        assert seen == []
        assert scheduler.now() == 4.0


class TestGameTimer:

    def test_accumulates_only_while_running(self):
        timer = GameTimer()
        timer.advance(1.0)
        assert timer.elapsed == 0.0
        timer.start()
        timer.advance(1.0)
        timer.cancel()
        timer.advance(1.0)
        assert timer.elapsed == 1.0

    def test_start_and_cancel_idempotent(self):
        timer = GameTimer()
        assert timer.start() is True
        assert timer.start() is False
        assert timer.cancel() is True
        assert timer.cancel() is False

    def test_restart_keeps_running(self):
        timer = GameTimer()
        timer.start()
        timer.advance(2.0)
        timer.restart()
        assert timer.elapsed == 0.0
        assert timer.running

    def test_reset_stops(self):
        timer = GameTimer()
        timer.start()
        timer.advance(2.0)
        timer.reset()
        assert timer.elapsed == 0.0
        assert not timer.running


class TestCountdown:

    def test_fires_once_and_stops(self):
        fired = []
        countdown = Countdown(1.0, on_expire=lambda: fired.append(True))
        countdown.start()
        countdown.advance(0.75)
        assert countdown.remaining == pytest.approx(0.25)
        countdown.advance(0.75)
        countdown.advance(0.75)
        assert fired == [True]
        assert countdown.expired
        assert not countdown.running
        assert countdown.remaining == 0.0

    def test_cancelled_countdown_never_fires(self):
        fired = []
        countdown = Countdown(1.0, on_expire=lambda: fired.append(True))
        countdown.start()
        countdown.cancel()
        countdown.advance(5.0)
        assert fired == []

    def test_reset_rearms(self):
        fired = []
        countdown = Countdown(0.5, on_expire=lambda: fired.append(True))
        countdown.start()
        countdown.advance(1.0)
        countdown.reset()
        assert not countdown.expired
        assert countdown.remaining == 0.5
        countdown.start()
        countdown.advance(1.0)
        assert len(fired) == 2
