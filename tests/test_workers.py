import pytest

from indoorsense.core.feedback import FeedbackRequest, HapticPattern, ToneChannel
from indoorsense.core.workers import FeedbackCommand, FeedbackWorker, PatternScheduler


class TestPatternScheduler:
    def test_schedule_starts_daemon_timer(self, timer_factory):
        scheduler = PatternScheduler(timer_factory)
        scheduler.schedule("a", 0.5, lambda: None)
        timer = timer_factory.timers[0]
        assert timer.started and timer.daemon
        assert timer.interval == 0.5
        assert scheduler.pending() == 1

    def test_same_key_replaces_pending_timer(self, timer_factory):
        scheduler = PatternScheduler(timer_factory)
        calls = []
        scheduler.schedule("stop", 2.0, lambda: calls.append("first"))
        scheduler.schedule("stop", 2.0, lambda: calls.append("second"))

        first, second = timer_factory.timers
        assert first.cancelled and not second.cancelled
        assert scheduler.pending() == 1

        # A superseded timer that fires anyway does nothing
        first.fire()
        second.fire()
        assert calls == ["second"]
        assert scheduler.pending() == 0

    def test_cancel(self, timer_factory):
        scheduler = PatternScheduler(timer_factory)
        scheduler.schedule("a", 1.0, lambda: None)
        assert scheduler.cancel("a")
        assert not scheduler.cancel("a")
        assert timer_factory.timers[0].cancelled

    def test_cancel_prefix(self, timer_factory):
        scheduler = PatternScheduler(timer_factory)
        for key in ("continuous.pulse", "continuous.stop", "outside_plan"):
            scheduler.schedule(key, 0.1, lambda: None)
        assert scheduler.cancel_prefix("continuous") == 2
        assert scheduler.pending() == 1
        scheduler.cancel_all()
        assert scheduler.pending() == 0

    def test_callback_errors_are_contained(self, timer_factory):
        scheduler = PatternScheduler(timer_factory)

        def boom():
            raise RuntimeError("actuator gone")

        scheduler.schedule("a", 0.1, boom)
        timer_factory.timers[0].fire()
        assert scheduler.pending() == 0


@pytest.fixture
def worker(announcer, speech, tones, haptics):
    return FeedbackWorker(announcer, speech, tones, haptics, queue_maxsize=2)


class TestFeedbackWorker:
    def test_delivers_request_in_order(self, worker, announcer, speech, tones, haptics):
        request = FeedbackRequest(announcement="Room 101", speech="Room 101", tone=ToneChannel.ROOM,
                                  haptic=HapticPattern.MEDIUM_IMPACT, stop_patterns=True)
        worker.execute_command(FeedbackCommand('feedback', request=request))

        assert haptics.events == [("stop", None), ("play", HapticPattern.MEDIUM_IMPACT)]
        assert announcer.announcements == ["Room 101"]
        assert speech.events == [("say", "Room 101")]
        assert tones.played == [ToneChannel.ROOM]

    def test_empty_channels_are_skipped(self, worker, announcer, speech, tones, haptics):
        worker.execute_command(FeedbackCommand('feedback', request=FeedbackRequest(announcement="Hi")))
        assert announcer.announcements == ["Hi"]
        assert speech.events == [] and tones.played == [] and haptics.events == []

    def test_stop_all(self, worker, speech, haptics):
        worker.execute_command(FeedbackCommand('stop_all'))
        assert haptics.events == [("stop", None)]
        assert speech.events == [("stop", "")]

    def test_errors_do_not_escape(self, worker, announcer):
        def broken(text):
            raise RuntimeError("no screen reader")

        announcer.announce = broken
        worker.execute_command(FeedbackCommand('feedback', request=FeedbackRequest(announcement="x")))
        worker.execute_command(FeedbackCommand('unknown'))

    def test_full_queue_drops(self, worker):
        assert worker.submit(FeedbackRequest(announcement="a"))
        assert worker.submit(FeedbackRequest(announcement="b"))
        assert not worker.submit(FeedbackRequest(announcement="c"))
        assert not worker.submit(None)
        worker.clear_queue()
        assert worker.command_queue.empty()

    def test_thread_drains_queue(self, worker, announcer):
        worker.start()
        try:
            worker.submit(FeedbackRequest(announcement="Elevator A"))
            worker.command_queue.join()
        finally:
            worker.stop()
            worker.join(timeout=2.0)
        assert announcer.announcements == ["Elevator A"]
        assert not worker.is_alive()
