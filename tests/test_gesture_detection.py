import pytest

from indoorsense.detection.gesture_detection import TapSequenceDetector
from indoorsense.models.research import GestureType


@pytest.fixture
def detector():
    return TapSequenceDetector(sequence_window=0.5, settle_delay=0.3)


class TestTapSequenceDetector:
    def test_nothing_to_resolve(self, detector):
        assert detector.poll(now=10.0) is None

    def test_waits_for_settle_delay(self, detector):
        detector.push_tap(now=0.0)
        detector.push_tap(now=0.2)
        assert detector.poll(now=0.3) is None
        assert detector.poll(now=0.6) == GestureType.DOUBLE_TAP
        assert detector.last_sequence_duration == pytest.approx(0.2)
        assert detector.poll(now=1.0) is None

    @pytest.mark.parametrize("taps,expected", [
        ([0.0], GestureType.SINGLE_TAP),
        ([0.0, 0.25], GestureType.DOUBLE_TAP),
        ([0.0, 0.2, 0.4], GestureType.TRIPLE_TAP),
        ([0.0, 0.1, 0.2, 0.3], GestureType.TRIPLE_TAP),
    ])
    def test_tap_counts(self, detector, taps, expected):
        for t in taps:
            detector.push_tap(now=t)
        assert detector.poll(now=taps[-1] + 0.5) == expected

    def test_slow_taps_start_new_sequence(self, detector):
        detector.push_tap(now=0.0)
        assert detector.push_tap(now=0.7) == 1
        assert detector.poll(now=1.2) == GestureType.SINGLE_TAP

    def test_uses_clock_when_no_time_given(self):
        now = [5.0]
        detector = TapSequenceDetector(clock=lambda: now[0])
        detector.push_tap()
        now[0] = 5.1
        detector.push_tap()
        now[0] = 6.0
        assert detector.poll() == GestureType.DOUBLE_TAP

    def test_flush_resolves_without_settling(self, detector):
        assert detector.flush() is None
        detector.push_tap(now=1.0)
        detector.push_tap(now=1.1)
        assert detector.flush() == GestureType.DOUBLE_TAP
        assert detector.poll(now=5.0) is None
