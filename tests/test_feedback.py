import pytest

from indoorsense.core.feedback import (
    FeedbackDispatcher,
    HapticPattern,
    ToneChannel,
    describe_direction,
)
from indoorsense.core.map_store import FeatureStore
from indoorsense.utils.coords import Coords, Size

from conftest import FakeClock


@pytest.fixture
def mono():
    return FakeClock(start=0.0)


@pytest.fixture
def dispatcher(store, mono):
    return FeedbackDispatcher(store, clock=mono)


class TestDebounce:
    def test_repeat_within_cooldown_is_suppressed(self, dispatcher, mono, sample_features, viewport):
        room = sample_features[0]
        assert dispatcher.dispatch(Coords(1, 1), viewport, room) is not None
        mono.advance(0.1)
        assert dispatcher.dispatch(Coords(1, 1), viewport, room) is None

    def test_repeat_after_cooldown_fires_again(self, dispatcher, mono, sample_features, viewport):
        room = sample_features[0]
        assert dispatcher.dispatch(Coords(1, 1), viewport, room) is not None
        mono.advance(0.3)
        assert dispatcher.dispatch(Coords(1, 1), viewport, room) is not None

    def test_different_feature_fires_immediately(self, dispatcher, mono, sample_features, viewport):
        room, corridor = sample_features[0], sample_features[1]
        assert dispatcher.dispatch(Coords(1, 1), viewport, room) is not None
        mono.advance(0.01)
        request = dispatcher.dispatch(Coords(1, 1), viewport, corridor)
        assert request is not None and request.feature == corridor

    def test_leaving_and_returning_fires(self, dispatcher, mono, sample_features, viewport):
        room = sample_features[0]
        dispatcher.dispatch(Coords(1, 1), viewport, room)
        mono.advance(0.05)
        assert dispatcher.dispatch(Coords(0, 0), viewport, None) is not None
        mono.advance(0.05)
        assert dispatcher.dispatch(Coords(1, 1), viewport, room) is not None

    def test_outside_touches_are_debounced(self, dispatcher, mono, viewport):
        assert dispatcher.dispatch(Coords(0, 0), viewport, None) is not None
        mono.advance(0.1)
        assert dispatcher.dispatch(Coords(2, 0), viewport, None) is None

    def test_release_resets_target(self, dispatcher, sample_features, viewport):
        room = sample_features[0]
        dispatcher.dispatch(Coords(1, 1), viewport, room)
        release = dispatcher.release()
        assert release.stop_patterns
        assert release.announcement is None
        assert dispatcher.dispatch(Coords(1, 1), viewport, room) is not None


class TestChannels:
    def test_feature_defaults(self, dispatcher, sample_features, viewport):
        corridor = sample_features[1]
        request = dispatcher.dispatch(Coords(1, 1), viewport, corridor)
        assert request.announcement == "Main Corridor"
        assert request.speech == "Main Corridor"
        assert request.tone is None
        assert request.haptic == HapticPattern.CONTINUOUS
        assert request.stop_patterns

    def test_toggles(self, store, mono, sample_features, viewport):
        dispatcher = FeedbackDispatcher(store, clock=mono, speak_enabled=False,
                                        tones_enabled=True, haptics_enabled=False)
        landmark = sample_features[5]
        request = dispatcher.dispatch(Coords(1, 1), viewport, landmark)
        assert request.announcement == "Information Desk"
        assert request.speech is None
        assert request.tone == ToneChannel.LANDMARK
        assert request.haptic is None
        assert not request.stop_patterns
        assert dispatcher.release() is None

    @pytest.mark.parametrize("index,pattern", [
        (0, HapticPattern.MEDIUM_IMPACT),
        (2, HapticPattern.SUCCESS),
        (3, HapticPattern.HEAVY_IMPACT),
        (4, HapticPattern.WARNING),
        (5, HapticPattern.SMOOTH_STRONG),
    ])
    def test_haptic_by_type(self, dispatcher, sample_features, viewport, index, pattern):
        assert dispatcher.dispatch(Coords(1, 1), viewport, sample_features[index]).haptic == pattern


class TestOutside:
    def test_message_names_nearest_features(self, dispatcher, viewport):
        request = dispatcher.dispatch(Coords(0, 0), viewport, None)
        assert request.announcement == (
            "Outside floor plan in left top area. Move toward center to find Room 101 or Elevator A."
        )
        assert request.haptic == HapticPattern.OUTSIDE_PLAN
        assert request.feature is None

    def test_message_without_features(self, mono):
        dispatcher = FeedbackDispatcher(FeatureStore(), clock=mono)
        assert dispatcher.outside_message(Coords(200, 350), Size(400, 700)) == (
            "Outside floor plan in center middle area. "
            "Try exploring the center of the screen to find features."
        )

    @pytest.mark.parametrize("point,expected", [
        (Coords(10, 10), "left top"),
        (Coords(200, 200), "center middle"),
        (Coords(390, 390), "right bottom"),
        (Coords(10, 390), "left bottom"),
    ])
    def test_describe_direction(self, point, expected):
        assert describe_direction(point, Size(400, 400)) == expected

    def test_describe_direction_degenerate_viewport(self):
        assert describe_direction(Coords(5, 5), Size(0, 0)) == "center middle"
