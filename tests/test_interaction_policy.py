import pytest

from indoorsense.core.feedback import FeedbackDispatcher, HapticPattern
from indoorsense.core.interaction_policy import GESTURE_AREA_HELP, TouchInteractionPolicy
from indoorsense.models.research import GestureType, InteractionType, StudyCondition
from indoorsense.utils.coords import Coords

from conftest import FakeClock


@pytest.fixture
def mono():
    return FakeClock(start=0.0)


@pytest.fixture
def requests():
    return []


@pytest.fixture
def policy(store, session, mono, requests):
    session.start_session("P1", StudyCondition.MULTI_MODAL)
    dispatcher = FeedbackDispatcher(store, clock=mono)
    return TouchInteractionPolicy(store, session, dispatcher, sink=requests.append,
                                  tip_source=lambda: "Tip of the day.")


class TestMapTouches:
    def test_discovery_then_revisit(self, policy, session, requests, screen_point, viewport, mono):
        touch = screen_point(50, 45)
        first = policy.handle_touch(touch, viewport)
        mono.advance(1.0)
        policy.handle_touch(touch, viewport)

        kinds = [r.interaction_type for r in session.interactions]
        assert kinds == [InteractionType.FEATURE_DISCOVERY, InteractionType.FEATURE_REVISIT]
        assert first.announcement == "Room 101"
        assert len(requests) == 2
        assert policy.last_feature.id == "room_101"

    def test_drag_inside_feature_is_debounced(self, policy, session, requests, screen_point, viewport, mono):
        policy.handle_touch(screen_point(50, 45), viewport)
        mono.advance(0.05)
        assert policy.handle_touch(screen_point(52, 45), viewport) is None

        assert len(session.interactions) == 2
        assert len(requests) == 1

    def test_outside_touch(self, policy, session, requests, viewport):
        request = policy.handle_touch(Coords(0, 0), viewport)

        record = session.interactions[0]
        assert record.interaction_type == InteractionType.OUTSIDE_TOUCH
        assert record.feature_id is None
        assert request.haptic == HapticPattern.OUTSIDE_PLAN
        assert request.announcement.startswith("Outside floor plan in left top area.")
        assert session.end_session().error_count == 1

    def test_release_logs_duration_and_stops_patterns(self, policy, session, requests,
                                                      screen_point, viewport):
        policy.handle_touch(screen_point(130, 30), viewport)
        policy.handle_release(screen_point(130, 30), viewport, duration=0.8)

        assert session.interactions[-1].duration == 0.8
        assert session.interactions[-1].feature_id == "elevator_a"
        assert requests[-1].stop_patterns and requests[-1].announcement is None
        assert policy.last_feature is None

        # Touching the same feature right after lifting the finger speaks again
        assert policy.handle_touch(screen_point(130, 30), viewport) is not None

    def test_touches_without_session_still_give_feedback(self, store, mono, requests,
                                                         screen_point, viewport):
        from indoorsense.core.research_logger import InteractionSession

        idle = InteractionSession(total_features=len(store))
        policy = TouchInteractionPolicy(store, idle, FeedbackDispatcher(store, clock=mono),
                                        sink=requests.append)
        assert policy.handle_touch(screen_point(50, 45), viewport).announcement == "Room 101"
        assert idle.interactions == ()


class TestGestureArea:
    def test_double_tap_scans(self, policy, session, store, requests):
        message = policy.handle_gesture(GestureType.DOUBLE_TAP, duration=0.3)
        assert message == store.quick_scan()
        assert requests[-1].speech == message
        assert session.gestures[-1].gesture_type == GestureType.DOUBLE_TAP
        assert session.gestures[-1].duration == 0.3

    def test_triple_tap_speaks_tip(self, policy, requests):
        assert policy.handle_gesture(GestureType.TRIPLE_TAP) == "Tip of the day."
        assert requests[-1].announcement == "Tip of the day."

    def test_single_tap_explains_area(self, policy, requests):
        assert policy.handle_gesture(GestureType.SINGLE_TAP) == GESTURE_AREA_HELP
        assert requests[-1].announcement == GESTURE_AREA_HELP
        assert requests[-1].speech is None

    def test_overview_button(self, policy, session, store):
        assert policy.handle_overview() == store.detailed_overview()
        assert session.gestures[-1].gesture_type == GestureType.OVERVIEW

    def test_gesture_area_tap(self, policy, requests):
        assert policy.gesture_area_tap().haptic == HapticPattern.LIGHT_TAP

    def test_initial_announcement(self, policy, store, requests):
        message = policy.initial_announcement()
        assert message.startswith(f"IndoorSense loaded. {store.detailed_overview()} Tap and drag")
        assert message.endswith("or triple tap for exploration tips.")
        assert requests[-1].speech == message
