import pytest

from indoorsense.models.research import (
    GestureType,
    InteractionType,
    ResearchTask,
    StudyCondition,
)
from indoorsense.utils.coords import Coords


class TestLoggingGuard:
    def test_interaction_without_session(self, session, sample_features):
        assert not session.log_interaction(Coords(1, 1), sample_features[0],
                                           InteractionType.FEATURE_DISCOVERY)
        assert session.interactions == ()
        assert session.end_session() is None

    def test_gesture_without_session(self, session):
        assert not session.log_gesture(GestureType.DOUBLE_TAP, True, 0.4)
        assert session.gestures == ()

    def test_invalid_attempts(self, session):
        session.start_session("P1", StudyCondition.CONTROL)
        with pytest.raises(ValueError):
            session.log_gesture(GestureType.SINGLE_TAP, True, 0.1, attempts=0)


class TestDiscovery:
    def test_same_feature_discovered_once(self, session, sample_features):
        room = sample_features[0]
        session.start_session("P1", StudyCondition.CONTROL)

        assert not session.is_discovered(room.id)
        session.log_interaction(Coords(10, 10), room, InteractionType.FEATURE_DISCOVERY)
        assert session.is_discovered(room.id)
        session.log_interaction(Coords(12, 10), room, InteractionType.FEATURE_REVISIT)

        assert session.interaction_count == 2
        assert session.discovered_feature_count == 1

    def test_record_fields(self, session, sample_features, clock):
        room = sample_features[0]
        session.start_session("P7", StudyCondition.HAPTIC_ONLY)
        clock.advance(2.5)
        session.log_interaction(Coords(3, 4), room, InteractionType.FEATURE_DISCOVERY, duration=0.25)
        session.log_interaction(Coords(500, 4), None, InteractionType.OUTSIDE_TOUCH)

        first, second = session.interactions
        assert first.timestamp == 1002.5
        assert first.session_id == "SESSION-1"
        assert first.participant_id == "P7"
        assert (first.feature_id, first.feature_name, first.feature_type) == ("room_101", "Room 101", "room")
        assert first.duration == 0.25
        assert second.feature_id is None and second.feature_type is None
        assert second.duration is None


class TestSessions:
    def test_end_session_is_cumulative(self, session, sample_features):
        session.start_session("P1", StudyCondition.CONTROL)
        for i in range(3):
            session.log_interaction(Coords(i, 0), sample_features[0], InteractionType.FEATURE_REVISIT)
        first = session.end_session()

        for i in range(2):
            session.log_interaction(Coords(i, 5), None, InteractionType.OUTSIDE_TOUCH)
        second = session.end_session()

        assert first.total_interactions == 3
        assert second.total_interactions == 5
        assert first.session_id == second.session_id
        assert second.error_count == 2
        assert session.sessions == (first, second)
        assert session.is_logging_enabled

    def test_snapshot_fields(self, session, sample_features, clock):
        session.start_session("P2", StudyCondition.MULTI_MODAL)
        session.log_interaction(Coords(0.5, 0.5), sample_features[1], InteractionType.FEATURE_DISCOVERY)
        session.log_interaction(Coords(0.7, 0.2), sample_features[1], InteractionType.FEATURE_REVISIT)
        clock.advance(30)
        record = session.end_session()

        assert record.start_time == 1000.0
        assert record.end_time == 1030.0
        assert record.unique_features_discovered == 1
        assert record.total_features_available == 6
        assert record.exploration_coverage == 0.01
        assert record.study_condition == StudyCondition.MULTI_MODAL
        assert record.completed_tasks == (ResearchTask.FREE_EXPLORATION,)

    def test_coverage_is_clamped(self, session):
        session.start_session("P3", StudyCondition.CONTROL)
        for i in range(150):
            session.log_interaction(Coords(i * 2, 0), None, InteractionType.OUTSIDE_TOUCH)
        assert session.end_session().exploration_coverage == 1.0

    def test_cells_truncate_toward_zero(self, session):
        session.start_session("P3", StudyCondition.CONTROL)
        for x in (-0.5, 0.5, 0.9, -1.5):
            session.log_interaction(Coords(x, 0.2), None, InteractionType.OUTSIDE_TOUCH)
        assert session.end_session().exploration_coverage == 0.02

    def test_restart_replaces_tracker(self, session, sample_features):
        first_id = session.start_session("P1", StudyCondition.CONTROL)
        session.log_interaction(Coords(1, 1), sample_features[0], InteractionType.FEATURE_DISCOVERY)
        second_id = session.start_session("P1", StudyCondition.CONTROL)

        assert first_id != second_id
        assert session.current_session_id == second_id
        assert session.interaction_count == 0
        assert not session.is_discovered("room_101")
        assert len(session.interactions) == 1

    def test_study_configuration(self, session):
        session.start_session("P9", StudyCondition.AUDIO_ONLY)
        config = session.study_configuration
        assert config.participant_id == "P9"
        assert config.condition == StudyCondition.AUDIO_ONLY
        assert config.task_list == (ResearchTask.FREE_EXPLORATION,)


class TestSummary:
    def test_no_session(self, session):
        assert session.session_summary() == "No active session"

    def test_summary_lines(self, session, sample_features, clock):
        session.start_session("P4", StudyCondition.CONTROL)
        session.log_interaction(Coords(1, 1), sample_features[0], InteractionType.FEATURE_DISCOVERY)
        session.log_interaction(Coords(900, 1), None, InteractionType.OUTSIDE_TOUCH)
        session.log_gesture(GestureType.DOUBLE_TAP, True, 0.4)
        clock.advance(42.7)

        assert session.session_summary().splitlines() == [
            "Session ID: SESSION-1",
            "Participant: P4",
            "Interactions: 2",
            "Gestures: 1",
            "Features Found: 1/6",
            "Errors: 1",
            "Duration: 42s",
        ]

    def test_summary_has_no_side_effects(self, session):
        session.start_session("P4", StudyCondition.CONTROL)
        session.session_summary()
        assert session.sessions == ()
        assert session.interactions == ()

    def test_clear_all_data(self, session, sample_features):
        session.start_session("P5", StudyCondition.CONTROL)
        session.log_interaction(Coords(1, 1), sample_features[0], InteractionType.FEATURE_DISCOVERY)
        session.log_gesture(GestureType.SINGLE_TAP, True, 0.1)
        session.end_session()

        session.clear_all_data()

        assert session.interactions == ()
        assert session.gestures == ()
        assert session.sessions == ()
        assert session.current_session_id is None
        assert not session.is_logging_enabled
        assert not session.log_interaction(Coords(1, 1), None, InteractionType.OUTSIDE_TOUCH)
