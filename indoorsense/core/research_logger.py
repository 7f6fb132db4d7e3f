"""
Research logging for exploration studies.

An InteractionSession records every touch and control gesture of a
participant together with per-session counters (interactions, discovered
features, outside-plan errors, explored cells) and produces SessionRecord
snapshots for export.

Sessions are cumulative milestones, not independent intervals: `end_session`
snapshots the active tracker but leaves it running with logging enabled, so
a later `end_session` reports totals that include everything logged since
`start_session`. Only `start_session` (new tracker) or `clear_all_data`
(full reset) starts counting from zero again.
"""

import logging
import time
import uuid
from typing import Callable, List, Optional, Set, Tuple

from indoorsense.config import ResearchConfig
from indoorsense.models.feature import Feature
from indoorsense.models.research import (
    GestureRecord,
    GestureType,
    InteractionRecord,
    InteractionType,
    ResearchFeature,
    ResearchTask,
    SessionRecord,
    StudyCondition,
    StudyConfiguration,
)
from indoorsense.utils.coords import Coords

logger = logging.getLogger(__name__)


class _SessionTracker:
    """Mutable counters of the active session."""

    def __init__(self, session_id: str, participant_id: str, start_time: float):
        self.session_id = session_id
        self.participant_id = participant_id
        self.start_time = start_time
        self.discovered_features: Set[str] = set()
        self.interaction_count = 0
        self.error_count = 0
        self.explored_cells: Set[Tuple[int, int]] = set()

    def add_explored_point(self, point: Coords, cell_size: float) -> None:
        self.explored_cells.add((int(point.x / cell_size), int(point.y / cell_size)))


class InteractionSession:
    """
    Owner of the interaction and gesture logs and of the session history.

    No other component mutates this state. All methods are expected to be
    called from the same thread.
    """

    def __init__(self, total_features: int = 0,
                 clock: Callable[[], float] = time.time,
                 id_factory: Callable[[], str] = lambda: str(uuid.uuid4()).upper(),
                 cell_size: float = ResearchConfig.EXPLORED_CELL_SIZE,
                 coverage_normalization: float = ResearchConfig.COVERAGE_NORMALIZATION):
        """
        Args:
            total_features (int): Size of the loaded feature catalog
            clock: Wall clock returning seconds, used for record timestamps
            id_factory: Generates opaque session ids
            cell_size (float): Quantization of explored points (screen points)
            coverage_normalization (float): Explored cell count treated as full coverage
        """
        self.total_features = total_features
        self._clock = clock
        self._id_factory = id_factory
        self._cell_size = cell_size
        self._coverage_normalization = coverage_normalization

        self._interactions: List[InteractionRecord] = []
        self._gestures: List[GestureRecord] = []
        self._sessions: List[SessionRecord] = []
        self._current: Optional[_SessionTracker] = None
        self._logging_enabled = False
        self.study_configuration: Optional[StudyConfiguration] = None

    # ==================== Data access ====================

    @property
    def interactions(self) -> Tuple[InteractionRecord, ...]:
        return tuple(self._interactions)

    @property
    def gestures(self) -> Tuple[GestureRecord, ...]:
        return tuple(self._gestures)

    @property
    def sessions(self) -> Tuple[SessionRecord, ...]:
        return tuple(self._sessions)

    @property
    def is_logging_enabled(self) -> bool:
        return self._logging_enabled

    @property
    def current_session_id(self) -> Optional[str]:
        return self._current.session_id if self._current else None

    @property
    def discovered_feature_count(self) -> int:
        return len(self._current.discovered_features) if self._current else 0

    @property
    def interaction_count(self) -> int:
        return self._current.interaction_count if self._current else 0

    def is_discovered(self, feature_id: str) -> bool:
        """
        Whether a feature was already touched in the active session.
        """
        return self._current is not None and feature_id in self._current.discovered_features

    # ==================== Session control ====================

    def start_session(self, participant_id: str, condition: StudyCondition) -> str:
        """
        Start a new session, replacing any active tracker.

        Counters of a replaced tracker are lost; records already appended to
        the interaction, gesture and session logs are kept.

        Returns:
            str: The new session id
        """
        if self._current is not None:
            logger.info(f"Replacing active session {self._current.session_id}")

        self._logging_enabled = True
        self._current = _SessionTracker(self._id_factory(), participant_id, self._clock())
        self.study_configuration = StudyConfiguration(
            study_id=ResearchConfig.STUDY_ID,
            participant_id=participant_id,
            condition=condition,
            enabled_features=frozenset({ResearchFeature.INTERACTION_LOGGING,
                                        ResearchFeature.PERFORMANCE_METRICS}),
            task_list=(ResearchTask.FREE_EXPLORATION,),
        )

        logger.info(f"Research session started: {self._current.session_id}")
        return self._current.session_id

    def end_session(self) -> Optional[SessionRecord]:
        """
        Snapshot the active tracker into the session history.

        The tracker stays active and logging stays enabled.

        Returns:
            SessionRecord or None: The snapshot, or None if no session is active
        """
        session = self._current
        if session is None:
            return None

        coverage = min(len(session.explored_cells) / self._coverage_normalization, 1.0)
        condition = (self.study_configuration.condition
                     if self.study_configuration else StudyCondition.CONTROL)
        tasks = self.study_configuration.task_list if self.study_configuration else ()

        record = SessionRecord(
            session_id=session.session_id,
            participant_id=session.participant_id,
            start_time=session.start_time,
            end_time=self._clock(),
            total_interactions=session.interaction_count,
            unique_features_discovered=len(session.discovered_features),
            total_features_available=self.total_features,
            exploration_coverage=coverage,
            study_condition=condition,
            completed_tasks=tasks,
            error_count=session.error_count,
        )
        self._sessions.append(record)

        logger.info(f"Research session ended: {record.session_id} "
                    f"({record.total_interactions} interactions, logging continues)")
        return record

    # ==================== Data logging ====================

    def log_interaction(self, point: Coords, feature: Optional[Feature],
                        interaction_type: InteractionType,
                        duration: Optional[float] = None) -> bool:
        """
        Append an interaction record to the active session.

        Args:
            point (Coords): Touch position in screen coordinates
            feature (Feature, optional): Feature under the touch
            interaction_type (InteractionType): Classification chosen by the caller
            duration (float, optional): Touch duration in seconds

        Returns:
            bool: False if logging is disabled or no session is active, True otherwise
        """
        session = self._current
        if not self._logging_enabled or session is None:
            logger.warning("Interaction not logged - logging disabled or no session")
            return False

        record = InteractionRecord(
            timestamp=self._clock(),
            session_id=session.session_id,
            participant_id=session.participant_id,
            x=point.x,
            y=point.y,
            feature_id=feature.id if feature else None,
            feature_name=feature.name if feature else None,
            feature_type=feature.type.value if feature else None,
            interaction_type=interaction_type,
            duration=duration,
        )

        self._interactions.append(record)
        session.interaction_count += 1
        session.add_explored_point(point, self._cell_size)

        if feature is not None and feature.id not in session.discovered_features:
            session.discovered_features.add(feature.id)
            logger.info(f"New feature discovered: {feature.name}")

        if interaction_type == InteractionType.OUTSIDE_TOUCH:
            session.error_count += 1

        logger.debug(f"Logged interaction: {interaction_type.value} at ({point.x}, {point.y})")
        return True

    def log_gesture(self, gesture_type: GestureType, success: bool, duration: float,
                    attempts: int = 1) -> bool:
        """
        Append a gesture record to the active session.

        Returns:
            bool: False if logging is disabled or no session is active, True otherwise

        Raises:
            ValueError: If attempts is smaller than 1
        """
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")

        session = self._current
        if not self._logging_enabled or session is None:
            logger.warning("Gesture not logged - logging disabled or no session")
            return False

        self._gestures.append(GestureRecord(
            timestamp=self._clock(),
            session_id=session.session_id,
            participant_id=session.participant_id,
            gesture_type=gesture_type,
            success=success,
            duration=duration,
            attempts=attempts,
        ))

        logger.debug(f"Logged gesture: {gesture_type.value} - success: {success}")
        return True

    # ==================== Summaries ====================

    def session_summary(self) -> str:
        """
        Human-readable snapshot of the active session. Has no side effects.
        """
        session = self._current
        if session is None:
            return ResearchConfig.NO_SESSION_SUMMARY

        interaction_count = sum(1 for r in self._interactions if r.session_id == session.session_id)
        gesture_count = sum(1 for r in self._gestures if r.session_id == session.session_id)
        elapsed = int(self._clock() - session.start_time)

        return "\n".join([
            f"Session ID: {session.session_id}",
            f"Participant: {session.participant_id}",
            f"Interactions: {interaction_count}",
            f"Gestures: {gesture_count}",
            f"Features Found: {len(session.discovered_features)}/{self.total_features}",
            f"Errors: {session.error_count}",
            f"Duration: {elapsed}s",
        ])

    def clear_all_data(self) -> None:
        """
        Drop every record, the session history and the active tracker, and disable logging.
        """
        self._interactions.clear()
        self._gestures.clear()
        self._sessions.clear()
        self._current = None
        self._logging_enabled = False
        self.study_configuration = None
        logger.info("All research data cleared")
