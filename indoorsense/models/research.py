from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Tuple


# ==================== Enumerations ====================

class InteractionType(Enum):
    """Kind of touch event recorded on the map."""

    TOUCH = "touch"
    DRAG = "drag"
    OUTSIDE_TOUCH = "outside_touch"
    FEATURE_DISCOVERY = "feature_discovery"
    FEATURE_REVISIT = "feature_revisit"


class GestureType(Enum):
    """Kind of control gesture recorded in the gesture area."""

    SINGLE_TAP = "single_tap"
    DOUBLE_TAP = "double_tap"
    TRIPLE_TAP = "triple_tap"
    OVERVIEW = "overview_button"


class StudyCondition(Enum):
    """Experimental condition a participant is assigned to."""

    CONTROL = "control"
    GESTURE_ONLY = "gesture_only"
    BUTTON_ONLY = "button_only"
    MULTI_MODAL = "multi_modal"
    HAPTIC_ONLY = "haptic_only"
    AUDIO_ONLY = "audio_only"


class ResearchFeature(Enum):
    INTERACTION_LOGGING = "interaction_logging"
    PERFORMANCE_METRICS = "performance_metrics"
    SPATIAL_ANALYSIS = "spatial_analysis"
    LEARNING_ASSESSMENT = "learning_assessment"


class ResearchTask(Enum):
    FREE_EXPLORATION = "free_exploration"
    FIND_BATHROOM = "find_bathroom"
    FIND_ELEVATOR = "find_elevator"
    ROUTE_PLANNING = "route_planning"
    SPATIAL_MEMORY_TEST = "spatial_memory_test"


# ==================== Records ====================

@dataclass(frozen=True)
class InteractionRecord:
    """One touch on the map, in screen coordinates."""

    timestamp: float
    session_id: str
    participant_id: str
    x: float
    y: float
    feature_id: Optional[str]
    feature_name: Optional[str]
    feature_type: Optional[str]
    interaction_type: InteractionType
    duration: Optional[float] = None


@dataclass(frozen=True)
class GestureRecord:
    """One control gesture."""

    timestamp: float
    session_id: str
    participant_id: str
    gesture_type: GestureType
    success: bool
    duration: float
    attempts: int = 1


@dataclass(frozen=True)
class SessionRecord:
    """
    Snapshot of a session tracker taken by `end_session`.

    Counts are cumulative since the tracker was started, so consecutive
    snapshots of the same session grow monotonically.
    """

    session_id: str
    participant_id: str
    start_time: float
    end_time: Optional[float]
    total_interactions: int
    unique_features_discovered: int
    total_features_available: int
    exploration_coverage: float
    "Fraction in [0, 1]: distinct explored cells over a fixed normalization constant."
    study_condition: StudyCondition
    completed_tasks: Tuple[ResearchTask, ...]
    error_count: int
    "Number of outside-plan touches."


@dataclass(frozen=True)
class StudyConfiguration:
    """Study setup built when a session starts."""

    study_id: str
    participant_id: str
    condition: StudyCondition
    enabled_features: FrozenSet[ResearchFeature]
    task_list: Tuple[ResearchTask, ...]
