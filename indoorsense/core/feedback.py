"""
Feedback selection for touch exploration.

The FeedbackDispatcher turns a hit-test outcome into a FeedbackRequest:
what to announce, what to speak, which tone channel and which haptic
pattern to use. It does not produce any output itself; requests are handed
to the platform services by the caller (see workers.FeedbackWorker).

Repeated hits on the same target are debounced so that dragging a finger
inside one room does not repeat its name on every touch event.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from indoorsense.config import FeedbackConfig
from indoorsense.core.map_store import FeatureStore
from indoorsense.models.feature import Feature, FeatureType
from indoorsense.utils.coords import Coords, Size

logger = logging.getLogger(__name__)


class ToneChannel(Enum):
    """Tone played for each feature type."""

    ROOM = "room"
    CORRIDOR = "corridor"
    ELEVATOR = "elevator"
    STAIRS = "stairs"
    BATHROOM = "bathroom"
    LANDMARK = "landmark"


class HapticPattern(Enum):
    """Haptic patterns understood by the haptic engine."""

    CONTINUOUS = "continuous"
    PULSING = "pulsing"
    MEDIUM_IMPACT = "medium_impact"
    HEAVY_IMPACT = "heavy_impact"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SMOOTH_STRONG = "smooth_strong"
    OUTSIDE_PLAN = "outside_plan"
    LIGHT_TAP = "light_tap"


TONE_FOR_TYPE: Dict[FeatureType, ToneChannel] = {
    FeatureType.ROOM: ToneChannel.ROOM,
    FeatureType.CORRIDOR: ToneChannel.CORRIDOR,
    FeatureType.ELEVATOR: ToneChannel.ELEVATOR,
    FeatureType.STAIRS: ToneChannel.STAIRS,
    FeatureType.BATHROOM: ToneChannel.BATHROOM,
    FeatureType.LANDMARK: ToneChannel.LANDMARK,
}

HAPTIC_FOR_TYPE: Dict[FeatureType, HapticPattern] = {
    FeatureType.CORRIDOR: HapticPattern.CONTINUOUS,
    FeatureType.ROOM: HapticPattern.MEDIUM_IMPACT,
    FeatureType.ELEVATOR: HapticPattern.SUCCESS,
    FeatureType.STAIRS: HapticPattern.HEAVY_IMPACT,
    FeatureType.BATHROOM: HapticPattern.WARNING,
    FeatureType.LANDMARK: HapticPattern.SMOOTH_STRONG,
}


@dataclass(frozen=True)
class FeedbackRequest:
    """
    Side effects requested for one touch. A None channel means "do nothing on that channel".
    """

    announcement: Optional[str] = None
    "Text for the accessibility announcement API."
    speech: Optional[str] = None
    tone: Optional[ToneChannel] = None
    haptic: Optional[HapticPattern] = None
    stop_patterns: bool = False
    "Cancel any continuous haptic pattern before anything else."
    feature: Optional[Feature] = None


def describe_direction(point: Coords, viewport: Size,
                       low: float = FeedbackConfig.LOW_THRESHOLD,
                       high: float = FeedbackConfig.HIGH_THRESHOLD) -> str:
    """
    Coarse 3x3 position of a touch on the screen, e.g. "left top" or "center middle".
    """
    x = point.x / viewport.width if viewport.width > 0 else 0.5
    y = point.y / viewport.height if viewport.height > 0 else 0.5

    if x < low:
        horizontal = "left"
    elif x > high:
        horizontal = "right"
    else:
        horizontal = "center"

    if y < low:
        vertical = "top"
    elif y > high:
        vertical = "bottom"
    else:
        vertical = "middle"

    return f"{horizontal} {vertical}"


_OUTSIDE = object()


class FeedbackDispatcher:
    """
    Chooses feedback channels for hit-test outcomes, with per-target debounce.

    A target is either a feature id or "outside the plan". A hit on the same
    target within `cooldown` seconds of the last delivered feedback is
    suppressed; a hit on a different target is delivered immediately.
    """

    def __init__(self, store: FeatureStore,
                 cooldown: float = FeedbackConfig.COOLDOWN,
                 clock: Callable[[], float] = time.monotonic,
                 speak_enabled: bool = FeedbackConfig.SPEAK_ENABLED,
                 tones_enabled: bool = FeedbackConfig.TONES_ENABLED,
                 haptics_enabled: bool = FeedbackConfig.HAPTICS_ENABLED,
                 nearest_limit: int = FeedbackConfig.NEAREST_FEATURE_LIMIT):
        """
        Args:
            store (FeatureStore): Used to find nearby features for outside guidance
            cooldown (float): Debounce window in seconds
            clock: Monotonic clock in seconds
            speak_enabled (bool): Request speech output
            tones_enabled (bool): Request tones
            haptics_enabled (bool): Request haptic patterns
            nearest_limit (int): Features named in the outside guidance message
        """
        self.store = store
        self.cooldown = cooldown
        self._clock = clock
        self.speak_enabled = speak_enabled
        self.tones_enabled = tones_enabled
        self.haptics_enabled = haptics_enabled
        self.nearest_limit = nearest_limit

        self._last_target: Optional[object] = None
        self._last_feedback_time: Optional[float] = None

    def _should_deliver(self, target: object, now: float) -> bool:
        if target != self._last_target:
            return True
        if self._last_feedback_time is None:
            return True
        return now - self._last_feedback_time >= self.cooldown

    def _mark_delivered(self, target: object, now: float) -> None:
        self._last_target = target
        self._last_feedback_time = now

    def outside_message(self, point: Coords, viewport: Size) -> str:
        """
        Guidance for a touch outside every feature: where the finger is and what is nearby.
        """
        direction = describe_direction(point, viewport)
        nearest = self.store.nearest_features(point, viewport, self.nearest_limit)

        if not nearest:
            return (f"Outside floor plan in {direction} area. "
                    f"Try exploring the center of the screen to find features.")

        names = " or ".join(f.name for f in nearest)
        return f"Outside floor plan in {direction} area. Move toward center to find {names}."

    def dispatch(self, point: Coords, viewport: Size,
                 feature: Optional[Feature]) -> Optional[FeedbackRequest]:
        """
        Decide feedback for a resolved hit-test.

        Args:
            point (Coords): Touch position in screen coordinates
            viewport (Size): Size of the touch surface
            feature (Feature, optional): Feature under the touch, None if outside

        Returns:
            FeedbackRequest or None: None when the hit is suppressed by the cooldown
        """
        now = self._clock()
        target = feature.id if feature is not None else _OUTSIDE

        if not self._should_deliver(target, now):
            logger.debug(f"Feedback suppressed for {feature.id if feature else 'outside'}")
            return None
        self._mark_delivered(target, now)

        if feature is not None:
            return FeedbackRequest(
                announcement=feature.name,
                speech=feature.name if self.speak_enabled else None,
                tone=TONE_FOR_TYPE[feature.type] if self.tones_enabled else None,
                haptic=HAPTIC_FOR_TYPE[feature.type] if self.haptics_enabled else None,
                stop_patterns=self.haptics_enabled,
                feature=feature,
            )

        message = self.outside_message(point, viewport)
        return FeedbackRequest(
            announcement=message,
            speech=message if self.speak_enabled else None,
            haptic=HapticPattern.OUTSIDE_PLAN if self.haptics_enabled else None,
            stop_patterns=self.haptics_enabled,
        )

    def release(self) -> Optional[FeedbackRequest]:
        """
        The finger was lifted: forget the debounce target and stop continuous patterns.
        """
        self._last_target = None
        self._last_feedback_time = None
        if self.haptics_enabled:
            return FeedbackRequest(stop_patterns=True)
        return None
