"""
Touch interaction policy for floor-plan exploration.

This module turns raw touches on the map surface and taps in the gesture
area into research log entries and feedback requests.
"""

import logging

from indoorsense.core.accessibility import random_tip
from indoorsense.core.feedback import FeedbackRequest, HapticPattern
from indoorsense.models.research import GestureType, InteractionType

logger = logging.getLogger(__name__)

GESTURE_AREA_HELP = "Gesture area. Double tap to scan, triple tap for tips."
GESTURE_INSTRUCTIONS = ("Double tap the bottom edge to scan all features, "
                        "or triple tap for exploration tips.")


class TouchInteractionPolicy:
    """
    Touch handler for the map surface and the gesture area.

    Every touch is logged to the research session. Feedback is decided by the
    dispatcher and the resulting requests are handed to `sink`, usually
    FeedbackWorker.submit.
    """

    def __init__(self, store, session, dispatcher, sink=None, tip_source=random_tip):
        """
        Initialize the interaction policy.

        Args:
            store (FeatureStore): Loaded floor plan
            session (InteractionSession): Research log
            dispatcher (FeedbackDispatcher): Feedback selection with debounce
            sink (callable): Receives each FeedbackRequest
            tip_source (callable): Returns an exploration tip for triple taps
        """
        self.store = store
        self.session = session
        self.dispatcher = dispatcher
        self.sink = sink or (lambda request: None)
        self.tip_source = tip_source

        self.last_feature = None

        logger.info(f"Initialized touch interaction policy with {len(store)} features")

    def _emit(self, request):
        if request is not None:
            self.sink(request)
        return request

    def _say(self, text, haptic=None):
        """Announce a message and speak it when speech is enabled."""
        return self._emit(FeedbackRequest(
            announcement=text,
            speech=text if self.dispatcher.speak_enabled else None,
            haptic=haptic if self.dispatcher.haptics_enabled else None,
        ))

    # ==================== Map surface ====================

    def handle_touch(self, point, viewport, is_drag=True, duration=None):
        """
        Process one touch sample on the map surface.

        Args:
            point (Coords): Touch position in screen coordinates
            viewport (Size): Size of the map surface
            is_drag (bool): True while the finger is moving, False for the final sample
            duration (float, optional): Touch duration in seconds

        Returns:
            FeedbackRequest or None: The feedback handed to the sink, if any
        """
        map_point = self.store.canvas_to_map(point, viewport)
        feature = self.store.feature_at(map_point)

        if feature is not None:
            interaction_type = (InteractionType.FEATURE_REVISIT
                                if self.session.is_discovered(feature.id)
                                else InteractionType.FEATURE_DISCOVERY)
            logger.debug(f"On: {feature.name} ({feature.type.value})")
        else:
            interaction_type = InteractionType.OUTSIDE_TOUCH
            logger.debug(f"Outside floor plan at {point} ({'drag' if is_drag else 'lift'})")

        self.session.log_interaction(point, feature, interaction_type, duration)
        self.last_feature = feature

        return self._emit(self.dispatcher.dispatch(point, viewport, feature))

    def handle_release(self, point, viewport, duration=None):
        """
        The finger was lifted: log the final sample with its duration and stop patterns.

        Returns:
            FeedbackRequest or None: Feedback for the final sample, if any
        """
        request = self.handle_touch(point, viewport, is_drag=False, duration=duration)
        self._emit(self.dispatcher.release())
        self.last_feature = None
        return request

    # ==================== Announcements ====================

    def initial_announcement(self):
        """Greeting spoken once after the floor plan is loaded."""
        message = (f"IndoorSense loaded. {self.store.detailed_overview()} "
                   f"Tap and drag on the main area to explore features. {GESTURE_INSTRUCTIONS}")
        self._say(message)
        return message

    def handle_overview(self, duration=0.0):
        """Overview button: log it and speak the detailed overview."""
        self.session.log_gesture(GestureType.OVERVIEW, True, duration)
        message = self.store.detailed_overview()
        self._say(message)
        return message

    # ==================== Gesture area ====================

    def handle_gesture(self, gesture_type, duration=0.0):
        """
        Act on a resolved tap sequence from the gesture area.

        Double tap scans the features left to right, triple tap speaks a
        random tip and a single tap explains the gesture area.

        Args:
            gesture_type (GestureType): Resolved gesture
            duration (float): Length of the tap sequence in seconds

        Returns:
            str: The message that was announced
        """
        self.session.log_gesture(gesture_type, True, duration)

        if gesture_type == GestureType.DOUBLE_TAP:
            message = self.store.quick_scan()
            self._say(message)
        elif gesture_type == GestureType.TRIPLE_TAP:
            message = self.tip_source()
            self._say(message)
        else:
            message = GESTURE_AREA_HELP
            self._emit(FeedbackRequest(announcement=message))

        logger.info(f"Gesture {gesture_type.value}: {message}")
        return message

    def gesture_area_tap(self):
        """Light confirmation tap when the gesture area is touched."""
        if self.dispatcher.haptics_enabled:
            return self._emit(FeedbackRequest(haptic=HapticPattern.LIGHT_TAP))
        return None
