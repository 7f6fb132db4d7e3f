"""
Tap sequence detection for the gesture area.

The gesture area sits at the bottom edge of the screen. Taps close together
in time form a sequence; once no tap has arrived for a short settle delay the
sequence resolves to a single, double or triple tap.
"""

import logging
import time

from indoorsense.config import GestureConfig
from indoorsense.models.research import GestureType

logger = logging.getLogger(__name__)


class TapSequenceDetector:
    """
    Counts consecutive taps and resolves them into a GestureType.

    Call push_tap() on every tap and poll() periodically. Sequences of more
    than three taps resolve as triple taps.
    """

    def __init__(self, sequence_window=GestureConfig.TAP_SEQUENCE_WINDOW,
                 settle_delay=GestureConfig.TAP_SETTLE_DELAY, clock=time.monotonic):
        """
        Initialize the detector.

        Args:
            sequence_window (float): Maximum gap between taps of one sequence (seconds)
            settle_delay (float): Quiet time after the last tap before resolving (seconds)
            clock: Monotonic clock used when no explicit time is given
        """
        self.sequence_window = sequence_window
        self.settle_delay = settle_delay
        self._clock = clock

        self.tap_count = 0
        self.first_tap_time = None
        self.last_tap_time = None
        self.last_sequence_duration = 0.0

    def push_tap(self, now=None):
        """
        Register a tap.

        Args:
            now (float): Tap time, defaults to the detector clock

        Returns:
            int: Number of taps in the current sequence
        """
        now = self._clock() if now is None else now

        if self.last_tap_time is None or now - self.last_tap_time > self.sequence_window:
            self.tap_count = 0
            self.first_tap_time = now

        self.tap_count += 1
        self.last_tap_time = now
        logger.debug(f"Tap {self.tap_count} in sequence")
        return self.tap_count

    def poll(self, now=None):
        """
        Resolve the current sequence if it has settled.

        Returns:
            GestureType or None: The recognized gesture, None while taps may still follow
        """
        if self.last_tap_time is None:
            return None

        now = self._clock() if now is None else now
        if now - self.last_tap_time < self.settle_delay:
            return None
        return self.flush()

    def flush(self):
        """
        Resolve the current sequence without waiting for it to settle.

        Returns:
            GestureType or None: The recognized gesture, None if no tap is pending
        """
        if self.last_tap_time is None:
            return None

        count = self.tap_count
        self.last_sequence_duration = self.sequence_duration()
        self.reset()

        if count >= 3:
            return GestureType.TRIPLE_TAP
        if count == 2:
            return GestureType.DOUBLE_TAP
        return GestureType.SINGLE_TAP

    def sequence_duration(self):
        """Time from the first to the last tap of the current sequence."""
        if self.first_tap_time is None:
            return 0.0
        return self.last_tap_time - self.first_tap_time

    def reset(self):
        self.tap_count = 0
        self.first_tap_time = None
        self.last_tap_time = None
