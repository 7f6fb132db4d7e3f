"""
Haptic pattern library.

The HapticEngine expands a HapticPattern into a timed sequence of actuator
impulses. Impulses are delivered to an injected actuator callable taking a
style ('light', 'medium', 'heavy', 'success', 'warning', 'error') and an
intensity between 0.0 and 1.0. Delayed steps run on a PatternScheduler so
that a new pattern can cancel what is still pending from the previous one.
"""

import logging
import threading

from indoorsense.config import HapticConfig
from indoorsense.core.feedback import HapticPattern
from indoorsense.core.workers import PatternScheduler

logger = logging.getLogger(__name__)

# Repeating patterns, stopped by stop_all_patterns()
CONTINUOUS_KEY = "continuous"
PULSING_KEY = "pulsing"


class HapticEngine:
    """
    Plays haptic patterns on an actuator.
    """

    def __init__(self, actuator=None, scheduler=None, config=HapticConfig):
        """
        Initialize the haptic engine.

        Args:
            actuator (callable): actuator(style, intensity). Defaults to debug logging.
            scheduler (PatternScheduler): Timer source for delayed steps
            config: Pattern timing constants
        """
        self.actuator = actuator or (lambda style, intensity:
                                     logger.debug(f"Haptic {style} ({intensity})"))
        self.scheduler = scheduler if scheduler is not None else PatternScheduler()
        self.config = config
        self._pulses_left = 0
        self._continuous_run = 0
        self._continuous_lock = threading.Lock()

        self._patterns = {
            HapticPattern.CONTINUOUS: self.continuous,
            HapticPattern.PULSING: self.pulsing,
            HapticPattern.MEDIUM_IMPACT: lambda: self.impulse('medium'),
            HapticPattern.HEAVY_IMPACT: lambda: self.impulse('heavy'),
            HapticPattern.SUCCESS: lambda: self.impulse('success'),
            HapticPattern.WARNING: lambda: self.impulse('warning'),
            HapticPattern.ERROR: lambda: self.impulse('error'),
            HapticPattern.SMOOTH_STRONG: self.smooth_strong,
            HapticPattern.OUTSIDE_PLAN: self.outside_plan,
            HapticPattern.LIGHT_TAP: lambda: self.impulse('light', 0.5),
        }

    def impulse(self, style, intensity=1.0):
        self.actuator(style, intensity)

    def play(self, pattern):
        """
        Play a pattern.

        Args:
            pattern (HapticPattern): Pattern to play
        """
        logger.debug(f"Haptic pattern: {pattern.value}")
        self._patterns[pattern]()

    # ==================== Timed patterns ====================

    def continuous(self):
        """
        Corridor buzz: light pulses every CONTINUOUS_INTERVAL until CONTINUOUS_DURATION.

        Restarting replaces both the pulse timer and the stop timer of the
        previous run. A pulse belonging to a stopped or replaced run does not
        reschedule itself, even when the stop lands while it is firing.
        """
        self.impulse('light')

        def pulse():
            if run != self._continuous_run:
                return
            self.impulse('light', self.config.CONTINUOUS_INTENSITY)
            with self._continuous_lock:
                if run == self._continuous_run:
                    self.scheduler.schedule(f"{CONTINUOUS_KEY}.pulse", self.config.CONTINUOUS_INTERVAL, pulse)

        with self._continuous_lock:
            self._continuous_run += 1
            run = self._continuous_run
            self.scheduler.schedule(f"{CONTINUOUS_KEY}.pulse", self.config.CONTINUOUS_INTERVAL, pulse)
            self.scheduler.schedule(f"{CONTINUOUS_KEY}.stop", self.config.CONTINUOUS_DURATION,
                                    lambda: self.stop_continuous(run))

    def pulsing(self):
        """PULSE_COUNT medium pulses, PULSE_INTERVAL apart."""
        self._pulses_left = self.config.PULSE_COUNT

        def pulse():
            if self._pulses_left <= 0:
                return
            self._pulses_left -= 1
            self.impulse('medium', self.config.PULSE_INTENSITY)
            if self._pulses_left > 0:
                self.scheduler.schedule(PULSING_KEY, self.config.PULSE_INTERVAL, pulse)

        pulse()

    def smooth_strong(self):
        """Heavy impact fading out over a few steps."""
        self.impulse('heavy', 1.0)
        for i, (delay, style, intensity) in enumerate(self.config.SMOOTH_STRONG_STEPS):
            self.scheduler.schedule(f"smooth_strong.{i}", delay,
                                    lambda s=style, v=intensity: self.impulse(s, v))

    def outside_plan(self):
        """Two light taps."""
        self.impulse('light', self.config.OUTSIDE_TAP_INTENSITY)
        self.scheduler.schedule("outside_plan", self.config.OUTSIDE_TAP_GAP,
                                lambda: self.impulse('light', self.config.OUTSIDE_TAP_INTENSITY))

    def stop_continuous(self, run=None):
        """End the corridor buzz. With `run` given, only if that run is still the current one."""
        with self._continuous_lock:
            if run is not None and run != self._continuous_run:
                return
            self._continuous_run += 1
            self.scheduler.cancel_prefix(CONTINUOUS_KEY)

    def stop_all_patterns(self):
        """Cancel the repeating patterns and their stop timers."""
        self._pulses_left = 0
        self.stop_continuous()
        self.scheduler.cancel_prefix(PULSING_KEY)

    def shutdown(self):
        """Cancel every pending step."""
        self._pulses_left = 0
        with self._continuous_lock:
            self._continuous_run += 1
            self.scheduler.cancel_all()
