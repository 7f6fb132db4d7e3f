"""
Configuration module for IndoorSense.

This module contains all configuration parameters and constants used throughout the application.
Centralizing configuration makes it easier to tune parameters and understand system behavior.

TUNING NOTES:
- Drag feedback feels chatty: raise FeedbackConfig.COOLDOWN
- Haptics drain the battery: shorten HapticConfig.CONTINUOUS_DURATION
- Coverage saturates too quickly on large maps: raise ResearchConfig.EXPLORED_CELL_SIZE
"""


# ==================== Geometry Configuration ====================
class GeometryConfig:
    """Coordinate transform and hit-testing parameters."""

    # Padding between the viewport edge and the fitted floor plan (screen points)
    VIEWPORT_PADDING = 20.0

    # Fraction of the map extent added on each side of the bounding rectangle
    BOUNDS_BUFFER_RATIO = 0.05

    # Bounding rectangle used when no feature has a valid point
    DEFAULT_MAP_WIDTH = 100.0
    DEFAULT_MAP_HEIGHT = 100.0

    # Map-space tolerance for "near the edge" vs "far outside"
    FLOOR_PLAN_TOLERANCE = 2.0

    # Edges whose y-span is below this are ignored by the crossing test
    EPSILON = 1e-9


# ==================== Feedback Configuration ====================
class FeedbackConfig:
    """Configuration for feedback dispatch during touch exploration."""

    # Minimum time between repeated feedback for the same feature (seconds)
    COOLDOWN = 0.30

    # How many nearby features are named in the "outside" guidance message
    NEAREST_FEATURE_LIMIT = 2

    # Normalized screen thresholds for the 3x3 direction descriptor
    LOW_THRESHOLD = 0.33
    HIGH_THRESHOLD = 0.67

    # Default channel toggles
    SPEAK_ENABLED = True
    TONES_ENABLED = False
    HAPTICS_ENABLED = True


# ==================== Haptic Configuration ====================
class HapticConfig:
    """Configuration for haptic patterns."""

    # Continuous corridor vibration: pulse interval and total length (seconds)
    CONTINUOUS_INTERVAL = 0.1
    CONTINUOUS_DURATION = 2.0
    CONTINUOUS_INTENSITY = 0.3

    # Pulsing junction pattern
    PULSE_INTERVAL = 0.3
    PULSE_COUNT = 6
    PULSE_INTENSITY = 0.7

    # Smooth-strong landmark fade: (delay, style, intensity) steps after the first impact
    SMOOTH_STRONG_STEPS = (
        (0.1, 'medium', 0.8),
        (0.2, 'medium', 0.6),
        (0.3, 'light', 0.4),
    )

    # Double light tap for touches outside the floor plan
    OUTSIDE_TAP_GAP = 0.1
    OUTSIDE_TAP_INTENSITY = 0.3


# ==================== Audio Configuration ====================
class AudioConfig:
    """Configuration for tone playback."""

    # Length of a synthesized feature tone (seconds)
    TONE_DURATION = 0.15

    # Sine frequency per feature type (Hz)
    TONE_FREQUENCIES = {
        'room': 523.25,
        'corridor': 261.63,
        'elevator': 659.25,
        'stairs': 392.00,
        'bathroom': 783.99,
        'landmark': 880.00,
    }

    # Directory searched for <feature_type>.wav overrides
    TONE_DIRECTORY = 'sounds'

    TONE_VOLUME = 0.6

    # Sample rate used for synthesized tones
    SAMPLE_RATE = 44100


# ==================== Research Logging Configuration ====================
class ResearchConfig:
    """Configuration for research session logging."""

    STUDY_ID = "IndoorSense_Study_2025"

    # Explored cells are quantized to this size in screen points
    EXPLORED_CELL_SIZE = 1.0

    # Explored cell count that corresponds to full coverage
    COVERAGE_NORMALIZATION = 100.0

    NO_SESSION_SUMMARY = "No active session"


# ==================== Export Configuration ====================
class ExportConfig:
    """Configuration for CSV export."""

    APP_NAME = "IndoorSense"
    APP_VERSION = "1.0"

    INTERACTIONS_FILENAME = "interactions.csv"
    GESTURES_FILENAME = "gestures.csv"
    SESSIONS_FILENAME = "sessions.csv"
    QUICK_EXPORT_PATTERN = "IndoorSense_Data_{timestamp}.csv"

    DEFAULT_OUTPUT_DIR = "out"


# ==================== Gesture Area Configuration ====================
class GestureConfig:
    """Configuration for the multi-tap gesture area."""

    # Taps further apart than this start a new sequence (seconds)
    TAP_SEQUENCE_WINDOW = 0.5

    # Wait this long after the last tap before resolving the sequence (seconds)
    TAP_SETTLE_DELAY = 0.3

    # Replay clock step for script rows without a time column (seconds)
    REPLAY_STEP = 0.1

    # Quick scan grouping thresholds on feature min_x (map units)
    SCAN_LEFT_LIMIT = 100.0
    SCAN_RIGHT_LIMIT = 180.0


# ==================== Worker Thread Configuration ====================
class WorkerConfig:
    """Configuration for background worker threads."""

    FEEDBACK_QUEUE_MAXSIZE = 50

    # Queue timeout (seconds)
    QUEUE_TIMEOUT = 0.1

    # Thread shutdown timeout (seconds)
    THREAD_SHUTDOWN_TIMEOUT = 2.0
