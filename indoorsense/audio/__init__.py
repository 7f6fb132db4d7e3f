"""
Audio Module - Platform output services.

This module provides:
- Feature tones with pyglet or pygame playback (audio.py)
- Speech and accessibility announcements (speech.py)
- Haptic patterns (haptics.py)
"""

from .audio import TonePlayer
from .haptics import HapticEngine
from .speech import AccessibilityAnnouncer, LoggingSpeechBackend, SpeechAnnouncer

__all__ = [
    'TonePlayer',
    'HapticEngine',
    'AccessibilityAnnouncer',
    'LoggingSpeechBackend',
    'SpeechAnnouncer',
]
