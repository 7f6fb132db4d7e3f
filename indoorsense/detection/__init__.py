"""
Detection Module - Gesture recognition on the touch surface.

This module provides:
- Multi-tap sequence detection for the gesture area (gesture_detection.py)
"""

from .gesture_detection import TapSequenceDetector

__all__ = [
    'TapSequenceDetector',
]
