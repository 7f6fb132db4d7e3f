"""
IndoorSense - Accessible Floor-Plan Exploration

Touch-based exploration of indoor floor plans for blind and low-vision users,
with speech, tone and haptic feedback and research logging for user studies.

Main components:
- config: Centralized configuration
- core: Feature store, research logging, feedback, export, workers
- models: Floor-plan features and research records
- audio: Tone, speech, haptic and announcement services
- detection: Gesture-area tap detection
- utils: Coordinates and geometry
"""

__version__ = "0.1.0"
