"""
Models Module - Floor-plan features and research records.

This module provides:
- Feature and floor-plan types (feature.py)
- Interaction, gesture and session records for study logging (research.py)
"""

from .feature import Feature, FeatureType, FloorPlan
from .research import (
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

__all__ = [
    # Floor plan
    'Feature',
    'FeatureType',
    'FloorPlan',
    # Research
    'GestureRecord',
    'GestureType',
    'InteractionRecord',
    'InteractionType',
    'ResearchFeature',
    'ResearchTask',
    'SessionRecord',
    'StudyCondition',
    'StudyConfiguration',
]
