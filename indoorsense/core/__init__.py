"""
Core Module - Floor-plan store, research logging, feedback and export.

This module contains fundamental building blocks of IndoorSense:
- Floor-plan loading (utils.py) and the feature store (map_store.py)
- Research session logging (research_logger.py) and CSV export (exporter.py)
- Feedback selection (feedback.py) and background workers (workers.py)
- Touch interaction policy (interaction_policy.py) and help texts (accessibility.py)

Note: Configuration lives in indoorsense.config.
"""

from .utils import (
    FloorPlanLoadError,
    TouchEvent,
    load_floor_plan,
    load_touch_script,
    parse_feature,
    parse_feature_collection,
)

from .map_store import FeatureStore

from .research_logger import InteractionSession

from .feedback import (
    FeedbackDispatcher,
    FeedbackRequest,
    HapticPattern,
    ToneChannel,
    describe_direction,
)

from .exporter import (
    ExportError,
    ResearchExporter,
    combined_export,
    gestures_to_csv,
    interactions_to_csv,
    parse_interactions_csv,
    sessions_to_csv,
)

from .workers import FeedbackCommand, FeedbackWorker, PatternScheduler

from .interaction_policy import TouchInteractionPolicy

from .accessibility import (
    contextual_help,
    directional_guidance,
    exploration_tips,
    random_tip,
)

__all__ = [
    # Loading
    'FloorPlanLoadError',
    'TouchEvent',
    'load_floor_plan',
    'load_touch_script',
    'parse_feature',
    'parse_feature_collection',
    # Store
    'FeatureStore',
    # Research
    'InteractionSession',
    # Feedback
    'FeedbackDispatcher',
    'FeedbackRequest',
    'HapticPattern',
    'ToneChannel',
    'describe_direction',
    # Export
    'ExportError',
    'ResearchExporter',
    'combined_export',
    'gestures_to_csv',
    'interactions_to_csv',
    'parse_interactions_csv',
    'sessions_to_csv',
    # Workers
    'FeedbackCommand',
    'FeedbackWorker',
    'PatternScheduler',
    # Interaction
    'TouchInteractionPolicy',
    'contextual_help',
    'directional_guidance',
    'exploration_tips',
    'random_tip',
]
