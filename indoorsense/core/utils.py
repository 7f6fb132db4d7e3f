"""
Utility functions for IndoorSense.

This module contains helper functions for loading floor plans and replay
scripts from disk.
"""

import csv
import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from indoorsense.models.feature import Feature, FeatureType
from indoorsense.utils.coords import Coords

logger = logging.getLogger(__name__)


class FloorPlanLoadError(ValueError):
    """Raised when a floor-plan source is missing or malformed. Nothing is partially loaded."""


# ==================== Floor Plan Loading ====================

def parse_feature(entry: Dict[str, Any]) -> Feature:
    """
    Build a Feature from one entry of the `features` array.

    Args:
        entry (dict): Decoded JSON object with id, type, name and coordinates

    Returns:
        Feature: The parsed feature

    Raises:
        FloorPlanLoadError: If a key is missing, the type is unknown or the name is empty
    """
    if not isinstance(entry, dict):
        raise FloorPlanLoadError(f"Feature entry must be an object, got {type(entry).__name__}")

    try:
        feature_id = entry['id']
        type_name = entry['type']
        name = entry['name']
        raw_coordinates = entry['coordinates']
    except KeyError as e:
        raise FloorPlanLoadError(f"Feature entry is missing key {e}") from e

    try:
        feature_type = FeatureType(type_name)
    except ValueError as e:
        raise FloorPlanLoadError(f"Unknown feature type {type_name!r} for feature {feature_id!r}") from e

    if not isinstance(name, str) or not name.strip():
        raise FloorPlanLoadError(f"Feature {feature_id!r} has an empty name")

    if not isinstance(raw_coordinates, list):
        raise FloorPlanLoadError(f"Feature {feature_id!r} coordinates must be a list")

    try:
        coordinates = tuple(tuple(float(v) for v in point) for point in raw_coordinates)
    except (TypeError, ValueError) as e:
        raise FloorPlanLoadError(f"Feature {feature_id!r} has non-numeric coordinates") from e

    return Feature(id=str(feature_id), type=feature_type, name=name, coordinates=coordinates)


def parse_feature_collection(data: Any) -> Tuple[Feature, ...]:
    """
    Parse a decoded `{"features": [...]}` document.

    Raises:
        FloorPlanLoadError: On any structural problem or duplicate feature id
    """
    if not isinstance(data, dict) or 'features' not in data:
        raise FloorPlanLoadError("Floor plan must be an object with a 'features' array")
    if not isinstance(data['features'], list):
        raise FloorPlanLoadError("'features' must be an array")

    features = tuple(parse_feature(entry) for entry in data['features'])

    seen = set()
    for feature in features:
        if feature.id in seen:
            raise FloorPlanLoadError(f"Duplicate feature id {feature.id!r}")
        seen.add(feature.id)

    return features


def load_floor_plan(filename: str) -> Tuple[Feature, ...]:
    """
    Load floor-plan features from a JSON file.

    Args:
        filename (str): Path to the JSON floor-plan file

    Returns:
        tuple: Features in file order

    Raises:
        FloorPlanLoadError: If the file is missing, unreadable or invalid
    """
    if not os.path.isfile(filename):
        logger.error(f"No floor plan file found at {filename}")
        raise FloorPlanLoadError(f"No floor plan file found at {filename}")

    try:
        with open(filename, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read floor plan {filename}: {e}")
        raise FloorPlanLoadError(f"Could not read floor plan {filename}: {e}") from e

    features = parse_feature_collection(data)
    logger.info(f"Loaded {len(features)} features from {filename}")
    return features


# ==================== Touch Replay Loading ====================

TOUCH_EVENTS = ('touch', 'drag', 'release')
GESTURE_AREA_EVENTS = ('tap', 'overview')


class TouchEvent:
    """One scripted row read from a replay file."""

    def __init__(self, point: Optional[Coords], event: str, duration: Optional[float] = None,
                 time: Optional[float] = None):
        """
        Args:
            point (Coords): Screen position, None for gesture-area rows
            event (str): 'touch', 'drag', 'release', 'tap' or 'overview'
            duration (float, optional): Touch duration for release events
            time (float, optional): Seconds since the start of the replay
        """
        self.point = point
        self.event = event
        self.duration = duration
        self.time = time


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == '':
        return None
    return float(value)


def load_touch_script(filename: str) -> List[TouchEvent]:
    """
    Load a touch replay script with a header line.

    Columns are x,y,event[,duration][,time]. Map-surface events ('touch',
    'drag', 'release') need x and y. Gesture-area events ('tap' for one tap,
    'overview' for the overview button) may leave them blank.

    Raises:
        ValueError: If a row is malformed or names an unknown event
    """
    events = []
    with open(filename, 'r', newline='', encoding='utf-8') as f:
        for row in csv.DictReader(f):
            event = (row.get('event') or 'touch').strip()
            if event not in TOUCH_EVENTS + GESTURE_AREA_EVENTS:
                raise ValueError(f"Unknown touch event {event!r} in {filename}")

            x, y = _optional_float(row.get('x')), _optional_float(row.get('y'))
            if x is None or y is None:
                if event in TOUCH_EVENTS:
                    raise ValueError(f"Missing coordinates for {event!r} in {filename}")
                point = None
            else:
                point = Coords(x, y)

            events.append(TouchEvent(
                point,
                event,
                _optional_float(row.get('duration')),
                _optional_float(row.get('time')),
            ))

    logger.info(f"Loaded {len(events)} scripted touches from {filename}")
    return events
