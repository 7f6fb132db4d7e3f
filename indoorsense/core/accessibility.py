"""
Spoken help texts for screen-reader users.
"""

import math
import random

from indoorsense.models.feature import FeatureType

HELP_TEMPLATES = {
    FeatureType.ROOM: "{name}. Room. Double tap to get more information.",
    FeatureType.CORRIDOR: "{name}. Corridor connecting different areas.",
    FeatureType.ELEVATOR: "{name}. Elevator for vertical transportation.",
    FeatureType.STAIRS: "{name}. Stairs for vertical movement.",
    FeatureType.BATHROOM: "{name}. Restroom facility.",
    FeatureType.LANDMARK: "{name}. Notable landmark for navigation reference.",
}

# Clockwise from "right" in screen coordinates (y grows downward)
DIRECTIONS = [
    "right",
    "down and right",
    "down",
    "down and left",
    "left",
    "up and left",
    "up",
    "up and right",
]

EXPLORATION_TIPS = [
    "Tap and drag slowly to explore room boundaries.",
    "Corridors vibrate continuously while you follow them.",
    "Touch outside the floor plan to hear which features are nearby.",
    "Double tap the bottom edge to hear all features grouped by side.",
    "Lift your finger and touch again to repeat a feature name.",
    "Landmarks give a strong vibration that fades out.",
]

FALLBACK_TIP = "Explore by tapping and dragging across the screen."


def contextual_help(feature):
    """
    Describe a feature and what it is for.

    Args:
        feature (Feature): Feature to describe

    Returns:
        str: e.g. "Room 101. Room. Double tap to get more information."
    """
    return HELP_TEMPLATES[feature.type].format(name=feature.name)


def directional_guidance(from_point, to_point):
    """
    Eight-way direction from one screen point to another.

    Sectors are 45 degrees wide and centered on the compass directions.

    Args:
        from_point (Coords): Start point
        to_point (Coords): Target point

    Returns:
        str: "right", "up and left", ...
    """
    dx = to_point.x - from_point.x
    dy = to_point.y - from_point.y
    angle = math.degrees(math.atan2(dy, dx)) % 360.0
    sector = int(((angle + 22.5) % 360.0) // 45.0)
    return DIRECTIONS[sector]


def exploration_tips():
    return list(EXPLORATION_TIPS)


def random_tip(tips=None, rng=random):
    """
    Pick one exploration tip at random.

    Args:
        tips (list): Tips to choose from, defaults to the built-in list
        rng: Object with a choice() method

    Returns:
        str: A tip, or a generic hint when the list is empty
    """
    tips = EXPLORATION_TIPS if tips is None else tips
    if not tips:
        return FALLBACK_TIP
    return rng.choice(tips)
