from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from indoorsense.utils.coords import Coords, Rect
from indoorsense.utils.geometry import polygon_centroid, valid_points


class FeatureType(Enum):
    """
    The finite set of feature types in an indoor map.
    Values match the `type` strings of the floor-plan JSON.
    """

    ROOM = "room"
    CORRIDOR = "corridor"
    ELEVATOR = "elevator"
    STAIRS = "stairs"
    BATHROOM = "bathroom"
    LANDMARK = "landmark"


@dataclass(frozen=True)
class Feature:
    """
    One indoor feature: a named polygon with a semantic type.
    """

    id: str
    "Identifier, unique within a floor plan."
    type: FeatureType
    "Semantic type, drives tone and haptic selection."
    name: str
    "Display and speech name."
    coordinates: Tuple[Tuple[float, ...], ...]
    "Polygon vertices, implicitly closed."

    @property
    def min_x(self) -> float:
        """
        Leftmost x of the polygon, used for left-to-right scanning.
        """
        points = valid_points(self.coordinates)
        if not points:
            return 0.0
        return min(p[0] for p in points)

    @property
    def centroid(self) -> Coords:
        """
        Mean of the valid polygon points.
        """
        return polygon_centroid(self.coordinates)


@dataclass(frozen=True)
class FloorPlan:
    """
    All features of a floor plan with the bounding rectangle computed at load time.
    """

    features: Tuple[Feature, ...]
    bounding_rect: Rect
