"""
Feature store for the loaded floor plan.

The store owns the immutable feature set and its bounding rectangle and
answers the spatial queries used while exploring: which feature is under a
touch, which features are closest, and whether a touch is on the plan at all.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from indoorsense.config import GeometryConfig, GestureConfig
from indoorsense.models.feature import Feature, FeatureType, FloorPlan
from indoorsense.utils.coords import Coords, Rect, Size
from indoorsense.utils.geometry import (
    canvas_to_map,
    compute_scale_and_offset,
    point_in_polygon,
    valid_points,
)

logger = logging.getLogger(__name__)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


class FeatureStore:
    """
    Read-only spatial index over the features of one floor plan.

    Features keep their load order; every scan (hit-testing, distance
    ordering ties) follows that order.
    """

    def __init__(self, features: Iterable[Feature] = (),
                 padding: float = GeometryConfig.VIEWPORT_PADDING):
        """
        Args:
            features: Features in load order
            padding (float): Viewport padding shared with rendering
        """
        features = tuple(features)
        self.floor_plan = FloorPlan(features=features, bounding_rect=self.compute_bounds(features))
        self.padding = padding
        self._by_id: Dict[str, Feature] = {f.id: f for f in features}

        # Centroids as an Nx2 array for vectorized distance queries
        if features:
            self._centroids = np.array([f.centroid.coords for f in features], dtype=float)
        else:
            self._centroids = np.zeros((0, 2), dtype=float)

        logger.info(f"Feature store ready with {len(features)} features, bounds {self.map_rect}")

    # ==================== Properties ====================

    @property
    def features(self) -> Tuple[Feature, ...]:
        return self.floor_plan.features

    @property
    def map_rect(self) -> Rect:
        return self.floor_plan.bounding_rect

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    # ==================== Bounds ====================

    @staticmethod
    def compute_bounds(features: Sequence[Feature]) -> Rect:
        """
        Overall bounding box of all features with a 5% buffer per side.

        Returns the default 100x100 box at the origin when there is no valid
        point. A single-point plan gets a zero-sized (but non-negative) rect.
        """
        default = Rect(0.0, 0.0, GeometryConfig.DEFAULT_MAP_WIDTH, GeometryConfig.DEFAULT_MAP_HEIGHT)

        points = [p for f in features for p in valid_points(f.coordinates)]
        if not points:
            return default

        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)

        buffer_x = (max_x - min_x) * GeometryConfig.BOUNDS_BUFFER_RATIO
        buffer_y = (max_y - min_y) * GeometryConfig.BOUNDS_BUFFER_RATIO

        return Rect(
            min_x - buffer_x,
            min_y - buffer_y,
            (max_x - min_x) + buffer_x * 2,
            (max_y - min_y) + buffer_y * 2,
        )

    # ==================== Coordinate transforms ====================

    def scale_and_offset(self, viewport: Size) -> Tuple[float, Coords]:
        """
        Scale and offset used to draw this floor plan into `viewport`.
        """
        return compute_scale_and_offset(viewport, self.map_rect, self.padding)

    def canvas_to_map(self, screen_point: Coords, viewport: Size) -> Coords:
        """
        Convert a touch point in the viewport to map coordinate space.
        """
        return canvas_to_map(screen_point, viewport, self.map_rect, self.padding)

    # ==================== Hit testing ====================

    def feature_at(self, map_point: Coords) -> Optional[Feature]:
        """
        Find the first feature, in load order, containing a map-space point.
        Overlapping features resolve to the earliest one.
        """
        for feature in self.features:
            if point_in_polygon(map_point, feature.coordinates):
                return feature
        return None

    def is_within_floor_plan_bounds(self, screen_point: Coords, viewport: Size,
                                    tolerance: float = GeometryConfig.FLOOR_PLAN_TOLERANCE) -> bool:
        """
        Check whether a touch falls inside the bounding rectangle grown by `tolerance`.
        """
        map_point = self.canvas_to_map(screen_point, viewport)
        return self.map_rect.expanded(tolerance).contains(map_point)

    def features_by_distance(self, screen_point: Coords, viewport: Size) -> List[Tuple[Feature, float]]:
        """
        All features paired with the map-space distance from the touch to their centroid,
        nearest first. Ties keep load order.
        """
        if not self.features:
            return []

        map_point = self.canvas_to_map(screen_point, viewport)
        distances = np.hypot(self._centroids[:, 0] - map_point.x, self._centroids[:, 1] - map_point.y)
        order = np.argsort(distances, kind='stable')
        return [(self.features[i], float(distances[i])) for i in order]

    def nearest_features(self, screen_point: Coords, viewport: Size, limit: int) -> List[Feature]:
        """
        The `limit` features whose centroids are closest to a touch.
        """
        if limit <= 0:
            return []
        return [f for f, _ in self.features_by_distance(screen_point, viewport)[:limit]]

    # ==================== Lookup ====================

    def feature_with_id(self, feature_id: str) -> Optional[Feature]:
        return self._by_id.get(feature_id)

    def features_of_type(self, feature_type: FeatureType) -> List[Feature]:
        return [f for f in self.features if f.type == feature_type]

    # ==================== Spoken summaries ====================

    def floor_plan_overview(self) -> str:
        """
        Short count-based overview of the floor plan.
        """
        counts = [
            (len(self.features_of_type(FeatureType.ROOM)), "room"),
            (len(self.features_of_type(FeatureType.ELEVATOR)), "elevator"),
            (len(self.features_of_type(FeatureType.STAIRS)), "stair"),
            (len(self.features_of_type(FeatureType.BATHROOM)), "bathroom"),
        ]
        parts = [_plural(count, word) for count, word in counts if count > 0]

        overview = "Floor plan contains"
        if parts:
            overview += " " + ", ".join(parts)
        return overview + ". Explore by tapping and dragging across the screen."

    def detailed_overview(self) -> str:
        """
        Overview naming rooms and landmarks, read by the overview button.
        """
        if not self.features:
            return "No floor plan loaded."

        rooms = self.features_of_type(FeatureType.ROOM)
        elevators = self.features_of_type(FeatureType.ELEVATOR)
        stairs = self.features_of_type(FeatureType.STAIRS)
        bathrooms = self.features_of_type(FeatureType.BATHROOM)
        landmarks = self.features_of_type(FeatureType.LANDMARK)
        corridors = self.features_of_type(FeatureType.CORRIDOR)

        parts = []

        if len(rooms) == 1:
            parts.append(f"1 room: {rooms[0].name}")
        elif rooms:
            parts.append(f"{len(rooms)} rooms including {', '.join(r.name for r in rooms)}")

        nav_features = []
        if elevators:
            nav_features.append(_plural(len(elevators), "elevator"))
        if stairs:
            nav_features.append("1 stairway" if len(stairs) == 1 else f"{len(stairs)} stairways")
        if nav_features:
            parts.append(" and ".join(nav_features))

        if bathrooms:
            parts.append(_plural(len(bathrooms), "bathroom"))

        if len(landmarks) == 1:
            parts.append(f"landmark: {landmarks[0].name}")
        elif landmarks:
            parts.append(f"landmarks: {', '.join(l.name for l in landmarks)}")

        if len(corridors) == 1:
            parts.append(f"connected by {corridors[0].name}")
        elif corridors:
            parts.append(f"connected by {len(corridors)} corridors")

        return "Floor plan contains: " + ", ".join(parts) + "."

    def quick_scan(self, left_limit: float = GestureConfig.SCAN_LEFT_LIMIT,
                   right_limit: float = GestureConfig.SCAN_RIGHT_LIMIT) -> str:
        """
        Read all features from left to right, grouped into left, center and right by min_x.
        """
        ordered = sorted(self.features, key=lambda f: f.min_x)
        if not ordered:
            return "No features loaded"

        groups = [
            ("Left side", [f for f in ordered if f.min_x < left_limit]),
            ("Center", [f for f in ordered if left_limit <= f.min_x < right_limit]),
            ("Right side", [f for f in ordered if f.min_x >= right_limit]),
        ]
        return ". ".join(
            f"{label}: {', '.join(f.name for f in members)}"
            for label, members in groups if members
        )
