from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from pinhigh import geodesy as geo
from pinhigh.geometry import Circle, Polygon, TreeObstacle

PEAK_HEIGHT_FRACTION = 0.07
TREE_TROUBLE_RADIUS_M = 28.0

DEFLECTION_MIN_M = 2.0
DEFLECTION_MAX_M = 7.0
DEFLECTION_SPREAD_DEG = 30.0

MIN_SEGMENT_M = 1e-6


@dataclass(frozen=True)
class TreeHit:
    t: float
    distance_from_start: float
    tree: TreeObstacle


@dataclass(frozen=True)
class CollisionResult:
    landing: geo.Coordinate
    travelled_m: float
    impact: Optional[geo.Coordinate] = None

    @property
    def hit_tree(self) -> bool:
        return self.impact is not None


# ============================================================
# Segment / canopy intersection
# ============================================================

def _project(origin: geo.Coordinate, forward_bearing: float, point: geo.Coordinate) -> Tuple[float, float]:
    """(forward, lateral) meters of `point` in the shot frame."""
    result = geo.inverse(origin, point)
    angle = math.radians(result.initial_bearing_deg - forward_bearing)
    return result.distance_m * math.cos(angle), result.distance_m * math.sin(angle)


def _circle_crossing(origin, forward_bearing, length, circle: Circle) -> Optional[float]:
    cx, cy = _project(origin, forward_bearing, circle.center)
    r = circle.radius_m
    if cy * cy > r * r:
        return None
    half_chord = math.sqrt(r * r - cy * cy)
    for x in (cx - half_chord, cx + half_chord):
        if 0 <= x <= length:
            return x
    return None


def _polygon_crossing(origin, forward_bearing, length, polygon: Polygon) -> Optional[float]:
    vertices = polygon.vertices
    if len(vertices) < 3:
        return None
    points = [_project(origin, forward_bearing, v) for v in vertices]
    best = None
    for i, (ax, ay) in enumerate(points):
        bx, by = points[(i + 1) % len(points)]
        dy = by - ay
        if abs(dy) < 1e-9:
            continue
        s = -ay / dy
        if s < 0 or s > 1:
            continue
        x = ax + s * (bx - ax)
        if x <= 0 or x >= length:
            continue
        if best is None or x < best:
            best = x
    return best


def segment_tree_intersection(
    start: geo.Coordinate, end: geo.Coordinate, tree: TreeObstacle
) -> Optional[Tuple[float, float]]:
    """First crossing of the straight segment with the canopy as (t, forward meters)."""
    line = geo.inverse(start, end)
    length = line.distance_m
    if length < MIN_SEGMENT_M:
        return None
    canopy = tree.canopy
    if isinstance(canopy, Circle):
        x = _circle_crossing(start, line.initial_bearing_deg, length, canopy)
    elif isinstance(canopy, Polygon):
        x = _polygon_crossing(start, line.initial_bearing_deg, length, canopy)
    else:
        raise TypeError(f"unknown canopy type: {type(canopy).__name__}")
    if x is None:
        return None
    return x / length, x


def trajectory_height(distance_from_start: float, total_distance: float) -> float:
    """Symmetric parabola peaking at 7% of the shot length."""
    if total_distance < MIN_SEGMENT_M:
        return 0.0
    f = distance_from_start / total_distance
    if f <= 0 or f >= 1:
        return 0.0
    peak = PEAK_HEIGHT_FRACTION * total_distance
    return 4 * peak * f * (1 - f)


def first_tree_hit(
    start: geo.Coordinate, end: geo.Coordinate, trees: Sequence[TreeObstacle]
) -> Optional[TreeHit]:
    """Nearest canopy the ball cannot fly over."""
    total = geo.distance(start, end)
    best = None
    for tree in trees:
        crossing = segment_tree_intersection(start, end, tree)
        if crossing is None:
            continue
        t, x = crossing
        if trajectory_height(x, total) > tree.height_m:
            continue
        if best is None or t < best.t:
            best = TreeHit(t, x, tree)
    return best


def resolve_collision(
    start: geo.Coordinate,
    landing: geo.Coordinate,
    trees: Sequence[TreeObstacle],
    rng: random.Random,
) -> CollisionResult:
    """
    Replace the landing point when a tree stops the ball.

    The ball drops 2-7 m from the impact point, kicked roughly sideways
    (90 degrees either side of the line, +/- 30).
    """
    travelled = geo.distance(start, landing)
    if not trees:
        return CollisionResult(landing, travelled)

    hit = first_tree_hit(start, landing, trees)
    if hit is None:
        return CollisionResult(landing, travelled)

    line_bearing = geo.bearing(start, landing)
    impact = geo.direct(start, line_bearing, hit.distance_from_start)
    side = 90.0 if rng.random() < 0.5 else -90.0
    kick_bearing = (line_bearing + side + rng.uniform(-DEFLECTION_SPREAD_DEG, DEFLECTION_SPREAD_DEG)) % 360.0
    kick = rng.uniform(DEFLECTION_MIN_M, DEFLECTION_MAX_M)
    return CollisionResult(
        landing=geo.direct(impact, kick_bearing, kick),
        travelled_m=hit.distance_from_start + kick,
        impact=impact,
    )


# ============================================================
# Policy helpers
# ============================================================

def is_path_blocked(start: geo.Coordinate, end: geo.Coordinate, trees: Sequence[TreeObstacle]) -> bool:
    """Any canopy on the straight line, ignoring height."""
    return any(segment_tree_intersection(start, end, tree) is not None for tree in trees)


def is_near_tree(position: geo.Coordinate, trees: Sequence[TreeObstacle]) -> bool:
    return any(
        geo.distance(position, tree.center) <= tree.radius_m + TREE_TROUBLE_RADIUS_M
        for tree in trees
    )
