from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

from pinhigh import geodesy as geo
from pinhigh.errors import HoleGeometryError

DEFAULT_GREEN_RADIUS_M = 18.0
GREEN_OUTLINE_MARGIN_M = 5.0


@dataclass(frozen=True)
class Circle:
    center: geo.Coordinate
    radius_m: float

    @property
    def aim_point(self) -> geo.Coordinate:
        return self.center


@dataclass(frozen=True)
class Polygon:
    """Closed ring of coordinates; the last vertex connects back to the first."""

    vertices: Tuple[geo.Coordinate, ...]

    def __post_init__(self):
        object.__setattr__(self, "vertices", tuple(self.vertices))

    @property
    def aim_point(self) -> geo.Coordinate:
        if not self.vertices:
            raise HoleGeometryError("empty polygon has no aim point")
        n = len(self.vertices)
        return geo.Coordinate(
            lat=sum(v.lat for v in self.vertices) / n,
            lng=sum(v.lng for v in self.vertices) / n,
        )


Region = Union[Circle, Polygon]


# ============================================================
# Containment
# ============================================================

def _point_in_ring(point: geo.Coordinate, vertices: Sequence[geo.Coordinate]) -> bool:
    """Even-odd ray cast in lng/lat space."""
    inside = False
    n = len(vertices)
    j = n - 1
    for i in range(n):
        vi, vj = vertices[i], vertices[j]
        if (vi.lat > point.lat) != (vj.lat > point.lat):
            cross_lng = (vj.lng - vi.lng) * (point.lat - vi.lat) / (vj.lat - vi.lat) + vi.lng
            if point.lng < cross_lng:
                inside = not inside
        j = i
    return inside


def contains(region: Region, point: geo.Coordinate) -> bool:
    if isinstance(region, Circle):
        return geo.haversine_distance(region.center, point) <= region.radius_m
    if isinstance(region, Polygon):
        if len(region.vertices) < 3:
            return False
        return _point_in_ring(point, region.vertices)
    raise TypeError(f"unknown region type: {type(region).__name__}")


def bounding_circle(region: Region) -> Circle:
    """Smallest circle around the aim point that covers the region."""
    if isinstance(region, Circle):
        return region
    if isinstance(region, Polygon):
        center = region.aim_point
        radius = max((geo.haversine_distance(center, v) for v in region.vertices), default=0.0)
        return Circle(center, radius)
    raise TypeError(f"unknown region type: {type(region).__name__}")


def green_from_boundary(pin: geo.Coordinate, boundary: Optional[Sequence[geo.Coordinate]] = None) -> Circle:
    """Green circle centred on the pin: outline reach + 5 m, or 18 m without an outline."""
    if boundary:
        reach = max(geo.haversine_distance(pin, v) for v in boundary)
        return Circle(pin, reach + GREEN_OUTLINE_MARGIN_M)
    return Circle(pin, DEFAULT_GREEN_RADIUS_M)


# ============================================================
# Hole model
# ============================================================

@dataclass(frozen=True)
class TreeObstacle:
    canopy: Region
    height_m: float

    @property
    def center(self) -> geo.Coordinate:
        return bounding_circle(self.canopy).center

    @property
    def radius_m(self) -> float:
        return bounding_circle(self.canopy).radius_m


@dataclass(frozen=True)
class HoleGeometry:
    green: Region
    bunkers: Tuple[Region, ...] = ()
    water: Tuple[Region, ...] = ()
    fairways: Tuple[Region, ...] = ()
    trees: Tuple[TreeObstacle, ...] = ()
    boundaries: Tuple[Polygon, ...] = ()

    def __post_init__(self):
        if self.green is None:
            raise HoleGeometryError("a hole needs exactly one green")
        for name in ("bunkers", "water", "fairways", "trees", "boundaries"):
            object.__setattr__(self, name, tuple(getattr(self, name)))


@dataclass(frozen=True)
class Hole:
    number: int
    par: int
    tee: geo.Coordinate
    pin: geo.Coordinate
    geometry: HoleGeometry
    stroke_index: Optional[int] = None

    @property
    def length_m(self) -> float:
        return geo.distance(self.tee, self.pin)


@dataclass(frozen=True)
class Course:
    name: str
    holes: Tuple[Hole, ...] = field(default_factory=tuple)
    course_rating: Optional[float] = None
    slope_rating: float = 113.0

    def __post_init__(self):
        object.__setattr__(self, "holes", tuple(self.holes))

    @property
    def total_par(self) -> int:
        return sum(h.par for h in self.holes)
