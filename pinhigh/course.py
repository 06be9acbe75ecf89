from __future__ import annotations

from typing import List, Optional

from pinhigh import geodesy as geo
from pinhigh.geometry import Circle, Course, Hole, HoleGeometry, Polygon, TreeObstacle, green_from_boundary

DEMO_ORIGIN = geo.Coordinate(41.9260, -87.6380)
DEMO_NAME = "Lakeshore Links"
DEMO_RATING = 70.4
DEMO_SLOPE = 121.0

HOLE_SPACING_M = 90.0

# Fairway: a corridor of overlapping discs that stops short of the green
FAIRWAY_START_M = 110.0
FAIRWAY_STEP_M = 18.0
FAIRWAY_RADIUS_M = 12.0
FAIRWAY_SHORT_OF_GREEN_M = 45.0

# Pair of bunkers pinching the fairway where a long drive comes down
LANDING_BUNKER_LATERAL_M = 10.0
LANDING_BUNKER_RADIUS_M = 6.0

# Green outline reach by par; the playable green adds the outline margin
GREEN_REACH_M = {3: 5.0, 4: 5.5, 5: 6.0}
GREEN_OUTLINE_SHAPE = (1.0, 0.8, 0.9, 0.7, 0.85, 0.75, 0.95, 0.8)
GREENSIDE_BUNKER_GAP_M = 4.0
GREENSIDE_BUNKER_RADIUS_M = 5.0

# Bearing of each greenside bunker relative to the line of play (0 = long, 180 = short)
GREENSIDE_BUNKERS = {3: (150.0, -150.0, 60.0), 4: (145.0, -120.0), 5: (-145.0, 110.0)}

# (par, length m, landing bunkers m from tee, water, tree stand)
DEMO_LAYOUT = [
    (4, 358, 256, None, False),
    (4, 372, 262, None, True),
    (3, 158, None, "greenside", False),
    (5, 528, 252, None, False),
    (4, 346, 258, "pond", False),
    (4, 388, 264, None, True),
    (3, 176, None, None, False),
    (4, 365, 254, "greenside", False),
    (5, 534, 260, "creek", False),
    (4, 352, 256, None, False),
    (3, 149, None, "greenside", False),
    (4, 394, 262, None, True),
    (5, 522, 250, "greenside", False),
    (4, 340, 258, None, False),
    (4, 381, 260, "pond", False),
    (3, 192, None, None, True),
    (4, 369, 256, None, False),
    (5, 531, 262, "creek", False),
]

BEARING_WOBBLE = (0.0, 8.0, -6.0)


def _offset(point: geo.Coordinate, bearing: float, forward: float, lateral: float = 0.0) -> geo.Coordinate:
    """Point `forward` m along `bearing` then `lateral` m to the right (negative = left)."""
    p = point
    if forward:
        heading = bearing if forward > 0 else bearing + 180.0
        p = geo.direct(p, heading % 360.0, abs(forward))
    if lateral:
        heading = bearing + 90.0 if lateral > 0 else bearing - 90.0
        p = geo.direct(p, heading % 360.0, abs(lateral))
    return p


def green_outline(pin: geo.Coordinate, bearing: float, reach: float, turn: int = 0) -> List[geo.Coordinate]:
    """Eight-point outline around the pin; `turn` rotates the lobes so greens differ."""
    n = len(GREEN_OUTLINE_SHAPE)
    return [
        geo.direct(pin, (bearing + 360.0 * i / n) % 360.0, reach * GREEN_OUTLINE_SHAPE[(i + turn) % n])
        for i in range(n)
    ]


def _fairways(tee: geo.Coordinate, bearing: float, length: float) -> List[Circle]:
    fairways = []
    d = FAIRWAY_START_M
    while d <= length - FAIRWAY_SHORT_OF_GREEN_M:
        fairways.append(Circle(_offset(tee, bearing, d), FAIRWAY_RADIUS_M))
        d += FAIRWAY_STEP_M
    return fairways


def _water(kind: Optional[str], tee, pin, bearing: float, green_radius: float, side: int):
    if kind == "pond":
        return [Circle(_offset(tee, bearing, 205.0, side * 30.0), 12.0)]
    if kind == "greenside":
        return [Circle(_offset(pin, bearing, -4.0, side * (green_radius + 9.0)), 7.0)]
    if kind == "creek":
        return [Polygon((
            _offset(tee, bearing, 292.0, -70.0),
            _offset(tee, bearing, 292.0, 70.0),
            _offset(tee, bearing, 300.0, 70.0),
            _offset(tee, bearing, 300.0, -70.0),
        ))]
    return []


def _tree_stand(tee, bearing: float, length: float, side: int) -> TreeObstacle:
    base = min(170.0, length * 0.55)
    return TreeObstacle(Polygon((
        _offset(tee, bearing, base, side * 50.0),
        _offset(tee, bearing, base + 24.0, side * 50.0),
        _offset(tee, bearing, base + 24.0, side * 62.0),
        _offset(tee, bearing, base, side * 62.0),
    )), 16.0)


def _build_hole(number: int, par: int, length: float, landing, water, stand: bool, boundary: Polygon) -> Hole:
    """
    One straight hole heading roughly north from its own tee.

    Steps:
      1) Tee on the east-west tee line, pin `length` m out on a slightly
         wobbled bearing.
      2) Green from an outline around the pin.
      3) Fairway corridor, landing bunkers, greenside bunkers.
      4) Optional water and a tree stand on the side the hole favours.
    """
    tee = _offset(DEMO_ORIGIN, 90.0, HOLE_SPACING_M * (number - 1))
    bearing = BEARING_WOBBLE[number % len(BEARING_WOBBLE)] % 360.0
    pin = _offset(tee, bearing, length)
    side = 1 if number % 2 else -1

    green = green_from_boundary(pin, green_outline(pin, bearing, GREEN_REACH_M[par], turn=number))

    fairways: List[Circle] = _fairways(tee, bearing, length) if par >= 4 else []

    bunkers = [
        Circle(_offset(pin, (bearing + side * angle) % 360.0, green.radius_m + GREENSIDE_BUNKER_GAP_M),
               GREENSIDE_BUNKER_RADIUS_M)
        for angle in GREENSIDE_BUNKERS[par]
    ]
    if landing is not None:
        for lateral in (LANDING_BUNKER_LATERAL_M, -LANDING_BUNKER_LATERAL_M):
            bunkers.append(Circle(_offset(tee, bearing, landing, lateral), LANDING_BUNKER_RADIUS_M))

    trees = [_tree_stand(tee, bearing, length, -side)] if stand else []

    geometry = HoleGeometry(
        green=green,
        bunkers=bunkers,
        water=_water(water, tee, pin, bearing, green.radius_m, side),
        fairways=fairways,
        trees=trees,
        boundaries=(boundary,),
    )
    return Hole(number=number, par=par, tee=tee, pin=pin, geometry=geometry, stroke_index=None)


def _boundary() -> Polygon:
    west = -70.0
    east = HOLE_SPACING_M * (len(DEMO_LAYOUT) - 1) + 70.0
    south, north = -60.0, 620.0
    return Polygon((
        _offset(DEMO_ORIGIN, 0.0, south, west),
        _offset(DEMO_ORIGIN, 0.0, south, east),
        _offset(DEMO_ORIGIN, 0.0, north, east),
        _offset(DEMO_ORIGIN, 0.0, north, west),
    ))


def demo_course() -> Course:
    """Deterministic 18-hole par-72 layout used by the CLI, the app and the tests."""
    boundary = _boundary()
    holes = [
        _build_hole(i, par, float(length), landing, water, stand, boundary)
        for i, (par, length, landing, water, stand) in enumerate(DEMO_LAYOUT, start=1)
    ]
    return Course(name=DEMO_NAME, holes=holes, course_rating=DEMO_RATING, slope_rating=DEMO_SLOPE)
