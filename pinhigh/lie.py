from __future__ import annotations

from enum import Enum

from pinhigh import geodesy as geo
from pinhigh.geometry import HoleGeometry, contains


class Lie(str, Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    WATER = "water"
    GREEN = "green"
    BUNKER = "bunker"
    FAIRWAY = "fairway"
    ROUGH = "rough"


def is_in_bounds(point: geo.Coordinate, geometry: HoleGeometry) -> bool:
    """No boundary polygons means everywhere is in bounds."""
    if not geometry.boundaries:
        return True
    return any(contains(b, point) for b in geometry.boundaries)


def classify(point: geo.Coordinate, geometry: HoleGeometry, check_bounds: bool = True) -> Lie:
    """
    Ground condition at `point`.

    Priority: out of bounds > water > green > bunker > fairway > rough,
    so overlapping regions resolve to the first label that matches.
    """
    if check_bounds and not is_in_bounds(point, geometry):
        return Lie.OUT_OF_BOUNDS
    if any(contains(w, point) for w in geometry.water):
        return Lie.WATER
    if contains(geometry.green, point):
        return Lie.GREEN
    if any(contains(b, point) for b in geometry.bunkers):
        return Lie.BUNKER
    if any(contains(f, point) for f in geometry.fairways):
        return Lie.FAIRWAY
    return Lie.ROUGH
