import pytest

from pinhigh import geodesy as geo
from pinhigh.errors import HoleGeometryError
from pinhigh.geometry import Circle, HoleGeometry, Polygon, contains, green_from_boundary
from pinhigh.lie import Lie, classify, is_in_bounds

TEE = geo.Coordinate(41.9260, -87.6380)
PIN = geo.direct(TEE, 0.0, 300.0)


def _square(center, half):
    return Polygon(tuple(geo.direct(center, b, half * 2 ** 0.5) for b in (45.0, 135.0, 225.0, 315.0)))


def _geometry(**kw):
    base = dict(
        green=Circle(PIN, 15.0),
        fairways=(Circle(geo.direct(TEE, 0.0, 200.0), 25.0),),
        bunkers=(Circle(geo.direct(TEE, 0.0, 270.0), 8.0),),
    )
    base.update(kw)
    return HoleGeometry(**base)


def test_priority_green_bunker_fairway_rough():
    g = _geometry()
    assert classify(PIN, g) == Lie.GREEN
    assert classify(geo.direct(TEE, 0.0, 270.0), g) == Lie.BUNKER
    assert classify(geo.direct(TEE, 0.0, 200.0), g) == Lie.FAIRWAY
    assert classify(geo.direct(TEE, 90.0, 80.0), g) == Lie.ROUGH


def test_water_beats_fairway_and_green():
    spot = geo.direct(TEE, 0.0, 200.0)
    g = _geometry(water=(Circle(spot, 10.0), Circle(PIN, 5.0)))
    assert classify(spot, g) == Lie.WATER
    assert classify(PIN, g) == Lie.WATER


def test_out_of_bounds_beats_everything():
    g = _geometry(boundaries=(_square(TEE, 50.0),))
    assert classify(PIN, g) == Lie.OUT_OF_BOUNDS
    assert classify(PIN, g, check_bounds=False) == Lie.GREEN
    assert classify(TEE, g) == Lie.ROUGH


def test_no_boundaries_means_in_bounds():
    assert is_in_bounds(geo.direct(TEE, 200.0, 5000.0), _geometry())


def test_degenerate_polygon_contains_nothing():
    line = Polygon((TEE, PIN))
    assert not contains(line, TEE)
    assert contains(_square(TEE, 10.0), TEE)


def test_green_outline_radius():
    assert green_from_boundary(PIN).radius_m == 18.0
    outline = [geo.direct(PIN, b, 12.0) for b in (0.0, 120.0, 240.0)]
    assert green_from_boundary(PIN, outline).radius_m == pytest.approx(17.0, abs=0.1)


def test_hole_needs_a_green():
    with pytest.raises(HoleGeometryError):
        HoleGeometry(green=None)
