import random

from pinhigh import geodesy as geo
from pinhigh.dispersion import IDENTITY, DispersionMapper
from pinhigh.geometry import Circle, Hole, HoleGeometry, TreeObstacle
from pinhigh.lie import Lie
from pinhigh.policy import ShotKind, _HoleState, _plan_shot, play_hole, shot_cap
from pinhigh.skill import NamedTier, NumericHandicap

TEE = geo.Coordinate(41.9260, -87.6380)
PIN = geo.direct(TEE, 0.0, 150.0)
LEGEND = NamedTier("Tour Legend")


def _par3(**geometry):
    geometry.setdefault("green", Circle(PIN, 15.0))
    return Hole(number=1, par=3, tee=TEE, pin=PIN, geometry=HoleGeometry(**geometry))


# 1. Open par 3: the best tier is on in one and down in two
def test_legend_open_par3():
    hole = _par3()
    scores = [play_hole(hole, LEGEND, random.Random(seed)).strokes for seed in range(200)]
    assert sum(1 for s in scores if s <= 4) >= 190
    assert min(scores) >= 1


# 2. Island of water around the pin: hazard + penalty pairs until the cap
def test_water_all_around_the_pin_hits_the_cap():
    hole = _par3(water=(Circle(PIN, 40.0),))
    result = play_hole(hole, LEGEND, random.Random(1))

    assert not result.holed
    assert result.strokes == shot_cap(3) == 9
    for shot in result.shots[0::2]:
        assert shot.kind == ShotKind.TEE
        assert shot.lie_at_landing == Lie.WATER
        assert shot.from_position == TEE
    for shot in result.shots[1::2]:
        assert shot.penalty
        assert shot.kind == ShotKind.PENALTY
        assert shot.from_position == shot.to_position == TEE
        assert shot.actual_distance_m == 0.0


def test_gimme_from_inside_six_inches():
    tee = geo.direct(PIN, 90.0, 0.1)
    hole = Hole(number=1, par=3, tee=tee, pin=PIN, geometry=HoleGeometry(green=Circle(PIN, 15.0)))
    result = play_hole(hole, NumericHandicap(20.0), random.Random(0))
    assert result.holed
    assert result.strokes == 1
    assert result.shots[0].kind == ShotKind.GIMME


def test_shot_cap_scales_with_par():
    assert shot_cap(3) == 9
    assert shot_cap(4) == 12
    assert shot_cap(8) == 20
    assert shot_cap(4, max_shots=6) == 6


def test_every_record_is_numbered_and_holed_only_last():
    hole = _par3(bunkers=(Circle(geo.direct(PIN, 180.0, 20.0), 6.0),))
    for seed in range(30):
        result = play_hole(hole, NumericHandicap(18.0), random.Random(seed))
        assert [s.shot_number for s in result.shots] == list(range(1, result.strokes + 1))
        if result.holed:
            assert result.shots[-1].holed
            assert not any(s.holed for s in result.shots[:-1])


def test_greens_are_putted():
    hole = _par3()
    result = play_hole(hole, LEGEND, random.Random(4))
    on_green = [s for s in result.shots if s.lie_before == Lie.GREEN]
    assert on_green
    assert all(s.kind in (ShotKind.PUTT, ShotKind.GIMME) for s in on_green)


def test_same_seed_same_hole():
    hole = _par3(trees=(TreeObstacle(Circle(geo.direct(TEE, 0.0, 60.0), 4.0), 12.0),))
    a = play_hole(hole, NumericHandicap(12.0), random.Random(99))
    b = play_hole(hole, NumericHandicap(12.0), random.Random(99))
    assert a == b


def _rough_hole(trees=()):
    pin = geo.direct(TEE, 0.0, 250.0)
    fairway_spot = geo.direct(geo.direct(TEE, 0.0, 40.0), 90.0, 20.0)
    geometry = HoleGeometry(
        green=Circle(pin, 15.0),
        fairways=(Circle(fairway_spot, 15.0), Circle(geo.direct(TEE, 90.0, 300.0), 5.0)),
        trees=trees,
    )
    return Hole(number=1, par=4, tee=geo.direct(TEE, 270.0, 5.0), pin=pin, geometry=geometry), fairway_spot


def _plan(hole, lie, state=None):
    state = state or _HoleState(position=TEE)
    mapper = DispersionMapper(LEGEND, IDENTITY)
    return _plan_shot(hole, state, lie, False, geo.distance(TEE, hole.pin), 200.0, mapper)


def test_blocked_rough_lie_chips_out_to_fairway():
    wall = TreeObstacle(Circle(geo.direct(TEE, 0.0, 30.0), 10.0), 40.0)
    hole, fairway_spot = _rough_hole(trees=(wall,))
    plan = _plan(hole, Lie.ROUGH)
    assert plan.kind == ShotKind.CHIP_OUT
    assert plan.target == fairway_spot
    assert 40.0 < plan.intended_m < 50.0


def test_three_tree_hits_force_a_chip_out():
    hole, _ = _rough_hole()
    assert _plan(hole, Lie.ROUGH).kind == ShotKind.ROUGH
    stuck = _HoleState(position=TEE, consecutive_tree_hits=3)
    assert _plan(hole, Lie.ROUGH, stuck).kind == ShotKind.CHIP_OUT


def test_clean_rough_shot_loses_distance():
    hole, _ = _rough_hole()
    plan = _plan(hole, Lie.ROUGH)
    assert plan.target == hole.pin
    assert plan.intended_m < 200.0


def test_bunker_far_from_green_without_nearby_fairway_plays_toward_pin():
    hole, _ = _rough_hole()
    plan = _plan(hole, Lie.BUNKER)
    assert plan.kind == ShotKind.BUNKER
    assert plan.intended_m == 18.3
