import pytest

from pinhigh import geodesy as geo
from pinhigh import simulation
from pinhigh.course import DEMO_LAYOUT, GREEN_REACH_M, LANDING_BUNKER_RADIUS_M, demo_course, green_outline
from pinhigh.dispersion import CalibrationState
from pinhigh.geometry import GREEN_OUTLINE_MARGIN_M, green_from_boundary
from pinhigh.lie import Lie, classify

COURSE = demo_course()


def test_demo_course_layout():
    assert len(COURSE.holes) == 18
    assert COURSE.total_par == 72
    for hole in COURSE.holes:
        assert classify(hole.tee, hole.geometry) != Lie.OUT_OF_BOUNDS
        assert classify(hole.pin, hole.geometry) == Lie.GREEN
        assert abs(hole.length_m - DEMO_LAYOUT[hole.number - 1][1]) < 1.0


def test_demo_greens_come_from_their_outlines():
    for hole in COURSE.holes:
        green = hole.geometry.green
        assert green.center == hole.pin
        assert green.radius_m == pytest.approx(GREEN_REACH_M[hole.par] + GREEN_OUTLINE_MARGIN_M, abs=0.05)


def test_outline_reach_sets_the_green_radius():
    pin = COURSE.holes[0].pin
    outline = green_outline(pin, 0.0, 6.0, turn=3)
    assert len(outline) == 8
    assert max(geo.distance(pin, v) for v in outline) == pytest.approx(6.0, abs=0.01)
    assert green_from_boundary(pin, outline).radius_m == pytest.approx(11.0, abs=0.05)
    assert green_from_boundary(pin).radius_m == 18.0


def test_long_holes_pinch_the_landing_zone():
    for hole, (par, length, landing, _, _) in zip(COURSE.holes, DEMO_LAYOUT):
        if par == 3:
            assert landing is None
            continue
        center_line = geo.direct(hole.tee, geo.bearing(hole.tee, hole.pin), landing)
        # fairway in the middle, sand either side
        assert classify(center_line, hole.geometry) == Lie.FAIRWAY
        pinch = [b for b in hole.geometry.bunkers if geo.distance(b.center, center_line) < 12.0]
        assert len(pinch) == 2
        assert all(b.radius_m == LANDING_BUNKER_RADIUS_M for b in pinch)


def test_round_is_reproducible_from_its_seed():
    a = simulation.simulate_round(COURSE, "12", seed=42)
    b = simulation.simulate_round(COURSE, "12", seed=42)
    assert a.score == b.score
    assert a.holes == b.holes
    assert len(a.holes) == 18


def test_better_players_score_lower_on_average():
    good = simulation.simulate_profiles(COURSE, ["Tour Legend"], runs=5)
    bad = simulation.simulate_profiles(COURSE, ["25"], runs=5)
    assert good["Tour Legend"].avg_score < bad["25"].avg_score


def test_batch_uses_the_calibration_it_is_given():
    tight = simulation.simulate_rounds(COURSE, "18", range(8), CalibrationState(0.5, 0.5))
    loose = simulation.simulate_rounds(COURSE, "18", range(8), CalibrationState(1.5, 1.5))
    assert sum(r.score for r in tight) < sum(r.score for r in loose)


def test_no_hole_runs_past_its_cap():
    for r in simulation.simulate_rounds(COURSE, "Beginner", range(3)):
        for hole in r.holes:
            assert hole.strokes <= min(20, 3 * hole.par)
