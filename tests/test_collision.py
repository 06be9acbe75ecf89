import random

from pinhigh import collision
from pinhigh import geodesy as geo
from pinhigh.geometry import Circle, Polygon, TreeObstacle

START = geo.Coordinate(41.9260, -87.6380)
END = geo.direct(START, 0.0, 200.0)


def _tree(forward, radius=5.0, height=30.0, lateral=0.0):
    center = geo.direct(START, 0.0, forward)
    if lateral:
        center = geo.direct(center, 90.0, lateral)
    return TreeObstacle(Circle(center, radius), height)


def test_segment_crosses_circle_at_entry():
    t, x = collision.segment_tree_intersection(START, END, _tree(100.0))
    assert abs(x - 95.0) < 0.2
    assert abs(t - 95.0 / 200.0) < 0.01


def test_segment_misses_tree_off_the_line():
    assert collision.segment_tree_intersection(START, END, _tree(100.0, lateral=20.0)) is None


def test_ball_flies_over_short_tree():
    # peak of a 200 m shot is 14 m, so a 5 m tree mid-flight is cleared
    assert collision.first_tree_hit(START, END, [_tree(100.0, height=5.0)]) is None
    assert collision.first_tree_hit(START, END, [_tree(100.0, height=30.0)]) is not None


def test_low_ball_near_the_start_hits_short_tree():
    assert collision.trajectory_height(10.0, 200.0) < 3.0
    assert collision.first_tree_hit(START, END, [_tree(12.0, radius=2.0, height=3.0)]) is not None


def test_nearest_tree_wins():
    near, far = _tree(60.0), _tree(140.0)
    hit = collision.first_tree_hit(START, END, [far, near])
    assert hit.tree is near


def test_polygon_canopy():
    corners = (
        geo.direct(geo.direct(START, 0.0, 80.0), 270.0, 5.0),
        geo.direct(geo.direct(START, 0.0, 80.0), 90.0, 5.0),
        geo.direct(geo.direct(START, 0.0, 90.0), 90.0, 5.0),
        geo.direct(geo.direct(START, 0.0, 90.0), 270.0, 5.0),
    )
    tree = TreeObstacle(Polygon(corners), 30.0)
    t, x = collision.segment_tree_intersection(START, END, tree)
    assert abs(x - 80.0) < 0.5


def test_deflection_lands_two_to_seven_meters_from_impact():
    rng = random.Random(3)
    for _ in range(50):
        result = collision.resolve_collision(START, END, [_tree(100.0)], rng)
        assert result.hit_tree
        kick = geo.distance(result.impact, result.landing)
        assert 2.0 - 1e-6 <= kick <= 7.0 + 1e-6
        assert abs(geo.distance(START, result.impact) - 95.0) < 0.3


def test_no_trees_keeps_landing():
    result = collision.resolve_collision(START, END, [], random.Random(0))
    assert result.landing == END
    assert not result.hit_tree


def test_trouble_helpers():
    tree = _tree(100.0, height=2.0)
    assert collision.is_path_blocked(START, END, [tree])
    assert collision.is_near_tree(geo.direct(START, 0.0, 70.0), [tree])
    assert not collision.is_near_tree(START, [tree])
