import pytest

from pinhigh import clubs
from pinhigh.errors import SkillProfileError
from pinhigh.skill import NamedTier, NumericHandicap, effective_handicap, parse_skill


def test_parse_plus_handicap():
    skill = parse_skill("+3")
    assert skill == NumericHandicap(-3.0)
    assert skill.label == "+3"


def test_parse_numbers_and_tiers():
    assert parse_skill(12) == NumericHandicap(12.0)
    assert parse_skill(" 14.5 ") == NumericHandicap(14.5)
    assert parse_skill("lpga tour") == NamedTier("LPGA Tour")
    assert parse_skill("Tiger 2000") == NamedTier("Tour Legend")


@pytest.mark.parametrize("bad", ["", "banana", None, True])
def test_unknown_skill_raises(bad):
    with pytest.raises(SkillProfileError):
        parse_skill(bad)


def test_slope_scales_handicap():
    assert effective_handicap(NumericHandicap(10.0)) == 10.0
    assert effective_handicap(NumericHandicap(10.0), 126.0) == pytest.approx(10.0 * 126 / 113)
    assert effective_handicap(NamedTier("Tour Pro"), 140.0) == -3.0


def test_club_is_shortest_that_reaches():
    table = clubs.YARDAGES_BY_TIER[10]
    assert clubs.club_for_distance(160, table) == "7-iron"
    assert clubs.club_for_distance(161, table) == "6-iron"
    assert clubs.club_for_distance(40, table) == "Lob wedge"


def test_putter_and_driver_ends():
    table = clubs.YARDAGES_BY_TIER[10]
    assert clubs.club_for_distance(3, table) == clubs.PUTTER
    assert clubs.club_for_distance(400, table) == "Driver"
    assert clubs.max_shot_distance_yards(400, table) == 255.0


def test_named_tiers_use_their_own_bag():
    assert clubs.yardages_for(NamedTier("Tour Legend")) is clubs.YARDAGES_BY_NAME["tour_legend"]
    assert clubs.yardages_for(NamedTier("Beginner")) is clubs.YARDAGES_BY_TIER[25]
    assert clubs.yardages_for(NumericHandicap(-2.0)) is clubs.YARDAGES_BY_TIER[0]
