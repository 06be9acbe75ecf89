from pinhigh.conditions import (
    CALM,
    Conditions,
    adjust_yardage_for_conditions,
    plays_like_yards,
    wind_component_mph,
    wind_direction_label,
    wind_effect_description,
)

NORTH = 0.0


def _plays(**kw):
    return adjust_yardage_for_conditions(150, Conditions(**kw), NORTH)["adjusted_yards"]


def test_calm_plays_at_raw_yardage():
    assert _plays() == 150
    assert plays_like_yards(150, None, NORTH) == 150


def test_headwind_plays_longer_tailwind_shorter():
    # wind blowing from the north is in the face of a shot hit north
    assert _plays(wind_speed_mph=15, wind_direction_deg=0) > 150
    assert _plays(wind_speed_mph=15, wind_direction_deg=180) < 150


def test_crosswind_barely_moves_yardage():
    assert abs(_plays(wind_speed_mph=15, wind_direction_deg=90) - 150) <= 1


def test_uphill_plays_longer():
    result = adjust_yardage_for_conditions(150, Conditions(slope_deg=4), NORTH)
    assert result["slope_effect_yards"] == 6.0
    assert result["adjusted_yards"] == 156


def test_cold_plays_longer_hot_plays_shorter_but_not_insane():
    cold = _plays(temperature_f=45)
    hot = _plays(temperature_f=95)
    assert cold > 150 > hot
    assert 140 <= hot and cold <= 160


def test_wind_component_sign():
    assert wind_component_mph(10, 180, NORTH) > 9.9
    assert wind_component_mph(10, 0, NORTH) < -9.9


def test_labels():
    assert wind_direction_label(0) == "N"
    assert wind_direction_label(225) == "SW"
    assert wind_direction_label(355) == "N"
    assert wind_effect_description(0, 0, NORTH) == "No wind"
    assert wind_effect_description(10, 90, NORTH) == "Crosswind"
    assert wind_effect_description(10, 0, NORTH) == "10.0 mph headwind"
    assert CALM.wind_speed_mph == 0
