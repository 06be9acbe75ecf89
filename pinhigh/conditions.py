import math
from dataclasses import dataclass
from typing import Optional

from pinhigh import geodesy as geo

# ============================================================
# Constants
# ============================================================

WIND_YARDS_PER_MPH_PER_100 = 0.8
SLOPE_FRACTION_PER_DEGREE = 0.01
CROSSWIND_THRESHOLD_MPH = 0.5

# Air density model
BASELINE_TEMP_F = 75.0
STANDARD_PRESSURE_PA = 101325.0
REL_HUMIDITY_DEFAULT = 0.50
R_DRY_AIR = 287.058              # J/(kg·K)
R_WATER_VAPOR = 461.495          # J/(kg·K)

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


@dataclass(frozen=True)
class Conditions:
    """Wind blows FROM wind_direction_deg (0 = N). Positive slope is uphill."""

    wind_speed_mph: float = 0.0
    wind_direction_deg: float = 0.0
    slope_deg: float = 0.0
    temperature_f: Optional[float] = None


CALM = Conditions()


# ============================================================
# Wind / slope
# ============================================================

def wind_component_mph(wind_speed_mph: float, wind_direction_deg: float, shot_bearing_deg: float) -> float:
    """Along-the-line wind: positive = helping (tailwind), negative = hurting."""
    blowing_toward = (wind_direction_deg + 180.0) % 360.0
    diff = geo.angle_difference(blowing_toward, shot_bearing_deg)
    return wind_speed_mph * math.cos(math.radians(diff))


def wind_direction_label(deg: float) -> str:
    return COMPASS_POINTS[int(round(deg / 22.5)) % 16]


def wind_effect_description(wind_speed_mph: float, wind_direction_deg: float, shot_bearing_deg: float) -> str:
    if wind_speed_mph <= 0:
        return "No wind"
    component = round(wind_component_mph(wind_speed_mph, wind_direction_deg, shot_bearing_deg), 1)
    if abs(component) < CROSSWIND_THRESHOLD_MPH:
        return "Crosswind"
    if component > 0:
        return f"{abs(component):.1f} mph tailwind"
    return f"{abs(component):.1f} mph headwind"


# ============================================================
# Temperature
# ============================================================

def _air_density(temp_f: float, pressure_pa: float = STANDARD_PRESSURE_PA,
                 rel_humidity: float = REL_HUMIDITY_DEFAULT) -> float:
    """Moist-air density: Tetens vapor pressure + ideal gas for both components."""
    t_c = (temp_f - 32.0) * 5.0 / 9.0
    t_k = t_c + 273.15
    vapor_pa = rel_humidity * 611.2 * math.exp((17.67 * t_c) / (t_c + 243.5))
    return (pressure_pa - vapor_pa) / (R_DRY_AIR * t_k) + vapor_pa / (R_WATER_VAPOR * t_k)


def temperature_distance_scale(temp_f: Optional[float], shot_yards: float,
                               baseline_temp_f: float = BASELINE_TEMP_F) -> float:
    """> 1 when the ball flies farther than at the baseline temperature."""
    if temp_f is None:
        return 1.0
    raw = (_air_density(baseline_temp_f) / _air_density(temp_f)) ** 0.5
    length_factor = max(0.6, min(1.4, shot_yards / 150.0))
    return 1.0 + (raw - 1.0) * length_factor * 0.7


# ============================================================
# Plays-like
# ============================================================

def adjust_yardage_for_conditions(raw_yards: float, conditions: Conditions, shot_bearing_deg: float) -> dict:
    """
    Plays-like yardage for one shot.

    Steps:
      1) Wind along the line: a headwind adds yards, a tailwind takes them off.
      2) Slope: uphill adds ~1% per degree.
      3) Temperature: warm air carries farther, so divide by the carry scale.

    Returns the adjusted yardage (rounded, at least 1) with each effect.
    """
    component = wind_component_mph(conditions.wind_speed_mph, conditions.wind_direction_deg, shot_bearing_deg)
    wind_effect = -component * (raw_yards / 100.0) * WIND_YARDS_PER_MPH_PER_100
    slope_effect = conditions.slope_deg * raw_yards * SLOPE_FRACTION_PER_DEGREE

    val = raw_yards + wind_effect + slope_effect
    scale = temperature_distance_scale(conditions.temperature_f, val)
    temperature_effect = val / scale - val
    val += temperature_effect

    return {
        "adjusted_yards": max(1, round(val)),
        "wind_effect_yards": round(wind_effect, 1),
        "slope_effect_yards": round(slope_effect, 1),
        "temperature_effect_yards": round(temperature_effect, 1),
    }


def plays_like_yards(raw_yards: float, conditions: Optional[Conditions], shot_bearing_deg: float) -> float:
    if conditions is None or raw_yards <= 0:
        return raw_yards
    return adjust_yardage_for_conditions(raw_yards, conditions, shot_bearing_deg)["adjusted_yards"]
