from __future__ import annotations

import math
import random
from dataclasses import dataclass

from pinhigh import benchmarks
from pinhigh import geodesy as geo
from pinhigh.skill import NamedTier, SkillProfile, effective_handicap, is_tour_legend

PAR_SAVE_BONUS = 0.05
MIN_MAKE = 0.02
MAX_NUMERIC_MAKE = 0.99
DECAY_PER_FOOT = 0.08

LEAVE_MIN_FT = 1.0
LEAVE_MAX_FT = 3.0

PLUS_HANDICAP_FLOOR = -5.0


@dataclass(frozen=True)
class PuttResult:
    holed: bool
    leave_position: geo.Coordinate


def best_make_probability(distance_ft: float, par_save: bool = False) -> float:
    """Make % for the best tier; never beaten by any other profile."""
    if distance_ft <= 3:
        p = 0.998
    elif distance_ft <= 5:
        p = 0.96
    elif distance_ft <= 9:
        p = 0.65
    elif distance_ft <= 15:
        p = 0.38
    elif distance_ft <= 20:
        p = 0.22
    elif distance_ft <= 25:
        p = 0.15
    else:
        p = max(MIN_MAKE, 0.15 * math.exp(-DECAY_PER_FOOT * (distance_ft - 25)))
    if par_save:
        p = min(1.0, p + PAR_SAVE_BONUS)
    return p


def handicap_make_probability(distance_ft: float, handicap: float) -> float:
    """
    Make % for a numeric handicap.

    Bands lose a fixed amount per handicap stroke; the 10 ft+ bands are
    also scaled by the benchmark three-putt rate. The result is capped by
    the best-tier curve, and plus handicaps blend toward it (fully at +5).
    """
    h = max(PLUS_HANDICAP_FLOOR, min(25.0, handicap))
    hb = max(0.0, h)
    three_putt = benchmarks.stats_for_handicap(hb).three_putt_pct
    scale = max(0.5, min(1.2, 1 - (three_putt - 6) / 100))

    if distance_ft <= 3:
        p = 0.99 - hb * 0.01
    elif distance_ft <= 5:
        p = 0.92 - hb * 0.014
    elif distance_ft <= 9:
        p = 0.58 - hb * 0.018
    elif distance_ft <= 15:
        p = (0.34 - hb * 0.016) * scale
    elif distance_ft <= 20:
        p = (0.2 - hb * 0.01) * scale
    elif distance_ft <= 25:
        p = (0.12 - hb * 0.006) * scale
    else:
        p = max(MIN_MAKE, (0.12 - hb * 0.004) * scale * math.exp(-DECAY_PER_FOOT * (distance_ft - 25)))

    p = max(MIN_MAKE, min(MAX_NUMERIC_MAKE, p))
    best = best_make_probability(distance_ft)
    p = min(p, best)
    if h < 0:
        blend = min(1.0, -h / abs(PLUS_HANDICAP_FLOOR))
        p = p + (best - p) * blend
    return min(best, p)


def make_probability(distance_ft: float, skill: SkillProfile, par_save: bool = False, slope_rating=None) -> float:
    if is_tour_legend(skill):
        return best_make_probability(distance_ft, par_save)
    if isinstance(skill, NamedTier):
        return handicap_make_probability(distance_ft, skill.profile.equivalent_handicap)
    return handicap_make_probability(distance_ft, effective_handicap(skill, slope_rating))


def resolve_putt(
    start: geo.Coordinate,
    pin: geo.Coordinate,
    distance_m: float,
    skill: SkillProfile,
    rng: random.Random,
    par_save: bool = False,
    slope_rating=None,
) -> PuttResult:
    """One putt: holed, or a 1-3 ft leave at a random bearing around the pin."""
    distance_ft = distance_m * geo.FEET_PER_METER
    p = make_probability(distance_ft, skill, par_save, slope_rating)
    if rng.random() < p:
        return PuttResult(True, pin)
    leave_ft = rng.uniform(LEAVE_MIN_FT, LEAVE_MAX_FT)
    leave = geo.direct(pin, rng.uniform(0.0, 360.0), leave_ft * geo.METERS_PER_FOOT)
    return PuttResult(False, leave)
