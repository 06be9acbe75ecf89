from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from pinhigh import benchmarks
from pinhigh.skill import NamedTier, NumericHandicap, SkillProfile, effective_handicap, is_tour_legend

# ============================================================
# Constants
# ============================================================

# Full shots (numeric handicaps): base = 0.01 + h * slope, clamped
DISTANCE_BASE = 0.01
DISTANCE_PER_HANDICAP = 0.006
DISTANCE_MIN, DISTANCE_MAX, DISTANCE_CAP = 0.02, 0.25, 0.28

ANGLE_BASE = 0.5
ANGLE_PER_HANDICAP = 0.25
ANGLE_MIN, ANGLE_MAX, ANGLE_CAP = 1.0, 8.0, 9.0

GIR_SCALE_MIN, GIR_SCALE_MAX = 1.0, 1.4

# Course rating rescale
RATING_SENSITIVITY = 2.2
RATING_SCALE_MIN, RATING_SCALE_MAX = 0.5, 1.5

# Chips: multiplier = offset + (reference scrambling - scrambling) / divisor
CHIP_OFFSET = 11.0
CHIP_DIVISOR = 2.5
CHIP_DISTANCE_CAP = 0.45
CHIP_PLUS_SCRAMBLING_CAP = 58.0
LEGEND_CHIP_DISTANCE_PCT = 0.02

BUNKER_DISTANCE_PCT = 0.25
BUNKER_ANGLE_DEG = 6.0

ROUGH_DISPERSION_MULT = 1.35
ROUGH_DISTANCE_MULT = 0.92
LEGEND_ROUGH_DISPERSION_MULT = 1.15
LEGEND_ROUGH_DISTANCE_MULT = 0.98


@dataclass(frozen=True)
class DispersionParams:
    distance_error_pct: float
    angular_error_deg: float

    def __post_init__(self):
        if self.distance_error_pct < 0 or self.angular_error_deg < 0:
            raise ValueError("dispersion must be non-negative")

    def scaled(self, distance_factor: float = 1.0, angle_factor: float = 1.0) -> "DispersionParams":
        return DispersionParams(
            self.distance_error_pct * distance_factor,
            self.angular_error_deg * angle_factor,
        )


# ============================================================
# Process-wide calibration
# ============================================================

@dataclass(frozen=True)
class CalibrationState:
    dispersion_scale: float = 1.0
    chip_multiplier_scale: float = 1.0

    def with_steps(self, dispersion_factor: float, chip_factor: float, floor: float = 0.0) -> "CalibrationState":
        return replace(
            self,
            dispersion_scale=max(floor, self.dispersion_scale * dispersion_factor),
            chip_multiplier_scale=max(floor, self.chip_multiplier_scale * chip_factor),
        )


IDENTITY = CalibrationState()
_current = IDENTITY


def get_calibration() -> CalibrationState:
    """Snapshot of the current calibration; safe to hand to batch workers."""
    return _current


def set_calibration(state: CalibrationState) -> None:
    global _current
    _current = state


def reset_calibration() -> None:
    set_calibration(IDENTITY)


# ============================================================
# Mapper
# ============================================================

def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def gir_scale(handicap: float) -> float:
    """>= 1; grows as the benchmark GIR% falls below the reference."""
    gir = benchmarks.stats_for_handicap(max(0.0, handicap)).gir_pct
    return _clamp(benchmarks.REFERENCE_GIR_PCT / gir, GIR_SCALE_MIN, GIR_SCALE_MAX)


def rating_scale(raw_handicap: float, course_rating: Optional[float], total_par: Optional[int]) -> float:
    """Loosens dispersion on courses rated easier than par (and tightens on harder ones)."""
    if course_rating is None or not total_par or course_rating <= 0:
        return 1.0
    ratio = total_par / course_rating
    if raw_handicap <= 5:
        handicap_factor = 0.7 + (raw_handicap / 5) * 0.6
    else:
        handicap_factor = 1.0
    scale = 1 + (ratio - 1) * RATING_SENSITIVITY * handicap_factor
    return _clamp(scale, RATING_SCALE_MIN, RATING_SCALE_MAX)


def scrambling_target(handicap: float) -> float:
    if handicap < 0:
        return min(CHIP_PLUS_SCRAMBLING_CAP, benchmarks.REFERENCE_SCRAMBLING_PCT - handicap * 2)
    return benchmarks.stats_for_handicap(handicap).scrambling_pct


def chip_multiplier(handicap: float, chip_multiplier_scale: float = 1.0) -> float:
    """Worse scrambling means a bigger multiplier and looser chips."""
    scrambling = scrambling_target(handicap)
    base = CHIP_OFFSET + (benchmarks.REFERENCE_SCRAMBLING_PCT - scrambling) / CHIP_DIVISOR
    return base * chip_multiplier_scale


class DispersionMapper:
    """Skill + course + calibration -> Gaussian shot parameters."""

    def __init__(
        self,
        skill: SkillProfile,
        calibration: Optional[CalibrationState] = None,
        course_rating: Optional[float] = None,
        slope_rating: Optional[float] = None,
        total_par: Optional[int] = None,
    ):
        self.skill = skill
        self.calibration = calibration if calibration is not None else get_calibration()
        self.course_rating = course_rating
        self.slope_rating = slope_rating
        self.total_par = total_par

    @property
    def handicap(self) -> float:
        return effective_handicap(self.skill, self.slope_rating)

    def full_shot(self) -> DispersionParams:
        scale = self.calibration.dispersion_scale
        if isinstance(self.skill, NamedTier):
            profile = self.skill.profile
            return DispersionParams(profile.distance_error_pct * scale, profile.angular_error_deg * scale)

        h = self.handicap
        g = gir_scale(h)
        distance_pct = min(DISTANCE_CAP, _clamp(DISTANCE_BASE + h * DISTANCE_PER_HANDICAP, DISTANCE_MIN, DISTANCE_MAX) * g)
        angle = min(ANGLE_CAP, _clamp(ANGLE_BASE + h * ANGLE_PER_HANDICAP, ANGLE_MIN, ANGLE_MAX) * g)
        r = rating_scale(self.skill.value, self.course_rating, self.total_par)
        return DispersionParams(distance_pct * r * scale, angle * r * scale)

    def chip(self) -> DispersionParams:
        full = self.full_shot()
        if is_tour_legend(self.skill):
            pct = LEGEND_CHIP_DISTANCE_PCT * self.calibration.chip_multiplier_scale
            return DispersionParams(pct, full.angular_error_deg)
        mult = chip_multiplier(self.handicap, self.calibration.chip_multiplier_scale)
        return DispersionParams(min(CHIP_DISTANCE_CAP, full.distance_error_pct * mult), full.angular_error_deg)

    def bunker(self) -> DispersionParams:
        scale = self.calibration.dispersion_scale
        return DispersionParams(BUNKER_DISTANCE_PCT * scale, BUNKER_ANGLE_DEG * scale)

    def rough(self) -> DispersionParams:
        mult = LEGEND_ROUGH_DISPERSION_MULT if is_tour_legend(self.skill) else ROUGH_DISPERSION_MULT
        return self.full_shot().scaled(distance_factor=mult)

    def rough_distance_factor(self) -> float:
        return LEGEND_ROUGH_DISTANCE_MULT if is_tour_legend(self.skill) else ROUGH_DISTANCE_MULT


def describe(skill: SkillProfile, calibration: Optional[CalibrationState] = None) -> dict:
    """Flat dict of all dispersion variants, for tables."""
    mapper = DispersionMapper(skill, calibration)
    full, chip, rough, bunker = mapper.full_shot(), mapper.chip(), mapper.rough(), mapper.bunker()
    label = skill.label if isinstance(skill, (NumericHandicap, NamedTier)) else str(skill)
    return {
        "skill": label,
        "full_distance_pct": full.distance_error_pct * 100,
        "full_angle_deg": full.angular_error_deg,
        "chip_distance_pct": chip.distance_error_pct * 100,
        "rough_distance_pct": rough.distance_error_pct * 100,
        "bunker_distance_pct": bunker.distance_error_pct * 100,
    }
