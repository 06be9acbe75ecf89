from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

from pinhigh.errors import SkillProfileError

STANDARD_SLOPE = 113.0


@dataclass(frozen=True)
class NumericHandicap:
    """Continuous handicap; negative values are plus handicaps."""

    value: float

    @property
    def label(self) -> str:
        if self.value < 0:
            return f"+{abs(self.value):g}"
        return f"{self.value:g}"


@dataclass(frozen=True)
class NamedTier:
    name: str

    @property
    def label(self) -> str:
        return self.name

    @property
    def profile(self) -> "TierProfile":
        return NAMED_TIERS[self.name]


SkillProfile = Union[NumericHandicap, NamedTier]


@dataclass(frozen=True)
class TierProfile:
    distance_error_pct: float
    angular_error_deg: float
    yardage_table: str
    equivalent_handicap: float
    elite: bool = False


# ============================================================
# Named tiers
# ============================================================

TOUR_LEGEND = "Tour Legend"

# name: fixed full-shot dispersion, club chart, handicap used for putting/chips.
# The handicap tiers widen in both distance and angle as the handicap grows.
NAMED_TIERS: Dict[str, TierProfile] = {
    TOUR_LEGEND:   TierProfile(0.01, 0.5, "tour_legend", -5.0, elite=True),
    "Tour Pro":    TierProfile(0.05, 2.0, "pga_tour", -3.0),
    "PGA Tour":    TierProfile(0.05, 2.0, "pga_tour", -3.0),
    "LPGA Tour":   TierProfile(0.06, 2.5, "lpga_tour", -1.0),
    "10 Handicap": TierProfile(0.10, 4.0, "10", 10.0),
    "15 Handicap": TierProfile(0.15, 5.0, "15", 15.0),
    "20 Handicap": TierProfile(0.20, 6.5, "20", 20.0),
    "Beginner":    TierProfile(0.25, 8.0, "25", 25.0),
}

TIER_ALIASES = {
    "ew 2k": TOUR_LEGEND,
    "tiger 2000": TOUR_LEGEND,
    "legend": TOUR_LEGEND,
    "pga": "PGA Tour",
    "lpga": "LPGA Tour",
}


def parse_skill(value) -> SkillProfile:
    """
    Turn user input into a skill profile.

    Accepts numbers, numeric strings ("12", "+3" meaning a plus-3 handicap),
    tier names (case-insensitive) and a few aliases.
    """
    if isinstance(value, (NumericHandicap, NamedTier)):
        return value
    if isinstance(value, bool):
        raise SkillProfileError(f"not a skill level: {value!r}")
    if isinstance(value, (int, float)):
        return NumericHandicap(float(value))

    text = str(value or "").strip()
    if not text:
        raise SkillProfileError("empty skill level")

    try:
        number = float(text)
    except ValueError:
        number = None
    if number is not None:
        # "+3" is a plus handicap, stored as negative
        if text.startswith("+"):
            number = -number
        return NumericHandicap(number)

    lowered = text.lower()
    for name in NAMED_TIERS:
        if name.lower() == lowered:
            return NamedTier(name)
    if lowered in TIER_ALIASES:
        return NamedTier(TIER_ALIASES[lowered])

    raise SkillProfileError(f"unknown skill level: {value!r}")


def is_tour_legend(skill: SkillProfile) -> bool:
    return isinstance(skill, NamedTier) and skill.name == TOUR_LEGEND


def effective_handicap(skill: SkillProfile, slope_rating: Optional[float] = None) -> float:
    """Handicap adjusted for course slope (113 is neutral); named tiers use their equivalent."""
    if isinstance(skill, NamedTier):
        return skill.profile.equivalent_handicap
    slope = slope_rating if slope_rating else STANDARD_SLOPE
    return skill.value * (slope / STANDARD_SLOPE)


def tier_for_handicap(handicap: float) -> int:
    """Club-chart tier; plus handicaps use the scratch chart."""
    if handicap <= 4:
        return 0
    if handicap <= 7:
        return 5
    if handicap <= 12:
        return 10
    if handicap <= 17:
        return 15
    if handicap <= 22:
        return 20
    return 25
