from __future__ import annotations

from typing import Dict, Mapping, Optional

from pinhigh.skill import NamedTier, SkillProfile, effective_handicap, tier_for_handicap

# ============================================================
# Club carry tables (yards)
# ============================================================

CLUB_ORDER = ["Driver", "3W", "4H", "4i", "5i", "6i", "7i", "8i", "9i", "PW", "GW", "SW", "LW"]

CLUB_NAMES = {
    "Driver": "Driver",
    "3W": "3-wood",
    "4H": "4-hybrid",
    "4i": "4-iron",
    "5i": "5-iron",
    "6i": "6-iron",
    "7i": "7-iron",
    "8i": "8-iron",
    "9i": "9-iron",
    "PW": "Pitching wedge",
    "GW": "Gap wedge",
    "SW": "Sand wedge",
    "LW": "Lob wedge",
}

PUTTER = "Putter"
PUTTER_RANGE_YARDS = 5


def _table(*carries) -> Dict[str, float]:
    return dict(zip(CLUB_ORDER, carries))


# Average carry by handicap tier
YARDAGES_BY_TIER: Dict[int, Dict[str, float]] = {
    0:  _table(280, 250, 230, 210, 195, 180, 165, 155, 145, 135, 120, 105, 85),
    5:  _table(265, 240, 220, 200, 185, 172, 165, 150, 140, 130, 115, 95, 75),
    10: _table(255, 230, 210, 195, 180, 170, 160, 148, 138, 125, 110, 90, 70),
    15: _table(235, 215, 195, 180, 170, 160, 150, 140, 130, 120, 105, 85, 65),
    20: _table(220, 195, 180, 165, 155, 148, 142, 133, 125, 110, 95, 80, 60),
    25: _table(200, 175, 160, 150, 140, 135, 130, 120, 110, 100, 85, 70, 50),
}

# Named-tier bags
YARDAGES_BY_NAME: Dict[str, Dict[str, float]] = {
    "tour_legend": _table(297, 275, 255, 225, 210, 195, 180, 165, 150, 135, 127, 120, 105),
    "pga_tour":    _table(275, 243, 230, 203, 194, 183, 172, 160, 148, 136, 122, 108, 88),
    "lpga_tour":   _table(255, 230, 215, 186, 175, 164, 153, 142, 130, 118, 104, 90, 70),
}


def yardages_for(skill: SkillProfile, slope_rating: Optional[float] = None) -> Mapping[str, float]:
    if isinstance(skill, NamedTier):
        key = skill.profile.yardage_table
        if key in YARDAGES_BY_NAME:
            return YARDAGES_BY_NAME[key]
        return YARDAGES_BY_TIER[int(key)]
    h = round(effective_handicap(skill, slope_rating))
    return YARDAGES_BY_TIER[tier_for_handicap(h)]


def _smallest_reaching(distance_yards: float, table: Mapping[str, float]) -> Optional[str]:
    for club in reversed(CLUB_ORDER):
        if distance_yards <= table[club]:
            return club
    return None


def club_for_distance(distance_yards: float, table: Mapping[str, float]) -> str:
    """Shortest-carrying club that still reaches; Putter inside 5 yd, Driver beyond driver carry."""
    if distance_yards <= PUTTER_RANGE_YARDS:
        return PUTTER
    club = _smallest_reaching(distance_yards, table)
    return CLUB_NAMES[club or "Driver"]


def max_shot_distance_yards(distance_yards: float, table: Mapping[str, float]) -> float:
    """Carry of the club chosen for this distance; never more than driver."""
    if distance_yards <= PUTTER_RANGE_YARDS:
        return float(PUTTER_RANGE_YARDS)
    club = _smallest_reaching(distance_yards, table)
    return float(table[club or "Driver"])
