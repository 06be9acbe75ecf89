from __future__ import annotations

from dataclasses import dataclass

from pinhigh import geodesy as geo

PENALTY_CLUB = "Penalty"


@dataclass(frozen=True)
class ShotCommentary:
    distance_yards: int
    club: str
    shot_shape: str
    shot_height: str
    proximity: str
    note: str

    def headline(self) -> str:
        if self.club == PENALTY_CLUB:
            return f"Penalty stroke. {self.note}"
        return f"{self.club}, {self.distance_yards} yds, {self.shot_shape}. {self.proximity}. {self.note}"


def shot_shape(angle_error_deg: float) -> str:
    """Right-hander: pulled left reads as a draw, pushed right as a fade."""
    size = abs(angle_error_deg)
    if size < 1.0:
        return "straight"
    prefix = "slight " if size < 3.0 else ""
    return prefix + ("draw" if angle_error_deg < 0 else "fade")


def shot_height(distance_yards: float) -> str:
    if distance_yards < 120:
        return "high"
    if distance_yards < 200:
        return "medium"
    return "low"


def proximity_text(miss_m: float, holed: bool = False, hit_tree: bool = False) -> str:
    if holed:
        return "Holed!"
    if hit_tree:
        return "Deflected off tree"
    if miss_m < geo.METERS_PER_FOOT:
        return f"{round(miss_m * 39.3701)} in"
    if miss_m < 2:
        return f"{round(miss_m * geo.FEET_PER_METER)} ft"
    if miss_m < 10:
        return f"{round(miss_m * geo.YARDS_PER_METER)} yds"
    return f"{round(miss_m * geo.YARDS_PER_METER)} yds to pin"


def build(
    distance_yards: float,
    club: str,
    angle_error_deg: float,
    miss_m: float,
    note: str,
    holed: bool = False,
    hit_tree: bool = False,
) -> ShotCommentary:
    return ShotCommentary(
        distance_yards=int(round(distance_yards)),
        club=club,
        shot_shape=shot_shape(angle_error_deg),
        shot_height=shot_height(distance_yards),
        proximity=proximity_text(miss_m, holed, hit_tree),
        note="Hit tree! Ball deflected." if hit_tree else note,
    )


def penalty(note: str) -> ShotCommentary:
    return ShotCommentary(0, PENALTY_CLUB, "-", "-", "Penalty stroke", note)
