from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pinhigh import clubs, collision, commentary, putting
from pinhigh import geodesy as geo
from pinhigh.conditions import Conditions, plays_like_yards
from pinhigh.dispersion import CalibrationState, DispersionMapper, DispersionParams
from pinhigh.geometry import Hole, HoleGeometry
from pinhigh.lie import Lie, classify
from pinhigh.skill import SkillProfile

logger = logging.getLogger(__name__)

# ============================================================
# Constants (meters)
# ============================================================

GIMME_M = 0.1524
PUTT_MAX_M = 18.0
PUTT_CHIP_RANGE_M = 20.0
BUNKER_SHOT_MAX_M = 18.3
BUNKER_CHIP_OUT_WHEN_GREEN_BEYOND_M = 40.0
BUNKER_CHIP_OUT_MAX_M = 22.86
CHIP_OUT_MIN_M = 10.0
CHIP_OUT_MAX_M = 54.86
FAIRWAY_TARGET_MIN_DISTANCE_M = 180.0
MIN_TEE_SHOT_M = 91.44

DEFAULT_MAX_SHOTS = 20
MAX_SHOTS_PER_PAR = 3
TREE_HITS_BEFORE_CHIP_OUT = 3


class ShotKind(str, Enum):
    TEE = "tee"
    FULL = "full"
    ROUGH = "rough"
    CHIP = "chip"
    CHIP_OUT = "chip_out"
    BUNKER = "bunker"
    PUTT = "putt"
    GIMME = "gimme"
    PENALTY = "penalty"


@dataclass(frozen=True)
class ShotRecord:
    shot_number: int
    from_position: geo.Coordinate
    to_position: geo.Coordinate
    intended_target: geo.Coordinate
    intended_distance_m: float
    actual_distance_m: float
    lie_before: Lie
    lie_at_landing: Lie
    kind: ShotKind
    club: str
    penalty: bool = False
    holed: bool = False
    tree_impact: Optional[geo.Coordinate] = None
    commentary: Optional[commentary.ShotCommentary] = None


@dataclass(frozen=True)
class HoleResult:
    hole_number: int
    par: int
    shots: Tuple[ShotRecord, ...]
    holed: bool

    @property
    def strokes(self) -> int:
        return len(self.shots)

    @property
    def to_par(self) -> int:
        return self.strokes - self.par


@dataclass
class PlayOptions:
    """Optional inputs around a hole. `course_name` switches on out-of-bounds checks."""

    conditions: Optional[Conditions] = None
    course_rating: Optional[float] = None
    slope_rating: Optional[float] = None
    total_par: Optional[int] = None
    course_name: Optional[str] = None
    calibration: Optional[CalibrationState] = None
    max_shots: int = DEFAULT_MAX_SHOTS


@dataclass(frozen=True)
class _ShotPlan:
    kind: ShotKind
    target: geo.Coordinate
    intended_m: float
    params: DispersionParams
    max_m: Optional[float]
    note: str


@dataclass
class _HoleState:
    position: geo.Coordinate
    shots: List[ShotRecord] = field(default_factory=list)
    consecutive_tree_hits: int = 0
    dropped: bool = False


def shot_cap(par: int, max_shots: int = DEFAULT_MAX_SHOTS) -> int:
    return min(max_shots, MAX_SHOTS_PER_PAR * par)


# ============================================================
# Target selection
# ============================================================

def _farthest_fairway_point(position, geometry: HoleGeometry, lo: float, hi: float, beyond: float):
    """Farthest fairway aim point with lo <= d <= hi and d < beyond."""
    best, best_d = None, 0.0
    for fairway in geometry.fairways:
        point = fairway.aim_point
        d = geo.distance(position, point)
        if lo <= d <= hi and d < beyond and d > best_d:
            best, best_d = point, d
    return best, best_d


def _tee_fairway_target(position, geometry: HoleGeometry, to_pin_m: float):
    """Long holes: farthest fairway point past the minimum tee shot, else farthest short of the pin."""
    point, d = _farthest_fairway_point(position, geometry, MIN_TEE_SHOT_M, float("inf"), to_pin_m)
    if point is None:
        point, d = _farthest_fairway_point(position, geometry, 0.0, float("inf"), to_pin_m)
    return point, d


def _plan_shot(
    hole: Hole,
    state: _HoleState,
    lie: Lie,
    on_tee: bool,
    to_pin_m: float,
    full_max_m: float,
    mapper: DispersionMapper,
) -> _ShotPlan:
    geometry = hole.geometry
    pin = hole.pin
    position = state.position

    if lie == Lie.BUNKER:
        if to_pin_m > BUNKER_CHIP_OUT_WHEN_GREEN_BEYOND_M and geometry.fairways:
            point, d = _farthest_fairway_point(position, geometry, 0.0, BUNKER_CHIP_OUT_MAX_M, to_pin_m)
            if point is not None:
                return _ShotPlan(ShotKind.CHIP_OUT, point, min(d, BUNKER_CHIP_OUT_MAX_M),
                                 mapper.bunker(), BUNKER_CHIP_OUT_MAX_M, "Splashed out to the fairway")
        return _ShotPlan(ShotKind.BUNKER, pin, min(to_pin_m, BUNKER_SHOT_MAX_M),
                         mapper.bunker(), BUNKER_SHOT_MAX_M, "Bunker shot")

    if to_pin_m <= PUTT_CHIP_RANGE_M:
        return _ShotPlan(ShotKind.CHIP, pin, min(to_pin_m, PUTT_MAX_M),
                         mapper.chip(), PUTT_MAX_M, "Chip from off the green")

    if lie == Lie.ROUGH and not on_tee:
        trees = geometry.trees
        in_trouble = (
            collision.is_path_blocked(position, pin, trees)
            or collision.is_near_tree(position, trees)
            or state.consecutive_tree_hits >= TREE_HITS_BEFORE_CHIP_OUT
        )
        if in_trouble and geometry.fairways and to_pin_m > CHIP_OUT_MIN_M:
            point, d = _farthest_fairway_point(position, geometry, CHIP_OUT_MIN_M, CHIP_OUT_MAX_M, to_pin_m)
            if point is not None:
                return _ShotPlan(ShotKind.CHIP_OUT, point, min(d, CHIP_OUT_MAX_M),
                                 mapper.rough(), CHIP_OUT_MAX_M, "Chipped out to fairway")
        intended = min(to_pin_m, full_max_m * mapper.rough_distance_factor())
        return _ShotPlan(ShotKind.ROUGH, pin, intended, mapper.rough(), intended, "From the rough")

    kind = ShotKind.TEE if on_tee else ShotKind.FULL
    if on_tee and hole.par >= 4 and to_pin_m > FAIRWAY_TARGET_MIN_DISTANCE_M and geometry.fairways:
        point, d = _tee_fairway_target(position, geometry, to_pin_m)
        if point is not None:
            intended = max(MIN_TEE_SHOT_M, min(d, full_max_m))
            return _ShotPlan(kind, point, intended, mapper.full_shot(), None, "Aiming at the fairway")
    note = "Off the tee" if on_tee else "Clean lie"
    return _ShotPlan(kind, pin, min(to_pin_m, full_max_m), mapper.full_shot(), None, note)


# ============================================================
# Hole loop
# ============================================================

def play_hole(
    hole: Hole,
    skill: SkillProfile,
    rng: random.Random,
    options: Optional[PlayOptions] = None,
) -> HoleResult:
    """
    Play one hole stroke by stroke until holed or the shot cap is reached.

    Steps per stroke:
      1) Gimme inside 6 inches.
      2) Classify the lie (the tee box plays as fairway).
      3) Green: putt. Ball at rest in a hazard: penalty and a drop.
      4) Otherwise plan a target, perturb it with the dispersion for that
         shot type, then resolve trees.
      5) Water or out of bounds: the hazard stroke plus one penalty
         stroke, replayed from the same spot.
    """
    options = options or PlayOptions()
    geometry = hole.geometry
    pin = hole.pin
    cap = shot_cap(hole.par, options.max_shots)
    check_bounds = options.course_name is not None
    mapper = DispersionMapper(
        skill,
        calibration=options.calibration,
        course_rating=options.course_rating,
        slope_rating=options.slope_rating,
        total_par=options.total_par,
    )
    yardages = clubs.yardages_for(skill, options.slope_rating)
    state = _HoleState(position=hole.tee)
    holed = False

    while len(state.shots) < cap:
        shot_number = len(state.shots) + 1
        position = state.position
        to_pin = geo.inverse(position, pin)
        to_pin_m = to_pin.distance_m

        if to_pin_m < GIMME_M:
            state.shots.append(ShotRecord(
                shot_number, position, pin, pin, to_pin_m, to_pin_m, Lie.GREEN, Lie.GREEN,
                ShotKind.GIMME, clubs.PUTTER, holed=True,
                commentary=commentary.build(to_pin_m * geo.YARDS_PER_METER, clubs.PUTTER, 0.0, 0.0, "Tap-in", holed=True),
            ))
            holed = True
            break

        on_tee = position == hole.tee
        if on_tee:
            lie = Lie.FAIRWAY
        elif state.dropped:
            lie = Lie.ROUGH
        else:
            lie = classify(position, geometry, check_bounds)

        if lie == Lie.GREEN:
            result = putting.resolve_putt(
                position, pin, to_pin_m, skill, rng,
                par_save=shot_number >= hole.par,
                slope_rating=options.slope_rating,
            )
            landing_lie = Lie.GREEN if result.holed else classify(result.leave_position, geometry, check_bounds)
            miss = 0.0 if result.holed else geo.distance(result.leave_position, pin)
            state.shots.append(ShotRecord(
                shot_number, position, result.leave_position, pin, to_pin_m, to_pin_m, lie, landing_lie,
                ShotKind.PUTT, clubs.PUTTER, holed=result.holed,
                commentary=commentary.build(to_pin_m * geo.YARDS_PER_METER, clubs.PUTTER, 0.0, miss, "Putt", holed=result.holed),
            ))
            state.position = result.leave_position
            state.consecutive_tree_hits = 0
            if result.holed:
                holed = True
                break
            continue

        if lie in (Lie.WATER, Lie.OUT_OF_BOUNDS):
            state.shots.append(_penalty_record(shot_number, position, lie, "Ball at rest in a hazard - drop"))
            state.dropped = True
            continue

        raw_yards = to_pin_m * geo.YARDS_PER_METER
        effective_yards = plays_like_yards(raw_yards, options.conditions, to_pin.initial_bearing_deg)
        carry_factor = raw_yards / effective_yards if effective_yards > 0 else 1.0
        full_max_m = clubs.max_shot_distance_yards(effective_yards, yardages) / geo.YARDS_PER_METER * carry_factor

        plan = _plan_shot(hole, state, lie, on_tee, to_pin_m, full_max_m, mapper)

        # distance error and direction error share one normal pair
        z_distance, z_angle = geo.standard_normal_pair(rng)
        intended = plan.intended_m if plan.max_m is None else min(plan.intended_m, plan.max_m)
        actual = max(0.0, intended + z_distance * intended * plan.params.distance_error_pct)
        if plan.max_m is not None:
            actual = min(actual, plan.max_m)
        angle_error = z_angle * plan.params.angular_error_deg
        aim_bearing = geo.bearing(position, plan.target)
        landing = geo.direct(position, (aim_bearing + angle_error) % 360.0, actual)

        hit = collision.resolve_collision(position, landing, geometry.trees, rng)
        landing = hit.landing
        landing_lie = classify(landing, geometry, check_bounds)

        club_yards = intended * geo.YARDS_PER_METER / carry_factor
        club = clubs.club_for_distance(club_yards, yardages)
        miss = geo.distance(landing, pin)
        chip_holed = plan.kind == ShotKind.CHIP and miss < GIMME_M and landing_lie not in (Lie.WATER, Lie.OUT_OF_BOUNDS)
        if chip_holed:
            landing, miss, landing_lie = pin, 0.0, Lie.GREEN

        record = ShotRecord(
            shot_number, position, landing, plan.target, intended, hit.travelled_m if hit.hit_tree else actual,
            lie, landing_lie, plan.kind, club,
            holed=chip_holed,
            tree_impact=hit.impact,
            commentary=commentary.build(club_yards, club, angle_error, miss, plan.note,
                                        holed=chip_holed, hit_tree=hit.hit_tree),
        )
        state.shots.append(record)
        state.consecutive_tree_hits = state.consecutive_tree_hits + 1 if hit.hit_tree else 0
        logger.debug("hole %s shot %s %s %s -> %s (%.1f m)", hole.number, shot_number,
                     plan.kind.value, lie.value, landing_lie.value, record.actual_distance_m)

        if landing_lie in (Lie.WATER, Lie.OUT_OF_BOUNDS):
            # stroke and distance: position stays where the shot was played from
            if len(state.shots) < cap:
                note = "Ball in water - re-hit from previous spot" if landing_lie == Lie.WATER \
                    else "OB - re-hit from previous spot"
                state.shots.append(_penalty_record(len(state.shots) + 1, position, lie, note))
            continue

        state.position = landing
        state.dropped = False
        if chip_holed:
            holed = True
            break

    if not holed:
        logger.debug("hole %s hit the %s shot cap", hole.number, cap)
    return HoleResult(hole.number, hole.par, tuple(state.shots), holed)


def _penalty_record(shot_number: int, position: geo.Coordinate, lie: Lie, note: str) -> ShotRecord:
    return ShotRecord(
        shot_number, position, position, position, 0.0, 0.0, lie, lie,
        ShotKind.PENALTY, commentary.PENALTY_CLUB, penalty=True,
        commentary=commentary.penalty(note),
    )
