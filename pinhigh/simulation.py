from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, List, Optional

from pinhigh.conditions import Conditions
from pinhigh.dispersion import CalibrationState, get_calibration
from pinhigh.geometry import Course, Hole
from pinhigh.policy import HoleResult, PlayOptions, play_hole
from pinhigh.skill import SkillProfile, parse_skill
from pinhigh.stats import ProfileSummary, RoundResult, summarize

logger = logging.getLogger(__name__)


def course_options(
    course: Course,
    calibration: Optional[CalibrationState] = None,
    conditions: Optional[Conditions] = None,
    check_bounds: bool = True,
) -> PlayOptions:
    return PlayOptions(
        conditions=conditions,
        course_rating=course.course_rating,
        slope_rating=course.slope_rating,
        total_par=course.total_par,
        course_name=course.name if check_bounds else None,
        calibration=calibration,
    )


def simulate_hole(hole: Hole, skill, seed: int, options: Optional[PlayOptions] = None) -> HoleResult:
    return play_hole(hole, parse_skill(skill), random.Random(seed), options)


def simulate_round(
    course: Course,
    skill,
    seed: int,
    calibration: Optional[CalibrationState] = None,
    conditions: Optional[Conditions] = None,
    check_bounds: bool = True,
) -> RoundResult:
    """One round; the seed owns the whole random stream so rounds are independent."""
    profile = parse_skill(skill)
    rng = random.Random(seed)
    options = course_options(
        course,
        calibration if calibration is not None else get_calibration(),
        conditions,
        check_bounds,
    )
    return RoundResult.from_holes(play_hole(h, profile, rng, options) for h in course.holes)


def simulate_rounds(
    course: Course,
    skill,
    seeds: Iterable[int],
    calibration: Optional[CalibrationState] = None,
    conditions: Optional[Conditions] = None,
) -> List[RoundResult]:
    # one snapshot for the whole batch
    snapshot = calibration if calibration is not None else get_calibration()
    return [simulate_round(course, skill, s, snapshot, conditions) for s in seeds]


def simulate_profiles(
    course: Course,
    profiles: Iterable,
    runs: int,
    calibration: Optional[CalibrationState] = None,
    conditions: Optional[Conditions] = None,
    base_seed: int = 0,
) -> Dict[str, ProfileSummary]:
    """Summary per skill profile, seeds base_seed + i."""
    summaries: Dict[str, ProfileSummary] = {}
    for raw in profiles:
        skill: SkillProfile = parse_skill(raw)
        rounds = simulate_rounds(course, skill, range(base_seed, base_seed + runs), calibration, conditions)
        summaries[skill.label] = summarize(skill.label, rounds)
        logger.info("%s: avg %.1f over %d rounds", skill.label, summaries[skill.label].avg_score, runs)
    return summaries
