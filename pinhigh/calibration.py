from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from pinhigh import benchmarks
from pinhigh.dispersion import IDENTITY, CalibrationState, set_calibration
from pinhigh.geometry import Course
from pinhigh.skill import STANDARD_SLOPE, NumericHandicap
from pinhigh.simulation import simulate_rounds
from pinhigh.stats import ProfileSummary, summarize

logger = logging.getLogger(__name__)

# ============================================================
# Verification constants
# ============================================================

VERIFICATION_HANDICAPS = (0, 5, 10, 15, 20)
RUNS_PER_HANDICAP = 50
DEFAULT_COURSE_RATING = 72.0

# (strokes allowed below expected, strokes allowed above expected)
SCRATCH_BAND = (2.0, 5.0)
DEFAULT_BAND = (7.0, 14.0)
WIDE_BANDS = {15: (7.0, 30.0), 20: (7.0, 42.0)}

MIN_WORST_VS_BEST_GAP = 10.0
STATS_DROP_TOLERANCE_PCT = 6.0

# Steps
DISPERSION_STEP_UP = 1.03
CHIP_MULT_STEP_UP = 1.02
DISPERSION_STEP_DOWN = 0.98
CHIP_MULT_STEP_DOWN = 0.99
SCALE_FLOOR = 0.4
MAX_ATTEMPTS = 60


def expected_score(handicap: float, course_rating: float, slope_rating: float) -> float:
    return course_rating + handicap * (slope_rating / STANDARD_SLOPE)


def score_band(handicap: int) -> Tuple[float, float]:
    if handicap == 0:
        return SCRATCH_BAND
    return WIDE_BANDS.get(handicap, DEFAULT_BAND)


@dataclass(frozen=True)
class VerificationResult:
    summaries: Dict[int, ProfileSummary]
    expected: Dict[int, float]
    order_ok: bool
    gap_ok: bool
    rating_ok: bool
    stats_ok: bool
    scores_too_high: bool
    scores_too_low: bool

    @property
    def passed(self) -> bool:
        return self.order_ok and self.gap_ok and self.rating_ok and self.stats_ok

    @property
    def step_up(self) -> bool:
        """Loosen next time; only scores that are all on the high side tighten."""
        return not (self.scores_too_high and not self.scores_too_low)

    @property
    def averages(self) -> Dict[int, float]:
        return {h: s.avg_score for h, s in self.summaries.items()}

    @property
    def failures(self) -> List[str]:
        out = []
        if not self.order_ok:
            out.append("order")
        if not self.gap_ok:
            out.append("gap")
        if self.scores_too_high:
            out.append("rating-band (too high)")
        if self.scores_too_low:
            out.append("rating-band (too low)")
        if not self.stats_ok:
            out.append("statistic-trend")
        return out

    def message(self) -> str:
        avgs = ", ".join(f"{a:.1f}" for a in self.averages.values())
        if self.passed:
            head = f"Handicap verification PASSED: avgs {avgs}"
        else:
            head = f"Handicap verification FAILED: avgs {avgs} ({', '.join(self.failures)})"
        lines = [head]
        for h, s in self.summaries.items():
            lines.append(
                f"  {h} HCP: score {s.avg_score:.1f} (expected ~{self.expected[h]:.0f}), "
                f"fairways {s.fairway_pct:.1f}%, GIR {s.gir_pct:.1f}%, "
                f"putts {s.putts_per_round:.1f}, up&down {s.scrambling_pct:.1f}%"
            )
        return "\n".join(lines)


def evaluate(
    summaries: Mapping[int, ProfileSummary],
    course_rating: Optional[float] = None,
    slope_rating: Optional[float] = None,
) -> VerificationResult:
    """
    Check a set of per-handicap summaries.

    All four must hold: average scores never fall as handicap rises, the
    worst-vs-best gap is wide enough, each average sits in its band around
    rating + h * slope / 113, and GIR / fairway / scrambling never improve
    by more than the drop tolerance from one handicap to the next.
    """
    rating = course_rating if course_rating is not None else DEFAULT_COURSE_RATING
    slope = slope_rating if slope_rating else STANDARD_SLOPE
    handicaps = sorted(summaries)
    avgs = [summaries[h].avg_score for h in handicaps]
    expected = {h: expected_score(h, rating, slope) for h in handicaps}

    too_high = too_low = False
    for h in handicaps:
        below, above = score_band(h)
        avg = summaries[h].avg_score
        if avg < expected[h] - below:
            too_low = True
        if avg > expected[h] + above:
            too_high = True
    rating_ok = not (too_high or too_low)

    order_ok = all(a <= b for a, b in zip(avgs, avgs[1:]))
    gap_ok = len(avgs) > 1 and avgs[-1] - avgs[0] >= MIN_WORST_VS_BEST_GAP

    stats_ok = True
    tol = STATS_DROP_TOLERANCE_PCT
    for lo_h, hi_h in zip(handicaps, handicaps[1:]):
        lo, hi = summaries[lo_h], summaries[hi_h]
        if lo.gir_pct < hi.gir_pct - tol or lo.fairway_pct < hi.fairway_pct - tol:
            stats_ok = False
        if lo.up_and_down_opportunities and hi.up_and_down_opportunities \
                and lo.scrambling_pct < hi.scrambling_pct - tol:
            stats_ok = False

    return VerificationResult(
        summaries={h: summaries[h] for h in handicaps},
        expected=expected,
        order_ok=order_ok,
        gap_ok=gap_ok,
        rating_ok=rating_ok,
        stats_ok=stats_ok,
        scores_too_high=too_high,
        scores_too_low=too_low,
    )


def verify_handicaps(
    course: Course,
    calibration: CalibrationState,
    runs: int = RUNS_PER_HANDICAP,
    handicaps=VERIFICATION_HANDICAPS,
) -> VerificationResult:
    """Seeded batch (seed = 1000 * h + run) for each verification handicap."""
    summaries = {}
    for h in handicaps:
        seeds = range(1000 * h, 1000 * h + runs)
        rounds = simulate_rounds(course, NumericHandicap(float(h)), seeds, calibration)
        summaries[h] = summarize(f"{h} HCP", rounds)
    return evaluate(summaries, course.course_rating, course.slope_rating)


def next_calibration(current: CalibrationState, result: VerificationResult) -> CalibrationState:
    """Tighten when scores run high; loosen for everything else, including mixed high and low."""
    if result.step_up:
        return current.with_steps(DISPERSION_STEP_UP, CHIP_MULT_STEP_UP)
    return current.with_steps(DISPERSION_STEP_DOWN, CHIP_MULT_STEP_DOWN, floor=SCALE_FLOOR)


@dataclass
class CalibrationOutcome:
    passed: bool
    attempts: int
    calibration: CalibrationState
    result: Optional[VerificationResult]
    history: List[CalibrationState] = field(default_factory=list)

    @property
    def failures(self) -> List[str]:
        if self.passed or self.result is None:
            return []
        return self.result.failures

    def message(self) -> str:
        body = self.result.message() if self.result else "Verification did not run"
        state = (f"dispersionScale={self.calibration.dispersion_scale:.2f}, "
                 f"chipMultScale={self.calibration.chip_multiplier_scale:.2f}")
        if self.passed:
            return f"{body}\n[Calibration passed after {self.attempts} attempt(s). {state}]"
        return f"{body}\n[Calibration did not pass after {self.attempts} attempt(s). Last tried: {state}]"


Verifier = Callable[[Course, CalibrationState], VerificationResult]


def calibrate(
    course: Course,
    initial: CalibrationState = IDENTITY,
    max_attempts: int = MAX_ATTEMPTS,
    runs: int = RUNS_PER_HANDICAP,
    verifier: Optional[Verifier] = None,
) -> CalibrationOutcome:
    """
    Search for a calibration that passes verification.

    Each attempt verifies one immutable calibration. On a pass the value
    is installed process-wide; on failure the caller gets the last value
    tried plus the failing checks and decides what to do with it.
    """
    benchmarks.validate_table()
    if verifier is None:
        def verifier(c, cal):
            return verify_handicaps(c, cal, runs=runs)

    calibration = initial
    history: List[CalibrationState] = []
    result = None
    attempts = 0
    while attempts < max_attempts:
        attempts += 1
        history.append(calibration)
        result = verifier(course, calibration)
        logger.info(
            "calibration attempt %d: dispersion=%.3f chip=%.3f -> %s",
            attempts, calibration.dispersion_scale, calibration.chip_multiplier_scale,
            "pass" if result.passed else ", ".join(result.failures),
        )
        if result.passed:
            set_calibration(calibration)
            return CalibrationOutcome(True, attempts, calibration, result, history)
        if attempts < max_attempts:
            calibration = next_calibration(calibration, result)

    logger.warning("calibration gave up after %d attempts", attempts)
    return CalibrationOutcome(False, attempts, calibration, result, history)
