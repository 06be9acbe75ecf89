import json

import pytest

from pinhigh import calibration as cal
from pinhigh import settings
from pinhigh.course import demo_course
from pinhigh.dispersion import IDENTITY, CalibrationState, get_calibration, reset_calibration
from pinhigh.lie import Lie
from pinhigh.simulation import simulate_rounds
from pinhigh.skill import NumericHandicap
from pinhigh.stats import ProfileSummary, summarize


@pytest.fixture(autouse=True)
def _clean_calibration():
    reset_calibration()
    yield
    reset_calibration()


def _summary(h, avg, gir=None, fairway=None, scrambling=None):
    return ProfileSummary(
        profile=f"{h} HCP", rounds=10, avg_score=avg, score_std=2.0,
        min_score=int(avg) - 3, max_score=int(avg) + 3,
        fairway_pct=fairway if fairway is not None else 60 - h,
        gir_pct=gir if gir is not None else 60 - 2 * h,
        gir_per_round=5.0, putts_per_round=31.0, three_putt_pct=10.0,
        scrambling_pct=scrambling if scrambling is not None else 50 - h,
        up_and_down_opportunities=50, double_bogey_pct=10.0,
        penalties_per_round=0.5, incomplete_holes=0,
    )


def _on_target(overrides=None):
    avgs = {h: cal.expected_score(h, 72.0, 113.0) for h in cal.VERIFICATION_HANDICAPS}
    avgs.update(overrides or {})
    return {h: _summary(h, avg) for h, avg in avgs.items()}


def _result(too_high=False, too_low=False):
    return cal.VerificationResult(
        summaries={}, expected={}, order_ok=True, gap_ok=True,
        rating_ok=not (too_high or too_low), stats_ok=True,
        scores_too_high=too_high, scores_too_low=too_low,
    )


def test_expected_score_uses_slope():
    assert cal.expected_score(10, 72.0, 113.0) == 82.0
    assert cal.expected_score(10, 70.4, 126.0) == pytest.approx(70.4 + 10 * 126 / 113)


def test_bands():
    assert cal.score_band(0) == (2.0, 5.0)
    assert cal.score_band(10) == (7.0, 14.0)
    assert cal.score_band(20) == (7.0, 42.0)


def test_evaluate_passes_on_expected_scores():
    result = cal.evaluate(_on_target(), 72.0, 113.0)
    assert result.passed
    assert result.failures == []
    assert "PASSED" in result.message()


def test_evaluate_flags_low_scores():
    result = cal.evaluate(_on_target({0: 65.0}), 72.0, 113.0)
    assert not result.passed
    assert result.scores_too_low and not result.scores_too_high
    assert "rating-band (too low)" in result.failures


def test_evaluate_reports_both_band_failures():
    # scratch under its band while 20 HCP is over its band
    result = cal.evaluate(_on_target({0: 60.0, 20: 200.0}), 72.0, 113.0)
    assert result.scores_too_low and result.scores_too_high
    assert "rating-band (too high)" in result.failures
    assert "rating-band (too low)" in result.failures
    assert result.step_up
    step = cal.next_calibration(IDENTITY, result)
    assert step.dispersion_scale == pytest.approx(1.03)


def test_only_high_scores_tighten():
    assert not _result(too_high=True).step_up
    assert _result(too_low=True).step_up
    step = cal.next_calibration(IDENTITY, _result(too_high=True))
    assert step.dispersion_scale == pytest.approx(0.98)
    assert step.chip_multiplier_scale == pytest.approx(0.99)


def test_evaluate_flags_order_and_gap():
    result = cal.evaluate(_on_target({10: 76.0}), 72.0, 113.0)
    assert not result.order_ok
    flat = cal.evaluate({h: _summary(h, 80.0) for h in (0, 5)}, 78.0, 113.0)
    assert not flat.gap_ok


def test_evaluate_flags_improving_gir():
    summaries = _on_target()
    summaries[15] = _summary(15, summaries[15].avg_score, gir=60.0)
    result = cal.evaluate(summaries, 72.0, 113.0)
    assert not result.stats_ok
    assert "statistic-trend" in result.failures


def test_low_scores_loosen_until_pass():
    seen = []

    def verifier(course, calibration):
        seen.append(calibration)
        return _result(too_low=len(seen) < 4)

    outcome = cal.calibrate(None, max_attempts=10, verifier=verifier)
    assert outcome.passed
    assert outcome.attempts == 4
    scales = [c.dispersion_scale for c in seen]
    assert all(b > a for a, b in zip(scales, scales[1:]))
    assert get_calibration() == outcome.calibration == seen[-1]


def test_high_scores_tighten_down_to_floor():
    seen = []

    def verifier(course, calibration):
        seen.append(calibration)
        return _result(too_high=True)

    outcome = cal.calibrate(None, max_attempts=60, verifier=verifier)
    assert not outcome.passed
    assert outcome.attempts == 60
    assert all(b.dispersion_scale <= a.dispersion_scale for a, b in zip(seen, seen[1:]))
    assert min(c.dispersion_scale for c in seen) == cal.SCALE_FLOOR
    assert outcome.calibration == seen[-1]
    assert get_calibration() == IDENTITY
    assert "did not pass" in outcome.message()


def test_demo_course_drives_find_the_landing_bunkers():
    # at identity a scratch player drives into the pinch bunkers often enough to miss fairways
    rounds = simulate_rounds(demo_course(), NumericHandicap(0.0), range(6), IDENTITY)
    drives = [h.shots[0].lie_at_landing for r in rounds for h in r.holes if h.par >= 4]
    assert Lie.BUNKER in drives
    assert summarize("0 HCP", rounds).fairway_pct < 95.0


def test_demo_course_calibrates_on_real_rounds():
    course = demo_course()
    outcome = cal.calibrate(course, runs=4, max_attempts=40)
    assert outcome.passed, outcome.message()
    assert get_calibration() == outcome.calibration
    scratch = outcome.result.averages[0]
    assert scratch >= cal.expected_score(0, course.course_rating, course.slope_rating) - 2.0


def test_order_failure_loosens():
    failing = cal.VerificationResult({}, {}, False, True, True, True, False, False)
    step = cal.next_calibration(IDENTITY, failing)
    assert step.dispersion_scale == pytest.approx(1.03)
    assert step.chip_multiplier_scale == pytest.approx(1.02)


def test_calibration_file_round_trip(tmp_path):
    path = tmp_path / "nested" / "calibration.json"
    settings.save_calibration(path, CalibrationState(1.2, 0.9))
    assert json.loads(path.read_text()) == {"dispersionScale": 1.2, "chipMultScale": 0.9}
    assert settings.load_calibration(path) == CalibrationState(1.2, 0.9)


def test_missing_or_corrupt_calibration_is_identity(tmp_path):
    assert settings.load_calibration(tmp_path / "nope.json") == IDENTITY
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    assert settings.load_calibration(bad) == IDENTITY


def test_settings_env_override(monkeypatch):
    monkeypatch.setenv("PINHIGH_RUNS", "7")
    monkeypatch.setenv("PINHIGH_SEED", "oops")
    values = settings.load_settings({"output_dir": "out"})
    assert values["runs"] == 7
    assert values["seed"] == 0
    assert values["output_dir"] == "out"
