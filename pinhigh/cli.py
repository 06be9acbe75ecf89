"""Command-line entry points: play one hole, run batches, calibrate."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from pinhigh import calibration, settings, stats
from pinhigh.conditions import Conditions
from pinhigh.course import demo_course
from pinhigh.dispersion import set_calibration
from pinhigh.errors import PinHighError
from pinhigh.simulation import course_options, simulate_hole, simulate_rounds
from pinhigh.skill import parse_skill

DEFAULT_PROFILES = ["Tour Legend", "0", "5", "10", "15", "20"]


def _conditions(args) -> Optional[Conditions]:
    if not (args.wind or args.slope or args.temp is not None):
        return None
    return Conditions(
        wind_speed_mph=args.wind,
        wind_direction_deg=args.wind_from,
        slope_deg=args.slope,
        temperature_f=args.temp,
    )


def _cmd_hole(args, cfg) -> int:
    course = demo_course()
    if not 1 <= args.hole <= len(course.holes):
        print(f"hole must be between 1 and {len(course.holes)}")
        return 2
    hole = course.holes[args.hole - 1]
    options = course_options(course, conditions=_conditions(args))
    result = simulate_hole(hole, args.skill, args.seed, options)
    print(f"{course.name} #{hole.number} (par {hole.par}, {hole.length_m:.0f} m) - {parse_skill(args.skill).label}")
    for shot in result.shots:
        print(f"  {shot.shot_number:>2}. {shot.commentary.headline() if shot.commentary else shot.kind.value}")
    status = "holed" if result.holed else "picked up at the shot cap"
    print(f"Score {result.strokes} ({result.to_par:+d}), {status}")
    return 0


def _cmd_batch(args, cfg) -> int:
    course = demo_course()
    out_dir = Path(args.out or cfg["output_dir"])
    out_dir.mkdir(parents=True, exist_ok=True)
    runs = int(args.runs or cfg["runs"])
    conditions = _conditions(args)

    summaries = []
    round_frames = []
    route_frames = []
    for raw in args.profiles or DEFAULT_PROFILES:
        skill = parse_skill(raw)
        rounds = simulate_rounds(course, skill, range(args.seed, args.seed + runs), conditions=conditions)
        summaries.append(stats.summarize(skill.label, rounds))
        round_frames.append(stats.rounds_frame(skill.label, rounds))
        if args.routes:
            route_frames.append(stats.routes_frame(skill.label, rounds))

    summary_df = stats.summary_frame(summaries)
    summary_df.to_csv(out_dir / "summary.csv", index=False)
    for frames, name in ((round_frames, "rounds.csv"), (route_frames, "routes.csv")):
        if frames:
            pd.concat(frames, ignore_index=True).to_csv(out_dir / name, index=False)

    cols = ["profile", "avg_score", "fairway_pct", "gir_pct", "putts_per_round", "scrambling_pct"]
    print(summary_df[cols].round(1).to_string(index=False))
    print(f"Wrote CSVs to {out_dir}")
    return 0


def _cmd_calibrate(args, cfg) -> int:
    course = demo_course()
    path = Path(args.output or cfg["calibration_path"])
    initial = settings.load_calibration(path) if args.resume else calibration.IDENTITY
    outcome = calibration.calibrate(
        course,
        initial=initial,
        max_attempts=int(args.max_attempts or cfg["max_attempts"]),
        runs=int(args.runs or cfg["runs"]),
    )
    print(outcome.message())
    if not outcome.passed:
        return 1
    settings.save_calibration(path, outcome.calibration)
    print(f"Saved calibration to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pinhigh", description="Golf hole simulator and calibration")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--calibration", type=Path, default=None,
                        help="calibration JSON to load before playing (default: settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_conditions(p):
        p.add_argument("--wind", type=float, default=0.0, help="wind speed (mph)")
        p.add_argument("--wind-from", type=float, default=0.0, help="direction the wind blows from (deg)")
        p.add_argument("--slope", type=float, default=0.0, help="slope in degrees, uphill positive")
        p.add_argument("--temp", type=float, default=None, help="air temperature (F)")

    hole = sub.add_parser("hole", help="play one hole of the demo course")
    hole.add_argument("--hole", type=int, default=1)
    hole.add_argument("--skill", default="10", help='handicap ("+2", "14") or tier name')
    hole.add_argument("--seed", type=int, default=0)
    add_conditions(hole)

    batch = sub.add_parser("batch", help="simulate rounds and write CSV summaries")
    batch.add_argument("profiles", nargs="*", help="skill profiles (default: a spread of handicaps)")
    batch.add_argument("--runs", type=int, default=None)
    batch.add_argument("--seed", type=int, default=0)
    batch.add_argument("--out", default=None, help="output directory")
    batch.add_argument("--routes", action="store_true", help="also write every shot to routes.csv")
    add_conditions(batch)

    cal = sub.add_parser("calibrate", help="tune the global dispersion multipliers")
    cal.add_argument("--runs", type=int, default=None, help="rounds per handicap")
    cal.add_argument("--max-attempts", type=int, default=None)
    cal.add_argument("--output", default=None, help="where to write the calibration JSON")
    cal.add_argument("--resume", action="store_true", help="start from the saved calibration")
    return parser


COMMANDS = {"hole": _cmd_hole, "batch": _cmd_batch, "calibrate": _cmd_calibrate}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = settings.load_settings()
    if args.command != "calibrate":
        set_calibration(settings.load_calibration(args.calibration or cfg["calibration_path"]))
    try:
        return COMMANDS[args.command](args, cfg)
    except PinHighError as exc:
        print(f"error: {exc}")
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
