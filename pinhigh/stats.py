from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from pinhigh import geodesy as geo
from pinhigh.lie import Lie
from pinhigh.policy import HoleResult, ShotKind

PUTT_KINDS = (ShotKind.PUTT, ShotKind.GIMME)


@dataclass(frozen=True)
class HoleStats:
    hole_number: int
    par: int
    strokes: int
    complete: bool
    fairway_opportunity: bool
    fairway_hit: Optional[bool]
    gir: bool
    putts: int
    three_putt: bool
    up_and_down_opportunity: bool
    up_and_down: bool
    double_bogey_or_worse: bool
    penalties: int


def strokes_to_green(result: HoleResult) -> Optional[int]:
    """Stroke count (penalties included) at which the ball first finished on the green."""
    for i, shot in enumerate(result.shots, start=1):
        if shot.holed or (not shot.penalty and shot.lie_at_landing == Lie.GREEN):
            return i
    return None


def hole_stats(result: HoleResult) -> HoleStats:
    par = result.par
    shots = result.shots
    fairway_opportunity = par >= 4
    fairway_hit = None
    if fairway_opportunity and shots:
        fairway_hit = shots[0].lie_at_landing in (Lie.FAIRWAY, Lie.GREEN)

    reached = strokes_to_green(result)
    gir = reached is not None and reached <= par - 2
    putts = sum(1 for s in shots if s.kind in PUTT_KINDS)
    up_and_down_opportunity = not gir
    return HoleStats(
        hole_number=result.hole_number,
        par=par,
        strokes=result.strokes,
        complete=result.holed,
        fairway_opportunity=fairway_opportunity,
        fairway_hit=fairway_hit,
        gir=gir,
        putts=putts,
        three_putt=putts >= 3,
        up_and_down_opportunity=up_and_down_opportunity,
        up_and_down=up_and_down_opportunity and result.holed and result.strokes <= par,
        double_bogey_or_worse=result.strokes >= par + 2,
        penalties=sum(1 for s in shots if s.penalty),
    )


@dataclass(frozen=True)
class RoundResult:
    """One round; every counter is folded from the hole shot lists."""

    holes: Tuple[HoleResult, ...]
    hole_stats: Tuple[HoleStats, ...]
    score: int
    par: int
    fairways_hit: int
    fairway_opportunities: int
    greens_in_regulation: int
    putts: int
    three_putts: int
    up_and_downs: int
    up_and_down_opportunities: int
    double_bogeys: int
    penalties: int
    incomplete_holes: int

    @classmethod
    def from_holes(cls, holes: Iterable[HoleResult]) -> "RoundResult":
        holes = tuple(holes)
        stats = tuple(hole_stats(h) for h in holes)
        return cls(
            holes=holes,
            hole_stats=stats,
            score=sum(s.strokes for s in stats),
            par=sum(s.par for s in stats),
            fairways_hit=sum(1 for s in stats if s.fairway_hit),
            fairway_opportunities=sum(1 for s in stats if s.fairway_opportunity),
            greens_in_regulation=sum(1 for s in stats if s.gir),
            putts=sum(s.putts for s in stats),
            three_putts=sum(1 for s in stats if s.three_putt),
            up_and_downs=sum(1 for s in stats if s.up_and_down),
            up_and_down_opportunities=sum(1 for s in stats if s.up_and_down_opportunity),
            double_bogeys=sum(1 for s in stats if s.double_bogey_or_worse),
            penalties=sum(s.penalties for s in stats),
            incomplete_holes=sum(1 for s in stats if not s.complete),
        )

    @property
    def to_par(self) -> int:
        return self.score - self.par

    @property
    def fairway_pct(self) -> float:
        return _pct(self.fairways_hit, self.fairway_opportunities)

    @property
    def gir_pct(self) -> float:
        return _pct(self.greens_in_regulation, len(self.holes))

    @property
    def scrambling_pct(self) -> float:
        return _pct(self.up_and_downs, self.up_and_down_opportunities)


def _pct(num: float, den: float) -> float:
    return 100.0 * num / den if den else 0.0


# ============================================================
# Batch summaries
# ============================================================

@dataclass(frozen=True)
class ProfileSummary:
    profile: str
    rounds: int
    avg_score: float
    score_std: float
    min_score: int
    max_score: int
    fairway_pct: float
    gir_pct: float
    gir_per_round: float
    putts_per_round: float
    three_putt_pct: float
    scrambling_pct: float
    up_and_down_opportunities: int
    double_bogey_pct: float
    penalties_per_round: float
    incomplete_holes: int

    def as_dict(self) -> dict:
        return asdict(self)


def summarize(profile: str, rounds: Sequence[RoundResult]) -> ProfileSummary:
    """Aggregate rates over all holes of all rounds (not a mean of per-round rates)."""
    if not rounds:
        raise ValueError("cannot summarize zero rounds")
    scores = np.array([r.score for r in rounds], dtype=float)
    holes = sum(len(r.holes) for r in rounds)
    n = len(rounds)
    return ProfileSummary(
        profile=profile,
        rounds=n,
        avg_score=float(scores.mean()),
        score_std=float(scores.std()),
        min_score=int(scores.min()),
        max_score=int(scores.max()),
        fairway_pct=_pct(sum(r.fairways_hit for r in rounds), sum(r.fairway_opportunities for r in rounds)),
        gir_pct=_pct(sum(r.greens_in_regulation for r in rounds), holes),
        gir_per_round=sum(r.greens_in_regulation for r in rounds) / n,
        putts_per_round=sum(r.putts for r in rounds) / n,
        three_putt_pct=_pct(sum(r.three_putts for r in rounds), holes),
        scrambling_pct=_pct(sum(r.up_and_downs for r in rounds), sum(r.up_and_down_opportunities for r in rounds)),
        up_and_down_opportunities=sum(r.up_and_down_opportunities for r in rounds),
        double_bogey_pct=_pct(sum(r.double_bogeys for r in rounds), holes),
        penalties_per_round=sum(r.penalties for r in rounds) / n,
        incomplete_holes=sum(r.incomplete_holes for r in rounds),
    )


def rounds_frame(profile: str, rounds: Sequence[RoundResult]) -> pd.DataFrame:
    rows = []
    for i, r in enumerate(rounds, start=1):
        rows.append({
            "profile": profile,
            "round": i,
            "score": r.score,
            "to_par": r.to_par,
            "fairways": f"{r.fairways_hit}/{r.fairway_opportunities}",
            "gir": r.greens_in_regulation,
            "putts": r.putts,
            "up_and_downs": f"{r.up_and_downs}/{r.up_and_down_opportunities}",
            "penalties": r.penalties,
            "incomplete_holes": r.incomplete_holes,
        })
    return pd.DataFrame(rows)


def summary_frame(summaries: Sequence[ProfileSummary]) -> pd.DataFrame:
    return pd.DataFrame([s.as_dict() for s in summaries])


def shots_frame(result: HoleResult, origin: Optional[geo.Coordinate] = None) -> pd.DataFrame:
    """One row per stroke; `origin` adds local x/y meters for plotting."""
    rows: List[dict] = []
    for shot in result.shots:
        row = {
            "hole": result.hole_number,
            "shot": shot.shot_number,
            "kind": shot.kind.value,
            "club": shot.club,
            "lie_before": shot.lie_before.value,
            "lie_after": shot.lie_at_landing.value,
            "intended_yds": round(shot.intended_distance_m * geo.YARDS_PER_METER, 1),
            "actual_yds": round(shot.actual_distance_m * geo.YARDS_PER_METER, 1),
            "penalty": shot.penalty,
            "holed": shot.holed,
            "tree": shot.tree_impact is not None,
            "commentary": shot.commentary.headline() if shot.commentary else "",
            "from_lat": shot.from_position.lat,
            "from_lng": shot.from_position.lng,
            "to_lat": shot.to_position.lat,
            "to_lng": shot.to_position.lng,
        }
        if origin is not None:
            row["from_x"], row["from_y"] = geo.to_local_xy(origin, shot.from_position)
            row["to_x"], row["to_y"] = geo.to_local_xy(origin, shot.to_position)
        rows.append(row)
    return pd.DataFrame(rows)


def routes_frame(profile: str, rounds: Sequence[RoundResult]) -> pd.DataFrame:
    frames = []
    for i, r in enumerate(rounds, start=1):
        for hole in r.holes:
            df = shots_frame(hole)
            if df.empty:
                continue
            df.insert(0, "round", i)
            df.insert(0, "profile", profile)
            frames.append(df)
    if not frames:
        return pd.DataFrame()
    return pd.concat(frames, ignore_index=True)
