from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Dict, List, Mapping

from pinhigh.errors import BenchmarkTableError

# ============================================================
# Benchmark table
# ============================================================

TIERS = (0, 5, 10, 15, 20, 25)


@dataclass(frozen=True)
class BenchmarkStats:
    fairway_pct: float
    scrambling_pct: float
    gir_pct: float
    gir_per_round: float
    putts_per_round: float
    three_putt_pct: float
    three_putts_per_round: float
    gir_plus_one_per_round: float
    double_bogey_pct: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


# Published amateur averages (Arccos / TheGrint / Lou Stagner style numbers)
BENCHMARK_TABLE: Dict[int, BenchmarkStats] = {
    0:  BenchmarkStats(56.5, 50.0, 56.8, 10.2, 29.6, 6.0, 1.1, 16.5, 8.0),
    5:  BenchmarkStats(52.0, 38.0, 46.1, 8.3, 30.4, 9.0, 1.6, 14.5, 12.0),
    10: BenchmarkStats(49.3, 32.0, 37.3, 6.7, 31.1, 12.0, 2.2, 13.0, 16.0),
    15: BenchmarkStats(46.0, 25.0, 27.0, 4.86, 32.0, 15.0, 2.7, 11.5, 22.0),
    20: BenchmarkStats(42.8, 22.0, 20.0, 3.6, 32.8, 18.0, 3.2, 11.0, 28.0),
    25: BenchmarkStats(40.0, 18.0, 14.0, 2.5, 33.5, 21.0, 3.8, 10.0, 34.0),
}

# Statistics that should fall as tier number rises; everything else should rise
DECREASING_STATS = (
    "fairway_pct",
    "scrambling_pct",
    "gir_pct",
    "gir_per_round",
    "gir_plus_one_per_round",
)

# Reference points for the dispersion mapper (GIR scale and chip multiplier)
REFERENCE_GIR_PCT = 37.0
REFERENCE_SCRAMBLING_PCT = 50.0


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def stats_for_handicap(handicap: float, table: Mapping[int, BenchmarkStats] = BENCHMARK_TABLE) -> BenchmarkStats:
    """
    Benchmark row for any handicap.

    The handicap is clamped to [0, 25], then every statistic is linearly
    interpolated between the two tiers that bracket it. Exact tiers return
    the table row unchanged.
    """
    tiers = sorted(table)
    h = max(tiers[0], min(tiers[-1], float(handicap)))
    if h in table:
        return table[int(h)]

    upper_idx = next(i for i, t in enumerate(tiers) if t > h)
    lo, hi = tiers[upper_idx - 1], tiers[upper_idx]
    t = (h - lo) / (hi - lo)
    row_lo, row_hi = table[lo], table[hi]
    values = {
        f.name: _lerp(getattr(row_lo, f.name), getattr(row_hi, f.name), t)
        for f in fields(BenchmarkStats)
    }
    return BenchmarkStats(**values)


def monotonicity_violations(table: Mapping[int, BenchmarkStats] = BENCHMARK_TABLE) -> List[str]:
    """Every (stat, tier pair) where the table fails to get worse with tier."""
    problems = []
    tiers = sorted(table)
    for lo, hi in zip(tiers, tiers[1:]):
        for f in fields(BenchmarkStats):
            a = getattr(table[lo], f.name)
            b = getattr(table[hi], f.name)
            if f.name in DECREASING_STATS:
                ok = b <= a
            else:
                ok = b >= a
            if not ok:
                problems.append(f"{f.name}: tier {lo}={a} vs tier {hi}={b}")
    return problems


def validate_table(table: Mapping[int, BenchmarkStats] = BENCHMARK_TABLE) -> None:
    problems = monotonicity_violations(table)
    if problems:
        raise BenchmarkTableError("benchmark table is not monotone: " + "; ".join(problems))
