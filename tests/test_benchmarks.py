from dataclasses import replace

import pytest

from pinhigh import benchmarks as bm
from pinhigh.errors import BenchmarkTableError


def test_exact_tier_returns_table_row():
    for tier in bm.TIERS:
        assert bm.stats_for_handicap(tier) == bm.BENCHMARK_TABLE[tier]


def test_interpolates_between_tiers():
    mid = bm.stats_for_handicap(7.5)
    lo, hi = bm.BENCHMARK_TABLE[5], bm.BENCHMARK_TABLE[10]
    assert mid.gir_pct == pytest.approx((lo.gir_pct + hi.gir_pct) / 2)
    assert mid.putts_per_round == pytest.approx((lo.putts_per_round + hi.putts_per_round) / 2)


def test_handicap_is_clamped_to_table_range():
    assert bm.stats_for_handicap(-4) == bm.BENCHMARK_TABLE[0]
    assert bm.stats_for_handicap(40) == bm.BENCHMARK_TABLE[25]


def test_shipped_table_is_monotone():
    assert bm.monotonicity_violations() == []
    bm.validate_table()


def test_broken_table_is_rejected():
    table = dict(bm.BENCHMARK_TABLE)
    table[10] = replace(table[10], gir_pct=60.0)
    problems = bm.monotonicity_violations(table)
    assert any(p.startswith("gir_pct") for p in problems)
    with pytest.raises(BenchmarkTableError):
        bm.validate_table(table)
