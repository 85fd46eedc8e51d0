# -*- coding: utf-8 -*-
########################
# outcome_distributor.py
########################
# Purpose:
# - Turn play-quality targets (misses, optional good/meh counts, accuracy, combo) into a
#   complete catch hit result distribution.
# - Recompute accuracy from any distribution.
#
# Design notes:
# - Pure functions. No validation of caller inputs beyond what the math needs.
# - Perfect is always the back-filled category, so counts sum to the chart's scorable units.
# - An accuracy target alone does not produce partial hits: good and meh stay at zero and every
#   non-miss unit is perfect. Callers that need partial hits pass explicit counts.
# - A miss count above the unit total yields a negative perfect count. It is surfaced, not raised.
#   simulation.py rejects it with find_negative_counts().
#
########################
# Interfaces:
# Public functions:
# - generate_distribution(accuracy_percent: float, chart: CatchChart, miss_count: int,
#                         meh_count: Optional[int] = None, good_count: Optional[int] = None) -> dict[HitResult, int]
# - distribution_from_geometry(geometry: ChartGeometry, miss_count: int, meh_count: Optional[int] = None,
#                              good_count: Optional[int] = None, accuracy_percent: float = 100.0) -> dict[HitResult, int]
# - compute_accuracy(statistics: Mapping[HitResult, int]) -> float
# - resolve_combo(max_combo: int, combo: Optional[int] = None, percent_combo: float = 100.0) -> int
# - find_negative_counts(statistics: Mapping[HitResult, int]) -> list[HitResult]
#
# Inputs:
# - CatchChart or ChartGeometry and scalar targets.
#
# Outputs:
# - New statistics dicts keyed by every HitResult member.
#
########################

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from catch_models import HIT_RESULT_ORDER, CatchChart, HitResult, empty_statistics
from chart_geometry import ChartGeometry, analyze_chart
from logger import get_logger


def distribution_from_geometry(
    geometry: ChartGeometry,
    miss_count: int,
    meh_count: Optional[int] = None,
    good_count: Optional[int] = None,
    accuracy_percent: float = 100.0,
) -> Dict[HitResult, int]:
    total_units = int(geometry.total_scorable_units)
    misses = int(miss_count)
    mehs = int(meh_count) if meh_count is not None else 0
    goods = int(good_count) if good_count is not None else 0

    if meh_count is None and good_count is None and float(accuracy_percent) < 100.0:
        # Known approximation: the accuracy target is not inverted into partial hits.
        get_logger().debug(
            "accuracy target %.2f%% approximated with misses only (miss=%d)",
            float(accuracy_percent),
            misses,
        )

    statistics = empty_statistics()
    statistics[HitResult.PERFECT] = total_units - goods - mehs - misses
    statistics[HitResult.GOOD] = goods
    statistics[HitResult.MEH] = mehs
    statistics[HitResult.MISS] = misses
    return statistics


def generate_distribution(
    accuracy_percent: float,
    chart: CatchChart,
    miss_count: int,
    meh_count: Optional[int] = None,
    good_count: Optional[int] = None,
) -> Dict[HitResult, int]:
    return distribution_from_geometry(
        analyze_chart(chart),
        miss_count,
        meh_count=meh_count,
        good_count=good_count,
        accuracy_percent=accuracy_percent,
    )


def compute_accuracy(statistics: Mapping[HitResult, int]) -> float:
    caught = (
        statistics.get(HitResult.PERFECT, 0)
        + statistics.get(HitResult.GOOD, 0)
        + statistics.get(HitResult.MEH, 0)
    )
    total = caught + statistics.get(HitResult.MISS, 0) + statistics.get(HitResult.OK, 0)

    if total == 0:
        return 1.0

    return float(caught) / float(total)


def resolve_combo(max_combo: int, combo: Optional[int] = None, percent_combo: float = 100.0) -> int:
    """Return the combo to score with.

    An explicit combo wins. Otherwise percent_combo of max_combo, rounded half to even.
    """
    if combo is not None:
        return int(combo)
    return int(round(float(percent_combo) / 100.0 * int(max_combo)))


def find_negative_counts(statistics: Mapping[HitResult, int]) -> List[HitResult]:
    return [hit_result for hit_result in HIT_RESULT_ORDER if statistics.get(hit_result, 0) < 0]


def _run_unit_tests() -> None:
    from catch_models import Droplet, Fruit, JuiceStream

    stream = JuiceStream(repeat_count=2, droplets=(Droplet(), Droplet(), Droplet(is_tiny=True)))
    chart = CatchChart(objects=(stream,))

    misses_only = generate_distribution(96.0, chart, miss_count=2)
    assert misses_only == {
        HitResult.PERFECT: 5,
        HitResult.GOOD: 0,
        HitResult.MEH: 0,
        HitResult.MISS: 2,
        HitResult.OK: 0,
    }
    assert abs(compute_accuracy(misses_only) - 5.0 / 7.0) < 1e-12

    explicit = generate_distribution(100.0, chart, miss_count=1, meh_count=1, good_count=1)
    assert explicit[HitResult.PERFECT] == 4
    assert sum(explicit.values()) == 7

    assert compute_accuracy(generate_distribution(100.0, CatchChart(), miss_count=0)) == 1.0

    too_many = generate_distribution(100.0, CatchChart(objects=(Fruit(),)), miss_count=3)
    assert find_negative_counts(too_many) == [HitResult.PERFECT]

    assert resolve_combo(6) == 6
    assert resolve_combo(6, combo=2) == 2
    assert resolve_combo(5, percent_combo=50.0) == 2


if __name__ == "__main__":
    _run_unit_tests()
    print("outcome_distributor.py: ok")
