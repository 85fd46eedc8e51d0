# -*- coding: utf-8 -*-
########################
# simulation.py
########################
# Purpose:
# - Build a SimulatedPlay from a chart and play-quality targets.
# - Own the caller-side validation the pure core leaves out.
#
# Key Logic:
# - validate_request() checks bounds against the chart geometry before anything is derived.
# - simulate_play() runs: analyze_chart -> distribution_from_geometry -> resolve_combo -> compute_accuracy.
# - A distribution with negative counts is an invariant violation: check_distribution() raises
#   InvalidDistributionError. validate_request() normally rules this out first.
# - SimulatedPlay.statistics is a read-only mapping.
# - simulate_and_score() hands the play to an optional ScoringCollaborator.
#
########################
# Interfaces:
# Public exceptions:
# - class SimulationInputError(ValueError)
# - class InvalidDistributionError(AssertionError)
#
# Public dataclasses:
# - SimulationRequest(accuracy_percent, combo, percent_combo, miss_count, meh_count, good_count, mods)
#
# Public protocols:
# - ScoringCollaborator.calculate(play: SimulatedPlay) -> float
#
# Public functions:
# - normalize_mods(mods: Iterable[str]) -> tuple[str, ...]
# - validate_request(request: SimulationRequest, geometry: ChartGeometry) -> None
# - check_distribution(statistics: Mapping[HitResult, int]) -> None
# - simulate_play(chart: CatchChart, request: SimulationRequest) -> SimulatedPlay
# - simulate_and_score(chart: CatchChart, request: SimulationRequest,
#                      scorer: Optional[ScoringCollaborator] = None) -> tuple[SimulatedPlay, Optional[float]]
#
########################

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Protocol, Tuple, runtime_checkable

from catch_models import CatchChart, HitResult, SimulatedPlay
from chart_geometry import ChartGeometry, analyze_chart
from logger import get_logger
from outcome_distributor import compute_accuracy, distribution_from_geometry, find_negative_counts, resolve_combo


class SimulationInputError(ValueError):
    """Raised when play-quality targets are out of bounds for the chart."""


class InvalidDistributionError(AssertionError):
    """Raised when a derived distribution carries negative counts."""


@dataclass(frozen=True)
class SimulationRequest:
    accuracy_percent: float = 100.0
    combo: Optional[int] = None
    percent_combo: float = 100.0
    miss_count: int = 0
    meh_count: Optional[int] = None
    good_count: Optional[int] = None
    mods: Tuple[str, ...] = ()


@runtime_checkable
class ScoringCollaborator(Protocol):
    """Performance calculator contract. Implementations live outside this package."""

    def calculate(self, play: SimulatedPlay) -> float:
        ...


def normalize_mods(mods: Iterable[str]) -> Tuple[str, ...]:
    seen: List[str] = []
    for mod in mods:
        acronym = str(mod or "").strip().upper()
        if acronym and acronym not in seen:
            seen.append(acronym)
    return tuple(seen)


def validate_request(request: SimulationRequest, geometry: ChartGeometry) -> None:
    total_units = int(geometry.total_scorable_units)
    max_combo = int(geometry.max_combo)

    if not 0.0 <= float(request.accuracy_percent) <= 100.0:
        raise SimulationInputError(f"accuracy must be between 0 and 100, got {request.accuracy_percent}")
    if not 0.0 <= float(request.percent_combo) <= 100.0:
        raise SimulationInputError(f"percent combo must be between 0 and 100, got {request.percent_combo}")

    counts = {
        "misses": request.miss_count,
        "mehs": request.meh_count,
        "goods": request.good_count,
    }
    for name, value in counts.items():
        if value is not None and int(value) < 0:
            raise SimulationInputError(f"{name} must be non-negative, got {value}")

    if int(request.miss_count) > total_units:
        raise SimulationInputError(f"misses ({request.miss_count}) exceed scorable units ({total_units})")

    non_perfect = sum(int(value) for value in counts.values() if value is not None)
    if non_perfect > total_units:
        raise SimulationInputError(
            f"misses + mehs + goods ({non_perfect}) exceed scorable units ({total_units})"
        )

    if request.combo is not None and not 0 <= int(request.combo) <= max_combo:
        raise SimulationInputError(f"combo must be between 0 and {max_combo}, got {request.combo}")


def check_distribution(statistics: Mapping[HitResult, int]) -> None:
    negative = find_negative_counts(statistics)
    if negative:
        names = ", ".join(hit_result.value for hit_result in negative)
        raise InvalidDistributionError(f"Derived distribution has negative counts: {names}")


def simulate_play(chart: CatchChart, request: SimulationRequest) -> SimulatedPlay:
    geometry = analyze_chart(chart)
    validate_request(request, geometry)

    statistics = distribution_from_geometry(
        geometry,
        request.miss_count,
        meh_count=request.meh_count,
        good_count=request.good_count,
        accuracy_percent=request.accuracy_percent,
    )
    check_distribution(statistics)

    combo = resolve_combo(geometry.max_combo, combo=request.combo, percent_combo=request.percent_combo)
    accuracy = compute_accuracy(statistics)

    get_logger().debug(
        "simulated play: units=%d max_combo=%d combo=%d accuracy=%.6f",
        geometry.total_scorable_units,
        geometry.max_combo,
        combo,
        accuracy,
    )

    return SimulatedPlay(
        statistics=MappingProxyType(dict(statistics)),
        combo=combo,
        accuracy=accuracy,
        mods=normalize_mods(request.mods),
        chart=chart,
    )


def simulate_and_score(
    chart: CatchChart,
    request: SimulationRequest,
    scorer: Optional[ScoringCollaborator] = None,
) -> Tuple[SimulatedPlay, Optional[float]]:
    play = simulate_play(chart, request)
    if scorer is None:
        return play, None
    if not isinstance(scorer, ScoringCollaborator):
        raise TypeError("scorer must provide calculate(play) -> float")
    return play, float(scorer.calculate(play))


def _run_unit_tests() -> None:
    from catch_models import HitResult
    from sample_charts import build_fruit_chart

    chart = build_fruit_chart(fruit_count=10)
    play = simulate_play(chart, SimulationRequest(miss_count=1, percent_combo=50.0, mods=("hr", "HR", "hd")))
    assert play.statistics[HitResult.PERFECT] == 9
    assert play.combo == 5
    assert abs(play.accuracy - 0.9) < 1e-12
    assert play.mods == ("HR", "HD")

    try:
        simulate_play(chart, SimulationRequest(miss_count=11))
    except SimulationInputError:
        pass
    else:
        raise AssertionError("Expected SimulationInputError for too many misses")

    try:
        simulate_play(chart, SimulationRequest(combo=11))
    except SimulationInputError:
        pass
    else:
        raise AssertionError("Expected SimulationInputError for combo above max")

    try:
        play.statistics[HitResult.PERFECT] = 99  # type: ignore[index]
    except TypeError:
        pass
    else:
        raise AssertionError("Expected TypeError when writing play statistics")

    try:
        check_distribution({HitResult.PERFECT: -1, HitResult.MISS: 2})
    except InvalidDistributionError:
        pass
    else:
        raise AssertionError("Expected InvalidDistributionError for negative perfect")

    class _FlatScorer:
        def calculate(self, play: SimulatedPlay) -> float:
            return float(play.combo) * 2.0

    _, value = simulate_and_score(chart, SimulationRequest(), scorer=_FlatScorer())
    assert value == 20.0


if __name__ == "__main__":
    _run_unit_tests()
    print("simulation.py: ok")
