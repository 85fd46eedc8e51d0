# -*- coding: utf-8 -*-
########################
# play_report.py
########################
# Purpose:
# - Shape a simulated play into the flat attribute mapping consumed by report writers.
# - Render that mapping as aligned text or JSON.
#
# Design notes:
# - Field names are a stable contract: ApproachRate, MaxCombo, then one field per HitResult
#   named by its value (Perfect, Good, Meh, Miss, Ok).
# - Values are culture-invariant strings: integers without decimals, floats in shortest
#   round-trip form ("9", "9.3").
#
########################
# Interfaces:
# Public functions:
# - format_invariant(value: float | int) -> str
# - assemble_report(chart: CatchChart, statistics: Mapping[HitResult, int], combo: int) -> dict[str, str]
# - render_text(report: Mapping[str, str], *, padding: int = 15) -> str
# - render_json(report: Mapping[str, str]) -> str
#
########################

from __future__ import annotations

import json
import math
from typing import Dict, Mapping, Union

from catch_models import HIT_RESULT_ORDER, CatchChart, HitResult


def format_invariant(value: Union[float, int]) -> str:
    if isinstance(value, bool):
        raise TypeError("format_invariant expects a number, got bool")
    if isinstance(value, int):
        return str(value)

    number = float(value)
    if math.isfinite(number) and number.is_integer():
        return str(int(number))
    return repr(number)


def assemble_report(chart: CatchChart, statistics: Mapping[HitResult, int], combo: int) -> Dict[str, str]:
    report: Dict[str, str] = {
        "ApproachRate": format_invariant(float(chart.approach_rate)),
        "MaxCombo": format_invariant(int(combo)),
    }
    for hit_result in HIT_RESULT_ORDER:
        if hit_result in statistics:
            report[hit_result.value] = format_invariant(int(statistics[hit_result]))
    return report


def render_text(report: Mapping[str, str], *, padding: int = 15) -> str:
    lines = [f"{name.ljust(int(padding))}: {value}" for name, value in report.items()]
    return "\n".join(lines)


def render_json(report: Mapping[str, str]) -> str:
    return json.dumps(dict(report), ensure_ascii=False, indent=2)


def _run_unit_tests() -> None:
    assert format_invariant(9.0) == "9"
    assert format_invariant(9.3) == "9.3"
    assert format_invariant(12) == "12"

    statistics = {
        HitResult.PERFECT: 5,
        HitResult.GOOD: 0,
        HitResult.MEH: 0,
        HitResult.MISS: 2,
        HitResult.OK: 0,
    }
    report = assemble_report(CatchChart(approach_rate=8.5), statistics, combo=4)
    assert list(report.keys()) == ["ApproachRate", "MaxCombo", "Perfect", "Good", "Meh", "Miss", "Ok"]
    assert report["ApproachRate"] == "8.5"
    assert report["MaxCombo"] == "4"
    assert render_text(report).splitlines()[0] == "ApproachRate   : 8.5"


if __name__ == "__main__":
    _run_unit_tests()
    print("play_report.py: ok")
