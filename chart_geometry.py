# -*- coding: utf-8 -*-
########################
# chart_geometry.py
########################
# Purpose:
# - Count scorable units in a catch chart and derive the maximum combo.
#
# Design notes:
# - Single traversal over chart objects, dispatching on ObjectKind.
# - Pure. Never mutates the chart.
# - Tiny droplets are scorable but neither extend nor break combo.
# - Banana showers contribute nothing.
#
########################
# Interfaces:
# Public dataclasses:
# - ChartGeometry(fruit_count: int, stream_primary_units: int, droplet_count: int, tiny_droplet_count: int)
#   - max_combo -> int
#   - total_scorable_units -> int
#
# Public functions:
# - analyze_chart(chart: CatchChart) -> ChartGeometry
# - compute_max_combo(chart: CatchChart) -> int
# - compute_total_scorable_units(chart: CatchChart) -> int
#
# Inputs:
# - CatchChart from chart_store.py or sample_charts.py.
#
# Outputs:
# - Counts used by outcome_distributor.py and simulation.py.
#
########################

from __future__ import annotations

from dataclasses import dataclass

from catch_models import CatchChart, JuiceStream, ObjectKind

# Each juice stream scores its head and tail plus one unit per repeat.
STREAM_BASE_UNITS = 2


@dataclass(frozen=True)
class ChartGeometry:
    fruit_count: int = 0
    stream_primary_units: int = 0
    droplet_count: int = 0
    tiny_droplet_count: int = 0

    @property
    def max_combo(self) -> int:
        return self.fruit_count + self.stream_primary_units + self.droplet_count

    @property
    def total_scorable_units(self) -> int:
        return self.max_combo + self.tiny_droplet_count


def _count_stream_droplets(stream: JuiceStream) -> tuple[int, int]:
    droplets = 0
    tiny_droplets = 0
    for nested in stream.droplets:
        if nested.kind != ObjectKind.DROPLET:
            continue
        if nested.is_tiny:
            tiny_droplets += 1
        else:
            droplets += 1
    return droplets, tiny_droplets


def analyze_chart(chart: CatchChart) -> ChartGeometry:
    fruit_count = 0
    stream_primary_units = 0
    droplet_count = 0
    tiny_droplet_count = 0

    for hit_object in chart.objects:
        kind = hit_object.kind
        if kind == ObjectKind.FRUIT:
            fruit_count += 1
        elif kind == ObjectKind.JUICE_STREAM:
            stream_primary_units += STREAM_BASE_UNITS + int(hit_object.repeat_count)
            droplets, tiny_droplets = _count_stream_droplets(hit_object)
            droplet_count += droplets
            tiny_droplet_count += tiny_droplets
        # Banana showers and anything else are not scorable here.

    return ChartGeometry(
        fruit_count=fruit_count,
        stream_primary_units=stream_primary_units,
        droplet_count=droplet_count,
        tiny_droplet_count=tiny_droplet_count,
    )


def compute_max_combo(chart: CatchChart) -> int:
    return analyze_chart(chart).max_combo


def compute_total_scorable_units(chart: CatchChart) -> int:
    return analyze_chart(chart).total_scorable_units


def _run_unit_tests() -> None:
    from catch_models import BananaShower, Droplet, Fruit

    assert compute_max_combo(CatchChart()) == 0
    assert compute_total_scorable_units(CatchChart()) == 0

    fruits_only = CatchChart(objects=(Fruit(), Fruit(), Fruit()))
    assert compute_max_combo(fruits_only) == 3
    assert compute_total_scorable_units(fruits_only) == 3

    stream = JuiceStream(repeat_count=2, droplets=(Droplet(), Droplet(), Droplet(is_tiny=True)))
    stream_chart = CatchChart(objects=(stream, BananaShower()))
    geometry = analyze_chart(stream_chart)
    assert geometry.stream_primary_units == 4
    assert geometry.max_combo == 6
    assert geometry.total_scorable_units == 7


if __name__ == "__main__":
    _run_unit_tests()
    print("chart_geometry.py: ok")
