# -*- coding: utf-8 -*-
########################
# catch_models.py
########################
# Purpose:
# - Data models for catch-mode charts and simulated plays.
# - Defines the closed set of hit object kinds, the hit result categories and the
#   immutable SimulatedPlay handed to scoring and reporting.
#
# Design notes:
# - Pure data definitions. No I/O and no counting logic here (see chart_geometry.py).
# - Object kinds are a closed set tagged by ObjectKind. Consumers dispatch on the tag.
# - HitResult keeps OK even though catch never produces it, so the category set matches
#   the other modes.
# - Charts are borrowed read-only from the loader. Use tuples for nested sequences.
#
########################
# Interfaces:
# Public enums:
# - class ObjectKind(enum.Enum): FRUIT | JUICE_STREAM | DROPLET | BANANA_SHOWER
# - class HitResult(enum.Enum): PERFECT | GOOD | MEH | OK | MISS
#
# Public dataclasses:
# - Fruit()
# - Droplet(is_tiny: bool)
# - JuiceStream(repeat_count: int, droplets: tuple[Droplet, ...])
# - BananaShower()
# - CatchChart(objects: tuple[HitObject, ...], approach_rate: float)
# - SimulatedPlay(statistics: Mapping[HitResult, int], combo: int, accuracy: float,
#                 mods: tuple[str, ...], chart: CatchChart)
#
# Public functions:
# - empty_statistics() -> dict[HitResult, int]
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
import enum
from typing import Dict, Mapping, Tuple, Union


class ObjectKind(enum.Enum):
    FRUIT = "fruit"
    JUICE_STREAM = "juice_stream"
    DROPLET = "droplet"
    BANANA_SHOWER = "banana_shower"


class HitResult(enum.Enum):
    PERFECT = "Perfect"
    GOOD = "Good"
    MEH = "Meh"
    OK = "Ok"
    MISS = "Miss"


# Reporting order for statistics.
HIT_RESULT_ORDER: Tuple[HitResult, ...] = (
    HitResult.PERFECT,
    HitResult.GOOD,
    HitResult.MEH,
    HitResult.MISS,
    HitResult.OK,
)


@dataclass(frozen=True)
class Fruit:
    kind: ObjectKind = field(default=ObjectKind.FRUIT, init=False)


@dataclass(frozen=True)
class Droplet:
    is_tiny: bool = False
    kind: ObjectKind = field(default=ObjectKind.DROPLET, init=False)


@dataclass(frozen=True)
class JuiceStream:
    repeat_count: int = 0
    droplets: Tuple[Droplet, ...] = ()
    kind: ObjectKind = field(default=ObjectKind.JUICE_STREAM, init=False)


@dataclass(frozen=True)
class BananaShower:
    kind: ObjectKind = field(default=ObjectKind.BANANA_SHOWER, init=False)


HitObject = Union[Fruit, JuiceStream, BananaShower]


@dataclass(frozen=True)
class CatchChart:
    objects: Tuple[HitObject, ...] = ()
    approach_rate: float = 5.0


@dataclass(frozen=True)
class SimulatedPlay:
    statistics: Mapping[HitResult, int]
    combo: int
    accuracy: float
    mods: Tuple[str, ...]
    chart: CatchChart


def empty_statistics() -> Dict[HitResult, int]:
    return {hit_result: 0 for hit_result in HIT_RESULT_ORDER}
