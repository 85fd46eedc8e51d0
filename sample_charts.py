# sample_charts.py
from __future__ import annotations

from typing import List

from catch_models import BananaShower, CatchChart, Droplet, Fruit, HitObject, JuiceStream


def build_fruit_chart(*, fruit_count: int, approach_rate: float = 5.0) -> CatchChart:
    return CatchChart(objects=tuple(Fruit() for _ in range(int(fruit_count))), approach_rate=float(approach_rate))


def build_stream(*, repeat_count: int, droplets: int, tiny_droplets: int) -> JuiceStream:
    nested = [Droplet() for _ in range(int(droplets))] + [Droplet(is_tiny=True) for _ in range(int(tiny_droplets))]
    return JuiceStream(repeat_count=int(repeat_count), droplets=tuple(nested))


def build_sample_chart(*, difficulty: str) -> CatchChart:
    normalized_difficulty = (difficulty or "easy").strip().lower() or "easy"

    if normalized_difficulty == "hard":
        approach_rate = 9.0
        sections = 8
    elif normalized_difficulty == "medium":
        approach_rate = 7.5
        sections = 6
    else:
        approach_rate = 5.0
        sections = 4

    objects: List[HitObject] = []
    for section_index in range(sections):
        # Two fruits, then a stream whose shape cycles deterministically.
        objects.append(Fruit())
        objects.append(Fruit())
        objects.append(
            build_stream(
                repeat_count=section_index % 3,
                droplets=2 + section_index % 2,
                tiny_droplets=3 * (section_index % 4),
            )
        )

    objects.append(BananaShower())

    return CatchChart(objects=tuple(objects), approach_rate=approach_rate)
