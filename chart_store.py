# -*- coding: utf-8 -*-
########################
# chart_store.py
########################
# Purpose:
# - Read and write catch chart descriptions stored as UTF-8 JSON.
# - Convert between the JSON document and catch_models.CatchChart.
#
# Design notes:
# - Strict: unknown object kinds, unknown keys, negative repeat counts and approach rates
#   outside 0..10 are rejected, never silently dropped.
# - The chart returned is fully materialized (nested droplets included).
#
########################
# Document format:
# {
#   "approach_rate": 9.0,
#   "objects": [
#     {"kind": "fruit"},
#     {"kind": "juice_stream", "repeat_count": 1, "droplets": [{"tiny": false}, {"tiny": true}]},
#     {"kind": "banana_shower"}
#   ]
# }
#
########################
# Interfaces:
# Public exceptions:
# - class ChartStoreError(Exception)
# - class ChartParseError(ChartStoreError)
# - class ChartValidationError(ChartStoreError)
#
# Public functions:
# - chart_from_dict(document: dict) -> CatchChart
# - chart_to_dict(chart: CatchChart) -> dict
# - load_chart(chart_path: pathlib.Path) -> CatchChart
# - save_chart(output_path: pathlib.Path, chart: CatchChart) -> None
#
########################

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from catch_models import BananaShower, CatchChart, Droplet, Fruit, HitObject, JuiceStream, ObjectKind
from logger import get_logger


class ChartStoreError(Exception):
    """Base error for chart description I/O."""


class ChartParseError(ChartStoreError):
    """Raised when the file cannot be read or is not JSON."""


class ChartValidationError(ChartStoreError):
    """Raised when the JSON parses but does not describe a valid catch chart."""


class _DropletDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tiny: bool = False


class _FruitDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["fruit"]


class _JuiceStreamDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["juice_stream"]
    repeat_count: int = Field(default=0, ge=0)
    droplets: List[_DropletDocument] = Field(default_factory=list)


class _BananaShowerDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["banana_shower"]


class _ChartDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    approach_rate: float = Field(default=5.0, ge=0.0, le=10.0)
    objects: List[
        Union[_FruitDocument, _JuiceStreamDocument, _BananaShowerDocument]
    ] = Field(default_factory=list)


def _to_hit_object(item: Union[_FruitDocument, _JuiceStreamDocument, _BananaShowerDocument]) -> HitObject:
    if isinstance(item, _JuiceStreamDocument):
        droplets = tuple(Droplet(is_tiny=bool(droplet.tiny)) for droplet in item.droplets)
        return JuiceStream(repeat_count=int(item.repeat_count), droplets=droplets)
    if isinstance(item, _BananaShowerDocument):
        return BananaShower()
    return Fruit()


def chart_from_dict(document: Dict[str, Any]) -> CatchChart:
    try:
        parsed = _ChartDocument.model_validate(document)
    except ValidationError as exc:
        raise ChartValidationError(f"Invalid chart description:\n{exc}") from exc

    objects = tuple(_to_hit_object(item) for item in parsed.objects)
    return CatchChart(objects=objects, approach_rate=float(parsed.approach_rate))


def chart_to_dict(chart: CatchChart) -> Dict[str, Any]:
    objects: List[Dict[str, Any]] = []
    for hit_object in chart.objects:
        if hit_object.kind == ObjectKind.FRUIT:
            objects.append({"kind": "fruit"})
        elif hit_object.kind == ObjectKind.JUICE_STREAM:
            objects.append(
                {
                    "kind": "juice_stream",
                    "repeat_count": int(hit_object.repeat_count),
                    "droplets": [{"tiny": bool(droplet.is_tiny)} for droplet in hit_object.droplets],
                }
            )
        elif hit_object.kind == ObjectKind.BANANA_SHOWER:
            objects.append({"kind": "banana_shower"})
        else:
            raise ChartValidationError(f"Unsupported top-level object kind: {hit_object.kind!r}")
    return {"approach_rate": float(chart.approach_rate), "objects": objects}


def load_chart(chart_path: Path) -> CatchChart:
    path = Path(chart_path)
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ChartParseError(f"Failed to read chart file: {path}. Error: {exc}") from exc

    try:
        document = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise ChartParseError(f"Chart file is not valid JSON: {path}. Error: {exc}") from exc

    if not isinstance(document, dict):
        raise ChartValidationError(f"Chart file root must be a JSON object: {path}")

    chart = chart_from_dict(document)
    get_logger().debug("loaded chart %s with %d objects", path, len(chart.objects))
    return chart


def save_chart(output_path: Path, chart: CatchChart) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(chart_to_dict(chart), ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


def _run_unit_tests() -> None:
    import tempfile

    document = {
        "approach_rate": 9,
        "objects": [
            {"kind": "fruit"},
            {"kind": "juice_stream", "repeat_count": 2, "droplets": [{"tiny": False}, {"tiny": False}, {"tiny": True}]},
            {"kind": "banana_shower"},
        ],
    }
    chart = chart_from_dict(document)
    assert len(chart.objects) == 3
    assert chart.objects[1].kind == ObjectKind.JUICE_STREAM
    assert chart.approach_rate == 9.0

    try:
        chart_from_dict({"objects": [{"kind": "slider"}]})
    except ChartValidationError:
        pass
    else:
        raise AssertionError("Expected ChartValidationError for unknown kind")

    try:
        chart_from_dict({"objects": [{"kind": "juice_stream", "repeats": 3}]})
    except ChartValidationError:
        pass
    else:
        raise AssertionError("Expected ChartValidationError for misspelled key")

    with tempfile.TemporaryDirectory() as temp_dir:
        chart_path = Path(temp_dir) / "chart.json"
        save_chart(chart_path, chart)
        assert load_chart(chart_path) == chart

        broken_path = Path(temp_dir) / "broken.json"
        broken_path.write_text("{not json", encoding="utf-8")
        try:
            load_chart(broken_path)
        except ChartParseError:
            pass
        else:
            raise AssertionError("Expected ChartParseError for invalid JSON")


if __name__ == "__main__":
    _run_unit_tests()
    print("chart_store.py: ok")
