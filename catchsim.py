"""
catchsim.py

Command line entrypoint: simulate a catch play from a chart description and print the
play attributes a performance calculator needs.

Integration
- Loads config (defaults for accuracy, percent combo, mods, output format, log level)
- Loads the chart through chart_store, or builds a sample chart with --sample
- Runs simulation.simulate_and_score and prints the play report as text or JSON
- An embedding caller may pass a ScoringCollaborator; its value is reported as PerformancePoints

Exit codes
- 0 on success
- 2 when the chart cannot be loaded, the config is invalid or the targets are out of bounds
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

import chart_store
import logger as log_module
import play_report
import sample_charts
from config import AppConfig, get_config
from simulation import (
    InvalidDistributionError,
    ScoringCollaborator,
    SimulationInputError,
    SimulationRequest,
    simulate_and_score,
)


def build_argument_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(
        prog="catchsim",
        description="Computes the play attributes of a simulated osu!catch play.",
    )
    argument_parser.add_argument("beatmap", nargs="?", help="Chart description file (.json).")
    argument_parser.add_argument(
        "--sample",
        choices=["easy", "medium", "hard"],
        help="Use a built-in sample chart instead of a file.",
    )
    argument_parser.add_argument("-a", "--accuracy", type=float, default=None, help="Accuracy. Enter as decimal 0-100.")
    argument_parser.add_argument("-c", "--combo", type=int, default=None, help="Maximum combo during play. Defaults to beatmap maximum.")
    argument_parser.add_argument(
        "-C",
        "--percent-combo",
        type=float,
        default=None,
        help="Percentage of beatmap maximum combo achieved. Alternative to combo option. Enter as decimal 0-100.",
    )
    argument_parser.add_argument("-X", "--misses", type=int, default=0, help="Number of misses. Defaults to 0.")
    argument_parser.add_argument("-M", "--mehs", type=int, default=None, help="Number of tiny droplets caught (meh).")
    argument_parser.add_argument("-G", "--goods", type=int, default=None, help="Number of droplets caught (good).")
    argument_parser.add_argument(
        "-m",
        "--mod",
        action="append",
        default=None,
        help="One for each mod. Values: hr, dt, hd, fl, ez, etc...",
    )
    argument_parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    return argument_parser


def _build_request(parsed_args: argparse.Namespace, app_config: AppConfig) -> SimulationRequest:
    simulation_config = app_config.simulation
    accuracy = parsed_args.accuracy if parsed_args.accuracy is not None else simulation_config.default_accuracy_percent
    percent_combo = (
        parsed_args.percent_combo if parsed_args.percent_combo is not None else simulation_config.default_percent_combo
    )
    mods: List[str] = parsed_args.mod if parsed_args.mod else list(simulation_config.default_mods)

    return SimulationRequest(
        accuracy_percent=float(accuracy),
        combo=parsed_args.combo,
        percent_combo=float(percent_combo),
        miss_count=int(parsed_args.misses),
        meh_count=parsed_args.mehs,
        good_count=parsed_args.goods,
        mods=tuple(mods),
    )


def _load_chart(parsed_args: argparse.Namespace):
    if parsed_args.sample:
        return sample_charts.build_sample_chart(difficulty=parsed_args.sample)
    return chart_store.load_chart(Path(parsed_args.beatmap))


def _print_error(message: str, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps({"ok": False, "error": message}, ensure_ascii=False, indent=2))
    else:
        print(f"error: {message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None, scorer: Optional[ScoringCollaborator] = None) -> int:
    argument_parser = build_argument_parser()
    parsed_args = argument_parser.parse_args(argv)

    if not parsed_args.beatmap and not parsed_args.sample:
        argument_parser.error("a beatmap file or --sample is required")

    try:
        app_config, _config_path = get_config()
    except (OSError, ValueError) as exception:
        _print_error(str(exception), as_json=bool(parsed_args.json))
        return 2

    log_module.set_level(app_config.logging.level)
    as_json = bool(parsed_args.json) or app_config.output.format == "json"

    try:
        chart = _load_chart(parsed_args)
        play, performance = simulate_and_score(chart, _build_request(parsed_args, app_config), scorer=scorer)
    except chart_store.ChartStoreError as exception:
        _print_error(str(exception), as_json=as_json)
        return 2
    except (SimulationInputError, InvalidDistributionError) as exception:
        _print_error(str(exception), as_json=as_json)
        return 2

    attributes: Dict[str, str] = {
        "Mods": ", ".join(play.mods) if play.mods else "None",
        "Accuracy": play_report.format_invariant(round(play.accuracy * 100.0, 2)),
    }
    attributes.update(play_report.assemble_report(play.chart, play.statistics, play.combo))
    if performance is not None:
        attributes["PerformancePoints"] = play_report.format_invariant(round(performance, 2))

    if as_json:
        print(play_report.render_json(attributes))
    else:
        print(play_report.render_text(attributes, padding=app_config.output.attribute_padding))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
