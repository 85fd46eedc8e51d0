# test_catch_simulation.py
from __future__ import annotations

import json
from pathlib import Path

import pytest

import catchsim
import chart_store
import config as config_module
from catch_models import BananaShower, CatchChart, Droplet, Fruit, HitResult, JuiceStream
from chart_geometry import analyze_chart, compute_max_combo, compute_total_scorable_units
from outcome_distributor import (
    compute_accuracy,
    find_negative_counts,
    generate_distribution,
    resolve_combo,
)
from play_report import assemble_report, format_invariant, render_text
from sample_charts import build_fruit_chart, build_sample_chart, build_stream
from simulation import (
    InvalidDistributionError,
    ScoringCollaborator,
    SimulationInputError,
    SimulationRequest,
    check_distribution,
    simulate_and_score,
    simulate_play,
)


def _stream_chart() -> CatchChart:
    stream = JuiceStream(repeat_count=2, droplets=(Droplet(), Droplet(), Droplet(is_tiny=True)))
    return CatchChart(objects=(stream,), approach_rate=9.0)


def _all_charts():
    return [
        CatchChart(),
        build_fruit_chart(fruit_count=3),
        _stream_chart(),
        build_sample_chart(difficulty="easy"),
        build_sample_chart(difficulty="medium"),
        build_sample_chart(difficulty="hard"),
    ]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    for name in (
        "CATCHSIM_DEFAULT_ACCURACY",
        "CATCHSIM_DEFAULT_PERCENT_COMBO",
        "CATCHSIM_OUTPUT_FORMAT",
        "CATCHSIM_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    config_path = tmp_path / "catchsim_config.json"
    config_path.write_text("{}", encoding="utf-8")
    monkeypatch.setenv("CATCHSIM_CONFIG_PATH", str(config_path))
    config_module.get_config.cache_clear()
    yield config_path
    config_module.get_config.cache_clear()


def test_fruit_only_chart_counts():
    chart = build_fruit_chart(fruit_count=3)
    assert compute_max_combo(chart) == 3
    assert compute_total_scorable_units(chart) == 3


def test_stream_chart_counts():
    geometry = analyze_chart(_stream_chart())
    assert geometry.stream_primary_units == 4
    assert geometry.max_combo == 6
    assert geometry.total_scorable_units == 7


def test_empty_chart_counts_are_zero():
    assert compute_max_combo(CatchChart()) == 0
    assert compute_total_scorable_units(CatchChart()) == 0


def test_banana_showers_do_not_count():
    chart = CatchChart(objects=(Fruit(), BananaShower(), BananaShower()))
    assert compute_max_combo(chart) == 1
    assert compute_total_scorable_units(chart) == 1


def test_max_combo_never_exceeds_total_units():
    for chart in _all_charts():
        assert compute_max_combo(chart) <= compute_total_scorable_units(chart)


def test_analysis_does_not_mutate_chart():
    chart = build_sample_chart(difficulty="hard")
    before = chart_store.chart_to_dict(chart)
    analyze_chart(chart)
    assert chart_store.chart_to_dict(chart) == before


def test_misses_only_distribution():
    statistics = generate_distribution(90.0, _stream_chart(), miss_count=2)
    assert statistics == {
        HitResult.PERFECT: 5,
        HitResult.GOOD: 0,
        HitResult.MEH: 0,
        HitResult.MISS: 2,
        HitResult.OK: 0,
    }
    assert compute_accuracy(statistics) == pytest.approx(5 / 7)


def test_explicit_counts_back_fill_perfect():
    statistics = generate_distribution(100.0, _stream_chart(), miss_count=1, meh_count=1, good_count=1)
    assert statistics[HitResult.PERFECT] == 4
    assert statistics[HitResult.GOOD] == 1
    assert statistics[HitResult.MEH] == 1
    assert statistics[HitResult.MISS] == 1
    assert statistics[HitResult.OK] == 0
    assert sum(statistics.values()) == 7


def test_single_explicit_count_leaves_other_at_zero():
    statistics = generate_distribution(100.0, _stream_chart(), miss_count=0, good_count=2)
    assert statistics[HitResult.MEH] == 0
    assert statistics[HitResult.PERFECT] == 5


def test_distribution_sums_to_total_units():
    for chart in _all_charts():
        total = compute_total_scorable_units(chart)
        for misses in range(0, total + 1, max(1, total // 4)):
            statistics = generate_distribution(100.0, chart, miss_count=misses)
            assert sum(statistics.values()) == total
            assert statistics[HitResult.OK] == 0


def test_accuracy_target_does_not_change_split():
    chart = build_sample_chart(difficulty="medium")
    assert generate_distribution(50.0, chart, miss_count=3) == generate_distribution(100.0, chart, miss_count=3)


def test_generate_distribution_is_idempotent():
    chart = build_sample_chart(difficulty="hard")
    first = generate_distribution(97.5, chart, miss_count=4, meh_count=2, good_count=1)
    second = generate_distribution(97.5, chart, miss_count=4, meh_count=2, good_count=1)
    assert first == second
    assert first is not second


def test_empty_chart_distribution_is_all_zero():
    statistics = generate_distribution(100.0, CatchChart(), miss_count=0)
    assert all(count == 0 for count in statistics.values())
    assert compute_accuracy(statistics) == 1.0


def test_too_many_misses_surface_negative_perfect():
    statistics = generate_distribution(100.0, build_fruit_chart(fruit_count=2), miss_count=5)
    assert statistics[HitResult.PERFECT] == -3
    assert find_negative_counts(statistics) == [HitResult.PERFECT]


def test_accuracy_decreases_as_misses_grow():
    previous = None
    for misses in range(0, 6):
        statistics = {
            HitResult.PERFECT: 10,
            HitResult.GOOD: 3,
            HitResult.MEH: 2,
            HitResult.OK: 0,
            HitResult.MISS: misses,
        }
        accuracy = compute_accuracy(statistics)
        assert 0.0 <= accuracy <= 1.0
        if previous is not None:
            assert accuracy <= previous
        previous = accuracy


def test_resolve_combo():
    assert resolve_combo(100) == 100
    assert resolve_combo(100, combo=42) == 42
    assert resolve_combo(100, percent_combo=25.0) == 25
    # Half to even.
    assert resolve_combo(5, percent_combo=50.0) == 2
    assert resolve_combo(7, percent_combo=50.0) == 4


def test_report_fields_and_formatting():
    statistics = generate_distribution(100.0, _stream_chart(), miss_count=2)
    report = assemble_report(_stream_chart(), statistics, combo=3)
    assert list(report) == ["ApproachRate", "MaxCombo", "Perfect", "Good", "Meh", "Miss", "Ok"]
    assert report == {
        "ApproachRate": "9",
        "MaxCombo": "3",
        "Perfect": "5",
        "Good": "0",
        "Meh": "0",
        "Miss": "2",
        "Ok": "0",
    }
    assert format_invariant(8.7) == "8.7"
    assert render_text({"Miss": "2"}, padding=6) == "Miss  : 2"


def test_simulate_play_builds_consistent_play():
    chart = build_sample_chart(difficulty="easy")
    request = SimulationRequest(accuracy_percent=98.0, miss_count=2, good_count=1, percent_combo=80.0, mods=("hd", "dt"))
    play = simulate_play(chart, request)
    geometry = analyze_chart(chart)

    assert sum(play.statistics.values()) == geometry.total_scorable_units
    assert play.combo == round(0.8 * geometry.max_combo)
    assert play.accuracy == pytest.approx(compute_accuracy(play.statistics))
    assert play.mods == ("HD", "DT")
    assert play.chart is chart


def test_simulated_play_statistics_are_read_only():
    play = simulate_play(build_fruit_chart(fruit_count=3), SimulationRequest(miss_count=1))
    with pytest.raises(TypeError):
        play.statistics[HitResult.PERFECT] = 99
    assert play.statistics[HitResult.PERFECT] == 2
    assert play.statistics == {
        HitResult.PERFECT: 2,
        HitResult.GOOD: 0,
        HitResult.MEH: 0,
        HitResult.MISS: 1,
        HitResult.OK: 0,
    }


def test_check_distribution_rejects_negative_counts():
    too_many = generate_distribution(100.0, build_fruit_chart(fruit_count=2), miss_count=5)
    with pytest.raises(InvalidDistributionError):
        check_distribution(too_many)
    check_distribution(generate_distribution(100.0, build_fruit_chart(fruit_count=2), miss_count=2))


class _ComboScorer:
    def __init__(self) -> None:
        self.plays = []

    def calculate(self, play):
        self.plays.append(play)
        return play.combo * play.accuracy


def test_simulate_and_score_hands_play_to_scorer():
    scorer = _ComboScorer()
    assert isinstance(scorer, ScoringCollaborator)

    play, performance = simulate_and_score(_stream_chart(), SimulationRequest(miss_count=1), scorer=scorer)
    assert scorer.plays == [play]
    assert performance == pytest.approx(6 * 6 / 7)

    play, performance = simulate_and_score(_stream_chart(), SimulationRequest())
    assert performance is None

    with pytest.raises(TypeError):
        simulate_and_score(_stream_chart(), SimulationRequest(), scorer=object())


def test_cli_reports_scorer_value(capsys):
    exit_code = catchsim.main(["--sample", "easy", "--json"], scorer=_ComboScorer())
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["PerformancePoints"] == payload["MaxCombo"]


@pytest.mark.parametrize(
    "request_kwargs",
    [
        {"accuracy_percent": 101.0},
        {"percent_combo": -1.0},
        {"miss_count": -1},
        {"miss_count": 8},
        {"miss_count": 4, "good_count": 2, "meh_count": 2},
        {"combo": 7},
    ],
)
def test_simulate_play_rejects_out_of_bounds_targets(request_kwargs):
    with pytest.raises(SimulationInputError):
        simulate_play(_stream_chart(), SimulationRequest(**request_kwargs))


def test_chart_store_round_trips_sample(tmp_path):
    chart = build_sample_chart(difficulty="medium")
    chart_path = tmp_path / "charts" / "medium.json"
    chart_store.save_chart(chart_path, chart)
    assert chart_store.load_chart(chart_path) == chart


def test_chart_store_rejects_bad_documents(tmp_path):
    with pytest.raises(chart_store.ChartValidationError):
        chart_store.chart_from_dict({"objects": [{"kind": "juice_stream", "repeat_count": -1}]})
    with pytest.raises(chart_store.ChartValidationError):
        chart_store.chart_from_dict({"approach_rate": 11})
    # Misspelled keys must not load as a shorter chart.
    with pytest.raises(chart_store.ChartValidationError):
        chart_store.chart_from_dict(
            {"objects": [{"kind": "juice_stream", "repeats": 3, "droplet": [{"tiny": False}] * 5}]}
        )
    with pytest.raises(chart_store.ChartValidationError):
        chart_store.chart_from_dict({"objects": [{"kind": "juice_stream", "droplets": [{"tiny": False, "size": 2}]}]})
    with pytest.raises(chart_store.ChartValidationError):
        chart_store.chart_from_dict({"approach_rate": 9, "object": []})

    missing_path = tmp_path / "missing.json"
    with pytest.raises(chart_store.ChartParseError):
        chart_store.load_chart(missing_path)


def test_config_defaults_and_environment_overrides(isolated_config, monkeypatch):
    app_config, resolved_path = config_module.load_config()
    assert resolved_path == isolated_config
    assert app_config.simulation.default_percent_combo == 100.0
    assert app_config.output.format == "text"

    monkeypatch.setenv("CATCHSIM_OUTPUT_FORMAT", "JSON")
    monkeypatch.setenv("CATCHSIM_DEFAULT_PERCENT_COMBO", "75")
    app_config, _ = config_module.load_config()
    assert app_config.output.format == "json"
    assert app_config.simulation.default_percent_combo == 75.0


def test_config_rejects_invalid_values(isolated_config):
    isolated_config.write_text(json.dumps({"output": {"format": "xml"}}), encoding="utf-8")
    with pytest.raises(ValueError):
        config_module.load_config()


def test_cli_prints_text_report(tmp_path, capsys):
    chart_path = tmp_path / "chart.json"
    chart_store.save_chart(chart_path, _stream_chart())

    exit_code = catchsim.main([str(chart_path), "-X", "2", "-c", "3", "-m", "hr"])
    output = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert "Mods           : HR" in output
    assert "MaxCombo       : 3" in output
    assert "Perfect        : 5" in output
    assert "Miss           : 2" in output


def test_cli_prints_json_report(capsys):
    exit_code = catchsim.main(["--sample", "easy", "--json", "-X", "1"])
    payload = json.loads(capsys.readouterr().out)

    chart = build_sample_chart(difficulty="easy")
    assert exit_code == 0
    assert payload["Miss"] == "1"
    assert payload["MaxCombo"] == str(compute_max_combo(chart))
    assert payload["Perfect"] == str(compute_total_scorable_units(chart) - 1)
    assert payload["Mods"] == "None"


def test_cli_reports_invalid_targets(tmp_path, capsys):
    chart_path = tmp_path / "chart.json"
    chart_store.save_chart(chart_path, build_fruit_chart(fruit_count=2))

    exit_code = catchsim.main([str(chart_path), "-X", "3"])
    assert exit_code == 2
    assert "misses" in capsys.readouterr().err


def test_cli_reports_missing_chart(tmp_path, capsys):
    exit_code = catchsim.main([str(tmp_path / "nope.json")])
    assert exit_code == 2
    assert "Failed to read chart file" in capsys.readouterr().err


def test_sample_stream_builder():
    stream = build_stream(repeat_count=1, droplets=2, tiny_droplets=3)
    chart = CatchChart(objects=(stream,))
    assert compute_max_combo(chart) == 5
    assert compute_total_scorable_units(chart) == 8
