import json

from signal_advisor.scripts.simulate import run_simulation


def test_simulation_summary(tmp_path) -> None:
    output_json = tmp_path / "summary.json"

    summary = run_simulation(50, seed=1, output_json=output_json)

    assert summary["runs"] == 50
    assert sum(summary["recommended_lane_distribution"].values()) == 50
    assert sum(summary["top_congestion_distribution"].values()) == 50
    assert 10 <= summary["average_vehicles"] <= 39
    assert 0.0 <= summary["average_optimization_score"] <= 100.0
    assert json.loads(output_json.read_text()) == summary


def test_simulation_is_reproducible_with_seed() -> None:
    assert run_simulation(20, seed=9, output_json=None) == run_simulation(20, seed=9, output_json=None)
