"""Run the simulated detector through the lane scorer many times and summarise the outcomes."""

from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path
from statistics import mean
from typing import Dict, List, Optional

from signal_advisor.app.bootstrap import build_service
from signal_advisor.app.settings import get_settings
from signal_advisor.core.models import AnalysisResult


def _compute_summary(results: List[AnalysisResult]) -> Dict:
    recommended_lanes = Counter(result.signal_recommendation.lane_number for result in results)
    top_levels = Counter(result.signal_recommendation.congestion_level.value for result in results)
    return {
        "runs": len(results),
        "average_vehicles": mean(result.total_vehicle_count for result in results) if results else 0.0,
        "average_lanes": mean(result.lane_count for result in results) if results else 0.0,
        "average_optimization_score": (
            mean(result.optimization_score for result in results) if results else 0.0
        ),
        "recommended_lane_distribution": {str(lane): count for lane, count in sorted(recommended_lanes.items())},
        "top_congestion_distribution": dict(sorted(top_levels.items())),
    }


def run_simulation(runs: int, seed: Optional[int], output_json: Optional[Path]) -> Dict:
    settings = get_settings(random_seed=seed)
    service = build_service(settings, persist=False)
    frame_size = (settings.default_frame_width, settings.default_frame_height)

    results: List[AnalysisResult] = []
    for _ in range(runs):
        batch = service.detection_source.detect(frame_size)
        results.append(service.score(batch.detections, batch.lane_count))

    summary = _compute_summary(results)
    if output_json is not None:
        output_json.parent.mkdir(parents=True, exist_ok=True)
        output_json.write_text(json.dumps(summary, indent=2))
    return summary


def main() -> None:
    parser = argparse.ArgumentParser(description="Summarise simulated lane recommendations.")
    parser.add_argument("--runs", type=int, default=1000, help="Number of simulated analyses.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs.")
    parser.add_argument("--output-json", type=Path, help="Optional path to write the summary as JSON.")
    args = parser.parse_args()

    summary = run_simulation(max(1, args.runs), args.seed, args.output_json)

    print("Simulation complete. Summary metrics:")
    for key, value in summary.items():
        print(f"- {key}: {value}")


if __name__ == "__main__":
    main()
