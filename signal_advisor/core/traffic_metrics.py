from typing import Dict, Sequence

from signal_advisor.core.models import CongestionLevel, LaneSummary, TrafficMetrics


def summarize_lanes(lane_summaries: Sequence[LaneSummary]) -> TrafficMetrics:
    """Dashboard-level rollup of a scored lane list."""

    total_vehicles = sum(lane.vehicle_count for lane in lane_summaries)
    average = round(total_vehicles / len(lane_summaries), 1) if lane_summaries else 0.0
    levels: Dict[str, int] = {
        level.value: sum(1 for lane in lane_summaries if lane.congestion_level == level)
        for level in (CongestionLevel.HIGH, CongestionLevel.MEDIUM, CongestionLevel.LOW)
    }
    return TrafficMetrics(
        total_vehicles=total_vehicles,
        average_vehicles_per_lane=average,
        congestion_levels=levels,
        critical_lanes=[
            lane.lane_number
            for lane in lane_summaries
            if lane.congestion_level == CongestionLevel.HIGH
        ],
    )
