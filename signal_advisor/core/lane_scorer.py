from collections import Counter
from typing import Dict, List, Sequence

from signal_advisor.core.errors import DetectionOutOfRange, InvalidLaneCount
from signal_advisor.core.models import (
    AnalysisResult,
    CongestionLevel,
    Detection,
    LaneSummary,
    SignalRecommendation,
)


MEDIUM_CONGESTION_AT = 5
HIGH_CONGESTION_AT = 10

CONGESTION_WEIGHTS: Dict[CongestionLevel, int] = {
    CongestionLevel.LOW: 1,
    CongestionLevel.MEDIUM: 2,
    CongestionLevel.HIGH: 3,
}


def classify_congestion(vehicle_count: int) -> CongestionLevel:
    if vehicle_count < MEDIUM_CONGESTION_AT:
        return CongestionLevel.LOW
    if vehicle_count < HIGH_CONGESTION_AT:
        return CongestionLevel.MEDIUM
    return CongestionLevel.HIGH


def congestion_weight(level: CongestionLevel) -> int:
    return CONGESTION_WEIGHTS[level]


class LaneScorer:
    """Aggregate lane-assigned detections into ranked lane priorities.

    The scorer is a pure transform: it holds no state between calls and never
    logs, so one instance can be shared by every caller.
    """

    def score(self, detections: Sequence[Detection], lane_count: int) -> AnalysisResult:
        if lane_count < 1:
            raise InvalidLaneCount(lane_count)
        for index, detection in enumerate(detections):
            if not 1 <= detection.lane_number <= lane_count:
                raise DetectionOutOfRange(index, detection.lane_number, lane_count)

        per_lane: Dict[int, Counter] = {lane: Counter() for lane in range(1, lane_count + 1)}
        for detection in detections:
            per_lane[detection.lane_number][detection.vehicle_type] += 1

        summaries: List[LaneSummary] = []
        for lane_number, type_counts in per_lane.items():
            vehicle_count = sum(type_counts.values())
            level = classify_congestion(vehicle_count)
            summaries.append(
                LaneSummary(
                    lane_number=lane_number,
                    vehicle_count=vehicle_count,
                    vehicle_type_counts=dict(type_counts),
                    congestion_level=level,
                    priority_score=vehicle_count * congestion_weight(level),
                )
            )
        summaries.sort(key=lambda item: (-item.priority_score, item.lane_number))

        top = summaries[0]
        total_priority = sum(item.priority_score for item in summaries)
        if total_priority == 0:
            optimization_score = 0.0
        else:
            optimization_score = min(top.priority_score / total_priority * 100.0, 100.0)

        return AnalysisResult(
            total_vehicle_count=sum(item.vehicle_count for item in summaries),
            vehicle_type_counts=dict(Counter(d.vehicle_type for d in detections)),
            lane_count=lane_count,
            lane_summaries=summaries,
            signal_recommendation=SignalRecommendation(
                lane_number=top.lane_number,
                vehicle_count=top.vehicle_count,
                congestion_level=top.congestion_level,
            ),
            optimization_score=optimization_score,
        )
