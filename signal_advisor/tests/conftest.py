import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from signal_advisor.core.lane_scorer import LaneScorer
from signal_advisor.core.models import AnalysisRecord, Detection, InputType
from signal_advisor.core.traffic_metrics import summarize_lanes
from signal_advisor.services.formatting import format_recommendation


def _build_record(offset_seconds: int = 0, input_type: InputType = InputType.IMAGE) -> AnalysisRecord:
    detections = [
        Detection(vehicle_type="car", confidence=0.9, bbox=(1, 2, 50, 40), lane_number=1),
        Detection(vehicle_type="bus", confidence=0.8, bbox=(5, 6, 70, 60), lane_number=2),
    ]
    result = LaneScorer().score(detections, lane_count=2)
    return AnalysisRecord(
        id=str(uuid.uuid4()),
        input_type=input_type,
        created_at=datetime(2025, 11, 4, 12, tzinfo=timezone.utc) + timedelta(seconds=offset_seconds),
        processing_time=0.01,
        signal_recommendation=format_recommendation(result.signal_recommendation),
        result=result,
        metrics=summarize_lanes(result.lane_summaries),
        detections=detections,
    )


@pytest.fixture()
def build_record() -> Callable[..., AnalysisRecord]:
    return _build_record
