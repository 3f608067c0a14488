import logging
import time
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from signal_advisor.adapters.detection_source import RandomDetectionSource
from signal_advisor.adapters.frames import frame_size
from signal_advisor.adapters.persistence import JsonHistoryStore
from signal_advisor.core.errors import LaneScoringError
from signal_advisor.core.lane_scorer import LaneScorer
from signal_advisor.core.models import AnalysisRecord, AnalysisResult, Detection, InputType
from signal_advisor.core.traffic_metrics import summarize_lanes
from signal_advisor.services.formatting import format_recommendation


logger = logging.getLogger(__name__)


class AnalysisService:
    """Coordinate frame inspection, detection, lane scoring, and history."""

    def __init__(
        self,
        detection_source: RandomDetectionSource,
        scorer: LaneScorer,
        store: Optional[JsonHistoryStore] = None,
        default_frame_size: Tuple[int, int] = (800, 600),
    ) -> None:
        self.detection_source = detection_source
        self.scorer = scorer
        self.store = store
        self.default_frame_size = default_frame_size

    def analyze(
        self,
        image_data: str,
        input_type: InputType = InputType.IMAGE,
        now: Optional[datetime] = None,
    ) -> AnalysisRecord:
        if not image_data:
            raise ValueError("No image data provided")
        started = time.perf_counter()
        size = frame_size(image_data, self.default_frame_size)
        batch = self.detection_source.detect(size)
        result = self.score(batch.detections, batch.lane_count)
        record = AnalysisRecord(
            id=str(uuid.uuid4()),
            input_type=input_type,
            created_at=now or datetime.now(timezone.utc),
            processing_time=time.perf_counter() - started,
            signal_recommendation=format_recommendation(result.signal_recommendation),
            result=result,
            metrics=summarize_lanes(result.lane_summaries),
            detections=batch.detections,
        )
        if self.store is not None:
            self.store.append(record)
        logger.info(
            "[%s] %s | %d vehicles over %d lanes | score %.1f",
            record.input_type.value,
            record.signal_recommendation,
            result.total_vehicle_count,
            result.lane_count,
            result.optimization_score,
        )
        return record

    def score(self, detections: Sequence[Detection], lane_count: int) -> AnalysisResult:
        try:
            return self.scorer.score(detections, lane_count)
        except LaneScoringError as exc:
            logger.warning("Rejected detections: %s", exc)
            raise

    def history(self, limit: Optional[int] = None) -> List[AnalysisRecord]:
        if self.store is None:
            return []
        return self.store.list(limit)

    def get(self, record_id: str) -> Optional[AnalysisRecord]:
        if self.store is None:
            return None
        return self.store.get(record_id)

    def delete(self, record_id: str) -> bool:
        if self.store is None:
            return False
        deleted = self.store.delete(record_id)
        if deleted:
            logger.info("Deleted analysis %s", record_id)
        return deleted

    def clear(self) -> None:
        if self.store is not None:
            self.store.clear()
