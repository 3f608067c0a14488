from datetime import datetime
from enum import Enum
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field


VEHICLE_TYPES: Tuple[str, ...] = ("car", "truck", "bus", "motorcycle", "bicycle")


class CongestionLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Detection(BaseModel):
    """One detected vehicle, already assigned to a lane by the detection source."""

    model_config = ConfigDict(frozen=True)

    vehicle_type: str
    confidence: float = Field(ge=0.0, le=1.0)
    # x, y, width, height in source-image pixels
    bbox: Tuple[float, float, float, float]
    lane_number: int


class DetectionBatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    lane_count: int
    detections: List[Detection] = Field(default_factory=list)


class LaneSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    lane_number: int
    vehicle_count: int
    vehicle_type_counts: Dict[str, int] = Field(default_factory=dict)
    congestion_level: CongestionLevel
    priority_score: int


class SignalRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    lane_number: int
    vehicle_count: int
    congestion_level: CongestionLevel


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_vehicle_count: int
    vehicle_type_counts: Dict[str, int]
    lane_count: int
    lane_summaries: List[LaneSummary]
    signal_recommendation: SignalRecommendation
    optimization_score: float


class TrafficMetrics(BaseModel):
    total_vehicles: int
    average_vehicles_per_lane: float
    # keyed by CongestionLevel value
    congestion_levels: Dict[str, int]
    critical_lanes: List[int] = Field(default_factory=list)


class InputType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    WEBCAM = "webcam"


class AnalysisRecord(BaseModel):
    id: str
    input_type: InputType
    created_at: datetime
    processing_time: float
    signal_recommendation: str
    result: AnalysisResult
    metrics: TrafficMetrics
    detections: List[Detection] = Field(default_factory=list)
