"""Simulated vehicle detector feeding the lane scorer."""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

from signal_advisor.core.models import VEHICLE_TYPES, Detection, DetectionBatch

LOGGER = logging.getLogger(__name__)


class RandomDetectionSource:
    """Stand-in for an object detector: synthesizes lane-assigned detections.

    Every random draw goes through the injected ``rng`` so a seeded source
    replays the same batches.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        min_lanes: int = 2,
        max_lanes: int = 4,
        min_vehicles: int = 10,
        max_vehicles: int = 39,
        min_confidence: float = 0.7,
        vehicle_types: Sequence[str] = VEHICLE_TYPES,
    ) -> None:
        if min_lanes < 1 or min_lanes > max_lanes:
            raise ValueError(f"Invalid lane range {min_lanes}..{max_lanes}")
        if min_vehicles < 0 or min_vehicles > max_vehicles:
            raise ValueError(f"Invalid vehicle range {min_vehicles}..{max_vehicles}")
        if not vehicle_types:
            raise ValueError("At least one vehicle type is required")
        self.rng = rng or random.Random()
        self.min_lanes = min_lanes
        self.max_lanes = max_lanes
        self.min_vehicles = min_vehicles
        self.max_vehicles = max_vehicles
        self.min_confidence = min(max(min_confidence, 0.0), 1.0)
        self.vehicle_types = tuple(vehicle_types)

    def detect(self, frame_size: Tuple[int, int] = (800, 600)) -> DetectionBatch:
        """Return a batch of detections spread over a random number of lanes."""

        width, height = frame_size
        lane_count = self.rng.randint(self.min_lanes, self.max_lanes)
        vehicle_count = self.rng.randint(self.min_vehicles, self.max_vehicles)
        detections: List[Detection] = []
        for _ in range(vehicle_count):
            vehicle_type = self.rng.choice(self.vehicle_types)
            confidence = self.min_confidence + self.rng.random() * (1.0 - self.min_confidence)
            bbox = (
                self.rng.random() * width,
                self.rng.random() * height,
                50 + self.rng.random() * 100,
                40 + self.rng.random() * 80,
            )
            detections.append(
                Detection(
                    vehicle_type=vehicle_type,
                    confidence=confidence,
                    bbox=bbox,
                    lane_number=self.rng.randint(1, lane_count),
                )
            )
        LOGGER.debug("Simulated %d detections over %d lanes", len(detections), lane_count)
        return DetectionBatch(lane_count=lane_count, detections=detections)
