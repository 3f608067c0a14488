import random

import pytest

from signal_advisor.adapters.detection_source import RandomDetectionSource
from signal_advisor.core.models import VEHICLE_TYPES


def test_seeded_sources_replay_the_same_batch() -> None:
    first = RandomDetectionSource(rng=random.Random(42)).detect()
    second = RandomDetectionSource(rng=random.Random(42)).detect()

    assert first.model_dump() == second.model_dump()


@pytest.mark.parametrize("seed", range(20))
def test_detections_stay_within_configured_ranges(seed: int) -> None:
    batch = RandomDetectionSource(rng=random.Random(seed)).detect((640, 480))

    assert 2 <= batch.lane_count <= 4
    assert 10 <= len(batch.detections) <= 39
    for detection in batch.detections:
        x, y, width, height = detection.bbox
        assert detection.vehicle_type in VEHICLE_TYPES
        assert 1 <= detection.lane_number <= batch.lane_count
        assert 0.7 <= detection.confidence <= 1.0
        assert 0.0 <= x < 640
        assert 0.0 <= y < 480
        assert 50.0 <= width <= 150.0
        assert 40.0 <= height <= 120.0


def test_fixed_ranges_are_honoured() -> None:
    source = RandomDetectionSource(
        rng=random.Random(1),
        min_lanes=3,
        max_lanes=3,
        min_vehicles=0,
        max_vehicles=0,
    )

    batch = source.detect()

    assert batch.lane_count == 3
    assert batch.detections == []


def test_custom_vehicle_types() -> None:
    source = RandomDetectionSource(rng=random.Random(5), vehicle_types=["tram"])

    batch = source.detect()

    assert {detection.vehicle_type for detection in batch.detections} == {"tram"}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_lanes": 0},
        {"min_lanes": 5, "max_lanes": 4},
        {"min_vehicles": 20, "max_vehicles": 10},
        {"vehicle_types": []},
    ],
)
def test_invalid_ranges_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        RandomDetectionSource(**kwargs)
