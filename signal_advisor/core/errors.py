class LaneScoringError(ValueError):
    """Base class for inputs the lane scorer refuses to score."""


class InvalidLaneCount(LaneScoringError):
    def __init__(self, lane_count: int) -> None:
        super().__init__(f"lane_count must be at least 1, got {lane_count}")
        self.lane_count = lane_count


class DetectionOutOfRange(LaneScoringError):
    """Raised when a detection points at a lane outside ``1..lane_count``."""

    def __init__(self, index: int, lane_number: int, lane_count: int) -> None:
        super().__init__(
            f"Detection {index} has lane_number {lane_number}, expected 1..{lane_count}"
        )
        self.index = index
        self.lane_number = lane_number
        self.lane_count = lane_count
