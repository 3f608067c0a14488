"""Shared wiring for the API, CLI, and scripts."""
from __future__ import annotations

import logging
import random
import sys

from signal_advisor.adapters.detection_source import RandomDetectionSource
from signal_advisor.adapters.persistence import JsonHistoryStore
from signal_advisor.app.settings import AppSettings
from signal_advisor.core.lane_scorer import LaneScorer
from signal_advisor.services.analysis_service import AnalysisService


def setup_logging(settings: AppSettings) -> None:
    if settings.log_format == "json":
        formatter = logging.Formatter('{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}')
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logging.basicConfig(level=settings.log_level.upper(), handlers=[handler], force=True)


def build_detection_source(settings: AppSettings) -> RandomDetectionSource:
    return RandomDetectionSource(
        rng=random.Random(settings.random_seed),
        min_lanes=settings.min_lanes,
        max_lanes=settings.max_lanes,
        min_vehicles=settings.min_vehicles,
        max_vehicles=settings.max_vehicles,
        min_confidence=settings.min_confidence,
    )


def build_service(settings: AppSettings, *, persist: bool = True) -> AnalysisService:
    store = JsonHistoryStore(settings.history_path, settings.max_history_entries) if persist else None
    return AnalysisService(
        build_detection_source(settings),
        LaneScorer(),
        store,
        default_frame_size=(settings.default_frame_width, settings.default_frame_height),
    )
