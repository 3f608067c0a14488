from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application configuration sourced from ``TRAFFIC_*`` variables, ``.env``, or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TRAFFIC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    history_path: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parents[1] / "storage" / "analysis_history.json"
    )
    history_limit: int = Field(default=10, ge=1)
    max_history_entries: int = Field(default=500, ge=1)
    min_lanes: int = Field(default=2, ge=1)
    max_lanes: int = 4
    min_vehicles: int = Field(default=10, ge=0)
    max_vehicles: int = 39
    min_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    default_frame_width: int = Field(default=800, ge=1)
    default_frame_height: int = Field(default=600, ge=1)
    random_seed: Optional[int] = None
    remote_endpoint: Optional[str] = None
    remote_timeout_seconds: float = Field(default=10.0, gt=0.0)
    remote_max_retries: int = Field(default=3, ge=0)
    max_score_lanes: int = Field(default=64, ge=1)
    log_format: str = Field(default="text", pattern="^(text|json)$")
    log_level: str = "INFO"

    @field_validator("history_path", mode="before")
    @classmethod
    def _expand_path(cls, value: object) -> Path:
        return Path(str(value)).expanduser()

    @model_validator(mode="after")
    def _check_ranges(self) -> "AppSettings":
        if self.min_lanes > self.max_lanes:
            raise ValueError(f"min_lanes ({self.min_lanes}) exceeds max_lanes ({self.max_lanes})")
        if self.min_vehicles > self.max_vehicles:
            raise ValueError(
                f"min_vehicles ({self.min_vehicles}) exceeds max_vehicles ({self.max_vehicles})"
            )
        return self


def get_settings(**overrides: object) -> AppSettings:
    return AppSettings(**overrides)
