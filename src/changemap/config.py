"""changemap configuration — heatmap, batch job, logging and MLflow settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Heatmap: H3 resolution 8 is ~0.74 km² hexagons (neighborhood level)
    heatmap_resolution: int = 8

    @field_validator("heatmap_resolution")
    @classmethod
    def _check_resolution(cls, value: int) -> int:
        if not 0 <= value <= 15:
            raise ValueError(f"heatmap_resolution must be between 0 and 15, got {value}")
        return value

    # Batch compute job
    progress_log_interval: int = 500

    @field_validator("progress_log_interval")
    @classmethod
    def _check_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("progress_log_interval must be positive")
        return value

    # Logging
    log_json: bool = True
    log_level: str = "INFO"

    # MLflow: local SQLite store unless MLFLOW_TRACKING_URI is set
    mlflow_tracking_uri: str = "sqlite:///mlruns/mlflow.db"
    mlflow_experiment_name: str = "changemap-compute"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
