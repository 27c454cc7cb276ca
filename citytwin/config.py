"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


# Health & air snapshot weighting
HEALTH_NOISE_WEIGHT = 0.6
HEALTH_HEAT_WEIGHT = 0.4
DEFAULT_LAYER_AVERAGE = 50.0  # Used when a layer has no usable values

# Property keys probed per feature, first numeric one wins
NOISE_SCORE_KEYS = ("level", "noise", "value")
HEAT_SCORE_KEYS = ("score", "index", "level", "value")

# Persona -> risk weights over city baselines
CITY_RISK_WEIGHTS: dict[str, dict[str, float]] = {
    "citizen": {"heat": 0.5, "noise": 0.5},
    "health": {"heat": 0.6, "noise": 0.4},
    "investor": {"traffic": 0.6, "noise": 0.4},
}

# Citizen override: this city is recommended once it reaches the threshold
FEATURED_CITY = "Essaouira"
FEATURED_CITY_MIN_SCORE = 80

# Grade bands for the health snapshot (lower bound, label)
SCORE_GRADES: list[tuple[int, str]] = [
    (80, "Green (Healthy)"),
    (60, "Yellow (OK)"),
    (40, "Orange (Caution)"),
    (0, "Red (Unhealthy)"),
]

# Simulation tuning
TREE_NOISE_REDUCTION = 0.3
CALM_TRAFFIC_TARGET_KMH = 30.0
CALM_TRAFFIC_FACTOR = 0.2
CALM_TRAFFIC_MIN_KMH = 5.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App Settings
    app_env: str = "development"
    debug: bool = True
    context_summary: str = "Prototype digital twin datasets (synthetic)."

    # Sample layers (defaults to the bundled GeoJSON files)
    sample_data_dir: Optional[str] = None

    # City search
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "citytwin/0.1 (demo)"
    geocode_timeout: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
