"""Configuration management."""

import math

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Library settings pulled from environment variables."""

    # Hull defaults
    default_concavity: float = Field(
        default=20.0, description="Concavity used when the caller passes none"
    )
    max_concave_angle_deg: float = Field(
        default=90.0, description="Widest angle allowed at an edge endpoint"
    )
    max_search_area_fraction: float = Field(
        default=0.6, description="Search box limit as a fraction of the occupied area"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    @property
    def max_concave_angle_cos(self) -> float:
        """Cosine of the maximum concave angle."""
        return math.cos(math.radians(self.max_concave_angle_deg))

    class Config:
        env_prefix = "PY_HULL_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
