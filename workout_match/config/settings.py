from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    score_sensitivity: float = Field(
        default=2.0,
        validation_alias="WORKOUT_MATCH_SCORE_SENSITIVITY",
        description="Points lost per percent of deviation from plan",
        gt=0,
    )
    objective_weight: float = Field(
        default=0.7,
        validation_alias="WORKOUT_MATCH_OBJECTIVE_WEIGHT",
        description="Weight of the objective metric (distance or time) in the overall score",
    )
    fallback_pace_seconds_per_km: float | None = Field(
        default=None,
        validation_alias="WORKOUT_MATCH_FALLBACK_PACE",
        description="Pace used to estimate the missing quantity of steps without a pace target (disabled when unset)",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("objective_weight")
    @classmethod
    def validate_objective_weight(cls, value: float) -> float:
        """Objective weight must favour the objective metric: 0.5 <= weight <= 1."""
        if not 0.5 <= value <= 1.0:
            raise ValueError(f"WORKOUT_MATCH_OBJECTIVE_WEIGHT must be between 0.5 and 1.0, got {value}")
        return value

    @field_validator("fallback_pace_seconds_per_km")
    @classmethod
    def validate_fallback_pace(cls, value: float | None) -> float | None:
        """Non-positive fallback pace disables estimation."""
        if value is not None and value <= 0:
            logger.warning(f"Ignoring non-positive WORKOUT_MATCH_FALLBACK_PACE={value}")
            return None
        return value


settings = Settings()
