"""Configuration for jsontoken parsers.

Uses Pydantic v2 for validation with sensible defaults. Parser
configuration is frozen: one instance is shared read-only by every
verification call an engine runs.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CLOCK_SKEW_SECONDS = 60


class TelemetryConfig(BaseModel):
    """Logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "jsontoken"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unsupported log level: {v}"
            raise ValueError(msg)
        return level


class ParserConfig(BaseModel):
    """Configuration shared by JsonTokenParser and AsyncJsonTokenParser."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    clock_skew_seconds: Annotated[int, Field(ge=0, le=86400)] = DEFAULT_CLOCK_SKEW_SECONDS
    max_token_length: Annotated[int, Field(gt=0)] = 8192
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @property
    def clock_skew(self) -> timedelta:
        """Skew tolerated on each side of iat/exp comparisons."""
        return timedelta(seconds=self.clock_skew_seconds)

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "JSONTOKEN_") -> Self:
        """Create config from environment variables."""
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        return cls(
            clock_skew_seconds=int(get_env("CLOCK_SKEW_SECONDS", DEFAULT_CLOCK_SKEW_SECONDS)),
            max_token_length=int(get_env("MAX_TOKEN_LENGTH", "8192")),
            telemetry=TelemetryConfig(log_level=get_env("LOG_LEVEL", "INFO")),
        )
