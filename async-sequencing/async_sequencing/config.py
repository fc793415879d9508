"""Settings shared by the code blocks."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SequencingConfig(BaseSettings):
    """Runtime settings, read from ``ASYNC_SEQUENCING_*`` environment variables."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    step_timeout_seconds: float | None = Field(
        default=None,
        gt=0.0,
        description="Give up on a step that has not settled after this many seconds (None = wait forever)",
    )
    network_latency_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Delay of every mocked network call",
    )

    model_config = SettingsConfigDict(
        env_prefix="ASYNC_SEQUENCING_",
        env_file=".env",
        extra="ignore",
    )
