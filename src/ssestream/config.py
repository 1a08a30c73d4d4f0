"""Event stream configuration via environment variables (SSESTREAM_ prefix) or defaults."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class StreamConfig(BaseSettings):
    max_queue_size: int = Field(default=64, ge=1)
    read_chunk_size: int | None = 65_536
    default_reconnection_time_ms: int = Field(default=3000, ge=0)
    max_line_bytes: int | None = 1_048_576  # 1 MiB
    request_timeout: float | None = None  # long-lived streams never time out by default
    log_dir: str | None = None
    log_level: str = "INFO"

    model_config = {"env_prefix": "SSESTREAM_"}
