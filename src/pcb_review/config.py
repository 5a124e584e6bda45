"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class TransportType(str, Enum):
    STDIO = "stdio"
    SSE = "sse"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class PCBReviewConfig(BaseSettings):
    """Configuration for PCB Review, loaded from environment variables."""

    model_config = {"env_prefix": "PCB_REVIEW_", "env_file": ".env", "extra": "ignore"}

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Optional path to a log file (stderr only when unset)",
    )
    output_dir: Path = Field(
        default=Path("./analysis"),
        description="Directory for the split JSON analysis files",
    )
    include_raw_data: bool = Field(
        default=False,
        description="Include serialized PCB/schematic records in the result",
    )
    thermal_search_radius: float = Field(
        default=5.0,
        description="Radius in mm for thermal via / copper pour search around regulators",
    )
    via_search_radius: float = Field(
        default=3.0,
        description="Default radius in mm for the nearby-via point query",
    )
    transport: TransportType = Field(
        default=TransportType.STDIO,
        description="Tool server transport: stdio or sse",
    )
    sse_host: str = Field(default="127.0.0.1", description="SSE server host")
    sse_port: int = Field(default=8765, description="SSE server port")

    @field_validator("thermal_search_radius", "via_search_radius")
    @classmethod
    def _positive_radius(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"search radius must be positive, got {value}")
        return value
