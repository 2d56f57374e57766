"""Pydantic models used across the warpkeys configuration flow."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_SOURCES: tuple[str, ...] = (
    "https://t.me/s/warpplus",
    "https://t.me/s/warppluscn",
    "https://t.me/s/warpPlusHome",
    "https://t.me/s/warp_veyke",
)

PROXY_SCHEMES = ("http", "https", "socks5", "socks5h")
INTERVAL_FIELDS = frozenset(
    {"weeks", "days", "hours", "minutes", "seconds", "start_date", "end_date", "timezone", "jitter"}
)


class ScheduleType(str, Enum):
    """Scheduler modes supported by the `schedule` command."""

    CRON = "cron"
    INTERVAL = "interval"


class ScheduleConfig(BaseModel):
    """Configuration describing how often a harvest should run."""

    type: ScheduleType = Field(default=ScheduleType.INTERVAL)
    value: Any = Field(
        default=None,
        description="Cron expression, or interval seconds / kwargs, depending on type.",
    )

    @model_validator(mode="after")
    def _validate_value(self) -> "ScheduleConfig":
        if self.type is ScheduleType.CRON and not isinstance(self.value, str):
            raise ValueError("Cron schedule requires string expression")
        if self.type is ScheduleType.INTERVAL:
            if isinstance(self.value, bool) or not isinstance(self.value, (int, float, dict)):
                raise ValueError("Interval schedule requires seconds (int/float) or kwargs dict")
            if isinstance(self.value, (int, float)) and self.value <= 0:
                raise ValueError("Interval seconds must be > 0")
            if isinstance(self.value, dict):
                unknown = sorted(str(key) for key in set(self.value) - INTERVAL_FIELDS)
                if unknown:
                    raise ValueError(f"Unknown interval fields: {', '.join(unknown)}")
        return self


class GlobalConfig(BaseModel):
    """Run-wide settings: the static source list, HTTP client and output layout."""

    model_config = ConfigDict(frozen=True)

    sources: tuple[str, ...] = DEFAULT_SOURCES
    proxy: str | None = None
    timeout: float = 10.0
    full_limit: int = 100
    lite_limit: int = 15
    output_dir: Path = Field(default=Path("data"))
    full_filename: str = "full"
    lite_filename: str = "lite"
    schedule: ScheduleConfig | None = None

    @field_validator("sources", mode="before")
    @classmethod
    def _coerce_sources(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("sources expects a list of URLs")
        cleaned = tuple(str(item).strip() for item in value if str(item).strip())
        if not cleaned:
            raise ValueError("sources cannot be empty")
        return cleaned

    @field_validator("proxy", mode="before")
    @classmethod
    def _validate_proxy(cls, value: Any) -> str | None:
        if value in (None, ""):
            return None
        text = str(value).strip()
        try:
            url = httpx.URL(text)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Invalid proxy URL {text!r}: {exc}") from exc
        if url.scheme not in PROXY_SCHEMES:
            raise ValueError(
                f"Unsupported proxy scheme {url.scheme!r}; expected one of {', '.join(PROXY_SCHEMES)}"
            )
        if not url.host:
            raise ValueError(f"Proxy URL is missing a host: {text!r}")
        return text

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be > 0")
        return value

    @field_validator("full_limit", "lite_limit")
    @classmethod
    def _non_negative_limit(cls, value: int) -> int:
        if value < 0:
            raise ValueError("artifact limits must be >= 0")
        return value

    @field_validator("output_dir", mode="before")
    @classmethod
    def _coerce_dir(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("full_filename", "lite_filename")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError("artifact filenames must be plain names")
        return value

    @model_validator(mode="after")
    def _distinct_artifacts(self) -> "GlobalConfig":
        if self.full_filename == self.lite_filename:
            raise ValueError("full_filename and lite_filename must differ")
        return self

    @property
    def full_path(self) -> Path:
        return self.output_dir / self.full_filename

    @property
    def lite_path(self) -> Path:
        return self.output_dir / self.lite_filename


__all__ = [
    "DEFAULT_SOURCES",
    "GlobalConfig",
    "PROXY_SCHEMES",
    "ScheduleConfig",
    "ScheduleType",
]
