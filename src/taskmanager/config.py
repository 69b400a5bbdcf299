from __future__ import annotations

import os
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Settings(BaseModel):
    """Runtime settings, read from the environment once at startup."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "./data/taskmanager.db"
    log_dir: str = "./logs"
    log_level: str = "INFO"
    history_limit: int = Field(default=100, ge=1, le=5000)
    # IANA zone name for history timestamps, e.g. "Europe/Berlin"; unset shows UTC
    display_tz: Optional[str] = None

    @field_validator("display_tz")
    @classmethod
    def _known_zone(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError:
            raise ValueError(f"unknown time zone: {value}") from None
        return value

    def display_zone(self) -> Optional[tzinfo]:
        return ZoneInfo(self.display_tz) if self.display_tz else None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            db_path=os.getenv("DB_PATH", cls.model_fields["db_path"].default),
            log_dir=os.getenv("LOG_DIR", cls.model_fields["log_dir"].default),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            history_limit=int(os.getenv("HISTORY_LIMIT", "100")),
            display_tz=os.getenv("DISPLAY_TZ"),
        )
