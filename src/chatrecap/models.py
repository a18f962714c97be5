"""Data models for extracted chat messages and pipeline configuration."""

from __future__ import annotations

import os
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from . import config

DAY_MS = 24 * 60 * 60 * 1000


class TimeWindow(str, Enum):
    PAST_DAY = "past_day"
    PAST_3_DAYS = "past_3_days"
    PAST_WEEK = "past_week"
    PAST_MONTH = "past_month"

    @property
    def duration_ms(self) -> int:
        return _WINDOW_DAYS[self] * DAY_MS

    @property
    def label(self) -> str:
        return _WINDOW_LABELS[self]


_WINDOW_DAYS = {
    TimeWindow.PAST_DAY: 1,
    TimeWindow.PAST_3_DAYS: 3,
    TimeWindow.PAST_WEEK: 7,
    TimeWindow.PAST_MONTH: 30,
}

_WINDOW_LABELS = {
    TimeWindow.PAST_DAY: "Past 24 hours",
    TimeWindow.PAST_3_DAYS: "Past 3 days",
    TimeWindow.PAST_WEEK: "Past week",
    TimeWindow.PAST_MONTH: "Past month",
}


class RawEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    data: bytes

    @property
    def text(self) -> str:
        """Decode as UTF-8, dropping a BOM and replacing invalid sequences."""
        return self.data.decode("utf-8-sig", errors="replace")


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int  # epoch milliseconds
    sender: str = Field(min_length=1)
    body: str = Field(min_length=1)

    def render(self) -> str:
        return f"{self.sender}: {self.body}"


class ParseConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_archive_bytes: int = Field(default=config.MAX_ARCHIVE_BYTES, gt=0)
    max_entry_bytes: int = Field(default=config.MAX_ENTRY_BYTES, gt=0)
    time_window: TimeWindow = Field(default=config.TIME_WINDOW, validate_default=True)

    @classmethod
    def from_env(cls) -> ParseConfiguration:
        """Build the default configuration, re-reading environment overrides."""
        return cls(
            max_archive_bytes=int(
                os.environ.get("CHATRECAP_MAX_ARCHIVE_BYTES", config.MAX_ARCHIVE_BYTES)
            ),
            max_entry_bytes=int(
                os.environ.get("CHATRECAP_MAX_ENTRY_BYTES", config.MAX_ENTRY_BYTES)
            ),
            time_window=os.environ.get("CHATRECAP_TIME_WINDOW", config.TIME_WINDOW),
        )
