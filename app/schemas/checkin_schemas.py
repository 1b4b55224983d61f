# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from datetime import date as dt_date, datetime
from typing import Optional, List, Dict

from pydantic import BaseModel, ConfigDict, Field

METRIC_MIN = 1
METRIC_MAX = 10

METRIC_NAMES = ("mood", "stress", "sleep", "energy", "focus", "anxiety")

# Lower is better on these scales
INVERTED_METRICS = frozenset({"stress", "anxiety"})


class CheckinMetrics(BaseModel):
    """One day's six self-reported scales, each an integer in [1, 10]."""

    model_config = ConfigDict(frozen=True)

    mood: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    stress: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    sleep: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    energy: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    focus: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    anxiety: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)

    def value_of(self, metric: str) -> int:
        if metric not in METRIC_NAMES:
            raise ValueError(f"Unknown metric '{metric}'")
        return getattr(self, metric)

    def as_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in METRIC_NAMES}


class CheckinRecord(CheckinMetrics):
    """A stored check-in: the metrics plus who and which calendar day."""

    id: Optional[str] = None
    user_id: str
    date: dt_date
    created_at: Optional[datetime] = None

    @property
    def metrics(self) -> CheckinMetrics:
        return CheckinMetrics(**self.as_dict())


class CheckinCreateRequest(BaseModel):
    mood: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    stress: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    sleep: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    energy: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    focus: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    anxiety: int = Field(..., ge=METRIC_MIN, le=METRIC_MAX)
    date: Optional[dt_date] = None
    journal_text: Optional[str] = Field(None, max_length=5000)
    context_tags: List[str] = Field(default_factory=list)

    def to_metrics(self) -> CheckinMetrics:
        return CheckinMetrics(
            mood=self.mood,
            stress=self.stress,
            sleep=self.sleep,
            energy=self.energy,
            focus=self.focus,
            anxiety=self.anxiety,
        )
