# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import enum
from datetime import date as dt_date, datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from app.schemas.crisis_schemas import CrisisSeverity


class DayOfWeekPattern(BaseModel):
    day_of_week: int  # Monday = 0 ... Sunday = 6
    day_name: str
    average_mood: float
    average_stress: float
    checkins_count: int
    is_harder: bool


class MoodPrediction(BaseModel):
    predicted_mood: float
    confidence: float = Field(..., ge=0, le=1)
    reasoning: str
    based_on_day_of_week: bool = False
    based_on_recent_trend: bool = False


class TriggerPatternType(str, enum.Enum):
    day_of_week = "day_of_week"
    consecutive_low = "consecutive_low"
    stress_spike = "stress_spike"


class TriggerPattern(BaseModel):
    type: TriggerPatternType
    description: str
    severity: CrisisSeverity
    occurrences: int
    last_occurred: Optional[dt_date] = None
    affected_days: List[int] = Field(default_factory=list)
    max_run: Optional[int] = None


class AlertType(str, enum.Enum):
    trigger_approaching = "trigger_approaching"
    recovery_mode = "recovery_mode"
    tomorrow_hard = "tomorrow_hard"
    pattern_detected = "pattern_detected"


class AlertSeverity(str, enum.Enum):
    info = "info"
    warning = "warning"
    critical = "critical"


class ProactiveAlert(BaseModel):
    type: AlertType
    title: str
    message: str
    severity: AlertSeverity
    actionable: bool
    suggested_action: Optional[str] = None
    trigger_date: Optional[dt_date] = None
    trigger_date_id: Optional[str] = None
    dismissed: bool = False
    generated_at: Optional[datetime] = None


class TriggerDate(BaseModel):
    id: Optional[str] = None
    date: dt_date
    label: str
    repeat_annually: bool = False
    created_at: Optional[datetime] = None


class TriggerDateCreateRequest(BaseModel):
    date: dt_date
    label: str = Field(..., min_length=1, max_length=120)
    repeat_annually: bool = False


class TriggerDateUpdateRequest(BaseModel):
    date: Optional[dt_date] = None
    label: Optional[str] = Field(None, min_length=1, max_length=120)
    repeat_annually: Optional[bool] = None


class PredictionSnapshot(BaseModel):
    day_patterns: List[DayOfWeekPattern] = Field(default_factory=list)
    prediction: Optional[MoodPrediction] = None
    patterns: List[TriggerPattern] = Field(default_factory=list)
    alert: Optional[ProactiveAlert] = None
