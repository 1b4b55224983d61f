# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import enum
from datetime import date, datetime
from typing import Optional, List, Dict

from pydantic import BaseModel, Field


class MetricTrend(str, enum.Enum):
    improving = "improving"
    declining = "declining"
    stable = "stable"


class MetricSummary(BaseModel):
    average: float
    min: int
    max: int
    trend: MetricTrend = MetricTrend.stable


class TopAction(BaseModel):
    title: str
    category: str
    completed_count: int


class WeeklySummary(BaseModel):
    user_id: str
    week_start: date
    week_end: date
    checkin_count: int
    metrics: Dict[str, MetricSummary] = Field(default_factory=dict)
    completion_rate: int = 0    # percent
    checkin_streak: int = 0
    longest_streak: int = 0
    top_actions: List[TopAction] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
